"""Query engines planframe can drive."""

from .base import Engine
from .datafusion_engine import DataFusionEngine

__all__ = ["Engine", "DataFusionEngine"]
