# planframe: immutable query builder in front of a multi-threaded columnar engine.

import logging

from . import functions
from .config import SessionConfig
from .core import DataFrame
from .errors import (
    EngineError,
    FormattingError,
    InvalidIndexType,
    PlanframeError,
    UnknownJoinType,
    UnresolvedWindowFunction,
)
from .execution import ExecutionBridge
from .expr import Expr, col, lit
from .functions import alias, order_by, window
from .joins import JoinType, resolve_join_type
from .session import Session

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DataFrame",
    "Session",
    "SessionConfig",
    "ExecutionBridge",
    "Expr",
    "JoinType",
    "resolve_join_type",
    "functions",
    "col",
    "lit",
    "alias",
    "order_by",
    "window",
    "PlanframeError",
    "InvalidIndexType",
    "UnknownJoinType",
    "UnresolvedWindowFunction",
    "EngineError",
    "FormattingError",
]
