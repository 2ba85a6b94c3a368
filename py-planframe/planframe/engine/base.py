"""
Engine contract.

Everything planframe asks of a query engine goes through this interface:
register sources, derive a plan's schema, execute a plan, explain a plan.
Builder code only ever sees these operations, never the engine's own types.
"""

from abc import ABC, abstractmethod
from typing import List

import pyarrow as pa

from ..plan import LogicalPlan


class Engine(ABC):
    """
    Abstract query engine.

    Implementations must be safe to call from several threads at once;
    ``execute`` and ``explain`` run on the execution bridge's workers.
    """

    @abstractmethod
    def register_table(self, name: str, table: pa.Table) -> None:
        """Make an in-memory Arrow table scannable as ``name``."""

    @abstractmethod
    def register_csv(self, name: str, path: str, has_header: bool = True) -> None:
        """Make a CSV file scannable as ``name``."""

    @abstractmethod
    def register_parquet(self, name: str, path: str) -> None:
        """Make a Parquet file or directory scannable as ``name``."""

    @abstractmethod
    def schema(self, plan: LogicalPlan) -> pa.Schema:
        """Derive the output schema of ``plan``."""

    @abstractmethod
    def execute(self, plan: LogicalPlan) -> List[pa.RecordBatch]:
        """Run ``plan`` to completion and return every batch."""

    @abstractmethod
    def explain(
        self, plan: LogicalPlan, verbose: bool = False, analyze: bool = False
    ) -> List[pa.RecordBatch]:
        """Return the engine's explain output for ``plan`` as batches."""
