"""Session: entry point that registers data and hands out DataFrames."""

import itertools
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pyarrow as pa

from .config import SessionConfig
from .engine.base import Engine
from .execution import ExecutionBridge
from .plan import Source

logger = logging.getLogger(__name__)

_table_ids = itertools.count()


def _anonymous_name() -> str:
    return f"t{next(_table_ids)}"


class Session:
    """
    Owns one engine, one execution bridge and their configuration.

    Every DataFrame keeps a reference to the Session that created it; DataFrames
    from different sessions cannot be joined or unioned.

    Example:
        >>> session = Session()
        >>> r = session.from_pydict({"id": [1, 2, 3], "name": ["a", "b", "c"]}, name="r")
        >>> r.filter(col("id") > 1).show()
    """

    def __init__(
        self, config: Optional[SessionConfig] = None, engine: Optional[Engine] = None
    ):
        self.config = config or SessionConfig.from_env()
        self.config.apply_logging()
        if engine is None:
            from .engine.datafusion_engine import DataFusionEngine

            engine = DataFusionEngine(self.config)
        self.engine = engine
        self.bridge = ExecutionBridge(engine, max_workers=self.config.max_workers)
        self._names: set = set()
        self._lock = threading.Lock()

    def _claim(self, name: Optional[str]) -> str:
        with self._lock:
            if name is None:
                name = _anonymous_name()
                while name in self._names:
                    name = _anonymous_name()
            elif not isinstance(name, str) or not name:
                raise ValueError(f"Table name must be a non-empty str, got {name!r}")
            elif name in self._names:
                raise ValueError(f"Table '{name}' is already registered")
            self._names.add(name)
        return name

    def _register(
        self, name: Optional[str], register, *args, **kwargs
    ) -> "DataFrame":
        name = self._claim(name)
        try:
            register(name, *args, **kwargs)
        except Exception:
            with self._lock:
                self._names.discard(name)
            raise
        logger.debug("Registered table '%s'", name)
        return self._frame(name)

    def _frame(self, name: str) -> "DataFrame":
        from .core import DataFrame

        return DataFrame(self, Source(name))

    # Sources

    def from_arrow(
        self, table: Union[pa.Table, pa.RecordBatch], name: Optional[str] = None
    ) -> "DataFrame":
        """
        Create a DataFrame over an in-memory Arrow table.

        Args:
            table: A pyarrow.Table or pyarrow.RecordBatch
            name: Name to register the table under (generated when omitted)
        """
        if isinstance(table, pa.RecordBatch):
            table = pa.Table.from_batches([table])
        if not isinstance(table, pa.Table):
            raise TypeError(f"Expected pyarrow.Table, got {type(table).__name__}")
        return self._register(name, self.engine.register_table, table)

    def from_pydict(
        self, data: Dict[str, List[Any]], name: Optional[str] = None
    ) -> "DataFrame":
        """Create a DataFrame from ``{column_name: [values...]}``."""
        return self.from_arrow(pa.Table.from_pydict(data), name)

    def from_pylist(
        self, rows: List[Dict[str, Any]], name: Optional[str] = None
    ) -> "DataFrame":
        """Create a DataFrame from a list of row dictionaries."""
        return self.from_arrow(pa.Table.from_pylist(rows), name)

    def from_pandas(self, df, name: Optional[str] = None) -> "DataFrame":
        """
        Create a DataFrame from a pandas DataFrame.

        Requires pandas to be installed.
        """
        try:
            import pandas as pd
        except ImportError:
            raise RuntimeError(
                "from_pandas() requires pandas. Install it with: pip install pandas"
            )

        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"Expected pandas.DataFrame, got {type(df).__name__}")
        return self.from_arrow(pa.Table.from_pandas(df, preserve_index=False), name)

    def read_csv(
        self,
        path: Union[str, Path],
        name: Optional[str] = None,
        has_header: bool = True,
    ) -> "DataFrame":
        """Create a DataFrame scanning a CSV file. The engine infers the schema."""
        return self._register(
            name, self.engine.register_csv, str(path), has_header=has_header
        )

    def read_parquet(
        self, path: Union[str, Path], name: Optional[str] = None
    ) -> "DataFrame":
        """Create a DataFrame scanning a Parquet file or directory."""
        return self._register(name, self.engine.register_parquet, str(path))

    def table(self, name: str) -> "DataFrame":
        """DataFrame over a table registered earlier in this session."""
        if name not in self._names:
            raise KeyError(f"No table named '{name}' in this session")
        return self._frame(name)

    def close(self) -> None:
        """Shut down the execution bridge."""
        self.bridge.shutdown()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
