"""
Result presentation: text tables and host-native conversions of batches.

Rendering problems surface as FormattingError so callers can tell them apart
from EngineError raised while executing.
"""

import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

import pyarrow as pa
from tabulate import tabulate

from .errors import FormattingError


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, float):
        return repr(value)
    return str(value)


def to_arrow_table(
    batches: Sequence[pa.RecordBatch], schema: Optional[pa.Schema] = None
) -> pa.Table:
    """
    Concatenate batches into one table.

    ``schema`` is required when ``batches`` is empty.
    """
    if not batches:
        if schema is None:
            raise ValueError("Cannot build a table from no batches without a schema")
        return schema.empty_table()
    return pa.Table.from_batches(list(batches))


def pretty_format_batches(
    batches: Sequence[pa.RecordBatch], schema: Optional[pa.Schema] = None
) -> str:
    """
    Render batches as a bordered text table.

    Example:
        +------+--------+
        | id   | name   |
        |------+--------|
        | 1    | a      |
        | 2    | b      |
        +------+--------+

    Raises:
        FormattingError: If a batch cannot be rendered
    """
    try:
        if schema is None and batches:
            schema = batches[0].schema
        headers = list(schema.names) if schema is not None else []
        rows: List[List[str]] = []
        for batch in batches:
            columns = [column.to_pylist() for column in batch.columns]
            for row in zip(*columns):
                rows.append([_format_value(v) for v in row])
        return tabulate(
            rows,
            headers=headers,
            tablefmt="psql",
            disable_numparse=True,
            stralign="left",
        )
    except Exception as exc:
        raise FormattingError(f"Failed to format record batches: {exc}") from exc


def print_batches(
    batches: Sequence[pa.RecordBatch],
    schema: Optional[pa.Schema] = None,
    file: Optional[TextIO] = None,
) -> None:
    """Print ``pretty_format_batches(batches)`` to ``file`` (stdout by default)."""
    text = pretty_format_batches(batches, schema)
    print(text, file=file if file is not None else sys.stdout)


def to_pandas(batches: Sequence[pa.RecordBatch], schema: Optional[pa.Schema] = None):
    """
    Convert batches to a pandas DataFrame.

    Requires pandas to be installed.
    """
    try:
        import pandas  # noqa: F401
    except ImportError:
        raise RuntimeError(
            "to_pandas() requires pandas. Install it with: pip install pandas"
        )
    return to_arrow_table(batches, schema).to_pandas()


def to_pydict(
    batches: Sequence[pa.RecordBatch], schema: Optional[pa.Schema] = None
) -> Dict[str, List[Any]]:
    """Convert batches to ``{column_name: [values...]}``."""
    return to_arrow_table(batches, schema).to_pydict()


def to_pylist(
    batches: Sequence[pa.RecordBatch], schema: Optional[pa.Schema] = None
) -> List[Dict[str, Any]]:
    """Convert batches to a list of row dictionaries."""
    return to_arrow_table(batches, schema).to_pylist()
