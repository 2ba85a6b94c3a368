"""Core planframe DataFrame: the immutable, chainable plan builder."""

import numbers
from typing import Any, Dict, List, Optional, Sequence, Union

import pyarrow as pa

from . import display
from .errors import InvalidIndexType
from .expr import Column, Expr
from .expr.types import SortExpr
from .joins import JoinMixin
from .plan import (
    Aggregate,
    ColumnProjection,
    Distinct,
    Filter,
    Limit,
    LogicalPlan,
    Projection,
    Sort,
    Union as UnionPlan,
    WithColumn,
)


# Row counts travel to the engine as signed 64-bit integers.
_MAX_COUNT = 2**63 - 1


def _as_expr(value: Any, where: str) -> Expr:
    """Accept an expression, or a column name as shorthand for col(name)."""
    if isinstance(value, Expr):
        return value
    if isinstance(value, str):
        return Column(value)
    raise TypeError(
        f"{where}() arguments must be expressions or column names, "
        f"got {type(value).__name__}"
    )


def _as_expr_list(values: Sequence[Any], where: str) -> tuple:
    if isinstance(values, (str, Expr)):
        values = [values]
    return tuple(_as_expr(v, where) for v in values)


def _check_names(names: Sequence[Any], where: str) -> tuple:
    for name in names:
        if not isinstance(name, str):
            raise TypeError(
                f"{where}() column names must be str, got {type(name).__name__}"
            )
    return tuple(names)


def _check_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    if value > _MAX_COUNT:
        raise ValueError(f"{name} must be at most {_MAX_COUNT}, got {value}")
    return int(value)


class DataFrame(JoinMixin):
    """
    Immutable handle on a logical plan.

    Every transformation returns a new DataFrame whose plan shares the
    receiver's plan as a subtree; the receiver is never modified. Nothing is
    validated against the schema until the plan is lowered, so an unknown
    column only fails at ``schema()``, ``collect()`` or ``show()``.

    Execution runs natively on the engine's multi-threaded executor. Unless
    the plan sorts, the order of rows and batches is up to the engine.

    Example:
        >>> r = session.from_pydict({"id": [1, 2, 3], "name": ["a", "b", "c"]})
        >>> r.filter(col("id") > 1).select("name").collect()
    """

    def __init__(self, session: "Session", plan: LogicalPlan):
        self._session = session
        self._plan = plan

    def _derive(self, plan: LogicalPlan) -> "DataFrame":
        return type(self)(self._session, plan)

    @property
    def plan(self) -> LogicalPlan:
        """The logical plan this DataFrame wraps."""
        return self._plan

    @property
    def session(self) -> "Session":
        return self._session

    def __getitem__(self, key: Union[str, Sequence[str]]) -> "DataFrame":
        """
        Column selection by name: ``df["a"]`` or ``df[["a", "b"]]``.

        Equivalent to ``select_columns`` with the same names.

        Raises:
            InvalidIndexType: For any other kind of key
        """
        if isinstance(key, str):
            return self.select_columns(key)
        if isinstance(key, (list, tuple)) and all(isinstance(k, str) for k in key):
            return self.select_columns(*key)
        raise InvalidIndexType(key)

    def __repr__(self) -> str:
        return f"DataFrame()\n{self._plan.display_indent()}"

    # Schema

    def schema(self) -> pa.Schema:
        """
        Output schema derived from the plan by the engine.

        Raises:
            EngineError: If the plan cannot be resolved (e.g. unknown column)
        """
        return self._session.engine.schema(self._plan)

    @property
    def columns(self) -> List[str]:
        """Column names, in order."""
        return list(self.schema().names)

    def logical_plan(self) -> str:
        """Indented text of the plan as built, before the engine sees it."""
        return self._plan.display_indent()

    # Transformations

    def select_columns(self, *names: str) -> "DataFrame":
        """
        Project the named columns, in the given order.

        Example:
            >>> df.select_columns("name", "id")
        """
        names = _check_names(names, "select_columns")
        return self._derive(ColumnProjection(self._plan, names))

    def select(self, *exprs: Union[Expr, str]) -> "DataFrame":
        """
        Project arbitrary expressions. Strings are column references.

        Example:
            >>> df.select(col("id"), (col("price") * 2).alias("double_price"))
        """
        return self._derive(Projection(self._plan, _as_expr_list(exprs, "select")))

    def filter(self, predicate: Expr) -> "DataFrame":
        """
        Keep rows where ``predicate`` is true.

        The engine reports a non-boolean predicate when the plan is lowered.
        """
        if not isinstance(predicate, Expr):
            raise TypeError(
                "filter() predicate must be an expression, "
                f"got {type(predicate).__name__}"
            )
        return self._derive(Filter(self._plan, predicate))

    def with_column(self, name: str, expr: Expr) -> "DataFrame":
        """Add a column computed by ``expr``, replacing any column called ``name``."""
        if not isinstance(name, str):
            raise TypeError(
                f"with_column() name must be str, got {type(name).__name__}"
            )
        return self._derive(WithColumn(self._plan, name, _as_expr(expr, "with_column")))

    def aggregate(
        self, group_by: Sequence[Union[Expr, str]], aggs: Sequence[Expr]
    ) -> "DataFrame":
        """
        Group by ``group_by`` and reduce each group with ``aggs``.

        An empty ``group_by`` aggregates the whole relation into one row.

        Example:
            >>> df.aggregate([col("dept")], [f.avg(col("salary")).alias("avg_salary")])
        """
        return self._derive(
            Aggregate(
                self._plan,
                _as_expr_list(group_by, "aggregate"),
                _as_expr_list(aggs, "aggregate"),
            )
        )

    def sort(self, *exprs: Union[Expr, str]) -> "DataFrame":
        """
        Order rows by the given sort expressions, first one first.

        Expressions that are not sort expressions sort ascending with nulls
        first, as ``order_by`` does by default.

        Example:
            >>> df.sort(order_by(col("age"), asc=False), col("name"))
        """
        sort_exprs = []
        for e in _as_expr_list(exprs, "sort"):
            sort_exprs.append(e if isinstance(e, SortExpr) else SortExpr(e))
        return self._derive(Sort(self._plan, tuple(sort_exprs)))

    def limit(self, count: int) -> "DataFrame":
        """Keep at most the first ``count`` rows."""
        return self._derive(Limit(self._plan, _check_count(count, "count"), 0))

    def distinct(self) -> "DataFrame":
        """Remove duplicate rows."""
        return self._derive(Distinct(self._plan))

    def union(self, other: "DataFrame", distinct: bool = False) -> "DataFrame":
        """
        Rows of this DataFrame followed by those of ``other``.

        Both sides must have matching schemas; the engine checks this.
        """
        if not isinstance(other, type(self)):
            raise TypeError(
                f"union() argument must be DataFrame, got {type(other).__name__}"
            )
        if other._session is not self._session:
            raise ValueError("Cannot union DataFrames from different sessions")
        return self._derive(UnionPlan(self._plan, other._plan, bool(distinct)))

    # Execution

    def collect(self) -> List[pa.RecordBatch]:
        """
        Execute the plan and return its record batches.

        Unless the plan sorts, batch and row order are not guaranteed. On
        failure nothing is returned; the engine's error is raised.
        """
        return self._session.bridge.collect(self._plan)

    def show(self, num: Optional[int] = None) -> None:
        """
        Print the first ``num`` rows as a table (20 by default).

        Example:
            >>> df.show(5)
        """
        if num is None:
            num = self._session.config.show_rows
        limited = self.limit(num)
        batches = limited.collect()
        display.print_batches(batches, None if batches else limited.schema())

    def count(self) -> int:
        """Number of rows the plan produces."""
        return sum(batch.num_rows for batch in self.collect())

    def explain(self, verbose: bool = False, analyze: bool = False) -> None:
        """
        Print the engine's explain output for this plan.

        Args:
            verbose: Include every planning stage
            analyze: Execute the plan and include runtime metrics
        """
        display.print_batches(self._explain_batches(verbose, analyze))

    def explain_string(self, verbose: bool = False, analyze: bool = False) -> str:
        """The same output as ``explain``, returned as a string."""
        return display.pretty_format_batches(self._explain_batches(verbose, analyze))

    def _explain_batches(self, verbose: bool, analyze: bool) -> List[pa.RecordBatch]:
        return self._session.bridge.explain(self._plan, bool(verbose), bool(analyze))

    # Conversions

    def to_arrow_table(self) -> pa.Table:
        """Execute and return the result as one pyarrow.Table."""
        batches = self.collect()
        return display.to_arrow_table(batches, None if batches else self.schema())

    def to_pandas(self):
        """
        Execute and return the result as a pandas DataFrame.

        Requires pandas to be installed.
        """
        batches = self.collect()
        return display.to_pandas(batches, None if batches else self.schema())

    def to_pydict(self) -> Dict[str, List[Any]]:
        """Execute and return ``{column_name: [values...]}``."""
        batches = self.collect()
        return display.to_pydict(batches, None if batches else self.schema())

    def to_pylist(self) -> List[Dict[str, Any]]:
        """Execute and return a list of row dictionaries."""
        batches = self.collect()
        return display.to_pylist(batches, None if batches else self.schema())
