"""
DataFusion engine adapter.

Lowers planframe plans and expressions to DataFusion DataFrames and Exprs.
Lowering happens only when the engine is asked for a schema, a result or an
explain, so building a plan never touches DataFusion. Every DataFusion
failure leaves this module as an EngineError carrying DataFusion's message.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, List

import datafusion
import pyarrow as pa
from datafusion import functions as f
from datafusion.expr import Window, WindowFrame as DataFusionWindowFrame

from ..config import SessionConfig
from ..errors import EngineError, PlanframeError
from ..expr import Expr
from ..expr.types import (
    AggregateFunction,
    Alias,
    BinaryExpr,
    Cast,
    Column,
    InList,
    Literal,
    ScalarFunction,
    SortExpr,
    UnaryExpr,
    WindowFunction,
)
from ..joins import JoinType
from ..plan import (
    Aggregate,
    ColumnProjection,
    Distinct,
    Filter,
    Join,
    Limit,
    LogicalPlan,
    Projection,
    Sort,
    Source,
    Union,
    WithColumn,
)
from ..registry import AGGREGATE_FUNCTIONS, WINDOW_FUNCTIONS, lookup
from .base import Engine

logger = logging.getLogger(__name__)

# DataFusion's join() understands these tokens. RightSemi is run as a
# LeftSemi with the inputs swapped.
_JOIN_TOKENS = {
    JoinType.INNER: "inner",
    JoinType.LEFT: "left",
    JoinType.RIGHT: "right",
    JoinType.FULL: "full",
    JoinType.LEFT_SEMI: "semi",
    JoinType.LEFT_ANTI: "anti",
}

_BINARY_OPS = {
    "Add": lambda l, r: l + r,
    "Sub": lambda l, r: l - r,
    "Mul": lambda l, r: l * r,
    "Div": lambda l, r: l / r,
    "Mod": lambda l, r: l % r,
    "Eq": lambda l, r: l == r,
    "Ne": lambda l, r: l != r,
    "Lt": lambda l, r: l < r,
    "Le": lambda l, r: l <= r,
    "Gt": lambda l, r: l > r,
    "Ge": lambda l, r: l >= r,
    "And": lambda l, r: l & r,
    "Or": lambda l, r: l | r,
}

# Engine functions whose leading arguments are plain Python values.
_VALUE_PREFIX_ARGS = {"concat_ws": 1}

# Window functions whose arguments from this position on are plain Python
# values (bucket count, offset, default, n).
_WINDOW_VALUE_ARGS = {"ntile": 0, "lag": 1, "lead": 1, "nth_value": 1}


@contextmanager
def _engine_errors():
    """Re-raise anything DataFusion throws as EngineError."""
    try:
        yield
    except PlanframeError:
        raise
    except Exception as exc:
        raise EngineError(str(exc)) from exc


def _check_arity(kind: str, spec, count: int) -> None:
    if spec is not None and not spec.accepts(count):
        low, high = spec.arity
        if high is None:
            expected = f"at least {low}"
        elif low == high:
            expected = str(low)
        else:
            expected = f"{low} to {high}"
        raise EngineError(
            f"{kind} function {spec.name} expects {expected} argument(s), got {count}"
        )


def _value_arg(expr, index: int) -> Any:
    arg = expr.args[index]
    if not isinstance(arg, Literal):
        raise EngineError(
            f"Window function {expr.name} argument {index + 1} must be a literal, "
            f"got {arg}"
        )
    return arg.value


def _empty_batch(schema: pa.Schema) -> pa.RecordBatch:
    return pa.RecordBatch.from_pydict(
        {field.name: pa.array([], type=field.type) for field in schema},
        schema=schema,
    )


class DataFusionEngine(Engine):
    """Engine backed by a ``datafusion.SessionContext``."""

    def __init__(self, config: SessionConfig = None):
        self.config = config or SessionConfig()
        df_config = (
            datafusion.SessionConfig()
            .with_target_partitions(self.config.target_partitions)
            .with_batch_size(self.config.batch_size)
        )
        self.ctx = datafusion.SessionContext(df_config)

    # Sources

    def register_table(self, name: str, table: pa.Table) -> None:
        batches = table.to_batches()
        if not batches:
            # The engine takes the schema from the first batch
            batches = [_empty_batch(table.schema)]
        with _engine_errors():
            self.ctx.register_record_batches(name, [batches])
        logger.debug("registered table %s (%d rows)", name, table.num_rows)

    def register_csv(self, name: str, path: str, has_header: bool = True) -> None:
        with _engine_errors():
            self.ctx.register_csv(name, str(path), has_header=has_header)
        logger.debug("registered csv %s from %s", name, path)

    def register_parquet(self, name: str, path: str) -> None:
        with _engine_errors():
            self.ctx.register_parquet(name, str(path))
        logger.debug("registered parquet %s from %s", name, path)

    # Plan operations

    def schema(self, plan: LogicalPlan) -> pa.Schema:
        with _engine_errors():
            return self.lower(plan).schema()

    def execute(self, plan: LogicalPlan) -> List[pa.RecordBatch]:
        tables = sorted({node.name for node in plan.walk() if isinstance(node, Source)})
        logger.debug("executing plan over %s", ", ".join(tables))
        with _engine_errors():
            return self.lower(plan).collect()

    def explain(
        self, plan: LogicalPlan, verbose: bool = False, analyze: bool = False
    ) -> List[pa.RecordBatch]:
        view = f"__planframe_explain_{uuid.uuid4().hex}"
        options = ("ANALYZE " if analyze else "") + ("VERBOSE " if verbose else "")
        with _engine_errors():
            self.ctx.register_view(view, self.lower(plan))
            try:
                return self.ctx.sql(f'EXPLAIN {options}SELECT * FROM "{view}"').collect()
            finally:
                self.ctx.deregister_table(view)

    # Lowering

    def lower(self, plan: LogicalPlan) -> datafusion.DataFrame:
        """Build the DataFusion DataFrame for ``plan``."""
        with _engine_errors():
            return self._lower_plan(plan)

    def _lower_plan(self, plan: LogicalPlan) -> datafusion.DataFrame:
        if isinstance(plan, Source):
            return self.ctx.table(plan.name)

        if isinstance(plan, ColumnProjection):
            return self._lower_plan(plan.input).select(*plan.names)

        if isinstance(plan, Projection):
            exprs = [self.lower_expr(e) for e in plan.exprs]
            return self._lower_plan(plan.input).select(*exprs)

        if isinstance(plan, Filter):
            return self._lower_plan(plan.input).filter(self.lower_expr(plan.predicate))

        if isinstance(plan, WithColumn):
            return self._lower_plan(plan.input).with_column(
                plan.name, self.lower_expr(plan.expr)
            )

        if isinstance(plan, Aggregate):
            group_by = [self.lower_expr(e) for e in plan.group_by]
            aggs = [self.lower_expr(e) for e in plan.aggs]
            return self._lower_plan(plan.input).aggregate(group_by, aggs)

        if isinstance(plan, Sort):
            exprs = [self._lower_sort(e) for e in plan.exprs]
            return self._lower_plan(plan.input).sort(*exprs)

        if isinstance(plan, Limit):
            return self._lower_plan(plan.input).limit(plan.count, plan.offset)

        if isinstance(plan, Join):
            return self._lower_join(plan)

        if isinstance(plan, Distinct):
            return self._lower_plan(plan.input).distinct()

        if isinstance(plan, Union):
            return self._lower_plan(plan.left).union(
                self._lower_plan(plan.right), distinct=plan.distinct
            )

        raise TypeError(f"Unknown plan node: {type(plan).__name__}")

    def _lower_join(self, plan: Join) -> datafusion.DataFrame:
        left = self._lower_plan(plan.left)
        right = self._lower_plan(plan.right)
        if plan.join_type is JoinType.RIGHT_SEMI:
            return right.join(
                left,
                how="semi",
                left_on=list(plan.right_on),
                right_on=list(plan.left_on),
            )
        return left.join(
            right,
            how=_JOIN_TOKENS[plan.join_type],
            left_on=list(plan.left_on),
            right_on=list(plan.right_on),
        )

    def _lower_sort(self, expr: Expr):
        if not isinstance(expr, SortExpr):
            expr = SortExpr(expr)
        return self.lower_expr(expr.expr).sort(
            ascending=expr.ascending, nulls_first=expr.nulls_first
        )

    def lower_expr(self, expr: Expr) -> datafusion.Expr:
        """Build the DataFusion Expr for ``expr``."""
        if isinstance(expr, Column):
            return datafusion.col(expr.name)

        if isinstance(expr, Literal):
            return datafusion.lit(expr.value)

        if isinstance(expr, BinaryExpr):
            return _BINARY_OPS[expr.op](
                self.lower_expr(expr.left), self.lower_expr(expr.right)
            )

        if isinstance(expr, UnaryExpr):
            operand = self.lower_expr(expr.operand)
            if expr.op == "Not":
                return ~operand
            if expr.op == "Neg":
                return datafusion.lit(0) - operand
            if expr.op == "IsNull":
                return operand.is_null()
            return ~operand.is_null()

        if isinstance(expr, Cast):
            return self.lower_expr(expr.expr).cast(expr.to)

        if isinstance(expr, Alias):
            return self.lower_expr(expr.expr).alias(expr.name)

        if isinstance(expr, SortExpr):
            return self._lower_sort(expr)

        if isinstance(expr, InList):
            return f.in_list(
                self.lower_expr(expr.expr),
                [self.lower_expr(v) for v in expr.values],
                expr.negated,
            )

        if isinstance(expr, ScalarFunction):
            return self._lower_scalar(expr)

        if isinstance(expr, AggregateFunction):
            return self._lower_aggregate(expr)

        if isinstance(expr, WindowFunction):
            return self._lower_window(expr)

        raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    def _lower_scalar(self, expr: ScalarFunction) -> datafusion.Expr:
        _check_arity("Scalar", lookup(expr.name), len(expr.args))
        fn = getattr(f, expr.engine_name)
        prefix = _VALUE_PREFIX_ARGS.get(expr.engine_name, 0)
        values = [arg.value for arg in expr.args[:prefix]]
        args = [self.lower_expr(arg) for arg in expr.args[prefix:]]
        return fn(*values, *args)

    def _lower_aggregate(self, expr: AggregateFunction) -> datafusion.Expr:
        _check_arity("Aggregate", lookup(expr.name), len(expr.args))
        args = [self.lower_expr(arg) for arg in expr.args]
        if expr.engine_name == "count":
            # count() counts rows, as count(1)
            return f.count(args or [datafusion.lit(1)], distinct=expr.distinct)
        result = getattr(f, expr.engine_name)(*args)
        if expr.distinct:
            result = result.distinct().build()
        return result

    def _lower_window(self, expr: WindowFunction) -> datafusion.Expr:
        _check_arity("Window", WINDOW_FUNCTIONS.get(expr.name), len(expr.args))
        window = Window(
            partition_by=[self.lower_expr(e) for e in expr.partition_by],
            window_frame=DataFusionWindowFrame(
                expr.frame.units, expr.frame.start, expr.frame.end
            ),
            order_by=[self._lower_sort(e) for e in expr.order_by],
        )
        return self._window_call(expr).over(window)

    def _window_call(self, expr: WindowFunction) -> datafusion.Expr:
        """The function call a window is applied to, before OVER (...)."""
        if expr.name in AGGREGATE_FUNCTIONS:
            return self._lower_aggregate(
                AggregateFunction(expr.name, expr.engine_name, expr.args)
            )
        split = _WINDOW_VALUE_ARGS.get(expr.engine_name, len(expr.args))
        args = [self.lower_expr(arg) for arg in expr.args[:split]]
        values = [_value_arg(expr, i) for i in range(split, len(expr.args))]
        return getattr(f, expr.engine_name)(*args, *values)
