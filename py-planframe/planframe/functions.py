"""
Expression constructors.

Scalar and aggregate constructors are generated from the tables in
``planframe.registry``: every row becomes a module-level function taking
``*args`` (plus ``distinct`` for aggregates) that wraps its arguments in a
function-call node tagged with the row's engine name. Constructors whose
arguments need shaping (``concat_ws``, ``digest``, ``window`` ...) are
written out below and replace the generated ones.

Example:
    >>> import planframe.functions as f
    >>> from planframe import col
    >>> df.aggregate([col("dept")], [f.sum(col("salary")).alias("total")])
    >>> df.select(f.upper(col("name")), f.round(col("score"), 1))
"""

import warnings
from typing import Any, Callable, Iterable, List, Optional, Sequence

from .errors import UnresolvedWindowFunction
from .expr import Expr, col, lit
from .expr.types import (
    AggregateFunction,
    Alias,
    InList,
    Literal,
    ScalarFunction,
    SortExpr,
    WindowFrame,
    WindowFunction,
)
from .registry import (
    AGGREGATE_FUNCTIONS,
    DIGEST_ALGORITHMS,
    SCALAR_FUNCTIONS,
    FunctionSpec,
    find_window_function,
)


def _coerce_all(args: Iterable[Any]) -> tuple:
    return tuple(Expr._coerce(a) for a in args)


def _scalar_constructor(spec: FunctionSpec) -> Callable[..., ScalarFunction]:
    def constructor(*args: Any) -> ScalarFunction:
        return ScalarFunction(spec.name, spec.engine_name, _coerce_all(args))

    constructor.__name__ = constructor.__qualname__ = spec.name
    constructor.__doc__ = spec.doc
    return constructor


def _aggregate_constructor(spec: FunctionSpec) -> Callable[..., AggregateFunction]:
    def constructor(*args: Any, distinct: bool = False) -> AggregateFunction:
        return AggregateFunction(
            spec.name, spec.engine_name, _coerce_all(args), bool(distinct)
        )

    constructor.__name__ = constructor.__qualname__ = spec.name
    constructor.__doc__ = spec.doc
    return constructor


__all__ = ["col", "lit"]

for _spec in SCALAR_FUNCTIONS.values():
    globals()[_spec.name] = _scalar_constructor(_spec)
    __all__.append(_spec.name)

for _spec in AGGREGATE_FUNCTIONS.values():
    globals()[_spec.name] = _aggregate_constructor(_spec)
    __all__.append(_spec.name)

del _spec


def concat(*args: Any) -> ScalarFunction:
    """
    Concatenate the text representations of all the arguments.

    NULL arguments are ignored.
    """
    return ScalarFunction("concat", "concat", _coerce_all(args))


def concat_ws(sep: str, *args: Any) -> ScalarFunction:
    """
    Concatenate all but the first argument, with separators.

    ``sep`` is used as the separator string and must not be NULL. Other NULL
    arguments are ignored.

    Example:
        >>> concat_ws("-", col("year"), col("month"))
    """
    if not isinstance(sep, str):
        raise TypeError(f"concat_ws() separator must be str, got {type(sep).__name__}")
    return ScalarFunction("concat_ws", "concat_ws", (Literal(sep),) + _coerce_all(args))


def digest(value: Any, method: Any) -> ScalarFunction:
    """
    Compute a binary hash of ``value``.

    ``method`` names the algorithm: md5, sha224, sha256, sha384, sha512,
    blake2s, blake2b or blake3. It may also be an expression evaluated per row.
    """
    method = Expr._coerce(method)
    if isinstance(method, Literal) and isinstance(method.value, str):
        if method.value not in DIGEST_ALGORITHMS:
            warnings.warn(
                f"Unknown digest algorithm '{method.value}'. "
                f"Supported: {', '.join(DIGEST_ALGORITHMS)}",
                UserWarning,
                stacklevel=2,
            )
    return ScalarFunction("digest", "digest", (Expr._coerce(value), method))


def in_list(expr: Any, values: Sequence[Any], negated: bool = False) -> InList:
    """
    Membership test: ``expr IN (values...)``, or NOT IN when ``negated``.
    """
    return InList(Expr._coerce(expr), _coerce_all(values), bool(negated))


def order_by(
    expr: Any, asc: Optional[bool] = None, nulls_first: Optional[bool] = None
) -> SortExpr:
    """
    Create a sort expression.

    Unset options default to ascending order with nulls first.
    """
    return SortExpr(
        Expr._coerce(expr),
        True if asc is None else bool(asc),
        True if nulls_first is None else bool(nulls_first),
    )


def alias(expr: Any, name: str) -> Alias:
    """Rename the output of ``expr``."""
    if not isinstance(name, str):
        raise TypeError(f"alias() name must be str, got {type(name).__name__}")
    return Alias(Expr._coerce(expr), name)


def _as_sort(expr: Any) -> SortExpr:
    if isinstance(expr, SortExpr):
        return expr
    return order_by(expr)


def window(
    name: str,
    args: Sequence[Any],
    partition_by: Optional[Sequence[Any]] = None,
    order_by: Optional[Sequence[Any]] = None,
) -> WindowFunction:
    """
    Create a window function expression.

    ``name`` is a ranking or offset function (row_number, rank, lag, ...) or
    any aggregate. Plain expressions in ``order_by`` are sorted ascending with
    nulls first. When ``order_by`` is non-empty the frame runs from the start of
    the partition to the current row; otherwise it covers the whole partition.

    Raises:
        UnresolvedWindowFunction: If ``name`` is not a known window function

    Example:
        >>> window("rank", [], partition_by=[col("dept")], order_by=[col("salary")])
    """
    spec = find_window_function(name)
    if spec is None:
        raise UnresolvedWindowFunction(name)

    sort_exprs: List[SortExpr] = [_as_sort(e) for e in (order_by or ())]
    return WindowFunction(
        spec.name,
        spec.engine_name,
        _coerce_all(args),
        _coerce_all(partition_by or ()),
        tuple(sort_exprs),
        WindowFrame.default(bool(sort_exprs)),
    )


__all__ += ["in_list", "order_by", "alias", "window"]
