"""Tests for building plans with DataFrame transformations."""

import dataclasses

import pytest

import planframe.functions as f
from planframe import DataFrame, EngineError, InvalidIndexType, col, order_by
from planframe.expr.types import SortExpr
from planframe.plan import (
    Aggregate,
    ColumnProjection,
    Distinct,
    Filter,
    Limit,
    Projection,
    Sort,
    Source,
    Union,
    WithColumn,
)


class TestImmutability:
    """Transformations never modify the receiver."""

    def test_filter_returns_new_frame(self, r):
        """filter() shares the receiver's plan as its input."""
        original = r.plan
        filtered = r.filter(col("id") > 1)

        assert filtered is not r
        assert r.plan is original
        assert isinstance(filtered.plan, Filter)
        assert filtered.plan.input is original

    def test_every_transformation_shares_its_input(self, r):
        derived = [
            r.select_columns("id"),
            r.select(col("id")),
            r.filter(col("id") > 1),
            r.with_column("double_id", col("id") * 2),
            r.aggregate([], [f.count()]),
            r.sort(col("id")),
            r.limit(1),
            r.distinct(),
        ]
        for df in derived:
            assert df.plan.inputs()[0] is r.plan
        assert r.plan == Source("r")

    def test_plan_nodes_are_frozen(self, r):
        plan = r.limit(2).plan
        with pytest.raises(dataclasses.FrozenInstanceError):
            plan.count = 5

    def test_branching_from_one_frame(self, r):
        """Two derivations of one frame are independent."""
        a = r.filter(col("id") > 1)
        b = r.filter(col("id") < 3)
        assert a.plan is not b.plan
        assert a.plan.input is b.plan.input

    def test_session_is_shared(self, r, session):
        assert r.limit(1).session is session


class TestIndexing:
    """df["a"] and df[["a", "b"]]."""

    def test_single_name(self, r):
        plan = r["name"].plan
        assert isinstance(plan, ColumnProjection)
        assert plan.names == ("name",)

    def test_list_of_names(self, r):
        plan = r[["name", "id"]].plan
        assert plan.names == ("name", "id")

    def test_tuple_of_names(self, r):
        assert r[("id",)].plan.names == ("id",)

    def test_matches_select_columns(self, r):
        assert r[["id", "name"]].to_pydict() == r.select_columns("id", "name").to_pydict()

    @pytest.mark.parametrize("key", [0, 1.5, None, [1, 2], ["id", 3], {"id": 1}])
    def test_invalid_key_type(self, r, key):
        with pytest.raises(InvalidIndexType) as excinfo:
            r[key]
        assert excinfo.value.key is key
        assert isinstance(excinfo.value, TypeError)


class TestTransformations:
    """Plan shapes produced by each transformation."""

    def test_select_columns_rejects_non_strings(self, r):
        with pytest.raises(TypeError, match="column names must be str"):
            r.select_columns("id", 1)

    def test_select_accepts_names_and_expressions(self, r):
        plan = r.select("id", (col("id") * 2).alias("double_id")).plan
        assert isinstance(plan, Projection)
        assert len(plan.exprs) == 2
        assert plan.exprs[0].name == "id"

    def test_filter_requires_expression(self, r):
        with pytest.raises(TypeError, match="predicate must be an expression"):
            r.filter("id > 1")

    def test_with_column(self, r):
        plan = r.with_column("name_upper", f.upper(col("name"))).plan
        assert isinstance(plan, WithColumn)
        assert plan.name == "name_upper"

    def test_aggregate_groups(self, employees):
        plan = employees.aggregate(
            [col("dept")], [f.avg(col("salary")).alias("avg_salary")]
        ).plan
        assert isinstance(plan, Aggregate)
        assert len(plan.group_by) == 1
        assert len(plan.aggs) == 1

    def test_sort_wraps_plain_expressions(self, r):
        plan = r.sort(col("id"), order_by(col("name"), asc=False)).plan
        assert isinstance(plan, Sort)
        assert all(isinstance(e, SortExpr) for e in plan.exprs)
        assert plan.exprs[0].ascending is True
        assert plan.exprs[1].ascending is False

    def test_limit(self, r):
        plan = r.limit(2).plan
        assert isinstance(plan, Limit)
        assert plan.count == 2
        assert plan.offset == 0

    @pytest.mark.parametrize("bad", [-1, -100])
    def test_limit_rejects_negative(self, r, bad):
        with pytest.raises(ValueError, match="non-negative"):
            r.limit(bad)

    def test_limit_rejects_counts_beyond_int64(self, r):
        """Counts must fit the engine's signed 64-bit limit."""
        with pytest.raises(ValueError, match="at most"):
            r.limit(2**63)
        assert r.limit(2**63 - 1).plan.count == 2**63 - 1

    def test_largest_limit_runs(self, r):
        assert r.limit(2**63 - 1).count() == 3

    @pytest.mark.parametrize("bad", [1.5, "2", True, None])
    def test_limit_rejects_non_integers(self, r, bad):
        with pytest.raises(TypeError, match="must be an integer"):
            r.limit(bad)

    def test_distinct_and_union(self, r):
        assert isinstance(r.distinct().plan, Distinct)
        plan = r.union(r, distinct=True).plan
        assert isinstance(plan, Union)
        assert plan.distinct is True

    def test_union_across_sessions_rejected(self, r):
        from planframe import Session, SessionConfig

        with Session(SessionConfig(target_partitions=1)) as other:
            foreign = other.from_pydict({"id": [1], "name": ["x"]})
            with pytest.raises(ValueError, match="different sessions"):
                r.union(foreign)


class TestLazyValidation:
    """Nothing is checked against the schema until the plan is lowered."""

    def test_unknown_column_builds(self, r):
        df = r.select_columns("missing")
        assert isinstance(df, DataFrame)

    def test_unknown_column_fails_on_schema(self, r):
        df = r.filter(col("missing") > 1)
        with pytest.raises(EngineError):
            df.schema()

    def test_unknown_column_fails_on_collect(self, r):
        with pytest.raises(EngineError) as excinfo:
            r.select_columns("missing").collect()
        assert excinfo.value.__cause__ is not None

    def test_wrong_arity_reported_at_lowering(self, r):
        """Argument counts are checked by planframe itself, so nothing is chained."""
        df = r.select(f.abs())
        with pytest.raises(EngineError, match="abs expects 1 argument") as excinfo:
            df.collect()
        assert excinfo.value.__cause__ is None

    def test_engine_message_is_kept(self, r):
        with pytest.raises(EngineError) as excinfo:
            r.select_columns("missing").collect()
        assert str(excinfo.value) == str(excinfo.value.__cause__)


class TestPlanDisplay:
    """Text rendering of the plan as built."""

    def test_logical_plan_indentation(self, r):
        text = r.filter(col("id") > 1).limit(2).logical_plan()
        assert text == "Limit: skip=0, fetch=2\n  Filter: id > 1\n    TableScan: r"

    def test_repr_includes_plan(self, r):
        assert "TableScan: r" in repr(r.select_columns("id"))

    def test_walk_visits_every_node(self, r, r2):
        joined = r.join(r2, (["id"], ["id"]))
        labels = [node.label() for node in joined.plan.walk()]
        assert labels == ["Inner Join: (id, id)", "TableScan: r", "TableScan: r2"]
