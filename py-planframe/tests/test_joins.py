"""Tests for join-type resolution and join execution."""

import pytest

from planframe import JoinType, UnknownJoinType, resolve_join_type
from planframe.plan import Join


class TestResolveJoinType:
    """The ``how`` vocabulary."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("inner", JoinType.INNER),
            ("left", JoinType.LEFT),
            ("right", JoinType.RIGHT),
            ("full", JoinType.FULL),
            ("semi", JoinType.LEFT_SEMI),
            ("anti", JoinType.LEFT_ANTI),
            ("right_semi", JoinType.RIGHT_SEMI),
        ],
    )
    def test_known_tokens(self, token, expected):
        assert resolve_join_type(token) is expected

    @pytest.mark.parametrize("token", ["bogus", "INNER", "outer", "cross", ""])
    def test_unknown_tokens(self, token):
        with pytest.raises(UnknownJoinType) as excinfo:
            resolve_join_type(token)
        assert excinfo.value.token == token

    def test_message_names_the_token(self):
        with pytest.raises(
            UnknownJoinType,
            match="The join type bogus does not exist or is not implemented",
        ):
            resolve_join_type("bogus")

    def test_unhashable_token(self):
        with pytest.raises(UnknownJoinType):
            resolve_join_type(["inner"])

    def test_labels(self):
        assert JoinType.LEFT_SEMI.label == "LeftSemi"
        assert JoinType.RIGHT_SEMI.label == "RightSemi"


class TestJoinBuilder:
    """DataFrame.join argument handling."""

    def test_builds_join_node(self, r, r2):
        joined = r.join(r2, (["id"], ["id"]), how="left")
        assert isinstance(joined.plan, Join)
        assert joined.plan.join_type is JoinType.LEFT
        assert joined.plan.left is r.plan
        assert joined.plan.right is r2.plan
        assert joined.plan.left_on == ("id",)
        assert joined.plan.right_on == ("id",)

    def test_default_is_inner(self, r, r2):
        assert r.join(r2, (["id"], ["id"])).plan.join_type is JoinType.INNER

    def test_unknown_how_fails_first(self, r):
        """The join type is checked before the other arguments."""
        with pytest.raises(UnknownJoinType, match="bogus"):
            r.join("not a frame", None, how="bogus")

    def test_single_key_names_as_strings(self, r, r2):
        joined = r.join(r2, ("id", "id"))
        assert joined.plan.left_on == ("id",)

    def test_rejects_non_frame(self, r):
        with pytest.raises(TypeError, match="must be DataFrame"):
            r.join({"id": [1]}, (["id"], ["id"]))

    def test_rejects_malformed_keys(self, r, r2):
        with pytest.raises(TypeError, match="join_keys must be a pair"):
            r.join(r2, ["id"])
        with pytest.raises(TypeError, match="Join key names must be str"):
            r.join(r2, ([1], ["id"]))

    def test_join_does_not_modify_inputs(self, r, r2):
        left_plan, right_plan = r.plan, r2.plan
        r.join(r2, (["id"], ["id"]))
        assert r.plan is left_plan
        assert r2.plan is right_plan


class TestJoinExecution:
    """Join results from the engine."""

    def test_inner_join(self, r, r2):
        """R(1,2,3) inner R2(2,3,4) on id keeps ids 2 and 3."""
        joined = r.join(r2, (["id"], ["id"]), how="inner")
        assert joined.count() == 2
        names = sorted(row["name"] for row in joined.to_pylist())
        assert names == ["b", "c"]

    def test_left_join_keeps_unmatched_left_rows(self, r, r2):
        joined = r.join(r2, (["id"], ["id"]), how="left")
        rows = joined.to_pylist()
        assert len(rows) == 3
        scores = {row["name"]: row["score"] for row in rows}
        assert scores == {"a": None, "b": 20.0, "c": 30.0}

    def test_full_join(self, r, r2):
        assert r.join(r2, (["id"], ["id"]), how="full").count() == 4

    def test_semi_join_keeps_left_columns_only(self, r, r2):
        joined = r.join(r2, (["id"], ["id"]), how="semi")
        assert joined.columns == ["id", "name"]
        assert sorted(joined.to_pydict()["id"]) == [2, 3]

    def test_anti_join(self, r, r2):
        joined = r.join(r2, (["id"], ["id"]), how="anti")
        assert joined.to_pydict() == {"id": [1], "name": ["a"]}

    def test_right_semi_join_keeps_right_columns_only(self, r, r2):
        joined = r.join(r2, (["id"], ["id"]), how="right_semi")
        assert joined.columns == ["id", "score"]
        assert sorted(joined.to_pydict()["score"]) == [20.0, 30.0]

    def test_unknown_key_column(self, r, r2):
        from planframe import EngineError

        with pytest.raises(EngineError):
            r.join(r2, (["missing"], ["id"])).collect()
