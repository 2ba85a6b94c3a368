"""Tests for printing and converting results."""

import pyarrow as pa
import pytest

from planframe import FormattingError, col
from planframe.display import pretty_format_batches, to_arrow_table


def _data_rows(text):
    """Rows of a psql-style table, without the header row."""
    rows = [line for line in text.splitlines() if line.startswith("| ")]
    return rows[1:]


class TestPrettyFormat:
    """Bordered text tables."""

    def test_header_and_rows(self):
        batch = pa.RecordBatch.from_pydict({"id": [1, 2], "name": ["a", "b"]})
        text = pretty_format_batches([batch])
        lines = text.splitlines()
        assert lines[0].startswith("+")
        assert "id" in lines[1] and "name" in lines[1]
        assert len(_data_rows(text)) == 2
        assert "| 1 " in text

    def test_rows_from_several_batches(self):
        schema = pa.schema([("x", pa.int64())])
        batches = [
            pa.RecordBatch.from_pydict({"x": [1]}, schema=schema),
            pa.RecordBatch.from_pydict({"x": [2, 3]}, schema=schema),
        ]
        assert len(_data_rows(pretty_format_batches(batches))) == 3

    def test_nulls_and_bytes(self):
        batch = pa.RecordBatch.from_pydict(
            {"a": [None], "b": [b"\x01\xff"]},
            schema=pa.schema([("a", pa.int64()), ("b", pa.binary())]),
        )
        row = _data_rows(pretty_format_batches([batch]))[0]
        assert "01ff" in row

    def test_string_digits_kept_as_text(self):
        """Numeric-looking strings are not reformatted."""
        batch = pa.RecordBatch.from_pydict({"code": ["007"]})
        assert "007" in pretty_format_batches([batch])

    def test_empty_with_schema(self):
        text = pretty_format_batches([], pa.schema([("id", pa.int64())]))
        assert "id" in text
        assert _data_rows(text) == []

    def test_unrenderable_input(self):
        with pytest.raises(FormattingError, match="Failed to format record batches"):
            pretty_format_batches([object()])

    def test_formatting_error_is_value_error(self):
        with pytest.raises(ValueError):
            pretty_format_batches([42])


class TestConversions:
    """Arrow, pandas and Python conversions."""

    def test_to_arrow_table_requires_schema_when_empty(self):
        with pytest.raises(ValueError, match="without a schema"):
            to_arrow_table([])

    def test_frame_conversions(self, r):
        df = r.sort(col("id"))
        assert df.to_pydict() == {"id": [1, 2, 3], "name": ["a", "b", "c"]}
        assert df.to_pylist()[0] == {"id": 1, "name": "a"}
        assert df.to_arrow_table().num_rows == 3
        assert df.to_pandas()["name"].tolist() == ["a", "b", "c"]


class TestShow:
    """DataFrame.show prints at most the requested rows."""

    def test_show_limits_rows(self, employees, capsys):
        employees.show(5)
        out = capsys.readouterr().out
        assert len(_data_rows(out)) == 5

    def test_show_default_uses_config(self, session, capsys):
        df = session.from_pydict({"x": list(range(50))})
        df.show()
        out = capsys.readouterr().out
        assert len(_data_rows(out)) == session.config.show_rows

    def test_show_fewer_rows_than_requested(self, r, capsys):
        r.show(num=5)
        assert len(_data_rows(capsys.readouterr().out)) == 3

    def test_show_empty_result(self, r, capsys):
        r.filter(col("id") > 100).show()
        out = capsys.readouterr().out
        assert "id" in out
        assert _data_rows(out) == []

    def test_show_unknown_column(self, r):
        from planframe import EngineError

        with pytest.raises(EngineError):
            r.select_columns("missing").show()


class TestExplain:
    """Engine explain output."""

    def test_explain_string(self, r):
        text = r.filter(col("id") > 1).explain_string()
        assert text
        assert "plan" in text

    def test_explain_prints(self, r, capsys):
        r.limit(1).explain()
        assert capsys.readouterr().out.strip()

    def test_explain_analyze(self, r):
        assert r.explain_string(analyze=True)
