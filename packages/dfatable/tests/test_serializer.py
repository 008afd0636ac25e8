"""Tests for serializing tables to text."""

import pytest

from dfatable import (
    Row,
    Table,
    TableParseError,
    TableSerializeError,
    Transition,
    format_text,
    parse,
    parse_file,
    serialize,
    serialize_file,
)

E = Transition.error()
G = Transition.goto


class TestSerialize:
    """Canonical text output."""

    def test_reference_table(self, reference_table, reference_text):
        assert serialize(reference_table) == reference_text

    def test_empty_table(self):
        assert serialize(Table()) == ""

    def test_no_trailing_newline(self):
        text = serialize(Table((Row(False, 0, (G(0),)), Row(True, 1, (E,)))))
        assert text == "- 0 0\n+ 1 E"
        assert not text.endswith("\n")

    def test_rows_keep_their_order(self):
        table = Table((Row(True, 3, (E,)), Row(False, 0, (G(3),))))
        assert serialize(table) == "+ 3 E\n- 0 3"

    def test_accepts_lists_of_transitions(self):
        table = Table([Row(False, 0, [G(1), E])])
        assert serialize(table) == "- 0 1 E"

    def test_rejects_non_transition_values(self):
        table = Table((Row(False, 0, (G(1),)), Row(False, 1, ("2",))))
        with pytest.raises(TableSerializeError) as exc_info:
            serialize(table)
        assert exc_info.value.row_index == 1
        assert exc_info.value.context["row_index"] == 1
        assert "Row 2 cannot be serialized" in str(exc_info.value)

    def test_rejects_negative_ids(self):
        with pytest.raises(TableSerializeError, match="state id"):
            serialize(Table((Row(False, -1, (E,)),)))

    def test_rejects_non_bool_accepting(self):
        with pytest.raises(TableSerializeError, match="accepting flag"):
            serialize(Table((Row("yes", 0, (E,)),)))


class TestRoundTrip:
    """Text -> table -> text and table -> text -> table."""

    @pytest.mark.parametrize("text", [
        "",
        "- 0 E",
        "+ 0 0",
        "- 0 1 E\n+ 1 E 1",
        "- 0 1 2 3\n- 1 1 1 1\n+ 2 E E E\n+ 2 0 0 0\n- 9 E 9 E",
    ])
    def test_sorted_text_round_trips(self, text):
        assert serialize(parse(text)) == text

    def test_reference_round_trip(self, reference_text):
        assert serialize(parse(reference_text)) == reference_text

    def test_unsorted_table_round_trips_up_to_order(self):
        table = Table((
            Row(True, 5, (G(0), E)),
            Row(False, 0, (G(5), G(5))),
            Row(False, 5, (E, E)),
        ))
        assert parse(serialize(table)) == table.sorted_by_id()

    def test_rows_without_transitions_do_not_parse_back(self):
        # A line needs at least one transition column
        text = serialize(Table((Row(False, 0, ()),)))
        assert text == "- 0"
        with pytest.raises(TableParseError, match="Line 1 has too few columns"):
            parse(text)

    def test_file_round_trip(self, tmp_path, reference_table):
        path = tmp_path / "out.txt"
        serialize_file(reference_table, path)
        assert parse_file(path) == reference_table
        assert not path.read_text().endswith("\n")


class TestFormatText:
    """format_text canonicalizes spacing and order."""

    def test_normalizes_whitespace_and_order(self):
        messy = "+   1\tE  E\r\n-  0 1   E\n"
        assert format_text(messy) == "- 0 1 E\n+ 1 E E"

    def test_canonical_text_unchanged(self, reference_text):
        assert format_text(reference_text) == reference_text

    def test_propagates_parse_errors(self):
        with pytest.raises(TableParseError):
            format_text("- 0 x")
