"""Tests for the in-memory document and edit operations."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from line_editor.core.document import (
    AppendLines,
    CreateFile,
    DeleteLine,
    Document,
    InsertAfter,
    InsertBefore,
    ReplaceLine,
    ReplaceSubstring,
    normalize_content,
    parse_operation,
)
from line_editor.errors import (
    InvalidArgumentError,
    InvalidOperationError,
    OutOfRangeError,
)

line_text = st.text(alphabet=st.characters(exclude_characters="\n"), max_size=20)
documents = st.lists(line_text, min_size=1, max_size=30)


class TestNormalizeContent:
    """Test normalization of the string-or-list content field."""

    def test_single_string(self) -> None:
        """A string is one line."""
        assert normalize_content("hello") == ("hello",)

    def test_list_of_strings(self) -> None:
        """Each list element is one line."""
        assert normalize_content(["a", "b"]) == ("a", "b")

    def test_single_and_list_equivalent(self) -> None:
        """A string and a one element list normalize identically."""
        assert normalize_content("x") == normalize_content(["x"])

    def test_empty_list_rejected(self) -> None:
        """Empty lists are an error rather than a silent no-op."""
        with pytest.raises(InvalidArgumentError):
            normalize_content([])

    def test_none_rejected(self) -> None:
        """Missing content is an error."""
        with pytest.raises(InvalidArgumentError, match="no new content"):
            normalize_content(None)

    def test_non_string_elements_rejected(self) -> None:
        """List elements must be strings."""
        with pytest.raises(InvalidArgumentError):
            normalize_content(["ok", 3])

    def test_wrong_type_rejected(self) -> None:
        """Numbers and bytes are not content."""
        with pytest.raises(InvalidArgumentError):
            normalize_content(42)
        with pytest.raises(InvalidArgumentError):
            normalize_content(b"bytes")


class TestDocumentBasics:
    """Test splitting and joining."""

    def test_from_text_splits_lines(self) -> None:
        """Text is split on newlines."""
        doc = Document.from_text("a\nb\nc")
        assert doc.lines == ["a", "b", "c"]
        assert len(doc) == 3

    def test_empty_text_is_one_empty_line(self) -> None:
        """An empty file is a document with one empty line."""
        doc = Document.from_text("")
        assert doc.lines == [""]
        assert doc.serialize() == ""

    def test_trailing_newline_round_trips(self) -> None:
        """A trailing newline survives as a trailing empty line."""
        doc = Document.from_text("a\nb\n")
        assert doc.lines == ["a", "b", ""]
        assert doc.serialize() == "a\nb\n"

    def test_lines_returns_copy(self) -> None:
        """Mutating the returned list does not affect the document."""
        doc = Document.from_text("a\nb")
        doc.lines.append("c")
        assert len(doc) == 2

    @given(text=st.text(max_size=200))
    def test_split_join_round_trip(self, text: str) -> None:
        """Serialize reproduces the exact original text."""
        assert Document.from_text(text).serialize() == text


class TestReplaceLine:
    """Test replace_line."""

    def test_replace_single_line(self) -> None:
        """Replacing with one line keeps the length."""
        doc = Document(["a", "b", "c"])
        doc.replace_line(2, "B")
        assert doc.lines == ["a", "B", "c"]

    def test_replace_with_multiple_lines(self) -> None:
        """Replacing with several lines grows the document."""
        doc = Document(["a", "b", "c"])
        doc.replace_line(2, ["x", "y", "z"])
        assert doc.lines == ["a", "x", "y", "z", "c"]

    @pytest.mark.parametrize("line_number", [0, 4, -1])
    def test_out_of_range(self, line_number: int) -> None:
        """Line numbers outside 1..len fail."""
        doc = Document(["a", "b", "c"])
        with pytest.raises(OutOfRangeError):
            doc.replace_line(line_number, "x")
        assert doc.lines == ["a", "b", "c"]

    @given(lines=documents, data=st.data(), new_line=line_text)
    def test_only_target_line_changes(
        self, lines: list[str], data: st.DataObject, new_line: str
    ) -> None:
        """Single line replacement changes only line n and keeps the length."""
        n = data.draw(st.integers(min_value=1, max_value=len(lines)))
        doc = Document(lines)
        doc.replace_line(n, [new_line])

        assert len(doc) == len(lines)
        expected = list(lines)
        expected[n - 1] = new_line
        assert doc.lines == expected


class TestInsertBefore:
    """Test insert_before."""

    def test_insert_single_line(self) -> None:
        """The new line goes before line n, which shifts down."""
        doc = Document(["a", "b", "c"])
        doc.insert_before(2, "x")
        assert doc.lines == ["a", "x", "b", "c"]

    def test_insert_before_first_line(self) -> None:
        """Inserting before line 1 prepends."""
        doc = Document(["a", "b"])
        doc.insert_before(1, ["x", "y"])
        assert doc.lines == ["x", "y", "a", "b"]

    def test_multi_line_insert_lands_directly_before_target(self) -> None:
        """Multi-line content is placed at index n-1, not n-len(content)."""
        doc = Document(["a", "b", "c", "d"])
        doc.insert_before(3, ["x", "y"])
        assert doc.lines == ["a", "b", "x", "y", "c", "d"]

    def test_out_of_range(self) -> None:
        """Line numbers past the end fail."""
        doc = Document(["a"])
        with pytest.raises(OutOfRangeError):
            doc.insert_before(2, "x")

    @given(lines=documents, data=st.data(), new_lines=st.lists(line_text, min_size=1, max_size=5))
    def test_length_grows_by_content(
        self, lines: list[str], data: st.DataObject, new_lines: list[str]
    ) -> None:
        """The original line n follows the inserted block."""
        n = data.draw(st.integers(min_value=1, max_value=len(lines)))
        doc = Document(lines)
        doc.insert_before(n, new_lines)

        assert len(doc) == len(lines) + len(new_lines)
        assert doc.lines[n - 1 : n - 1 + len(new_lines)] == new_lines
        assert doc.lines[n - 1 + len(new_lines)] == lines[n - 1]


class TestInsertAfter:
    """Test insert_after."""

    def test_insert_after_last_line(self) -> None:
        """Inserting after the last line appends."""
        doc = Document(["a", "b"])
        doc.insert_after(2, ["c", "d"])
        assert doc.lines == ["a", "b", "c", "d"]

    def test_insert_after_middle(self) -> None:
        """The new lines follow line n."""
        doc = Document(["a", "b", "c"])
        doc.insert_after(1, "x")
        assert doc.lines == ["a", "x", "b", "c"]

    def test_out_of_range(self) -> None:
        """Line zero is invalid."""
        doc = Document(["a"])
        with pytest.raises(OutOfRangeError):
            doc.insert_after(0, "x")

    @given(lines=documents, data=st.data(), new_line=line_text)
    def test_insert_after_then_delete_is_identity(
        self, lines: list[str], data: st.DataObject, new_line: str
    ) -> None:
        """insert_after(n) followed by delete_line(n+1) restores the document."""
        n = data.draw(st.integers(min_value=1, max_value=len(lines)))
        doc = Document(lines)
        doc.insert_after(n, [new_line])
        doc.delete_line(n + 1)
        assert doc.lines == lines


class TestDeleteLine:
    """Test delete_line."""

    def test_delete_middle(self) -> None:
        """Exactly one line is removed."""
        doc = Document(["a", "b", "c"])
        doc.delete_line(2)
        assert doc.lines == ["a", "c"]

    def test_repeated_delete_removes_successive_lines(self) -> None:
        """Deleting the same number twice removes consecutive lines."""
        doc = Document(["a", "b", "c", "d"])
        doc.delete_line(2)
        doc.delete_line(2)
        assert doc.lines == ["a", "d"]

    def test_delete_only_line(self) -> None:
        """A document can become empty."""
        doc = Document(["a"])
        doc.delete_line(1)
        assert len(doc) == 0
        assert doc.serialize() == ""

    def test_out_of_range(self) -> None:
        """Deleting past the end fails."""
        doc = Document(["a"])
        with pytest.raises(OutOfRangeError, match="out of bounds"):
            doc.delete_line(2)

    @given(lines=documents, data=st.data())
    def test_length_decreases_by_one(self, lines: list[str], data: st.DataObject) -> None:
        """Length drops by exactly one."""
        n = data.draw(st.integers(min_value=1, max_value=len(lines)))
        doc = Document(lines)
        doc.delete_line(n)
        assert len(doc) == len(lines) - 1
        assert doc.lines == lines[: n - 1] + lines[n:]


class TestReplaceSubstring:
    """Test replace_substring."""

    def test_default_replaces_first_occurrence(self) -> None:
        """Count defaults to one."""
        doc = Document(["foo foo foo"])
        doc.replace_substring(1, "foo", "bar")
        assert doc.lines == ["bar foo foo"]

    def test_count_limits_replacements(self) -> None:
        """At most count occurrences change, left to right."""
        doc = Document(["aaaa"])
        doc.replace_substring(1, "a", "b", 3)
        assert doc.lines == ["bbba"]

    def test_negative_count_replaces_all(self) -> None:
        """A count of -1 replaces every occurrence."""
        doc = Document(["x.x.x"])
        doc.replace_substring(1, "x", "y", -1)
        assert doc.lines == ["y.y.y"]

    def test_non_overlapping(self) -> None:
        """Matches do not overlap."""
        doc = Document(["aaa"])
        doc.replace_substring(1, "aa", "b", -1)
        assert doc.lines == ["ba"]

    def test_other_lines_untouched(self) -> None:
        """Only the addressed line changes."""
        doc = Document(["foo", "foo"])
        doc.replace_substring(2, "foo", "bar", -1)
        assert doc.lines == ["foo", "bar"]

    def test_zero_count_rejected(self) -> None:
        """Count zero is an invalid argument."""
        doc = Document(["foo"])
        with pytest.raises(InvalidArgumentError, match="count"):
            doc.replace_substring(1, "foo", "bar", 0)

    def test_empty_old_string_rejected(self) -> None:
        """An empty search string is an invalid argument."""
        doc = Document(["foo"])
        with pytest.raises(InvalidArgumentError):
            doc.replace_substring(1, "", "bar")

    def test_out_of_range(self) -> None:
        """The line must exist."""
        doc = Document(["foo"])
        with pytest.raises(OutOfRangeError):
            doc.replace_substring(3, "foo", "bar")

    @given(line=st.text(alphabet="bcd", max_size=30))
    def test_absent_substring_is_noop(self, line: str) -> None:
        """Replacing a substring that is not present never fails."""
        doc = Document([line])
        doc.replace_substring(1, "a", "b", -1)
        assert doc.lines == [line]


class TestAppendLines:
    """Test append_lines."""

    def test_append_to_empty_document(self) -> None:
        """Append needs no bounds check."""
        doc = Document([])
        doc.append_lines(["a", "b"])
        assert doc.lines == ["a", "b"]

    def test_append_single_string(self) -> None:
        """A string appends one line."""
        doc = Document(["a"])
        doc.append_lines("b")
        assert doc.lines == ["a", "b"]


class TestApplyDispatch:
    """Test dispatching operation objects."""

    def test_apply_each_operation(self) -> None:
        """Operations apply in sequence against the evolving document."""
        doc = Document(["a", "b", "c"])
        for op in [
            ReplaceLine(2, ("B",)),
            InsertBefore(1, ("start",)),
            InsertAfter(4, ("end",)),
            DeleteLine(2),
            ReplaceSubstring(1, "art", "ART", -1),
            AppendLines(("tail",)),
        ]:
            doc.apply(op)

        assert doc.lines == ["stART", "B", "c", "end", "tail"]

    def test_create_file_not_applicable(self) -> None:
        """create_file cannot be applied to a loaded document."""
        doc = Document(["a"])
        with pytest.raises(InvalidOperationError):
            doc.apply(CreateFile(("x",)))

    def test_unknown_object_rejected(self) -> None:
        """Anything that is not an operation is rejected."""
        doc = Document(["a"])
        with pytest.raises(InvalidOperationError):
            doc.apply("delete everything")


class TestParseOperation:
    """Test building operations from structured payloads."""

    def test_parse_replace_line_string_content(self) -> None:
        """new_content may be a plain string."""
        op = parse_operation(
            {"operation_type": "replace_line", "line_number": 2, "new_content": "x"}
        )
        assert op == ReplaceLine(2, ("x",))

    def test_parse_insert_list_content(self) -> None:
        """new_content may be a list."""
        op = parse_operation(
            {
                "operation_type": "insert_line_after",
                "line_number": 1,
                "new_content": ["x", "y"],
            }
        )
        assert op == InsertAfter(1, ("x", "y"))

    def test_parse_replace_string_defaults_count(self) -> None:
        """count defaults to one."""
        op = parse_operation(
            {
                "operation_type": "replace_string_in_line",
                "line_number": 1,
                "old_string": "a",
                "new_string": "b",
            }
        )
        assert op == ReplaceSubstring(1, "a", "b", 1)

    def test_parse_delete_and_append_and_create(self) -> None:
        """Remaining operation types parse."""
        assert parse_operation({"operation_type": "delete_line", "line_number": 3}) == DeleteLine(3)
        assert parse_operation(
            {"operation_type": "append_to_file", "new_content": "z"}
        ) == AppendLines(("z",))
        assert parse_operation(
            {"operation_type": "create_file", "new_content": "hello"}
        ) == CreateFile(("hello",))

    def test_operation_objects_pass_through(self) -> None:
        """Already built operations are returned unchanged."""
        op = DeleteLine(1)
        assert parse_operation(op) is op

    def test_unknown_operation_type(self) -> None:
        """Unknown tags are invalid operations."""
        with pytest.raises(InvalidOperationError, match="invalid operation type: rotate"):
            parse_operation({"operation_type": "rotate", "line_number": 1})

    def test_missing_line_number(self) -> None:
        """Line operations need an integer line number."""
        with pytest.raises(InvalidArgumentError):
            parse_operation({"operation_type": "delete_line"})
        with pytest.raises(InvalidArgumentError):
            parse_operation({"operation_type": "delete_line", "line_number": "2"})

    def test_missing_content(self) -> None:
        """Content operations need content."""
        with pytest.raises(InvalidArgumentError):
            parse_operation({"operation_type": "replace_line", "line_number": 1})

    def test_non_integer_count(self) -> None:
        """count must be an integer."""
        with pytest.raises(InvalidArgumentError):
            parse_operation(
                {
                    "operation_type": "replace_string_in_line",
                    "line_number": 1,
                    "old_string": "a",
                    "new_string": "b",
                    "count": "all",
                }
            )
