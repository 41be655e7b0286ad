import pytest

from lspbridge.core.errors import TextRangeError
from lspbridge.core.text_content import HeadlessDocument, TextContent


def test_line_string_and_sub_content_single_line() -> None:
    content = TextContent("int a = 1;\nint foo = bar();\n")
    assert content.line_count == 3
    assert content.line_string(1) == "int foo = bar();"
    assert content.sub_content(1, 4, 1, 7) == "foo"


def test_sub_content_spans_lines() -> None:
    content = TextContent("first\nsecond\nthird")
    assert content.sub_content(0, 3, 2, 2) == "st\nsecond\nth"


def test_line_string_drops_carriage_return() -> None:
    assert TextContent("a\r\nb").line_string(0) == "a"


def test_insert_and_replace() -> None:
    content = TextContent("hello world")
    content.insert(0, 5, ",")
    assert str(content) == "hello, world"
    content.replace(0, 7, 0, 12, "there\nfriend")
    assert str(content) == "hello, there\nfriend"
    assert content.line_count == 2


def test_out_of_range_positions_raise() -> None:
    content = TextContent("abc\nde")
    with pytest.raises(TextRangeError):
        content.line_string(5)
    with pytest.raises(TextRangeError):
        content.sub_content(1, 0, 1, 9)
    with pytest.raises(TextRangeError):
        content.replace(1, 2, 0, 0, "x")


def test_headless_document_tracks_modification() -> None:
    doc = HeadlessDocument(None, "x = 1")
    assert not doc.modified
    doc.replace(0, 4, 0, 5, "2")
    assert doc.get_text() == "x = 2"
    assert doc.modified
    doc.execute_command(None)
    assert doc.executed_commands == []
