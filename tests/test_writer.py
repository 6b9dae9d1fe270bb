from __future__ import annotations

import io

import pytest

from declshell.writer import ShellWriter


def test_blocks_indent_their_contents() -> None:
    writer = ShellWriter(indent_size=2)
    with writer.block("namespace Acme"):
        writer.open_block("public class Point")
        writer.line("public int X;")
        writer.close_block()

    assert writer.lines == [
        "namespace Acme",
        "{",
        "  public class Point",
        "  {",
        "    public int X;",
        "  }",
        "}",
    ]


def test_tabs_override_indent_size() -> None:
    writer = ShellWriter(use_tabs=True, indent_size=8)
    writer.open_block("class A")
    writer.line("x;")
    writer.close_block(";")

    assert writer.lines == ["class A", "{", "\tx;", "};"]


def test_zero_indent_is_allowed() -> None:
    writer = ShellWriter(indent_size=0)
    writer.open_block("class A")
    writer.line("x;")
    writer.close_block()

    assert writer.text() == "class A\n{\nx;\n}\n"


def test_multi_line_text_keeps_the_current_level_and_blank_lines() -> None:
    writer = ShellWriter()
    writer.open_block("class A")
    writer.line("first\n\nsecond")

    assert writer.lines[2:] == ["    first", "", "    second"]


def test_text_and_stream_output() -> None:
    writer = ShellWriter()
    assert writer.text() == ""

    writer.line("a")
    stream = io.StringIO()
    writer.write_to(stream)

    assert stream.getvalue() == "a\n"


def test_invalid_usage_raises() -> None:
    with pytest.raises(ValueError):
        ShellWriter(indent_size=-1)
    with pytest.raises(RuntimeError):
        ShellWriter().close_block()


def test_block_closes_when_its_body_raises() -> None:
    writer = ShellWriter()

    with pytest.raises(KeyError):
        with writer.block("public class Broken"):
            writer.line("int X;")
            raise KeyError("missing member")

    assert writer.level == 0
    assert writer.lines == ["public class Broken", "{", "    int X;", "}"]
