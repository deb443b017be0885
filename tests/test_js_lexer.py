"""Tests for the JS/TS tokenizer."""

import pytest

from jsdoc_mdx.errors import SourceParseError
from jsdoc_mdx.js_lexer import EOF, IDENT, PUNCT, REGEX, STRING, TEMPLATE, tokenize


def _values(text: str) -> list[str]:
    return [t.value for t in tokenize(text) if t.kind != EOF]


def test_tokenize_basic_statement() -> None:
    """Test identifiers, punctuation and multi-character operators."""
    assert _values("const f = (...a) => a;") == [
        "const",
        "f",
        "=",
        "(",
        "...",
        "a",
        ")",
        "=>",
        "a",
        ";",
    ]


def test_strings_hide_braces() -> None:
    """Test that braces inside strings are part of one token."""
    tokens = tokenize('x = "{" + \'}\';')
    strings = [t for t in tokens if t.kind == STRING]
    assert [t.value for t in strings] == ['"{"', "'}'"]
    assert not any(t.kind == PUNCT and t.value in "{}" for t in tokens)


def test_template_with_substitution() -> None:
    """Test that a template literal with nested braces is one token."""
    tokens = tokenize("s = `a ${ {b: 1}.b } c`;")
    templates = [t for t in tokens if t.kind == TEMPLATE]
    assert len(templates) == 1
    assert templates[0].value == "`a ${ {b: 1}.b } c`"


def test_regex_versus_division() -> None:
    """Test that a slash is a regex after operators and division after values."""
    tokens = tokenize("r = /[}]+/g; d = a / b;")
    regexes = [t.value for t in tokens if t.kind == REGEX]
    assert regexes == ["/[}]+/g"]
    assert any(t.kind == PUNCT and t.value == "/" for t in tokens)


def test_doc_comment_attached_to_next_token() -> None:
    """Test that a doc block is carried by the following token only."""
    tokens = tokenize("/** Doc */\nfunction f() {}\n/* plain */ let x;")
    assert tokens[0].value == "function"
    assert tokens[0].doc == "/** Doc */"
    assert all(t.doc is None for t in tokens[1:])


def test_line_numbers_and_newlines() -> None:
    """Test line tracking and the newline-before flag."""
    tokens = tokenize("a\n\nb")
    assert tokens[0].line == 1
    assert tokens[1].line == 3  # noqa: PLR2004
    assert tokens[1].newline_before


def test_private_names_and_shebang() -> None:
    """Test that a hashbang line is skipped and #names are identifiers."""
    tokens = tokenize("#!/usr/bin/env node\nthis.#count = 1;")
    assert tokens[0].value == "this"
    assert any(t.kind == IDENT and t.value == "#count" for t in tokens)


def test_unterminated_comment_raises() -> None:
    """Test that an unterminated block comment is a parse error."""
    with pytest.raises(SourceParseError) as excinfo:
        tokenize("let a;\n/* never closed", "broken.js")
    assert excinfo.value.line == 2  # noqa: PLR2004
    assert "broken.js" in str(excinfo.value)


def test_unterminated_template_raises() -> None:
    """Test that an unterminated template literal is a parse error."""
    with pytest.raises(SourceParseError):
        tokenize("const s = `open")


def test_string_ends_at_newline() -> None:
    """Test that an apostrophe in JSX text does not swallow the file."""
    tokens = tokenize("<p>Don't</p>\nconst x = 1;")
    assert any(t.kind == IDENT and t.value == "const" for t in tokens)


def test_self_closing_jsx_after_expression() -> None:
    """Test that the slash in ``{16} />`` is punctuation, not the start of a regex."""
    tokens = tokenize("<b><Icon size={16} />{open && <i>x</i>}</b>;")
    assert not any(t.kind == REGEX for t in tokens)
    braces = [t.value for t in tokens if t.kind == PUNCT and t.value in "{}"]
    assert braces == ["{", "}", "{", "}"]
