"""Tokenizer for JavaScript and TypeScript source text.

Strings, template literals, regular expressions and comments are consumed as
single units so that braces inside them never reach the declaration parser.
Each significant token carries the ``/** */`` block that immediately precedes
it, if any.
"""

import re
from dataclasses import dataclass

from jsdoc_mdx.errors import SourceParseError

IDENT = "ident"
STRING = "string"
TEMPLATE = "template"
NUMBER = "number"
REGEX = "regex"
PUNCT = "punct"
EOF = "eof"

IDENT_RE = re.compile(r"#?[A-Za-z_$\u0080-\uffff][\w$\u0080-\uffff]*")
NUMBER_RE = re.compile(r"\.?\d[\w.]*")
MULTI_PUNCT = ("...", "=>")
REGEX_AFTER_KEYWORDS = frozenset(
    {
        "return",
        "typeof",
        "instanceof",
        "in",
        "of",
        "new",
        "delete",
        "void",
        "throw",
        "case",
        "do",
        "else",
        "yield",
        "await",
    }
)


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    start: int
    end: int
    line: int
    doc: str | None = None
    newline_before: bool = False


class JsLexer:
    """Turns source text into a list of tokens ending with an EOF token."""

    def __init__(self, text: str, file_name: str = "") -> None:
        self.text = text
        self.file_name = file_name
        self.pos = 0
        self.line = 1
        self.tokens: list[Token] = []
        self._pending_doc: str | None = None
        self._newline = False

    def _error(self, message: str, at: int) -> SourceParseError:
        line = self.text.count("\n", 0, at) + 1
        return SourceParseError(message, self.file_name, line)

    def tokenize(self) -> list[Token]:
        text = self.text
        if text.startswith("#!"):
            self.pos = text.find("\n") if "\n" in text else len(text)
        length = len(text)
        while self.pos < length:
            ch = text[self.pos]
            if ch == "\n":
                self._newline = True
                self.line += 1
                self.pos += 1
            elif ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = length if end == -1 else end
            elif text.startswith("/*", self.pos):
                self._block_comment()
            elif ch in "'\"":
                self._emit(STRING, self.pos, self._skip_string(self.pos))
            elif ch == "`":
                self._emit(TEMPLATE, self.pos, self._skip_template(self.pos))
            elif ch == "/" and self._regex_allowed():
                end = self._skip_regex(self.pos)
                if end is None:
                    self._emit(PUNCT, self.pos, self.pos + 1)
                else:
                    self._emit(REGEX, self.pos, end)
            else:
                self._word_or_punct()
        self.tokens.append(
            Token(EOF, "", length, length, self.line, self._pending_doc, True)
        )
        return self.tokens

    def _emit(self, kind: str, start: int, end: int) -> None:
        value = self.text[start:end]
        self.tokens.append(
            Token(kind, value, start, end, self.line, self._pending_doc, self._newline)
        )
        self.line += value.count("\n")
        self._pending_doc = None
        self._newline = False
        self.pos = end

    def _word_or_punct(self) -> None:
        text = self.text
        m = IDENT_RE.match(text, self.pos)
        if m:
            self._emit(IDENT, m.start(), m.end())
            return
        m = NUMBER_RE.match(text, self.pos)
        if m:
            self._emit(NUMBER, m.start(), m.end())
            return
        for punct in MULTI_PUNCT:
            if text.startswith(punct, self.pos):
                self._emit(PUNCT, self.pos, self.pos + len(punct))
                return
        self._emit(PUNCT, self.pos, self.pos + 1)

    def _block_comment(self) -> None:
        end = self.text.find("*/", self.pos + 2)
        if end == -1:
            raise self._error("unterminated comment", self.pos)
        end += 2
        body = self.text[self.pos : end]
        self.line += body.count("\n")
        if body.startswith("/**") and body != "/**/":
            self._pending_doc = body
        self.pos = end

    def _skip_string(self, start: int) -> int:
        """Return the end of a quoted string; an unescaped newline ends it early."""
        quote = self.text[start]
        i = start + 1
        length = len(self.text)
        while i < length:
            ch = self.text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                return i + 1
            if ch == "\n":
                # JSX text such as "don't" is not a string
                return i
            i += 1
        return length

    def _skip_template(self, start: int) -> int:
        i = start + 1
        length = len(self.text)
        while i < length:
            ch = self.text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == "`":
                return i + 1
            if self.text.startswith("${", i):
                i = self._skip_substitution(i + 2)
                continue
            i += 1
        raise self._error("unterminated template literal", start)

    def _skip_substitution(self, i: int) -> int:
        depth = 1
        length = len(self.text)
        while i < length:
            ch = self.text[i]
            if ch in "'\"":
                i = self._skip_string(i)
            elif ch == "`":
                i = self._skip_template(i)
            elif self.text.startswith("/*", i):
                end = self.text.find("*/", i + 2)
                if end == -1:
                    raise self._error("unterminated comment", i)
                i = end + 2
            elif self.text.startswith("//", i):
                end = self.text.find("\n", i)
                i = length if end == -1 else end
            elif ch == "{":
                depth += 1
                i += 1
            elif ch == "}":
                depth -= 1
                i += 1
                if depth == 0:
                    return i
            else:
                i += 1
        raise self._error("unterminated template substitution", i)

    def _regex_allowed(self) -> bool:
        if not self.tokens:
            return True
        prev = self.tokens[-1]
        if prev.kind == PUNCT:
            # "</" closes a JSX element
            return prev.value not in {")", "]", "<"}
        if prev.kind == IDENT:
            return prev.value in REGEX_AFTER_KEYWORDS
        return False

    def _skip_regex(self, start: int) -> int | None:
        """Return the end of a regex literal, or None if this slash is an operator."""
        i = start + 1
        in_class = False
        length = len(self.text)
        # "/>" closes a self-closing JSX element
        if i < length and self.text[i] in "/*>":
            return None
        while i < length:
            ch = self.text[i]
            if ch == "\n":
                return None
            if ch == "\\":
                i += 2
                continue
            if ch == "[":
                in_class = True
            elif ch == "]":
                in_class = False
            elif ch == "/" and not in_class:
                i += 1
                while i < length and (self.text[i].isalnum() or self.text[i] == "_"):
                    i += 1
                return i
            i += 1
        return None


def tokenize(text: str, file_name: str = "") -> list[Token]:
    """Tokenize JS/TS source text."""
    return JsLexer(text, file_name).tokenize()
