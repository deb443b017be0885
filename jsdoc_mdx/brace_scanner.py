"""Doc-block driven extraction for plain JavaScript.

This is the lenient scan mode: it locates ``/** */`` blocks at the top level of
a file and classifies the text that follows each one. Class bodies are found
with a brace counter that tracks string state and escapes, so a ``"{"`` inside a
method body cannot shift the end of the class.
"""

import logging
import re

from jsdoc_mdx.classify import (
    ALIAS_EXPORT,
    FUNCTION_EXPORT,
    VALUE_EXPORT,
    classify_function_kind,
    is_method_declaration,
)
from jsdoc_mdx.errors import SourceParseError
from jsdoc_mdx.jsdoc_parser import declared_type, parse_jsdoc
from jsdoc_mdx.models import (
    PRIVATE,
    ClassDecl,
    ConstantDecl,
    FunctionLikeDecl,
    MethodDecl,
    Param,
    ParsedJSDoc,
    PropertyDecl,
)
from jsdoc_mdx.source_parser import LITERAL_IDENTS, ParsedSource, finalize_exports

logger = logging.getLogger(__name__)

LOOKAHEAD = 200

CLASS_RE = re.compile(
    r"^\s*(export\s+)?(default\s+)?class\s+([\w$]+)(?:\s+extends\s+([\w$.]+))?"
)
FUNCTION_RE = re.compile(
    r"^\s*(export\s+)?(default\s+)?(async\s+)?function\s*\*?\s*([\w$]+)\s*\(([^)]*)\)"
)
VARIABLE_RE = re.compile(r"^\s*(export\s+)?(?:const|let|var)\s+([\w$]+)\s*=\s*([^\n;]*)")
ARROW_RE = re.compile(r"^(async\s+)?(?:\(([^)]*)\)|([\w$]+))\s*=>")
FUNCTION_EXPR_RE = re.compile(r"^(async\s+)?function\s*\*?\s*[\w$]*\s*\(([^)]*)\)")
IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
MEMBER_RE = re.compile(
    r"^\s*((?:static\s+)?(?:async\s+)?(?:get\s+|set\s+)?\*?\s*)"
    r"(#?[\w$]+)\s*(\([^)]*\)|=[^;\n]*|[;\n{]|$)"
)

EXPORT_LIST_RE = re.compile(r"\bexport\s*\{([^}]*)\}(\s*from\s*['\"][^'\"]*['\"])?")
EXPORT_DEFAULT_RE = re.compile(r"^\s*export\s+default\s+([\w$]+)\s*;?\s*$", re.MULTILINE)
MODULE_EXPORTS_NAME_RE = re.compile(r"\bmodule\.exports\s*=\s*([\w$]+)\s*;?\s*$", re.MULTILINE)
MODULE_EXPORTS_OBJECT_RE = re.compile(r"\bmodule\.exports\s*=\s*\{([^}]*)\}")
EXPORTS_PROPERTY_RE = re.compile(r"\b(?:module\.)?exports\.([\w$]+)\s*=\s*([\w$]+)?")


class BraceScanner:
    """Walks JavaScript text, tracking brace depth outside strings and comments."""

    def __init__(self, text: str, file_name: str = "") -> None:
        self.text = text
        self.file_name = file_name

    def line_of(self, pos: int) -> int:
        return self.text.count("\n", 0, pos) + 1

    def _skip_string(self, start: int) -> int:
        text = self.text
        quote = text[start]
        in_string = True
        escaped = False
        i = start + 1
        while i < len(text) and in_string:
            ch = text[i]
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                in_string = False
            elif ch == "\n" and quote != "`":
                return i
            i += 1
        if in_string and quote == "`":
            raise SourceParseError(
                "unterminated template literal", self.file_name, self.line_of(start)
            )
        return i

    def skip_literal(self, i: int) -> int | None:
        """Return the index past a string, template or comment starting at ``i``."""
        text = self.text
        ch = text[i]
        if ch in "'\"`":
            return self._skip_string(i)
        if text.startswith("//", i):
            end = text.find("\n", i)
            return len(text) if end == -1 else end
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise SourceParseError(
                    "unterminated comment", self.file_name, self.line_of(i)
                )
            return end + 2
        return None

    def find_matching_brace(self, open_pos: int) -> int:
        """Return the index of the ``}`` that closes the ``{`` at ``open_pos``."""
        depth = 0
        i = open_pos
        while i < len(self.text):
            skipped = self.skip_literal(i)
            if skipped is not None:
                i = skipped
                continue
            ch = self.text[i]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        raise SourceParseError(
            "no matching closing brace", self.file_name, self.line_of(open_pos)
        )

    def top_level_doc_blocks(self, start: int, end: int) -> list[tuple[int, int]]:
        """Return spans of ``/** */`` blocks at brace depth zero within a range."""
        blocks: list[tuple[int, int]] = []
        depth = 0
        i = start
        while i < end:
            if depth == 0 and self.text.startswith("/**", i) and not self.text.startswith("/**/", i):
                close = self.text.find("*/", i + 3)
                if close == -1:
                    raise SourceParseError(
                        "unterminated comment", self.file_name, self.line_of(i)
                    )
                blocks.append((i, close + 2))
                i = close + 2
                continue
            skipped = self.skip_literal(i)
            if skipped is not None:
                i = skipped
                continue
            ch = self.text[i]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
            i += 1
        return blocks


def split_params(text: str) -> list[Param]:
    """Split a raw parameter list on top-level commas."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))

    params = []
    for part in parts:
        piece = " ".join(part.split())
        if not piece:
            continue
        is_rest = piece.startswith("...")
        if is_rest:
            piece = piece[3:]
        default = None
        if "=" in piece:
            piece, default = (s.strip() for s in piece.split("=", 1))
        params.append(
            Param(
                name=piece,
                optional=default is not None,
                default=default,
                is_rest=is_rest,
            )
        )
    return params


def _member_params(tail: str) -> list[Param]:
    if tail.startswith("("):
        return split_params(tail[1:-1])
    body = tail.lstrip("=").strip()
    m = ARROW_RE.match(body)
    if m:
        return split_params(m[2]) if m[2] is not None else [Param(name=m[3])]
    return []


def _member_head(m: re.Match[str]) -> str:
    """Return the member's declaration up to its own parameter list.

    Calls inside a field initializer are left out, so ``x = freeze({})`` stays
    a property.
    """
    tail = m[3].strip()
    if not tail.startswith("="):
        return m[0]
    body = tail[1:].strip()
    arrow = ARROW_RE.match(body)
    if arrow:
        params = arrow[2] if arrow[2] is not None else arrow[3]
        return f"{m[1]}{m[2]}({params}) =>"
    function_expr = FUNCTION_EXPR_RE.match(body)
    if function_expr:
        return f"{m[1]}{m[2]} = {function_expr[0]}"
    return f"{m[1]}{m[2]} ="


def _add_member(cls: ClassDecl, m: re.Match[str], doc: ParsedJSDoc) -> None:
    prefix_words = m[1].split()
    name = m[2]
    tail = m[3].strip()
    is_static = "static" in prefix_words
    visibility = PRIVATE if name.startswith("#") else doc.visibility
    if is_method_declaration(_member_head(m)):
        is_setter = "set" in prefix_words
        cls.add_method(
            MethodDecl(
                name=name,
                parameters=_member_params(tail),
                return_type="void" if is_setter else "any",
                is_static=is_static,
                is_async="async" in prefix_words
                or tail.lstrip("= ").startswith("async")
                or doc.is_async,
                is_getter="get" in prefix_words,
                is_setter=is_setter,
                visibility=visibility,
                doc=doc,
            )
        )
        return
    initializer = None
    if tail.startswith("="):
        initializer = " ".join(tail[1:].split()).rstrip("{").strip() or None
    cls.add_property(
        PropertyDecl(
            name=name,
            type=declared_type(doc) or "any",
            is_static=is_static,
            initializer=initializer,
            visibility=visibility,
            doc=doc,
        )
    )


class DocBlockScanner:
    """Extracts declarations from the text following each top-level doc block."""

    def __init__(self, text: str, file_name: str = "", *, docs_only: bool = False) -> None:
        self.text = text
        self.file_name = file_name
        self.docs_only = docs_only
        self.braces = BraceScanner(text, file_name)
        self.result = ParsedSource(file_name=file_name)

    def scan(self) -> ParsedSource:
        exported, renamed = self._scan_exports()
        for start, end in self.braces.top_level_doc_blocks(0, len(self.text)):
            raw = self.text[start:end]
            following = self.text[end : end + LOOKAHEAD]
            m = CLASS_RE.match(following)
            if m:
                self._scan_class(raw, m, end)
                continue
            m = FUNCTION_RE.match(following)
            if m:
                self._add(
                    FunctionLikeDecl(
                        name=m[4],
                        file_name=self.file_name,
                        doc=parse_jsdoc(raw),
                        kind=classify_function_kind(m[4], FUNCTION_EXPORT),
                        parameters=split_params(m[5]),
                        is_async=bool(m[3]),
                        is_exported=bool(m[1]),
                    )
                )
                continue
            m = VARIABLE_RE.match(following)
            if m:
                self._scan_variable(raw, m)
        finalize_exports(
            self.result.declarations,
            exported,
            renamed,
            self.file_name,
            docs_only=self.docs_only,
        )
        self.result.exported_names = exported
        return self.result

    def _add(self, decl: ClassDecl | FunctionLikeDecl | ConstantDecl) -> None:
        if any(d.name == decl.name for d in self.result.declarations):
            logger.debug("%s: duplicate declaration %s ignored", self.file_name, decl.name)
            return
        self.result.declarations.append(decl)

    def _scan_class(self, raw: str, m: re.Match[str], doc_end: int) -> None:
        open_pos = self.text.find("{", doc_end + m.end())
        if open_pos == -1:
            raise SourceParseError(
                f"class {m[3]} has no body", self.file_name, self.braces.line_of(doc_end)
            )
        close_pos = self.braces.find_matching_brace(open_pos)
        cls = ClassDecl(
            name=m[3],
            file_name=self.file_name,
            doc=parse_jsdoc(raw),
            extends=m[4],
            is_exported=bool(m[1]),
        )
        for start, end in self.braces.top_level_doc_blocks(open_pos + 1, close_pos):
            member = MEMBER_RE.match(self.text[end:close_pos])
            if member is None:
                continue
            _add_member(cls, member, parse_jsdoc(self.text[start:end]))
        cls.apply_class_doc()
        self._add(cls)

    def _scan_variable(self, raw: str, m: re.Match[str]) -> None:
        name = m[2]
        init = m[3].strip()
        doc = parse_jsdoc(raw)
        exported = bool(m[1])
        arrow = ARROW_RE.match(init)
        function_expr = FUNCTION_EXPR_RE.match(init)
        if arrow or function_expr:
            if arrow:
                params = split_params(arrow[2]) if arrow[2] is not None else [Param(name=arrow[3])]
                is_async = bool(arrow[1])
            else:
                params = split_params(function_expr[2])
                is_async = bool(function_expr[1])
            self._add(
                FunctionLikeDecl(
                    name=name,
                    file_name=self.file_name,
                    doc=doc,
                    kind=classify_function_kind(name, FUNCTION_EXPORT),
                    parameters=params,
                    is_async=is_async,
                    is_exported=exported,
                )
            )
            return
        if IDENTIFIER_RE.match(init) and init not in LITERAL_IDENTS:
            self._add(
                FunctionLikeDecl(
                    name=name,
                    file_name=self.file_name,
                    doc=doc,
                    kind=classify_function_kind(name, ALIAS_EXPORT),
                    alias_of=init,
                    is_exported=exported,
                )
            )
            return
        kind = classify_function_kind(name, VALUE_EXPORT)
        if kind is None:
            self._add(
                ConstantDecl(
                    name=name,
                    file_name=self.file_name,
                    doc=doc,
                    type=declared_type(doc),
                    value=init or None,
                    is_exported=exported,
                )
            )
            return
        self._add(
            FunctionLikeDecl(
                name=name,
                file_name=self.file_name,
                doc=doc,
                kind=kind,
                is_exported=exported,
            )
        )

    def _scan_exports(self) -> tuple[set[str], list[tuple[str, str]]]:
        exported: set[str] = set()
        renamed: list[tuple[str, str]] = []
        for m in EXPORT_LIST_RE.finditer(self.text):
            for entry in m[1].split(","):
                words = entry.split()
                if not words:
                    continue
                if words[0] == "type" and len(words) > 1:
                    words = words[1:]
                local = words[0]
                exported_as = words[2] if len(words) >= 3 and words[1] == "as" else local
                if not m[2]:
                    exported.add(local)
                if local != exported_as and "default" not in {local, exported_as}:
                    renamed.append((local, exported_as))
        exported.update(EXPORT_DEFAULT_RE.findall(self.text))
        exported.update(MODULE_EXPORTS_NAME_RE.findall(self.text))
        for m in MODULE_EXPORTS_OBJECT_RE.finditer(self.text):
            for entry in m[1].split(","):
                key, _, value = entry.partition(":")
                name = (value or key).strip()
                if IDENTIFIER_RE.match(name):
                    exported.add(name)
        for m in EXPORTS_PROPERTY_RE.finditer(self.text):
            exported.add(m[1])
            if m[2]:
                exported.add(m[2])
        return exported, renamed


def scan_source(text: str, file_name: str = "", *, docs_only: bool = False) -> ParsedSource:
    """Extract declarations from JavaScript text in scan mode."""
    return DocBlockScanner(text, file_name, docs_only=docs_only).scan()
