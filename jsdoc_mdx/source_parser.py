"""Recursive-descent parser for the declaration shapes of JS/TS SDK sources.

The parser walks the token stream from ``js_lexer`` and recognizes top-level
classes, functions, variable bindings, interfaces, type aliases, enums and
namespaces, plus the ``export`` forms that make them public. Function and
method bodies are skipped by brace matching over tokens, so braces inside
strings, templates, regular expressions and comments never affect structure.
"""

import logging
from dataclasses import dataclass, field

from jsdoc_mdx.classify import (
    ALIAS_EXPORT,
    FUNCTION_EXPORT,
    VALUE_EXPORT,
    classify_function_kind,
)
from jsdoc_mdx.errors import SourceParseError
from jsdoc_mdx.js_lexer import EOF, IDENT, NUMBER, PUNCT, STRING, Token, tokenize
from jsdoc_mdx.jsdoc_parser import declared_type, parse_jsdoc
from jsdoc_mdx.models import (
    PRIVATE,
    PUBLIC,
    ClassDecl,
    ConstantDecl,
    EnumDecl,
    EnumMember,
    FunctionLikeDecl,
    InterfaceDecl,
    MethodDecl,
    Param,
    PropertyDecl,
    SourceDeclaration,
    TypeAliasDecl,
)

logger = logging.getLogger(__name__)

CLASS_MODIFIERS = frozenset(
    {
        "static",
        "public",
        "private",
        "protected",
        "readonly",
        "abstract",
        "async",
        "declare",
        "override",
        "accessor",
        "get",
        "set",
    }
)
PARAM_MODIFIERS = frozenset({"public", "private", "protected", "readonly", "override"})
VISIBILITY_MODIFIERS = frozenset({"public", "private", "protected"})
NOT_A_MODIFIER_BEFORE = frozenset({"(", "=", ";", ":", "?", "!", "<", "}", ","})
CLOSERS = frozenset({")", "]", "}"})
MATCHING = {"(": ")", "[": "]", "{": "}"}
LITERAL_IDENTS = frozenset({"undefined", "null", "true", "false", "this", "NaN"})

CONTINUE_AFTER_PUNCT = frozenset(
    "= ( [ { , . | & : ? + - * / % < ! ~ ^ ... => @".split()
)
CONTINUE_AFTER_IDENT = frozenset(
    {
        "extends",
        "keyof",
        "typeof",
        "new",
        "await",
        "in",
        "of",
        "instanceof",
        "as",
        "is",
        "satisfies",
        "implements",
        "infer",
        "unique",
        "readonly",
        "yield",
        "delete",
        "void",
        "case",
    }
)
CONTINUE_BEFORE_PUNCT = frozenset(". => ? : , | & = % ^ >".split())
CONTINUE_BEFORE_IDENT = frozenset(
    {"else", "catch", "finally", "as", "satisfies", "extends", "implements", "instanceof"}
)
TYPE_OPERATORS = frozenset(
    {"|", "&", ":", "=>", "<", ",", "(", "?", "keyof", "typeof", "extends", "infer"}
)


@dataclass
class ParsedSource:
    """Declarations found in one file, with export flags already applied."""

    file_name: str
    declarations: list[SourceDeclaration] = field(default_factory=list)
    exported_names: set[str] = field(default_factory=set)


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] in "'\"" and value[-1] == value[0]:
        return value[1:-1]
    return value


class SourceParser:
    """Parses one source file into declarations."""

    def __init__(
        self,
        text: str,
        file_name: str = "",
        *,
        ambient: bool | None = None,
        docs_only: bool = False,
    ) -> None:
        self.text = text
        self.file_name = file_name
        self.tokens = tokenize(text, file_name)
        self.pos = 0
        self.ambient = file_name.endswith(".d.ts") if ambient is None else ambient
        self.docs_only = docs_only
        self.declarations: list[SourceDeclaration] = []
        self.exported_names: set[str] = set()
        self.renamed_exports: list[tuple[str, str]] = []
        self._function_index: dict[str, int] = {}

    # -----------------------------
    # Token helpers
    # -----------------------------

    @property
    def tok(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    @staticmethod
    def _matches(tok: Token, value: str) -> bool:
        return tok.kind in (PUNCT, IDENT) and tok.value == value

    def _is(self, value: str) -> bool:
        return self._matches(self.tok, value)

    def _advance(self) -> Token:
        tok = self.tok
        if tok.kind != EOF:
            self.pos += 1
        return tok

    def _accept(self, value: str) -> bool:
        if self._is(value):
            self._advance()
            return True
        return False

    def _expect(self, value: str) -> Token:
        if not self._is(value):
            raise self._error(f"expected '{value}' but found '{self.tok.value}'")
        return self._advance()

    def _expect_name(self) -> str:
        tok = self.tok
        if tok.kind not in (IDENT, STRING, NUMBER):
            raise self._error(f"expected a name but found '{tok.value}'")
        self._advance()
        return _strip_quotes(tok.value)

    def _error(self, message: str) -> SourceParseError:
        return SourceParseError(message, self.file_name, self.tok.line)

    def _slice(self, start: int, end: int) -> str:
        """Source text spanning tokens[start:end], whitespace collapsed."""
        if end <= start:
            return ""
        raw = self.text[self.tokens[start].start : self.tokens[end - 1].end]
        return " ".join(raw.split())

    @staticmethod
    def _ends_statement(prev: Token, tok: Token) -> bool:
        """Decide whether a line break between two tokens terminates a statement."""
        if prev.kind == PUNCT and prev.value in CONTINUE_AFTER_PUNCT:
            return False
        if prev.kind == IDENT and prev.value in CONTINUE_AFTER_IDENT:
            return False
        if tok.kind == PUNCT and tok.value in CONTINUE_BEFORE_PUNCT:
            return False
        return not (tok.kind == IDENT and tok.value in CONTINUE_BEFORE_IDENT)

    # -----------------------------
    # Skipping
    # -----------------------------

    def _skip_block(self) -> None:
        """Skip a ``{ ... }`` block, counting braces only."""
        depth = 0
        while True:
            tok = self.tok
            if tok.kind == EOF:
                raise self._error("unbalanced braces")
            self._advance()
            if tok.kind != PUNCT:
                continue
            if tok.value == "{":
                depth += 1
            elif tok.value == "}":
                depth -= 1
                if depth == 0:
                    return

    def _skip_balanced(self) -> None:
        """Skip a parenthesized or bracketed group, which must nest correctly."""
        stack: list[str] = []
        while True:
            tok = self.tok
            if tok.kind == EOF:
                raise self._error("unbalanced brackets")
            self._advance()
            if tok.kind != PUNCT:
                continue
            if tok.value in MATCHING:
                stack.append(MATCHING[tok.value])
            elif tok.value in CLOSERS:
                if not stack or stack.pop() != tok.value:
                    raise self._error(f"unbalanced '{tok.value}'")
                if not stack:
                    return

    def _skip_group(self) -> None:
        if self._is("{"):
            self._skip_block()
        else:
            self._skip_balanced()

    def _skip_expression(
        self, stops: frozenset[str] | set[str], *, newline_ends: bool = True
    ) -> None:
        """Skip tokens up to a stop token, an enclosing closer or a statement break."""
        prev: Token | None = None
        while True:
            tok = self.tok
            if tok.kind == EOF:
                return
            if tok.kind == PUNCT and (tok.value in stops or tok.value in CLOSERS):
                return
            if (
                newline_ends
                and prev is not None
                and tok.newline_before
                and self._ends_statement(prev, tok)
            ):
                return
            if tok.kind == PUNCT and tok.value in MATCHING:
                self._skip_group()
            else:
                self._advance()
            prev = self.tokens[self.pos - 1]

    def _skip_statement(self) -> None:
        prev: Token | None = None
        while True:
            tok = self.tok
            if tok.kind == EOF:
                return
            if prev is not None and tok.newline_before and self._ends_statement(prev, tok):
                return
            if tok.kind == PUNCT:
                if tok.value == ";":
                    self._advance()
                    return
                if tok.value in CLOSERS:
                    if prev is None:
                        raise self._error(f"unexpected '{tok.value}'")
                    return
                if tok.value in MATCHING:
                    self._skip_group()
                    prev = self.tokens[self.pos - 1]
                    continue
            self._advance()
            prev = tok

    def _skip_decorators(self) -> None:
        while self._accept("@"):
            self._advance()
            while self._accept("."):
                self._advance()
            if self._is("("):
                self._skip_balanced()

    # -----------------------------
    # Types and parameters
    # -----------------------------

    def _read_type(
        self, stops: frozenset[str] | set[str], *, newline_ends: bool = True
    ) -> str:
        """Collect a type annotation up to a stop token at depth zero."""
        start = self.pos
        angle = 0
        prev: Token | None = None
        while True:
            tok = self.tok
            if tok.kind == EOF:
                break
            if angle == 0:
                if tok.kind == PUNCT and tok.value in CLOSERS:
                    break
                if tok.kind in (PUNCT, IDENT) and tok.value in stops:
                    # an object type may follow a type operator
                    if not (tok.value == "{" and (prev is None or prev.value in TYPE_OPERATORS)):
                        break
                if (
                    newline_ends
                    and prev is not None
                    and tok.newline_before
                    and self._ends_statement(prev, tok)
                ):
                    break
            if tok.kind == PUNCT and tok.value == "<":
                angle += 1
                self._advance()
            elif tok.kind == PUNCT and tok.value == ">":
                angle = max(0, angle - 1)
                self._advance()
            elif tok.kind == PUNCT and tok.value in MATCHING:
                self._skip_group()
            else:
                self._advance()
            prev = self.tokens[self.pos - 1]
        return self._slice(start, self.pos)

    def _parse_type_params(self) -> list[str]:
        self._expect("<")
        params: list[str] = []
        depth = 1
        start = self.pos
        while True:
            tok = self.tok
            if tok.kind == EOF:
                raise self._error("unterminated type parameter list")
            if tok.kind == PUNCT and tok.value == "<":
                depth += 1
            elif tok.kind == PUNCT and tok.value == ">":
                depth -= 1
                if depth == 0:
                    params.append(self._slice(start, self.pos))
                    self._advance()
                    break
            elif tok.kind == PUNCT and tok.value == "," and depth == 1:
                params.append(self._slice(start, self.pos))
                self._advance()
                start = self.pos
                continue
            elif tok.kind == PUNCT and tok.value in MATCHING:
                self._skip_group()
                continue
            self._advance()
        return [p for p in params if p]

    def _parse_params(self) -> tuple[list[Param], list[PropertyDecl]]:
        """Parse ``( ... )``; TS parameter properties are returned separately."""
        self._expect("(")
        params: list[Param] = []
        props: list[PropertyDecl] = []
        while not self._is(")"):
            if self.tok.kind == EOF:
                raise self._error("unterminated parameter list")
            first = self.tok
            self._skip_decorators()
            modifiers: set[str] = set()
            while (
                self.tok.kind == IDENT
                and self.tok.value in PARAM_MODIFIERS
                and self._peek().value not in NOT_A_MODIFIER_BEFORE
                and self._peek().value != ")"
            ):
                modifiers.add(self._advance().value)
            is_rest = self._accept("...")
            if self._is("{") or self._is("["):
                start = self.pos
                self._skip_group()
                name = self._slice(start, self.pos)
            else:
                name = self._expect_name()
            optional = self._accept("?")
            type_text = "any"
            if self._accept(":"):
                type_text = self._read_type({",", "="}, newline_ends=False) or "any"
            default = None
            if self._accept("="):
                start = self.pos
                self._skip_expression({","}, newline_ends=False)
                default = self._slice(start, self.pos)
            if name != "this":
                params.append(
                    Param(
                        name=name,
                        type=type_text,
                        optional=optional or default is not None,
                        default=default,
                        is_rest=is_rest,
                    )
                )
            if modifiers:
                visibility = next(
                    (m for m in ("private", "protected") if m in modifiers), PUBLIC
                )
                props.append(
                    PropertyDecl(
                        name=name,
                        type=type_text,
                        is_readonly="readonly" in modifiers,
                        is_optional=optional,
                        visibility=visibility,
                        doc=parse_jsdoc(first.doc),
                    )
                )
            if not self._accept(","):
                break
        self._expect(")")
        return params, props

    def _read_return_type(self, stops: frozenset[str] | set[str]) -> str:
        if self._accept(":"):
            return self._read_type(stops) or "any"
        return "any"

    def _try_arrow(self) -> tuple[list[Param], str, bool] | None:
        """Parse an arrow function head up to and including ``=>``, if present."""
        save = self.pos
        is_async = False
        if (
            self._is("async")
            and not self._peek().newline_before
            and (self._peek().kind == IDENT or self._peek().value in {"(", "<"})
        ):
            self._advance()
            is_async = True
        try:
            if self._is("<"):
                self._parse_type_params()
            if self.tok.kind == IDENT and self._matches(self._peek(), "=>"):
                name = self._advance().value
                self._advance()
                return [Param(name=name)], "any", is_async
            if self._is("("):
                params, _ = self._parse_params()
                return_type = "any"
                if self._accept(":"):
                    return_type = self._read_type({"=>"}, newline_ends=False) or "any"
                if self._accept("=>"):
                    return params, return_type, is_async
        except SourceParseError:
            pass
        self.pos = save
        return None

    def _ends_initializer(self, tok: Token) -> bool:
        if tok.kind == EOF:
            return True
        if tok.kind == PUNCT and (tok.value in {",", ";"} or tok.value in CLOSERS):
            return True
        return tok.newline_before and self._ends_statement(self.tok, tok)

    # -----------------------------
    # Statements
    # -----------------------------

    def parse(self) -> ParsedSource:
        self._parse_statements(in_block=False, ambient=self.ambient)
        finalize_exports(
            self.declarations,
            self.exported_names,
            self.renamed_exports,
            self.file_name,
            docs_only=self.docs_only,
        )
        return ParsedSource(
            file_name=self.file_name,
            declarations=self.declarations,
            exported_names=set(self.exported_names),
        )

    def _parse_statements(self, *, in_block: bool, ambient: bool) -> None:
        while True:
            if self.tok.kind == EOF:
                if in_block:
                    raise self._error("unexpected end of input inside a block")
                return
            if in_block and self._is("}"):
                return
            before = self.pos
            self._parse_statement(ambient)
            if self.pos == before:
                self._advance()

    def _parse_statement(self, ambient: bool) -> None:  # noqa: C901, PLR0911, PLR0912
        first = self.tok
        doc = first.doc
        if self._accept(";"):
            return
        self._skip_decorators()
        exported = ambient
        is_default = False
        if self._is("export"):
            self._advance()
            exported = True
            if self._accept("default"):
                is_default = True
            elif self._is("{") or self._is("*"):
                self._parse_export_clause()
                return
            elif self._is("type") and self._matches(self._peek(), "{"):
                self._advance()
                self._parse_export_clause()
                return
            elif self._accept("="):
                if self.tok.kind == IDENT:
                    self.exported_names.add(self.tok.value)
                self._skip_statement()
                return
            elif self._is("import") or self._is("as"):
                self._skip_statement()
                return
        if self._accept("declare"):
            ambient = True
            exported = True
        if self._is("abstract") and self._matches(self._peek(), "class"):
            self._advance()

        if self._is("class"):
            self._parse_class(doc, exported)
        elif self._is("async") and self._matches(self._peek(), "function"):
            self._advance()
            self._parse_function(doc, exported, is_async=True)
        elif self._is("function"):
            self._parse_function(doc, exported, is_async=False)
        elif self._is("interface") and self._peek().kind == IDENT:
            self._parse_interface(doc, exported)
        elif (
            self._is("type")
            and self._peek().kind == IDENT
            and self._peek(2).value in {"=", "<"}
        ):
            self._parse_type_alias(doc, exported)
        elif self._is("enum") or (
            self._is("const") and self._matches(self._peek(), "enum")
        ):
            self._parse_enum(doc, exported)
        elif self.tok.value in {"const", "let", "var"} and self.tok.kind == IDENT and (
            self._peek().kind == IDENT or self._peek().value in {"{", "["}
        ):
            self._parse_variables(doc, exported)
        elif (
            self.tok.value in {"namespace", "module"}
            and self.tok.kind == IDENT
            and self._peek().kind in (IDENT, STRING)
            and not self._peek().newline_before
        ):
            self._parse_namespace(ambient)
        elif self._is("global") and self._matches(self._peek(), "{"):
            self._advance()
            self._parse_block_body(ambient=True)
        elif is_default:
            if self.tok.kind == IDENT and self._ends_initializer(self._peek()):
                self.exported_names.add(self._advance().value)
                self._accept(";")
            else:
                self._skip_statement()
        elif (self._is("module") or self._is("exports")) and self._matches(
            self._peek(), "."
        ):
            self._parse_commonjs_export()
        else:
            self._skip_statement()

    def _parse_block_body(self, *, ambient: bool) -> None:
        self._expect("{")
        self._parse_statements(in_block=True, ambient=ambient)
        self._expect("}")

    def _parse_namespace(self, ambient: bool) -> None:
        self._advance()
        self._advance()
        while self._accept("."):
            self._advance()
        if self._is("{"):
            self._parse_block_body(ambient=ambient)
        else:
            self._accept(";")

    # -----------------------------
    # Exports
    # -----------------------------

    def _parse_export_clause(self) -> None:
        if self._accept("*"):
            self._skip_statement()
            return
        self._expect("{")
        pairs: list[tuple[str, str]] = []
        while not self._is("}"):
            if self.tok.kind == EOF:
                raise self._error("unterminated export list")
            if self._is("type") and self._peek().kind == IDENT and self._peek().value != "as":
                self._advance()
            local = self._expect_name()
            exported_as = local
            if self._accept("as"):
                exported_as = self._expect_name()
            pairs.append((local, exported_as))
            if not self._accept(","):
                break
        self._expect("}")
        from_module = None
        if self._accept("from"):
            from_module = self._advance().value
        self._accept(";")
        for local, exported_as in pairs:
            if from_module is None:
                self.exported_names.add(local)
            if local != exported_as and "default" not in {local, exported_as}:
                self.renamed_exports.append((local, exported_as))

    def _parse_commonjs_export(self) -> None:
        if self._accept("module"):
            self._expect(".")
        if not self._accept("exports"):
            self._skip_statement()
            return
        if self._accept("."):
            prop = self._expect_name()
            if self._accept("="):
                self.exported_names.add(prop)
                if self.tok.kind == IDENT and self._ends_initializer(self._peek()):
                    self.exported_names.add(self.tok.value)
        elif self._accept("="):
            if self.tok.kind == IDENT and self._ends_initializer(self._peek()):
                self.exported_names.add(self._advance().value)
            elif self._is("{"):
                self._parse_object_exports()
        if self._accept(";") or self.tok.kind == EOF or self.tok.newline_before:
            return
        self._skip_statement()

    def _parse_object_exports(self) -> None:
        self._expect("{")
        while not self._is("}"):
            if self.tok.kind == EOF:
                raise self._error("unterminated object literal")
            key = self._advance()
            if self._accept(":"):
                if self.tok.kind == IDENT and self._peek().value in {",", "}"}:
                    self.exported_names.add(self._advance().value)
                else:
                    self._skip_expression({","}, newline_ends=False)
            elif key.kind == IDENT and (self._is(",") or self._is("}")):
                self.exported_names.add(key.value)
            else:
                self._skip_expression({","}, newline_ends=False)
            self._accept(",")
        self._expect("}")

    # -----------------------------
    # Declarations
    # -----------------------------

    def _add_function(
        self,
        name: str,
        doc_raw: str | None,
        params: list[Param],
        return_type: str,
        *,
        is_async: bool,
        type_parameters: list[str],
        exported: bool,
    ) -> None:
        doc = parse_jsdoc(doc_raw)
        decl = FunctionLikeDecl(
            name=name,
            file_name=self.file_name,
            doc=doc,
            kind=classify_function_kind(name, FUNCTION_EXPORT),
            parameters=params,
            return_type=return_type,
            is_async=is_async or doc.is_async,
            type_parameters=type_parameters,
            is_exported=exported,
        )
        index = self._function_index.get(name)
        if index is None:
            self._function_index[name] = len(self.declarations)
            self.declarations.append(decl)
            return
        # overload signatures share a name
        existing = self.declarations[index]
        decl.is_exported = decl.is_exported or existing.is_exported
        if not existing.doc.description and doc.description:
            self.declarations[index] = decl
        else:
            existing.is_exported = decl.is_exported

    def _parse_function(self, doc_raw: str | None, exported: bool, *, is_async: bool) -> None:
        self._expect("function")
        self._accept("*")
        name = None
        if self.tok.kind == IDENT:
            name = self._advance().value
        type_params = self._parse_type_params() if self._is("<") else []
        params, _ = self._parse_params()
        return_type = self._read_return_type({"{", ";"})
        if self._is("{"):
            self._skip_block()
        else:
            self._accept(";")
        if name is None:
            logger.debug("%s: skipping anonymous default function", self.file_name)
            return
        self._add_function(
            name,
            doc_raw,
            params,
            return_type,
            is_async=is_async,
            type_parameters=type_params,
            exported=exported,
        )

    def _parse_class(self, doc_raw: str | None, exported: bool) -> None:
        self._expect("class")
        name = ""
        if self.tok.kind == IDENT and self.tok.value not in {"extends", "implements"}:
            name = self._advance().value
        type_params = self._parse_type_params() if self._is("<") else []
        extends = None
        implements: list[str] = []
        if self._accept("extends"):
            extends = self._read_type({"{", "implements"}) or None
        if self._accept("implements"):
            while True:
                implements.append(self._read_type({"{", ","}))
                if not self._accept(","):
                    break
        cls = ClassDecl(
            name=name,
            file_name=self.file_name,
            doc=parse_jsdoc(doc_raw),
            extends=extends,
            implements=[i for i in implements if i],
            type_parameters=type_params,
            is_exported=exported,
        )
        self._parse_class_body(cls)
        cls.apply_class_doc()
        if name:
            self.declarations.append(cls)

    def _parse_class_body(self, cls: ClassDecl) -> None:
        self._expect("{")
        while not self._is("}"):
            if self.tok.kind == EOF:
                raise self._error(f"unterminated body of class {cls.name}")
            if self._accept(";"):
                continue
            self._parse_class_member(cls)
        self._expect("}")

    def _member_modifiers(self) -> list[str]:
        modifiers: list[str] = []
        while (
            self.tok.kind == IDENT
            and self.tok.value in CLASS_MODIFIERS
            and not (
                self._peek().kind == PUNCT
                and self._peek().value in NOT_A_MODIFIER_BEFORE
            )
            and not self._peek().newline_before
        ):
            modifiers.append(self._advance().value)
        return modifiers

    def _parse_class_member(self, cls: ClassDecl) -> None:
        doc_raw = self.tok.doc
        self._skip_decorators()
        doc_raw = doc_raw or self.tok.doc
        if self._is("static") and self._matches(self._peek(), "{"):
            self._advance()
            self._skip_block()
            return
        modifiers = self._member_modifiers()
        self._accept("*")
        if self._is("["):
            if self._peek().kind == IDENT and self._matches(self._peek(2), ":"):
                # index signature
                self._skip_balanced()
                self._skip_expression({";"})
                self._accept(";")
                return
            start = self.pos
            self._skip_balanced()
            name = self._slice(start, self.pos)
        else:
            name = self._expect_name()
        optional = self._accept("?")
        self._accept("!")

        doc = parse_jsdoc(doc_raw)
        visibility = next((m for m in modifiers if m in VISIBILITY_MODIFIERS), None)
        if visibility is None:
            visibility = PRIVATE if name.startswith("#") else doc.visibility
        is_static = "static" in modifiers
        is_async = "async" in modifiers or doc.is_async

        if self._is("(") or self._is("<"):
            if self._is("<"):
                self._parse_type_params()
            params, param_props = self._parse_params()
            return_type = self._read_return_type({"{", ";"})
            if self._is("{"):
                self._skip_block()
            else:
                self._accept(";")
            is_setter = "set" in modifiers
            cls.add_method(
                MethodDecl(
                    name=name,
                    parameters=params,
                    return_type="void" if is_setter else return_type,
                    is_static=is_static,
                    is_async=is_async,
                    is_getter="get" in modifiers,
                    is_setter=is_setter,
                    visibility=visibility,
                    doc=doc,
                )
            )
            if name == "constructor":
                for prop in param_props:
                    cls.add_property(prop)
            return

        type_text = declared_type(doc) or "any"
        if self._accept(":"):
            type_text = self._read_type({";", "="}) or "any"
        initializer = None
        if self._accept("="):
            arrow = self._try_arrow()
            if arrow is not None:
                params, return_type, arrow_async = arrow
                self._skip_expression({";"})
                self._accept(";")
                cls.add_method(
                    MethodDecl(
                        name=name,
                        parameters=params,
                        return_type=return_type,
                        is_static=is_static,
                        is_async=is_async or arrow_async,
                        visibility=visibility,
                        doc=doc,
                    )
                )
                return
            start = self.pos
            self._skip_expression({";"})
            initializer = self._slice(start, self.pos)
        self._accept(";")
        cls.add_property(
            PropertyDecl(
                name=name,
                type=type_text,
                is_static=is_static,
                is_readonly="readonly" in modifiers,
                is_optional=optional,
                initializer=initializer,
                visibility=visibility,
                doc=doc,
            )
        )

    def _parse_interface(self, doc_raw: str | None, exported: bool) -> None:
        self._expect("interface")
        name = self._advance().value
        type_params = self._parse_type_params() if self._is("<") else []
        extends: list[str] = []
        if self._accept("extends"):
            while True:
                extends.append(self._read_type({"{", ","}))
                if not self._accept(","):
                    break
        iface = InterfaceDecl(
            name=name,
            file_name=self.file_name,
            doc=parse_jsdoc(doc_raw),
            extends=[e for e in extends if e],
            type_parameters=type_params,
            is_exported=exported,
        )
        self._expect("{")
        while not self._is("}"):
            if self.tok.kind == EOF:
                raise self._error(f"unterminated body of interface {name}")
            if self._accept(";") or self._accept(","):
                continue
            self._parse_type_member(iface)
        self._expect("}")
        self.declarations.append(iface)

    def _parse_type_member(self, iface: InterfaceDecl) -> None:
        doc_raw = self.tok.doc
        readonly = False
        if self._is("readonly") and self._peek().value not in NOT_A_MODIFIER_BEFORE:
            self._advance()
            readonly = True
        if self._is("(") or self._is("<") or (
            self._is("new") and self._peek().value in {"(", "<"}
        ):
            # call or construct signature
            self._skip_expression({";", ","})
            return
        if self._is("["):
            if self._peek().kind == IDENT and self._matches(self._peek(2), ":"):
                self._skip_balanced()
                self._skip_expression({";", ","})
                return
            start = self.pos
            self._skip_balanced()
            name = self._slice(start, self.pos)
        else:
            if self.tok.value in {"get", "set"} and self._peek().kind == IDENT:
                self._advance()
            name = self._expect_name()
        optional = self._accept("?")
        doc = parse_jsdoc(doc_raw)
        if self._is("(") or self._is("<"):
            if self._is("<"):
                self._parse_type_params()
            params, _ = self._parse_params()
            return_type = self._read_return_type({";", ","})
            iface.methods.append(
                MethodDecl(name=name, parameters=params, return_type=return_type, doc=doc)
            )
            return
        type_text = "any"
        if self._accept(":"):
            type_text = self._read_type({";", ","}) or "any"
        iface.properties.append(
            PropertyDecl(
                name=name,
                type=type_text,
                is_readonly=readonly,
                is_optional=optional,
                doc=doc,
            )
        )

    def _parse_type_alias(self, doc_raw: str | None, exported: bool) -> None:
        self._expect("type")
        name = self._advance().value
        type_params = self._parse_type_params() if self._is("<") else []
        self._expect("=")
        type_text = self._read_type({";"})
        self._accept(";")
        self.declarations.append(
            TypeAliasDecl(
                name=name,
                file_name=self.file_name,
                doc=parse_jsdoc(doc_raw),
                type=type_text or "any",
                type_parameters=type_params,
                is_exported=exported,
            )
        )

    def _parse_enum(self, doc_raw: str | None, exported: bool) -> None:
        is_const = self._accept("const")
        self._expect("enum")
        name = self._advance().value
        members: list[EnumMember] = []
        self._expect("{")
        while not self._is("}"):
            if self.tok.kind == EOF:
                raise self._error(f"unterminated body of enum {name}")
            if self._accept(","):
                continue
            member_doc = self.tok.doc
            member_name = self._expect_name()
            value = None
            if self._accept("="):
                start = self.pos
                self._skip_expression({","}, newline_ends=False)
                value = self._slice(start, self.pos)
            members.append(
                EnumMember(name=member_name, value=value, doc=parse_jsdoc(member_doc))
            )
        self._expect("}")
        self.declarations.append(
            EnumDecl(
                name=name,
                file_name=self.file_name,
                doc=parse_jsdoc(doc_raw),
                members=members,
                is_const=is_const,
                is_exported=exported,
            )
        )

    def _parse_variables(self, doc_raw: str | None, exported: bool) -> None:
        self._advance()
        first = True
        while True:
            declarator_doc = doc_raw if first else self.tok.doc
            first = False
            name = None
            if self._is("{") or self._is("["):
                self._skip_group()
            else:
                name = self._expect_name()
            self._accept("!")
            type_text = None
            if self._accept(":"):
                type_text = self._read_type({"=", ",", ";"}) or None
            if self._accept("="):
                self._parse_initializer(name, type_text, declarator_doc, exported)
            elif name:
                self.declarations.append(
                    ConstantDecl(
                        name=name,
                        file_name=self.file_name,
                        doc=parse_jsdoc(declarator_doc),
                        type=type_text,
                        is_exported=exported,
                    )
                )
            if not self._accept(","):
                break
        self._accept(";")

    def _parse_initializer(
        self,
        name: str | None,
        type_text: str | None,
        doc_raw: str | None,
        exported: bool,
    ) -> None:
        start = self.pos
        arrow = self._try_arrow()
        if arrow is not None:
            params, return_type, is_async = arrow
            self._skip_expression({",", ";"})
            if name:
                self._add_function(
                    name,
                    doc_raw,
                    params,
                    return_type,
                    is_async=is_async,
                    type_parameters=[],
                    exported=exported,
                )
            return

        if self._is("function") or (
            self._is("async") and self._matches(self._peek(), "function")
        ):
            is_async = self._accept("async")
            self._advance()
            self._accept("*")
            if self.tok.kind == IDENT:
                self._advance()
            type_params = self._parse_type_params() if self._is("<") else []
            params, _ = self._parse_params()
            return_type = self._read_return_type({"{"})
            self._skip_expression({",", ";"})
            if name:
                self._add_function(
                    name,
                    doc_raw,
                    params,
                    return_type,
                    is_async=is_async,
                    type_parameters=type_params,
                    exported=exported,
                )
            return

        if (
            self.tok.kind == IDENT
            and self.tok.value not in LITERAL_IDENTS
            and self._ends_initializer(self._peek())
        ):
            target = self._advance().value
            if name:
                self.declarations.append(
                    FunctionLikeDecl(
                        name=name,
                        file_name=self.file_name,
                        doc=parse_jsdoc(doc_raw),
                        kind=classify_function_kind(name, ALIAS_EXPORT),
                        alias_of=target,
                        is_exported=exported,
                    )
                )
            return

        self._skip_expression({",", ";"})
        if not name:
            return
        value = self._slice(start, self.pos)
        doc = parse_jsdoc(doc_raw)
        kind = classify_function_kind(name, VALUE_EXPORT)
        if kind is None:
            self.declarations.append(
                ConstantDecl(
                    name=name,
                    file_name=self.file_name,
                    doc=doc,
                    type=type_text or declared_type(doc),
                    value=value or None,
                    is_exported=exported,
                )
            )
            return
        self.declarations.append(
            FunctionLikeDecl(
                name=name,
                file_name=self.file_name,
                doc=doc,
                kind=kind,
                parameters=[],
                return_type=type_text or "any",
                is_exported=exported,
            )
        )


def parse_source(
    text: str,
    file_name: str = "",
    *,
    ambient: bool | None = None,
    docs_only: bool = False,
) -> ParsedSource:
    """Parse JS/TS source text into declarations.

    Raises SourceParseError for malformed input such as unbalanced braces or
    unterminated comments and template literals.
    """
    return SourceParser(text, file_name, ambient=ambient, docs_only=docs_only).parse()


def finalize_exports(
    declarations: list[SourceDeclaration],
    exported_names: set[str],
    renamed_exports: list[tuple[str, str]],
    file_name: str,
    *,
    docs_only: bool = False,
) -> None:
    """Mark declarations exported by name and record ``export { a as b }`` aliases.

    In a documentation-only file every documented declaration counts as exported.
    A renamed export of a local class, interface or constant is only marked,
    while one of a function-like (or of a name imported from elsewhere) becomes
    an alias resolved later by name.
    """
    for decl in declarations:
        if decl.name in exported_names or (docs_only and not decl.doc.is_empty):
            decl.is_exported = True
    by_name = {d.name: d for d in declarations}
    for local, exported_as in renamed_exports:
        target = by_name.get(local)
        if target is not None and not isinstance(target, FunctionLikeDecl):
            continue
        declarations.append(
            FunctionLikeDecl(
                name=exported_as,
                file_name=file_name,
                kind=classify_function_kind(exported_as, ALIAS_EXPORT),
                alias_of=local,
                is_exported=True,
            )
        )
