"""Parse ``/** ... */`` comment blocks into ParsedJSDoc records.

The grammar follows the JSDoc tag subset used by hand-written SDK sources:
free description text, then ``@tag`` blocks that run until the next tag line.
"""

import re
import textwrap
from collections.abc import Callable

from jsdoc_mdx.models import (
    PRIVATE,
    PROTECTED,
    PUBLIC,
    Example,
    Param,
    ParsedJSDoc,
    ReturnInfo,
    ThrowsInfo,
)

TAG_LINE_RE = re.compile(r"^@(\w+)(?:\s+(.*))?$")
MARGIN_RE = re.compile(r"^\s*\*(?!/)\s?")
OPEN_RE = re.compile(r"^\s*/\*\*+")
CLOSE_RE = re.compile(r"\*+/\s*$")
CAPTION_RE = re.compile(r"^<caption>(.*?)</caption>\s*(.*)$", re.DOTALL)
OPTIONAL_NAME_RE = re.compile(r"^\[([^\]=\s]+)(?:\s*=\s*([^\]]*))?\]\s*(.*)$")
NAME_REST_RE = re.compile(r"^(\S+)\s*(.*)$")
NAME_THEN_TYPE_RE = re.compile(r"^(\S+)\s+(\{.*)$")
NAME_COLON_TYPE_RE = re.compile(r"^([^\s:{]+):(\S+)\s*(.*)$")
LEADING_DASH_RE = re.compile(r"^-\s*")
SENTENCE_RE = re.compile(r"^(.+?[.!?])(?=\s|$)")
SUMMARY_LIMIT = 150

TITLE_BLOCKERS = set("{(;=<>")
CODE_STARTS = ("//", "/*", "@", "import ", "export ", "const ", "let ", "var ", "await ")

TAG_ALIASES = {
    "arg": "param",
    "argument": "param",
    "parameter": "param",
    "return": "returns",
    "exception": "throws",
    "emits": "fires",
    "memberOf": "memberof",
    "augments": "extends",
    "prop": "property",
    "desc": "description",
    "internal": "ignore",
    "hidden": "ignore",
}


def split_braced_type(text: str) -> tuple[str, str] | None:
    """Split ``{Type} rest`` into ``(Type, rest)``, honoring nested braces."""
    if not text.startswith("{"):
        return None
    depth = 0
    for i, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[1:i].strip(), text[i + 1 :].strip()
    return None


def strip_comment_delimiters(raw: str) -> list[str]:
    """Remove ``/**``, ``*/`` and the `` * `` margin, returning the content lines."""
    text = OPEN_RE.sub("", raw.strip(), count=1)
    text = CLOSE_RE.sub("", text, count=1)
    return [MARGIN_RE.sub("", line, count=1).rstrip() for line in text.splitlines()]


def extract_summary(description: str) -> str:
    """Return the first sentence of the first paragraph, or a truncated prefix."""
    text = description.strip()
    if not text:
        return ""
    paragraph = re.split(r"\n\s*\n", text, maxsplit=1)[0]
    paragraph = " ".join(paragraph.split())
    m = SENTENCE_RE.match(paragraph)
    if m:
        return m.group(1)
    if len(paragraph) > SUMMARY_LIMIT:
        return paragraph[: SUMMARY_LIMIT - 3].rstrip() + "..."
    return paragraph


def _join_continuation(lines: list[str]) -> str:
    return "\n".join(line.strip() for line in lines).strip()


def _make_param(
    raw_name: str,
    type_text: str,
    description: str,
    *,
    optional: bool = False,
    default: str | None = None,
) -> Param:
    name = raw_name.strip()
    is_rest = False
    if name.startswith("[") and name.endswith("]"):
        name = name[1:-1]
        optional = True
    if "=" in name:
        name, default = name.split("=", 1)
        optional = True
    if name.endswith("?"):
        name = name[:-1]
        optional = True
    if name.startswith("..."):
        name = name[3:]
        is_rest = True
    type_text = type_text.strip()
    if type_text.endswith("="):
        type_text = type_text[:-1]
        optional = True
    if type_text.startswith("..."):
        type_text = type_text[3:]
        is_rest = True
    if default is not None:
        default = default.strip()
    return Param(
        name=name,
        type=type_text or "any",
        optional=optional,
        default=default,
        description=LEADING_DASH_RE.sub("", description.strip(), count=1),
        is_rest=is_rest,
    )


def _parse_param_head(head: str) -> Param:
    braced = split_braced_type(head)
    if braced:
        type_text, rest = braced
        m = OPTIONAL_NAME_RE.match(rest)
        if m:
            return _make_param(m[1], type_text, m[3], optional=True, default=m[2])
        m = NAME_REST_RE.match(rest)
        if m:
            return _make_param(m[1], type_text, m[2])
        return _make_param("", type_text, "")

    m = NAME_THEN_TYPE_RE.match(head)
    if m:
        inner = split_braced_type(m[2])
        if inner:
            return _make_param(m[1], inner[0], inner[1])

    m = NAME_COLON_TYPE_RE.match(head)
    if m:
        return _make_param(m[1], m[2], m[3])

    m = OPTIONAL_NAME_RE.match(head)
    if m:
        return _make_param(m[1], "any", m[3], optional=True, default=m[2])

    m = NAME_REST_RE.match(head)
    if m:
        return _make_param(m[1], "any", m[2])
    return _make_param(head, "any", "")


def parse_param(content: str) -> Param:
    """Parse the content of a ``@param`` (or ``@property``) tag.

    Accepted forms, tried in order: ``{Type} [name=default] - desc``,
    ``{Type} name - desc``, ``name {Type} desc``, ``name:Type desc`` and
    ``name - desc``. Lines after the first continue the description.
    """
    first, _, more = content.strip().partition("\n")
    param = _parse_param_head(first.strip())
    continuation = _join_continuation(more.splitlines())
    if continuation:
        param.description = f"{param.description}\n{continuation}".strip()
    return param


def _parse_typed(content: str, default_type: str) -> tuple[str, str]:
    text = content.strip()
    braced = split_braced_type(text)
    if braced:
        type_text, rest = braced
        desc = _join_continuation(rest.splitlines())
        return type_text or default_type, LEADING_DASH_RE.sub("", desc, count=1)
    return default_type, _join_continuation(text.splitlines())


def parse_returns(content: str) -> ReturnInfo:
    type_text, desc = _parse_typed(content, "any")
    return ReturnInfo(type=type_text, description=desc)


def parse_throws(content: str) -> ThrowsInfo:
    type_text, desc = _parse_typed(content, "Error")
    return ThrowsInfo(type=type_text, description=desc)


def _trim_code(code: str) -> str:
    lines = [line.rstrip() for line in code.splitlines()]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return textwrap.dedent("\n".join(lines))


def _looks_like_title(line: str) -> bool:
    stripped = line.strip()
    if not stripped or any(ch in TITLE_BLOCKERS for ch in stripped):
        return False
    return not stripped.startswith(CODE_STARTS)


def parse_example(content: str) -> Example:
    """Split an ``@example`` block into caption and code."""
    text = _trim_code(content)
    m = CAPTION_RE.match(text.strip())
    if m:
        return Example(caption=m[1].strip(), code=_trim_code(m[2]))
    first, _, remainder = text.partition("\n")
    if remainder.strip() and _looks_like_title(first):
        return Example(caption=first.strip(), code=_trim_code(remainder))
    return Example(caption="", code=text)


def _split_names(content: str) -> list[str]:
    text = content.strip()
    braced = split_braced_type(text)
    if braced:
        text = braced[1] or braced[0]
    return [part.split()[0] for part in text.split(",") if part.strip()]


def _strip_braces(content: str) -> str:
    text = content.strip()
    braced = split_braced_type(text)
    if braced and not braced[1]:
        return braced[0]
    return text


def _set_visibility(doc: ParsedJSDoc, value: str) -> None:
    if value in {PUBLIC, PRIVATE, PROTECTED}:
        doc.visibility = value
        doc.has_visibility_tag = True


def _tag_handlers() -> dict[str, Callable[[ParsedJSDoc, str], None]]:
    def _append(attr: str) -> Callable[[ParsedJSDoc, str], None]:
        def handler(doc: ParsedJSDoc, content: str) -> None:
            value = content.strip()
            if value:
                getattr(doc, attr).append(value)

        return handler

    def _description(doc: ParsedJSDoc, content: str) -> None:
        doc.description = "\n\n".join(
            part for part in (doc.description, content.strip()) if part
        )

    def _returns(doc: ParsedJSDoc, content: str) -> None:
        doc.returns = parse_returns(content)

    def _deprecated(doc: ParsedJSDoc, content: str) -> None:
        doc.deprecated = _join_continuation(content.splitlines()) or True

    def _since(doc: ParsedJSDoc, content: str) -> None:
        doc.since = content.strip() or None

    def _flag(attr: str) -> Callable[[ParsedJSDoc, str], None]:
        def handler(doc: ParsedJSDoc, content: str) -> None:
            setattr(doc, attr, True)

        return handler

    def _text(attr: str) -> Callable[[ParsedJSDoc, str], None]:
        def handler(doc: ParsedJSDoc, content: str) -> None:
            setattr(doc, attr, _strip_braces(content) or None)

        return handler

    def _names(attr: str) -> Callable[[ParsedJSDoc, str], None]:
        def handler(doc: ParsedJSDoc, content: str) -> None:
            getattr(doc, attr).extend(_split_names(content))

        return handler

    return {
        "description": _description,
        "summary": lambda doc, content: setattr(doc, "summary", content.strip()),
        "param": lambda doc, content: doc.params.append(parse_param(content)),
        "property": lambda doc, content: doc.properties.append(parse_param(content)),
        "returns": _returns,
        "throws": lambda doc, content: doc.throws.append(parse_throws(content)),
        "example": lambda doc, content: doc.examples.append(parse_example(content)),
        "tutorial": _append("tutorials"),
        "see": _append("see"),
        "fires": _append("fires"),
        "listens": _append("listens"),
        "todo": _append("todos"),
        "deprecated": _deprecated,
        "since": _since,
        "public": lambda doc, content: _set_visibility(doc, PUBLIC),
        "private": lambda doc, content: _set_visibility(doc, PRIVATE),
        "protected": lambda doc, content: _set_visibility(doc, PROTECTED),
        "access": lambda doc, content: _set_visibility(doc, content.strip()),
        "async": _flag("is_async"),
        "hideconstructor": _flag("hide_constructor"),
        "ignore": _flag("ignored"),
        "namespace": _text("namespace"),
        "memberof": _text("member_of"),
        "extends": _text("extends"),
        "template": _names("templates"),
        "implements": lambda doc, content: doc.implements.append(
            _strip_braces(content)
        ),
        "mixes": _append("mixes"),
    }


TAG_HANDLERS = _tag_handlers()


def _normalize_tag(name: str) -> str:
    return TAG_ALIASES.get(name, TAG_ALIASES.get(name.lower(), name))


def parse_jsdoc(raw: str | None) -> ParsedJSDoc:
    """Parse a raw comment (with or without delimiters) into a ParsedJSDoc."""
    doc = ParsedJSDoc()
    if not raw:
        return doc

    description_lines: list[str] = []
    blocks: list[tuple[str, list[str]]] = []
    for line in strip_comment_delimiters(raw):
        m = TAG_LINE_RE.match(line.strip())
        if m:
            tag = _normalize_tag(m[1])
            in_example = bool(blocks) and blocks[-1][0] == "example"
            # decorators inside example code are not tags
            if not in_example or tag in TAG_HANDLERS:
                blocks.append((tag, [m[2] or ""]))
                continue
        if blocks:
            blocks[-1][1].append(line)
        else:
            description_lines.append(line)

    doc.description = "\n".join(description_lines).strip()
    for tag, lines in blocks:
        content = "\n".join(lines)
        handler = TAG_HANDLERS.get(tag)
        if handler is None:
            doc.extra_tags.setdefault(tag, []).append(content.strip())
        else:
            handler(doc, content)

    if not doc.summary:
        doc.summary = extract_summary(doc.description)
    return doc


def declared_type(doc: ParsedJSDoc) -> str | None:
    """Return the type named by a ``@type {T}`` tag, if any."""
    for content in doc.extra_tags.get("type", []):
        braced = split_braced_type(content)
        if braced:
            return braced[0]
        if content:
            return content
    return None
