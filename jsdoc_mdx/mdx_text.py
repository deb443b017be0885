"""Text helpers shared by the MDX renderers."""

import re
import textwrap

import yaml

from jsdoc_mdx.models import Param

URL_RE = re.compile(r"^(?:[a-zA-Z][\w+.-]*://|mailto:)")
CODE_SPAN_RE = re.compile(r"(```.*?```|`[^`\n]+`)", re.DOTALL)
BRACKET_LINK_RE = re.compile(r"\[([^\]]+)\]\{@link(?:code|plain)?\s+([^}|\s]+)[^}]*\}")
INLINE_LINK_RE = re.compile(r"\{@link(?:code|plain)?\s+([^}]+)\}")
BRACKET_TUTORIAL_RE = re.compile(r"\[([^\]]+)\]\{@tutorial\s+([^}\s]+)\s*\}")
INLINE_TUTORIAL_RE = re.compile(r"\{@tutorial\s+([^}\s]+)\s*\}")
MEMBER_REF_RE = re.compile(r"^[\w$]+(?:[#.~][\w$]+)*$")
JSX_RE = re.compile(r"<[A-Z][\w.]*[\s/>]|</[A-Za-z][\w.]*>|<>|\bimport React\b|\buse[A-Z]\w*\(")
TS_RE = re.compile(
    r"\binterface\s+\w+|\btype\s+\w+\s*=|\bas\s+const\b|\benum\s+\w+|"
    r"[\w)\]]\s*:\s*(?:string|number|boolean|any|void|unknown|never|Promise<)\b"
)


def escape_html(text: str | None) -> str:
    """Escape a string for use inside an HTML-flavored attribute or element."""
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def anchor_for(target: str) -> str:
    """Lowercase a link target and drop everything outside ``[a-z0-9-]``."""
    return re.sub(r"[^a-z0-9-]", "", target.lower())


def is_url(target: str) -> bool:
    return bool(URL_RE.match(target))


def render_link(target: str, text: str | None = None) -> str:
    """Render a markdown link to a URL or to an in-page anchor."""
    if is_url(target):
        return f"[{text or target}]({target})"
    return f"[{text or target}](#{anchor_for(target)})"


def tutorial_link(name: str, text: str | None = None) -> str:
    return f"[{text or 'tutorial'}](/tutorials/{name})"


def _inline_link(m: re.Match[str]) -> str:
    content = m[1].strip()
    if "|" in content:
        target, _, text = content.partition("|")
        return render_link(target.strip(), text.strip() or None)
    target, _, text = content.partition(" ")
    return render_link(target, text.strip() or None)


def substitute_links(text: str) -> str:
    """Replace ``{@link}`` and ``{@tutorial}`` tags with markdown links."""
    text = BRACKET_TUTORIAL_RE.sub(lambda m: tutorial_link(m[2], m[1]), text)
    text = INLINE_TUTORIAL_RE.sub(lambda m: tutorial_link(m[1]), text)
    text = BRACKET_LINK_RE.sub(lambda m: render_link(m[2], m[1]), text)
    return INLINE_LINK_RE.sub(_inline_link, text)


def _escape_mdx(text: str) -> str:
    text = re.sub(r"(?<!\\)([{}])", r"\\\1", text)
    return text.replace("<", "&lt;")


def format_description(text: str | None) -> str:
    """Prepare free text for MDX.

    Code spans and fenced blocks are left alone. Outside them, inline tags
    become links, remaining braces are escaped and ``<`` becomes ``&lt;`` so
    MDX treats neither as an expression or a tag.
    """
    if not text:
        return ""
    parts = CODE_SPAN_RE.split(text)
    out = []
    for i, part in enumerate(parts):
        if i % 2:
            out.append(part)
        else:
            out.append(_escape_mdx(substitute_links(part)))
    return "".join(out).strip()


def clean_example(code: str) -> str:
    """Trim blank edge lines and remove the common indentation."""
    lines = code.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return textwrap.dedent("\n".join(lines)).rstrip()


def detect_language(code: str) -> str:
    """Guess the fence language of an example: jsx, typescript or javascript."""
    if JSX_RE.search(code):
        return "jsx"
    if TS_RE.search(code):
        return "typescript"
    return "javascript"


def md_codeblock(lang: str, code: str, title: str | None = None) -> str:
    """Generate a Markdown code block."""
    info = f"{lang} {title}" if title else lang
    return f"""```{info}
{code.rstrip()}
```"""


def frontmatter(fields: dict[str, object]) -> str:
    """Render a YAML frontmatter block, keeping key order."""
    body = yaml.safe_dump(
        fields, sort_keys=False, width=1000, allow_unicode=True, default_flow_style=False
    )
    return f"---\n{body}---"


def format_param(param: Param) -> str:
    return f"{param.name}: {param.type} - {param.description}"


def format_see_also(entry: str) -> str:
    """Render one ``@see`` entry as a link or inline code."""
    entry = entry.strip()
    if "{@link" in entry or "{@tutorial" in entry:
        return substitute_links(entry)
    target, _, rest = entry.partition(" ")
    if is_url(target):
        return render_link(target, rest.strip() or None)
    if MEMBER_REF_RE.match(entry):
        return render_link(entry)
    return f"`{entry}`"


def _root_name(name: str) -> str:
    return name.split(".", 1)[0].removesuffix("[]")


def merge_params(doc_params: list[Param], signature: list[Param]) -> list[Param]:
    """Combine documented params with the declared signature.

    Documented params keep their order, and dotted names such as
    ``options.x`` stay as separate entries. Where the doc leaves the type as
    ``any`` the signature's type is used. Signature params the doc does not
    mention are appended.
    """
    by_name = {p.name: p for p in signature}
    merged: list[Param] = []
    documented_roots = set()
    for doc_param in doc_params:
        documented_roots.add(_root_name(doc_param.name))
        sig = by_name.get(doc_param.name)
        param = Param(
            name=doc_param.name,
            type=doc_param.type,
            optional=doc_param.optional,
            default=doc_param.default,
            description=doc_param.description,
            is_rest=doc_param.is_rest,
        )
        if sig is not None:
            if param.type == "any" and sig.type != "any":
                param.type = sig.type
            if sig.optional and not param.optional:
                param.optional = True
            if param.default is None:
                param.default = sig.default
            param.is_rest = param.is_rest or sig.is_rest
        merged.append(param)
    merged.extend(p for p in signature if _root_name(p.name) not in documented_roots)
    return merged


def signature_params(params: list[Param]) -> str:
    """Render a parameter list for a signature, collapsing dotted names."""
    parts = []
    seen = set()
    for p in params:
        root = _root_name(p.name)
        if not root or root in seen:
            continue
        seen.add(root)
        rest = "..." if p.is_rest else ""
        optional = "?" if p.optional and not p.is_rest else ""
        parts.append(f"{rest}{root}{optional}: {p.type}")
    return ", ".join(parts)
