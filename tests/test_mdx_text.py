"""Tests for the MDX text helpers."""

from jsdoc_mdx.jsdoc_parser import parse_param
from jsdoc_mdx.mdx_text import (
    anchor_for,
    clean_example,
    detect_language,
    escape_html,
    format_description,
    format_param,
    format_see_also,
    frontmatter,
    md_codeblock,
    merge_params,
    render_link,
    signature_params,
    substitute_links,
)
from jsdoc_mdx.models import Param


def test_format_param_from_every_form() -> None:
    """Test that all @param layouts serialize to the same line."""
    forms = [
        "{number} count - how many",
        "count {number} - how many",
        "count:number - how many",
    ]
    assert {format_param(parse_param(f)) for f in forms} == {"count: number - how many"}


def test_escape_html() -> None:
    """Test escaping of markup characters."""
    assert escape_html(None) == ""
    assert escape_html("<a href=\"x\">'&'</a>") == (
        "&lt;a href=&quot;x&quot;&gt;&#39;&amp;&#39;&lt;/a&gt;"
    )


def test_anchor_for() -> None:
    """Test anchor normalization."""
    assert anchor_for("Model#create") == "modelcreate"
    assert anchor_for("Session.join") == "sessionjoin"
    assert anchor_for("my-anchor_1") == "my-anchor1"


def test_link_rendering() -> None:
    """Test inline link tags for members and URLs."""
    assert format_description("{@link Model#create}") == "[Model#create](#modelcreate)"
    assert (
        format_description("{@link https://example.com text}")
        == "[text](https://example.com)"
    )
    assert substitute_links("{@link Session|the session}") == "[the session](#session)"
    assert substitute_links("[docs]{@link https://x.io}") == "[docs](https://x.io)"
    assert render_link("View.update") == "[View.update](#viewupdate)"


def test_tutorial_links() -> None:
    """Test inline and bracketed tutorial tags."""
    assert substitute_links("{@tutorial intro}") == "[tutorial](/tutorials/intro)"
    assert substitute_links("[Start]{@tutorial intro}") == "[Start](/tutorials/intro)"


def test_format_description_escapes_braces_outside_code() -> None:
    """Test that braces are escaped in prose but not in code spans."""
    text = "Pass {a: 1} or `{b: 2}`."
    assert format_description(text) == "Pass \\{a: 1\\} or `{b: 2}`."
    assert format_description(None) == ""


def test_format_description_escapes_angle_brackets() -> None:
    """Test that generics in prose cannot open a JSX tag while code spans stay raw."""
    text = "Resolves a Promise<void>, see `Array<T>`."
    assert format_description(text) == "Resolves a Promise&lt;void>, see `Array<T>`."


def test_format_see_also() -> None:
    """Test link, URL, member reference and free text see-also entries."""
    assert format_see_also("{@link Model}") == "[Model](#model)"
    assert format_see_also("https://example.com Docs") == "[Docs](https://example.com)"
    assert format_see_also("Model#create") == "[Model#create](#modelcreate)"
    assert format_see_also("the session guide") == "`the session guide`"


def test_clean_example_and_language() -> None:
    """Test example trimming and fence language detection."""
    assert clean_example("\n    a();\n      b();\n\n") == "a();\n  b();"
    assert detect_language("<Counter value={1} />") == "jsx"
    assert detect_language("const x = useModel();") == "jsx"
    assert detect_language("let n: number = 1;") == "typescript"
    assert detect_language("const n = 1;") == "javascript"


def test_md_codeblock() -> None:
    """Test code block generation."""
    assert md_codeblock("typescript", "let x = 1;") == "```typescript\nlet x = 1;\n```"
    assert md_codeblock("js", "f()\n", "Title") == "```js Title\nf()\n```"


def test_frontmatter() -> None:
    """Test YAML frontmatter keeps key order and quotes when needed."""
    assert frontmatter({"title": "Counter", "icon": "cube"}) == (
        "---\ntitle: Counter\nicon: cube\n---"
    )
    assert "description: 'Note: counts'" in frontmatter({"description": "Note: counts"})


def test_merge_params() -> None:
    """Test combining documented params with the declared signature."""
    doc_params = [
        Param(name="options", type="Object", description="Options"),
        Param(name="options.name", type="string", description="The name"),
        Param(name="count", description="How many"),
    ]
    signature = [
        Param(name="options"),
        Param(name="count", type="number", optional=True, default="1"),
        Param(name="extra", type="boolean"),
    ]
    merged = merge_params(doc_params, signature)
    assert [p.name for p in merged] == ["options", "options.name", "count", "extra"]
    count = merged[2]
    assert (count.type, count.optional, count.default) == ("number", True, "1")
    assert signature_params(merged) == (
        "options: Object, count?: number, extra: boolean"
    )


def test_signature_params_rest() -> None:
    """Test rest parameters in signatures."""
    params = [Param(name="args", type="string[]", is_rest=True, optional=True)]
    assert signature_params(params) == "...args: string[]"
