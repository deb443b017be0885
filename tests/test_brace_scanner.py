"""Tests for scan-mode extraction of plain JavaScript."""

from collections.abc import Callable

import pytest

from jsdoc_mdx.brace_scanner import BraceScanner, scan_source, split_params
from jsdoc_mdx.errors import SourceParseError
from jsdoc_mdx.models import PRIVATE, ClassDecl, ConstantDecl, FunctionKind
from jsdoc_mdx.source_parser import ParsedSource, parse_source


def test_find_matching_brace_skips_strings_and_comments() -> None:
    """Test that braces in strings, templates and comments are not counted."""
    text = 'x { a = "{"; b = `}`; /* } */ // }\n c = \'\\\'{\'; }'
    scanner = BraceScanner(text)
    assert scanner.find_matching_brace(text.index("{")) == len(text) - 1


def test_find_matching_brace_unbalanced() -> None:
    """Test that a missing closing brace is a parse error."""
    with pytest.raises(SourceParseError):
        BraceScanner("class A {\n  m() {}\n", "a.js").find_matching_brace(8)


def test_top_level_doc_blocks_skip_nested() -> None:
    """Test that only depth-zero doc blocks are reported."""
    text = "/** a */ f() { /** inner */ } /** b */"
    blocks = BraceScanner(text).top_level_doc_blocks(0, len(text))
    assert [text[s:e] for s, e in blocks] == ["/** a */", "/** b */"]


def test_split_params() -> None:
    """Test top-level comma splitting with defaults and rest params."""
    params = split_params("a, { x, y } = {}, b = [1, 2], ...rest")
    assert [(p.name, p.default, p.is_rest) for p in params] == [
        ("a", None, False),
        ("{ x, y }", "{}", False),
        ("b", "[1, 2]", False),
        ("rest", None, True),
    ]
    assert split_params("") == []


def test_scan_class_with_string_brace() -> None:
    """Test that a quoted brace in a method body keeps later members intact."""
    source = """
/**
 * A widget.
 */
export class Widget extends Base {
  /** Reset the widget. */
  reset() { this.x = "{"; }

  /** Draw the widget. */
  static draw(ctx, scale = 1) { return '}'; }

  /** Current size. */
  size = 10;

  /** Hidden state. */
  #state = null;

  /** Click handler. */
  onClick = (event) => { this.clicked = true; };
}

/** After the class. */
export function after() {}
"""
    parsed = scan_source(source, "widget.js")
    decls = {d.name: d for d in parsed.declarations}
    cls = decls["Widget"]
    assert isinstance(cls, ClassDecl)
    assert cls.is_exported
    assert cls.extends == "Base"
    assert [m.name for m in cls.methods] == ["reset", "onClick"]
    assert [m.name for m in cls.static_methods] == ["draw"]
    assert [(p.name, p.default) for p in cls.static_methods[0].parameters] == [
        ("ctx", None),
        ("scale", "1"),
    ]
    props = {p.name: p for p in cls.properties}
    assert props["size"].initializer == "10"
    assert props["#state"].visibility == PRIVATE
    assert decls["after"].doc.description == "After the class."


def test_scan_constructor_gets_class_doc() -> None:
    """Test that the documented constructor receives the class params."""
    source = """
/**
 * Represents a counter.
 * @param {number} [start=0] - initial value
 */
class Counter {
  /** Build it. */
  constructor(start) {}
}
module.exports = Counter;
"""
    cls = scan_source(source, "counter.js").declarations[0]
    assert cls.is_exported
    assert cls.constructor is not None
    assert cls.constructor.doc.params[0].name == "start"
    assert cls.constructor.doc.params[0].default == "0"


def test_scan_variables_and_exports() -> None:
    """Test variable classification and the export forms scan mode recognizes."""
    source = """
/** Hook. */
const useThing = (id) => id;

/** Async helper. */
export const load = async function (url) {};

/** Alias. */
const useOther = useThing;

/** Limit. */
const LIMIT = 5;

/** Not exported. */
function helper() {}

export { useThing, useOther as useAlias };
module.exports = { LIMIT };
"""
    parsed = scan_source(source, "hooks.js")
    decls = {d.name: d for d in parsed.declarations}
    assert decls["useThing"].kind == FunctionKind.HOOK
    assert decls["useThing"].is_exported
    assert decls["load"].is_async
    assert decls["load"].parameters[0].name == "url"
    assert decls["useOther"].alias_of == "useThing"
    assert isinstance(decls["LIMIT"], ConstantDecl)
    assert decls["LIMIT"].value == "5"
    assert decls["LIMIT"].is_exported
    assert not decls["helper"].is_exported
    assert decls["useAlias"].alias_of == "useOther"


def test_scan_unterminated_comment_raises() -> None:
    """Test that an unterminated doc comment is a parse error."""
    with pytest.raises(SourceParseError):
        scan_source("/** never closed\nfunction f() {}\n", "bad.js")


def test_scan_literal_initializers_are_constants() -> None:
    """Test that number and boolean initializers are constants, not aliases."""
    source = "/** Limit. */\nexport const LIMIT = 5;\n/** Flag. */\nexport const ENABLED = true;\n"
    decls = {d.name: d for d in scan_source(source, "c.js").declarations}
    assert isinstance(decls["LIMIT"], ConstantDecl)
    assert isinstance(decls["ENABLED"], ConstantDecl)
    assert decls["ENABLED"].value == "true"


SETTINGS_JS = """
/** Settings. */
export class Settings {
  /** Frozen options. */
  options = Object.freeze({ a: 1 });

  /** Computed label. */
  label = String(1);

  /** Legacy handler. */
  legacy = function (event) { return event; };

  /** Click handler. */
  onClick = (event) => { this.clicked = true; };

  /** Reset. */
  reset() {}
}
"""


@pytest.mark.parametrize("parse", [scan_source, parse_source])
def test_member_rule_matches_in_both_modes(parse: Callable[..., ParsedSource]) -> None:
    """Test that calls in field initializers do not turn fields into methods."""
    cls = parse(SETTINGS_JS, "settings.js").declarations[0]
    assert [m.name for m in cls.methods] == ["onClick", "reset"]
    assert [p.name for p in cls.properties] == ["options", "label", "legacy"]
