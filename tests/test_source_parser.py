"""Tests for the declaration parser."""

import pytest

from jsdoc_mdx.errors import SourceParseError
from jsdoc_mdx.models import (
    PRIVATE,
    PROTECTED,
    ClassDecl,
    ConstantDecl,
    EnumDecl,
    FunctionKind,
    FunctionLikeDecl,
    InterfaceDecl,
    TypeAliasDecl,
)
from jsdoc_mdx.source_parser import parse_source

COUNTER_SOURCE = """
/**
 * Represents a counter.
 * @param {number} [start=0] - initial value
 * @returns {Counter} a new counter
 * @example
 * const c = new Counter(5);
 */
class Counter { constructor(start) {} }
"""


def _by_name(text: str, file_name: str = "mod.ts", **kwargs: bool) -> dict:
    return {d.name: d for d in parse_source(text, file_name, **kwargs).declarations}


def test_counter_class_doc_flows_to_constructor() -> None:
    """Test that class-level params, returns and examples document the constructor."""
    parsed = parse_source(COUNTER_SOURCE, "counter.js")
    assert len(parsed.declarations) == 1
    cls = parsed.declarations[0]
    assert isinstance(cls, ClassDecl)
    assert cls.name == "Counter"
    assert cls.doc.description == "Represents a counter."
    assert not cls.is_exported

    ctor = cls.constructor
    assert ctor is not None
    assert ctor.name == "constructor"
    assert cls.methods == []
    param = ctor.doc.params[0]
    assert (param.name, param.type, param.optional, param.default, param.description) == (
        "start",
        "number",
        True,
        "0",
        "initial value",
    )
    assert ctor.doc.returns is not None
    assert (ctor.doc.returns.type, ctor.doc.returns.description) == ("Counter", "a new counter")
    assert [(e.caption, e.code) for e in ctor.doc.examples] == [
        ("", "const c = new Counter(5);")
    ]


def test_class_members_are_partitioned() -> None:
    """Test static/instance buckets, visibility and TS parameter properties."""
    source = """
export class Store<T> extends Base implements Disposable {
  /** Count of stores. */
  static count: number = 0;
  #secret = 1;
  protected name?: string;
  constructor(private readonly id: string) {}
  /**
   * Get an item.
   * @param key - the key
   */
  get(key: string): T | undefined { return undefined; }
  static create(): Store<any> { return new Store(); }
  handler = (e: Event) => { this.last = e; };
  get size(): number { return 0; }
}
"""
    cls = _by_name(source)["Store"]
    assert cls.is_exported
    assert cls.extends == "Base"
    assert cls.implements == ["Disposable"]
    assert cls.type_parameters == ["T"]

    assert [p.name for p in cls.static_properties] == ["count"]
    assert cls.static_properties[0].type == "number"
    assert cls.static_properties[0].initializer == "0"
    assert [p.name for p in cls.properties] == ["#secret", "name", "id"]
    props = {p.name: p for p in cls.properties}
    assert props["#secret"].visibility == PRIVATE
    assert props["name"].visibility == PROTECTED
    assert props["name"].is_optional
    assert props["id"].visibility == PRIVATE
    assert props["id"].is_readonly

    assert [m.name for m in cls.static_methods] == ["create"]
    assert cls.static_methods[0].return_type == "Store<any>"
    assert [m.name for m in cls.methods] == ["get", "handler", "size"]
    methods = {m.name: m for m in cls.methods}
    assert methods["get"].return_type == "T | undefined"
    assert methods["get"].doc.summary == "Get an item."
    assert methods["size"].is_getter
    assert methods["handler"].parameters[0].type == "Event"


def test_string_brace_in_method_body() -> None:
    """Test that a quoted brace in a method body keeps later members intact."""
    source = """
export class Widget {
  /** Reset the widget. */
  reset() { this.x = "{"; }
  /** Draw the widget. */
  draw() { return '}'; }
}
/** Helper after the class. */
export function after() {}
"""
    decls = _by_name(source, "widget.js")
    assert [m.name for m in decls["Widget"].methods] == ["reset", "draw"]
    assert decls["Widget"].methods[1].doc.description == "Draw the widget."
    assert decls["after"].doc.description == "Helper after the class."


def test_init_fills_constructor_slot() -> None:
    """Test that init() documents construction when there is no constructor."""
    source = """
export class Model {
  /** Set up state. */
  init(options) {}
  static create(options) {}
}
"""
    cls = _by_name(source, "model.js")["Model"]
    assert cls.constructor is not None
    assert cls.constructor.name == "init"
    assert [m.name for m in cls.static_methods] == ["create"]
    assert cls.methods == []


def test_functions_hooks_and_components() -> None:
    """Test function-like classification by name and initializer."""
    source = """
/** Plain. */
export function doThing(a, b = 2, ...rest) {}
/** Hook. */
export const useThing = async (id) => id;
/** Component. */
export const Button = ({ label }) => null;
/** Styled component. */
export const Panel = styled.div``;
export const MAX_SIZE = 10;
/** @type {number} */
export let limit = 5;
"""
    decls = _by_name(source, "mod.jsx")
    fn = decls["doThing"]
    assert fn.kind == FunctionKind.FUNCTION
    assert [(p.name, p.optional, p.default, p.is_rest) for p in fn.parameters] == [
        ("a", False, None, False),
        ("b", True, "2", False),
        ("rest", False, None, True),
    ]
    assert decls["useThing"].kind == FunctionKind.HOOK
    assert decls["useThing"].is_async
    assert decls["Button"].kind == FunctionKind.COMPONENT
    assert decls["Button"].parameters[0].name == "{ label }"
    assert decls["Panel"].kind == FunctionKind.COMPONENT
    assert isinstance(decls["MAX_SIZE"], ConstantDecl)
    assert decls["MAX_SIZE"].value == "10"
    assert decls["limit"].type == "number"


def test_export_forms() -> None:
    """Test export lists, renames, re-exports and default exports."""
    source = """
/** B. */
function b() {}
function c() {}
class Foo {}
function local() {}
export { b, c as see, Foo as Bar };
export { other } from './other';
export default local;
"""
    parsed = parse_source(source, "mod.js")
    decls = {d.name: d for d in parsed.declarations}
    assert decls["b"].is_exported
    assert decls["c"].is_exported
    assert decls["Foo"].is_exported
    assert decls["local"].is_exported
    assert "other" not in parsed.exported_names
    assert "Bar" not in decls
    alias = decls["see"]
    assert isinstance(alias, FunctionLikeDecl)
    assert alias.alias_of == "c"
    assert alias.is_exported


def test_alias_assignment() -> None:
    """Test that a bare identifier initializer records an alias."""
    decls = _by_name("function useFoo() {}\nexport const useBar = useFoo;\n", "hooks.js")
    alias = decls["useBar"]
    assert alias.alias_of == "useFoo"
    assert alias.kind == FunctionKind.HOOK
    assert not decls["useFoo"].is_exported


def test_commonjs_exports() -> None:
    """Test module.exports objects and exports.name assignments."""
    source = """
/** Adds. */
function add(a, b) { return a + b; }
/** Subtracts. */
function sub(a, b) { return a - b; }
function hidden() {}
/** Multiplies. */
function mul(a, b) { return a * b; }
module.exports = { add, subtract: sub };
exports.mul = mul;
"""
    decls = _by_name(source, "math.js")
    assert decls["add"].is_exported
    assert decls["sub"].is_exported
    assert decls["mul"].is_exported
    assert not decls["hidden"].is_exported


def test_overloads_collapse() -> None:
    """Test that overload signatures produce one documented function."""
    source = """
export function f(a: string): string;
export function f(a: number): number;
/** Does f. */
export function f(a: any): any { return a; }
"""
    parsed = parse_source(source, "f.ts")
    assert len(parsed.declarations) == 1
    assert parsed.declarations[0].doc.description == "Does f."
    assert parsed.declarations[0].is_exported


def test_interface_type_alias_and_enum() -> None:
    """Test TypeScript-only declarations."""
    source = """
/** Options. */
export interface Options<T> extends Base {
  /** The name. */
  readonly name: string;
  count?: number;
  /** Runs it. */
  run(x: number): void;
  [key: string]: unknown;
}
/** An id. */
export type Id = string | number;
/** Colors. */
export enum Color {
  Red = "red",
  /** Green color. */
  Green,
}
"""
    decls = _by_name(source)
    iface = decls["Options"]
    assert isinstance(iface, InterfaceDecl)
    assert iface.extends == ["Base"]
    assert iface.type_parameters == ["T"]
    assert [(p.name, p.type, p.is_readonly, p.is_optional) for p in iface.properties] == [
        ("name", "string", True, False),
        ("count", "number", False, True),
    ]
    assert iface.methods[0].name == "run"
    assert iface.methods[0].return_type == "void"

    alias = decls["Id"]
    assert isinstance(alias, TypeAliasDecl)
    assert alias.type == "string | number"

    enum = decls["Color"]
    assert isinstance(enum, EnumDecl)
    assert [(m.name, m.value) for m in enum.members] == [("Red", '"red"'), ("Green", None)]
    assert enum.members[1].doc.description == "Green color."


def test_declaration_file_is_ambient() -> None:
    """Test that everything in a .d.ts file counts as exported."""
    source = """
declare class Session { leave(): Promise<void>; }
declare namespace Multisynq {
  /** Joins. */
  function join(options: object): Promise<Session>;
}
"""
    decls = _by_name(source, "types.d.ts")
    assert decls["Session"].is_exported
    assert decls["Session"].methods[0].return_type == "Promise<void>"
    assert decls["join"].is_exported


def test_docs_only_marks_documented() -> None:
    """Test that a documentation-only file exports what it documents."""
    source = "/** Documented. */\nfunction shown() {}\nfunction bare() {}\n"
    decls = _by_name(source, "doc.js", docs_only=True)
    assert decls["shown"].is_exported
    assert not decls["bare"].is_exported


def test_unbalanced_source_raises() -> None:
    """Test that unbalanced braces are reported as a parse error."""
    with pytest.raises(SourceParseError):
        parse_source("class Broken {\n  method() {\n", "broken.ts")
