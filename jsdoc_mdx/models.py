"""Data model for extracted documentation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

PUBLIC = "public"
PROTECTED = "protected"
PRIVATE = "private"


@dataclass
class Param:
    """A function or method parameter, from a signature or a ``@param`` tag."""

    name: str
    type: str = "any"
    optional: bool = False
    default: str | None = None
    description: str = ""
    is_rest: bool = False


@dataclass
class ReturnInfo:
    type: str = "any"
    description: str = ""


@dataclass
class ThrowsInfo:
    type: str = "Error"
    description: str = ""


@dataclass
class Example:
    caption: str = ""
    code: str = ""


@dataclass
class ParsedJSDoc:
    """Structured content of one ``/** ... */`` block."""

    description: str = ""
    summary: str = ""
    params: list[Param] = field(default_factory=list)
    returns: ReturnInfo | None = None
    examples: list[Example] = field(default_factory=list)
    tutorials: list[str] = field(default_factory=list)
    since: str | None = None
    deprecated: str | bool | None = None
    throws: list[ThrowsInfo] = field(default_factory=list)
    see: list[str] = field(default_factory=list)
    fires: list[str] = field(default_factory=list)
    listens: list[str] = field(default_factory=list)
    todos: list[str] = field(default_factory=list)
    visibility: str = PUBLIC
    is_async: bool = False
    hide_constructor: bool = False
    ignored: bool = False
    namespace: str | None = None
    member_of: str | None = None
    extends: str | None = None
    templates: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)
    mixes: list[str] = field(default_factory=list)
    properties: list[Param] = field(default_factory=list)
    extra_tags: dict[str, list[str]] = field(default_factory=dict)
    # True when an explicit @public/@private/@protected tag was present
    has_visibility_tag: bool = False

    @property
    def is_empty(self) -> bool:
        return not (
            self.description
            or self.params
            or self.returns
            or self.examples
            or self.see
            or self.extra_tags
        )


@dataclass
class MethodDecl:
    name: str
    parameters: list[Param] = field(default_factory=list)
    return_type: str = "any"
    is_static: bool = False
    is_async: bool = False
    is_getter: bool = False
    is_setter: bool = False
    visibility: str = PUBLIC
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)


@dataclass
class PropertyDecl:
    name: str
    type: str = "any"
    is_static: bool = False
    is_readonly: bool = False
    is_optional: bool = False
    initializer: str | None = None
    visibility: str = PUBLIC
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)


def _prefer_documented(existing: MethodDecl, candidate: MethodDecl) -> MethodDecl:
    if not existing.doc.description and candidate.doc.description:
        return candidate
    return existing


@dataclass
class ClassDecl:
    """A class with its members partitioned into static and instance buckets.

    ``constructor`` holds the ``constructor`` member, or an ``init`` method when
    the class has no constructor. Neither is ever also listed in ``methods``.
    """

    name: str
    file_name: str = ""
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)
    extends: str | None = None
    implements: list[str] = field(default_factory=list)
    type_parameters: list[str] = field(default_factory=list)
    constructor: MethodDecl | None = None
    methods: list[MethodDecl] = field(default_factory=list)
    static_methods: list[MethodDecl] = field(default_factory=list)
    properties: list[PropertyDecl] = field(default_factory=list)
    static_properties: list[PropertyDecl] = field(default_factory=list)
    is_exported: bool = False

    @property
    def hide_constructor(self) -> bool:
        return self.doc.hide_constructor

    def add_method(self, method: MethodDecl) -> None:
        """Place a method in the constructor slot or its static/instance bucket."""
        if not method.is_static and method.name == "constructor":
            current = self.constructor
            if current is None:
                self.constructor = method
            elif current.name == "init":
                self.constructor = method
                self._append_method(current)
            else:
                self.constructor = _prefer_documented(current, method)
            return
        if not method.is_static and method.name == "init" and self.constructor is None:
            self.constructor = method
            return
        self._append_method(method)

    def _append_method(self, method: MethodDecl) -> None:
        bucket = self.static_methods if method.is_static else self.methods
        for i, existing in enumerate(bucket):
            if (
                existing.name == method.name
                and existing.is_getter == method.is_getter
                and existing.is_setter == method.is_setter
            ):
                # overload signature
                bucket[i] = _prefer_documented(existing, method)
                return
        bucket.append(method)

    def add_property(self, prop: PropertyDecl) -> None:
        """Place a property in its static/instance bucket, keeping the first of a name."""
        bucket = self.static_properties if prop.is_static else self.properties
        if any(existing.name == prop.name for existing in bucket):
            return
        bucket.append(prop)

    def apply_class_doc(self) -> None:
        """Fold class-level tags into the structure.

        ``@extends``/``@implements``/``@template``/``@property`` fill gaps left by
        the syntax, and a constructor without its own params, returns or examples
        takes them from the class block.
        """
        doc = self.doc
        if self.extends is None and doc.extends:
            self.extends = doc.extends
        for name in doc.implements:
            if name not in self.implements:
                self.implements.append(name)
        if not self.type_parameters and doc.templates:
            self.type_parameters = list(doc.templates)
        for prop in doc.properties:
            if not self.has_member(prop.name):
                self.add_property(
                    PropertyDecl(
                        name=prop.name,
                        type=prop.type,
                        is_optional=prop.optional,
                        initializer=prop.default,
                        doc=ParsedJSDoc(description=prop.description),
                    )
                )
        ctor = self.constructor
        if ctor is None:
            return
        if not ctor.doc.params and doc.params:
            ctor.doc.params = list(doc.params)
        if ctor.doc.returns is None and doc.returns is not None:
            ctor.doc.returns = doc.returns
        if not ctor.doc.examples and doc.examples:
            ctor.doc.examples = list(doc.examples)

    def has_member(self, name: str) -> bool:
        buckets = (
            self.methods,
            self.static_methods,
            self.properties,
            self.static_properties,
        )
        return any(m.name == name for bucket in buckets for m in bucket)


@dataclass
class InterfaceDecl:
    name: str
    file_name: str = ""
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)
    extends: list[str] = field(default_factory=list)
    type_parameters: list[str] = field(default_factory=list)
    properties: list[PropertyDecl] = field(default_factory=list)
    methods: list[MethodDecl] = field(default_factory=list)
    is_exported: bool = False


class FunctionKind(str, Enum):
    FUNCTION = "function"
    HOOK = "hook"
    COMPONENT = "component"


@dataclass
class FunctionLikeDecl:
    """A standalone function, hook or component, possibly an alias of another."""

    name: str
    file_name: str = ""
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)
    kind: FunctionKind = FunctionKind.FUNCTION
    parameters: list[Param] = field(default_factory=list)
    return_type: str = "any"
    is_async: bool = False
    type_parameters: list[str] = field(default_factory=list)
    alias_of: str | None = None
    alias_resolved: bool = True
    is_exported: bool = False

    @property
    def is_alias(self) -> bool:
        return self.alias_of is not None


@dataclass
class TypeAliasDecl:
    name: str
    file_name: str = ""
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)
    type: str = "any"
    type_parameters: list[str] = field(default_factory=list)
    is_exported: bool = False


@dataclass
class EnumMember:
    name: str
    value: str | None = None
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)


@dataclass
class EnumDecl:
    name: str
    file_name: str = ""
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)
    members: list[EnumMember] = field(default_factory=list)
    is_const: bool = False
    is_exported: bool = False


@dataclass
class ConstantDecl:
    name: str
    file_name: str = ""
    doc: ParsedJSDoc = field(default_factory=ParsedJSDoc)
    type: str | None = None
    value: str | None = None
    is_exported: bool = False


@dataclass
class EventRef:
    """An event name gathered from ``@fires`` tags, with the members that emit it."""

    name: str
    emitters: list[str] = field(default_factory=list)


SourceDeclaration = Union[
    ClassDecl,
    InterfaceDecl,
    FunctionLikeDecl,
    TypeAliasDecl,
    EnumDecl,
    ConstantDecl,
]


@dataclass(frozen=True)
class ExtractionResult:
    """Immutable snapshot of everything extracted in one run."""

    classes: tuple[ClassDecl, ...] = ()
    interfaces: tuple[InterfaceDecl, ...] = ()
    hooks: tuple[FunctionLikeDecl, ...] = ()
    components: tuple[FunctionLikeDecl, ...] = ()
    functions: tuple[FunctionLikeDecl, ...] = ()
    types: tuple[TypeAliasDecl, ...] = ()
    enums: tuple[EnumDecl, ...] = ()
    constants: tuple[ConstantDecl, ...] = ()
    events: tuple[EventRef, ...] = ()
    files_processed: tuple[str, ...] = ()
    files_skipped: tuple[tuple[str, str], ...] = ()

    def counts(self) -> dict[str, int]:
        return {
            "classes": len(self.classes),
            "interfaces": len(self.interfaces),
            "hooks": len(self.hooks),
            "components": len(self.components),
            "functions": len(self.functions),
            "types": len(self.types),
            "enums": len(self.enums),
            "constants": len(self.constants),
            "events": len(self.events),
        }
