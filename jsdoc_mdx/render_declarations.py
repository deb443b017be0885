"""Logic for rendering declaration bodies as MDX."""

from jsdoc_mdx.mdx_text import (
    anchor_for,
    clean_example,
    detect_language,
    escape_html,
    format_description,
    format_see_also,
    md_codeblock,
    merge_params,
    render_link,
    signature_params,
)
from jsdoc_mdx.models import (
    PRIVATE,
    PROTECTED,
    ClassDecl,
    ConstantDecl,
    EnumDecl,
    EventRef,
    Example,
    FunctionKind,
    FunctionLikeDecl,
    InterfaceDecl,
    MethodDecl,
    Param,
    ParsedJSDoc,
    PropertyDecl,
    SourceDeclaration,
    TypeAliasDecl,
)


def visible(members: list) -> list:
    """Drop private members; protected ones stay."""
    return [m for m in members if m.visibility != PRIVATE]


def render_declaration(decl: SourceDeclaration | EventRef) -> str:
    """Render the body of any declaration (no heading)."""
    if isinstance(decl, ClassDecl):
        return render_class(decl)
    if isinstance(decl, InterfaceDecl):
        return render_interface(decl)
    if isinstance(decl, FunctionLikeDecl):
        return render_function_like(decl)
    if isinstance(decl, TypeAliasDecl):
        return render_type_alias(decl)
    if isinstance(decl, EnumDecl):
        return render_enum(decl)
    if isinstance(decl, ConstantDecl):
        return render_constant(decl)
    return render_event(decl)


def _join(parts: list[str]) -> str:
    return "\n".join(parts).strip() + "\n"


def _type_params(names: list[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


def render_deprecated(deprecated: str | bool | None, what: str) -> list[str]:
    if not deprecated:
        return []
    message = (
        format_description(deprecated)
        if isinstance(deprecated, str)
        else f"This {what} is deprecated."
    )
    return ["<Warning>", f"**Deprecated:** {message}", "</Warning>", ""]


def render_since(since: str | None) -> list[str]:
    if not since:
        return []
    return ["<Info>", f"Available since version {since}", "</Info>", ""]


def render_description(doc: ParsedJSDoc) -> list[str]:
    text = format_description(doc.description)
    return [text, ""] if text else []


def render_param_field(param: Param) -> str:
    attrs = [f'path="{escape_html(param.name)}"', f'type="{escape_html(param.type)}"']
    attrs.append(f"required={{{'false' if param.optional else 'true'}}}")
    if param.default is not None:
        attrs.append(f'default="{escape_html(param.default)}"')
    return "\n".join(
        [f"<ParamField {' '.join(attrs)}>", format_description(param.description), "</ParamField>"]
    )


def render_response_field(
    type_text: str, description: str = "", name: str | None = None, *, optional: bool = False
) -> str:
    attrs = []
    if name:
        attrs.append(f'name="{escape_html(name)}"')
    attrs.append(f'type="{escape_html(type_text)}"')
    if optional:
        attrs.append("required={false}")
    return "\n".join(
        [f"<ResponseField {' '.join(attrs)}>", format_description(description), "</ResponseField>"]
    )


def render_examples(examples: list[Example]) -> list[str]:
    """One uncaptioned example is a CodeGroup; anything else becomes tabs."""
    if not examples:
        return []
    if len(examples) == 1 and not examples[0].caption:
        code = clean_example(examples[0].code)
        return ["<CodeGroup>", md_codeblock(detect_language(code), code), "</CodeGroup>", ""]
    parts = ["<Tabs>"]
    for i, example in enumerate(examples, start=1):
        code = clean_example(example.code)
        title = example.caption or f"Example {i}"
        parts += [
            f'<Tab title="{escape_html(title)}">',
            md_codeblock(detect_language(code), code),
            "</Tab>",
        ]
    parts += ["</Tabs>", ""]
    return parts


def render_throws(doc: ParsedJSDoc) -> list[str]:
    if not doc.throws:
        return []
    parts = ["<Warning>", "**Throws:**", ""]
    for t in doc.throws:
        line = f"- `{t.type}`"
        if t.description:
            line += f": {format_description(t.description)}"
        parts.append(line)
    parts += ["</Warning>", ""]
    return parts


def render_see_also(doc: ParsedJSDoc, level: str = "###") -> list[str]:
    if not doc.see:
        return []
    parts = [f"{level} See Also", ""]
    parts += [f"- {format_see_also(entry)}" for entry in doc.see]
    parts.append("")
    return parts


def render_tutorials(doc: ParsedJSDoc, owner: str) -> list[str]:
    if not doc.tutorials:
        return []
    parts = ["### Related Tutorials", "", "<CardGroup>"]
    for tutorial in doc.tutorials:
        parts += [
            f'<Card title="Tutorial: {escape_html(tutorial)}" icon="book-open" '
            f'href="/tutorials/{tutorial}">',
            f"Learn more about {owner} in this tutorial.",
            "</Card>",
        ]
    parts += ["</CardGroup>", ""]
    return parts


def _return_info(doc: ParsedJSDoc, declared: str) -> tuple[str, str] | None:
    if doc.returns is not None:
        type_text = doc.returns.type
        if type_text == "any" and declared not in {"any", ""}:
            type_text = declared
        return type_text, doc.returns.description
    if declared not in {"any", "void", ""}:
        return declared, ""
    return None


def method_signature(method: MethodDecl, *, is_constructor: bool = False) -> str:
    modifiers = []
    if method.visibility == PROTECTED:
        modifiers.append("protected")
    if method.is_static:
        modifiers.append("static")
    if method.is_async or method.doc.is_async:
        modifiers.append("async")
    if method.is_getter:
        modifiers.append("get")
    if method.is_setter:
        modifiers.append("set")
    params = signature_params(merge_params(method.doc.params, method.parameters))
    signature = " ".join([*modifiers, f"{method.name}({params})"])
    if is_constructor or method.is_setter:
        return signature
    returns = _return_info(method.doc, method.return_type)
    return f"{signature}: {returns[0] if returns else 'void'}"


def render_method(
    method: MethodDecl,
    *,
    anchor: str | None = None,
    is_constructor: bool = False,
    skip_examples: list[Example] | None = None,
) -> str:
    """Render a method or constructor body."""
    doc = method.doc
    parts = []
    if anchor:
        parts += [f'<a id="{anchor}"></a>', ""]
    parts += [
        "<CodeGroup>",
        md_codeblock("typescript", method_signature(method, is_constructor=is_constructor)),
        "</CodeGroup>",
        "",
    ]
    parts += render_deprecated(doc.deprecated, "method")
    parts += render_description(doc)

    params = merge_params(doc.params, method.parameters)
    if params:
        parts += ["##### Parameters", ""]
        parts += [render_param_field(p) for p in params]
        parts.append("")

    returns = _return_info(doc, method.return_type)
    if returns and not (is_constructor and doc.returns is None) and not method.is_setter:
        parts += ["##### Returns", "", render_response_field(*returns), ""]

    parts += render_throws(doc)

    examples = doc.examples
    if skip_examples:
        examples = [e for e in examples if e not in skip_examples]
    if examples:
        parts += ["##### Examples", ""]
        parts += render_examples(examples)
    return _join(parts)


def render_property(prop: PropertyDecl) -> str:
    doc = prop.doc
    parts = [f"**Type:** `{prop.type}`", ""]
    parts += render_description(doc)
    parts += render_deprecated(doc.deprecated, "property")
    if prop.initializer:
        parts += [f"**Default:** `{prop.initializer}`", ""]
    if doc.since:
        parts += [f"**Since:** v{doc.since}", ""]
    return _join(parts)


def _property_title(prop: PropertyDecl) -> str:
    title = prop.name
    if prop.is_static:
        title += " (static)"
    if prop.is_readonly:
        title += " (readonly)"
    if prop.is_optional:
        title += " (optional)"
    return title


def render_properties(props: list[PropertyDecl]) -> list[str]:
    parts = ["<Accordion>"]
    for prop in props:
        parts += [
            f'<AccordionItem title="{escape_html(_property_title(prop))}">',
            render_property(prop),
            "</AccordionItem>",
        ]
    parts += ["</Accordion>", ""]
    return parts


def render_methods(owner: str, methods: list[MethodDecl]) -> list[str]:
    parts = ["<AccordionGroup>"]
    for method in methods:
        sep = "." if method.is_static else "#"
        parts += [
            f'<Accordion title="{escape_html(method.name)}">',
            render_method(method, anchor=anchor_for(f"{owner}{sep}{method.name}")),
            "</Accordion>",
        ]
    parts += ["</AccordionGroup>", ""]
    return parts


def format_event(event: str) -> str:
    scope, sep, name = event.partition(":")
    if sep and scope and name and " " not in scope:
        return f"- **{name.strip()}** (scope: `{scope.strip()}`)"
    return f"- **{event}**"


def _class_events(cls: ClassDecl) -> tuple[list[str], list[str]]:
    fires = list(cls.doc.fires)
    listens = list(cls.doc.listens)
    members = [cls.constructor] if cls.constructor else []
    members += visible(cls.static_methods) + visible(cls.methods)
    for member in members:
        fires += [e for e in member.doc.fires if e not in fires]
        listens += [e for e in member.doc.listens if e not in listens]
    return fires, listens


def _class_tabs(cls: ClassDecl) -> list[str]:
    tabs = []
    static_props = visible(cls.static_properties)
    props = visible(cls.properties)
    if static_props or props:
        tab = ['<Tab title="Properties">']
        if static_props:
            tab += ["#### Static Properties", ""] + render_properties(static_props)
        if props:
            tab += ["#### Instance Properties", ""] + render_properties(props)
        tabs += [*tab, "</Tab>"]

    static_methods = visible(cls.static_methods)
    methods = visible(cls.methods)
    if static_methods or methods:
        tab = ['<Tab title="Methods">']
        if static_methods:
            tab += ["#### Static Methods", ""] + render_methods(cls.name, static_methods)
        if methods:
            tab += ["#### Instance Methods", ""] + render_methods(cls.name, methods)
        tabs += [*tab, "</Tab>"]

    fires, listens = _class_events(cls)
    if fires or listens:
        tab = ['<Tab title="Events">']
        if fires:
            tab += ['<Card title="Fires" icon="broadcast">']
            tab += [format_event(e) for e in fires]
            tab += ["</Card>"]
        if listens:
            tab += ['<Card title="Listens" icon="ear-listen">']
            tab += [format_event(e) for e in listens]
            tab += ["</Card>"]
        tabs += [*tab, "</Tab>"]

    if cls.doc.examples:
        tabs += ['<Tab title="Examples">', *render_examples(cls.doc.examples), "</Tab>"]

    if not tabs:
        return []
    return ["<Tabs>", *tabs, "</Tabs>", ""]


def render_class(cls: ClassDecl) -> str:
    """Render a class: header notes, constructor, member tabs, see-also, tutorials."""
    doc = cls.doc
    parts = []
    if cls.extends:
        parts += [f"**Extends:** `{cls.extends}`", ""]
    if cls.implements:
        parts += [f"**Implements:** {', '.join(f'`{i}`' for i in cls.implements)}", ""]
    if cls.type_parameters:
        generic = ", ".join(f"`{t}`" for t in cls.type_parameters)
        parts += ["<Info>", f"Generic type parameters: {generic}", "</Info>", ""]
    parts += render_deprecated(doc.deprecated, "class")
    parts += render_description(doc)
    parts += render_since(doc.since)

    if cls.hide_constructor:
        parts += [
            "<Note>",
            "This class should not be instantiated directly using `new`.",
            "</Note>",
            "",
        ]
    elif cls.constructor is not None:
        parts += [
            "### Constructor",
            "",
            render_method(
                cls.constructor, is_constructor=True, skip_examples=doc.examples
            ),
        ]

    parts += _class_tabs(cls)
    parts += render_see_also(doc)
    parts += render_tutorials(doc, cls.name)
    return _join(parts)


def render_interface(iface: InterfaceDecl) -> str:
    parts = []
    if iface.extends:
        parts += [f"**Extends:** {', '.join(f'`{e}`' for e in iface.extends)}", ""]
    if iface.type_parameters:
        generic = ", ".join(f"`{t}`" for t in iface.type_parameters)
        parts += ["<Info>", f"Generic type parameters: {generic}", "</Info>", ""]
    parts += render_deprecated(iface.doc.deprecated, "interface")
    parts += render_description(iface.doc)

    props = visible(iface.properties)
    if props:
        parts += ["### Properties", ""]
        for prop in props:
            type_text = f"readonly {prop.type}" if prop.is_readonly else prop.type
            parts.append(
                render_response_field(
                    type_text, prop.doc.description, prop.name, optional=prop.is_optional
                )
            )
        parts.append("")

    methods = visible(iface.methods)
    if methods:
        parts += ["### Methods", "", "<Accordion>"]
        for method in methods:
            parts += [
                f'<AccordionItem title="{escape_html(method.name)}">',
                render_method(method),
                "</AccordionItem>",
            ]
        parts += ["</Accordion>", ""]

    parts += render_examples(iface.doc.examples)
    parts += render_see_also(iface.doc)
    return _join(parts)


def function_signature(fn: FunctionLikeDecl) -> str:
    params = signature_params(merge_params(fn.doc.params, fn.parameters))
    returns = _return_info(fn.doc, fn.return_type)
    prefix = "async function" if fn.is_async or fn.doc.is_async else "function"
    return_type = returns[0] if returns else "void"
    return f"{prefix} {fn.name}{_type_params(fn.type_parameters)}({params}): {return_type}"


def render_function_like(fn: FunctionLikeDecl) -> str:
    """Render a function, hook or component."""
    doc = fn.doc
    is_component = fn.kind == FunctionKind.COMPONENT
    what = fn.kind.value
    parts = []
    parts += render_deprecated(doc.deprecated, what)
    parts += render_description(doc)
    parts += render_since(doc.since)
    if fn.is_alias and fn.alias_resolved:
        parts += [
            "<Info>",
            f"`{fn.name}` is an alias for {render_link(fn.alias_of)}.",
            "</Info>",
            "",
        ]

    parts += ["### Syntax", "", md_codeblock("typescript", function_signature(fn)), ""]

    params = merge_params(doc.params, fn.parameters)
    if params and is_component:
        parts += ["### Props", ""]
        parts += [
            render_response_field(p.type, p.description, p.name, optional=p.optional)
            for p in params
        ]
        parts.append("")
    elif params:
        parts += ["### Parameters", ""]
        parts += [render_param_field(p) for p in params]
        parts.append("")

    returns = _return_info(doc, fn.return_type)
    if returns and not is_component:
        parts += ["### Returns", "", render_response_field(*returns), ""]

    parts += render_throws(doc)
    if doc.examples:
        parts += ["### Usage" if is_component else "### Examples", ""]
        parts += render_examples(doc.examples)
    parts += render_see_also(doc)
    return _join(parts)


def render_type_alias(alias: TypeAliasDecl) -> str:
    parts = render_deprecated(alias.doc.deprecated, "type")
    parts += render_description(alias.doc)
    definition = f"type {alias.name}{_type_params(alias.type_parameters)} = {alias.type}"
    parts += ["<CodeGroup>", md_codeblock("typescript", definition), "</CodeGroup>", ""]
    parts += render_examples(alias.doc.examples)
    parts += render_see_also(alias.doc)
    return _join(parts)


def render_enum(enum: EnumDecl) -> str:
    parts = render_deprecated(enum.doc.deprecated, "enum")
    parts += render_description(enum.doc)
    if enum.members:
        parts += ["### Members", ""]
        for member in enum.members:
            line = f"- **{member.name}**"
            if member.value is not None:
                line += f" = `{member.value}`"
            if member.doc.description:
                line += f": {format_description(member.doc.summary or member.doc.description)}"
            parts.append(line)
        parts.append("")
    parts += render_see_also(enum.doc)
    return _join(parts)


def render_constant(const: ConstantDecl) -> str:
    parts = render_deprecated(const.doc.deprecated, "constant")
    parts += render_description(const.doc)
    if const.value is not None:
        annotation = f": {const.type}" if const.type else ""
        parts += [md_codeblock("typescript", f"const {const.name}{annotation} = {const.value}"), ""]
    elif const.type:
        parts += [f"**Type:** `{const.type}`", ""]
    parts += render_examples(const.doc.examples)
    parts += render_see_also(const.doc)
    return _join(parts)


def render_event(event: EventRef) -> str:
    parts = [format_event(event.name), ""]
    if event.emitters:
        parts += ["Fired by:", ""]
        parts += [f"- {render_link(emitter)}" for emitter in event.emitters]
        parts.append("")
    return _join(parts)
