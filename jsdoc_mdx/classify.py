"""Pure classification rules shared by both extraction modes."""

import re

from jsdoc_mdx.models import FunctionKind

FUNCTION_EXPORT = "function"
VALUE_EXPORT = "value"
ALIAS_EXPORT = "alias"

HOOK_NAME_RE = re.compile(r"^use[A-Z]")
COMPONENT_NAME_RE = re.compile(r"^[A-Z]")
FUNCTION_ASSIGNMENT_RE = re.compile(r"=\s*(?:async\s+)?function\b")


def classify_function_kind(
    name: str, export_kind: str = FUNCTION_EXPORT
) -> FunctionKind | None:
    """Classify an exported binding by its name and how it was declared.

    ``export_kind`` is one of ``function`` (function declaration, function
    expression or arrow function), ``alias`` (bare identifier assignment) or
    ``value`` (any other initializer). Returns None when the binding is a plain
    constant rather than a hook, component or function.
    """
    if HOOK_NAME_RE.match(name):
        return FunctionKind.HOOK
    is_component_name = bool(COMPONENT_NAME_RE.match(name)) and "_" not in name
    if export_kind == VALUE_EXPORT:
        # SCREAMING_CASE values are constants
        if is_component_name and name != name.upper():
            return FunctionKind.COMPONENT
        return None
    if is_component_name:
        return FunctionKind.COMPONENT
    return FunctionKind.FUNCTION


def is_method_declaration(declaration_text: str) -> bool:
    """Return True when a class member's declaration text declares a method.

    A parameter list makes a member a method unless it belongs to a
    ``= function(...)`` assignment, which declares a property.
    """
    return "(" in declaration_text and not FUNCTION_ASSIGNMENT_RE.search(
        declaration_text
    )


def is_constructor_name(name: str) -> bool:
    return name in {"constructor", "init"}
