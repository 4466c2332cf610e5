"""
Anchor Matchers: locate the node a task mutates.

Every matcher is a pure function of a SyntaxTree. It returns exactly one
anchor or raises AnchorNotFound / UnsupportedShape naming the shape it
expected. Anchors are borrowed views into the tree they came from.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

from tree_sitter import Node

from relaykit.exceptions import AnchorNotFound, UnsupportedShape
from relaykit.logging_config import logger
from relaykit.syntax.adapter import SyntaxTree
from relaykit.syntax.nodes import (
    JSX_KINDS,
    NodeKind,
    is_type_only_import,
    kind_of,
    named_children,
    property_key,
    string_value,
    text_of,
    unwrap_parens,
    walk,
)

_WHITESPACE_RE = re.compile(r"\s+")


class JsxHostMode(str, Enum):
    """Where the JSX-host matcher looks for its anchor."""
    FIRST_RETURN = "first_return"
    RENDER_CALL = "render_call"


@dataclass(frozen=True)
class PropertyAnchor:
    """A named member of an object literal, which may not exist yet."""
    container: Node
    name: str
    member: Optional[Node] = None
    value: Optional[Node] = None

    @property
    def exists(self) -> bool:
        return self.member is not None


@dataclass(frozen=True)
class ImportBinding:
    """An existing import that binds `imported` from `module` as `local`."""
    module: str
    imported: str
    local: str
    statement: Node


# -- Bindings ---------------------------------------------------------------

def _top_level_declarators(tree: SyntaxTree) -> List[Node]:
    declarators = []
    for statement in tree.root.named_children:
        if kind_of(statement) == NodeKind.EXPORT:
            statement = statement.child_by_field_name("declaration")
        if kind_of(statement) != NodeKind.VARIABLE_DECLARATION:
            continue
        declarators.extend(
            c for c in statement.named_children
            if kind_of(c) == NodeKind.VARIABLE_DECLARATOR
        )
    return declarators


def resolve_binding(tree: SyntaxTree, name: str) -> Optional[Node]:
    """
    Initializer of the top-level variable declared as `name`.

    Resolves exactly one hop; the returned node is not resolved further.
    """
    for declarator in _top_level_declarators(tree):
        declared = declarator.child_by_field_name("name")
        if declared is not None and text_of(declared) == name:
            return unwrap_parens(declarator.child_by_field_name("value"))
    return None


def top_level_bindings(tree: SyntaxTree) -> Set[str]:
    """Names bound at module scope by imports and declarations."""
    names: Set[str] = set()

    for statement in tree.root.named_children:
        kind = kind_of(statement)
        if kind == NodeKind.IMPORT:
            clause = _import_clause(statement)
            if clause is None:
                continue
            for node in walk(clause):
                node_kind = kind_of(node)
                if node_kind == NodeKind.IMPORT_SPECIFIER:
                    local = node.child_by_field_name("alias") or node.child_by_field_name("name")
                    names.add(text_of(local))
                elif node_kind == NodeKind.IDENTIFIER and kind_of(node.parent) in (
                    NodeKind.IMPORT_CLAUSE, NodeKind.NAMESPACE_IMPORT,
                ):
                    names.add(text_of(node))
            continue

        if kind == NodeKind.EXPORT:
            statement = statement.child_by_field_name("declaration")
            kind = kind_of(statement)
        if kind == NodeKind.DECLARATION:
            declared = statement.child_by_field_name("name")
            if declared is not None:
                names.add(text_of(declared))

    for declarator in _top_level_declarators(tree):
        pattern = declarator.child_by_field_name("name")
        if pattern is None:
            continue
        for node in walk(pattern):
            if node.type in ("identifier", "shorthand_property_identifier_pattern"):
                names.add(text_of(node))

    return names


# -- Exported-object matcher ------------------------------------------------

def find_exported_object(tree: SyntaxTree, export_name: str = "module.exports") -> Node:
    """
    Object literal assigned to `export_name` (e.g. `module.exports = {...}`).

    An identifier on the right-hand side is resolved through one variable
    declaration. Anything that does not end on an object literal is
    rejected.
    """
    expected = f"a `{export_name} = {{...}}` assignment exporting the configuration object"
    wanted = _WHITESPACE_RE.sub("", export_name)

    assignment = None
    for node in walk(tree.root):
        if kind_of(node) != NodeKind.ASSIGNMENT:
            continue
        left = node.child_by_field_name("left")
        if left is not None and _WHITESPACE_RE.sub("", text_of(left)) == wanted:
            assignment = node
            break

    if assignment is None:
        raise AnchorNotFound(expected, tree.file_path)

    value = unwrap_parens(assignment.child_by_field_name("right"))
    kind = kind_of(value)

    if kind == NodeKind.IDENTIFIER:
        variable = text_of(value)
        value = resolve_binding(tree, variable)
        if value is None:
            raise UnsupportedShape(
                expected, tree.file_path,
                f"{export_name} references '{variable}', which is not declared at the top level.",
            )
        kind = kind_of(value)
        if kind == NodeKind.IDENTIFIER:
            raise UnsupportedShape(
                expected, tree.file_path,
                f"'{variable}' is an alias of '{text_of(value)}'; only one level of indirection is supported.",
            )
        if kind != NodeKind.OBJECT:
            raise UnsupportedShape(
                expected, tree.file_path,
                f"{export_name} references '{variable}', which is not a valid object definition.",
            )
    elif kind != NodeKind.OBJECT:
        raise UnsupportedShape(
            expected, tree.file_path,
            f"{export_name} is assigned a {value.type if value is not None else 'nothing'}, not an object literal.",
        )

    logger.debug(f"Located {export_name} object at byte {value.start_byte} in {tree.file_path}")
    return value


# -- Named-call-argument-property matcher -----------------------------------

def _default_export_value(tree: SyntaxTree) -> Optional[Node]:
    for statement in tree.root.named_children:
        if kind_of(statement) != NodeKind.EXPORT:
            continue
        if not any(child.type == "default" for child in statement.children):
            continue
        return statement.child_by_field_name("value") or statement.child_by_field_name("declaration")
    return None


def find_factory_config_object(tree: SyntaxTree, factory: str) -> Node:
    """
    Object literal passed as first argument to `export default factory(...)`.

    A plain `export default {...}` is accepted as well, and an exported
    identifier is resolved through one variable declaration.
    """
    expected = f"a `export default {factory}({{...}})`"

    value = _default_export_value(tree)
    if value is None:
        raise AnchorNotFound(expected, tree.file_path)

    value = unwrap_parens(value)
    if kind_of(value) == NodeKind.IDENTIFIER:
        variable = text_of(value)
        value = resolve_binding(tree, variable)
        if value is None:
            raise UnsupportedShape(
                expected, tree.file_path,
                f"The default export references '{variable}', which is not declared at the top level.",
            )

    kind = kind_of(value)
    if kind == NodeKind.OBJECT:
        return value

    if kind == NodeKind.CALL:
        callee = value.child_by_field_name("function")
        if kind_of(callee) == NodeKind.IDENTIFIER and text_of(callee) == factory:
            arguments = value.child_by_field_name("arguments")
            args = named_children(arguments) if arguments is not None else []
            first = unwrap_parens(args[0]) if args else None
            if kind_of(first) == NodeKind.OBJECT:
                logger.debug(f"Located {factory}() argument at byte {first.start_byte} in {tree.file_path}")
                return first
            raise UnsupportedShape(
                expected, tree.file_path,
                f"The first argument of {factory}() must be an object literal.",
            )

    raise UnsupportedShape(
        expected, tree.file_path,
        f"The default export is a {value.type}.",
    )


def find_property(
    tree: SyntaxTree,
    obj: Node,
    name: str,
    expected_kind: Optional[NodeKind] = None,
) -> PropertyAnchor:
    """
    Member `name` of object literal obj.

    When expected_kind is given, an existing member whose value is not of
    that kind is rejected.
    """
    for member in named_children(obj):
        if property_key(member) != name:
            continue

        value = None
        if kind_of(member) == NodeKind.PAIR:
            value = unwrap_parens(member.child_by_field_name("value"))

        if expected_kind is not None and kind_of(value) != expected_kind:
            raise UnsupportedShape(
                f'a "{name}" property holding an {expected_kind.value} literal',
                tree.file_path,
                f'Could not create or get the "{name}" property on the configuration object.',
            )
        return PropertyAnchor(container=obj, name=name, member=member, value=value)

    return PropertyAnchor(container=obj, name=name)


def find_call_argument_property(
    tree: SyntaxTree,
    factory: str,
    property_name: str,
) -> PropertyAnchor:
    """Array-valued `property_name` of the object passed to the default-exported factory call."""
    config = find_factory_config_object(tree, factory)
    return find_property(tree, config, property_name, NodeKind.ARRAY)


# -- JSX-host matcher -------------------------------------------------------

def _is_render_call(node: Node, render_method: str) -> bool:
    callee = node.child_by_field_name("function")
    kind = kind_of(callee)
    if kind == NodeKind.MEMBER:
        prop = callee.child_by_field_name("property")
        return prop is not None and text_of(prop) == render_method
    if kind == NodeKind.IDENTIFIER:
        return text_of(callee) == render_method
    return False


def find_jsx_host(
    tree: SyntaxTree,
    mode: JsxHostMode,
    render_method: str = "render",
) -> Node:
    """
    First JSX element that is returned (FIRST_RETURN) or passed to a
    `.render(...)` call (RENDER_CALL).

    One top-down traversal in document order; the first candidate wins and
    nested or later candidates are never considered.
    """
    for node in walk(tree.root):
        kind = kind_of(node)

        if mode == JsxHostMode.FIRST_RETURN and kind == NodeKind.RETURN:
            operands = named_children(node)
            operand = unwrap_parens(operands[0]) if operands else None
            if kind_of(operand) in JSX_KINDS:
                logger.debug(f"Located returned JSX at byte {operand.start_byte} in {tree.file_path}")
                return operand

        elif mode == JsxHostMode.RENDER_CALL and kind == NodeKind.CALL:
            if not _is_render_call(node, render_method):
                continue
            arguments = node.child_by_field_name("arguments")
            if arguments is None:
                continue
            for argument in named_children(arguments):
                argument = unwrap_parens(argument)
                if kind_of(argument) in JSX_KINDS:
                    logger.debug(f"Located JSX passed to {render_method}() at byte {argument.start_byte} in {tree.file_path}")
                    return argument

    if mode == JsxHostMode.FIRST_RETURN:
        raise AnchorNotFound("JSX being returned from a component", tree.file_path)
    raise AnchorNotFound(f"JSX being passed to ReactDOM.{render_method}()", tree.file_path)


# -- Imports ----------------------------------------------------------------

def _import_clause(statement: Node) -> Optional[Node]:
    for child in statement.named_children:
        if kind_of(child) == NodeKind.IMPORT_CLAUSE:
            return child
    return None


def find_import(
    tree: SyntaxTree,
    module: str,
    name: str,
    is_default: bool = False,
) -> Optional[ImportBinding]:
    """
    Existing value import of `name` (or of the default export) from module.

    Type-only imports do not count.
    """
    for statement in tree.root.named_children:
        if kind_of(statement) != NodeKind.IMPORT or is_type_only_import(statement):
            continue
        source = statement.child_by_field_name("source")
        if source is None or string_value(source) != module:
            continue
        clause = _import_clause(statement)
        if clause is None:
            continue

        for child in clause.named_children:
            child_kind = kind_of(child)
            if is_default and child_kind == NodeKind.IDENTIFIER:
                return ImportBinding(module, "default", text_of(child), statement)
            if child_kind != NodeKind.NAMED_IMPORTS:
                continue
            for specifier in child.named_children:
                if kind_of(specifier) != NodeKind.IMPORT_SPECIFIER:
                    continue
                imported_node = specifier.child_by_field_name("name")
                imported = (
                    string_value(imported_node)
                    if kind_of(imported_node) == NodeKind.STRING
                    else text_of(imported_node)
                )
                wanted = "default" if is_default else name
                if imported != wanted:
                    continue
                local = specifier.child_by_field_name("alias") or imported_node
                return ImportBinding(module, imported, text_of(local), statement)

    return None
