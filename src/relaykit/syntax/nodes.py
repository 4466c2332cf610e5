"""
Closed set of node kinds recognized by the matchers.

tree-sitter hands out nodes tagged with grammar-specific type strings.
kind_of() folds them into NodeKind so matchers compare against a fixed
variant set; everything else is NodeKind.OTHER.
"""

from enum import Enum
from typing import Iterator, List, Optional

from tree_sitter import Node


class NodeKind(str, Enum):
    PROGRAM = "program"
    OBJECT = "object"
    ARRAY = "array"
    PAIR = "pair"
    SHORTHAND_PROPERTY = "shorthand_property"
    SPREAD = "spread"
    CALL = "call"
    ARGUMENTS = "arguments"
    MEMBER = "member"
    IDENTIFIER = "identifier"
    STRING = "string"
    ASSIGNMENT = "assignment"
    EXPRESSION_STATEMENT = "expression_statement"
    EXPORT = "export"
    IMPORT = "import"
    IMPORT_CLAUSE = "import_clause"
    NAMED_IMPORTS = "named_imports"
    IMPORT_SPECIFIER = "import_specifier"
    NAMESPACE_IMPORT = "namespace_import"
    VARIABLE_DECLARATION = "variable_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    DECLARATION = "declaration"
    RETURN = "return"
    PARENTHESIZED = "parenthesized"
    JSX_ELEMENT = "jsx_element"
    JSX_SELF_CLOSING = "jsx_self_closing"
    COMMENT = "comment"
    HASH_BANG = "hash_bang"
    OTHER = "other"


_TYPE_TO_KIND = {
    "program": NodeKind.PROGRAM,
    "object": NodeKind.OBJECT,
    "array": NodeKind.ARRAY,
    "pair": NodeKind.PAIR,
    "shorthand_property_identifier": NodeKind.SHORTHAND_PROPERTY,
    "spread_element": NodeKind.SPREAD,
    "call_expression": NodeKind.CALL,
    "arguments": NodeKind.ARGUMENTS,
    "member_expression": NodeKind.MEMBER,
    "identifier": NodeKind.IDENTIFIER,
    "property_identifier": NodeKind.IDENTIFIER,
    "string": NodeKind.STRING,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "expression_statement": NodeKind.EXPRESSION_STATEMENT,
    "export_statement": NodeKind.EXPORT,
    "import_statement": NodeKind.IMPORT,
    "import_clause": NodeKind.IMPORT_CLAUSE,
    "named_imports": NodeKind.NAMED_IMPORTS,
    "import_specifier": NodeKind.IMPORT_SPECIFIER,
    "namespace_import": NodeKind.NAMESPACE_IMPORT,
    "lexical_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "function_declaration": NodeKind.DECLARATION,
    "generator_function_declaration": NodeKind.DECLARATION,
    "class_declaration": NodeKind.DECLARATION,
    "return_statement": NodeKind.RETURN,
    "parenthesized_expression": NodeKind.PARENTHESIZED,
    "jsx_element": NodeKind.JSX_ELEMENT,
    "jsx_self_closing_element": NodeKind.JSX_SELF_CLOSING,
    "comment": NodeKind.COMMENT,
    "hash_bang_line": NodeKind.HASH_BANG,
}

JSX_KINDS = (NodeKind.JSX_ELEMENT, NodeKind.JSX_SELF_CLOSING)


def kind_of(node: Optional[Node]) -> NodeKind:
    if node is None:
        return NodeKind.OTHER
    return _TYPE_TO_KIND.get(node.type, NodeKind.OTHER)


def text_of(node: Node) -> str:
    return node.text.decode("utf8")


def named_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [c for c in node.named_children if kind_of(c) != NodeKind.COMMENT]


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    """Strip any number of enclosing parentheses: ((x)) -> x."""
    while node is not None and kind_of(node) == NodeKind.PARENTHESIZED:
        inner = named_children(node)
        if len(inner) != 1:
            return node
        node = inner[0]
    return node


def string_value(node: Node) -> str:
    """Value of a string literal node, without its quotes."""
    raw = text_of(node)
    if len(raw) >= 2 and raw[0] in "\"'" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def property_key(node: Node) -> Optional[str]:
    """Key name of an object member, or None for spreads, methods and computed keys."""
    kind = kind_of(node)
    if kind == NodeKind.SHORTHAND_PROPERTY:
        return text_of(node)
    if kind != NodeKind.PAIR:
        return None

    key = node.child_by_field_name("key")
    key_kind = kind_of(key)
    if key_kind == NodeKind.IDENTIFIER:
        return text_of(key)
    if key_kind == NodeKind.STRING:
        return string_value(key)
    return None


def jsx_tag_name(node: Node) -> Optional[str]:
    """Tag name of a JSX element; None for fragments."""
    kind = kind_of(node)
    if kind == NodeKind.JSX_ELEMENT:
        opening = node.child_by_field_name("open_tag")
        if opening is None:
            return None
        name = opening.child_by_field_name("name")
    elif kind == NodeKind.JSX_SELF_CLOSING:
        name = node.child_by_field_name("name")
    else:
        return None
    return text_of(name) if name is not None else None


def walk(node: Node) -> Iterator[Node]:
    """Depth-first, pre-order traversal (document order)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def is_type_only_import(node: Node) -> bool:
    """True for TypeScript `import type { X } from "m"` declarations."""
    return any(child.type == "type" for child in node.children)
