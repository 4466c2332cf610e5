"""
Syntax package: parse, match and mutate JS/TS/JSX sources.

Edits are spliced into the original bytes, so everything outside an
inserted or replaced range prints back unchanged.
"""

from .adapter import (
    SyntaxTree,
    TextEdit,
    language_for_path,
    parse,
    parse_file_content,
    print_tree,
)
from .nodes import NodeKind, kind_of
from .codegen import (
    ArrayLiteral,
    CallExpression,
    CodeStyle,
    Identifier,
    ObjectLiteral,
    StringLiteral,
    detect_style,
)
from .matchers import (
    ImportBinding,
    JsxHostMode,
    PropertyAnchor,
    find_call_argument_property,
    find_exported_object,
    find_factory_config_object,
    find_import,
    find_jsx_host,
    find_property,
)
from .mutators import (
    ImportResult,
    MutationResult,
    ensure_import,
    upsert_array_element,
    upsert_property,
    wrap_jsx,
)

__all__ = [
    # Adapter
    "SyntaxTree",
    "TextEdit",
    "language_for_path",
    "parse",
    "parse_file_content",
    "print_tree",
    "NodeKind",
    "kind_of",

    # Inserted code
    "ArrayLiteral",
    "CallExpression",
    "CodeStyle",
    "Identifier",
    "ObjectLiteral",
    "StringLiteral",
    "detect_style",

    # Matchers
    "ImportBinding",
    "JsxHostMode",
    "PropertyAnchor",
    "find_call_argument_property",
    "find_exported_object",
    "find_factory_config_object",
    "find_import",
    "find_jsx_host",
    "find_property",

    # Mutators
    "ImportResult",
    "MutationResult",
    "ensure_import",
    "upsert_array_element",
    "upsert_property",
    "wrap_jsx",
]
