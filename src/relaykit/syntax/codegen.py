"""
Rendering of newly inserted code.

Inserted nodes follow the style of the file they land in: indent unit,
quote character, semicolons, trailing commas and line endings are
sampled from the parsed tree. Descriptors (Identifier, StringLiteral,
ObjectLiteral, ...) describe what to insert; render() turns them into
text at a given base indentation.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Tuple

from relaykit.config import get_settings
from relaykit.syntax.adapter import SyntaxTree
from relaykit.syntax.nodes import NodeKind, kind_of, named_children, walk

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Lines to sample for indent detection
_MAX_SAMPLE_LINES = 200


@dataclass(frozen=True)
class CodeStyle:
    indent_unit: str = "  "
    quote: str = '"'
    semicolons: bool = True
    trailing_commas: bool = False
    line_ending: str = "\n"
    max_line_width: int = 80


# -- Descriptors ------------------------------------------------------------

class JsValue:
    """Base class for values that can be rendered as JavaScript source."""


@dataclass(frozen=True)
class Identifier(JsValue):
    name: str


@dataclass(frozen=True)
class StringLiteral(JsValue):
    value: str


@dataclass(frozen=True)
class CallExpression(JsValue):
    callee: str
    arguments: Tuple[JsValue, ...] = ()


@dataclass(frozen=True)
class ArrayLiteral(JsValue):
    elements: Tuple[JsValue, ...] = ()


@dataclass(frozen=True)
class ObjectLiteral(JsValue):
    properties: Tuple[Tuple[str, JsValue], ...] = field(default_factory=tuple)


# -- Style detection --------------------------------------------------------

def _detect_indent_unit(text: str, default: str) -> str:
    """Smallest non-zero leading whitespace step among sampled lines."""
    tab_count = 0
    widths: Counter = Counter()
    previous = 0

    for line in text.splitlines()[:_MAX_SAMPLE_LINES]:
        if not line.strip():
            continue
        indent = line[:len(line) - len(line.lstrip())]
        if indent.startswith("\t"):
            tab_count += 1
            continue
        width = len(indent)
        step = abs(width - previous)
        if step:
            widths[step] += 1
        previous = width

    if tab_count and tab_count >= sum(widths.values()):
        return "\t"
    if not widths:
        return default

    # The most common step, preferring the smaller one on ties
    unit = min(widths.items(), key=lambda item: (-item[1], item[0]))[0]
    return " " * unit


def _detect_line_ending(source: bytes) -> str:
    return "\r\n" if b"\r\n" in source else "\n"


def detect_style(tree: SyntaxTree) -> CodeStyle:
    """Sample the formatting conventions of a parsed file."""
    settings = get_settings()
    quotes: Counter = Counter()
    trailing = 0
    non_trailing = 0

    for node in walk(tree.root):
        kind = kind_of(node)
        if kind == NodeKind.STRING and node.text[:1] in (b'"', b"'"):
            quotes[node.text[:1].decode("utf8")] += 1
        elif kind in (NodeKind.OBJECT, NodeKind.ARRAY):
            items = named_children(node)
            if not items or node.start_point[0] == node.end_point[0]:
                continue
            following = items[-1].next_sibling
            if following is not None and following.type == ",":
                trailing += 1
            else:
                non_trailing += 1

    statements = [
        c for c in tree.root.named_children
        if kind_of(c) in (
            NodeKind.IMPORT, NodeKind.EXPRESSION_STATEMENT,
            NodeKind.VARIABLE_DECLARATION,
        )
    ]
    with_semicolon = sum(1 for s in statements if s.text.rstrip().endswith(b";"))
    semicolons = not statements or with_semicolon * 2 >= len(statements)

    quote = '"'
    if quotes["'"] > quotes['"']:
        quote = "'"

    return CodeStyle(
        indent_unit=_detect_indent_unit(tree.text, settings.default_indent),
        quote=quote,
        semicolons=semicolons,
        trailing_commas=trailing > non_trailing,
        line_ending=_detect_line_ending(tree.source),
        max_line_width=settings.max_line_width,
    )


# -- Rendering --------------------------------------------------------------

def render_key(key: str, style: CodeStyle) -> str:
    if is_identifier_name(key):
        return key
    return render_string(key, style)


def render_string(value: str, style: CodeStyle) -> str:
    escaped = value.replace("\\", "\\\\").replace(style.quote, "\\" + style.quote)
    return f"{style.quote}{escaped}{style.quote}"


def render_inline(value: JsValue, style: CodeStyle) -> str:
    """Render on a single line."""
    if isinstance(value, Identifier):
        return value.name
    if isinstance(value, StringLiteral):
        return render_string(value.value, style)
    if isinstance(value, CallExpression):
        args = ", ".join(render_inline(a, style) for a in value.arguments)
        return f"{value.callee}({args})"
    if isinstance(value, ArrayLiteral):
        return "[" + ", ".join(render_inline(e, style) for e in value.elements) + "]"
    if isinstance(value, ObjectLiteral):
        if not value.properties:
            return "{}"
        members = ", ".join(
            f"{render_key(k, style)}: {render_inline(v, style)}" for k, v in value.properties
        )
        return "{ " + members + " }"
    raise TypeError(f"Cannot render {type(value).__name__}")


def render(value: JsValue, style: CodeStyle, indent: str = "", prefix_width: int = 0) -> str:
    """
    Render value starting at a column already occupied by prefix_width
    characters on a line indented with indent.

    Objects and arrays that do not fit the line width are split one
    member per line; nested values get the same treatment.
    """
    inline = render_inline(value, style)
    if len(indent) + prefix_width + len(inline) <= style.max_line_width:
        return inline
    if not isinstance(value, (ObjectLiteral, ArrayLiteral)):
        return inline

    inner_indent = indent + style.indent_unit
    eol = style.line_ending
    lines = []
    if isinstance(value, ObjectLiteral):
        opener, closer = "{", "}"
        for key, member in value.properties:
            head = f"{render_key(key, style)}: "
            lines.append(head + render(member, style, inner_indent, len(head)))
    else:
        opener, closer = "[", "]"
        for element in value.elements:
            lines.append(render(element, style, inner_indent))

    if not lines:
        return opener + closer

    separator = "," + eol + inner_indent
    body = inner_indent + separator.join(lines)
    if style.trailing_commas:
        body += ","
    return opener + eol + body + eol + indent + closer


def render_import(
    module: str,
    imported: str,
    local: str,
    style: CodeStyle,
    is_default: bool = False,
) -> str:
    """Render an import declaration (without line terminator)."""
    if is_default:
        clause = local
    elif imported == local:
        clause = "{ " + imported + " }"
    else:
        clause = "{ " + f"{imported} as {local}" + " }"
    statement = f"import {clause} from {render_string(module, style)}"
    if style.semicolons:
        statement += ";"
    return statement


def is_identifier_name(name: Optional[str]) -> bool:
    return bool(name) and bool(_IDENTIFIER_RE.match(name))
