"""
Mutators: pure functions from (tree, anchor, descriptor) to a MutationResult.

A mutator never edits a tree in place. It either returns a new tree with
the addition spliced in, or reports that the addition is already there.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from tree_sitter import Node

from relaykit.logging_config import logger
from relaykit.syntax.adapter import SyntaxTree, TextEdit
from relaykit.syntax.codegen import (
    CodeStyle,
    Identifier,
    JsValue,
    detect_style,
    render,
    render_import,
    render_inline,
    render_key,
)
from relaykit.syntax.matchers import find_import, find_property, top_level_bindings
from relaykit.syntax.nodes import (
    JSX_KINDS,
    NodeKind,
    jsx_tag_name,
    kind_of,
    named_children,
    text_of,
    walk,
)


@dataclass(frozen=True)
class MutationResult:
    tree: SyntaxTree
    applied: bool
    reason: str = ""

    @classmethod
    def changed(cls, tree: SyntaxTree) -> "MutationResult":
        return cls(tree=tree, applied=True)

    @classmethod
    def already_applied(cls, tree: SyntaxTree, reason: str) -> "MutationResult":
        return cls(tree=tree, applied=False, reason=reason)


@dataclass(frozen=True)
class ImportResult:
    tree: SyntaxTree
    local_name: str
    inserted: bool


# -- Container insertion ----------------------------------------------------

def _insertion_point(tree: SyntaxTree, offset: int) -> int:
    """
    End of the current line if only whitespace or a line comment
    follows offset; offset itself otherwise.
    """
    eol = tree.line_end(offset)
    rest = tree.slice(offset, eol).strip()
    if not rest or rest.startswith("//"):
        return eol
    return offset


def _append_to_container(
    tree: SyntaxTree,
    container: Node,
    render_item,
    style: CodeStyle,
) -> List[TextEdit]:
    """
    Edits appending one item to an object or array literal.

    render_item(indent, prefix_width) returns the item text for an item
    placed on a line indented with indent.
    """
    items = named_children(container)
    opener, closer = container.children[0], container.children[-1]
    eol = style.line_ending
    pad = " " if kind_of(container) == NodeKind.OBJECT else ""

    if not items:
        inner = tree.slice(opener.end_byte, closer.start_byte)
        base_indent = tree.line_indent(container)
        item_indent = base_indent + style.indent_unit
        trailing = "," if style.trailing_commas else ""

        if "\n" not in inner:
            item = render_item(base_indent, len(tree.slice(tree.line_start(container.start_byte), opener.end_byte)) - len(base_indent) + len(pad))
            if "\n" in item:
                # Split value: open the container over several lines, comments first
                item = render_item(item_indent, 0)
                return [TextEdit(opener.end_byte, closer.start_byte, f"{inner.rstrip()}{eol}{item_indent}{item}{trailing}{eol}{base_indent}")]
            if inner.strip():
                # Only comments inside; keep them in front of the item
                return [TextEdit.insert(closer.start_byte, f" {item}{pad}")]
            return [TextEdit(opener.end_byte, closer.start_byte, f"{pad}{item}{pad}")]

        item = render_item(item_indent, 0)
        if inner.strip():
            return [TextEdit.insert(closer.start_byte, f"{item_indent}{item}{trailing}{eol}{base_indent}")]
        return [TextEdit(opener.end_byte, closer.start_byte, f"{eol}{item_indent}{item}{trailing}{eol}{base_indent}")]

    last = items[-1]
    following = last.next_sibling
    comma = following if following is not None and following.type == "," else None
    multiline = last.start_point[0] != opener.start_point[0]

    if multiline:
        indent = tree.line_indent(last)
        item = render_item(indent, 0)
        if comma is not None:
            at = _insertion_point(tree, comma.end_byte)
            return [TextEdit.insert(at, f"{eol}{indent}{item},")]
        at = _insertion_point(tree, last.end_byte)
        trailing = "," if style.trailing_commas else ""
        if at == last.end_byte:
            return [TextEdit.insert(at, f",{eol}{indent}{item}{trailing}")]
        return [
            TextEdit.insert(last.end_byte, ","),
            TextEdit.insert(at, f"{eol}{indent}{item}{trailing}"),
        ]

    base_indent = tree.line_indent(container)
    prefix = len(tree.slice(tree.line_start(last.end_byte), last.end_byte)) - len(base_indent) + 2
    item = render_item(base_indent, prefix)
    if comma is not None:
        return [TextEdit.insert(comma.end_byte, f" {item},")]
    return [TextEdit.insert(last.end_byte, f", {item}")]


# -- Property-upsert --------------------------------------------------------

def upsert_property(
    tree: SyntaxTree,
    obj: Node,
    name: str,
    value: JsValue,
    style: Optional[CodeStyle] = None,
) -> MutationResult:
    """
    Append `name: value` to object literal obj unless a member called
    `name` already exists. Values are not compared; presence of the key
    is the idempotency signal.
    """
    if find_property(tree, obj, name).exists:
        return MutationResult.already_applied(tree, f'Property "{name}" already present')

    style = style or detect_style(tree)
    key = render_key(name, style)

    def render_item(indent: str, prefix_width: int) -> str:
        head = f"{key}: "
        return head + render(value, style, indent, prefix_width + len(head))

    edits = _append_to_container(tree, obj, render_item, style)
    logger.debug(f'Adding property "{name}" in {tree.file_path}')
    return MutationResult.changed(tree.apply(edits))


# -- Array-element-upsert ---------------------------------------------------

def _element_matches(element: Node, name: str) -> bool:
    kind = kind_of(element)
    if kind == NodeKind.IDENTIFIER:
        return text_of(element) == name
    if kind == NodeKind.CALL:
        callee = element.child_by_field_name("function")
        return kind_of(callee) == NodeKind.IDENTIFIER and text_of(callee) == name
    return False


def upsert_array_element(
    tree: SyntaxTree,
    array: Node,
    element: Identifier,
    style: Optional[CodeStyle] = None,
) -> MutationResult:
    """
    Append element to array literal unless an equal element exists.

    An existing element is equal when it is the identifier itself or a
    call of it (`relay` or `relay()`).
    """
    if any(_element_matches(e, element.name) for e in named_children(array)):
        return MutationResult.already_applied(tree, f'"{element.name}" already present')

    style = style or detect_style(tree)

    def render_item(indent: str, prefix_width: int) -> str:
        return render(element, style, indent, prefix_width)

    edits = _append_to_container(tree, array, render_item, style)
    logger.debug(f'Adding "{element.name}" to array in {tree.file_path}')
    return MutationResult.changed(tree.apply(edits))


# -- Import-ensure ----------------------------------------------------------

def _unique_local_name(wanted: str, taken) -> str:
    if wanted not in taken:
        return wanted
    candidate = f"_{wanted}"
    counter = 2
    while candidate in taken:
        candidate = f"_{wanted}{counter}"
        counter += 1
    return candidate


_BOM = b"\xef\xbb\xbf"


def _import_insertion_point(tree: SyntaxTree) -> Tuple[int, bool]:
    """
    Offset for a new import declaration, and whether it lands at the end
    of a line (after a shebang or directive prologue) rather than at the
    start of one. A leading byte order mark stays first.
    """
    offset = len(_BOM) if tree.source.startswith(_BOM) else 0
    at_line_end = False
    for statement in tree.root.named_children:
        kind = kind_of(statement)
        if kind == NodeKind.HASH_BANG:
            offset, at_line_end = tree.line_end(statement.end_byte), True
            continue
        if kind == NodeKind.COMMENT:
            continue
        if kind == NodeKind.EXPRESSION_STATEMENT:
            expressions = named_children(statement)
            if len(expressions) == 1 and kind_of(expressions[0]) == NodeKind.STRING:
                offset, at_line_end = tree.line_end(statement.end_byte), True
                continue
        break
    return offset, at_line_end


def ensure_import(
    tree: SyntaxTree,
    module: str,
    name: str,
    is_default: bool = False,
    style: Optional[CodeStyle] = None,
) -> ImportResult:
    """
    Make `name` from module available and return its local name.

    An existing import of the same binding from the same module is reused
    together with its alias. Otherwise a new import declaration is added
    at the top of the file, aliased when `name` is already taken.
    """
    existing = find_import(tree, module, name, is_default)
    if existing is not None:
        logger.debug(f"Reusing import of {name} from '{module}' as {existing.local}")
        return ImportResult(tree=tree, local_name=existing.local, inserted=False)

    style = style or detect_style(tree)
    local = _unique_local_name(name, top_level_bindings(tree))
    statement = render_import(module, name, local, style, is_default)

    offset, at_line_end = _import_insertion_point(tree)
    if at_line_end:
        edit = TextEdit.insert(offset, style.line_ending + statement)
    else:
        edit = TextEdit.insert(offset, statement + style.line_ending)

    logger.debug(f"Inserting import of {name} from '{module}' as {local} in {tree.file_path}")
    return ImportResult(tree=tree.apply([edit]), local_name=local, inserted=True)


# -- JSX-wrap ---------------------------------------------------------------

def _multiline_template_ranges(anchor: Node) -> List[Tuple[int, int]]:
    return [
        (node.start_byte, node.end_byte)
        for node in walk(anchor)
        if node.type == "template_string" and node.start_point[0] != node.end_point[0]
    ]


def _reindent(anchor: Node, unit: str, eol: str) -> str:
    """
    Anchor text with every line after the first indented by one more unit.

    Lines that start inside a multi-line template literal are part of the
    string's value and are left as they are.
    """
    protected = _multiline_template_ranges(anchor)
    lines = text_of(anchor).split(eol)
    separator = len(eol.encode("utf8"))

    result = [lines[0]]
    offset = anchor.start_byte + len(lines[0].encode("utf8")) + separator
    for line in lines[1:]:
        inside = any(start < offset < end for start, end in protected)
        result.append(unit + line if line.strip() and not inside else line)
        offset += len(line.encode("utf8")) + separator
    return eol.join(result)


def wrap_jsx(
    tree: SyntaxTree,
    anchor: Node,
    provider: str,
    attribute: str,
    expression: JsValue,
    style: Optional[CodeStyle] = None,
) -> MutationResult:
    """
    Wrap anchor in `<provider attribute={expression}>...</provider>`.

    Already applied when the anchor's own tag is the provider.
    """
    if kind_of(anchor) not in JSX_KINDS:
        raise TypeError(f"Cannot wrap a {anchor.type} node")

    if jsx_tag_name(anchor) == provider:
        return MutationResult.already_applied(tree, f"JSX already wrapped with {provider}")

    style = style or detect_style(tree)
    opening = f"<{provider} {attribute}={{{render_inline(expression, style)}}}>"
    closing = f"</{provider}>"
    original = text_of(anchor)

    if anchor.start_point[0] == anchor.end_point[0]:
        replacement = opening + original + closing
    else:
        indent = tree.line_indent(anchor)
        eol = style.line_ending
        body = _reindent(anchor, style.indent_unit, eol)
        replacement = (
            opening + eol
            + indent + style.indent_unit + body + eol
            + indent + closing
        )

    logger.debug(f"Wrapping JSX at byte {anchor.start_byte} with {provider} in {tree.file_path}")
    return MutationResult.changed(tree.apply([TextEdit(anchor.start_byte, anchor.end_byte, replacement)]))
