"""
Syntax Tree Adapter: parse JS/TS/JSX text into a tree and print it back.

A SyntaxTree keeps the exact source bytes it was parsed from. Mutations
are byte-range TextEdits spliced into those bytes, so every region that
was not edited prints back byte-for-byte.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript

from relaykit.config import GRAMMARS
from relaykit.exceptions import ConfigError, ParseError
from relaykit.logging_config import logger

_LANGUAGE_LOADERS = {
    "javascript": tsjavascript.language,
    "typescript": tstypescript.language_typescript,
    "tsx": tstypescript.language_tsx,
}

# Global cache for parsers to avoid repeated grammar loading
_parser_cache: Dict[str, Parser] = {}


def get_parser(language: str) -> Parser:
    """Return the cached tree-sitter parser for a grammar name."""
    if language in _parser_cache:
        return _parser_cache[language]

    loader = _LANGUAGE_LOADERS.get(language)
    if loader is None:
        supported = ", ".join(_LANGUAGE_LOADERS.keys())
        raise ConfigError(
            f"Language '{language}' is not supported. Supported languages: {supported}"
        )

    parser = Parser()
    parser.language = Language(loader())
    _parser_cache[language] = parser
    logger.debug(f"Initialized tree-sitter parser for '{language}'")
    return parser


def language_for_path(path: Union[str, Path]) -> str:
    """
    Grammar name for a file, chosen by extension.

    Raises:
        ConfigError: If the extension is not a JS/TS source extension.
    """
    extension = Path(path).suffix.lower()
    if extension not in GRAMMARS:
        supported = ", ".join(GRAMMARS.keys())
        raise ConfigError(
            f"File extension '{extension}' is not supported. Supported extensions: {supported}"
        )
    return GRAMMARS[extension]


@dataclass(frozen=True)
class TextEdit:
    """Replace source bytes [start, end) with text. start == end inserts."""
    start: int
    end: int
    text: str

    @classmethod
    def insert(cls, offset: int, text: str) -> "TextEdit":
        return cls(offset, offset, text)


class SyntaxTree:
    """
    One parsed file.

    Owned by the task invocation that parsed it. Nodes handed out by
    root or by matchers are only valid for this tree; apply() returns a
    new tree instead of changing this one.
    """

    def __init__(self, tree: Tree, source: bytes, language: str, file_path: str = "<memory>"):
        self._tree = tree
        self.source = source
        self.language = language
        self.file_path = file_path

    @property
    def root(self) -> Node:
        return self._tree.root_node

    @property
    def text(self) -> str:
        return self.source.decode("utf8")

    def slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf8")

    def line_start(self, offset: int) -> int:
        """Byte offset of the start of the line containing offset."""
        return self.source.rfind(b"\n", 0, offset) + 1

    def line_end(self, offset: int) -> int:
        """Byte offset of the line terminator (or EOF) following offset."""
        end = self.source.find(b"\n", offset)
        if end == -1:
            return len(self.source)
        if end > 0 and self.source[end - 1:end] == b"\r":
            return end - 1
        return end

    def line_indent(self, node: Node) -> str:
        """Leading whitespace of the line on which node starts."""
        start = self.line_start(node.start_byte)
        line = self.source[start:node.start_byte].decode("utf8")
        return line[:len(line) - len(line.lstrip())]

    def apply(self, edits: Sequence[TextEdit]) -> "SyntaxTree":
        """
        Splice edits into the source and re-parse.

        Edits are given against this tree's offsets and must not overlap.

        Raises:
            ParseError: If the edited text no longer parses.
        """
        ordered: List[TextEdit] = sorted(edits, key=lambda e: (e.start, e.end))
        for previous, current in zip(ordered, ordered[1:]):
            if current.start < previous.end:
                raise ValueError(f"Overlapping edits at byte {current.start}")

        chunks = []
        cursor = 0
        for edit in ordered:
            chunks.append(self.source[cursor:edit.start])
            chunks.append(edit.text.encode("utf8"))
            cursor = edit.end
        chunks.append(self.source[cursor:])

        return parse_bytes(b"".join(chunks), self.language, self.file_path)


def _first_error(node: Node) -> Optional[Node]:
    """First ERROR or MISSING node in document order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return None


def parse_bytes(source: bytes, language: str, file_path: str = "<memory>") -> SyntaxTree:
    parser = get_parser(language)
    tree = parser.parse(source)

    if tree.root_node.has_error:
        error = _first_error(tree.root_node) or tree.root_node
        line = error.start_point[0] + 1
        column = error.start_point[1] + 1
        reason = f"missing {error.type}" if error.is_missing else "unexpected syntax"
        raise ParseError(file_path, reason, line, column)

    return SyntaxTree(tree, source, language, file_path)


def parse(text: str, language: str = "javascript", file_path: str = "<memory>") -> SyntaxTree:
    """
    Parse source text.

    Args:
        text: File contents
        language: Grammar name ("javascript", "typescript", "tsx")
        file_path: Used in error messages only

    Raises:
        ParseError: If the text is not valid in the given language variant.
    """
    return parse_bytes(text.encode("utf8"), language, file_path)


def parse_file_content(text: str, file_path: Union[str, Path]) -> SyntaxTree:
    """Parse text with the grammar chosen from file_path's extension."""
    return parse(text, language_for_path(file_path), str(file_path))


def print_tree(tree: SyntaxTree) -> str:
    """Serialize a tree back to text."""
    return tree.text
