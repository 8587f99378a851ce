"""Parser module for import-tidy.

This module extracts the import declaration of a Go source file using
tree-sitter and turns it into a list of ImportEntry values the rest of the
package works with.
"""

from __future__ import annotations
from dataclasses import dataclass
from dataclasses import field
import functools
import logging
from typing import FrozenSet
from typing import List
from typing import Optional
from typing import Tuple

import tree_sitter_go
from tree_sitter import Language
from tree_sitter import Node
from tree_sitter import Parser

from import_tidy.errors import SourceParseError
from import_tidy.rules import Tier
from import_tidy.rules import classify_import

LOG = logging.getLogger(__name__)


@dataclass
class ImportEntry:
    """One imported path as it appears in source."""

    path: str
    tier: Tier
    alias: Optional[str] = None
    start_line: int = 0
    end_line: int = 0
    doc: Tuple[str, ...] = ()
    doc_lines: FrozenSet[int] = frozenset()
    comment: Optional[str] = None


@dataclass
class ImportBlock:
    """The import declaration of one file and the entries it lists."""

    entries: List[ImportEntry] = field(default_factory=list)
    start_byte: int = 0
    end_byte: int = 0
    start_line: int = 0
    end_line: int = 0


@functools.lru_cache(maxsize=None)
def get_parser() -> Parser:
    """Return the shared tree-sitter parser for Go."""
    parser = Parser()
    parser.language = Language(tree_sitter_go.language())
    return parser


def _node_text(node: Node, source: bytes) -> str:
    try:
        return source[node.start_byte:node.end_byte].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceParseError(f"invalid UTF-8: {exc.reason}", node.start_point[0] + 1) from exc


def _comment_text(comment: Node, source: bytes) -> str:
    """Return a comment's text with its source indentation removed from continuation lines."""
    text = _node_text(comment, source)
    line_start = source.rfind(b"\n", 0, comment.start_byte) + 1
    indent = source[line_start:comment.start_byte].decode("utf-8", errors="replace")
    if "\n" not in text or indent.strip():
        return text
    first, *rest = text.split("\n")
    return "\n".join([first] + [line[len(indent):] if line.startswith(indent) else line.lstrip()
                                for line in rest])


def _find_nodes_recursive(node: Node, node_type: str) -> List[Node]:
    results: List[Node] = []

    def traverse(n: Node) -> None:
        if n.type == node_type:
            results.append(n)
        for child in n.children:
            traverse(child)

    traverse(node)
    return results


def _first_error_line(node: Node) -> int:
    """Return the 1-based line of the first syntax error under ``node``."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            return _first_error_line(child)
    return node.start_point[0] + 1


def _attach_comments(specs: List[Node], comments: List[Node], entries: List[ImportEntry],
                     source: bytes) -> None:
    """Attach each comment in the declaration to the entry it belongs to.

    A comment starting on the line an entry ends on is that entry's trailing
    comment; any other comment documents the next entry. The lines a doc
    comment covers are recorded so they are not mistaken for blank lines.
    """
    docs: List[List[Tuple[range, str]]] = [[] for _ in specs]
    for comment in comments:
        text = _comment_text(comment, source)
        row = comment.start_point[0]
        previous = None
        following = None
        inside = False
        for index, spec in enumerate(specs):
            end = spec.child_by_field_name("path")
            if spec.start_byte < comment.start_byte < end.end_byte:
                inside = True
                break
            if end.end_byte <= comment.start_byte:
                previous = index
            elif spec.start_byte >= comment.end_byte:
                following = index
                break

        if inside:
            LOG.warning("line %d: dropping comment inside an import spec: %s", row + 1, text)
        elif previous is not None and specs[previous].child_by_field_name("path").end_point[0] == row:
            entry = entries[previous]
            entry.comment = text if entry.comment is None else f"{entry.comment} {text}"
        elif following is not None and (previous is None or following == previous + 1):
            docs[following].append((range(row + 1, comment.end_point[0] + 2), text))
        else:
            LOG.warning("line %d: dropping comment that belongs to no import: %s", row + 1, text)

    for entry, doc in zip(entries, docs):
        if doc:
            entry.doc = tuple(text for _, text in doc)
            entry.doc_lines = frozenset(line for lines, _ in doc for line in lines)


def _extract_entry(spec: Node, source: bytes, internal_prefix: str) -> ImportEntry:
    path_node = spec.child_by_field_name("path")
    if path_node is None:
        raise SourceParseError("import spec without a path", spec.start_point[0] + 1)
    path = _node_text(path_node, source)[1:-1]
    if not path:
        raise SourceParseError("empty import path", spec.start_point[0] + 1)

    alias: Optional[str] = None
    name_node = spec.child_by_field_name("name")
    if name_node is not None:
        alias = _node_text(name_node, source)

    return ImportEntry(
        path=path,
        tier=classify_import(path, internal_prefix),
        alias=alias,
        start_line=spec.start_point[0] + 1,
        end_line=path_node.end_point[0] + 1,
    )


def extract_import_block(source: bytes, internal_prefix: str) -> Optional[ImportBlock]:
    """Parse Go source and return its import declaration.

    Args:
        source: Raw file content.
        internal_prefix: Prefix of the project's own import paths.

    Returns:
        The first top-level import declaration as an ImportBlock, or None when
        the file imports nothing.

    Raises:
        SourceParseError: If the source contains syntax errors.
    """
    tree = get_parser().parse(source)
    root = tree.root_node
    if root.has_error:
        raise SourceParseError("invalid Go syntax", _first_error_line(root))

    declaration = next((node for node in root.children if node.type == "import_declaration"), None)
    if declaration is None:
        return None

    specs = _find_nodes_recursive(declaration, "import_spec")
    entries = [_extract_entry(spec, source, internal_prefix) for spec in specs]
    _attach_comments(specs, _find_nodes_recursive(declaration, "comment"), entries, source)

    LOG.debug("Found %d imports on lines %d-%d", len(entries),
              declaration.start_point[0] + 1, declaration.end_point[0] + 1)
    return ImportBlock(
        entries=entries,
        start_byte=declaration.start_byte,
        end_byte=declaration.end_byte,
        start_line=declaration.start_point[0] + 1,
        end_line=declaration.end_point[0] + 1,
    )
