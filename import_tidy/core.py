#!/usr/bin/env python3
"""Core utilities for import-tidy. This module
validates the grouping of a Go import declaration, builds its canonical
replacement and writes fixed files back, running them through the Go
formatter on the way.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
import shlex
import stat
import subprocess
from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple

from import_tidy.config import TidyConfig
from import_tidy.errors import SourceParseError
from import_tidy.parser import ImportBlock
from import_tidy.parser import ImportEntry
from import_tidy.parser import extract_import_block
from import_tidy.rules import Tier
from import_tidy.rules import TierOrder
from import_tidy.rules import split_imports

LOG = logging.getLogger(__name__)

INDENT = "\t"


def has_blank_line_before(previous: ImportEntry, current: ImportEntry) -> bool:
    """Return True if a blank line separates ``previous`` from ``current``.

    Lines taken by ``current``'s doc comments are not blank.
    """
    between = range(previous.end_line + 1, current.start_line)
    return any(line not in current.doc_lines for line in between)


def is_violating(entries: List[ImportEntry], order: TierOrder) -> bool:
    """Check whether imports, in source order, break the grouping convention.

    Tiers must appear in ``order`` without going back to an earlier tier,
    different tiers must be separated by a blank line and entries of the same
    tier must not be.
    """
    if len(entries) < 2:
        return False

    for prev, curr in zip(entries, entries[1:]):
        if order.rank(curr.tier) < order.rank(prev.tier):
            LOG.debug("line %d: %s import %r after %s imports", curr.start_line,
                      curr.tier.value, curr.path, prev.tier.value)
            return True
        blank = has_blank_line_before(prev, curr)
        if curr.tier != prev.tier and not blank:
            LOG.debug("line %d: missing blank line before %s imports", curr.start_line, curr.tier.value)
            return True
        if curr.tier == prev.tier and blank:
            LOG.debug("line %d: blank line inside %s imports", curr.start_line, curr.tier.value)
            return True
    return False


def group_imports(entries: Iterable[ImportEntry], order: TierOrder) -> List[List[ImportEntry]]:
    """Return the non-empty tier buckets in ``order``, each sorted by path."""
    buckets: Dict[Tier, List[ImportEntry]] = split_imports(entries, order)
    return [sorted(buckets[tier], key=lambda entry: entry.path) for tier in order if buckets[tier]]


def format_import_spec(entry: ImportEntry) -> str:
    """Render a single import spec without indentation."""
    spec = f'"{entry.path}"'
    if entry.alias:
        spec = f"{entry.alias} {spec}"
    if entry.comment:
        spec = f"{spec} {entry.comment}"
    return spec


def build_import_block(entries: List[ImportEntry], order: TierOrder) -> str:
    """Build the canonical import declaration for ``entries``.

    A single import is written as ``import "path"``. Anything else becomes a
    parenthesised block with one blank line between consecutive tiers.
    The result has no trailing newline.
    """
    groups = group_imports(entries, order)

    if sum(len(group) for group in groups) == 1:
        entry = groups[0][0]
        return "\n".join(list(entry.doc) + [f"import {format_import_spec(entry)}"])

    lines: List[str] = ["import ("]
    for index, group in enumerate(groups):
        if index:
            lines.append("")
        for entry in group:
            for doc in entry.doc:
                lines.extend(INDENT + line if line else "" for line in doc.split("\n"))
            lines.append(INDENT + format_import_spec(entry))
    lines.append(")")
    return "\n".join(lines)


def splice_import_block(source: bytes, block: ImportBlock, new_block: str) -> bytes:
    """Replace the import declaration in ``source`` with ``new_block``."""
    return source[:block.start_byte] + new_block.encode("utf-8") + source[block.end_byte:]


def run_code_formatter(source: bytes, formatter: str) -> Optional[bytes]:
    """Run the Go formatter over ``source``.

    Args:
        source: Go source to format.
        formatter: Formatter command line, e.g. ``gofmt``. It reads the
            source on stdin and writes the result to stdout.

    Returns:
        The formatted source, or None if the formatter is missing or fails.
    """
    cmd = shlex.split(formatter)
    LOG.debug("Running %s...", formatter)
    try:
        result = subprocess.run(cmd, input=source, capture_output=True, check=False)
    except FileNotFoundError:
        LOG.warning("%s not found, keeping unformatted output.", cmd[0])
        return None
    if result.returncode != 0:
        LOG.warning("%s failed, keeping unformatted output: %s", cmd[0],
                    result.stderr.decode("utf-8", errors="replace").strip())
        return None
    return result.stdout


def write_source(path: Path, content: bytes, mode: int) -> None:
    """Write ``content`` to ``path`` and restore its permission bits."""
    path.write_bytes(content)
    os.chmod(path, stat.S_IMODE(mode))


def process_file(file_path: str, config: TidyConfig, apply: bool = False) -> Tuple[bool, bool]:
    """Check a single Go file and, when ``apply`` is set, rewrite its imports.

    In fix mode the import declaration is always rebuilt in canonical form,
    whether or not the check found a violation.

    Returns:
        (violating, modified): whether the original imports broke the
        convention, and whether the file content changed on disk.

    Raises:
        SourceParseError: If the file is not valid Go.
        OSError: If the file cannot be read or written.
    """
    path_obj = Path(file_path)
    file_stat = path_obj.stat()
    source = path_obj.read_bytes()

    try:
        block = extract_import_block(source, config.internal_prefix)
    except SourceParseError as exc:
        raise SourceParseError(f"{file_path}:{exc.lineno}: {exc}", exc.lineno) from exc

    if block is None or not block.entries:
        LOG.debug("[%s] no imports.", file_path)
        return False, False

    violating = is_violating(block.entries, config.order)
    if not apply:
        return violating, False

    new_source = splice_import_block(source, block, build_import_block(block.entries, config.order))
    if config.formatter:
        formatted = run_code_formatter(new_source, config.formatter)
        if formatted is not None:
            new_source = formatted

    write_source(path_obj, new_source, file_stat.st_mode)
    return violating, new_source != source


def iter_go_files(root: str, ignore: Optional[Iterable[str]] = None) -> Iterator[Path]:
    """Yield Go files under the given root directory, excluding specified patterns."""
    ignore_parts = [Path(pattern).parts for pattern in ignore or []]
    root_path = Path(root)
    for path in sorted(root_path.rglob('*.go')):
        if not path.is_file():
            continue
        relative = path.relative_to(root_path).parts
        if any(relative[:len(parts)] == parts for parts in ignore_parts):
            continue
        yield path
