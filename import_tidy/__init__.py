"""Top-level package for import-tidy.

This package exposes the core API for checking and fixing the grouping of
Go import declarations.
"""

from import_tidy.config import TidyConfig
from import_tidy.config import build_config
from import_tidy.core import build_import_block
from import_tidy.core import group_imports
from import_tidy.core import is_violating
from import_tidy.core import iter_go_files
from import_tidy.core import process_file
from import_tidy.core import run_code_formatter
from import_tidy.core import splice_import_block
from import_tidy.parser import ImportBlock
from import_tidy.parser import ImportEntry
from import_tidy.parser import extract_import_block
from import_tidy.rules import Tier
from import_tidy.rules import TierOrder
from import_tidy.rules import classify_import
from import_tidy.rules import resolve_order


__all__ = [
    "Tier",
    "TierOrder",
    "classify_import",
    "resolve_order",
    "ImportEntry",
    "ImportBlock",
    "extract_import_block",
    "is_violating",
    "group_imports",
    "build_import_block",
    "splice_import_block",
    "run_code_formatter",
    "process_file",
    "iter_go_files",
    "TidyConfig",
    "build_config",
]
