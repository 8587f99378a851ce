#!/usr/bin/env python3
"""Command-line interface for import-tidy using Click."""

from importlib import metadata
import logging
from pathlib import Path
import sys
from typing import Tuple

import click
from import_tidy import core
from import_tidy.config import TidyConfig
from import_tidy.config import build_config
from import_tidy.errors import ConfigError
from import_tidy.errors import ImportTidyError

try:
    VERSION = f"import-tidy {metadata.version('import-tidy')}"
except metadata.PackageNotFoundError:
    VERSION = "import-tidy"


def _handle_files(path: Path, config: TidyConfig, apply_changes: bool) -> int:
    """Check or fix the Go files under ``path``.

    Args:
        path: File or directory to process.
        config: Settings for this run.
        apply_changes: If True, rewrite imports in place.
    Returns:
        0 if every file is fine (or was fixed), 1 if some file violates the
        convention in check mode, 2 if an error stopped the run.
    """
    if path.is_file():
        file_paths = [path]
    else:
        file_paths = list(core.iter_go_files(str(path), config.exclude))

    exit_code = 0
    violations = 0

    for file_path in file_paths:
        try:
            violating, modified = core.process_file(str(file_path), config, apply=apply_changes)
        except (ImportTidyError, OSError) as exc:
            logging.error("[%s] ERROR: %s", file_path, exc)
            return 2

        if apply_changes:
            if modified:
                logging.info("[%s] file updated.", file_path)
            else:
                logging.debug("[%s] imports already canonical.", file_path)
        elif violating:
            logging.warning("[%s] imports are not grouped as %s.", file_path, config.order)
            violations += 1
            exit_code = 1

    if violations:
        logging.info("Files with badly grouped imports: %d", violations)
    else:
        logging.info("done!")
    return exit_code


@click.command(help="Check, or fix with --fix, the grouping of imports in Go files.")
@click.argument("path", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@click.option("--internal-prefix", envvar="IMPORT_TIDY_INTERNAL_PREFIX", default=None,
              help="Prefix for internal imports (required).")
@click.option("--order", envvar="IMPORT_TIDY_ORDER", default=None,
              help="Comma-separated tier order, default: standard,external,internal.")
@click.option("--formatter", envvar="IMPORT_TIDY_FORMATTER", default=None,
              help="Formatter run on fixed files, default: gofmt. Use 'none' to skip.")
@click.option("--exclude", multiple=True, help="Sub-path of PATH to skip; may be repeated.")
@click.option("--fix", "apply_changes", is_flag=True, help="Rewrite imports in place.")
@click.option("-v", "--verbose", is_flag=True, help="Increase verbosity.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.version_option(version=VERSION, prog_name="import-tidy CLI")
def cli(path: str, internal_prefix: str, order: str, formatter: str, exclude: Tuple[str, ...],
        apply_changes: bool, verbose: bool, quiet: bool) -> None:
    # Configure logging only once
    if not logging.getLogger().handlers:
        if quiet:
            logging.basicConfig(level=logging.ERROR, format="%(message)s")
        else:
            logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    target = Path(path)
    root = target if target.is_dir() else target.parent
    try:
        config = build_config(str(root), internal_prefix, order, formatter, exclude)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    sys.exit(_handle_files(target, config, apply_changes))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
