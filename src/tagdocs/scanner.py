"""Source file discovery and reading."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .errors import NoSourceFilesError, SourceRootError
from .models import Diagnostic

log = logging.getLogger(__name__)


def _relative_path(path: Path, root: Path) -> str:
    """Convert absolute path to a POSIX path relative to the source root."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def discover_files(root: Path, extensions: Iterable[str] = (".lua",)) -> list[Path]:
    """Find source files under ``root``, sorted by relative path."""
    if not root.is_dir():
        raise SourceRootError(f"Source root is not a directory: {root}", root)

    suffixes = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}
    files = [
        p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in suffixes
    ]
    if not files:
        raise NoSourceFilesError(
            f"No {', '.join(sorted(suffixes))} files found under {root}", root
        )
    return sorted(files, key=lambda p: _relative_path(p, root))


def read_sources(
    files: Iterable[Path], root: Path
) -> tuple[list[tuple[str, str]], list[Diagnostic]]:
    """Read files as UTF-8 text.

    Returns:
        ((relative_path, text) pairs, diagnostics for unreadable files)
    """
    sources: list[tuple[str, str]] = []
    diagnostics: list[Diagnostic] = []
    for path in files:
        rel = _relative_path(path, root)
        try:
            sources.append((rel, path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError) as e:
            diag = Diagnostic(
                "unreadable-file", f"skipped: {e.__class__.__name__}: {e}", rel
            )
            log.debug("%s", diag)
            diagnostics.append(diag)
        else:
            log.info("Scanning file: %s", rel)
    return sources, diagnostics
