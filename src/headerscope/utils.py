"""Utility functions for headerscope."""

from pathlib import Path
from typing import Iterable, Sequence

from .errors import SourceReadError


def normalize_path(path: str) -> str:
    """Normalize a path to POSIX style (forward slashes)."""
    return Path(path).as_posix()


def read_source(path: str | Path) -> str:
    """
    Read a source file as text.

    Raises:
        SourceReadError: If the file is missing, unreadable or not a file.
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise SourceReadError(normalize_path(str(path)), e.strerror or str(e)) from e


def in_scope_header(
    path: str,
    extensions: Iterable[str],
    excluded_top_level: Iterable[str],
    excluded_prefixes: Iterable[str] = ("build", "cmake-build-"),
) -> bool:
    """
    Decide whether a repo-relative path is a library header worth checking.

    Args:
        path: Repo-relative path.
        extensions: Header extensions, compared case-sensitively (`.H` != `.h`).
        excluded_top_level: Top-level directories to skip (tests, examples, docs).
        excluded_prefixes: Any path component starting with one of these is skipped.
    """
    posix = normalize_path(path)
    if Path(posix).suffix not in set(extensions):
        return False

    parts = [p for p in posix.split("/") if p]
    if not parts:
        return False
    if parts[0] in set(excluded_top_level):
        return False
    prefixes = tuple(excluded_prefixes)
    if prefixes and any(p.startswith(prefixes) for p in parts):
        return False

    return True


def truncate_list(items: Sequence[str], limit: int) -> tuple[list[str], int]:
    """Return the first `limit` items and how many were left out (limit <= 0 keeps all)."""
    if limit <= 0 or len(items) <= limit:
        return list(items), 0
    return list(items[:limit]), len(items) - limit
