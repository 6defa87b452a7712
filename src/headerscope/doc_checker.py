"""Documentation checks for public declarations added by a diff."""

from __future__ import annotations

import re
from typing import Iterable

from .config_store import ScanConfig
from .diff_parser import DiffParser
from .errors import HeaderscopeError
from .extractor import extract_declarations
from .git_repo import GitRepo
from .logging import get_logger
from .models import DocCoverageReport, DocCoverageRow, FileFailure
from .utils import in_scope_header, read_source

logger = get_logger("doc_checker")

# Non-blank lines inspected above a declaration before giving up
MAX_DOC_SCAN_LINES = 20

ACCESS_LINE_PATTERN = re.compile(r"^(public|private|protected)\s*:\s*$")
TEMPLATE_HEADER_PATTERN = re.compile(r"^template\s*<")
TEMPLATE_CONTINUATION_PATTERN = re.compile(r"^(?:typename|class)\b.+(?:,|>|>>)\s*$")
_SKIPPED_PREFIXES = ("requires ", "[[", "]]")
_LINE_DOC_PREFIXES = ("///", "//!")
_TRAILING_DOC_MARKERS = ("///<", "//!<")


def opens_doc_block(line: str) -> bool:
    return line.strip().startswith(("/**", "/*!"))


def _is_skippable(line: str) -> bool:
    """Lines allowed between a doc comment and the declaration it documents."""
    return bool(
        ACCESS_LINE_PATTERN.match(line)
        or TEMPLATE_HEADER_PATTERN.match(line)
        or line.startswith(_SKIPPED_PREFIXES)
        or TEMPLATE_CONTINUATION_PATTERN.match(line)
    )


def has_doc_comment_before(
    lines: list[str], line_no: int, max_lines: int = MAX_DOC_SCAN_LINES
) -> bool:
    """
    Decide whether the declaration on `line_no` carries a doc comment.

    Accepts a trailing member doc (`///<`) or a doc block opened on the
    declaration line itself, otherwise scans upward over at most
    `max_lines` non-blank lines, stepping over access specifiers, template
    headers, `requires` clauses and attributes.

    Args:
        lines: Raw (unsanitized) file lines.
        line_no: 1-based line of the declaration.
        max_lines: Non-blank lines to inspect.
    """
    idx = line_no - 1
    if idx < 0 or idx >= len(lines):
        return False

    here = lines[idx].strip()
    if any(marker in here for marker in _TRAILING_DOC_MARKERS):
        return True
    if opens_doc_block(here):
        return True

    examined = 0
    i = idx - 1
    while i >= 0 and examined < max_lines:
        s = lines[i].strip()
        if not s:
            i -= 1
            continue
        examined += 1

        if _is_skippable(s):
            i -= 1
            continue

        if s.startswith(_LINE_DOC_PREFIXES) or opens_doc_block(s):
            return True

        if "*/" in s:
            # Closing a block comment: documented only if its opener is a doc opener.
            j = i
            while j >= 0:
                t = lines[j].strip()
                if opens_doc_block(t):
                    return True
                if t.startswith("/*"):
                    break
                j -= 1
            return False

        break

    return False


def check_doc_coverage(
    file_text: str, added_line_numbers: Iterable[int], path: str | None = None
) -> list[DocCoverageRow]:
    """
    Classify the public declarations on added lines as documented or not.

    Args:
        file_text: Current (post-diff) file contents.
        added_line_numbers: 1-based line numbers the diff added.
        path: Optional label carried on each declaration.

    Returns:
        One row per changed public declaration, ordered by (name, line).
    """
    added = set(added_line_numbers)
    if not added:
        return []

    lines = file_text.split("\n")
    rows: list[DocCoverageRow] = []
    for decl in extract_declarations(file_text, path=path):
        if not decl.is_public or decl.line not in added:
            continue
        rows.append(DocCoverageRow(declaration=decl, documented=has_doc_comment_before(lines, decl.line)))
    return rows


class DocCoverageGate:
    """Runs the documentation check over every header changed in a diff range."""

    def __init__(self, repo: GitRepo, config: ScanConfig | None = None):
        self.repo = repo
        self.config = config or ScanConfig()
        self.parser = DiffParser()

    def changed_headers(self, diff_range: str) -> list[str]:
        """Added/copied/modified/renamed headers that pass the scope filter."""
        paths = self.parser.parse_name_only(self.repo.diff_name_only(diff_range))
        return [
            p
            for p in paths
            if in_scope_header(
                p,
                self.config.header_extensions,
                self.config.excluded_top_level,
                self.config.excluded_prefixes,
            )
        ]

    def run(self, diff_range: str) -> DocCoverageReport:
        """
        Check every in-scope changed header.

        A header whose diff or contents can't be read is recorded as a
        failure and excluded from the totals.
        """
        files = self.changed_headers(diff_range)
        rows: list[DocCoverageRow] = []
        failures: list[FileFailure] = []

        for path in files:
            try:
                added = self.parser.parse_added_lines(self.repo.diff_file(diff_range, path))
                if not added:
                    continue
                text = read_source(self.repo.root / path)
            except HeaderscopeError as e:
                logger.warning("unable to analyze %s: %s", path, e)
                failures.append(FileFailure(path=path, reason=str(e)))
                continue

            file_rows = check_doc_coverage(text, added, path=path)
            logger.debug("%s: %d changed public declaration(s)", path, len(file_rows))
            rows.extend(file_rows)

        report = DocCoverageReport(
            rows=rows,
            min_coverage=self.config.min_coverage,
            diff_range=diff_range,
            files=files,
            failures=failures,
        )
        logger.info("analyzed headers: %d", len(files))
        return report
