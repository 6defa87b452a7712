"""Coverage matrix: which test scopes call which library declarations."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .config_store import ScanConfig
from .errors import HeaderscopeError
from .extractor import extract_declarations
from .logging import get_logger
from .models import CallReference, CoverageReport, CoverageRow, Declaration, FileFailure
from .references import extract_calls
from .utils import normalize_path, read_source

logger = get_logger("coverage")


def build_matrix(
    declarations: Iterable[Declaration], call_references: Iterable[CallReference]
) -> list[CoverageRow]:
    """
    Join declarations with the scopes whose calls name them.

    Callee names that match no declaration are ignored. Rows are ordered
    by (name, line, file) and each row's scopes are distinct and sorted.
    """
    unique: dict[tuple[str, str, int], Declaration] = {}
    for decl in declarations:
        unique.setdefault((decl.file or "", *decl.key), decl)

    declared_names = {decl.name for decl in unique.values()}
    scopes_by_name: dict[str, set[str]] = {name: set() for name in declared_names}
    for ref in call_references:
        if ref.callee_name in scopes_by_name:
            scopes_by_name[ref.callee_name].add(ref.scope)

    ordered = sorted(unique.values(), key=lambda d: (d.name, d.line, d.file or ""))
    return [
        CoverageRow(declaration=decl, reference_scopes=sorted(scopes_by_name[decl.name]))
        for decl in ordered
    ]


def unreferenced_declarations(rows: Iterable[CoverageRow]) -> list[Declaration]:
    """Declarations with no referencing scope, one entry per declaration identity."""
    seen: set[tuple[str, str, int]] = set()
    result: list[Declaration] = []
    for row in rows:
        decl = row.declaration
        ident = (decl.file or "", *decl.key)
        if row.is_referenced or ident in seen:
            continue
        seen.add(ident)
        result.append(decl)
    return result


class CoverageScanner:
    """Builds a coverage report from header files and test sources on disk."""

    def __init__(self, config: ScanConfig | None = None, root: str | Path | None = None):
        self.config = config or ScanConfig()
        self.root = Path(root) if root is not None else None

    def _label(self, path: str | Path) -> str:
        path = Path(path)
        if self.root is not None:
            try:
                return normalize_path(str(path.resolve().relative_to(self.root.resolve())))
            except ValueError:
                pass
        return normalize_path(str(path))

    def scan(
        self, header_paths: Iterable[str | Path], test_paths: Iterable[str | Path]
    ) -> CoverageReport:
        """
        Read every header and test file and build the matrix.

        Unreadable files are recorded as failures and left out; they never
        abort the scan.
        """
        failures: list[FileFailure] = []
        declarations: list[Declaration] = []
        references: list[CallReference] = []
        headers: list[str] = []
        tests: list[str] = []

        for path in header_paths:
            label = self._label(path)
            try:
                text = read_source(path)
            except HeaderscopeError as e:
                logger.warning("skipping header %s: %s", label, e)
                failures.append(FileFailure(path=label, reason=str(e)))
                continue
            headers.append(label)
            declarations.extend(extract_declarations(text, definitions_only=True, path=label))

        for path in test_paths:
            label = self._label(path)
            try:
                text = read_source(path)
            except HeaderscopeError as e:
                logger.warning("skipping test source %s: %s", label, e)
                failures.append(FileFailure(path=label, reason=str(e)))
                continue
            tests.append(label)
            references.extend(extract_calls(text, label))

        rows = build_matrix(declarations, references)
        report = CoverageReport(
            rows=rows,
            unreferenced=unreferenced_declarations(rows),
            headers=headers,
            tests=tests,
            failures=failures,
        )
        logger.info(
            "coverage: %d/%d declaration(s) referenced (%.2f%%)",
            report.referenced,
            report.total,
            report.percentage,
        )
        return report
