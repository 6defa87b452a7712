"""JSON and Markdown rendering of coverage and documentation reports."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import CoverageReport, CoverageRow, DocCoverageReport, DocCoverageRow
from .utils import truncate_list

REPORT_SCHEMA_VERSION = 1


def _utc_now() -> str:
    """Return current UTC time as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def coverage_to_dict(report: CoverageReport) -> dict[str, Any]:
    """
    Convert a CoverageReport to a dictionary for JSON serialization.

    Args:
        report: The coverage report.

    Returns:
        Dictionary representation.
    """
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "generated_at": _utc_now(),
        "headers": report.headers,
        "tests": report.tests,
        "total": report.total,
        "referenced": report.referenced,
        "percentage": round(report.percentage, 2),
        "rows": [row.to_dict() for row in report.rows],
        "unreferenced": [decl.to_dict() for decl in report.unreferenced],
        "failures": [f.to_dict() for f in report.failures],
    }


def doc_coverage_to_dict(report: DocCoverageReport) -> dict[str, Any]:
    """Convert a DocCoverageReport to a dictionary for JSON serialization."""
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "generated_at": _utc_now(),
        "diff_range": report.diff_range,
        "files": report.files,
        "total": report.total,
        "documented": len(report.documented),
        "percentage": round(report.percentage, 2),
        "min_coverage": report.min_coverage,
        "passed": report.passed,
        "documented_rows": [row.to_dict() for row in report.documented],
        "undocumented_rows": [row.to_dict() for row in report.undocumented],
        "failures": [f.to_dict() for f in report.failures],
    }


def report_to_dict(report: CoverageReport | DocCoverageReport) -> dict[str, Any]:
    """Serialize either report type."""
    if isinstance(report, DocCoverageReport):
        return doc_coverage_to_dict(report)
    return coverage_to_dict(report)


def write_json(data: dict[str, Any], path: str | Path) -> None:
    """
    Write a JSON document.

    Args:
        data: Serializable report dictionary.
        path: Path to write the document.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def _format_scopes(row: CoverageRow, max_scopes: int) -> str:
    shown, extra = truncate_list(row.reference_scopes, max_scopes)
    text = ", ".join(f"`{scope}`" for scope in shown)
    if extra:
        text += f" (+{extra} more)"
    return text or "-"


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_coverage_markdown(report: CoverageReport, max_scopes: int = 5, max_listed: int = 200) -> str:
    """Render the coverage matrix as a Markdown document."""
    lines = [
        "# Header Test Coverage Matrix",
        "",
        f"**Generated:** {_utc_now()}",
        "",
        "## Summary",
        "",
        f"- **Headers:** {len(report.headers)}",
        f"- **Test sources:** {len(report.tests)}",
        f"- **Referenced declarations:** {report.referenced}/{report.total}"
        f" ({report.percentage:.2f}%)",
        "",
    ]

    if report.rows:
        lines.extend([
            "## Matrix",
            "",
            "| Declaration | Line | Scopes | Referenced by |",
            "|---|---|---|---|",
        ])
        for row in report.rows:
            decl = row.declaration
            location = f"{decl.file}:{decl.line}" if decl.file else str(decl.line)
            lines.append(
                f"| `{_escape_cell(decl.name)}` | {location} | {len(row.reference_scopes)} "
                f"| {_escape_cell(_format_scopes(row, max_scopes))} |"
            )
        lines.append("")

    if report.unreferenced:
        lines.extend(["## Unreferenced", ""])
        for decl in report.unreferenced[: max_listed if max_listed > 0 else None]:
            location = f"{decl.file}:{decl.line}" if decl.file else f"line {decl.line}"
            lines.append(f"- `{location}` ({decl.kind} `{decl.name}`)")
        extra = len(report.unreferenced) - max_listed
        if max_listed > 0 and extra > 0:
            lines.append(f"- ... and {extra} more")
        lines.append("")

    if report.failures:
        lines.extend(["## Skipped Files", ""])
        for failure in report.failures:
            lines.append(f"- `{failure.path}`: {failure.reason}")
        lines.append("")

    return "\n".join(lines)


def _doc_row_line(row: DocCoverageRow) -> str:
    decl = row.declaration
    return f"`{decl.file}:{decl.line}` ({decl.kind} `{decl.name}`)"


def render_doc_summary(report: DocCoverageReport, max_listed: int = 200) -> str:
    """Render the documentation gate summary as Markdown."""
    lines = [
        "## Header Docstring Coverage",
        "",
        f"- Diff range: `{report.diff_range}`",
        f"- In-scope changed headers: **{len(report.files)}**",
        f"- Covered declarations: **{len(report.documented)}/{report.total}**",
        f"- Coverage: **{report.percentage:.2f}%** (min: **{report.min_coverage:g}%**)",
        "",
    ]

    undocumented = report.undocumented
    if not undocumented:
        lines.append("Result: PASS")
    else:
        # Any undocumented addition is reported even when the threshold holds.
        lines.append("Result: FAIL")
        lines.extend(["", "Undocumented changed declarations:"])
        for row in undocumented[: max_listed if max_listed > 0 else None]:
            lines.append(f"- {_doc_row_line(row)}")
        extra = len(undocumented) - max_listed
        if max_listed > 0 and extra > 0:
            lines.append(f"- ... and {extra} more")

    if report.failures:
        lines.extend(["", "Files that could not be analyzed:"])
        for failure in report.failures:
            lines.append(f"- `{failure.path}`: {failure.reason}")

    return "\n".join(lines) + "\n"


def write_markdown(text: str, path: str | Path) -> None:
    """Write a rendered Markdown document."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
