"""Data models for headerscope."""

from dataclasses import dataclass, field
from typing import Any

# Declaration kinds
KIND_FUNCTION = "function"
KIND_METHOD = "method"
KIND_CLASS = "class"
KIND_STRUCT = "struct"
KIND_CONCEPT = "concept"

# Visibility levels
PUBLIC = "public"
NON_PUBLIC = "non_public"

# Access specifiers tracked inside class scopes
ACCESS_PUBLIC = "public"
ACCESS_PRIVATE = "private"
ACCESS_PROTECTED = "protected"

# Scope label for calls made outside any test block
GLOBAL_SCOPE = "<global>"


@dataclass(frozen=True)
class Declaration:
    """A function, method, class, struct or concept recovered from source text."""

    name: str
    kind: str  # "function"|"method"|"class"|"struct"|"concept"
    line: int  # 1-based
    visibility: str  # "public"|"non_public"
    file: str | None = None
    is_definition: bool = False  # signature followed by a body

    @property
    def key(self) -> tuple[str, int]:
        """Identity used for deduplication."""
        return (self.name, self.line)

    @property
    def is_public(self) -> bool:
        return self.visibility == PUBLIC

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind,
            "line": self.line,
            "visibility": self.visibility,
        }
        if self.file is not None:
            result["file"] = self.file
        return result


@dataclass
class ScopeFrame:
    """Currently inside class `class_name` with `access`, entered at `entry_brace_depth`."""

    class_name: str
    access: str
    entry_brace_depth: int


@dataclass
class PendingClass:
    """A class/struct header whose opening brace has not been seen yet."""

    name: str
    access: str
    attach_now: bool


@dataclass(frozen=True)
class CallReference:
    """A call-like expression attributed to a test scope (or the global sentinel)."""

    callee_name: str
    scope: str
    line: int = 0


# Models for diff parsing


@dataclass
class DiffHunk:
    """A single hunk from a unified diff, with the post-diff lines it adds."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    added_lines: set[int] = field(default_factory=set)


@dataclass
class FileDiff:
    """Diff information for a single file."""

    old_path: str
    new_path: str
    hunks: list[DiffHunk]

    @property
    def added_lines(self) -> set[int]:
        added: set[int] = set()
        for hunk in self.hunks:
            added |= hunk.added_lines
        return added


# Models for reports


@dataclass
class CoverageRow:
    """A declaration paired with the test scopes that reference it."""

    declaration: Declaration
    reference_scopes: list[str]  # sorted, distinct

    @property
    def is_referenced(self) -> bool:
        return bool(self.reference_scopes)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.declaration.to_dict(),
            "scope_count": len(self.reference_scopes),
            "scopes": list(self.reference_scopes),
        }


@dataclass
class DocCoverageRow:
    """A changed public declaration and whether a doc comment precedes it."""

    declaration: Declaration
    documented: bool

    def to_dict(self) -> dict[str, Any]:
        return {**self.declaration.to_dict(), "documented": self.documented}


@dataclass
class FileFailure:
    """A file that could not be analyzed; excluded from aggregates."""

    path: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "reason": self.reason}


def percentage(part: int, total: int) -> float:
    """Return 100 * part / total, or 0.0 when there is nothing to count."""
    if total == 0:
        return 0.0
    return 100.0 * part / total


@dataclass
class CoverageReport:
    """Result of joining library declarations with test call references."""

    rows: list[CoverageRow]
    unreferenced: list[Declaration]
    headers: list[str] = field(default_factory=list)
    tests: list[str] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def referenced(self) -> int:
        return sum(1 for row in self.rows if row.is_referenced)

    @property
    def percentage(self) -> float:
        return percentage(self.referenced, self.total)


@dataclass
class DocCoverageReport:
    """Result of checking documentation on newly added public declarations."""

    rows: list[DocCoverageRow]
    min_coverage: float
    diff_range: str | None = None
    files: list[str] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def documented(self) -> list[DocCoverageRow]:
        return [row for row in self.rows if row.documented]

    @property
    def undocumented(self) -> list[DocCoverageRow]:
        return [row for row in self.rows if not row.documented]

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def percentage(self) -> float:
        return percentage(len(self.documented), self.total)

    @property
    def passed(self) -> bool:
        # No changed declarations passes trivially.
        if self.total == 0:
            return True
        return self.percentage + 1e-9 >= self.min_coverage
