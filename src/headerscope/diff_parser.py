"""Git diff parsing for headerscope."""

import re

from .models import DiffHunk, FileDiff


# Regex patterns
HUNK_PATTERN = re.compile(r"^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@")
DIFF_HEADER_PATTERN = re.compile(r"^diff --git a/(.+) b/(.+)$")

# Marker git emits after a line that lacks a trailing newline
NO_NEWLINE_MARKER = "\\"


class DiffParser:
    """Parser for git unified diff output."""

    def parse_added_lines(self, diff_text: str) -> set[int]:
        """
        Reconstruct which post-diff line numbers a unified diff adds.

        Lines before the first hunk header are ignored.

        Args:
            diff_text: Unified diff text, typically for a single file.

        Returns:
            Set of 1-based line numbers in the new file that were added.
        """
        added: set[int] = set()
        for file_diff in self.parse_patch(diff_text, require_file_header=False):
            added |= file_diff.added_lines
        return added

    def parse_patch(self, diff_text: str, require_file_header: bool = True) -> list[FileDiff]:
        """
        Parse a unified diff into structured FileDiff objects.

        Hunk bodies are consumed by the line counts in their `@@` header, so
        an added line such as `++i;` (shown as `+++i;`) is content, not a
        file header.

        Args:
            diff_text: Output from `git diff` (any context size).
            require_file_header: If False, hunks that appear without a
                preceding `diff --git` header are collected into a single
                anonymous FileDiff (useful for already-filtered diffs).

        Returns:
            List of FileDiff objects, one per changed file.
        """
        if not diff_text.strip():
            return []

        file_diffs: list[FileDiff] = []
        current_diff: FileDiff | None = None
        current_hunk: DiffHunk | None = None
        cur_new = 0
        old_left = 0
        new_left = 0

        lines = diff_text.split("\n")
        if lines[-1] == "":
            lines.pop()

        for line in lines:
            if line.startswith(NO_NEWLINE_MARKER):
                continue

            if current_hunk is not None:
                if line.startswith("+"):
                    current_hunk.added_lines.add(cur_new)
                    cur_new += 1
                    new_left -= 1
                elif line.startswith("-"):
                    # deletion, destination counter stays put
                    old_left -= 1
                else:
                    cur_new += 1
                    old_left -= 1
                    new_left -= 1
                if old_left <= 0 and new_left <= 0:
                    current_hunk = None
                continue

            header_match = DIFF_HEADER_PATTERN.match(line)
            if header_match:
                if current_diff is not None:
                    file_diffs.append(current_diff)
                current_diff = FileDiff(
                    old_path=header_match.group(1),
                    new_path=header_match.group(2),
                    hunks=[],
                )
                continue

            hunk_match = HUNK_PATTERN.match(line)
            if not hunk_match:
                # file metadata (index, ---/+++ headers, mode lines) or stray text
                continue

            if current_diff is None:
                if require_file_header:
                    continue
                current_diff = FileDiff(old_path="", new_path="", hunks=[])
            hunk = DiffHunk(
                old_start=int(hunk_match.group(1)),
                old_count=int(hunk_match.group(2)) if hunk_match.group(2) else 1,
                new_start=int(hunk_match.group(3)),
                new_count=int(hunk_match.group(4)) if hunk_match.group(4) else 1,
            )
            current_diff.hunks.append(hunk)
            cur_new = hunk.new_start
            old_left = hunk.old_count
            new_left = hunk.new_count
            if old_left > 0 or new_left > 0:
                current_hunk = hunk

        if current_diff is not None:
            file_diffs.append(current_diff)

        for fd in file_diffs:
            fd.hunks.sort(key=lambda h: h.old_start)
        return file_diffs

    def parse_name_only(self, name_only_text: str) -> list[str]:
        """Parse `git diff --name-only` output into a list of paths."""
        return [line.strip() for line in name_only_text.splitlines() if line.strip()]
