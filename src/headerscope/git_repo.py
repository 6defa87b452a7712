"""Git repository wrapper for headerscope."""

import subprocess
from pathlib import Path

from .errors import GitError, InvalidDiffRangeError, NotAGitRepoError
from .utils import normalize_path


class GitRepo:
    """Wrapper for git operations."""

    def __init__(self, start_dir: str | Path = "."):
        """
        Initialize GitRepo by finding the repository root lazily.

        Args:
            start_dir: Directory to start searching from.
        """
        self._start_dir = Path(start_dir).resolve()
        self._root: Path | None = None

    @property
    def root(self) -> Path:
        """
        Get the repository root directory (cached).

        Raises:
            NotAGitRepoError: If not inside a git repository.
        """
        if self._root is None:
            result = subprocess.run(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=self._start_dir,
                capture_output=True,
                text=True,
            )
            if result.returncode != 0:
                raise NotAGitRepoError(str(self._start_dir))
            self._root = Path(result.stdout.strip())
        return self._root

    def _run(self, args: list[str]) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise GitError(f"git {' '.join(args)}", result.stderr.strip())
        return result.stdout

    def fetch(self, branch: str, remote: str = "origin") -> None:
        """Fetch a single branch without tags."""
        self._run(["fetch", "--no-tags", "--prune", remote, branch])

    def resolve_diff_range(self, diff_range: str | None = None, base_ref: str | None = None) -> str:
        """
        Determine the diff range to check.

        An explicit range wins; otherwise `base_ref` is fetched from origin
        and compared against HEAD with a three-dot range.

        Raises:
            InvalidDiffRangeError: If neither a range nor a base ref is given.
            GitError: If fetching the base fails.
        """
        if diff_range:
            return diff_range
        if not base_ref:
            raise InvalidDiffRangeError("missing base branch (use --base-ref or set GITHUB_BASE_REF)")
        self.fetch(base_ref)
        return f"origin/{base_ref}...HEAD"

    def diff_name_only(self, diff_range: str) -> str:
        """Paths added, copied, modified or renamed in the range."""
        return self._run(["diff", "--name-only", "--diff-filter=ACMR", diff_range])

    def diff_file(self, diff_range: str, path: str, unified: int = 0) -> str:
        """
        Get the unified diff of a single file.

        Args:
            diff_range: Range such as `origin/main...HEAD`.
            path: Repo-relative path.
            unified: Context lines per hunk (0 by default).
        """
        return self._run(
            [
                "diff",
                f"--unified={unified}",
                "--diff-filter=ACMR",
                diff_range,
                "--",
                normalize_path(path),
            ]
        )
