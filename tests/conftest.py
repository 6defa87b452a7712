"""Pytest fixtures for headerscope tests."""

import subprocess
import tempfile
from pathlib import Path

import pytest

WIDGET_HEADER = """#pragma once

/// A resizable widget.
class Widget {
public:
  /// Creates an empty widget.
  Widget();

  int size() const;
private:
  void grow();
};
"""


def git(repo_dir: Path, *args: str) -> str:
    """Run a git command in `repo_dir` and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo_dir,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(temp_dir):
    """Create a temporary git repository with one committed header."""
    repo_dir = temp_dir / "repo"
    repo_dir.mkdir()

    git(repo_dir, "init")
    git(repo_dir, "config", "user.email", "test@test.com")
    git(repo_dir, "config", "user.name", "Test User")
    git(repo_dir, "config", "commit.gpgsign", "false")

    include_dir = repo_dir / "include"
    include_dir.mkdir()
    (include_dir / "widget.hpp").write_text(WIDGET_HEADER)

    git(repo_dir, "add", ".")
    git(repo_dir, "commit", "-m", "Initial commit")

    yield repo_dir


def commit_changes(repo_dir: Path, message: str = "Update") -> str:
    """Commit all changes and return the commit hash."""
    git(repo_dir, "add", ".")
    git(repo_dir, "commit", "-m", message)
    return get_head(repo_dir)


def get_head(repo_dir: Path) -> str:
    """Get HEAD commit hash."""
    return git(repo_dir, "rev-parse", "HEAD").strip()
