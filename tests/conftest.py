"""Pytest configuration and fixtures for Git DSL tests."""

import asyncio
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import pytest

from gitdsl.config import SessionConfig
from gitdsl.model import RepositorySnapshot

SAMPLE_DIFF = """diff --git a/config.json b/config.json
index 1111111..2222222 100644
--- a/config.json
+++ b/config.json
@@ -1,4 +1,4 @@
 {
-  "name": "app",
+  "name": "service",
   "port": 80
 }
diff --git a/old_name.txt b/new_name.txt
similarity index 80%
rename from old_name.txt
rename to new_name.txt
index 3333333..4444444 100644
--- a/old_name.txt
+++ b/new_name.txt
@@ -1,2 +1,3 @@
 keep
-drop
+add one
+add two
diff --git a/created.txt b/created.txt
new file mode 100644
index 0000000..5555555
--- /dev/null
+++ b/created.txt
@@ -0,0 +1 @@
+hello
"""


class FakeRepository:
    """In-memory content and diff provider that counts calls."""

    def __init__(
        self,
        files: Optional[Dict[str, Dict[str, str]]] = None,
        diff_text: str = SAMPLE_DIFF,
        structured: Optional[List[Any]] = None,
        diff_error: Optional[Exception] = None,
    ):
        self.files = files or {}
        self.diff_text = diff_text
        self.structured = structured
        self.diff_error = diff_error
        self.diff_calls = 0
        self.structured_calls = 0
        self.content_calls: List[tuple] = []

    async def get_file_contents(self, path: str, repo: Optional[str], sha: str) -> str:
        self.content_calls.append((path, repo, sha))
        await asyncio.sleep(0)
        return self.files.get(sha, {}).get(path, "")

    async def get_full_diff(self, base: str, head: str) -> str:
        self.diff_calls += 1
        # Yield so concurrent callers overlap with the in-flight fetch
        await asyncio.sleep(0)
        if self.diff_error is not None:
            raise self.diff_error
        return self.diff_text

    async def get_structured_diff(self, base: str, head: str) -> List[Any]:
        self.structured_calls += 1
        await asyncio.sleep(0)
        return self.structured or []


@pytest.fixture
def session_config() -> SessionConfig:
    """Session between revisions "base" and "head" joining lines with \\n."""
    return SessionConfig(base_sha="base", head_sha="head", repo="org/repo", line_separator="\n")


@pytest.fixture
def snapshot() -> RepositorySnapshot:
    """Snapshot matching SAMPLE_DIFF."""
    return RepositorySnapshot(
        modified_files=["config.json", "new_name.txt"],
        created_files=["created.txt"],
        deleted_files=[],
    )


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Fake provider serving config.json at both revisions."""
    return FakeRepository(
        files={
            "base": {
                "config.json": '{\n  "name": "app",\n  "port": 80\n}\n',
                "old_name.txt": "keep\ndrop\n",
            },
            "head": {
                "config.json": '{\n  "name": "service",\n  "port": 80\n}\n',
                "new_name.txt": "keep\nadd one\nadd two\n",
                "created.txt": "hello\n",
            },
        }
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp(prefix="gitdsl_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()
    helper = GitRepoHelper(repo_path)

    helper.run_git(["init"])
    helper.run_git(["config", "user.name", "Test User"])
    helper.run_git(["config", "user.email", "test@example.com"])

    helper.create_file("README.md", "# Test Repository\n")
    helper.add_and_commit("Initial commit")

    yield repo_path


class GitRepoHelper:
    """Helper class for git repository operations in tests."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path
        self.env = os.environ.copy()
        self.env.update({
            "GIT_AUTHOR_NAME": "Test User",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test User",
            "GIT_COMMITTER_EMAIL": "test@example.com",
        })

    def run_git(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run git command in the repository."""
        return subprocess.run(
            ["git"] + args,
            cwd=self.repo_path,
            env=self.env,
            check=True,
            capture_output=True,
            text=True,
        )

    def create_file(self, path: str, content: str) -> None:
        """Create a file with content."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)

    def delete_file(self, path: str) -> None:
        """Delete a file."""
        file_path = self.repo_path / path
        if file_path.exists():
            file_path.unlink()

    def rename_file(self, old: str, new: str) -> None:
        """Rename a tracked file."""
        self.run_git(["mv", old, new])

    def add_and_commit(self, message: str) -> str:
        """Stage everything and commit, return commit SHA."""
        self.run_git(["add", "-A"])
        self.run_git(["commit", "-m", message])
        return self.get_current_sha()

    def get_current_sha(self) -> str:
        """Get current commit SHA."""
        result = self.run_git(["rev-parse", "HEAD"])
        return result.stdout.strip()


@pytest.fixture
def git_helper(git_repo: Path) -> GitRepoHelper:
    """Create a git repository helper."""
    return GitRepoHelper(git_repo)


@pytest.fixture
def two_revisions(git_helper: GitRepoHelper) -> tuple:
    """Repository with a modified JSON file, a rename, a creation and a deletion.

    Returns (repo_path, base_sha, head_sha).
    """
    git_helper.create_file("package.json", '{"name": "app", "dependencies": {"left-pad": "1.0.0"}}\n')
    git_helper.create_file("docs/guide.md", "line one\nline two\nline three\n")
    git_helper.create_file("obsolete.txt", "bye\n")
    base = git_helper.add_and_commit("Base")

    git_helper.create_file(
        "package.json",
        '{\n  // comments are allowed\n  "name": "app",\n'
        '  "dependencies": {"left-pad": "1.0.1", "lodash": "4.17.21",},\n}\n',
    )
    git_helper.rename_file("docs/guide.md", "docs/handbook.md")
    git_helper.create_file("notes.txt", "new\n")
    git_helper.delete_file("obsolete.txt")
    head = git_helper.add_and_commit("Head\n\nWith a body")

    return git_helper.repo_path, base, head
