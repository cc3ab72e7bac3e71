"""Tests for the GitDSL facade."""

import asyncio

import pytest

from conftest import FakeRepository
from gitdsl.dsl import GitDSL, git_json_to_git_dsl
from gitdsl.errors import ProviderNotConfiguredError
from gitdsl.model import RepositorySnapshot


def make_dsl(snapshot, config, repo):
    return GitDSL(
        snapshot,
        config,
        repo.get_file_contents,
        diff_provider=repo.get_full_diff,
    )


class TestGitDSL:
    """Test GitDSL lookups."""

    def test_file_sets(self, snapshot, session_config, fake_repo):
        """File sets come straight from the snapshot."""
        dsl = make_dsl(snapshot, session_config, fake_repo)
        assert dsl.modified_files == ("config.json", "new_name.txt")
        assert dsl.created_files == ("created.txt",)
        assert dsl.deleted_files == ()
        assert dsl.commits == ()

    def test_unknown_file(self, snapshot, session_config, fake_repo):
        """Files outside the diff give None, None and an empty tree."""
        dsl = make_dsl(snapshot, session_config, fake_repo)

        async def run():
            return (
                await dsl.diff_for_file("nope.json"),
                await dsl.json_patch_for_file("nope.json"),
                await dsl.json_diff_for_file("nope.json"),
                await dsl.structured_diff_for_file("nope.json"),
            )

        text, patch, tree, entry = asyncio.run(run())
        assert text is None
        assert patch is None
        assert tree == {}
        assert entry is None

    def test_views_share_one_diff_fetch(self, snapshot, session_config, fake_repo):
        """Every text and structured lookup of a session reuses one fetch."""
        dsl = make_dsl(snapshot, session_config, fake_repo)

        async def run():
            await asyncio.gather(
                dsl.diff_for_file("config.json"),
                dsl.diff_for_file("new_name.txt"),
                dsl.structured_diff_for_file("created.txt"),
            )
            await dsl.diff_for_file("created.txt")

        asyncio.run(run())
        assert fake_repo.diff_calls == 1

    @pytest.mark.parametrize(
        "view,expected_type",
        [("text", "FileTextDiff"), ("structured", "FileDiffEntry"), ("patch", "FilePatch"), ("json-diff", "dict")],
    )
    def test_view_for_file(self, snapshot, session_config, fake_repo, view, expected_type):
        """Each view name dispatches to its lookup."""
        dsl = make_dsl(snapshot, session_config, fake_repo)
        result = asyncio.run(dsl.view_for_file("config.json", view))
        assert type(result).__name__ == expected_type

    def test_unknown_view(self, snapshot, session_config, fake_repo):
        """Unknown view names are rejected."""
        dsl = make_dsl(snapshot, session_config, fake_repo)
        with pytest.raises(ValueError, match="Unknown view"):
            asyncio.run(dsl.view_for_file("config.json", "html"))

    def test_requires_diff_provider(self, snapshot, session_config, fake_repo):
        """A DSL without diff providers cannot be built."""
        with pytest.raises(ProviderNotConfiguredError):
            GitDSL(snapshot, session_config, fake_repo.get_file_contents)


class TestGitJsonToGitDSL:
    """Test git_json_to_git_dsl."""

    def test_builds_dsl_from_json(self, session_config):
        """The JSON snapshot form is wrapped with working diff lookups."""
        repo = FakeRepository(
            files={
                "base": {"config.json": '{"name": "app"}'},
                "head": {"config.json": '{"name": "service"}'},
            }
        )
        dsl = git_json_to_git_dsl(
            {
                "modified_files": ["config.json"],
                "created_files": ["created.txt"],
                "deleted_files": [],
                "commits": [{"sha": "abc", "message": "Rename"}],
            },
            session_config,
            repo.get_file_contents,
            diff_provider=repo.get_full_diff,
        )

        assert dsl.modified_files == ("config.json",)
        assert dsl.commits[0].sha == "abc"
        tree = asyncio.run(dsl.json_diff_for_file("config.json"))
        assert tree == {"name": {"before": "app", "after": "service"}}


class TestStructuredProviderSession:
    """Test a session backed by a structured diff payload."""

    def test_text_view_from_dict_payload(self, session_config):
        """Text and structured views work from the dict payload form."""
        repo = FakeRepository(
            files={"head": {"a.txt": "x\n"}},
            structured=[
                {
                    "from": "a.txt",
                    "to": "a.txt",
                    "chunks": [{"changes": [{"type": "add", "content": "+x"}]}],
                }
            ],
        )
        dsl = GitDSL(
            RepositorySnapshot(modified_files=["a.txt"]),
            session_config,
            repo.get_file_contents,
            structured_diff_provider=repo.get_structured_diff,
        )

        async def run():
            return (
                await dsl.structured_diff_for_file("a.txt"),
                await dsl.diff_for_file("a.txt"),
            )

        entry, text = asyncio.run(run())
        assert entry.chunks[0].changes[0].new_lineno is None
        assert text.diff == "+x"
        assert text.added == "+x"
        assert text.removed == ""
        assert text.after == "x\n"
        assert repo.diff_calls == 0
