"""Tests for the command line interface."""

import json

import pytest

from gitdsl import main as cli


def run_cli(monkeypatch, capsys, argv):
    monkeypatch.setattr("sys.argv", ["gitdsl"] + argv)
    exit_code = cli.main()
    return exit_code, json.loads(capsys.readouterr().out)


class TestArgs:
    """Test argument validation and config creation."""

    def test_required_revisions(self):
        """--base and --head are mandatory."""
        with pytest.raises(SystemExit):
            cli.create_parser().parse_args(["--base", "a"])

    def test_unknown_view(self):
        """Only known views are accepted."""
        with pytest.raises(SystemExit):
            cli.create_parser().parse_args(["--base", "a", "--head", "b", "--view", "html"])

    @pytest.mark.parametrize(
        "extra,message",
        [
            (["--context", "-1"], "--context"),
            (["--find-renames", "150"], "--find-renames"),
            (["--separator", ""], "--separator"),
        ],
    )
    def test_invalid_args(self, extra, message):
        """Out of range values are rejected."""
        args = cli.create_parser().parse_args(["--base", "a", "--head", "b"] + extra)
        with pytest.raises(ValueError, match=message):
            cli.validate_args(args)

    def test_separator_escape(self):
        """Escaped separators on the command line are decoded."""
        args = cli.create_parser().parse_args(
            ["--repo", "/tmp", "--base", "a", "--head", "b", "--separator", "\\r\\n"]
        )
        config = cli.create_config(args)
        assert config.line_separator == "\r\n"
        assert config.repo == "/tmp"


@pytest.mark.integration
class TestMain:
    """Test main against a real repository."""

    def test_snapshot_output(self, monkeypatch, capsys, two_revisions):
        """Without --file the changed files are listed."""
        repo_path, base, head = two_revisions
        exit_code, output = run_cli(
            monkeypatch, capsys, ["--repo", str(repo_path), "--base", base, "--head", head]
        )
        assert exit_code == 0
        assert output["ok"] is True
        assert output["data"]["created_files"] == ["notes.txt"]
        assert output["data"]["provenance"]["repo"] == str(repo_path)

    def test_file_view(self, monkeypatch, capsys, two_revisions):
        """A file view reports the file status and serialized result."""
        repo_path, base, head = two_revisions
        exit_code, output = run_cli(
            monkeypatch,
            capsys,
            [
                "--repo", str(repo_path), "--base", base, "--head", head,
                "--file", "package.json", "--view", "patch",
            ],
        )
        assert exit_code == 0
        data = output["data"]
        assert data["file"] == "package.json"
        assert data["status"] == "modified"
        assert data["view"] == "patch"
        assert data["result"]["before"]["name"] == "app"
        assert data["provenance"]["base_sha"] == base
        assert data["provenance"]["head_sha"] == head

    def test_json_output_file(self, monkeypatch, capsys, tmp_path, two_revisions):
        """--json writes the envelope to a file."""
        repo_path, base, head = two_revisions
        output_file = tmp_path / "out.json"
        monkeypatch.setattr(
            "sys.argv",
            [
                "gitdsl", "--repo", str(repo_path), "--base", base, "--head", head,
                "--file", "notes.txt", "--json", str(output_file),
            ],
        )
        assert cli.main() == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))["data"]
        assert data["status"] == "created"
        assert data["result"]["added"].endswith("+new")

    def test_unknown_revision(self, monkeypatch, capsys, two_revisions):
        """Errors are reported as an error envelope."""
        repo_path, base, _ = two_revisions
        exit_code, output = run_cli(
            monkeypatch, capsys, ["--repo", str(repo_path), "--base", base, "--head", "no-such-ref"]
        )
        assert exit_code == 1
        assert output["ok"] is False
        assert output["error"]["code"] == "REVISION_NOT_FOUND"
