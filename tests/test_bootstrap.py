"""Tests for bootstrap module."""

import subprocess

import pytest

from conftest import ScriptedConfirm, commit_count
from n8n_git_backup.bootstrap import clone_repository, init_repository
from n8n_git_backup.errors import CommandFailed, InvalidInvocation, OperationCancelled, PreconditionFailed
from n8n_git_backup.git import current_branch, git_config, has_uncommitted_changes
from n8n_git_backup.templates import GITIGNORE


def snapshot(directory):
    """Map of relative path to bytes for every file, .git included."""
    return {
        path.relative_to(directory): path.read_bytes()
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def populated_remote(backup_repo, remote_repo):
    """Remote holding the initial commit of backup_repo plus a staging branch."""
    subprocess.run(["git", "push", "origin", "main"], cwd=backup_repo, check=True, capture_output=True)
    subprocess.run(["git", "push", "origin", "main:staging"], cwd=backup_repo, check=True, capture_output=True)
    return remote_repo


class TestInitRepository:
    """Tests for init_repository function."""

    def test_creates_repository_layout(self, tmp_path, remote_repo):
        repo = init_repository(tmp_path / "nested" / "backup", str(remote_repo), confirm=ScriptedConfirm(False))

        assert repo == tmp_path / "nested" / "backup"
        assert (repo / ".git").is_dir()
        assert (repo / "workflows").is_dir()
        assert (repo / "credentials").is_dir()
        assert (repo / "README.md").read_text().startswith("# N8N Workflows")
        assert (repo / ".gitignore").read_text() == GITIGNORE

    def test_commits_and_sets_remote(self, tmp_path, remote_repo):
        repo = init_repository(tmp_path / "backup", str(remote_repo), confirm=ScriptedConfirm(False))

        assert commit_count(repo) == 1
        assert has_uncommitted_changes(repo) is False
        assert git_config("remote.origin.url", repo=repo) == str(remote_repo)
        assert current_branch(repo) == "main"

    def test_renames_branch(self, tmp_path, remote_repo):
        repo = init_repository(tmp_path / "backup", str(remote_repo), branch="backups", confirm=ScriptedConfirm(False))
        assert current_branch(repo) == "backups"

    def test_requires_remote_url(self, tmp_path):
        with pytest.raises(InvalidInvocation):
            init_repository(tmp_path / "backup", "", confirm=ScriptedConfirm(True))
        assert not (tmp_path / "backup").exists()

    def test_existing_file_rejected(self, tmp_path, remote_repo, runner):
        target = tmp_path / "backup"
        target.write_text("not a directory")
        confirm = ScriptedConfirm(True)

        with pytest.raises(PreconditionFailed, match="Not a directory"):
            init_repository(target, str(remote_repo), runner=runner, confirm=confirm)

        assert target.read_text() == "not a directory"
        assert confirm.prompts == []
        assert runner.calls == []

    def test_fresh_directory_never_prompts(self, tmp_path, remote_repo):
        confirm = ScriptedConfirm(True)
        init_repository(tmp_path / "backup", str(remote_repo), confirm=confirm)
        assert confirm.prompts == []

    def test_existing_repository_prompts(self, backup_repo, remote_repo):
        confirm = ScriptedConfirm(True)
        init_repository(backup_repo, str(remote_repo), confirm=confirm)
        assert len(confirm.prompts) == 1

    def test_declining_leaves_repository_untouched(self, backup_repo):
        (backup_repo / "README.md").write_text("# Custom\n")
        (backup_repo / ".gitignore").write_text("custom\n")
        before = snapshot(backup_repo)

        with pytest.raises(OperationCancelled):
            init_repository(backup_repo, "https://example.com/other.git", confirm=ScriptedConfirm(False))

        assert snapshot(backup_repo) == before

    def test_reinit_replaces_origin(self, backup_repo):
        init_repository(backup_repo, "https://example.com/other.git", confirm=ScriptedConfirm(True))
        assert git_config("remote.origin.url", repo=backup_repo) == "https://example.com/other.git"

    def test_reinit_without_changes_adds_no_commit(self, backup_repo, remote_repo):
        init_repository(backup_repo, str(remote_repo), confirm=ScriptedConfirm(True))
        assert commit_count(backup_repo) == 1

    def test_reinit_keeps_readme_and_restores_gitignore(self, backup_repo, remote_repo):
        (backup_repo / "README.md").write_text("# Custom\n")
        (backup_repo / ".gitignore").write_text("custom\n")

        init_repository(backup_repo, str(remote_repo), confirm=ScriptedConfirm(True))

        assert (backup_repo / "README.md").read_text() == "# Custom\n"
        assert (backup_repo / ".gitignore").read_text() == GITIGNORE
        assert commit_count(backup_repo) == 2


class TestCloneRepository:
    """Tests for clone_repository function."""

    def test_clones_and_creates_layout(self, tmp_path, populated_remote):
        repo = clone_repository(tmp_path / "clone", str(populated_remote), confirm=ScriptedConfirm(False))

        assert (repo / ".git").is_dir()
        assert (repo / "README.md").exists()
        assert (repo / "workflows").is_dir()
        assert (repo / "credentials").is_dir()
        assert current_branch(repo) == "main"

    def test_checks_out_existing_remote_branch(self, tmp_path, populated_remote, runner):
        repo = clone_repository(
            tmp_path / "clone",
            str(populated_remote),
            branch="staging",
            runner=runner,
            confirm=ScriptedConfirm(False),
        )

        assert current_branch(repo) == "staging"
        assert runner.git_calls("checkout") == [["checkout", "staging"]]
        assert git_config("branch.staging.remote", repo=repo) == "origin"

    def test_creates_missing_branch(self, tmp_path, populated_remote, runner):
        repo = clone_repository(
            tmp_path / "clone",
            str(populated_remote),
            branch="feature",
            runner=runner,
            confirm=ScriptedConfirm(False),
        )

        assert current_branch(repo) == "feature"
        assert runner.git_calls("checkout") == [["checkout", "-b", "feature"]]

    def test_existing_directory_declined(self, tmp_path, populated_remote, runner):
        target = tmp_path / "clone"
        target.mkdir()
        (target / "keep.txt").write_text("keep")

        with pytest.raises(OperationCancelled):
            clone_repository(target, str(populated_remote), runner=runner, confirm=ScriptedConfirm(False))

        assert (target / "keep.txt").read_text() == "keep"
        assert runner.git_calls("clone") == []

    def test_existing_directory_replaced(self, tmp_path, populated_remote):
        target = tmp_path / "clone"
        target.mkdir()
        (target / "stale.txt").write_text("stale")

        clone_repository(target, str(populated_remote), confirm=ScriptedConfirm(True))

        assert not (target / "stale.txt").exists()
        assert (target / "README.md").exists()

    def test_existing_file_rejected(self, tmp_path, populated_remote, runner):
        target = tmp_path / "clone"
        target.write_text("keep")
        confirm = ScriptedConfirm(True)

        with pytest.raises(PreconditionFailed, match="Not a directory"):
            clone_repository(target, str(populated_remote), runner=runner, confirm=confirm)

        assert target.read_text() == "keep"
        assert confirm.prompts == []
        assert runner.git_calls("clone") == []

    def test_clone_failure_raises_with_hints(self, tmp_path):
        with pytest.raises(CommandFailed) as excinfo:
            clone_repository(tmp_path / "clone", str(tmp_path / "missing.git"), confirm=ScriptedConfirm(False))

        assert excinfo.value.hints
        assert excinfo.value.returncode != 0

    def test_requires_remote_url(self, tmp_path, runner):
        with pytest.raises(InvalidInvocation):
            clone_repository(tmp_path / "clone", "", runner=runner, confirm=ScriptedConfirm(True))
        assert runner.calls == []
