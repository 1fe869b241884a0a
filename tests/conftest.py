"""Shared pytest fixtures for n8n-git-backup tests."""

import os
import subprocess
from pathlib import Path

import pytest

from n8n_git_backup.bootstrap import init_repository
from n8n_git_backup.runner import CommandRunner

FAKE_N8N = """\
#!/bin/sh
echo "$@" >> "$FAKE_N8N_LOG"
[ -n "$FAKE_N8N_FAIL" ] && exit 1

command="$1"
shift
for arg in "$@"; do
    case "$arg" in
        --all) all=1 ;;
        --id=*) id="${arg#--id=}" ;;
        --output=*) output="${arg#--output=}" ;;
        --input=*) input="${arg#--input=}" ;;
    esac
done

case "$command" in
    export:workflow)
        if [ -n "$all" ]; then
            for wf in ${FAKE_N8N_WORKFLOWS-1 2 3}; do
                printf '{"id": "%s"}\\n' "$wf" > "${output}${wf}.json"
            done
        else
            printf '{"id": "%s"}\\n' "$id" > "$output"
        fi
        ;;
    export:credentials)
        printf '{"id": "cred"}\\n' > "${output}cred.json"
        ;;
    import:workflow)
        case "$input" in
            *broken*) exit 1 ;;
        esac
        ;;
esac
exit 0
"""


class RecordingRunner(CommandRunner):
    """CommandRunner that remembers every command it runs."""

    def __init__(self):
        self.calls = []

    def run(self, command, *args, capture=False):
        self.calls.append((command, *args))
        return super().run(command, *args, capture=capture)

    def git_calls(self, subcommand):
        """Git invocations for a subcommand, ignoring any -C <repo> prefix."""
        matches = []
        for call in self.calls:
            if call[0] != "git":
                continue
            args = list(call[1:])
            if args[:1] == ["-C"]:
                args = args[2:]
            if args[:1] == [subcommand]:
                matches.append(args)
        return matches

    def n8n_calls(self, subcommand=None):
        return [
            list(call[1:])
            for call in self.calls
            if call[0] == "n8n" and (subcommand is None or call[1] == subcommand)
        ]


class ScriptedConfirm:
    """
    Confirmation callback with canned answers.

    Pass a bool to answer every prompt the same way, or a list to answer
    prompts in order. Asked prompts are kept in `prompts`.
    """

    def __init__(self, answers):
        self.answers = answers
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.answers, bool):
            return self.answers
        return self.answers.pop(0)


@pytest.fixture(autouse=True)
def git_identity(monkeypatch):
    """Give git a committer identity without touching the user's config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.delenv("N8N_COMMAND", raising=False)
    monkeypatch.delenv("N8N_GIT_DIR", raising=False)
    monkeypatch.delenv("N8N_GIT_BRANCH", raising=False)


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def fake_n8n(tmp_path, monkeypatch):
    """
    Put a fake n8n executable first in PATH.

    Every invocation is appended to the returned log file. Bulk exports
    write workflows 1, 2 and 3 unless FAKE_N8N_WORKFLOWS says otherwise;
    importing any file with "broken" in its path fails.

    Returns:
        Path: Log file with one line of arguments per invocation
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "n8n"
    script.write_text(FAKE_N8N)
    script.chmod(0o755)

    log = tmp_path / "n8n.log"
    monkeypatch.setenv("FAKE_N8N_LOG", str(log))
    monkeypatch.setenv("PATH", f"{bin_dir}:{os.environ.get('PATH', '')}")
    return log


@pytest.fixture
def git_repo(tmp_path):
    """
    Create a temporary git repository for testing.

    Returns:
        Path: Path to the temporary git repository
    """
    repo = tmp_path / "test-repo"
    repo.mkdir()

    subprocess.run(["git", "init", "-b", "main"], cwd=repo, check=True, capture_output=True)

    # Create initial commit
    (repo / "README.md").write_text("# Test Repo\n")
    subprocess.run(["git", "add", "README.md"], cwd=repo, check=True, capture_output=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=repo,
        check=True,
        capture_output=True,
    )

    return repo


@pytest.fixture
def remote_repo(tmp_path):
    """
    Create an empty bare repository to act as the remote.

    Returns:
        Path: Path to the bare repository
    """
    remote = tmp_path / "remote.git"
    remote.mkdir()
    subprocess.run(["git", "init", "--bare", "-b", "main"], cwd=remote, check=True, capture_output=True)
    return remote


@pytest.fixture
def backup_repo(tmp_path, remote_repo):
    """
    Create a backup repository with `init_repository`, wired to remote_repo.

    Returns:
        Path: Path to the backup repository
    """
    return init_repository(tmp_path / "backup", str(remote_repo), confirm=ScriptedConfirm(False))


def commit_count(repo: Path, ref: str = "HEAD") -> int:
    result = subprocess.run(
        ["git", "rev-list", "--count", ref],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return int(result.stdout.strip())
