"""Push and pull the backup repository."""

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from . import console
from .config import get_remote_name
from .console import Confirm
from .errors import CommandFailed, OperationCancelled
from .git import current_branch, has_pending_changes, has_uncommitted_changes, recent_commits, run_git
from .paths import require_repo, workflows_dir
from .runner import CommandRunner
from .transfer import find_workflow_files

logger = logging.getLogger(__name__)

PUSH_HINTS = (
    "Set up authentication (personal access token or SSH key)",
    "Check if the remote repository exists",
    "Verify you have push permissions",
)

PULL_HINTS = (
    "Check your network connection",
    "Set up authentication (personal access token or SSH key)",
    "Resolve merge conflicts manually, then commit the result",
)


@dataclass
class PushResult:
    committed: bool
    message: str | None = None
    branch: str | None = None


@dataclass
class PullResult:
    branch: str
    workflow_files: list[Path] = field(default_factory=list)


def commit_message(message: str, now: datetime) -> str:
    """
    Build the commit message used by push.

    Example:
        commit_message("Update workflows", datetime(2024, 5, 1, 9, 30))
        # Returns: "Update workflows - 2024-05-01 09:30:00"
    """
    return f"{message} - {now:%Y-%m-%d %H:%M:%S}"


def _show_recent_commits(repo: Path, runner: CommandRunner | None) -> None:
    for line in recent_commits(repo, count=5, runner=runner):
        console.info(f"  {line}")


def push_changes(
    directory: str | Path,
    message: str = "Update workflows",
    *,
    runner: CommandRunner | None = None,
    now: Callable[[], datetime] = datetime.now,
) -> PushResult:
    """
    Commit all changes in the repository and push the current branch.

    A clean working tree (nothing staged, unstaged or untracked) is not an
    error: nothing is committed and PushResult.committed is False.

    Args:
        directory: Backup repository.
        message: Commit message; a timestamp is appended.
        runner: Command runner to use.
        now: Clock used for the timestamp.

    Returns:
        PushResult describing the commit that was pushed, if any.

    Raises:
        PreconditionFailed: If directory is not a backup repository.
        CommandFailed: If committing or pushing fails.

    Example:
        push_changes("./n8n-workflows", message="Added new automation")
    """
    repo = require_repo(directory)
    console.info(f"Working in repository: {repo}")

    try:
        if not has_pending_changes(repo, runner=runner):
            logger.debug("Working tree clean in %s", repo)
            console.warning("No changes detected. Nothing to commit.")
            console.info("Current git status:")
            run_git("status", repo=repo, runner=runner, check=False)
            return PushResult(committed=False)

        console.info("Changes to be committed:")
        run_git("add", ".", repo=repo, runner=runner)
        run_git("status", "--porcelain", repo=repo, runner=runner)

        full_message = commit_message(message, now())
        console.info(f"Committing with message: {full_message}")
        run_git("commit", "-m", full_message, repo=repo, runner=runner)

        branch = current_branch(repo, runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed(f"Failed to commit changes in {repo}", e) from e

    remote = get_remote_name(repo, runner=runner)
    console.info(f"Pushing to branch: {branch}")
    try:
        run_git("push", remote, branch, repo=repo, runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed("Failed to push to remote", e, hints=PUSH_HINTS) from e

    console.success("Successfully pushed to remote!")
    console.info("Recent commits:")
    _show_recent_commits(repo, runner)
    return PushResult(committed=True, message=full_message, branch=branch)


def pull_changes(
    directory: str | Path,
    *,
    runner: CommandRunner | None = None,
    confirm: Confirm = console.ask,
) -> PullResult:
    """
    Pull the current branch from the remote.

    Local uncommitted or untracked changes are reported first and the
    operator must confirm before pulling. Merge conflicts are left for the
    operator to resolve.

    Args:
        directory: Backup repository.
        runner: Command runner to use.
        confirm: Callback asked when local changes exist.

    Returns:
        PullResult with the branch and the workflow files now on disk.

    Raises:
        PreconditionFailed: If directory is not a backup repository.
        OperationCancelled: If the operator declines to pull over local changes.
        CommandFailed: If the pull fails.
    """
    repo = require_repo(directory)
    console.info(f"Working in repository: {repo}")

    try:
        branch = current_branch(repo, runner=runner)
        dirty = has_uncommitted_changes(repo, runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed(f"Failed to read repository state in {repo}", e) from e

    if dirty:
        console.warning("You have uncommitted local changes")
        if not confirm("Pull anyway? Local changes may conflict with remote changes."):
            raise OperationCancelled("Aborted by user")

    remote = get_remote_name(repo, runner=runner)
    console.info(f"Pulling branch {branch} from {remote}...")
    try:
        run_git("pull", remote, branch, repo=repo, runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed("Failed to pull from remote", e, hints=PULL_HINTS) from e

    console.success("Successfully pulled latest changes!")
    console.info("Recent commits:")
    _show_recent_commits(repo, runner)

    files = find_workflow_files(workflows_dir(repo))
    if files:
        console.info(f"Workflow files ({len(files)}):")
        for path in files:
            console.info(f"  {path.name}")
        console.info(f"Next step: n8n-git-backup import --all --dir {directory}")

    return PullResult(branch=branch, workflow_files=files)
