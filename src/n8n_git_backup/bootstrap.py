"""Create or clone a backup repository."""

import logging
import shutil
import subprocess
from pathlib import Path

from . import console
from .console import Confirm
from .errors import CommandFailed, InvalidInvocation, OperationCancelled, PreconditionFailed
from .git import find_branches, has_uncommitted_changes, run_git
from .paths import ensure_layout, is_repo_path, resolve_path
from .runner import CommandRunner
from .templates import write_gitignore, write_readme_if_missing

logger = logging.getLogger(__name__)

CLONE_HINTS = (
    "Check that the repository URL is correct",
    "Check your network connection",
    "Set up authentication (personal access token or SSH key)",
    "Verify the remote repository exists and you have access to it",
)


def _require_directory_or_missing(repo: Path) -> None:
    if repo.exists() and not repo.is_dir():
        raise PreconditionFailed(
            f"Not a directory: {repo}",
            hints=["Choose another --dir, or move the existing file out of the way"],
        )


def init_repository(
    directory: str | Path,
    remote_url: str,
    branch: str = "main",
    *,
    runner: CommandRunner | None = None,
    confirm: Confirm = console.ask,
) -> Path:
    """
    Initialize a local backup repository pointing at a remote.

    Steps:
    - Create the directory (and parents) if needed
    - Ask before touching an existing git repository
    - `git init`, replace the "origin" remote with remote_url
    - Create workflows/ and credentials/, README.md (once) and .gitignore
    - Commit everything as the initial commit and rename the branch

    Args:
        directory: Local directory for the repository.
        remote_url: URL added as the "origin" remote. Required.
        branch: Branch name to use (default: "main").
        runner: Command runner to use.
        confirm: Callback asked before re-initializing an existing repository.

    Returns:
        Absolute path to the repository.

    Raises:
        InvalidInvocation: If remote_url is empty.
        PreconditionFailed: If directory exists but is not a directory.
        OperationCancelled: If the operator declines to continue.
        CommandFailed: If a git command fails.

    Example:
        init_repository("./n8n-workflows", "https://github.com/user/workflows.git")
    """
    if not remote_url:
        raise InvalidInvocation("Repository URL is required for init. Use --repo option.")

    repo = resolve_path(directory)
    console.info(f"Initializing repository in: {repo}")
    console.info(f"Repository URL: {remote_url}")
    console.info(f"Branch: {branch}")

    _require_directory_or_missing(repo)
    if is_repo_path(repo):
        console.warning("Git repository already exists in this directory")
        if not confirm("Do you want to continue? This may overwrite existing configuration."):
            raise OperationCancelled("Aborted by user")

    repo.mkdir(parents=True, exist_ok=True)

    try:
        run_git("init", repo=repo, runner=runner)
        # Remove existing origin if present
        run_git("remote", "remove", "origin", repo=repo, runner=runner, check=False, capture=True)
        run_git("remote", "add", "origin", remote_url, repo=repo, runner=runner)

        ensure_layout(repo)
        if write_readme_if_missing(repo):
            logger.debug("Wrote default README.md in %s", repo)
        write_gitignore(repo)

        run_git("add", ".", repo=repo, runner=runner)
        if has_uncommitted_changes(repo, runner=runner):
            run_git("commit", "-m", "Initial repository setup", repo=repo, runner=runner)
        else:
            console.info("Nothing new to commit")

        run_git("branch", "-M", branch, repo=repo, runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed(f"Failed to initialize repository in {repo}", e) from e

    console.success("Repository initialized successfully!")
    console.info("Next steps:")
    console.info(f"  1. Export workflows: n8n-git-backup export --all --dir {directory}")
    console.info(f"  2. Push to GitHub: n8n-git-backup push --dir {directory}")
    return repo


def clone_repository(
    directory: str | Path,
    remote_url: str,
    branch: str = "main",
    *,
    runner: CommandRunner | None = None,
    confirm: Confirm = console.ask,
) -> Path:
    """
    Clone an existing backup repository.

    If the target directory already exists the operator is asked whether to
    delete it and clone again. For a branch other than main/master, the
    remote branch is checked out when it exists, otherwise a new local branch
    is created.

    Args:
        directory: Target directory for the clone.
        remote_url: URL of the remote repository. Required.
        branch: Branch to work on (default: "main").
        runner: Command runner to use.
        confirm: Callback asked before deleting an existing directory.

    Returns:
        Absolute path to the cloned repository.

    Raises:
        InvalidInvocation: If remote_url is empty.
        PreconditionFailed: If directory exists but is not a directory.
        OperationCancelled: If the operator keeps the existing directory.
        CommandFailed: If cloning or checking out the branch fails.
    """
    if not remote_url:
        raise InvalidInvocation("Repository URL is required for clone. Use --repo option.")

    repo = resolve_path(directory)
    console.info(f"Cloning {remote_url} into: {repo}")

    _require_directory_or_missing(repo)
    if repo.exists():
        console.warning(f"Directory already exists: {repo}")
        if not confirm("Delete it and clone again?"):
            raise OperationCancelled("Aborted by user")
        shutil.rmtree(repo)

    try:
        run_git("clone", remote_url, str(repo), runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed(f"Failed to clone {remote_url}", e, hints=CLONE_HINTS) from e

    if branch not in {"main", "master"}:
        try:
            if f"origin/{branch}" in find_branches(branch, repo=repo, runner=runner):
                console.info(f"Checking out remote branch: {branch}")
                run_git("checkout", branch, repo=repo, runner=runner)
            else:
                console.info(f"Creating new branch: {branch}")
                run_git("checkout", "-b", branch, repo=repo, runner=runner)
        except subprocess.CalledProcessError as e:
            raise CommandFailed(f"Failed to check out branch {branch}", e) from e

    ensure_layout(repo)

    console.success("Repository cloned successfully!")
    console.info("Repository contents:")
    for entry in sorted(repo.iterdir()):
        if entry.name == ".git":
            continue
        console.info(f"  {entry.name}/" if entry.is_dir() else f"  {entry.name}")
    console.info("Next steps:")
    console.info(f"  1. Import workflows: n8n-git-backup import --all --dir {directory}")
    console.info(f"  2. Or export current workflows: n8n-git-backup export --all --dir {directory}")
    return repo
