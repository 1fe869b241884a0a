"""Git operations used by the backup commands."""

import subprocess
from collections.abc import Iterable, Iterator
from pathlib import Path

from .runner import CommandRunner, default_runner


def run_git(
    *args: str,
    repo: Path | None = None,
    runner: CommandRunner | None = None,
    check: bool = True,
    capture: bool = False,
) -> subprocess.CompletedProcess:
    """
    Run a git command and return the result.

    Args:
        *args: Git command arguments (e.g., "status", "--porcelain")
        repo: Optional repository path. If None, runs in current directory.
        runner: Command runner to use. Defaults to the subprocess runner.
        check: Whether to raise CalledProcessError on non-zero exit (default: True)
        capture: Whether to capture stdout/stderr (default: False)

    Returns:
        CompletedProcess result

    Example:
        # Run in current directory
        run_git("status", "--short", capture=True)

        # Run in specific repo
        run_git("push", "origin", "main", repo=Path("/path/to/repo"))
    """
    cmd = []

    # Add -C flag if repo is specified
    if repo is not None:
        cmd.extend(["-C", str(repo)])

    cmd.extend(args)

    result = (runner or default_runner).run("git", *cmd, capture=capture)
    if check:
        result.check_returncode()
    return result


def git_config(
    key: str,
    repo: Path | None = None,
    default: str | None = None,
    runner: CommandRunner | None = None,
) -> str | None:
    """
    Get a git config value.

    Args:
        key: Config key to retrieve (e.g., "user.name", "n8nbackup.remote")
        repo: Optional repository path. If None, uses current directory.
        default: Default value if config key is not set.
        runner: Command runner to use.

    Returns:
        Config value if set, otherwise default.
    """
    result = run_git("config", key, repo=repo, runner=runner, capture=True, check=False)
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return default


def current_branch(repo: Path | None = None, runner: CommandRunner | None = None) -> str:
    """
    Get the currently checked out branch name.

    Args:
        repo: Optional repository path. If None, uses current directory.
        runner: Command runner to use.

    Returns:
        Name of the current branch
    """
    result = run_git("branch", "--show-current", repo=repo, runner=runner, capture=True)
    return result.stdout.strip()


def has_uncommitted_changes(repo: Path | None = None, runner: CommandRunner | None = None) -> bool:
    """
    Check if there are uncommitted changes in the working tree.

    This includes both tracked and untracked files.

    Args:
        repo: Optional repository path. If None, uses current directory.
        runner: Command runner to use.

    Returns:
        True if there are uncommitted changes, False otherwise
    """
    result = run_git("status", "--porcelain", repo=repo, runner=runner, capture=True)
    return bool(result.stdout.strip())


def untracked_files(repo: Path | None = None, runner: CommandRunner | None = None) -> list[str]:
    """List untracked files that are not excluded by .gitignore."""
    result = run_git(
        "ls-files", "--others", "--exclude-standard",
        repo=repo,
        runner=runner,
        capture=True,
    )
    return [line for line in result.stdout.splitlines() if line.strip()]


def has_pending_changes(repo: Path | None = None, runner: CommandRunner | None = None) -> bool:
    """
    Check for unstaged, staged or untracked changes.

    Uses `git diff --quiet` (exit status 1 means differences) for the working
    tree and the index, then looks for untracked files.

    Args:
        repo: Optional repository path. If None, uses current directory.
        runner: Command runner to use.

    Returns:
        True if a commit would record anything, False for a clean tree.
    """
    for diff_args in (("diff", "--quiet"), ("diff", "--cached", "--quiet")):
        result = run_git(*diff_args, repo=repo, runner=runner, check=False)
        if result.returncode == 1:
            return True
        if result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, ["git", *diff_args])

    return bool(untracked_files(repo, runner=runner))


def find_branches(
    pattern: str,
    repo: Path | None = None,
    remote_name: str = "origin",
    runner: CommandRunner | None = None,
) -> list[str]:
    """
    Find all branches (local and remote) matching a name.

    Searches for both the local branch and remote_name/branch.

    Args:
        pattern: Branch name to search for.
        repo: Path to the Git repository. Defaults to current directory.
        remote_name: Name of the remote to search (default: "origin").
        runner: Command runner to use.

    Returns:
        List of matching branch names with ref prefixes removed
        (e.g., "main" or "origin/main").

    Example:
        branches = find_branches("staging", repo=Path("/path/to/repo"))
        # Returns: ["origin/staging"] right after a clone
    """
    assert pattern

    all_matches = []
    for search_pattern in (pattern, f"{remote_name}/{pattern}"):
        result = run_git(
            "branch",
            "--format=%(refname)",
            "--all",
            "--list",
            search_pattern,
            repo=repo,
            runner=runner,
            capture=True,
        )

        all_matches.extend([
            match.removeprefix("refs/heads/").removeprefix("refs/remotes/")
            for line in result.stdout.splitlines()
            if (match := line.strip())
        ])

    # Remove duplicates while preserving order
    seen = set()
    return [m for m in all_matches if not (m in seen or seen.add(m))]


def recent_commits(
    repo: Path | None = None,
    count: int = 5,
    runner: CommandRunner | None = None,
) -> list[str]:
    """
    Get the latest commits as `git log --oneline` lines.

    Args:
        repo: Optional repository path. If None, uses current directory.
        count: Number of commits to return (default: 5).
        runner: Command runner to use.

    Returns:
        Lines of the form "<short hash> <subject>", newest first.
    """
    result = run_git("log", "--oneline", f"-{count}", repo=repo, runner=runner, capture=True)
    return [line for line in result.stdout.splitlines() if line.strip()]


def filter_ignored(
    paths: Iterable[Path],
    repo: Path,
    ignore_filename: str = ".gitignore",
) -> Iterator[Path]:
    """
    Drop paths matched by the repository's ignore file.

    Reads gitignore-style patterns from `repo / ignore_filename` and yields
    only the paths that are not ignored. Supports the usual syntax: simple
    names, wildcards, directory patterns, negation and comments.

    Args:
        paths: Paths inside the repository.
        repo: Repository root the patterns are relative to.
        ignore_filename: Name of the ignore file (default: ".gitignore").

    Yields:
        Paths that are not ignored

    Example:
        files = filter_ignored(Path("/backups/workflows").glob("*.json"), Path("/backups"))
    """
    import pathspec

    ignore_file = repo / ignore_filename
    patterns = ignore_file.read_text().splitlines() if ignore_file.is_file() else []

    # Create pathspec matcher (handles gitignore syntax)
    spec = pathspec.GitIgnoreSpec.from_lines(patterns)

    for path in paths:
        try:
            rel_path = path.relative_to(repo)
        except ValueError:
            # Outside the repository, patterns don't apply
            yield path
            continue

        if not spec.match_file(rel_path.as_posix()):
            yield path
