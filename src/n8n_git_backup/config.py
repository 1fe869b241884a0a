"""Configuration lookup from git config and the environment."""

import os
from pathlib import Path

from .git import git_config
from .runner import CommandRunner

DEFAULT_REMOTE = "origin"
DEFAULT_N8N_COMMAND = "n8n"


def get_backup_config(
    key: str,
    repo: Path | None = None,
    default: str | None = None,
    runner: CommandRunner | None = None,
) -> str | None:
    """
    Get a backup configuration value.

    Reads from git config under the `n8nbackup.*` namespace, so values can be
    set globally or per backup repository.

    Args:
        key: Config key without the "n8nbackup." prefix (e.g., "remote").
        repo: Optional repository path. If None, uses current directory.
        default: Default value if config key is not set.
        runner: Command runner to use.

    Returns:
        Config value if set, otherwise default.

    Example:
        # git config n8nbackup.remote backup
        remote = get_backup_config("remote", repo=Path("./n8n-workflows"))
    """
    return git_config(f"n8nbackup.{key}", repo=repo, default=default, runner=runner)


def get_remote_name(repo: Path | None = None, runner: CommandRunner | None = None) -> str:
    """
    Get the remote that push and pull talk to.

    Reads from `n8nbackup.remote`.
    Default: `"origin"`

    """
    return get_backup_config("remote", repo=repo, runner=runner) or DEFAULT_REMOTE


def get_n8n_command() -> str:
    """
    Get the command used to invoke the n8n CLI.

    Reads the `N8N_COMMAND` environment variable (e.g., "npx n8n").
    Default: `"n8n"`

    """
    return os.environ.get("N8N_COMMAND", "").strip() or DEFAULT_N8N_COMMAND
