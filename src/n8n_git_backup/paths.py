"""Path resolution and backup repository layout."""

from pathlib import Path

from .errors import PreconditionFailed

WORKFLOWS_DIR = "workflows"
CREDENTIALS_DIR = "credentials"
DEFAULT_DIRECTORY = "./n8n-workflows"


def resolve_path(path: str | Path | None = None) -> Path:
    """
    Resolve a path to an absolute Path object.

    Args:
        path: Path to resolve. If None or empty string, returns current directory.

    Returns:
        Absolute Path object

    Example:
        resolve_path("~/backups")  # Returns /home/user/backups
        resolve_path(None)         # Returns current directory
    """
    if not path:
        return Path.cwd()

    return Path(path).expanduser().resolve()


def is_repo_path(directory: Path) -> bool:
    """
    Check if the given path is a directory holding a git repository.

    Args:
        directory: Path to check

    Returns:
        True if path is a directory and contains .git
    """
    return directory.is_dir() and (directory / ".git").exists()


def require_repo(directory: str | Path | None = None) -> Path:
    """
    Resolve a backup repository path and validate it exists.

    Args:
        directory: Path to the repository. Uses current directory if not provided.

    Returns:
        Absolute path to the repository.

    Raises:
        PreconditionFailed: If the directory is missing or is not a git repository.

    Example:
        repo = require_repo("./n8n-workflows")
    """
    repo_path = resolve_path(directory)

    if not repo_path.is_dir():
        raise PreconditionFailed(
            f"Repository directory does not exist: {repo_path}",
            hints=["Run 'init' or 'clone' first, or point --dir at an existing repository"],
        )

    if not is_repo_path(repo_path):
        raise PreconditionFailed(
            f"Not a git repository: {repo_path}",
            hints=["Run 'init' or 'clone' first"],
        )

    return repo_path


def workflows_dir(repo: Path) -> Path:
    return repo / WORKFLOWS_DIR


def credentials_dir(repo: Path) -> Path:
    return repo / CREDENTIALS_DIR


def workflow_file(repo: Path, workflow_id: str) -> Path:
    """
    Path a single exported workflow is written to.

    The name depends only on the ID, so exporting the same workflow twice
    overwrites the same file.

    Example:
        workflow_file(Path("/backups"), "42")
        # Returns: /backups/workflows/workflow_42.json
    """
    return workflows_dir(repo) / f"workflow_{workflow_id}.json"


def ensure_layout(repo: Path) -> None:
    """Create the workflows/ and credentials/ directories if missing."""
    workflows_dir(repo).mkdir(parents=True, exist_ok=True)
    credentials_dir(repo).mkdir(parents=True, exist_ok=True)
