"""Back up n8n workflows to a git repository and restore them.

This package wraps the `git` and `n8n` command line tools. Every operation
takes the repository directory explicitly and accepts a command runner and a
confirmation callback, so it can be driven from the CLI or from other code.
"""

__version__ = "0.1.0"

# Re-export all public functions from submodules
from .bootstrap import (
    clone_repository,
    init_repository,
)
from .errors import (
    BackupError,
    CommandFailed,
    InvalidInvocation,
    OperationCancelled,
    PreconditionFailed,
    PrerequisiteMissing,
)
from .runner import CommandRunner
from .sync import (
    PullResult,
    PushResult,
    pull_changes,
    push_changes,
)
from .transfer import (
    ExportResult,
    ImportSummary,
    export_workflows,
    find_workflow_files,
    import_workflows,
)

__all__ = (
    "BackupError",
    "CommandFailed",
    "CommandRunner",
    "ExportResult",
    "ImportSummary",
    "InvalidInvocation",
    "OperationCancelled",
    "PreconditionFailed",
    "PrerequisiteMissing",
    "PullResult",
    "PushResult",
    "clone_repository",
    "export_workflows",
    "find_workflow_files",
    "import_workflows",
    "init_repository",
    "pull_changes",
    "push_changes",
)
