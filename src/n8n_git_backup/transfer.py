"""Move workflows between n8n and the backup repository."""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from . import console
from .console import Confirm
from .errors import CommandFailed, InvalidInvocation, OperationCancelled, PreconditionFailed
from .git import filter_ignored, run_git
from .n8n import export_all_credentials, export_all_workflows, export_workflow, import_workflow
from .paths import credentials_dir, ensure_layout, require_repo, resolve_path, workflow_file, workflows_dir
from .runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Files present after an export."""

    workflow_files: list[Path] = field(default_factory=list)
    credential_files: list[Path] = field(default_factory=list)


@dataclass
class ImportSummary:
    """Outcome of an import, one list per decision."""

    imported: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


def find_workflow_files(directory: Path) -> list[Path]:
    """
    List exported JSON files in a directory, sorted by name.

    Files matched by the repository's .gitignore are left out, so only
    files that would be committed are reported or imported.

    Args:
        directory: workflows/ or credentials/ directory of a backup repository.

    Returns:
        Sorted list of JSON file paths. Empty if the directory doesn't exist.

    Example:
        files = find_workflow_files(Path("/backups/workflows"))
    """
    if not directory.is_dir():
        return []

    candidates = sorted(p for p in directory.glob("*.json") if p.is_file())
    return list(filter_ignored(candidates, directory.parent))


def export_workflows(
    directory: str | Path,
    workflow_id: str | None = None,
    export_all: bool = False,
    include_credentials: bool = False,
    *,
    runner: CommandRunner | None = None,
    confirm: Confirm = console.ask,
) -> ExportResult:
    """
    Export workflows (and optionally credentials) from n8n into the repository.

    Exactly one of workflow_id and export_all selects what to export. With
    export_all every workflow is written to its own file under workflows/;
    with workflow_id the workflow lands in `workflows/workflow_<id>.json`,
    overwriting any earlier export of the same ID.

    Credentials are exported only when include_credentials is set and the
    operator confirms the warning. There is no way to skip that prompt.

    Args:
        directory: Backup repository created by init or clone.
        workflow_id: ID of a single workflow to export.
        export_all: Export all workflows.
        include_credentials: Also export credentials into credentials/.
        runner: Command runner to use.
        confirm: Callback asked before exporting credentials.

    Returns:
        ExportResult listing the workflow and credential files on disk.

    Raises:
        InvalidInvocation: If neither or both selection modes are given.
        PreconditionFailed: If directory is not a backup repository.
        CommandFailed: If an n8n export fails.

    Example:
        export_workflows("./n8n-workflows", export_all=True)
        export_workflows("./n8n-workflows", workflow_id="42")
    """
    if export_all == bool(workflow_id):
        raise InvalidInvocation("Either --workflow-id or --all must be specified")

    repo = require_repo(directory)
    console.info(f"Working in repository: {repo}")
    ensure_layout(repo)

    result = ExportResult()
    target_dir = workflows_dir(repo)

    if export_all:
        console.info("Exporting all workflows...")
        try:
            export_all_workflows(target_dir, runner=runner)
        except subprocess.CalledProcessError as e:
            raise CommandFailed("Failed to export workflows", e) from e
        result.workflow_files = find_workflow_files(target_dir)
        console.success(f"All workflows exported to {target_dir}/")
        console.info(f"Exported {len(result.workflow_files)} workflow files")
    else:
        console.info(f"Exporting workflow ID: {workflow_id}")
        output_file = workflow_file(repo, workflow_id)
        try:
            export_workflow(workflow_id, output_file, runner=runner)
        except subprocess.CalledProcessError as e:
            raise CommandFailed(f"Failed to export workflow {workflow_id}", e) from e
        result.workflow_files = [output_file]
        console.success(f"Workflow exported to {output_file}")

    if include_credentials:
        result.credential_files = _export_credentials(repo, runner=runner, confirm=confirm)

    console.info("Repository status:")
    run_git("status", "--porcelain", repo=repo, runner=runner, check=False)

    console.success("Export completed successfully!")
    console.info(f"Next step: n8n-git-backup push --dir {directory} --message 'Your commit message'")
    return result


def _export_credentials(
    repo: Path,
    runner: CommandRunner | None,
    confirm: Confirm,
) -> list[Path]:
    console.warning("Exporting credentials - this includes sensitive information!")
    if not confirm("Are you sure you want to continue?"):
        console.info("Skipping credentials export")
        return []

    target_dir = credentials_dir(repo)
    console.info("Exporting credentials...")
    try:
        export_all_credentials(target_dir, runner=runner)
    except subprocess.CalledProcessError as e:
        raise CommandFailed("Failed to export credentials", e) from e

    files = find_workflow_files(target_dir)
    console.success(f"Credentials exported to {target_dir}/")
    console.info(f"Exported {len(files)} credential files")
    console.warning("Review credential files before committing!")
    return files


def _resolve_import_file(repo: Path, file: str | Path) -> Path:
    """Find the file as given, falling back to the repository's workflows/."""
    candidate = resolve_path(file)
    if candidate.is_file():
        return candidate

    fallback = workflows_dir(repo) / file
    if fallback.is_file():
        return fallback.resolve()

    raise PreconditionFailed(
        f"Workflow file not found: {file}",
        hints=["Check the path, or run 'export' or 'pull' first"],
    )


def import_workflows(
    directory: str | Path,
    import_all: bool = False,
    file: str | Path | None = None,
    auto_confirm: bool = False,
    *,
    runner: CommandRunner | None = None,
    confirm: Confirm = console.ask,
) -> ImportSummary:
    """
    Import workflow files from the repository into n8n.

    Exactly one of import_all and file selects what to import. Unless
    auto_confirm is set, the operator first acknowledges that imports may
    overwrite existing workflows, then approves each file (Enter means no).

    Failure handling differs by mode:
    - import_all: a failing file is reported and recorded in
      `ImportSummary.failed`; the remaining files are still imported.
    - file: a failing import raises CommandFailed.

    Args:
        directory: Backup repository holding a workflows/ directory.
        import_all: Import every JSON file in workflows/.
        file: Single workflow file to import. Resolved relative to the current
              directory first, then to workflows/.
        auto_confirm: Treat every confirmation as accepted.
        runner: Command runner to use.
        confirm: Callback used for the overwrite warning and per-file prompts.

    Returns:
        ImportSummary with imported, skipped and failed files.

    Raises:
        InvalidInvocation: If neither or both selection modes are given.
        PreconditionFailed: If workflows/ or the requested file is missing.
        OperationCancelled: If the operator declines the overwrite warning,
                            or declines the single file.
        CommandFailed: If importing the single file fails.

    Example:
        summary = import_workflows("./n8n-workflows", import_all=True, auto_confirm=True)
        print(summary.imported_count)
    """
    if import_all == (file is not None):
        raise InvalidInvocation("Either --all or --file must be specified")

    repo = resolve_path(directory)
    source_dir = workflows_dir(repo)
    if not source_dir.is_dir():
        raise PreconditionFailed(
            f"Workflows directory does not exist: {source_dir}",
            hints=["Run 'export' or 'pull' first, or point --dir at a backup repository"],
        )

    # Resolve before prompting so a typo fails fast
    single_file = None if import_all else _resolve_import_file(repo, file)

    if not auto_confirm:
        console.warning("Importing workflows may overwrite existing workflows with the same ID in n8n")
        if not confirm("Do you want to continue?"):
            raise OperationCancelled("Aborted by user")

    summary = ImportSummary()

    if import_all:
        files = find_workflow_files(source_dir)
        if not files:
            console.warning(f"No workflow files found in {source_dir}")
        else:
            console.info(f"Found {len(files)} workflow files")

        for path in files:
            if not (auto_confirm or confirm(f"Import {path.name}?")):
                console.info(f"Skipping {path.name}")
                summary.skipped.append(path)
                continue

            console.info(f"Importing {path.name}...")
            result = import_workflow(path, runner=runner, check=False)
            if result.returncode == 0:
                console.success(f"Imported {path.name}")
                summary.imported.append(path)
            else:
                logger.debug("n8n import of %s exited with %d", path, result.returncode)
                console.error(f"Failed to import {path.name}")
                summary.failed.append(path)
    else:
        if not (auto_confirm or confirm(f"Import {single_file.name}?")):
            raise OperationCancelled("Aborted by user")

        console.info(f"Importing {single_file.name}...")
        try:
            import_workflow(single_file, runner=runner)
        except subprocess.CalledProcessError as e:
            raise CommandFailed(f"Failed to import {single_file}", e) from e
        console.success(f"Imported {single_file.name}")
        summary.imported.append(single_file)

    _report_import_summary(summary)
    return summary


def _report_import_summary(summary: ImportSummary) -> None:
    console.info("Import summary:")
    console.info(f"  Imported: {summary.imported_count}")
    console.info(f"  Skipped: {summary.skipped_count}")
    if summary.failed_count:
        console.warning(f"  Failed: {summary.failed_count}")

    if summary.imported:
        console.warning("Check credentials and activation state of imported workflows in n8n")
