"""Wrappers around the n8n command line export and import commands."""

import subprocess
from pathlib import Path

from .config import get_n8n_command
from .runner import CommandRunner, default_runner


def run_n8n(
    *args: str,
    runner: CommandRunner | None = None,
    check: bool = True,
    capture: bool = False,
) -> subprocess.CompletedProcess:
    """
    Run an n8n CLI command and return the result.

    Args:
        *args: n8n command arguments (e.g., "export:workflow", "--all")
        runner: Command runner to use. Defaults to the subprocess runner.
        check: Whether to raise CalledProcessError on non-zero exit (default: True)
        capture: Whether to capture stdout/stderr (default: False)

    Returns:
        CompletedProcess result
    """
    result = (runner or default_runner).run(get_n8n_command(), *args, capture=capture)
    if check:
        result.check_returncode()
    return result


def export_all_workflows(output_dir: Path, runner: CommandRunner | None = None) -> None:
    """
    Export every workflow to its own pretty-printed JSON file in output_dir.

    Example:
        export_all_workflows(Path("/backups/workflows"))
    """
    run_n8n(
        "export:workflow",
        "--all",
        "--separate",
        "--pretty",
        f"--output={output_dir}/",
        runner=runner,
    )


def export_workflow(workflow_id: str, output_file: Path, runner: CommandRunner | None = None) -> None:
    """Export a single workflow by ID to output_file."""
    run_n8n(
        "export:workflow",
        f"--id={workflow_id}",
        "--pretty",
        f"--output={output_file}",
        runner=runner,
    )


def export_all_credentials(output_dir: Path, runner: CommandRunner | None = None) -> None:
    run_n8n(
        "export:credentials",
        "--all",
        "--separate",
        "--pretty",
        f"--output={output_dir}/",
        runner=runner,
    )


def import_workflow(
    input_file: Path,
    runner: CommandRunner | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """
    Import one workflow file into n8n.

    Args:
        input_file: JSON file produced by an export.
        runner: Command runner to use.
        check: Whether to raise CalledProcessError on failure (default: True).
               Bulk imports pass False and inspect the return code instead.

    Returns:
        CompletedProcess result
    """
    return run_n8n("import:workflow", f"--input={input_file}", runner=runner, check=check)
