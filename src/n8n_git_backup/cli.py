"""Command-line interface for backing up n8n workflows to git."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import click

from . import __version__, console
from .bootstrap import clone_repository, init_repository
from .config import get_n8n_command
from .console import Confirm
from .errors import BackupError, InvalidInvocation, OperationCancelled, PrerequisiteMissing
from .paths import DEFAULT_DIRECTORY
from .runner import CommandRunner
from .sync import pull_changes, push_changes
from .transfer import export_workflows, import_workflows

logger = logging.getLogger(__name__)

EXAMPLES = """\
\b
Examples:
  # Initialize a new repository
  n8n-git-backup init --repo https://github.com/user/workflows.git --dir ./my-workflows

\b
  # Export all workflows, then push them
  n8n-git-backup export --all --dir ./my-workflows
  n8n-git-backup push --dir ./my-workflows --message 'Added new automation'

\b
  # Restore on another machine
  n8n-git-backup clone --repo https://github.com/user/workflows.git
  n8n-git-backup import --all --yes
"""


@dataclass
class AppContext:
    """Collaborators shared by all subcommands. Tests pass their own via `obj`."""

    runner: CommandRunner = field(default_factory=CommandRunner)
    confirm: Confirm = console.ask


class BackupGroup(click.Group):
    """Command group that exits with status 1 on usage errors."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _require_tools(app: AppContext, *, n8n: bool = False) -> None:
    if not app.runner.available("git"):
        raise PrerequisiteMissing(
            "git command not found.",
            hints=["Install git and make sure it is in PATH"],
        )

    if n8n and not app.runner.available(command := get_n8n_command()):
        raise PrerequisiteMissing(
            f"{command} command not found.",
            hints=["Ensure n8n is installed and available in PATH, or set N8N_COMMAND"],
        )


def _dispatch(ctx: click.Context, operation: Callable[..., Any], *, n8n: bool = False, **kwargs: Any) -> Any:
    """
    Run an operation and turn its exceptions into messages and exit codes.

    OperationCancelled exits 0, every other BackupError exits 1.
    """
    app = ctx.ensure_object(AppContext)
    try:
        _require_tools(app, n8n=n8n)
        return operation(runner=app.runner, **kwargs)
    except OperationCancelled as e:
        console.info(e.message)
        ctx.exit(0)
    except InvalidInvocation as e:
        console.error(e.message)
        click.echo(ctx.get_usage(), err=True)
        ctx.exit(1)
    except BackupError as e:
        logger.debug("%s failed", ctx.info_name, exc_info=True)
        console.error(e.message)
        console.hints(e.hints)
        ctx.exit(1)


def dir_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "-d",
        "--dir",
        "directory",
        default=DEFAULT_DIRECTORY,
        envvar="N8N_GIT_DIR",
        show_default=True,
        help="Local repository directory (or set N8N_GIT_DIR)",
    )(func)


def repo_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "-b",
        "--branch",
        default="main",
        envvar="N8N_GIT_BRANCH",
        show_default=True,
        help="Git branch name (or set N8N_GIT_BRANCH)",
    )(func)
    func = click.option("-r", "--repo", "remote_url", required=True, help="Remote repository URL")(func)
    return dir_option(func)


@click.group(
    cls=BackupGroup,
    invoke_without_command=True,
    epilog=EXAMPLES,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(__version__, prog_name="n8n-git-backup")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """
    Back up n8n workflows to a git repository and restore them.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(AppContext)

    if ctx.invoked_subcommand is None:
        console.error("No command specified")
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)


@cli.command()
@repo_options
@click.pass_context
def init(ctx: click.Context, directory: str, remote_url: str, branch: str):
    """Initialize a new local git repository."""
    app = ctx.ensure_object(AppContext)
    _dispatch(
        ctx,
        init_repository,
        directory=directory,
        remote_url=remote_url,
        branch=branch,
        confirm=app.confirm,
    )


@cli.command()
@repo_options
@click.pass_context
def clone(ctx: click.Context, directory: str, remote_url: str, branch: str):
    """Clone an existing workflow repository."""
    app = ctx.ensure_object(AppContext)
    _dispatch(
        ctx,
        clone_repository,
        directory=directory,
        remote_url=remote_url,
        branch=branch,
        confirm=app.confirm,
    )


@cli.command("export")
@dir_option
@click.option("-w", "--workflow-id", help="Export specific workflow by ID")
@click.option("-a", "--all", "export_all", is_flag=True, help="Export all workflows")
@click.option(
    "-c",
    "--include-creds",
    "include_credentials",
    is_flag=True,
    help="Also export credentials (WARNING: sensitive data)",
)
@click.pass_context
def export_command(
    ctx: click.Context,
    directory: str,
    workflow_id: str | None,
    export_all: bool,
    include_credentials: bool,
):
    """Export workflows from n8n into the local repository."""
    app = ctx.ensure_object(AppContext)
    _dispatch(
        ctx,
        export_workflows,
        n8n=True,
        directory=directory,
        workflow_id=workflow_id,
        export_all=export_all,
        include_credentials=include_credentials,
        confirm=app.confirm,
    )


@cli.command()
@dir_option
@click.option("-m", "--message", default="Update workflows", show_default=True, help="Commit message")
@click.pass_context
def push(ctx: click.Context, directory: str, message: str):
    """Commit changes and push them to the remote."""
    _dispatch(ctx, push_changes, directory=directory, message=message)


@cli.command()
@dir_option
@click.pass_context
def pull(ctx: click.Context, directory: str):
    """Pull the latest workflows from the remote."""
    app = ctx.ensure_object(AppContext)
    _dispatch(ctx, pull_changes, directory=directory, confirm=app.confirm)


@cli.command("import")
@dir_option
@click.option("-a", "--all", "import_all", is_flag=True, help="Import all workflow files")
@click.option("-f", "--file", help="Import a single workflow file")
@click.option("-y", "--yes", "auto_confirm", is_flag=True, help="Skip all confirmation prompts")
@click.pass_context
def import_command(
    ctx: click.Context,
    directory: str,
    import_all: bool,
    file: str | None,
    auto_confirm: bool,
):
    """Import workflows from the local repository into n8n."""
    app = ctx.ensure_object(AppContext)
    _dispatch(
        ctx,
        import_workflows,
        n8n=True,
        directory=directory,
        import_all=import_all,
        file=file,
        auto_confirm=auto_confirm,
        confirm=app.confirm,
    )


@cli.command("help")
@click.pass_context
def help_command(ctx: click.Context):
    """Show usage and examples."""
    click.echo(ctx.parent.get_help())


def main() -> None:
    cli(prog_name="n8n-git-backup")
