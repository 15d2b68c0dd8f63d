"""
CLI entry point for git_smart.

Provides the `git-smart sync` command that brings the current branch up to
date with the repository's default branch.
"""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import SyncSettings, load_settings
from .errors import ConfigError
from .git_ops import GitRunner
from .reporting import ConsoleReporter
from .syncer import BranchSyncer

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich; DEBUG shows every git command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.version_option(package_name="git-smart")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a settings file (defaults to .git-smart.yaml if present)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log every git command that is run",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool):
    """Git Smart - Keep your feature branch in sync with the default branch."""
    configure_logging(verbose)
    try:
        ctx.obj = load_settings(config_path)
    except ConfigError as e:
        console.print(f"[red]Error loading config: {escape(str(e))}[/red]")
        raise SystemExit(1)


@cli.command()
@click.pass_obj
def sync(settings: SyncSettings):
    """Stash changes, sync with the default branch (main/master), and pop the stash.

    Steps:

    \b
    1. Gets the default and current branch names.
    2. Stashes uncommitted changes (if any).
    3. Checks out the default branch.
    4. Pulls the latest changes for the default branch.
    5. Checks out the original feature branch.
    6. Rebases the feature branch onto the default branch.
    7. Pops the stash (if anything was stashed).
    """
    runner = GitRunner(settings.working_dir, git_executable=settings.git_executable)
    syncer = BranchSyncer(runner, settings=settings, reporter=ConsoleReporter(console))
    result = syncer.sync()

    if not result.success:
        raise SystemExit(result.exit_code)


if __name__ == "__main__":
    cli()
