"""
Git operations for the branch sync.

Provides a thin runner around the git executable using GitPython's command
layer. Every call runs one git command to completion and returns its trimmed
combined output, raising CommandError when git exits non-zero.
"""

import logging
from pathlib import Path

from git.cmd import Git
from git.exc import GitCommandNotFound

from .errors import CommandError, DefaultBranchError
from .parsing import parse_default_branch

logger = logging.getLogger(__name__)


def combine_output(stdout: str, stderr: str) -> str:
    """Merge stdout and stderr into one trimmed text."""
    parts = [part.strip() for part in (stdout, stderr)]
    return "\n".join(part for part in parts if part)


class GitRunner:
    """Runs git commands in a working directory."""

    def __init__(self, working_dir: Path | None = None, git_executable: str = "git"):
        """Initialize the runner; working_dir defaults to the current directory."""
        self.working_dir = Path(working_dir).resolve() if working_dir else None
        self.git_executable = git_executable
        self.git = Git(self.working_dir)

    def run(self, *args: str) -> str:
        """
        Run one git command.

        Args:
            *args: Arguments passed to git, e.g. ("checkout", "main")

        Returns:
            Trimmed stdout and stderr of the command

        Raises:
            CommandError: If git exits non-zero or cannot be started. The
                error message is git's trimmed combined output.
        """
        command = [self.git_executable, *args]
        logger.debug("Running: %s", " ".join(command))
        try:
            status, stdout, stderr = self.git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as e:
            raise CommandError(list(args), f"Could not run {self.git_executable}: {e}") from e

        output = combine_output(stdout, stderr)
        logger.debug("Exit status %s for: %s", status, " ".join(command))
        if status != 0:
            raise CommandError(list(args), output, status)
        return output

    def is_repository(self) -> bool:
        """Check whether the working directory is inside a git work tree."""
        try:
            self.run("rev-parse", "--is-inside-work-tree")
            return True
        except CommandError:
            return False

    def current_branch(self) -> str:
        """Get the abbreviated name of HEAD."""
        return self.run("rev-parse", "--abbrev-ref", "HEAD")

    def default_branch(self, remote: str = "origin") -> str:
        """
        Find the default branch of a remote from `git remote show`.

        Raises:
            DefaultBranchError: If the remote cannot be queried or reports no
                HEAD branch
        """
        try:
            output = self.run("remote", "show", remote)
        except CommandError as e:
            raise DefaultBranchError(
                f"could not query remote '{remote}': {e.output}", output=e.output
            ) from e

        branch = parse_default_branch(output)
        if branch is None:
            raise DefaultBranchError(
                f"could not determine default branch from 'git remote show {remote}'",
                output=output,
            )
        return branch

    def status_porcelain(self) -> str:
        """Get the porcelain status of the working tree (empty when clean)."""
        return self.run("status", "--porcelain")

    def stash(self) -> str:
        """Stash uncommitted changes."""
        return self.run("stash")

    def stash_pop(self) -> str:
        """Re-apply and drop the latest stash entry."""
        return self.run("stash", "pop")

    def checkout(self, branch: str) -> str:
        """Switch to a branch."""
        return self.run("checkout", branch)

    def pull(self) -> str:
        """Pull the current branch from its upstream."""
        return self.run("pull")

    def rebase(self, onto: str) -> str:
        """Rebase the current branch onto another branch."""
        return self.run("rebase", onto)
