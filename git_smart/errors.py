"""
Error types raised by git_smart.

Each failing step of the sync workflow has its own exception class so the
orchestrator, the CLI and tests can tell the failure kinds apart.
"""


class GitSmartError(Exception):
    """Base class for all git_smart errors."""


class ConfigError(GitSmartError):
    """Settings file could not be read or is invalid."""


class CommandError(GitSmartError):
    """A git command exited with a non-zero status."""

    def __init__(self, args: list[str], output: str, status: int | None = None):
        # The message is git's own output so callers can match on it
        super().__init__(output)
        self.command_args = list(args)
        self.output = output
        self.status = status

    @property
    def command(self) -> str:
        """Human readable form of the failed command."""
        return " ".join(["git", *self.command_args])


class SyncError(GitSmartError):
    """A fatal failure of one sync step."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.message = message
        self.output = output


class NotARepository(SyncError):
    """The working directory is not inside a git work tree."""


class DefaultBranchError(SyncError):
    """The default branch of the remote could not be determined."""


class BranchResolutionError(SyncError):
    """The current branch could not be determined."""


class StatusError(SyncError):
    """The working tree status could not be queried."""


class StashError(SyncError):
    """Local changes could not be stashed."""


class CheckoutError(SyncError):
    """Switching branches failed."""


class PullError(SyncError):
    """Pulling the default branch failed."""


class RebaseConflict(SyncError):
    """The rebase stopped on conflicts that the user has to resolve."""


class StashPopError(SyncError):
    """The stash could not be re-applied; it is still saved."""
