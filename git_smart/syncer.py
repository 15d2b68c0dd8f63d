"""
Branch sync workflow.

This module drives the sequence stash -> checkout default -> pull ->
checkout back -> rebase -> stash pop as an explicit state machine. Each state
either moves on to the next one or fails; failing states attempt a best-effort
rollback first so the user is not left on the wrong branch with their changes
hidden in the stash.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from functools import partial

from .config import SyncSettings
from .errors import (
    BranchResolutionError,
    CheckoutError,
    CommandError,
    DefaultBranchError,
    NotARepository,
    PullError,
    RebaseConflict,
    StashError,
    StashPopError,
    StatusError,
    SyncError,
)
from .git_ops import GitRunner
from .parsing import is_benign_stash_pop_failure
from .reporting import ConsoleReporter, ReportCategory, Reporter

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    """States of the sync workflow, in the order they are visited."""

    PREFLIGHT = "preflight"
    RESOLVE_DEFAULT_BRANCH = "resolve-default-branch"
    RESOLVE_CURRENT_BRANCH = "resolve-current-branch"
    SHORT_CIRCUIT = "short-circuit"
    DETECT_DIRTY_TREE = "detect-dirty-tree"
    STASH = "stash"
    CHECKOUT_DEFAULT = "checkout-default"
    PULL_DEFAULT = "pull-default"
    CHECKOUT_FEATURE = "checkout-feature"
    REBASE = "rebase"
    POP_STASH = "pop-stash"
    SUCCESS = "success"
    FAILURE = "failure"


TERMINAL_STATES = frozenset({SyncState.SUCCESS, SyncState.FAILURE})


@dataclass
class SyncResult:
    """Result of a sync run."""

    success: bool
    error: SyncError | None = None
    default_branch: str | None = None
    current_branch: str | None = None
    stashed: bool = False
    short_circuit: bool = False
    states: list[SyncState] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Process exit status for this result."""
        return 0 if self.success else 1


class BranchSyncer:
    """Syncs the current branch with the repository's default branch."""

    def __init__(
        self,
        runner: GitRunner,
        settings: SyncSettings | None = None,
        reporter: Reporter | None = None,
    ):
        """Initialize the syncer with a git runner and settings."""
        self.runner = runner
        self.settings = settings or SyncSettings()
        self.reporter = reporter or ConsoleReporter()
        self._handlers: dict[SyncState, Callable[[], SyncState]] = {
            SyncState.PREFLIGHT: self._preflight,
            SyncState.RESOLVE_DEFAULT_BRANCH: self._resolve_default_branch,
            SyncState.RESOLVE_CURRENT_BRANCH: self._resolve_current_branch,
            SyncState.SHORT_CIRCUIT: self._short_circuit,
            SyncState.DETECT_DIRTY_TREE: self._detect_dirty_tree,
            SyncState.STASH: self._stash,
            SyncState.CHECKOUT_DEFAULT: self._checkout_default,
            SyncState.PULL_DEFAULT: self._pull_default,
            SyncState.CHECKOUT_FEATURE: self._checkout_feature,
            SyncState.REBASE: self._rebase,
            SyncState.POP_STASH: self._pop_stash,
        }
        self._reset()

    def _reset(self) -> None:
        self.default_branch: str | None = None
        self.current_branch: str | None = None
        self.stashed = False
        self.short_circuit = False

    def sync(self) -> SyncResult:
        """
        Run the whole workflow.

        Returns:
            SyncResult describing how the run ended. Failures are reported
            through the reporter and returned, never raised.
        """
        self._reset()
        states: list[SyncState] = []
        error: SyncError | None = None
        state = SyncState.PREFLIGHT

        while state not in TERMINAL_STATES:
            states.append(state)
            logger.debug("Sync state: %s", state.value)
            try:
                state = self._handlers[state]()
            except SyncError as e:
                logger.debug("Sync failed in %s: %s", state.value, e)
                error = e
                state = SyncState.FAILURE
        states.append(state)

        if state is SyncState.SUCCESS and not self.short_circuit:
            self._emit(
                ReportCategory.SUCCESS,
                f"✓ All done! Your branch is synced with '{self.default_branch}'.",
            )

        return SyncResult(
            success=state is SyncState.SUCCESS,
            error=error,
            default_branch=self.default_branch,
            current_branch=self.current_branch,
            stashed=self.stashed,
            short_circuit=self.short_circuit,
            states=states,
        )

    # -- reporting helpers -------------------------------------------------

    def _emit(self, category: ReportCategory, message: str) -> None:
        self.reporter.emit(category, message)

    def _step(self, message: str) -> None:
        self._emit(ReportCategory.STEP, message)

    def _success(self, message: str) -> None:
        self._emit(ReportCategory.SUCCESS, message)

    def _error(self, message: str) -> None:
        self._emit(ReportCategory.ERROR, message)

    def _info(self, message: str) -> None:
        self._emit(ReportCategory.INFO, message)

    def _compensate(self, description: str, action: Callable[[], str]) -> None:
        """Attempt one rollback action; its failure is logged and otherwise ignored."""
        self._info(description)
        try:
            action()
        except CommandError as e:
            logger.debug("Rollback '%s' failed: %s", e.command, e.output)

    def _restore_stash_if_needed(self, description: str = "Attempting to restore stash...") -> None:
        if self.stashed:
            self._compensate(description, self.runner.stash_pop)

    # -- states ------------------------------------------------------------

    def _preflight(self) -> SyncState:
        if not self.runner.is_repository():
            self._error("Error: This is not a git repository.")
            raise NotARepository("This is not a git repository.")
        return SyncState.RESOLVE_DEFAULT_BRANCH

    def _resolve_default_branch(self) -> SyncState:
        self._step("STEP 0: Determining default branch name...")
        if self.settings.default_branch:
            self.default_branch = self.settings.default_branch
            self._success(f"Using configured default branch: {self.default_branch}")
            return SyncState.RESOLVE_CURRENT_BRANCH

        try:
            self.default_branch = self.runner.default_branch(self.settings.remote)
        except DefaultBranchError as e:
            self._error(f"Error getting default branch: {e}")
            raise
        self._success(f"Default branch detected: {self.default_branch}")
        return SyncState.RESOLVE_CURRENT_BRANCH

    def _resolve_current_branch(self) -> SyncState:
        self._step("STEP 1: Checking current branch...")
        try:
            self.current_branch = self.runner.current_branch()
        except CommandError as e:
            self._error(f"Error getting current branch: {e.output}")
            raise BranchResolutionError(
                f"could not determine current branch: {e.output}", output=e.output
            ) from e
        return SyncState.SHORT_CIRCUIT

    def _short_circuit(self) -> SyncState:
        if self.current_branch != self.default_branch:
            self._success(f"On feature branch: {self.current_branch}")
            return SyncState.DETECT_DIRTY_TREE

        self.short_circuit = True
        self._info(
            f"You are already on the '{self.default_branch}' branch. Pulling latest changes..."
        )
        try:
            output = self.runner.pull()
        except CommandError as e:
            self._error(f"Error pulling '{self.default_branch}': {e.output}")
            raise PullError(
                f"could not pull '{self.default_branch}': {e.output}", output=e.output
            ) from e
        self._success(f"Successfully pulled '{self.default_branch}'. You are up to date.")
        if output:
            self._info(output)
        return SyncState.SUCCESS

    def _detect_dirty_tree(self) -> SyncState:
        self._step("STEP 2: Checking for uncommitted changes...")
        try:
            status = self.runner.status_porcelain()
        except CommandError as e:
            self._error(f"Error checking status: {e.output}")
            raise StatusError(
                f"could not check working tree status: {e.output}", output=e.output
            ) from e

        if status:
            return SyncState.STASH
        self._success("No changes to stash.")
        return SyncState.CHECKOUT_DEFAULT

    def _stash(self) -> SyncState:
        self._info("Uncommitted changes found. Stashing...")
        try:
            self.runner.stash()
        except CommandError as e:
            # Nothing has changed yet, so there is nothing to roll back
            self._error(f"Error stashing changes: {e.output}")
            raise StashError(f"could not stash changes: {e.output}", output=e.output) from e
        self.stashed = True
        self._success("Changes stashed.")
        return SyncState.CHECKOUT_DEFAULT

    def _checkout_default(self) -> SyncState:
        self._step(f"STEP 3: Checking out '{self.default_branch}'...")
        try:
            self.runner.checkout(self.default_branch)
        except CommandError as e:
            self._error(f"Error checking out '{self.default_branch}': {e.output}")
            self._restore_stash_if_needed()
            raise CheckoutError(
                f"could not check out '{self.default_branch}': {e.output}", output=e.output
            ) from e
        return SyncState.PULL_DEFAULT

    def _pull_default(self) -> SyncState:
        self._step(f"STEP 4: Pulling latest changes for '{self.default_branch}'...")
        try:
            self.runner.pull()
        except CommandError as e:
            self._error(f"Error pulling '{self.default_branch}': {e.output}")
            self._compensate(
                "Attempting to switch back to your branch...",
                partial(self.runner.checkout, self.current_branch),
            )
            self._restore_stash_if_needed()
            raise PullError(
                f"could not pull '{self.default_branch}': {e.output}", output=e.output
            ) from e
        self._success(f"Pulled '{self.default_branch}' successfully.")
        return SyncState.CHECKOUT_FEATURE

    def _checkout_feature(self) -> SyncState:
        self._step(f"STEP 5: Checking out '{self.current_branch}'...")
        try:
            self.runner.checkout(self.current_branch)
        except CommandError as e:
            self._error(f"Error checking out feature branch: {e.output}")
            # Still on the default branch at this point
            self._restore_stash_if_needed("Attempting to restore stash on default branch...")
            raise CheckoutError(
                f"could not check out '{self.current_branch}': {e.output}", output=e.output
            ) from e
        return SyncState.REBASE

    def _rebase(self) -> SyncState:
        self._step(f"STEP 6: Rebasing '{self.current_branch}' onto '{self.default_branch}'...")
        try:
            self.runner.rebase(self.default_branch)
        except CommandError as e:
            # A conflict is left for the user; popping the stash now would
            # pile more changes onto a half-finished rebase
            self._error("REBASE FAILED: You have conflicts.")
            self._info("--- Git Output ---")
            self._info(e.output)
            self._info("------------------")
            self._info("Please fix the conflicts and then run 'git rebase --continue'.")
            if self.stashed:
                self._info(
                    "Your stashed changes were NOT applied. "
                    "Run 'git stash pop' after your rebase is complete."
                )
            raise RebaseConflict(
                f"rebase onto '{self.default_branch}' stopped on conflicts", output=e.output
            ) from e
        self._success("Rebase successful.")
        if self.stashed:
            return SyncState.POP_STASH
        return SyncState.SUCCESS

    def _pop_stash(self) -> SyncState:
        self._step("STEP 7: Applying stashed changes...")
        try:
            self.runner.stash_pop()
        except CommandError as e:
            if is_benign_stash_pop_failure(e.output, self.settings.benign_stash_pop_phrases):
                self._success("Stash was empty or already applied.")
                return SyncState.SUCCESS
            self._error("Error popping stash. Your stash is still saved.")
            self._info(e.output)
            raise StashPopError(
                f"could not apply stashed changes: {e.output}", output=e.output
            ) from e
        self._success("Stashed changes applied.")
        return SyncState.SUCCESS
