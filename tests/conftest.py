"""Pytest configuration and fixtures for git_smart tests."""

import tempfile
from pathlib import Path

import pytest
from git import Repo

from git_smart.errors import CommandError
from git_smart.git_ops import GitRunner
from git_smart.reporting import RecordingReporter


def configure_user(repo: Repo) -> None:
    """Give a test repository a committer identity."""
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("pull", "rebase", "false")


def commit_file(repo: Repo, name: str, content: str, message: str) -> str:
    """Write a file in the work tree and commit it."""
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message).hexsha


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def upstream_repo(temp_dir: Path):
    """Create a repository on branch 'main' to act as origin."""
    repo_path = temp_dir / "upstream"
    repo_path.mkdir()

    repo = Repo.init(repo_path)
    configure_user(repo)
    commit_file(repo, "README.md", "# Upstream\n", "Initial commit")
    commit_file(repo, "a.txt", "line one\n", "Add a.txt")
    repo.git.branch("-M", "main")

    yield repo


@pytest.fixture
def local_repo(temp_dir: Path, upstream_repo: Repo):
    """Clone the upstream repo; the clone's origin HEAD branch is 'main'."""
    repo = Repo.clone_from(upstream_repo.working_tree_dir, temp_dir / "local")
    configure_user(repo)
    yield repo


@pytest.fixture
def feature_repo(local_repo: Repo):
    """The local clone checked out on 'feature/x' with one commit of its own."""
    local_repo.git.checkout("-b", "feature/x")
    commit_file(local_repo, "feature.txt", "feature work\n", "Add feature")
    yield local_repo


@pytest.fixture
def reporter():
    """Reporter that records every status line."""
    return RecordingReporter()


class ScriptedRunner(GitRunner):
    """GitRunner that records commands instead of running git.

    Commands are keyed by their space-joined arguments. Commands listed in
    ``failures`` raise CommandError with the given output; everything else
    succeeds with the output from ``responses`` (empty by default).
    """

    def __init__(self, responses: dict[str, str] | None = None, failures: dict[str, str] | None = None):
        super().__init__()
        self.responses = dict(responses or {})
        self.failures = dict(failures or {})
        self.commands: list[str] = []

    def run(self, *args: str) -> str:
        command = " ".join(args)
        self.commands.append(command)
        if command in self.failures:
            raise CommandError(list(args), self.failures[command], 1)
        return self.responses.get(command, "")


REMOTE_SHOW_MAIN = """\
* remote origin
  Fetch URL: git@github.com:org/repo.git
  Push  URL: git@github.com:org/repo.git
  HEAD branch: main
  Remote branch:
    main tracked"""


@pytest.fixture
def make_runner():
    """Build a ScriptedRunner for a repo on `current` whose origin defaults to `default`."""

    def _make(
        current: str = "feature/x",
        default: str = "main",
        dirty: bool = False,
        failures: dict[str, str] | None = None,
        responses: dict[str, str] | None = None,
    ) -> ScriptedRunner:
        scripted = {
            "rev-parse --is-inside-work-tree": "true",
            "remote show origin": REMOTE_SHOW_MAIN.replace("main", default),
            "rev-parse --abbrev-ref HEAD": current,
            "status --porcelain": " M a.txt" if dirty else "",
        }
        scripted.update(responses or {})
        return ScriptedRunner(responses=scripted, failures=failures)

    return _make
