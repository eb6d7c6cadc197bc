"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

from __future__ import annotations

import shutil
import sys
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pygit2
import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local rdv package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of rdv modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("rdv"):
        del sys.modules[module_name]

from rdv.core.errors import SourceNotFoundError  # noqa: E402

MANIFEST_FILE = "manifests.yaml"

DEPLOYMENT = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  replicas: {replicas}
"""


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if shutil.which("git") is not None:
        return
    skip_git = pytest.mark.skip(reason="git executable not on PATH")
    for item in items:
        if "requires_git" in item.keywords:
            item.add_marker(skip_git)


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep the user's global config and RDV__ environment out of tests."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("RDV__"):
            monkeypatch.delenv(key)
    global_dir = tmp_path_factory.mktemp("global-config")
    monkeypatch.setattr("rdv.config.loader.GLOBAL_CONFIG_PATH", global_dir / "config.yaml")
    yield


@pytest.fixture
def snapshot_tmpdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point tempfile at a private directory so leftover snapshots are visible."""
    import tempfile

    tmpdir = tmp_path / "tmp"
    tmpdir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(tmpdir))
    return tmpdir


# =============================================================================
# Repository helpers
# =============================================================================


def commit_all(repo: pygit2.Repository, message: str) -> pygit2.Oid:
    """Stage everything in the working tree and commit it on HEAD."""
    repo.index.add_all()
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    parents = [] if repo.head_is_unborn else [repo.head.target]
    return repo.create_commit("HEAD", sig, sig, message, tree, parents)


@pytest.fixture
def temp_repo(tmp_path: Path) -> pygit2.Repository:
    """Create a temporary git repository with initial commit on main."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    (repo_path / "README.md").write_text("# Test Repo\n")
    commit_all(repo, "Initial commit")
    return repo


@pytest.fixture
def manifest_repo(temp_repo: pygit2.Repository) -> pygit2.Repository:
    """Repository whose main branch holds app/manifests.yaml with 2 replicas."""
    workdir = Path(temp_repo.workdir)
    (workdir / "app").mkdir()
    (workdir / "app" / MANIFEST_FILE).write_text(DEPLOYMENT.format(replicas=2))
    commit_all(temp_repo, "Add app")
    return temp_repo


class FileRenderer:
    """Renderer that returns the source directory's manifests.yaml verbatim."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, tuple[Path, ...]]] = []
        self.linted: list[Path] = []

    async def render(
        self, path: Path, value_files: Sequence[Path], *, lint: bool = False
    ) -> str:
        self.calls.append((path, tuple(value_files)))
        if lint:
            self.linted.append(path)
        source = path / MANIFEST_FILE
        if not source.is_file():
            raise SourceNotFoundError.for_path(str(path))
        return source.read_text()


@pytest.fixture
def file_renderer() -> FileRenderer:
    return FileRenderer()


@pytest.fixture
def deployment() -> Callable[[int], str]:
    """Deployment manifest text for a replica count."""
    return lambda replicas: DEPLOYMENT.format(replicas=replicas)


@pytest.fixture
def commit() -> Callable[[pygit2.Repository, str], pygit2.Oid]:
    return commit_all


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers bound to streams that die with the test."""
    yield
    import logging

    import structlog

    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
