"""Tests for GitOps ref resolution."""

from __future__ import annotations

from pathlib import Path

import pygit2
import pytest

from rdv.core.errors import NotARepositoryError
from rdv.git import GitOps
from rdv.git.errors import RefNotFoundError


@pytest.fixture
def tracked_repo(temp_repo: pygit2.Repository) -> pygit2.Repository:
    """main tracks origin/main, which points at the initial commit."""
    temp_repo.remotes.create("origin", "https://example.invalid/repo.git")
    temp_repo.references.create("refs/remotes/origin/main", temp_repo.head.target)
    temp_repo.branches.local["main"].upstream = temp_repo.branches.remote["origin/main"]
    return temp_repo


class TestDiscover:
    def test_discover_from_subdirectory(self, temp_repo: pygit2.Repository) -> None:
        workdir = Path(temp_repo.workdir)
        (workdir / "charts").mkdir()

        ops = GitOps.discover(workdir / "charts")

        assert ops.path.resolve() == workdir.resolve()

    def test_discover_outside_repo_raises(self, tmp_path: Path) -> None:
        with pytest.raises(NotARepositoryError):
            GitOps.discover(tmp_path)


class TestResolveTargetRef:
    """Upstream tracking of the target ref."""

    def test_local_branch_with_upstream_resolves_to_upstream(
        self, tracked_repo: pygit2.Repository
    ) -> None:
        ops = GitOps(tracked_repo.workdir)

        assert ops.resolve_target_ref("main") == "origin/main"

    def test_local_branch_without_upstream_unchanged(self, temp_repo: pygit2.Repository) -> None:
        ops = GitOps(temp_repo.workdir)

        assert ops.resolve_target_ref("main") == "main"

    @pytest.mark.parametrize("ref", ["HEAD", "origin/main", "feature/x"])
    def test_head_and_slashed_names_unchanged(
        self, tracked_repo: pygit2.Repository, ref: str
    ) -> None:
        ops = GitOps(tracked_repo.workdir)

        assert ops.resolve_target_ref(ref) == ref

    def test_unknown_name_unchanged(self, temp_repo: pygit2.Repository) -> None:
        ops = GitOps(temp_repo.workdir)

        assert ops.resolve_target_ref("v1.2.3") == "v1.2.3"


class TestVerifyRef:
    def test_returns_full_commit_sha(self, temp_repo: pygit2.Repository) -> None:
        ops = GitOps(temp_repo.workdir)

        sha = ops.verify_ref("HEAD")

        assert sha == str(temp_repo.head.target)
        assert len(sha) == 40

    def test_short_sha_accepted(self, temp_repo: pygit2.Repository) -> None:
        ops = GitOps(temp_repo.workdir)
        full = str(temp_repo.head.target)

        assert ops.verify_ref(full[:8]) == full

    def test_unknown_ref_raises(self, temp_repo: pygit2.Repository) -> None:
        ops = GitOps(temp_repo.workdir)

        with pytest.raises(RefNotFoundError):
            ops.verify_ref("nope")
