"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator, Optional, Sequence

import pytest
from git import Actor, Repo


class FakePrompter:
    """Prompter stand-in that answers from preset values and records every call."""

    def __init__(self, select: Optional[Sequence[str]] = None, confirm: bool = False) -> None:
        # None selects every offered branch
        self.select = select
        self.confirm = confirm
        self.offered: list[list[str]] = []
        self.confirm_calls: list[str] = []

    def select_branches(self, branches: Sequence[str]) -> list[str]:
        self.offered.append(list(branches))
        if self.select is None:
            return list(branches)
        return [branch for branch in branches if branch in self.select]

    def confirm_force_delete(self, branch: str) -> bool:
        self.confirm_calls.append(branch)
        return self.confirm


@pytest.fixture
def prompter() -> FakePrompter:
    """Create a prompter that selects everything and declines force deletes."""
    return FakePrompter()


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Local branches:
        main                   tracks origin/main
        feature/active         upstream still exists
        feature/merged-gone    merged into main, upstream deleted
        feature/unmerged-gone  not merged, upstream deleted
        develop                not merged, upstream deleted (protected by default)

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    # Set up git config
    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Ensure we're on main branch
    if "main" not in local_repo.heads:
        local_repo.create_head("main")
    main_branch = local_repo.heads.main
    main_branch.checkout()

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    def create_branch(name: str, merge: bool = False, gone: bool = False) -> None:
        """Create a tracked branch with one commit of its own."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()

        file_name = name.replace("/", "_") + ".txt"
        (local_path / file_name).write_text(f"{name} content")
        local_repo.index.add([file_name])
        local_repo.index.commit(f"Add {name}", author=author)

        origin.push(name)
        branch.set_tracking_branch(origin.refs[name])

        if merge:
            main_branch.checkout()
            local_repo.git.merge(name, "--no-ff")
            origin.push("main")
        if gone:
            origin.push(f":{name}")  # Delete in remote

    create_branch("feature/active")
    create_branch("feature/merged-gone", merge=True, gone=True)
    create_branch("feature/unmerged-gone", gone=True)
    create_branch("develop", gone=True)

    main_branch.checkout()

    yield local_path, remote_path

    # Cleanup is handled by pytest's tmp_path fixture


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    """Path of the local repository."""
    local_path, _ = test_env
    return local_path
