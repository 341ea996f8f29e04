"""Git repository operations."""

from pathlib import Path
from typing import Callable, Optional, Sequence

from git import GitCommandError, GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.cmd import handle_process_output
from git.util import finalize_process

GONE_MARKER = ": gone]"
UNMERGED_MARKER = "not fully merged"

# Two-column prefix git prints before each `git branch -vv` entry
CURRENT_BRANCH_MARKERS = ("* ", "+ ")


class GitError(Exception):
    """Git operation error."""

    def __init__(self, message: str, needs_confirmation: bool = False) -> None:
        """Initialize error.

        Args:
            message: Error message
            needs_confirmation: Whether this error needs user confirmation to proceed
        """
        super().__init__(message)
        self.needs_confirmation = needs_confirmation


def is_not_fully_merged(message: str) -> bool:
    """Check whether git refused a safe delete because of unmerged commits."""
    return UNMERGED_MARKER in message


def find_gone_branches(branch_listing: str, protect: Sequence[str]) -> list[str]:
    """Extract branches whose upstream is gone from `git branch -vv` output.

    Args:
        branch_listing: Full text output of `git branch -vv`
        protect: Branch names that must never be returned

    Returns:
        Branch names in listing order, minus the protected ones.
    """
    gone = []
    for line in branch_listing.splitlines():
        if GONE_MARKER not in line:
            continue
        entry = line.strip()
        if entry.startswith(CURRENT_BRANCH_MARKERS):
            entry = entry[2:].lstrip()
        tokens = entry.split()
        if not tokens:
            continue
        if tokens[0] in protect:
            continue
        gone.append(tokens[0])
    return gone


def _error_details(err: GitCommandError) -> str:
    """Return git's own stderr text for a failed command."""
    details = str(err.stderr or "").strip()
    if details.startswith("stderr: '") and details.endswith("'"):
        details = details[len("stderr: '") : -1]
    return details.strip() or str(err)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Open the repository containing `path` and make sure it has a working tree."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
            inside = self.repo.git.rev_parse("--is-inside-work-tree").strip()
        except (GitCommandError, GitCommandNotFound, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Not a git repository: {path}") from err
        if inside != "true":
            raise GitError(f"Not inside a git working tree: {path}")

    def fetch_and_prune(self, remote_name: str = "origin", on_line: Optional[Callable[[str], None]] = None) -> None:
        """Fetch from a remote and prune remote-tracking branches it no longer has.

        Args:
            remote_name: Remote to fetch from
            on_line: Called with each line git prints, as soon as it is printed
        """
        try:
            self.repo.remote(remote_name)
        except ValueError as err:
            raise GitError(f"Remote '{remote_name}' is not configured") from err

        def forward(line: str) -> None:
            if on_line is not None:
                on_line(line.rstrip("\n"))

        try:
            proc = self.repo.git.fetch("--prune", remote_name, as_process=True)
            handle_process_output(proc, forward, forward, finalize_process)
        except GitCommandError as err:
            raise GitError(f"Failed to fetch from '{remote_name}': {_error_details(err)}") from err

    def get_branch_listing(self) -> str:
        """Get the verbose branch listing, including upstream tracking info."""
        try:
            return str(self.repo.git.branch("-vv", "--no-color"))
        except GitCommandError as err:
            raise GitError(f"Failed to list branches: {_error_details(err)}") from err

    def get_gone_branches(self, protect: Sequence[str]) -> list[str]:
        """Get local branches whose upstream is gone, excluding protected names."""
        return find_gone_branches(self.get_branch_listing(), protect)

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        """Delete a local branch.

        A non-forcing delete that git refuses because of unmerged commits raises
        a GitError with needs_confirmation set, so the caller can offer a force delete.
        """
        try:
            self.repo.git.branch("-D" if force else "-d", branch_name)
        except GitCommandError as err:
            details = _error_details(err)
            raise GitError(
                details,
                needs_confirmation=not force and is_not_fully_merged(details),
            ) from err

    def has_branch(self, branch_name: str) -> bool:
        """Check whether a local branch exists."""
        return branch_name in [head.name for head in self.repo.heads]
