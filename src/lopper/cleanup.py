"""Deletion of selected branches."""

from dataclasses import dataclass, field
from typing import Sequence

from rich.console import Console

from lopper.git import GitError, GitRepo
from lopper.prompts import Prompter


@dataclass
class CleanupReport:
    """Outcome of a cleanup batch, in processing order."""

    deleted: list[str] = field(default_factory=list)
    force_deleted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    # (branch, outcome) pairs across all outcomes
    outcomes: list[tuple[str, str]] = field(default_factory=list)

    def add(self, outcome: str, branch: str) -> None:
        """Record the outcome for a branch: deleted, force_deleted, skipped or failed."""
        getattr(self, outcome).append(branch)
        self.outcomes.append((branch, outcome))


class BranchCleaner:
    """Delete branches one by one, offering a force delete for unmerged ones.

    A failure on one branch is reported and never stops the rest of the batch.
    """

    def __init__(
        self,
        repo: GitRepo,
        prompter: Prompter,
        console: Console,
        err_console: Console,
        dry_run: bool = False,
    ) -> None:
        self.repo = repo
        self.prompter = prompter
        self.console = console
        self.err_console = err_console
        self.dry_run = dry_run

    def delete_branches(self, branches: Sequence[str]) -> CleanupReport:
        """Delete each branch in order and return what happened to it."""
        report = CleanupReport()
        for branch in branches:
            self._delete_branch(branch, report)
        return report

    def _delete_branch(self, branch: str, report: CleanupReport) -> None:
        if self.dry_run:
            self.console.print(f"[green][Dry Run] Would delete {branch}[/green]", highlight=False)
            report.add("deleted", branch)
            return

        try:
            self.repo.delete_branch(branch)
        except GitError as err:
            if err.needs_confirmation:
                self._offer_force_delete(branch, report)
            else:
                self.err_console.print(f"[red]Failed to delete '{branch}'.[/red]", highlight=False)
                self.err_console.print(str(err), style="dim", markup=False, highlight=False)
                report.add("failed", branch)
            return

        self.console.print(f"[green]Deleted {branch}[/green]", highlight=False)
        report.add("deleted", branch)

    def _offer_force_delete(self, branch: str, report: CleanupReport) -> None:
        self.err_console.print(f"[yellow]'{branch}' has unmerged changes.[/yellow]", highlight=False)
        if not self.prompter.confirm_force_delete(branch):
            self.console.print(f"[dim]Skipped '{branch}'[/dim]", highlight=False)
            report.add("skipped", branch)
            return

        try:
            self.repo.delete_branch(branch, force=True)
        except GitError as err:
            self.err_console.print(f"[red]Failed to force delete '{branch}'.[/red]", highlight=False)
            self.err_console.print(str(err), style="dim", markup=False, highlight=False)
            report.add("failed", branch)
            return

        self.console.print(f"[magenta]Force deleted {branch}[/magenta]", highlight=False)
        report.add("force_deleted", branch)
