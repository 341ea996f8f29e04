"""Command line interface for lopper."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lopper import __version__
from lopper.cleanup import BranchCleaner, CleanupReport
from lopper.config import load_protected_branches
from lopper.git import GitError, GitRepo
from lopper.prompts import Prompter, PromptError

app = typer.Typer(help="Prune local branches whose upstream branch is gone", add_completion=False)
console = Console()
err_console = Console(stderr=True)

OUTCOME_DISPLAY = {
    "deleted": "[green]deleted[/green]",
    "force_deleted": "[magenta]force deleted[/magenta]",
    "skipped": "[yellow]skipped[/yellow]",
    "failed": "[red]failed[/red]",
}


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        err_console.print("[red]This is not a Git repository. Aborting.[/red]")
        err_console.print(str(err), style="dim", markup=False, highlight=False)
        raise typer.Exit(code=1) from err


def sync_remote(repo: GitRepo, remote: str) -> None:
    """Fetch and prune so remote-tracking branches match the server."""
    console.print(f"[blue]Fetching and pruning {remote}...[/blue]", highlight=False)
    try:
        repo.fetch_and_prune(remote, on_line=lambda line: console.print(line, style="dim", markup=False, highlight=False))
    except GitError as err:
        err_console.print("[red]Failed to fetch from remote. Please check your connection and configuration.[/red]")
        err_console.print(str(err), style="dim", markup=False, highlight=False)
        raise typer.Exit(code=1) from err


def create_report_table(report: CleanupReport) -> Table:
    """Create a table summarizing what happened to each branch."""
    table = Table(
        title="Cleanup Summary",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Result", justify="center", no_wrap=True)

    for branch, outcome in report.outcomes:
        table.add_row(branch, OUTCOME_DISPLAY[outcome])
    return table


def run_cleanup(path: Path, remote: str, dry_run: bool, prompter: Prompter) -> None:
    """Guard, sync, classify, select and delete, in that order."""
    if dry_run:
        console.print("[bold yellow]Running in --dry-run mode. No branches will be deleted.[/bold yellow]\n")

    repo = get_repo(path)
    sync_remote(repo, remote)

    protect = load_protected_branches(path, console, err_console)
    try:
        gone = repo.get_gone_branches(protect)
    except GitError as err:
        err_console.print(f"[red]Error:[/red] {err}", highlight=False)
        raise typer.Exit(code=1) from err

    if not gone:
        console.print("\n[green]Your local branches are clean. Nothing to do![/green]")
        return

    try:
        selected = prompter.select_branches(gone)
        if not selected:
            console.print("[yellow]No branches selected. Operation cancelled.[/yellow]")
            return

        console.print()  # Add a blank line
        cleaner = BranchCleaner(repo, prompter, console, err_console, dry_run=dry_run)
        report = cleaner.delete_branches(selected)
    except PromptError as err:
        err_console.print(f"[red]Error:[/red] {err}", highlight=False)
        raise typer.Exit(code=1) from err

    console.print()  # Add a blank line
    console.print(create_report_table(report))
    console.print(
        Panel(
            "[bold]Cleanup complete![/bold]",
            style="green",
            padding=(0, 2),
            expand=False,
        )
    )


def version_callback(value: bool) -> None:
    if value:
        console.print(f"lopper {__version__}")
        raise typer.Exit()


@app.command()
def main(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    remote: Annotated[str, typer.Option(help="Remote to fetch and prune")] = "origin",
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be deleted without deleting anything")] = False,
    version: Annotated[
        bool, typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit")
    ] = False,
) -> None:
    """Delete local branches whose upstream branch is gone."""
    prompter = Prompter()
    try:
        run_cleanup(path, remote, dry_run, prompter)
    except (typer.Exit, typer.Abort):
        raise
    except Exception as err:
        err_console.print(f"\n[red]An unexpected error occurred:[/red] {err}", highlight=False)
        raise typer.Exit(code=1) from err


if __name__ == "__main__":
    app()
