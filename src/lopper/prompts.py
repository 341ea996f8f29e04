"""Interactive prompts built on InquirerPy."""

import sys
from typing import Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice


class PromptError(Exception):
    """Interactive prompt could not be shown."""


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise PromptError("Interactive prompts require a TTY. Run lop from a terminal.")


class Prompter:
    """Prompts used by the cleanup workflow."""

    def select_branches(self, branches: Sequence[str]) -> list[str]:
        """Let the user tick the branches to delete. Returns them in listing order."""
        _ensure_tty()
        selected = inquirer.checkbox(
            message="Select local branches to delete (whose remote is gone):",
            choices=[Choice(value=branch, name=branch) for branch in branches],
            instruction="(<space> to toggle, <enter> to confirm)",
            cycle=False,
        ).execute()
        return [branch for branch in branches if branch in selected]

    def confirm_force_delete(self, branch: str) -> bool:
        """Ask whether to force delete a branch with unmerged changes. Defaults to No."""
        _ensure_tty()
        return bool(inquirer.confirm(message=f"Do you want to force delete '{branch}'?", default=False).execute())
