"""Protected branch configuration."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console

CONFIG_FILENAME = ".git-cleanup-config.json"
PROTECTED_BRANCHES_FIELD = "protectedBranches"
DEFAULT_PROTECTED_BRANCHES = ("main", "master", "develop", "dev", "prod", "production")


class ConfigError(Exception):
    """Configuration file could not be parsed."""


@dataclass
class ProtectedBranches:
    """Effective protected branch names and where they came from."""

    names: list[str]
    from_file: bool = False


def resolve_protected_branches(exists: bool, contents: Optional[str]) -> ProtectedBranches:
    """Resolve the protected branch set from an optional config file.

    Args:
        exists: Whether the config file is present
        contents: Raw file contents, ignored when the file is absent

    Returns:
        The configured names when the file holds a `protectedBranches` array of
        strings, the defaults otherwise.

    Raises:
        ConfigError: If the file exists but is not valid JSON
    """
    defaults = ProtectedBranches(list(DEFAULT_PROTECTED_BRANCHES))
    if not exists or contents is None:
        return defaults
    try:
        config = json.loads(contents)
    except json.JSONDecodeError as err:
        raise ConfigError(f"Invalid JSON in {CONFIG_FILENAME}: {err}") from err

    if not isinstance(config, dict):
        return defaults
    names = config.get(PROTECTED_BRANCHES_FIELD)
    if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
        return defaults
    return ProtectedBranches(names, from_file=True)


def load_protected_branches(directory: Path, console: Console, err_console: Console) -> list[str]:
    """Load protected branches from the config file in `directory`, falling back to defaults."""
    config_path = directory / CONFIG_FILENAME
    try:
        exists = config_path.is_file()
        contents = config_path.read_text(encoding="utf-8") if exists else None
        protected = resolve_protected_branches(exists, contents)
    except (OSError, UnicodeDecodeError, ConfigError) as err:
        err_console.print(f"[red]Error reading config file:[/red] {err}", highlight=False)
        err_console.print("[yellow]Falling back to default protected branches.[/yellow]")
        return list(DEFAULT_PROTECTED_BRANCHES)

    if protected.from_file:
        console.print(f"[dim]Loaded protected branches from {CONFIG_FILENAME}[/dim]")
    else:
        console.print(f"[dim]Using default protected branches. Create {CONFIG_FILENAME} to override.[/dim]")
    return protected.names
