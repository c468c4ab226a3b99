"""Admin command for initializing configuration and storage."""

import sys

from rich.console import Console

from budgetlens.config import create_default_config, get_config_path, get_default_budget, load_config_or_default
from budgetlens.store.kv import get_store_path
from budgetlens.store.state import open_state

console = Console()


def init_command(force: bool = False) -> None:
    """Initialize budgetlens configuration and data store."""
    config_path = get_config_path()
    store_path = get_store_path()

    config_exists = config_path.exists()
    store_exists = store_path.exists()

    if not force and (config_exists or store_exists):
        console.print("[red]Initialization failed:[/red]", style="bold")
        if config_exists:
            console.print(f"  Config already exists: {config_path}")
        if store_exists:
            console.print(f"  Data store already exists: {store_path}")
        console.print("\n[yellow]Use 'budgetlens init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        console.print(f"[cyan]Creating data store at {store_path}...[/cyan]")
        if store_exists:
            store_path.unlink()
        state = open_state(store_path, get_default_budget(load_config_or_default(config_path)))
        state.save()
        console.print("[green]✓[/green] Data store created")
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Config: {config_path}[/dim]")
    console.print(f"[dim]Data: {store_path}[/dim]")
