import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from webreplay.core.config import ConfigManager
from webreplay.core.logging import log

console = Console()

def config(
    key: Optional[str] = typer.Option(None, "--key", help="Configuration key to update"),
    value: Optional[str] = typer.Option(None, "--value", help="New value for --key")
) -> None:
    """
    Show or update WebReplay settings.
    """
    if key is not None:
        if value is None:
            console.print("[bold red]Error:[/bold red] --key requires --value.")
            raise typer.Exit(code=1)
        try:
            ConfigManager.set_value(key, value)
        except (KeyError, ValueError) as e:
            log(str(e.args[0]), level="error")
            raise typer.Exit(code=1)
        log(f"Saved {key} = {value}")

    current = ConfigManager.load_config()
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key")
    table.add_column("Value")
    for k, v in current.items():
        table.add_row(k, str(v))
    console.print(table)
