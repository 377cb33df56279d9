from typing import Any, Dict, Sequence
from yaspin import yaspin
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from webreplay.core.constants import STATUS_STYLES

console = Console()

class UX:
    """
    Centralized terminal output for the CLI.
    Wraps Yaspin for spinners and consolidates Rich output.
    """

    @staticmethod
    def spinner(text: str):
        """Returns a configured yaspin spinner."""
        return yaspin(text=text, color="cyan", spinner="dots")

    @staticmethod
    def print_success(message: str):
        console.print(f"[green]✓ {escape(message)}[/green]")

    @staticmethod
    def print_error(message: str):
        console.print(f"[red]✗ {escape(message)}[/red]")

    @staticmethod
    def print_warning(message: str):
        console.print(f"[yellow]⚠️  {escape(message)}[/yellow]")

    @staticmethod
    def describe(data: Dict[str, Any], width: int = 40) -> str:
        """One-line summary of an action payload."""
        text = ", ".join(f"{k}={v!r}" for k, v in data.items() if v is not None)
        if len(text) > width:
            text = text[:width - 3] + "..."
        return escape(text)

    @staticmethod
    def render_actions(actions: Sequence[Any]):
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Time (ms)", justify="right")
        table.add_column("Type", no_wrap=True)
        table.add_column("Data", overflow="fold")

        for i, action in enumerate(actions):
            data = action.model_dump(mode="json", by_alias=True)["data"]
            table.add_row(str(i), str(action.timestamp), action.type, UX.describe(data))

        console.print(table)

    @staticmethod
    def render_report(report: Any):
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Error")

        for result in report.results:
            style = STATUS_STYLES.get(result.status.value, "white")
            table.add_row(
                str(result.index),
                result.type,
                f"[{style}]{result.status.value}[/{style}]",
                escape(result.error or "")
            )

        console.print(table)
        if report.success:
            UX.print_success(f"Replay finished: {report.executed} action(s) executed")
        else:
            UX.print_error(f"Replay finished with {report.failures} failed action(s)")
