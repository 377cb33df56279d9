from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from rich.console import Console
from rich.panel import Panel

console = Console()

class UI:
    """
    Operator prompts for the recording control loop.
    Prompts run with execute_async because the loop lives inside asyncio.
    """

    COMMANDS = [
        Choice("toggle", "Start/Stop recording"),
        Choice("screenshot", "Take screenshot"),
        Choice("wait", "Insert a wait"),
        Choice("replay", "Replay recorded actions"),
        Choice("save", "Save recording to file"),
        Choice("load", "Load recording from file"),
        Choice("quit", "Quit")
    ]

    @staticmethod
    def show_banner(url: str):
        console.print(Panel.fit(
            f"[bold cyan]WebReplay recorder[/bold cyan]\n[dim]{url}[/dim]",
            border_style="cyan"
        ))

    @staticmethod
    async def ask_command(recording: bool, action_count: int) -> str:
        status = "[red]● recording[/red]" if recording else "[dim]○ paused[/dim]"
        console.print(f"{status} [dim]{action_count} action(s)[/dim]")
        return await inquirer.select(
            message="Command:",
            choices=UI.COMMANDS,
            default="toggle"
        ).execute_async()

    @staticmethod
    async def ask_path(message: str, default: str = "") -> str:
        return await inquirer.filepath(
            message=message,
            default=default,
            validate=lambda result: len(result.strip()) > 0 or "Path cannot be empty"
        ).execute_async()
