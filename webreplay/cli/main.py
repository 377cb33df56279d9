import typer
from webreplay.cli.commands import record, replay, settings

app = typer.Typer(
    name="webreplay",
    help="Record browser sessions and replay them",
    add_completion=False
)

# Register commands
app.command()(record.record)
app.command()(replay.replay)
app.command()(replay.show)
app.command()(settings.config)

VERSION = "0.3.0"

@app.command()
def version():
    """Show the WebReplay version."""
    typer.echo(f"WebReplay {VERSION}")

def version_callback(value: bool):
    if value:
        typer.echo(f"WebReplay {VERSION}")
        raise typer.Exit()

@app.callback()
def main(
    version: bool = typer.Option(None, "--version", callback=version_callback, is_eager=True),
):
    """
    WebReplay CLI - record a session once, replay it any time.
    """
    pass

if __name__ == "__main__":
    app()
