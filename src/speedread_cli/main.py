"""Main entry point for speedread-cli."""

import typer

from speedread_cli import __version__
from speedread_cli.commands import config, keys
from speedread_cli.commands.read import read
from speedread_cli.commands.stats import stats
from speedread_cli.utils.typer_helpers import SuggestingGroup
from speedread_cli.utils.ui.console import get_console

app = typer.Typer(
    name="speedread",
    cls=SuggestingGroup,
    help="Terminal speed reader with focus and sleep timers",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(keys.app, name="keys", help="Key binding management")
app.command("read")(read)
app.command("stats")(stats)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]speedread-cli[/bold] version [cyan]{__version__}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
