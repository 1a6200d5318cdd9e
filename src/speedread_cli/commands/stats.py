"""Reading statistics commands."""

from datetime import datetime

import typer

from speedread_cli.models.reader.history import HistoryLogger
from speedread_cli.models.reader.sessions import format_total_time
from speedread_cli.services.config_service import get_config_service
from speedread_cli.utils.ui.console import get_console
from speedread_cli.utils.ui.formatters import format_dict_table, format_json

from .decorators import command_wrapper

console = get_console()


def get_history() -> HistoryLogger:
    return HistoryLogger(get_config_service().history_path)


@command_wrapper
def stats(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
    recent: int = typer.Option(
        5, "--recent", "-n", min=0, help="Number of recent sessions to list"
    ),
) -> None:
    """Show reading totals, level and recent sessions."""
    history = get_history()
    summary = history.get_stats()
    sessions = history.get_recent_sessions(limit=recent) if recent else []

    if output == "json":
        format_json({"summary": summary, "recent": sessions})
        return

    console.print("\n[bold cyan]📖 Reading Stats[/bold cyan]\n")
    console.print(f"Level: [bold]{summary['level']}[/bold]")
    console.print(f"Sessions: [bold]{summary['total_sessions']}[/bold]")
    console.print(f"Words read: [bold]{summary['total_words']}[/bold]")
    console.print(f"Reading time: [bold]{format_total_time(summary['total_seconds'])}[/bold]")
    console.print(f"Average speed: [bold]{summary['average_wpm']}[/bold] wpm")

    if sessions:
        console.print()
        rows = [
            {
                "started": datetime.fromtimestamp(s["started_at"]).strftime("%Y-%m-%d %H:%M"),
                "duration": f"{int(s['duration_seconds'])}s",
                "words": s["words_read"],
                "wpm": s["wpm"],
            }
            for s in sessions
        ]
        format_dict_table(rows, title="Recent sessions")
    console.print()
