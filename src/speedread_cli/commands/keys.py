"""Key binding commands."""

import typer
from rich.table import Table

from speedread_cli.models.reader.dispatcher import (
    Action,
    CommandDispatcher,
    key_label,
    parse_action,
)
from speedread_cli.services.config_service import get_config_service
from speedread_cli.utils.exit_codes import ERROR_INVALID_ARGS
from speedread_cli.utils.ui.console import get_console
from speedread_cli.utils.ui.formatters import format_success, format_warning

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Key binding management")
console = get_console()

# Names accepted on the command line for keys that are awkward to type.
KEY_ALIASES = {
    "space": " ",
    "up": "ArrowUp",
    "down": "ArrowDown",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "del": "Delete",
    "delete": "Delete",
}


def current_dispatcher() -> CommandDispatcher:
    return CommandDispatcher(get_config_service().config.key_bindings)


def require_action(name: str) -> Action:
    action = parse_action(name)
    if action is None:
        raise AppError(
            f"Unknown action '{name}'. Run 'speedread keys list' to see actions.",
            ERROR_INVALID_ARGS,
        )
    return action


@app.command("list")
@command_wrapper
def list_keys() -> None:
    """List every action and its key."""
    dispatcher = current_dispatcher()
    bindings = dispatcher.bindings
    conflicts = dispatcher.conflicts()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Action")
    table.add_column("Name", style="dim")
    table.add_column("Key", style="cyan")
    for action in Action:
        table.add_row(action.label, action.value, key_label(bindings[action]))
    console.print(table)

    for key, actions in conflicts.items():
        names = ", ".join(a.value for a in actions)
        format_warning(f"'{key_label(key)}' is bound to {names}; {actions[0].value} wins")


@app.command("set")
@command_wrapper
def set_key(
    action: str = typer.Argument(..., help="Action name (e.g. toggle_playback)"),
    key: str = typer.Argument(..., help="Key, or a name like space/up/left"),
) -> None:
    """Bind an action to a key."""
    target = require_action(action)
    resolved = KEY_ALIASES.get(key.lower(), key) if len(key) > 1 else key

    dispatcher = current_dispatcher()
    try:
        dispatcher.rebind(target, resolved)
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    get_config_service().save_key_bindings(dispatcher.to_config())
    format_success(f"{target.value} bound to '{key_label(resolved)}'")

    clash = dispatcher.conflicts()
    for bound_key, actions in clash.items():
        if target in actions:
            others = ", ".join(a.value for a in actions if a is not target)
            format_warning(f"'{key_label(bound_key)}' is also bound to {others}")


@app.command("reset")
@command_wrapper
def reset_keys(
    action: str | None = typer.Argument(None, help="Action to reset (default: all)"),
) -> None:
    """Restore default key bindings."""
    config_svc = get_config_service()
    if action is None:
        config_svc.save_key_bindings({})
        format_success("All key bindings reset to defaults")
        return

    target = require_action(action)
    config_svc.reset(f"key_bindings.{target.value}")
    format_success(f"{target.value} reset to default")
