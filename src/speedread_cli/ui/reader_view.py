"""Full-screen reader UI built on Rich Live."""

from __future__ import annotations

import time

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from speedread_cli.models.focus.pomodoro import format_clock
from speedread_cli.models.reader.dispatcher import Action, is_reserved, key_label
from speedread_cli.models.reader.engine import (
    EXTERNAL_LINKS,
    ReaderEngine,
    ReaderSnapshot,
)
from speedread_cli.models.reader.keyboard import create_keyboard
from speedread_cli.models.reader.sessions import format_total_time
from speedread_cli.models.reader.settings import mode_label
from speedread_cli.models.reader.styling import WordStyle, styled_words
from speedread_cli.utils.logger import get_logger

LABELS = {
    "en": {
        "playing": "READING",
        "paused": "PAUSED",
        "edit": "EDIT",
        "sleep": "Sleep",
        "break": "Break time",
        "skip": "Press Enter to skip the break",
        "empty": "No text loaded",
        "stats": "Reading stats",
        "bindings": "Key bindings",
        "focus": "Focus timer",
        "links": "Library links",
        "hints": "Space play/pause  •  ←/→ seek  •  ↑/↓ speed  •  k keys  •  q quit",
    },
    "ar": {
        "playing": "قراءة",
        "paused": "متوقف",
        "edit": "تحرير",
        "sleep": "مؤقت النوم",
        "break": "وقت الاستراحة",
        "skip": "اضغط Enter لتخطي الاستراحة",
        "empty": "لا يوجد نص",
        "stats": "إحصائيات القراءة",
        "bindings": "اختصارات لوحة المفاتيح",
        "focus": "مؤقت التركيز",
        "links": "روابط المكتبات",
        "hints": "Space تشغيل/إيقاف  •  ←/→ تنقل  •  ↑/↓ السرعة  •  k الاختصارات  •  q خروج",
    },
}

# Effects that have a direct terminal attribute.
EFFECT_ATTRIBUTES = {
    "bold": {"bold": True},
    "heavy": {"bold": True},
    "underline": {"underline": True},
    "marker": {"reverse": True},
    "boxed": {"reverse": True},
    "blink": {"blink": True},
    "skew": {"italic": True},
    "cursor": {"underline": True},
    "outline": {"bold": True},
}


def word_style(style: WordStyle, snapshot: ReaderSnapshot) -> Style:
    """Translate a WordStyle into a Rich style."""
    settings = snapshot.settings
    colors = {
        "highlight": settings.highlight_color,
        "text": settings.text_color,
        "muted": "grey62",
        "faint": "grey39",
        "transparent": settings.background_color,
    }
    attributes: dict[str, bool] = {}
    for effect in style.effects:
        attributes.update(EFFECT_ATTRIBUTES.get(effect, {}))

    dim = style.opacity < 0.6 or style.blur >= 2 or settings.brightness < 60
    bold = (
        attributes.pop("bold", False)
        or settings.is_bold
        or (style.glow and settings.glow_intensity > 0)
    )
    return Style(color=colors[style.role], dim=dim, bold=bold, **attributes)


def progress_bar(percent: int, width: int = 40) -> str:
    filled = int(width * percent / 100)
    return "▓" * filled + "░" * (width - filled)


class ReaderDisplay:
    """Renders engine snapshots and feeds key presses back to the engine."""

    def __init__(self, engine: ReaderEngine, console: Console | None = None):
        self.engine = engine
        self.console = console or Console()

    def labels(self, snapshot: ReaderSnapshot) -> dict[str, str]:
        return LABELS.get(snapshot.language, LABELS["en"])

    # -- layout ------------------------------------------------------------

    def create_layout(self, snapshot: ReaderSnapshot) -> Layout:
        """Create the reader layout for one frame."""
        layout = Layout()
        if snapshot.fullscreen:
            layout.update(Align.center(self._body(snapshot), vertical="middle"))
            return layout

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=4),
        )
        layout["header"].update(self._header(snapshot))

        side = self._side_panel(snapshot)
        if side is None:
            layout["body"].update(Align.center(self._body(snapshot), vertical="middle"))
        else:
            layout["body"].split_row(Layout(name="text", ratio=2), Layout(name="side"))
            layout["body"]["text"].update(
                Align.center(self._body(snapshot), vertical="middle")
            )
            layout["body"]["side"].update(side)

        layout["footer"].update(self._footer(snapshot))
        return layout

    def _header(self, snapshot: ReaderSnapshot) -> Align:
        labels = self.labels(snapshot)
        if snapshot.view_mode == "edit":
            status, color = labels["edit"], "magenta"
        elif snapshot.advancing:
            status, color = labels["playing"], "green"
        else:
            status, color = labels["paused"], "yellow"

        header = Text(justify="center")
        header.append(f"{status}", style=f"bold {color}")
        header.append(f"  {snapshot.wpm} wpm", style="cyan")
        header.append(f"  {mode_label(snapshot.settings.reading_mode)}", style="dim")
        header.append(f"  {snapshot.settings.font_size}pt", style="dim")
        focus = snapshot.focus
        phase = focus.phase.replace("_", " ").title()
        header.append(
            f"  {phase} {format_clock(focus.remaining_seconds)}",
            style="bold red" if focus.running else "dim",
        )
        if snapshot.sleep_remaining is not None:
            header.append(
                f"  {labels['sleep']} {format_clock(snapshot.sleep_remaining)}",
                style="blue",
            )
        return Align.center(header, vertical="middle")

    def _body(self, snapshot: ReaderSnapshot):
        labels = self.labels(snapshot)
        if snapshot.focus.phase in ("short_break", "long_break"):
            return Panel(
                Group(
                    Text(labels["break"], style="bold green", justify="center"),
                    Text(
                        format_clock(snapshot.focus.remaining_seconds),
                        style="bold cyan",
                        justify="center",
                    ),
                    Text(labels["skip"], style="dim", justify="center"),
                ),
                border_style="green",
            )

        if not snapshot.words:
            return Text(labels["empty"], style="dim", justify="center")

        if snapshot.view_mode == "edit":
            return Panel(
                Text(self.engine.text), title=labels["edit"], border_style="magenta"
            )

        return self._words(snapshot)

    def _words(self, snapshot: ReaderSnapshot) -> Text:
        """Styled words in a window around the cursor."""
        context = self.engine.config.ui.context_words
        center = max(snapshot.cursor, 0)
        start = max(0, center - context // 2)
        end = min(len(snapshot.words), start + context)

        text = Text(justify="center")
        for _, word, style in styled_words(
            snapshot.settings.reading_mode,
            snapshot.cursor,
            snapshot.words[start:end],
            start,
        ):
            text.append(word, style=word_style(style, snapshot))
            text.append(" ")
        return text

    def _footer(self, snapshot: ReaderSnapshot) -> Group:
        labels = self.labels(snapshot)
        progress = Text(justify="center")
        progress.append(progress_bar(snapshot.progress_percent), style="dim")
        progress.append(f"  {snapshot.progress_percent}%", style="bold")
        progress.append(
            f"  {snapshot.remaining_words} words / {format_clock(snapshot.seconds_remaining)}",
            style="dim",
        )
        feedback = Text(snapshot.feedback or "", style="bold yellow", justify="center")
        hints = Text(labels["hints"], style="dim", justify="center")
        return Group(progress, feedback, hints)

    def _side_panel(self, snapshot: ReaderSnapshot) -> Panel | None:
        if snapshot.bindings_editor_open:
            return self._bindings_panel(snapshot)
        if snapshot.stats_open:
            return self._stats_panel(snapshot)
        if snapshot.focus_panel_open:
            return self._focus_panel(snapshot)
        if snapshot.external_menu_open:
            return self._links_panel(snapshot)
        return None

    def _stats_panel(self, snapshot: ReaderSnapshot) -> Panel:
        summary = self.engine.summary()
        table = Table(show_header=False, box=None)
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Level", str(summary.level))
        table.add_row("Sessions", str(summary.total_sessions))
        table.add_row("Words read", str(summary.total_words))
        table.add_row("Time", format_total_time(summary.total_seconds))
        table.add_row("Average wpm", str(summary.average_wpm))
        return Panel(table, title=self.labels(snapshot)["stats"], border_style="cyan")

    def _bindings_panel(self, snapshot: ReaderSnapshot) -> Panel:
        dispatcher = self.engine.dispatcher
        bindings = dispatcher.bindings
        conflicts = {a for actions in dispatcher.conflicts().values() for a in actions}
        table = Table(show_header=False, box=None)
        table.add_column("Action")
        table.add_column("Key", justify="right")
        for row, action in enumerate(Action):
            selected = row == self.engine.binding_selection
            if dispatcher.capturing is action:
                key = Text("press a key…", style="bold yellow")
            else:
                key = Text(
                    key_label(bindings[action]),
                    style="red" if action in conflicts else "cyan",
                )
            table.add_row(
                Text(action.label, style="reverse" if selected else ""), key
            )
        return Panel(
            table, title=self.labels(snapshot)["bindings"], border_style="magenta"
        )

    def _focus_panel(self, snapshot: ReaderSnapshot) -> Panel:
        focus = snapshot.focus
        lines = Text()
        for key, phase in (
            ("1", "focus"),
            ("2", "short_break"),
            ("3", "long_break"),
            ("4", "custom"),
        ):
            marker = "●" if focus.phase == phase else "○"
            minutes = self.engine.focus.duration_for(phase) // 60
            lines.append(f"{key} {marker} {phase.replace('_', ' ').title()} {minutes}m\n")
        lines.append(f"\nt start/pause  •  0 reset  •  z sleep ({self.engine.sleep.format_remaining()})")
        return Panel(lines, title=self.labels(snapshot)["focus"], border_style="red")

    def _links_panel(self, snapshot: ReaderSnapshot) -> Panel:
        lines = Text()
        for name, url in EXTERNAL_LINKS:
            lines.append(f"{name}\n", style="bold")
            lines.append(f"{url}\n", style=f"link {url} cyan")
        return Panel(lines, title=self.labels(snapshot)["links"], border_style="blue")

    # -- main loop ---------------------------------------------------------

    def run(self, keyboard=None) -> None:
        """Run the reader until the user quits."""
        logger = get_logger()
        keyboard = keyboard or create_keyboard()
        refresh = self.engine.config.ui.refresh_per_second
        logger.info("reader opened with %d words", len(self.engine.playback.words))

        try:
            with Live(
                self.create_layout(self.engine.snapshot()),
                console=self.console,
                refresh_per_second=refresh,
                screen=True,
            ) as live:
                while True:
                    key = keyboard.get_key()
                    if key is not None:
                        if is_reserved(key) and self.engine.dispatcher.capturing is None:
                            break
                        self.engine.handle_key(key)

                    self.engine.loop.run_due()
                    live.update(self.create_layout(self.engine.snapshot()))
                    time.sleep(1 / refresh)
        except KeyboardInterrupt:
            logger.info("reader interrupted")
        finally:
            keyboard.stop()
            # Records the in-progress session, if any
            self.engine.request_playback(False)
