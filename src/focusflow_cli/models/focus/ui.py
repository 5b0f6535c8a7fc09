"""Full-screen timer UI for focus mode."""

import time
from collections.abc import Callable

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .machine import FocusTimer, format_time
from .state import CompletedSession, TimerStatus

STATUS_LABELS: dict[str, str] = {
    "work": "Focus Time",
    "break": "Short Break",
    "longBreak": "Long Break",
    "idle": "Ready to Focus",
}

STATUS_COLORS: dict[str, str] = {
    "work": "red",
    "break": "cyan",
    "longBreak": "magenta",
    "idle": "white",
}

STATUS_EMOJI: dict[str, str] = {
    "work": "🍅",
    "break": "☕",
    "longBreak": "🌴",
    "idle": "⏱️ ",
}


def status_label(status: TimerStatus) -> str:
    return STATUS_LABELS.get(status, status)


def progress_bar(percent: float, width: int = 40) -> str:
    percent = min(100.0, max(0.0, percent))
    filled = int(width * percent / 100)
    return "▓" * filled + "░" * (width - filled)


class TimerDisplay:
    """Manages the fullscreen timer display."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def create_layout(self, timer: FocusTimer) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        state = timer.state
        if state.status != "idle" and not timer.is_running():
            title = f"⏸️  PAUSED · {status_label(state.status)}"
            color = "yellow"
        else:
            title = f"{STATUS_EMOJI[state.status]}  {status_label(state.status)}"
            color = STATUS_COLORS[state.status]

        header_text = Text(title, style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))

        layout["body"].update(Align.center(self._create_body_content(timer), vertical="middle"))

        footer_text = self._create_footer_text(timer.is_running())
        layout["footer"].update(Align.center(footer_text, vertical="middle"))

        return layout

    def _create_body_content(self, timer: FocusTimer) -> Group:
        """Create the main body content."""
        state = timer.state
        remaining = state.time_remaining

        if not timer.is_running():
            timer_color = "yellow" if state.status != "idle" else "white"
        elif remaining < 60:
            timer_color = "red"
        else:
            timer_color = STATUS_COLORS[state.status]

        components = [
            Text(format_time(remaining), style=f"bold {timer_color}", justify="center"),
            Text(""),
        ]

        percent = timer.progress_percent()
        progress_text = Text(justify="center")
        progress_text.append(f"{progress_bar(percent)}  {int(percent)}%", style="dim")
        components.append(progress_text)
        components.append(Text(""))

        config = timer.config
        session_text = Text(justify="center")
        session_text.append(
            f"Session {timer.current_session_ordinal()} of {config.sessions_before_long_break}  ",
            style="bold",
        )
        session_text.append(
            config.progress_dots(state.sessions_completed, state.status), style="dim"
        )
        components.append(session_text)

        completed_text = Text(
            f"{state.sessions_completed} completed since last reset",
            style="dim",
            justify="center",
        )
        components.append(completed_text)

        return Group(*components)

    def _create_footer_text(self, running: bool) -> Text:
        """Create footer with keyboard hints."""
        if running:
            hints = "Press 'p' to pause  •  'k' to skip  •  'r' to reset  •  'q' to quit"
        else:
            hints = "Press 's' to start  •  'k' to skip  •  'r' to reset  •  'q' to quit"

        return Text(hints, style="dim", justify="center")

    def run(
        self,
        timer: FocusTimer,
        keyboard=None,
        poll_interval: float = 0.25,
        sleep: Callable[[float], None] = time.sleep,
    ) -> str:
        """
        Drive the timer until the user quits.

        This loop owns the scheduling: every pass polls the tick scheduler,
        so ticks only happen while the display is running.

        Returns 'quit' or 'interrupted'.
        """
        if keyboard is None:
            from .keyboard import get_keyboard_handler

            keyboard = get_keyboard_handler()

        actions: dict[str, Callable[[], object]] = {
            "s": timer.start,
            "p": timer.pause,
            "k": timer.skip,
            "r": timer.reset,
        }

        try:
            with Live(
                self.create_layout(timer),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    key = keyboard.get_key()
                    if key == "q":
                        timer.pause()
                        return "quit"
                    if key in actions:
                        actions[key]()

                    timer.scheduler.poll()
                    live.update(self.create_layout(timer))
                    sleep(poll_interval)

        except KeyboardInterrupt:
            return "interrupted"
        finally:
            keyboard.stop()


def show_session_recorded(session: CompletedSession, console: Console | None = None):
    """Show a message after a work session is logged."""
    console = console or Console()

    minutes, seconds = divmod(session.duration, 60)
    panel = Panel(
        f"""[bold green]🎉 Work session recorded[/bold green]

Focused for: {minutes}m {seconds:02d}s
Completed at: {session.completed_datetime.strftime('%I:%M %p')}""",
        border_style="green",
        padding=(1, 2),
    )

    console.print(panel)
