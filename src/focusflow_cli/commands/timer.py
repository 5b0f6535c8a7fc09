"""Pomodoro timer commands for FocusFlow CLI."""

import typer
from rich.table import Table

from focusflow_cli.models.focus.machine import format_time
from focusflow_cli.models.focus.ui import (
    TimerDisplay,
    progress_bar,
    show_session_recorded,
    status_label,
)
from focusflow_cli.services.timer_service import (
    TimerService,
    format_duration,
    get_timer_service,
)
from focusflow_cli.utils.exit_codes import ERROR_INVALID_ARGS
from focusflow_cli.utils.typer_helpers import SuggestingGroup
from focusflow_cli.utils.ui.console import get_console
from focusflow_cli.utils.ui.formatters import (
    OUTPUT_FORMATS,
    format_dict_table,
    format_info,
    format_output,
    format_success,
)

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(cls=SuggestingGroup, help="Pomodoro timer for focus sessions")


def _service() -> TimerService:
    service = get_timer_service(console=console)
    service.timer.add_session_listener(
        lambda session: show_session_recorded(session, console)
    )
    return service


def _check_output(output: str) -> None:
    if output not in OUTPUT_FORMATS:
        raise AppError(
            f"Invalid output format '{output}'. Use one of: {', '.join(OUTPUT_FORMATS)}",
            exit_code=ERROR_INVALID_ARGS,
        )


def _print_status(service: TimerService) -> None:
    """Print a compact, human readable status block."""
    timer = service.timer
    state = timer.state
    percent = timer.progress_percent()

    if state.status == "idle":
        running = "[dim]idle[/dim]"
    elif timer.is_running():
        running = "[green]running[/green]"
    else:
        running = "[yellow]paused[/yellow]"

    console.print(f"\n[bold cyan]{status_label(state.status)}[/bold cyan]  ({running})")
    console.print(f"Time remaining: [bold]{format_time(state.time_remaining)}[/bold]")
    console.print(f"[dim]{progress_bar(percent, width=30)}  {int(percent)}%[/dim]")
    console.print(
        f"Session {timer.current_session_ordinal()} of "
        f"{service.config.sessions_before_long_break}  "
        f"[dim]{service.config.progress_dots(state.sessions_completed, state.status)}[/dim]"
    )
    console.print(f"Completed since last reset: {state.sessions_completed}\n")
    if state.status != "idle" and timer.is_running():
        # Ticks are driven by the watch view only
        format_info("Counting down only while 'focusflow timer watch' is open")


def _watch(service: TimerService) -> None:
    result = TimerDisplay(console).run(service.timer)
    if result == "interrupted":
        console.print("\n[yellow]Timer interrupted. State saved.[/yellow]")
        console.print("Use 'focusflow timer watch' to continue.")
    else:
        _print_status(service)


@app.command("start")
@command_wrapper
def start_timer(
    watch: bool = typer.Option(
        True, "--watch/--no-watch", help="Open the fullscreen countdown"
    ),
) -> None:
    """Start a work session, or resume the paused phase."""
    service = _service()
    was_idle = service.timer.state.status == "idle"
    state = service.timer.start()

    if was_idle:
        format_success(f"Focus session started ({format_time(state.time_remaining)})")
    else:
        format_success(
            f"{status_label(state.status)} resumed ({format_time(state.time_remaining)} left)"
        )

    if watch:
        _watch(service)
    else:
        format_info("Run 'focusflow timer watch' to count down")


@app.command("pause")
@command_wrapper
def pause_timer() -> None:
    """Pause the running interval without losing progress."""
    service = _service()
    if not service.timer.is_running():
        format_info("Timer is not running")
        return

    state = service.timer.pause()
    format_success(f"Paused with {format_time(state.time_remaining)} left")


@app.command("reset")
@command_wrapper
def reset_timer(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Reset the timer to idle. Session history is kept."""
    if not force:
        confirm = typer.confirm("Reset the timer and the session count?")
        if not confirm:
            raise typer.Exit(0)

    service = _service()
    service.timer.reset()
    format_success("Timer reset")


@app.command("skip")
@command_wrapper
def skip_phase() -> None:
    """Skip to the next phase. Skipped work still counts as a session."""
    service = _service()
    state = service.timer.skip()
    format_success(
        f"Now: {status_label(state.status)} ({format_time(state.time_remaining)})"
    )


@app.command("status")
@command_wrapper
def timer_status(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show the current timer state."""
    _check_output(output)
    service = _service()
    if output == "table":
        _print_status(service)
    else:
        format_output(service.status(), output)


@app.command("watch")
@command_wrapper
def watch_timer() -> None:
    """Open the fullscreen countdown and drive the timer."""
    _watch(_service())


@app.command("history")
@command_wrapper
def timer_history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show recorded work sessions, newest first."""
    _check_output(output)
    if limit < 1:
        raise AppError("--limit must be at least 1", exit_code=ERROR_INVALID_ARGS)

    service = _service()
    sessions = service.history(limit=limit)
    if output != "table":
        format_output([s.to_dict() for s in sessions], output)
        return

    if not sessions:
        console.print("[yellow]No timer sessions found[/yellow]")
        return

    table = Table(title=f"Recent Work Sessions ({len(sessions)})", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("Status", justify="center")

    for session in sessions:
        started = session.started_datetime.astimezone()
        minutes, seconds = divmod(session.duration, 60)
        full = session.duration >= service.config.work_duration
        table.add_row(
            started.strftime("%Y-%m-%d %H:%M"),
            f"{minutes}m {seconds:02d}s",
            "[green]✓[/green]" if full else "[yellow]⏭[/yellow]",
        )

    console.print(table)


@app.command("stats")
@command_wrapper
def timer_stats(
    days: int = typer.Option(7, "--days", "-d", help="Number of days to analyze"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show focus statistics."""
    _check_output(output)
    if days < 1:
        raise AppError("--days must be at least 1", exit_code=ERROR_INVALID_ARGS)

    service = _service()
    stats = service.summary(days=days)
    today = service.today_sessions()

    if output != "table":
        stats["today_sessions"] = len(today)
        format_output(stats, output)
        return

    today_minutes = sum(s.duration for s in today) // 60
    console.print(f"\n[bold]Pomodoro Statistics (Last {days} days)[/bold]\n")
    console.print(f"Today: {len(today)} sessions, {format_duration(today_minutes)}")
    console.print(f"Total Sessions: {stats['total_sessions']}")
    console.print(f"  Full: [green]{stats['full_sessions']}[/green]")
    console.print(f"  Skipped early: [yellow]{stats['skipped_sessions']}[/yellow]")
    console.print(f"Total Focus Time: {stats['total_focus_time']}")
    console.print(f"Average Session: {stats['avg_session_minutes']} minutes\n")

    format_dict_table(
        [
            {"date": day, "sessions": bucket["sessions"], "minutes": bucket["minutes"]}
            for day, bucket in stats["daily"].items()
        ],
        title="Daily breakdown",
    )
