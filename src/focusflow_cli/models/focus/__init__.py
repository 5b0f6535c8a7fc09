"""Focus mode - Pomodoro timer system for FocusFlow CLI.

The state machine itself lives in ``focusflow_cli.models.focus.machine``;
it depends on the repository interfaces, so it is not re-exported here.
"""

from .cycling import PomodoroConfig
from .scheduler import TickScheduler
from .state import CompletedSession, TimerState, TimerStatus

__all__ = [
    "TimerState",
    "TimerStatus",
    "CompletedSession",
    "PomodoroConfig",
    "TickScheduler",
]
