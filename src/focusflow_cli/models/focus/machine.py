"""Focus timer state machine.

The timer cycles ``idle -> work -> break | longBreak -> work ...``. It owns a
single ``TimerState`` and writes it through to the injected store after every
mutation. Store and notifier failures are logged and ignored: the in-memory
state is the source of truth for the running process.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from focusflow_cli.repositories.repository import Notifier, TimerStateStore

from .cycling import PomodoroConfig
from .scheduler import TickScheduler
from .state import CompletedSession, TimerState

logger = logging.getLogger(__name__)

SessionListener = Callable[[CompletedSession], None]


def _now() -> datetime:
    return datetime.now().astimezone()


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class FocusTimer:
    """Pomodoro state machine with injected persistence and notifications."""

    def __init__(
        self,
        store: TimerStateStore,
        notifier: Notifier,
        config: PomodoroConfig | None = None,
        scheduler: TickScheduler | None = None,
        clock: Callable[[], datetime] = _now,
    ):
        self.store = store
        self.notifier = notifier
        self.config = config or PomodoroConfig()
        self.scheduler = scheduler or TickScheduler()
        self._clock = clock
        self._listeners: list[SessionListener] = []
        self._state = self._load()

        # A timer persisted as running resumes ticking from where it was saved
        if self._state.is_running and self._state.time_remaining > 0:
            self.scheduler.start(self.tick)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        """A copy of the current state. Mutate through the operations only."""
        return self._state.copy()

    def is_running(self) -> bool:
        return self._state.active_since is not None

    def progress_percent(self) -> float:
        duration = self.config.phase_duration(self._state.status)
        return (duration - self._state.time_remaining) / duration * 100

    def current_session_ordinal(self) -> int:
        return self.config.session_ordinal(self._state.sessions_completed)

    def add_session_listener(self, listener: SessionListener) -> None:
        """Register a callback invoked with every recorded session."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start(self) -> TimerState:
        """Start a work interval from idle, or resume the current phase."""
        self._request_permission()

        now = self._clock().isoformat()
        if self._state.status == "idle":
            new_state = TimerState(
                status="work",
                time_remaining=self.config.work_duration,
                sessions_completed=self._state.sessions_completed,
                active_since=now,
            )
        else:
            new_state = self._state.copy()
            new_state.active_since = now
            # A phase left at zero by an interrupted write cannot run
            if new_state.time_remaining <= 0:
                new_state.time_remaining = self.config.phase_duration(new_state.status)

        self.scheduler.start(self.tick)
        self._commit(new_state)
        logger.info("timer started: %s (%ss left)", new_state.status, new_state.time_remaining)
        return self.state

    def pause(self) -> TimerState:
        """Stop the active interval without losing progress."""
        self.scheduler.cancel()
        if self._state.active_since is None:
            return self.state

        new_state = self._state.copy()
        new_state.active_since = None
        self._commit(new_state)
        logger.info("timer paused: %s (%ss left)", new_state.status, new_state.time_remaining)
        return self.state

    def reset(self) -> TimerState:
        """Return to the canonical idle form. History is kept."""
        self.scheduler.cancel()
        self._commit(TimerState.idle(self.config.work_duration))
        logger.info("timer reset")
        return self.state

    def skip(self) -> TimerState:
        """Force-advance past the current interval."""
        if self._state.status == "idle":
            # Nothing to skip yet; behave like starting fresh
            return self.start()

        self.scheduler.cancel()
        if self._state.status == "work":
            elapsed = self.config.work_duration - self._state.time_remaining
            self._complete_work(duration=max(0, elapsed))
        else:
            self._complete_break()
        logger.info("phase skipped, now %s", self._state.status)
        return self.state

    def tick(self) -> TimerState:
        """Advance one second. Only acts while an interval is running."""
        if self._state.active_since is None or self._state.time_remaining <= 0:
            return self.state

        remaining = self._state.time_remaining - 1
        if remaining > 0:
            new_state = self._state.copy()
            new_state.time_remaining = remaining
            self._commit(new_state)
            return self.state

        self.scheduler.cancel()
        if self._state.status == "work":
            self._complete_work(duration=self.config.work_duration)
            if self._state.status == "longBreak":
                self._notify("Work session complete!", "Time for a long break!")
            else:
                self._notify("Work session complete!", "Time for a short break!")
        else:
            self._complete_break()
            self._notify("Break over!", "Ready to focus again?")
        logger.info("phase completed, now %s", self._state.status)
        return self.state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _complete_work(self, duration: int) -> None:
        now = self._clock()
        # Skipping while paused leaves no start marker; completed_at >= started_at
        started = self._state.active_since_datetime or now
        if started > now:
            started = now
        self._record(
            CompletedSession(
                started_at=started.isoformat(),
                completed_at=now.isoformat(),
                duration=duration,
            )
        )

        sessions_completed = self._state.sessions_completed + 1
        next_phase = self.config.break_after(sessions_completed)
        self._commit(
            TimerState(
                status=next_phase,
                time_remaining=self.config.phase_duration(next_phase),
                sessions_completed=sessions_completed,
                active_since=None,
            )
        )

    def _complete_break(self) -> None:
        self._commit(
            TimerState(
                status="work",
                time_remaining=self.config.work_duration,
                sessions_completed=self._state.sessions_completed,
                active_since=None,
            )
        )

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    def _load(self) -> TimerState:
        try:
            state = self.store.load_state()
        except Exception as e:
            logger.warning("could not load timer state, starting idle: %s", e)
            return TimerState.idle(self.config.work_duration)
        return self._normalize(state)

    def _normalize(self, state: TimerState) -> TimerState:
        """Fit a persisted state to the active durations.

        Durations may have been reconfigured since the state was saved, so
        idle takes the current work duration and no phase may have more time
        left than its current length.
        """
        duration = self.config.phase_duration(state.status)
        if state.status == "idle" and state.time_remaining != duration:
            state = state.copy()
            state.time_remaining = duration
        elif state.time_remaining > duration:
            logger.info(
                "clamping %s from %ss to the configured %ss",
                state.status,
                state.time_remaining,
                duration,
            )
            state = state.copy()
            state.time_remaining = duration
        return state

    def _commit(self, new_state: TimerState) -> None:
        self._state = new_state
        try:
            self.store.save_state(new_state.copy())
        except Exception as e:
            logger.warning("could not persist timer state: %s", e)

    def _record(self, session: CompletedSession) -> None:
        try:
            self.store.append_completed_session(session)
        except Exception as e:
            logger.warning("could not record completed session: %s", e)

        for listener in self._listeners:
            try:
                listener(session)
            except Exception as e:
                logger.warning("session listener failed: %s", e)

    def _request_permission(self) -> None:
        try:
            self.notifier.request_permission()
        except Exception as e:
            logger.debug("notification permission request failed: %s", e)

    def _notify(self, title: str, body: str) -> None:
        try:
            self.notifier.notify(title, body)
        except Exception as e:
            logger.debug("notification failed: %s", e)
