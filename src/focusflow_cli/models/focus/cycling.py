"""Pomodoro phase durations and cycling rules."""

from dataclasses import dataclass

from .state import TimerStatus


@dataclass(frozen=True)
class PomodoroConfig:
    """Configuration for Pomodoro cycling. All durations are in seconds."""

    work_duration: int = 25 * 60
    short_break: int = 5 * 60
    long_break: int = 15 * 60
    sessions_before_long_break: int = 4

    def __post_init__(self):
        for name in ("work_duration", "short_break", "long_break"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.sessions_before_long_break < 1:
            raise ValueError("sessions_before_long_break must be at least 1")

    @classmethod
    def from_minutes(
        cls,
        work: int = 25,
        short_break: int = 5,
        long_break: int = 15,
        sessions_before_long_break: int = 4,
    ) -> "PomodoroConfig":
        """Build a config from durations expressed in minutes."""
        return cls(
            work_duration=work * 60,
            short_break=short_break * 60,
            long_break=long_break * 60,
            sessions_before_long_break=sessions_before_long_break,
        )

    def phase_duration(self, status: TimerStatus) -> int:
        """Get nominal duration in seconds for a phase."""
        if status == "break":
            return self.short_break
        if status == "longBreak":
            return self.long_break
        # work, and idle falls back to the work duration
        return self.work_duration

    def break_after(self, sessions_completed: int) -> TimerStatus:
        """Determine which break follows the given number of completed sessions."""
        if sessions_completed % self.sessions_before_long_break == 0:
            return "longBreak"
        return "break"

    def session_ordinal(self, sessions_completed: int) -> int:
        """Position of the current work session within its cycle (1-based)."""
        return (sessions_completed % self.sessions_before_long_break) + 1

    def progress_dots(self, sessions_completed: int, status: TimerStatus) -> str:
        """Get progress dots showing cycle position."""
        done = sessions_completed % self.sessions_before_long_break
        if done == 0 and sessions_completed > 0 and status == "longBreak":
            done = self.sessions_before_long_break

        dots = []
        for i in range(1, self.sessions_before_long_break + 1):
            if i <= done:
                dots.append("●")  # Completed
            elif i == done + 1 and status == "work":
                dots.append("◉")  # Current
            else:
                dots.append("○")  # Upcoming
        return " ".join(dots)
