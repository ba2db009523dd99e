"""Quiz-related constants shared across UI, server and core layers."""

DEFAULT_TIME_LIMIT_MINUTES: int = 30
MAX_TIME_LIMIT_MINUTES: int = 600
MIN_OPTIONS_PER_QUESTION: int = 2
MAX_OPTIONS_PER_QUESTION: int = 6
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D", "E", "F")

LOW_TIME_WARNING_SECONDS: int = 60
TICKING_WINDOW_SECONDS: int = 10
TIMER_TICK_INTERVAL_SECONDS: float = 1.0

DEFAULT_LEADERBOARD_LIMIT: int = 10
GLOBAL_LEADERBOARD_LIMIT: int = 50
PASS_MARK: int = 60
GRADE_THRESHOLDS: tuple[tuple[int, str], ...] = ((90, "A"), (75, "B"), (60, "C"))
LOWEST_GRADE: str = "D"

# Submitted attempts stay readable this long so the page can fetch the final state.
FINISHED_ATTEMPT_RETENTION_SECONDS: float = 300.0
