"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any dashboard window or business rule that references a numeric constant
should import it from here instead of hardcoding.  Values that operators
may need to tune (the overdue threshold) are read from settings and fall
back to these defaults.
"""

# ── Dashboard windows ───────────────────────────────────────────────
# A report that is still open this many hours after submission is overdue.
OVERDUE_AFTER_HOURS: int = 48

# "Submitted in the last N days" KPI.
RECENT_WINDOW_DAYS: int = 7

# Default length of the daily submission trend.
TREND_DEFAULT_DAYS: int = 30

# Upper bound for the trend length accepted from clients.
TREND_MAX_DAYS: int = 365
