"""
Elapsed-time formatting for progress reports.
"""


def humanize_ms(millis: int) -> str:
    """Convert a duration in milliseconds to a human-readable string.

    Each unit is taken modulo its parent unit, e.g. '01:23:45', or
    '2 days, 03:01:10' once the duration reaches a full day.

    Args:
        millis: Duration in milliseconds, must be >= 0

    Returns:
        Formatted duration

    Raises:
        ValueError: If millis is negative
    """
    if millis < 0:
        raise ValueError(f"Duration must be non-negative, got {millis}")

    total_secs = int(millis) // 1000
    total_mins, secs = divmod(total_secs, 60)
    total_hours, mins = divmod(total_mins, 60)
    days, hours = divmod(total_hours, 24)

    if days > 0:
        return f"{days} days, {hours:02d}:{mins:02d}:{secs:02d}"
    return f"{hours:02d}:{mins:02d}:{secs:02d}"
