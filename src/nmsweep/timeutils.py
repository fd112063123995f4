"""Age classification for node_modules directories."""

from datetime import datetime

# Fixed average month length in milliseconds
MONTH_MILLIS = 2.628e9


def months_to_millis(months: float) -> float:
    """Convert a number of months to milliseconds."""
    return months * MONTH_MILLIS


def qualifies(elapsed_millis: float, age_cap_months: float) -> bool:
    """
    Decide whether a directory is old enough to be deleted.

    Args:
        elapsed_millis: Time since the directory was last modified
        age_cap_months: Configured age cap in months

    Returns:
        True if the elapsed time reaches the age cap
    """
    return elapsed_millis >= months_to_millis(age_cap_months)


def elapsed_millis(mtime: float, now: float) -> float:
    """Milliseconds between a modification time and now (both epoch seconds)."""
    return (now - mtime) * 1000


def from_timestamp(mtime: float) -> datetime:
    """Local datetime for an epoch timestamp."""
    return datetime.fromtimestamp(mtime)
