"""Human readable sizes and ages for the tree columns."""

import time

def format_size(size_bytes):
    """Format bytes to a human readable string using decimal units."""
    value = float(size_bytes)
    unit = "B"
    if value >= 1e9:
        value /= 1e9
        unit = "GB"
    elif value >= 1e6:
        value /= 1e6
        unit = "MB"
    elif value >= 1e3:
        value /= 1e3
        unit = "KB"

    # Keep three significant digits at most
    if value >= 99.95:
        return f"{value:.0f} {unit}"
    if value >= 9.995:
        return f"{value:.1f} {unit}"
    return f"{value:.2f} {unit}"

def format_age(created, now=None):
    """Format an epoch timestamp as a relative age, e.g. "3 weeks ago"."""
    if now is None:
        now = time.time()
    seconds = now - created
    minutes = seconds / 60
    hours = seconds / 3600

    if hours > 24 * 365 * 2:
        return f"{hours / (24 * 365):.0f} years ago"
    if hours >= 24 * 61:
        return f"{hours / (24 * 61 / 2):.0f} months ago"
    if hours >= 24 * 14:
        return f"{hours / (24 * 7):.0f} weeks ago"
    if hours >= 24 * 2:
        return f"{hours / 24:.0f} days ago"
    if hours >= 2:
        return f"{hours:.0f} hours ago"
    if minutes >= 2:
        return f"{minutes:.0f} minutes ago"
    if seconds >= 10:
        return f"{seconds:.0f} seconds ago"
    return "seconds ago"
