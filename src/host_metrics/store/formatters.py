"""Display formatters and value transforms attached to metrics."""


def display_percent(value: int) -> str:
    """Format as a whole percentage, e.g. ``"42%"``."""
    return f"{int(value)}%"


def display_load(value: int) -> str:
    """Format a value stored in hundredths with two decimals, e.g. 235 -> ``"2.35"``."""
    return f"{value / 100:.2f}"


def display_in_mb(value: int) -> str:
    """Format a byte count as megabytes, e.g. ``"1.50m"``."""
    return f"{value / (1024 * 1024):.2f}m"


def display_raw(value: int) -> str:
    """Format the integer unchanged, e.g. ``"750"``."""
    return str(value)


def scale_by_100(value: float) -> int:
    """Keep two decimal digits of a fractional sample in an integer.

    Rounds rather than truncates so that 0.29 is stored as 29, not 28.
    """
    return int(round(value * 100))
