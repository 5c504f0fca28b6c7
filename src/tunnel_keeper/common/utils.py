"""Utility functions for tunnel keeper."""

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535

NOT_AVAILABLE = "N/A"


def validate_non_empty_string(value: str, field_name: str) -> str:
    """Validate that a string is not empty or only whitespace.

    Args:
        value: String value to validate
        field_name: Name of the field for error messages

    Returns:
        Stripped string value

    Raises:
        ValueError: If string is empty or only whitespace
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()


def truncate(value: str, width: int = 16, marker: str = "...") -> str:
    """Cut a string down to ``width`` characters, ending it with ``marker``."""
    if len(value) <= width:
        return value
    return value[: width - len(marker)] + marker


def format_duration(seconds: float) -> str:
    """Render a duration the way Go prints a ``time.Duration`` rounded to seconds.

    >>> format_duration(0)
    '0s'
    >>> format_duration(65)
    '1m5s'
    >>> format_duration(7203)
    '2h0m3s'
    >>> format_duration(0.5)
    '1s'
    """
    total = int(max(0.0, seconds) + 0.5)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"
