"""Text formatting helpers."""


def format_countdown(seconds: int) -> str:
    """Format remaining seconds as m:ss."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def format_minutes(minutes: int) -> str:
    """Format a minute count."""
    if minutes == 1:
        return "1 minute"
    return f"{minutes} minutes"


def truncate_text(text: str, max_length: int = 50, suffix: str = "...") -> str:
    """Truncate text to max length."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
