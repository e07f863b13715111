"""
ANSI color helpers for diagnostics written to stderr.
Colors only apply when stderr is a TTY.
"""
import sys


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[31m"
    YELLOW = "\033[33m"


def is_tty(stream=None) -> bool:
    """Check if the stream (stderr by default) is connected to a terminal."""
    stream = stream if stream is not None else sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, color: str, bold: bool = False, stream=None) -> str:
    """
    Add color to text if the target stream is a TTY.

    Args:
        text: The text to colorize
        color: Color code from Colors class
        bold: Whether to make text bold
        stream: Stream the text is written to (defaults to stderr)

    Returns:
        Colored text if TTY, otherwise plain text
    """
    if not is_tty(stream):
        return text

    prefix = Colors.BOLD if bold else ""
    return f"{prefix}{color}{text}{Colors.RESET}"


def error(text: str) -> str:
    """Red text for fatal diagnostics."""
    return colorize(text, Colors.RED, bold=True)


def warning(text: str) -> str:
    """Yellow text for warnings."""
    return colorize(text, Colors.YELLOW)
