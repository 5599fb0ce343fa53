"""Time conversions for cue sheets and label files.

Durations are integer microseconds. Two text forms are supported:

- seconds text, e.g. ``"125.400000"``, used by label files and ffprobe;
- CUE timecode ``MM:SS:FF`` where FF counts frames at 75 frames per second.

Example:
    ```python
    from cue_maker.core.timecode import format_cue_timecode, parse_seconds_text

    format_cue_timecode(parse_seconds_text("125.4"))  # "02:05:30"
    ```
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..common import CUE_FRAMES_PER_SECOND, USEC_PER_SECOND, CueMakerError

_SECONDS_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_CUE_TIME_RE = re.compile(r"(\d+):(\d+):(\d+)")


class TimecodeError(CueMakerError):
    """Base exception for time conversion errors."""


class InvalidNumberError(TimecodeError):
    """Raised when a seconds value is not a decimal number."""


class InvalidTimecodeError(TimecodeError):
    """Raised when a CUE timecode is not a valid MM:SS:FF value."""


def _split_usec(time_usec: int):
    """Split into whole seconds (truncated toward zero) and remainder magnitude."""
    whole, remainder = divmod(abs(time_usec), USEC_PER_SECOND)
    if time_usec < 0:
        whole = -whole
    return whole, remainder


def parse_seconds_text(text: str) -> int:
    """Convert a decimal seconds string to microseconds.

    Rounds half away from zero to the nearest microsecond, using exact
    decimal arithmetic.

    Args:
        text: Seconds such as "12", "0.5", "-3.25" or "1e3"

    Returns:
        Duration in microseconds

    Raises:
        InvalidNumberError: If the text is not a finite decimal number
    """
    if not _SECONDS_RE.fullmatch(text):
        raise InvalidNumberError(f"Invalid number: '{text}'")
    try:
        usec = (Decimal(text) * USEC_PER_SECOND).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
    except InvalidOperation as e:
        raise InvalidNumberError(f"Invalid number: '{text}'") from e
    return int(usec)


def format_seconds_text(time_usec: int) -> str:
    """Format microseconds as ``<seconds>.<6 digits>``.

    The fraction is always the magnitude of the remainder, so values between
    -1 and 0 seconds lose their sign.
    """
    whole, remainder = _split_usec(time_usec)
    return f"{whole}.{remainder:06d}"


def parse_cue_timecode(text: str) -> int:
    """Convert a CUE timecode in MM:SS:FF format to microseconds.

    Args:
        text: Timecode such as "03:25:40"; surrounding whitespace is ignored

    Returns:
        Duration in microseconds; frames are truncated to whole microseconds

    Raises:
        InvalidTimecodeError: If the format or field ranges are invalid
    """
    match = _CUE_TIME_RE.fullmatch(text.strip())
    if not match:
        raise InvalidTimecodeError(f"Wrong CUE time '{text}'")

    minutes, seconds, frames = map(int, match.groups())
    if seconds >= 60 or frames >= CUE_FRAMES_PER_SECOND:
        raise InvalidTimecodeError(f"Wrong CUE time '{text}'")

    return (
        minutes * 60 + seconds
    ) * USEC_PER_SECOND + frames * USEC_PER_SECOND // CUE_FRAMES_PER_SECOND


def format_cue_timecode(time_usec: int) -> str:
    """Convert microseconds to a CUE timecode in MM:SS:FF format.

    Frames are truncated, not rounded. Expects a non-negative duration.
    """
    total_seconds, remainder = _split_usec(time_usec)
    frames = remainder * CUE_FRAMES_PER_SECOND // USEC_PER_SECOND
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}:{frames:02d}"
