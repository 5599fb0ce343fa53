"""Media duration probing with ffprobe.

The duration of a track decides where the next track starts in a generated
cue sheet. ffprobe reports it as seconds text in its JSON ``format``
section, together with the container start time:

    {"format": {"duration": "215.373000", "start_time": "0.025057", ...}}

A positive start time is subtracted from the duration, so that gapless
encodings with a priming delay (MP3, AAC) do not shift later tracks.

Requirements:
    ffprobe (part of FFmpeg) must be installed, or its location passed in.

Error Handling:
    All failures raise a subclass of AudioProcessingError naming the file
    and the field that could not be used.
"""

import json
import logging
import os
import subprocess
from typing import Union

from ..common import CueMakerError
from ..core.timecode import InvalidNumberError, format_seconds_text, parse_seconds_text

logger = logging.getLogger(__name__)

DEFAULT_FFPROBE = "ffprobe"


class AudioProcessingError(CueMakerError):
    """Base exception for audio processing errors."""


class ProbeFailedError(AudioProcessingError):
    """Raised when ffprobe cannot be run or its output cannot be read."""


class NoDurationFieldError(AudioProcessingError):
    """Raised when ffprobe reports no duration."""


class InvalidDurationError(AudioProcessingError):
    """Raised when the reported duration is unusable."""


def _parse_field(media_path: Union[str, os.PathLike], name: str, value) -> int:
    """Parse one seconds field of the ffprobe ``format`` section."""
    if not isinstance(value, str):
        raise InvalidDurationError(
            f"Get media duration of {media_path}: '{name}': not a string: {value!r}"
        )
    try:
        return parse_seconds_text(value)
    except InvalidNumberError as e:
        raise InvalidDurationError(
            f"Get media duration of {media_path}: '{name}': {e}"
        ) from e


def get_media_duration(
    media_path: Union[str, os.PathLike], ffprobe: str = DEFAULT_FFPROBE
) -> int:
    """Get the duration of a media file in microseconds using ffprobe.

    Args:
        media_path: Path to the media file
        ffprobe: ffprobe executable name or path

    Returns:
        Positive duration in microseconds, less any positive start time

    Raises:
        ProbeFailedError: If ffprobe fails or prints invalid JSON
        NoDurationFieldError: If there is no 'duration' field
        InvalidDurationError: If a field is invalid or the duration is not positive
    """
    cmd = [
        ffprobe,
        "-hide_banner",
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        "-i",
        str(media_path),
    ]
    logger.debug("Running: %s", " ".join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise ProbeFailedError(
            f"Get media duration: ffprobe failed for {media_path}: "
            f"exit status {e.returncode}"
        ) from e
    except OSError as e:
        raise ProbeFailedError(f"Get media duration: cannot run {ffprobe}: {e}") from e

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProbeFailedError(
            f"Get media duration: invalid ffprobe output for {media_path}: {e}"
        ) from e

    media_format = data.get("format") if isinstance(data, dict) else None
    if not isinstance(media_format, dict) or media_format.get("duration") is None:
        raise NoDurationFieldError(
            f"Get media duration of {media_path}: no 'duration' field in JSON"
        )

    duration = _parse_field(media_path, "duration", media_format["duration"])
    if media_format.get("start_time") is not None:
        start = _parse_field(media_path, "start_time", media_format["start_time"])
        if start > 0:
            duration -= start

    if duration <= 0:
        raise InvalidDurationError(
            f"Get media duration of {media_path}: wrong value: "
            f"{format_seconds_text(duration)}"
        )

    logger.debug("Duration of %s: %d us", media_path, duration)
    return duration
