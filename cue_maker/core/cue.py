"""CUE sheet parsing.

Extracts track start times and titles for one FILE block of a cue sheet.
Only the directives needed for that are understood (FILE, TRACK, TITLE and
INDEX 01); everything else is skipped, so sheets with REM comments, PREGAP,
other index points or unknown directives still parse.

Example:
    ```python
    from pathlib import Path
    from cue_maker.core.cue import parse_cue_file

    for label in parse_cue_file(Path("album.cue"), audio_file_index=0):
        print(label.start, label.title)
    ```
"""

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Tuple

from ..common import CueMakerError
from .timecode import InvalidTimecodeError, parse_cue_timecode

logger = logging.getLogger(__name__)

_QUOTED_RE = re.compile(r'"([^"]*)"')
_BOM = "\ufeff"


class CueProcessingError(CueMakerError):
    """Base exception for CUE processing errors."""


class InvalidCueFormatError(CueProcessingError):
    """Raised when CUE file format is invalid."""


class MalformedTitleError(InvalidCueFormatError):
    """Raised when a TITLE line has no quoted title."""


class MalformedIndexError(InvalidCueFormatError):
    """Raised when an INDEX 01 line has an invalid timecode."""


class NoTracksFoundError(InvalidCueFormatError):
    """Raised when no track of the selected FILE block has an INDEX 01."""


class CueReadError(CueProcessingError):
    """Raised when the cue sheet cannot be read."""


@dataclass(frozen=True)
class CueTrackLabel:
    """Start time and title of one cue sheet track."""

    start: int  # microseconds
    title: str


class _PendingLabel(NamedTuple):
    start: Optional[int] = None
    title: str = ""


@dataclass(frozen=True)
class _CueCursor:
    """Position of the scan within the cue sheet."""

    file_index: int = -1
    track_index: int = -1
    label: _PendingLabel = _PendingLabel()


def _finish_label(cursor: _CueCursor) -> Optional[CueTrackLabel]:
    """Turn the pending label into a finished one, if it has a start time."""
    pending = cursor.label
    if pending.start is None:
        return None
    label = CueTrackLabel(
        start=pending.start, title=pending.title or str(cursor.track_index + 1)
    )
    logger.debug("Found track %s at %d us", label.title, label.start)
    return label


def _scan_line(
    cursor: _CueCursor, line: str, audio_file_index: int
) -> Tuple[_CueCursor, Optional[CueTrackLabel]]:
    """Advance the cursor by one line.

    Returns:
        Tuple of (new cursor, label finished by this line or None)
    """
    line = line.strip()
    if not line:
        return cursor, None

    if line.startswith("FILE"):
        return (
            _CueCursor(file_index=cursor.file_index + 1),
            _finish_label(cursor),
        )

    if line.startswith("TRACK"):
        return (
            _CueCursor(
                file_index=cursor.file_index, track_index=cursor.track_index + 1
            ),
            _finish_label(cursor),
        )

    active = cursor.file_index == audio_file_index and cursor.track_index >= 0
    if not active:
        return cursor, None

    if line.startswith("TITLE"):
        match = _QUOTED_RE.search(line[len("TITLE") :])
        if not match:
            raise MalformedTitleError(f"Wrong cue title:\n{line}")
        return replace(cursor, label=cursor.label._replace(title=match.group(1))), None

    if line.startswith("INDEX 01"):
        try:
            start = parse_cue_timecode(line[len("INDEX 01") :])
        except InvalidTimecodeError as e:
            raise MalformedIndexError(f"Wrong cue INDEX 01 time:\n{line}") from e
        return replace(cursor, label=cursor.label._replace(start=start)), None

    return cursor, None


def parse_cue_lines(
    lines: Iterable[str], audio_file_index: int = 0
) -> List[CueTrackLabel]:
    """Extract track labels for one FILE block from cue sheet lines.

    Args:
        lines: Lines of the cue sheet, with or without line endings;
            a byte order mark before the first line is ignored
        audio_file_index: 0-based index of the FILE block to extract

    Returns:
        Labels in the order their tracks appear in the FILE block

    Raises:
        MalformedTitleError: If a TITLE line of the block has no quoted text
        MalformedIndexError: If an INDEX 01 line of the block is invalid
        NoTracksFoundError: If no track of the block has an INDEX 01 line
        CueReadError: If reading the lines fails
    """
    cursor = _CueCursor()
    labels: List[CueTrackLabel] = []

    try:
        for line_number, line in enumerate(lines):
            if line_number == 0 and line.startswith(_BOM):
                line = line[len(_BOM) :]
            cursor, label = _scan_line(cursor, line, audio_file_index)
            if label is not None:
                labels.append(label)
    except (OSError, UnicodeDecodeError) as e:
        raise CueReadError(f"Read cue: {e}") from e

    label = _finish_label(cursor)
    if label is not None:
        labels.append(label)

    if not labels:
        raise NoTracksFoundError("No cue tracks found")

    logger.info("Found %d cue tracks in FILE #%d", len(labels), audio_file_index)
    return labels


def parse_cue_file(
    cue_path: Path, audio_file_index: int = 0
) -> List[CueTrackLabel]:
    """Parse a UTF-8 cue sheet file.

    Args:
        cue_path: Path to the CUE file
        audio_file_index: 0-based index of the FILE block to extract

    Returns:
        Labels of the selected FILE block

    Raises:
        CueReadError: If the file cannot be opened or decoded
        InvalidCueFormatError: If the cue sheet content is invalid
    """
    try:
        with open(cue_path, "r", encoding="utf-8-sig") as f:
            return parse_cue_lines(f, audio_file_index)
    except OSError as e:
        raise CueReadError(f"Cannot open input file: {e}") from e
