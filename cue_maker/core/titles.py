"""Track title helpers for cue sheets and label files."""

import os
import re
from pathlib import PurePath
from typing import Union

from ..common import DEFAULT_NUM_DIGITS

# Leading track number, then separators: "03 - Song", "12_Song", "7.Song"
_DENUMBER_RE = re.compile(r"^[0-9]+[ \t\-_.]+(.*)")


def file_title(path: Union[str, os.PathLike]) -> str:
    """Return the last path component without its final extension.

    Args:
        path: File path, e.g. "music/01 - Intro.flac"

    Returns:
        Title such as "01 - Intro"; empty for names like ".flac"
    """
    name = PurePath(path).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot else name


def denumber_title(title: str) -> str:
    """Strip a leading track number prefix from a title, if there is one."""
    match = _DENUMBER_RE.match(title)
    if match:
        return match.group(1)
    return title


def format_track_title(
    track_number: int, path: Union[str, os.PathLike], denumber: bool = False
) -> str:
    """Derive the cue sheet title for one track file.

    Args:
        track_number: Number of the track in the cue sheet
        path: Path to the track file
        denumber: Whether to strip a leading track number from the title

    Returns:
        The file title, or the zero-padded track number when that is empty
    """
    title = file_title(path)
    if not title:
        return f"{track_number:0{DEFAULT_NUM_DIGITS}d}"
    if denumber:
        title = denumber_title(title)
    return title


def number_title(title: str, number: int, digits: int) -> str:
    """Prefix a title with a number zero-padded to ``digits``."""
    return f"{number:0{digits}d} {title}"
