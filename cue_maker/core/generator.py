"""Cue sheet and label file generation.

A cue sheet is generated for a set of track files that were (or will be)
joined into one audio file, in order. Each track starts where the previous
one ends, so start offsets are the running sum of the track durations. The
last track's duration is never needed and never probed.

Label files are generated from parsed cue sheet labels, one tab-separated
``start<TAB>end<TAB>title`` line per track. The end column repeats the start
time, which makes audio editors show point labels.

Example:
    ```python
    from cue_maker.core.generator import CueGenerator

    generator = CueGenerator()
    print(generator.render_cue(["01 Intro.flac", "02 Song.flac"], "Album"))
    ```
"""

import json
import logging
import os
from dataclasses import replace
from typing import Callable, List, Sequence, Union

from ..common import DEFAULT_NUM_START
from ..utils.audio import get_media_duration
from .cue import CueProcessingError, CueTrackLabel
from .timecode import format_cue_timecode, format_seconds_text
from .titles import format_track_title, number_title

logger = logging.getLogger(__name__)

TrackSource = Union[str, os.PathLike]
ProbeDuration = Callable[[TrackSource], int]

# File type tag of the single FILE directive; the .mka name is a placeholder.
_FILE_SUFFIX = ".mka"
_FILE_TYPE = "WAVE"


class GenerationError(CueProcessingError):
    """Base exception for invalid generation parameters."""


class InvalidTrackStartError(GenerationError):
    """Raised when the first cue track number is below 1."""


class NegativeShiftError(GenerationError):
    """Raised when the cue start time shift is negative."""


class InvalidDigitsError(GenerationError):
    """Raised when label numbers would have fewer than 1 digit."""


class NoInputTracksError(GenerationError):
    """Raised when a cue sheet is requested for no tracks."""


def quote(text: str) -> str:
    """Return text as a double-quoted cue sheet value.

    Quotes and backslashes are escaped, which keeps the sheet parseable, but
    such titles do not parse back to the same text.
    """
    return json.dumps(text, ensure_ascii=False)


class CueGenerator:
    """Generates cue sheets from track files.

    Usage::

        generator = CueGenerator(probe_duration=my_probe)
        text = generator.render_cue(tracks, "Live Set", shift_start=2_500_000)
    """

    def __init__(self, probe_duration: ProbeDuration = get_media_duration):
        """Initialize the generator.

        Args:
            probe_duration: Returns a track's duration in microseconds
        """
        self.probe_duration = probe_duration

    def shift_from_file(self, media_path: TrackSource) -> int:
        """Return the duration of ``media_path`` for use as a start shift."""
        shift = self.probe_duration(media_path)
        logger.info(
            "Shifting cue start by %s s (%s)", format_seconds_text(shift), media_path
        )
        return shift

    def render_cue(
        self,
        track_files: Sequence[TrackSource],
        cue_title: str,
        num_start: int = DEFAULT_NUM_START,
        shift_start: int = 0,
        denumber: bool = False,
    ) -> str:
        """Render a single-file cue sheet for tracks played back to back.

        Args:
            track_files: Track files in playback order
            cue_title: Sheet TITLE, also the base name of the FILE entry
            num_start: Number of the first TRACK
            shift_start: INDEX 01 time of the first track, in microseconds
            denumber: Whether to strip track numbers from file names

        Returns:
            Newline-terminated cue sheet text

        Raises:
            InvalidTrackStartError: If num_start is below 1
            NegativeShiftError: If shift_start is negative
            NoInputTracksError: If track_files is empty
            AudioProcessingError: If probing a track duration fails
        """
        if num_start < 1:
            raise InvalidTrackStartError(
                "Cue tracks number must start from minimum 1"
            )
        if shift_start < 0:
            raise NegativeShiftError(
                f"Shift time is negative: {format_seconds_text(shift_start)}"
            )
        if not track_files:
            raise NoInputTracksError("No input track(s)")

        lines = [
            f"TITLE {quote(cue_title)}",
            f"FILE {quote(cue_title + _FILE_SUFFIX)} {_FILE_TYPE}",
        ]

        offset = shift_start
        last = len(track_files) - 1
        for i, track in enumerate(track_files):
            number = num_start + i
            title = format_track_title(number, track, denumber)
            lines.append(f"  TRACK {number:02d} AUDIO")
            lines.append(f"    TITLE {quote(title)}")
            lines.append(f"    INDEX 01 {format_cue_timecode(offset)}")
            logger.debug("Track %02d %r starts at %d us", number, title, offset)
            if i < last:
                offset += self.probe_duration(track)

        logger.info("Generated cue sheet with %d tracks", len(track_files))
        return "\n".join(lines) + "\n"


def number_labels(
    labels: Sequence[CueTrackLabel], start: int, digits: int
) -> List[CueTrackLabel]:
    """Prefix label titles with consecutive zero-padded numbers.

    Args:
        labels: Labels to renumber; not modified
        start: Number of the first label, or negative to keep titles as they are
        digits: Minimum number of digits

    Returns:
        New list of labels

    Raises:
        InvalidDigitsError: If numbering is enabled and digits is below 1
    """
    if start < 0:
        return list(labels)
    if digits < 1:
        raise InvalidDigitsError(f"Wrong track number digits: {digits}")
    return [
        replace(label, title=number_title(label.title, start + i, digits))
        for i, label in enumerate(labels)
    ]


def render_labels(labels: Sequence[CueTrackLabel]) -> str:
    """Render labels as tab-separated label file text."""
    lines = []
    for label in labels:
        start = format_seconds_text(label.start)
        lines.append(f"{start}\t{start}\t{label.title}\n")
    return "".join(lines)
