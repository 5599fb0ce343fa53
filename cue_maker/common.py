"""Common constants and the base exception for cue-maker."""

USEC_PER_SECOND = 1_000_000

# Red Book CD frame rate used by every CUE timecode.
CUE_FRAMES_PER_SECOND = 75

DEFAULT_NUM_START = 1
DEFAULT_NUM_DIGITS = 4

# Sheet title used when the cue sheet is written to stdout.
STDOUT_CUE_TITLE = "FILE"


class CueMakerError(Exception):
    """Base exception for every error reported by cue-maker."""
