"""Make cue sheets from track files and audio editor labels from cue sheets."""

__version__ = "0.1.0"
