"""Command-line interface for cue-maker.

Dependencies:
- click: Python package for creating beautiful command line interfaces with minimal code
- rich: Terminal formatting, progress bars and TUI elements
- dataclasses: Python standard library for creating data container classes
- pathlib: Python standard library for object-oriented filesystem paths
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

import click

from .. import __version__
from ..common import (
    DEFAULT_NUM_DIGITS,
    DEFAULT_NUM_START,
    STDOUT_CUE_TITLE,
    CueMakerError,
)
from ..core.cue import CueTrackLabel, parse_cue_file, parse_cue_lines
from ..core.generator import (
    CueGenerator,
    ProbeDuration,
    TrackSource,
    number_labels,
    render_labels,
)
from ..core.timecode import (
    InvalidNumberError,
    format_cue_timecode,
    format_seconds_text,
    parse_cue_timecode,
    parse_seconds_text,
)
from ..core.titles import file_title
from ..utils.audio import DEFAULT_FFPROBE, get_media_duration
from . import tui as tui_module

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PROBE_TASK = "Probing track durations"


@dataclass
class CliContext:
    """Context object for CLI commands."""

    debug: bool = False
    use_tui: bool = True
    ffprobe: str = DEFAULT_FFPROBE

    def probe_duration(self, media_path) -> int:
        """Probe a media duration with the configured ffprobe."""
        return get_media_duration(media_path, ffprobe=self.ffprobe)


@dataclass
class CueCommandOptions:
    """Options for the cue command."""

    tracks: List[str]
    output: Optional[Path]
    denum: bool
    num_start: int
    shift: Optional[str]
    shift_file: Optional[Path]

    @property
    def cue_title(self) -> str:
        """Sheet title: the output file title, or a fixed one for stdout."""
        if self.output is None:
            return STDOUT_CUE_TITLE
        return file_title(self.output)


@dataclass
class LabelCommandOptions:
    """Options for the label command."""

    input: Optional[Path]
    audio_file_index: int
    output: Optional[Path]
    num_start: int
    num_digits: int


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn cue-maker errors into a click error message and exit status 1."""
    try:
        yield
    except CueMakerError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e


def write_output(text: str, output: Optional[Path]) -> None:
    """Write generated text to a file, or to stdout when no file is given."""
    if output is None:
        click.echo(text, nl=False)
        return
    try:
        with click.open_file(str(output), "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise click.ClickException(f"Cannot create output file: {e}") from e
    logger.info("Wrote %s", output)


def tracked_probe(
    probe: ProbeDuration, progress: tui_module.ProcessingProgress
) -> ProbeDuration:
    """Wrap a duration probe so each call advances the probe progress task."""

    def probe_and_advance(media_path: TrackSource) -> int:
        duration = probe(media_path)
        progress.advance(PROBE_TASK)
        return duration

    return probe_and_advance


@click.group(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "auto_envvar_prefix": "CUE_MAKER",
    }
)
@click.version_option(version=__version__)
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
@click.option(
    "--tui/--no-tui",
    default=True,
    help="Enable/disable progress and summaries on stderr",
)
@click.option(
    "--ffprobe",
    default=DEFAULT_FFPROBE,
    show_default=True,
    help="ffprobe executable used to read track durations",
)
@click.pass_context
def cli(ctx, debug: bool, tui: bool, ffprobe: str):
    """Cue Maker - Make cue sheets from track files and labels from cue sheets."""
    ctx.obj = CliContext(debug=debug, use_tui=tui, ffprobe=ffprobe)

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")

    logger.debug("Context: %s", ctx.obj)
    logger.debug("Invoked subcommand: %s", ctx.invoked_subcommand)


@cli.command()
@click.argument("tracks", nargs=-1, required=True)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output cue file (default: stdout); its name is the sheet title",
)
@click.option(
    "--denum",
    is_flag=True,
    help="Remove track numbers from file names",
)
@click.option(
    "--num",
    "num_start",
    type=int,
    default=DEFAULT_NUM_START,
    show_default=True,
    help="Cue tracks start number",
)
@click.option(
    "--shift",
    type=str,
    help="Shift cue start time, in seconds",
)
@click.option(
    "--shift-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Shift cue start time by the duration of this file",
)
@click.pass_context
# pylint: disable=too-many-arguments
def cue(
    ctx,
    tracks: List[str],
    output: Optional[Path],
    denum: bool,
    num_start: int,
    shift: Optional[str],
    shift_file: Optional[Path],
):
    """Make a cue sheet for TRACKS joined into one audio file.

    Track start times are the summed durations of the tracks before them,
    read with ffprobe.
    """
    options = CueCommandOptions(
        tracks=list(tracks),
        output=output,
        denum=denum,
        num_start=num_start,
        shift=shift,
        shift_file=shift_file,
    )

    with reporting_errors():
        if ctx.obj.use_tui:
            tui_module.display_header("Making Cue Sheet")

        text = make_cue(ctx.obj, options)

    write_output(text, options.output)


def make_cue(context: CliContext, options: CueCommandOptions) -> str:
    """Generate the cue sheet text for the cue command."""
    shift_start = 0
    if options.shift is not None:
        if options.shift_file is not None:
            logger.warning("Both --shift and --shift-file given; using --shift")
        try:
            shift_start = parse_seconds_text(options.shift)
        except InvalidNumberError as e:
            raise InvalidNumberError(f"Wrong shift time: {e}") from e
    elif options.shift_file is not None:
        shift_start = CueGenerator(context.probe_duration).shift_from_file(
            options.shift_file
        )

    if not context.use_tui:
        generator = CueGenerator(context.probe_duration)
        return generator.render_cue(
            options.tracks,
            options.cue_title,
            num_start=options.num_start,
            shift_start=shift_start,
            denumber=options.denum,
        )

    with tui_module.ProcessingProgress() as progress:
        progress.start_task(PROBE_TASK, total=len(options.tracks) - 1)
        generator = CueGenerator(tracked_probe(context.probe_duration, progress))
        try:
            text = generator.render_cue(
                options.tracks,
                options.cue_title,
                num_start=options.num_start,
                shift_start=shift_start,
                denumber=options.denum,
            )
        except CueMakerError as e:
            progress.fail_task(PROBE_TASK, str(e))
            raise
        progress.complete_task(PROBE_TASK)
    return text


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Input cue file (default: stdin)",
)
@click.option(
    "--audio-file",
    "-a",
    "audio_file_index",
    type=int,
    default=0,
    show_default=True,
    help="Input cue audio file index starting at 0",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output label file (default: stdout)",
)
@click.option(
    "--num",
    "num_start",
    type=int,
    default=DEFAULT_NUM_START,
    show_default=True,
    help="Start track number, or -1 to keep titles unnumbered",
)
@click.option(
    "--num-digits",
    type=int,
    default=DEFAULT_NUM_DIGITS,
    show_default=True,
    help="Minimum digits in track numbers",
)
@click.pass_context
# pylint: disable=too-many-arguments
def label(
    ctx,
    input_path: Optional[Path],
    audio_file_index: int,
    output: Optional[Path],
    num_start: int,
    num_digits: int,
):
    """Make an audio editor label file from a cue sheet."""
    options = LabelCommandOptions(
        input=input_path,
        audio_file_index=audio_file_index,
        output=output,
        num_start=num_start,
        num_digits=num_digits,
    )

    with reporting_errors():
        if ctx.obj.use_tui:
            tui_module.display_header("Making Labels")

        labels = make_labels(options)

    write_output(render_labels(labels), options.output)

    if ctx.obj.use_tui and options.output is not None:
        tui_module.display_labels(labels, title=str(options.output))


def make_labels(options: LabelCommandOptions) -> List[CueTrackLabel]:
    """Read the cue sheet and build the labels for the label command."""
    if options.input is None:
        with click.open_file("-", "r", encoding="utf-8") as f:
            labels = parse_cue_lines(f, options.audio_file_index)
    else:
        labels = parse_cue_file(options.input, options.audio_file_index)
    return number_labels(labels, options.num_start, options.num_digits)


@cli.command()
@click.argument("seconds", nargs=-1)
def sec2cue(seconds: List[str]):
    """Convert SECONDS to CUE times (MM:SS:FF)."""
    with reporting_errors():
        for value in seconds:
            click.echo(format_cue_timecode(parse_seconds_text(value)))


@cli.command()
@click.argument("cue_times", nargs=-1)
def cue2sec(cue_times: List[str]):
    """Convert CUE_TIMES (MM:SS:FF) to seconds."""
    with reporting_errors():
        for value in cue_times:
            click.echo(format_seconds_text(parse_cue_timecode(value)))


def main():
    """Main entry point for the CLI."""
    logger.debug("Starting main function")
    cli.main(args=None, prog_name="cue-maker")
