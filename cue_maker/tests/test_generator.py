"""Tests for cue sheet and label generation."""

from unittest.mock import Mock, call

import pytest

from cue_maker.core.cue import CueTrackLabel, parse_cue_lines
from cue_maker.core.generator import (
    CueGenerator,
    InvalidDigitsError,
    InvalidTrackStartError,
    NegativeShiftError,
    NoInputTracksError,
    number_labels,
    render_labels,
)
from cue_maker.tests.test_utils import create_mock_probe
from cue_maker.utils.audio import ProbeFailedError


@pytest.fixture
def probe() -> Mock:
    """Probe returning 5 s for a.wav and 3 s for b.wav."""
    return create_mock_probe({"a.wav": 5_000_000, "b.wav": 3_000_000})


def test_render_cue(probe):
    """Test a complete cue sheet for three tracks."""
    generator = CueGenerator(probe_duration=probe)

    text = generator.render_cue(["a.wav", "b.wav", "c.wav"], "FILE")

    assert text == (
        'TITLE "FILE"\n'
        'FILE "FILE.mka" WAVE\n'
        "  TRACK 01 AUDIO\n"
        '    TITLE "a"\n'
        "    INDEX 01 00:00:00\n"
        "  TRACK 02 AUDIO\n"
        '    TITLE "b"\n'
        "    INDEX 01 00:05:00\n"
        "  TRACK 03 AUDIO\n"
        '    TITLE "c"\n'
        "    INDEX 01 00:08:00\n"
    )


def test_render_cue_never_probes_last_track(probe):
    """Test that only the tracks before the last one are probed."""
    CueGenerator(probe_duration=probe).render_cue(["a.wav", "b.wav", "c.wav"], "x")

    assert probe.call_args_list == [call("a.wav"), call("b.wav")]


def test_render_cue_single_track():
    """Test that a single track needs no probing at all."""
    probe = Mock()

    text = CueGenerator(probe_duration=probe).render_cue(["only.flac"], "One")

    probe.assert_not_called()
    assert "    INDEX 01 00:00:00\n" in text


def test_render_cue_shift_and_numbering(probe):
    """Test start shift and custom first track number."""
    generator = CueGenerator(probe_duration=probe)

    text = generator.render_cue(
        ["a.wav", "b.wav"], "Side B", num_start=9, shift_start=62_040_000
    )

    assert 'TITLE "Side B"\nFILE "Side B.mka" WAVE\n' in text
    assert "  TRACK 09 AUDIO\n" in text
    assert "  TRACK 10 AUDIO\n" in text
    assert "INDEX 01 01:02:03\n" in text
    assert "INDEX 01 01:07:03\n" in text


def test_render_cue_denumber():
    """Test stripping track numbers from titles."""
    probe = create_mock_probe({"cd/01 - Intro.flac": 1_000_000})
    generator = CueGenerator(probe_duration=probe)

    text = generator.render_cue(
        ["cd/01 - Intro.flac", "cd/02_Outro.flac"], "Album", denumber=True
    )

    assert '    TITLE "Intro"\n' in text
    assert '    TITLE "Outro"\n' in text


def test_render_cue_fallback_title():
    """Test that tracks without a file title get a numbered title."""
    text = CueGenerator(probe_duration=Mock()).render_cue([".flac"], "x", num_start=3)

    assert '    TITLE "0003"\n' in text


def test_render_cue_quotes_titles():
    """Test that quotes in titles keep the sheet parseable but truncate the title."""
    probe = create_mock_probe({'say "hi".wav': 2_000_000})
    generator = CueGenerator(probe_duration=probe)

    text = generator.render_cue(['say "hi".wav', "next.wav"], "Quotes")

    assert '    TITLE "say \\"hi\\""\n' in text
    assert parse_cue_lines(text.splitlines()) == [
        CueTrackLabel(start=0, title="say \\"),
        CueTrackLabel(start=2_000_000, title="next"),
    ]


def test_render_cue_escapes_backslashes():
    """Test that backslashes in titles come back escaped."""
    text = CueGenerator(probe_duration=Mock()).render_cue(["a\\b.wav"], "x")

    assert parse_cue_lines(text.splitlines())[0].title == "a\\\\b"



def test_render_cue_parses_back(probe):
    """Test that parsing a generated sheet recovers the track starts."""
    text = CueGenerator(probe_duration=probe).render_cue(
        ["a.wav", "b.wav", "c.wav"], "Mix"
    )

    assert parse_cue_lines(text.splitlines()) == [
        CueTrackLabel(start=0, title="a"),
        CueTrackLabel(start=5_000_000, title="b"),
        CueTrackLabel(start=8_000_000, title="c"),
    ]


def test_render_cue_invalid_track_start(probe):
    """Test that track numbers must start at 1 or above."""
    with pytest.raises(InvalidTrackStartError):
        CueGenerator(probe_duration=probe).render_cue(["a.wav"], "x", num_start=0)
    probe.assert_not_called()


def test_render_cue_negative_shift(probe):
    """Test that a negative shift is rejected with the shift in the message."""
    with pytest.raises(NegativeShiftError, match="-1.500000"):
        CueGenerator(probe_duration=probe).render_cue(
            ["a.wav"], "x", shift_start=-1_500_000
        )


def test_render_cue_no_tracks(probe):
    """Test that at least one track is required."""
    with pytest.raises(NoInputTracksError):
        CueGenerator(probe_duration=probe).render_cue([], "x")


def test_render_cue_probe_failure_propagates():
    """Test that probe errors abort generation."""
    probe = Mock(side_effect=ProbeFailedError("ffprobe failed"))

    with pytest.raises(ProbeFailedError, match="ffprobe failed"):
        CueGenerator(probe_duration=probe).render_cue(["a.wav", "b.wav"], "x")
    probe.assert_called_once_with("a.wav")


def test_shift_from_file(probe):
    """Test taking the start shift from a file duration."""
    assert CueGenerator(probe_duration=probe).shift_from_file("b.wav") == 3_000_000


def test_number_labels():
    """Test prefixing label titles with zero-padded numbers."""
    labels = [CueTrackLabel(start=0, title="x"), CueTrackLabel(start=5, title="y")]

    numbered = number_labels(labels, start=1, digits=3)

    assert [label.title for label in numbered] == ["001 x", "002 y"]
    assert [label.start for label in numbered] == [0, 5]
    assert [label.title for label in labels] == ["x", "y"]


def test_number_labels_disabled():
    """Test that a negative start keeps titles and ignores digits."""
    labels = [CueTrackLabel(start=0, title="x")]

    assert number_labels(labels, start=-1, digits=0) == labels


def test_number_labels_invalid_digits():
    """Test that numbers need at least one digit."""
    with pytest.raises(InvalidDigitsError):
        number_labels([CueTrackLabel(start=0, title="x")], start=0, digits=0)


def test_render_labels():
    """Test label file lines with identical begin and end times."""
    labels = [
        CueTrackLabel(start=0, title="0001 Opening"),
        CueTrackLabel(start=62_040_000, title="0002 Second Song"),
    ]

    assert render_labels(labels) == (
        "0.000000\t0.000000\t0001 Opening\n"
        "62.040000\t62.040000\t0002 Second Song\n"
    )


def test_render_labels_empty():
    """Test that no labels render as empty text."""
    assert render_labels([]) == ""
