"""Tests for block reduction (peak/RMS) and channel collapsing."""

import numpy as np
import pytest

from audio_waveform.audio.waveform import (
    ReductionMethod,
    collapse_channels,
    peak_block,
    reduce_frames,
    rms_block,
)
from audio_waveform.engine.errors import WaveformArgumentError
from conftest import MemorySource


@pytest.mark.smoke
def test_peak_per_channel_is_independent():
    """Each channel's peak may come from a different frame."""
    block = np.array([[0.1, -0.9], [-0.5, 0.2]], dtype=np.float32)
    assert peak_block(block) == pytest.approx([0.5, 0.9])


def test_rms_block_known_values():
    block = np.array([[3.0, 1.0], [-4.0, 1.0]])
    # sqrt((9 + 16) / 2), sqrt((1 + 1) / 2)
    assert rms_block(block) == pytest.approx([np.sqrt(12.5), 1.0])


@pytest.mark.smoke
def test_output_length_matches_requested():
    src = MemorySource(np.random.default_rng(0).uniform(-1, 1, (44100, 2)))
    amps = reduce_frames(src, 400)
    assert amps.shape == (400, 2)


def test_remainder_folds_into_last_block():
    """10 frames into 3 samples: blocks of 3, 3 and 4 frames."""
    src = MemorySource(np.arange(10) / 10)
    amps = reduce_frames(src, 3, "peak")
    assert amps[:, 0] == pytest.approx([0.2, 0.5, 0.9])
    assert sum(src.reads[:2]) == 6


def test_rms_divisor_uses_frames_actually_read():
    # Final block holds 4 frames: (2, 0, 0, 0) -> sqrt(4 / 4) = 1
    src = MemorySource(np.array([0.0, 0.0, 0.0, 2.0, 0.0, 0.0, 0.0]))
    amps = reduce_frames(src, 2, "rms")
    assert amps[:, 0] == pytest.approx([0.0, 1.0])


def test_short_source_yields_fewer_samples():
    src = MemorySource(np.full((5, 1), 0.25))
    amps = reduce_frames(src, 10)
    assert amps.shape == (5, 1)


def test_overreported_frame_count_skips_missing_blocks():
    """Header claims 100 frames, only 50 exist: empty reads are skipped, not zeroed."""
    src = MemorySource(np.full((50, 1), 0.5), reported_frames=100)
    amps = reduce_frames(src, 10)
    assert amps.shape == (5, 1)
    assert np.all(amps == pytest.approx(0.5))


def test_underreported_frame_count_still_reads_everything():
    data = np.zeros((120, 1))
    data[-1] = 0.75
    src = MemorySource(data, reported_frames=100)
    amps = reduce_frames(src, 10)
    assert amps.shape == (10, 1)
    assert amps[-1, 0] == pytest.approx(0.75)


def test_accepts_enum_method():
    src = MemorySource(np.full((100, 1), -0.3))
    amps = reduce_frames(src, 4, ReductionMethod.RMS)
    assert amps[:, 0] == pytest.approx([0.3] * 4)


@pytest.mark.smoke
def test_unknown_method_fails_before_any_read():
    src = MemorySource(np.zeros((100, 1)))
    with pytest.raises(WaveformArgumentError, match="Unknown sampling method"):
        reduce_frames(src, 10, "unknown")
    assert src.reads == []


def test_zero_sample_count_rejected():
    src = MemorySource(np.zeros((100, 1)))
    with pytest.raises(WaveformArgumentError):
        reduce_frames(src, 0)
    assert src.reads == []


@pytest.mark.parametrize("method", ["peak", "rms"])
def test_silence_is_zero(method):
    src = MemorySource(np.zeros((1000, 3)))
    amps = reduce_frames(src, 7, method)
    assert np.all(amps == 0)


def test_peak_bounded_by_global_max():
    data = np.random.default_rng(1).uniform(-0.8, 0.8, (20_000, 2))
    amps = reduce_frames(MemorySource(data), 50, "peak")
    assert np.all(amps >= 0)
    assert amps.max() <= np.abs(data.astype(np.float32)).max() + 1e-7


def test_rms_never_exceeds_peak():
    data = np.random.default_rng(2).normal(0, 0.3, (30_000, 4))
    peaks = reduce_frames(MemorySource(data), 64, "peak")
    rms = reduce_frames(MemorySource(data), 64, "rms")
    assert peaks.shape == rms.shape
    assert np.all(rms <= peaks + 1e-9)


# --- Channel collapsing ---


def test_collapse_mean_is_unweighted_average():
    amps = np.array([[0.2, 0.4], [1.0, 0.0]])
    assert collapse_channels(amps) == pytest.approx([0.3, 0.5])


def test_collapse_max_strategy():
    amps = np.array([[0.2, 0.4], [1.0, 0.0]])
    assert collapse_channels(amps, "max") == pytest.approx([0.4, 1.0])


def test_collapse_no_blocks():
    assert collapse_channels(np.zeros((0, 2))).shape == (0,)


def test_collapse_rejects_empty_channel_axis():
    with pytest.raises(ValueError):
        collapse_channels(np.zeros((3, 0)))


def test_collapse_unknown_strategy():
    with pytest.raises(WaveformArgumentError):
        collapse_channels(np.zeros((3, 2)), "weighted")
