"""Waveform reduction — per-block channel amplitudes and channel collapsing."""

import logging
from enum import Enum
from typing import Callable

import numpy as np

from audio_waveform.engine.errors import WaveformArgumentError

logger = logging.getLogger(__name__)


class ReductionMethod(Enum):
    PEAK = "peak"
    RMS = "rms"


def peak_block(block: np.ndarray) -> np.ndarray:
    """Per-channel peak of a block of frames.

    The peak is individual to each channel: the returned peaks are not
    necessarily from the same frame.

    Args:
        block: Float array of shape (frames, channels), frames >= 1.

    Returns:
        np.ndarray of shape (channels,), values >= 0.
    """
    return np.abs(block).max(axis=0).astype(np.float64)


def rms_block(block: np.ndarray) -> np.ndarray:
    """Per-channel root-mean-square of a block of frames.

    The mean divides by the number of frames actually in the block.
    """
    squared = np.square(block, dtype=np.float64)
    return np.sqrt(squared.mean(axis=0))


REDUCERS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    ReductionMethod.PEAK.value: peak_block,
    ReductionMethod.RMS.value: rms_block,
}


def _read_block(source, frames_per_sample: int, to_end: bool) -> np.ndarray:
    """Read one block. With ``to_end`` keep reading until the stream is exhausted."""
    block = source.read(frames_per_sample)
    if not to_end or block.shape[0] == 0:
        return block

    chunks = [block]
    while True:
        chunk = source.read(frames_per_sample)
        if chunk.shape[0] == 0:
            break
        chunks.append(chunk)
    if len(chunks) == 1:
        return block
    return np.concatenate(chunks, axis=0)


def reduce_frames(
    source,
    sample_count: int,
    method: str | ReductionMethod = ReductionMethod.PEAK,
) -> np.ndarray:
    """Reduce a frame source to one amplitude per channel per output sample.

    The stream is split into ``sample_count`` contiguous blocks of
    ``source.frames // sample_count`` frames. The final block absorbs the
    remainder: it keeps reading until the source is exhausted. A source
    holding fewer frames than requested yields fewer blocks. The source is
    read once, sequentially.

    Args:
        source: Frame source exposing ``frames``, ``channels`` and
            ``read(count) -> np.ndarray`` of shape (k, channels).
        sample_count: Number of blocks to produce, >= 1.
        method: ``"peak"`` or ``"rms"``.

    Returns:
        np.ndarray of shape (blocks, channels) float64, blocks <= sample_count.

    Raises:
        WaveformArgumentError: Unknown method or non-positive sample_count.
            Raised before any frame is read.
    """
    if isinstance(method, ReductionMethod):
        method = method.value
    reducer = REDUCERS.get(method)
    if reducer is None:
        raise WaveformArgumentError(f"Unknown sampling method {method!r}")
    if sample_count < 1:
        raise WaveformArgumentError(
            f"sample_count must be at least 1, got {sample_count}"
        )

    frames_per_sample = max(1, source.frames // sample_count)
    logger.debug(
        "Reducing %d frames x %d channels into %d samples (%d frames/sample, %s)",
        source.frames,
        source.channels,
        sample_count,
        frames_per_sample,
        method,
    )

    rows: list[np.ndarray] = []
    for index in range(sample_count):
        block = _read_block(
            source, frames_per_sample, to_end=index == sample_count - 1
        )
        if block.shape[0] == 0:
            break
        rows.append(reducer(block))

    if not rows:
        return np.zeros((0, source.channels), dtype=np.float64)
    return np.stack(rows)


def collapse_mean(amplitudes: np.ndarray) -> np.ndarray:
    return amplitudes.mean(axis=1)


def collapse_max(amplitudes: np.ndarray) -> np.ndarray:
    return amplitudes.max(axis=1)


# The "visual" amplitude of a multi-channel block is the average across
# channels unless another strategy is asked for.
COLLAPSE_STRATEGIES: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "mean": collapse_mean,
    "max": collapse_max,
}


def collapse_channels(amplitudes: np.ndarray, strategy: str = "mean") -> np.ndarray:
    """Collapse (blocks, channels) amplitudes to one value per block.

    Raises:
        ValueError: If the channel axis is empty.
        WaveformArgumentError: If the strategy is unknown.
    """
    collapse = COLLAPSE_STRATEGIES.get(strategy)
    if collapse is None:
        raise WaveformArgumentError(f"Unknown channel collapse strategy {strategy!r}")
    if amplitudes.ndim != 2 or amplitudes.shape[1] == 0:
        raise ValueError(
            f"Expected (blocks, channels) amplitudes with channels >= 1, "
            f"got shape {amplitudes.shape}"
        )
    if amplitudes.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    return collapse(amplitudes)
