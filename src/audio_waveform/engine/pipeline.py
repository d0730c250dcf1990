"""Waveform pipeline — resolve sample count, reduce, collapse, normalize.

Each call owns its source and intermediate arrays; nothing is cached or
shared between calls, so generations on different files may run in
parallel threads.
"""

import logging
import time
from dataclasses import dataclass

import sentry_sdk

from audio_waveform.audio.decoder import AudioSource
from audio_waveform.audio.normalize import normalize
from audio_waveform.audio.waveform import collapse_channels, reduce_frames
from audio_waveform.engine.errors import WaveformArgumentError
from audio_waveform.engine.options import GenerationOptions, resolve_sample_count

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaveformResult:
    """Normalized samples plus the resolved options that produced them."""

    samples: tuple[int | float, ...]
    options: GenerationOptions
    channels: int = 1
    duration_ms: float = 0.0

    def __len__(self) -> int:
        return len(self.samples)


def reduce_source(source, options: GenerationOptions) -> WaveformResult:
    """Run the reduction pipeline over an already-open frame source."""
    sample_count = resolve_sample_count(source.duration_ms, options)
    resolved = options.with_sample_count(sample_count)

    amplitudes = reduce_frames(source, sample_count, resolved.method)
    collapsed = collapse_channels(amplitudes, resolved.collapse)
    samples = normalize(collapsed, resolved.amplitude)

    return WaveformResult(
        samples=tuple(samples),
        options=resolved,
        channels=source.channels,
        duration_ms=source.duration_ms,
    )


def build_waveform(source_path: str, options: GenerationOptions) -> WaveformResult:
    """Decode ``source_path`` and reduce it to a waveform.

    The source is opened once and closed on every exit path.

    Raises:
        WaveformArgumentError: Missing source path, bad method or count.
        WaveformRuntimeError: Source missing or undecodable.
    """
    if not source_path:
        raise WaveformArgumentError(
            "No source audio filename given, must be an existing sound file."
        )

    sentry_sdk.add_breadcrumb(
        category="waveform",
        message="Generating waveform",
        data={
            "source": source_path,
            "method": options.method,
            "samples": options.sample_count,
        },
        level="info",
    )

    t0 = time.monotonic()
    with AudioSource(source_path) as source:
        result = reduce_source(source, options)
    elapsed_ms = (time.monotonic() - t0) * 1000

    logger.info(
        "Reduced %s to %d samples (%s) in %.1f ms",
        source_path,
        len(result),
        result.options.method,
        elapsed_ms,
        extra={
            "source": source_path,
            "method": result.options.method,
            "samples": len(result),
            "channels": result.channels,
            "elapsed_ms": round(elapsed_ms, 1),
        },
    )
    return result
