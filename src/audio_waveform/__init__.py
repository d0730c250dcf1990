"""audio-waveform — reduce an audio recording to a compact waveform."""

from audio_waveform._version import __version__
from audio_waveform.engine.errors import (
    WaveformArgumentError,
    WaveformError,
    WaveformRuntimeError,
)
from audio_waveform.engine.export import generate
from audio_waveform.engine.options import GenerationOptions
from audio_waveform.engine.pipeline import WaveformResult, build_waveform

__all__ = [
    "__version__",
    "GenerationOptions",
    "WaveformArgumentError",
    "WaveformError",
    "WaveformResult",
    "WaveformRuntimeError",
    "build_waveform",
    "generate",
]
