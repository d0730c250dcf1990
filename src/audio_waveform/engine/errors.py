"""Domain errors raised by waveform generation."""


class WaveformError(Exception):
    """Base class for errors raised while generating a waveform."""


class WaveformArgumentError(WaveformError, ValueError):
    """The caller supplied an invalid source path or invalid options."""


class WaveformRuntimeError(WaveformError, RuntimeError):
    """The source file is missing or could not be decoded."""
