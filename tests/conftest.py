import wave
from pathlib import Path

import numpy as np
import pytest


class MemorySource:
    """In-memory frame source with the same surface as AudioSource.

    ``reported_frames`` lets a test make the header disagree with the data,
    the way some containers under- or over-report their length.
    """

    def __init__(
        self,
        data: np.ndarray,
        sample_rate: int = 8000,
        reported_frames: int | None = None,
    ):
        if data.ndim == 1:
            data = data[:, None]
        self.data = data.astype(np.float32)
        self.channels = self.data.shape[1]
        self.sample_rate = sample_rate
        self.frames = self.data.shape[0] if reported_frames is None else reported_frames
        self.duration_ms = self.frames * 1000 / sample_rate
        self.reads: list[int] = []
        self.closed = False
        self._pos = 0

    def read(self, count: int) -> np.ndarray:
        block = self.data[self._pos : self._pos + count]
        self._pos += block.shape[0]
        self.reads.append(block.shape[0])
        return block

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def sine(
    duration_s: float,
    sample_rate: int = 8000,
    channels: int = 1,
    freq: float = 1000.0,
    peak: float = 0.5,
) -> np.ndarray:
    """(frames, channels) sine. At 8 kHz / 1 kHz every 8th frame hits ``peak`` exactly."""
    t = np.arange(int(sample_rate * duration_s)) / sample_rate
    wave_ = peak * np.sin(2 * np.pi * freq * t)
    return np.repeat(wave_[:, None], channels, axis=1)


def write_wav(path: Path, data: np.ndarray, sample_rate: int = 8000, sampwidth: int = 2):
    """Write (frames, channels) floats in [-1, 1] as 8- or 16-bit PCM WAV."""
    if data.ndim == 1:
        data = data[:, None]
    if sampwidth == 1:
        pcm = np.clip(np.round(data * 128) + 128, 0, 255).astype(np.uint8)
    else:
        pcm = np.clip(np.round(data * 32768), -32768, 32767).astype("<i2")
    with wave.open(str(path), "wb") as w:
        w.setnchannels(data.shape[1])
        w.setsampwidth(sampwidth)
        w.setframerate(sample_rate)
        w.writeframes(pcm.tobytes())
    return path


@pytest.fixture
def memory_source():
    return MemorySource


@pytest.fixture
def wav_factory(tmp_path):
    """Write WAV files into tmp_path: wav_factory(name, data, sample_rate=8000)."""

    def _make(name: str, data: np.ndarray, sample_rate: int = 8000, sampwidth: int = 2):
        return write_wav(tmp_path / name, data, sample_rate, sampwidth)

    return _make


@pytest.fixture
def sine_8ch_wav(wav_factory):
    """4 s, 8 channels, 8 kHz sine peaking at exactly 0.5."""
    return wav_factory("sine_8ch.wav", sine(4.0, channels=8))


@pytest.fixture
def silent_wav(wav_factory):
    return wav_factory("silence.wav", np.zeros((12_345, 2)))
