"""Audio decoding via PyAV — sequential float32 frame reads."""

import logging
from pathlib import Path

import av
import numpy as np

from audio_waveform.engine.errors import WaveformRuntimeError

logger = logging.getLogger(__name__)

UNKNOWN_FORMAT_HINT = (
    "Hint: the file is not in a format the decoder understands, "
    "convert it first (e.g. `ffmpeg -i input output.wav`)"
)


def _to_float32(arr: np.ndarray) -> np.ndarray:
    if arr.dtype == np.float32:
        return arr
    if np.issubdtype(arr.dtype, np.unsignedinteger):
        # Unsigned PCM is offset binary: silence sits at the midpoint
        half = (np.iinfo(arr.dtype).max + 1) / 2
        return ((arr.astype(np.float32) - half) / half).astype(np.float32)
    if np.issubdtype(arr.dtype, np.integer):
        info = np.iinfo(arr.dtype)
        return arr.astype(np.float32) / max(abs(info.min), abs(info.max))
    return arr.astype(np.float32)


class AudioSource:
    """Sequential reader over the first audio stream of a media file.

    Exposes the total frame count, channel count and sample rate up front,
    then hands out fixed-size (frames, channels) float32 blocks in order.
    Use as a context manager so the container is always closed.

    Raises:
        WaveformRuntimeError: File missing, unknown format, or no audio stream.
    """

    def __init__(self, path: str):
        self.path = str(path)
        if not Path(self.path).is_file():
            raise WaveformRuntimeError(f"Source audio file '{self.path}' not found.")

        try:
            self.container = av.open(self.path)
        except av.error.InvalidDataError as e:
            raise WaveformRuntimeError(
                f"Source audio file {self.path} could not be read -- "
                f"{UNKNOWN_FORMAT_HINT} (decoder: {e})"
            ) from e

        if not self.container.streams.audio:
            self.container.close()
            raise WaveformRuntimeError(f"No audio stream found in {self.path}")

        self.stream = self.container.streams.audio[0]
        self.sample_rate = self.stream.rate
        self.channels = self.stream.channels
        self.frames = self._count_frames()
        self.duration_ms = self.frames * 1000 / self.sample_rate if self.sample_rate else 0.0
        self._decoder = self.container.decode(self.stream)
        self._buffer: list[np.ndarray] = []
        self._buffered = 0
        self._exhausted = False

        logger.debug(
            "Opened %s: %d frames, %d channels, %d Hz",
            self.path,
            self.frames,
            self.channels,
            self.sample_rate,
        )

    def _count_frames(self) -> int:
        stream = self.stream
        if stream.duration is not None and stream.time_base is not None:
            seconds = float(stream.duration * stream.time_base)
        elif self.container.duration is not None:
            seconds = self.container.duration / av.time_base
        else:
            logger.warning("No duration reported for %s", self.path)
            return 0
        return int(round(seconds * self.sample_rate))

    def _next_chunk(self) -> np.ndarray | None:
        """Decode the next audio frame as a (samples, channels) float32 array."""
        for frame in self._decoder:
            arr = frame.to_ndarray()
            if frame.format.is_planar:
                # Planar: (channels, samples) -> (samples, channels)
                arr = arr.T
            else:
                # Packed: (1, samples * channels) -> (samples, channels)
                arr = arr.reshape(-1, self.channels)
            if arr.shape[0] == 0:
                continue
            return _to_float32(arr)
        return None

    def read(self, count: int) -> np.ndarray:
        """Read up to ``count`` frames. Returns fewer only at end of stream."""
        while self._buffered < count and not self._exhausted:
            chunk = self._next_chunk()
            if chunk is None:
                self._exhausted = True
                break
            self._buffer.append(chunk)
            self._buffered += chunk.shape[0]

        if self._buffered == 0:
            return np.empty((0, self.channels), dtype=np.float32)

        pending = (
            self._buffer[0] if len(self._buffer) == 1 else np.concatenate(self._buffer)
        )
        block, rest = pending[:count], pending[count:]
        self._buffer = [rest] if rest.shape[0] else []
        self._buffered = rest.shape[0]
        return block

    def close(self):
        self.container.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
