"""Symmetric waveform outline shared by the vector and raster encoders."""

from typing import Sequence

Point = tuple[float, float]


def outline(samples: Sequence[float], width: float, height: float) -> list[Point]:
    """Closed outline mirroring each sample above and below the center axis.

    The top edge runs left to right at ``center - s * center``, the bottom
    edge returns right to left at ``center + s * center``. Samples are
    spread evenly over ``[0, width]``.
    """
    n = len(samples)
    if n == 0:
        return []

    center = height / 2
    step = width / max(1, n - 1)
    top = [(i * step, center - s * center) for i, s in enumerate(samples)]
    bottom = [(x, 2 * center - y) for x, y in reversed(top)]
    return top + bottom
