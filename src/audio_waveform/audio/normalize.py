"""Scale collapsed samples by the amplitude factor and round for output."""

from typing import Iterable


def normalize_sample(sample: float, amplitude: float = 1) -> int | float:
    """Scale one sample and round it to 2 decimals.

    Values that round to exactly 0 or 1 come back as ints so they serialize
    as ``0``/``1`` rather than ``0.0``/``1.0``. No clamping: an amplitude
    above 1 can push values past 1.
    """
    rounded = round(float(sample) * float(amplitude), 2)
    if rounded == 0 or rounded == 1:
        return int(rounded)
    return rounded


def normalize(samples: Iterable[float], amplitude: float = 1) -> list[int | float]:
    return [normalize_sample(sample, amplitude) for sample in samples]
