"""Generation options — defaults merge, validation, sample count resolution."""

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from audio_waveform.audio.waveform import COLLAPSE_STRATEGIES, ReductionMethod
from audio_waveform.engine.errors import WaveformArgumentError


DEFAULT_METHOD = ReductionMethod.PEAK.value
DEFAULT_SAMPLE_COUNT = 100
DEFAULT_AMPLITUDE = 1
DEFAULT_COLLAPSE = "mean"

# Wire (echoed) name -> attribute name
_ALIASES = {
    "samples": "sample_count",
    "auto_width": "auto_width_ms",
    "auto_samples": "auto_width_ms",
}
_AUTO_WIDTH_KEYS = ("auto_width", "auto_samples")
_CORE_FIELDS = {
    "method",
    "sample_count",
    "amplitude",
    "auto_width_ms",
    "auto_width_key",
    "collapse",
}


@dataclass(frozen=True)
class GenerationOptions:
    """Immutable configuration for one generation call.

    ``extra`` holds encoder-specific rendering parameters (width, height,
    colors). They are echoed into JSON output but ignored by the core.
    ``auto_width_key`` is the name the auto width is echoed under.
    """

    method: str = DEFAULT_METHOD
    sample_count: int = DEFAULT_SAMPLE_COUNT
    amplitude: float = DEFAULT_AMPLITUDE
    auto_width_ms: int | None = None
    collapse: str = DEFAULT_COLLAPSE
    auto_width_key: str = "auto_width"
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.method, ReductionMethod):
            object.__setattr__(self, "method", self.method.value)
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_mapping(
        cls,
        overrides: Mapping[str, Any] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> "GenerationOptions":
        """Merge caller overrides over defaults. Caller wins.

        Accepts both the echoed names (``samples``, ``auto_width`` or
        ``auto_samples``) and the attribute names. The auto width keeps the
        spelling the caller used. Unknown keys are kept in ``extra`` in
        merge order.
        """
        core: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for source in (defaults or {}, overrides or {}):
            for key, value in source.items():
                name = _ALIASES.get(key, key)
                if key in _AUTO_WIDTH_KEYS:
                    core["auto_width_key"] = key
                if name in _CORE_FIELDS:
                    core[name] = value
                elif name == "extra":
                    extra.update(value)
                else:
                    extra[name] = value
        return cls(**core, extra=extra)

    def with_sample_count(self, sample_count: int) -> "GenerationOptions":
        return replace(self, sample_count=sample_count)

    def to_wire(self) -> dict[str, Any]:
        """Ordered mapping of resolved options as echoed into JSON output."""
        wire: dict[str, Any] = {
            "method": self.method,
            "samples": self.sample_count,
            "amplitude": self.amplitude,
        }
        if self.auto_width_ms is not None:
            wire[self.auto_width_key] = self.auto_width_ms
        if self.collapse != DEFAULT_COLLAPSE:
            wire["collapse"] = self.collapse
        wire.update(self.extra)
        return wire


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_options(options: GenerationOptions) -> list[str]:
    """Validate generation options. Returns list of errors (empty = valid)."""
    errors: list[str] = []
    methods = [m.value for m in ReductionMethod]

    if options.method not in methods:
        errors.append(f"Unknown sampling method {options.method!r}. Allowed: {methods}")

    if options.auto_width_ms is None and not _is_positive_int(options.sample_count):
        errors.append(
            f"'samples' must be a positive integer, got {options.sample_count!r}"
        )

    if (
        not isinstance(options.amplitude, (int, float))
        or isinstance(options.amplitude, bool)
        or not options.amplitude > 0
    ):
        errors.append(f"'amplitude' must be a positive number, got {options.amplitude!r}")

    if options.auto_width_ms is not None and not _is_positive_int(options.auto_width_ms):
        errors.append(
            f"'{options.auto_width_key}' must be a positive integer (ms per sample), "
            f"got {options.auto_width_ms!r}"
        )

    if options.collapse not in COLLAPSE_STRATEGIES:
        errors.append(
            f"Unknown channel collapse strategy {options.collapse!r}. "
            f"Allowed: {sorted(COLLAPSE_STRATEGIES)}"
        )

    return errors


def resolve_sample_count(duration_ms: float, options: GenerationOptions) -> int:
    """Number of output samples for a source of ``duration_ms``.

    With ``auto_width_ms`` set, one sample covers that many milliseconds of
    audio and the explicit count is ignored.

    Raises:
        WaveformArgumentError: If the resolved count is not positive.
    """
    if options.auto_width_ms is not None:
        count = math.ceil(duration_ms / options.auto_width_ms)
    else:
        count = options.sample_count

    if count <= 0:
        raise WaveformArgumentError(
            f"Resolved sample count must be positive, got {count} "
            f"(duration {duration_ms} ms)"
        )
    return count
