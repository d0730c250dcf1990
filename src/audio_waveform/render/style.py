"""Styling checks shared by the image encoders."""

from typing import Any, Mapping

from PIL import ImageColor

TRANSPARENT = "transparent"


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _parses_as_color(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ImageColor.getrgb(value)
    except ValueError:
        return False
    return True


def validate_style(extra: Mapping[str, Any]) -> list[str]:
    """Validate image styling options. Returns list of errors (empty = valid).

    Checks ``width``/``height`` are positive integers and that ``color`` and
    ``background_color`` are colors Pillow understands. The background may
    also be ``"transparent"``.
    """
    errors: list[str] = []

    for key in ("width", "height"):
        if key in extra and not _is_positive_int(extra[key]):
            errors.append(f"'{key}' must be a positive integer, got {extra[key]!r}")

    if "color" in extra and not _parses_as_color(extra["color"]):
        errors.append(f"Unknown color {extra['color']!r} for 'color'")

    background = extra.get("background_color", TRANSPARENT)
    if background != TRANSPARENT and not _parses_as_color(background):
        errors.append(f"Unknown color {background!r} for 'background_color'")

    return errors
