"""SVG encoder — the waveform as one filled symmetric path."""

from xml.sax.saxutils import quoteattr

from audio_waveform.render.outline import outline
from audio_waveform.render.style import TRANSPARENT, validate_style

KIND = "svg"
EXTENSION = ".svg"
CONTENT_TYPE = "image/svg+xml"
DEFAULTS = {
    "method": "peak",
    "samples": 1800,
    "amplitude": 1,
    "width": 1800,
    "height": 280,
    "color": "#00ccff",
    "background_color": "#666666",
}


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def path_data(samples, width: float, height: float) -> str:
    points = outline(samples, width, height)
    if not points:
        return ""
    commands = [f"M{_num(points[0][0])},{_num(points[0][1])}"]
    commands.extend(f"L{_num(x)},{_num(y)}" for x, y in points[1:])
    commands.append("Z")
    return " ".join(commands)


def render_svg(samples, width: int, height: int, color: str, background_color: str) -> str:
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" preserveAspectRatio="none">',
    ]
    if background_color != TRANSPARENT:
        parts.append(
            f'  <rect width="100%" height="100%" fill={quoteattr(background_color)}/>'
        )
    parts.append(
        f'  <path d="{path_data(samples, width, height)}" '
        f"fill={quoteattr(color)} stroke={quoteattr(color)} stroke-width=\"1\"/>"
    )
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def validate(extra) -> list[str]:
    return validate_style(extra)


def encode(result) -> bytes:
    extra = result.options.extra
    svg = render_svg(
        result.samples,
        width=int(extra.get("width", DEFAULTS["width"])),
        height=int(extra.get("height", DEFAULTS["height"])),
        color=extra.get("color", DEFAULTS["color"]),
        background_color=extra.get("background_color", DEFAULTS["background_color"]),
    )
    return svg.encode("utf-8")
