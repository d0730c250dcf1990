"""Raster encoder — PNG waveform drawn with Pillow."""

import io

from PIL import Image, ImageColor, ImageDraw

from audio_waveform.render.outline import outline
from audio_waveform.render.style import TRANSPARENT, validate_style

KIND = "png"
EXTENSION = ".png"
CONTENT_TYPE = "image/png"
DEFAULTS = {
    "method": "peak",
    "samples": 1800,
    "amplitude": 1,
    "width": 1800,
    "height": 280,
    "color": "#00ccff",
    "background_color": "#666666",
}


def render_image(
    samples, width: int, height: int, color: str, background_color: str
) -> Image.Image:
    """Draw the symmetric waveform outline onto a new canvas.

    A ``"transparent"`` background produces an RGBA image, anything else RGB.
    """
    if background_color == TRANSPARENT:
        img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        fill = ImageColor.getcolor(color, "RGBA")
    else:
        img = Image.new("RGB", (width, height), ImageColor.getrgb(background_color))
        fill = ImageColor.getrgb(color)

    draw = ImageDraw.Draw(img)
    # Pixel centers run 0..width-1 / 0..height-1
    points = outline(samples, width - 1, height - 1)
    if len(points) >= 3:
        draw.polygon(points, fill=fill, outline=fill)
    elif points:
        draw.line(points, fill=fill, width=1)
    return img


def validate(extra) -> list[str]:
    return validate_style(extra)


def encode(result) -> bytes:
    extra = result.options.extra
    img = render_image(
        result.samples,
        width=int(extra.get("width", DEFAULTS["width"])),
        height=int(extra.get("height", DEFAULTS["height"])),
        color=extra.get("color", DEFAULTS["color"]),
        background_color=extra.get("background_color", DEFAULTS["background_color"]),
    )
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
