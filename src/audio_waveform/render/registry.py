"""Encoder registry — central lookup for output kinds."""

from typing import Any, Callable

EncodeFn = Callable[[Any], bytes]
ValidateFn = Callable[[Any], list]

_REGISTRY: dict[str, dict] = {}


def register(
    kind: str,
    fn: EncodeFn,
    extension: str,
    content_type: str,
    defaults: dict,
    validate: ValidateFn,
):
    """Register an encoder."""
    _REGISTRY[kind] = {
        "fn": fn,
        "extension": extension,
        "content_type": content_type,
        "defaults": dict(defaults),
        "validate": validate,
    }


def get(kind: str) -> dict | None:
    """Get encoder info by kind."""
    return _REGISTRY.get(kind)


def list_all() -> list[dict]:
    """List all registered encoders with metadata."""
    return [
        {
            "kind": kind,
            "extension": info["extension"],
            "content_type": info["content_type"],
            "defaults": dict(info["defaults"]),
        }
        for kind, info in _REGISTRY.items()
    ]


def _auto_register():
    """Import and register all built-in encoders."""
    from audio_waveform.render import json_data, raster, svg

    for mod in [json_data, svg, raster]:
        register(
            mod.KIND, mod.encode, mod.EXTENSION, mod.CONTENT_TYPE, mod.DEFAULTS, mod.validate
        )


_auto_register()
