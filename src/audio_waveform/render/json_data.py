"""JSON encoder — sample data plus the resolved options echo."""

import json

KIND = "json"
EXTENSION = ".json"
CONTENT_TYPE = "application/json"
DEFAULTS = {
    "method": "peak",
    "samples": 100,
    "amplitude": 1,
}


def build_document(result) -> dict:
    """``data`` first, then every resolved option at the top level."""
    document = {"data": list(result.samples)}
    for key, value in result.options.to_wire().items():
        document.setdefault(key, value)
    return document


def validate(extra) -> list[str]:
    # Extra keys are echoed verbatim, nothing to check
    return []


def encode(result) -> bytes:
    return json.dumps(build_document(result), separators=(",", ":")).encode("utf-8")
