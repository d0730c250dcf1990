"""Output path validation and PII stripping for Sentry and logs."""

import os
import re
from pathlib import Path
from typing import Any


def validate_output_path(path: str, extension: str) -> list[str]:
    """Validate a waveform output path. Returns list of errors (empty = valid).

    Checks:
    - Extension matches the encoder's
    - Parent directory exists and is writable
    - Filename is a real name without backslashes or NUL bytes
    """
    errors: list[str] = []
    p = Path(path)

    if p.suffix.lower() != extension:
        errors.append(f"Output extension '{p.suffix}' does not match '{extension}'")

    parent = p.parent
    if not parent.exists():
        errors.append(f"Output directory does not exist: {parent}")
    elif not os.access(str(parent), os.W_OK):
        errors.append(f"Output directory is not writable: {parent}")

    name = p.name
    if name in ("", ".", "..") or "\\" in name or "\x00" in name:
        errors.append(f"Unsafe output filename: {name!r}")

    return errors


# --- PII stripping for Sentry ---

_HOME = os.path.expanduser("~")
_USER_DIR_PATTERN = re.compile(r"/Users/[^/\s]+|/home/[^/\s]+|C:\\Users\\[^\\\s]+")
_SENSITIVE_KEYS = ("token", "auth", "secret", "password", "dsn", "api_key")
# Audio and artifact paths in breadcrumbs and log extras; only the file name is kept
_PATH_KEYS = {"source", "source_path", "output", "output_path"}


def _scrub_text(text: str) -> str:
    if _HOME and _HOME != os.sep:
        text = text.replace(_HOME, "<HOME>")
    return _USER_DIR_PATTERN.sub("<REDACTED_PATH>", text)


def _scrub(value: Any, key: str | None = None) -> Any:
    if key is not None:
        lowered = key.lower()
        if any(s in lowered for s in _SENSITIVE_KEYS):
            return "<REDACTED>"
        if lowered in _PATH_KEYS and isinstance(value, str):
            return os.path.basename(value)
    if isinstance(value, str):
        return _scrub_text(value)
    if isinstance(value, dict):
        return {k: _scrub(v, str(k)) for k, v in value.items()}
    if isinstance(value, list):
        return [_scrub(v) for v in value]
    return value


def strip_pii(event: dict, hint: dict) -> dict:
    """Sentry before_send hook.

    Reduces audio/artifact paths to their file name, replaces the home
    directory in every string and redacts credential-like keys at any depth.
    """
    return _scrub(event)
