"""Generate a waveform artifact (JSON, SVG or PNG) next to its source file."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping

from audio_waveform.engine.errors import WaveformArgumentError, WaveformRuntimeError
from audio_waveform.engine.options import GenerationOptions, validate_options
from audio_waveform.engine.pipeline import build_waveform
from audio_waveform.render import registry
from audio_waveform.security import validate_output_path

logger = logging.getLogger(__name__)


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# mkstemp creates 0600; artifacts get the mode a plain open() would give
_FILE_MODE = _default_file_mode()


def waveform_filename(source: str, extension: str) -> str:
    """Same directory and base name as ``source``, extension replaced."""
    return str(Path(source).with_suffix(extension))


def write_atomic(path: str, data: bytes):
    """Write ``data`` to a temp file beside ``path`` then rename it into place.

    Readers never observe a partially written file. The temp file is removed
    if anything fails before the rename.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        dir=directory, prefix=f".{os.path.basename(path)}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, _FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise


def resolve_options(
    options: GenerationOptions | Mapping[str, Any] | None, kind: str
) -> GenerationOptions:
    """Merge the encoder's defaults with caller options and validate.

    Raises:
        WaveformArgumentError: Unknown kind or invalid options.
    """
    encoder = registry.get(kind)
    if encoder is None:
        kinds = sorted(info["kind"] for info in registry.list_all())
        raise WaveformArgumentError(f"Unknown output kind {kind!r}. Allowed: {kinds}")

    if isinstance(options, GenerationOptions):
        options = {**options.to_wire(), "collapse": options.collapse}
    merged = GenerationOptions.from_mapping(options, defaults=encoder["defaults"])

    errors = validate_options(merged) + encoder["validate"](merged.extra)
    if errors:
        raise WaveformArgumentError(f"Invalid options: {'; '.join(errors)}")
    return merged


def generate(
    source_path: str,
    options: GenerationOptions | Mapping[str, Any] | None = None,
    kind: str = "json",
    filename: str | None = None,
) -> str:
    """Generate a waveform artifact from an audio file.

    Args:
        source_path: Existing, decodable audio file.
        options: Caller overrides, merged over the encoder's defaults.
        kind: Output kind: ``"json"``, ``"svg"`` or ``"png"``.
        filename: Output path. Defaults to the source path with the
            extension replaced.

    Returns:
        Path of the written artifact.

    Raises:
        WaveformArgumentError: Missing source path, unknown kind, invalid
            options or output path.
        WaveformRuntimeError: Source missing or undecodable.
    """
    if not source_path:
        raise WaveformArgumentError(
            "No source audio filename given, must be an existing sound file."
        )
    source_path = str(source_path)
    if not os.path.exists(source_path):
        raise WaveformRuntimeError(f"Source audio file '{source_path}' not found.")

    resolved = resolve_options(options, kind)
    encoder = registry.get(kind)

    output_path = str(filename) if filename else waveform_filename(
        source_path, encoder["extension"]
    )
    errors = validate_output_path(output_path, encoder["extension"])
    if errors:
        raise WaveformArgumentError(f"Invalid output path: {'; '.join(errors)}")

    result = build_waveform(source_path, resolved)
    data = encoder["fn"](result)
    write_atomic(output_path, data)

    logger.info(
        "Wrote %s waveform (%d samples, %d bytes) to %s",
        kind,
        len(result),
        len(data),
        output_path,
        extra={"source": source_path, "output": output_path, "kind": kind},
    )
    return output_path
