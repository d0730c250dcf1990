"""Command-line entry point: ``audio-waveform SOURCE [options]``."""

import argparse
import logging
import os
import sys
from pathlib import Path

import sentry_sdk

from audio_waveform._version import __version__
from audio_waveform.diagnostics import init_diagnostics
from audio_waveform.engine.errors import WaveformArgumentError, WaveformRuntimeError
from audio_waveform.engine.export import generate
from audio_waveform.render import registry
from audio_waveform.security import strip_pii

logger = logging.getLogger(__name__)

EXIT_RUNTIME_ERROR = 1
EXIT_ARGUMENT_ERROR = 2


def _init_sentry():
    """Consent-gated Sentry init: no DSN unless the user opted in."""
    consent_path = os.path.expanduser("~/.audio_waveform/telemetry_consent")
    dsn = ""
    if os.path.exists(consent_path) and Path(consent_path).read_text().strip() == "yes":
        dsn = os.environ.get("SENTRY_DSN", "")

    sentry_sdk.init(
        dsn=dsn,
        release=f"audio-waveform@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        traces_sample_rate=0.1,
        before_send=strip_pii,
        max_breadcrumbs=50,
    )


def build_parser() -> argparse.ArgumentParser:
    kinds = [info["kind"] for info in registry.list_all()]
    parser = argparse.ArgumentParser(
        prog="audio-waveform",
        description="Reduce an audio file to a waveform (JSON data, SVG or PNG).",
    )
    parser.add_argument("source", help="Audio file to read")
    parser.add_argument("--kind", choices=kinds, default="json", help="Output kind")
    parser.add_argument("-o", "--output", help="Output path (default: beside source)")
    parser.add_argument("--method", help="Sampling method: peak or rms")
    parser.add_argument("--samples", type=int, help="Number of output samples")
    parser.add_argument("--amplitude", type=float, help="Scale factor for sample values")
    parser.add_argument(
        "--auto-width",
        type=int,
        dest="auto_width",
        help="Milliseconds of audio per sample (overrides --samples)",
    )
    parser.add_argument("--collapse", help="Channel collapse strategy: mean or max")
    parser.add_argument("--width", type=int, help="Image width (svg/png)")
    parser.add_argument("--height", type=int, help="Image height (svg/png)")
    parser.add_argument("--color", help="Waveform color (svg/png)")
    parser.add_argument(
        "--background-color",
        dest="background_color",
        help="Background color or 'transparent' (svg/png)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging, echoed to stderr")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def options_from_args(args: argparse.Namespace) -> dict:
    """Caller overrides: only the flags that were given."""
    names = (
        "method",
        "samples",
        "amplitude",
        "auto_width",
        "collapse",
        "width",
        "height",
        "color",
        "background_color",
    )
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    init_diagnostics(level="DEBUG" if args.verbose else None, console=args.verbose)
    _init_sentry()

    try:
        output = generate(
            args.source,
            options_from_args(args),
            kind=args.kind,
            filename=args.output,
        )
    except WaveformArgumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ARGUMENT_ERROR
    except WaveformRuntimeError as e:
        logger.error("Waveform generation failed: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        sentry_sdk.capture_exception(e)
        logger.exception("Unexpected waveform generation failure")
        raise

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
