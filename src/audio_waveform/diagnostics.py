"""Diagnostics for the CLI: JSON-lines log file, optional console, faulthandler.

Library modules only create loggers. Handlers are attached here, once, by
``init_diagnostics`` when the command line tool starts.
"""

import datetime
import faulthandler
import json
import logging
import logging.handlers
import os
import sys

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = "~/.audio_waveform/logs"
LOG_FILENAME = "waveform.log"
FAULT_FILENAME = "waveform_fault.log"

# Generation context passed through ``extra=`` by the pipeline and exporter
CONTEXT_FIELDS = (
    "source",
    "output",
    "kind",
    "method",
    "samples",
    "channels",
    "elapsed_ms",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, generation context fields included."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def log_dir_from_env() -> str:
    return os.path.expanduser(os.environ.get("AUDIO_WAVEFORM_LOG_DIR") or DEFAULT_LOG_DIR)


def setup_structured_logging(
    log_dir: str | None = None, level: str | None = None, console: bool = False
) -> str:
    """Attach the JSON-lines file handler (and a stderr handler if ``console``).

    Args:
        log_dir: Log directory. Defaults to AUDIO_WAVEFORM_LOG_DIR or
            ~/.audio_waveform/logs.
        level: Level name. Defaults to AUDIO_WAVEFORM_LOG_LEVEL or INFO.
        console: Also print human-readable records to stderr.

    Returns:
        The directory logs are written to.
    """
    log_dir = log_dir or log_dir_from_env()
    os.makedirs(log_dir, mode=0o700, exist_ok=True)
    level_name = (level or os.environ.get("AUDIO_WAVEFORM_LOG_LEVEL", "INFO")).upper()

    # One run writes a handful of lines; a couple of small backups is plenty
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILENAME), maxBytes=1_000_000, backupCount=2
    )
    file_handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(stream_handler)

    return log_dir


def setup_faulthandler(log_dir: str):
    """Send C-level crash tracebacks (e.g. a segfault inside the decoder) to a file.

    The file is separate from the rotating log so rotation never closes the
    descriptor faulthandler holds.
    """
    fault_path = os.path.join(log_dir, FAULT_FILENAME)
    try:
        fault_file = open(fault_path, "a", buffering=1)  # noqa: SIM115
    except OSError as e:
        logger.warning("faulthandler disabled, cannot open %s: %s", fault_path, e)
        return
    faulthandler.enable(file=fault_file, all_threads=True)


def init_diagnostics(level: str | None = None, console: bool = False) -> str:
    """Initialize logging and faulthandler. Call once from the CLI."""
    log_dir = setup_structured_logging(level=level, console=console)
    setup_faulthandler(log_dir)
    logger.debug("Diagnostics initialized, logging to %s", log_dir)
    return log_dir
