# src/config/logging_config.py

"""Per-run timestamped logging configuration for catalog_admin.

Every CLI invocation writes to its own file inside ``logs/``
(e.g. ``logs/run_20261018_091500.log``).  All ``catalog_admin.*``
loggers (auth, gateway, products, queries) share that file so a
single run's login, retry and mutation trail can be read top to
bottom.  Only warnings and errors reach stderr, which keeps stdout
free for JSON output.  Bearer tokens are masked in every handler.
"""

import logging
import re
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "catalog_admin"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_BEARER_RE = re.compile(r"(Bearer\s+)[\w.~+/=-]+")


class RedactBearerFilter(logging.Filter):
    """Mask bearer tokens before a record reaches any handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER_RE.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach file and console handlers to the ``catalog_admin`` logger.

    Args:
        logs_dir: Directory for the run log. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        The :class:`~pathlib.Path` of this run's log file.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Already configured (repeated calls from tests or nested runners)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    redact = RedactBearerFilter()
    file_handler.addFilter(redact)
    console_handler.addFilter(redact)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, run log at %s", log_file)
    return log_file
