# core/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

_configured = False


def setup_logging():
    global _configured
    if _configured:
        return

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_file = os.getenv(
        "LOG_FILE", os.path.expanduser("~/.character_shop/character_shop.log")
    )
    log_max_bytes = int(os.getenv("LOG_MAX_BYTES", str(1024 * 1024)))
    log_backups = int(os.getenv("LOG_BACKUPS", "2"))
    # The CLI prints its views to stdout, so diagnostics default to stderr.
    log_stream = os.getenv("LOG_STREAM", "stderr").lower()
    log_to_stream = os.getenv("LOG_TO_CONSOLE", "true").lower() == "true"

    level = getattr(logging, log_level, logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    # Avoid duplicate handlers
    if not root.handlers:
        if log_to_stream:
            ch = logging.StreamHandler(sys.stdout if log_stream == "stdout" else sys.stderr)
            ch.setLevel(level)
            ch.setFormatter(formatter)
            root.addHandler(ch)

        if log_to_file:
            try:
                os.makedirs(os.path.dirname(log_file), exist_ok=True)
                fh = RotatingFileHandler(
                    log_file,
                    maxBytes=log_max_bytes,
                    backupCount=log_backups,
                )
                fh.setLevel(level)
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Failed to initialize file logging: %s", e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
