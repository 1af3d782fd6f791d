"""
Logging setup for the ledger service.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger exactly once.  Modules obtain their own
loggers with ``logging.getLogger(__name__)``.

Every handler carries a ``RedactSecretsFilter``: bearer tokens and
password values are masked in the rendered message before it is
written, whichever module logged it.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Pattern, Tuple


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

REDACTED = "***REDACTED***"

_SECRET_PATTERNS: List[Tuple[Pattern[str], str]] = [
    # Authorization: Bearer <token>
    (re.compile(r"(bearer\s+)(\S+)", re.IGNORECASE), rf"\1{REDACTED}"),
    # A bare compact token (three base64url segments, JSON header).
    (re.compile(r"\beyJ[\w-]*\.[\w-]+\.[\w-]*"), REDACTED),
    # password=..., "password": "..."
    (
        re.compile(r"""(["']?password["']?\s*[:=]\s*["']?)([^"',\s}]+)""", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
]


def redact(message: str) -> str:
    """Return ``message`` with tokens and password values masked."""
    for pattern, replacement in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class RedactSecretsFilter(logging.Filter):
    """Mask secrets in a record's rendered message.  Never drops a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by pytest or a second create_app call.
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(RedactSecretsFilter())
        root.addHandler(handler)
