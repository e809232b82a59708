# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions shared across the renderer."""

import logging
import sys
from datetime import UTC, date, datetime
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configures logging for certrender.

    Args:
        verbose: If True, DEBUG level is used.
        quiet: If True, only ERROR and higher are output.
            Takes precedence over verbose.

    Returns:
        Configured logger for certrender.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    certrender_logger = logging.getLogger("certrender")
    certrender_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    certrender_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    certrender_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return certrender_logger


def resolve_indirect(obj: Any) -> Any:
    """Resolve indirect object reference if needed.

    Args:
        obj: A pikepdf object that may be an indirect reference.

    Returns:
        The resolved object.
    """
    try:
        return obj.get_object()
    except Exception:
        return obj


def format_date(value: date | datetime) -> str:
    """Format a date the way certificates print it (DD/MM/YYYY)."""
    return value.strftime("%d/%m/%Y")


def format_pdf_date(dt: datetime) -> str:
    """Format datetime to a PDF date string (D:YYYYMMDDHHmmSS+00'00').

    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).strftime("D:%Y%m%d%H%M%S+00'00'")


def fmt_num(value: float) -> str:
    """Format a coordinate for a content stream without float noise."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text
