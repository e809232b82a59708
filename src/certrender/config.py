# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Environment-driven settings.

``CERTRENDER_TEMPLATE_DIR``
    Directory holding the template PDFs (default: ``./templates``).
``CERTRENDER_FETCH_TIMEOUT``
    Seconds to wait for a signature image download (default: 10).
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = "templates"
DEFAULT_FETCH_TIMEOUT = 10.0


def get_template_dir() -> Path:
    """Returns the configured template directory."""
    return Path(os.environ.get("CERTRENDER_TEMPLATE_DIR", DEFAULT_TEMPLATE_DIR))


def get_fetch_timeout() -> float:
    """Returns the signature fetch timeout in seconds."""
    raw = os.environ.get("CERTRENDER_FETCH_TIMEOUT")
    if not raw:
        return DEFAULT_FETCH_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(
            "Ignoring invalid CERTRENDER_FETCH_TIMEOUT=%r, using %ss",
            raw,
            DEFAULT_FETCH_TIMEOUT,
        )
        return DEFAULT_FETCH_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_FETCH_TIMEOUT
