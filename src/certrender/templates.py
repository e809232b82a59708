# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Template store: lazily loaded, shared template bytes.

Renders never share a ``Pdf`` object; each one opens its own copy from the
cached bytes.  The cache is the only state shared between concurrent
renders, so loading is done under a lock.
"""

import logging
import threading
from io import BytesIO
from pathlib import Path

import pikepdf

from .config import get_template_dir
from .exceptions import TemplateLoadError

logger = logging.getLogger(__name__)


class TemplateStore:
    """Cache of template bytes keyed by file name.

    Args:
        template_dir: Directory to load templates from.  Defaults to
            ``CERTRENDER_TEMPLATE_DIR`` at the time of the first load.
    """

    def __init__(self, template_dir: Path | str | None = None):
        self._template_dir = Path(template_dir) if template_dir is not None else None
        self._cache: dict[str, bytes] = {}
        self._lock = threading.Lock()

    @property
    def template_dir(self) -> Path:
        if self._template_dir is not None:
            return self._template_dir
        return get_template_dir()

    def path_for(self, name: str) -> Path:
        return self.template_dir / name

    def get(self, name: str) -> bytes:
        """Template bytes, read from disk on first use.

        Raises:
            TemplateLoadError: If the file does not exist or is unreadable.
        """
        with self._lock:
            data = self._cache.get(name)
            if data is not None:
                return data

            path = self.path_for(name)
            if not path.is_file():
                raise TemplateLoadError(f"Template not found: {path}")
            try:
                data = path.read_bytes()
            except OSError as e:
                raise TemplateLoadError(f"Cannot read template {path}: {e}") from e
            self._cache[name] = data
            logger.debug("Loaded template %s (%d bytes)", path, len(data))
            return data

    def open(self, name: str) -> pikepdf.Pdf:
        """Open a private copy of a template.

        Raises:
            TemplateLoadError: If the template is missing or not a valid PDF.
        """
        data = self.get(name)
        try:
            return pikepdf.Pdf.open(BytesIO(data))
        except pikepdf.PdfError as e:
            raise TemplateLoadError(f"Template {name} is not a valid PDF: {e}") from e

    def put(self, name: str, data: bytes) -> None:
        """Register template bytes directly, replacing any cached copy."""
        with self._lock:
            self._cache[name] = bytes(data)

    def invalidate(self, name: str | None = None) -> None:
        """Forget one cached template, or all of them."""
        with self._lock:
            if name is None:
                self._cache.clear()
            else:
                self._cache.pop(name, None)
        logger.debug("Invalidated template cache: %s", name or "all")

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._cache


_default_store = TemplateStore()


def default_store() -> TemplateStore:
    """The process-wide store used when a render is not given one."""
    return _default_store
