# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Signature embedder: fetch, decode, scale and place signature images.

A signature that cannot be fetched or decoded leaves its area blank and is
listed in the report; it never stops the document from rendering.
"""

import logging
from collections.abc import Callable

import requests
from pikepdf import Pdf

from .canvas import PageCanvas
from .config import get_fetch_timeout
from .forms import FormIndex
from .images import embed_image, fit_in_box
from .kinds.base import Box, SignatureSlot
from .report import RenderReport

logger = logging.getLogger(__name__)

# url -> (image bytes, content type)
Fetcher = Callable[[str], tuple[bytes, str | None]]


def fetch_image(url: str, timeout: float | None = None) -> tuple[bytes, str | None]:
    """Download an image.

    Raises:
        requests.RequestException: On network errors and non-2xx responses.
    """
    response = requests.get(
        url,
        timeout=timeout if timeout is not None else get_fetch_timeout(),
        allow_redirects=True,
    )
    response.raise_for_status()
    return response.content, response.headers.get("Content-Type")


def resolve_slot_box(
    slot: SignatureSlot,
    index: FormIndex | None,
    offset: tuple[float, float] = (0.0, 0.0),
) -> tuple[int, Box] | None:
    """Page index and rectangle for a signature slot.

    The widget rectangle is used when the template has the widget; the
    slot's fixed box (shifted by offset) otherwise.
    """
    if slot.widget and index is not None:
        entry = index.get(slot.widget)
        if entry is not None and entry.rect is not None:
            return entry.page_index or 0, entry.rect
    if slot.box is not None:
        x, y, w, h = slot.box
        return 0, (x + offset[0], y + offset[1], w, h)
    return None


class SignatureEmbedder:
    """Places signature images for one document.

    Args:
        pdf: Document receiving the images.
        report: Completeness report.
        fetcher: Callable downloading a URL; defaults to ``fetch_image``.
    """

    def __init__(
        self, pdf: Pdf, report: RenderReport, fetcher: Fetcher | None = None
    ):
        self.pdf = pdf
        self.report = report
        self.fetcher = fetcher if fetcher is not None else fetch_image

    def embed_url(
        self,
        canvas: PageCanvas,
        name: str,
        url: str,
        box: Box,
        padding: float = 4.0,
    ) -> bool:
        """Fetch an image and draw it into a box.

        Returns:
            True if the image was drawn.
        """
        if not url:
            self.report.record_blank(name)
            return False
        logger.debug("Fetching %s signature", name)
        try:
            data, content_type = self.fetcher(url)
        except Exception as e:
            logger.warning("Could not fetch %s signature: %s", name, e)
            logger.debug("Signature fetch failure", exc_info=True)
            self.report.record_image_failure(name)
            return False
        return self.embed_bytes(canvas, name, data, box, padding, content_type)

    def embed_bytes(
        self,
        canvas: PageCanvas,
        name: str,
        data: bytes,
        box: Box,
        padding: float = 4.0,
        content_type: str | None = None,
    ) -> bool:
        """Decode image bytes and draw them into a box.

        Returns:
            True if the image was drawn.
        """
        try:
            xobject = embed_image(self.pdf, data, content_type)
        except Exception as e:
            logger.warning("Could not embed %s image: %s", name, e)
            logger.debug("Image decode failure", exc_info=True)
            self.report.record_image_failure(name)
            return False

        x, y, w, h = fit_in_box(xobject, box, padding)
        if w <= 0 or h <= 0:
            logger.warning("No room for %s image in %s", name, box)
            self.report.record_image_failure(name)
            return False
        canvas.image(xobject, x, y, w, h)
        self.report.record_written(name)
        return True
