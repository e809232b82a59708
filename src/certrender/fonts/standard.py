# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Standard-14 font dictionaries for drawn text."""

import logging

from pikepdf import Dictionary, Name, Pdf

from .metrics import HELVETICA, HELVETICA_BOLD

logger = logging.getLogger(__name__)

# Resource names used on every page we draw on.  The prefix keeps them clear
# of whatever names a template already uses.
RESOURCE_NAMES: dict[str, str] = {
    HELVETICA: "/CRHelv",
    HELVETICA_BOLD: "/CRHeBo",
}


def make_standard_font(pdf: Pdf, base_font: str) -> Dictionary:
    """Create an indirect Type1 font dictionary for a Standard-14 face.

    Args:
        pdf: Document the font belongs to.
        base_font: "Helvetica" or "Helvetica-Bold".

    Returns:
        Indirect font dictionary using WinAnsiEncoding.
    """
    return pdf.make_indirect(
        Dictionary(
            Type=Name.Font,
            Subtype=Name.Type1,
            BaseFont=Name("/" + base_font),
            Encoding=Name.WinAnsiEncoding,
        )
    )


class StandardFonts:
    """Per-document cache of the two Helvetica font dictionaries."""

    def __init__(self, pdf: Pdf):
        self._pdf = pdf
        self._fonts: dict[str, Dictionary] = {}

    def get(self, base_font: str) -> Dictionary:
        font = self._fonts.get(base_font)
        if font is None:
            font = make_standard_font(self._pdf, base_font)
            self._fonts[base_font] = font
            logger.debug("Created font dictionary for %s", base_font)
        return font

    def resource_name(self, base_font: str) -> Name:
        return Name(RESOURCE_NAMES[base_font])
