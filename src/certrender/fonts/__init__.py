# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font metrics and font dictionaries for drawn text."""

from .metrics import (
    HELVETICA,
    HELVETICA_BOLD,
    canonical_font_name,
    encode_for_content_stream,
    get_ascent_descent,
    get_text_width,
    measurer,
)
from .standard import StandardFonts, make_standard_font

__all__ = [
    "HELVETICA",
    "HELVETICA_BOLD",
    "StandardFonts",
    "canonical_font_name",
    "encode_for_content_stream",
    "get_ascent_descent",
    "get_text_width",
    "make_standard_font",
    "measurer",
]
