# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Glyph metrics for the Standard-14 Helvetica faces.

Certificates are drawn exclusively with Helvetica and Helvetica-Bold under
WinAnsiEncoding, so these two AFM width tables are all the renderer needs to
measure, clamp and wrap text.  Widths are in 1/1000 of the font size.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

HELVETICA = "Helvetica"
HELVETICA_BOLD = "Helvetica-Bold"

# ---------------------------------------------------------------------------
# WinAnsiEncoding <-> Unicode mapping (positions 128-159 differ from Latin-1)
# ---------------------------------------------------------------------------

_WIN_ANSI_TO_UNICODE: dict[int, int] = {
    128: 0x20AC, 130: 0x201A, 131: 0x0192, 132: 0x201E, 133: 0x2026,
    134: 0x2020, 135: 0x2021, 136: 0x02C6, 137: 0x2030, 138: 0x0160,
    139: 0x2039, 140: 0x0152, 142: 0x017D, 145: 0x2018, 146: 0x2019,
    147: 0x201C, 148: 0x201D, 149: 0x2022, 150: 0x2013, 151: 0x2014,
    152: 0x02DC, 153: 0x2122, 154: 0x0161, 155: 0x203A, 156: 0x0153,
    158: 0x017E, 159: 0x0178,
}  # fmt: skip

_UNICODE_TO_WIN_ANSI: dict[int, int] = {v: k for k, v in _WIN_ANSI_TO_UNICODE.items()}


def unicode_to_winansi(cp: int) -> int | None:
    """Map a Unicode code point to a WinAnsiEncoding byte (None if unmappable)."""
    if cp < 128 or 160 <= cp <= 255:
        return cp
    return _UNICODE_TO_WIN_ANSI.get(cp)


# ---------------------------------------------------------------------------
# AFM widths, WinAnsi codes 32..255 (None where the code has no glyph)
# ---------------------------------------------------------------------------

_FIRST_CODE = 32

# fmt: off
_HELVETICA_RUN: list[int | None] = [
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584,
    278, 333, 278, 278, 556, 556, 556, 556, 556, 556, 556, 556,
    556, 556, 278, 278, 584, 584, 584, 556, 1015, 667, 667, 722,
    722, 611, 556, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278,
    278, 278, 469, 556, 333, 556, 556, 500, 556, 556, 278, 556,
    556, 222, 222, 500, 222, 833, 556, 556, 556, 556, 333, 500,
    278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584, None,
    556, None, 222, 556, 333, 1000, 556, 556, 333, 1000, 667, 333,
    1000, None, 611, None, None, 222, 222, 333, 333, 350, 556, 1000,
    333, 1000, 500, 333, 944, None, 500, 667, 278, 333, 556, 556,
    556, 556, 260, 556, 333, 737, 370, 556, 584, 333, 737, 333,
    400, 584, 333, 333, 333, 556, 537, 278, 333, 333, 365, 556,
    834, 834, 834, 611, 667, 667, 667, 667, 667, 667, 1000, 722,
    611, 611, 611, 611, 278, 278, 278, 278, 722, 722, 778, 778,
    778, 778, 778, 584, 778, 722, 722, 722, 722, 667, 667, 611,
    556, 556, 556, 556, 556, 556, 889, 500, 556, 556, 556, 556,
    278, 278, 278, 278, 556, 556, 556, 556, 556, 556, 556, 584,
    611, 556, 556, 556, 556, 500, 556, 500,
]

_HELVETICA_BOLD_RUN: list[int | None] = [
    278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584,
    278, 333, 278, 278, 556, 556, 556, 556, 556, 556, 556, 556,
    556, 556, 333, 333, 584, 584, 584, 611, 975, 722, 722, 722,
    722, 667, 611, 778, 722, 278, 556, 722, 611, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 333,
    278, 333, 584, 556, 333, 556, 611, 556, 611, 556, 333, 611,
    611, 278, 278, 556, 278, 889, 611, 611, 611, 611, 389, 556,
    333, 611, 556, 778, 556, 556, 500, 389, 280, 389, 584, None,
    556, None, 278, 556, 500, 1000, 556, 556, 333, 1000, 667, 333,
    1000, None, 611, None, None, 278, 278, 500, 500, 350, 556, 1000,
    333, 1000, 556, 333, 944, None, 500, 667, 278, 333, 556, 556,
    556, 556, 280, 556, 333, 737, 370, 556, 584, 333, 737, 333,
    400, 584, 333, 333, 333, 611, 556, 278, 333, 333, 365, 556,
    834, 834, 834, 611, 722, 722, 722, 722, 722, 722, 1000, 722,
    667, 667, 667, 667, 278, 278, 278, 278, 722, 722, 778, 778,
    778, 778, 778, 584, 778, 722, 722, 722, 722, 667, 667, 611,
    556, 556, 556, 556, 556, 556, 889, 556, 556, 556, 556, 556,
    278, 278, 278, 278, 611, 611, 611, 611, 611, 611, 611, 584,
    611, 611, 611, 611, 611, 556, 611, 556,
]
# fmt: on


def _widths_from_run(run: list[int | None]) -> dict[int, int]:
    return {
        _FIRST_CODE + offset: width
        for offset, width in enumerate(run)
        if width is not None
    }


_FACES: dict[str, dict] = {
    HELVETICA: {
        "widths": _widths_from_run(_HELVETICA_RUN),
        "ascent": 718,
        "descent": -207,
        "bbox": (-166, -225, 1000, 931),
        "default_width": 278,
    },
    HELVETICA_BOLD: {
        "widths": _widths_from_run(_HELVETICA_BOLD_RUN),
        "ascent": 718,
        "descent": -207,
        "bbox": (-170, -228, 1003, 962),
        "default_width": 278,
    },
}

# Resource names used by AcroForm /DA strings and common substitutes
_FONT_ALIASES: dict[str, str] = {
    "Helv": HELVETICA,
    "HeBo": HELVETICA_BOLD,
    "Arial": HELVETICA,
    "ArialMT": HELVETICA,
    "Arial,Bold": HELVETICA_BOLD,
    "Arial-BoldMT": HELVETICA_BOLD,
    "Helvetica-Oblique": HELVETICA,
    "Helvetica-BoldOblique": HELVETICA_BOLD,
}


def canonical_font_name(font_name: str | None) -> str:
    """Return the Helvetica face a font or resource name stands for.

    Unknown names measure as regular Helvetica.
    """
    if font_name is None:
        return HELVETICA
    name = font_name.lstrip("/")
    if name in _FACES:
        return name
    return _FONT_ALIASES.get(name, HELVETICA)


def get_text_width(
    text: str, font_name: str | None = HELVETICA, font_size: float = 12.0
) -> float:
    """Calculate the width of a text string in PDF points.

    Args:
        text: The text string to measure.
        font_name: Base font or resource name (e.g. "Helv", "Helvetica-Bold").
        font_size: Font size in points.

    Returns:
        Width in PDF points (font_size * sum_of_glyph_widths / 1000).
    """
    if not text:
        return 0.0

    face = _FACES[canonical_font_name(font_name)]
    widths = face["widths"]
    default_w = face["default_width"]

    total = 0
    for ch in text:
        wa = unicode_to_winansi(ord(ch))
        total += widths.get(wa, default_w) if wa is not None else default_w

    return total * font_size / 1000.0


def get_ascent_descent(font_name: str | None = HELVETICA) -> tuple[float, float]:
    """Return (ascent, descent) in 1/1000 units; descent is negative."""
    face = _FACES[canonical_font_name(font_name)]
    return float(face["ascent"]), float(face["descent"])


def measurer(
    font_name: str | None = HELVETICA, font_size: float = 10.0
) -> Callable[[str], float]:
    """Return a single-argument width function for the given face and size."""

    def measure(text: str) -> float:
        return get_text_width(text, font_name, font_size)

    return measure


def encode_for_content_stream(text: str) -> bytes:
    """Encode a Python string for a PDF content stream Tj operator.

    Maps Unicode characters to WinAnsiEncoding bytes, escaping
    parentheses and backslashes.  Unmappable characters become '?'.
    """
    out = bytearray()
    for ch in text:
        wa = unicode_to_winansi(ord(ch))
        byte = wa if wa is not None else 0x3F

        if byte == 0x5C:  # backslash
            out.extend(b"\\\\")
        elif byte == 0x28:  # (
            out.extend(b"\\(")
        elif byte == 0x29:  # )
            out.extend(b"\\)")
        elif byte in (0x0A, 0x0D):
            out.append(0x20)
        else:
            out.append(byte)

    return bytes(out)
