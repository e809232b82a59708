# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Appearance streams for filled text fields and checkboxes.

Viewers cache widget appearances, so after values are written every text
field and checkbox gets a freshly built /AP /N.  Text is set in Helvetica
whatever font the template's /DA names; only the size and colour from the
/DA are kept.
"""

import logging
import re

from pikepdf import Array, Dictionary, Name, Pdf

from ..fonts import HELVETICA, StandardFonts, encode_for_content_stream, measurer
from ..fonts.metrics import get_ascent_descent
from ..text import wrap_paragraphs
from ..utils import resolve_indirect as _resolve
from .fields import FF_COMB, FF_MULTILINE, get_field_flags, get_inheritable

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 10.0
MAX_AUTO_FONT_SIZE = 12.0
MIN_AUTO_FONT_SIZE = 4.0

# Font name and size from a DA string like "/Helv 12 Tf"
_DA_FONT_RE = re.compile(r"/(\S+)\s+([\d.]+)\s+Tf")


def parse_da_string(da) -> tuple[str | None, float, str]:
    """Parse a /DA (Default Appearance) string.

    Returns:
        Tuple of (font_name, font_size, color_ops).  A font size of 0.0
        means auto-size.
    """
    if da is None:
        return None, DEFAULT_FONT_SIZE, ""

    da_str = str(da)
    if not da_str.strip():
        return None, DEFAULT_FONT_SIZE, ""

    font_name = None
    font_size = DEFAULT_FONT_SIZE
    m = _DA_FONT_RE.search(da_str)
    if m:
        font_name = m.group(1)
        try:
            font_size = float(m.group(2))
        except ValueError:
            font_size = DEFAULT_FONT_SIZE

    color_ops = _DA_FONT_RE.sub("", da_str).strip()
    return font_name, font_size, color_ops


def _color_array_to_ops(arr, stroke=False) -> str:
    """Convert a /MK colour array to content stream operators."""
    if arr is None:
        return ""
    try:
        components = [float(c) for c in arr]
    except (TypeError, ValueError):
        return ""

    n = len(components)
    if n == 1:
        op = "G" if stroke else "g"
        return f"{components[0]:.4g} {op}"
    if n == 3:
        op = "RG" if stroke else "rg"
        return f"{components[0]:.4g} {components[1]:.4g} {components[2]:.4g} {op}"
    if n == 4:
        op = "K" if stroke else "k"
        return " ".join(f"{c:.4g}" for c in components) + f" {op}"
    return ""


def _get_rect_dimensions(annot) -> tuple[float, float]:
    rect = annot.get("/Rect")
    if rect is None or len(rect) != 4:
        return 0.0, 0.0
    x1, y1, x2, y2 = (float(v) for v in rect)
    return abs(x2 - x1), abs(y2 - y1)


def _get_mk(annot):
    mk = annot.get("/MK")
    return _resolve(mk) if mk is not None else None


def _get_border_width(annot) -> float:
    bs = annot.get("/BS")
    if bs is not None:
        bw = _resolve(bs).get("/W")
        if bw is not None:
            return float(bw)
    border = annot.get("/Border")
    if border is not None and len(border) >= 3:
        return float(border[2])
    return 1.0


def _build_border_background(w: float, h: float, annot) -> list[str]:
    """Operators for the /MK background fill and a solid border."""
    parts: list[str] = []
    mk = _get_mk(annot)
    if mk is not None:
        bg_ops = _color_array_to_ops(mk.get("/BG"))
        if bg_ops:
            parts.append(bg_ops)
            parts.append(f"0 0 {w:.4g} {h:.4g} re f")

        border_width = _get_border_width(annot)
        bc_ops = _color_array_to_ops(mk.get("/BC"), stroke=True)
        if bc_ops and border_width > 0:
            hw = border_width / 2.0
            parts.append(f"{border_width:.4g} w")
            parts.append(bc_ops)
            parts.append(
                f"{hw:.4g} {hw:.4g} {w - border_width:.4g} {h - border_width:.4g} re S"
            )
    return parts


def _make_form_stream(pdf: Pdf, w: float, h: float, content: bytes, resources=None):
    """Create a Form XObject stream with the given content."""
    stream = pdf.make_stream(content)
    stream[Name.Type] = Name.XObject
    stream[Name.Subtype] = Name.Form
    stream[Name.BBox] = Array([0, 0, w, h])
    stream[Name.Resources] = resources if resources is not None else Dictionary()
    return stream


def _compute_text_y(field_height: float, font_size: float, margin: float) -> float:
    """Baseline that centres the text vertically using Helvetica metrics."""
    ascent, descent = get_ascent_descent(HELVETICA)
    asc_pt = ascent * font_size / 1000.0
    desc_pt = abs(descent) * font_size / 1000.0
    ty = (field_height - asc_pt - desc_pt) / 2.0 + desc_pt
    return max(ty, margin)


def _auto_font_size(text: str, avail_w: float, avail_h: float) -> float:
    """Largest size (capped) at which one line of text fits the field."""
    size = min(MAX_AUTO_FONT_SIZE, avail_h * 0.8)
    while size > MIN_AUTO_FONT_SIZE and measurer(HELVETICA, size)(text) > avail_w:
        size -= 0.5
    return max(size, MIN_AUTO_FONT_SIZE)


def _decode_value(value) -> str:
    if value is None:
        return ""
    return str(value)


def build_text_appearance(pdf: Pdf, fonts: StandardFonts, annot, field_obj, acroform):
    """Build the normal appearance for a text field widget.

    Args:
        pdf: Document owning the widget.
        fonts: Font cache providing the Helvetica dictionary.
        annot: Widget annotation.
        field_obj: Field dictionary holding /V.
        acroform: /AcroForm dictionary for inherited defaults.

    Returns:
        Form XObject stream, or None when the widget has no area.
    """
    w, h = _get_rect_dimensions(annot)
    if w <= 0 or h <= 0:
        return None

    _, font_size, color_ops = parse_da_string(
        get_inheritable(annot, "/DA", acroform)
    )
    text = _decode_value(get_inheritable(field_obj, "/V", acroform))
    q = get_inheritable(annot, "/Q", acroform)
    alignment = int(q) if q is not None else 0
    flags = get_field_flags(field_obj, acroform)

    margin = max(_get_border_width(annot) + 1, 2)
    avail_w = w - 2 * margin
    avail_h = h - 2 * margin

    multiline = bool(flags & FF_MULTILINE) and not flags & FF_COMB
    if font_size == 0:
        font_size = (
            DEFAULT_FONT_SIZE if multiline else _auto_font_size(text, avail_w, avail_h)
        )
    measure = measurer(HELVETICA, font_size)

    if multiline:
        lines = wrap_paragraphs(text, avail_w, measure)
        ascent, _ = get_ascent_descent(HELVETICA)
        first_y = h - margin - ascent * font_size / 1000.0
        leading = font_size * 1.2
    else:
        lines = [text.replace("\r", " ").replace("\n", " ")]
        first_y = _compute_text_y(h, font_size, margin)
        leading = 0.0

    resource = fonts.resource_name(HELVETICA)
    parts = _build_border_background(w, h, annot)
    parts.append("/Tx BMC")
    parts.append("q")
    parts.append(f"{margin:.4g} {margin:.4g} {avail_w:.4g} {avail_h:.4g} re W n")
    parts.append("BT")
    parts.append(color_ops or "0 g")
    parts.append(f"{resource} {font_size:.4g} Tf")

    prev_x = 0.0
    prev_y = 0.0
    for i, line in enumerate(lines):
        line_w = measure(line)
        if alignment == 1:
            lx = margin + max(0.0, (avail_w - line_w) / 2)
        elif alignment == 2:
            lx = margin + max(0.0, avail_w - line_w)
        else:
            lx = margin
        ly = first_y - i * leading
        parts.append(f"{lx - prev_x:.4g} {ly - prev_y:.4g} Td")
        encoded = encode_for_content_stream(line).decode("latin-1")
        parts.append(f"({encoded}) Tj")
        prev_x, prev_y = lx, ly

    parts.append("ET")
    parts.append("Q")
    parts.append("EMC")

    font_dict = Dictionary()
    font_dict[resource] = fonts.get(HELVETICA)
    resources = Dictionary(Font=font_dict)
    content = "\n".join(parts).encode("latin-1")
    return _make_form_stream(pdf, w, h, content, resources)


def get_on_state_name(annot) -> str:
    """The "on" state of a checkbox: first non-Off /AP /N key, else /AS,
    else "Yes"."""
    ap = annot.get("/AP")
    if ap is not None:
        n = _resolve(ap).get("/N")
        if isinstance(n, Dictionary):
            for key in n.keys():
                if str(key) != "/Off":
                    return str(key).lstrip("/")

    as_val = annot.get("/AS")
    if as_val is not None and str(as_val) != "/Off":
        return str(as_val).lstrip("/")
    return "Yes"


def build_checkbox_appearance(pdf: Pdf, annot):
    """Build the Off / on appearance state dictionary for a checkbox."""
    w, h = _get_rect_dimensions(annot)
    w = max(w, 12)
    h = max(h, 12)

    mk = _get_mk(annot)
    bc_ops = _color_array_to_ops(mk.get("/BC"), stroke=True) if mk else ""
    bg_ops = _color_array_to_ops(mk.get("/BG")) if mk else ""
    border_width = _get_border_width(annot)
    hw = border_width / 2.0

    box: list[str] = []
    if bg_ops:
        box.append(bg_ops)
        box.append(f"0 0 {w:.4g} {h:.4g} re f")
    if border_width > 0:
        box.append(f"{border_width:.4g} w")
        box.append(bc_ops or "0 G")
        box.append(
            f"{hw:.4g} {hw:.4g} {w - border_width:.4g} {h - border_width:.4g} re S"
        )

    margin = max(border_width + 1, 3)
    tick = [
        "0 G",
        f"{max(1, border_width):.4g} w",
        f"{margin:.4g} {h * 0.5:.4g} m "
        f"{w * 0.4:.4g} {margin:.4g} l "
        f"{w - margin:.4g} {h - margin:.4g} l S",
    ]

    off_stream = _make_form_stream(pdf, w, h, "\n".join(box).encode("latin-1"))
    on_stream = _make_form_stream(
        pdf, w, h, "\n".join(box + tick).encode("latin-1")
    )

    result = Dictionary()
    result[Name("/Off")] = off_stream
    result[Name("/" + get_on_state_name(annot))] = on_stream
    return result
