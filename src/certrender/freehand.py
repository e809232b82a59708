# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Freehand strategy: static chrome and text at fixed coordinates.

Used for pages that carry no usable form widgets.  All positions come from
the kind's coordinate table; nothing here knows about a particular
certificate.
"""

import logging
from collections.abc import Collection, Iterable, Mapping

from .canvas import BLACK, PLACEHOLDER_GREY, PageCanvas
from .fonts import HELVETICA, HELVETICA_BOLD, measurer
from .kinds.base import Chrome, ChromeLine, ChromeRect, ChromeText, FieldGeometry
from .layout import PLACEHOLDER
from .report import RenderReport
from .text import clamp_text, to_ascii, wrap_text_ex
from .values import format_boolean, is_truthy, to_text

logger = logging.getLogger(__name__)

MARK = "X"

Offset = tuple[float, float]


def draw_chrome(
    canvas: PageCanvas, chrome: Iterable[Chrome], offset: Offset = (0.0, 0.0)
) -> None:
    """Draw static labels, outlines and rules."""
    dx, dy = offset
    for item in chrome:
        if isinstance(item, ChromeText):
            canvas.text(
                item.x + dx, item.y + dy, to_ascii(item.text), item.size, item.bold
            )
        elif isinstance(item, ChromeRect):
            canvas.rect(
                item.x + dx,
                item.y + dy,
                item.width,
                item.height,
                stroke=BLACK,
                line_width=item.line_width,
            )
        elif isinstance(item, ChromeLine):
            canvas.line(
                item.x1 + dx,
                item.y1 + dy,
                item.x2 + dx,
                item.y2 + dy,
                color=BLACK,
                line_width=item.line_width,
            )


def fit_lines(text: str, geometry: FieldGeometry) -> tuple[list[str], bool]:
    """Clamp or wrap text to a geometry.

    Returns:
        Tuple of (lines, truncated).
    """
    font = HELVETICA_BOLD if geometry.bold else HELVETICA
    measure = measurer(font, geometry.font_size)
    if geometry.max_lines:
        return wrap_text_ex(text, geometry.width, measure, geometry.max_lines)
    if geometry.width <= 0:
        return [text], False
    fitted = clamp_text(text, geometry.width, measure)
    return ([fitted] if fitted else []), fitted != text


def draw_text_at(
    canvas: PageCanvas,
    geometry: FieldGeometry,
    text: str,
    offset: Offset = (0.0, 0.0),
) -> bool:
    """Draw sanitized text at a geometry.

    Returns:
        True if the text had to be shortened.
    """
    lines, truncated = fit_lines(to_ascii(text), geometry)
    dx, dy = offset
    for i, line in enumerate(lines):
        canvas.text(
            geometry.x + dx,
            geometry.y + dy - i * geometry.leading,
            line,
            size=geometry.font_size,
            bold=geometry.bold,
        )
    return truncated


def draw_fields(
    canvas: PageCanvas,
    coordinates: Mapping[str, FieldGeometry],
    field_map: Mapping[str, object],
    report: RenderReport,
    *,
    offset: Offset = (0.0, 0.0),
    boolean_keys: Collection[str] = (),
    preview_mode: bool = False,
) -> int:
    """Draw every key of the coordinate table.

    Args:
        canvas: Page to draw on.
        coordinates: Key to geometry.
        field_map: Prepared field values.
        report: Completeness report.
        offset: (dx, dy) added to every coordinate.
        boolean_keys: Keys rendered as yes/no answers.
        preview_mode: Mark empty positions with a grey placeholder.

    Returns:
        Number of keys drawn.
    """
    dx, dy = offset
    drawn = 0
    for key, geometry in coordinates.items():
        raw = field_map.get(key)
        if geometry.mark:
            if not is_truthy(raw):
                report.record_blank(key)
                continue
            canvas.text(
                geometry.x + dx,
                geometry.y + dy,
                MARK,
                size=geometry.font_size,
                bold=True,
            )
            report.record_written(key)
            drawn += 1
            continue

        text = format_boolean(raw) if key in boolean_keys else to_text(raw)
        if not text:
            report.record_blank(key)
            if preview_mode:
                canvas.text(
                    geometry.x + dx,
                    geometry.y + dy,
                    PLACEHOLDER,
                    size=geometry.font_size,
                    color=PLACEHOLDER_GREY,
                )
            continue

        if draw_text_at(canvas, geometry, text, offset):
            logger.debug("Shortened %s to fit %.0fpt", key, geometry.width)
            report.record_truncated(key)
        report.record_written(key)
        drawn += 1
    return drawn
