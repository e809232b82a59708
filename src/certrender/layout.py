# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Flow layout primitives for documents built without a template.

A ``FlowLayout`` owns a cursor (current page, current y) and draws labelled
boxes from the top of the page downwards.  Every primitive moves the cursor
down; only ``ensure_space`` moves it back up, and only onto a fresh page.

Empty values show nothing in a final document and a grey placeholder in a
preview, so a reviewer can see which boxes are still to be filled.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from pikepdf import Pdf

from .canvas import (
    A4_PORTRAIT,
    LABEL_GREY,
    PLACEHOLDER_GREY,
    STROKE_GREY,
    WHITE,
    PageCanvas,
)
from .fonts import HELVETICA, HELVETICA_BOLD, StandardFonts, measurer
from .report import RenderReport
from .text import clamp_text, split_lines, to_ascii

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"

DEFAULT_MARGIN = 36.0
FIELD_HEIGHT = 26.0
GUTTER = 12.0
LABEL_SIZE = 9.0
VALUE_SIZE = 10.0
VALUE_INSET_X = 6.0
VALUE_INSET_Y = 8.0
BOX_SPACING = 10.0
PARAGRAPH_LEADING = 12.0
PARAGRAPH_TOP = 14.0
PARAGRAPH_BOTTOM = 4.0

_value_width = measurer(HELVETICA, VALUE_SIZE)
_label_width = measurer(HELVETICA_BOLD, LABEL_SIZE)


@dataclass(frozen=True)
class FieldEntry:
    """One labelled box in a field row.

    ``key`` names the field-map key the value came from; it is only used to
    report truncation.
    """

    label: str
    value: str
    width: float
    height: float = FIELD_HEIGHT
    key: str | None = None


class FlowLayout:
    """Top-down page layout with a moving cursor.

    Args:
        pdf: Document receiving the pages.
        fonts: Per-document font cache.
        preview_mode: Draw placeholders in empty boxes.
        report: Completeness report to record truncation in.
        page_size: (width, height) of new pages.
        margin: Page margin on every side.
    """

    def __init__(
        self,
        pdf: Pdf,
        fonts: StandardFonts,
        *,
        preview_mode: bool = False,
        report: RenderReport | None = None,
        page_size: tuple[float, float] = A4_PORTRAIT,
        margin: float = DEFAULT_MARGIN,
    ):
        self.pdf = pdf
        self.fonts = fonts
        self.preview_mode = preview_mode
        self.report = report if report is not None else RenderReport()
        self.page_width, self.page_height = page_size
        self.margin = margin
        self.canvases: list[PageCanvas] = []
        self.canvas: PageCanvas = self.new_page()
        self.y = self.top

    @property
    def top(self) -> float:
        return self.page_height - self.margin

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def page_count(self) -> int:
        return len(self.canvases)

    def new_page(self) -> PageCanvas:
        """Append a blank page and make it current."""
        page = self.pdf.add_blank_page(page_size=(self.page_width, self.page_height))
        canvas = PageCanvas(self.pdf, page, self.fonts)
        self.canvases.append(canvas)
        self.canvas = canvas
        self.y = self.top
        logger.debug("Started flow page %d", len(self.canvases))
        return canvas

    def ensure_space(
        self, min_y: float, on_break: Callable[[], None] | None = None
    ) -> bool:
        """Start a new page when the cursor has reached min_y.

        Args:
            min_y: Lowest cursor position that still leaves room for the
                next block.
            on_break: Called after the page break, typically to draw a
                "Continued" heading.

        Returns:
            True if a page break happened.
        """
        if self.y > min_y:
            return False
        self.new_page()
        if on_break is not None:
            on_break()
        return True

    def heading(self, text: str, size: float = 12.0) -> None:
        self.canvas.text(self.margin, self.y, to_ascii(text), size=size, bold=True)
        self.y -= size + 6

    def note(self, text: str, size: float = 10.0, color=LABEL_GREY) -> None:
        """Draw a free line of text at the cursor."""
        self.canvas.text(self.margin, self.y, to_ascii(text), size=size, color=color)
        self.y -= size + 8

    def _fit_value(self, value: str, max_width: float, key: str | None) -> str:
        text = to_ascii(value)
        fitted = clamp_text(text, max_width, _value_width)
        if fitted != text and key:
            self.report.record_truncated(key)
        return fitted

    def _draw_value(self, x: float, y: float, text: str, bold: bool = False) -> None:
        if text:
            self.canvas.text(x, y, text, size=VALUE_SIZE, bold=bold)
        elif self.preview_mode:
            self.canvas.text(
                x, y, PLACEHOLDER, size=VALUE_SIZE, color=PLACEHOLDER_GREY
            )

    def _draw_box(
        self, x: float, label_y: float, entry: FieldEntry, bold: bool = False
    ) -> None:
        label = clamp_text(to_ascii(entry.label), entry.width, _label_width)
        self.canvas.text(x, label_y, label, size=LABEL_SIZE, bold=True)
        box_y = label_y - entry.height
        self.canvas.rect(x, box_y, entry.width, entry.height, STROKE_GREY, WHITE)
        text = self._fit_value(entry.value, entry.width - 2 * VALUE_INSET_X, entry.key)
        self._draw_value(x + VALUE_INSET_X, box_y + VALUE_INSET_Y, text, bold=bold)

    def field_box(
        self,
        label: str,
        value: str,
        width: float | None = None,
        height: float = FIELD_HEIGHT,
        key: str | None = None,
    ) -> None:
        """Draw a label above a bordered box holding one line of value."""
        entry = FieldEntry(label, value, width or self.content_width, height, key)
        self._draw_box(self.margin, self.y, entry)
        self.y -= height + BOX_SPACING

    def field_row(self, entries: Sequence[FieldEntry], spacing: float = 4.0) -> None:
        """Draw boxes left to right on one baseline.

        The cursor advances once, by the tallest box plus spacing.
        """
        if not entries:
            return
        x = self.margin
        for entry in entries:
            self._draw_box(x, self.y, entry)
            x += entry.width + GUTTER
        self.y -= max(entry.height for entry in entries) + spacing

    def paragraph_box(
        self,
        label: str,
        text: str,
        height: float = 52.0,
        key: str | None = None,
    ) -> None:
        """Draw a full-width box of pre-split lines.

        Lines are taken as given (no re-wrapping).  Lines that do not fit
        in the box are dropped.
        """
        label_text = to_ascii(label)
        self.canvas.text(self.margin, self.y, label_text, size=LABEL_SIZE, bold=True)
        box_y = self.y - height
        self.canvas.rect(
            self.margin, box_y, self.content_width, height, STROKE_GREY, WHITE
        )

        lines = split_lines(text or "")
        max_width = self.content_width - 2 * VALUE_INSET_X
        text_y = box_y + height - PARAGRAPH_TOP
        drawn = 0
        for line in lines:
            if text_y < box_y + PARAGRAPH_BOTTOM:
                break
            fitted = self._fit_value(line, max_width, key)
            self.canvas.text(
                self.margin + VALUE_INSET_X, text_y, fitted, size=VALUE_SIZE
            )
            text_y -= PARAGRAPH_LEADING
            drawn += 1
        if drawn < len(lines) and key:
            logger.debug("Dropped %d lines of %s", len(lines) - drawn, key)
            self.report.record_truncated(key)
        if not lines and self.preview_mode:
            self.canvas.text(
                self.margin + VALUE_INSET_X,
                box_y + height / 2 - 4,
                PLACEHOLDER,
                size=VALUE_SIZE,
                color=PLACEHOLDER_GREY,
            )
        self.y = box_y - BOX_SPACING

    def check_grid(
        self,
        items: Sequence[tuple[str, str]],
        columns: int = 2,
        row_height: float = 26.0,
        box_height: float = 18.0,
    ) -> None:
        """Draw short label/answer pairs in a grid of small boxes."""
        if not items:
            return
        column_width = (self.content_width - GUTTER * (columns - 1)) / columns
        for idx, (label, value) in enumerate(items):
            row_y = self.y - (idx // columns) * row_height
            x = self.margin + (idx % columns) * (column_width + GUTTER)
            self.canvas.text(x, row_y, to_ascii(label), size=LABEL_SIZE)
            box_y = row_y - box_height - 2
            self.canvas.rect(x, box_y, column_width, box_height, STROKE_GREY, WHITE)
            text = self._fit_value(value, column_width - 2 * VALUE_INSET_X, None)
            self._draw_value(x + VALUE_INSET_X, box_y + 5, text, bold=True)
        rows = -(-len(items) // columns)
        self.y -= rows * row_height + BOX_SPACING

    def finish(self) -> None:
        """Flush every page's drawing operators."""
        for canvas in self.canvases:
            canvas.flush()
