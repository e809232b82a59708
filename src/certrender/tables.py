# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Table pager: repeating rows spread over as many pages as they need.

The table picks its strategy independently of the rest of the document.
When the template has widgets for the first row, rows on the first page
are written into those widgets and rows on continuation pages are drawn
at the same widget rectangles on a widget-free copy of the template page.
Otherwise rows are drawn as text in a freehand grid.  Either way no row is
ever dropped.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence

from pikepdf import Pdf

from .canvas import DocumentCanvas, PageCanvas
from .fonts import HELVETICA, measurer
from .forms import FormFiller, FormIndex
from .freehand import draw_chrome
from .kinds.base import Chrome, TableSpec
from .report import RenderReport
from .text import clamp_text, to_ascii
from .values import destinations, resolve

logger = logging.getLogger(__name__)

FORM = "form"
FREEHAND = "freehand"

# Padding inside a widget rectangle for rows drawn on continuation pages.
_CELL_INSET = 2.0


def chunk_rows(rows: Sequence, size: int) -> list[Sequence]:
    """Split rows into consecutive pages of at most ``size`` rows."""
    if size <= 0:
        raise ValueError("max rows per page must be positive")
    return [rows[i : i + size] for i in range(0, len(rows), size)]


def select_table_strategy(spec: TableSpec, index: FormIndex | None) -> str:
    """"form" if any widget of the first row exists on the template."""
    if index is None or not spec.row_fields:
        return FREEHAND
    first_row = [
        name
        for field_name in spec.field_names(1).values()
        for name in destinations(field_name)
    ]
    return FORM if index.has_any(first_row) else FREEHAND


class TablePager:
    """Renders the repeating table of one document.

    Args:
        spec: Table geometry and field names.
        canvases: Canvases of the document being rendered.
        report: Completeness report.
        strategy: FORM or FREEHAND.
        filler: Form filler, required for the form strategy.
        template: Template document that continuation pages are copied
            from, or None to continue on blank pages.
        page_size: Size of blank continuation pages.
        chrome: Static chrome redrawn on freehand continuation pages.
        offset: (dx, dy) added to freehand coordinates.
    """

    def __init__(
        self,
        spec: TableSpec,
        canvases: DocumentCanvas,
        report: RenderReport,
        *,
        strategy: str = FREEHAND,
        filler: FormFiller | None = None,
        template: Pdf | None = None,
        page_size: tuple[float, float] | None = None,
        chrome: Iterable[Chrome] = (),
        offset: tuple[float, float] = (0.0, 0.0),
    ):
        if strategy == FORM and filler is None:
            raise ValueError("form table strategy needs a form filler")
        self.spec = spec
        self.canvases = canvases
        self.report = report
        self.strategy = strategy
        self.filler = filler
        self.template = template
        self.page_size = page_size
        self.chrome = list(chrome)
        self.offset = offset
        self._measure = measurer(HELVETICA, spec.font_size)

    def render(self, rows: Sequence[Mapping[str, object]]) -> list[int]:
        """Render every row, adding continuation pages as needed.

        Returns:
            Number of rows on each table page.
        """
        slots = self._row_slots()
        counts: list[int] = []
        position = 0
        for page_number, page_rows in enumerate(chunk_rows(rows, len(slots))):
            if page_number == 0:
                canvas = self.canvases.page(self._first_page_index())
            else:
                canvas = self._continuation_page()
            for slot, row in zip(slots, page_rows):
                cells = self.spec.cells(position, row)
                if self.strategy == FORM and page_number == 0:
                    self._write_form_row(slot, cells, position)
                elif self.strategy == FORM:
                    self._draw_form_row(canvas, slot, cells, position)
                else:
                    self._draw_freehand_row(canvas, slot, cells, position)
                position += 1
            counts.append(len(page_rows))

        self.report.table_strategy = self.strategy
        self.report.table_pages = counts
        logger.debug("Table rows per page: %s", counts)
        return counts

    def _row_slots(self) -> list[int]:
        """Zero-based slots a page can hold rows in.

        On the form path only slots with at least one placed widget count,
        so a template with fewer row widgets gets shorter pages instead of
        losing rows.
        """
        slots = list(range(self.spec.max_rows_per_page))
        if self.strategy != FORM:
            return slots
        index = self.filler.index
        usable = [
            slot
            for slot in slots
            if any(
                index.rect_of(name) is not None
                for field_name in self.spec.field_names(slot + 1).values()
                for name in destinations(field_name)
            )
        ]
        if not usable:
            logger.warning("Template has no placed table widgets, drawing rows")
            self.strategy = FREEHAND
            return slots
        if len(usable) < len(slots):
            logger.warning(
                "Template has widgets for %d of %d table rows per page",
                len(usable),
                len(slots),
            )
        return usable

    def _first_page_index(self) -> int:
        if self.strategy != FORM:
            return 0
        for field_name in self.spec.field_names(1).values():
            for name in destinations(field_name):
                entry = self.filler.index.get(name)
                if entry is not None and entry.page_index is not None:
                    return entry.page_index
        return 0

    def _continuation_page(self) -> PageCanvas:
        if self.template is not None:
            canvas = self.canvases.add_template_page(
                self.template, self._first_page_index()
            )
        else:
            canvas = self.canvases.add_blank_page(self.page_size)
        if self.strategy == FREEHAND:
            draw_chrome(canvas, self.chrome, self.offset)
        logger.debug("Started table continuation page")
        return canvas

    def _write_form_row(
        self, slot: int, cells: Mapping[str, str], position: int
    ) -> None:
        for key, field_name in self.spec.field_names(slot + 1).items():
            value = cells.get(key, "")
            self.filler.write(f"rows[{position}].{key}", field_name, value)

    def _draw_form_row(
        self, canvas: PageCanvas, slot: int, cells: Mapping[str, str], position: int
    ) -> None:
        index = self.filler.index
        for key, field_name in self.spec.field_names(slot + 1).items():
            targets = destinations(field_name)
            for name, line in zip(targets, resolve(cells.get(key, ""), targets)):
                rect = index.rect_of(name)
                if rect is None or not line:
                    continue
                x, y, w, h = rect
                size = min(self.spec.font_size, max(h - 2 * _CELL_INSET, 4.0))
                measure = measurer(HELVETICA, size)
                text = to_ascii(line)
                fitted = clamp_text(text, w - 2 * _CELL_INSET, measure)
                if fitted != text:
                    self.report.record_truncated(f"rows[{position}].{key}")
                canvas.text(
                    x + _CELL_INSET, y + (h - size * 0.7) / 2, fitted, size=size
                )

    def _draw_freehand_row(
        self, canvas: PageCanvas, slot: int, cells: Mapping[str, str], position: int
    ) -> None:
        dx, dy = self.offset
        text_y = self.spec.row_y(slot + 1) + self.spec.text_offset_y + dy
        for column in self.spec.columns:
            text = to_ascii(cells.get(column.key, ""))
            if not text:
                continue
            fitted = clamp_text(text, column.width, self._measure)
            if fitted != text:
                self.report.record_truncated(f"rows[{position}].{column.key}")
            canvas.text(column.x + dx, text_y, fitted, size=self.spec.font_size)
