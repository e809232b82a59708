# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Declarative building blocks for document kinds.

A document kind is data: which template it uses, where each key is written
(widget names for the form-field strategy, coordinates for the freehand
strategy), the static chrome drawn under freehand text, the repeating table
and the signature slots.  Drawing code never special-cases a kind.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..canvas import A4_LANDSCAPE
from ..values import FormFieldName

if TYPE_CHECKING:
    from ..document import RenderRequest
    from ..layout import FlowLayout

Box = tuple[float, float, float, float]


@dataclass(frozen=True)
class FieldGeometry:
    """Where the freehand strategy draws one key.

    Attributes:
        x: Left edge of the text.
        y: Baseline of the (first) line.
        width: Available width; text is clamped or wrapped to it.
        font_size: Text size in points.
        max_lines: Wrap into at most this many lines instead of clamping.
        line_height: Leading for wrapped text (default: font_size + 2).
        mark: Draw a bold "X" when the value is truthy instead of text.
        bold: Use Helvetica-Bold.
    """

    x: float
    y: float
    width: float = 0.0
    font_size: float = 10.0
    max_lines: int | None = None
    line_height: float | None = None
    mark: bool = False
    bold: bool = False

    @property
    def leading(self) -> float:
        if self.line_height is not None:
            return self.line_height
        return self.font_size + 2


@dataclass(frozen=True)
class ChromeText:
    x: float
    y: float
    text: str
    size: float = 9.0
    bold: bool = False


@dataclass(frozen=True)
class ChromeRect:
    x: float
    y: float
    width: float
    height: float
    line_width: float = 1.0


@dataclass(frozen=True)
class ChromeLine:
    x1: float
    y1: float
    x2: float
    y2: float
    line_width: float = 1.0


Chrome = ChromeText | ChromeRect | ChromeLine


@dataclass(frozen=True)
class TableColumn:
    key: str
    x: float
    width: float


RowCells = Callable[[int, Mapping[str, object]], dict[str, str]]


@dataclass(frozen=True)
class TableSpec:
    """Geometry and field names of a repeating table.

    ``cells`` turns one input row (and its 0-based position) into the cell
    texts, keyed by column key and by the keys of ``row_fields``.
    ``row_fields`` maps a cell key to the widget name of that cell, with
    ``{n}`` standing for the 1-based row number on the page.

    Attributes:
        columns: Freehand column geometry.
        max_rows_per_page: Rows that fit on one page.
        start_y: Grid line at the top of the first row.
        row_height: Distance between grid lines.
        cells: Row to cell-text function.
        row_fields: Widget names per cell key for the form-field strategy.
        font_size: Cell text size.
        text_offset_y: Baseline of cell text above the row's grid line.
        left: Left edge of the grid.
        right: Right edge of the grid.
        header_gap: Height of the header band above the first row.
        header_size: Column header text size.
        grid: Draw grid lines and headers in freehand mode.
    """

    columns: tuple[TableColumn, ...]
    max_rows_per_page: int
    start_y: float
    row_height: float
    cells: RowCells
    row_fields: Mapping[str, str | tuple[str, ...]] = field(default_factory=dict)
    font_size: float = 10.0
    text_offset_y: float = 8.0
    left: float = 24.0
    right: float = 748.0
    header_gap: float = 18.0
    header_size: float = 7.0
    grid: bool = True

    def field_names(self, row_number: int) -> dict[str, FormFieldName]:
        """Widget names of the cells of one row (1-based)."""
        names: dict[str, FormFieldName] = {}
        for key, template in self.row_fields.items():
            if isinstance(template, str):
                names[key] = template.format(n=row_number)
            else:
                names[key] = tuple(part.format(n=row_number) for part in template)
        return names

    def row_y(self, slot: int) -> float:
        """Grid line at the top of the row in page slot ``slot``."""
        return self.start_y - slot * self.row_height

    def grid_chrome(self) -> list[Chrome]:
        """Grid lines and column headers for one page."""
        if not self.grid:
            return []
        top = self.start_y + self.header_gap
        bottom = self.start_y - self.row_height * self.max_rows_per_page
        items: list[Chrome] = [ChromeLine(self.left, top, self.right, top)]
        for i in range(self.max_rows_per_page + 1):
            y = self.row_y(i)
            items.append(ChromeLine(self.left, y, self.right, y, 0.5))
        items.append(ChromeLine(self.left, top, self.left, bottom))
        for col in self.columns:
            x = col.x + col.width + 2
            items.append(ChromeLine(x, top, x, bottom, 0.5))
        items.append(ChromeLine(self.right, top, self.right, bottom))
        for col in self.columns:
            items.append(
                ChromeText(
                    col.x + 2,
                    top + 4,
                    col.key.replace("_", " ").upper(),
                    size=self.header_size,
                )
            )
        return items


@dataclass(frozen=True)
class SignatureSlot:
    """An image drawn into a widget rectangle or a fixed box.

    The widget's rectangle wins when the template has it; otherwise the
    freehand ``box`` (shifted by the kind's offset) is used.
    """

    name: str
    key: str
    widget: str | None = None
    box: Box | None = None
    padding: float = 4.0


Prepare = Callable[["RenderRequest"], dict[str, object]]
FlowBuilder = Callable[["FlowLayout", Mapping[str, object], "RenderRequest"], None]


@dataclass(frozen=True)
class DocumentKind:
    """Everything the assembler needs to render one kind of document.

    Attributes:
        name: Registry key (e.g. "cp12").
        title: Human title stored in the document info.
        filename_prefix: Filename is ``<prefix>-<record_id>.pdf``.
        template: Template file name, or None for documents drawn from
            scratch.
        page_size: Page size for pages drawn from scratch.
        field_names: Domain key to widget name(s) for the form strategy.
        coordinates: Domain key to geometry for the freehand strategy.
        chrome: Static labels, boxes and rules for the freehand strategy.
        offset: (dx, dy) added to every freehand coordinate.
        table: Repeating table, if the kind has one.
        signatures: Image slots.
        boolean_keys: Keys rendered as yes/no answers.
        direct_widget_keys: Also write unmapped keys named like a widget.
        prepare: Derives the field map actually rendered from a request.
        flow: Builds the document with the flow layout instead of the
            freehand or form strategies.
    """

    name: str
    title: str
    filename_prefix: str
    template: str | None = None
    page_size: tuple[float, float] = A4_LANDSCAPE
    field_names: Mapping[str, FormFieldName] = field(default_factory=dict)
    coordinates: Mapping[str, FieldGeometry] = field(default_factory=dict)
    chrome: tuple[Chrome, ...] = ()
    offset: tuple[float, float] = (0.0, 0.0)
    table: TableSpec | None = None
    signatures: tuple[SignatureSlot, ...] = ()
    boolean_keys: frozenset[str] = frozenset()
    direct_widget_keys: bool = False
    prepare: Prepare | None = None
    flow: FlowBuilder | None = None

    def filename(self, record_id: str) -> str:
        return f"{self.filename_prefix}-{record_id}.pdf"

    def prepared_fields(self, request: "RenderRequest") -> dict[str, object]:
        if self.prepare is None:
            return dict(request.field_map)
        return self.prepare(request)

    def freehand_chrome(self) -> list[Chrome]:
        """Static chrome plus the table grid, in drawing order."""
        items = list(self.chrome)
        if self.table is not None:
            items.extend(self.table.grid_chrome())
        return items
