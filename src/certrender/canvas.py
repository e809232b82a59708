# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Page canvas: collects drawing operators and appends them to a page.

Everything we draw on a page (freehand text, layout boxes, table grids,
signature images) goes through a ``PageCanvas``.  Operators are buffered and
written as one extra content stream by ``flush()``.  When the page already
has content (a template page) the existing streams are wrapped in q/Q so
their graphics state cannot leak into ours.
"""

import logging

from pikepdf import Array, Dictionary, Name, Page, Pdf, Stream

from .fonts import HELVETICA, HELVETICA_BOLD, StandardFonts, encode_for_content_stream
from .utils import fmt_num

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)
STROKE_GREY: Color = (0.82, 0.85, 0.88)
LABEL_GREY: Color = (0.35, 0.38, 0.42)
PLACEHOLDER_GREY: Color = (0.6, 0.62, 0.66)

A4_PORTRAIT = (595.0, 842.0)
A4_LANDSCAPE = (842.0, 595.0)


def _color_ops(color: Color, stroke: bool = False) -> str:
    op = "RG" if stroke else "rg"
    r, g, b = color
    return f"{fmt_num(r)} {fmt_num(g)} {fmt_num(b)} {op}"


def _ensure_dict(parent: Dictionary, key: str) -> Dictionary:
    """Return parent[key] as a direct-or-indirect dictionary, creating it."""
    value = parent.get(key)
    if value is None:
        value = Dictionary()
        parent[key] = value
    return value


class PageCanvas:
    """Buffered drawing surface for one page.

    Args:
        pdf: Document owning the page.
        page: Page to draw on.
        fonts: Shared per-document font cache.
    """

    def __init__(self, pdf: Pdf, page: Page, fonts: StandardFonts):
        self.pdf = pdf
        self.page = page
        self.fonts = fonts
        self._ops: list[str] = []
        self._fonts_used: set[str] = set()
        self._images: dict[str, Stream] = {}

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float = 10.0,
        bold: bool = False,
        color: Color = BLACK,
    ) -> None:
        """Draw a single line of text with its baseline at (x, y)."""
        if not text:
            return
        base_font = HELVETICA_BOLD if bold else HELVETICA
        self._fonts_used.add(base_font)
        resource = self.fonts.resource_name(base_font)
        encoded = encode_for_content_stream(text).decode("latin-1")
        self._ops.append(
            f"BT {resource} {fmt_num(size)} Tf {_color_ops(color)} "
            f"{fmt_num(x)} {fmt_num(y)} Td ({encoded}) Tj ET"
        )

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        stroke: Color | None = STROKE_GREY,
        fill: Color | None = None,
        line_width: float = 1.0,
    ) -> None:
        """Draw a rectangle with (x, y) as its lower-left corner."""
        if stroke is None and fill is None:
            return
        parts = ["q"]
        if fill is not None:
            parts.append(_color_ops(fill))
        if stroke is not None:
            parts.append(_color_ops(stroke, stroke=True))
            parts.append(f"{fmt_num(line_width)} w")
        parts.append(
            f"{fmt_num(x)} {fmt_num(y)} {fmt_num(width)} {fmt_num(height)} re"
        )
        if fill is not None and stroke is not None:
            parts.append("B")
        elif fill is not None:
            parts.append("f")
        else:
            parts.append("S")
        parts.append("Q")
        self._ops.append(" ".join(parts))

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: Color = STROKE_GREY,
        line_width: float = 1.0,
    ) -> None:
        self._ops.append(
            f"q {_color_ops(color, stroke=True)} {fmt_num(line_width)} w "
            f"{fmt_num(x1)} {fmt_num(y1)} m {fmt_num(x2)} {fmt_num(y2)} l S Q"
        )

    def image(
        self, xobject: Stream, x: float, y: float, width: float, height: float
    ) -> None:
        """Paint an image XObject into the box (x, y, width, height)."""
        name = self._next_image_name()
        self._images[name] = xobject
        self._ops.append(
            f"q {fmt_num(width)} 0 0 {fmt_num(height)} "
            f"{fmt_num(x)} {fmt_num(y)} cm {name} Do Q"
        )

    def _next_image_name(self) -> str:
        taken = set(self._images)
        resources = self.page.obj.get("/Resources")
        if resources is not None and "/XObject" in resources:
            taken.update(str(key) for key in resources.XObject.keys())
        index = 0
        while f"/CRIm{index}" in taken:
            index += 1
        return f"/CRIm{index}"

    @property
    def is_empty(self) -> bool:
        return not self._ops

    def flush(self) -> None:
        """Write buffered operators to the page and register resources."""
        if not self._ops:
            return

        page_obj = self.page.obj
        resources = _ensure_dict(page_obj, "/Resources")
        if self._fonts_used:
            font_dict = _ensure_dict(resources, "/Font")
            for base_font in sorted(self._fonts_used):
                font_dict[self.fonts.resource_name(base_font)] = self.fonts.get(
                    base_font
                )
        if self._images:
            xobjects = _ensure_dict(resources, "/XObject")
            for name, stream in self._images.items():
                xobjects[Name(name)] = stream

        content = ("\n".join(self._ops) + "\n").encode("latin-1")
        existing = page_obj.get("/Contents")
        if existing is None:
            page_obj[Name.Contents] = self.pdf.make_stream(content)
        else:
            if isinstance(existing, Stream):
                streams = [existing]
            else:
                streams = list(existing)
            page_obj[Name.Contents] = Array(
                [self.pdf.make_stream(b"q\n")]
                + streams
                + [self.pdf.make_stream(b"Q\n" + content)]
            )
        logger.debug("Flushed %d drawing operations", len(self._ops))
        self._ops.clear()
        self._fonts_used.clear()
        self._images.clear()


class DocumentCanvas:
    """One ``PageCanvas`` per page of a document, created on demand.

    Pages added through this class (blank pages or clones of a template
    page) get a canvas straight away; existing pages get one the first time
    something draws on them.
    """

    def __init__(self, pdf: Pdf, fonts: StandardFonts | None = None):
        self.pdf = pdf
        self.fonts = fonts if fonts is not None else StandardFonts(pdf)
        self._canvases: dict[int, PageCanvas] = {}

    def __len__(self) -> int:
        return len(self.pdf.pages)

    def page(self, index: int) -> PageCanvas:
        canvas = self._canvases.get(index)
        if canvas is None:
            canvas = PageCanvas(self.pdf, self.pdf.pages[index], self.fonts)
            self._canvases[index] = canvas
        return canvas

    def add_blank_page(self, page_size: tuple[float, float]) -> PageCanvas:
        self.pdf.add_blank_page(page_size=page_size)
        return self.page(len(self.pdf.pages) - 1)

    def add_template_page(self, template: Pdf, index: int = 0) -> PageCanvas:
        """Append a copy of a template page without its form widgets.

        The copy carries the template's printed layout only; its widgets
        would otherwise duplicate the field names of the first page.
        """
        self.pdf.pages.append(template.pages[index])
        page_index = len(self.pdf.pages) - 1
        page_obj = self.pdf.pages[page_index].obj
        if "/Annots" in page_obj:
            del page_obj["/Annots"]
        logger.debug("Appended copy of template page %d", index)
        return self.page(page_index)

    def flush(self) -> None:
        for index in sorted(self._canvases):
            self._canvases[index].flush()
