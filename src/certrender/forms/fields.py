# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Index of the interactive form fields on a template.

The index is built once per render.  Every fully qualified field name is
tagged with a ``WidgetKind`` so writers can dispatch on the kind instead of
trying one write after another.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from pikepdf import Dictionary, Pdf

from ..utils import resolve_indirect as _resolve

logger = logging.getLogger(__name__)

# /Ff bits (PDF 32000-1, tables 226 and 228)
FF_MULTILINE = 1 << 12
FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16
FF_COMB = 1 << 24

Rect = tuple[float, float, float, float]


class WidgetKind(Enum):
    """What a physical field name resolves to on a given template."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    OTHER = "other"
    MISSING = "missing"


@dataclass
class FormField:
    """A terminal form field and its widget annotations.

    Attributes:
        name: Fully qualified name (partial names joined with ".").
        kind: Writable kind of the field.
        obj: The field dictionary that carries /V.
        widgets: Widget annotations showing the field.
        page_index: Page of the first widget, if it is on a page.
        rect: Normalised (x, y, width, height) of the first widget.
    """

    name: str
    kind: WidgetKind
    obj: Dictionary
    widgets: list[Dictionary] = field(default_factory=list)
    page_index: int | None = None
    rect: Rect | None = None


def get_inheritable(node, key: str, acroform=None):
    """Look a key up on a field, its /Parent chain, then the AcroForm."""
    visited: set[tuple[int, int]] = set()
    current = node
    while current is not None:
        objgen = getattr(current, "objgen", (0, 0))
        if objgen != (0, 0):
            if objgen in visited:
                break
            visited.add(objgen)

        value = current.get(key)
        if value is not None:
            return value

        parent = current.get("/Parent")
        current = _resolve(parent) if parent is not None else None

    if acroform is not None:
        return acroform.get(key)
    return None


def get_field_flags(node, acroform=None) -> int:
    ff = get_inheritable(node, "/Ff", acroform)
    try:
        return int(ff) if ff is not None else 0
    except (TypeError, ValueError):
        return 0


def _classify(node, acroform) -> WidgetKind:
    ft = get_inheritable(node, "/FT", acroform)
    ft_str = str(ft) if ft is not None else None
    if ft_str == "/Tx":
        return WidgetKind.TEXT
    if ft_str == "/Btn":
        flags = get_field_flags(node, acroform)
        if flags & (FF_RADIO | FF_PUSHBUTTON):
            return WidgetKind.OTHER
        return WidgetKind.CHECKBOX
    return WidgetKind.OTHER


def _normalise_rect(annot) -> Rect | None:
    rect = annot.get("/Rect")
    if rect is None or len(rect) != 4:
        return None
    try:
        x1, y1, x2, y2 = (float(v) for v in rect)
    except (TypeError, ValueError):
        return None
    return min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1)


def _is_widget_only(node) -> bool:
    """True for a kid that is a bare widget rather than a child field."""
    return "/T" not in node


class FormIndex:
    """Fully qualified field names of a document, tagged by kind.

    Args:
        pdf: Document whose /AcroForm is indexed.
    """

    def __init__(self, pdf: Pdf):
        self.pdf = pdf
        self.acroform = None
        self._fields: dict[str, FormField] = {}

        root = pdf.Root
        if "/AcroForm" in root:
            self.acroform = _resolve(root.AcroForm)

        self._page_of_annot = self._map_annotations_to_pages()
        if self.acroform is not None and "/Fields" in self.acroform:
            for node in self.acroform.Fields:
                self._walk(_resolve(node), "", set())

        logger.debug("Indexed %d form fields", len(self._fields))

    def _map_annotations_to_pages(self) -> dict[tuple[int, int], int]:
        mapping: dict[tuple[int, int], int] = {}
        for page_index, page in enumerate(self.pdf.pages):
            annots = page.obj.get("/Annots")
            if annots is None:
                continue
            for annot in _resolve(annots):
                objgen = getattr(annot, "objgen", (0, 0))
                if objgen != (0, 0):
                    mapping.setdefault(objgen, page_index)
        return mapping

    def _walk(self, node, parent_name: str, visited: set[tuple[int, int]]) -> None:
        objgen = getattr(node, "objgen", (0, 0))
        if objgen != (0, 0):
            if objgen in visited:
                return
            visited.add(objgen)

        partial = node.get("/T")
        if partial is not None:
            partial_str = str(partial)
            name = f"{parent_name}.{partial_str}" if parent_name else partial_str
        else:
            name = parent_name

        kids = node.get("/Kids")
        child_fields = []
        widgets = []
        if kids is not None:
            for kid in kids:
                kid = _resolve(kid)
                if _is_widget_only(kid):
                    widgets.append(kid)
                else:
                    child_fields.append(kid)

        if child_fields:
            for child in child_fields:
                self._walk(child, name, visited)
            return

        if not widgets and str(node.get("/Subtype", "")) == "/Widget":
            widgets = [node]
        if not name or name in self._fields:
            return
        self._fields[name] = self._make_field(name, node, widgets)

    def _make_field(self, name: str, node, widgets) -> FormField:
        entry = FormField(
            name=name, kind=_classify(node, self.acroform), obj=node, widgets=widgets
        )
        for widget in widgets:
            rect = _normalise_rect(widget)
            if rect is None:
                continue
            entry.rect = rect
            entry.page_index = self._page_of_annot.get(
                getattr(widget, "objgen", (0, 0))
            )
            break
        return entry

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FormField]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._fields)

    def get(self, name: str) -> FormField | None:
        return self._fields.get(name)

    def kind_of(self, name: str) -> WidgetKind:
        entry = self._fields.get(name)
        return entry.kind if entry is not None else WidgetKind.MISSING

    def rect_of(self, name: str) -> Rect | None:
        entry = self._fields.get(name)
        return entry.rect if entry is not None else None

    def has_any(self, names) -> bool:
        return any(name in self._fields for name in names)
