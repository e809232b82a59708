# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Form-field strategy: write resolved values into a template's widgets.

Each physical field is written at most once per render; the first key that
reaches a field wins and later keys aimed at it are skipped.  A mapped name
that the template does not have is expected (templates drift between
revisions) and is only recorded in the report.
"""

import logging
from collections.abc import Collection, Mapping

from pikepdf import Dictionary, Name, Pdf, String

from ..fonts import StandardFonts
from ..report import RenderReport, SkipReason
from ..values import FieldMap, FormFieldName, destinations, is_truthy, resolve
from .appearance import (
    build_checkbox_appearance,
    build_text_appearance,
    get_on_state_name,
)
from .fields import FormField, FormIndex, WidgetKind

logger = logging.getLogger(__name__)


class FormFiller:
    """Writes values into the fields of one document.

    Args:
        pdf: Document being filled.
        index: Field index built from the same document.
        report: Completeness report to record writes and skips in.
        fonts: Font cache used for regenerated appearances.
    """

    def __init__(
        self,
        pdf: Pdf,
        index: FormIndex,
        report: RenderReport,
        fonts: StandardFonts | None = None,
    ):
        self.pdf = pdf
        self.index = index
        self.report = report
        self.fonts = fonts if fonts is not None else StandardFonts(pdf)
        self.filled: set[str] = set()

    def write(
        self,
        key: str,
        field_name: FormFieldName,
        raw_value: object,
        *,
        boolean: bool = False,
    ) -> int:
        """Resolve one field-map value and write it to its destination(s).

        Args:
            key: Domain key, used for reporting.
            field_name: Physical destination(s) of the key.
            raw_value: Value from the field map.
            boolean: Render the value as a yes/no answer.

        Returns:
            Number of fields written.
        """
        targets = destinations(field_name)
        if not targets:
            return 0

        lines = resolve(raw_value, targets, boolean=boolean)
        if not any(lines) and not isinstance(raw_value, bool):
            self.report.record_blank(key)
            return 0

        written = 0
        for name, line in zip(targets, lines):
            if not line and not isinstance(raw_value, bool):
                continue
            if self._write_one(key, name, line, raw_value):
                written += 1
        return written

    def _write_one(self, key: str, name: str, text: str, raw_value: object) -> bool:
        kind = self.index.kind_of(name)
        if kind is WidgetKind.MISSING:
            self.report.record_skip(key, name, SkipReason.MISSING)
            return False
        if name in self.filled:
            self.report.record_skip(key, name, SkipReason.ALREADY_FILLED)
            return False

        entry = self.index.get(name)
        if kind is WidgetKind.TEXT:
            set_text_value(entry, text)
        elif kind is WidgetKind.CHECKBOX:
            checked = raw_value if isinstance(raw_value, bool) else is_truthy(text)
            set_checkbox_value(entry, checked)
        else:
            logger.debug("Field %s cannot take a value, skipping", name)
            self.report.record_skip(key, name, SkipReason.UNSUPPORTED)
            return False

        self.filled.add(name)
        self.report.record_written(name)
        return True

    def apply(
        self,
        field_map: FieldMap,
        field_names: Mapping[str, FormFieldName],
        *,
        boolean_keys: Collection[str] = (),
        direct: bool = False,
    ) -> None:
        """Write every mapped key present in the field map.

        Keys are visited in mapping order, so earlier mapping entries win
        shared fields.  With ``direct`` set, unmapped keys that are
        themselves field names on the template are written as well.
        """
        for key, field_name in field_names.items():
            if key not in field_map:
                continue
            self.write(key, field_name, field_map[key], boolean=key in boolean_keys)

        if not direct:
            return
        for key, value in field_map.items():
            if key in field_names or key not in self.index:
                continue
            self.write(key, key, value, boolean=key in boolean_keys)

    def refresh_appearances(self) -> int:
        """Rebuild the appearance of every text field and checkbox.

        Also clears /NeedAppearances so viewers use the new streams.

        Returns:
            Number of widgets updated.
        """
        acroform = self.index.acroform
        count = 0
        for entry in self.index:
            if entry.kind is WidgetKind.TEXT:
                for widget in entry.widgets:
                    ap = build_text_appearance(
                        self.pdf, self.fonts, widget, entry.obj, acroform
                    )
                    if ap is None:
                        continue
                    widget[Name.AP] = Dictionary(N=ap)
                    count += 1
            elif entry.kind is WidgetKind.CHECKBOX:
                for widget in entry.widgets:
                    widget[Name.AP] = Dictionary(
                        N=build_checkbox_appearance(self.pdf, widget)
                    )
                    count += 1

        if acroform is not None and "/NeedAppearances" in acroform:
            del acroform["/NeedAppearances"]
        logger.debug("Regenerated %d widget appearances", count)
        return count


def set_text_value(entry: FormField, text: str) -> None:
    """Store a text value on a field, dropping any rich-text variant."""
    entry.obj[Name.V] = String(text)
    if "/RV" in entry.obj:
        del entry.obj["/RV"]


def set_checkbox_value(entry: FormField, checked: bool) -> None:
    """Check or uncheck a checkbox field and all of its widgets."""
    on_state = None
    for widget in entry.widgets:
        state = get_on_state_name(widget)
        on_state = on_state or state
        widget[Name.AS] = Name("/" + state) if checked else Name.Off
    if on_state is None:
        on_state = "Yes"
    entry.obj[Name.V] = Name("/" + on_state) if checked else Name.Off
