# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for the form-field strategy (forms/fields.py, forms/filler.py)."""

import pytest
from conftest import (
    blank_template,
    build_form_template,
    field_value,
    new_pdf,
    open_pdf,
    text_widgets,
)
from pikepdf import Array, Dictionary, Name, String

from certrender.forms import FormFiller, FormIndex, WidgetKind
from certrender.report import RenderReport, SkipReason


@pytest.fixture
def form_pdf():
    data = build_form_template(
        text_widgets(["Text_25", "Text_26", "Text_27", "Text_29", "Text_1"])
        + [
            ("Checkbox_1", "checkbox", (300, 400, 12, 12)),
            ("Signature_1", "signature", (300, 100, 200, 40)),
        ]
    )
    return open_pdf(data)


@pytest.fixture
def filler(form_pdf):
    return FormFiller(form_pdf, FormIndex(form_pdf), RenderReport())


class TestFormIndex:
    """Tests for FormIndex."""

    def test_kinds(self, form_pdf) -> None:
        index = FormIndex(form_pdf)

        assert index.kind_of("Text_1") is WidgetKind.TEXT
        assert index.kind_of("Checkbox_1") is WidgetKind.CHECKBOX
        assert index.kind_of("Signature_1") is WidgetKind.OTHER
        assert index.kind_of("Nope") is WidgetKind.MISSING

    def test_rect_and_page(self, form_pdf) -> None:
        index = FormIndex(form_pdf)

        assert index.rect_of("Signature_1") == (300, 100, 200, 40)
        assert index.get("Signature_1").page_index == 0

    def test_has_any(self, form_pdf) -> None:
        index = FormIndex(form_pdf)

        assert index.has_any(["Nope", "Text_1"])
        assert not index.has_any(["Nope"])

    def test_no_acroform(self) -> None:
        pdf = open_pdf(blank_template())
        index = FormIndex(pdf)

        assert len(index) == 0
        assert index.acroform is None

    def test_nested_names_are_joined(self) -> None:
        pdf = new_pdf()
        pdf.add_blank_page()
        child = pdf.make_indirect(
            Dictionary(
                T=String("make"),
                FT=Name.Tx,
                Subtype=Name.Widget,
                Rect=Array([0, 0, 10, 10]),
            )
        )
        parent = pdf.make_indirect(
            Dictionary(T=String("appliance_1"), Kids=Array([child]))
        )
        child.Parent = parent
        pdf.Root.AcroForm = Dictionary(Fields=Array([parent]))

        index = FormIndex(pdf)

        assert "appliance_1.make" in index
        assert index.kind_of("appliance_1.make") is WidgetKind.TEXT


class TestFormFiller:
    """Tests for FormFiller."""

    def test_writes_text(self, form_pdf, filler) -> None:
        written = filler.write("postcode", "Text_29", "LS1 1AA")

        assert written == 1
        assert field_value(form_pdf, "Text_29") == "LS1 1AA"
        assert filler.report.written == ["Text_29"]

    def test_multi_slot_split(self, form_pdf, filler) -> None:
        filler.write(
            "property_address",
            ("Text_25", "Text_26", "Text_27"),
            "1 High St, Flat 2, Leeds, West Yorkshire",
        )

        assert field_value(form_pdf, "Text_25") == "1 High St"
        assert field_value(form_pdf, "Text_26") == "Flat 2"
        assert field_value(form_pdf, "Text_27") == "Leeds, West Yorkshire"

    def test_first_writer_wins(self, form_pdf, filler) -> None:
        """A later key aimed at a filled field is skipped, not overwritten."""
        filler.apply(
            {"engineer_name": "A. Smith", "signature_text": "B. Jones"},
            {"engineer_name": "Text_1", "signature_text": "Text_1"},
        )

        assert field_value(form_pdf, "Text_1") == "A. Smith"
        skipped = filler.report.skipped_for(SkipReason.ALREADY_FILLED)
        assert [(s.key, s.target) for s in skipped] == [("signature_text", "Text_1")]

    def test_missing_widget_is_reported(self, filler) -> None:
        filler.write("postcode", "Text_99", "LS1")

        skipped = filler.report.skipped_for(SkipReason.MISSING)
        assert [s.target for s in skipped] == ["Text_99"]
        assert not filler.report.is_complete

    def test_empty_value_is_blank_not_failure(self, filler) -> None:
        filler.write("postcode", "Text_29", "   ")

        assert filler.report.blank == ["postcode"]
        assert filler.report.skipped == []
        assert filler.report.is_complete

    def test_signature_widget_is_unsupported(self, filler) -> None:
        filler.write("sig", "Signature_1", "anything")

        skipped = filler.report.skipped_for(SkipReason.UNSUPPORTED)
        assert [s.target for s in skipped] == ["Signature_1"]

    def test_checkbox(self, form_pdf, filler) -> None:
        filler.write("tagged", "Checkbox_1", True)

        assert field_value(form_pdf, "Checkbox_1") == "/Yes"
        widget = FormIndex(form_pdf).get("Checkbox_1").widgets[0]
        assert widget.AS == Name("/Yes")

    def test_checkbox_false_is_written(self, form_pdf, filler) -> None:
        filler.write("tagged", "Checkbox_1", False)

        assert field_value(form_pdf, "Checkbox_1") == "/Off"
        assert filler.report.written == ["Checkbox_1"]

    def test_boolean_key_renders_yes_no(self, form_pdf, filler) -> None:
        filler.apply(
            {"isolated": "y"}, {"isolated": "Text_1"}, boolean_keys={"isolated"}
        )

        assert field_value(form_pdf, "Text_1") == "Yes"

    def test_direct_keys(self, form_pdf, filler) -> None:
        """Unmapped keys named like a widget are written when direct is set."""
        filler.apply({"Text_29": "LS2", "unknown": "x"}, {}, direct=True)

        assert field_value(form_pdf, "Text_29") == "LS2"
        assert filler.report.skipped == []

    def test_unmapped_keys_ignored_without_direct(self, form_pdf, filler) -> None:
        filler.apply({"Text_29": "LS2"}, {})

        assert field_value(form_pdf, "Text_29") is None

    def test_refresh_appearances(self, form_pdf, filler) -> None:
        filler.write("postcode", "Text_29", "LS1 1AA")

        count = filler.refresh_appearances()

        assert count >= 1
        assert "/NeedAppearances" not in form_pdf.Root.AcroForm
        widget = FormIndex(form_pdf).get("Text_29").widgets[0]
        assert b"LS1 1AA" in widget.AP.N.read_bytes()
