# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for forms/appearance.py."""

from conftest import build_form_template, new_pdf, open_pdf
from pikepdf import Array, Dictionary, Name, String

from certrender.fonts import StandardFonts
from certrender.forms import FormIndex
from certrender.forms.appearance import (
    DEFAULT_FONT_SIZE,
    build_checkbox_appearance,
    build_text_appearance,
    get_on_state_name,
    parse_da_string,
)


def text_widget(value: str, rect=(40, 500, 200, 16), **extra):
    pdf = open_pdf(build_form_template([("Text_1", "text", rect)]))
    index = FormIndex(pdf)
    entry = index.get("Text_1")
    widget = entry.widgets[0]
    widget.V = String(value)
    for key, item in extra.items():
        widget[Name("/" + key)] = item
    return pdf, index, entry, widget


class TestParseDaString:
    """Tests for parse_da_string()."""

    def test_font_size_and_colour(self) -> None:
        assert parse_da_string("/Helv 9 Tf 0 0 1 rg") == ("Helv", 9.0, "0 0 1 rg")

    def test_auto_size(self) -> None:
        assert parse_da_string("/Helv 0 Tf 0 g")[1] == 0.0

    def test_missing(self) -> None:
        assert parse_da_string(None) == (None, DEFAULT_FONT_SIZE, "")
        assert parse_da_string("  ") == (None, DEFAULT_FONT_SIZE, "")


class TestTextAppearance:
    """Tests for build_text_appearance()."""

    def test_single_line(self) -> None:
        pdf, index, entry, widget = text_widget("LS1 1AA")

        ap = build_text_appearance(
            pdf, StandardFonts(pdf), widget, entry.obj, index.acroform
        )

        content = ap.read_bytes()
        assert b"(LS1 1AA) Tj" in content
        assert b"/Tx BMC" in content
        assert [float(v) for v in ap.BBox] == [0, 0, 200, 16]
        assert "/CRHelv" in ap.Resources.Font

    def test_multiline_wraps(self) -> None:
        pdf, index, entry, widget = text_widget(
            "first line of a long comment that wraps",
            rect=(40, 400, 80, 60),
            Ff=4096,
        )

        ap = build_text_appearance(
            pdf, StandardFonts(pdf), widget, entry.obj, index.acroform
        )

        assert ap.read_bytes().count(b"Tj") > 1

    def test_zero_area_widget(self) -> None:
        pdf, index, entry, widget = text_widget("x", rect=(40, 400, 0, 16))

        assert (
            build_text_appearance(
                pdf, StandardFonts(pdf), widget, entry.obj, index.acroform
            )
            is None
        )


class TestCheckboxAppearance:
    """Tests for get_on_state_name() and build_checkbox_appearance()."""

    def test_on_state_from_appearance(self) -> None:
        pdf = new_pdf()
        annot = Dictionary(
            AP=Dictionary(
                N=Dictionary(On=pdf.make_stream(b""), Off=pdf.make_stream(b""))
            )
        )

        assert get_on_state_name(annot) == "On"

    def test_on_state_default(self) -> None:
        assert get_on_state_name(Dictionary()) == "Yes"

    def test_builds_both_states(self) -> None:
        pdf = new_pdf()
        annot = Dictionary(Rect=Array([0, 0, 14, 14]), AS=Name.Checked)

        states = build_checkbox_appearance(pdf, annot)

        assert set(states.keys()) == {"/Off", "/Checked"}
        assert b" l S" in states.Checked.read_bytes()
        assert b" l S" not in states.Off.read_bytes()
