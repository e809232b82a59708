# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for layout.py (flow layout primitives)."""

from conftest import new_pdf, page_content

from certrender.fonts import StandardFonts
from certrender.layout import (
    FIELD_HEIGHT,
    GUTTER,
    PLACEHOLDER,
    FieldEntry,
    FlowLayout,
)
from certrender.report import RenderReport
from certrender.utils import fmt_num


def make_layout(preview: bool = False) -> FlowLayout:
    pdf = new_pdf()
    return FlowLayout(
        pdf, StandardFonts(pdf), preview_mode=preview, report=RenderReport()
    )


def flushed_content(layout: FlowLayout, index: int = 0) -> bytes:
    layout.finish()
    return page_content(layout.pdf.pages[index])


class TestCursor:
    """Tests for cursor movement and page breaks."""

    def test_starts_at_top_margin(self) -> None:
        layout = make_layout()

        assert layout.page_count == 1
        assert layout.y == layout.page_height - layout.margin

    def test_field_box_moves_cursor_down(self) -> None:
        layout = make_layout()
        start = layout.y

        layout.field_box("Customer name", "Jane Doe")

        assert layout.y < start - FIELD_HEIGHT

    def test_field_row_advances_once_by_tallest_box(self) -> None:
        """Boxes share a baseline, left to right, and the cursor moves once."""
        layout = make_layout()
        start = layout.y

        layout.field_row(
            [FieldEntry("Make", "Vaillant", 100), FieldEntry("Notes", "", 150, 60)],
            spacing=4,
        )

        assert layout.y == start - 64
        second_x = layout.margin + 100 + GUTTER
        content = flushed_content(layout)
        first_box = f"{fmt_num(layout.margin)} {fmt_num(start - 26)} 100 26 re"
        second_box = f"{fmt_num(second_x)} {fmt_num(start - 60)} 150 60 re"
        assert first_box.encode() in content
        assert second_box.encode() in content

    def test_ensure_space_breaks_page(self) -> None:
        """A break resets the cursor and runs the callback on the new page."""
        layout = make_layout()
        layout.y = 100
        calls = []

        broke = layout.ensure_space(200, lambda: calls.append(layout.page_count))

        assert broke is True
        assert layout.page_count == 2
        assert calls == [2]
        assert len(layout.pdf.pages) == 2

    def test_ensure_space_without_break(self) -> None:
        layout = make_layout()

        assert layout.ensure_space(100) is False
        assert layout.page_count == 1


class TestPlaceholders:
    """Tests for empty values in final and preview documents."""

    def test_preview_draws_placeholder(self) -> None:
        layout = make_layout(preview=True)
        layout.field_box("Postcode", "")

        content = flushed_content(layout)

        assert b"Postcode" in content
        # The placeholder is encoded as a single WinAnsi byte.
        assert PLACEHOLDER.encode("cp1252") in content

    def test_final_leaves_box_empty(self) -> None:
        layout = make_layout(preview=False)
        layout.field_box("Postcode", "")

        content = flushed_content(layout)

        assert PLACEHOLDER.encode("cp1252") not in content


class TestFitting:
    """Tests for clamping and dropped lines."""

    def test_long_value_is_reported_truncated(self) -> None:
        layout = make_layout()
        layout.field_row(
            [FieldEntry("Postcode", "A very long value for a tiny box", 60, key="pc")]
        )

        assert layout.report.truncated == ["pc"]

    def test_paragraph_drops_lines_that_do_not_fit(self) -> None:
        layout = make_layout()
        text = "\n".join(f"Line {i}" for i in range(10))

        layout.paragraph_box("Summary", text, height=40, key="summary")

        assert "summary" in layout.report.truncated
        content = flushed_content(layout)
        assert b"(Line 0)" in content
        assert b"(Line 9)" not in content

    def test_check_grid_draws_answers(self) -> None:
        layout = make_layout()
        layout.check_grid([("Burner cleaned", "Yes"), ("Seals checked", "No")])

        content = flushed_content(layout)

        assert b"(Burner cleaned)" in content
        assert b"(Yes)" in content
        assert b"(No)" in content
