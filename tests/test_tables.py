# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for tables.py (table pager)."""

import pytest
from conftest import build_form_template, field_value, new_pdf, open_pdf, page_content

from certrender.canvas import A4_LANDSCAPE, DocumentCanvas
from certrender.forms import FormFiller, FormIndex
from certrender.kinds.base import TableColumn, TableSpec
from certrender.report import RenderReport
from certrender.tables import (
    FORM,
    FREEHAND,
    TablePager,
    chunk_rows,
    select_table_strategy,
)


def location_cells(position, row):
    return {"index": str(position + 1), "location": str(row.get("location", ""))}


SPEC = TableSpec(
    columns=(TableColumn("index", 28, 20), TableColumn("location", 52, 120)),
    max_rows_per_page=6,
    start_y=400,
    row_height=20,
    cells=location_cells,
    row_fields={"location": "row_{n}_location"},
)


def make_rows(count: int) -> list[dict]:
    return [{"location": f"Room {i + 1}"} for i in range(count)]


def row_widgets(count: int) -> list[tuple]:
    return [
        (f"row_{n}_location", "text", (52, 400 - n * 20, 120, 16))
        for n in range(1, count + 1)
    ]


class TestChunkRows:
    """Tests for chunk_rows()."""

    def test_thirteen_rows_by_six(self) -> None:
        chunks = chunk_rows(list(range(13)), 6)

        assert [len(c) for c in chunks] == [6, 6, 1]
        assert [x for c in chunks for x in c] == list(range(13))

    def test_empty(self) -> None:
        assert chunk_rows([], 6) == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            chunk_rows([1], 0)


class TestSelectTableStrategy:
    """Tests for select_table_strategy()."""

    def test_form_when_first_row_widget_exists(self) -> None:
        pdf = open_pdf(build_form_template(row_widgets(1)))

        assert select_table_strategy(SPEC, FormIndex(pdf)) == FORM

    def test_freehand_without_widgets(self) -> None:
        pdf = open_pdf(build_form_template([("other", "text", (0, 0, 10, 10))]))

        assert select_table_strategy(SPEC, FormIndex(pdf)) == FREEHAND

    def test_freehand_without_template(self) -> None:
        assert select_table_strategy(SPEC, None) == FREEHAND


class TestFreehandPaging:
    """Tests for the freehand table strategy."""

    def test_thirteen_rows_span_three_pages(self) -> None:
        pdf = new_pdf()
        pdf.add_blank_page(page_size=A4_LANDSCAPE)
        canvases = DocumentCanvas(pdf)
        report = RenderReport()
        pager = TablePager(
            SPEC, canvases, report, page_size=A4_LANDSCAPE, chrome=SPEC.grid_chrome()
        )

        counts = pager.render(make_rows(13))
        canvases.flush()

        assert counts == [6, 6, 1]
        assert report.table_pages == [6, 6, 1]
        assert report.table_strategy == FREEHAND
        assert len(pdf.pages) == 3
        assert b"(Room 1)" in page_content(pdf.pages[0])
        assert b"(Room 7)" in page_content(pdf.pages[1])
        assert b"(Room 13)" in page_content(pdf.pages[2])
        # Continuation pages carry the column headers again.
        assert b"(LOCATION)" in page_content(pdf.pages[2])

    def test_no_rows_no_extra_pages(self) -> None:
        pdf = new_pdf()
        pdf.add_blank_page(page_size=A4_LANDSCAPE)
        canvases = DocumentCanvas(pdf)

        counts = TablePager(SPEC, canvases, RenderReport()).render([])

        assert counts == []
        assert len(pdf.pages) == 1

    def test_overlong_cell_is_truncated(self) -> None:
        pdf = new_pdf()
        pdf.add_blank_page(page_size=A4_LANDSCAPE)
        report = RenderReport()

        TablePager(SPEC, DocumentCanvas(pdf), report).render(
            [{"location": "Upstairs back bedroom airing cupboard next to loft"}]
        )

        assert report.truncated == ["rows[0].location"]


class TestFormPaging:
    """Tests for the form table strategy."""

    def test_rows_beyond_first_page_are_drawn(self) -> None:
        data = build_form_template(row_widgets(6))
        pdf = open_pdf(data)
        template = open_pdf(data)
        report = RenderReport()
        filler = FormFiller(pdf, FormIndex(pdf), report)
        canvases = DocumentCanvas(pdf)
        pager = TablePager(
            SPEC,
            canvases,
            report,
            strategy=FORM,
            filler=filler,
            template=template,
        )

        counts = pager.render(make_rows(8))
        canvases.flush()

        assert counts == [6, 2]
        assert field_value(pdf, "row_1_location") == "Room 1"
        assert field_value(pdf, "row_6_location") == "Room 6"
        assert len(pdf.pages) == 2
        continuation = pdf.pages[1]
        assert "/Annots" not in continuation.obj
        content = page_content(continuation)
        assert b"(Room 7)" in content
        assert b"(Room 8)" in content

    def test_form_strategy_needs_filler(self) -> None:
        pdf = new_pdf()
        with pytest.raises(ValueError):
            TablePager(SPEC, DocumentCanvas(pdf), RenderReport(), strategy=FORM)

    def form_pager(self, widgets):
        data = build_form_template(widgets)
        pdf = open_pdf(data)
        report = RenderReport()
        canvases = DocumentCanvas(pdf)
        pager = TablePager(
            SPEC,
            canvases,
            report,
            strategy=FORM,
            filler=FormFiller(pdf, FormIndex(pdf), report),
            template=open_pdf(data),
        )
        return pdf, canvases, report, pager

    def test_fewer_row_widgets_shorten_pages(self) -> None:
        """A template with four row widgets holds four rows per page."""
        pdf, canvases, report, pager = self.form_pager(row_widgets(4))

        counts = pager.render(make_rows(8))
        canvases.flush()

        assert counts == [4, 4]
        assert report.table_pages == [4, 4]
        assert [field_value(pdf, f"row_{n}_location") for n in range(1, 5)] == [
            "Room 1",
            "Room 2",
            "Room 3",
            "Room 4",
        ]
        content = page_content(pdf.pages[1])
        for n in range(5, 9):
            assert f"(Room {n})".encode() in content
        assert report.skipped == []

    def test_rows_skip_slots_without_widgets(self) -> None:
        widgets = [w for w in row_widgets(4) if w[0] != "row_3_location"]
        pdf, canvases, report, pager = self.form_pager(widgets)

        counts = pager.render(make_rows(4))
        canvases.flush()

        assert counts == [3, 1]
        assert field_value(pdf, "row_4_location") == "Room 3"
        assert b"(Room 4)" in page_content(pdf.pages[1])

    def test_no_placed_row_widgets_falls_back_to_freehand(self) -> None:
        pdf, canvases, report, pager = self.form_pager(
            [("other", "text", (0, 0, 10, 10))]
        )

        counts = pager.render(make_rows(2))
        canvases.flush()

        assert counts == [2]
        assert report.table_strategy == FREEHAND
        assert b"(Room 2)" in page_content(pdf.pages[0])
