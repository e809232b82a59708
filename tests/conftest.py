# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the certrender test suite."""

from datetime import datetime
from io import BytesIO
from pathlib import Path

import pikepdf
import pytest
import requests
from PIL import Image
from pikepdf import Array, Dictionary, Name, Pdf, String

from certrender.canvas import A4_LANDSCAPE
from certrender.templates import TemplateStore

# -- Global PDF tracker --

_tracked_pdfs: list[Pdf] = []


@pytest.fixture(autouse=True)
def _auto_close_pdfs():
    """Close all tracked PDF objects after each test."""
    yield
    for pdf in reversed(_tracked_pdfs):
        try:
            pdf.close()
        except Exception:
            pass
    _tracked_pdfs.clear()


def new_pdf(**kwargs) -> Pdf:
    """Create a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.new(**kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def open_pdf(source, **kwargs) -> Pdf:
    """Open a tracked Pdf (auto-closed after test).

    Bytes are wrapped in a BytesIO.
    """
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    pdf = Pdf.open(source, **kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


# -- Builders --

ISSUED_AT = datetime(2024, 5, 1, 9, 30)


def save_pdf(pdf: Pdf) -> bytes:
    buffer = BytesIO()
    pdf.save(buffer)
    return buffer.getvalue()


def blank_template(
    page_size: tuple[float, float] = A4_LANDSCAPE, pages: int = 1
) -> bytes:
    """A template with printed pages only (no form)."""
    pdf = new_pdf()
    for _ in range(pages):
        pdf.add_blank_page(page_size=page_size)
    return save_pdf(pdf)


def build_form_template(
    widgets,
    page_size: tuple[float, float] = A4_LANDSCAPE,
    pages: int = 1,
) -> bytes:
    """A template whose /AcroForm holds one flat field per widget.

    Args:
        widgets: Iterable of ``(name, kind, (x, y, w, h))`` or
            ``(name, kind, rect, page_index)`` where kind is "text",
            "checkbox" or "signature".
        page_size: Size of every page.
        pages: Number of pages.

    Returns:
        The template as PDF bytes.
    """
    pdf = new_pdf()
    for _ in range(pages):
        pdf.add_blank_page(page_size=page_size)

    fields = Array()
    for spec in widgets:
        name, kind, (x, y, w, h) = spec[:3]
        page_index = spec[3] if len(spec) > 3 else 0
        page = pdf.pages[page_index]
        annot = Dictionary(
            Type=Name.Annot,
            Subtype=Name.Widget,
            T=String(name),
            Rect=Array([x, y, x + w, y + h]),
            F=4,
            P=page.obj,
        )
        if kind == "text":
            annot.FT = Name.Tx
            annot.DA = String("/Helv 10 Tf 0 g")
        elif kind == "checkbox":
            annot.FT = Name.Btn
            annot.V = Name.Off
            annot.AS = Name.Off
            annot.AP = Dictionary(
                N=Dictionary(Yes=pdf.make_stream(b""), Off=pdf.make_stream(b""))
            )
        else:
            annot.FT = Name.Sig
        ref = pdf.make_indirect(annot)
        if "/Annots" not in page.obj:
            page.obj.Annots = pdf.make_indirect(Array())
        page.obj.Annots.append(ref)
        fields.append(ref)

    pdf.Root.AcroForm = Dictionary(
        Fields=fields,
        NeedAppearances=True,
        DA=String("/Helv 0 Tf 0 g"),
    )
    return save_pdf(pdf)


def text_widgets(names, start_y: float = 500, height: float = 16) -> list:
    """Stack one text widget per name down the left of the page."""
    return [
        (name, "text", (40, start_y - i * (height + 4), 200, height))
        for i, name in enumerate(names)
    ]


def png_bytes(size=(40, 20), mode: str = "RGB", color=(10, 20, 30)) -> bytes:
    img = Image.new(mode, size, color)
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def jpeg_bytes(size=(40, 20), mode: str = "RGB", color=(200, 100, 50)) -> bytes:
    img = Image.new(mode, size, color)
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


def page_content(page) -> bytes:
    """All content-stream bytes of a page, in drawing order."""
    contents = page.obj.get("/Contents")
    if contents is None:
        return b""
    if isinstance(contents, pikepdf.Stream):
        return contents.read_bytes()
    return b"".join(stream.read_bytes() for stream in contents)


def field_value(pdf: Pdf, name: str) -> str | None:
    """/V of the flat field called name, as text."""
    for field in pdf.Root.AcroForm.Fields:
        if str(field.get("/T")) == name:
            value = field.get("/V")
            return None if value is None else str(value)
    raise KeyError(name)


class StubFetcher:
    """Image fetcher returning canned responses and recording URLs.

    Args:
        responses: URL to (bytes, content type); unknown URLs raise
            ``requests.ConnectionError``.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def __call__(self, url: str):
        self.calls.append(url)
        if url not in self.responses:
            raise requests.ConnectionError(f"unreachable: {url}")
        return self.responses[url]


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests."""
    return tmp_path


@pytest.fixture
def store(tmp_path: Path) -> TemplateStore:
    """Template store reading from an empty temporary directory."""
    return TemplateStore(tmp_path / "templates")


@pytest.fixture
def fetcher() -> StubFetcher:
    return StubFetcher(
        {
            "https://blob.test/engineer.png": (png_bytes(), "image/png"),
            "https://blob.test/customer.jpg": (jpeg_bytes(), "image/jpeg"),
        }
    )
