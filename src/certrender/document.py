# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Document assembler: one render request in, PDF bytes and a report out.

A render walks a fixed sequence of stages.  Only a template that cannot be
loaded stops it; every other problem (missing widget, oversized text,
unreachable signature image) is recorded in the ``RenderReport`` and the
affected area is left blank.
"""

# Standard Library
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from io import BytesIO

# Third Party
from pikepdf import Name, Pdf, String

# Local
from .canvas import DocumentCanvas
from .exceptions import RenderStateError, TemplateLoadError
from .fonts import StandardFonts
from .forms import FormFiller, FormIndex
from .freehand import draw_chrome, draw_fields
from .kinds import get_kind
from .kinds.base import DocumentKind
from .layout import FlowLayout
from .report import RenderReport
from .signatures import Fetcher, SignatureEmbedder, resolve_slot_box
from .tables import FORM, FREEHAND, TablePager, select_table_strategy
from .templates import TemplateStore, default_store
from .utils import format_date, format_pdf_date
from .values import FieldMap, destinations, to_text

logger = logging.getLogger(__name__)

FLOW = "flow"
PRODUCER = "certrender"


class RenderStage(Enum):
    INITIALIZING = "initializing"
    RESOLVING_FIELDS = "resolving_fields"
    STRATEGY_SELECTION = "strategy_selection"
    DRAWING_STATIC_LAYOUT = "drawing_static_layout"
    DRAWING_DYNAMIC_FIELDS = "drawing_dynamic_fields"
    DRAWING_TABLE = "drawing_table"
    EMBEDDING_SIGNATURES = "embedding_signatures"
    FINALIZING = "finalizing"
    SAVED = "saved"


_STAGES = list(RenderStage)


@dataclass(frozen=True)
class RenderRequest:
    """Immutable input of one render.

    Attributes:
        field_map: Domain key to raw value.
        issued_at: Issue timestamp; also the document's creation date.
        record_id: Identifier used in the filename.
        appliances: Repeating table rows, rendered in order.
        preview_mode: Show placeholders in empty boxes.
        photos: Photo records (``{"category": ...}``) summarised by kinds
            that list attachments.
        qr_image: Encoded PNG/JPEG raster placed by the job sheet.
    """

    field_map: FieldMap
    issued_at: date | datetime
    record_id: str
    appliances: Sequence[Mapping[str, object]] = ()
    preview_mode: bool = False
    photos: Sequence[Mapping[str, object]] = ()
    qr_image: bytes | None = None


@dataclass
class RenderResult:
    """Output of one render.

    Attributes:
        pdf_bytes: The finished document.
        filename: Suggested file name.
        title: Human title.
        kind: Document kind name.
        metadata: Issued-at text, record id, page count and strategy.
        report: What was and was not rendered.
    """

    pdf_bytes: bytes
    filename: str
    title: str
    kind: str
    metadata: dict[str, str | int] = field(default_factory=dict)
    report: RenderReport = field(default_factory=RenderReport)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


class RenderJob:
    """State machine for a single render.

    Stages run strictly in order; entering a stage out of order raises
    ``RenderStateError``.  A job runs once.

    Args:
        kind: Document kind to render.
        request: Render input.
        templates: Template store to load the kind's template from.
        fetcher: Image downloader for signature slots.
    """

    def __init__(
        self,
        kind: DocumentKind,
        request: RenderRequest,
        templates: TemplateStore | None = None,
        fetcher: Fetcher | None = None,
    ):
        self.kind = kind
        self.request = request
        self.templates = templates if templates is not None else default_store()
        self.fetcher = fetcher
        self.stage = RenderStage.INITIALIZING
        self.report = RenderReport()

        self.fields: dict[str, object] = {}
        self.pdf: Pdf | None = None
        self.template: Pdf | None = None
        self.canvases: DocumentCanvas | None = None
        self.index: FormIndex | None = None
        self.filler: FormFiller | None = None
        self.layout: FlowLayout | None = None
        self.strategy = ""
        self.table_strategy = ""

    def _enter(self, stage: RenderStage) -> None:
        current = _STAGES.index(self.stage)
        if _STAGES.index(stage) != current + 1:
            raise RenderStateError(
                f"Cannot enter {stage.value} from {self.stage.value}"
            )
        self.stage = stage
        logger.debug("%s: %s", self.kind.name, stage.value)

    def run(self) -> RenderResult:
        """Render the request.

        Raises:
            TemplateLoadError: If the kind's template is missing or corrupt.
            RenderStateError: If the job has already run.
        """
        if self.stage is not RenderStage.INITIALIZING:
            raise RenderStateError("Render job has already run")
        try:
            self.resolve_fields()
            self.select_strategy()
            self.draw_static_layout()
            self.draw_dynamic_fields()
            self.draw_table()
            self.embed_signatures()
            return self.finalize()
        finally:
            self._close()

    def resolve_fields(self) -> None:
        self._enter(RenderStage.RESOLVING_FIELDS)
        self.fields = self.kind.prepared_fields(self.request)

    def select_strategy(self) -> None:
        """Open the template (if any) and pick form, freehand or flow."""
        self._enter(RenderStage.STRATEGY_SELECTION)
        kind = self.kind

        if kind.flow is not None:
            self.pdf = Pdf.new()
            self.strategy = FLOW
        elif kind.template is not None:
            self.pdf = self.templates.open(kind.template)
            self.template = self.templates.open(kind.template)
            if len(self.pdf.pages) == 0:
                raise TemplateLoadError(f"Template {kind.template} has no pages")
            self.index = FormIndex(self.pdf)
            mapped = [
                name
                for field_name in kind.field_names.values()
                for name in destinations(field_name)
            ]
            if kind.direct_widget_keys:
                mapped.extend(self.fields)
            self.strategy = FORM if self.index.has_any(mapped) else FREEHAND
        else:
            self.pdf = Pdf.new()
            self.pdf.add_blank_page(page_size=kind.page_size)
            self.strategy = FREEHAND

        fonts = StandardFonts(self.pdf)
        self.canvases = DocumentCanvas(self.pdf, fonts)
        if self.index is not None:
            self.filler = FormFiller(self.pdf, self.index, self.report, fonts)
        if kind.table is not None:
            self.table_strategy = select_table_strategy(kind.table, self.index)

        self.report.strategy = self.strategy
        logger.info(
            "Rendering %s %s (%s)", kind.name, self.request.record_id, self.strategy
        )

    def draw_static_layout(self) -> None:
        self._enter(RenderStage.DRAWING_STATIC_LAYOUT)
        if self.strategy == FLOW:
            self.layout = FlowLayout(
                self.pdf,
                self.canvases.fonts,
                preview_mode=self.request.preview_mode,
                report=self.report,
                page_size=self.kind.page_size,
            )
        elif self.strategy == FREEHAND:
            draw_chrome(
                self.canvases.page(0), self.kind.freehand_chrome(), self.kind.offset
            )

    def draw_dynamic_fields(self) -> None:
        self._enter(RenderStage.DRAWING_DYNAMIC_FIELDS)
        kind = self.kind
        if self.strategy == FLOW:
            kind.flow(self.layout, self.fields, self.request)
        elif self.strategy == FORM:
            self.filler.apply(
                self.fields,
                kind.field_names,
                boolean_keys=kind.boolean_keys,
                direct=kind.direct_widget_keys,
            )
        else:
            draw_fields(
                self.canvases.page(0),
                kind.coordinates,
                self.fields,
                self.report,
                offset=kind.offset,
                boolean_keys=kind.boolean_keys,
                preview_mode=self.request.preview_mode,
            )

    def draw_table(self) -> None:
        self._enter(RenderStage.DRAWING_TABLE)
        table = self.kind.table
        if table is None or self.strategy == FLOW:
            return
        if self.strategy == FREEHAND:
            chrome = self.kind.freehand_chrome()
        else:
            chrome = []
        pager = TablePager(
            table,
            self.canvases,
            self.report,
            strategy=self.table_strategy,
            filler=self.filler,
            template=self.template,
            page_size=self.kind.page_size,
            chrome=chrome,
            offset=self.kind.offset,
        )
        pager.render(self.request.appliances)

    def embed_signatures(self) -> None:
        self._enter(RenderStage.EMBEDDING_SIGNATURES)
        if not self.kind.signatures or self.strategy == FLOW:
            return
        embedder = SignatureEmbedder(self.pdf, self.report, self.fetcher)
        for slot in self.kind.signatures:
            value = self.fields.get(slot.key)
            located = resolve_slot_box(slot, self.index, self.kind.offset)
            if located is None:
                logger.debug("No place for %s image on this template", slot.name)
                continue
            page_index, box = located
            canvas = self.canvases.page(page_index)
            if isinstance(value, (bytes, bytearray)):
                embedder.embed_bytes(canvas, slot.name, bytes(value), box, slot.padding)
            else:
                embedder.embed_url(canvas, slot.name, to_text(value), box, slot.padding)

    def finalize(self) -> RenderResult:
        """Flush drawing, stamp document info and serialize."""
        self._enter(RenderStage.FINALIZING)
        if self.filler is not None:
            self.filler.refresh_appearances()
        if self.layout is not None:
            self.layout.finish()
        self.canvases.flush()

        issued = _as_datetime(self.request.issued_at)
        pdf_date = format_pdf_date(issued)
        docinfo = self.pdf.docinfo
        docinfo[Name.Title] = String(self.kind.title)
        docinfo[Name.Producer] = String(PRODUCER)
        docinfo[Name.CreationDate] = String(pdf_date)
        docinfo[Name.ModDate] = String(pdf_date)

        page_count = len(self.pdf.pages)
        buffer = BytesIO()
        self.pdf.save(buffer, deterministic_id=True)

        self._enter(RenderStage.SAVED)
        logger.info(
            "Rendered %s: %d page(s), %d bytes",
            self.kind.name,
            page_count,
            buffer.getbuffer().nbytes,
        )
        return RenderResult(
            pdf_bytes=buffer.getvalue(),
            filename=self.kind.filename(self.request.record_id),
            title=self.kind.title,
            kind=self.kind.name,
            metadata={
                "issued_at": format_date(issued),
                "record_id": self.request.record_id,
                "page_count": page_count,
                "strategy": self.strategy,
            },
            report=self.report,
        )

    def _close(self) -> None:
        for pdf in (self.template, self.pdf):
            if pdf is not None:
                pdf.close()
        self.template = None
        self.pdf = None


class DocumentAssembler:
    """Renders requests with a shared template store and image fetcher.

    Args:
        templates: Template store; defaults to the process-wide store.
        fetcher: Image downloader; defaults to an HTTP GET with the
            configured timeout.
    """

    def __init__(
        self, templates: TemplateStore | None = None, fetcher: Fetcher | None = None
    ):
        self.templates = templates
        self.fetcher = fetcher

    def render(self, request: RenderRequest, kind: DocumentKind | str) -> RenderResult:
        if isinstance(kind, str):
            kind = get_kind(kind)
        return RenderJob(kind, request, self.templates, self.fetcher).run()


def render_document(
    kind: DocumentKind | str,
    field_map: FieldMap,
    appliances: Sequence[Mapping[str, object]] = (),
    *,
    issued_at: date | datetime,
    record_id: str,
    preview_mode: bool = False,
    photos: Sequence[Mapping[str, object]] = (),
    qr_image: bytes | None = None,
    templates: TemplateStore | None = None,
    fetcher: Fetcher | None = None,
) -> RenderResult:
    """Render one document.

    Args:
        kind: Document kind name (see ``list_kinds()``) or definition.
        field_map: Domain key to raw value.
        appliances: Repeating table rows.
        issued_at: Issue timestamp.
        record_id: Record identifier, used in the filename.
        preview_mode: Show placeholders in empty boxes.
        photos: Photo records for kinds that summarise attachments.
        qr_image: QR raster for the job sheet.
        templates: Template store to use instead of the default one.
        fetcher: Image downloader to use instead of HTTP GET.

    Returns:
        The rendered document and its completeness report.

    Raises:
        UnknownDocumentKindError: If ``kind`` is not a registered name.
        TemplateLoadError: If the kind's template is missing or corrupt.
    """
    request = RenderRequest(
        field_map=dict(field_map),
        issued_at=issued_at,
        record_id=str(record_id),
        appliances=tuple(appliances),
        preview_mode=preview_mode,
        photos=tuple(photos),
        qr_image=qr_image,
    )
    return DocumentAssembler(templates, fetcher).render(request, kind)
