# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""certrender - Render gas safety certificates and job paperwork to PDF."""

from importlib.metadata import PackageNotFoundError, version

from .document import (
    DocumentAssembler,
    RenderRequest,
    RenderResult,
    RenderStage,
    render_document,
)
from .exceptions import (
    CertRenderError,
    ImageEmbedError,
    RenderStateError,
    TemplateLoadError,
    UnknownDocumentKindError,
)
from .kinds import get_kind, list_kinds
from .report import RenderReport, SkipReason
from .templates import TemplateStore

try:
    __version__ = version("certrender")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "render_document",
    "DocumentAssembler",
    "RenderRequest",
    "RenderResult",
    "RenderStage",
    "RenderReport",
    "SkipReason",
    "TemplateStore",
    "get_kind",
    "list_kinds",
    "CertRenderError",
    "TemplateLoadError",
    "UnknownDocumentKindError",
    "RenderStateError",
    "ImageEmbedError",
]
