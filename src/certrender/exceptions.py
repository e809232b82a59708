# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for certrender."""


class CertRenderError(Exception):
    """Base exception for all certrender errors."""


class TemplateLoadError(CertRenderError):
    """Template asset is missing or cannot be parsed as a PDF."""


class UnknownDocumentKindError(CertRenderError):
    """No document kind is registered under the requested name."""


class RenderStateError(CertRenderError):
    """Render stages were entered out of order."""


class ImageEmbedError(CertRenderError):
    """Image bytes could not be decoded into an image XObject."""
