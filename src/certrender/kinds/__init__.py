# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Registry of the document kinds certrender can produce."""

from ..exceptions import UnknownDocumentKindError
from . import (
    boiler_service,
    breakdown,
    commissioning,
    cp12,
    gas_service,
    gas_warning_notice,
    general_works,
    job_sheet,
)
from .base import DocumentKind

KINDS: dict[str, DocumentKind] = {
    module.KIND.name: module.KIND
    for module in (
        cp12,
        gas_service,
        gas_warning_notice,
        breakdown,
        commissioning,
        boiler_service,
        general_works,
        job_sheet,
    )
}


def get_kind(name: str) -> DocumentKind:
    """Look up a document kind by name.

    Raises:
        UnknownDocumentKindError: If no kind has that name.
    """
    try:
        return KINDS[name]
    except KeyError:
        known = ", ".join(sorted(KINDS))
        raise UnknownDocumentKindError(
            f"Unknown document kind: {name!r} (known kinds: {known})"
        ) from None


def list_kinds() -> list[str]:
    return list(KINDS)


__all__ = ["DocumentKind", "KINDS", "get_kind", "list_kinds"]
