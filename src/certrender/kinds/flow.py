# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pieces shared by the reports drawn with the flow layout."""

from collections.abc import Callable, Mapping
from datetime import datetime

from ..layout import FieldEntry, FlowLayout
from ..values import is_truthy, to_text

BRAND = "certnow"
FALSY_TOKENS = frozenset({"false", "no", "n"})


def issued_text(issued_at: datetime) -> str:
    return issued_at.strftime("%d/%m/%Y %H:%M")


def answer(value: object) -> str:
    """Render a yes/no answer, passing through anything else as written."""
    text = to_text(value)
    if not text:
        return ""
    if is_truthy(text):
        return "Yes"
    if text.lower() in FALSY_TOKENS:
        return "No"
    return text


def draw_title(layout: FlowLayout, title: str, issued_at: datetime) -> None:
    """Document title with the brand line and issue timestamp."""
    layout.heading(title, size=18)
    layout.canvas.text(layout.margin, layout.y, BRAND, size=16, bold=True)
    layout.canvas.text(
        layout.margin + layout.content_width - 200,
        layout.y,
        f"Issued: {issued_text(issued_at)}",
        size=10,
    )
    layout.y -= 16 + 8


def continued(layout: FlowLayout, title: str) -> Callable[[], None]:
    """Page-break callback that repeats the title."""

    def on_break() -> None:
        layout.heading(f"{title} - Continued")

    return on_break


def draw_signatures(
    layout: FlowLayout, fields: Mapping[str, object], preview_mode: bool
) -> None:
    """Signature row; final documents say "On file" for a missing entry."""
    default = "" if preview_mode else "On file"
    width = layout.page_width / 2 - layout.margin
    layout.field_row(
        [
            FieldEntry(
                "Engineer signature",
                to_text(fields.get("engineer_signature")) or default,
                width,
            ),
            FieldEntry(
                "Customer signature",
                to_text(fields.get("customer_signature")) or default,
                width,
            ),
        ],
        spacing=12,
    )
