# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""General works report, drawn from scratch on portrait pages."""

from collections import Counter
from collections.abc import Iterable, Mapping

from ..canvas import A4_PORTRAIT, BLACK
from ..layout import FieldEntry, FlowLayout
from ..text import to_ascii
from ..values import pick_text, to_text
from .base import DocumentKind
from .flow import answer, continued, draw_signatures, draw_title, issued_text

TITLE = "General Works Report"


def count_photos(photos: Iterable[Mapping[str, object]]) -> dict[str, int]:
    """Number of photos per category, in first-seen order."""
    counts: Counter[str] = Counter()
    for photo in photos:
        counts[to_ascii(photo.get("category")) or "other"] += 1
    return dict(counts)


def build(layout: FlowLayout, fields, request) -> None:
    def val(key):
        return to_text(fields.get(key))

    full = layout.content_width
    on_break = continued(layout, TITLE)

    draw_title(layout, TITLE, request.issued_at)

    layout.heading("Property / Customer")
    layout.field_box(
        "Property address", val("property_address"), key="property_address"
    )
    layout.field_row(
        [
            FieldEntry("Postcode", val("postcode"), 160, key="postcode"),
            FieldEntry("Work date", val("work_date"), 180, key="work_date"),
        ],
        spacing=8,
    )
    layout.field_row(
        [
            FieldEntry("Customer name", val("customer_name"), 160, key="customer_name"),
            FieldEntry(
                "Customer email", val("customer_email"), 200, key="customer_email"
            ),
            FieldEntry(
                "Customer phone", val("customer_phone"), 139, key="customer_phone"
            ),
        ],
        spacing=10,
    )

    layout.ensure_space(520, on_break)
    layout.heading("Engineer & Company")
    layout.field_row(
        [
            FieldEntry("Engineer name", val("engineer_name"), 220, key="engineer_name"),
            FieldEntry("Company name", val("company_name"), 260, key="company_name"),
        ],
        spacing=10,
    )

    layout.ensure_space(420, on_break)
    layout.heading("Work details")
    layout.paragraph_box("Work summary", val("work_summary"), 50, key="work_summary")
    layout.paragraph_box(
        "Work completed", val("work_completed"), 80, key="work_completed"
    )
    layout.paragraph_box("Parts used", val("parts_used"), 50, key="parts_used")

    layout.ensure_space(300, on_break)
    layout.field_row(
        [
            FieldEntry("Defects found", answer(fields.get("defects_found")), 180),
            FieldEntry(
                "Defect details",
                val("defects_details"),
                full - 192,
                key="defects_details",
            ),
        ],
        spacing=10,
    )
    layout.paragraph_box(
        "Recommendations", val("recommendations"), 50, key="recommendations"
    )

    layout.ensure_space(220, on_break)
    layout.heading("Invoice & follow up")
    half = (full - 12) / 2
    layout.field_row(
        [
            FieldEntry("Invoice amount", val("invoice_amount"), half),
            FieldEntry("Payment status", val("payment_status"), half),
        ],
        spacing=10,
    )
    layout.field_row(
        [
            FieldEntry(
                "Follow-up required", answer(fields.get("follow_up_required")), half
            ),
            FieldEntry("Follow-up date", val("follow_up_date"), half),
        ],
        spacing=10,
    )

    layout.ensure_space(160, on_break)
    layout.heading("Photos")
    counts = count_photos(request.photos)
    if counts:
        for category, count in counts.items():
            layout.ensure_space(layout.margin + 14, on_break)
            layout.note(f"{category}: {count} photo(s)", color=BLACK)
    elif request.preview_mode:
        layout.note("No photos added yet")
    else:
        layout.note("No photos attached")

    layout.ensure_space(80, on_break)
    layout.heading("Signatures")
    draw_signatures(layout, fields, request.preview_mode)
    layout.note(f"Issued at: {issued_text(request.issued_at)}", size=9)


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    fields["work_date"] = pick_text(
        fields.get("work_date"), fields.get("scheduled_for")
    )
    return fields


KIND = DocumentKind(
    name="general_works",
    title="General works report",
    filename_prefix="general-works",
    page_size=A4_PORTRAIT,
    prepare=prepare,
    flow=build,
)
