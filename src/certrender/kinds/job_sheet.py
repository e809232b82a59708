# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Printable job sheet with a QR code for opening the job on site.

The QR raster is produced upstream and arrives as image bytes on the
request; it is placed like a signature image.
"""

from ..canvas import A4_PORTRAIT
from ..values import pick_text, resolve_date
from .base import ChromeText, DocumentKind, FieldGeometry, SignatureSlot

MARGIN = 48.0
LINE_GAP = 22.0
VALUE_INDENT = 140.0
QR_SIZE = 130.0
MISSING = "N/A"

_WIDTH, _HEIGHT = A4_PORTRAIT

ROWS = (
    ("customer", "Customer"),
    ("property", "Property"),
    ("job_reference", "Job reference"),
    ("job_date", "Job date"),
    ("sheet_code", "Sheet code"),
)


def _row_y(index: int) -> float:
    return _HEIGHT - MARGIN - 70 - index * LINE_GAP


COORDINATES = {
    key: FieldGeometry(
        MARGIN + VALUE_INDENT,
        _row_y(i),
        _WIDTH - 2 * MARGIN - VALUE_INDENT,
        font_size=11,
    )
    for i, (key, _) in enumerate(ROWS)
}

CHROME = (
    ChromeText(MARGIN, _HEIGHT - MARGIN - 12, "Job Sheet", size=28, bold=True),
    *(
        ChromeText(MARGIN, _row_y(i), label, size=11, bold=True)
        for i, (_, label) in enumerate(ROWS)
    ),
    ChromeText(MARGIN, MARGIN + 8, "Scan this QR in CertNow to open this job", 10),
)

QR_BOX = (_WIDTH - MARGIN - QR_SIZE, MARGIN, QR_SIZE, QR_SIZE)


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    fields["customer"] = pick_text(
        fields.get("customer_name"),
        fields.get("customer_organization"),
        fields.get("client_name"),
        "Customer",
    )
    fields["property"] = pick_text(
        fields.get("property_address"), fields.get("address"), "Address not set"
    )
    fields["job_reference"] = pick_text(
        fields.get("job_title"), fields.get("job_id"), request.record_id
    )
    job_date = fields.get("scheduled_for")
    if job_date is None:
        job_date = fields.get("created_at")
    fields["job_date"] = resolve_date(job_date)
    for key, _ in ROWS:
        fields[key] = pick_text(fields.get(key), MISSING)
    fields["qr_image"] = request.qr_image
    return fields


KIND = DocumentKind(
    name="job_sheet",
    title="Job sheet",
    filename_prefix="job-sheet",
    page_size=A4_PORTRAIT,
    coordinates=COORDINATES,
    chrome=CHROME,
    signatures=(SignatureSlot("qr_code", "qr_image", box=QR_BOX, padding=0),),
    prepare=prepare,
)
