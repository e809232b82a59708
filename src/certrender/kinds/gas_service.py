# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Gas service (boiler service) record on the service template."""

from collections.abc import Mapping

from ..canvas import A4_LANDSCAPE
from ..utils import format_date
from ..values import join_text, pick_text
from .base import DocumentKind, FieldGeometry, SignatureSlot, TableColumn, TableSpec
from .chrome import record_header, signature_box, text_block

# The service template numbers its widgets.
FIELD_NAMES = {
    "cert_number": "1",
    "engineer_name": "4",
    "company_name": "5",
    "company_address_line_1": "6",
    "company_address_line_2": "7",
    "company_town": "8",
    "company_postcode": "9",
    "company_phone": "10",
    "gas_safe_number": "11",
    "engineer_id": "12",
    "job_name": "14",
    "job_address_line_1": "15",
    "job_address_line_2": "16",
    "job_town": "17",
    "job_postcode": "18",
    "job_phone": "19",
    "client_name": "21",
    "client_company": "22",
    "client_address_line_1": "23",
    "client_address_line_2": "24",
    "client_town": "25",
    "client_postcode": "26",
    "client_phone": "27",
    "next_service_date": "51",
    "engineer_comments": "2",
}

ROW_FIELDS = {
    "type": "appliance_{n}_type",
    "make": "appliance_{n}_make",
    "model": "appliance_{n}_model",
    "location": "appliance_{n}_location",
    "serial": "appliance_{n}_serial",
}

COLUMNS = (
    TableColumn("index", 26, 44),
    TableColumn("location", 74, 120),
    TableColumn("boiler_type", 204, 100),
    TableColumn("make_model", 304, 140),
    TableColumn("operating_pressure", 444, 80),
    TableColumn("flue_check", 524, 80),
    TableColumn("safety", 604, 208),
)

BLOCKS = {
    "service_summary": FieldGeometry(28, 172, 380, max_lines=4, line_height=12),
    "recommendations": FieldGeometry(438, 172, 360, max_lines=4, line_height=12),
    "comments": FieldGeometry(28, 102, 380, max_lines=4, line_height=12),
}

COORDINATES = {
    "property_address": FieldGeometry(28, 540, 380, font_size=11),
    "postcode": FieldGeometry(438, 540, 160, font_size=11),
    "service_date": FieldGeometry(628, 540, 170, font_size=11),
    "customer_name": FieldGeometry(28, 480, 380, font_size=11),
    "customer_address": FieldGeometry(438, 480, 360, font_size=11),
    "engineer_name": FieldGeometry(28, 420, 270, font_size=11),
    "gas_safe_number": FieldGeometry(338, 420, 140, font_size=11),
    "company_name": FieldGeometry(508, 420, 290, font_size=11),
    "issued_at": FieldGeometry(526, 28, 126),
    "record_id": FieldGeometry(676, 28, 130),
    "next_service_due": FieldGeometry(438, 100, 170),
    **BLOCKS,
}

ENGINEER_BOX = (28, 16, 220, 32)
CUSTOMER_BOX = (278, 16, 220, 32)

CHROME = (
    *record_header("Boiler Service Record", "Customer / Landlord"),
    *text_block("Service Summary", BLOCKS["service_summary"]),
    *text_block("Recommendations / Further Work", BLOCKS["recommendations"]),
    *text_block("Comments", BLOCKS["comments"]),
    *signature_box("Engineer Signature", ENGINEER_BOX),
    *signature_box("Customer Signature", CUSTOMER_BOX),
)


def appliance_cells(index: int, row: Mapping[str, object]) -> dict[str, str]:
    make = pick_text(row.get("make"))
    model = pick_text(row.get("model"))
    return {
        "type": pick_text(row.get("type"), row.get("appliance_type")),
        "make": make,
        "model": model,
        "location": pick_text(row.get("location")),
        "serial": pick_text(row.get("serial")),
        "index": str(index + 1),
        "boiler_type": pick_text(
            row.get("boiler_type"), row.get("appliance_type"), row.get("type")
        ),
        "make_model": pick_text(
            row.get("make_model"),
            row.get("appliance_make_model"),
            join_text([make, model], " "),
        ),
        "operating_pressure": pick_text(row.get("operating_pressure")),
        "flue_check": pick_text(row.get("flue_check"), row.get("flue_condition")),
        "safety": pick_text(row.get("safety_rating"), row.get("classification_code")),
    }


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    fields["cert_number"] = pick_text(fields.get("cert_number"), request.record_id)
    fields["property_address"] = pick_text(
        fields.get("property_address"),
        join_text(
            [
                fields.get("job_address_line_1"),
                fields.get("job_address_line_2"),
                fields.get("job_town"),
            ]
        ),
        fields.get("address"),
    )
    fields["postcode"] = pick_text(fields.get("postcode"), fields.get("job_postcode"))
    fields["service_date"] = pick_text(
        fields.get("service_date"),
        fields.get("inspection_date"),
        fields.get("scheduled_for"),
    )
    fields["customer_name"] = pick_text(
        fields.get("customer_name"), fields.get("client_name")
    )
    fields["customer_address"] = pick_text(
        fields.get("customer_address"),
        join_text(
            [
                fields.get("client_address_line_1"),
                fields.get("client_address_line_2"),
                fields.get("client_town"),
                fields.get("client_postcode"),
            ]
        ),
        fields.get("address"),
    )
    fields["next_service_due"] = pick_text(
        fields.get("next_service_due"), fields.get("next_service_date")
    )
    fields["comments"] = pick_text(
        fields.get("comments"), fields.get("engineer_comments")
    )
    fields["issued_at"] = format_date(request.issued_at)
    fields["record_id"] = request.record_id
    return fields


KIND = DocumentKind(
    name="gas_service",
    title="Gas service record",
    filename_prefix="gas-service-record",
    template="gas_service.pdf",
    page_size=A4_LANDSCAPE,
    field_names=FIELD_NAMES,
    coordinates=COORDINATES,
    chrome=CHROME,
    offset=(10.0, 8.0),
    table=TableSpec(
        columns=COLUMNS,
        max_rows_per_page=4,
        start_y=312,
        row_height=28,
        cells=appliance_cells,
        row_fields=ROW_FIELDS,
    ),
    signatures=(
        SignatureSlot(
            "engineer_signature", "engineer_signature", box=ENGINEER_BOX, padding=3
        ),
        SignatureSlot(
            "customer_signature", "customer_signature", box=CUSTOMER_BOX, padding=3
        ),
    ),
    prepare=prepare,
)
