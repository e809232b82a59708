# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Landlord gas safety record (CP12)."""

from collections.abc import Mapping

from ..canvas import A4_LANDSCAPE
from ..utils import format_date
from ..values import first_value, join_text, pick_text
from .base import DocumentKind, FieldGeometry, SignatureSlot, TableColumn, TableSpec
from .chrome import record_header, signature_box, text_block

# Widget names on cp12.pdf.  Order matters: the combined comments and the
# signature block are written before the keys that share their widgets.
FIELD_NAMES = {
    "comments_combined": "comments.comments",
    "engineer_signature_text": "signatures.engineer_name",
    "responsible_person_signature_text": "signatures.customer_name",
    "acknowledgement_date": "signatures.issued_date",
    "cert_number": "Cert_no",
    "next_inspection_due": "safety_checks.due",
    "landlord_name": "customer.name",
    "landlord_address_line_1": "customer.address_line_1",
    "landlord_address_line_2": "customer.address_line_2",
    "landlord_town": "customer.address_line_3",
    "landlord_postcode": "customer.post_code",
    "property_address_line_1": "job_address.address_line_1",
    "property_address_line_2": "job_address.address_line_2",
    "property_town": "job_address.address_line_3",
    "property_postcode": "job_address.post_code",
    "company_name": "company.company",
    "company_address_line_1": "company.address_line_1",
    "company_address_line_2": "company.address_line_2",
    "company_town": "company.address_line_3",
    "company_postcode": "company.post_code",
    "company_phone": "company.tel_no",
    "company_email": "company.address_line_4",
    "gas_safe_number": "company.gas_safe_reg",
    "engineer_name": "company.engineer",
    "engineer_id_number": "company.id_card_no",
    "engineer_visit_time": None,
}

ROW_FIELDS = {
    "description": ("appliance_{n}.make", "appliance_{n}.model"),
    "location": "appliance_{n}.location",
    "type": "appliance_{n}.type",
    "flue_type": "appliance_{n}.flue_type",
    "operating_pressure": "appliance_{n}.operating_pressure",
    "heat_input": "appliance_{n}.heat_input",
    "safety_device": "appliance_{n}.safety_devices",
    "ventilation_satisfactory": "appliance_{n}.ventilation",
    "flue_termination_satisfactory": "appliance_{n}.flue_performance",
    "spillage_test": "appliance_{n}.visual_condition",
    "safe_to_use": "appliance_{n}.safe_to_use",
    "remedial_action_taken": "appliance_{n}.defects",
}

COLUMNS = (
    TableColumn("index", 26, 44),
    TableColumn("location", 74, 90),
    TableColumn("appliance_type", 174, 62),
    TableColumn("make_model", 244, 72),
    TableColumn("flue_type", 324, 52),
    TableColumn("operating_pressure", 384, 52),
    TableColumn("heat_input", 444, 52),
    TableColumn("flue_condition", 504, 52),
    TableColumn("ventilation", 564, 52),
    TableColumn("combustion", 624, 68),
    TableColumn("safety", 704, 108),
)

BLOCKS = {
    "defects": FieldGeometry(28, 172, 380, max_lines=4, line_height=12),
    "remedial_action": FieldGeometry(438, 172, 360, max_lines=4, line_height=12),
    "comments": FieldGeometry(28, 102, 380, max_lines=4, line_height=12),
}

COORDINATES = {
    "property_address": FieldGeometry(28, 540, 380, font_size=11),
    "postcode": FieldGeometry(438, 540, 160, font_size=11),
    "inspection_date": FieldGeometry(628, 540, 170, font_size=11),
    "landlord_name": FieldGeometry(28, 480, 380, font_size=11),
    "landlord_address": FieldGeometry(438, 480, 360, font_size=11),
    "engineer_name": FieldGeometry(28, 420, 270, font_size=11),
    "gas_safe_number": FieldGeometry(338, 420, 140, font_size=11),
    "company_name": FieldGeometry(508, 420, 290, font_size=11),
    "issued_at": FieldGeometry(526, 28, 126),
    "record_id": FieldGeometry(676, 28, 130),
    "next_inspection_due": FieldGeometry(438, 100, 170),
    "warning_notice_issued": FieldGeometry(638, 100, 170),
    **BLOCKS,
    "gas_tightness": FieldGeometry(32, 218, font_size=12, mark=True),
    "co_alarm_fitted": FieldGeometry(302, 218, font_size=12, mark=True),
    "co_alarm_tested": FieldGeometry(572, 218, font_size=12, mark=True),
    "reg_26_9_confirmed": FieldGeometry(32, 186, font_size=12, mark=True),
}

ENGINEER_BOX = (28, 16, 220, 32)
CUSTOMER_BOX = (278, 16, 220, 32)

CHROME = (
    *record_header("Gas Safety Record (CP12)", "Landlord / Owner"),
    *text_block("Defects Identified", BLOCKS["defects"]),
    *text_block("Remedial Action Taken", BLOCKS["remedial_action"]),
    *text_block("Comments", BLOCKS["comments"]),
    *signature_box("Engineer Signature", ENGINEER_BOX),
    *signature_box("Client Signature", CUSTOMER_BOX),
)


def build_combined_comments(fields: Mapping[str, object]) -> str:
    """Defects, remedial works and notes as labelled lines of one box."""
    lines = []
    for label, key in (
        ("Defects", "defects_identified"),
        ("Remedial", "remedial_works_required"),
        ("Notes", "additional_notes"),
    ):
        text = pick_text(fields.get(key))
        if text:
            lines.append(f"{label}: {text}")
    return "\n".join(lines)


def appliance_cells(index: int, row: Mapping[str, object]) -> dict[str, str]:
    description = pick_text(row.get("description"))
    return {
        # widget cells
        "description": description,
        "location": pick_text(row.get("location")),
        "type": pick_text(row.get("type"), row.get("appliance_type")),
        "flue_type": pick_text(row.get("flue_type")),
        "operating_pressure": pick_text(row.get("operating_pressure")),
        "heat_input": pick_text(row.get("heat_input")),
        "safety_device": pick_text(row.get("safety_device")),
        "ventilation_satisfactory": pick_text(row.get("ventilation_satisfactory")),
        "flue_termination_satisfactory": pick_text(
            row.get("flue_termination_satisfactory")
        ),
        "spillage_test": pick_text(row.get("spillage_test")),
        "safe_to_use": pick_text(row.get("safe_to_use")),
        "remedial_action_taken": pick_text(row.get("remedial_action_taken")),
        # grid cells
        "index": str(index + 1),
        "appliance_type": pick_text(description, row.get("appliance_type")),
        "make_model": pick_text(
            row.get("make_model"),
            row.get("appliance_make_model"),
            join_text([row.get("make"), row.get("model")], " "),
        ),
        "flue_condition": pick_text(row.get("flue_condition")),
        "ventilation": pick_text(
            row.get("ventilation_satisfactory"), row.get("ventilation_provision")
        ),
        "combustion": pick_text(
            row.get("co_reading_ppm"),
            row.get("combustion_reading"),
            row.get("co2_percent"),
        ),
        "safety": join_text(
            [row.get("safety_rating"), row.get("classification_code")], " / "
        ),
    }


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    issue_date = pick_text(fields.get("issue_date"), format_date(request.issued_at))
    fields["issue_date"] = issue_date
    fields["comments_combined"] = build_combined_comments(fields)
    fields["engineer_signature_text"] = pick_text(
        fields.get("engineer_signature_text"), fields.get("engineer_name")
    )
    fields["responsible_person_signature_text"] = pick_text(
        fields.get("responsible_person_signature_text"),
        fields.get("responsible_person_name"),
    )
    fields["acknowledgement_date"] = pick_text(
        fields.get("responsible_person_acknowledgement_date"), issue_date
    )

    # Freehand keys, falling back to the widget-oriented ones.
    fields["property_address"] = pick_text(
        fields.get("property_address"),
        join_text(
            [
                fields.get("property_address_line_1"),
                fields.get("property_address_line_2"),
                fields.get("property_town"),
            ]
        ),
        fields.get("address"),
    )
    fields["postcode"] = pick_text(
        fields.get("postcode"), fields.get("property_postcode")
    )
    fields["inspection_date"] = pick_text(
        fields.get("inspection_date"), fields.get("scheduled_for"), issue_date
    )
    fields["landlord_name"] = pick_text(
        fields.get("landlord_name"), fields.get("customer_name")
    )
    fields["landlord_address"] = pick_text(
        fields.get("landlord_address"),
        join_text(
            [
                fields.get("landlord_address_line_1"),
                fields.get("landlord_address_line_2"),
                fields.get("landlord_town"),
                fields.get("landlord_postcode"),
            ]
        ),
        fields.get("address"),
    )
    fields["issued_at"] = format_date(request.issued_at)
    fields["record_id"] = request.record_id
    fields["next_inspection_due"] = pick_text(
        fields.get("next_inspection_due"),
        fields.get("next_inspection_date"),
        fields.get("completion_date"),
    )
    fields["defects"] = pick_text(
        fields.get("defects_identified"), fields.get("defect_description")
    )
    fields["remedial_action"] = pick_text(
        fields.get("remedial_works_required"), fields.get("remedial_action")
    )
    fields["comments"] = pick_text(
        fields.get("additional_notes"), fields.get("comments"), fields.get("notes")
    )
    fields["gas_tightness"] = first_value(
        fields.get("gas_tightness"),
        fields.get("gas_tightness_test"),
        fields.get("gas_tightness_satisfactory"),
    )
    return fields


KIND = DocumentKind(
    name="cp12",
    title="Gas Safety Record (CP12)",
    filename_prefix="cp12",
    template="cp12.pdf",
    page_size=A4_LANDSCAPE,
    field_names=FIELD_NAMES,
    coordinates=COORDINATES,
    chrome=CHROME,
    offset=(10.0, 8.0),
    table=TableSpec(
        columns=COLUMNS,
        max_rows_per_page=6,
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
