# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Gas warning notice.

The notice template is a printed form; its yes/no questions are answered by
writing an "X" into small text boxes, except the tagging question which is a
real checkbox.
"""

from ..canvas import A4_LANDSCAPE
from ..utils import format_date
from ..values import is_truthy, pick_text
from .base import DocumentKind, FieldGeometry, SignatureSlot

FIELD_NAMES = {
    "property_address": ("Text_25", "Text_26", "Text_27", "Text_28"),
    "postcode": "Text_29",
    "customer_name": ("Text_31", "Text_23"),
    "customer_contact": ("Text_38", "Text_39"),
    "appliance_location": "Text_10",
    "appliance_type": "Text_43",
    "make_model": "Text_40",
    "gas_supply_isolated": "Text_12",
    "appliance_capped_off": "Text_13",
    "customer_refused_isolation": "Text_14",
    "classification": "Text_11",
    "classification_code": "Text_44",
    "unsafe_situation_description": "Text_18",
    "underlying_cause": "Text_17",
    "actions_taken": "Text_19",
    "emergency_services_contacted": "Text_15",
    "emergency_reference": "Text_45",
    "danger_do_not_use_label_fitted": "Text_16",
    "meter_or_appliance_tagged": "Checkbox_1",
    "customer_informed": "Text_20",
    "customer_understands_risks": "Text_21",
    "customer_signature_url": None,
    "customer_signed_at": None,
    "engineer_name": ("Text_1", "Text_22"),
    "engineer_company": "Text_2",
    "gas_safe_number": "Text_8",
    "engineer_id_card_number": "Text_9",
    "engineer_signature_url": None,
    "issued_at": "Date_1",
    "record_id": "Text_41",
}

# Answered with an "X" in a text box.
CROSS_KEYS = frozenset(
    {
        "gas_supply_isolated",
        "appliance_capped_off",
        "customer_refused_isolation",
        "emergency_services_contacted",
        "danger_do_not_use_label_fitted",
        "customer_informed",
        "customer_understands_risks",
    }
)

COORDINATES = {
    "property_address": FieldGeometry(100, 520, 220, max_lines=2),
    "postcode": FieldGeometry(100, 505, 200),
    "customer_name": FieldGeometry(320, 520, 220, max_lines=2),
    "customer_contact": FieldGeometry(320, 505, 220),
    "appliance_location": FieldGeometry(100, 400, 150),
    "appliance_type": FieldGeometry(260, 400, 150),
    "make_model": FieldGeometry(420, 400, 200),
    "gas_supply_isolated": FieldGeometry(100, 370, 50),
    "appliance_capped_off": FieldGeometry(160, 370, 50),
    "customer_refused_isolation": FieldGeometry(220, 370, 50),
    "classification": FieldGeometry(280, 400, 130),
    "classification_code": FieldGeometry(420, 385, 200),
    "unsafe_situation_description": FieldGeometry(60, 290, 720, max_lines=4),
    "underlying_cause": FieldGeometry(60, 230, 340, max_lines=5),
    "actions_taken": FieldGeometry(420, 230, 340, max_lines=5),
    "emergency_services_contacted": FieldGeometry(280, 370, 50),
    "emergency_reference": FieldGeometry(420, 370, 200),
    "danger_do_not_use_label_fitted": FieldGeometry(340, 370, 50),
    "meter_or_appliance_tagged": FieldGeometry(100, 150, mark=True),
    "customer_informed": FieldGeometry(260, 150, 50),
    "customer_understands_risks": FieldGeometry(340, 150, 50),
    "customer_signed_at": FieldGeometry(100, 70, 200),
    "engineer_name": FieldGeometry(100, 540, 200),
    "engineer_company": FieldGeometry(100, 525, 200),
    "gas_safe_number": FieldGeometry(100, 510, 200),
    "engineer_id_card_number": FieldGeometry(100, 495, 200),
    "issued_at": FieldGeometry(420, 70, 200),
    "record_id": FieldGeometry(40, 570, 200),
}


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    fields["issued_at"] = pick_text(
        fields.get("issued_at"), format_date(request.issued_at)
    )
    fields["record_id"] = pick_text(fields.get("record_id"), request.record_id)
    for key in CROSS_KEYS:
        if key in fields and fields[key] is not None:
            fields[key] = "X" if is_truthy(fields[key]) else ""
    if fields.get("meter_or_appliance_tagged") is not None:
        fields["meter_or_appliance_tagged"] = is_truthy(
            fields["meter_or_appliance_tagged"]
        )
    return fields


KIND = DocumentKind(
    name="gas_warning_notice",
    title="Gas warning notice",
    filename_prefix="gas-warning-notice",
    template="gas_warning_notice.pdf",
    page_size=A4_LANDSCAPE,
    field_names=FIELD_NAMES,
    coordinates=COORDINATES,
    offset=(0.0, -26.0),
    signatures=(
        SignatureSlot(
            "customer_signature",
            "customer_signature_url",
            widget="Signature_2",
            box=(100, 80, 200, 40),
        ),
        SignatureSlot(
            "engineer_signature",
            "engineer_signature_url",
            widget="Signature_1",
            box=(420, 80, 200, 40),
        ),
    ),
    prepare=prepare,
)
