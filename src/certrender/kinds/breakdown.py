# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Gas breakdown record."""

from collections.abc import Mapping

from ..canvas import A4_PORTRAIT
from ..utils import format_date
from ..values import format_flag, pick_text, resolve_date
from .base import DocumentKind
from .checklist import flag_answers, job_reference, labelled_lines

FIELD_NAMES = {
    "job_reference": "job_ref",
    "job_visit_date": "visit_date",
    "breakdown_summary": "breakdown_details",
    "advice_summary": "advice_given",
    "issued_by_name": "issued_by_print_name",
    "received_by_name": "received_by_print_name",
    "engineer_name": "engineer_name",
    "company_name": "company_name",
    "gas_safe_number": "gas_safe_reg",
    "engineer_id_card_number": "id_card_no",
    "client_name": "client_name",
    "client_address": ("client_address_1", "client_address_2", "client_address_3"),
    "client_postcode": "client_postcode",
    "client_phone": "client_tel",
    "job_address": ("job_address_1", "job_address_2", "job_address_3"),
    "job_postcode": "job_postcode",
    "appliance_type": "appliance_type",
    "appliance_make": "appliance_make",
    "appliance_model": "appliance_model",
    "appliance_location": "appliance_location",
    "appliance_serial": "appliance_serial",
    "fault_resolved": "fault_resolved",
    "issued_date": "issued_date",
}


def build_breakdown_summary(fields: Mapping[str, object]) -> str:
    return labelled_lines(
        [
            ("Reported issue", fields.get("reported_issue")),
            ("Diagnostics", fields.get("diagnostics")),
            ("Actions taken", fields.get("actions_taken")),
            ("Fault location", fields.get("fault_location")),
            ("Part fitted", fields.get("part_fitted")),
            ("Fault resolved", format_flag(fields.get("fault_resolved"))),
            ("Parts required", fields.get("parts_required")),
        ]
    )


def build_advice_summary(fields: Mapping[str, object]) -> str:
    return labelled_lines(
        [
            ("Appliance safe", format_flag(fields.get("advice_appliance_safe"))),
            (
                "System improvements recommended",
                format_flag(fields.get("advice_system_improvements")),
            ),
            (
                "All functional parts available",
                format_flag(fields.get("advice_all_parts_available")),
            ),
            (
                "Recommended replacement",
                format_flag(fields.get("advice_replacement_recommended")),
            ),
            (
                "Magnetic filter fitted",
                format_flag(fields.get("advice_magnetic_filter")),
            ),
            ("CO alarm fitted", format_flag(fields.get("advice_co_alarm"))),
            ("Advice", fields.get("advice_text")),
        ]
    )


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    issued = format_date(request.issued_at)
    visit = fields.get("job_visit_date")
    if visit is None:
        visit = fields.get("visit_date", fields.get("issued_at"))
    fields["job_visit_date"] = resolve_date(visit, issued)
    fields["job_reference"] = job_reference(fields, request.record_id)
    fields["breakdown_summary"] = build_breakdown_summary(fields)
    fields["advice_summary"] = build_advice_summary(fields)
    fields["issued_by_name"] = pick_text(
        fields.get("issued_by_name"), fields.get("engineer_name")
    )
    fields["received_by_name"] = pick_text(
        fields.get("received_by_name"), fields.get("client_name")
    )
    fields["issued_date"] = pick_text(fields.get("issued_date"), issued)
    flag_answers(fields)
    return fields


KIND = DocumentKind(
    name="breakdown",
    title="Gas breakdown record",
    filename_prefix="gas-breakdown-record",
    template="gas_breakdown.pdf",
    page_size=A4_PORTRAIT,
    field_names=FIELD_NAMES,
    direct_widget_keys=True,
    prepare=prepare,
)
