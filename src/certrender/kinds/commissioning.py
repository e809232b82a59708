# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Boiler commissioning checklist."""

from ..canvas import A4_PORTRAIT
from ..utils import format_date
from ..values import pick_text, resolve_date
from .base import DocumentKind
from .checklist import flag_answers, job_reference

FIELD_NAMES = {
    "job_reference": "job_ref",
    "commissioning_date": "commissioning_date",
    "next_service_due": "next_service_due",
    "print_name_issued": "print_name_issued",
    "print_name_received": "print_name_received",
    "engineer_name": "engineer_name",
    "company_name": "company_name",
    "gas_safe_number": "gas_safe_reg",
    "client_name": "client_name",
    "client_address": ("client_address_1", "client_address_2", "client_address_3"),
    "client_postcode": "client_postcode",
    "job_address": ("job_address_1", "job_address_2", "job_address_3"),
    "job_postcode": "job_postcode",
    "boiler_make": "boiler_make",
    "boiler_model": "boiler_model",
    "boiler_serial": "boiler_serial",
    "gas_rate": "gas_rate",
    "burner_pressure": "burner_pressure",
    "co_ppm": "co_ppm",
    "co2_percent": "co2_percent",
    "ratio": "co_co2_ratio",
}


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    issued = format_date(request.issued_at)
    commissioned = fields.get("commissioning_date")
    if commissioned is None:
        commissioned = fields.get("issued_at")
    fields["commissioning_date"] = resolve_date(commissioned, issued)
    fields["next_service_due"] = resolve_date(fields.get("next_service_due"))
    fields["job_reference"] = job_reference(fields, request.record_id)
    fields["print_name_issued"] = pick_text(
        fields.get("print_name_issued"), fields.get("engineer_name")
    )
    fields["print_name_received"] = pick_text(
        fields.get("print_name_received"), fields.get("client_name")
    )
    flag_answers(fields)
    return fields


KIND = DocumentKind(
    name="commissioning",
    title="Commissioning checklist",
    filename_prefix="commissioning-checklist",
    template="commissioning_checklist.pdf",
    page_size=A4_PORTRAIT,
    field_names=FIELD_NAMES,
    direct_widget_keys=True,
    prepare=prepare,
)
