# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Boiler service record, drawn from scratch on portrait pages."""

from ..canvas import A4_PORTRAIT
from ..layout import FieldEntry, FlowLayout
from ..values import pick_text, to_text
from .base import DocumentKind
from .flow import answer, continued, draw_signatures, draw_title, issued_text

TITLE = "Boiler Service Record"

SERVICE_ACTIONS = (
    ("Visual inspection", "service_visual_inspection"),
    ("Burner cleaned", "service_burner_cleaned"),
    ("Heat exchanger cleaned", "service_heat_exchanger_cleaned"),
    ("Condensate trap checked", "service_condensate_trap_checked"),
    ("Seals checked", "service_seals_checked"),
    ("Filters cleaned", "service_filters_cleaned"),
    ("Flue checked", "service_flue_checked"),
    ("Ventilation checked", "service_ventilation_checked"),
    ("Controls checked", "service_controls_checked"),
    ("Leaks checked", "service_leaks_checked"),
)

READINGS = (
    ("Operating pressure (mbar)", "operating_pressure_mbar"),
    ("Inlet pressure (mbar)", "inlet_pressure_mbar"),
    ("CO (ppm)", "co_ppm"),
    ("CO2 (%)", "co2_percent"),
    ("Flue gas temp (C)", "flue_gas_temp_c"),
    ("System pressure (bar)", "system_pressure_bar"),
)


def build(layout: FlowLayout, fields, request) -> None:
    def val(key):
        return to_text(fields.get(key))

    full = layout.content_width
    on_break = continued(layout, TITLE)

    draw_title(layout, TITLE, request.issued_at)

    layout.heading("Property / Customer")
    layout.field_box("Customer name", val("customer_name"), key="customer_name")
    layout.field_box(
        "Property address", val("property_address"), key="property_address"
    )
    layout.field_row(
        [
            FieldEntry("Postcode", val("postcode"), 160, key="postcode"),
            FieldEntry("Service date", val("service_date"), 180, key="service_date"),
        ],
        spacing=8,
    )

    layout.ensure_space(520, on_break)
    layout.heading("Engineer & Company")
    layout.field_row(
        [
            FieldEntry("Engineer name", val("engineer_name"), 220, key="engineer_name"),
            FieldEntry(
                "Gas Safe number", val("gas_safe_number"), 140, key="gas_safe_number"
            ),
        ],
        spacing=10,
    )
    layout.field_box("Company name", val("company_name"), key="company_name")
    layout.field_box("Company address", val("company_address"), key="company_address")

    layout.ensure_space(400, on_break)
    layout.heading("Boiler details")
    layout.field_row(
        [
            FieldEntry("Boiler make", val("boiler_make"), 200, key="boiler_make"),
            FieldEntry("Boiler model", val("boiler_model"), 200, key="boiler_model"),
        ],
        spacing=10,
    )
    layout.field_row(
        [
            FieldEntry("Boiler type", val("boiler_type"), 160, key="boiler_type"),
            FieldEntry("Location", val("boiler_location"), 160, key="boiler_location"),
            FieldEntry("Mount type", val("mount_type"), 120, key="mount_type"),
        ],
        spacing=10,
    )
    layout.field_row(
        [
            FieldEntry("Gas type", val("gas_type"), 160, key="gas_type"),
            FieldEntry("Flue type", val("flue_type"), 160, key="flue_type"),
            FieldEntry("Serial number", val("serial_number"), 180, key="serial_number"),
        ],
        spacing=10,
    )

    layout.ensure_space(260, on_break)
    layout.heading("Service actions")
    layout.check_grid(
        [(label, answer(fields.get(key))) for label, key in SERVICE_ACTIONS]
    )

    layout.ensure_space(200, on_break)
    layout.heading("Readings")
    readings = [(label, val(key)) for label, key in READINGS if val(key)]
    if readings:
        for label, value in readings:
            layout.field_row([FieldEntry(label, value, full)], spacing=6)
    elif request.preview_mode:
        layout.field_box("Readings", "")
    else:
        layout.note("No readings recorded")

    layout.ensure_space(140, on_break)
    layout.heading("Findings & recommendations")
    layout.paragraph_box(
        "Service summary", val("service_summary"), 60, key="service_summary"
    )
    layout.paragraph_box(
        "Recommendations", val("recommendations"), 60, key="recommendations"
    )
    layout.field_box("Parts used", val("parts_used"), key="parts_used")
    layout.field_box(
        "Next service due", val("next_service_due"), 240, key="next_service_due"
    )
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

    layout.ensure_space(80, on_break)
    layout.heading("Signatures")
    draw_signatures(layout, fields, request.preview_mode)
    layout.note(f"Issued at: {issued_text(request.issued_at)}", size=9)


def prepare(request) -> dict[str, object]:
    fields = dict(request.field_map)
    fields["service_date"] = pick_text(
        fields.get("service_date"),
        fields.get("inspection_date"),
        fields.get("scheduled_for"),
    )
    return fields


KIND = DocumentKind(
    name="boiler_service",
    title="Boiler service record",
    filename_prefix="boiler-service",
    page_size=A4_PORTRAIT,
    prepare=prepare,
    flow=build,
)
