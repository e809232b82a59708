# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Helpers shared by the checklist-style forms (breakdown, commissioning).

Those templates name most widgets after the data-layer keys, so the kinds
write unmapped keys straight to same-named widgets and answer questions
with "Yes" or nothing.
"""

from collections.abc import Mapping, Sequence

from ..values import format_flag, pick_text, to_text


def flag_answers(fields: dict[str, object]) -> None:
    """Replace every boolean value with "Yes" or a blank answer."""
    for key, value in fields.items():
        if isinstance(value, bool):
            fields[key] = format_flag(value)


def job_reference(fields: Mapping[str, object], record_id: str) -> str:
    return pick_text(
        fields.get("job_reference"),
        fields.get("cert_no"),
        fields.get("record_id"),
        record_id,
    )


def labelled_lines(entries: Sequence[tuple[str, object]]) -> str:
    """Join ``label: value`` lines, leaving out empty values."""
    lines = []
    for label, value in entries:
        text = to_text(value)
        if text:
            lines.append(f"{label}: {text}")
    return "\n".join(lines)
