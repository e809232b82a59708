# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Normalisation of raw field values into renderable text.

Field maps arrive straight from the data layer: strings, booleans, dates or
None.  Everything here is pure; identical input always yields identical
output.
"""

import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime

from .utils import format_date

FieldValue = str | bool | int | float | date | datetime | None
FieldMap = Mapping[str, FieldValue]

# Physical destination(s) of a domain key: one widget, several adjacent
# widgets, or None for informational keys with no destination.
FormFieldName = str | tuple[str, ...] | None

TRUTHY_TOKENS = frozenset({"true", "yes", "y", "1", "on"})

_SLOT_SPLIT_RE = re.compile(r"\r?\n|,")


def is_truthy(value: object) -> bool:
    """Return True for True and for "true", "yes", "y", "1", "on" (any case)."""
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_TOKENS
    return False


def format_boolean(value: object) -> str:
    """Render a boolean-ish value as "Yes" or "No".

    None and blank strings stay blank so an unanswered question is not shown
    as "No".
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return ""
    return "Yes" if is_truthy(value) else "No"


def to_text(value: object) -> str:
    """Render a raw value as trimmed text.

    None becomes "", booleans become "Yes"/"No" and dates use DD/MM/YYYY.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return format_boolean(value)
    if isinstance(value, (date, datetime)):
        return format_date(value)
    return str(value).strip()


def pick_text(*values: object) -> str:
    """Return the first value that renders as non-empty text."""
    for value in values:
        text = to_text(value)
        if text:
            return text
    return ""


def destinations(field_name: FormFieldName) -> list[str]:
    """Normalise a mapping entry to a list of physical names."""
    if not field_name:
        return []
    if isinstance(field_name, str):
        return [field_name]
    return [name for name in field_name if name]


def split_into_slots(text: str, slots: int) -> list[str]:
    """Spread text over a fixed number of adjacent boxes.

    The text is split on newlines and commas.  With at most ``slots`` parts
    each slot gets one part and the rest stay empty; with more, the last slot
    receives every remaining part joined with ", ".

    Returns:
        A list of exactly ``slots`` strings.
    """
    if slots <= 0:
        return []
    parts = [part.strip() for part in _SLOT_SPLIT_RE.split(text)]
    parts = [part for part in parts if part]
    if len(parts) > slots:
        parts = parts[: slots - 1] + [", ".join(parts[slots - 1 :])]
    return parts + [""] * (slots - len(parts))


def resolve(
    raw_value: object, targets: Sequence[str], *, boolean: bool = False
) -> list[str]:
    """Resolve a raw value into one line per destination.

    Args:
        raw_value: Value from the field map.
        targets: Physical destinations for the value.
        boolean: Treat the value as a yes/no answer.

    Returns:
        One renderable line per destination (empty when there is nothing
        to show).
    """
    text = format_boolean(raw_value) if boolean else to_text(raw_value)
    if len(targets) <= 1:
        return [text] * len(targets) if targets else [text]
    return split_into_slots(text, len(targets))


def join_text(values: Sequence[object], separator: str = ", ") -> str:
    """Join the non-empty renderings of several values."""
    parts = [to_text(value) for value in values]
    return separator.join(part for part in parts if part)


def first_value(*values: object) -> object:
    """Return the first value that is not None or a blank string."""
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def format_flag(value: object) -> str:
    """Render a checklist answer as "Yes" when truthy and blank otherwise."""
    return "Yes" if is_truthy(value) else ""


def resolve_date(value: object, fallback: str = "") -> str:
    """Render a date-ish value as DD/MM/YYYY.

    Strings are parsed as ISO dates where possible and otherwise kept as
    written; anything else that is not a date yields ``fallback``.
    """
    if isinstance(value, (date, datetime)):
        return format_date(value)
    if not isinstance(value, str):
        return fallback
    text = value.strip()
    if not text:
        return fallback
    try:
        return format_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return text
