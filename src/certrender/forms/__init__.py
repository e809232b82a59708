# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Form-field strategy: field index, value writes and appearances."""

from .fields import FormField, FormIndex, WidgetKind
from .filler import FormFiller, set_checkbox_value, set_text_value

__all__ = [
    "FormField",
    "FormFiller",
    "FormIndex",
    "WidgetKind",
    "set_checkbox_value",
    "set_text_value",
]
