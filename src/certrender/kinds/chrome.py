# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Chrome shared by the landscape record layouts (CP12, service record).

Coordinates are in the unshifted frame of the coordinate tables; the
kind's offset is applied when drawing.
"""

from .base import Box, Chrome, ChromeRect, ChromeText, FieldGeometry


def record_header(title: str, owner_label: str) -> list[Chrome]:
    """Title and the address and engineer panels at the top of the page."""
    return [
        ChromeText(28, 560, title, size=14, bold=True),
        ChromeRect(24, 468, 400, 80),
        ChromeText(28, 540, owner_label),
        ChromeText(28, 524, "Property Address"),
        ChromeRect(432, 468, 360, 80),
        ChromeText(438, 540, "Correspondence Address"),
        ChromeRect(24, 408, 744, 52),
        ChromeText(28, 444, "Gas Safe Engineer Details"),
    ]


def text_block(label: str, geometry: FieldGeometry) -> list[Chrome]:
    """Outline and label around a wrapped text block."""
    lines = geometry.max_lines or 1
    inner = geometry.leading * lines
    return [
        ChromeRect(geometry.x - 4, geometry.y - 8, geometry.width + 8, inner + 12),
        ChromeText(geometry.x, geometry.y + inner + 2, label),
    ]


def signature_box(label: str, box: Box) -> list[Chrome]:
    x, y, width, height = box
    return [
        ChromeRect(x, y, width, height),
        ChromeText(x, y + height + 4, label, size=8),
    ]
