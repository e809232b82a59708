# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Completeness report returned with every rendered document.

A render never fails because of bad data, so the report is the only record
of what did not make it onto the page: values that were empty, writes that
were skipped and why, text that had to be shortened, and images that could
not be fetched.
"""

from dataclasses import dataclass, field
from enum import Enum


class SkipReason(Enum):
    """Why a value was not written to a physical destination."""

    MISSING = "missing"
    ALREADY_FILLED = "already_filled"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class SkippedWrite:
    key: str
    target: str
    reason: SkipReason


@dataclass
class RenderReport:
    """What was and was not rendered.

    Attributes:
        strategy: "form" or "freehand" for the document body.
        table_strategy: Strategy used for the repeating table, if any.
        written: Physical destinations that received a value.
        blank: Domain keys whose value was empty (intentionally blank).
        skipped: Writes that could not happen.
        truncated: Keys whose text was clamped or had lines dropped.
        images_failed: Image slots left blank after a fetch/decode error.
        table_pages: Number of table rows on each table page.
    """

    strategy: str = ""
    table_strategy: str = ""
    written: list[str] = field(default_factory=list)
    blank: list[str] = field(default_factory=list)
    skipped: list[SkippedWrite] = field(default_factory=list)
    truncated: list[str] = field(default_factory=list)
    images_failed: list[str] = field(default_factory=list)
    table_pages: list[int] = field(default_factory=list)

    def record_written(self, target: str) -> None:
        self.written.append(target)

    def record_blank(self, key: str) -> None:
        if key not in self.blank:
            self.blank.append(key)

    def record_skip(self, key: str, target: str, reason: SkipReason) -> None:
        self.skipped.append(SkippedWrite(key, target, reason))

    def record_truncated(self, key: str) -> None:
        if key not in self.truncated:
            self.truncated.append(key)

    def record_image_failure(self, slot: str) -> None:
        self.images_failed.append(slot)

    def skipped_for(self, reason: SkipReason) -> list[SkippedWrite]:
        return [s for s in self.skipped if s.reason is reason]

    @property
    def is_complete(self) -> bool:
        """True when nothing was truncated, lost to a missing widget or an
        image failure.

        Writes skipped because another key already filled the widget are
        not losses.
        """
        lost = [
            s for s in self.skipped if s.reason is not SkipReason.ALREADY_FILLED
        ]
        return not (lost or self.truncated or self.images_failed)

    def as_dict(self) -> dict:
        """Plain-data view for JSON output."""
        return {
            "strategy": self.strategy,
            "table_strategy": self.table_strategy,
            "written": list(self.written),
            "blank": list(self.blank),
            "skipped": [
                {"key": s.key, "target": s.target, "reason": s.reason.value}
                for s in self.skipped
            ],
            "truncated": list(self.truncated),
            "images_failed": list(self.images_failed),
            "table_pages": list(self.table_pages),
            "complete": self.is_complete,
        }
