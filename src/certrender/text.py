# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Text sanitizing and fitting for drawn certificate text.

Drawn text uses the non-embedded Helvetica faces, so anything outside ASCII
is folded to ASCII first.  Fitting never raises: text that does not fit is
clamped with an ellipsis or has its surplus lines dropped.
"""

import re
from collections.abc import Callable

Measure = Callable[[str], float]

ELLIPSIS = "…"

_SUBSCRIPT_DIGITS = str.maketrans(
    "₀₁₂₃₄₅₆₇₈₉", "0123456789"
)

_WHITESPACE_RE = re.compile(r"\s+")


def to_ascii(value: object) -> str:
    """Convert a value to stripped ASCII text.

    Subscript digits (as in "CO₂") become plain digits; any other
    non-ASCII character becomes "?".

    Args:
        value: Any value; None yields "".

    Returns:
        ASCII-only string.
    """
    if value is None:
        return ""
    raw = str(value).translate(_SUBSCRIPT_DIGITS)
    return "".join(ch if ord(ch) < 128 else "?" for ch in raw).strip()


def clamp_text(text: str, max_width: float, measure: Measure) -> str:
    """Shorten text until it fits max_width, marking truncation with "…".

    Args:
        text: Text to fit.
        max_width: Available width in points.
        measure: Width function for the font and size in use.

    Returns:
        The text unchanged if it fits, otherwise a shortened version.
    """
    value = text
    while value and measure(value) > max_width:
        value = value[:-1]
    if value != text and len(value) > 2:
        while value and measure(value + ELLIPSIS) > max_width:
            value = value[:-1]
        value = value + ELLIPSIS
    return value


def wrap_text_ex(
    text: str, max_width: float, measure: Measure, max_lines: int | None = None
) -> tuple[list[str], bool]:
    """Greedy word-wrap that also reports whether anything was lost.

    Words are packed while the line width stays within max_width.  A single
    word wider than a line is clamped.

    Returns:
        Tuple of (lines, truncated) where truncated is True if lines were
        dropped past max_lines or a word had to be clamped.
    """
    words = [w for w in _WHITESPACE_RE.split(text) if w]
    if not words:
        return [], False

    lines: list[str] = []
    truncated = False
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if measure(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = clamp_text(word, max_width, measure)
        if current != word:
            truncated = True
    if current:
        lines.append(current)

    if max_lines is not None and len(lines) > max_lines:
        lines = lines[:max_lines]
        truncated = True
    return lines, truncated


def wrap_text(
    text: str, max_width: float, measure: Measure, max_lines: int | None = None
) -> list[str]:
    """Greedy word-wrap; overflow beyond max_lines is silently dropped."""
    lines, _ = wrap_text_ex(text, max_width, measure, max_lines)
    return lines


def wrap_paragraphs(text: str, max_width: float, measure: Measure) -> list[str]:
    """Word-wrap text keeping its explicit line breaks.

    Used for multiline form fields, where an empty paragraph is a blank line.
    """
    if max_width <= 0:
        return text.splitlines() or [""]

    result: list[str] = []
    for para in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if not para.strip():
            result.append("")
            continue
        result.extend(wrap_text(para, max_width, measure))
    return result or [""]


def split_lines(text: str) -> list[str]:
    """Split text on newlines, dropping empty lines (no re-wrapping)."""
    return [line for line in re.split(r"\r?\n", text) if line]
