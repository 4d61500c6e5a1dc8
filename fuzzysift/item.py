"""A single input line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .ansi import AnsiOffset, extract_color

MIN_INDEX = -(2**31)


@dataclass
class Item:
    """An input line as matched, with its original form and colour spans.

    ``text`` is what the matchers see; ``orig_text`` is the line as read,
    kept when the displayed text was derived from it.
    """

    text: str
    index: int = 0
    orig_text: Optional[str] = None
    colors: Optional[list[AnsiOffset]] = None
    transformed: Any = None

    @property
    def color_offsets(self) -> list[AnsiOffset]:
        """Colour spans of the text, empty when there are none."""
        return self.colors if self.colors is not None else []

    def as_string(self, strip_ansi: bool = False) -> str:
        """The original line, optionally without escape sequences."""
        if self.orig_text is not None:
            if strip_ansi:
                trimmed, _, _ = extract_color(self.orig_text, None, None)
                return trimmed
            return self.orig_text
        return self.text