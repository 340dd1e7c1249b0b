"""Input lines as held by the finder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .ansi import AnsiOffset, extract_color


@dataclass
class Item:
    """One input line: the text that is searched and, optionally, its original.

    ``orig_text`` is kept when the searched text was derived from the input
    line; ``colors`` lists the coloured spans of ``text``.
    """

    text: str
    index: int = -1
    orig_text: Optional[str] = None
    colors: list[AnsiOffset] = field(default_factory=list)

    def as_string(self, strip_ansi: bool) -> str:
        """The original line, without escape sequences if ``strip_ansi``."""
        if self.orig_text is not None:
            if strip_ansi:
                trimmed, _, _ = extract_color(self.orig_text, None, None)
                return trimmed
            return self.orig_text
        return self.text