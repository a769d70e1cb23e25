"""Script detection and right-to-left text shaping."""

from __future__ import annotations

import re

import arabic_reshaper
from bidi.algorithm import get_display

# Arabic block only; presentation forms appear after shaping, never in input
_RE_ARABIC = re.compile(r"[\u0600-\u06FF]")


def is_right_to_left(text: str) -> bool:
    """Return *True* if *text* contains at least one Arabic-block code point."""
    return bool(text) and _RE_ARABIC.search(text) is not None


class TextShaper:
    """Turns logical-order RTL text into the left-to-right drawing order.

    Two passes, in order:

    1. contextual reshaping, so each Arabic letter takes its isolated,
       initial, medial or final joining form;
    2. the Unicode Bidirectional Algorithm with a right-to-left paragraph
       level, which keeps digits and Latin runs left-to-right.

    Characters the reshaper has no data for are passed through untouched.
    """

    def __init__(self, reshaper: arabic_reshaper.ArabicReshaper) -> None:
        self._reshaper = reshaper

    def to_visual_order(self, text: str) -> str:
        if not text:
            return text
        return get_display(self._reshaper.reshape(text), base_dir="R")
