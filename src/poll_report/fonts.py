"""Process-wide fonts and shaping data.

Loaded once by :func:`load_resources` before any render call and then only
read, so concurrent renders share one :class:`RenderResources` without
locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import arabic_reshaper
import fitz  # PyMuPDF

from .errors import ResourceUnavailable
from .settings import Settings
from .text import TextShaper

logger = logging.getLogger("poll_report.fonts")

# Font keys used by draw instructions
FONT_REGULAR = "regular"
FONT_BOLD = "bold"
FONT_RTL = "rtl"

# PDF resource name for the embedded RTL font
_RTL_ALIAS = "Frtl"

# UCDN script code MuPDF uses to look up its bundled Noto face
_SCRIPT_ARABIC = 6

# Alef and initial-form lam; shaped text uses presentation forms
_REQUIRED_GLYPHS = ("\u0627", "\ufedf")


@dataclass(frozen=True)
class FontFace:
    """A font as PyMuPDF needs it: a page resource name plus metrics."""

    alias: str
    font: fitz.Font
    buffer: bytes | None = None  # None for the built-in Base-14 fonts

    def text_width(self, text: str, fontsize: float) -> float:
        return self.font.text_length(text, fontsize=fontsize)

    def has_glyph(self, char: str) -> bool:
        return self.font.has_glyph(ord(char)) != 0


@dataclass(frozen=True)
class RenderResources:
    faces: Mapping[str, FontFace]
    shaper: TextShaper
    rtl_font_path: str | None = None
    embedded: tuple[FontFace, ...] = field(default=())

    def face(self, key: str) -> FontFace:
        return self.faces[key]

    def runs(self, text: str, key: str) -> list[tuple[str, str]]:
        """Split visual-order *text* into ``(run, key)`` pieces, one face each.

        RTL strings may carry Latin letters or punctuation the Arabic face
        has no glyph for; those characters are drawn with the regular face.
        """
        if key != FONT_RTL:
            return [(text, key)]
        face = self.faces[FONT_RTL]
        pieces: list[tuple[str, str]] = []
        for char in text:
            run_key = FONT_RTL if face.has_glyph(char) else FONT_REGULAR
            if pieces and pieces[-1][1] == run_key:
                pieces[-1] = (pieces[-1][0] + char, run_key)
            else:
                pieces.append((char, run_key))
        return pieces

    def text_width(self, text: str, key: str, fontsize: float) -> float:
        """Rendered width of visual-order *text* in points."""
        return sum(self.faces[k].text_width(run, fontsize) for run, k in self.runs(text, key))


def _require_arabic(face: FontFace, origin: str) -> FontFace:
    missing = [c for c in _REQUIRED_GLYPHS if not face.has_glyph(c)]
    if missing:
        raise ResourceUnavailable(f"{origin} has no Arabic glyphs")
    return face


def _load_file_face(path: Path) -> FontFace:
    try:
        buffer = path.read_bytes()
        font = fitz.Font(fontbuffer=buffer)
    except Exception as exc:  # MuPDF raises its own error types for bad font data
        raise ResourceUnavailable(f"Cannot load RTL font {path}: {exc}") from exc
    return _require_arabic(FontFace(alias=_RTL_ALIAS, font=font, buffer=buffer), f"Font {path}")


def _load_bundled_face() -> FontFace:
    try:
        font = fitz.Font(script=_SCRIPT_ARABIC)
        buffer = font.buffer
    except Exception as exc:  # MuPDF builds without the Noto fonts fail here
        raise ResourceUnavailable(f"Bundled Arabic font unavailable: {exc}") from exc
    if not buffer:
        raise ResourceUnavailable("Bundled Arabic font unavailable: empty font data")
    return _require_arabic(FontFace(alias=_RTL_ALIAS, font=font, buffer=buffer), f"Font {font.name}")


def load_resources(settings: Settings | None = None) -> RenderResources:
    """Load fonts and shaping tables once at startup.

    Arabic text uses ``rtl_font_path`` when configured, otherwise the Noto
    Naskh Arabic face that ships inside MuPDF.  Either one failing to load,
    or lacking Arabic glyphs, raises :class:`ResourceUnavailable`.
    """
    settings = settings or Settings()
    try:
        reshaper = arabic_reshaper.ArabicReshaper()
    except Exception as exc:  # the reshaper parses its config at init
        raise ResourceUnavailable(f"Arabic shaping data unavailable: {exc}") from exc

    regular = FontFace(alias="helv", font=fitz.Font("helv"))
    bold = FontFace(alias="hebo", font=fitz.Font("hebo"))

    if settings.rtl_font_path:
        path: str | None = settings.rtl_font_path
        rtl = _load_file_face(Path(settings.rtl_font_path))
    else:
        path = None
        rtl = _load_bundled_face()
    logger.info("Loaded RTL font %s", path or rtl.font.name)

    faces = MappingProxyType({FONT_REGULAR: regular, FONT_BOLD: bold, FONT_RTL: rtl})
    return RenderResources(
        faces=faces,
        shaper=TextShaper(reshaper),
        rtl_font_path=path,
        embedded=(rtl,),
    )
