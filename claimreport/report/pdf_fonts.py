from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont

logger = logging.getLogger(__name__)

FONT_CJK_FALLBACK_NAME = 'STSong-Light'

FONT_UNICODE_CANDIDATES = (
    Path('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf'),
    Path('/usr/share/fonts/dejavu/DejaVuSans.ttf'),
    Path('/usr/share/fonts/TTF/DejaVuSans.ttf'),
    Path('/Library/Fonts/Arial Unicode.ttf'),
    Path('C:/Windows/Fonts/arialuni.ttf'),
)
FONT_UNICODE_BOLD_CANDIDATES = (
    Path('/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf'),
    Path('/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf'),
    Path('/usr/share/fonts/TTF/DejaVuSans-Bold.ttf'),
)


@dataclass(frozen=True)
class FallbackFonts:
    """Registered fonts used for characters the base-14 fonts cannot encode."""

    unicode: str | None = None
    unicode_bold: str | None = None
    cjk: str | None = None

    def for_char(self, char: str, *, bold: bool = False) -> str | None:
        if is_cjk(char) and self.cjk:
            return self.cjk
        if bold and self.unicode_bold:
            return self.unicode_bold
        return self.unicode or self.cjk


def is_cjk(char: str) -> bool:
    code = ord(char)
    return (
        0x2E80 <= code <= 0x9FFF
        or 0xAC00 <= code <= 0xD7AF
        or 0xF900 <= code <= 0xFAFF
        or 0xFF00 <= code <= 0xFFEF
    )


def winansi_encodable(char: str) -> bool:
    try:
        char.encode('cp1252')
    except UnicodeEncodeError:
        return False
    return True


def split_by_font(text: str, *, base_font: str, fallback: FallbackFonts, bold: bool = False) -> list[tuple[str, str]]:
    """Cut ``text`` into ``(font, chunk)`` pieces, switching away from ``base_font`` only where needed."""
    segments: list[tuple[str, str]] = []
    for char in text:
        font = base_font
        if not winansi_encodable(char):
            font = fallback.for_char(char, bold=bold) or base_font
        if segments and segments[-1][0] == font:
            segments[-1] = (font, segments[-1][1] + char)
        else:
            segments.append((font, char))
    return segments


def _register_ttf_font(candidates: Iterable[Path]) -> str | None:
    for path in candidates:
        if not path.is_file():
            continue
        name = path.stem
        if name in pdfmetrics.getRegisteredFontNames():
            return name
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
        except Exception as exc:
            logger.warning('Failed to register PDF font %s from %s: %s', name, path, exc)
            continue
        return name
    return None


def _register_cid_font(name: str) -> str | None:
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(UnicodeCIDFont(name))
    except Exception as exc:
        logger.warning('Failed to register fallback PDF font %s: %s', name, exc)
        return None
    return name


@lru_cache(maxsize=8)
def resolve_fallback_fonts(
    unicode_font_path: Path | None = None,
    unicode_bold_font_path: Path | None = None,
    cjk_font_name: str = FONT_CJK_FALLBACK_NAME,
) -> FallbackFonts:
    unicode_candidates = ((unicode_font_path,) if unicode_font_path else ()) + FONT_UNICODE_CANDIDATES
    bold_candidates = ((unicode_bold_font_path,) if unicode_bold_font_path else ()) + FONT_UNICODE_BOLD_CANDIDATES
    fonts = FallbackFonts(
        unicode=_register_ttf_font(unicode_candidates),
        unicode_bold=_register_ttf_font(bold_candidates),
        cjk=_register_cid_font(cjk_font_name),
    )
    logger.debug('Resolved PDF fallback fonts: %s', fonts)
    return fonts
