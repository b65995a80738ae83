from __future__ import annotations

import re

# Order matters: paired markers go before the lone-marker sweeps.
_MARKUP_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r'\*\*(.+?)\*\*'), r'\1'),
    (re.compile(r'__(.+?)__'), r'\1'),
    (re.compile(r'\*(.+?)\*'), r'\1'),
    (re.compile(r'_(.+?)_'), r'\1'),
    (re.compile(r'^[ \t]*[*+\-][ \t]+', re.MULTILINE), ''),
    (re.compile(r'^[ \t]*#+[ \t]+', re.MULTILINE), ''),
    (re.compile(r'~~(.+?)~~'), r'\1'),
    (re.compile(r'`(.+?)`'), r'\1'),
    (re.compile(r'\*'), ''),
    (re.compile(r'(?<!\w)_(?!\w)'), ''),
)

_WHITESPACE_PATTERN = re.compile(r'\s+')
_HORIZONTAL_SPACE_PATTERN = re.compile(r'[^\S\n]+')
_BLANK_LINES_PATTERN = re.compile(r'\n{3,}')


def _collapse_whitespace(text: str, *, preserve_newlines: bool) -> str:
    if not preserve_newlines:
        return _WHITESPACE_PATTERN.sub(' ', text).strip()
    lines = [_HORIZONTAL_SPACE_PATTERN.sub(' ', line).strip() for line in text.split('\n')]
    return _BLANK_LINES_PATTERN.sub('\n\n', '\n'.join(lines)).strip()


def _normalize_once(text: str, *, preserve_newlines: bool) -> str:
    for pattern, replacement in _MARKUP_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return _collapse_whitespace(text, preserve_newlines=preserve_newlines)


def normalize(raw_text: str, *, preserve_newlines: bool = False) -> str:
    """Strip every supported markup token and collapse whitespace.

    A single pass can expose new markup (joining lines may pair up two lone
    underscores), so passes repeat until the text stops changing. Each pass
    either shortens the text or only rewrites whitespace, so this terminates,
    and the result is a fixed point of ``normalize``.
    """
    text = str(raw_text or '').replace('\r\n', '\n').replace('\r', '\n')
    while True:
        cleaned = _normalize_once(text, preserve_newlines=preserve_newlines)
        if cleaned == text:
            return cleaned
        text = cleaned
