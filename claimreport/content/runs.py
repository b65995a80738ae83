from __future__ import annotations

import re
from dataclasses import dataclass

_EMPHASIS_PATTERN = re.compile(r'(\*\*|__)(.+?)\1')


@dataclass(frozen=True)
class Run:
    text: str
    emphasized: bool = False


def parse_runs(text: str) -> list[Run]:
    """Split block text into plain and emphasized runs.

    ``**bold**`` and ``__bold__`` are the same single emphasis level; the
    delimiters are consumed and never nest.
    """
    source = str(text or '')
    runs: list[Run] = []
    cursor = 0

    for match in _EMPHASIS_PATTERN.finditer(source):
        if match.start() > cursor:
            runs.append(Run(text=source[cursor:match.start()]))
        runs.append(Run(text=match.group(2), emphasized=True))
        cursor = match.end()

    if not runs:
        return [Run(text=source)]

    if cursor < len(source):
        runs.append(Run(text=source[cursor:]))
    return runs

