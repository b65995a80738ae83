from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

from ..content.runs import Run

MeasureFn = Callable[[Run], float]

_TOKEN_PATTERN = re.compile(r'\s+|\S+')


@dataclass(frozen=True)
class PlacedRun:
    text: str
    emphasized: bool
    x: float
    width: float


@dataclass
class LineCursor:
    """Horizontal text cursor for one block, relative to the block's line start."""

    max_width: float
    x: float = 0.0

    @property
    def at_line_start(self) -> bool:
        return self.x <= 0.0

    @property
    def remaining(self) -> float:
        return self.max_width - self.x

    def advance(self, width: float) -> None:
        self.x += max(0.0, width)

    def reset(self) -> None:
        self.x = 0.0


def should_wrap(cursor_x: float, width: float, *, line_start: float, max_width: float) -> bool:
    """Break before an item that overflows the line, unless nothing is on the line yet."""
    return cursor_x + width > line_start + max_width and cursor_x > line_start


def tokenize_runs(runs: Iterable[Run]) -> list[Run]:
    tokens: list[Run] = []
    for run in runs:
        for part in _TOKEN_PATTERN.findall(run.text.replace('\t', ' ')):
            tokens.append(Run(text=part, emphasized=run.emphasized))
    return tokens


def split_token_by_width(token: Run, *, max_width: float, measure: MeasureFn) -> list[Run]:
    chunks: list[Run] = []
    current = ''
    for char in token.text:
        candidate = f'{current}{char}'
        if measure(Run(text=candidate, emphasized=token.emphasized)) <= max_width:
            current = candidate
            continue
        if current:
            chunks.append(Run(text=current, emphasized=token.emphasized))
            current = char
            continue
        chunks.append(Run(text=char, emphasized=token.emphasized))
    if current:
        chunks.append(Run(text=current, emphasized=token.emphasized))
    return chunks


def layout_runs(runs: Iterable[Run], *, max_width: float, measure: MeasureFn) -> list[list[PlacedRun]]:
    """Place runs on lines no wider than ``max_width``.

    Returns one list of positioned fragments per output line. Whitespace
    at the start of a wrapped line is dropped.
    """
    lines: list[list[PlacedRun]] = []
    current: list[PlacedRun] = []
    cursor = LineCursor(max_width=max_width)

    def _flush() -> None:
        nonlocal current
        while current and current[-1].text.isspace():
            current.pop()
        lines.append(current)
        current = []
        cursor.reset()

    def _place(token: Run, width: float) -> None:
        current.append(PlacedRun(text=token.text, emphasized=token.emphasized, x=cursor.x, width=width))
        cursor.advance(width)

    for token in tokenize_runs(runs):
        if token.text.isspace() and cursor.at_line_start:
            continue
        width = measure(token)

        if should_wrap(cursor.x, width, line_start=0.0, max_width=max_width):
            _flush()
            if token.text.isspace():
                continue

        if width <= max_width:
            _place(token, width)
            continue

        chunks = split_token_by_width(token, max_width=max_width, measure=measure)
        for index, chunk in enumerate(chunks):
            if index > 0:
                _flush()
            _place(chunk, measure(chunk))

    if current or not lines:
        _flush()
    return lines


def merge_adjacent(line: list[PlacedRun]) -> list[PlacedRun]:
    merged: list[PlacedRun] = []
    for item in line:
        if merged and merged[-1].emphasized == item.emphasized:
            previous = merged[-1]
            merged[-1] = PlacedRun(
                text=previous.text + item.text,
                emphasized=previous.emphasized,
                x=previous.x,
                width=previous.width + item.width,
            )
            continue
        merged.append(item)
    return merged
