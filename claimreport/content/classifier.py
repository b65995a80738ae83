from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from typing import Callable, Iterable

SUBSECTION_MAX_LENGTH = 80
CAPS_LABEL_MIN_LETTERS = 3

SECTION_HEADERS: tuple[str, ...] = (
    'REMARKS',
    'RISK',
    'ITV',
    'OCCURRENCE',
    'COVERAGE',
    'DWELLING DAMAGE',
    'OTHER STRUCTURES DAMAGE',
    'CONTENTS DAMAGE',
    'ALE',
    'FMV',
    'SUBROGATION',
    'SALVAGE',
    'WORK TO BE COMPLETED',
    'RECOMMENDATION',
    'ASSIGNMENT',
    'INSURED',
    'OWNERSHIP',
    'LOSS AND ORIGIN',
    'DAMAGES',
    'DWELLING',
    'ROOF',
    'EXTERIOR',
    'INTERIOR',
    'OTHER STRUCTURES',
    'EXPERTS',
    'OFFICIAL REPORTS',
    'ACTION PLAN',
    'DIARY DATE',
    'MORTGAGEE',
    'INSURABLE INTEREST',
    'ALE / FMV CLAIM',
    'SUBROGATION / SALVAGE',
    'WORK TO BE COMPLETED / RECOMMENDATION',
    'OWNERSHIP / INSURABLE INTEREST',
)

PREAMBLE_PHRASES: tuple[str, ...] = (
    'here is',
    'i have generated',
    "i've generated",
    'below is',
    'following is',
    'i have created',
    "i've created",
    'this is the',
    'as requested',
)

SEPARATOR_LINES = frozenset({'---', '___', '...'})

_BULLET_PATTERN = re.compile(r'^[*+\-]\s+(.+)$')
_NUMBERED_PATTERN = re.compile(r'^([0-9]+)\.\s+(.+)$')
_CAPS_LABEL_PATTERN = re.compile(r'^[A-Z][A-Z\s]+:?$')


class BlockKind(str, Enum):
    header = 'header'
    subsection = 'subsection'
    bullet = 'bullet'
    numbered = 'numbered'
    paragraph = 'paragraph'
    blank = 'blank'


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    text: str
    source: str = ''
    index: int | None = None
    separator: bool = False


@dataclass(frozen=True)
class ClassifierState:
    suppressing: bool = True
    blocks: tuple[Block, ...] = ()


@dataclass
class ReportSection:
    title: str | None
    blocks: list[Block] = field(default_factory=list)


def _clean_label(text: str) -> str:
    return text.replace('**', '').replace('__', '').strip()


def is_section_header(text: str) -> bool:
    upper = _clean_label(text).upper()
    return any(upper == header or upper.startswith(header + ':') for header in SECTION_HEADERS)


def is_caps_label(text: str) -> bool:
    cleaned = _clean_label(text)
    if len(cleaned) >= SUBSECTION_MAX_LENGTH or not _CAPS_LABEL_PATTERN.match(cleaned):
        return False
    return sum(char.isalpha() for char in cleaned) >= CAPS_LABEL_MIN_LETTERS


def is_preamble(text: str) -> bool:
    lower = text.strip().lower()
    return any(lower.startswith(phrase) for phrase in PREAMBLE_PHRASES)


def _header(line: str, source: str) -> Block | None:
    if not line:
        return None
    if is_section_header(line) or is_caps_label(line):
        return Block(kind=BlockKind.header, text=_clean_label(line), source=source)
    return None


def _blank(line: str, source: str) -> Block | None:
    if not line:
        return Block(kind=BlockKind.blank, text='', source=source)
    if line in SEPARATOR_LINES:
        return Block(kind=BlockKind.blank, text='', source=source, separator=True)
    return None


def _bullet(line: str, source: str) -> Block | None:
    match = _BULLET_PATTERN.match(line)
    if match is None:
        return None
    return Block(kind=BlockKind.bullet, text=match.group(1), source=source)


def _numbered(line: str, source: str) -> Block | None:
    match = _NUMBERED_PATTERN.match(line)
    if match is None:
        return None
    return Block(
        kind=BlockKind.numbered,
        text=match.group(2),
        source=source,
        index=int(match.group(1)),
    )


def _subsection(line: str, source: str) -> Block | None:
    if line.endswith(':') and len(line) < SUBSECTION_MAX_LENGTH:
        return Block(kind=BlockKind.subsection, text=_clean_label(line), source=source)
    return None


def _paragraph(line: str, source: str) -> Block | None:
    return Block(kind=BlockKind.paragraph, text=line, source=source)


# Evaluated in order; the paragraph rule always matches.
_RULES: tuple[Callable[[str, str], Block | None], ...] = (
    _header,
    _blank,
    _bullet,
    _numbered,
    _subsection,
    _paragraph,
)

_CONTENT_KINDS = frozenset({BlockKind.header, BlockKind.bullet, BlockKind.numbered})


def classify_line(line: str) -> Block:
    trimmed = line.strip()
    for rule in _RULES:
        block = rule(trimmed, line)
        if block is not None:
            return block
    raise AssertionError('paragraph rule must match every line')


def step(state: ClassifierState, line: str) -> ClassifierState:
    block = classify_line(line)
    if state.suppressing and block.kind != BlockKind.blank and is_preamble(block.source):
        return state
    return replace(
        state,
        suppressing=state.suppressing and block.kind not in _CONTENT_KINDS,
        blocks=state.blocks + (block,),
    )


def split_lines(raw_text: str) -> list[str]:
    text = str(raw_text or '').replace('\r\n', '\n').replace('\r', '\n')
    return text.split('\n')


def classify(raw_text: str) -> list[Block]:
    final = reduce(step, split_lines(raw_text), ClassifierState())
    return list(final.blocks)


def group_sections(blocks: Iterable[Block]) -> list[ReportSection]:
    sections: list[ReportSection] = [ReportSection(title=None)]
    for block in blocks:
        if block.kind == BlockKind.header:
            sections.append(ReportSection(title=block.text))
            continue
        sections[-1].blocks.append(block)

    lead = sections[0]
    if not any(block.kind != BlockKind.blank for block in lead.blocks):
        sections.pop(0)
    return sections
