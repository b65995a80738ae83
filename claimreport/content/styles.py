from __future__ import annotations

from dataclasses import dataclass

from .classifier import Block, BlockKind

BODY_FONT_SIZE = 10.0
LINE_SPACING = 1.15


@dataclass(frozen=True)
class BlockStyle:
    """Typography for one block kind, in points, shared by the DOCX and PDF backends."""

    bold: bool = False
    size: float = BODY_FONT_SIZE
    space_before: float = 0.0
    space_after: float = 4.0
    indent: float = 0.0
    marker: str | None = None


_STYLES: dict[BlockKind, BlockStyle] = {
    BlockKind.header: BlockStyle(bold=True, size=11.0, space_before=12.0, space_after=6.0),
    BlockKind.subsection: BlockStyle(bold=True, size=10.0, space_before=6.0, space_after=4.0),
    BlockKind.bullet: BlockStyle(space_after=2.0, indent=15.0, marker='•'),
    BlockKind.numbered: BlockStyle(space_after=2.0, indent=20.0),
    BlockKind.paragraph: BlockStyle(),
    BlockKind.blank: BlockStyle(space_after=4.0),
}

_SEPARATOR_STYLE = BlockStyle(space_after=7.5)


def style_for(block: Block) -> BlockStyle:
    if block.kind == BlockKind.blank and block.separator:
        return _SEPARATOR_STYLE
    return _STYLES[block.kind]


def marker_for(block: Block) -> str | None:
    if block.kind == BlockKind.numbered:
        return f'{block.index}.'
    return style_for(block).marker
