from __future__ import annotations

import io
import logging
import re
from datetime import datetime

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from ..config import Settings, get_settings
from ..content.classifier import Block, BlockKind, classify
from ..content.runs import parse_runs
from ..content.styles import BODY_FONT_SIZE, LINE_SPACING, style_for
from ..types import ReportMetadata
from .common import format_report_date

logger = logging.getLogger(__name__)

RESERVE_COLUMNS: tuple[str, ...] = ('Coverage', 'Limit', 'Prior Reserve', 'Change +/-', 'Remaining Reserve')
RESERVE_ROWS: tuple[str, ...] = ('Dwelling', 'Other Structures', 'Personal Property', 'Total')

_LIST_STYLES = {
    BlockKind.bullet: 'List Bullet',
    BlockKind.numbered: 'List Number',
}

# lxml rejects C0 controls other than tab, newline and carriage return.
_PAGE_BREAK_PATTERN = re.compile(r'[\x0b\x0c]')
_XML_ILLEGAL_PATTERN = re.compile(r'[\x00-\x08\x0e-\x1f\ud800-\udfff\ufffe\uffff]')


def _xml_safe(text: str) -> str:
    return _XML_ILLEGAL_PATTERN.sub('', _PAGE_BREAK_PATTERN.sub(' ', text))


def _add_run(paragraph, text: str):
    return paragraph.add_run(_xml_safe(text))


def _spacer(doc, after: float):
    paragraph = doc.add_paragraph()
    paragraph.paragraph_format.space_after = Pt(after)
    return paragraph


def _text_paragraph(doc, text: str, *, after: float, before: float = 0, bold: bool = False):
    paragraph = doc.add_paragraph()
    run = _add_run(paragraph, text)
    run.bold = bold
    paragraph.paragraph_format.space_before = Pt(before)
    paragraph.paragraph_format.space_after = Pt(after)
    return paragraph


def _labeled_line(doc, label: str, value: str, *, after: float):
    paragraph = doc.add_paragraph()
    _add_run(paragraph, label).bold = True
    _add_run(paragraph, value)
    paragraph.paragraph_format.space_after = Pt(after)
    return paragraph


def _bold_cell(cell, text: str) -> None:
    cell.text = ''
    _add_run(cell.paragraphs[0], text).bold = True


def _append_reserve_table(doc) -> None:
    table = doc.add_table(rows=1 + len(RESERVE_ROWS), cols=len(RESERVE_COLUMNS))
    table.style = 'Table Grid'

    for cell, heading in zip(table.rows[0].cells, RESERVE_COLUMNS):
        _bold_cell(cell, heading)

    for row, label in zip(table.rows[1:], RESERVE_ROWS):
        if label == 'Total':
            _bold_cell(row.cells[0], label)
        else:
            row.cells[0].text = label


def _append_block(doc, block: Block) -> None:
    style = style_for(block)

    if block.kind == BlockKind.blank:
        _spacer(doc, style.space_after)
        return

    if block.kind in (BlockKind.header, BlockKind.subsection):
        paragraph = doc.add_paragraph()
        run = _add_run(paragraph, block.text)
        run.bold = True
        run.font.size = Pt(style.size)
    else:
        paragraph = doc.add_paragraph(style=_LIST_STYLES.get(block.kind))
        for item in parse_runs(block.text):
            run = _add_run(paragraph, item.text)
            run.bold = item.emphasized
            run.font.size = Pt(style.size)
        paragraph.paragraph_format.line_spacing = LINE_SPACING
        paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT

    paragraph.paragraph_format.space_before = Pt(style.space_before)
    paragraph.paragraph_format.space_after = Pt(style.space_after)


def build_report_docx(
    metadata: ReportMetadata,
    raw_text: str,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> bytes:
    settings = settings or get_settings()
    now = now or datetime.now()
    placeholder = settings.missing_value_placeholder

    doc = Document()
    margin = Inches(settings.docx_page_margin_inches)
    for section in doc.sections:
        section.top_margin = margin
        section.bottom_margin = margin
        section.left_margin = margin
        section.right_margin = margin
    doc.styles['Normal'].font.size = Pt(BODY_FONT_SIZE)

    _text_paragraph(doc, format_report_date(now, settings), after=10)
    _spacer(doc, 10)

    _text_paragraph(doc, settings.company_name, after=5, bold=True)
    _text_paragraph(doc, settings.company_tagline, after=10)
    _spacer(doc, 15)

    _labeled_line(doc, 'Client Claim #: ', metadata.display('claim_number', placeholder), after=5)
    _labeled_line(doc, 'Insured: ', metadata.display('insured_name', placeholder), after=5)
    _labeled_line(doc, 'Loss Location: ', metadata.display('property_address', placeholder), after=5)
    _labeled_line(doc, 'Date of Loss: ', metadata.display('loss_date', placeholder), after=10)
    _spacer(doc, 10)

    report_type = metadata.value('report_type') or 'inspection report'
    _text_paragraph(
        doc,
        f'This will serve as our {report_type} on the above captioned assignment.',
        after=20,
    )

    _text_paragraph(doc, 'ESTIMATED LOSS:', before=10, after=10, bold=True)
    _text_paragraph(doc, 'The following reserves are suggested for damages observed to date:', after=10)
    _append_reserve_table(doc)
    _spacer(doc, 20)

    blocks = classify(raw_text)
    logger.debug('Rendering %d content blocks to DOCX', len(blocks))
    for block in blocks:
        _append_block(doc, block)

    _spacer(doc, 30)
    _text_paragraph(doc, 'Respectfully submitted,', before=20, after=10)
    _spacer(doc, 10)
    _text_paragraph(doc, settings.brand_name, after=5, bold=True)
    _text_paragraph(doc, settings.website_display, after=10)
    _spacer(doc, 10)

    footer = doc.add_paragraph()
    footer.alignment = WD_ALIGN_PARAGRAPH.CENTER
    attribution = _add_run(footer, settings.attribution)
    attribution.italic = True
    attribution.font.size = Pt(9)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
