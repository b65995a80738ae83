from __future__ import annotations

import io
import logging
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas as pdf_canvas

from ..config import Settings, get_settings
from ..content.classifier import Block, BlockKind, classify
from ..content.runs import Run, parse_runs
from ..content.styles import marker_for, style_for
from ..types import ReportMetadata
from .common import info_rows
from .pdf_fonts import resolve_fallback_fonts, split_by_font
from .pdf_layout import PlacedRun, layout_runs, merge_adjacent

logger = logging.getLogger(__name__)

LINE_GAP = 2.0
UNDERLINE_OFFSET = 2.0
TEXT_COLOR = '#000000'


def _leading(size: float) -> float:
    return size * 1.2 + LINE_GAP


class PageWriter:
    """Top-down text writer over a reportlab canvas.

    Owns every side effect of the PDF backend: font switching, drawing, and
    starting a new page once the cursor would cross the bottom margin.
    """

    def __init__(self, buffer: io.BytesIO, *, settings: Settings, pagesize=letter, title: str | None = None):
        self.settings = settings
        self.canvas = pdf_canvas.Canvas(buffer, pagesize=pagesize, invariant=1)
        self.canvas.setProducer(settings.app_name)
        if title:
            self.canvas.setTitle(title)
        self.page_width, self.page_height = pagesize
        self.margin = float(settings.pdf_page_margin)
        self.y = self.page_height - self.margin
        self.page_count = 1
        self.fallback_fonts = resolve_fallback_fonts(
            settings.pdf_unicode_font_path,
            settings.pdf_unicode_bold_font_path,
            settings.pdf_cjk_font_name,
        )

    @property
    def writable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def left(self) -> float:
        return self.margin

    def new_page(self) -> None:
        self.canvas.showPage()
        self.page_count += 1
        self.y = self.page_height - self.margin

    def ensure_room(self, height: float) -> None:
        if self.y - height < self.margin:
            self.new_page()

    def move_down(self, points: float) -> None:
        self.y -= points
        if self.y < self.margin:
            self.new_page()

    def font_for(self, *, bold: bool = False, italic: bool = False) -> str:
        if bold:
            return self.settings.pdf_bold_font_name
        if italic:
            return self.settings.pdf_italic_font_name
        return self.settings.pdf_font_name

    def segments(self, text: str, *, bold: bool = False, italic: bool = False) -> list[tuple[str, str]]:
        return split_by_font(
            text,
            base_font=self.font_for(bold=bold, italic=italic),
            fallback=self.fallback_fonts,
            bold=bold,
        )

    def measure(self, text: str, *, size: float, bold: bool = False, italic: bool = False) -> float:
        return sum(
            pdfmetrics.stringWidth(chunk, font, size)
            for font, chunk in self.segments(text, bold=bold, italic=italic)
        )

    def draw_text(self, x: float, text: str, *, size: float, bold: bool = False, italic: bool = False) -> float:
        start = x
        for font, chunk in self.segments(text, bold=bold, italic=italic):
            self.canvas.setFont(font, size)
            self.canvas.drawString(x, self.y, chunk)
            x += pdfmetrics.stringWidth(chunk, font, size)
        return x - start

    def write_line(
        self,
        text: str,
        *,
        size: float,
        bold: bool = False,
        italic: bool = False,
        color: str = TEXT_COLOR,
        align: str = 'left',
        underline: bool = False,
    ) -> None:
        leading = _leading(size)
        self.ensure_room(leading)
        self.y -= leading
        width = self.measure(text, size=size, bold=bold, italic=italic)
        x = self.left
        if align == 'center':
            x = self.left + (self.writable_width - width) / 2

        self.canvas.setFillColor(colors.HexColor(color))
        self.draw_text(x, text, size=size, bold=bold, italic=italic)
        if underline and text:
            self.canvas.setStrokeColor(colors.HexColor(color))
            self.canvas.setLineWidth(0.6)
            self.canvas.line(x, self.y - UNDERLINE_OFFSET, x + width, self.y - UNDERLINE_OFFSET)

    def write_placed_line(
        self,
        placed: list[PlacedRun],
        *,
        size: float,
        indent: float = 0.0,
        marker: str | None = None,
        color: str = TEXT_COLOR,
    ) -> None:
        leading = _leading(size)
        self.ensure_room(leading)
        self.y -= leading
        self.canvas.setFillColor(colors.HexColor(color))
        if marker:
            self.draw_text(self.left, marker, size=size)
        for item in merge_adjacent(placed):
            self.draw_text(self.left + indent + item.x, item.text, size=size, bold=item.emphasized)

    def write_wrapped(
        self,
        runs: list[Run],
        *,
        size: float,
        indent: float = 0.0,
        marker: str | None = None,
    ) -> int:
        def _measure(run: Run) -> float:
            return self.measure(run.text, size=size, bold=run.emphasized)

        lines = layout_runs(runs, max_width=self.writable_width - indent, measure=_measure)
        for line_no, placed in enumerate(lines):
            self.write_placed_line(
                placed,
                size=size,
                indent=indent,
                marker=marker if line_no == 0 else None,
            )
        return len(lines)

    def finish(self) -> None:
        self.canvas.save()


def _block_runs(block: Block) -> list[Run]:
    if block.kind in (BlockKind.header, BlockKind.subsection):
        return [Run(text=block.text, emphasized=True)]
    return parse_runs(block.text)


def _write_block(writer: PageWriter, block: Block) -> None:
    style = style_for(block)
    if block.kind == BlockKind.blank:
        writer.move_down(style.space_after)
        return

    if style.space_before:
        writer.move_down(style.space_before)

    writer.write_wrapped(
        _block_runs(block),
        size=style.size,
        indent=style.indent,
        marker=marker_for(block),
    )

    if style.space_after:
        writer.move_down(style.space_after)


def build_report_pdf(
    metadata: ReportMetadata,
    raw_text: str,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> bytes:
    settings = settings or get_settings()
    now = now or datetime.now()
    body_size = settings.pdf_body_font_size
    label_size = settings.pdf_label_font_size

    buffer = io.BytesIO()
    writer = PageWriter(
        buffer,
        settings=settings,
        title=f'{settings.report_subtitle} - {metadata.display("claim_number", settings.missing_value_placeholder)}',
    )

    writer.write_line(
        settings.brand_title,
        size=settings.pdf_title_font_size,
        bold=True,
        color=settings.brand_color,
        align='center',
    )
    writer.write_line(settings.report_subtitle, size=settings.pdf_subtitle_font_size, align='center')
    writer.move_down(_leading(body_size) * 1.5)

    writer.write_line(
        'REPORT INFORMATION',
        size=label_size,
        bold=True,
        color=settings.accent_color,
        underline=True,
    )
    writer.move_down(_leading(body_size) * 0.3)
    for label, value in info_rows(metadata, settings=settings, now=now):
        writer.write_wrapped([Run(text=f'{label}: {value}')], size=body_size)
    writer.move_down(_leading(body_size) * 1.5)

    writer.write_line(
        'REPORT CONTENT',
        size=label_size,
        bold=True,
        color=settings.accent_color,
        underline=True,
    )
    writer.move_down(_leading(body_size) * 0.5)

    blocks = classify(raw_text)
    for block in blocks:
        _write_block(writer, block)

    writer.move_down(_leading(body_size) * 2)
    footer_size = settings.pdf_footer_font_size
    writer.write_line(
        f'Generated with {settings.brand_name} - {settings.website_url}',
        size=footer_size,
        italic=True,
        color=settings.muted_color,
        align='center',
    )
    writer.write_line(
        settings.attribution,
        size=footer_size,
        italic=True,
        color=settings.muted_color,
        align='center',
    )

    writer.finish()
    logger.debug('Rendered %d content blocks across %d PDF pages', len(blocks), writer.page_count)
    return buffer.getvalue()
