from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Mapping

from .config import Settings
from .report.common import build_file_name
from .report.docx_report import build_report_docx
from .report.html_report import build_report_html
from .report.pdf_report import build_report_pdf
from .types import RenderResult, ReportMetadata

logger = logging.getLogger(__name__)

MetadataInput = ReportMetadata | Mapping[str, Any] | None


def _error_message(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


def render_docx(metadata: MetadataInput, raw_text: str, *, settings: Settings | None = None) -> RenderResult:
    try:
        report = ReportMetadata.coerce(metadata)
        now = datetime.now()
        buffer = build_report_docx(report, raw_text, settings=settings, now=now)
        file_name = build_file_name(report, 'docx', now=now)
    except Exception as exc:
        logger.exception('DOCX generation failed: %s', exc)
        return RenderResult.failed(_error_message(exc))

    logger.info('Rendered DOCX %s (%d bytes)', file_name, len(buffer))
    return RenderResult.ok(buffer=buffer, file_name=file_name)


async def render_pdf(metadata: MetadataInput, raw_text: str, *, settings: Settings | None = None) -> RenderResult:
    try:
        report = ReportMetadata.coerce(metadata)
        now = datetime.now()
        buffer = await asyncio.to_thread(build_report_pdf, report, raw_text, settings=settings, now=now)
        file_name = build_file_name(report, 'pdf', now=now)
    except Exception as exc:
        logger.exception('PDF generation failed: %s', exc)
        return RenderResult.failed(_error_message(exc))

    logger.info('Rendered PDF %s (%d bytes)', file_name, len(buffer))
    return RenderResult.ok(buffer=buffer, file_name=file_name)


def render_html(metadata: MetadataInput, raw_text: str, *, settings: Settings | None = None) -> RenderResult:
    try:
        report = ReportMetadata.coerce(metadata)
        now = datetime.now()
        html = build_report_html(report, raw_text, settings=settings, now=now)
        file_name = build_file_name(report, 'html', now=now)
    except Exception as exc:
        logger.exception('HTML generation failed: %s', exc)
        return RenderResult.failed(_error_message(exc))

    logger.info('Rendered HTML %s (%d chars)', file_name, len(html))
    return RenderResult.ok(html=html, file_name=file_name)
