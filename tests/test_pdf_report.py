from __future__ import annotations

import io

import pytest
from pypdf import PdfReader

from claimreport.report.pdf_fonts import resolve_fallback_fonts
from claimreport.report.pdf_report import build_report_pdf
from claimreport.types import ReportMetadata


def _text(content: bytes) -> str:
    reader = PdfReader(io.BytesIO(content))
    return '\n'.join(page.extract_text() for page in reader.pages)


class TestBuildReportPdf:
    def test_sections_and_metadata(self, metadata, sample_report, settings, fixed_now):
        content = build_report_pdf(metadata, sample_report, settings=settings, now=fixed_now)
        assert content.startswith(b'%PDF')
        text = _text(content)
        assert settings.brand_title in text
        assert 'REPORT INFORMATION' in text
        assert 'REPORT CONTENT' in text
        assert 'Claim Number: CLM-1' in text
        assert 'Report Date: 03/15/2024' in text
        assert 'Proceed with mitigation.' in text
        assert 'Here is the inspection report' not in text

    def test_missing_address_is_placeholder(self, sample_report, settings, fixed_now):
        content = build_report_pdf(ReportMetadata(), sample_report, settings=settings, now=fixed_now)
        assert 'Property Address: N/A' in _text(content)

    def test_long_report_spans_pages(self, metadata, settings, fixed_now):
        raw_text = '\n'.join(f'Observation {i}: water staining noted along the north wall.' for i in range(200))
        content = build_report_pdf(metadata, raw_text, settings=settings, now=fixed_now)
        reader = PdfReader(io.BytesIO(content))
        assert len(reader.pages) > 1
        assert 'Observation 199' in _text(content)

    def test_long_unbroken_token_is_kept(self, metadata, settings, fixed_now):
        raw_text = 'REMARKS\n' + 'X' * 400
        content = build_report_pdf(metadata, raw_text, settings=settings, now=fixed_now)
        assert _text(content).count('X') >= 400

    def test_output_is_deterministic(self, metadata, sample_report, settings, fixed_now):
        first = build_report_pdf(metadata, sample_report, settings=settings, now=fixed_now)
        second = build_report_pdf(metadata, sample_report, settings=settings, now=fixed_now)
        assert first == second

    def test_non_latin_text_is_extractable(self, settings, fixed_now):
        metadata = ReportMetadata(claim_number='CLM-1', insured_name='Zoë 山田')
        raw_text = 'REMARKS\nRoof inspected, café 屋根 checked.'
        text = _text(build_report_pdf(metadata, raw_text, settings=settings, now=fixed_now))
        assert 'Zoë' in text
        assert '山田' in text
        assert '屋根' in text
        assert 'café' in text

    def test_symbols_use_unicode_font(self, settings, fixed_now):
        fonts = resolve_fallback_fonts()
        if fonts.unicode is None:
            pytest.skip('no Unicode TrueType font installed')
        raw_text = 'REMARKS\nRoof ✓ inspected → done'
        text = _text(build_report_pdf(ReportMetadata(), raw_text, settings=settings, now=fixed_now))
        assert '✓' in text
        assert '→' in text

    def test_fallback_fonts_keep_output_deterministic(self, settings, fixed_now):
        metadata = ReportMetadata(insured_name='山田')
        first = build_report_pdf(metadata, 'ROOF\n屋根 ✓', settings=settings, now=fixed_now)
        second = build_report_pdf(metadata, 'ROOF\n屋根 ✓', settings=settings, now=fixed_now)
        assert first == second
