from __future__ import annotations

import asyncio
import re

import pytest

from claimreport import engine
from claimreport.engine import render_docx, render_html, render_pdf

METADATA = {'claimNumber': 'CLM-1', 'reportType': 'Preliminary', 'insuredName': 'Jane Doe'}


def _file_name_pattern(ext: str) -> re.Pattern[str]:
    return re.compile(rf'^CLM-1_Preliminary_\d+\.{ext}$')


class TestRenderers:
    def test_render_docx(self, sample_report, settings):
        result = render_docx(METADATA, sample_report, settings=settings)
        assert result.success
        assert result.error is None
        assert result.buffer.startswith(b'PK')
        assert _file_name_pattern('docx').match(result.file_name)

    @pytest.mark.asyncio
    async def test_render_pdf(self, sample_report, settings):
        result = await render_pdf(METADATA, sample_report, settings=settings)
        assert result.success
        assert result.buffer.startswith(b'%PDF')
        assert _file_name_pattern('pdf').match(result.file_name)

    def test_render_html(self, sample_report, settings):
        result = render_html(METADATA, sample_report, settings=settings)
        assert result.success
        assert result.buffer is None
        assert 'Jane Doe' in result.html
        assert _file_name_pattern('html').match(result.file_name)

    def test_missing_metadata(self, sample_report, settings):
        result = render_html(None, sample_report, settings=settings)
        assert result.success
        assert result.file_name.startswith('unknown_unknown_')


class TestFailureIsolation:
    def test_construction_error_is_returned(self, monkeypatch, sample_report, settings):
        def _boom(*args, **kwargs):
            raise RuntimeError('document tree exploded')

        monkeypatch.setattr(engine, 'build_report_docx', _boom)
        result = render_docx(METADATA, sample_report, settings=settings)
        assert not result.success
        assert result.error == 'document tree exploded'
        assert result.buffer is None
        assert result.file_name is None

    def test_invalid_metadata_is_returned(self, sample_report, settings):
        result = render_html({'claimNumber': ['not', 'a', 'string']}, sample_report, settings=settings)
        assert not result.success
        assert result.error

    @pytest.mark.asyncio
    async def test_failure_does_not_affect_concurrent_render(self, monkeypatch, sample_report, settings):
        def _boom(*args, **kwargs):
            raise RuntimeError('boom')

        monkeypatch.setattr(engine, 'build_report_docx', _boom)
        docx_result, pdf_result, html_result = await asyncio.gather(
            asyncio.to_thread(render_docx, METADATA, sample_report, settings=settings),
            render_pdf(METADATA, sample_report, settings=settings),
            asyncio.to_thread(render_html, METADATA, sample_report, settings=settings),
        )
        assert not docx_result.success
        assert docx_result.error == 'boom'
        assert pdf_result.success
        assert html_result.success

    @pytest.mark.asyncio
    async def test_concurrent_pdf_renders_are_independent(self, metadata, sample_report, settings, fixed_now):
        results = await asyncio.gather(
            *(
                asyncio.to_thread(engine.build_report_pdf, metadata, sample_report, settings=settings, now=fixed_now)
                for _ in range(4)
            )
        )
        assert len(set(results)) == 1


class TestRenderResult:
    def test_serializes_file_name_as_camel_case(self, sample_report, settings):
        result = render_html(METADATA, sample_report, settings=settings)
        payload = result.model_dump()
        assert 'fileName' in payload
        assert 'file_name' not in payload
        assert payload['fileName'] == result.file_name

    def test_docx_render_survives_control_characters(self, settings):
        result = render_docx({'claimNumber': 'C'}, 'REMARKS\nPage one\x0cPage two\x0b', settings=settings)
        assert result.success
        assert result.error is None
