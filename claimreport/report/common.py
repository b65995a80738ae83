from __future__ import annotations

import re
from datetime import datetime

from ..config import Settings
from ..types import ReportMetadata

# Label/field pairs shown in the PDF and HTML information blocks.
INFO_FIELDS: tuple[tuple[str, str], ...] = (
    ('Claim Number', 'claim_number'),
    ('Insured Name', 'insured_name'),
    ('Property Address', 'property_address'),
    ('Loss Date', 'loss_date'),
    ('Loss Type', 'loss_type'),
    ('Report Type', 'report_type'),
)

_UNSAFE_FILENAME_PATTERN = re.compile(r'[\\/\x00]')


def format_report_date(now: datetime, settings: Settings) -> str:
    return now.strftime(settings.date_format)


def info_rows(metadata: ReportMetadata, *, settings: Settings, now: datetime) -> list[tuple[str, str]]:
    placeholder = settings.missing_value_placeholder
    rows = [(label, metadata.display(field, placeholder)) for label, field in INFO_FIELDS]
    rows.append(('Report Date', format_report_date(now, settings)))
    return rows


def _filename_part(value: str | None) -> str:
    return _UNSAFE_FILENAME_PATTERN.sub('-', value) if value else 'unknown'


def build_file_name(metadata: ReportMetadata, ext: str, *, now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    claim = _filename_part(metadata.value('claim_number'))
    report_type = _filename_part(metadata.value('report_type'))
    return f'{claim}_{report_type}_{millis}.{ext}'
