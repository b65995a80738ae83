from __future__ import annotations

from datetime import datetime

from jinja2 import BaseLoader, Environment, select_autoescape

from ..config import Settings, get_settings
from ..content.normalize import normalize
from ..types import ReportMetadata
from .common import info_rows

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Insurance Report - {{ claim_number }}</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            line-height: 1.6;
            color: #333;
            max-width: 900px;
            margin: 0 auto;
            padding: 40px 20px;
            background-color: #f5f5f5;
        }
        .container {
            background: white;
            padding: 40px;
            border-radius: 8px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }
        .header {
            text-align: center;
            margin-bottom: 40px;
            border-bottom: 3px solid {{ title_color }};
            padding-bottom: 20px;
        }
        .header h1 {
            color: {{ title_color }};
            font-size: 32px;
            margin-bottom: 10px;
        }
        .header h2 {
            color: {{ label_color }};
            font-size: 24px;
        }
        .info-section {
            background: #f8f9fa;
            padding: 20px;
            border-left: 4px solid {{ label_color }};
            margin-bottom: 30px;
        }
        .info-section h3 {
            color: {{ label_color }};
            margin-bottom: 15px;
        }
        .info-row {
            display: flex;
            margin-bottom: 10px;
        }
        .info-label {
            font-weight: bold;
            min-width: 150px;
            color: #555;
        }
        .info-value {
            color: #333;
        }
        .content-section {
            margin-top: 30px;
        }
        .content-section h3 {
            color: {{ label_color }};
            border-bottom: 2px solid #e0e0e0;
            padding-bottom: 10px;
            margin-bottom: 20px;
        }
        .content-text {
            text-align: justify;
            white-space: pre-line;
            line-height: 1.8;
        }
        .footer {
            margin-top: 50px;
            text-align: center;
            color: #666;
            font-size: 12px;
            font-style: italic;
            padding-top: 20px;
            border-top: 1px solid #e0e0e0;
        }
        @media print {
            body {
                background: white;
            }
            .container {
                box-shadow: none;
            }
        }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{{ brand_title }}</h1>
            <h2>{{ subtitle }}</h2>
        </div>

        <div class="info-section">
            <h3>Report Information</h3>
            {%- for label, value in rows %}
            <div class="info-row">
                <div class="info-label">{{ label }}:</div>
                <div class="info-value">{{ value }}</div>
            </div>
            {%- endfor %}
        </div>

        <div class="content-section">
            <h3>Report Content</h3>
            <div class="content-text">{{ content }}</div>
        </div>

        <div class="footer">
            <p>Generated with {{ brand_name }} - <a href="{{ website_url }}">{{ website_url }}</a></p>
            <p>{{ attribution }}</p>
        </div>
    </div>
</body>
</html>
"""

_ENVIRONMENT = Environment(
    loader=BaseLoader(),
    autoescape=select_autoescape(['html', 'xml']),
)
_TEMPLATE = _ENVIRONMENT.from_string(HTML_TEMPLATE)


def build_report_html(
    metadata: ReportMetadata,
    raw_text: str,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> str:
    settings = settings or get_settings()
    now = now or datetime.now()
    return _TEMPLATE.render(
        claim_number=metadata.display('claim_number', settings.missing_value_placeholder),
        brand_title=settings.brand_title,
        brand_name=settings.brand_name,
        subtitle=settings.report_subtitle,
        website_url=settings.website_url,
        attribution=settings.attribution,
        title_color=settings.brand_color,
        label_color=settings.accent_color,
        rows=info_rows(metadata, settings=settings, now=now),
        content=normalize(raw_text, preserve_newlines=True),
    )
