from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix='CLAIMREPORT_',
        case_sensitive=False,
        extra='ignore',
    )

    app_name: str = 'claimreport'
    log_level: str = Field(
        default='INFO',
        validation_alias=AliasChoices('CLAIMREPORT_LOG_LEVEL', 'LOG_LEVEL'),
    )

    output_dir: Path = Field(default=Path('./reports'))

    # Letterhead and attribution
    company_name: str = 'FlacronAI Insurance Services'
    company_tagline: str = 'Professional Property Inspection Reports'
    brand_name: str = 'FlacronAI'
    brand_title: str = 'FLACRONAI'
    report_subtitle: str = 'Insurance Inspection Report'
    website_url: str = 'https://flacronai.com'
    website_display: str = 'www.flacronai.com'
    attribution: str = 'Powered by Google Gemini AI'
    brand_color: str = '#FF7C08'
    accent_color: str = '#0d6efd'
    muted_color: str = '#888888'

    missing_value_placeholder: str = 'N/A'
    date_format: str = '%m/%d/%Y'

    # DOCX export
    docx_page_margin_inches: float = 0.5

    # PDF export
    pdf_font_name: str = 'Helvetica'
    pdf_bold_font_name: str = 'Helvetica-Bold'
    pdf_italic_font_name: str = 'Helvetica-Oblique'
    # Fallbacks for text outside the base fonts' WinAnsi encoding
    pdf_unicode_font_path: Path | None = None
    pdf_unicode_bold_font_path: Path | None = None
    pdf_cjk_font_name: str = 'STSong-Light'
    pdf_page_margin: int = 72
    pdf_title_font_size: int = 26
    pdf_subtitle_font_size: int = 16
    pdf_label_font_size: int = 11
    pdf_body_font_size: int = 10
    pdf_footer_font_size: int = 8


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
