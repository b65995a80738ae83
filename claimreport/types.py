from __future__ import annotations

from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

METADATA_FIELDS: tuple[str, ...] = (
    'claim_number',
    'insured_name',
    'property_address',
    'loss_date',
    'loss_type',
    'report_type',
)


class ReportMetadata(BaseModel):
    """Claim fields displayed around the generated report text."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    claim_number: str | None = Field(
        default=None,
        validation_alias=AliasChoices('claim_number', 'claimNumber'),
    )
    insured_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices('insured_name', 'insuredName'),
    )
    property_address: str | None = Field(
        default=None,
        validation_alias=AliasChoices('property_address', 'propertyAddress'),
    )
    loss_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices('loss_date', 'lossDate'),
    )
    loss_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices('loss_type', 'lossType'),
    )
    report_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices('report_type', 'reportType'),
    )

    def value(self, field: str) -> str | None:
        raw = getattr(self, field)
        if raw is None:
            return None
        text = str(raw).strip()
        return text or None

    def display(self, field: str, placeholder: str = 'N/A') -> str:
        return self.value(field) or placeholder

    @classmethod
    def coerce(cls, value: ReportMetadata | Mapping[str, Any] | None) -> ReportMetadata:
        if isinstance(value, ReportMetadata):
            return value
        return cls.model_validate(dict(value or {}))


class RenderResult(BaseModel):
    model_config = ConfigDict(serialize_by_alias=True)

    success: bool
    buffer: bytes | None = None
    html: str | None = None
    file_name: str | None = Field(default=None, serialization_alias='fileName')
    error: str | None = None

    @classmethod
    def ok(cls, *, file_name: str, buffer: bytes | None = None, html: str | None = None) -> RenderResult:
        return cls(success=True, buffer=buffer, html=html, file_name=file_name)

    @classmethod
    def failed(cls, error: str) -> RenderResult:
        return cls(success=False, error=error)
