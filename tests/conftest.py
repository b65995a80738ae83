from __future__ import annotations

from datetime import datetime

import pytest

from claimreport.config import Settings
from claimreport.types import ReportMetadata

SAMPLE_REPORT = """Here is the inspection report you requested.

REMARKS:
The insured reported a **kitchen fire** on the evening of the loss.

DWELLING DAMAGE
* Smoke damage to ceiling
- Replace **cabinets** in kitchen
1. Remove debris
2. Inspect wiring

Roof condition:
No visible damage observed at the time of inspection.
---
RECOMMENDATION
Proceed with mitigation."""


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 15, 9, 30, 0)


@pytest.fixture
def metadata() -> ReportMetadata:
    return ReportMetadata(
        claim_number='CLM-1',
        insured_name='Jane Doe',
        property_address='12 Oak Street, Springfield',
        loss_date='03/01/2024',
        loss_type='Fire',
        report_type='Preliminary',
    )


@pytest.fixture
def sample_report() -> str:
    return SAMPLE_REPORT
