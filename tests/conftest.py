"""Pytest fixtures and configuration."""

from datetime import date, datetime, timezone

import pytest

from nik_parse.config.region_loader import DEFAULT_REGION_PATH, load_regions_from_yaml
from nik_parse.core.decoder import NIKDecoder


# Fixed reference date for age and countdown assertions
TODAY = date(2026, 10, 19)


@pytest.fixture(scope="session")
def regions():
    """The bundled region table."""
    return load_regions_from_yaml(DEFAULT_REGION_PATH)


@pytest.fixture
def decoder(regions):
    """Strict decoder pinned to TODAY."""
    return NIKDecoder(regions, clock=lambda: TODAY)


@pytest.fixture
def lenient_decoder(regions):
    """Decoder that reports unknown regions instead of failing."""
    return NIKDecoder(regions, strict_region=False, clock=lambda: TODAY)


class FakeClock:
    """Settable clock for visitor store tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def valid_niks():
    """Valid NIKs against the bundled region table."""
    return {
        "male_bogor": "3201011509900001",      # Cibinong, 15/09/1990
        "female_bogor": "3201015509900001",    # Cibinong, 15/09/1990, day + 40
        "jakarta": "3171062508850123",         # Kebayoran Baru, 25/08/1985
        "yogya_2000s": "3471021703100002",     # Kraton, 17/03/2010
    }


@pytest.fixture
def invalid_niks():
    """NIKs that fail, keyed by the expected reason."""
    return {
        "invalid_length": "3201010190001",
        "unknown_province": "9901011509900001",
        "unknown_regency": "3299011509900001",
        "unknown_district": "3201991509900001",
        "invalid_birth_date": "3201013501900001",
    }
