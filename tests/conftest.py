"""Pytest configuration: locale, building settings and in-memory SQLite database."""

import os

# Locale must be fixed before vaad.services.locale_service is imported
os.environ["LOCALE"] = "he_IL"

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from vaad.models import BuildingSettings  # noqa: E402
from vaad.services.db import create_engine_for_url, create_schema, create_session_factory  # noqa: E402


@pytest.fixture
def settings():
    """Building settings with an opening balance."""
    return BuildingSettings(
        id=1,
        personal_balance=Decimal("5000"),
        kwh_price=Decimal("0.6"),
        monthly_fee=Decimal("300"),
    )


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine_for_url("sqlite:///:memory:")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the in-memory engine."""
    return create_session_factory(db_engine)
