"""Shared test fixtures for the rNPV Valuator."""

import sys
import os

# Keep the app's default engine off the package directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from rnpv.database import Base
from rnpv import models  # noqa: F401
from rnpv.schemas import ValuationInputs


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database session for testing."""
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def neutral_inputs():
    """Preclinical asset with neutral mechanistic defaults."""
    return ValuationInputs(launch_year=2030, loe_year=2040)


@pytest.fixture
def simple_inputs():
    """
    Phase II owner asset with no costs or discounting:
    sales 0, 100, 200, 300, 400 over 2030–2034 (sum 1000).
    """
    return ValuationInputs(
        phase="Phase II",
        peak_sales=400,
        launch_year=2030,
        loe_year=2035,
        discount_rate=0.0,
        tax_rate=0.2,
        cogs_fraction=0.0,
        commercial_spend_fraction=0.0,
        working_capital_fraction=0.0,
        royalty_min_pct=10.0,
        royalty_max_pct=10.0,
        royalty_ramp_years=0,
    )
