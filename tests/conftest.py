"""
Pytest configuration and shared fixtures for the financial planning tests.
"""

import os
from unittest.mock import patch

import pytest

from finplan import create_app
from finplan.config import reset_global_settings


@pytest.fixture
def app():
    """Create an application configured for testing."""
    reset_global_settings()
    with patch.dict(
        os.environ,
        {"SECRET_KEY": "test-secret-key-123", "APP_ENV": "testing"},
        clear=True,
    ):
        app = create_app("testing")
        yield app
    reset_global_settings()


@pytest.fixture
def client(app):
    """Create a test client for the application."""
    return app.test_client()


@pytest.fixture
def scenario_payload():
    """A valid single-bucket scenario payload (ages 30-100)."""
    return {
        "name": "Baseline",
        "assumptionBuckets": [
            {
                "order": 0,
                "startAge": 30,
                "endAge": 100,
                "assumptions": {"annualIncome": 100000, "annualSpending": 60000},
            }
        ],
        "lumpSumEvents": [],
        "mortgages": [],
        "investmentReturnRate": 7,
        "inflationRate": 2.5,
    }


@pytest.fixture
def projection_payload(scenario_payload):
    """A complete projection request for a 40-year-old with one 401(k)."""
    return {
        "scenario": scenario_payload,
        "profile": {"dateOfBirth": "1984-01-01"},
        "accounts": [
            {"accountType": "401k", "accountName": "Work 401(k)", "balance": 100000}
        ],
        "startYear": 2024,
        "endYear": 2026,
        "asOf": "2024-01-01",
    }
