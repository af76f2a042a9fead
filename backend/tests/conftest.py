from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from backend.app import create_app
from backend.app.config import TestingConfig
from backend.services.rates import StaticRateProvider


@pytest.fixture()
def app():
    return create_app(TestingConfig, rate_provider=StaticRateProvider())


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def sample_inputs() -> dict:
    return {
        "startingBalance": 2000,
        "periodicIncome": 3500,
        "periodicExpenses": 2700,
        "additionalDeposit": 200,
        "annualInterestRatePercent": 1.2,
        "targetBalance": 10000,
        "startDate": "2025-01-01",
    }
