"""Shared test fixtures for the agent test suite."""
import os
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

# Use SQLite for tests (no PG dependency needed for unit tests)
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CORS_ORIGINS", "*")
os.environ.setdefault("LLM_API_KEY", "gsk_test-key-do-not-use")
os.environ.setdefault("CAMPAIGNS_API_URL", "http://dashboard.test/api")

from mcp_agent import create_app
from mcp_agent.models import db as _db


@pytest.fixture(scope="session")
def app():
    """Create Flask application for testing."""
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def db(app):
    """Create fresh database tables for each test."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture(scope="function")
def client(app, db):
    """Flask test client with clean DB."""
    with app.test_client() as client:
        with app.app_context():
            yield client


@pytest.fixture
def seed_campaigns(db):
    """Create two campaigns, one of them with daily metrics."""
    from mcp_agent.models import Campaign, DailyMetric

    summer = Campaign(
        id="c-summer",
        name="Campanha de Verão",
        status="active",
        budget=Decimal("5000.00"),
        daily_budget=Decimal("150.00"),
        cost_traffic=Decimal("1200.00"),
        cost_creative=Decimal("300.00"),
        cost_operational=Decimal("250.50"),
    )
    black_friday = Campaign(
        id="c-bf",
        name="Black Friday",
        status="draft",
        daily_budget=Decimal("50.00"),
    )
    db.session.add_all([summer, black_friday])
    db.session.flush()

    db.session.add_all([
        DailyMetric(campaign_id="c-summer", date=date(2024, 1, 1),
                    cost=Decimal("100.00"), revenue=Decimal("400.00"), clicks=10, leads=2),
        DailyMetric(campaign_id="c-summer", date=date(2024, 1, 2),
                    cost=Decimal("50.25"), revenue=Decimal("100.00"), clicks=5, leads=1),
    ])
    db.session.commit()
    return {"summer": summer, "black_friday": black_friday}


def make_http_response(status_code=200, json_data=None, text=""):
    """Helper: a MagicMock shaped like a requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON")
    else:
        resp.json.return_value = json_data
    return resp
