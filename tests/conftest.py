"""Shared pytest fixtures for mealcard tests."""

import tempfile
import os
import pytest

from mealcard.database.factories import create_sqlite_database
from mealcard.domain.analytics import AnalyticsService
from mealcard.domain.card import CardService
from mealcard.domain.meal import MealService
from mealcard.domain.purchase import PurchaseService
from mealcard.domain.recharge import RechargeService
from mealcard.domain.reconciliation import ReconciliationService
from mealcard.domain.settlement import SettlementService


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep MEALCARD_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("MEALCARD_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def settlement_service(temp_db):
    """Create a SettlementService with a temporary database."""
    return SettlementService(temp_db)


@pytest.fixture
def card_service(temp_db):
    """Create a CardService with a temporary database."""
    return CardService(temp_db)


@pytest.fixture
def recharge_service(temp_db):
    """Create a RechargeService with a temporary database."""
    return RechargeService(temp_db)


@pytest.fixture
def purchase_service(temp_db):
    """Create a PurchaseService with a temporary database."""
    return PurchaseService(temp_db)


@pytest.fixture
def meal_service(temp_db):
    """Create a MealService with a temporary database."""
    return MealService(temp_db)


@pytest.fixture
def analytics_service(temp_db):
    """Create an AnalyticsService using UTC days."""
    from dateutil import tz

    return AnalyticsService(temp_db, timezone=tz.UTC)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def sample_card(card_service):
    """Issue a card with balance 100 to student S1001."""
    return card_service.issue_card("S1001", card_number="CARD-1001", starting_balance=100)


@pytest.fixture
def sample_meals(meal_service):
    """Create a cheap, an expensive and an unavailable meal."""
    ids = {
        "thali": meal_service.create_meal("Veg Thali", 150, "Lunch"),
        "tea": meal_service.create_meal("Masala Tea", 20, "Beverages"),
        "biryani": meal_service.create_meal("Biryani", 120, "Dinner"),
    }
    meal_service.update_meal(ids["biryani"], is_available=False)
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
