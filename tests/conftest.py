"""
Pytest configuration for the bakery system.

Provides fixtures for:
- Settings overrides pointing the snapshot at a temporary directory
- A fresh `BakeryService` with and without the sample catalog
- Registered customer and staff accounts
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from bakery.config import Settings, get_settings
from bakery.domain.models import Customer, Employee
from bakery.services import BakeryService
from bakery.utils.logging import configure_logging

CUSTOMER_EMAIL = "ada@example.com"
CUSTOMER_PASSWORD = "engine"
MANAGER_EMAIL = "manager@bakery.test"
MANAGER_PASSWORD = "manager"
STAFF_EMAIL = "staff@bakery.test"
STAFF_PASSWORD = "staff"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.

    Small bucket counts so that chains actually form.
    """
    return Settings(
        data_dir=tmp_path,
        snapshot_file="bakery.json",
        customer_buckets=5,
        employee_buckets=3,
        log_level="DEBUG",
    )


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """
    Point the environment-driven settings at a temporary data directory.

    Used by CLI tests, which build their settings through `get_settings()`.
    """
    monkeypatch.setenv("BAKERY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BAKERY_SNAPSHOT_FILE", "bakery.json")
    monkeypatch.setenv("BAKERY_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()
    # CLI runs bind the log handler to the runner's stderr; rebind to the real one.
    configure_logging(level="WARNING")


@pytest.fixture
def service(test_settings: Settings) -> BakeryService:
    return BakeryService(test_settings)


@pytest.fixture
def stocked_service(service: BakeryService) -> BakeryService:
    """Service with the default sample products loaded."""
    service.seed_default_products()
    return service


@pytest.fixture
def customer(stocked_service: BakeryService) -> Customer:
    return stocked_service.register_customer(
        first_name="Ada",
        last_name="Lovelace",
        email=CUSTOMER_EMAIL,
        password=CUSTOMER_PASSWORD,
        address="12 Analytical Way",
        phone="555-0101",
        city="London",
        state="LN",
        zip="10001",
    )


@pytest.fixture
def manager(stocked_service: BakeryService) -> Employee:
    return stocked_service.register_employee(
        first_name="Morgan",
        last_name="Baker",
        email=MANAGER_EMAIL,
        password=MANAGER_PASSWORD,
        is_manager=True,
    )


@pytest.fixture
def staff(stocked_service: BakeryService) -> Employee:
    return stocked_service.register_employee(
        first_name="Riley",
        last_name="Counter",
        email=STAFF_EMAIL,
        password=STAFF_PASSWORD,
    )
