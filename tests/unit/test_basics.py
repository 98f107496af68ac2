from __future__ import annotations

import threading
from pathlib import Path

import pytest

from bakery import config
from bakery.domain.ids import IdGenerator
from bakery.errors import BakeryError, ConfigError, ContainerError, EmptyError, NullKeyError
from bakery.infrastructure.snapshot_store import SnapshotStore
from scripts import generate_data

THREADS = 8
IDS_PER_THREAD = 250


def test_get_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BAKERY_DATA_DIR", "BAKERY_SNAPSHOT_FILE", "BAKERY_LOG_LEVEL", "BAKERY_ID_START"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    try:
        settings = config.get_settings()
        assert settings.snapshot_path == Path("data") / "bakery.json"
        assert settings.customer_buckets == 20
        assert settings.employee_buckets == 20
        assert settings.id_start == 1000
        assert settings.log_level == "WARNING"
        assert config.get_settings() is settings
    finally:
        config.get_settings.cache_clear()


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BAKERY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BAKERY_CUSTOMER_BUCKETS", "11")
    settings = config.Settings()
    assert settings.data_dir == tmp_path
    assert settings.customer_buckets == 11


def test_error_taxonomy() -> None:
    assert issubclass(EmptyError, ContainerError)
    assert issubclass(EmptyError, LookupError)
    assert issubclass(NullKeyError, TypeError)
    assert issubclass(ConfigError, ValueError)
    assert issubclass(ContainerError, BakeryError)


def test_id_generator_sequence_and_advance() -> None:
    ids = IdGenerator("O")
    assert [ids.next_id() for _ in range(3)] == ["O1000", "O1001", "O1002"]

    ids.advance_past("O2041")
    assert ids.peek() == "O2042"
    ids.advance_past("O0005")
    ids.advance_past("legacy")
    assert ids.next_id() == "O2042"


def test_id_generator_is_thread_safe() -> None:
    ids = IdGenerator("P", start=0)
    issued: list = []
    lock = threading.Lock()

    def worker() -> None:
        local = [ids.next_id() for _ in range(IDS_PER_THREAD)]
        with lock:
            issued.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(THREADS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(issued) == len(set(issued)) == THREADS * IDS_PER_THREAD


def test_generate_data_builds_consistent_snapshot(tmp_path: Path, isolated_env: Path) -> None:
    snapshot = generate_data.build_snapshot(customers=4, orders=12, shipped_ratio=0.5, seed=123)

    assert len(snapshot.products) == 3 + len(generate_data.EXTRA_PRODUCTS)
    assert len(snapshot.customers) == 4
    assert sum(employee.is_manager for employee in snapshot.employees) == 1
    assert len(snapshot.orders) == 12
    assert sum(order.shipped for order in snapshot.orders) == 6

    again = generate_data.build_snapshot(customers=4, orders=12, shipped_ratio=0.5, seed=123)
    assert [order.items for order in again.orders] == [order.items for order in snapshot.orders]

    path = SnapshotStore(tmp_path / "sample.json").save(snapshot)
    assert SnapshotStore(path).load().orders[0].id == "O1000"
