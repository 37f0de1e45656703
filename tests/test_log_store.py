"""Tests for the JSON daily log store."""
import asyncio
import json
from unittest.mock import patch

from stockwatch.domain.entities import LogEntry, StockRecord
from stockwatch.repository.log_store import JsonLogStore


def _entry(timestamp, price):
    return LogEntry(
        timestamp=timestamp,
        stocks=[StockRecord(company="Intel", symbol="INTC", price=price,
                            currency="USD" if price is not None else "",
                            percent_change=None)],
    )


def test_persist_writes_json_array(log_store):
    log_store.append(_entry("2024-01-02T09:00:00", 30.0))
    log_store.append(_entry("2024-01-02T09:00:05", None))

    assert log_store.persist() is True

    data = json.loads(log_store.path.read_text())
    assert data == [
        {"timestamp": "2024-01-02T09:00:00", "stocks": [
            {"company": "Intel", "symbol": "INTC", "price": 30.0,
             "currency": "USD", "percentChange": None},
        ]},
        {"timestamp": "2024-01-02T09:00:05", "stocks": [
            {"company": "Intel", "symbol": "INTC", "price": None,
             "currency": "", "percentChange": None},
        ]},
    ]


def test_persist_creates_parent_directory(tmp_path):
    store = JsonLogStore(tmp_path / "nested" / "dir" / "log.json")
    store.append(_entry("t0", 1.0))
    assert store.persist() is True
    assert store.path.exists()


def test_entries_returns_copy(log_store):
    log_store.append(_entry("t0", 1.0))
    log_store.entries.clear()
    assert len(log_store.entries) == 1


def test_scheduled_persists_end_at_latest_snapshot(log_store):
    async def run():
        for i in range(5):
            log_store.append(_entry(f"t{i}", float(i)))
            log_store.schedule_persist()
        await log_store.flush()

    asyncio.run(run())

    data = json.loads(log_store.path.read_text())
    assert [item["timestamp"] for item in data] == ["t0", "t1", "t2", "t3", "t4"]


def test_flush_without_pending_is_noop(log_store):
    asyncio.run(log_store.flush())
    assert not log_store.path.exists()


def test_persist_failure_is_logged_not_raised(log_store, caplog):
    log_store.append(_entry("t0", 1.0))

    with patch("stockwatch.repository.log_store.os.replace", side_effect=OSError("disk full")):
        assert log_store.persist() is False

    assert "Error writing daily log file" in caplog.text
    assert len(log_store.entries) == 1


def test_clear_deletes_file(log_store):
    log_store.append(_entry("t0", 1.0))
    log_store.persist()

    assert log_store.clear() is True
    assert not log_store.path.exists()


def test_clear_missing_file_is_ok(log_store):
    assert log_store.clear() is True


def test_clear_failure_is_logged(log_store, caplog):
    log_store.append(_entry("t0", 1.0))
    log_store.persist()

    with patch("pathlib.Path.unlink", side_effect=PermissionError("read-only")):
        assert log_store.clear() is False

    assert "Error deleting daily log file" in caplog.text
