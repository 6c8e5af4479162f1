# tests/test_alert_store.py

from datetime import timedelta

import pytest

from macro_signal_dashboard.data import AlertStore, InMemoryAlertStore, SqliteAlertStore
from macro_signal_dashboard.models.alerts import AlertCondition
from macro_signal_dashboard.models.signals import SignalType


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryAlertStore()
    return SqliteAlertStore(tmp_path / "alerts.db")


def test_set_get_delete(store, make_alert, now):
    alert = make_alert(
        signal_type=SignalType.CREDIT,
        condition=AlertCondition.ANY_CHANGE,
        threshold=-0.25,
        cooldown_minutes=30,
        previous_value=-0.31,
        last_triggered_at=now,
    )
    assert store.get(alert.id) is None

    store.set(alert.id, alert)
    assert store.get(alert.id) == alert
    assert store.count() == 1

    assert store.delete(alert.id) is True
    assert store.delete(alert.id) is False
    assert store.get_all() == []


def test_set_replaces(store, make_alert):
    alert = make_alert()
    store.set(alert.id, alert)
    store.set(alert.id, make_alert(enabled=False))
    assert store.count() == 1
    assert store.get(alert.id).enabled is False


def test_sqlite_lists_in_creation_order(tmp_path, make_alert, now):
    store = SqliteAlertStore(tmp_path / "alerts.db")
    newer = make_alert(id="2f1d7e4c-8a5b-4c3d-9e2f-1a0b9c8d7e6f", created_at=now)
    older = make_alert(id="9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d", created_at=now - timedelta(hours=1))
    store.set(newer.id, newer)
    store.set(older.id, older)

    assert [a.id for a in store.get_all()] == [older.id, newer.id]

    # Survives reopening
    assert SqliteAlertStore(tmp_path / "alerts.db").count() == 2


def test_store_must_implement_every_operation():
    class ReadOnlyStore(AlertStore):
        def get_all(self):
            return []

        def get(self, alert_id):
            return None

    with pytest.raises(TypeError):
        ReadOnlyStore()
