"""Tests for snapshot reuse and replacement."""
from datetime import datetime, timedelta

import pytest

from weatherapp.adapters.weather import WeatherAdapterError
from weatherapp.domain.models import Location, WeatherSnapshot
from weatherapp.services.weather import WeatherService

FETCHED_AT = datetime(2024, 1, 1, 10, 0)


def test_first_request_fetches(fake_adapter, tampere):
    service = WeatherService(fake_adapter)

    assert service.current is None
    assert service.needs_update(tampere, FETCHED_AT)
    snapshot = service.get_weather(tampere, FETCHED_AT)

    assert snapshot is fake_adapter.snapshot
    assert service.current is snapshot
    assert service.location == tampere
    assert fake_adapter.requested == [tampere]


def test_fresh_snapshot_is_reused(fake_adapter, tampere):
    service = WeatherService(fake_adapter)
    service.get_weather(tampere, FETCHED_AT)

    service.get_weather(tampere, FETCHED_AT + timedelta(minutes=14))

    assert len(fake_adapter.requested) == 1


def test_stale_snapshot_is_replaced(adapter_factory, payload_factory, tampere):
    old = WeatherSnapshot.model_validate(payload_factory(current_time="2024-01-01T10:00"))
    new = WeatherSnapshot.model_validate(payload_factory(current_time="2024-01-01T10:15"))
    adapter = adapter_factory(old)
    service = WeatherService(adapter)
    service.get_weather(tampere, FETCHED_AT)

    adapter.snapshot = new
    result = service.get_weather(tampere, FETCHED_AT + timedelta(minutes=16))

    assert result is new
    assert service.current is new
    assert len(adapter.requested) == 2


def test_cooldown_is_configurable(fake_adapter, tampere):
    service = WeatherService(fake_adapter, cooldown=timedelta(minutes=1))
    service.get_weather(tampere, FETCHED_AT)

    assert not service.needs_update(tampere, FETCHED_AT + timedelta(seconds=60))
    assert service.needs_update(tampere, FETCHED_AT + timedelta(seconds=61))


def test_different_location_triggers_fetch(fake_adapter, tampere):
    helsinki = Location(latitude=60.1699, longitude=24.9384, label="Helsinki, FI")
    service = WeatherService(fake_adapter)
    service.get_weather(tampere, FETCHED_AT)

    service.get_weather(helsinki, FETCHED_AT)

    assert fake_adapter.requested == [tampere, helsinki]
    assert service.location == helsinki


def test_adapter_error_propagates_and_keeps_snapshot(fake_adapter, tampere):
    service = WeatherService(fake_adapter)
    held = service.get_weather(tampere, FETCHED_AT)

    fake_adapter.error = WeatherAdapterError("provider down")
    with pytest.raises(WeatherAdapterError):
        service.get_weather(tampere, FETCHED_AT + timedelta(hours=1))

    assert service.current is held
    assert len(fake_adapter.requested) == 2


def test_snapshot_survives_restart(fake_adapter, adapter_factory, tampere, db_path):
    WeatherService(fake_adapter, db_path=db_path).get_weather(tampere, FETCHED_AT)

    idle_adapter = adapter_factory(error=WeatherAdapterError("should not be called"))
    restarted = WeatherService(idle_adapter, db_path=db_path)

    assert restarted.current == fake_adapter.snapshot
    assert restarted.location == tampere
    assert restarted.get_weather(tampere, FETCHED_AT + timedelta(minutes=5)) == fake_adapter.snapshot
    assert idle_adapter.requested == []


def test_empty_database_restores_nothing(fake_adapter, db_path):
    assert WeatherService(fake_adapter, db_path=db_path).current is None
