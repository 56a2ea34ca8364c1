"""Tests for location resolution."""
from http.client import IncompleteRead

import pytest

from weatherapp.location import service as location_module
from weatherapp.location.service import LocationService
from weatherapp.settings import LocationSettings

GEOCODING_RESPONSE = {
    "results": [
        {
            "name": "Tampere",
            "latitude": 61.49911,
            "longitude": 23.78712,
            "country_code": "FI",
        }
    ]
}
IP_RESPONSE = {
    "city": "Espoo",
    "country_name": "Finland",
    "latitude": 60.2052,
    "longitude": 24.6522,
}


class FakeFetch:
    def __init__(self, *, geocoding=None, ip=None):
        self.geocoding = geocoding if geocoding is not None else {}
        self.ip = ip if ip is not None else {}
        self.urls: list[str] = []

    def __call__(self, url):
        self.urls.append(url)
        if url.startswith(location_module.OPEN_METEO_GEOCODING_URL):
            return self.geocoding
        if url.startswith(location_module.IP_GEOLOCATION_URL):
            return self.ip
        return {}


@pytest.fixture
def install_fetch(monkeypatch):
    def install(**responses):
        fake = FakeFetch(**responses)
        monkeypatch.setattr(location_module, "_fetch_json", fake)
        return fake

    return install


def test_resolve_city(install_fetch, db_path):
    fetch = install_fetch(geocoding=GEOCODING_RESPONSE)
    location = LocationService(db_path, language="fi_FI").resolve_city("  Tampere ")

    assert location is not None
    assert location.label == "Tampere, FI"
    assert location.latitude == pytest.approx(61.49911)
    assert "language=fi" in fetch.urls[0]
    assert "name=Tampere" in fetch.urls[0]


def test_resolve_city_is_cached(install_fetch, db_path):
    fetch = install_fetch(geocoding=GEOCODING_RESPONSE)
    service = LocationService(db_path)

    first = service.resolve_city("Tampere")
    second = service.resolve_city("tampere")

    assert first == second
    assert len(fetch.urls) == 1


def test_blank_city_is_absent_without_request(install_fetch, db_path):
    fetch = install_fetch(geocoding=GEOCODING_RESPONSE)
    assert LocationService(db_path).resolve_city("   ") is None
    assert fetch.urls == []


def test_unknown_city_is_absent(install_fetch, db_path):
    install_fetch(geocoding={"generationtime_ms": 0.2})
    assert LocationService(db_path).resolve_city("Atlantis") is None


def test_city_with_bad_coordinates_is_absent(install_fetch, db_path):
    install_fetch(geocoding={"results": [{"name": "Broken", "latitude": "n/a", "longitude": 3}]})
    assert LocationService(db_path).resolve_city("Broken") is None


def test_resolve_current_uses_ip_location(install_fetch, db_path):
    install_fetch(ip=IP_RESPONSE)
    location = LocationService(db_path).resolve_current()
    assert location is not None
    assert location.label == "Espoo, Finland"


def test_resolve_current_unavailable(install_fetch, db_path):
    install_fetch(ip={})
    assert LocationService(db_path).resolve_current() is None


def test_resolve_auto_prefers_device_location(install_fetch, db_path):
    install_fetch(ip=IP_RESPONSE, geocoding=GEOCODING_RESPONSE)
    location = LocationService(db_path).resolve(LocationSettings(mode="auto", fallback_city="Tampere"))
    assert location.label == "Espoo, Finland"


def test_resolve_auto_falls_back_to_city(install_fetch, db_path):
    install_fetch(ip={}, geocoding=GEOCODING_RESPONSE)
    location = LocationService(db_path).resolve(LocationSettings(mode="auto", fallback_city="Tampere"))
    assert location.label == "Tampere, FI"


def test_resolve_fixed_skips_device_lookup(install_fetch, db_path):
    fetch = install_fetch(ip=IP_RESPONSE, geocoding=GEOCODING_RESPONSE)
    location = LocationService(db_path).resolve(LocationSettings(mode="fixed", fallback_city="Tampere"))
    assert location.label == "Tampere, FI"
    assert not any(url.startswith(location_module.IP_GEOLOCATION_URL) for url in fetch.urls)


def test_resolved_location_is_reused(install_fetch, db_path):
    fetch = install_fetch(ip=IP_RESPONSE)
    service = LocationService(db_path)
    settings = LocationSettings(mode="auto", fallback_city="Tampere")

    service.resolve(settings)
    service.resolve(settings)

    assert len(fetch.urls) == 1


def test_nothing_resolvable_is_absent(install_fetch, db_path):
    install_fetch(ip={}, geocoding={})
    assert LocationService(db_path).resolve(LocationSettings(mode="auto", fallback_city="Nowhere")) is None


class FakeResponse:
    def __init__(self, body):
        self._body = body

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def read(self):
        return self._body


def test_undecodable_body_means_no_location(monkeypatch, db_path):
    monkeypatch.setattr(location_module, "urlopen", lambda *args, **kwargs: FakeResponse(b"\xff\xfe{}"))
    assert LocationService(db_path).resolve_current() is None


def test_connection_reset_means_no_location(monkeypatch, db_path):
    def reset(*args, **kwargs):
        raise ConnectionResetError("reset")

    monkeypatch.setattr(location_module, "urlopen", reset)
    assert LocationService(db_path).resolve_city("Tampere") is None


def test_truncated_response_means_no_location(monkeypatch, db_path):
    class TruncatedResponse(FakeResponse):
        def read(self):
            raise IncompleteRead(b'{"lat')

    monkeypatch.setattr(location_module, "urlopen", lambda *args, **kwargs: TruncatedResponse(b""))
    settings = LocationSettings(mode="auto", fallback_city="Tampere")
    assert LocationService(db_path).resolve(settings) is None


def test_language_can_change_after_start(install_fetch, db_path):
    fetch = install_fetch(geocoding=GEOCODING_RESPONSE)
    service = LocationService(db_path)

    service.language = "fi_FI"
    service.resolve_city("Tampere")

    assert service.language == "fi"
    assert "language=fi" in fetch.urls[0]
