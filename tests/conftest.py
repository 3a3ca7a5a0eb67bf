"""Shared test fixtures for location-extract tests."""

import io
import json

import pytest

from location_extract.decoders.base import Location


def records_export(*records, **extra) -> bytes:
    """Build a Records.json style document."""
    doc = dict(extra)
    doc["locations"] = list(records)
    return json.dumps(doc).encode("utf-8")


def signals_export(*positions) -> bytes:
    """Build an on-device timeline document from position dicts."""
    return json.dumps({
        "semanticSegments": [],
        "rawSignals": [{"position": p} for p in positions],
        "userLocationProfile": {},
    }, ensure_ascii=False).encode("utf-8")


def record(lat, lon, accuracy=10, timestamp="2012-01-27T21:14:42.352Z"):
    return {"latitudeE7": lat, "longitudeE7": lon, "accuracy": accuracy,
            "timestamp": timestamp}


@pytest.fixture
def make_location():
    def _make(latitude="506553765", longitude="30632229", accuracy="10",
              timestamp="2012-01-27T21:14:42.352Z"):
        return Location(latitude, longitude, accuracy, timestamp)
    return _make


@pytest.fixture
def records_stream():
    """Three records on one day, the last one far from the others."""
    return io.BytesIO(records_export(
        record(506553765, 30632229, 10, "2012-01-27T08:00:00.000Z"),
        record(506558000, 30635000, 12, "2012-01-27T08:01:00.000Z"),
        record(486553765, 20632229, 15, "2012-01-27T18:00:00.000Z"),
    ))


@pytest.fixture(autouse=True)
def clean_plugins():
    """Reset global plugin state between tests."""
    from location_extract.plugins import reset_plugins
    reset_plugins()
    yield
    reset_plugins()
