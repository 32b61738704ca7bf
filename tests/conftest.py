"""Shared fixtures for sidecar tests."""

import json
import sys
from datetime import timezone

import pytest
from loguru import logger

from takeout_sidecar.timeresolver import TimeResolver


@pytest.fixture(autouse=True)
def reset_logger():
    """Give each test a fresh stderr sink; the CLI replaces handlers."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def utc_resolver() -> TimeResolver:
    return TimeResolver(timezone.utc)


@pytest.fixture
def asset_payload() -> dict:
    """A typical asset sidecar as exported by Google Takeout."""
    return {
        "title": "IMG_4869.HEIC",
        "description": "Sunset",
        "imageViews": "3",
        "creationTime": {"timestamp": "1589241600", "formatted": "May 12, 2020, 12:00:00 AM UTC"},
        "photoTakenTime": {"timestamp": "1589155200", "formatted": "May 11, 2020, 12:00:00 AM UTC"},
        "geoData": {"latitude": 12.5, "longitude": 77.6, "altitude": 0.0,
                    "latitudeSpan": 0.0, "longitudeSpan": 0.0},
        "geoDataExif": {"latitude": 48.8566, "longitude": 2.3522, "altitude": 35.0,
                        "latitudeSpan": 0.0, "longitudeSpan": 0.0},
        "url": "https://photos.google.com/photo/AF1Qip",
        "favorited": True,
        "googlePhotosOrigin": {"mobileUpload": {"deviceType": "IOS_PHONE"}},
    }


@pytest.fixture
def album_payload() -> dict:
    """An album descriptor, i.e. metadata.json inside an album folder."""
    return {
        "title": "Paris 2020",
        "description": "Holidays",
        "access": "protected",
        "date": {"timestamp": "1589155200", "formatted": "May 11, 2020, 12:00:00 AM UTC"},
        "enrichments": [
            {"narrativeEnrichment": {"text": "Hello"}},
            {"locationEnrichment": {"location": [
                {"name": "Paris", "description": "City",
                 "latitudeE7": 488566000, "longitudeE7": 23522000},
            ]}},
        ],
    }


@pytest.fixture
def to_bytes():
    def _to_bytes(payload) -> bytes:
        return json.dumps(payload).encode("utf-8")
    return _to_bytes
