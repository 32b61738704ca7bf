"""Tests for resolving epoch timestamps."""

import time
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from takeout_sidecar import timeresolver
from takeout_sidecar.timeresolver import TimeResolver, resolve_local_timezone


class TestResolve:
    @pytest.mark.parametrize("timestamp", ["", "0", "+0", "-0", "abc", "12.5", " 12", "1_000", "0x10"])
    def test_unknown(self, utc_resolver, timestamp) -> None:
        assert utc_resolver.resolve(timestamp) is None

    def test_utc(self, utc_resolver) -> None:
        assert utc_resolver.resolve("1589155200") == datetime(2020, 5, 11, tzinfo=timezone.utc)

    def test_negative_epoch(self, utc_resolver) -> None:
        assert utc_resolver.resolve("-86400") == datetime(1969, 12, 31, tzinfo=timezone.utc)

    def test_converted_to_zone(self) -> None:
        resolver = TimeResolver(ZoneInfo("Europe/Paris"))
        instant = resolver.resolve("1589155200")
        assert instant.tzinfo == ZoneInfo("Europe/Paris")
        assert instant.hour == 2
        assert instant.utcoffset() == timedelta(hours=2)
        assert instant == datetime(2020, 5, 11, tzinfo=timezone.utc)

    def test_out_of_range(self, utc_resolver) -> None:
        assert utc_resolver.resolve("99999999999999999999") is None


class TestLocalTimezone:
    @pytest.fixture(autouse=True)
    def clear_cache(self):
        resolve_local_timezone.cache_clear()
        yield
        resolve_local_timezone.cache_clear()

    def test_tz_env(self, monkeypatch) -> None:
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        assert resolve_local_timezone() == ZoneInfo("Asia/Tokyo")

    def test_resolved_once(self, monkeypatch) -> None:
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        first = resolve_local_timezone()
        monkeypatch.setenv("TZ", "America/New_York")
        assert resolve_local_timezone() is first

    def test_unknown_tz_falls_back(self, monkeypatch) -> None:
        monkeypatch.setenv("TZ", "Not/AZone")
        assert resolve_local_timezone() is None

    def test_default_resolver_uses_local_zone(self, monkeypatch) -> None:
        monkeypatch.setattr(timeresolver, "resolve_local_timezone", lambda: ZoneInfo("Asia/Tokyo"))
        assert TimeResolver().tz == ZoneInfo("Asia/Tokyo")


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
class TestSystemLocalTime:
    """Without an IANA zone, each instant follows the system's DST rules."""

    @pytest.fixture(autouse=True)
    def posix_tz(self, monkeypatch):
        monkeypatch.setenv("TZ", "CET-1CEST,M3.5.0,M10.5.0/3")
        time.tzset()
        resolve_local_timezone.cache_clear()
        yield
        monkeypatch.undo()
        time.tzset()
        resolve_local_timezone.cache_clear()

    def test_no_zone_resolved(self) -> None:
        assert resolve_local_timezone() is None

    def test_winter_and_summer_offsets(self) -> None:
        resolver = TimeResolver()
        winter = resolver.resolve("1579046400")  # 2020-01-15T00:00:00Z
        summer = resolver.resolve("1594771200")  # 2020-07-15T00:00:00Z

        assert winter.utcoffset() == timedelta(hours=1)
        assert winter.hour == 1
        assert summer.utcoffset() == timedelta(hours=2)
        assert summer.hour == 2
        assert winter == datetime(2020, 1, 15, tzinfo=timezone.utc)
