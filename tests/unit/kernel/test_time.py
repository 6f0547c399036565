from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from review_dispatch.kernel.time import UTC, coerce_utc, is_tz_aware, isoformat_z, utc_now


@pytest.mark.unit
def test_utc_now_is_tz_aware_utc():
    now = utc_now()
    assert is_tz_aware(now)
    assert now.utcoffset() == timedelta(0)


@pytest.mark.unit
def test_isoformat_z_uses_z_suffix():
    dt = datetime(2026, 2, 10, 12, 0, 0, tzinfo=UTC)
    assert isoformat_z(dt) == "2026-02-10T12:00:00Z"


@pytest.mark.unit
def test_coerce_utc_converts_offsets_and_naive_values():
    plus_two = timezone(timedelta(hours=2))
    assert coerce_utc(datetime(2026, 2, 10, 14, 0, tzinfo=plus_two)) == datetime(2026, 2, 10, 12, 0, tzinfo=UTC)
    assert coerce_utc(datetime(2026, 2, 10, 12, 0)).tzinfo is UTC
    with pytest.raises(ValueError):
        coerce_utc(datetime(2026, 2, 10, 12, 0), assume_naive_is_utc=False)
