import base64
import threading

import pytest

from skyview.services.icon_cache import (
    MAX_CACHE_SIZE,
    PREWARM_HEADINGS,
    AircraftIconCache,
    heading_bucket,
)


class TickClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.mark.parametrize(
    "heading, bucket",
    [
        (None, 0),
        (0, 0),
        (4.9, 0),
        (5, 10),
        (10, 10),
        (354, 350),
        (355, 0),
        (359.9, 0),
        (370, 10),
        (-10, 350),
        (725, 10),
        (float("inf"), 0),
        (float("-inf"), 0),
        (float("nan"), 0),
    ],
)
def test_heading_bucket(heading, bucket):
    assert heading_bucket(heading) == bucket


def test_equivalent_headings_share_cached_icon():
    cache = AircraftIconCache()

    assert cache.get_icon(370, False) is cache.get_icon(10, False)
    assert cache.get_icon(12, True) is cache.get_icon(8, True)


def test_prewarm_populates_cardinal_headings():
    cache = AircraftIconCache()

    assert len(cache) == len(PREWARM_HEADINGS) * 2
    for heading in PREWARM_HEADINGS:
        assert (heading_bucket(heading), False) in cache
        assert (heading_bucket(heading), True) in cache


def test_full_key_space_fits_without_eviction():
    cache = AircraftIconCache()

    first = cache.get_icon(0, False)
    for heading in range(0, 360):
        cache.get_icon(heading, False)
        cache.get_icon(heading, True)

    assert len(cache) == MAX_CACHE_SIZE
    assert cache.get_icon(0, False) is first


def test_insert_past_bound_evicts_least_recently_used():
    cache = AircraftIconCache(max_size=3, prewarm=False, clock=TickClock())
    cache.get_icon(0)
    cache.get_icon(90)
    cache.get_icon(180)
    cache.get_icon(0)  # touch

    cache.get_icon(270)

    assert len(cache) == 3
    assert (90, False) not in cache
    assert (0, False) in cache
    assert (180, False) in cache
    assert (270, False) in cache


def test_hit_updates_last_access():
    cache = AircraftIconCache(prewarm=False, clock=TickClock())
    cache.get_icon(40, True)
    before = cache.last_access(40, True)

    cache.get_icon(42, True)

    assert cache.last_access(40, True) > before
    assert cache.last_access(40, False) is None


def test_selected_icon_is_larger_and_red():
    cache = AircraftIconCache(prewarm=False)

    normal = cache.get_icon(90, False)
    selected = cache.get_icon(90, True)

    assert normal.icon_size == (24, 24)
    assert selected.icon_size == (28, 28)
    assert selected.icon_anchor == (14, 14)
    assert selected.popup_anchor == (0, -14)
    assert "#ef4444" in selected.svg
    assert "#0969da" in normal.svg


def test_icon_rotation_matches_heading_bucket():
    icon = AircraftIconCache(prewarm=False).get_icon(134, False)

    assert icon.heading_bucket == 130
    assert icon.rotation == 130
    decoded = base64.b64decode(icon.icon_url.split(",", 1)[1]).decode("utf-8")
    assert "rotate(130 12 12)" in decoded


def test_stats_and_clear():
    cache = AircraftIconCache(prewarm=False)
    cache.get_icon(None, False)
    cache.get_icon(90, True)

    stats = cache.stats()
    assert stats.size == 2
    assert stats.max_size == MAX_CACHE_SIZE
    assert stats.entries == ["0-false", "90-true"]

    cache.clear()
    assert len(cache) == 0


def test_concurrent_access_respects_bound():
    cache = AircraftIconCache(max_size=10, prewarm=False)
    errors: list[Exception] = []

    def worker(offset: int) -> None:
        try:
            for heading in range(offset, offset + 360, 7):
                cache.get_icon(heading, heading % 2 == 0)
                assert len(cache) <= 10
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(cache) == 10


def test_rejects_non_positive_bound():
    with pytest.raises(ValueError):
        AircraftIconCache(max_size=0)
