"""Bounded LRU cache of rotated aircraft marker icons."""

from __future__ import annotations

import base64
from collections import OrderedDict
from dataclasses import dataclass
import logging
import math
import threading
import time
from typing import Callable, Optional

from skyview.models.rendering import IconCacheStats, IconDescriptor

logger = logging.getLogger("skyview.icon_cache")

HEADING_STEP = 10
MAX_CACHE_SIZE = 72  # 36 headings x selected/unselected
PREWARM_HEADINGS = (0, 45, 90, 135, 180, 225, 270, 315)

_SELECTED_FILL = "#ef4444"
_DEFAULT_FILL = "#0969da"

_SVG_TEMPLATE = """<svg width="24" height="24" viewBox="0 0 24 24" fill="none" xmlns="http://www.w3.org/2000/svg">
  <g transform="rotate({rotation} 12 12)">
    <path d="M21 16v-2l-8-5V3.5a1.5 1.5 0 0 0-3 0V9l-8 5v2l8-2.5V19l-2 1.5V22l3.5-1 3.5 1v-1.5L13 19v-5.5l8 2.5z" fill="{fill}" stroke="#ffffff" stroke-width="{stroke_width}"/>
  </g>
</svg>"""


def heading_bucket(heading: Optional[float]) -> int:
    """Normalise a heading to [0, 360) and round to the nearest 10 degrees.

    Headings that round up to 360 fold back onto 0. Missing or non-finite
    headings map to 0.
    """

    if heading is None or not math.isfinite(heading):
        return 0
    normalized = heading % 360
    bucket = int(math.floor(normalized / HEADING_STEP + 0.5)) * HEADING_STEP
    return bucket % 360


def render_icon(bucket: int, selected: bool) -> IconDescriptor:
    # The glyph points north, so rotation equals the heading.
    rotation = float(bucket)
    svg = _SVG_TEMPLATE.format(
        rotation=bucket,
        fill=_SELECTED_FILL if selected else _DEFAULT_FILL,
        stroke_width=2 if selected else 1,
    )
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    size = 28 if selected else 24
    half = size // 2
    return IconDescriptor(
        heading_bucket=bucket,
        selected=selected,
        rotation=rotation,
        svg=svg,
        icon_url=f"data:image/svg+xml;base64,{encoded}",
        icon_size=(size, size),
        icon_anchor=(half, half),
        popup_anchor=(0, -half),
    )


@dataclass
class _CacheEntry:
    icon: IconDescriptor
    last_access: float


class AircraftIconCache:
    """Thread-safe icon cache keyed by (heading bucket, selected).

    Entries are kept in access order; inserting past ``max_size`` evicts the
    least recently used entry across the whole cache.
    """

    def __init__(
        self,
        *,
        max_size: int = MAX_CACHE_SIZE,
        prewarm: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[tuple[int, bool], _CacheEntry] = OrderedDict()
        if prewarm:
            self.prewarm()

    def get_icon(self, heading: Optional[float], selected: bool = False) -> IconDescriptor:
        key = (heading_bucket(heading), selected)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry.last_access = self._clock()
                self._entries.move_to_end(key)
                return entry.icon

            icon = render_icon(*key)
            self._entries[key] = _CacheEntry(icon=icon, last_access=self._clock())
            while len(self._entries) > self.max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug("Evicted icon %s from cache", evicted_key)
            return icon

    def prewarm(self) -> None:
        """Populate the eight cardinal and diagonal headings in both states."""

        for heading in PREWARM_HEADINGS:
            self.get_icon(heading, False)
            self.get_icon(heading, True)

    def last_access(self, heading: Optional[float], selected: bool = False) -> float | None:
        key = (heading_bucket(heading), selected)
        with self._lock:
            entry = self._entries.get(key)
            return entry.last_access if entry is not None else None

    def __contains__(self, key: tuple[int, bool]) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> IconCacheStats:
        with self._lock:
            entries = [f"{bucket}-{str(selected).lower()}" for bucket, selected in self._entries]
            return IconCacheStats(size=len(entries), max_size=self.max_size, entries=entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


__all__ = [
    "AircraftIconCache",
    "HEADING_STEP",
    "MAX_CACHE_SIZE",
    "PREWARM_HEADINGS",
    "heading_bucket",
    "render_icon",
]
