"""In-memory snapshot of the aircraft accepted in the latest refresh cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import threading
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from skyview.models.aircraft import AircraftState
from skyview.models.rendering import ClusterSummary


def _index(aircraft: Iterable[AircraftState]) -> Mapping[str, AircraftState]:
    return MappingProxyType({a.icao24: a for a in aircraft})


@dataclass(frozen=True)
class AircraftSnapshot:
    """Immutable view of one cycle's result.

    ``aircraft`` holds everything accepted this cycle in order; ``clusters``
    and ``singles`` split it for rendering.
    """

    aircraft: tuple[AircraftState, ...] = ()
    clusters: tuple[ClusterSummary, ...] = ()
    singles: tuple[AircraftState, ...] = ()
    by_key: Mapping[str, AircraftState] = field(default_factory=lambda: MappingProxyType({}))
    created_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.aircraft)

    def get(self, icao24: str) -> AircraftState | None:
        return self.by_key.get(icao24.lower())

    def cluster(self, cluster_id: str) -> ClusterSummary | None:
        for summary in self.clusters:
            if summary.cluster_id == cluster_id:
                return summary
        return None


class AircraftRepository:
    """Holds the current snapshot; replacement is a single reference swap."""

    def __init__(self) -> None:
        self._snapshot = AircraftSnapshot()
        self._write_lock = threading.Lock()

    def snapshot(self) -> AircraftSnapshot:
        return self._snapshot

    def replace(
        self,
        aircraft: Iterable[AircraftState],
        clusters: Iterable[ClusterSummary] = (),
        singles: Iterable[AircraftState] | None = None,
    ) -> AircraftSnapshot:
        """Install a new snapshot wholesale."""

        aircraft = tuple(aircraft)
        snapshot = AircraftSnapshot(
            aircraft=aircraft,
            clusters=tuple(clusters),
            singles=aircraft if singles is None else tuple(singles),
            by_key=_index(aircraft),
            created_at=datetime.now(timezone.utc),
        )
        with self._write_lock:
            self._snapshot = snapshot
        return snapshot

    def add(self, aircraft: AircraftState) -> AircraftSnapshot:
        """Merge one aircraft into the current snapshot as a single marker."""

        with self._write_lock:
            current = self._snapshot
            existing = current.by_key.get(aircraft.icao24)
            if existing is None:
                merged = current.aircraft + (aircraft,)
                singles = current.singles + (aircraft,)
            else:
                merged = tuple(aircraft if a is existing else a for a in current.aircraft)
                singles = tuple(aircraft if a is existing else a for a in current.singles)
            snapshot = AircraftSnapshot(
                aircraft=merged,
                clusters=current.clusters,
                singles=singles,
                by_key=_index(merged),
                created_at=current.created_at,
            )
            self._snapshot = snapshot
        return snapshot

    def get(self, icao24: str) -> AircraftState | None:
        return self._snapshot.get(icao24)

    def is_empty(self) -> bool:
        return len(self._snapshot) == 0

    def __len__(self) -> int:
        return len(self._snapshot)


__all__ = ["AircraftRepository", "AircraftSnapshot"]
