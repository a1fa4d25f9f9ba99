"""Greedy distance-based clustering of aircraft for low-zoom views."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Sequence

from skyview.models.aircraft import AircraftState
from skyview.models.rendering import ClusterSize, ClusterSummary

logger = logging.getLogger("skyview.clustering")

EARTH_RADIUS_M = 6_371_000.0

CLUSTER_MAX_ZOOM = 8  # exclusive
CLUSTER_MIN_AIRCRAFT = 50  # exclusive
LARGE_CLUSTER_SIZE = 100
MEDIUM_CLUSTER_SIZE = 50


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in metres."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(
        d_lambda / 2
    ) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def cluster_radius_m(zoom: int) -> float:
    return float(max(50, 200 - zoom * 20))


def size_for_count(count: int) -> ClusterSize:
    if count >= LARGE_CLUSTER_SIZE:
        return ClusterSize.LARGE
    if count >= MEDIUM_CLUSTER_SIZE:
        return ClusterSize.MEDIUM
    return ClusterSize.SMALL


def should_cluster(count: int, zoom: int) -> bool:
    return zoom < CLUSTER_MAX_ZOOM and count > CLUSTER_MIN_AIRCRAFT


@dataclass
class ClusterResult:
    """Clusters plus the aircraft that still render as single markers."""

    clusters: list[ClusterSummary] = field(default_factory=list)
    unclustered: list[AircraftState] = field(default_factory=list)


class SpatialClusterer:
    """Single-pass greedy clusterer.

    Aircraft are visited in input order. Each unclaimed aircraft seeds a group
    and claims every other unclaimed aircraft within the zoom radius of the
    seed. Groups of one are left unclustered. The same input order always
    produces the same clusters.
    """

    def cluster(self, aircraft: Sequence[AircraftState], zoom: int) -> ClusterResult:
        if not should_cluster(len(aircraft), zoom):
            return ClusterResult(unclustered=list(aircraft))

        radius = cluster_radius_m(zoom)
        claimed = [False] * len(aircraft)
        result = ClusterResult()

        for seed_index, seed in enumerate(aircraft):
            if claimed[seed_index]:
                continue
            claimed[seed_index] = True
            if not seed.has_position:
                result.unclustered.append(seed)
                continue

            members = [seed]
            for other_index in range(seed_index + 1, len(aircraft)):
                if claimed[other_index]:
                    continue
                other = aircraft[other_index]
                if not other.has_position:
                    continue
                distance = haversine_m(
                    seed.latitude, seed.longitude, other.latitude, other.longitude
                )
                if distance <= radius:
                    members.append(other)
                    claimed[other_index] = True

            if len(members) < 2:
                result.unclustered.append(seed)
                continue

            result.clusters.append(
                ClusterSummary(
                    cluster_id=f"cluster-{len(result.clusters)}",
                    latitude=sum(m.latitude for m in members) / len(members),
                    longitude=sum(m.longitude for m in members) / len(members),
                    members=members,
                    size=size_for_count(len(members)),
                )
            )

        logger.debug(
            "Clustered %s aircraft into %s clusters (%s single) at zoom %s",
            len(aircraft),
            len(result.clusters),
            len(result.unclustered),
            zoom,
        )
        return result


__all__ = [
    "ClusterResult",
    "SpatialClusterer",
    "cluster_radius_m",
    "haversine_m",
    "should_cluster",
    "size_for_count",
]
