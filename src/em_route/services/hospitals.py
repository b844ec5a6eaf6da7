# services/hospitals.py
from collections.abc import Iterable

from em_route.domain.entities.geography import Coordinate
from em_route.domain.entities.hospital import Hospital, RankedHospital
from em_route.domain.mechanics.mechanics_geomath import distance_km


class HospitalDirectory:
    """Ranks hospitals by straight-line distance; never touches the road network."""

    def __init__(self, hospitals: Iterable[Hospital], *, emergency_only: bool = False):
        self.hospitals = list(hospitals)
        self.emergency_only = emergency_only

    def sorted_by_distance(
        self, location: Coordinate, emergency_only: bool | None = None
    ) -> list[RankedHospital]:
        location = Coordinate.of(location)
        only_er = self.emergency_only if emergency_only is None else emergency_only
        pool = [h for h in self.hospitals if h.emergency_capable or not only_er]
        ranked = [RankedHospital(h, round(distance_km(location, h.location), 2)) for h in pool]
        ranked.sort(key=lambda r: r.distance_km)  # stable: registry order on ties
        return ranked

    def nearest(
        self, location: Coordinate, emergency_only: bool | None = None
    ) -> RankedHospital | None:
        ranked = self.sorted_by_distance(location, emergency_only)
        return ranked[0] if ranked else None

    def within_radius(
        self, location: Coordinate, radius_km: float, emergency_only: bool | None = None
    ) -> list[RankedHospital]:
        if radius_km < 0:
            raise ValueError(f"radius_km must be >= 0, got {radius_km}")
        return [r for r in self.sorted_by_distance(location, emergency_only) if r.distance_km <= radius_km]
