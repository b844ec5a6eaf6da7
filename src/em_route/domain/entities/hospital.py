# domain/entities/hospital.py
from dataclasses import dataclass

from em_route.domain.entities.geography import Coordinate


@dataclass(frozen=True)
class Hospital:
    id: str
    name: str
    location: Coordinate
    address: str = ""
    capacity: int = 0
    emergency_capable: bool = True
    phone_number: str = ""


@dataclass(frozen=True)
class RankedHospital:
    hospital: Hospital
    distance_km: float
