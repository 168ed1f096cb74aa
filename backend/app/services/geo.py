"""
Nearby emergency facilities for an incident location.

Facilities are simulated: a fixed set of police stations and hospitals placed
at constant offsets from the query point, so the same coordinate always
yields the same list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import List, Literal

FacilityType = Literal["police", "hospital"]

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 10.0

# (name, type, d_lat, d_lng)
SIMULATED_FACILITIES: tuple[tuple[str, FacilityType, float, float], ...] = (
    ("Central Police Station", "police", 0.05, 0.05),
    ("North Police Station", "police", 0.08, -0.03),
    ("South Police Station", "police", -0.06, 0.04),
    ("City General Hospital", "hospital", -0.04, 0.06),
    ("Emergency Medical Center", "hospital", 0.07, 0.02),
    ("Regional Hospital", "hospital", -0.05, -0.05),
)


@dataclass(frozen=True)
class NearbyFacility:
    name: str
    type: FacilityType
    latitude: float
    longitude: float
    distance: float  # km, one decimal
    phone: str

    def to_dict(self) -> dict:
        return asdict(self)


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1_r = math.radians(lat1)
    lat2_r = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def nearby_facilities(
    latitude: float,
    longitude: float,
    police_phone: str,
    hospital_phone: str,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[NearbyFacility]:
    """
    Return simulated police stations and hospitals within ``radius_km``,
    closest first. Each facility carries the configured contact phone for
    its type.
    """
    phones = {"police": police_phone, "hospital": hospital_phone}
    found: List[NearbyFacility] = []

    for name, kind, d_lat, d_lng in SIMULATED_FACILITIES:
        f_lat = latitude + d_lat
        f_lng = longitude + d_lng
        distance = haversine_km(latitude, longitude, f_lat, f_lng)
        if distance > radius_km:
            continue
        found.append(NearbyFacility(
            name=name,
            type=kind,
            latitude=f_lat,
            longitude=f_lng,
            distance=round(distance, 1),
            phone=phones[kind],
        ))

    found.sort(key=lambda f: f.distance)
    return found
