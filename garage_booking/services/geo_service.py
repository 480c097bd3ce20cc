"""Great-circle proximity filtering for garages.

All distances are kilometers (R = 6371 km); callers pass the search radius in
kilometers too. Each query is a linear scan over the supplied garages, which
is fine for tens to low hundreds of rows. Larger catalogues would need a
spatial index (grid, k-d tree or R-tree).
"""
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

EARTH_RADIUS_KM = 6371.0


class InvalidCoordinateError(ValueError):
    """Raised for NaN, infinite or out-of-range coordinates and radii."""


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


class Located(Protocol):
    latitude: float
    longitude: float


G = TypeVar("G", bound=Located)


def validate_coordinate(latitude: float, longitude: float) -> Coordinate:
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinateError("Coordinates must be finite numbers")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinateError(f"Latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinateError(f"Longitude {longitude} outside [-180, 180]")
    return Coordinate(latitude=latitude, longitude=longitude)


def validate_radius(radius_km: float) -> float:
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise InvalidCoordinateError("Radius must be a positive number of kilometers")
    return radius_km


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two points, in kilometers."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def _coordinate_of(item: Located) -> Coordinate:
    return Coordinate(latitude=item.latitude, longitude=item.longitude)


def nearby_with_distances(
    origin: Coordinate,
    radius_km: float,
    garages: Iterable[G],
    sort_by_distance: bool = False,
) -> list[tuple[G, float]]:
    """Return (garage, distance_km) for every garage within radius_km of origin."""
    validate_coordinate(origin.latitude, origin.longitude)
    validate_radius(radius_km)
    matches: list[tuple[G, float]] = []
    for garage in garages:
        d = distance_km(origin, _coordinate_of(garage))
        if d <= radius_km:
            matches.append((garage, d))
    if sort_by_distance:
        matches.sort(key=lambda pair: pair[1])
    return matches


def find_nearby(
    origin: Coordinate,
    radius_km: float,
    garages: Sequence[G],
    sort_by_distance: bool = False,
) -> list[G]:
    return [g for g, _ in nearby_with_distances(origin, radius_km, garages, sort_by_distance)]
