import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.models.garage import Garage
from garage_booking.services.geo_service import Coordinate, nearby_with_distances

logger = logging.getLogger(__name__)

SAMPLE_GARAGES: list[dict] = [
    {
        "name": "AutoFix Pro",
        "address": "123 Main St, Paris, France",
        "latitude": 48.864716,
        "longitude": 2.349014,
        "opening_hour": 8,
        "closing_hour": 18,
        "is_open": True,
        "phone_number": "+33 1 23 45 67 89",
        "services": ["Oil Change", "Brake Service", "Engine Repair", "Transmission", "Electrical"],
        "rating": 4.7,
        "review_count": 253,
    },
    {
        "name": "MechanicMasters",
        "address": "456 Oak Ave, Lyon, France",
        "latitude": 45.764043,
        "longitude": 4.835659,
        "opening_hour": 7,
        "closing_hour": 19,
        "is_open": True,
        "phone_number": "+33 4 56 78 90 12",
        "services": ["Tire Change", "Diagnostics", "AC Service", "Body Work", "Oil Change"],
        "rating": 4.5,
        "review_count": 187,
    },
    {
        "name": "QuickFix Garage",
        "address": "789 Pine Rd, Marseille, France",
        "latitude": 43.296482,
        "longitude": 5.369780,
        "opening_hour": 9,
        "closing_hour": 17,
        "is_open": False,
        "phone_number": "+33 6 78 90 12 34",
        "services": ["Emergency Service", "Towing", "Battery Replacement", "Glass Repair"],
        "rating": 4.2,
        "review_count": 98,
    },
]


async def list_garages(session: AsyncSession) -> list[Garage]:
    result = await session.execute(select(Garage).order_by(Garage.id))
    return list(result.scalars().all())


async def get_garage(session: AsyncSession, garage_id: int) -> Garage | None:
    return await session.get(Garage, garage_id)


async def list_garages_by_service(session: AsyncSession, service: str) -> list[Garage]:
    needle = service.lower()
    garages = await list_garages(session)
    return [g for g in garages if any(needle in s.lower() for s in g.services)]


async def list_nearby_garages(
    session: AsyncSession,
    origin: Coordinate,
    radius_km: float,
    sort_by_distance: bool = False,
) -> list[tuple[Garage, float]]:
    garages = await list_garages(session)
    return nearby_with_distances(origin, radius_km, garages, sort_by_distance=sort_by_distance)


def available_services(garage: Garage | None) -> list[str]:
    """Service types a user may pick once a garage is chosen."""
    if garage is None:
        return []
    return list(garage.services or [])


async def seed_sample_garages(session: AsyncSession) -> int:
    """Insert the sample catalogue when the garages table is empty. Returns count inserted."""
    count = await session.scalar(select(func.count()).select_from(Garage))
    if count:
        return 0
    for data in SAMPLE_GARAGES:
        session.add(Garage(**data))
    await session.flush()
    logger.info("Seeded %d sample garages", len(SAMPLE_GARAGES))
    return len(SAMPLE_GARAGES)
