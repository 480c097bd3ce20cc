import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.api.deps import get_garage_or_404, get_session
from garage_booking.api.schemas.garage import (
    GarageResponse,
    GarageSlotsResponse,
    NearbyGarageResponse,
    SlotInfo,
)
from garage_booking.core.config import settings
from garage_booking.models.garage import Garage
from garage_booking.services.appointment_service import garage_now, list_garage_bookings_on
from garage_booking.services.garage_service import (
    available_services,
    list_garages,
    list_garages_by_service,
    list_nearby_garages,
)
from garage_booking.services.geo_service import InvalidCoordinateError, validate_coordinate
from garage_booking.services.slot_service import (
    combine_date_and_slot,
    generate_slots,
    is_within_booking_horizon,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/garages", tags=["garages"])


@router.get("", response_model=list[GarageResponse])
async def all_garages(session: AsyncSession = Depends(get_session)) -> list[Garage]:
    return await list_garages(session)


@router.get("/nearby", response_model=list[NearbyGarageResponse])
async def nearby_garages(
    lat: float = Query(...),
    lng: float = Query(...),
    radius: float | None = Query(None, description="Search radius in kilometers"),
    sort: bool = Query(False, description="Nearest first"),
    session: AsyncSession = Depends(get_session),
) -> list[NearbyGarageResponse]:
    """Garages within `radius` km of (lat, lng), distances in kilometers."""
    radius_km = settings.default_search_radius_km if radius is None else radius
    try:
        origin = validate_coordinate(lat, lng)
        matches = await list_nearby_garages(session, origin, radius_km, sort_by_distance=sort)
    except InvalidCoordinateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    logger.debug("Nearby query (%.5f, %.5f) r=%.1fkm -> %d garages", lat, lng, radius_km, len(matches))
    return [
        NearbyGarageResponse.model_validate(
            {**GarageResponse.model_validate(g).model_dump(), "distance_km": round(d, 3)}
        )
        for g, d in matches
    ]


@router.get("/service/{service}", response_model=list[GarageResponse])
async def garages_by_service(
    service: str,
    session: AsyncSession = Depends(get_session),
) -> list[Garage]:
    return await list_garages_by_service(session, service)


@router.get("/{garage_id}", response_model=GarageResponse)
async def garage_detail(garage_id: int, session: AsyncSession = Depends(get_session)) -> Garage:
    return await get_garage_or_404(session, garage_id)


@router.get("/{garage_id}/services", response_model=list[str])
async def garage_services(garage_id: int, session: AsyncSession = Depends(get_session)) -> list[str]:
    return available_services(await get_garage_or_404(session, garage_id))


@router.get("/{garage_id}/slots", response_model=GarageSlotsResponse)
async def garage_slots(
    garage_id: int,
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
) -> GarageSlotsResponse:
    """Bookable slots for the garage's opening hours on the given day."""
    garage = await get_garage_or_404(session, garage_id)
    now = garage_now()
    horizon = settings.booking_horizon_days
    if not is_within_booking_horizon(date_param, now.date(), horizon):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date must be between today and {horizon} days ahead",
        )
    slots = generate_slots(
        date_param,
        now,
        opening_hour=garage.opening_hour,
        closing_hour=garage.closing_hour,
        step_minutes=settings.slot_duration_minutes,
    )
    taken = set()
    if not settings.allow_double_booking:
        taken = await list_garage_bookings_on(session, garage.id, date_param)
    return GarageSlotsResponse(
        garage_id=garage.id,
        date=date_param.isoformat(),
        slots=[
            SlotInfo(
                value=s.value,
                label=s.label,
                available=combine_date_and_slot(date_param, s.value) not in taken,
            )
            for s in slots
        ],
    )
