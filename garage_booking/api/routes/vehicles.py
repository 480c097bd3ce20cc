from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.api.deps import ensure_owned, get_current_user, get_session
from garage_booking.api.schemas.vehicle import VehicleRequest, VehicleResponse, VehicleUpdateRequest
from garage_booking.models.user import User
from garage_booking.models.vehicle import Vehicle, VehicleCreate, VehicleUpdate
from garage_booking.services.vehicle_service import (
    create_vehicle,
    delete_vehicle,
    get_vehicle,
    list_vehicles_for_user,
    update_vehicle,
)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _saved_or_409(vehicle: Vehicle | None) -> Vehicle:
    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another vehicle was made primary at the same time; retry",
        )
    return vehicle


@router.get("", response_model=list[VehicleResponse])
async def list_my_vehicles(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[Vehicle]:
    return await list_vehicles_for_user(session, current_user.id)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def add_vehicle(
    body: VehicleRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Vehicle:
    return _saved_or_409(await create_vehicle(session, current_user.id, VehicleCreate(**body.model_dump())))


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
async def edit_vehicle(
    vehicle_id: int,
    body: VehicleUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Vehicle:
    vehicle = await get_vehicle(session, vehicle_id)
    ensure_owned(vehicle, current_user, "Vehicle")
    changes = VehicleUpdate(**body.model_dump(exclude_unset=True))
    return _saved_or_409(await update_vehicle(session, vehicle, changes))


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_vehicle(
    vehicle_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    vehicle = await get_vehicle(session, vehicle_id)
    ensure_owned(vehicle, current_user, "Vehicle")
    await delete_vehicle(session, vehicle)
