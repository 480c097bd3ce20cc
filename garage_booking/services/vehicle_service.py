from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.models.vehicle import Vehicle, VehicleCreate, VehicleUpdate

# Optional columns a PATCH may explicitly clear
_NULLABLE = {"next_service_mileage", "import_country", "purchase_date"}


async def get_vehicle(session: AsyncSession, vehicle_id: int) -> Vehicle | None:
    return await session.get(Vehicle, vehicle_id)


async def list_vehicles_for_user(session: AsyncSession, user_id: int) -> list[Vehicle]:
    result = await session.execute(
        select(Vehicle).where(Vehicle.user_id == user_id).order_by(Vehicle.id)
    )
    return list(result.scalars().all())


async def _clear_primary(session: AsyncSession, user_id: int, keep_id: int | None = None) -> None:
    """Unset is_primary on the user's other vehicles in one statement."""
    stmt = update(Vehicle).where(Vehicle.user_id == user_id, Vehicle.is_primary == True)  # noqa: E712
    if keep_id is not None:
        stmt = stmt.where(Vehicle.id != keep_id)
    await session.execute(stmt.values(is_primary=False).execution_options(synchronize_session="fetch"))


async def _save(session: AsyncSession, vehicle: Vehicle) -> Vehicle | None:
    """Flush the row; None if a concurrent request already claimed the primary slot."""
    session.add(vehicle)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        return None
    await session.refresh(vehicle)
    return vehicle


async def create_vehicle(session: AsyncSession, user_id: int, data: VehicleCreate) -> Vehicle | None:
    if data.is_primary:
        await _clear_primary(session, user_id)
    return await _save(session, Vehicle(**data.model_dump(), user_id=user_id))


async def update_vehicle(session: AsyncSession, vehicle: Vehicle, data: VehicleUpdate) -> Vehicle | None:
    changes = {
        k: v
        for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE
    }
    if changes.get("is_primary"):
        await _clear_primary(session, vehicle.user_id, keep_id=vehicle.id)
    for key, value in changes.items():
        setattr(vehicle, key, value)
    return await _save(session, vehicle)


async def delete_vehicle(session: AsyncSession, vehicle: Vehicle) -> None:
    await session.delete(vehicle)
    await session.flush()
