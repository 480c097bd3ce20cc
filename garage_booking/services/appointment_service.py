from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.core.config import settings
from garage_booking.models.appointment import Appointment, AppointmentCreate
from garage_booking.models.garage import Garage
from garage_booking.services.garage_service import available_services
from garage_booking.services.slot_service import (
    InvalidSlotError,
    generate_slots,
    is_within_booking_horizon,
    slot_token_for,
)


class UnavailableServiceError(ValueError):
    """Raised when a garage does not offer the requested service type."""


def garage_now() -> datetime:
    """Current naive wall-clock time in the garages' timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def to_garage_local(dt: datetime) -> datetime:
    """Convert aware timestamps to naive garage-local time; naive ones are taken as local."""
    if dt.tzinfo is not None:
        return dt.astimezone(ZoneInfo(settings.timezone)).replace(tzinfo=None)
    return dt


def check_bookable(garage: Garage, service_type: str, when: datetime, now: datetime) -> None:
    """Reject a service the garage lacks or a time that is not one of its open slots."""
    if service_type not in available_services(garage):
        raise UnavailableServiceError(f"{garage.name} does not offer {service_type!r}")
    if not is_within_booking_horizon(when, now.date(), settings.booking_horizon_days):
        raise InvalidSlotError(
            f"Date must be between today and {settings.booking_horizon_days} days ahead"
        )
    if when.second or when.microsecond:
        raise InvalidSlotError("Appointment time must fall on a slot boundary")
    slots = generate_slots(
        when,
        now,
        opening_hour=garage.opening_hour,
        closing_hour=garage.closing_hour,
        step_minutes=settings.slot_duration_minutes,
    )
    token = slot_token_for(when)
    if token not in {s.value for s in slots}:
        raise InvalidSlotError(f"{token} is not an available slot on {when.date().isoformat()}")


async def is_slot_taken(
    session: AsyncSession, garage_id: int, when: datetime, exclude_id: int | None = None
) -> bool:
    q = select(Appointment.id).where(
        Appointment.garage_id == garage_id,
        Appointment.date == when,
        Appointment.status != "cancelled",
    )
    if exclude_id is not None:
        q = q.where(Appointment.id != exclude_id)
    result = await session.execute(q.limit(1))
    return result.first() is not None


async def create_appointment(
    session: AsyncSession, user_id: int, data: AppointmentCreate, garage: Garage
) -> Appointment | None:
    """Book an appointment. Returns None when the slot is taken and double booking is off."""
    when = to_garage_local(data.date)
    check_bookable(garage, data.service_type, when, garage_now())
    if not settings.allow_double_booking and await is_slot_taken(session, garage.id, when):
        return None
    appointment = Appointment(
        **data.model_dump(exclude={"date"}),
        date=when,
        user_id=user_id,
    )
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    return appointment


async def get_appointment(session: AsyncSession, appointment_id: int) -> Appointment | None:
    return await session.get(Appointment, appointment_id)


async def list_appointments_for_user(session: AsyncSession, user_id: int) -> list[Appointment]:
    result = await session.execute(
        select(Appointment).where(Appointment.user_id == user_id).order_by(Appointment.date)
    )
    return list(result.scalars().all())


async def list_garage_bookings_on(
    session: AsyncSession, garage_id: int, day: date
) -> set[datetime]:
    """Start times already held at a garage on the given day."""
    start = datetime(day.year, day.month, day.day)
    result = await session.execute(
        select(Appointment.date).where(
            Appointment.garage_id == garage_id,
            Appointment.date >= start,
            Appointment.date < start + timedelta(days=1),
            Appointment.status != "cancelled",
        )
    )
    return {row[0] for row in result.all()}


async def update_appointment(
    session: AsyncSession, appointment: Appointment, changes: dict, garage: Garage
) -> Appointment | None:
    """Apply a partial update. Rescheduling and service changes are re-validated."""
    if "date" in changes:
        changes["date"] = to_garage_local(changes["date"])
        # Echoing the stored time back is not a reschedule
        if changes["date"] == appointment.date:
            del changes["date"]
    if "date" in changes or "service_type" in changes:
        when = changes.get("date", appointment.date)
        service_type = changes.get("service_type", appointment.service_type)
        if "date" in changes:
            check_bookable(garage, service_type, when, garage_now())
        elif service_type not in available_services(garage):
            raise UnavailableServiceError(f"{garage.name} does not offer {service_type!r}")
        if (
            "date" in changes
            and not settings.allow_double_booking
            and await is_slot_taken(session, garage.id, when, exclude_id=appointment.id)
        ):
            return None
    for key, value in changes.items():
        setattr(appointment, key, value)
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    return appointment


async def delete_appointment(session: AsyncSession, appointment: Appointment) -> None:
    await session.delete(appointment)
    await session.flush()
