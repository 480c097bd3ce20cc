import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.api.deps import ensure_owned, get_current_user, get_garage_or_404, get_session
from garage_booking.api.schemas.appointment import (
    AppointmentResponse,
    BookAppointmentRequest,
    UpdateAppointmentRequest,
)
from garage_booking.models.appointment import Appointment, AppointmentCreate
from garage_booking.models.user import User
from garage_booking.services.appointment_service import (
    UnavailableServiceError,
    create_appointment,
    delete_appointment,
    get_appointment,
    list_appointments_for_user,
    update_appointment,
)
from garage_booking.services.slot_service import InvalidSlotError
from garage_booking.services.vehicle_service import get_vehicle

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

_SLOT_TAKEN = "This garage already has an appointment at that time"


def _bad_request(exc: ValueError, field: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": "Invalid appointment data", "errors": [{"field": field, "message": str(exc)}]},
    )


async def _owned_appointment(session: AsyncSession, appointment_id: int, user: User) -> Appointment:
    appointment = await get_appointment(session, appointment_id)
    ensure_owned(appointment, user, "Appointment")
    return appointment


@router.get("", response_model=list[AppointmentResponse])
async def list_my_appointments(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[Appointment]:
    return await list_appointments_for_user(session, current_user.id)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Appointment:
    garage = await get_garage_or_404(session, body.garage_id)
    vehicle = await get_vehicle(session, body.vehicle_id)
    ensure_owned(vehicle, current_user, "Vehicle")
    data = AppointmentCreate(**body.model_dump())
    try:
        appointment = await create_appointment(session, current_user.id, data, garage)
    except UnavailableServiceError as e:
        raise _bad_request(e, "serviceType") from e
    except InvalidSlotError as e:
        raise _bad_request(e, "date") from e
    if not appointment:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_SLOT_TAKEN)
    logger.info(
        "Booked appointment id=%s garage=%s at %s for user=%s",
        appointment.id, garage.id, appointment.date.isoformat(), current_user.id,
    )
    return appointment


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def appointment_detail(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Appointment:
    return await _owned_appointment(session, appointment_id, current_user)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def edit_appointment(
    appointment_id: int,
    body: UpdateAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Appointment:
    appointment = await _owned_appointment(session, appointment_id, current_user)
    garage = await get_garage_or_404(session, appointment.garage_id)
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None or k == "notes"}
    try:
        updated = await update_appointment(session, appointment, changes, garage)
    except UnavailableServiceError as e:
        raise _bad_request(e, "serviceType") from e
    except InvalidSlotError as e:
        raise _bad_request(e, "date") from e
    if not updated:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_SLOT_TAKEN)
    return updated


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_my_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    appointment = await _owned_appointment(session, appointment_id, current_user)
    await delete_appointment(session, appointment)
