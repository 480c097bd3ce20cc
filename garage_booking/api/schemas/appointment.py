from datetime import datetime
from typing import Literal

from pydantic import Field

from garage_booking.api.schemas.base import CamelModel

Status = Literal["scheduled", "completed", "cancelled"]
PaymentMethod = Literal["cash", "card", "transfer", "later"]
PaymentStatus = Literal["pending", "completed", "failed"]


class BookAppointmentRequest(CamelModel):
    """Booking payload. Any userId sent by the client is ignored."""

    garage_id: int = Field(gt=0)
    vehicle_id: int = Field(gt=0)
    service_type: str = Field(min_length=1)
    date: datetime  # calendar day combined with the chosen slot
    status: Status = "scheduled"
    notes: str | None = None
    payment_method: PaymentMethod = "cash"
    payment_status: PaymentStatus = "pending"


class UpdateAppointmentRequest(CamelModel):
    service_type: str | None = Field(default=None, min_length=1)
    date: datetime | None = None
    status: Status | None = None
    notes: str | None = None
    payment_method: PaymentMethod | None = None
    payment_status: PaymentStatus | None = None


class AppointmentResponse(CamelModel):
    id: int
    user_id: int
    vehicle_id: int
    garage_id: int
    service_type: str
    date: datetime
    status: str
    price: float | None = None
    notes: str | None = None
    payment_method: str
    payment_status: str
    transaction_id: str | None = None
