from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    vehicle_id: int = Field(foreign_key="vehicles.id", ondelete="CASCADE", index=True)
    garage_id: int = Field(foreign_key="garages.id", ondelete="CASCADE", index=True)
    service_type: str
    # Garage-local wall time, naive
    date: datetime = Field(sa_type=DateTime, index=True)
    status: str = "scheduled"
    price: float | None = None
    notes: str | None = None
    payment_method: str = "cash"
    payment_status: str = "pending"
    transaction_id: str | None = None


class AppointmentCreate(SQLModel):
    vehicle_id: int
    garage_id: int
    service_type: str
    date: datetime
    status: str = "scheduled"
    notes: str | None = None
    payment_method: str = "cash"
    payment_status: str = "pending"
