from garage_booking.models.user import User, UserCreate, UserPublic
from garage_booking.models.refresh_token import RefreshToken
from garage_booking.models.vehicle import Vehicle, VehicleCreate, VehicleUpdate
from garage_booking.models.garage import Garage
from garage_booking.models.appointment import Appointment, AppointmentCreate

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "RefreshToken",
    "Vehicle",
    "VehicleCreate",
    "VehicleUpdate",
    "Garage",
    "Appointment",
    "AppointmentCreate",
]
