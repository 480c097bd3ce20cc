from datetime import datetime

from pydantic import Field

from garage_booking.api.schemas.base import CamelModel


class VehicleRequest(CamelModel):
    make: str
    model: str
    year: int = Field(ge=1900, le=2100)
    license_plate: str
    vin: str
    chipset_code: str
    fuel_type: str
    is_primary: bool = False
    status: str
    next_service_mileage: int | None = Field(default=None, ge=0)
    is_imported: bool = False
    import_country: str | None = None
    requires_otp_verification: bool = False
    otp_verified: bool = False
    purchase_date: datetime | None = None


class VehicleUpdateRequest(CamelModel):
    make: str | None = None
    model: str | None = None
    year: int | None = Field(default=None, ge=1900, le=2100)
    license_plate: str | None = None
    vin: str | None = None
    chipset_code: str | None = None
    fuel_type: str | None = None
    is_primary: bool | None = None
    status: str | None = None
    next_service_mileage: int | None = Field(default=None, ge=0)
    is_imported: bool | None = None
    import_country: str | None = None
    requires_otp_verification: bool | None = None
    otp_verified: bool | None = None
    purchase_date: datetime | None = None


class VehicleResponse(VehicleRequest):
    id: int
    user_id: int
