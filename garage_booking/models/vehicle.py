from datetime import datetime

from sqlalchemy import DateTime, Index, text
from sqlmodel import Field, SQLModel


class VehicleBase(SQLModel):
    make: str
    model: str
    year: int
    license_plate: str
    vin: str
    chipset_code: str
    fuel_type: str
    is_primary: bool = False
    status: str
    next_service_mileage: int | None = None
    # Imported vehicles may need an OTP check before servicing
    is_imported: bool = False
    import_country: str | None = None
    requires_otp_verification: bool = False
    otp_verified: bool = False
    purchase_date: datetime | None = Field(default=None, sa_type=DateTime)


class Vehicle(VehicleBase, table=True):
    __tablename__ = "vehicles"
    __table_args__ = (
        # At most one primary vehicle per user
        Index(
            "uq_vehicles_primary_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)


class VehicleCreate(VehicleBase):
    pass


class VehicleUpdate(SQLModel):
    make: str | None = None
    model: str | None = None
    year: int | None = None
    license_plate: str | None = None
    vin: str | None = None
    chipset_code: str | None = None
    fuel_type: str | None = None
    is_primary: bool | None = None
    status: str | None = None
    next_service_mileage: int | None = None
    is_imported: bool | None = None
    import_country: str | None = None
    requires_otp_verification: bool | None = None
    otp_verified: bool | None = None
    purchase_date: datetime | None = None
