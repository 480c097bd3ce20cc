from garage_booking.api.schemas.base import CamelModel


class GarageResponse(CamelModel):
    id: int
    name: str
    address: str
    latitude: float
    longitude: float
    rating: float | None = None
    review_count: int | None = None
    opening_hour: int
    closing_hour: int
    is_open: bool
    phone_number: str
    services: list[str]
    is_favorite: bool


class NearbyGarageResponse(GarageResponse):
    distance_km: float


class SlotInfo(CamelModel):
    value: str  # "H:MM"
    label: str  # "h:MM AM/PM"
    available: bool


class GarageSlotsResponse(CamelModel):
    garage_id: int
    date: str  # YYYY-MM-DD
    slots: list[SlotInfo]
