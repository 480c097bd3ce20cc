from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class GarageBase(SQLModel):
    name: str
    address: str
    latitude: float
    longitude: float
    rating: float | None = None
    review_count: int | None = None
    opening_hour: int = Field(ge=0, le=23)
    closing_hour: int = Field(ge=0, le=23)
    is_open: bool = True
    phone_number: str
    services: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    is_favorite: bool = False


class Garage(GarageBase, table=True):
    __tablename__ = "garages"
    id: int | None = Field(default=None, primary_key=True)
