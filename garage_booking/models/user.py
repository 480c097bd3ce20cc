from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    username: str = Field(unique=True, index=True)
    email: str
    full_name: str
    is_admin: bool = False
    is_tunisian: bool = True
    document_type: str = "CIN"  # "CIN" for Tunisian residents, otherwise "Passport"
    document_number: str | None = None
    phone_number: str | None = None


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str


class UserCreate(UserBase):
    password: str


class UserPublic(UserBase):
    id: int
