from datetime import datetime
from typing import Annotated, Any, Dict, Optional
from pydantic import BeforeValidator
from sqlmodel import SQLModel, Field


def number_to_str(value: Any) -> Any:
    # USER AND VALET IDS ARE SERIAL INTEGERS, CLIENTS SEND THEM AS NUMBERS
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


IdentityText = Annotated[str, BeforeValidator(number_to_str)]


class RequestCreate(SQLModel):
    id: Optional[int] = None
    user_id: Optional[IdentityText] = Field(default=None, alias="userId")
    user_name: Optional[IdentityText] = Field(default=None, alias="userName")
    user_phone: Optional[IdentityText] = Field(default=None, alias="userPhone")
    vehicle: Optional[Dict[str, Any]] = None
    location: Optional[str] = None
    status: Optional[str] = None
    timestamp: Optional[datetime] = None
    valet_id: Optional[IdentityText] = Field(default=None, alias="valetId")
    valet_name: Optional[IdentityText] = Field(default=None, alias="valetName")
    parked_timestamp: Optional[datetime] = Field(default=None, alias="parkedTimestamp")
    exit_timestamp: Optional[datetime] = Field(default=None, alias="exitTimestamp")
    spot_id: Optional[IdentityText] = Field(default=None, alias="spotId")


# UNKNOWN KEYS ARE DROPPED BY VALIDATION, ONLY THESE CAN REACH THE UPDATE
class RequestUpdate(SQLModel):
    status: Optional[str] = None
    valet_id: Optional[IdentityText] = Field(default=None, alias="valetId")
    valet_name: Optional[IdentityText] = Field(default=None, alias="valetName")
    parked_timestamp: Optional[datetime] = Field(default=None, alias="parkedTimestamp")
    exit_timestamp: Optional[datetime] = Field(default=None, alias="exitTimestamp")
    spot_id: Optional[IdentityText] = Field(default=None, alias="spotId")


class SignupRequest(SQLModel):
    name: str
    email: str
    password: str
    role: Optional[str] = "user"


class LoginRequest(SQLModel):
    email: str
    password: str


class UserResponse(SQLModel):
    id: int
    name: str
    email: str
    role: str


class ParkingSpotResponse(SQLModel):
    id: int
    name: str
    location: str
    status: str
    price: int


class GenericResponse(SQLModel):
    status: Optional[str] = None
    message: Optional[str] = None
