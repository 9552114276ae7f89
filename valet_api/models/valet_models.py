from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import BigInteger, Column, DateTime, JSON
from sqlmodel import SQLModel, Field


class ValetRequest(SQLModel, table=True):
    __tablename__ = "requests"

    id: int = Field(sa_column=Column(BigInteger, primary_key=True, autoincrement=False))
    user_id: str = Field(default="999")
    user_name: str = Field(default="Unknown")
    user_phone: str = Field(default="")
    vehicle: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    location: str = Field(default="")
    status: str = Field(default="requested")
    timestamp: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    valet_id: Optional[str] = Field(default=None)
    valet_name: Optional[str] = Field(default=None)
    parked_timestamp: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    exit_timestamp: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    spot_id: Optional[str] = Field(default=None)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    # PBKDF2 HASH, SEE utils/security.py
    password: str
    role: str = Field(default="user")
    created_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
