"""
User model - a self-declared (username, role) identity.
"""

from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from datetime import datetime
from enum import Enum

from ecotrace.utils.identifiers import generate_id
from ecotrace.utils.time import utc_now


class UserRole(str, Enum):
    """Supply chain roles."""
    FARMER = "farmer"
    TRANSPORTER = "transporter"
    PLANT = "plant"
    ADMIN = "admin"


class UserBase(SQLModel):
    """Base user schema."""
    username: str = Field(..., description="Login identifier")
    role: UserRole = Field(...)


class User(UserBase, table=True):
    """User database table."""
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("username", "role"),)
    
    id: str = Field(default_factory=generate_id, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class UserCreate(UserBase):
    """Schema for the get-or-create lookup."""
    pass


class UserRead(UserBase):
    """Schema for reading a user."""
    id: str
    created_at: datetime
