"""
Material model - a tracked unit of agricultural residue.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from ecotrace.models.credit import CarbonCreditRead
from ecotrace.utils.identifiers import generate_id
from ecotrace.utils.time import utc_now


class MaterialStatus(str, Enum):
    """Material status lifecycle."""
    REGISTERED = "registered"
    IN_TRANSIT = "in-transit"
    VERIFIED = "verified"
    APPROVED = "approved"
    REJECTED = "rejected"


class MaterialBase(SQLModel):
    """Base material schema."""
    material_type: str = Field(..., description="Residue type token, e.g. 'corn_stover'")
    weight: float = Field(..., description="Registered weight in kilograms")
    location: str = Field(..., description="Current location (free text or 'lat,lon')")


class Material(MaterialBase, table=True):
    """Material database table."""
    __tablename__ = "materials"
    
    id: str = Field(default_factory=generate_id, primary_key=True)
    qr_id: str = Field(..., unique=True, index=True)
    status: MaterialStatus = Field(default=MaterialStatus.REGISTERED, index=True)
    verified_weight: Optional[float] = Field(default=None, description="Weight measured at the plant")
    farmer_id: str = Field(..., index=True)
    transporter_id: Optional[str] = Field(default=None, index=True)
    plant_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class MaterialCreate(MaterialBase):
    """Schema for registering a material."""
    farmer_id: str


class MaterialTransport(SQLModel):
    """Schema for a transport update."""
    transporter_id: str
    location: str


class MaterialVerify(SQLModel):
    """Schema for a plant verification."""
    plant_id: str
    verified_weight: float


class MaterialRead(MaterialBase):
    """Schema for reading a material."""
    id: str
    qr_id: str
    status: MaterialStatus
    verified_weight: Optional[float] = None
    farmer_id: str
    transporter_id: Optional[str] = None
    plant_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MaterialVerification(SQLModel):
    """Result of a plant verification: the material and its new credit."""
    material: MaterialRead
    credit: CarbonCreditRead
