"""
Carbon credit model - derived from a verified material, pending admin decision.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from ecotrace.utils.identifiers import generate_id
from ecotrace.utils.time import utc_now


class CarbonCreditBase(SQLModel):
    """Base carbon credit schema."""
    material_id: str = Field(..., foreign_key="materials.id", index=True)
    credit_value: float = Field(..., description="Credit units (verified kg x 0.8)", ge=0)
    approved: bool = Field(default=False)
    admin_id: Optional[str] = Field(
        default=None,
        description="Admin who approved or rejected the credit"
    )


class CarbonCredit(CarbonCreditBase, table=True):
    """Carbon credit database table."""
    __tablename__ = "carbon_credits"
    
    id: str = Field(default_factory=generate_id, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CarbonCreditDecision(SQLModel):
    """Schema for an admin decision on a credit."""
    approved: bool
    admin_id: str


class CarbonCreditRead(CarbonCreditBase):
    """Schema for reading a carbon credit."""
    id: str
    created_at: datetime
    updated_at: datetime
