"""
Carbon credit endpoints for the admin dashboard.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from ecotrace.core.config import get_settings
from ecotrace.core.database import get_session
from ecotrace.core.errors import NotFoundError, ValidationError
from ecotrace.models.credit import CarbonCreditDecision, CarbonCreditRead
from ecotrace.handlers.credits import (
    decide_credit,
    get_credit,
    get_credits
)
from ecotrace.routes.errors import to_http_exception

router = APIRouter(prefix="/credits", tags=["credits"])
settings = get_settings()


@router.get("", response_model=List[CarbonCreditRead])
async def list_credits_endpoint(
    material_id: Optional[str] = None,
    approved: Optional[bool] = None,
    admin_id: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """List credits, optionally filtered by material, decision and admin."""
    return await get_credits(
        session,
        material_id=material_id,
        approved=approved,
        admin_id=admin_id
    )


@router.get("/{credit_id}", response_model=CarbonCreditRead)
async def get_credit_endpoint(
    credit_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get carbon credit by ID."""
    credit = await get_credit(session, credit_id)
    if not credit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Carbon credit {credit_id} not found"
        )
    return credit


@router.post("/{credit_id}/decision", response_model=CarbonCreditRead)
async def decide_credit_endpoint(
    credit_id: str,
    decision: CarbonCreditDecision,
    session: AsyncSession = Depends(get_session)
):
    """
    Approve or reject a carbon credit (admin).
    The material moves to approved or rejected accordingly.
    """
    try:
        return await decide_credit(
            session,
            credit_id,
            decision.approved,
            decision.admin_id,
            strict=settings.strict_transitions
        )
    except (NotFoundError, ValidationError) as e:
        raise to_http_exception(e)
