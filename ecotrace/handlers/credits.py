"""
Carbon credit derivation and admin decision handler.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional
import structlog

from ecotrace.models.credit import CarbonCredit, CarbonCreditRead
from ecotrace.models.material import Material, MaterialStatus
from ecotrace.core.constants import CREDIT_CONVERSION_FACTOR
from ecotrace.core.database import serialized
from ecotrace.core.errors import IllegalTransitionError, NotFoundError
from ecotrace.handlers.transitions import ensure_transition, resolve_strict
from ecotrace.utils.time import utc_now
from ecotrace.utils.validation import require_text

logger = structlog.get_logger(__name__)


def calculate_credit_value(verified_weight: float) -> float:
    """
    Calculate carbon credit units for a verified residue weight.
    
    Formula: verified kg * 0.8 = credit units
    
    Args:
        verified_weight: Weight measured at the plant in kilograms
        
    Returns:
        Credit value
    """
    return verified_weight * CREDIT_CONVERSION_FACTOR


@serialized
async def decide_credit(
    session: AsyncSession,
    credit_id: str,
    approved: bool,
    admin_id: str,
    strict: Optional[bool] = None
) -> CarbonCreditRead:
    """
    Approve or reject a carbon credit and propagate the decision to its material.
    
    Strict mode only accepts undecided credits whose material is verified.
    Lenient mode overwrites any earlier decision.
    """
    require_text(admin_id, "admin_id")
    strict = resolve_strict(strict)
    
    credit = await session.get(CarbonCredit, credit_id, populate_existing=True)
    if not credit:
        raise NotFoundError("Carbon credit", credit_id)
    
    material = await session.get(Material, credit.material_id, populate_existing=True)
    target = MaterialStatus.APPROVED if approved else MaterialStatus.REJECTED
    
    try:
        if strict and credit.admin_id is not None:
            raise IllegalTransitionError(
                "decided",
                target.value,
                f"Carbon credit {credit_id} has already been decided"
            )
        if material is not None:
            ensure_transition(material.status, target, strict)
    except IllegalTransitionError as e:
        logger.warning(
            "credit_decision_rejected",
            credit_id=credit_id,
            admin_id=admin_id,
            reason=str(e)
        )
        raise
    
    now = utc_now()
    credit.approved = approved
    credit.admin_id = admin_id
    credit.updated_at = now
    
    if material is not None:
        material.status = target
        material.updated_at = now
    
    await session.commit()
    await session.refresh(credit)
    if material is not None:
        await session.refresh(material)
    
    logger.info(
        "credit_decided",
        credit_id=credit.id,
        material_id=credit.material_id,
        approved=approved,
        admin_id=admin_id
    )
    return CarbonCreditRead.model_validate(credit)


async def get_credit(
    session: AsyncSession,
    credit_id: str
) -> Optional[CarbonCreditRead]:
    """Get carbon credit by ID."""
    credit = await session.get(CarbonCredit, credit_id, populate_existing=True)
    if not credit:
        return None
    return CarbonCreditRead.model_validate(credit)


async def get_credits(
    session: AsyncSession,
    material_id: Optional[str] = None,
    approved: Optional[bool] = None,
    admin_id: Optional[str] = None
) -> List[CarbonCreditRead]:
    """Get credits matching every given filter, in insertion order."""
    statement = select(CarbonCredit)
    
    if material_id:
        statement = statement.where(CarbonCredit.material_id == material_id)
    if approved is not None:
        statement = statement.where(CarbonCredit.approved == approved)
    if admin_id:
        statement = statement.where(CarbonCredit.admin_id == admin_id)
    
    statement = statement.order_by(CarbonCredit.created_at, CarbonCredit.id).execution_options(
        populate_existing=True
    )
    
    result = await session.execute(statement)
    return [CarbonCreditRead.model_validate(c) for c in result.scalars().all()]


async def get_credit_for_material(
    session: AsyncSession,
    material_id: str
) -> Optional[CarbonCreditRead]:
    """Get the first credit minted for a material."""
    statement = select(CarbonCredit).where(
        CarbonCredit.material_id == material_id
    ).order_by(CarbonCredit.created_at, CarbonCredit.id).execution_options(
        populate_existing=True
    )
    
    result = await session.execute(statement)
    credit = result.scalars().first()
    if not credit:
        return None
    return CarbonCreditRead.model_validate(credit)
