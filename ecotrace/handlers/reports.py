"""
Report and aggregation handlers.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func
from typing import Dict, Any

from ecotrace.models.credit import CarbonCredit
from ecotrace.models.material import Material, MaterialRead, MaterialStatus
from ecotrace.core.errors import NotFoundError
from ecotrace.handlers.credits import get_credit_for_material
from ecotrace.utils.formatting import format_material_type, format_status


async def get_stats(session: AsyncSession) -> Dict[str, Any]:
    """
    Get dashboard summary statistics.
    
    Returns:
        Dictionary with material counts per status and credit totals
    """
    # Materials by status
    status_counts = await session.execute(
        select(Material.status, func.count(Material.id)).group_by(Material.status)
    )
    counts = {MaterialStatus(row[0]): row[1] for row in status_counts.all()}
    
    # Total credit value
    total_credits = await session.execute(
        select(func.sum(CarbonCredit.credit_value))
    )
    total_credits_value = total_credits.scalar() or 0.0
    
    # Approved credit value
    approved_credits = await session.execute(
        select(func.sum(CarbonCredit.credit_value)).where(
            CarbonCredit.approved == True  # noqa: E712
        )
    )
    approved_credits_value = approved_credits.scalar() or 0.0
    
    return {
        "total_materials": sum(counts.values()),
        "materials_registered": counts.get(MaterialStatus.REGISTERED, 0),
        "materials_in_transit": counts.get(MaterialStatus.IN_TRANSIT, 0),
        "materials_verified": counts.get(MaterialStatus.VERIFIED, 0),
        "materials_approved": counts.get(MaterialStatus.APPROVED, 0),
        "materials_rejected": counts.get(MaterialStatus.REJECTED, 0),
        "total_carbon_credits": total_credits_value,
        "approved_carbon_credits": approved_credits_value
    }


async def get_material_trace(
    session: AsyncSession,
    material_id: str
) -> Dict[str, Any]:
    """
    Get single-material "trace view": the material, its display labels and its credit.
    
    Raises:
        NotFoundError: if the material does not exist
    """
    material = await session.get(Material, material_id, populate_existing=True)
    if not material:
        raise NotFoundError("Material", material_id)
    
    material_read = MaterialRead.model_validate(material)
    credit = await get_credit_for_material(session, material_id)
    
    return {
        "material": material_read.model_dump(mode="json"),
        "material_type_label": format_material_type(material_read.material_type),
        "status_label": format_status(material_read.status),
        "credit": credit.model_dump(mode="json") if credit else None
    }
