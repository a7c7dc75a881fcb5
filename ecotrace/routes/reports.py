"""
Report and aggregation endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from ecotrace.core.database import get_session
from ecotrace.handlers.reports import get_stats

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/stats")
async def stats_endpoint(
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """
    Get dashboard summary statistics.
    
    Returns:
        - total_materials
        - materials_registered, materials_in_transit, materials_verified,
          materials_approved, materials_rejected
        - total_carbon_credits
        - approved_carbon_credits
    """
    return await get_stats(session)
