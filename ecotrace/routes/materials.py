"""
Material lifecycle endpoints for the farmer, transporter and plant dashboards.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional

from ecotrace.core.config import get_settings
from ecotrace.core.database import get_session
from ecotrace.core.errors import NotFoundError, ValidationError
from ecotrace.models.credit import CarbonCreditRead
from ecotrace.models.material import (
    MaterialCreate,
    MaterialRead,
    MaterialStatus,
    MaterialTransport,
    MaterialVerification,
    MaterialVerify,
)
from ecotrace.handlers.materials import (
    register_material,
    update_transportation,
    verify_material,
    get_material,
    get_material_by_qr_id,
    get_materials
)
from ecotrace.handlers.credits import get_credit_for_material
from ecotrace.handlers.reports import get_material_trace
from ecotrace.routes.errors import to_http_exception

router = APIRouter(prefix="/materials", tags=["materials"])
settings = get_settings()


@router.post("/", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
async def register_material_endpoint(
    material: MaterialCreate,
    session: AsyncSession = Depends(get_session)
):
    """Register a new material (farmer)."""
    try:
        return await register_material(
            session,
            material.material_type,
            material.weight,
            material.location,
            material.farmer_id
        )
    except ValidationError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[MaterialRead])
async def list_materials_endpoint(
    farmer_id: Optional[str] = None,
    transporter_id: Optional[str] = None,
    plant_id: Optional[str] = None,
    status: Optional[MaterialStatus] = None,
    session: AsyncSession = Depends(get_session)
):
    """List materials, optionally filtered by owner, carrier, plant and status."""
    return await get_materials(
        session,
        farmer_id=farmer_id,
        transporter_id=transporter_id,
        plant_id=plant_id,
        status=status
    )


@router.get("/qr/{qr_id}", response_model=MaterialRead)
async def get_material_by_qr_endpoint(
    qr_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Look up a material from a scanned QR payload."""
    material = await get_material_by_qr_id(session, qr_id)
    if not material:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No material with QR id {qr_id}"
        )
    return material


@router.get("/{material_id}", response_model=MaterialRead)
async def get_material_endpoint(
    material_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get material by ID."""
    material = await get_material(session, material_id)
    if not material:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Material {material_id} not found"
        )
    return material


@router.post("/{material_id}/transport", response_model=MaterialRead)
async def transport_material_endpoint(
    material_id: str,
    transport: MaterialTransport,
    session: AsyncSession = Depends(get_session)
):
    """Pick up a material and move it in transit (transporter)."""
    try:
        return await update_transportation(
            session,
            material_id,
            transport.transporter_id,
            transport.location,
            strict=settings.strict_transitions
        )
    except (NotFoundError, ValidationError) as e:
        raise to_http_exception(e)


@router.post("/{material_id}/verify", response_model=MaterialVerification)
async def verify_material_endpoint(
    material_id: str,
    verification: MaterialVerify,
    session: AsyncSession = Depends(get_session)
):
    """
    Verify a material at the plant.
    Mints a pending carbon credit worth verified_weight * 0.8.
    """
    try:
        return await verify_material(
            session,
            material_id,
            verification.plant_id,
            verification.verified_weight,
            strict=settings.strict_transitions
        )
    except (NotFoundError, ValidationError) as e:
        raise to_http_exception(e)


@router.get("/{material_id}/credit", response_model=CarbonCreditRead)
async def get_material_credit_endpoint(
    material_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get the carbon credit minted for a material."""
    credit = await get_credit_for_material(session, material_id)
    if not credit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No carbon credit for material {material_id}"
        )
    return credit


@router.get("/{material_id}/trace")
async def get_material_trace_endpoint(
    material_id: str,
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """
    Get the material with its display labels and carbon credit.
    
    Returns:
        - material
        - material_type_label
        - status_label
        - credit (or null before verification)
    """
    try:
        return await get_material_trace(session, material_id)
    except NotFoundError as e:
        raise to_http_exception(e)
