"""
Material lifecycle handler: register, transport and verify.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional, Tuple
import structlog

from ecotrace.models.material import (
    Material,
    MaterialRead,
    MaterialStatus,
    MaterialVerification,
)
from ecotrace.models.credit import CarbonCredit, CarbonCreditRead
from ecotrace.core.database import serialized
from ecotrace.core.errors import IllegalTransitionError, NotFoundError
from ecotrace.handlers.credits import calculate_credit_value
from ecotrace.handlers.transitions import ensure_transition, resolve_strict
from ecotrace.utils.identifiers import generate_id, derive_qr_id
from ecotrace.utils.time import utc_now
from ecotrace.utils.validation import require_positive, require_text

logger = structlog.get_logger(__name__)


async def _load_material(session: AsyncSession, material_id: str) -> Material:
    material = await session.get(Material, material_id, populate_existing=True)
    if not material:
        raise NotFoundError("Material", material_id)
    return material


def _guard_transition(material: Material, target: MaterialStatus, strict: bool) -> None:
    try:
        ensure_transition(material.status, target, strict)
    except IllegalTransitionError as e:
        logger.warning(
            "material_transition_rejected",
            material_id=material.id,
            current=e.current,
            target=e.target
        )
        raise


async def _mint_identifiers(session: AsyncSession) -> Tuple[str, str]:
    """Mint a material id whose derived qr_id is not taken yet."""
    while True:
        material_id = generate_id()
        qr_id = derive_qr_id(material_id)
        existing = await session.execute(
            select(Material.id).where(Material.qr_id == qr_id)
        )
        if existing.first() is None:
            return material_id, qr_id


@serialized
async def register_material(
    session: AsyncSession,
    material_type: str,
    weight: float,
    location: str,
    farmer_id: str
) -> MaterialRead:
    """Register a new material for a farmer."""
    require_text(material_type, "material_type")
    weight = require_positive(weight, "weight")
    require_text(location, "location")
    require_text(farmer_id, "farmer_id")
    
    material_id, qr_id = await _mint_identifiers(session)
    now = utc_now()
    material = Material(
        id=material_id,
        qr_id=qr_id,
        material_type=material_type,
        weight=weight,
        location=location,
        farmer_id=farmer_id,
        status=MaterialStatus.REGISTERED,
        created_at=now,
        updated_at=now
    )
    session.add(material)
    await session.commit()
    await session.refresh(material)
    
    logger.info(
        "material_registered",
        material_id=material.id,
        qr_id=material.qr_id,
        farmer_id=farmer_id,
        weight=weight
    )
    return MaterialRead.model_validate(material)


@serialized
async def update_transportation(
    session: AsyncSession,
    material_id: str,
    transporter_id: str,
    location: str,
    strict: Optional[bool] = None
) -> MaterialRead:
    """
    Hand a material to a transporter and move it in transit.
    
    Strict mode requires the material to be registered; lenient mode
    forces in-transit from any status.
    """
    require_text(transporter_id, "transporter_id")
    require_text(location, "location")
    strict = resolve_strict(strict)
    
    material = await _load_material(session, material_id)
    _guard_transition(material, MaterialStatus.IN_TRANSIT, strict)
    
    material.transporter_id = transporter_id
    material.location = location
    material.status = MaterialStatus.IN_TRANSIT
    material.updated_at = utc_now()
    
    await session.commit()
    await session.refresh(material)
    
    logger.info(
        "material_in_transit",
        material_id=material.id,
        transporter_id=transporter_id
    )
    return MaterialRead.model_validate(material)


@serialized
async def verify_material(
    session: AsyncSession,
    material_id: str,
    plant_id: str,
    verified_weight: float,
    strict: Optional[bool] = None
) -> MaterialVerification:
    """
    Verify a material at the plant and mint its carbon credit.
    
    The material update and the new credit are committed together.
    Strict mode requires the material to be in transit, which also
    guarantees a single credit per material.
    
    Returns:
        The verified material and the pending credit
    """
    require_text(plant_id, "plant_id")
    verified_weight = require_positive(verified_weight, "verified_weight")
    strict = resolve_strict(strict)
    
    material = await _load_material(session, material_id)
    _guard_transition(material, MaterialStatus.VERIFIED, strict)
    
    now = utc_now()
    material.plant_id = plant_id
    material.verified_weight = verified_weight
    material.status = MaterialStatus.VERIFIED
    material.updated_at = now
    
    credit = CarbonCredit(
        material_id=material.id,
        credit_value=calculate_credit_value(verified_weight),
        approved=False,
        created_at=now,
        updated_at=now
    )
    session.add(credit)
    
    await session.commit()
    await session.refresh(material)
    await session.refresh(credit)
    
    logger.info(
        "material_verified",
        material_id=material.id,
        plant_id=plant_id,
        verified_weight=verified_weight,
        credit_id=credit.id,
        credit_value=credit.credit_value
    )
    return MaterialVerification(
        material=MaterialRead.model_validate(material),
        credit=CarbonCreditRead.model_validate(credit)
    )


async def get_material(
    session: AsyncSession,
    material_id: str
) -> Optional[MaterialRead]:
    """Get material by ID."""
    material = await session.get(Material, material_id, populate_existing=True)
    if not material:
        return None
    return MaterialRead.model_validate(material)


async def get_material_by_qr_id(
    session: AsyncSession,
    qr_id: str
) -> Optional[MaterialRead]:
    """Get material by its scanned QR payload."""
    result = await session.execute(
        select(Material).where(Material.qr_id == qr_id).execution_options(
            populate_existing=True
        )
    )
    material = result.scalars().first()
    if not material:
        return None
    return MaterialRead.model_validate(material)


async def get_materials(
    session: AsyncSession,
    farmer_id: Optional[str] = None,
    transporter_id: Optional[str] = None,
    plant_id: Optional[str] = None,
    status: Optional[MaterialStatus] = None
) -> List[MaterialRead]:
    """Get materials matching every given filter, in registration order."""
    statement = select(Material)
    
    if farmer_id:
        statement = statement.where(Material.farmer_id == farmer_id)
    if transporter_id:
        statement = statement.where(Material.transporter_id == transporter_id)
    if plant_id:
        statement = statement.where(Material.plant_id == plant_id)
    if status:
        statement = statement.where(Material.status == MaterialStatus(status))
    
    statement = statement.order_by(Material.created_at, Material.id).execution_options(
        populate_existing=True
    )
    
    result = await session.execute(statement)
    return [MaterialRead.model_validate(m) for m in result.scalars().all()]
