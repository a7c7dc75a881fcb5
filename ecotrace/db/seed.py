"""
Optional development seeding script.

Loads the demo supply chain used by the dashboards:
three materials, one in transit, one verified and approved.
"""

import asyncio
from typing import Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ecotrace.core.config import get_settings
from ecotrace.core.database import Database
from ecotrace.core.logger import configure_logging
from ecotrace.models.user import UserRole
from ecotrace.handlers.users import get_or_create_user
from ecotrace.handlers.materials import (
    register_material,
    update_transportation,
    verify_material
)
from ecotrace.handlers.credits import decide_credit
from ecotrace.handlers.reports import get_stats
from ecotrace.handlers.transitions import resolve_strict

logger = structlog.get_logger(__name__)


async def seed_data(session: AsyncSession, strict: Optional[bool] = None) -> Dict[str, str]:
    """
    Seed the store with sample data for development.
    
    Returns:
        Mapping of seed names (users, materials, credit) to their ids
    """
    strict = resolve_strict(strict)
    
    # Users
    farmer1 = await get_or_create_user(session, "farmer1", UserRole.FARMER)
    farmer2 = await get_or_create_user(session, "farmer2", UserRole.FARMER)
    transporter1 = await get_or_create_user(session, "transporter1", UserRole.TRANSPORTER)
    plant1 = await get_or_create_user(session, "plant1", UserRole.PLANT)
    admin1 = await get_or_create_user(session, "admin1", UserRole.ADMIN)
    
    # Materials
    material1 = await register_material(session, "corn_stover", 1000, "41.8781° N, 87.6298° W", farmer1.id)
    material2 = await register_material(session, "wheat_straw", 750, "34.0522° N, 118.2437° W", farmer2.id)
    material3 = await register_material(session, "sugarcane_bagasse", 1200, "25.7617° N, 80.1918° W", farmer1.id)
    
    await update_transportation(session, material1.id, transporter1.id, "40.7128° N, 74.0060° W", strict=strict)
    
    # Verification requires a transport leg first under strict transitions
    if strict:
        await update_transportation(session, material2.id, transporter1.id, "36.1699° N, 115.1398° W", strict=strict)
    verification = await verify_material(session, material2.id, plant1.id, 730, strict=strict)
    
    await decide_credit(session, verification.credit.id, True, admin1.id, strict=strict)
    
    logger.info("demo_data_seeded", materials=3, credit_id=verification.credit.id)
    
    return {
        "farmer1": farmer1.id,
        "farmer2": farmer2.id,
        "transporter1": transporter1.id,
        "plant1": plant1.id,
        "admin1": admin1.id,
        "material1": material1.id,
        "material2": material2.id,
        "material3": material3.id,
        "credit": verification.credit.id,
    }


async def main():
    """Seed the configured database and report the resulting stats."""
    database = Database()
    await database.init()
    
    try:
        async with database.session_factory() as session:
            await seed_data(session)
            stats = await get_stats(session)
        logger.info("seed_complete", database_url=database.database_url, **stats)
    finally:
        await database.close()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    asyncio.run(main())
