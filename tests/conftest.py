"""
Shared fixtures: a fresh in-memory store per test.
"""

import pytest
import pytest_asyncio

from ecotrace.core.database import Database
from ecotrace.handlers.materials import (
    register_material,
    update_transportation,
    verify_material,
)


@pytest_asyncio.fixture
async def database():
    """Isolated in-memory database, torn down after the test."""
    db = Database("sqlite+aiosqlite:///:memory:", echo=False)
    await db.init()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def farmer_id():
    return "farmer-F1"


@pytest_asyncio.fixture
async def registered(session, farmer_id):
    """A corn stover load of 1000 kg, freshly registered."""
    return await register_material(session, "corn_stover", 1000, "41.8781,-87.6298", farmer_id)


@pytest_asyncio.fixture
async def in_transit(session, registered):
    return await update_transportation(session, registered.id, "transporter-T1", "40.71,-74.00", strict=True)


@pytest_asyncio.fixture
async def verified(session, in_transit):
    """Verified at 730 kg, which mints a 584.0 credit."""
    return await verify_material(session, in_transit.id, "plant-P1", 730, strict=True)
