"""
Tests for the material lifecycle: register, transport, verify.

These tests verify that:
1. Each operation applies exactly one transition
2. Invalid input and unknown ids leave the store unchanged
3. Strict mode rejects out-of-order transitions, lenient mode forces them
"""

import asyncio

import pytest

from ecotrace.core.errors import IllegalTransitionError, NotFoundError, ValidationError
from ecotrace.handlers.credits import get_credit_for_material, get_credits
from ecotrace.handlers.materials import (
    get_material,
    get_material_by_qr_id,
    get_materials,
    register_material,
    update_transportation,
    verify_material,
)
from ecotrace.handlers.credits import decide_credit
from ecotrace.handlers.transitions import can_transition, ensure_transition, is_terminal
from ecotrace.models.material import MaterialStatus
from ecotrace.utils.identifiers import derive_qr_id


# =============================================================================
# TRANSITION RULES
# =============================================================================

class TestTransitionRules:

    def test_forward_chain(self):
        assert can_transition(MaterialStatus.REGISTERED, MaterialStatus.IN_TRANSIT)
        assert can_transition(MaterialStatus.IN_TRANSIT, MaterialStatus.VERIFIED)
        assert can_transition(MaterialStatus.VERIFIED, MaterialStatus.APPROVED)
        assert can_transition(MaterialStatus.VERIFIED, MaterialStatus.REJECTED)

    def test_no_skipping_or_going_back(self):
        assert not can_transition(MaterialStatus.REGISTERED, MaterialStatus.VERIFIED)
        assert not can_transition(MaterialStatus.IN_TRANSIT, MaterialStatus.REGISTERED)
        assert not can_transition(MaterialStatus.REGISTERED, MaterialStatus.APPROVED)

    def test_terminal_statuses(self):
        assert is_terminal(MaterialStatus.APPROVED)
        assert is_terminal(MaterialStatus.REJECTED)
        assert not is_terminal(MaterialStatus.VERIFIED)
        assert not can_transition(MaterialStatus.APPROVED, MaterialStatus.REJECTED)

    def test_lenient_accepts_anything(self):
        ensure_transition(MaterialStatus.APPROVED, MaterialStatus.IN_TRANSIT, strict=False)

    def test_strict_error_names_both_statuses(self):
        with pytest.raises(IllegalTransitionError, match="approved -> in-transit") as exc_info:
            ensure_transition(MaterialStatus.APPROVED, MaterialStatus.IN_TRANSIT, strict=True)
        assert exc_info.value.current == "approved"
        assert exc_info.value.target == "in-transit"
        assert isinstance(exc_info.value, ValidationError)


# =============================================================================
# REGISTER
# =============================================================================

class TestRegister:

    @pytest.mark.asyncio
    async def test_creates_registered_material(self, session, farmer_id):
        material = await register_material(session, "corn_stover", 1000, "41.8781,-87.6298", farmer_id)

        assert material.status == MaterialStatus.REGISTERED
        assert material.material_type == "corn_stover"
        assert material.weight == 1000
        assert material.location == "41.8781,-87.6298"
        assert material.farmer_id == farmer_id
        assert material.verified_weight is None
        assert material.transporter_id is None
        assert material.plant_id is None
        assert len(await get_materials(session)) == 1

    @pytest.mark.asyncio
    async def test_qr_id_maps_back_to_material(self, session, registered):
        assert registered.qr_id == derive_qr_id(registered.id)
        assert registered.qr_id.startswith("ECO-")

        found = await get_material_by_qr_id(session, registered.qr_id)
        assert found.id == registered.id

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, session, farmer_id):
        first = await register_material(session, "wheat_straw", 10, "here", farmer_id)
        second = await register_material(session, "wheat_straw", 10, "here", farmer_id)

        assert first.id != second.id
        assert first.qr_id != second.qr_id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("material_type,weight,location", [
        ("corn_stover", 0, "here"),
        ("corn_stover", -5, "here"),
        ("corn_stover", float("nan"), "here"),
        ("corn_stover", "100", "here"),
        ("", 100, "here"),
        ("corn_stover", 100, ""),
        ("corn_stover", 100, "   "),
    ])
    async def test_invalid_input_creates_nothing(self, session, farmer_id, material_type, weight, location):
        with pytest.raises(ValidationError):
            await register_material(session, material_type, weight, location, farmer_id)

        assert await get_materials(session) == []


# =============================================================================
# TRANSPORT
# =============================================================================

class TestTransport:

    @pytest.mark.asyncio
    async def test_moves_material_in_transit(self, session, registered):
        material = await update_transportation(session, registered.id, "transporter-T1", "40.71,-74.00")

        assert material.status == MaterialStatus.IN_TRANSIT
        assert material.transporter_id == "transporter-T1"
        assert material.location == "40.71,-74.00"
        assert material.weight == registered.weight
        assert material.qr_id == registered.qr_id
        assert material.updated_at >= material.created_at

    @pytest.mark.asyncio
    async def test_unknown_material(self, session):
        with pytest.raises(NotFoundError):
            await update_transportation(session, "missing", "transporter-T1", "40.71,-74.00")

    @pytest.mark.asyncio
    async def test_empty_location(self, session, registered):
        with pytest.raises(ValidationError):
            await update_transportation(session, registered.id, "transporter-T1", "")

        material = await get_material(session, registered.id)
        assert material.status == MaterialStatus.REGISTERED
        assert material.location == registered.location

    @pytest.mark.asyncio
    async def test_strict_rejects_second_pickup(self, session, in_transit):
        with pytest.raises(IllegalTransitionError):
            await update_transportation(session, in_transit.id, "transporter-T2", "elsewhere", strict=True)

        material = await get_material(session, in_transit.id)
        assert material.transporter_id == "transporter-T1"

    @pytest.mark.asyncio
    async def test_lenient_forces_in_transit_from_any_status(self, session, verified):
        await decide_credit(session, verified.credit.id, True, "admin-A1", strict=True)

        material = await update_transportation(
            session, verified.material.id, "transporter-T2", "elsewhere", strict=False
        )

        assert material.status == MaterialStatus.IN_TRANSIT
        assert material.transporter_id == "transporter-T2"
        assert material.location == "elsewhere"


# =============================================================================
# VERIFY
# =============================================================================

class TestVerify:

    @pytest.mark.asyncio
    async def test_verify_mints_one_credit(self, session, in_transit):
        result = await verify_material(session, in_transit.id, "plant-P1", 730, strict=True)

        assert result.material.status == MaterialStatus.VERIFIED
        assert result.material.verified_weight == 730
        assert result.material.plant_id == "plant-P1"
        assert result.material.weight == 1000
        assert result.credit.material_id == in_transit.id
        assert result.credit.credit_value == pytest.approx(584.0)
        assert result.credit.approved is False

        credits = await get_credits(session, material_id=in_transit.id)
        assert [c.id for c in credits] == [result.credit.id]

    @pytest.mark.asyncio
    async def test_unknown_material(self, session):
        with pytest.raises(NotFoundError):
            await verify_material(session, "missing", "plant-P1", 730)

        assert await get_credits(session) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verified_weight", [0, -1])
    async def test_non_positive_weight(self, session, in_transit, verified_weight):
        with pytest.raises(ValidationError):
            await verify_material(session, in_transit.id, "plant-P1", verified_weight, strict=True)

        material = await get_material(session, in_transit.id)
        assert material.status == MaterialStatus.IN_TRANSIT
        assert material.verified_weight is None
        assert await get_credits(session) == []

    @pytest.mark.asyncio
    async def test_strict_requires_transport_first(self, session, registered):
        with pytest.raises(IllegalTransitionError):
            await verify_material(session, registered.id, "plant-P1", 900, strict=True)

        material = await get_material(session, registered.id)
        assert material.status == MaterialStatus.REGISTERED
        assert material.plant_id is None
        assert await get_credits(session) == []

    @pytest.mark.asyncio
    async def test_strict_rejects_reverification(self, session, verified):
        with pytest.raises(IllegalTransitionError):
            await verify_material(session, verified.material.id, "plant-P2", 800, strict=True)

        credits = await get_credits(session, material_id=verified.material.id)
        assert len(credits) == 1
        assert credits[0].credit_value == pytest.approx(584.0)

    @pytest.mark.asyncio
    async def test_lenient_reverification_mints_second_credit(self, session, verified):
        await verify_material(session, verified.material.id, "plant-P2", 800, strict=False)

        credits = await get_credits(session, material_id=verified.material.id)
        first = await get_credit_for_material(session, verified.material.id)

        assert len(credits) == 2
        assert first.id == verified.credit.id

    @pytest.mark.asyncio
    async def test_lenient_verify_from_registered(self, session, registered):
        result = await verify_material(session, registered.id, "plant-P1", 500, strict=False)

        assert result.material.status == MaterialStatus.VERIFIED
        assert result.credit.credit_value == pytest.approx(400.0)


class TestReturnedRecordsAreCopies:

    @pytest.mark.asyncio
    async def test_mutating_result_does_not_touch_store(self, session, registered):
        registered.status = MaterialStatus.APPROVED
        registered.location = "nowhere"

        stored = await get_material(session, registered.id)
        assert stored.status == MaterialStatus.REGISTERED
        assert stored.location == "41.8781,-87.6298"


class TestConcurrentWrites:
    """Writes from separate sessions on one store are applied one at a time."""

    @pytest.mark.asyncio
    async def test_racing_verifications_mint_one_credit(self, database, session, in_transit):
        async with database.session_factory() as first, database.session_factory() as second:
            results = await asyncio.gather(
                verify_material(first, in_transit.id, "plant-P1", 730, strict=True),
                verify_material(second, in_transit.id, "plant-P2", 730, strict=True),
                return_exceptions=True
            )

        verified = [r for r in results if not isinstance(r, Exception)]
        refused = [r for r in results if isinstance(r, IllegalTransitionError)]
        assert len(verified) == 1
        assert len(refused) == 1

        credits = await get_credits(session, material_id=in_transit.id)
        assert [c.id for c in credits] == [verified[0].credit.id]

    @pytest.mark.asyncio
    async def test_racing_pickups_assign_one_transporter(self, database, session, registered):
        async with database.session_factory() as first, database.session_factory() as second:
            results = await asyncio.gather(
                update_transportation(first, registered.id, "transporter-T1", "road A", strict=True),
                update_transportation(second, registered.id, "transporter-T2", "road B", strict=True),
                return_exceptions=True
            )

        moved = [r for r in results if not isinstance(r, Exception)]
        assert len(moved) == 1
        assert sum(isinstance(r, IllegalTransitionError) for r in results) == 1

        material = await get_material(session, registered.id)
        assert material.transporter_id == moved[0].transporter_id
        assert material.location == moved[0].location

    @pytest.mark.asyncio
    async def test_stale_session_sees_committed_status(self, database, in_transit):
        async with database.session_factory() as stale, database.session_factory() as other:
            # Load into the stale session's identity map before the other write
            assert (await get_material(stale, in_transit.id)).status == MaterialStatus.IN_TRANSIT

            await verify_material(other, in_transit.id, "plant-P1", 730, strict=True)

            with pytest.raises(IllegalTransitionError):
                await verify_material(stale, in_transit.id, "plant-P2", 730, strict=True)
