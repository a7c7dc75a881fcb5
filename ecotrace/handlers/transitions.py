"""
Material status transition rules.

    registered -> in-transit -> verified -> approved | rejected

approved and rejected are terminal. Nothing skips a state or moves back.
"""

from typing import Optional

from ecotrace.core.config import get_settings
from ecotrace.core.errors import IllegalTransitionError
from ecotrace.models.material import MaterialStatus


ALLOWED_TRANSITIONS = {
    MaterialStatus.REGISTERED: {MaterialStatus.IN_TRANSIT},
    MaterialStatus.IN_TRANSIT: {MaterialStatus.VERIFIED},
    MaterialStatus.VERIFIED: {MaterialStatus.APPROVED, MaterialStatus.REJECTED},
    MaterialStatus.APPROVED: set(),
    MaterialStatus.REJECTED: set(),
}

TERMINAL_STATUSES = {MaterialStatus.APPROVED, MaterialStatus.REJECTED}


def is_terminal(status: MaterialStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: MaterialStatus, target: MaterialStatus) -> bool:
    """Definitive transition check."""
    return target in ALLOWED_TRANSITIONS.get(current, set())


def resolve_strict(strict: Optional[bool]) -> bool:
    """Explicit flag wins, otherwise STRICT_TRANSITIONS from settings."""
    if strict is None:
        return get_settings().strict_transitions
    return strict


def ensure_transition(
    current: MaterialStatus,
    target: MaterialStatus,
    strict: bool = True
) -> None:
    """
    Raise IllegalTransitionError if target is not reachable from current.

    In lenient mode every transition is accepted, matching the original
    demo data service which forced the new status unconditionally.
    """
    if strict and not can_transition(current, target):
        raise IllegalTransitionError(MaterialStatus(current).value, MaterialStatus(target).value)
