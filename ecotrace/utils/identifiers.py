"""
Identifier helpers for materials and credits.
"""

import uuid

from ecotrace.core.constants import QR_ID_PREFIX, QR_ID_LENGTH


def generate_id() -> str:
    """Generate an opaque unique record id."""
    return uuid.uuid4().hex


def derive_qr_id(material_id: str) -> str:
    """
    Derive the QR payload for a material.

    Example:
        derive_qr_id("3f2a9c71d0e84b5c...") -> "ECO-3f2a9c71"
    """
    return f"{QR_ID_PREFIX}{material_id[:QR_ID_LENGTH]}"
