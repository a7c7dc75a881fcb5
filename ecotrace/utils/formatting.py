"""
Display helpers for dashboards that render raw stored values.
"""

from ecotrace.models.material import MaterialStatus
from ecotrace.models.user import UserRole


STATUS_LABELS = {
    MaterialStatus.REGISTERED: "Registered",
    MaterialStatus.IN_TRANSIT: "In Transit",
    MaterialStatus.VERIFIED: "Verified",
    MaterialStatus.APPROVED: "Approved",
    MaterialStatus.REJECTED: "Rejected",
}

ROLE_LABELS = {
    UserRole.FARMER: "Farmer",
    UserRole.TRANSPORTER: "Transporter",
    UserRole.PLANT: "Ethanol Plant",
    UserRole.ADMIN: "Government/Admin",
}


def format_material_type(material_type: str) -> str:
    """
    Convert a stored material type token to a readable label.

    Only the first letter of each segment is changed, so
    ``"corn_stover"`` becomes ``"Corn Stover"``.
    """
    return " ".join(word[:1].upper() + word[1:] for word in material_type.split("_"))


def format_status(status: MaterialStatus | str) -> str:
    """Badge label for a material status."""
    try:
        return STATUS_LABELS[MaterialStatus(status)]
    except ValueError:
        return str(status)


def format_role(role: UserRole | str) -> str:
    """Login-form label for a role."""
    try:
        return ROLE_LABELS[UserRole(role)]
    except ValueError:
        return str(role)
