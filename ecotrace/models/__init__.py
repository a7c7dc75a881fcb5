# SQLModel database models

from ecotrace.models.material import Material, MaterialStatus
from ecotrace.models.credit import CarbonCredit
from ecotrace.models.user import User, UserRole

__all__ = [
    "Material",
    "MaterialStatus",
    "CarbonCredit",
    "User",
    "UserRole",
]
