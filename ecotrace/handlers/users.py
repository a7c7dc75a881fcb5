"""
Identity handler - stable user ids for self-declared (username, role) pairs.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
import structlog

from ecotrace.models.user import User, UserRead, UserRole
from ecotrace.core.database import serialized
from ecotrace.core.errors import ValidationError
from ecotrace.utils.validation import require_text

logger = structlog.get_logger(__name__)


@serialized
async def get_or_create_user(
    session: AsyncSession,
    username: str,
    role: UserRole
) -> UserRead:
    """
    Return the user for (username, role), creating it on first login.
    
    The role is taken as given; callers are responsible for verifying it.
    """
    require_text(username, "username")
    try:
        role = UserRole(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role}")
    
    result = await session.execute(
        select(User).where(User.username == username, User.role == role)
    )
    user = result.scalars().first()
    
    if not user:
        user = User(username=username, role=role)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        logger.info("user_created", user_id=user.id, username=username, role=role.value)
    
    return UserRead.model_validate(user)
