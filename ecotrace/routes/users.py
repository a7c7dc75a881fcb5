"""
User endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ecotrace.core.database import get_session
from ecotrace.core.errors import ValidationError
from ecotrace.models.user import UserCreate, UserRead
from ecotrace.handlers.users import get_or_create_user
from ecotrace.routes.errors import to_http_exception

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead)
async def get_or_create_user_endpoint(
    user: UserCreate,
    session: AsyncSession = Depends(get_session)
):
    """
    Log in as (username, role).
    Returns the same user id every time for the same pair.
    """
    try:
        return await get_or_create_user(session, user.username, user.role)
    except ValidationError as e:
        raise to_http_exception(e)
