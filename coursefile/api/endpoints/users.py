# coursefile/api/endpoints/users.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from coursefile.api.deps import get_db_session
from coursefile.core.exceptions import Conflict
from coursefile.core.rbac import require_admin
from coursefile.models.user import User, UserRole
from coursefile.schemas.user import UserCreate, UserRead
from coursefile.services.auth_service import (
    create_user,
    delete_user_by_id,
    get_user_by_email,
    list_users,
)

router = APIRouter(prefix="/api/users", tags=["Users"])


# -------------------------------------------------------------------
# Create ANY user (Admin only)
# -------------------------------------------------------------------
@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_new_user(
    data: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin)
):
    if await get_user_by_email(session, data.email):
        raise Conflict("Email already registered")

    return await create_user(
        session,
        data.name,
        data.email,
        data.password,
        role=data.role,
        department_id=data.department_id,
    )


# -------------------------------------------------------------------
# List users (Admin only), optionally by role
# -------------------------------------------------------------------
@router.get("/", response_model=List[UserRead])
async def get_users(
    role: Optional[UserRole] = None,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin)
):
    return await list_users(session, role)


# -------------------------------------------------------------------
# Delete a user (Admin only)
# -------------------------------------------------------------------
@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin)
):
    await delete_user_by_id(session, user_id)
    return {"message": "User deleted successfully"}
