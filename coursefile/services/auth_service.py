# coursefile/services/auth_service.py

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid
from typing import List

from coursefile.core.exceptions import Conflict, NotFound
from coursefile.models.academic import Department
from coursefile.models.user import User, UserRole
from coursefile.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from coursefile.schemas.auth import TokenWithUser
from coursefile.schemas.user import UserRead


# ============================================================================
# FETCH USER BY EMAIL
# ============================================================================
async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


# ============================================================================
# FETCH USER BY ID
# ============================================================================
async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> User | None:
    if not isinstance(user_id, uuid.UUID):
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            return None
    return await session.get(User, user_id)


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: UserRole,
    department_id: int | None = None,
) -> User:

    if department_id is not None and not await session.get(Department, department_id):
        raise NotFound("Department not found")

    user = User(
        id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        department_id=department_id,
    )

    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise Conflict("User with this email already exists")


# ============================================================================
# AUTHENTICATE
# ============================================================================
async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
async def create_login_response(user: User, session: AsyncSession) -> TokenWithUser:
    department_name = None
    if user.department_id:
        result = await session.execute(
            select(Department.name).where(Department.id == user.department_id)
        )
        department_name = result.scalar_one_or_none()

    token = create_access_token(subject=user.id, data={"role": user.role.value})

    user_read = UserRead.model_validate(user)
    user_read.department_name = department_name

    return TokenWithUser(access_token=token, token_type="bearer", user=user_read)


# ============================================================================
# ADMIN HELPERS
# ============================================================================
async def list_users(session: AsyncSession, role: UserRole | None = None) -> List[User]:
    query = select(User).order_by(User.name)
    if role:
        query = query.where(User.role == role)
    result = await session.execute(query)
    return list(result.scalars().all())


async def delete_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> None:
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    await session.delete(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("User is still referenced by classes or assignments")
