# coursefile/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session, get_current_user
from coursefile.models.user import User
from coursefile.schemas.auth import LoginRequest, TokenWithUser
from coursefile.schemas.user import UserRead
from coursefile.services.auth_service import authenticate_user, create_login_response

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN (any role)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    user = await authenticate_user(session, payload.email, payload.password)

    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return await create_login_response(user, session)


# -------------------------------------------------------------------
# CURRENT USER
# -------------------------------------------------------------------
@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
