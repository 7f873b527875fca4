from pydantic import BaseModel, EmailStr

from coursefile.schemas.user import UserRead


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -------------------------------------------------------------------
# LOGIN RESPONSE
# -------------------------------------------------------------------
class TokenWithUser(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
