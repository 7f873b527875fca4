from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr
from coursefile.models.user import UserRole


# ---------------------------------------------------------
# BASE
# ---------------------------------------------------------
class UserBase(BaseModel):
    name: str
    email: EmailStr


# ---------------------------------------------------------
# CREATE USER (Admin creates any user)
# ---------------------------------------------------------
class UserCreate(UserBase):
    password: str
    role: UserRole
    department_id: Optional[int] = None

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "name": "HOD User",
                    "email": "hod@example.com",
                    "password": "password123",
                    "role": "HOD",
                    "department_id": 1
                },
                {
                    "name": "Faculty User",
                    "email": "faculty@example.com",
                    "password": "password123",
                    "role": "FACULTY",
                    "department_id": 1
                }
            ]
        }


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(UserBase):
    id: UUID
    role: UserRole
    department_id: Optional[int] = None
    department_name: Optional[str] = None

    class Config:
        from_attributes = True
