# coursefile/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
import uuid
from enum import Enum
from typing import Optional

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    HOD = "HOD"
    CC = "CC"          # class coordinator, also teaches
    FACULTY = "FACULTY"

class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)

    role: UserRole = Field(
        sa_column=Column(SAEnum(UserRole, name="user_role"), nullable=False)
    )

    # home department of the user; HOD ownership lives on Department.hod_id
    department_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("departments.id"), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
