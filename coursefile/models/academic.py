# coursefile/models/academic.py

import uuid
from typing import Optional

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Integer, String

# ------------------------------------------------------------
# 1. DEPARTMENT (owned by its HOD)
# ------------------------------------------------------------
class Department(SQLModel, table=True):
    __tablename__ = "departments"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True)
    )

    name: str = Field(
        sa_column=Column(String(128), nullable=False, unique=True)
    )

    # plain column: users.department_id already points the other way
    hod_id: Optional[uuid.UUID] = Field(default=None, index=True)

# ------------------------------------------------------------
# 2. CLASS (e.g. "CSE 3rd Year A"), coordinated by a CC
# ------------------------------------------------------------
class ClassSection(SQLModel, table=True):
    __tablename__ = "classes"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    department_id: int = Field(foreign_key="departments.id", index=True)
    cc_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True)

# ------------------------------------------------------------
# 3. SUBJECT taught in a class
# ------------------------------------------------------------
class Subject(SQLModel, table=True):
    __tablename__ = "subjects"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    class_id: int = Field(foreign_key="classes.id", index=True)
