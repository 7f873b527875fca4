from pydantic import BaseModel, ConfigDict
from typing import Optional
from uuid import UUID

# --- DEPARTMENT ---
class DepartmentCreate(BaseModel):
    name: str
    hod_id: Optional[UUID] = None

class DepartmentHodUpdate(BaseModel):
    hod_id: UUID

class DepartmentRead(BaseModel):
    id: int
    name: str
    hod_id: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)

# --- CLASS ---
class ClassCreate(BaseModel):
    name: str
    department_id: int
    cc_id: Optional[UUID] = None

class ClassRead(BaseModel):
    id: int
    name: str
    department_id: int
    cc_id: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)

# --- SUBJECT ---
class SubjectCreate(BaseModel):
    name: str

class SubjectRead(BaseModel):
    id: int
    name: str
    class_id: int

    model_config = ConfigDict(from_attributes=True)
