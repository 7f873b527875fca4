# coursefile/api/endpoints/academic.py

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session, get_current_user
from coursefile.core.rbac import require_admin
from coursefile.models.user import User
from coursefile.schemas.academic import (
    ClassCreate,
    ClassRead,
    DepartmentCreate,
    DepartmentHodUpdate,
    DepartmentRead,
    SubjectCreate,
    SubjectRead,
)
from coursefile.services import academic_service

router = APIRouter(prefix="/api/academic", tags=["Academic Structure"])


# ----------------------------------------------------------------
# DEPARTMENTS
# ----------------------------------------------------------------
@router.post("/departments", response_model=DepartmentRead, status_code=status.HTTP_201_CREATED)
async def create_department(
    data: DepartmentCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    return await academic_service.create_department(session, data.name, data.hod_id)


@router.put("/departments/{department_id}/hod", response_model=DepartmentRead)
async def assign_department_hod(
    department_id: int,
    data: DepartmentHodUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    return await academic_service.set_department_hod(session, department_id, data.hod_id)


@router.get("/departments", response_model=List[DepartmentRead])
async def get_departments(
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
):
    return await academic_service.list_departments(session)


# ----------------------------------------------------------------
# CLASSES
# ----------------------------------------------------------------
@router.post("/classes", response_model=ClassRead, status_code=status.HTTP_201_CREATED)
async def create_class(
    data: ClassCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    return await academic_service.create_class(session, data.name, data.department_id, data.cc_id)


@router.get("/classes", response_model=List[ClassRead])
async def get_classes(
    department_id: Optional[int] = None,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
):
    return await academic_service.list_classes(session, department_id)


# ----------------------------------------------------------------
# SUBJECTS
# ----------------------------------------------------------------
@router.post("/classes/{class_id}/subjects", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
async def create_subject(
    class_id: int,
    data: SubjectCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_admin),
):
    return await academic_service.create_subject(session, class_id, data.name)


@router.get("/classes/{class_id}/subjects", response_model=List[SubjectRead])
async def get_subjects(
    class_id: int,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
):
    return await academic_service.list_subjects(session, class_id)
