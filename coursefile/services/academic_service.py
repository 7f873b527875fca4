# coursefile/services/academic_service.py

from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.exceptions import Conflict, InvalidInput, NotFound
from coursefile.models.academic import ClassSection, Department, Subject
from coursefile.models.user import User, UserRole


async def _require_user_with_role(session: AsyncSession, user_id: UUID, *roles: UserRole) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    if user.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise InvalidInput(f"User '{user.name}' must have role {allowed}")
    return user


# ----------------------------------------------------------------
# DEPARTMENTS
# ----------------------------------------------------------------
async def create_department(session: AsyncSession, name: str, hod_id: Optional[UUID] = None) -> Department:
    if hod_id:
        await _require_user_with_role(session, hod_id, UserRole.HOD)

    department = Department(name=name, hod_id=hod_id)
    session.add(department)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("Department with this name already exists")

    await session.refresh(department)
    return department


async def set_department_hod(session: AsyncSession, department_id: int, hod_id: UUID) -> Department:
    department = await session.get(Department, department_id)
    if not department:
        raise NotFound("Department not found")

    hod = await _require_user_with_role(session, hod_id, UserRole.HOD)
    department.hod_id = hod.id
    hod.department_id = department.id

    session.add_all([department, hod])
    await session.commit()
    await session.refresh(department)
    return department


async def list_departments(session: AsyncSession) -> List[Department]:
    result = await session.execute(select(Department).order_by(Department.name))
    return list(result.scalars().all())


# ----------------------------------------------------------------
# CLASSES
# ----------------------------------------------------------------
async def create_class(session: AsyncSession, name: str, department_id: int, cc_id: Optional[UUID] = None) -> ClassSection:
    if not await session.get(Department, department_id):
        raise NotFound("Department not found")
    if cc_id:
        await _require_user_with_role(session, cc_id, UserRole.CC, UserRole.HOD)

    class_section = ClassSection(name=name, department_id=department_id, cc_id=cc_id)
    session.add(class_section)
    await session.commit()
    await session.refresh(class_section)
    return class_section


async def list_classes(session: AsyncSession, department_id: Optional[int] = None) -> List[ClassSection]:
    query = select(ClassSection).order_by(ClassSection.name)
    if department_id is not None:
        query = query.where(ClassSection.department_id == department_id)
    result = await session.execute(query)
    return list(result.scalars().all())


# ----------------------------------------------------------------
# SUBJECTS
# ----------------------------------------------------------------
async def create_subject(session: AsyncSession, class_id: int, name: str) -> Subject:
    if not await session.get(ClassSection, class_id):
        raise NotFound("Class not found")

    subject = Subject(name=name, class_id=class_id)
    session.add(subject)
    await session.commit()
    await session.refresh(subject)
    return subject


async def list_subjects(session: AsyncSession, class_id: int) -> List[Subject]:
    result = await session.execute(
        select(Subject).where(Subject.class_id == class_id).order_by(Subject.name)
    )
    return list(result.scalars().all())
