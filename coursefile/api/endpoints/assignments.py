# coursefile/api/endpoints/assignments.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session
from coursefile.core.rbac import require_reviewer, require_staff
from coursefile.models.user import User
from coursefile.schemas.course_file import AssignmentCreate, AssignmentCreated, AssignmentRead, AssignmentSummary
from coursefile.services.assignment_service import (
    create_assignment,
    delete_assignment,
    list_class_assignments,
)

router = APIRouter(prefix="/api/course-file-assignment", tags=["Course File Assignments"])


# Class Coordinator (or HOD) assigns faculty to subjects
@router.post("/assign", response_model=AssignmentCreated, status_code=status.HTTP_201_CREATED)
async def assign_subject_faculty(
    data: AssignmentCreate,
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    assignment = await create_assignment(
        session,
        current_user,
        subject_id=data.subject_id,
        faculty_id=data.faculty_id,
        class_id=data.class_id,
        task_deadlines={d.template_id: d.deadline for d in data.task_deadlines},
    )
    return AssignmentCreated(
        message="Subject assigned and tasks initialized",
        assignment=AssignmentRead.model_validate(assignment),
    )


@router.get("/class/{class_id}", response_model=List[AssignmentSummary])
async def get_class_assignments(
    class_id: int,
    _: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_class_assignments(session, class_id)


@router.delete("/delete/{assignment_id}")
async def remove_assignment(
    assignment_id: UUID,
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    await delete_assignment(session, current_user, assignment_id)
    return {"message": "Assignment deleted successfully"}
