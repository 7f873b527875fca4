# coursefile/api/endpoints/submissions.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.api.deps import get_db_session
from coursefile.core.rbac import require_hod, require_reviewer, require_staff
from coursefile.models.user import User
from coursefile.schemas.course_file import (
    BatchReviewRequest,
    BatchReviewResponse,
    DeadlineRequest,
    RemarksRequest,
    ReviewableTaskRead,
    ReviewRequest,
    TaskRead,
)
from coursefile.services import course_file_service as svc

router = APIRouter(
    prefix="/api/course-file-submission",
    tags=["Course File Tasks"]
)


# ===================================================================
# READS
# ===================================================================
@router.get("/my-tasks", response_model=List[TaskRead])
async def my_tasks(
    current_user: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.get_faculty_tasks(session, current_user)


@router.get("/assignment/{assignment_id}/tasks", response_model=List[TaskRead])
async def assignment_tasks(
    assignment_id: UUID,
    current_user: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.get_tasks_for_assignment(session, current_user, assignment_id)


@router.get("/assignment/{assignment_id}/reviewable-tasks", response_model=List[ReviewableTaskRead])
async def reviewable_tasks(
    assignment_id: UUID,
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    rows = await svc.get_reviewable_tasks(session, current_user, assignment_id)
    return [
        ReviewableTaskRead.model_validate(task).model_copy(update={"is_reviewable": flag})
        for task, flag in rows
    ]


@router.get("/compliance-alerts", response_model=List[TaskRead])
async def compliance_alerts(
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.get_compliance_alerts(session, current_user)


# ===================================================================
# FACULTY
# ===================================================================
@router.patch("/complete/{task_id}", response_model=TaskRead)
async def complete_task(
    task_id: UUID,
    current_user: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.complete_task(session, current_user, task_id)


@router.patch("/revert/{task_id}", response_model=TaskRead)
async def revert_task(
    task_id: UUID,
    current_user: User = Depends(require_staff),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.revert_task(session, current_user, task_id)


# ===================================================================
# CC / HOD
# ===================================================================
@router.patch("/review/{task_id}", response_model=TaskRead)
async def review_task(
    task_id: UUID,
    data: ReviewRequest,
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.review_task(session, current_user, task_id, data.status, data.remarks)


@router.patch("/remarks/{task_id}", response_model=TaskRead)
async def update_remarks(
    task_id: UUID,
    data: RemarksRequest,
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.update_task_remarks(session, current_user, task_id, data.remarks)


@router.patch("/deadline/{task_id}", response_model=TaskRead)
async def update_deadline(
    task_id: UUID,
    data: DeadlineRequest,
    current_user: User = Depends(require_reviewer),
    session: AsyncSession = Depends(get_db_session),
):
    return await svc.update_task_deadline(session, current_user, task_id, data.deadline)


@router.patch("/assignment/{assignment_id}/batch-review", response_model=BatchReviewResponse)
async def batch_review(
    assignment_id: UUID,
    data: BatchReviewRequest,
    current_user: User = Depends(require_hod),
    session: AsyncSession = Depends(get_db_session),
):
    result = await svc.batch_review_tasks(session, current_user, assignment_id, data.status, data.remarks)

    if result.count == 0 and not result.failed:
        message = "No tasks awaiting HOD review"
    else:
        message = f"{result.count} task(s) updated"
        if result.failed:
            message += f", {len(result.failed)} failed"

    return BatchReviewResponse(message=message, count=result.count, failed=result.failed)
