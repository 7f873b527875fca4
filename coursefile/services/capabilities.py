# coursefile/services/capabilities.py

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from coursefile.core.exceptions import NotFound
from coursefile.models.academic import ClassSection, Department
from coursefile.models.course_file import CourseFileAssignment
from coursefile.models.user import User, UserRole


@dataclass(frozen=True)
class Capabilities:
    """What one actor may do on one assignment, resolved once per request."""
    actor_id: UUID
    actor_name: str
    role: UserRole
    is_task_owner: bool = False
    can_review_as_cc: bool = False
    can_review_as_hod: bool = False

    @property
    def self_review(self) -> bool:
        # HOD acting on a subject they teach or a class they coordinate
        return self.can_review_as_hod and (self.is_task_owner or self.can_review_as_cc)

    @property
    def holds_override_role(self) -> bool:
        # CC or HOD of this assignment's class, not merely of the account
        return self.can_review_as_cc or self.can_review_as_hod

    @property
    def is_reviewer(self) -> bool:
        return self.can_review_as_cc or self.can_review_as_hod


@dataclass(frozen=True)
class AssignmentScope:
    assignment: CourseFileAssignment
    class_section: ClassSection
    department: Optional[Department]


async def load_scope(session: AsyncSession, assignment_id: UUID) -> AssignmentScope:
    assignment = await session.get(CourseFileAssignment, assignment_id)
    if not assignment:
        raise NotFound("Assignment not found")

    class_section = await session.get(ClassSection, assignment.class_id)
    if not class_section:
        raise NotFound("Class for this assignment not found")

    department = await session.get(Department, class_section.department_id)
    return AssignmentScope(assignment, class_section, department)


def capabilities_for(user: User, scope: AssignmentScope) -> Capabilities:
    return Capabilities(
        actor_id=user.id,
        actor_name=user.name,
        role=UserRole(user.role),
        is_task_owner=scope.assignment.faculty_id == user.id,
        can_review_as_cc=scope.class_section.cc_id == user.id,
        can_review_as_hod=bool(scope.department and scope.department.hod_id == user.id),
    )


async def resolve_capabilities(session: AsyncSession, user: User, assignment_id: UUID) -> Capabilities:
    scope = await load_scope(session, assignment_id)
    return capabilities_for(user, scope)
