# coursefile/models/course_file.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Date, DateTime, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from datetime import date, datetime, timezone
import uuid
from typing import Optional

from coursefile.models.enums import TaskStatus, ReviewStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CourseFileTemplate(SQLModel, table=True):
    """Definition of one recurring checklist item (title/description)."""
    __tablename__ = "course_file_templates"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(sa_column=Column(String(255), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    order: int = Field(default=0)
    is_active: bool = Field(default=True)


class CourseFileAssignment(SQLModel, table=True):
    """A (faculty, subject, class) triple owning a set of checklist tasks."""
    __tablename__ = "course_file_assignments"
    __table_args__ = (
        UniqueConstraint("faculty_id", "subject_id", "class_id", name="uq_assignment_triple"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    faculty_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    subject_id: int = Field(foreign_key="subjects.id", index=True)
    class_id: int = Field(foreign_key="classes.id", index=True)

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class CourseFileTask(SQLModel, table=True):
    """
    One checklist item of one assignment.

    status is set by the faculty owner, cc_status by the class coordinator,
    hod_status by the head of department. Only the transition functions in
    coursefile.services.workflow produce the patches applied to these rows.
    """
    __tablename__ = "course_file_tasks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    assignment_id: uuid.UUID = Field(foreign_key="course_file_assignments.id", index=True)
    template_id: int = Field(foreign_key="course_file_templates.id", index=True)

    status: TaskStatus = Field(
        default=TaskStatus.PENDING,
        sa_column=Column(SAEnum(TaskStatus, name="task_status"), nullable=False)
    )
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    cc_status: ReviewStatus = Field(
        default=ReviewStatus.PENDING,
        sa_column=Column(SAEnum(ReviewStatus, name="review_status"), nullable=False)
    )
    cc_remarks: Optional[str] = Field(default=None, sa_column=Column(Text))
    cc_review_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    hod_status: ReviewStatus = Field(
        default=ReviewStatus.PENDING,
        sa_column=Column(SAEnum(ReviewStatus, name="review_status"), nullable=False)
    )
    hod_remarks: Optional[str] = Field(default=None, sa_column=Column(Text))
    hod_review_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    deadline: Optional[date] = Field(default=None, sa_column=Column(Date))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
