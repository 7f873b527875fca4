# coursefile/models/audit.py

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from typing import Optional, Dict, Any
from uuid import UUID
from datetime import datetime, timezone

class CourseFileLog(SQLModel, table=True):
    __tablename__ = "course_file_logs"

    # integer key keeps insertion order for entries written in the same instant
    id: Optional[int] = Field(default=None, primary_key=True)
    assignment_id: UUID = Field(foreign_key="course_file_assignments.id", index=True)
    task_id: Optional[UUID] = Field(default=None, foreign_key="course_file_tasks.id")

    action: str = Field(index=True)
    # readable line for the activity feed, e.g. "Cc Rao approved 'Lesson plan' as CC for DBMS (CSE 3A)"
    message: Optional[str] = None

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    # Snapshot of the actor at the time of the action
    actor_name: Optional[str] = None
    actor_role: Optional[str] = None

    # names at the time of the action; they survive later renames
    task_title: Optional[str] = None
    subject_name: Optional[str] = None
    class_name: Optional[str] = None

    remarks: Optional[str] = None

    # Stores {"from": {...}, "to": {...}, "batch": true}
    details: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"))
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
