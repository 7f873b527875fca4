# coursefile/services/approval.py

from coursefile.models.course_file import CourseFileTask
from coursefile.models.enums import TaskStatus, ReviewStatus, EffectiveStatus


def is_returned(task: CourseFileTask) -> bool:
    """A task rejected by CC or HOD, waiting for the faculty to resubmit."""
    return task.cc_status == ReviewStatus.NO or task.hod_status == ReviewStatus.NO


def effective_status(task: CourseFileTask) -> EffectiveStatus:
    """
    Derive the display status from the four source fields.
    Recomputed on every read; nothing stores the result.
    """
    if task.status != TaskStatus.COMPLETED:
        return EffectiveStatus.PENDING_COMPLETION

    if is_returned(task):
        return EffectiveStatus.RETURNED

    # a self-reviewed HOD decision does not stand in for the CC's
    if task.cc_status == ReviewStatus.PENDING:
        return EffectiveStatus.AWAITING_CC

    if task.hod_status == ReviewStatus.YES:
        return EffectiveStatus.FULLY_APPROVED

    return EffectiveStatus.AWAITING_HOD
