import uuid
from datetime import date, datetime, timezone

import pytest

from coursefile.core.exceptions import Forbidden, InvalidInput, InvalidState, Locked
from coursefile.models.course_file import CourseFileTask
from coursefile.models.enums import LogAction, ReviewStatus, TaskStatus
from coursefile.models.user import UserRole
from coursefile.services import workflow
from coursefile.services.capabilities import Capabilities

NOW = datetime(2026, 10, 1, 9, 30, tzinfo=timezone.utc)


def make_task(status=TaskStatus.PENDING, cc=ReviewStatus.PENDING, hod=ReviewStatus.PENDING, **kw):
    return CourseFileTask(
        assignment_id=uuid.uuid4(),
        template_id=1,
        status=status,
        cc_status=cc,
        hod_status=hod,
        **kw,
    )


def caps(role=UserRole.FACULTY, owner=False, cc=False, hod=False):
    return Capabilities(
        actor_id=uuid.uuid4(),
        actor_name="Someone",
        role=role,
        is_task_owner=owner,
        can_review_as_cc=cc,
        can_review_as_hod=hod,
    )


FACULTY = caps(owner=True)
CLASS_CC = caps(role=UserRole.CC, cc=True)
DEPT_HOD = caps(role=UserRole.HOD, hod=True)


def apply(task, transition):
    for key, value in transition.patch.items():
        setattr(task, key, value)
    return task


# ------------------------------------------------------------------
# complete / resubmit
# ------------------------------------------------------------------
def test_owner_completes_pending_task():
    t = workflow.complete(make_task(), FACULTY, NOW)

    assert t.action == LogAction.TASK_COMPLETED
    assert t.patch["status"] == TaskStatus.COMPLETED
    assert t.patch["completed_at"] == NOW


def test_only_owner_can_complete():
    with pytest.raises(Forbidden):
        workflow.complete(make_task(), CLASS_CC, NOW)


def test_completing_twice_is_invalid_state():
    with pytest.raises(InvalidState):
        workflow.complete(make_task(status=TaskStatus.COMPLETED), FACULTY, NOW)


@pytest.mark.parametrize("cc,hod", [
    (ReviewStatus.NO, ReviewStatus.PENDING),
    (ReviewStatus.YES, ReviewStatus.NO),
])
def test_resubmitting_returned_task_resets_reviews(cc, hod):
    task = make_task(
        status=TaskStatus.COMPLETED, cc=cc, hod=hod,
        cc_remarks="missing signature", hod_remarks="redo", cc_review_date=NOW, hod_review_date=NOW,
    )
    t = workflow.complete(task, FACULTY, NOW)
    apply(task, t)

    assert t.action == LogAction.TASK_RESUBMITTED
    assert task.status == TaskStatus.COMPLETED
    assert task.cc_status == ReviewStatus.PENDING
    assert task.hod_status == ReviewStatus.PENDING
    assert task.cc_remarks is None and task.hod_remarks is None
    assert task.cc_review_date is None and task.hod_review_date is None


# ------------------------------------------------------------------
# revert
# ------------------------------------------------------------------
def test_owner_reverts_completed_task_before_hod_decision():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, completed_at=NOW)
    apply(task, workflow.revert(task, FACULTY))

    assert task.status == TaskStatus.PENDING
    assert task.completed_at is None
    # a PENDING task never carries review decisions
    assert task.cc_status == ReviewStatus.PENDING


def test_faculty_cannot_revert_hod_approved_task():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, hod=ReviewStatus.YES)

    with pytest.raises(Locked):
        workflow.revert(task, FACULTY)


def test_locked_is_an_invalid_state():
    assert issubclass(Locked, InvalidState)


@pytest.mark.parametrize("actor", [CLASS_CC, DEPT_HOD, caps(role=UserRole.FACULTY, cc=True)])
def test_class_cc_and_dept_hod_bypass_revert_lock(actor):
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, hod=ReviewStatus.YES)
    t = workflow.revert(task, actor)

    assert t.action == LogAction.TASK_REVERTED
    assert t.patch["hod_status"] == ReviewStatus.PENDING


@pytest.mark.parametrize("role", [UserRole.CC, UserRole.HOD])
def test_reviewer_role_elsewhere_does_not_unlock_own_task(role):
    # owns the task but coordinates or heads a different class/department
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, hod=ReviewStatus.YES)
    with pytest.raises(Locked):
        workflow.revert(task, caps(role=role, owner=True))


def test_returned_task_cannot_be_reverted():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.NO)
    with pytest.raises(InvalidState):
        workflow.revert(task, FACULTY)


def test_revert_requires_completed_task():
    with pytest.raises(InvalidState):
        workflow.revert(make_task(), FACULTY)


def test_stranger_cannot_revert():
    task = make_task(status=TaskStatus.COMPLETED)
    with pytest.raises(Forbidden):
        workflow.revert(task, caps(role=UserRole.FACULTY))


# ------------------------------------------------------------------
# CC review
# ------------------------------------------------------------------
def test_cc_cannot_decide_before_completion():
    with pytest.raises(InvalidState):
        workflow.review(make_task(), CLASS_CC, ReviewStatus.YES, None, NOW)


def test_cc_rejects_with_remarks():
    task = make_task(status=TaskStatus.COMPLETED)
    t = workflow.review(task, CLASS_CC, ReviewStatus.NO, "  missing signature ", NOW)

    assert t.action == LogAction.CC_REJECTED
    assert t.patch == {
        "cc_status": ReviewStatus.NO,
        "cc_remarks": "missing signature",
        "cc_review_date": NOW,
    }


def test_cc_remarks_only_save_keeps_review_date():
    earlier = datetime(2026, 9, 1, tzinfo=timezone.utc)
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, cc_review_date=earlier)
    t = workflow.review(task, CLASS_CC, ReviewStatus.YES, "looks fine", NOW)
    apply(task, t)

    assert t.action == LogAction.CC_REMARKS_UPDATED
    assert task.cc_remarks == "looks fine"
    assert task.cc_review_date == earlier


def test_cc_cannot_change_decision_after_hod():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, hod=ReviewStatus.YES)
    with pytest.raises(InvalidState):
        workflow.review(task, CLASS_CC, ReviewStatus.PENDING, None, NOW)


def test_cc_reset_clears_review_date():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES, cc_review_date=NOW)
    t = workflow.review(task, CLASS_CC, ReviewStatus.PENDING, None, NOW)

    assert t.action == LogAction.CC_RESET
    assert t.patch["cc_review_date"] is None


def test_non_reviewer_is_forbidden():
    task = make_task(status=TaskStatus.COMPLETED)
    with pytest.raises(Forbidden):
        workflow.review(task, FACULTY, ReviewStatus.YES, None, NOW)


# ------------------------------------------------------------------
# HOD review
# ------------------------------------------------------------------
def test_hod_waits_for_cc_approval():
    task = make_task(status=TaskStatus.COMPLETED)
    with pytest.raises(InvalidState):
        workflow.review(task, DEPT_HOD, ReviewStatus.YES, None, NOW)


def test_hod_approves_cc_verified_task():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES)
    t = workflow.review(task, DEPT_HOD, ReviewStatus.YES, "ok", NOW)

    assert t.action == LogAction.HOD_APPROVED
    assert t.patch["hod_review_date"] == NOW


def test_hod_self_review_skips_cc_gate():
    task = make_task(status=TaskStatus.COMPLETED)
    own_subject = caps(role=UserRole.HOD, owner=True, hod=True)

    t = workflow.review(task, own_subject, ReviewStatus.YES, None, NOW)
    assert t.patch["hod_status"] == ReviewStatus.YES


def test_hod_self_review_still_needs_completion():
    own_subject = caps(role=UserRole.HOD, owner=True, hod=True)
    with pytest.raises(InvalidState):
        workflow.review(make_task(), own_subject, ReviewStatus.YES, None, NOW)


def test_hod_identity_takes_precedence_over_cc():
    task = make_task(status=TaskStatus.COMPLETED, cc=ReviewStatus.YES)
    both = caps(role=UserRole.HOD, cc=True, hod=True)

    t = workflow.review(task, both, ReviewStatus.NO, "redo", NOW)
    assert t.action == LogAction.HOD_REJECTED


# ------------------------------------------------------------------
# remarks / deadline
# ------------------------------------------------------------------
def test_update_remarks_touches_only_reviewer_remarks():
    t = workflow.update_remarks(make_task(), CLASS_CC, "note")
    assert t.patch == {"cc_remarks": "note"}

    t = workflow.update_remarks(make_task(), DEPT_HOD, "")
    assert t.patch == {"hod_remarks": None}


@pytest.mark.parametrize("raw,expected", [
    ("2026-12-01", date(2026, 12, 1)),
    ("2026-12-01T18:30:00.000Z", date(2026, 12, 1)),
    ("2026-12-01T23:59:59+05:30", date(2026, 12, 1)),
    (None, None),
])
def test_parse_deadline(raw, expected):
    assert workflow.parse_deadline(raw) == expected


@pytest.mark.parametrize("raw", ["tomorrow", "2026-13-01", "01/12/2026", ""])
def test_parse_deadline_rejects_malformed(raw):
    with pytest.raises(InvalidInput):
        workflow.parse_deadline(raw)


def test_faculty_cannot_set_deadline():
    with pytest.raises(Forbidden):
        workflow.set_deadline(make_task(), FACULTY, "2026-12-01")
