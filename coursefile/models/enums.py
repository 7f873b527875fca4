from enum import Enum

class TaskStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class ReviewStatus(str, Enum):
    PENDING = "PENDING"
    YES = "YES"
    NO = "NO"


class EffectiveStatus(str, Enum):
    # derived on read, never stored
    PENDING_COMPLETION = "PENDING_COMPLETION"
    RETURNED = "RETURNED"
    AWAITING_CC = "AWAITING_CC"
    AWAITING_HOD = "AWAITING_HOD"
    FULLY_APPROVED = "FULLY_APPROVED"


class LogAction(str, Enum):
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_RESUBMITTED = "TASK_RESUBMITTED"
    TASK_REVERTED = "TASK_REVERTED"
    CC_APPROVED = "CC_APPROVED"
    CC_REJECTED = "CC_REJECTED"
    CC_RESET = "CC_RESET"
    HOD_APPROVED = "HOD_APPROVED"
    HOD_REJECTED = "HOD_REJECTED"
    HOD_RESET = "HOD_RESET"
    CC_REMARKS_UPDATED = "CC_REMARKS_UPDATED"
    HOD_REMARKS_UPDATED = "HOD_REMARKS_UPDATED"
    DEADLINE_UPDATED = "DEADLINE_UPDATED"
