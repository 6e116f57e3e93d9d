"""Review decisions: approve vs. reject and the rejection reason code"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from src.data.records import VideoRecord


class ReasonCode(str, Enum):
    """Rejection reasons; values are the portal's option labels"""
    NOT_VISIBLE = "Bow number not visible"
    NO_BOAT = "NO BOAT"
    NOT_PRINTED = "Bow number not printed"
    INVALID_DIRECTION = "INVALID DIRECTION"


DEFAULT_REASON_CODE = ReasonCode.NOT_VISIBLE

# Reviewer comment (lower-cased) -> reason code
COMMENT_REASON_CODES = {
    "blur": ReasonCode.NOT_VISIBLE,
    "no boat": ReasonCode.NO_BOAT,
    "no number": ReasonCode.NOT_PRINTED,
    "wrong direction": ReasonCode.INVALID_DIRECTION,
}


class ReviewAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class ReviewPlan(BaseModel):
    """What to do with a record once its review form is open"""
    action: ReviewAction
    bow_number: Optional[str] = None
    reason_code: Optional[ReasonCode] = None
    reason_text: Optional[str] = None


def resolve_reason_code(comment: Optional[str]) -> ReasonCode:
    """
    Map a reviewer comment to a reason code

    Exact, case-insensitive match; anything unrecognised (including an empty
    comment) falls back to DEFAULT_REASON_CODE.
    """
    if not comment:
        return DEFAULT_REASON_CODE
    return COMMENT_REASON_CODES.get(comment.lower(), DEFAULT_REASON_CODE)


def plan_review(record: VideoRecord) -> ReviewPlan:
    """Approve when the record carries a bow number, otherwise reject"""
    if record.has_bow_number:
        return ReviewPlan(action=ReviewAction.APPROVE, bow_number=record.bow_number.strip())

    return ReviewPlan(
        action=ReviewAction.REJECT,
        reason_code=resolve_reason_code(record.comment),
        reason_text=record.comment.lower(),
    )
