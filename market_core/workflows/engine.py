# market_core/workflows/engine.py
"""
Workflow engine for applications.

Responsibilities:
- Check that a requested action is legal for the current status
- Validate review payloads and build immutable review records
- Produce a TransitionPlan describing the single write to perform

This module MUST remain free of persistence logic. The executor applies
plans; services decide which plan to build.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from django.utils import timezone

from market_core.serializers_workflow import (
    ApplicationSubmitSerializer,
    ClientReviewInputSerializer,
    EmployeeReviewInputSerializer,
    LegacyStatusInputSerializer,
    normalize_keys,
    validate_input,
)
from market_core.workflows import (
    CLIENT_REVIEW_DECISION,
    EMPLOYEE_REVIEW_DECISION,
    INITIAL_STATE,
    LEGACY_STATUS_SET,
    normalize_state,
    review_source_state,
    review_target_state,
)
from market_core.workflows.errors import (
    InvalidStateTransition,
    StaleStateError,
    ValidationError,
)


# ===============================================================
# Review records (immutable)
# ===============================================================

@dataclass(frozen=True)
class EmployeeReview:
    reviewed_by: int
    reviewer_role: str
    reviewed_at: datetime
    decision: str
    budget_approved: bool = False
    proposal_quality: str = "fair"
    portfolio_quality: str = "fair"
    notes: str = ""

    def as_document(self) -> Dict[str, Any]:
        return {
            "reviewed_by": self.reviewed_by,
            "reviewer_role": self.reviewer_role,
            "reviewed_at": self.reviewed_at.isoformat(),
            "budget_approved": self.budget_approved,
            "proposal_quality": self.proposal_quality,
            "portfolio_quality": self.portfolio_quality,
            "notes": self.notes,
            "decision": self.decision,
        }


@dataclass(frozen=True)
class ClientReview:
    reviewed_at: datetime
    decision: str
    feedback: str = ""

    def as_document(self) -> Dict[str, Any]:
        return {
            "reviewed_at": self.reviewed_at.isoformat(),
            "decision": self.decision,
            "feedback": self.feedback,
        }


@dataclass(frozen=True)
class TransitionPlan:
    """
    One conditional write: move `from_status` -> `to_status` and set `patch`.
    """
    action: str
    from_status: str
    to_status: str
    patch: Dict[str, Any] = field(default_factory=dict)


# ===============================================================
# State checks
# ===============================================================

def check_expected_status(application, expected_status: Optional[str]) -> None:
    """
    Optimistic guard: the caller's observed status must still be current.
    """
    if expected_status is None:
        return
    current = normalize_state(application.status)
    if normalize_state(expected_status) != current:
        raise StaleStateError(
            f"Application status is '{current}', expected '{normalize_state(expected_status)}'.",
            field="status",
        )


def check_review_state(application, action: str) -> str:
    current = normalize_state(application.status)
    source = review_source_state(action)
    if source is None:
        raise InvalidStateTransition(f"Unknown review action: {action}")
    if current != source:
        raise InvalidStateTransition(
            f"Application is in '{current}' status; "
            f"{action.replace('_', ' ')} requires '{source}'.",
            field="status",
        )
    return current


# ===============================================================
# Plans
# ===============================================================

def plan_employee_review(application, payload: Any, *, actor, now: Optional[datetime] = None) -> TransitionPlan:
    current = check_review_state(application, EMPLOYEE_REVIEW_DECISION)
    data = validate_input(EmployeeReviewInputSerializer, payload)

    review = EmployeeReview(
        reviewed_by=actor.id,
        reviewer_role=actor.role,
        reviewed_at=now or timezone.now(),
        decision=data["decision"],
        budget_approved=data["budget_approved"],
        proposal_quality=data["proposal_quality"],
        portfolio_quality=data["portfolio_quality"],
        notes=data["notes"],
    )

    return TransitionPlan(
        action=EMPLOYEE_REVIEW_DECISION,
        from_status=current,
        to_status=review_target_state(EMPLOYEE_REVIEW_DECISION, review.decision),
        patch={"employee_review": review.as_document()},
    )


def plan_client_review(application, payload: Any, *, now: Optional[datetime] = None) -> TransitionPlan:
    current = check_review_state(application, CLIENT_REVIEW_DECISION)
    data = validate_input(ClientReviewInputSerializer, payload)

    review = ClientReview(
        reviewed_at=now or timezone.now(),
        decision=data["decision"],
        feedback=data["feedback"],
    )

    return TransitionPlan(
        action=CLIENT_REVIEW_DECISION,
        from_status=current,
        to_status=review_target_state(CLIENT_REVIEW_DECISION, review.decision),
        patch={"client_review": review.as_document()},
    )


def plan_legacy_status(application, new_status: Any) -> TransitionPlan:
    """
    Backwards compatible direct status write. No review record is touched.
    """
    data = validate_input(LegacyStatusInputSerializer, {"status": new_status})
    return TransitionPlan(
        action=LEGACY_STATUS_SET,
        from_status=normalize_state(application.status),
        to_status=data["status"],
    )


# ===============================================================
# Submission
# ===============================================================

def plan_submission(advertisement_id: Any, content: Any) -> Dict[str, Any]:
    """
    Validate a new application and return the field values to create it with.
    Status is always the initial workflow state.
    """
    if content is None:
        content = {}
    if not isinstance(content, Mapping):
        raise ValidationError("Request body must be an object.")

    payload = normalize_keys(content)
    payload["advertisement"] = advertisement_id
    data = validate_input(ApplicationSubmitSerializer, payload)
    return {
        "advertisement_id": data["advertisement"],
        "message": data["message"],
        "proposal": data["proposal"],
        "budget": data["budget"],
        "timeline": data["timeline"],
        "portfolio": data["portfolio"],
        "status": INITIAL_STATE,
    }
