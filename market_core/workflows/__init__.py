# market_core/workflows/__init__.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Set, Tuple


# ===============================================================
# Canonical application workflow
# ===============================================================

EMPLOYEE_REVIEW = "employee_review"
CLIENT_REVIEW = "client_review"
APPROVED = "approved"
REJECTED = "rejected"
COMPLETED = "completed"

APPLICATION_STATES: Tuple[str, ...] = (
    EMPLOYEE_REVIEW,
    CLIENT_REVIEW,
    APPROVED,
    REJECTED,
    COMPLETED,
)

INITIAL_STATE = EMPLOYEE_REVIEW

# No review action leaves these states. The legacy status write still can.
TERMINAL_STATES: Set[str] = {APPROVED, REJECTED, COMPLETED}

# States a Client is allowed to see in their dashboard.
CLIENT_VISIBLE_STATES: Tuple[str, ...] = (
    CLIENT_REVIEW,
    APPROVED,
    REJECTED,
    COMPLETED,
)


# ===============================================================
# Actions
# ===============================================================

SUBMIT = "submit"
EMPLOYEE_REVIEW_DECISION = "employee_review_decision"
CLIENT_REVIEW_DECISION = "client_review_decision"
LEGACY_STATUS_SET = "legacy_status_set"
DELETE = "delete"
ADVERTISEMENT_STATUS_SET = "advertisement_status_set"
ADVERTISEMENT_DELETE = "advertisement_delete"

ACTIONS: Tuple[str, ...] = (
    SUBMIT,
    EMPLOYEE_REVIEW_DECISION,
    CLIENT_REVIEW_DECISION,
    LEGACY_STATUS_SET,
    DELETE,
    ADVERTISEMENT_STATUS_SET,
    ADVERTISEMENT_DELETE,
)

# action -> (required from-state, {decision: to-state})
REVIEW_TRANSITIONS: Dict[str, Tuple[str, Dict[str, str]]] = {
    EMPLOYEE_REVIEW_DECISION: (
        EMPLOYEE_REVIEW,
        {"approve": CLIENT_REVIEW, "reject": REJECTED},
    ),
    CLIENT_REVIEW_DECISION: (
        CLIENT_REVIEW,
        {"accepted": APPROVED, "rejected": REJECTED},
    ),
}

# Actions that apply regardless of the current state.
UNRESTRICTED_ACTIONS: Tuple[str, ...] = (LEGACY_STATUS_SET, DELETE)

QUALITY_GRADES: Tuple[str, ...] = ("excellent", "good", "fair", "poor")


# ===============================================================
# Advertisement visibility
# ===============================================================

ADVERTISEMENT_STATES: Tuple[str, ...] = ("draft", "active", "paused", "completed")
ADVERTISEMENT_INITIAL_STATE = "draft"


# ===============================================================
# Normalization
# ===============================================================

ROLE_ALIASES: Dict[str, str] = {
    "client": "client",
    "advertiser": "client",
    "agency": "agency",
    "employee": "employee",
    "staff": "employee",
    "reviewer": "employee",
    "admin": "admin",
    "superuser": "admin",
    "system_admin": "admin",
}


def normalize_state(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


def normalize_role(value: Optional[str]) -> str:
    raw = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
    return ROLE_ALIASES.get(raw, raw)


# ===============================================================
# Public workflow API
# ===============================================================

def is_known_state(value: Optional[str]) -> bool:
    return normalize_state(value) in APPLICATION_STATES


def decisions_for(action: str) -> List[str]:
    """
    Decisions accepted by a review action, in declaration order.
    """
    entry = REVIEW_TRANSITIONS.get(action)
    if entry is None:
        return []
    return list(entry[1].keys())


def review_source_state(action: str) -> Optional[str]:
    entry = REVIEW_TRANSITIONS.get(action)
    return entry[0] if entry else None


def review_target_state(action: str, decision: str) -> Optional[str]:
    entry = REVIEW_TRANSITIONS.get(action)
    if entry is None:
        return None
    return entry[1].get(normalize_state(decision))


def allowed_actions(current: str) -> List[str]:
    """
    State-legal actions for an application in `current`, independent of actor.
    """
    cur = normalize_state(current)
    out: List[str] = [
        action
        for action, (source, _targets) in REVIEW_TRANSITIONS.items()
        if source == cur
    ]
    out.extend(UNRESTRICTED_ACTIONS)
    return out


def next_states(current: str) -> List[str]:
    """
    States reachable through review actions from `current`.
    """
    cur = normalize_state(current)
    out: Set[str] = set()
    for source, targets in REVIEW_TRANSITIONS.values():
        if source == cur:
            out |= set(targets.values())
    return sorted(out)


def workflow_definition() -> Dict[str, Any]:
    """
    Stable JSON-serializable definition for UI.
    """
    return {
        "kind": "application",
        "states": list(APPLICATION_STATES),
        "initial_state": INITIAL_STATE,
        "terminal_states": sorted(TERMINAL_STATES),
        "client_visible_states": list(CLIENT_VISIBLE_STATES),
        "review_actions": {
            action: {
                "from": source,
                "decisions": dict(targets),
            }
            for action, (source, targets) in REVIEW_TRANSITIONS.items()
        },
        "unrestricted_actions": list(UNRESTRICTED_ACTIONS),
        "transitions": {state: next_states(state) for state in APPLICATION_STATES},
        "quality_grades": list(QUALITY_GRADES),
    }


__all__ = [
    "APPLICATION_STATES",
    "INITIAL_STATE",
    "TERMINAL_STATES",
    "CLIENT_VISIBLE_STATES",
    "ACTIONS",
    "REVIEW_TRANSITIONS",
    "QUALITY_GRADES",
    "ADVERTISEMENT_STATES",
    "normalize_state",
    "normalize_role",
    "is_known_state",
    "decisions_for",
    "review_source_state",
    "review_target_state",
    "allowed_actions",
    "next_states",
    "workflow_definition",
]
