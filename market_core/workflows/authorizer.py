# market_core/workflows/authorizer.py
"""
Transition authorizer.

`authorize` is a pure predicate over (actor, action, application,
advertisement). It reads only ids off the records it is handed and never
touches the database. Keep policy decisions here only.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from market_core.workflows import (
    ADVERTISEMENT_DELETE,
    ADVERTISEMENT_STATUS_SET,
    CLIENT_REVIEW_DECISION,
    DELETE,
    EMPLOYEE_REVIEW_DECISION,
    LEGACY_STATUS_SET,
    SUBMIT,
    allowed_actions,
)
from market_core.workflows.actors import (
    AgencyActor,
    ClientActor,
    REVIEWER_TYPES,
)
from market_core.workflows.errors import AuthorizationError

logger = logging.getLogger(__name__)


def _owner_client_id(advertisement: Any) -> Optional[int]:
    if advertisement is None:
        return None
    return getattr(advertisement, "client_id", None)


def _agency_id(application: Any) -> Optional[int]:
    if application is None:
        return None
    return getattr(application, "agency_id", None)


def _is_owning_client(actor, advertisement) -> bool:
    owner = _owner_client_id(advertisement)
    return isinstance(actor, ClientActor) and owner is not None and actor.id == owner


def _is_owning_agency(actor, application) -> bool:
    agency = _agency_id(application)
    return isinstance(actor, AgencyActor) and agency is not None and actor.id == agency


def authorize(actor, action: str, application: Any = None, advertisement: Any = None) -> bool:
    if actor is None:
        return False

    if action == EMPLOYEE_REVIEW_DECISION:
        return isinstance(actor, REVIEWER_TYPES)

    if action == CLIENT_REVIEW_DECISION:
        return _is_owning_client(actor, advertisement)

    if action == LEGACY_STATUS_SET:
        return _is_owning_client(actor, advertisement) or _is_owning_agency(actor, application)

    if action == DELETE:
        return _is_owning_agency(actor, application)

    if action == SUBMIT:
        return isinstance(actor, AgencyActor)

    if action in (ADVERTISEMENT_STATUS_SET, ADVERTISEMENT_DELETE):
        return _is_owning_client(actor, advertisement)

    return False


def ensure_authorized(actor, action: str, application: Any = None, advertisement: Any = None) -> None:
    """
    Raises AuthorizationError unless `authorize` allows the request.
    """
    if authorize(actor, action, application, advertisement):
        return

    logger.warning(
        "Denied %s for %s:%s on application=%s advertisement=%s",
        action,
        getattr(actor, "role", "anonymous"),
        getattr(actor, "id", None),
        getattr(application, "pk", None),
        getattr(advertisement, "pk", None),
    )
    raise AuthorizationError(f"Not authorized to perform {action.replace('_', ' ')}.")


def actions_for_actor(actor, application: Any, advertisement: Any = None) -> list[str]:
    """
    Actions the actor may take on `application` right now: state-legal and
    authorized.
    """
    return [
        action
        for action in allowed_actions(getattr(application, "status", ""))
        if authorize(actor, action, application, advertisement)
    ]


__all__ = ["authorize", "ensure_authorized", "actions_for_actor"]
