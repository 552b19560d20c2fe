# market_core/services/applications.py
"""
Authoritative application workflow service.

All application state changes MUST go through this service.
Never update status or review records directly in views or serializers.

Order of checks for every state-changing call:
  1) Application lookup               -> NotFoundError
  2) Advertisement lookup (if needed) -> ReferentNotFound
  3) Authorization                    -> AuthorizationError
  4) Caller's observed status         -> StaleStateError
  5) State legality                   -> InvalidStateTransition
  6) Payload validation               -> InvalidDecision / ValidationError
  7) Conditional write                -> StaleStateError
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.db import transaction

from market_core.models import Advertisement, Agency, Application
from market_core.workflows import (
    CLIENT_REVIEW_DECISION,
    DELETE,
    EMPLOYEE_REVIEW_DECISION,
    LEGACY_STATUS_SET,
    SUBMIT,
)
from market_core.workflows.authorizer import ensure_authorized
from market_core.workflows.engine import (
    check_expected_status,
    plan_client_review,
    plan_employee_review,
    plan_legacy_status,
    plan_submission,
)
from market_core.workflows.errors import NotFoundError, ReferentNotFound
from market_core.workflows.executor import apply_transition, record_event

logger = logging.getLogger(__name__)


# ===============================================================
# Lookups
# ===============================================================

def get_application(application_id) -> Application:
    try:
        return Application.objects.get(pk=application_id)
    except (Application.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Application not found.")


def get_advertisement_for(application: Application) -> Advertisement:
    """
    Resolve the advertisement an application points at. The reference is not
    enforced by the database, so it may be dangling.
    """
    advertisement = Advertisement.objects.filter(pk=application.advertisement_id).first()
    if advertisement is None:
        raise ReferentNotFound("Advertisement not found.", field="advertisement")
    return advertisement


# ===============================================================
# Operations
# ===============================================================

def submit_application(*, actor, advertisement_id: Any, content: Optional[Mapping[str, Any]] = None) -> Application:
    ensure_authorized(actor, SUBMIT)

    fields = plan_submission(advertisement_id, content)

    if not Advertisement.objects.filter(pk=fields["advertisement_id"]).exists():
        raise ReferentNotFound("Advertisement not found.", field="advertisement")

    agency = Agency.objects.filter(pk=actor.id).first()
    if agency is None:
        raise NotFoundError("Agency not found.")

    with transaction.atomic():
        application = Application.objects.create(agency=agency, **fields)
        record_event(
            kind="application",
            object_id=application.pk,
            action=SUBMIT,
            from_status="",
            to_status=application.status,
            actor=actor,
        )

    logger.info(
        "Application %s submitted by agency %s for advertisement %s",
        application.pk,
        agency.pk,
        application.advertisement_id,
    )
    return application


def employee_review(*, actor, application_id, payload: Any, expected_status: Optional[str] = None) -> Application:
    application = get_application(application_id)

    ensure_authorized(actor, EMPLOYEE_REVIEW_DECISION, application)
    check_expected_status(application, expected_status)

    plan = plan_employee_review(application, payload, actor=actor)
    return apply_transition(application_id=application.pk, plan=plan, actor=actor)


def client_review(*, actor, application_id, payload: Any, expected_status: Optional[str] = None) -> Application:
    application = get_application(application_id)
    advertisement = get_advertisement_for(application)

    ensure_authorized(actor, CLIENT_REVIEW_DECISION, application, advertisement)
    check_expected_status(application, expected_status)

    plan = plan_client_review(application, payload)
    return apply_transition(application_id=application.pk, plan=plan, actor=actor)


def legacy_status_update(*, actor, application_id, new_status: Any, expected_status: Optional[str] = None) -> Application:
    application = get_application(application_id)
    advertisement = get_advertisement_for(application)

    ensure_authorized(actor, LEGACY_STATUS_SET, application, advertisement)
    check_expected_status(application, expected_status)

    plan = plan_legacy_status(application, new_status)
    return apply_transition(
        application_id=application.pk,
        plan=plan,
        actor=actor,
        comment="legacy status update",
    )


def delete_application(*, actor, application_id) -> None:
    application = get_application(application_id)

    ensure_authorized(actor, DELETE, application)

    with transaction.atomic():
        record_event(
            kind="application",
            object_id=application.pk,
            action=DELETE,
            from_status=application.status,
            to_status="",
            actor=actor,
        )
        application.delete()

    logger.info("Application %s deleted by agency %s", application_id, actor.id)


__all__ = [
    "get_application",
    "get_advertisement_for",
    "submit_application",
    "employee_review",
    "client_review",
    "legacy_status_update",
    "delete_application",
]
