# market_core/selectors.py
"""
Role-scoped read views over applications.

Nothing here mutates state. Every list is newest first.
"""

from __future__ import annotations

from typing import Any, Dict

from django.db.models import Count, QuerySet

from market_core.models import Advertisement, Agency, Application, Client, WorkflowEvent
from market_core.workflows import (
    ADVERTISEMENT_STATES,
    APPLICATION_STATES,
    CLIENT_REVIEW,
    CLIENT_VISIBLE_STATES,
    EMPLOYEE_REVIEW,
    EMPLOYEE_REVIEW_DECISION,
)
from market_core.workflows.actors import (
    AdminActor,
    AgencyActor,
    ClientActor,
    REVIEWER_TYPES,
)
from market_core.workflows.errors import AuthorizationError, NotFoundError


def _base_queryset() -> QuerySet:
    # The advertisement reference may dangle, so it is prefetched rather than
    # joined; a join would silently drop those rows.
    return (
        Application.objects
        .select_related("agency")
        .prefetch_related("advertisement__client")
        .order_by("-created_at", "-id")
    )


def applications_for_agency(actor) -> QuerySet:
    if not isinstance(actor, AgencyActor):
        raise AuthorizationError("Agency access required.")
    return _base_queryset().filter(agency_id=actor.id)


def applications_for_client(actor) -> QuerySet:
    """
    Applications against the client's own advertisements that have passed
    employee review. Applications still in employee_review are never shown.
    """
    if not isinstance(actor, ClientActor):
        raise AuthorizationError("Client access required.")
    return _base_queryset().filter(
        advertisement__client_id=actor.id,
        status__in=CLIENT_VISIBLE_STATES,
    )


def pending_employee_review(actor) -> QuerySet:
    if not isinstance(actor, REVIEWER_TYPES):
        raise AuthorizationError("Employee access required.")
    return _base_queryset().filter(status=EMPLOYEE_REVIEW)


def applications_for_advertisement(advertisement_id) -> QuerySet:
    try:
        ad_pk = int(str(advertisement_id).strip())
    except (TypeError, ValueError):
        raise NotFoundError("Advertisement not found.")
    return _base_queryset().filter(advertisement_id=ad_pk)


def all_applications(actor) -> QuerySet:
    if not isinstance(actor, AdminActor):
        raise AuthorizationError("Admin access required.")
    return _base_queryset()


def application_detail(application_id) -> Application:
    try:
        return _base_queryset().get(pk=application_id)
    except (Application.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Application not found.")


def application_history(application_id) -> QuerySet:
    return WorkflowEvent.objects.filter(
        kind="application",
        object_id=application_id,
    ).order_by("created_at", "id")


def employee_review_stats(actor) -> Dict[str, int]:
    if not isinstance(actor, REVIEWER_TYPES):
        raise AuthorizationError("Employee access required.")
    return {
        "total_pending": Application.objects.filter(status=EMPLOYEE_REVIEW).count(),
        "total_reviewed": WorkflowEvent.objects.filter(
            kind="application",
            action=EMPLOYEE_REVIEW_DECISION,
            actor_role=actor.role,
            actor_id=actor.id,
        ).count(),
    }


def _status_counts(queryset: QuerySet, states) -> Dict[str, int]:
    counts = {state: 0 for state in states}
    for row in queryset.order_by().values("status").annotate(total=Count("id")):
        counts[row["status"]] = row["total"]
    return counts


def admin_analytics(actor) -> Dict[str, Any]:
    """
    Marketplace-wide counts for the admin dashboard.
    """
    if not isinstance(actor, AdminActor):
        raise AuthorizationError("Admin access required.")

    total_clients = Client.objects.count()
    total_agencies = Agency.objects.count()
    advertisements = _status_counts(Advertisement.objects.all(), ADVERTISEMENT_STATES)
    applications = _status_counts(Application.objects.all(), APPLICATION_STATES)

    return {
        "total_users": total_clients + total_agencies,
        "total_clients": total_clients,
        "total_agencies": total_agencies,
        "total_advertisements": sum(advertisements.values()),
        "active_campaigns": advertisements["active"],
        "paused_campaigns": advertisements["paused"],
        "total_applications": sum(applications.values()),
        "pending_reviews": applications[EMPLOYEE_REVIEW] + applications[CLIENT_REVIEW],
        "advertisements_by_status": advertisements,
        "applications_by_status": applications,
    }
