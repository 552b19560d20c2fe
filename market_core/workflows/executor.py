# market_core/workflows/executor.py

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from market_core.models import Application, WorkflowEvent
from market_core.workflows.engine import TransitionPlan
from market_core.workflows.errors import NotFoundError, StaleStateError

logger = logging.getLogger(__name__)


def record_event(*, kind: str, object_id: int, action: str, from_status: str, to_status: str, actor, comment: str = "") -> WorkflowEvent:
    return WorkflowEvent.objects.create(
        kind=kind,
        object_id=object_id,
        action=action,
        from_status=from_status,
        to_status=to_status,
        actor_role=getattr(actor, "role", ""),
        actor_id=getattr(actor, "id", None),
        performed_by_id=getattr(actor, "user_id", None),
        comment=comment or "",
    )


def apply_transition(*, application_id: int, plan: TransitionPlan, actor, comment: str = "") -> Application:
    """
    Atomically:
      1) Conditionally write status + review patch (only if status still
         equals plan.from_status)
      2) Write the WorkflowEvent row

    Zero rows updated means another request moved the application first,
    or it was deleted.
    """
    with transaction.atomic():
        updated = (
            Application.objects
            .filter(pk=application_id, status=plan.from_status)
            .update(status=plan.to_status, updated_at=timezone.now(), **plan.patch)
        )

        if not updated:
            current = (
                Application.objects.filter(pk=application_id)
                .values_list("status", flat=True)
                .first()
            )
            if current is None:
                raise NotFoundError("Application not found.")
            raise StaleStateError(
                f"Application status changed to '{current}' "
                f"before '{plan.from_status}' -> '{plan.to_status}' was applied.",
                field="status",
            )

        record_event(
            kind="application",
            object_id=application_id,
            action=plan.action,
            from_status=plan.from_status,
            to_status=plan.to_status,
            actor=actor,
            comment=comment,
        )

    logger.info(
        "Application %s: %s %s -> %s by %s:%s",
        application_id,
        plan.action,
        plan.from_status,
        plan.to_status,
        getattr(actor, "role", ""),
        getattr(actor, "id", None),
    )

    return Application.objects.get(pk=application_id)
