# market_core/signals.py
from __future__ import annotations

from threading import local

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from market_core.models import Advertisement, Application, AuditLog, WorkflowEvent

# ===============================================================
# Thread-local user storage
# ===============================================================
_state = local()


def set_current_user(user):
    _state.user = user


def get_current_user():
    return getattr(_state, "user", None)


AUDITED_MODELS = {Advertisement, Application}


def _log(action: str, instance, details: dict | None = None):
    user = get_current_user()

    AuditLog.objects.create(
        user=user if user is not None and user.is_authenticated else None,
        action=action,
        details=details or {
            "model": instance.__class__.__name__,
            "object_id": instance.pk,
        },
    )


# ===============================================================
# CREATE / UPDATE / DELETE audit
# ===============================================================
@receiver(post_save)
def audit_create_update(sender, instance, created, **kwargs):
    if sender not in AUDITED_MODELS:
        return

    _log("CREATE" if created else "UPDATE", instance)


@receiver(post_delete)
def audit_delete(sender, instance, **kwargs):
    if sender not in AUDITED_MODELS:
        return

    _log("DELETE", instance)


# ===============================================================
# Workflow events
# ===============================================================
@receiver(post_save, sender=WorkflowEvent)
def audit_workflow_event(sender, instance: WorkflowEvent, created: bool, **kwargs):
    """
    Mirrors each recorded transition into the audit log. Status writes go
    through queryset updates, which fire no model signals of their own.
    """
    if not created:
        return

    AuditLog.objects.create(
        user=instance.performed_by,
        action=(
            f"WORKFLOW {instance.kind.upper()} {instance.object_id}: "
            f"{instance.action} {instance.from_status or '-'} -> {instance.to_status or '-'}"
        ),
        details={
            "kind": instance.kind,
            "object_id": instance.object_id,
            "action": instance.action,
            "from": instance.from_status,
            "to": instance.to_status,
            "actor_role": instance.actor_role,
            "actor_id": instance.actor_id,
        },
    )
