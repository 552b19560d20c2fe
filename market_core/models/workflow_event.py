from django.conf import settings
from django.db import models


class WorkflowEvent(models.Model):
    """
    Immutable audit log for workflow transitions.
    """

    KIND_CHOICES = (
        ("application", "Application"),
        ("advertisement", "Advertisement"),
    )

    kind = models.CharField(max_length=32, choices=KIND_CHOICES)

    object_id = models.PositiveIntegerField()
    action = models.CharField(max_length=64)
    from_status = models.CharField(max_length=64)
    to_status = models.CharField(max_length=64, blank=True)

    actor_role = models.CharField(max_length=32)
    actor_id = models.PositiveIntegerField(null=True, blank=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="workflow_events",
    )

    comment = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["kind", "object_id"], name="wf_event_object_idx"),
        ]

    def __str__(self):
        return (
            f"{self.kind.upper()} {self.object_id}: "
            f"{self.from_status} → {self.to_status or '-'} "
            f"by {self.actor_role}:{self.actor_id}"
        )
