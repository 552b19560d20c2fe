# market_core/services/advertisements.py
"""
Advertisement services used by the workflow.

Advertisements are created in draft and change status only at their owning
client's request. No rule ties advertisement status to in-flight
applications.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from market_core.models import Advertisement, Client
from market_core.serializers_workflow import AdvertisementStatusInputSerializer, validate_input
from market_core.workflows import (
    ADVERTISEMENT_DELETE,
    ADVERTISEMENT_INITIAL_STATE,
    ADVERTISEMENT_STATUS_SET,
)
from market_core.workflows.actors import ClientActor
from market_core.workflows.authorizer import ensure_authorized
from market_core.workflows.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from market_core.workflows.executor import record_event

logger = logging.getLogger(__name__)

CREATE_FIELDS = (
    "product_name",
    "product_description",
    "target_audience",
    "budget",
    "campaign_duration",
    "category",
    "key_features",
)


def get_advertisement(advertisement_id) -> Advertisement:
    try:
        return Advertisement.objects.select_related("client").get(pk=advertisement_id)
    except (Advertisement.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Advertisement not found.")


def create_advertisement(*, actor, data: Optional[Mapping[str, Any]] = None) -> Advertisement:
    if not isinstance(actor, ClientActor):
        raise AuthorizationError("Only clients can create advertisements.")

    client = Client.objects.filter(pk=actor.id).first()
    if client is None:
        raise NotFoundError("Client not found.")

    data = data or {}
    fields = {name: data[name] for name in CREATE_FIELDS if name in data}
    if fields.get("key_features") is None:
        fields["key_features"] = []

    advertisement = Advertisement(
        client=client,
        status=ADVERTISEMENT_INITIAL_STATE,
        **fields,
    )
    try:
        advertisement.full_clean()
    except DjangoValidationError as exc:
        errors = exc.message_dict
        first = sorted(errors)[0]
        raise ValidationError(f"{first}: {' '.join(errors[first])}", field=first)

    advertisement.save()
    logger.info("Advertisement %s created by client %s", advertisement.pk, client.pk)
    return advertisement


def change_advertisement_status(*, actor, advertisement_id, new_status: Any) -> Advertisement:
    advertisement = get_advertisement(advertisement_id)

    ensure_authorized(actor, ADVERTISEMENT_STATUS_SET, advertisement=advertisement)

    target = validate_input(AdvertisementStatusInputSerializer, {"status": new_status})["status"]

    previous = advertisement.status
    with transaction.atomic():
        Advertisement.objects.filter(pk=advertisement.pk).update(
            status=target,
            updated_at=timezone.now(),
        )
        record_event(
            kind="advertisement",
            object_id=advertisement.pk,
            action=ADVERTISEMENT_STATUS_SET,
            from_status=previous,
            to_status=target,
            actor=actor,
        )

    advertisement.refresh_from_db()
    return advertisement


def delete_advertisement(*, actor, advertisement_id) -> None:
    """
    Remove an advertisement at its owning client's request. Applications
    against it are kept and keep pointing at the removed id.
    """
    advertisement = get_advertisement(advertisement_id)

    ensure_authorized(actor, ADVERTISEMENT_DELETE, advertisement=advertisement)

    with transaction.atomic():
        record_event(
            kind="advertisement",
            object_id=advertisement.pk,
            action=ADVERTISEMENT_DELETE,
            from_status=advertisement.status,
            to_status="",
            actor=actor,
        )
        advertisement.delete()

    logger.info("Advertisement %s deleted by client %s", advertisement_id, actor.id)


__all__ = [
    "get_advertisement",
    "create_advertisement",
    "change_advertisement_status",
    "delete_advertisement",
]
