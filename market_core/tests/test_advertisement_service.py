# market_core/tests/test_advertisement_service.py

import pytest

from market_core.models import Advertisement, Application, WorkflowEvent
from market_core.services import advertisements as service
from market_core.services import applications as application_service
from market_core.workflows.errors import (
    AuthorizationError,
    NotFoundError,
    ReferentNotFound,
    ValidationError,
)


@pytest.mark.django_db
def test_owner_deletes_advertisement(advertisement, client_actor):
    service.delete_advertisement(actor=client_actor, advertisement_id=advertisement.pk)

    assert not Advertisement.objects.filter(pk=advertisement.pk).exists()
    event = WorkflowEvent.objects.get(kind="advertisement", object_id=advertisement.pk)
    assert event.action == "advertisement_delete"
    assert (event.from_status, event.to_status) == ("active", "")
    assert event.actor_role == client_actor.role

    with pytest.raises(NotFoundError):
        service.delete_advertisement(actor=client_actor, advertisement_id=advertisement.pk)


@pytest.mark.django_db
def test_only_owning_client_deletes(advertisement, other_client_actor, agency_actor, employee_actor, admin_actor):
    for actor in (other_client_actor, agency_actor, employee_actor, admin_actor):
        with pytest.raises(AuthorizationError):
            service.delete_advertisement(actor=actor, advertisement_id=advertisement.pk)

    assert Advertisement.objects.filter(pk=advertisement.pk).exists()
    assert not WorkflowEvent.objects.filter(kind="advertisement").exists()


@pytest.mark.django_db
def test_applications_outlive_deleted_advertisement(application_factory, advertisement, agency_profile, client_actor):
    application = application_factory(advertisement=advertisement, agency=agency_profile, status="client_review")

    service.delete_advertisement(actor=client_actor, advertisement_id=advertisement.pk)

    kept = Application.objects.get(pk=application.pk)
    assert kept.advertisement_id == advertisement.pk
    assert kept.status == "client_review"
    with pytest.raises(ReferentNotFound):
        application_service.client_review(
            actor=client_actor,
            application_id=application.pk,
            payload={"decision": "accepted"},
        )


@pytest.mark.django_db
def test_status_change_validates_value(advertisement, client_actor):
    for value in (None, "", "archived", 7):
        with pytest.raises(ValidationError) as exc:
            service.change_advertisement_status(
                actor=client_actor,
                advertisement_id=advertisement.pk,
                new_status=value,
            )
        assert exc.value.field == "status"

    updated = service.change_advertisement_status(
        actor=client_actor,
        advertisement_id=advertisement.pk,
        new_status=" Completed ",
    )
    assert updated.status == "completed"
