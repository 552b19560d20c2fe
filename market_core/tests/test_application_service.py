# market_core/tests/test_application_service.py

from decimal import Decimal

import pytest

from market_core import selectors
from market_core.models import Advertisement, Application, WorkflowEvent
from market_core.services import applications as service
from market_core.workflows.errors import (
    AuthorizationError,
    InvalidDecision,
    InvalidStateTransition,
    NotFoundError,
    ReferentNotFound,
    StaleStateError,
    ValidationError,
)


def _reload(application):
    return Application.objects.get(pk=application.pk)


# ---------------------------------------------------------------
# Submission
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_submit_creates_application_in_employee_review(agency_actor, advertisement):
    application = service.submit_application(
        actor=agency_actor,
        advertisement_id=advertisement.pk,
        content={"message": "Pick us", "budget": "1200", "status": "approved"},
    )

    assert application.status == "employee_review"
    assert application.agency_id == agency_actor.id
    assert application.advertisement_id == advertisement.pk
    assert application.employee_review is None
    assert application.client_review is None
    assert WorkflowEvent.objects.filter(kind="application", object_id=application.pk, action="submit").count() == 1


@pytest.mark.django_db
def test_submit_requires_agency(client_actor, advertisement):
    with pytest.raises(AuthorizationError):
        service.submit_application(actor=client_actor, advertisement_id=advertisement.pk)


@pytest.mark.django_db
def test_submit_requires_advertisement_id(agency_actor):
    with pytest.raises(ValidationError):
        service.submit_application(actor=agency_actor, advertisement_id=None)


@pytest.mark.django_db
def test_submit_to_missing_advertisement(agency_actor):
    with pytest.raises(ReferentNotFound):
        service.submit_application(actor=agency_actor, advertisement_id=987654)


@pytest.mark.django_db
def test_submit_rejects_budget_that_does_not_fit(agency_actor, advertisement, employee_actor):
    with pytest.raises(ValidationError) as exc:
        service.submit_application(
            actor=agency_actor,
            advertisement_id=advertisement.pk,
            content={"budget": "1e20"},
        )
    assert exc.value.field == "budget"
    assert not Application.objects.exists()

    accepted = service.submit_application(
        actor=agency_actor,
        advertisement_id=advertisement.pk,
        content={"budget": "9999999999.99"},
    )
    pending = list(selectors.pending_employee_review(employee_actor))
    assert [item.pk for item in pending] == [accepted.pk]
    assert pending[0].budget == Decimal("9999999999.99")


# ---------------------------------------------------------------
# Employee approves, then client decides
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_full_approval_path(application, employee_actor, client_actor):
    reviewed = service.employee_review(
        actor=employee_actor,
        application_id=application.pk,
        payload={"decision": "approve", "budget_approved": True, "proposal_quality": "good"},
    )
    assert reviewed.status == "client_review"
    assert reviewed.employee_review["decision"] == "approve"
    assert reviewed.employee_review["reviewed_by"] == employee_actor.id
    assert reviewed.employee_review["budget_approved"] is True
    assert reviewed.employee_review["portfolio_quality"] == "fair"

    accepted = service.client_review(
        actor=client_actor,
        application_id=application.pk,
        payload={"decision": "accepted", "feedback": "Let's go"},
    )
    assert accepted.status == "approved"
    assert accepted.client_review["decision"] == "accepted"
    assert accepted.client_review["feedback"] == "Let's go"
    # The earlier review record is untouched.
    assert accepted.employee_review == reviewed.employee_review

    actions = list(
        WorkflowEvent.objects.filter(kind="application", object_id=application.pk)
        .order_by("id")
        .values_list("action", "from_status", "to_status")
    )
    assert actions == [
        ("employee_review_decision", "employee_review", "client_review"),
        ("client_review_decision", "client_review", "approved"),
    ]


@pytest.mark.django_db
def test_client_rejects_after_employee_approves(application, employee_actor, client_actor):
    reviewed = service.employee_review(
        actor=employee_actor,
        application_id=application.pk,
        payload={"decision": "approve"},
    )

    rejected = service.client_review(
        actor=client_actor,
        application_id=application.pk,
        payload={"decision": "rejected", "feedback": "Not this season"},
    )
    assert rejected.status == "rejected"
    assert rejected.client_review["decision"] == "rejected"
    assert rejected.client_review["feedback"] == "Not this season"
    assert rejected.employee_review == reviewed.employee_review

    fresh = _reload(application)
    assert fresh.status == "rejected"
    assert fresh.client_review["decision"] == "rejected"


# ---------------------------------------------------------------
# Employee rejects
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_employee_reject_is_final_for_reviews(application, employee_actor, client_actor):
    rejected = service.employee_review(
        actor=employee_actor,
        application_id=application.pk,
        payload={"decision": "reject", "notes": "Off brief"},
    )
    assert rejected.status == "rejected"
    assert rejected.employee_review["notes"] == "Off brief"

    with pytest.raises(InvalidStateTransition):
        service.client_review(
            actor=client_actor,
            application_id=application.pk,
            payload={"decision": "accepted"},
        )


# ---------------------------------------------------------------
# Client ownership
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_non_owner_client_cannot_review(application_factory, advertisement, agency_profile, other_client_actor):
    application = application_factory(
        advertisement=advertisement,
        agency=agency_profile,
        status="client_review",
    )

    for decision in ("accepted", "rejected", "bogus"):
        with pytest.raises(AuthorizationError):
            service.client_review(
                actor=other_client_actor,
                application_id=application.pk,
                payload={"decision": decision},
            )

    assert _reload(application).status == "client_review"


# ---------------------------------------------------------------
# Repeated and concurrent employee reviews
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_employee_review_cannot_run_twice(application, employee_actor, admin_actor):
    first = service.employee_review(
        actor=employee_actor,
        application_id=application.pk,
        payload={"decision": "approve"},
    )

    with pytest.raises(InvalidStateTransition):
        service.employee_review(
            actor=admin_actor,
            application_id=application.pk,
            payload={"decision": "reject"},
        )

    assert _reload(application).employee_review == first.employee_review


@pytest.mark.django_db
def test_replayed_review_is_stale(application, employee_actor):
    service.employee_review(
        actor=employee_actor,
        application_id=application.pk,
        payload={"decision": "approve"},
        expected_status="employee_review",
    )

    with pytest.raises(StaleStateError):
        service.employee_review(
            actor=employee_actor,
            application_id=application.pk,
            payload={"decision": "approve"},
            expected_status="employee_review",
        )

    assert WorkflowEvent.objects.filter(object_id=application.pk, action="employee_review_decision").count() == 1


@pytest.mark.django_db
def test_concurrent_employee_reviews_write_once(application, employee_actor, admin_actor, monkeypatch):
    # Both callers load the application before either one writes.
    snapshot = service.get_application(application.pk)
    monkeypatch.setattr(service, "get_application", lambda application_id: snapshot)

    first = service.employee_review(
        actor=employee_actor,
        application_id=application.pk,
        payload={"decision": "approve"},
    )
    assert first.status == "client_review"

    with pytest.raises(StaleStateError):
        service.employee_review(
            actor=admin_actor,
            application_id=application.pk,
            payload={"decision": "reject"},
        )

    fresh = _reload(application)
    assert fresh.status == "client_review"
    assert fresh.employee_review["decision"] == "approve"
    assert fresh.employee_review["reviewed_by"] == employee_actor.id
    assert WorkflowEvent.objects.filter(object_id=application.pk, action="employee_review_decision").count() == 1


# ---------------------------------------------------------------
# Guards and errors
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_agency_and_client_cannot_employee_review(application, agency_actor, client_actor):
    for actor in (agency_actor, client_actor):
        with pytest.raises(AuthorizationError):
            service.employee_review(
                actor=actor,
                application_id=application.pk,
                payload={"decision": "approve"},
            )


@pytest.mark.django_db
def test_invalid_decision_leaves_application_unchanged(application, employee_actor):
    with pytest.raises(InvalidDecision):
        service.employee_review(
            actor=employee_actor,
            application_id=application.pk,
            payload={"decision": "accepted"},
        )
    fresh = _reload(application)
    assert fresh.status == "employee_review"
    assert fresh.employee_review is None


@pytest.mark.django_db
def test_missing_application(employee_actor):
    with pytest.raises(NotFoundError):
        service.employee_review(actor=employee_actor, application_id=424242, payload={"decision": "approve"})


@pytest.mark.django_db
def test_client_review_with_deleted_advertisement(application_factory, advertisement, agency_profile, client_actor):
    application = application_factory(
        advertisement=advertisement,
        agency=agency_profile,
        status="client_review",
    )
    Advertisement.objects.filter(pk=advertisement.pk).delete()

    assert Application.objects.filter(pk=application.pk).exists()
    with pytest.raises(ReferentNotFound):
        service.client_review(
            actor=client_actor,
            application_id=application.pk,
            payload={"decision": "accepted"},
        )


# ---------------------------------------------------------------
# Legacy status and delete
# ---------------------------------------------------------------

@pytest.mark.django_db
def test_legacy_status_by_owners(application, client_actor, agency_actor):
    updated = service.legacy_status_update(
        actor=agency_actor,
        application_id=application.pk,
        new_status="completed",
    )
    assert updated.status == "completed"
    assert updated.employee_review is None

    updated = service.legacy_status_update(
        actor=client_actor,
        application_id=application.pk,
        new_status="client_review",
        expected_status="completed",
    )
    assert updated.status == "client_review"

    event = WorkflowEvent.objects.filter(object_id=application.pk, action="legacy_status_set").first()
    assert event.comment == "legacy status update"


@pytest.mark.django_db
def test_legacy_status_rejects_others_and_bad_values(application, employee_actor, other_agency_actor, agency_actor):
    with pytest.raises(AuthorizationError):
        service.legacy_status_update(actor=employee_actor, application_id=application.pk, new_status="approved")
    with pytest.raises(AuthorizationError):
        service.legacy_status_update(actor=other_agency_actor, application_id=application.pk, new_status="approved")
    with pytest.raises(ValidationError):
        service.legacy_status_update(actor=agency_actor, application_id=application.pk, new_status="archived")
    with pytest.raises(StaleStateError):
        service.legacy_status_update(
            actor=agency_actor,
            application_id=application.pk,
            new_status="approved",
            expected_status="client_review",
        )


@pytest.mark.django_db
def test_delete_by_owning_agency_only(application, other_agency_actor, client_actor, agency_actor):
    for actor in (other_agency_actor, client_actor):
        with pytest.raises(AuthorizationError):
            service.delete_application(actor=actor, application_id=application.pk)

    service.delete_application(actor=agency_actor, application_id=application.pk)
    assert not Application.objects.filter(pk=application.pk).exists()
    assert WorkflowEvent.objects.filter(object_id=application.pk, action="delete").exists()

    with pytest.raises(NotFoundError):
        service.delete_application(actor=agency_actor, application_id=application.pk)


@pytest.mark.django_db
def test_delete_works_in_any_status(application_factory, advertisement, agency_profile, agency_actor):
    application = application_factory(advertisement=advertisement, agency=agency_profile, status="approved")
    service.delete_application(actor=agency_actor, application_id=application.pk)
    assert not Application.objects.filter(pk=application.pk).exists()
