# market_core/tests/test_audit.py

import pytest

from market_core.models import AuditLog
from market_core.services import applications as service
from market_core.signals import get_current_user, set_current_user


@pytest.mark.django_db
def test_create_and_delete_are_audited(agency_actor, agency_profile, advertisement):
    set_current_user(agency_profile.user)

    application = service.submit_application(actor=agency_actor, advertisement_id=advertisement.pk)
    created = AuditLog.objects.filter(
        action="CREATE",
        details__model="Application",
        details__object_id=application.pk,
    ).first()
    assert created is not None
    assert created.user_id == agency_profile.user_id

    app_pk = application.pk
    service.delete_application(actor=agency_actor, application_id=app_pk)
    assert AuditLog.objects.filter(action="DELETE", details__object_id=app_pk).exists()


@pytest.mark.django_db
def test_transition_is_mirrored_into_audit_log(application, employee_actor, employee_profile):
    service.employee_review(actor=employee_actor, application_id=application.pk, payload={"decision": "approve"})

    entry = AuditLog.objects.filter(action__startswith="WORKFLOW APPLICATION").latest("id")
    assert entry.user_id == employee_profile.user_id
    assert entry.details["from"] == "employee_review"
    assert entry.details["to"] == "client_review"
    assert entry.details["actor_role"] == "employee"


@pytest.mark.django_db
def test_api_request_user_is_recorded(api_client, client_profile):
    api_client.force_authenticate(user=client_profile.user)
    resp = api_client.post(
        "/market/advertisements/",
        {
            "product_name": "Lamp",
            "product_description": "Desk lamp.",
            "budget": "50",
            "campaign_duration": "1 week",
            "category": "home",
        },
        format="json",
    )
    assert resp.status_code == 201

    entry = AuditLog.objects.get(action="CREATE", details__model="Advertisement", details__object_id=resp.json()["id"])
    assert entry.user_id == client_profile.user_id
    # Cleared once the response is out.
    assert get_current_user() is None
