# market_core/tests/conftest.py

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, Callable, Optional

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from market_core.models import Advertisement, Agency, Application, Client, Employee
from market_core.workflows.actors import (
    AdminActor,
    AgencyActor,
    ClientActor,
    EmployeeActor,
)


def _rand(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}"


def _user(username: Optional[str] = None, **extra: Any):
    User = get_user_model()
    return User.objects.create_user(
        username=username or _rand("user"),
        password="pass123",
        **extra,
    )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


# ---------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------

@pytest.fixture
def client_factory(db) -> Callable[..., Client]:
    def _factory(**extra: Any) -> Client:
        name = _rand("client")
        kwargs = {
            "user": _user(name),
            "fullname": "Casey Client",
            "email": f"{name}@example.com",
            "company": "Acme",
        }
        kwargs.update(extra)
        return Client.objects.create(**kwargs)

    return _factory


@pytest.fixture
def agency_factory(db) -> Callable[..., Agency]:
    def _factory(**extra: Any) -> Agency:
        name = _rand("agency")
        kwargs = {
            "user": _user(name),
            "fullname": "Avery Agent",
            "email": f"{name}@example.com",
            "agency_name": "Bright Ads",
        }
        kwargs.update(extra)
        return Agency.objects.create(**kwargs)

    return _factory


@pytest.fixture
def client_profile(client_factory) -> Client:
    return client_factory()


@pytest.fixture
def other_client_profile(client_factory) -> Client:
    return client_factory(company="Other Co")


@pytest.fixture
def agency_profile(agency_factory) -> Agency:
    return agency_factory()


@pytest.fixture
def other_agency_profile(agency_factory) -> Agency:
    return agency_factory(agency_name="Other Agency")


@pytest.fixture
def employee_profile(db) -> Employee:
    return Employee.objects.create(
        user=_user(_rand("employee")),
        full_name="Erin Employee",
        department="Review",
    )


@pytest.fixture
def admin_user(db):
    User = get_user_model()
    return User.objects.create_superuser(
        username=_rand("admin"),
        email="admin@example.com",
        password="pass123",
    )


# ---------------------------------------------------------------
# Actors
# ---------------------------------------------------------------

@pytest.fixture
def client_actor(client_profile) -> ClientActor:
    return ClientActor(id=client_profile.pk, user_id=client_profile.user_id)


@pytest.fixture
def other_client_actor(other_client_profile) -> ClientActor:
    return ClientActor(id=other_client_profile.pk, user_id=other_client_profile.user_id)


@pytest.fixture
def agency_actor(agency_profile) -> AgencyActor:
    return AgencyActor(id=agency_profile.pk, user_id=agency_profile.user_id)


@pytest.fixture
def other_agency_actor(other_agency_profile) -> AgencyActor:
    return AgencyActor(id=other_agency_profile.pk, user_id=other_agency_profile.user_id)


@pytest.fixture
def employee_actor(employee_profile) -> EmployeeActor:
    return EmployeeActor(id=employee_profile.pk, user_id=employee_profile.user_id)


@pytest.fixture
def admin_actor(admin_user) -> AdminActor:
    return AdminActor(id=admin_user.pk, user_id=admin_user.pk)


# ---------------------------------------------------------------
# Advertisements / applications
# ---------------------------------------------------------------

@pytest.fixture
def advertisement_factory(db) -> Callable[..., Advertisement]:
    def _factory(*, client: Client, status: str = "active", **extra: Any) -> Advertisement:
        kwargs = {
            "client": client,
            "product_name": _rand("Product"),
            "product_description": "A product worth advertising.",
            "budget": Decimal("5000.00"),
            "campaign_duration": "1 month",
            "category": "electronics",
            "key_features": ["fast", "light"],
            "status": status,
        }
        kwargs.update(extra)
        return Advertisement.objects.create(**kwargs)

    return _factory


@pytest.fixture
def advertisement(advertisement_factory, client_profile) -> Advertisement:
    return advertisement_factory(client=client_profile)


@pytest.fixture
def application_factory(db) -> Callable[..., Application]:
    """
    Creates applications directly, in any status. Only for test setup;
    real code submits through the service.
    """

    def _factory(
        *,
        advertisement: Advertisement,
        agency: Agency,
        status: str = "employee_review",
        **extra: Any,
    ) -> Application:
        kwargs = {
            "advertisement": advertisement,
            "agency": agency,
            "message": "We would love to run this campaign.",
            "proposal": "Three channels, two creatives.",
            "budget": Decimal("4500.00"),
            "timeline": "4 weeks",
            "status": status,
        }
        kwargs.update(extra)
        return Application.objects.create(**kwargs)

    return _factory


@pytest.fixture
def application(application_factory, advertisement, agency_profile) -> Application:
    return application_factory(advertisement=advertisement, agency=agency_profile)
