# market_core/workflows/actors.py
"""
Caller identity for the workflow.

An actor is one of four closed variants. Each carries the id of its own
profile record (Client, Agency, Employee) or, for Admin, the user id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from market_core.workflows import normalize_role
from market_core.workflows.errors import ValidationError


@dataclass(frozen=True)
class ClientActor:
    id: int
    user_id: Optional[int] = None
    role = "client"


@dataclass(frozen=True)
class AgencyActor:
    id: int
    user_id: Optional[int] = None
    role = "agency"


@dataclass(frozen=True)
class EmployeeActor:
    id: int
    user_id: Optional[int] = None
    role = "employee"


@dataclass(frozen=True)
class AdminActor:
    id: int
    user_id: Optional[int] = None
    role = "admin"


Actor = Union[ClientActor, AgencyActor, EmployeeActor, AdminActor]

ACTOR_TYPES = {
    "client": ClientActor,
    "agency": AgencyActor,
    "employee": EmployeeActor,
    "admin": AdminActor,
}

# Roles with review-desk capability. Admin is a superset of employee.
REVIEWER_TYPES = (EmployeeActor, AdminActor)


def build_actor(role: str, actor_id, user_id: Optional[int] = None) -> Actor:
    """
    Build an actor from a raw (role, id) pair handed over by an identity layer.
    """
    role_norm = normalize_role(role)
    cls = ACTOR_TYPES.get(role_norm)
    if cls is None:
        raise ValidationError(f"Unknown actor role: {role}", field="role")
    try:
        pk = int(str(actor_id).strip())
    except (TypeError, ValueError):
        raise ValidationError("Actor id must be an integer.", field="actor_id")
    return cls(id=pk, user_id=user_id)


def resolve_actor(user) -> Optional[Actor]:
    """
    Resolve an authenticated Django user to an actor.

    Priority:
      1) superuser -> Admin
      2) employee profile (active only)
      3) client profile
      4) agency profile

    Returns None when the user has no marketplace identity.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None

    if getattr(user, "is_superuser", False):
        return AdminActor(id=user.pk, user_id=user.pk)

    employee = getattr(user, "employee_profile", None)
    if employee is not None and employee.is_active:
        return EmployeeActor(id=employee.pk, user_id=user.pk)

    client = getattr(user, "client_profile", None)
    if client is not None:
        return ClientActor(id=client.pk, user_id=user.pk)

    agency = getattr(user, "agency_profile", None)
    if agency is not None:
        return AgencyActor(id=agency.pk, user_id=user.pk)

    return None


__all__ = [
    "Actor",
    "ClientActor",
    "AgencyActor",
    "EmployeeActor",
    "AdminActor",
    "REVIEWER_TYPES",
    "build_actor",
    "resolve_actor",
]
