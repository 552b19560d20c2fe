# market_core/permissions.py
from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

from .signals import set_current_user
from .workflows.actors import Actor, resolve_actor
from .workflows.errors import AuthorizationError


# ------------------------------------------------------------------
# Utilities
# ------------------------------------------------------------------
def optional_actor(request) -> Optional[Actor]:
    """
    Resolve the caller's actor, or None for anonymous users and users
    without a marketplace profile.
    """
    actor = getattr(request, "actor", None)
    if actor is not None:
        return actor

    user = getattr(request, "user", None)
    actor = resolve_actor(user)
    request.actor = actor

    # Token authentication happens after middleware has run.
    if user is not None and getattr(user, "is_authenticated", False):
        set_current_user(user)
    return actor


def current_actor(request) -> Actor:
    actor = optional_actor(request)
    if actor is None:
        raise AuthorizationError("No marketplace identity is linked to this account.")
    return actor


# ------------------------------------------------------------------
# Permission class
# ------------------------------------------------------------------
class HasMarketplaceIdentity(BasePermission):
    """
    Authenticated user bound to a Client, Agency or Employee profile, or a
    superuser. Anonymous requests get DRF's 401; authenticated users with no
    profile get 403.

    Sets `request.actor` for the view.
    """

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False

        current_actor(request)
        return True
