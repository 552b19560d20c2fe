# market_core/middleware.py

from django.contrib.auth.models import AnonymousUser
from django.utils.deprecation import MiddlewareMixin

from .signals import set_current_user


class CurrentUserMiddleware(MiddlewareMixin):
    """
    Makes request.user available to model signals.

    Session users are visible here. Token users are only known once DRF
    authenticates them, so the API permission class sets them again.
    Must tolerate unauthenticated requests.
    """

    def process_request(self, request):
        user = getattr(request, "user", None)

        if user is None or isinstance(user, AnonymousUser):
            set_current_user(None)
        else:
            set_current_user(user)

        return None

    def process_response(self, request, response):
        set_current_user(None)
        return response
