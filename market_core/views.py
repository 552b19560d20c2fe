# market_core/views.py

from collections.abc import Mapping

from django.db import connection
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from market_core import selectors
from market_core.permissions import HasMarketplaceIdentity, current_actor
from market_core.workflows.errors import ValidationError


def request_body(request) -> Mapping:
    """
    The parsed request body. Anything other than a JSON object is rejected.
    """
    data = request.data
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be an object.")
    return data


# ===============================================================
# Health
# ===============================================================
class HealthCheckView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["System"])
    def get(self, request):
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return Response({"status": "ok", "service": "AdMarket"})


# ===============================================================
# Admin
# ===============================================================
class AdminAnalyticsView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Admin"])
    def get(self, request):
        return Response(selectors.admin_analytics(current_actor(request)))
