# market_core/views_applications.py
"""
HTTP surface for the application workflow.

Views parse the request, resolve the actor and delegate to the services.
State is never written here.
"""

from __future__ import annotations

from collections.abc import Mapping

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from market_core import selectors
from market_core.filters import filter_applications
from market_core.permissions import HasMarketplaceIdentity, current_actor
from market_core.serializers import ApplicationSerializer
from market_core.services import applications as service
from market_core.views import request_body
from market_core.workflows.errors import ValidationError


ERROR_RESPONSES = {
    400: OpenApiResponse(description="Validation error or illegal transition"),
    403: OpenApiResponse(description="Not authorized"),
    404: OpenApiResponse(description="Application or advertisement not found"),
    409: OpenApiResponse(description="Stale status"),
}


# ===============================================================
# Helpers
# ===============================================================

def _expected_status(data: Mapping):
    for key in ("expected_status", "expectedStatus"):
        if key in data:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValidationError("'expected_status' must be a string.", field="expected_status")
            return value
    return None


def _list_response(request, queryset):
    queryset = filter_applications(queryset, request.query_params)
    return Response(ApplicationSerializer(queryset, many=True).data)


# ===============================================================
# Submission
# ===============================================================

class ApplicationSubmitView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Applications"], responses={201: ApplicationSerializer, **ERROR_RESPONSES})
    def post(self, request):
        data = request_body(request)
        advertisement_id = None
        for key in ("advertisement", "advertisement_id", "advertisementId"):
            if data.get(key) not in (None, ""):
                advertisement_id = data.get(key)
                break

        application = service.submit_application(
            actor=current_actor(request),
            advertisement_id=advertisement_id,
            content=data,
        )
        return Response(
            ApplicationSerializer(application).data,
            status=status.HTTP_201_CREATED,
        )


# ===============================================================
# Role-scoped lists
# ===============================================================

class AgencyApplicationsView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer(many=True)})
    def get(self, request):
        return _list_response(request, selectors.applications_for_agency(current_actor(request)))


class ClientApplicationsView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer(many=True)})
    def get(self, request):
        return _list_response(request, selectors.applications_for_client(current_actor(request)))


class PendingApplicationsView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer(many=True)})
    def get(self, request):
        return _list_response(request, selectors.pending_employee_review(current_actor(request)))


class AllApplicationsView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer(many=True)})
    def get(self, request):
        return _list_response(request, selectors.all_applications(current_actor(request)))


class AdvertisementApplicationsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer(many=True)})
    def get(self, request, advertisement_id: int):
        return _list_response(request, selectors.applications_for_advertisement(advertisement_id))


# ===============================================================
# Single application
# ===============================================================

class ApplicationDetailView(APIView):
    """
    GET is public. PATCH is the legacy direct status write. DELETE is for
    the owning agency.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [HasMarketplaceIdentity()]

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer, 404: ERROR_RESPONSES[404]})
    def get(self, request, pk: int):
        return Response(ApplicationSerializer(selectors.application_detail(pk)).data)

    @extend_schema(tags=["Applications"], responses={200: ApplicationSerializer, **ERROR_RESPONSES})
    def patch(self, request, pk: int):
        data = request_body(request)
        application = service.legacy_status_update(
            actor=current_actor(request),
            application_id=pk,
            new_status=data.get("status"),
            expected_status=_expected_status(data),
        )
        return Response(ApplicationSerializer(application).data)

    @extend_schema(tags=["Applications"], responses={204: None, **ERROR_RESPONSES})
    def delete(self, request, pk: int):
        service.delete_application(actor=current_actor(request), application_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ===============================================================
# Reviews
# ===============================================================

class EmployeeReviewView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Reviews"], responses={200: ApplicationSerializer, **ERROR_RESPONSES})
    def post(self, request, pk: int):
        data = request_body(request)
        application = service.employee_review(
            actor=current_actor(request),
            application_id=pk,
            payload=data,
            expected_status=_expected_status(data),
        )
        return Response(ApplicationSerializer(application).data)


class ClientReviewView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Reviews"], responses={200: ApplicationSerializer, **ERROR_RESPONSES})
    def post(self, request, pk: int):
        data = request_body(request)
        application = service.client_review(
            actor=current_actor(request),
            application_id=pk,
            payload=data,
            expected_status=_expected_status(data),
        )
        return Response(ApplicationSerializer(application).data)


# ===============================================================
# Stats
# ===============================================================

class EmployeeStatsView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Reviews"])
    def get(self, request):
        return Response(selectors.employee_review_stats(current_actor(request)))
