# market_core/views_advertisements.py

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from market_core.permissions import HasMarketplaceIdentity, current_actor
from market_core.serializers import AdvertisementCreateSerializer, AdvertisementSerializer
from market_core.serializers_workflow import validate_input
from market_core.services import advertisements as service
from market_core.views import request_body
from market_core.workflows.actors import ClientActor
from market_core.workflows.errors import AuthorizationError


class AdvertisementCreateView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(
        tags=["Advertisements"],
        request=AdvertisementCreateSerializer,
        responses={
            201: AdvertisementSerializer,
            400: OpenApiResponse(description="Invalid advertisement"),
            403: OpenApiResponse(description="Only clients create advertisements"),
        },
    )
    def post(self, request):
        actor = current_actor(request)
        if not isinstance(actor, ClientActor):
            raise AuthorizationError("Only clients can create advertisements.")

        data = validate_input(AdvertisementCreateSerializer, request_body(request))
        advertisement = service.create_advertisement(actor=actor, data=data)
        return Response(
            AdvertisementSerializer(advertisement).data,
            status=status.HTTP_201_CREATED,
        )


class AdvertisementDetailView(APIView):
    """
    GET is public. DELETE is for the owning client.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [HasMarketplaceIdentity()]

    @extend_schema(tags=["Advertisements"], responses={200: AdvertisementSerializer})
    def get(self, request, pk: int):
        return Response(AdvertisementSerializer(service.get_advertisement(pk)).data)

    @extend_schema(
        tags=["Advertisements"],
        responses={
            204: None,
            403: OpenApiResponse(description="Not the owning client"),
            404: OpenApiResponse(description="Advertisement not found"),
        },
    )
    def delete(self, request, pk: int):
        service.delete_advertisement(actor=current_actor(request), advertisement_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdvertisementStatusView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(
        tags=["Advertisements"],
        responses={
            200: AdvertisementSerializer,
            400: OpenApiResponse(description="Invalid status"),
            403: OpenApiResponse(description="Not the owning client"),
            404: OpenApiResponse(description="Advertisement not found"),
        },
    )
    def patch(self, request, pk: int):
        data = request_body(request)
        advertisement = service.change_advertisement_status(
            actor=current_actor(request),
            advertisement_id=pk,
            new_status=data.get("status"),
        )
        return Response(AdvertisementSerializer(advertisement).data)
