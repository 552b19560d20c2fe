# market_core/views_workflow_introspection.py

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from market_core import selectors
from market_core.permissions import HasMarketplaceIdentity, current_actor
from market_core.serializers import WorkflowEventSerializer
from market_core.services.applications import get_application
from market_core.workflows import workflow_definition
from market_core.workflows.authorizer import actions_for_actor
from market_core.models import Advertisement


class WorkflowDefinitionView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Workflows"])
    def get(self, request):
        return Response(workflow_definition())


class ApplicationAllowedActionsView(APIView):
    """
    Actions the caller may take on this application right now.
    """

    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Workflows"])
    def get(self, request, pk: int):
        actor = current_actor(request)
        application = get_application(pk)
        advertisement = Advertisement.objects.filter(pk=application.advertisement_id).first()

        return Response(
            {
                "application_id": application.pk,
                "current_status": application.status,
                "actor": {"role": actor.role, "id": actor.id},
                "allowed_actions": actions_for_actor(actor, application, advertisement),
            }
        )


class ApplicationHistoryView(APIView):
    permission_classes = [HasMarketplaceIdentity]

    @extend_schema(tags=["Workflows"])
    def get(self, request, pk: int):
        current_actor(request)
        application = get_application(pk)

        events = selectors.application_history(application.pk).select_related("performed_by")
        return Response(
            {
                "application_id": application.pk,
                "current_status": application.status,
                "history": WorkflowEventSerializer(events, many=True).data,
            }
        )
