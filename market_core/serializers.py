from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.core.exceptions import ObjectDoesNotExist
from rest_framework import serializers

from .models import Advertisement, Agency, Application, Client, WorkflowEvent
from .workflows import allowed_actions


# ===============================================================
# Profiles (embedded summaries)
# ===============================================================

class ClientSlimSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ("id", "fullname", "email", "company")
        read_only_fields = fields


class AgencySlimSerializer(serializers.ModelSerializer):
    class Meta:
        model = Agency
        fields = ("id", "fullname", "email", "agency_name", "phone", "website")
        read_only_fields = fields


# ===============================================================
# Advertisement
# ===============================================================

class AdvertisementSerializer(serializers.ModelSerializer):
    client = ClientSlimSerializer(read_only=True)

    class Meta:
        model = Advertisement
        fields = (
            "id",
            "client",
            "product_name",
            "product_description",
            "target_audience",
            "budget",
            "campaign_duration",
            "category",
            "key_features",
            "status",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class AdvertisementCreateSerializer(serializers.ModelSerializer):
    """
    Input shape for a new advertisement. Owner and status are never taken
    from the request.
    """

    key_features = serializers.ListField(
        child=serializers.CharField(max_length=200),
        required=False,
    )

    class Meta:
        model = Advertisement
        fields = (
            "product_name",
            "product_description",
            "target_audience",
            "budget",
            "campaign_duration",
            "category",
            "key_features",
        )


class AdvertisementSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Advertisement
        fields = ("id", "product_name", "category", "budget", "status", "client_id")
        read_only_fields = fields


# ===============================================================
# Application
# ===============================================================

class ApplicationSerializer(serializers.ModelSerializer):
    agency = AgencySlimSerializer(read_only=True)
    advertisement = serializers.SerializerMethodField()
    advertisement_id = serializers.IntegerField(read_only=True)
    allowed_actions = serializers.SerializerMethodField()

    class Meta:
        model = Application
        fields = (
            "id",
            "advertisement_id",
            "advertisement",
            "agency",
            "message",
            "proposal",
            "budget",
            "timeline",
            "portfolio",
            "status",
            "employee_review",
            "client_review",
            "allowed_actions",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_advertisement(self, obj: Application) -> Optional[Dict[str, Any]]:
        # The advertisement may have been deleted underneath the application.
        try:
            advertisement = obj.advertisement
        except ObjectDoesNotExist:
            return None
        if advertisement is None:
            return None
        return AdvertisementSummarySerializer(advertisement).data

    def get_allowed_actions(self, obj: Application) -> List[str]:
        return allowed_actions(obj.status)


class WorkflowEventSerializer(serializers.ModelSerializer):
    performed_by = serializers.CharField(source="performed_by.username", default=None, read_only=True)

    class Meta:
        model = WorkflowEvent
        fields = (
            "id",
            "kind",
            "object_id",
            "action",
            "from_status",
            "to_status",
            "actor_role",
            "actor_id",
            "performed_by",
            "comment",
            "created_at",
        )
        read_only_fields = fields
