# market_core/serializers_workflow.py
"""
Input serializers for workflow payloads.

These only validate shape and values. They never load or save records.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping, Type

from rest_framework import serializers

from market_core.workflows import (
    ADVERTISEMENT_STATES,
    APPLICATION_STATES,
    CLIENT_REVIEW_DECISION,
    EMPLOYEE_REVIEW_DECISION,
    QUALITY_GRADES,
    decisions_for,
    normalize_state,
)
from market_core.workflows.errors import InvalidDecision, ValidationError

NOTES_MAX_LENGTH = 1000
FEEDBACK_MAX_LENGTH = 1000
MESSAGE_MAX_LENGTH = 1000
PROPOSAL_MAX_LENGTH = 2000
TIMELINE_MAX_LENGTH = 255

# Legacy camelCase spellings accepted on review payloads.
CAMEL_CASE_ALIASES = {
    "budgetApproved": "budget_approved",
    "proposalQuality": "proposal_quality",
    "portfolioQuality": "portfolio_quality",
}


def normalize_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Plain dict copy of `payload` with camelCase aliases folded into their
    snake_case names. A snake_case key wins when both are present.
    """
    data = {key: payload[key] for key in payload}
    for alias, name in CAMEL_CASE_ALIASES.items():
        if alias in data:
            value = data.pop(alias)
            data.setdefault(name, value)
    return data


class NormalizedChoiceField(serializers.ChoiceField):
    """
    ChoiceField that matches case-insensitively and ignores surrounding
    whitespace.
    """

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = normalize_state(data)
        return super().to_internal_value(data)


def _text_field(max_length: int) -> serializers.CharField:
    return serializers.CharField(
        max_length=max_length,
        allow_blank=True,
        allow_null=True,
        required=False,
        default="",
    )


def _grade_field() -> NormalizedChoiceField:
    return NormalizedChoiceField(
        choices=QUALITY_GRADES,
        allow_blank=True,
        allow_null=True,
        required=False,
        default="fair",
    )


# ===============================================================
# Reviews
# ===============================================================

class EmployeeReviewInputSerializer(serializers.Serializer):
    decision = NormalizedChoiceField(choices=decisions_for(EMPLOYEE_REVIEW_DECISION))
    budget_approved = serializers.BooleanField(required=False, default=False, allow_null=True)
    proposal_quality = _grade_field()
    portfolio_quality = _grade_field()
    notes = _text_field(NOTES_MAX_LENGTH)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        attrs["budget_approved"] = bool(attrs.get("budget_approved"))
        attrs["proposal_quality"] = attrs.get("proposal_quality") or "fair"
        attrs["portfolio_quality"] = attrs.get("portfolio_quality") or "fair"
        attrs["notes"] = attrs.get("notes") or ""
        return attrs


class ClientReviewInputSerializer(serializers.Serializer):
    decision = NormalizedChoiceField(choices=decisions_for(CLIENT_REVIEW_DECISION))
    feedback = _text_field(FEEDBACK_MAX_LENGTH)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        attrs["feedback"] = attrs.get("feedback") or ""
        return attrs


class LegacyStatusInputSerializer(serializers.Serializer):
    status = NormalizedChoiceField(choices=APPLICATION_STATES)


class AdvertisementStatusInputSerializer(serializers.Serializer):
    status = NormalizedChoiceField(choices=ADVERTISEMENT_STATES)


# ===============================================================
# Submission
# ===============================================================

class PortfolioItemSerializer(serializers.Serializer):
    title = _text_field(255)
    description = _text_field(1000)
    url = _text_field(500)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        return {name: attrs.get(name) or "" for name in ("title", "description", "url")}


class ApplicationSubmitSerializer(serializers.Serializer):
    """
    A new application. `advertisement` is the advertisement id; the status
    is never taken from the request.
    """

    advertisement = serializers.IntegerField(min_value=1)
    message = _text_field(MESSAGE_MAX_LENGTH)
    proposal = _text_field(PROPOSAL_MAX_LENGTH)
    # Must fit the model column; oversized values cannot be read back.
    budget = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0"),
        allow_null=True,
        required=False,
        default=None,
    )
    timeline = _text_field(TIMELINE_MAX_LENGTH)
    portfolio = serializers.ListField(
        child=PortfolioItemSerializer(),
        allow_null=True,
        required=False,
        default=list,
    )

    def to_internal_value(self, data):
        if isinstance(data, Mapping) and data.get("budget") == "":
            data = {**data, "budget": None}
        return super().to_internal_value(data)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        for name in ("message", "proposal", "timeline"):
            attrs[name] = attrs.get(name) or ""
        attrs["portfolio"] = [dict(item) for item in (attrs.get("portfolio") or [])]
        return attrs


# ===============================================================
# Validation entry point
# ===============================================================

def _first_message(detail: Any) -> str:
    if isinstance(detail, Mapping):
        for key in detail:
            return _first_message(detail[key])
        return ""
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = _first_message(item)
            if message:
                return message
        return ""
    return str(detail)


def validate_input(serializer_class: Type[serializers.Serializer], payload: Any) -> Dict[str, Any]:
    """
    Run `serializer_class` over a request payload and return its validated
    data. Failures are raised as workflow errors so the API reports them
    with `code` and `field` like every other rejection.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be an object.")

    serializer = serializer_class(data=normalize_keys(payload))
    if serializer.is_valid():
        return dict(serializer.validated_data)

    errors = serializer.errors
    if "decision" in errors and "decision" in serializer.fields:
        choices = " or ".join(serializer.fields["decision"].choices)
        raise InvalidDecision(f"Valid decision is required ({choices}).", field="decision")

    name = sorted(errors)[0]
    message = _first_message(errors[name])
    if name == "non_field_errors":
        raise ValidationError(message)
    raise ValidationError(f"{name}: {message}", field=name)
