# market_core/filters.py
import django_filters as df

from .models import Application
from .workflows import APPLICATION_STATES
from .workflows.errors import ValidationError


class ApplicationFilter(df.FilterSet):
    status = df.ChoiceFilter(
        field_name="status",
        choices=[(s, s) for s in APPLICATION_STATES],
    )
    advertisement = df.NumberFilter(field_name="advertisement_id")
    agency = df.NumberFilter(field_name="agency_id")
    created_after = df.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = df.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Application
        fields = ["status", "advertisement", "agency"]


def filter_applications(queryset, query_params):
    """
    Narrow an already role-scoped queryset by the request's query string.
    """
    filterset = ApplicationFilter(query_params, queryset=queryset)
    if not filterset.is_valid():
        errors = filterset.errors
        name = sorted(errors)[0]
        raise ValidationError(f"{name}: {' '.join(errors[name])}", field=name)
    return filterset.qs
