# market_core/urls.py

from django.urls import path

from .views import AdminAnalyticsView, HealthCheckView

# -------------------------------------------------
# Application workflow
# -------------------------------------------------
from .views_applications import (
    AdvertisementApplicationsView,
    AgencyApplicationsView,
    AllApplicationsView,
    ApplicationDetailView,
    ApplicationSubmitView,
    ClientApplicationsView,
    ClientReviewView,
    EmployeeReviewView,
    EmployeeStatsView,
    PendingApplicationsView,
)

# -------------------------------------------------
# Advertisements
# -------------------------------------------------
from .views_advertisements import (
    AdvertisementCreateView,
    AdvertisementDetailView,
    AdvertisementStatusView,
)

# -------------------------------------------------
# Introspection
# -------------------------------------------------
from .views_workflow_introspection import (
    ApplicationAllowedActionsView,
    ApplicationHistoryView,
    WorkflowDefinitionView,
)

app_name = "market_core"

urlpatterns = [
    path("health/", HealthCheckView.as_view(), name="health_check"),

    # Applications
    path("applications/", ApplicationSubmitView.as_view(), name="application-submit"),
    path("applications/agency/", AgencyApplicationsView.as_view(), name="applications-agency"),
    path("applications/client/", ClientApplicationsView.as_view(), name="applications-client"),
    path("applications/pending/", PendingApplicationsView.as_view(), name="applications-pending"),
    path("applications/all/", AllApplicationsView.as_view(), name="applications-all"),
    path(
        "applications/advertisement/<int:advertisement_id>/",
        AdvertisementApplicationsView.as_view(),
        name="applications-by-advertisement",
    ),
    path("applications/<int:pk>/", ApplicationDetailView.as_view(), name="application-detail"),
    path("applications/<int:pk>/employee-review/", EmployeeReviewView.as_view(), name="application-employee-review"),
    path("applications/<int:pk>/client-review/", ClientReviewView.as_view(), name="application-client-review"),
    path("applications/<int:pk>/allowed/", ApplicationAllowedActionsView.as_view(), name="application-allowed"),
    path("applications/<int:pk>/history/", ApplicationHistoryView.as_view(), name="application-history"),

    # Workflow metadata
    path("workflows/application/", WorkflowDefinitionView.as_view(), name="workflow-definition"),

    # Employee desk
    path("employee/stats/", EmployeeStatsView.as_view(), name="employee-stats"),

    # Admin dashboard
    path("admin/analytics/", AdminAnalyticsView.as_view(), name="admin-analytics"),

    # Advertisements
    path("advertisements/", AdvertisementCreateView.as_view(), name="advertisement-create"),
    path("advertisements/<int:pk>/", AdvertisementDetailView.as_view(), name="advertisement-detail"),
    path("advertisements/<int:pk>/status/", AdvertisementStatusView.as_view(), name="advertisement-status"),
]
