# market_core/admin.py

from django.contrib import admin

from .models import (
    Advertisement,
    Agency,
    Application,
    AuditLog,
    Client,
    Employee,
    WorkflowEvent,
)


# =============================================================
# Profiles
# =============================================================

@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("fullname", "company", "email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("fullname", "company", "email", "user__username")


@admin.register(Agency)
class AgencyAdmin(admin.ModelAdmin):
    list_display = ("agency_name", "fullname", "email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("agency_name", "fullname", "email", "user__username")


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("full_name", "department", "position", "is_active")
    list_filter = ("is_active", "department")
    search_fields = ("full_name", "email", "user__username")


# =============================================================
# Advertisements / applications
# =============================================================

@admin.register(Advertisement)
class AdvertisementAdmin(admin.ModelAdmin):
    list_display = ("product_name", "client", "category", "budget", "status", "created_at")
    list_filter = ("status", "category", "campaign_duration")
    search_fields = ("product_name", "client__company")


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    """
    Workflow fields are shown but never edited here; status moves only
    through the workflow service.
    """

    list_display = ("id", "advertisement_id", "agency", "status", "budget", "created_at")
    list_filter = ("status",)
    search_fields = ("agency__agency_name", "message")
    readonly_fields = ("status", "employee_review", "client_review", "created_at", "updated_at")
    raw_id_fields = ("advertisement", "agency")


# =============================================================
# Workflow events (READ-ONLY AUDIT LOG)
# =============================================================

@admin.register(WorkflowEvent)
class WorkflowEventAdmin(admin.ModelAdmin):
    list_display = (
        "kind",
        "object_id",
        "action",
        "from_status",
        "to_status",
        "actor_role",
        "actor_id",
        "performed_by",
        "created_at",
    )
    list_filter = ("kind", "action", "from_status", "to_status")
    search_fields = ("object_id", "performed_by__username")
    ordering = ("-created_at",)

    readonly_fields = [f.name for f in WorkflowEvent._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "user", "created_at")
    search_fields = ("action", "user__username")
    readonly_fields = ("user", "action", "details", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False
