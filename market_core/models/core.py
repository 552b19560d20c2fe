# market_core/models/core.py

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from market_core.workflows import (
    ADVERTISEMENT_INITIAL_STATE,
    ADVERTISEMENT_STATES,
    APPLICATION_STATES,
    INITIAL_STATE,
)
from market_core.workflows.guards import WorkflowWriteGuardMixin


# ============================================================
# Base
# ============================================================
class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ============================================================
# Client (advertiser)
# ============================================================
class Client(TimeStampedModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="client_profile",
    )
    fullname = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    company = models.CharField(max_length=50)
    phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.fullname} ({self.company})"


# ============================================================
# Agency
# ============================================================
class Agency(TimeStampedModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="agency_profile",
    )
    fullname = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    agency_name = models.CharField(max_length=50)
    phone = models.CharField(max_length=20, blank=True)
    address = models.CharField(max_length=100, blank=True)
    website = models.URLField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name_plural = "agencies"

    def __str__(self):
        return self.agency_name


# ============================================================
# Employee (review desk)
# ============================================================
class Employee(TimeStampedModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="employee_profile",
    )
    full_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    department = models.CharField(max_length=100, blank=True)
    position = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.full_name


# ============================================================
# Advertisement
# ============================================================
class Advertisement(TimeStampedModel):
    CAMPAIGN_DURATIONS = [
        ("1 week", "1 week"),
        ("2 weeks", "2 weeks"),
        ("1 month", "1 month"),
        ("3 months", "3 months"),
        ("6 months", "6 months"),
        ("1 year", "1 year"),
    ]

    CATEGORIES = [
        (c, c.capitalize())
        for c in (
            "fashion",
            "electronics",
            "health",
            "food",
            "travel",
            "beauty",
            "home",
            "sports",
            "education",
            "finance",
            "automotive",
            "other",
        )
    ]

    STATUSES = [(s, s.capitalize()) for s in ADVERTISEMENT_STATES]

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        related_name="advertisements",
    )
    product_name = models.CharField(max_length=100)
    product_description = models.TextField(max_length=1000)
    target_audience = models.CharField(max_length=200, blank=True)
    budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    campaign_duration = models.CharField(max_length=20, choices=CAMPAIGN_DURATIONS)
    category = models.CharField(max_length=20, choices=CATEGORIES)
    key_features = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUSES,
        default=ADVERTISEMENT_INITIAL_STATE,
    )

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["client", "status"], name="ad_client_status_idx"),
        ]

    def __str__(self):
        return self.product_name


# ============================================================
# Application
# ============================================================
class Application(WorkflowWriteGuardMixin, TimeStampedModel):
    WORKFLOW_FIELDS = ("status", "employee_review", "client_review")

    STATUSES = [(s, s.replace("_", " ").capitalize()) for s in APPLICATION_STATES]

    # Document-style reference: deleting an advertisement leaves its
    # applications in place, and resolving the reference may fail.
    advertisement = models.ForeignKey(
        Advertisement,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="applications",
    )
    agency = models.ForeignKey(
        Agency,
        on_delete=models.CASCADE,
        related_name="applications",
    )

    message = models.TextField(max_length=1000, blank=True)
    proposal = models.TextField(max_length=2000, blank=True)
    budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    timeline = models.CharField(max_length=255, blank=True)
    portfolio = models.JSONField(default=list, blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUSES,
        default=INITIAL_STATE,
        editable=False,
    )
    employee_review = models.JSONField(null=True, blank=True, editable=False)
    client_review = models.JSONField(null=True, blank=True, editable=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="app_status_idx"),
            models.Index(fields=["agency", "status"], name="app_agency_status_idx"),
            models.Index(fields=["advertisement", "status"], name="app_ad_status_idx"),
        ]

    def __str__(self):
        return f"Application {self.pk} ({self.status})"


# ============================================================
# Audit Log
# ============================================================
class AuditLog(TimeStampedModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    action = models.CharField(max_length=255)
    details = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.action
