# market_core/tests/test_write_guardrails.py

from decimal import Decimal

from django.contrib.auth.models import User
from django.core.exceptions import PermissionDenied
from django.test import TestCase

from market_core.models import Advertisement, Agency, Application, Client


class WorkflowWriteGuardTests(TestCase):
    """
    Workflow fields only move through the workflow services.
    """

    def setUp(self):
        owner = Client.objects.create(
            user=User.objects.create_user(username="owner", password="pass"),
            fullname="Owner",
            email="owner@example.com",
            company="Acme",
        )
        agency = Agency.objects.create(
            user=User.objects.create_user(username="agency", password="pass"),
            fullname="Agent",
            email="agent@example.com",
            agency_name="Bright Ads",
        )
        advertisement = Advertisement.objects.create(
            client=owner,
            product_name="Widget",
            product_description="Widget.",
            budget=Decimal("10.00"),
            campaign_duration="1 week",
            category="other",
        )
        self.application = Application.objects.create(advertisement=advertisement, agency=agency)

    def test_status_cannot_be_saved_directly(self):
        self.application.status = "approved"
        with self.assertRaises(PermissionDenied):
            self.application.save()

        self.assertEqual(Application.objects.get(pk=self.application.pk).status, "employee_review")

    def test_review_records_cannot_be_saved_directly(self):
        self.application.employee_review = {"decision": "approve"}
        with self.assertRaises(PermissionDenied):
            self.application.save()

        self.application.refresh_from_db()
        self.application.client_review = {"decision": "accepted"}
        with self.assertRaises(PermissionDenied):
            self.application.save()

    def test_content_fields_can_still_be_saved(self):
        self.application.message = "Updated pitch"
        self.application.save()
        self.assertEqual(Application.objects.get(pk=self.application.pk).message, "Updated pitch")

    def test_bypass_flag(self):
        self.application.status = "completed"
        self.application.save(_workflow_bypass=True)
        self.assertEqual(Application.objects.get(pk=self.application.pk).status, "completed")
