# market_core/apps.py

from django.apps import AppConfig


class MarketCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "market_core"
    verbose_name = "Ad marketplace"

    def ready(self):
        from . import signals  # noqa
