import pytest


@pytest.fixture(autouse=True)
def _relax_https_settings(settings):
    # Test requests are plain http://testserver
    settings.SECURE_SSL_REDIRECT = False
    settings.SESSION_COOKIE_SECURE = False
    settings.CSRF_COOKIE_SECURE = False
    settings.SECURE_HSTS_SECONDS = 0


@pytest.fixture(autouse=True)
def _reset_current_user():
    from market_core.signals import set_current_user

    set_current_user(None)
    yield
    set_current_user(None)
