"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from django.core.cache import cache

from tenant.managers import set_current_tenant

# Re-export shared fixtures so every app's tests can use them
from core_backend.tests.fixtures import *  # noqa: F401,F403


def pytest_configure(config):
    config.addinivalue_line("markers", "api: HTTP-level tests through the DRF test client")
    config.addinivalue_line("markers", "concurrency: tests exercising concurrent status updates")
    config.addinivalue_line("markers", "websocket: Channels consumer tests")


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_tenant_context():
    """
    Reset tenant context after each test.

    CRITICAL: This prevents tenant context from leaking between tests.
    If tenant context leaks, tests may pass when they should fail.
    """
    yield  # Run the test

    # After test: ALWAYS reset to None
    set_current_tenant(None)


@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test to prevent cache pollution.

    Rate limit counters are stored in the cache.
    """
    yield  # Run the test
    cache.clear()  # Clear all cache keys


@pytest.fixture(autouse=True)
def reset_service_factories():
    """Drop process-wide service singletons so patched settings take effect."""
    from orders.factories import get_lifecycle_service, get_order_notifier
    from payments.factories import get_checkout_service, get_payment_gateway

    yield
    for factory in (get_order_notifier, get_lifecycle_service, get_payment_gateway, get_checkout_service):
        factory.cache_clear()


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def owner_client_tenant_a(owner_user_tenant_a):
    """Authenticated API client for tenant A's owner."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=owner_user_tenant_a)
    return client


@pytest.fixture
def staff_client_tenant_a(staff_user_tenant_a):
    """Authenticated API client for a STAFF-role user of tenant A."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=staff_user_tenant_a)
    return client


@pytest.fixture
def owner_client_tenant_b(owner_user_tenant_b):
    """
    Authenticated API client for tenant B.

    Usage:
        def test_tenant_isolation(owner_client_tenant_b, new_order_a):
            response = owner_client_tenant_b.get(f'/api/orders/{new_order_a.id}/')
            assert response.status_code == 404
    """
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=owner_user_tenant_b)
    return client
