"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest

from tenant.managers import set_current_tenant


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
    yield
    set_current_tenant(None)


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
def authenticated_client_tenant_a(api_client, cashier_user_tenant_a):
    """
    Provide an API client authenticated as a cashier of tenant A.

    Usage:
        def test_list_orders(authenticated_client_tenant_a, tenant_a):
            response = authenticated_client_tenant_a.get(f'/api/tenants/{tenant_a.slug}/orders/')
            assert response.status_code == 200
    """
    api_client.force_authenticate(user=cashier_user_tenant_a)
    return api_client


@pytest.fixture
def authenticated_client_tenant_b(cashier_user_tenant_b):
    """
    Provide an API client authenticated as a cashier of tenant B.

    A separate client instance, so it can be used alongside tenant A's.
    """
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=cashier_user_tenant_b)
    return client


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *
