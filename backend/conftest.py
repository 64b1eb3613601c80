"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest


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
def client_for():
    """
    Build an APIClient authenticated as the given user.

    Usage:
        def test_protected_endpoint(client_for, waiter_user):
            response = client_for(waiter_user).get('/api/orders/')
    """
    from rest_framework.test import APIClient

    def _make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _make


@pytest.fixture
def waiter_client(client_for, waiter_user):
    return client_for(waiter_user)


@pytest.fixture
def manager_client(client_for, manager_user):
    return client_for(manager_user)


# ============================================================================
# IMPORT ALL FIXTURES FROM restaurant_backend/tests/fixtures.py
# ============================================================================
from restaurant_backend.tests.fixtures import *  # noqa
