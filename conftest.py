"""
Global pytest configuration and fixtures
"""

import pytest


@pytest.fixture
def api_client():
    """Unauthenticated DRF client; the calculation endpoints carry no auth"""
    from rest_framework.test import APIClient

    return APIClient()
