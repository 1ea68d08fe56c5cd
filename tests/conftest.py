# tests/conftest.py

import pytest

from app.core.middleware.rate_limiter import limiter


# Route-level slowapi limits would otherwise leak between tests
@pytest.fixture(autouse=True)
def disable_route_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True
