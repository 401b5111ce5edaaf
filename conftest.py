import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_option_cache():
    """Options are cached; the test database is rolled back but the cache is not."""
    cache.clear()
    yield
    cache.clear()
