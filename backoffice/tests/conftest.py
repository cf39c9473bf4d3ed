import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters and cached payloads live in the cache
    cache.clear()
    yield
    cache.clear()
