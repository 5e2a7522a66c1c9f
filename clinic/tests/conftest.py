import pytest
from django.core.cache import cache

from .factories import make_account


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_account(db):
    return make_account('admin', 'admin@wellness.com', name='Ada Admin')


@pytest.fixture
def doctor(db):
    return make_account('doctor', 'house@wellness.com', name='Gregory House', specialization='Diagnostics')


@pytest.fixture
def patient(db):
    return make_account('patient', 'jane@example.com', name='Jane Q Public', gender='female')
