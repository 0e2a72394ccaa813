import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from facility.models import Department, Medicine


@pytest.fixture(autouse=True)
def _clear_cache():
    # stats and throttle history live in the locmem cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api():
    return APIClient()


@pytest.fixture
def department(db):
    return Department.objects.create(name='Emergency')


@pytest.fixture
def paracetamol(db):
    return Medicine.objects.create(name='Paracetamol', form='Tablet', strength='500mg', unit='mg')


@pytest.fixture
def ors(db):
    return Medicine.objects.create(name='ORS', form='Powder', strength='21g', unit='sachet')
