from datetime import timedelta

import pytest
from django.core.cache import cache
from django.core.management import call_command
from django.db import transaction
from django.db.models import ProtectedError
from django.utils import timezone

from facility import signals
from facility.exceptions import BusinessRuleViolation, api_exception_handler
from facility.models import AgeGroup, Bed, Department, Disease, Inventory, Medicine, Staff, User
from facility.services import inventory as inventory_service
from facility.services.diseases import normalize_group, parse_medicine_id
from facility.services.stats import STATS_CACHE_KEY

pytestmark = pytest.mark.django_db


def test_stock_status_precedence():
    now = timezone.now()
    item = Inventory(available_qty=2, expiry_date=now - timedelta(days=1))
    assert inventory_service.stock_status(item, now=now) == 'Expired'
    item.expiry_date = now + timedelta(days=30)
    assert inventory_service.stock_status(item, now=now) == 'Expiring Soon'
    item.expiry_date = now + timedelta(days=31)
    assert inventory_service.stock_status(item, now=now) == 'Low Stock'
    item.available_qty = 11
    assert inventory_service.stock_status(item, now=now) == 'Good'


def test_parse_medicine_id():
    assert parse_medicine_id('12') == 12
    assert parse_medicine_id(7) == 7
    for bad in ('0', 'x', -1, True, None, 1.5):
        with pytest.raises(BusinessRuleViolation):
            parse_medicine_id(bad)


def test_normalize_group():
    assert normalize_group(' older ') == AgeGroup.OLDER
    assert normalize_group('toddler', lenient=True) == AgeGroup.ADULT
    with pytest.raises(BusinessRuleViolation):
        normalize_group('toddler')


def test_protected_error_maps_to_reference_in_use():
    resp = api_exception_handler(ProtectedError('in use', set()), {})
    assert resp.status_code == 400
    assert resp.data['ok'] is False
    assert resp.data['error']['code'] == 'reference_in_use'


def test_unhandled_error_becomes_server_error():
    resp = api_exception_handler(RuntimeError('boom'), {'view': None})
    assert resp.status_code == 500
    assert resp.data == {'ok': False, 'error': {'code': 'server_error', 'message': 'boom'}}


def test_changes_broadcast_once_per_commit(monkeypatch, django_capture_on_commit_callbacks):
    sent = []
    monkeypatch.setattr(signals, 'broadcast_refresh', lambda keys: sent.append(set(keys)))
    signals._pending.batch = None
    with django_capture_on_commit_callbacks(execute=True):
        dept = Department.objects.create(name='Emergency')
        Bed.objects.create(type='ICU', department=dept)
        Bed.objects.create(type='General', department=dept)
    assert sent == [{'departments', 'beds'}]


def test_rolled_back_changes_are_not_broadcast(monkeypatch, django_capture_on_commit_callbacks):
    sent = []
    monkeypatch.setattr(signals, 'broadcast_refresh', lambda keys: sent.append(set(keys)))
    signals._pending.batch = None
    with pytest.raises(RuntimeError):
        with transaction.atomic():
            Department.objects.create(name='Lost')
            raise RuntimeError('abort')
    with django_capture_on_commit_callbacks(execute=True):
        Medicine.objects.create(name='ORS', form='Powder', strength='21g', unit='sachet')
    assert sent == [{'medicines'}]


def test_stats_dropped_again_on_commit(monkeypatch, django_capture_on_commit_callbacks):
    monkeypatch.setattr(signals, 'broadcast_refresh', lambda keys: None)
    signals._pending.batch = None
    with django_capture_on_commit_callbacks(execute=True):
        dept = Department.objects.create(name='Emergency')
        Bed.objects.create(type='ICU', department=dept)
        # a read before commit caches counters without the new bed
        cache.set(STATS_CACHE_KEY, {'beds': {'total': 0}})
    assert cache.get(STATS_CACHE_KEY) is None


def test_department_with_staff_cannot_be_deleted_directly():
    dept = Department.objects.create(name='Emergency')
    Staff.objects.create(name='Dr. Rao', specialization='Surgeon', department=dept)
    Staff.objects.create(name='Anita', specialization='Nurse')
    with pytest.raises(ProtectedError):
        dept.delete()
    assert Staff.objects.filter(department=dept).count() == 1


def test_seed_data_is_idempotent():
    call_command('seed_data')
    counts = (Department.objects.count(), Bed.objects.count(), Staff.objects.count(),
              Medicine.objects.count(), Inventory.objects.count(), Disease.objects.count())
    call_command('seed_data')
    assert counts == (Department.objects.count(), Bed.objects.count(), Staff.objects.count(),
                      Medicine.objects.count(), Inventory.objects.count(), Disease.objects.count())
    assert Disease.objects.filter(name='Dengue Fever').exists()
    # nurses never carry a department
    assert not Staff.objects.filter(specialization__iexact='nurse', department__isnull=False).exists()


def test_ensure_manager_creates_and_resets():
    call_command('ensure_manager', 'ops', password='first-pass-1')
    user = User.objects.get(username='ops')
    assert user.role == 'manager' and user.check_password('first-pass-1')
    call_command('ensure_manager', 'ops', password='second-pass-2', role='admin')
    user.refresh_from_db()
    assert user.role == 'admin' and user.check_password('second-pass-2')
    assert User.objects.filter(username='ops').count() == 1


def test_refresh_caches_warms_stats():
    call_command('refresh_caches')
    assert cache.get(STATS_CACHE_KEY)['beds']['total'] == 0
