"""
Bulk seeding of the catalog, stock and disease protocols.

Each import validates the whole batch first, then writes it inside one
transaction.  Rows that already exist are skipped so re-running an
import file is harmless.
"""
import logging
from typing import Any

from django.db import transaction
from rest_framework import serializers

from facility.exceptions import BusinessRuleViolation
from facility.models import Disease, Inventory, Medicine
from facility.services import diseases as disease_service

logger = logging.getLogger(__name__)

MEDICINE_FIELDS = ['name', 'form', 'strength', 'unit']
INVENTORY_FIELDS = ['medicineId', 'availableQty']

_expiry_field = serializers.DateTimeField(input_formats=['iso-8601', '%Y-%m-%d'])


def _expect_list(items: Any, what: str) -> list:
    if not isinstance(items, list):
        raise BusinessRuleViolation(f'Expected an array of {what}')
    return items


def _invalid(index: int, required: list, received: Any) -> BusinessRuleViolation:
    return BusinessRuleViolation(
        f'Invalid item at index {index}', required=required, received=received
    )


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ''


def _parse_expiry(raw: Any):
    if _blank(raw):
        return None
    try:
        return _expiry_field.to_internal_value(raw)
    except serializers.ValidationError:
        logger.info('unparseable expiryDate %r imported as empty', raw)
        return None


def import_medicines(items: Any) -> dict:
    items = _expect_list(items, 'medicines')
    rows = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or any(_blank(item.get(f)) for f in MEDICINE_FIELDS):
            raise _invalid(i, MEDICINE_FIELDS, item)
        # client-side ids are ignored
        rows.append({f: str(item[f]).strip() for f in MEDICINE_FIELDS})

    created = 0
    with transaction.atomic():
        # Catalog rows are not unique, so test for any match rather than get()
        for row in rows:
            if not Medicine.objects.filter(**row).exists():
                Medicine.objects.create(**row)
                created += 1
    logger.info('bulk medicines: %d created, %d skipped', created, len(rows) - created)
    return {'message': f'Successfully created {created} medicines', 'count': created}


def import_inventory(items: Any) -> dict:
    items = _expect_list(items, 'inventory items')
    rows = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise _invalid(i, INVENTORY_FIELDS, item)
        try:
            medicine_id = int(item.get('medicineId'))
            qty = int(item.get('availableQty'))
        except (TypeError, ValueError):
            raise _invalid(i, INVENTORY_FIELDS, item)
        if medicine_id <= 0 or qty < 0:
            raise _invalid(i, INVENTORY_FIELDS, item)
        batch = item.get('batchNumber')
        rows.append(Inventory(
            medicine_id=medicine_id,
            available_qty=qty,
            batch_number=str(batch).strip() if not _blank(batch) else None,
            expiry_date=_parse_expiry(item.get('expiryDate')),
        ))

    wanted = {row.medicine_id for row in rows}
    known = set(Medicine.objects.filter(id__in=wanted).values_list('id', flat=True))
    if wanted - known:
        raise BusinessRuleViolation('Unknown medicineId', missing=sorted(wanted - known))

    with transaction.atomic():
        # Created row by row so post_save hooks fire
        for row in rows:
            row.save()
    logger.info('bulk inventory: %d created', len(rows))
    return {'message': f'Successfully created {len(rows)} inventory items', 'count': len(rows)}


def import_disease_names(items: Any) -> dict:
    items = _expect_list(items, 'diseases')
    names = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or _blank(item.get('name')):
            raise _invalid(i, ['name'], item)
        names.append(str(item['name']).strip())

    created = 0
    with transaction.atomic():
        for name in dict.fromkeys(names):
            _obj, was_created = Disease.objects.get_or_create(name=name)
            created += int(was_created)
    logger.info('bulk diseases: %d created, %d skipped', created, len(names) - created)
    return {'message': f'Successfully created {created} diseases', 'count': created}


def import_disease_trees(items: Any) -> dict:
    items = _expect_list(items, 'diseases')
    payloads = []
    for i, item in enumerate(items):
        try:
            payloads.append(disease_service.parse_disease_payload(item, lenient=True))
        except BusinessRuleViolation as e:
            raise BusinessRuleViolation(
                f'Invalid item at index {i}: {e.detail}',
                required=['name', 'subcategories'],
                received=item,
            )

    existing = set(Disease.objects.filter(name__in=[p.name for p in payloads]).values_list('name', flat=True))
    created = []
    with transaction.atomic():
        for payload in payloads:
            if payload.name in existing:
                continue
            created.append(disease_service.create_disease(payload))
            existing.add(payload.name)
    logger.info('bulk disease trees: %d created, %d skipped', len(created), len(payloads) - len(created))
    return {
        'message': f'Successfully created {len(created)} diseases',
        'count': len(created),
        'diseases': created,
    }
