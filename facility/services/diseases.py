"""
Disease aggregate: Disease -> Subcategory -> AgeGroup -> PrescribedMedicine.

A treatment protocol is always written as a whole tree.  Creating one
inserts every level; updating one deletes the existing children and
rebuilds them from the payload.  Both run inside a single transaction so
a failing payload never leaves a half-rebuilt protocol behind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from django.db import transaction
from django.db.models import Prefetch, QuerySet

from facility.exceptions import BusinessRuleViolation, DuplicateName
from facility.models import AgeGroup, Disease, Medicine, PrescribedMedicine, Subcategory

logger = logging.getLogger(__name__)

GROUP_VALUES = {value for value, _label in AgeGroup.GROUP_CHOICES}

SEARCH_LOOKUPS = (
    'name',
    'subcategories__name',
    'subcategories__age_groups__group',
    'subcategories__age_groups__prescribed__medicine__name',
)


@dataclass
class PrescriptionInput:
    medicine_id: int
    dosage: str
    notes: str = ''


@dataclass
class AgeGroupInput:
    group: str
    age_range: str
    medicines: list[PrescriptionInput] = field(default_factory=list)


@dataclass
class SubcategoryInput:
    name: str
    age_groups: list[AgeGroupInput] = field(default_factory=list)


@dataclass
class DiseaseInput:
    name: str
    subcategories: list[SubcategoryInput] = field(default_factory=list)

    def medicine_ids(self) -> set[int]:
        return {
            m.medicine_id
            for sc in self.subcategories
            for ag in sc.age_groups
            for m in ag.medicines
        }


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------

def parse_medicine_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise BusinessRuleViolation('Invalid medicineId - must be a valid number greater than 0')
    if isinstance(raw, str):
        try:
            raw = int(raw.strip())
        except ValueError:
            raise BusinessRuleViolation('Invalid medicineId - must be a valid number greater than 0')
    if not isinstance(raw, int) or raw <= 0:
        raise BusinessRuleViolation('Invalid medicineId - must be a valid number greater than 0')
    return raw


def normalize_group(raw: Any, *, lenient: bool = False) -> str:
    """Map ``child`` / ``Child`` / ``CHILD`` to the stored value.

    Bulk imports are lenient and file unknown groups under ``ADULT``;
    interactive edits reject them.
    """
    value = str(raw or '').strip().upper()
    if value in GROUP_VALUES:
        return value
    if lenient:
        logger.info('unknown age group %r imported as ADULT', raw)
        return AgeGroup.ADULT
    raise BusinessRuleViolation(
        f"Invalid age group '{raw}'", allowed=sorted(GROUP_VALUES)
    )


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ''


def parse_disease_payload(body: Any, *, lenient: bool = False) -> DiseaseInput:
    """Validate a protocol payload and return it as dataclasses.

    ``lenient`` (bulk import) tolerates subcategories without age groups
    and age groups without medicines.
    """
    if not isinstance(body, dict):
        raise BusinessRuleViolation('Expected a disease object')
    name = _text(body.get('name'))
    subcategories = body.get('subcategories')
    if not name or not isinstance(subcategories, list) or (not subcategories and not lenient):
        raise BusinessRuleViolation('At least one subcategory is required')

    parsed = DiseaseInput(name=name)
    for sc in subcategories:
        if not isinstance(sc, dict) or not _text(sc.get('name')):
            raise BusinessRuleViolation('Subcategory name is required')
        age_groups = sc.get('age_groups')
        if age_groups is None and lenient:
            age_groups = []
        if not isinstance(age_groups, list) or (not age_groups and not lenient):
            raise BusinessRuleViolation('Each subcategory must have at least one age group')
        sub = SubcategoryInput(name=_text(sc['name']))
        for ag in age_groups:
            if not isinstance(ag, dict) or not ag.get('group') or not _text(ag.get('age_range')):
                raise BusinessRuleViolation("AgeGroup 'group' and 'age_range' are required")
            medicines = ag.get('medicines')
            if medicines is None and lenient:
                medicines = []
            if not isinstance(medicines, list) or (not medicines and not lenient):
                raise BusinessRuleViolation('Each age group must have at least one medicine')
            group = AgeGroupInput(
                group=normalize_group(ag['group'], lenient=lenient),
                age_range=_text(ag['age_range']),
            )
            for m in medicines:
                if not isinstance(m, dict) or not m.get('medicineId') or not _text(m.get('dosage')):
                    raise BusinessRuleViolation("Medicine 'medicineId' and 'dosage' are required")
                group.medicines.append(PrescriptionInput(
                    medicine_id=parse_medicine_id(m['medicineId']),
                    dosage=_text(m['dosage']),
                    notes=_text(m.get('notes')),
                ))
            sub.age_groups.append(group)
        parsed.subcategories.append(sub)
    return parsed


def ensure_medicines_exist(ids: set[int]) -> None:
    if not ids:
        return
    known = set(Medicine.objects.filter(id__in=ids).values_list('id', flat=True))
    missing = sorted(ids - known)
    if missing:
        raise BusinessRuleViolation('Unknown medicineId', missing=missing)


def ensure_name_available(name: str, *, exclude_id: Optional[int] = None) -> None:
    qs = Disease.objects.filter(name=name)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise DuplicateName('Disease name must be unique')


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def disease_queryset() -> QuerySet:
    """Diseases with the whole tree prefetched in insertion order."""
    return Disease.objects.order_by('id').prefetch_related(
        Prefetch('subcategories', queryset=Subcategory.objects.order_by('id')),
        Prefetch('subcategories__age_groups', queryset=AgeGroup.objects.order_by('id')),
        Prefetch(
            'subcategories__age_groups__prescribed',
            queryset=PrescribedMedicine.objects.select_related('medicine').order_by('id'),
        ),
    )


def _build_tree(disease: Disease, payload: DiseaseInput) -> None:
    for sc in payload.subcategories:
        sub = Subcategory.objects.create(disease=disease, name=sc.name)
        for ag in sc.age_groups:
            group = AgeGroup.objects.create(subcategory=sub, group=ag.group, age_range=ag.age_range)
            PrescribedMedicine.objects.bulk_create([
                PrescribedMedicine(
                    age_group=group,
                    medicine_id=m.medicine_id,
                    dosage=m.dosage,
                    notes=m.notes,
                )
                for m in ag.medicines
            ])


def _delete_children(disease_id: int) -> None:
    PrescribedMedicine.objects.filter(age_group__subcategory__disease_id=disease_id).delete()
    AgeGroup.objects.filter(subcategory__disease_id=disease_id).delete()
    Subcategory.objects.filter(disease_id=disease_id).delete()


@transaction.atomic
def create_disease(payload: DiseaseInput) -> Disease:
    ensure_name_available(payload.name)
    ensure_medicines_exist(payload.medicine_ids())
    disease = Disease.objects.create(name=payload.name)
    _build_tree(disease, payload)
    logger.info('disease %s created (%d subcategories)', disease.id, len(payload.subcategories))
    return disease_queryset().get(pk=disease.pk)


@transaction.atomic
def replace_disease(disease: Disease, payload: DiseaseInput) -> Disease:
    """Rename ``disease`` and swap its whole tree for the payload's."""
    ensure_name_available(payload.name, exclude_id=disease.id)
    ensure_medicines_exist(payload.medicine_ids())
    _delete_children(disease.id)
    disease.name = payload.name
    disease.save(update_fields=['name'])
    _build_tree(disease, payload)
    logger.info('disease %s replaced (%d subcategories)', disease.id, len(payload.subcategories))
    return disease_queryset().get(pk=disease.pk)


@transaction.atomic
def delete_disease(disease: Disease) -> None:
    disease_id = disease.id
    _delete_children(disease_id)
    disease.delete()
    logger.info('disease %s deleted', disease_id)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def to_website_format(disease: Disease) -> dict:
    """Name-based rendering of a protocol used by the public overview."""
    return {
        'disease': disease.name,
        'subcategories': [
            {
                'name': sc.name,
                'age_groups': [
                    {
                        'group': ag.group,
                        'age_range': ag.age_range,
                        'medicines': [
                            {'name': pm.medicine.name, 'dosage': pm.dosage, 'notes': pm.notes}
                            for pm in ag.prescribed.all()
                        ],
                    }
                    for ag in sc.age_groups.all()
                ],
            }
            for sc in disease.subcategories.all()
        ],
    }
