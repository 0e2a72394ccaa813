"""
Database models for the hospital-operations dashboard.

The schema mirrors what the dashboard shows: departments with their
beds and staff, the medicine catalog with its stock records, and the
age-stratified treatment protocols (the disease aggregate).
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models

NURSE_SPECIALIZATION = 'nurse'


def is_nurse(specialization: str | None) -> bool:
    return (specialization or '').strip().lower() == NURSE_SPECIALIZATION


class User(AbstractUser):
    """Dashboard account.

    Only consulted when management writes are protected
    (``API_WRITE_REQUIRES_AUTH``); managers and admins may then modify
    data while viewers stay read-only.
    """
    ROLE_CHOICES = [
        ('viewer', 'Viewer'),
        ('manager', 'Manager'),
        ('admin', 'Administrator'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='viewer')

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Department(models.Model):
    name = models.CharField(max_length=255)

    def __str__(self) -> str:
        return self.name


class Staff(models.Model):
    """A staff member.

    Nurses float between wards and are never attached to a department;
    every other specialization must belong to one.
    """
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=128)
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.PROTECT, related_name='staff'
    )
    # Used for the on-duty counters on the dashboard
    is_available = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name_plural = 'staff'

    def clean(self) -> None:
        if is_nurse(self.specialization) and self.department_id:
            raise ValidationError({'departmentId': 'nurse cannot be linked to department'})
        if not is_nurse(self.specialization) and not self.department_id:
            raise ValidationError({'departmentId': 'departmentId required'})

    def __str__(self) -> str:
        return f"{self.name} ({self.specialization})"


class Bed(models.Model):
    STATUS_FREE = 'FREE'
    STATUS_OCCUPIED = 'OCCUPIED'
    STATUS_MAINTENANCE = 'MAINTENANCE'
    STATUS_CHOICES = [
        (STATUS_FREE, 'Free'),
        (STATUS_OCCUPIED, 'Occupied'),
        (STATUS_MAINTENANCE, 'Maintenance'),
    ]
    type = models.CharField(max_length=128)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_FREE, db_index=True)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='beds')

    def __str__(self) -> str:
        return f"Bed {self.id} ({self.type}, {self.status})"


class Medicine(models.Model):
    """A catalog entry; stock lives in :class:`Inventory`."""
    name = models.CharField(max_length=255)
    form = models.CharField(max_length=128)
    strength = models.CharField(max_length=128)
    unit = models.CharField(max_length=64)

    def __str__(self) -> str:
        return f"{self.name} {self.strength} {self.form}"


class Inventory(models.Model):
    medicine = models.ForeignKey(Medicine, on_delete=models.PROTECT, related_name='inventory')
    available_qty = models.PositiveIntegerField()
    batch_number = models.CharField(max_length=128, null=True, blank=True)
    expiry_date = models.DateTimeField(null=True, blank=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'inventory'

    def __str__(self) -> str:
        return f"{self.medicine_id} x{self.available_qty} ({self.batch_number or '-'})"


# ---------------------------------------------------------------------------
# Disease aggregate: Disease -> Subcategory -> AgeGroup -> PrescribedMedicine
# ---------------------------------------------------------------------------

class Disease(models.Model):
    name = models.CharField(max_length=255, unique=True)

    def __str__(self) -> str:
        return self.name


class Subcategory(models.Model):
    disease = models.ForeignKey(Disease, on_delete=models.CASCADE, related_name='subcategories')
    name = models.CharField(max_length=255)

    class Meta:
        verbose_name_plural = 'subcategories'

    def __str__(self) -> str:
        return f"{self.disease_id}: {self.name}"


class AgeGroup(models.Model):
    CHILD = 'CHILD'
    TEENAGER = 'TEENAGER'
    ADULT = 'ADULT'
    OLDER = 'OLDER'
    GROUP_CHOICES = [
        (CHILD, 'Child'),
        (TEENAGER, 'Teenager'),
        (ADULT, 'Adult'),
        (OLDER, 'Older'),
    ]
    subcategory = models.ForeignKey(Subcategory, on_delete=models.CASCADE, related_name='age_groups')
    group = models.CharField(max_length=16, choices=GROUP_CHOICES)
    age_range = models.CharField(max_length=64)

    def __str__(self) -> str:
        return f"{self.group} ({self.age_range})"


class PrescribedMedicine(models.Model):
    age_group = models.ForeignKey(AgeGroup, on_delete=models.CASCADE, related_name='prescribed')
    medicine = models.ForeignKey(Medicine, on_delete=models.PROTECT, related_name='prescriptions')
    dosage = models.CharField(max_length=255)
    notes = models.TextField(blank=True, default='')

    def __str__(self) -> str:
        return f"{self.medicine_id} {self.dosage}"
