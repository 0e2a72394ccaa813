"""
Management command to populate the database with sample dashboard data.

Running it twice does not duplicate anything: departments, medicines and
diseases are looked up by name, and beds, staff and stock are only added
to departments / medicines that have none yet.
"""
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from facility.models import Bed, Department, Disease, Inventory, Medicine, Staff
from facility.services.diseases import create_disease, parse_disease_payload

DEPARTMENTS = ['Emergency', 'General Medicine', 'Pediatrics', 'Pulmonology']

BEDS_PER_DEPARTMENT = [
    ('General', Bed.STATUS_FREE),
    ('General', Bed.STATUS_OCCUPIED),
    ('ICU', Bed.STATUS_OCCUPIED),
    ('ICU', Bed.STATUS_MAINTENANCE),
]

STAFF = [
    ('Dr. Meera Rao', 'Emergency Physician', 'Emergency'),
    ('Dr. Arjun Patil', 'Internist', 'General Medicine'),
    ('Dr. Kavya Iyer', 'Pediatrician', 'Pediatrics'),
    ('Dr. Rohan Desai', 'Pulmonologist', 'Pulmonology'),
    ('Anita Kulkarni', 'nurse', None),
    ('Suresh Naik', 'Nurse', None),
]

MEDICINES = [
    ('Paracetamol', 'Tablet', '500mg', 'mg'),
    ('Paracetamol Syrup', 'Syrup', '120mg/5ml', 'ml'),
    ('Salbutamol', 'Inhaler', '100mcg', 'puff'),
    ('Budesonide', 'Nebulizer', '0.5mg/2ml', 'ml'),
    ('ORS', 'Powder', '21g', 'sachet'),
]

# (medicine name, qty, batch, days until expiry)
STOCK = [
    ('Paracetamol', 240, 'PCM-2401', 400),
    ('Paracetamol Syrup', 8, 'PCS-2310', 200),
    ('Salbutamol', 35, 'SAL-2402', 20),
    ('Budesonide', 60, 'BUD-2207', -10),
    ('ORS', 500, None, None),
]

PROTOCOLS = [
    {
        'name': 'Dengue Fever',
        'subcategories': [{
            'name': 'Uncomplicated',
            'age_groups': [
                {'group': 'CHILD', 'age_range': '1-12', 'medicines': [
                    {'medicine': 'Paracetamol Syrup', 'dosage': '15mg/kg every 6 hours', 'notes': 'Avoid NSAIDs'},
                    {'medicine': 'ORS', 'dosage': 'As tolerated'},
                ]},
                {'group': 'ADULT', 'age_range': '18-60', 'medicines': [
                    {'medicine': 'Paracetamol', 'dosage': '500mg every 6 hours', 'notes': 'Max 4g per day'},
                    {'medicine': 'ORS', 'dosage': '1 sachet after each loose stool'},
                ]},
            ],
        }],
    },
    {
        'name': 'Asthma Exacerbation',
        'subcategories': [
            {'name': 'Mild', 'age_groups': [
                {'group': 'TEENAGER', 'age_range': '13-17', 'medicines': [
                    {'medicine': 'Salbutamol', 'dosage': '2 puffs every 4 hours'},
                ]},
            ]},
            {'name': 'Moderate', 'age_groups': [
                {'group': 'OLDER', 'age_range': '60+', 'medicines': [
                    {'medicine': 'Budesonide', 'dosage': '0.5mg twice daily', 'notes': 'Via nebulizer'},
                ]},
            ]},
        ],
    },
]


class Command(BaseCommand):
    help = 'Populate the database with sample dashboard data'

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding sample data...')
        departments = self.create_departments()
        self.create_beds(departments)
        self.create_staff(departments)
        medicines = self.create_medicines()
        self.create_stock(medicines)
        self.create_protocols(medicines)
        self.stdout.write(self.style.SUCCESS('Sample data ready.'))

    def create_departments(self):
        departments = {}
        for name in DEPARTMENTS:
            departments[name], _ = Department.objects.get_or_create(name=name)
        return departments

    def create_beds(self, departments):
        for department in departments.values():
            if department.beds.exists():
                continue
            for bed_type, status in BEDS_PER_DEPARTMENT:
                Bed.objects.create(type=bed_type, status=status, department=department)

    def create_staff(self, departments):
        for name, specialization, department in STAFF:
            Staff.objects.get_or_create(
                name=name,
                defaults={
                    'specialization': specialization,
                    'department': departments[department] if department else None,
                },
            )

    def create_medicines(self):
        medicines = {}
        for name, form, strength, unit in MEDICINES:
            medicines[name], _ = Medicine.objects.get_or_create(
                name=name, form=form, strength=strength, unit=unit
            )
        return medicines

    def create_stock(self, medicines):
        now = timezone.now()
        for name, qty, batch, days in STOCK:
            medicine = medicines[name]
            if medicine.inventory.exists():
                continue
            Inventory.objects.create(
                medicine=medicine,
                available_qty=qty,
                batch_number=batch,
                expiry_date=now + timedelta(days=days) if days is not None else None,
            )

    def create_protocols(self, medicines):
        for protocol in PROTOCOLS:
            if Disease.objects.filter(name=protocol['name']).exists():
                continue
            body = {
                'name': protocol['name'],
                'subcategories': [
                    {
                        'name': sc['name'],
                        'age_groups': [
                            {
                                'group': ag['group'],
                                'age_range': ag['age_range'],
                                'medicines': [
                                    {
                                        'medicineId': medicines[m['medicine']].id,
                                        'dosage': m['dosage'],
                                        'notes': m.get('notes', ''),
                                    }
                                    for m in ag['medicines']
                                ],
                            }
                            for ag in sc['age_groups']
                        ],
                    }
                    for sc in protocol['subcategories']
                ],
            }
            create_disease(parse_disease_payload(body))
            self.stdout.write(f"  protocol: {protocol['name']}")
