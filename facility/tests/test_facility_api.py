"""
Integration tests for staff, department and bed management.

Covers the nurse/department rule on create and update, the department
delete guard, bed defaults and the list search parameters.
"""
from rest_framework import status
from rest_framework.test import APITestCase

from ..models import Bed, Department, Staff


class StaffAPITests(APITestCase):
    def setUp(self) -> None:
        self.emergency = Department.objects.create(name='Emergency')
        self.pediatrics = Department.objects.create(name='Pediatrics')

    def test_create_doctor_with_department(self):
        r = self.client.post('/v1/web/staff', {
            'name': 'Dr. Meera Rao', 'specialization': 'Surgeon', 'departmentId': self.emergency.id,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['departmentId'], self.emergency.id)
        self.assertEqual(r.data['department']['name'], 'Emergency')
        self.assertTrue(r.data['isAvailable'])

    def test_non_nurse_requires_department(self):
        r = self.client.post('/v1/web/staff', {'name': 'Dr. Patil', 'specialization': 'Surgeon'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(r.data['ok'])
        self.assertEqual(r.data['error']['message'], 'departmentId required')
        self.assertEqual(Staff.objects.count(), 0)

    def test_nurse_cannot_have_department(self):
        r = self.client.post('/v1/web/staff', {
            'name': 'Anita', 'specialization': 'Nurse', 'departmentId': self.emergency.id,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'nurse cannot be linked to department')

    def test_nurse_without_department(self):
        r = self.client.post('/v1/web/staff', {'name': 'Anita', 'specialization': 'nurse'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(r.data['departmentId'])
        self.assertIsNone(r.data['department'])

    def test_update_rechecks_rule_on_merged_record(self):
        nurse = Staff.objects.create(name='Anita', specialization='nurse')
        # Turning a nurse into a surgeon without giving a department breaks the rule
        r = self.client.put(f'/v1/web/staff/{nurse.id}', {'specialization': 'Surgeon'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'departmentId required')

        r = self.client.put(f'/v1/web/staff/{nurse.id}', {
            'specialization': 'Surgeon', 'departmentId': self.pediatrics.id,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        nurse.refresh_from_db()
        self.assertEqual(nurse.department_id, self.pediatrics.id)

    def test_toggle_availability(self):
        doc = Staff.objects.create(name='Dr. Rao', specialization='Surgeon', department=self.emergency)
        r = self.client.put(f'/v1/web/staff/{doc.id}', {'isAvailable': False}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(r.data['isAvailable'])

    def test_search_by_department_name(self):
        Staff.objects.create(name='Dr. Rao', specialization='Surgeon', department=self.emergency)
        Staff.objects.create(name='Dr. Iyer', specialization='Pediatrician', department=self.pediatrics)
        r = self.client.get('/v1/web/staff', {'q': 'pedia'})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([s['name'] for s in r.data], ['Dr. Iyer'])

    def test_pagination_reports_total(self):
        for i in range(5):
            Staff.objects.create(name=f'Nurse {i}', specialization='nurse')
        r = self.client.get('/v1/web/staff', {'page': 2, 'pageSize': 2})
        self.assertEqual(len(r.data), 2)
        self.assertEqual(r.data[0]['name'], 'Nurse 2')
        self.assertEqual(r['X-Total-Count'], '5')

    def test_delete_returns_record(self):
        nurse = Staff.objects.create(name='Anita', specialization='nurse')
        r = self.client.delete(f'/v1/web/staff/{nurse.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['name'], 'Anita')
        self.assertFalse(Staff.objects.exists())

    def test_missing_staff_is_404(self):
        r = self.client.get('/v1/web/staff/999')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data['error']['code'], 'not_found')


class DepartmentAPITests(APITestCase):
    def test_create_strips_markup(self):
        r = self.client.post('/v1/web/departments', {'name': '<b>Cardiology</b>'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['name'], 'Cardiology')
        self.assertEqual(r.data['staff'], [])
        self.assertEqual(r.data['beds'], [])

    def test_list_nests_staff_and_beds(self):
        dept = Department.objects.create(name='Emergency')
        Bed.objects.create(type='ICU', department=dept)
        Staff.objects.create(name='Dr. Rao', specialization='Surgeon', department=dept)
        r = self.client.get('/v1/web/departments')
        self.assertEqual(len(r.data), 1)
        self.assertEqual(r.data[0]['beds'][0]['type'], 'ICU')
        self.assertEqual(r.data[0]['staff'][0]['name'], 'Dr. Rao')

    def test_rename(self):
        dept = Department.objects.create(name='Emergency')
        r = self.client.put(f'/v1/web/departments/{dept.id}', {'name': 'Casualty'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['name'], 'Casualty')

    def test_delete_blocked_while_referenced(self):
        dept = Department.objects.create(name='Emergency')
        Bed.objects.create(type='ICU', department=dept)
        r = self.client.delete(f'/v1/web/departments/{dept.id}')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['code'], 'reference_in_use')
        self.assertEqual(r.data['error']['bedsCount'], 1)
        self.assertEqual(r.data['error']['staffCount'], 0)
        self.assertTrue(Department.objects.filter(pk=dept.pk).exists())

    def test_delete_blocked_by_staff_alone(self):
        dept = Department.objects.create(name='Emergency')
        Staff.objects.create(name='Dr. Rao', specialization='Surgeon', department=dept)
        r = self.client.delete(f'/v1/web/departments/{dept.id}')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['bedsCount'], 0)
        self.assertEqual(r.data['error']['staffCount'], 1)
        self.assertEqual(Staff.objects.get().department_id, dept.id)

    def test_delete_empty_department(self):
        dept = Department.objects.create(name='Emergency')
        r = self.client.delete(f'/v1/web/departments/{dept.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(Department.objects.exists())


class BedAPITests(APITestCase):
    def setUp(self) -> None:
        self.dept = Department.objects.create(name='Pulmonology')

    def test_create_defaults_to_free(self):
        r = self.client.post('/v1/web/beds', {'type': 'General', 'departmentId': self.dept.id}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['status'], 'FREE')
        self.assertEqual(r.data['department']['name'], 'Pulmonology')

    def test_status_is_case_insensitive(self):
        r = self.client.post('/v1/web/beds', {
            'type': 'ICU', 'departmentId': self.dept.id, 'status': 'occupied',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['status'], 'OCCUPIED')

    def test_unknown_status_rejected(self):
        r = self.client.post('/v1/web/beds', {
            'type': 'ICU', 'departmentId': self.dept.id, 'status': 'BROKEN',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_type_or_department(self):
        r = self.client.post('/v1/web/beds', {'type': 'ICU'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'Missing type or departmentId')

    def test_filter_and_search(self):
        Bed.objects.create(type='ICU', status=Bed.STATUS_OCCUPIED, department=self.dept)
        Bed.objects.create(type='General', department=self.dept)
        r = self.client.get('/v1/web/beds', {'status': 'occupied'})
        self.assertEqual([b['type'] for b in r.data], ['ICU'])
        r = self.client.get('/v1/web/beds', {'q': 'gener'})
        self.assertEqual([b['type'] for b in r.data], ['General'])
        r = self.client.get('/v1/web/beds', {'q': 'pulmo'})
        self.assertEqual(len(r.data), 2)

    def test_update_and_delete(self):
        bed = Bed.objects.create(type='ICU', department=self.dept)
        r = self.client.put(f'/v1/web/beds/{bed.id}', {'status': 'maintenance'}, format='json')
        self.assertEqual(r.data['status'], 'MAINTENANCE')
        r = self.client.delete(f'/v1/web/beds/{bed.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(Bed.objects.exists())
