"""
Integration tests for treatment protocols (the disease aggregate).

The protocol tree is always written whole: these tests check that
creation builds every level, that an update swaps the old tree for the
new one inside one transaction, and that every validation message the
dashboard shows is produced.
"""
from rest_framework import status
from rest_framework.test import APITestCase

from ..models import AgeGroup, Disease, Medicine, PrescribedMedicine, Subcategory


class DiseaseAPITests(APITestCase):
    def setUp(self) -> None:
        self.paracetamol = Medicine.objects.create(name='Paracetamol', form='Tablet', strength='500mg', unit='mg')
        self.ors = Medicine.objects.create(name='ORS', form='Powder', strength='21g', unit='sachet')

    def payload(self, name='Dengue Fever'):
        return {
            'name': name,
            'subcategories': [{
                'name': 'Uncomplicated',
                'age_groups': [
                    {'group': 'CHILD', 'age_range': '1-12', 'medicines': [
                        {'medicineId': str(self.ors.id), 'dosage': 'As tolerated'},
                    ]},
                    {'group': 'adult', 'age_range': '18-60', 'medicines': [
                        {'medicineId': self.paracetamol.id, 'dosage': '500mg q6h', 'notes': 'Max 4g per day'},
                        {'medicineId': self.ors.id, 'dosage': '1 sachet'},
                    ]},
                ],
            }],
        }

    def create(self, body=None):
        return self.client.post('/v1/web/diseases', body or self.payload(), format='json')

    def test_create_builds_full_tree(self):
        r = self.create()
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['name'], 'Dengue Fever')
        sub = r.data['subcategories'][0]
        self.assertEqual(sub['name'], 'Uncomplicated')
        self.assertEqual(sub['diseaseId'], r.data['id'])
        groups = sub['ageGroups']
        self.assertEqual([g['group'] for g in groups], ['CHILD', 'ADULT'])
        self.assertEqual(groups[1]['ageRange'], '18-60')
        prescribed = groups[1]['prescribed']
        self.assertEqual(prescribed[0]['medicine']['name'], 'Paracetamol')
        self.assertEqual(prescribed[0]['notes'], 'Max 4g per day')
        # notes default to an empty string
        self.assertEqual(prescribed[1]['notes'], '')
        self.assertEqual(PrescribedMedicine.objects.count(), 3)

    def test_duplicate_name_conflicts(self):
        self.create()
        r = self.create()
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(r.data['error']['message'], 'Disease name must be unique')
        self.assertEqual(Disease.objects.count(), 1)

    def assertRejected(self, body, message):
        r = self.create(body)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST, r.data)
        self.assertEqual(r.data['error']['message'], message)
        self.assertFalse(Disease.objects.exists())

    def test_requires_subcategories(self):
        self.assertRejected({'name': 'Flu', 'subcategories': []}, 'At least one subcategory is required')

    def test_requires_subcategory_name(self):
        body = self.payload()
        body['subcategories'][0]['name'] = ' '
        self.assertRejected(body, 'Subcategory name is required')

    def test_requires_age_groups(self):
        body = self.payload()
        body['subcategories'][0]['age_groups'] = []
        self.assertRejected(body, 'Each subcategory must have at least one age group')

    def test_requires_group_and_range(self):
        body = self.payload()
        del body['subcategories'][0]['age_groups'][0]['age_range']
        self.assertRejected(body, "AgeGroup 'group' and 'age_range' are required")

    def test_requires_medicines(self):
        body = self.payload()
        body['subcategories'][0]['age_groups'][0]['medicines'] = []
        self.assertRejected(body, 'Each age group must have at least one medicine')

    def test_requires_dosage(self):
        body = self.payload()
        body['subcategories'][0]['age_groups'][0]['medicines'][0]['dosage'] = ''
        self.assertRejected(body, "Medicine 'medicineId' and 'dosage' are required")

    def test_rejects_invalid_medicine_id(self):
        body = self.payload()
        body['subcategories'][0]['age_groups'][0]['medicines'][0]['medicineId'] = 'abc'
        self.assertRejected(body, 'Invalid medicineId - must be a valid number greater than 0')
        body['subcategories'][0]['age_groups'][0]['medicines'][0]['medicineId'] = -4
        self.assertRejected(body, 'Invalid medicineId - must be a valid number greater than 0')

    def test_rejects_unknown_medicine(self):
        body = self.payload()
        body['subcategories'][0]['age_groups'][0]['medicines'][0]['medicineId'] = 9999
        r = self.create(body)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['missing'], [9999])

    def test_rejects_unknown_age_group(self):
        body = self.payload()
        body['subcategories'][0]['age_groups'][0]['group'] = 'INFANT'
        r = self.create(body)
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_replaces_tree(self):
        created = self.create().data
        old_subcategory_id = created['subcategories'][0]['id']
        body = {
            'name': 'Dengue (Severe)',
            'subcategories': [
                {'name': 'Warning signs', 'age_groups': [
                    {'group': 'OLDER', 'age_range': '60+', 'medicines': [
                        {'medicineId': self.ors.id, 'dosage': 'IV fluids as directed'},
                    ]},
                ]},
                {'name': 'Shock', 'age_groups': [
                    {'group': 'TEENAGER', 'age_range': '13-17', 'medicines': [
                        {'medicineId': self.paracetamol.id, 'dosage': '250mg'},
                    ]},
                ]},
            ],
        }
        r = self.client.put(f"/v1/web/diseases/{created['id']}", body, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['id'], created['id'])
        self.assertEqual(r.data['name'], 'Dengue (Severe)')
        self.assertEqual([s['name'] for s in r.data['subcategories']], ['Warning signs', 'Shock'])
        self.assertFalse(Subcategory.objects.filter(id=old_subcategory_id).exists())
        self.assertEqual(AgeGroup.objects.count(), 2)
        self.assertEqual(PrescribedMedicine.objects.count(), 2)

    def test_invalid_update_keeps_old_tree(self):
        created = self.create().data
        body = self.payload()
        body['subcategories'][0]['age_groups'][1]['medicines'][0]['medicineId'] = 9999
        r = self.client.put(f"/v1/web/diseases/{created['id']}", body, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PrescribedMedicine.objects.count(), 3)
        self.assertTrue(Subcategory.objects.filter(id=created['subcategories'][0]['id']).exists())

    def test_update_name_clash(self):
        self.create(self.payload('Malaria'))
        created = self.create().data
        r = self.client.put(f"/v1/web/diseases/{created['id']}", self.payload('Malaria'), format='json')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)

    def test_update_missing_disease(self):
        r = self.client.put('/v1/web/diseases/777', self.payload(), format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_removes_children(self):
        created = self.create().data
        r = self.client.delete(f"/v1/web/diseases/{created['id']}")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['name'], 'Dengue Fever')
        self.assertFalse(Disease.objects.exists())
        self.assertFalse(Subcategory.objects.exists())
        self.assertFalse(PrescribedMedicine.objects.exists())
        # medicines stay in the catalog
        self.assertEqual(Medicine.objects.count(), 2)

    def test_legacy_delete_route(self):
        created = self.create().data
        r = self.client.delete(f"/v1/web/disease/{created['id']}")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(Disease.objects.exists())

    def test_search_matches_nested_fields(self):
        self.create()
        self.client.post('/v1/web/diseases', {
            'name': 'Asthma',
            'subcategories': [{'name': 'Mild', 'age_groups': [
                {'group': 'TEENAGER', 'age_range': '13-17', 'medicines': [
                    {'medicineId': self.ors.id, 'dosage': '1 sachet'},
                ]},
            ]}],
        }, format='json')
        r = self.client.get('/v1/web/diseases', {'q': 'paracet'})
        self.assertEqual([d['name'] for d in r.data], ['Dengue Fever'])
        r = self.client.get('/v1/web/diseases', {'q': 'teen'})
        self.assertEqual([d['name'] for d in r.data], ['Asthma'])
        r = self.client.get('/v1/web/diseases', {'q': 'uncompl'})
        self.assertEqual([d['name'] for d in r.data], ['Dengue Fever'])
        r = self.client.get('/v1/web/diseases')
        self.assertEqual(len(r.data), 2)
