"""Read-side serializers for the disease aggregate.

Writes go through ``facility.services.diseases`` which validates the
whole tree at once; these only render it.
"""
from rest_framework import serializers

from ..models import AgeGroup, Disease, PrescribedMedicine, Subcategory
from .catalog import MedicineSerializer


class PrescribedMedicineSerializer(serializers.ModelSerializer):
    ageGroupId = serializers.IntegerField(source='age_group_id', read_only=True)
    medicineId = serializers.IntegerField(source='medicine_id', read_only=True)
    medicine = MedicineSerializer(read_only=True)

    class Meta:
        model = PrescribedMedicine
        fields = ['id', 'ageGroupId', 'medicineId', 'dosage', 'notes', 'medicine']


class AgeGroupSerializer(serializers.ModelSerializer):
    subcategoryId = serializers.IntegerField(source='subcategory_id', read_only=True)
    ageRange = serializers.CharField(source='age_range', read_only=True)
    prescribed = PrescribedMedicineSerializer(many=True, read_only=True)

    class Meta:
        model = AgeGroup
        fields = ['id', 'subcategoryId', 'group', 'ageRange', 'prescribed']


class SubcategorySerializer(serializers.ModelSerializer):
    diseaseId = serializers.IntegerField(source='disease_id', read_only=True)
    ageGroups = AgeGroupSerializer(source='age_groups', many=True, read_only=True)

    class Meta:
        model = Subcategory
        fields = ['id', 'diseaseId', 'name', 'ageGroups']


class DiseaseSerializer(serializers.ModelSerializer):
    subcategories = SubcategorySerializer(many=True, read_only=True)

    class Meta:
        model = Disease
        fields = ['id', 'name', 'subcategories']
