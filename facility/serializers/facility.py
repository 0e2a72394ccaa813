"""Serializers for departments, staff and beds."""
from rest_framework import serializers

from ..exceptions import BusinessRuleViolation
from ..models import Bed, Department, Staff, is_nurse
from .common import UpperChoiceField, clean_text


class DepartmentBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ['id', 'name']


class StaffFlatSerializer(serializers.ModelSerializer):
    departmentId = serializers.IntegerField(source='department_id', read_only=True)
    isAvailable = serializers.BooleanField(source='is_available', read_only=True)

    class Meta:
        model = Staff
        fields = ['id', 'name', 'specialization', 'departmentId', 'isAvailable']


class BedFlatSerializer(serializers.ModelSerializer):
    departmentId = serializers.IntegerField(source='department_id', read_only=True)

    class Meta:
        model = Bed
        fields = ['id', 'type', 'status', 'departmentId']


class DepartmentSerializer(serializers.ModelSerializer):
    staff = StaffFlatSerializer(many=True, read_only=True)
    beds = BedFlatSerializer(many=True, read_only=True)

    class Meta:
        model = Department
        fields = ['id', 'name', 'staff', 'beds']

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('name is required')
        return v


class StaffSerializer(serializers.ModelSerializer):
    departmentId = serializers.PrimaryKeyRelatedField(
        source='department', queryset=Department.objects.all(), allow_null=True, required=False
    )
    isAvailable = serializers.BooleanField(source='is_available', required=False)
    department = DepartmentBriefSerializer(read_only=True)

    class Meta:
        model = Staff
        fields = ['id', 'name', 'specialization', 'departmentId', 'isAvailable', 'department']

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('name is required')
        return v

    def validate_specialization(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('specialization is required')
        return v

    def validate(self, attrs):
        # Check the nurse/department rule against the record as it will be saved
        instance = self.instance
        specialization = attrs.get('specialization', instance.specialization if instance else '')
        if 'department' in attrs:
            department = attrs['department']
        else:
            department = instance.department if instance else None
        if is_nurse(specialization) and department is not None:
            raise BusinessRuleViolation('nurse cannot be linked to department')
        if not is_nurse(specialization) and department is None:
            raise BusinessRuleViolation('departmentId required')
        return attrs


class BedSerializer(serializers.ModelSerializer):
    status = UpperChoiceField(choices=Bed.STATUS_CHOICES, required=False)
    departmentId = serializers.PrimaryKeyRelatedField(
        source='department', queryset=Department.objects.all(), required=False
    )
    department = DepartmentBriefSerializer(read_only=True)

    class Meta:
        model = Bed
        fields = ['id', 'type', 'status', 'departmentId', 'department']
        extra_kwargs = {'type': {'required': False, 'allow_blank': True}}

    def validate_type(self, v):
        return clean_text(v)

    def validate(self, attrs):
        if self.instance is None and (not attrs.get('type') or not attrs.get('department')):
            raise BusinessRuleViolation('Missing type or departmentId')
        if self.instance is not None and 'type' in attrs and not attrs['type']:
            raise BusinessRuleViolation('type must not be empty')
        return attrs
