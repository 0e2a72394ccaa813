"""Serializers for the medicine catalog and its inventory records."""
from django.utils import timezone
from rest_framework import serializers

from ..exceptions import BusinessRuleViolation
from ..models import Inventory, Medicine
from ..services.inventory import stock_status
from .common import clean_text

MEDICINE_REQUIRED_FIELDS = ['name', 'form', 'strength', 'unit']


class FlexibleDateTimeField(serializers.DateTimeField):
    """Accepts full ISO timestamps as well as the date-only values of HTML date inputs."""

    def __init__(self, **kwargs):
        kwargs.setdefault('input_formats', ['iso-8601', '%Y-%m-%d'])
        super().__init__(**kwargs)


class MedicineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Medicine
        fields = ['id', 'name', 'form', 'strength', 'unit']
        extra_kwargs = {f: {'required': False, 'allow_blank': True} for f in MEDICINE_REQUIRED_FIELDS}

    def to_internal_value(self, data):
        if not hasattr(data, 'get'):
            return super().to_internal_value(data)
        missing = [f for f in MEDICINE_REQUIRED_FIELDS if not str(data.get(f) or '').strip()]
        if missing:
            raise BusinessRuleViolation('Missing required fields', required=MEDICINE_REQUIRED_FIELDS)
        return super().to_internal_value(data)

    def _required_text(self, v):
        # markup-only input cleans down to nothing
        v = clean_text(v)
        if not v:
            raise BusinessRuleViolation('Missing required fields', required=MEDICINE_REQUIRED_FIELDS)
        return v

    def validate_name(self, v):
        return self._required_text(v)

    def validate_form(self, v):
        return self._required_text(v)

    def validate_strength(self, v):
        return self._required_text(v)

    def validate_unit(self, v):
        return self._required_text(v)


class InventoryFlatSerializer(serializers.ModelSerializer):
    medicineId = serializers.IntegerField(source='medicine_id', read_only=True)
    availableQty = serializers.IntegerField(source='available_qty', read_only=True)
    batchNumber = serializers.CharField(source='batch_number', read_only=True)
    expiryDate = serializers.DateTimeField(source='expiry_date', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Inventory
        fields = ['id', 'medicineId', 'availableQty', 'batchNumber', 'expiryDate', 'updatedAt']


class MedicineDetailSerializer(MedicineSerializer):
    inventory = InventoryFlatSerializer(many=True, read_only=True)

    class Meta(MedicineSerializer.Meta):
        fields = MedicineSerializer.Meta.fields + ['inventory']


class InventorySerializer(serializers.ModelSerializer):
    medicineId = serializers.PrimaryKeyRelatedField(source='medicine', queryset=Medicine.objects.all())
    availableQty = serializers.IntegerField(source='available_qty', min_value=0)
    batchNumber = serializers.CharField(
        source='batch_number', required=False, allow_null=True, allow_blank=True, max_length=128
    )
    expiryDate = FlexibleDateTimeField(source='expiry_date', required=False, allow_null=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    medicine = MedicineSerializer(read_only=True)
    stockStatus = serializers.SerializerMethodField()

    class Meta:
        model = Inventory
        fields = [
            'id', 'medicineId', 'availableQty', 'batchNumber', 'expiryDate',
            'updatedAt', 'medicine', 'stockStatus',
        ]

    def get_stockStatus(self, obj) -> str:
        now = self.context.get('now') or timezone.now()
        return stock_status(obj, now=now)

    def validate_batchNumber(self, v):
        v = clean_text(v) if v is not None else None
        return v or None

    def update(self, instance, validated_data):
        # A stock record always stays with the medicine it was created for
        validated_data.pop('medicine', None)
        return super().update(instance, validated_data)
