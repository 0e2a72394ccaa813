import bleach
from rest_framework import serializers


def clean_text(value):
    """Strip markup from free-text fields the dashboard renders verbatim."""
    return bleach.clean((value or '').strip(), tags=[], strip=True).strip()


class UpperChoiceField(serializers.ChoiceField):
    """Choice field that accepts any letter case (``free`` -> ``FREE``)."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.strip().upper()
        return super().to_internal_value(data)


class ListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=64, required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=500)


class BedListQuerySerializer(ListQuerySerializer):
    status = UpperChoiceField(choices=['FREE', 'OCCUPIED', 'MAINTENANCE'], required=False)
