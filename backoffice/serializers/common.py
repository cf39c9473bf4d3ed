import bleach
from rest_framework import serializers


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class CleanCharField(serializers.CharField):
    """CharField that strips HTML from user input."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


class MoneyField(serializers.DecimalField):
    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 14)
        kwargs.setdefault('decimal_places', 2)
        kwargs.setdefault('min_value', 0)
        super().__init__(**kwargs)


class DateRangeQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get('start') and attrs.get('end') and attrs['end'] < attrs['start']:
            raise serializers.ValidationError('Tanggal akhir tidak boleh sebelum tanggal awal')
        return attrs


class DoctorFeeQuerySerializer(DateRangeQuerySerializer):
    doctorId = serializers.IntegerField(required=False)
