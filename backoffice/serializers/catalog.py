from rest_framework import serializers

from backoffice.access import validate_page_access
from .common import CleanCharField, MoneyField


class ProductSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    category = CleanCharField(max_length=128)
    price = MoneyField()
    stock = serializers.IntegerField(required=False, min_value=0)
    minStock = serializers.IntegerField(required=False, min_value=0)
    unit = CleanCharField(max_length=32, required=False)
    description = CleanCharField(required=False, allow_blank=True)
    supplier = CleanCharField(max_length=255, required=False, allow_blank=True)
    barcode = CleanCharField(max_length=64, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=['aktif', 'nonaktif'], required=False)


class FieldTripProductSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    category = CleanCharField(max_length=128, required=False)
    price = MoneyField()
    unit = CleanCharField(max_length=32, required=False)
    description = CleanCharField(required=False, allow_blank=True)
    location = CleanCharField(max_length=255, required=False, allow_blank=True)
    duration = CleanCharField(max_length=64, required=False, allow_blank=True)
    minParticipants = serializers.IntegerField(required=False, min_value=0)
    maxParticipants = serializers.IntegerField(required=False, min_value=0)
    ageRange = CleanCharField(max_length=64, required=False, allow_blank=True)
    included = CleanCharField(required=False, allow_blank=True)
    notIncluded = CleanCharField(required=False, allow_blank=True)
    requirements = CleanCharField(required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)
    isActive = serializers.BooleanField(required=False)

    def validate(self, attrs):
        lo, hi = attrs.get('minParticipants'), attrs.get('maxParticipants')
        if self.instance is not None:
            lo = lo if lo is not None else self.instance.min_participants
            hi = hi if hi is not None else self.instance.max_participants
        if lo and hi and lo > hi:
            raise serializers.ValidationError({'minParticipants': 'Minimal peserta melebihi maksimal peserta'})
        return attrs


class FeeSettingSerializer(serializers.Serializer):
    doctorIds = serializers.ListField(child=serializers.IntegerField(), required=False)
    category = CleanCharField(max_length=128, required=False, allow_blank=True)
    treatmentTypes = serializers.ListField(child=CleanCharField(max_length=255), required=False)
    feePercentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)
    isDefault = serializers.BooleanField(required=False)
    description = CleanCharField(max_length=255, required=False, allow_blank=True)


class FeeCalculationItemSerializer(serializers.Serializer):
    id = serializers.CharField(required=False)
    name = serializers.CharField()
    price = MoneyField()
    finalPrice = MoneyField(required=False)


class FeeCalculationSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField()
    items = FeeCalculationItemSerializer(many=True)
    paymentStatus = serializers.ChoiceField(choices=['lunas', 'dp'], required=False)
    dpAmount = MoneyField(required=False)
    feeOverrides = serializers.DictField(required=False)


class VoucherSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    title = CleanCharField(max_length=255)
    description = CleanCharField(required=False, allow_blank=True)
    discountType = serializers.ChoiceField(choices=['percentage', 'nominal'])
    discountValue = MoneyField()
    maxDiscount = MoneyField(required=False, allow_null=True)
    minPurchase = MoneyField(required=False)
    expiryDate = serializers.DateField()
    usageLimit = serializers.IntegerField(required=False, min_value=0)
    isActive = serializers.BooleanField(required=False)

    def validate_code(self, v):
        v = (v or '').strip().upper()
        if not v:
            raise serializers.ValidationError('Kode voucher wajib diisi')
        return v

    def validate(self, attrs):
        dtype = attrs.get('discountType') or getattr(self.instance, 'discount_type', None)
        value = attrs.get('discountValue', getattr(self.instance, 'discount_value', None))
        if dtype == 'percentage' and value is not None and value > 100:
            raise serializers.ValidationError({'discountValue': 'Diskon persentase maksimal 100'})
        return attrs


class VoucherValidateSerializer(serializers.Serializer):
    code = serializers.CharField()
    treatmentAmount = MoneyField(required=False)
    amount = MoneyField(required=False)
    adminFee = MoneyField(required=False)

    def validate(self, attrs):
        if attrs.get('treatmentAmount') is None:
            attrs['treatmentAmount'] = attrs.get('amount') or 0
        return attrs


class VoucherUseSerializer(VoucherValidateSerializer):
    patientId = serializers.IntegerField(required=False, allow_null=True)
    patientName = CleanCharField(required=False, allow_blank=True)
    transactionType = serializers.ChoiceField(choices=['treatment', 'sale', 'field_trip'], required=False)
    transactionId = serializers.CharField(required=False, allow_blank=True)


class ClinicSettingsSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255, required=False)
    address = CleanCharField(required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    adminFee = MoneyField(required=False)
    logoUrl = serializers.CharField(max_length=500, required=False, allow_blank=True)
    pageAccess = serializers.JSONField(required=False)

    def validate_pageAccess(self, v):
        try:
            return validate_page_access(v)
        except ValueError as e:
            raise serializers.ValidationError(str(e))
