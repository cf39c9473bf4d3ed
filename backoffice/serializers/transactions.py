from rest_framework import serializers

from .common import CleanCharField, MoneyField


class TreatmentLineSerializer(serializers.Serializer):
    id = serializers.CharField(required=False)
    productId = serializers.IntegerField(required=False, allow_null=True)
    name = CleanCharField(max_length=255)
    price = MoneyField()
    discount = MoneyField(required=False)
    discountType = serializers.ChoiceField(choices=['percentage', 'nominal'], required=False)


class MedicationLineSerializer(serializers.Serializer):
    productId = serializers.IntegerField(required=False, allow_null=True)
    name = CleanCharField(max_length=255)
    price = MoneyField()
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)


class TreatmentSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField()
    patientId = serializers.IntegerField()
    treatmentTypes = TreatmentLineSerializer(many=True)
    selectedMedications = MedicationLineSerializer(many=True, required=False)
    description = CleanCharField(required=False, allow_blank=True)
    shift = CleanCharField(max_length=64, required=False, allow_blank=True)
    date = serializers.DateField(required=False)
    adminFeeOverride = MoneyField(required=False, allow_null=True)
    paymentMethod = CleanCharField(max_length=64, required=False, allow_blank=True)
    paymentStatus = serializers.ChoiceField(choices=['lunas', 'dp'], required=False)
    dpAmount = MoneyField(required=False)
    paymentNotes = CleanCharField(required=False, allow_blank=True)
    feeOverrides = serializers.DictField(required=False)
    feePercentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100,
                                             required=False, allow_null=True)
    voucherCode = serializers.CharField(required=False, allow_blank=True)

    def validate_treatmentTypes(self, v):
        if not v:
            raise serializers.ValidationError('Minimal satu tindakan harus dipilih')
        return v


class TreatmentQuerySerializer(serializers.Serializer):
    doctorId = serializers.IntegerField(required=False)
    patientId = serializers.IntegerField(required=False)
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)
    paymentStatus = serializers.ChoiceField(choices=['lunas', 'dp'], required=False)


class SelectedDoctorSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField()
    fee = MoneyField(required=False)


class SelectedEmployeeSerializer(serializers.Serializer):
    employeeId = serializers.IntegerField()
    bonus = MoneyField(required=False)


class FieldTripSaleSerializer(serializers.Serializer):
    customerName = CleanCharField(max_length=255)
    customerPhone = CleanCharField(max_length=32)
    customerEmail = serializers.EmailField(required=False, allow_blank=True)
    customerAddress = CleanCharField(required=False, allow_blank=True)
    organization = CleanCharField(max_length=255, required=False, allow_blank=True)
    productId = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, required=False)
    participants = serializers.IntegerField(min_value=1, required=False)
    discount = MoneyField(required=False)
    saleDate = serializers.DateField(required=False)
    eventDate = serializers.DateField(required=False, allow_null=True)
    eventEndDate = serializers.DateField(required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=['draft', 'confirmed', 'paid', 'completed', 'cancelled'], required=False)
    paymentMethod = CleanCharField(max_length=64, required=False, allow_blank=True)
    paymentStatus = serializers.ChoiceField(choices=['lunas', 'dp'], required=False)
    dpAmount = MoneyField(required=False)
    paymentNotes = CleanCharField(required=False, allow_blank=True)
    selectedDoctors = SelectedDoctorSerializer(many=True, required=False)
    selectedEmployees = SelectedEmployeeSerializer(many=True, required=False)


class FieldTripSaleQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['draft', 'confirmed', 'paid', 'completed', 'cancelled'], required=False)
    q = serializers.CharField(required=False, allow_blank=True)
