from rest_framework import serializers

from .common import CleanCharField, MoneyField


class DoctorSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    specialization = CleanCharField(max_length=255)
    phone = CleanCharField(max_length=32)
    email = serializers.EmailField()
    licenseNumber = CleanCharField(max_length=64)
    shifts = serializers.ListField(child=serializers.CharField(max_length=64), required=False)
    isActive = serializers.BooleanField(required=False)
    password = serializers.CharField(min_length=6, required=False, allow_blank=True, write_only=True)

    def validate_name(self, v):
        if len(v) < 2:
            raise serializers.ValidationError('Nama minimal 2 karakter')
        return v


class DoctorStatusSerializer(serializers.Serializer):
    isActive = serializers.BooleanField()


class EmployeeSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    position = CleanCharField(max_length=128, required=False)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField()
    joinDate = serializers.DateField(required=False)
    baseSalary = MoneyField(required=False)
    status = serializers.ChoiceField(choices=['aktif', 'nonaktif'], required=False)
    password = serializers.CharField(min_length=6, required=False, allow_blank=True, write_only=True)


class PatientSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = CleanCharField()
    birthDate = serializers.DateField()
    gender = CleanCharField(max_length=16)
    bloodType = CleanCharField(max_length=8, required=False, allow_blank=True)
    allergies = CleanCharField(required=False, allow_blank=True)
    emergencyContact = CleanCharField(max_length=255, required=False, allow_blank=True)
    emergencyPhone = CleanCharField(max_length=32, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=['aktif', 'nonaktif'], required=False)


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=['aktif', 'all'], required=False)


class SalarySerializer(serializers.Serializer):
    employeeId = serializers.IntegerField()
    baseSalary = MoneyField(required=False)
    bonus = MoneyField(required=False)
    holidayAllowance = MoneyField(required=False)
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    notes = CleanCharField(required=False, allow_blank=True)


class SalaryQuerySerializer(serializers.Serializer):
    employeeId = serializers.IntegerField(required=False)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False)
