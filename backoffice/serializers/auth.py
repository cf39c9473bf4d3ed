from rest_framework import serializers

from backoffice.models import User
from .common import CleanCharField


class LoginSerializer(serializers.Serializer):
    """Accepts ``username`` or ``email`` plus ``password``."""
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField()

    def validate(self, attrs):
        login = (attrs.get('username') or attrs.get('email') or '').strip()
        if not login:
            raise serializers.ValidationError({'username': 'Username atau email wajib diisi'})
        attrs['login'] = login
        return attrs

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password wajib diisi')
        return v


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    name = CleanCharField(max_length=150)
    role = serializers.ChoiceField(choices=['doctor', 'employee'])


class VerifyUserSerializer(serializers.Serializer):
    email = serializers.EmailField()


class AccountCreateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=['doctor', 'employee'])
    access_level = serializers.ChoiceField(choices=[c[0] for c in User.ACCESS_LEVEL_CHOICES])
    source_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs.get('source_id') and not (attrs.get('email') and attrs.get('name')):
            raise serializers.ValidationError('Nama dan email wajib diisi jika tidak memilih dokter/karyawan')
        return attrs


class AccountUpdateSerializer(serializers.Serializer):
    access_level = serializers.ChoiceField(choices=[c[0] for c in User.ACCESS_LEVEL_CHOICES], required=False)
    name = CleanCharField(max_length=150, required=False)
    password = serializers.CharField(min_length=6, required=False, write_only=True)


class AccountListQuerySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['doctor', 'employee'], required=False)
    accessLevel = serializers.ChoiceField(choices=[c[0] for c in User.ACCESS_LEVEL_CHOICES], required=False)
    q = serializers.CharField(required=False, allow_blank=True)
