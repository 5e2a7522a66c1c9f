import bleach
from rest_framework import serializers

ROLE_CHOICES = ['admin', 'doctor', 'patient']


def _role_from(data) -> str:
    # The dashboard sends ``userType``; API clients may send ``role``
    return (data.get('role') or data.get('userType') or '').strip().lower()


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)
    role = serializers.CharField(required=False, allow_blank=True)
    userType = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Email is required')
        return v

    def validate(self, attrs):
        role = _role_from(attrs)
        if not role:
            raise serializers.ValidationError({'role': 'Role is required'})
        attrs['role'] = role
        return attrs


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)
    name = serializers.CharField(max_length=255)
    role = serializers.CharField(required=False, allow_blank=True)
    userType = serializers.CharField(required=False, allow_blank=True)
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=255)
    experience = serializers.IntegerField(required=False, min_value=0)
    contactNumber = serializers.CharField(required=False, allow_blank=True, max_length=32)

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_specialization(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate(self, attrs):
        role = _role_from(attrs)
        if role not in ROLE_CHOICES:
            raise serializers.ValidationError({'role': 'Invalid user type'})
        attrs['role'] = role
        return attrs


class AccountUpdateSerializer(serializers.Serializer):
    """Fields an admin may change on any account.  Password and role are not among them."""
    email = serializers.EmailField(required=False)
    name = serializers.CharField(required=False, max_length=255)
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=255)
    experience = serializers.IntegerField(required=False, min_value=0)
    contactNumber = serializers.CharField(required=False, allow_blank=True, max_length=32)
    availability = serializers.ListField(required=False)
    gender = serializers.CharField(required=False, allow_blank=True, max_length=32)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    address = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if not v:
            raise serializers.ValidationError('Name cannot be empty')
        return v

    def validate_specialization(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate_address(self, v):
        return bleach.clean((v or '').strip(), strip=True)
