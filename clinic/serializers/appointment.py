import bleach
from rest_framework import serializers


class BookAppointmentSerializer(serializers.Serializer):
    doctorId = serializers.CharField(max_length=32)
    date = serializers.CharField(max_length=32)
    time = serializers.CharField(max_length=16)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    department = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate_reason(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate_department(self, v):
        return bleach.clean((v or '').strip(), strip=True)
