import bleach
from rest_framework import serializers


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class PrescriptionEntrySerializer(serializers.Serializer):
    medicine = serializers.CharField(max_length=255, required=False, allow_blank=True)
    # Older dashboard builds send the medicine as ``name``
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    dosage = serializers.CharField(max_length=255)
    frequency = serializers.CharField(max_length=255)
    duration = serializers.CharField(max_length=255, required=False, allow_blank=True)
    instructions = serializers.CharField(max_length=2000, required=False, allow_blank=True)

    def validate(self, attrs):
        # Nested under a partial update the field-level "required" checks are skipped
        medicine = _clean(attrs.get('medicine') or attrs.get('name'))
        errors = {}
        if not medicine:
            errors['medicine'] = 'This field is required.'
        for key in ('dosage', 'frequency'):
            if not attrs.get(key):
                errors[key] = 'This field is required.'
        if errors:
            raise serializers.ValidationError(errors)
        return {
            'medicine': medicine,
            'dosage': _clean(attrs['dosage']),
            'frequency': _clean(attrs['frequency']),
            'duration': _clean(attrs.get('duration')),
            'instructions': _clean(attrs.get('instructions')),
        }


class MedicalHistoryEntrySerializer(serializers.Serializer):
    condition = serializers.CharField(max_length=255)
    diagnosed_on = serializers.CharField(max_length=32, required=False, allow_blank=True)

    def validate_condition(self, v):
        return _clean(v)

    def validate(self, attrs):
        if not attrs.get('condition'):
            raise serializers.ValidationError({'condition': 'This field is required.'})
        return attrs


class PatientWriteSerializer(serializers.Serializer):
    """Demographic and clinical fields a doctor may write.

    Accepts both camelCase and the snake_case keys stored documents use.
    """
    ALIASES = {
        'medicalHistory': 'medical_history',
        'dateOfBirth': 'dob',
        'sex': 'gender',
    }

    email = serializers.EmailField(required=False)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
    name = serializers.CharField(max_length=255, required=False)
    age = serializers.IntegerField(min_value=0, max_value=150, required=False, allow_null=True)
    dob = serializers.DateField(required=False, allow_null=True)
    gender = serializers.CharField(max_length=32, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    medical_history = MedicalHistoryEntrySerializer(many=True, required=False)
    prescriptions = PrescriptionEntrySerializer(many=True, required=False)

    def to_internal_value(self, data):
        if hasattr(data, 'items'):
            data = {self.ALIASES.get(k, k): v for k, v in data.items()}
            # Blank strings from form fields mean "not provided"
            for key in ('age', 'dob'):
                if data.get(key) == '':
                    data[key] = None
        return super().to_internal_value(data)

    def validate_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_gender(self, v):
        return _clean(v)

    def validate_phone(self, v):
        return _clean(v)

    def validate_address(self, v):
        return _clean(v)


class PrescriptionDocumentSerializer(serializers.Serializer):
    """Body of ``POST /patients/<pk>/prescription``."""
    medications = PrescriptionEntrySerializer(many=True, required=False)
    notes = serializers.CharField(max_length=4000, required=False, allow_blank=True)
    pdf = serializers.CharField(required=False, allow_blank=True)

    def validate_notes(self, v):
        return _clean(v)
