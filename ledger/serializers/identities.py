import bleach
from rest_framework import serializers

from ledger.models import WALLET_MAX_LENGTH


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=set(), strip=True)


# path segments routed ahead of ``<wallet>`` lookups
RESERVED_WALLETS = frozenset({'register'})


class WalletField(serializers.CharField):
    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', WALLET_MAX_LENGTH)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        v = super().to_internal_value(data).strip()
        if not v:
            raise serializers.ValidationError('wallet must not be empty')
        if v in RESERVED_WALLETS:
            raise serializers.ValidationError(f'{v!r} is reserved and cannot be used as a wallet')
        return v


class DoctorRegisterSerializer(serializers.Serializer):
    wallet = WalletField()
    name = serializers.CharField(max_length=255)
    contact = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    experienceYears = serializers.IntegerField(min_value=0, source='experience_years', required=False, default=0)
    specialty = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    emergencyAvailable = serializers.BooleanField(source='emergency_available', required=False, default=False)
    availableTime = serializers.CharField(max_length=255, source='available_time', required=False, allow_blank=True, default='')

    def validate_name(self, v):
        return clean_text(v)

    def validate_contact(self, v):
        return clean_text(v)

    def validate_specialty(self, v):
        return clean_text(v)

    def validate_availableTime(self, v):
        return clean_text(v)


class PatientRegisterSerializer(serializers.Serializer):
    wallet = WalletField()
    conditions = serializers.CharField(required=False, allow_blank=True, default='')
    medications = serializers.CharField(required=False, allow_blank=True, default='')
    allergies = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_conditions(self, v):
        return clean_text(v)

    def validate_medications(self, v):
        return clean_text(v)

    def validate_allergies(self, v):
        return clean_text(v)


class DoctorListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=64, required=False, allow_blank=True)
    emergencyOnly = serializers.BooleanField(required=False, default=False)


class PermissionChangeSerializer(serializers.Serializer):
    patient = WalletField(required=False)
    doctor = WalletField()


class PatientAssignSerializer(serializers.Serializer):
    patient = WalletField()


class TestResultSerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=255)
