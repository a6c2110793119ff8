from rest_framework import serializers

from ledger.serializers.identities import WalletField


class ReportWriteSerializer(serializers.Serializer):
    patient = WalletField()
    reportNumber = serializers.IntegerField(min_value=0, source='report_number')
    date = serializers.CharField(max_length=64)
    contentHash = serializers.CharField(max_length=255, source='content_hash')

    def validate_contentHash(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('contentHash must not be empty')
        return v
