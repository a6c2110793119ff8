from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    """Accepts either the username or the bound wallet as ``account``."""
    account = serializers.CharField(required=False)
    username = serializers.CharField(required=False)
    password = serializers.CharField()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('password must not be empty')
        return v

    def validate(self, attrs):
        account = (attrs.get('account') or attrs.get('username') or '').strip()
        if not account:
            raise serializers.ValidationError({'account': 'account must not be empty'})
        attrs['account'] = account
        return attrs
