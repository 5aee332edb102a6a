"""Response shapes for the auth endpoints (camelCase, like the browser side)."""

from rest_framework import serializers

from tasktrack.models import Passkey, User


class UserSerializer(serializers.ModelSerializer):
    displayName = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "displayName"]
        read_only_fields = fields


class PasskeySerializer(serializers.ModelSerializer):
    """A registered device, without key material"""

    signCount = serializers.IntegerField(source="sign_count", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    lastUsedAt = serializers.DateTimeField(source="last_used_at", read_only=True)

    class Meta:
        model = Passkey
        fields = ["id", "name", "transports", "signCount", "createdAt", "lastUsedAt"]
        read_only_fields = fields
