"""
Clients Serializers.
"""
from rest_framework import serializers

from .models import Client


class ClientSerializer(serializers.ModelSerializer):
    """Client with the date of their latest booking."""
    last_booking_date = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            'id', 'name', 'email', 'phone', 'source',
            'last_booking_date', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_last_booking_date(self, obj):
        dates = self.context.get('last_booking_dates') or {}
        value = dates.get(obj.email.lower())
        return value.isoformat() if value else None


class ClientInputSerializer(serializers.Serializer):
    """Single manual add."""
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    email = serializers.EmailField(max_length=320)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
