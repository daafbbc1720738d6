"""
Accounts serializers for API.
"""
from rest_framework import serializers
from django.contrib.auth import get_user_model

from .permissions import is_allowed_admin

User = get_user_model()


class CurrentUserSerializer(serializers.ModelSerializer):
    """Serializer for the current authenticated user."""
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'username', 'first_name', 'last_name', 'phone', 'date_joined', 'is_admin']
        read_only_fields = fields

    def get_is_admin(self, obj):
        return is_allowed_admin(obj)
