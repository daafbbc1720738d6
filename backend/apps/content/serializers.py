"""
Content Serializers.
"""
from rest_framework import serializers

from .models import Event, FAQ


class EventSerializer(serializers.ModelSerializer):
    """Serializer for Event."""

    class Meta:
        model = Event
        fields = [
            'id', 'title', 'description', 'event_date', 'start_time',
            'image_url', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class FAQSerializer(serializers.ModelSerializer):
    """Serializer for FAQ."""

    class Meta:
        model = FAQ
        fields = [
            'id', 'question', 'answer', 'language', 'order', 'is_active',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class PublicEventSerializer(serializers.ModelSerializer):

    class Meta:
        model = Event
        fields = ['id', 'title', 'description', 'event_date', 'start_time', 'image_url']


class PublicFAQSerializer(serializers.ModelSerializer):

    class Meta:
        model = FAQ
        fields = ['id', 'question', 'answer', 'language']
