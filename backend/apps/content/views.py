"""
Content Views - public listings and admin management.
"""
from django.utils import timezone
from rest_framework import generics, permissions, viewsets

from apps.accounts.permissions import IsRestaurantAdmin
from .models import Event, FAQ
from .serializers import (
    EventSerializer, FAQSerializer, PublicEventSerializer, PublicFAQSerializer
)


class EventViewSet(viewsets.ModelViewSet):
    """ViewSet for managing events."""
    permission_classes = [IsRestaurantAdmin]
    serializer_class = EventSerializer

    def get_queryset(self):
        queryset = Event.objects.all()

        active = self.request.query_params.get('active')
        if active is not None:
            queryset = queryset.filter(is_active=active.lower() == 'true')

        return queryset


class FAQViewSet(viewsets.ModelViewSet):
    """ViewSet for managing FAQs."""
    permission_classes = [IsRestaurantAdmin]
    serializer_class = FAQSerializer

    def get_queryset(self):
        queryset = FAQ.objects.all()

        language = self.request.query_params.get('language')
        if language:
            queryset = queryset.filter(language=language)

        active = self.request.query_params.get('active')
        if active is not None:
            queryset = queryset.filter(is_active=active.lower() == 'true')

        return queryset


class PublicEventListView(generics.ListAPIView):
    """Upcoming events for the website."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    serializer_class = PublicEventSerializer

    def get_queryset(self):
        today = timezone.localdate()
        return Event.objects.filter(is_active=True, event_date__gte=today)


class PublicFAQListView(generics.ListAPIView):
    """Active FAQs, optionally in one language (?lang=fr)."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    serializer_class = PublicFAQSerializer

    def get_queryset(self):
        queryset = FAQ.objects.filter(is_active=True)
        language = self.request.query_params.get('lang')
        if language:
            queryset = queryset.filter(language=language)
        return queryset
