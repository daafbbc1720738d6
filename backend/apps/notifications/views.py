"""
Web Push endpoints used by the admin dashboard.
"""
import logging

from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import IsRestaurantAdmin
from . import push_service

logger = logging.getLogger(__name__)


class VapidPublicKeyView(APIView):
    """Public VAPID key the browser needs to subscribe."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        if not settings.VAPID_PUBLIC_KEY:
            return Response(
                {'error': 'Push not configured'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        return Response({'publicKey': settings.VAPID_PUBLIC_KEY})


class PushSubscribeView(APIView):
    """Store the admin browser's push subscription."""
    permission_classes = [IsRestaurantAdmin]

    def post(self, request):
        data = request.data
        subscription = data.get('subscription', data) if isinstance(data, dict) else None
        if not isinstance(subscription, dict) or not subscription.get('endpoint'):
            return Response(
                {'error': 'Invalid subscription'},
                status=status.HTTP_400_BAD_REQUEST
            )
        push_service.save_subscription(subscription)
        return Response({'ok': True})


class PushSendView(APIView):
    """Send a notification to every subscribed admin browser."""
    permission_classes = [IsRestaurantAdmin]

    def post(self, request):
        if not push_service.is_configured():
            return Response(
                {'error': 'Push not configured'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        payload = {
            key: request.data.get(key)
            for key in ('title', 'body', 'icon', 'url', 'tag')
        }
        result = push_service.send_push_to_all(payload)
        return Response(result)
