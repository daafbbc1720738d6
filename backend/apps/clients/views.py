"""
Client list views for the admin dashboard.
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from apps.accounts.permissions import IsRestaurantAdmin
from apps.notifications.email_service import get_email_service
from . import services
from .models import Client
from .serializers import ClientSerializer, ClientInputSerializer

logger = logging.getLogger(__name__)


class ClientViewSet(mixins.ListModelMixin,
                    mixins.DestroyModelMixin,
                    viewsets.GenericViewSet):
    """
    Contact list.

    POST accepts one of:
    - {"name", "email", "phone"}: single manual add
    - {"clients": [...]}: bulk import, existing emails untouched
    - {"sync_from_bookings": true}
    - {"sync_from_resend": true}
    """
    permission_classes = [IsRestaurantAdmin]
    serializer_class = ClientSerializer
    queryset = Client.objects.all().order_by('-created_at')

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.action == 'list':
            context['last_booking_dates'] = services.last_booking_dates()
        return context

    def create(self, request, *args, **kwargs):
        data = request.data if isinstance(request.data, dict) else {}

        if data.get('sync_from_resend') is True:
            return self._sync_from_resend()

        if data.get('sync_from_bookings') is True:
            result = services.sync_from_bookings()
            return Response({'ok': True, **result})

        if isinstance(data.get('clients'), list):
            if not data['clients']:
                return Response({'error': 'No clients to import'}, status=status.HTTP_400_BAD_REQUEST)
            rows = [row for row in data['clients'] if isinstance(row, dict)]
            result = services.import_clients(rows, source=Client.Source.CSV_IMPORT)
            if result['total'] == 0:
                return Response({'error': 'Invalid email'}, status=status.HTTP_400_BAD_REQUEST)
            return Response({'ok': True, **result})

        if not data.get('email'):
            return Response({'error': 'No clients to import'}, status=status.HTTP_400_BAD_REQUEST)

        serializer = ClientInputSerializer(data=data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Invalid email', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        client = services.upsert_client(
            serializer.validated_data.get('name'),
            serializer.validated_data['email'],
            serializer.validated_data.get('phone'),
            source=Client.Source.MANUAL
        )
        if client is None:
            return Response({'error': 'Invalid email'}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'ok': True, 'imported': 1, 'skipped': 0, 'total': 1})

    def _sync_from_resend(self):
        email_service = get_email_service()
        if not email_service.is_configured:
            return Response(
                {'error': 'Resend not configured', 'details': 'RESEND_API_KEY not set'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        try:
            result = services.sync_from_resend(email_service)
        except Exception as e:
            logger.exception(f"Resend sync failed: {e}")
            return Response(
                {'error': 'Failed to sync from Resend', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return Response({'ok': True, **result})

    def destroy(self, request, *args, **kwargs):
        client = self.get_object()
        client.delete()
        return Response({'ok': True})
