"""
Restaurant Views.
"""
import logging

from rest_framework import viewsets, mixins, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import IsRestaurantAdmin
from .booking_service import BookingRejected, BookingService, booking_stats
from .models import MenuCategory, MenuItem, Booking
from .policy import get_policy
from .serializers import (
    MenuCategorySerializer, MenuCategoryCreateSerializer,
    MenuItemSerializer, MenuItemCreateSerializer,
    PublicMenuCategorySerializer, BookingSerializer, BookingStatusSerializer,
    AvailabilityQuerySerializer,
)

logger = logging.getLogger(__name__)


class MenuCategoryViewSet(viewsets.ModelViewSet):
    """ViewSet for managing menu categories."""
    permission_classes = [IsRestaurantAdmin]

    def get_queryset(self):
        queryset = MenuCategory.objects.all()

        # Filter by active status
        active = self.request.query_params.get('active')
        if active is not None:
            queryset = queryset.filter(is_active=active.lower() == 'true')

        return queryset.prefetch_related('items')

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return MenuCategoryCreateSerializer
        return MenuCategorySerializer


class MenuItemViewSet(viewsets.ModelViewSet):
    """ViewSet for managing menu items."""
    permission_classes = [IsRestaurantAdmin]

    def get_queryset(self):
        queryset = MenuItem.objects.all()

        # Filter by category
        category_id = self.request.query_params.get('category')
        if category_id:
            queryset = queryset.filter(category_id=category_id)

        # Filter by active/available/takeaway
        active = self.request.query_params.get('active')
        if active is not None:
            queryset = queryset.filter(is_active=active.lower() == 'true')

        available = self.request.query_params.get('available')
        if available is not None:
            queryset = queryset.filter(is_available=available.lower() == 'true')

        takeaway = self.request.query_params.get('takeaway')
        if takeaway is not None:
            queryset = queryset.filter(is_takeaway=takeaway.lower() == 'true')

        return queryset.select_related('category')

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return MenuItemCreateSerializer
        return MenuItemSerializer


class BookingViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """Reservations dashboard."""
    permission_classes = [IsRestaurantAdmin]
    serializer_class = BookingSerializer

    def get_queryset(self):
        queryset = Booking.objects.all()

        # Filter by status
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        # Filter by date
        date = self.request.query_params.get('date')
        if date:
            queryset = queryset.filter(booking_date=date)

        # Filter by date range
        start_date = self.request.query_params.get('start_date')
        end_date = self.request.query_params.get('end_date')
        if start_date:
            queryset = queryset.filter(booking_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(booking_date__lte=end_date)

        return queryset.order_by('booking_date', 'booking_time')

    def retrieve(self, request, *args, **kwargs):
        booking = self.get_object()
        data = dict(BookingSerializer(booking).data)
        data['email_statuses'] = BookingService().email_statuses(booking)
        return Response(data)

    def partial_update(self, request, *args, **kwargs):
        """Change the booking status (sends confirmation/decline emails)."""
        booking = self.get_object()
        serializer = BookingStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

        BookingService().change_status(booking, serializer.validated_data['status'])
        return Response({'ok': True, 'booking': BookingSerializer(booking).data})

    @action(detail=False, methods=['post'], url_path='import')
    def import_bookings(self, request):
        """Add bookings by hand: a list, {"bookings": [...]} or a single object."""
        data = request.data
        if isinstance(data, list):
            rows = data
        elif isinstance(data, dict) and isinstance(data.get('bookings'), list):
            rows = data['bookings']
        else:
            rows = [data]

        created = BookingService().import_bookings(rows)
        if not created:
            return Response({'error': 'No valid bookings to add'}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'ok': True, 'added': len(created)})

    @action(detail=False, methods=['post'])
    def valentines(self, request):
        """Send the Valentine's email to the next batch of guests."""
        service = BookingService()
        if not service.email_service.is_configured:
            return Response({'error': 'RESEND_API_KEY not set'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        if not service.policy.valentines_date:
            return Response({'error': "Valentine's date not configured"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            offset = int(request.data.get('offset') or 0)
            batch_size = int(request.data.get('batch_size') or request.data.get('batchSize') or 0)
        except (TypeError, ValueError):
            return Response({'error': 'offset and batch_size must be integers'}, status=status.HTTP_400_BAD_REQUEST)

        result = service.send_valentines_batch(offset=offset, batch_size=batch_size or 3)
        return Response(result)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Booking statistics."""
        return Response(booking_stats())


class BookingCreateView(APIView):
    """Booking form on the public website."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        try:
            booking = BookingService().submit(request.data)
        except BookingRejected as e:
            return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {'success': True, 'id': str(booking.id), 'status': booking.status},
            status=status.HTTP_201_CREATED
        )


class BookingAvailabilityView(APIView):
    """Bookable time slots for a date."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        query = AvailabilityQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {'error': 'Invalid date format. Use YYYY-MM-DD.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        day = query.validated_data['date']
        policy = get_policy()

        if policy.is_sunday(day):
            return Response({'date': day.isoformat(), 'slots': [], 'message': 'We are closed on Sundays'})
        if policy.is_date_blocked(day):
            return Response({'date': day.isoformat(), 'slots': [], 'message': policy.blocked_date_reason_for(day)})

        slots = []
        for slot in policy.time_slots_for_date(day):
            slots.append({
                'time': slot.strftime('%H:%M'),
                'available': not policy.is_past_time(day, slot),
                'request_only': policy.is_request_only_date(day) or policy.is_request_only_slot(day, slot),
            })

        return Response({
            'date': day.isoformat(),
            'lunch_only': policy.is_lunch_only_date(day),
            'request_only': policy.is_request_only_date(day),
            'request_party_size': policy.request_party_size,
            'max_party_size': policy.max_party_size,
            'slots': slots,
        })


class PublicMenuView(APIView):
    """Public menu for the website."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        categories = MenuCategory.objects.filter(is_active=True).prefetch_related('items')

        takeaway = request.query_params.get('takeaway', '').lower() == 'true'
        if takeaway:
            categories = categories.filter(
                items__is_takeaway=True, items__is_active=True, items__is_available=True
            ).distinct()

        serializer = PublicMenuCategorySerializer(
            categories, many=True, context={'takeaway': takeaway}
        )
        return Response({'categories': serializer.data})
