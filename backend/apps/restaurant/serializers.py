"""
Restaurant Serializers.
"""
import re
from decimal import Decimal

from rest_framework import serializers

from .models import MenuCategory, MenuItem, Booking

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


class MenuItemSerializer(serializers.ModelSerializer):
    """Serializer for MenuItem."""
    category_name = serializers.CharField(source='category.name', read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'category', 'category_name', 'name', 'slug', 'description',
            'price', 'dietary_info', 'image_url', 'is_takeaway', 'stripe_price_id',
            'display_order', 'is_available', 'is_active',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class MenuItemCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating/updating menu items."""

    class Meta:
        model = MenuItem
        fields = [
            'id', 'category', 'name', 'slug', 'description', 'price',
            'dietary_info', 'image_url', 'is_takeaway', 'stripe_price_id',
            'display_order', 'is_available', 'is_active'
        ]
        read_only_fields = ['id']

    def validate_price(self, value):
        if value < Decimal('0.00'):
            raise serializers.ValidationError("Price cannot be negative.")
        return value

    def validate(self, data):
        is_takeaway = data.get('is_takeaway', getattr(self.instance, 'is_takeaway', False))
        price_id = data.get('stripe_price_id', getattr(self.instance, 'stripe_price_id', ''))
        if is_takeaway and not price_id:
            raise serializers.ValidationError({
                'stripe_price_id': "Takeaway items need a Stripe price."
            })
        return data


class MenuCategorySerializer(serializers.ModelSerializer):
    """Serializer for MenuCategory with nested items."""
    items = MenuItemSerializer(many=True, read_only=True)
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = MenuCategory
        fields = [
            'id', 'name', 'description', 'display_order', 'is_active',
            'items', 'items_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_items_count(self, obj):
        return obj.items.filter(is_active=True).count()


class MenuCategoryCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating/updating menu categories."""

    class Meta:
        model = MenuCategory
        fields = ['id', 'name', 'description', 'display_order', 'is_active']
        read_only_fields = ['id']


# Public website serializers
class PublicMenuItemSerializer(serializers.ModelSerializer):
    """Public serializer for menu items."""

    class Meta:
        model = MenuItem
        fields = [
            'id', 'slug', 'name', 'description', 'price',
            'dietary_info', 'image_url', 'is_takeaway'
        ]


class PublicMenuCategorySerializer(serializers.ModelSerializer):
    """Public serializer for menu categories."""
    items = serializers.SerializerMethodField()

    class Meta:
        model = MenuCategory
        fields = ['id', 'name', 'description', 'items']

    def get_items(self, obj):
        items = obj.items.filter(is_active=True, is_available=True)
        # Takeaway page only lists items that can be ordered
        if self.context.get('takeaway'):
            items = items.filter(is_takeaway=True)
        return PublicMenuItemSerializer(items, many=True).data


class BookingSerializer(serializers.ModelSerializer):
    """Serializer for Booking (admin dashboard)."""
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    source_display = serializers.CharField(source='get_source_display', read_only=True)
    time = serializers.CharField(source='time_display', read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'name', 'email', 'phone',
            'booking_date', 'booking_time', 'time', 'party_size',
            'special_requests', 'status', 'status_display', 'review_reason',
            'source', 'source_display', 'sent_emails',
            'confirmed_at', 'cancelled_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class BookingStatusSerializer(serializers.Serializer):
    """Status change from the admin dashboard."""
    status = serializers.ChoiceField(
        choices=[
            Booking.Status.CONFIRMED, Booking.Status.PENDING,
            Booking.Status.REQUEST, Booking.Status.CANCELLED,
        ],
        error_messages={'invalid_choice': 'Invalid status'}
    )


class BookingSubmissionSerializer(serializers.Serializer):
    """
    Booking form submitted from the public website.

    Accepts both snake_case and the form's camelCase keys
    (partySize, specialRequests).
    """
    CAMEL_CASE_KEYS = {'partySize': 'party_size', 'specialRequests': 'special_requests'}

    name = serializers.CharField(min_length=2, max_length=255)
    email = serializers.CharField(max_length=320)
    phone = serializers.CharField(min_length=10, max_length=50)
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
    time = serializers.TimeField(input_formats=['%H:%M'])
    party_size = serializers.IntegerField(min_value=1)
    special_requests = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=2000
    )

    def to_internal_value(self, data):
        if hasattr(data, 'items'):
            data = {self.CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}
        return super().to_internal_value(data)

    def validate_email(self, value):
        value = value.strip()
        if not EMAIL_RE.match(value):
            raise serializers.ValidationError("Enter a valid email address.")
        return value

    def validate_special_requests(self, value):
        return value.strip() or None if value else None


class AvailabilityQuerySerializer(serializers.Serializer):
    """Query for the bookable slots of a date."""
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
