"""
Restaurant Models.

Models for the restaurant website and reservations:
- MenuCategory: Categories for menu items (e.g., Antipasti, Pasta, Dolci)
- MenuItem: Individual menu items, optionally sold for takeaway
- Booking: Table reservations with their sent-email ledger
"""
import uuid
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone


class MenuCategory(models.Model):
    """
    Menu category for organizing menu items.
    Examples: Antipasti, Primi, Secondi, Dolci
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)

    # Ordering
    display_order = models.PositiveIntegerField(default=0)

    # Status
    is_active = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'restaurant_menu_categories'
        ordering = ['display_order', 'name']
        verbose_name = 'Menu Category'
        verbose_name_plural = 'Menu Categories'

    def __str__(self):
        return self.name


class MenuItem(models.Model):
    """
    Individual menu item with price and details.
    Items flagged for takeaway carry the Stripe price used at checkout.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.ForeignKey(
        MenuCategory,
        on_delete=models.CASCADE,
        related_name='items'
    )

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    # Pricing (CHF)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Dietary information (stored as JSON for flexibility)
    dietary_info = models.JSONField(
        default=dict,
        blank=True,
        help_text='Dietary flags: vegetarian, vegan, gluten_free, contains_nuts, etc.'
    )

    image_url = models.URLField(blank=True)

    # Takeaway
    is_takeaway = models.BooleanField(default=False)
    stripe_price_id = models.CharField(
        max_length=100,
        blank=True,
        help_text='Stripe Price ID charged when ordered for takeaway'
    )

    # Ordering
    display_order = models.PositiveIntegerField(default=0)

    # Availability
    is_available = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'restaurant_menu_items'
        ordering = ['display_order', 'name']
        verbose_name = 'Menu Item'
        verbose_name_plural = 'Menu Items'
        indexes = [
            models.Index(fields=['category', 'is_active', 'is_available'], name='restaurant__categor_5b1e0c_idx'),
        ]

    def __str__(self):
        return f"{self.name} - CHF {self.price}"


class Booking(models.Model):
    """
    Restaurant table booking/reservation.
    """
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        REQUEST = 'request', 'Request'
        CONFIRMED = 'confirmed', 'Confirmed'
        CANCELLED = 'cancelled', 'Cancelled'
        FROM_RESEND = 'from_resend', 'From email history'

    class Source(models.TextChoices):
        WEBSITE = 'website', 'Website'
        ADMIN = 'admin', 'Admin import'
        WIX = 'wix', 'Wix export'
        RESEND = 'resend', 'Email history'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Guest
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=320, blank=True)
    phone = models.CharField(max_length=50, blank=True)

    # Booking details
    booking_date = models.DateField()
    booking_time = models.TimeField(null=True, blank=True)
    party_size = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)]
    )
    special_requests = models.TextField(null=True, blank=True)

    # Status
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    review_reason = models.CharField(
        max_length=50,
        blank=True,
        help_text='Why the booking was held for approval (request_only_date, large_party, ...)'
    )

    source = models.CharField(
        max_length=20,
        choices=Source.choices,
        default=Source.WEBSITE
    )

    # Every email the provider accepted: [{"id", "type", "sentAt"}]
    sent_emails = models.JSONField(default=list, blank=True)

    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'restaurant_bookings'
        ordering = ['booking_date', 'booking_time']
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        indexes = [
            models.Index(fields=['booking_date', 'status'], name='restaurant__booking_8c2f4a_idx'),
            models.Index(fields=['email'], name='restaurant__email_3d9e71_idx'),
        ]

    def __str__(self):
        return f"{self.name} - {self.booking_date} {self.time_display} ({self.party_size} guests)"

    @property
    def time_display(self):
        return self.booking_time.strftime('%H:%M') if self.booking_time else '—'

    def record_sent_email(self, message_id, email_type, sent_at=None):
        """Append a provider message id to the sent-email ledger and save it."""
        sent_at = sent_at or timezone.now()
        self.sent_emails = list(self.sent_emails or []) + [{
            'id': message_id,
            'type': email_type,
            'sentAt': sent_at.isoformat(),
        }]
        self.save(update_fields=['sent_emails', 'updated_at'])

    def set_status(self, status):
        """Store a new status, stamping confirmation/cancellation times."""
        self.status = status
        if status == self.Status.CONFIRMED:
            self.confirmed_at = timezone.now()
        elif status == self.Status.CANCELLED:
            self.cancelled_at = timezone.now()
        self.save(update_fields=['status', 'confirmed_at', 'cancelled_at', 'updated_at'])
