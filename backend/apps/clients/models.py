"""
Client contact list.
"""
import uuid
from django.db import models


class Client(models.Model):
    """
    A deduplicated guest contact (one row per email).
    """
    class Source(models.TextChoices):
        BOOKING = 'booking', 'Booking'
        MANUAL = 'manual', 'Manual'
        CSV_IMPORT = 'csv_import', 'CSV Import'
        RESEND = 'resend', 'Email history'
        WIX_CSV = 'wix_csv', 'Wix export'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    email = models.EmailField(max_length=320, unique=True)
    phone = models.CharField(max_length=50, null=True, blank=True)

    source = models.CharField(
        max_length=20,
        choices=Source.choices,
        default=Source.BOOKING
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['-created_at']
        verbose_name = 'Client'
        verbose_name_plural = 'Clients'

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)
