"""
Website content: events and FAQ.
"""
import uuid
from django.db import models


class Event(models.Model):
    """
    An event announced on the website (wine tasting, private evening, ...).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    event_date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    image_url = models.URLField(blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'events'
        ordering = ['event_date', 'start_time']
        verbose_name = 'Event'
        verbose_name_plural = 'Events'

    def __str__(self):
        return f"{self.title} ({self.event_date})"


class FAQ(models.Model):
    """
    Frequently Asked Questions shown on the website.
    """
    class Language(models.TextChoices):
        FRENCH = 'fr', 'Français'
        ENGLISH = 'en', 'English'
        GERMAN = 'de', 'Deutsch'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    question = models.TextField()
    answer = models.TextField()
    language = models.CharField(
        max_length=2,
        choices=Language.choices,
        default=Language.FRENCH
    )

    # Ordering and status
    order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'faqs'
        ordering = ['order', '-created_at']
        verbose_name = 'FAQ'
        verbose_name_plural = 'FAQs'

    def __str__(self):
        return f"FAQ: {self.question[:50]}..."
