"""
Notification models.
"""
import uuid
from django.db import models


class PushSubscription(models.Model):
    """
    A browser Web Push subscription registered from the admin dashboard.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    endpoint = models.URLField(max_length=1000, unique=True)

    # Raw PushSubscription JSON: {"endpoint", "keys": {"p256dh", "auth"}}
    subscription = models.JSONField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'push_subscriptions'
        ordering = ['-created_at']
        verbose_name = 'Push Subscription'
        verbose_name_plural = 'Push Subscriptions'

    def __str__(self):
        return self.endpoint[:50]
