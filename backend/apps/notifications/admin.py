"""
Notifications Admin Configuration.
"""
from django.contrib import admin
from .models import PushSubscription


@admin.register(PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['endpoint', 'created_at']
    search_fields = ['endpoint']
    readonly_fields = ['subscription', 'created_at', 'updated_at']
