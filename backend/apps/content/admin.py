"""
Content Admin Configuration.
"""
from django.contrib import admin
from .models import Event, FAQ


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'event_date', 'start_time', 'is_active']
    list_filter = ['is_active', 'event_date']
    search_fields = ['title', 'description']


@admin.register(FAQ)
class FAQAdmin(admin.ModelAdmin):
    list_display = ['question', 'language', 'order', 'is_active']
    list_filter = ['language', 'is_active']
    search_fields = ['question', 'answer']
    ordering = ['language', 'order']
