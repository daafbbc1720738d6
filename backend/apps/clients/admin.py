"""
Clients Admin Configuration.
"""
from django.contrib import admin
from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone', 'source', 'created_at']
    list_filter = ['source']
    search_fields = ['name', 'email', 'phone']
    readonly_fields = ['created_at', 'updated_at']
