"""
Admin configuration for dashboard users.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'username', 'phone', 'is_staff', 'is_active', 'last_login']
    list_filter = ['is_staff', 'is_active']
    search_fields = ['email', 'username', 'phone']
    ordering = ['email']
    readonly_fields = ['created_at', 'updated_at', 'last_login']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Contact', {'fields': ('phone',)}),
        ('Timestamps', {'fields': ('created_at', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'username', 'password1', 'password2'),
        }),
    )
