"""
Restaurant Admin Configuration.
"""
from django.contrib import admin
from .models import MenuCategory, MenuItem, Booking


@admin.register(MenuCategory)
class MenuCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'display_order', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name']
    ordering = ['display_order', 'name']


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'is_takeaway', 'is_available', 'is_active']
    list_filter = ['category', 'is_takeaway', 'is_available', 'is_active']
    search_fields = ['name', 'description', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['category', 'display_order', 'name']


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'email', 'booking_date', 'booking_time',
        'party_size', 'status', 'source'
    ]
    list_filter = ['status', 'source', 'booking_date']
    search_fields = ['name', 'email', 'phone']
    ordering = ['-booking_date', '-booking_time']
    readonly_fields = ['sent_emails', 'confirmed_at', 'cancelled_at', 'created_at', 'updated_at']

    fieldsets = (
        ('Booking Details', {
            'fields': ('booking_date', 'booking_time', 'party_size')
        }),
        ('Guest', {
            'fields': ('name', 'email', 'phone')
        }),
        ('Requests', {
            'fields': ('special_requests',)
        }),
        ('Status', {
            'fields': (
                'status', 'review_reason', 'source',
                'confirmed_at', 'cancelled_at', 'sent_emails'
            )
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
