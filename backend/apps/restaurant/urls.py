"""
Restaurant URLs.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    MenuCategoryViewSet, MenuItemViewSet, BookingViewSet,
    BookingCreateView, BookingAvailabilityView, PublicMenuView
)

app_name = 'restaurant'

router = DefaultRouter()
router.register(r'categories', MenuCategoryViewSet, basename='menu-category')
router.register(r'items', MenuItemViewSet, basename='menu-item')
router.register(r'bookings', BookingViewSet, basename='booking')

urlpatterns = [
    path('', include(router.urls)),
    # Public website endpoints
    path('booking/', BookingCreateView.as_view(), name='booking-create'),
    path('availability/', BookingAvailabilityView.as_view(), name='booking-availability'),
    path('public/menu/', PublicMenuView.as_view(), name='public-menu'),
]
