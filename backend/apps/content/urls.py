"""
Content URLs.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import EventViewSet, FAQViewSet, PublicEventListView, PublicFAQListView

app_name = 'content'

router = DefaultRouter()
router.register(r'events', EventViewSet, basename='event')
router.register(r'faqs', FAQViewSet, basename='faq')

urlpatterns = [
    path('events/', PublicEventListView.as_view(), name='public-events'),
    path('faqs/', PublicFAQListView.as_view(), name='public-faqs'),
    path('admin/', include(router.urls)),
]
