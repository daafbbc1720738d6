"""
Push notification URLs.
"""
from django.urls import path

from .views import VapidPublicKeyView, PushSubscribeView, PushSendView

app_name = 'notifications'

urlpatterns = [
    path('vapid-public-key/', VapidPublicKeyView.as_view(), name='vapid-public-key'),
    path('subscribe/', PushSubscribeView.as_view(), name='push-subscribe'),
    path('send/', PushSendView.as_view(), name='push-send'),
]
