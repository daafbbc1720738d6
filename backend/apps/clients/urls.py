"""
Clients URLs.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import ClientViewSet

app_name = 'clients'

router = SimpleRouter()
router.register(r'', ClientViewSet, basename='client')

urlpatterns = [
    path('', include(router.urls)),
]
