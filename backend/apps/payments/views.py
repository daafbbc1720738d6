"""
Takeaway checkout view.
"""
import logging

import stripe
from django.conf import settings
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .checkout import CheckoutError, create_checkout_session

logger = logging.getLogger(__name__)


class CheckoutView(APIView):
    """Start a Stripe Checkout for the takeaway cart."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        if not settings.STRIPE_SECRET_KEY:
            return Response(
                {'error': 'Stripe is not configured. Set STRIPE_SECRET_KEY.'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        items = request.data.get('items') if isinstance(request.data, dict) else None
        if not isinstance(items, list) or not items:
            return Response({'error': 'No items'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            url = create_checkout_session(items, request.data.get('locale') or 'en')
        except CheckoutError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout failed: {e}")
            return Response(
                {'error': 'Failed to create checkout session'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({'url': url})
