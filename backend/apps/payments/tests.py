"""
Tests for payments app: takeaway checkout.
"""
from unittest.mock import MagicMock, patch

import stripe
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from apps.payments.checkout import build_line_items, checkout_locale
from apps.restaurant.models import MenuCategory, MenuItem


class CheckoutTestMixin:

    def setUp(self):
        self.client = APIClient()
        category = MenuCategory.objects.create(name='Takeaway')
        MenuItem.objects.create(
            category=category, name='Tiramisù', slug='tiramisu', price='9.00',
            is_takeaway=True, stripe_price_id='price_tiramisu'
        )
        MenuItem.objects.create(
            category=category, name='Pasta', slug='pasta', price='22.00',
            is_takeaway=True, stripe_price_id='price_pasta'
        )
        MenuItem.objects.create(
            category=category, name='Dine-in only', slug='osso-buco', price='38.00',
            stripe_price_id='price_osso'
        )


class LineItemsTest(CheckoutTestMixin, TestCase):
    """Test cart to Stripe line item mapping"""

    def test_build_line_items(self):
        line_items = build_line_items([
            {'id': 'tiramisu', 'quantity': 2},
            {'id': 'pasta', 'quantity': 0},
            {'id': 'osso-buco', 'quantity': 1},
            {'id': 'unknown', 'quantity': 1},
            {'id': 'pasta', 'quantity': 'x'},
        ])
        self.assertEqual(line_items, [{'price': 'price_tiramisu', 'quantity': 2}])

    def test_checkout_locale(self):
        self.assertEqual(checkout_locale('fr'), 'fr')
        self.assertEqual(checkout_locale('de'), 'de')
        self.assertEqual(checkout_locale('it'), 'en')
        self.assertEqual(checkout_locale(None), 'en')


@override_settings(STRIPE_SECRET_KEY='sk_test_123', SITE_BASE_URL='https://www.spinella.ch')
class CheckoutAPITest(CheckoutTestMixin, TestCase):
    """Test POST /api/payments/checkout/"""

    @override_settings(STRIPE_SECRET_KEY='')
    def test_not_configured(self):
        response = self.client.post('/api/payments/checkout/', {'items': [{'id': 'pasta', 'quantity': 1}]},
                                    format='json')
        self.assertEqual(response.status_code, 503)

    def test_no_items(self):
        response = self.client.post('/api/payments/checkout/', {'items': []}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'No items')

    @patch('apps.payments.checkout.stripe.checkout.Session.create')
    def test_no_valid_items(self, mock_create):
        response = self.client.post('/api/payments/checkout/', {'items': [{'id': 'osso-buco', 'quantity': 1}]},
                                    format='json')
        self.assertEqual(response.status_code, 400)
        mock_create.assert_not_called()

    @patch('apps.payments.checkout.stripe.checkout.Session.create')
    def test_creates_session(self, mock_create):
        mock_create.return_value = MagicMock(id='cs_test_1', url='https://checkout.stripe.com/c/pay/cs_test_1')

        response = self.client.post('/api/payments/checkout/', {
            'items': [{'id': 'tiramisu', 'quantity': 2}, {'id': 'pasta', 'quantity': 1}],
            'locale': 'fr',
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['url'], 'https://checkout.stripe.com/c/pay/cs_test_1')
        kwargs = mock_create.call_args[1]
        self.assertEqual(kwargs['mode'], 'payment')
        self.assertEqual(kwargs['locale'], 'fr')
        self.assertEqual(kwargs['line_items'], [
            {'price': 'price_tiramisu', 'quantity': 2},
            {'price': 'price_pasta', 'quantity': 1},
        ])
        self.assertEqual(kwargs['success_url'], 'https://www.spinella.ch/takeaway?success=1')
        self.assertEqual(kwargs['cancel_url'], 'https://www.spinella.ch/takeaway?cancel=1')

    @patch('apps.payments.checkout.stripe.checkout.Session.create')
    def test_stripe_error(self, mock_create):
        mock_create.side_effect = stripe.StripeError('card network down')
        response = self.client.post('/api/payments/checkout/', {'items': [{'id': 'pasta', 'quantity': 1}]},
                                    format='json')
        self.assertEqual(response.status_code, 500)
