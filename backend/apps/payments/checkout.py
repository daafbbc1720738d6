"""
Checkout Service - Stripe Checkout sessions for takeaway orders.

Cart items reference menu items by slug; the Stripe price charged is the
item's stripe_price_id.
"""
import logging
from typing import Any, Dict, List

import stripe
from django.conf import settings

from apps.restaurant.models import MenuItem

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES = ('fr', 'de', 'en')


class CheckoutError(Exception):
    """Cart cannot be turned into a checkout session."""


def checkout_locale(locale) -> str:
    return locale if locale in SUPPORTED_LOCALES else 'en'


def build_line_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Map cart items ({id, quantity}) to Stripe line items.
    Unknown items, items without a price and non-positive quantities are dropped.
    """
    slugs = [str(item.get('id')) for item in items if isinstance(item, dict) and item.get('id')]
    prices = dict(
        MenuItem.objects.filter(
            slug__in=slugs, is_takeaway=True, is_active=True, is_available=True
        ).exclude(stripe_price_id='').values_list('slug', 'stripe_price_id')
    )

    line_items = []
    for item in items:
        if not isinstance(item, dict):
            continue
        price_id = prices.get(str(item.get('id')))
        try:
            quantity = int(item.get('quantity') or 0)
        except (TypeError, ValueError):
            continue
        if price_id and quantity > 0:
            line_items.append({'price': price_id, 'quantity': quantity})
    return line_items


def create_checkout_session(items: List[Dict[str, Any]], locale: str = 'en') -> str:
    """
    Create a Stripe Checkout session and return its URL.

    Raises:
        CheckoutError: no cart item maps to a Stripe price
        stripe.StripeError: the Stripe API call failed
    """
    line_items = build_line_items(items)
    if not line_items:
        raise CheckoutError('No valid items')

    stripe.api_key = settings.STRIPE_SECRET_KEY
    base_url = settings.SITE_BASE_URL
    session = stripe.checkout.Session.create(
        mode='payment',
        line_items=line_items,
        locale=checkout_locale(locale),
        success_url=f"{base_url}/takeaway?success=1",
        cancel_url=f"{base_url}/takeaway?cancel=1",
    )
    logger.info(f"Checkout session created: {session.id} ({len(line_items)} line items)")
    return session.url
