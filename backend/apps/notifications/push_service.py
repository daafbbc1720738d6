"""
Web Push delivery to the admin dashboard's subscribed browsers.
"""
import json
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from pywebpush import WebPushException, webpush

from .models import PushSubscription

logger = logging.getLogger(__name__)

DEFAULT_TITLE = 'Spinella Restaurant'
DEFAULT_BODY = 'Nouvelle notification'
DEFAULT_ICON = '/icon-192.png'
DEFAULT_URL = '/admin'
DEFAULT_TAG = 'spinella-notification'


def is_configured() -> bool:
    return bool(settings.VAPID_PUBLIC_KEY and settings.VAPID_PRIVATE_KEY)


def build_payload(payload: Optional[Dict[str, Any]] = None) -> str:
    payload = payload or {}
    return json.dumps({
        'title': payload.get('title') or DEFAULT_TITLE,
        'body': payload.get('body') or DEFAULT_BODY,
        'icon': payload.get('icon') or DEFAULT_ICON,
        'url': payload.get('url') or DEFAULT_URL,
        'tag': payload.get('tag') or DEFAULT_TAG,
    })


def save_subscription(subscription: Dict[str, Any]) -> PushSubscription:
    """Store (or refresh) a browser subscription, keyed by its endpoint."""
    obj, created = PushSubscription.objects.update_or_create(
        endpoint=subscription['endpoint'],
        defaults={'subscription': subscription}
    )
    logger.info(f"Stored push subscription for {obj.endpoint[:50]}... (new: {created})")
    return obj


def send_push_to_all(payload: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
    """
    Send a notification to every stored subscription.

    Subscriptions the push service reports as gone (404/410) are deleted.

    Returns:
        dict with 'sent' and 'failed' counts
    """
    if not is_configured():
        logger.warning("VAPID keys not set; skipping push")
        return {'sent': 0, 'failed': 0}

    subscriptions = list(PushSubscription.objects.all())
    if not subscriptions:
        logger.info("No push subscriptions to send to")
        return {'sent': 0, 'failed': 0}

    data = build_payload(payload)
    sent = 0
    failed = 0

    for sub in subscriptions:
        try:
            webpush(
                subscription_info=sub.subscription,
                data=data,
                vapid_private_key=settings.VAPID_PRIVATE_KEY.strip(),
                vapid_claims={'sub': settings.VAPID_CLAIMS_EMAIL},
            )
            sent += 1
        except WebPushException as e:
            failed += 1
            status_code = getattr(getattr(e, 'response', None), 'status_code', None)
            logger.error(f"Push failed for {sub.endpoint[:50]}: {e}")
            if status_code in (404, 410):
                sub.delete()
                logger.info(f"Removed expired push subscription {sub.endpoint[:50]}")

    logger.info(f"Push sent: {sent}, failed: {failed}")
    return {'sent': sent, 'failed': failed}
