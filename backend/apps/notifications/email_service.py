"""
Email Service - transactional email through the Resend API.

Sending is best-effort: failures are logged and reported as a missing message
id, never raised to the caller.
"""
import logging
from typing import Any, Dict, Iterator, List, Optional

import resend
from django.conf import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Thin wrapper over the Resend SDK.
    """

    LIST_PAGE_SIZE = 100

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.from_email = from_email or settings.EMAIL_FROM

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _activate(self):
        resend.api_key = self.api_key

    def send(
        self,
        to: str,
        subject: str,
        html: str,
        bcc: Optional[List[str]] = None,
    ) -> Optional[str]:
        """
        Send an email.

        Returns:
            The provider message id, or None when not configured or failed.
        """
        if not self.is_configured:
            logger.warning(f"RESEND_API_KEY not set - skipping email to {to}: {subject}")
            return None

        params: Dict[str, Any] = {
            'from': self.from_email,
            'to': [to],
            'subject': subject,
            'html': html,
        }
        if bcc:
            params['bcc'] = bcc

        try:
            self._activate()
            response = resend.Emails.send(params)
        except Exception as e:
            logger.error(f"Failed to send email to {to} ({subject}): {e}")
            return None

        message_id = response.get('id') if isinstance(response, dict) else getattr(response, 'id', None)
        logger.info(f"Email sent to {to} - Subject: {subject} - id: {message_id}")
        return message_id

    def get_last_event(self, message_id: str) -> str:
        """
        Delivery status of a sent email ("delivered", "opened", ...).
        Returns "unknown" when the provider has none and "—" when the lookup fails.
        """
        try:
            self._activate()
            email = resend.Emails.get(message_id)
        except Exception as e:
            logger.warning(f"Could not fetch email status for {message_id}: {e}")
            return '—'
        if isinstance(email, dict):
            return email.get('last_event') or 'unknown'
        return getattr(email, 'last_event', None) or 'unknown'

    def list_sent(self) -> Iterator[Dict[str, Any]]:
        """Iterate over every email the account has sent, newest first."""
        self._activate()
        after = None
        while True:
            params: Dict[str, Any] = {'limit': self.LIST_PAGE_SIZE}
            if after:
                params['after'] = after
            page = resend.Emails.list(params)
            items = page.get('data') or []
            for item in items:
                yield item
            if not items or not page.get('has_more'):
                break
            after = items[-1]['id']


def get_email_service() -> EmailService:
    return EmailService()
