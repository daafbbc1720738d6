"""
Client Service - keeps the contact list in step with bookings, CSV imports
and the email provider's send history.
"""
import logging
import re
from datetime import date, time
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Max
from django.db.models.functions import Lower

from apps.restaurant.models import Booking
from .models import Client

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
SENT_TIME_RE = re.compile(r'[T ](\d{2}):(\d{2})')


def clean_email(value) -> Optional[str]:
    """Lower-cased email, or None when it does not look like one."""
    if not value:
        return None
    email = str(value).strip().lower()
    return email if EMAIL_RE.match(email) else None


def clean_phone(value) -> Optional[str]:
    if value is None:
        return None
    phone = re.sub(r'\s+', ' ', str(value).strip().strip('\'"')).strip()
    return phone[:50] or None


def _clean_name(name, email: str) -> str:
    return (str(name or '').strip() or email)[:200]


def upsert_client(name, email, phone=None, source=Client.Source.MANUAL) -> Optional[Client]:
    """Create the client or update name/phone/source of the existing one."""
    email = clean_email(email)
    if not email:
        return None
    client, created = Client.objects.update_or_create(
        email=email,
        defaults={
            'name': _clean_name(name, email),
            'phone': clean_phone(phone),
            'source': source,
        }
    )
    logger.info(f"Client {'created' if created else 'updated'}: {email} ({source})")
    return client


def add_client_if_missing(name, email, phone=None, source=Client.Source.BOOKING) -> Optional[Client]:
    """Create the client only when the email is new; existing rows are left untouched."""
    email = clean_email(email)
    if not email:
        return None
    client, created = Client.objects.get_or_create(
        email=email,
        defaults={
            'name': _clean_name(name, email),
            'phone': clean_phone(phone),
            'source': source,
        }
    )
    if created:
        logger.info(f"New client from {source}: {email}")
    return client


def import_clients(rows: Iterable[Dict[str, Any]], source=Client.Source.CSV_IMPORT) -> Dict[str, int]:
    """
    Bulk import. Invalid emails are dropped, duplicates collapsed (first wins)
    and emails already in the list are never overwritten.
    """
    unique: Dict[str, Client] = {}
    for row in rows:
        email = clean_email(row.get('email'))
        if not email or email in unique:
            continue
        unique[email] = Client(
            name=_clean_name(row.get('name'), email),
            email=email,
            phone=clean_phone(row.get('phone')),
            source=source,
        )

    existing = set(
        Client.objects.filter(email__in=list(unique)).values_list('email', flat=True)
    )
    to_create = [c for email, c in unique.items() if email not in existing]
    Client.objects.bulk_create(to_create, batch_size=100)

    result = {
        'imported': len(to_create),
        'skipped': len(unique) - len(to_create),
        'total': len(unique),
    }
    logger.info(f"Client import ({source}): {result}")
    return result


def sync_from_bookings() -> Dict[str, int]:
    """One client per distinct booking email (first booking seen wins)."""
    by_email: Dict[str, Dict[str, Any]] = {}
    for name, email, phone in Booking.objects.order_by('created_at').values_list('name', 'email', 'phone'):
        email = clean_email(email)
        if email and email not in by_email:
            by_email[email] = {'name': name, 'phone': phone}

    with transaction.atomic():
        for email, row in by_email.items():
            upsert_client(row['name'], email, row['phone'], source=Client.Source.BOOKING)

    logger.info(f"Synced {len(by_email)} clients from bookings")
    return {'synced': len(by_email), 'total': len(by_email)}


def last_booking_dates() -> Dict[str, date]:
    """Latest booking date per lower-cased email."""
    rows = (
        Booking.objects.exclude(email='')
        .annotate(email_lower=Lower('email'))
        .values('email_lower')
        .annotate(last_date=Max('booking_date'))
    )
    return {row['email_lower']: row['last_date'] for row in rows}


def _sent_time(sent_at: str) -> Optional[time]:
    match = SENT_TIME_RE.search(sent_at or '')
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def sync_from_resend(email_service) -> Dict[str, int]:
    """
    Add every recipient the email provider has sent to as a client, then
    reconcile bookings: sent emails are grouped by (recipient, sent date) and
    appended to the matching booking's ledger, or kept on a placeholder
    booking (status from_resend) when no booking matches.
    """
    recipients = set()
    groups: Dict[tuple, List[Dict[str, str]]] = {}

    for item in email_service.list_sent():
        sent_at = item.get('created_at') or ''
        sent_date = sent_at[:10]
        for address in item.get('to') or []:
            if isinstance(address, dict):
                address = address.get('email')
            email = clean_email(address)
            if not email:
                continue
            recipients.add(email)
            if not sent_date:
                continue
            entries = groups.setdefault((email, sent_date), [])
            if not any(e['id'] == item['id'] for e in entries):
                entries.append({'id': item['id'], 'type': 'resend', 'sentAt': sent_at})

    client_result = import_clients(
        [{'email': email, 'name': email} for email in sorted(recipients)],
        source=Client.Source.RESEND
    )

    bookings_by_key = {}
    for booking in Booking.objects.exclude(email=''):
        bookings_by_key[(booking.email.lower(), booking.booking_date.isoformat())] = booking

    created = 0
    updated = 0
    with transaction.atomic():
        for (email, sent_date), entries in groups.items():
            booking = bookings_by_key.get((email, sent_date))
            if booking:
                known = {e.get('id') for e in booking.sent_emails or []}
                new_entries = [e for e in entries if e['id'] not in known]
                if not new_entries:
                    continue
                booking.sent_emails = list(booking.sent_emails or []) + new_entries
                booking.save(update_fields=['sent_emails', 'updated_at'])
                updated += 1
            else:
                Booking.objects.create(
                    name=email,
                    email=email,
                    booking_date=date.fromisoformat(sent_date),
                    booking_time=_sent_time(entries[0]['sentAt']),
                    party_size=1,
                    status=Booking.Status.FROM_RESEND,
                    source=Booking.Source.RESEND,
                    sent_emails=entries,
                )
                created += 1

    logger.info(f"Resend sync: {client_result}, bookings created {created}, updated {updated}")
    return {
        **client_result,
        'bookings_created': created,
        'bookings_updated': updated,
    }
