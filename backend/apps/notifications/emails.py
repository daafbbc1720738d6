"""
Reservation emails: which template, which subject, which recipients.

Each sender returns the provider message id (None when nothing was sent) so the
caller can keep the booking's sent-email ledger.
"""
import logging
from typing import Optional

from django.conf import settings
from django.template.loader import render_to_string

from .email_service import EmailService, get_email_service

logger = logging.getLogger(__name__)

# Ledger entry types
EMAIL_REQUEST = 'request'
EMAIL_CONFIRMED = 'confirmed'
EMAIL_DECLINE = 'decline'
EMAIL_VALENTINES = 'valentines'
EMAIL_RESTAURANT = 'restaurant'

LABELS_EN = {'time': 'Time', 'guests': 'Guests', 'phone': 'Phone', 'requests': 'Special requests'}
LABELS_FR = {
    'time': 'Heure', 'guests': 'Nombre de personnes',
    'phone': 'Téléphone', 'requests': 'Demandes spéciales',
}


def format_display_date(value) -> str:
    """Saturday 14 February 2026"""
    if not value:
        return ''
    return f"{value:%A} {value.day} {value:%B %Y}"


def booking_context(booking, labels=None) -> dict:
    return {
        'name': booking.name or 'Client',
        'email': booking.email,
        'phone': booking.phone,
        'date': booking.booking_date.isoformat() if booking.booking_date else '',
        'display_date': format_display_date(booking.booking_date),
        'time': booking.time_display,
        'party_size': booking.party_size,
        'special_requests': booking.special_requests,
        'status': booking.status,
        'labels': labels or LABELS_FR,
    }


def _guest_bcc():
    bcc = getattr(settings, 'EMAIL_BCC', '')
    return [bcc] if bcc else None


def send_request_received(booking, service: Optional[EmailService] = None) -> Optional[str]:
    """Acknowledge a booking held for approval."""
    service = service or get_email_service()
    html = render_to_string('emails/booking_request.html', booking_context(booking, LABELS_EN))
    return service.send(
        to=booking.email,
        subject=f"Booking Confirmation - {booking.name}",
        html=html,
        bcc=_guest_bcc(),
    )


def send_booking_confirmed(booking, service: Optional[EmailService] = None, bcc=False) -> Optional[str]:
    """Tell the guest the table is booked."""
    service = service or get_email_service()
    html = render_to_string('emails/booking_confirmed.html', booking_context(booking))
    return service.send(
        to=booking.email,
        subject="Spinella – Votre réservation est confirmée",
        html=html,
        bcc=_guest_bcc() if bcc else None,
    )


def send_booking_declined(booking, service: Optional[EmailService] = None) -> Optional[str]:
    """Tell the guest their request could not be accepted."""
    service = service or get_email_service()
    html = render_to_string('emails/booking_declined.html', booking_context(booking))
    return service.send(
        to=booking.email,
        subject="Spinella – Demande de réservation",
        html=html,
    )


def send_valentines(booking, service: Optional[EmailService] = None, bcc=False) -> Optional[str]:
    """Valentine's Day confirmation with the set menu."""
    service = service or get_email_service()
    context = booking_context(booking)
    context['flyer_url'] = f"{settings.SITE_BASE_URL}/valentines-menu.jpeg"
    html = render_to_string('emails/valentines.html', context)
    return service.send(
        to=booking.email,
        subject="Saint-Valentin à Spinella – Votre table est réservée",
        html=html,
        bcc=_guest_bcc() if bcc else None,
    )


def send_restaurant_notification(booking, service: Optional[EmailService] = None) -> Optional[str]:
    """Copy of a new booking for the restaurant inbox (RESTAURANT_EMAIL)."""
    to = getattr(settings, 'RESTAURANT_EMAIL', '')
    if not to:
        logger.warning("RESTAURANT_EMAIL not set; skipping restaurant notification")
        return None
    service = service or get_email_service()
    html = render_to_string('emails/restaurant_notification.html', booking_context(booking, LABELS_EN))
    return service.send(
        to=to,
        subject=f"[Spinella] New booking: {booking.name} – {booking.booking_date} {booking.time_display}",
        html=html,
        bcc=_guest_bcc(),
    )
