"""
Booking Service - accepts reservations from the website and applies admin
decisions.

Submission: validate, run the reservation policy, persist, then notify the
guest, the restaurant inbox and the admin browsers. Notifications are
best-effort; a booking that was saved is never lost because an email failed.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.db.models import Count, Sum

from apps.clients.models import Client
from apps.clients.services import add_client_if_missing
from apps.notifications import emails
from apps.notifications.email_service import EmailService, get_email_service
from apps.notifications.push_service import send_push_to_all
from .models import Booking
from .policy import BookingPolicy, get_policy
from .serializers import BookingSubmissionSerializer

logger = logging.getLogger(__name__)

VALENTINES_BATCH_SIZE = 3
VALENTINES_MAX_BATCH_SIZE = 10

ADMIN_STATUSES = (
    Booking.Status.CONFIRMED,
    Booking.Status.PENDING,
    Booking.Status.REQUEST,
    Booking.Status.CANCELLED,
)


class BookingRejected(Exception):
    """A submission that cannot be accepted (bad data or policy refusal)."""

    def __init__(self, reason: str, code: str = '', details: Optional[Dict[str, Any]] = None):
        super().__init__(reason)
        self.reason = reason
        self.code = code
        self.details = details

    def as_response_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'error': self.reason}
        if self.details is not None:
            data['details'] = self.details
        if self.code:
            data['code'] = self.code
        return data


class BookingService:
    """
    Reservation workflow shared by the public form, the admin dashboard and
    the import commands.
    """

    def __init__(self, policy: Optional[BookingPolicy] = None,
                 email_service: Optional[EmailService] = None):
        self.policy = policy or get_policy()
        self.email_service = email_service or get_email_service()

    # Website submission

    def submit(self, data: Dict[str, Any], now: Optional[datetime] = None) -> Booking:
        """
        Validate and store a booking from the website form.

        Raises:
            BookingRejected: invalid data, or the policy refused the date/time
        """
        serializer = BookingSubmissionSerializer(data=data)
        if not serializer.is_valid():
            logger.info(f"Invalid booking data: {serializer.errors}")
            raise BookingRejected('Invalid booking data', details=serializer.errors)
        cleaned = serializer.validated_data

        decision = self.policy.evaluate(cleaned['date'], cleaned['time'], cleaned['party_size'], now=now)
        if not decision.accepted:
            logger.info(
                f"Booking rejected ({decision.code}): {cleaned['name']}, "
                f"{cleaned['date']} {cleaned['time']:%H:%M}"
            )
            raise BookingRejected(decision.reason, code=decision.code)

        booking = Booking.objects.create(
            name=cleaned['name'],
            email=cleaned['email'],
            phone=cleaned['phone'],
            booking_date=cleaned['date'],
            booking_time=cleaned['time'],
            party_size=cleaned['party_size'],
            special_requests=cleaned.get('special_requests'),
            status=decision.status,
            review_reason=decision.code,
            source=Booking.Source.WEBSITE,
        )
        logger.info(
            f"✅ Booking created: {booking.id} - {booking.name}, {booking.party_size} guests, "
            f"{booking.booking_date} at {booking.time_display} ({booking.status})"
        )

        self._notify_new_booking(booking)
        self._remember_client(booking)
        return booking

    def _notify_new_booking(self, booking: Booking):
        try:
            if booking.status == Booking.Status.CONFIRMED:
                if self.policy.is_valentines_date(booking.booking_date):
                    email_type = emails.EMAIL_VALENTINES
                    message_id = emails.send_valentines(booking, self.email_service, bcc=True)
                else:
                    email_type = emails.EMAIL_CONFIRMED
                    message_id = emails.send_booking_confirmed(booking, self.email_service, bcc=True)
            else:
                email_type = emails.EMAIL_REQUEST
                message_id = emails.send_request_received(booking, self.email_service)
            if message_id:
                booking.record_sent_email(message_id, email_type)
        except Exception as e:
            logger.exception(f"Guest email failed for booking {booking.id}: {e}")

        try:
            message_id = emails.send_restaurant_notification(booking, self.email_service)
            if message_id:
                booking.record_sent_email(message_id, emails.EMAIL_RESTAURANT)
        except Exception as e:
            logger.exception(f"Restaurant email failed for booking {booking.id}: {e}")

        try:
            title = 'Nouvelle réservation' if booking.status == Booking.Status.CONFIRMED \
                else 'Nouvelle demande de réservation'
            send_push_to_all({
                'title': title,
                'body': f"{booking.name} – {booking.booking_date:%d.%m.%Y} {booking.time_display}, "
                        f"{booking.party_size} pers.",
                'url': '/admin',
                'tag': f"booking-{booking.id}",
            })
        except Exception as e:
            logger.exception(f"Push notification failed for booking {booking.id}: {e}")

    def _remember_client(self, booking: Booking):
        try:
            add_client_if_missing(booking.name, booking.email, booking.phone, source=Client.Source.BOOKING)
        except Exception as e:
            logger.exception(f"Could not add client for booking {booking.id}: {e}")

    # Admin decisions

    def change_status(self, booking: Booking, new_status: str) -> Booking:
        """
        Apply an admin status change.

        Moving into confirmed sends the confirmation email; cancelling a request
        or pending booking sends the decline email. The status is saved even
        when the email fails.

        Raises:
            ValueError: status is not one the admin may set
        """
        if new_status not in ADMIN_STATUSES:
            raise ValueError('Invalid status')

        previous = booking.status
        if booking.email:
            if new_status == Booking.Status.CONFIRMED and previous != Booking.Status.CONFIRMED:
                self._send_and_record(booking, emails.send_booking_confirmed, emails.EMAIL_CONFIRMED)
            elif new_status == Booking.Status.CANCELLED and previous in (
                    Booking.Status.REQUEST, Booking.Status.PENDING):
                self._send_and_record(booking, emails.send_booking_declined, emails.EMAIL_DECLINE)

        booking.set_status(new_status)
        logger.info(f"Booking {booking.id} status: {previous} -> {new_status}")
        return booking

    def _send_and_record(self, booking: Booking, sender, email_type: str):
        try:
            message_id = sender(booking, self.email_service)
        except Exception as e:
            logger.exception(f"{email_type} email failed for booking {booking.id}: {e}")
            return
        if message_id:
            booking.record_sent_email(message_id, email_type)

    def email_statuses(self, booking: Booking) -> List[Dict[str, Any]]:
        """
        The booking's sent-email ledger with each message's delivery status.
        Entries are returned as stored when the email provider is not configured.
        """
        if not self.email_service.is_configured:
            return [dict(entry) for entry in booking.sent_emails or []]

        statuses = []
        for entry in booking.sent_emails or []:
            message_id = entry.get('id')
            status = self.email_service.get_last_event(message_id) if message_id else 'unknown'
            statuses.append({**entry, 'status': status})
        return statuses

    # Bulk operations

    def import_bookings(self, rows: List[Dict[str, Any]]) -> List[Booking]:
        """
        Add bookings entered by the admin. Rows without name, date or time are
        skipped; status defaults to confirmed.
        """
        to_create = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            booking = self._booking_from_row(row)
            if booking is not None:
                to_create.append(booking)

        created = Booking.objects.bulk_create(to_create)
        logger.info(f"Imported {len(created)} bookings")
        return created

    @staticmethod
    def _booking_from_row(row: Dict[str, Any]) -> Optional[Booking]:
        name = str(row.get('name') or '').strip()
        raw_date = str(row.get('date') or '')[:10]
        raw_time = str(row.get('time') or '').strip()
        if not name or not raw_date or not raw_time:
            return None

        try:
            booking_date = datetime.strptime(raw_date, '%Y-%m-%d').date()
            booking_time = datetime.strptime(raw_time[:5], '%H:%M').time()
        except ValueError:
            logger.warning(f"Skipping booking with bad date/time: {name} {raw_date} {raw_time}")
            return None

        try:
            party_size = int(row.get('partySize') or row.get('party_size') or 1)
        except (TypeError, ValueError):
            party_size = 1

        special_requests = row.get('specialRequests', row.get('special_requests'))
        status = str(row.get('status') or Booking.Status.CONFIRMED)
        if status not in Booking.Status.values:
            status = Booking.Status.CONFIRMED

        return Booking(
            name=name[:255],
            email=str(row.get('email') or '').strip(),
            phone=str(row.get('phone') or '').strip()[:50],
            booking_date=booking_date,
            booking_time=booking_time,
            party_size=max(1, party_size),
            special_requests=str(special_requests) if special_requests is not None else None,
            status=status,
            source=Booking.Source.ADMIN,
        )

    def send_valentines_batch(self, offset: int = 0, batch_size: int = VALENTINES_BATCH_SIZE) -> Dict[str, int]:
        """
        Send the Valentine's email to the next batch of Valentine's Day guests.

        Returns:
            dict with sent, total, remaining and next_offset
        """
        offset = max(0, offset)
        batch_size = min(VALENTINES_MAX_BATCH_SIZE, max(1, batch_size))

        guests = list(
            Booking.objects.filter(booking_date=self.policy.valentines_date)
            .exclude(email='')
            .exclude(status=Booking.Status.CANCELLED)
            .order_by('created_at', 'id')
        )
        total = len(guests)
        batch = guests[offset:offset + batch_size]

        sent = 0
        for booking in batch:
            try:
                message_id = emails.send_valentines(booking, self.email_service)
            except Exception as e:
                logger.exception(f"Valentine's email failed for {booking.email}: {e}")
                continue
            if message_id:
                booking.record_sent_email(message_id, emails.EMAIL_VALENTINES)
                sent += 1

        next_offset = offset + len(batch)
        return {
            'sent': sent,
            'total': total,
            'remaining': max(0, total - next_offset),
            'next_offset': next_offset,
        }


def booking_stats() -> Dict[str, Any]:
    """Booking counts per status and total guests."""
    by_status = {status: 0 for status in Booking.Status.values}
    for row in Booking.objects.values('status').annotate(count=Count('id')):
        by_status[row['status']] = row['count']
    total_guests = Booking.objects.exclude(
        status=Booking.Status.CANCELLED
    ).aggregate(total=Sum('party_size'))['total'] or 0
    return {
        'total': sum(by_status.values()),
        'by_status': by_status,
        'total_guests': total_guests,
    }


def submit_booking(data: Dict[str, Any], now: Optional[datetime] = None) -> Booking:
    return BookingService().submit(data, now=now)


def change_status(booking: Booking, new_status: str) -> Booking:
    return BookingService().change_status(booking, new_status)
