"""
Reservation policy - which dates and slots can be booked, and whether a
booking is confirmed straight away or held for manual approval.

Opening rules (15-minute slots):
- Monday-Wednesday: 12:00-14:00 and 17:30-22:00
- Thursday-Friday: 12:00-14:00 and 17:30-22:30
- Saturday: 17:30-22:30 only
- Sunday: closed

Date rules come from settings.BOOKING_POLICY (blocked dates, lunch-only dates,
request-only dates and evenings, large-party threshold).
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import FrozenSet, List, Optional

from django.conf import settings
from django.utils import timezone

from .models import Booking

SLOT_MINUTES = 15

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)


def slots_between(start: str, end: str) -> List[time]:
    """Every 15 minutes from start to end, both inclusive (HH:MM strings)."""
    current = datetime.strptime(start, '%H:%M')
    last = datetime.strptime(end, '%H:%M')
    slots = []
    while current <= last:
        slots.append(current.time())
        current += timedelta(minutes=SLOT_MINUTES)
    return slots


LUNCH_SLOTS = slots_between('12:00', '14:00')
EVENING_UNTIL_22 = slots_between('17:30', '22:00')
EVENING_UNTIL_22_30 = slots_between('17:30', '22:30')


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of evaluating a booking against the policy."""
    accepted: bool
    status: Optional[str] = None
    reason: str = ''
    code: str = ''

    @property
    def needs_approval(self):
        return self.accepted and self.status == Booking.Status.REQUEST


def _parse_dates(values) -> FrozenSet[date]:
    return frozenset(date.fromisoformat(str(v)) for v in values)


@dataclass(frozen=True)
class BookingPolicy:
    blocked_dates: FrozenSet[date] = field(default_factory=frozenset)
    blocked_date_reason: str = 'Closed'
    lunch_only_dates: FrozenSet[date] = field(default_factory=frozenset)
    request_only_dates: FrozenSet[date] = field(default_factory=frozenset)
    request_only_evenings: FrozenSet[str] = field(default_factory=frozenset)
    request_party_size: int = 8
    max_party_size: int = 70
    valentines_date: Optional[date] = None

    @classmethod
    def from_settings(cls) -> 'BookingPolicy':
        """Build the policy from settings.BOOKING_POLICY."""
        conf = getattr(settings, 'BOOKING_POLICY', {})
        valentines = conf.get('VALENTINES_DATE')
        return cls(
            blocked_dates=_parse_dates(conf.get('BLOCKED_DATES', [])),
            blocked_date_reason=conf.get('BLOCKED_DATE_REASON', 'Closed'),
            lunch_only_dates=_parse_dates(conf.get('LUNCH_ONLY_DATES', [])),
            request_only_dates=_parse_dates(conf.get('REQUEST_ONLY_DATES', [])),
            request_only_evenings=frozenset(conf.get('REQUEST_ONLY_EVENINGS', [])),
            request_party_size=int(conf.get('REQUEST_PARTY_SIZE', 8)),
            max_party_size=int(conf.get('MAX_PARTY_SIZE', 70)),
            valentines_date=date.fromisoformat(valentines) if valentines else None,
        )

    # Day rules

    @staticmethod
    def is_sunday(day: date) -> bool:
        return day.weekday() == SUNDAY

    def is_date_blocked(self, day: date) -> bool:
        return day in self.blocked_dates

    def blocked_date_reason_for(self, day: date) -> Optional[str]:
        if self.is_date_blocked(day):
            return self.blocked_date_reason
        return None

    def is_lunch_only_date(self, day: date) -> bool:
        return day in self.lunch_only_dates

    def is_request_only_date(self, day: date) -> bool:
        return day in self.request_only_dates

    def is_valentines_date(self, day: date) -> bool:
        return self.valentines_date is not None and day == self.valentines_date

    # Slot rules

    @staticmethod
    def is_lunch_time(slot: time) -> bool:
        return slot in LUNCH_SLOTS

    @staticmethod
    def is_evening_time(slot: time) -> bool:
        return slot in EVENING_UNTIL_22_30

    def is_evening_blocked_on_lunch_only_date(self, day: date, slot: time) -> bool:
        """True on lunch-only dates for evening times (must be rejected)."""
        return self.is_lunch_only_date(day) and self.is_evening_time(slot)

    def is_request_only_slot(self, day: date, slot: time) -> bool:
        """Evenings on the configured month-days (Valentine's) need approval."""
        return day.strftime('%m-%d') in self.request_only_evenings and self.is_evening_time(slot)

    def is_request_only_party_size(self, party_size: int) -> bool:
        return party_size >= self.request_party_size

    def time_slots_for_date(self, day: date) -> List[time]:
        """All bookable slots for a date, in order."""
        if self.is_sunday(day) or self.is_date_blocked(day):
            return []

        weekday = day.weekday()
        if weekday == SATURDAY:
            slots = list(EVENING_UNTIL_22_30)
        elif weekday in (THURSDAY, FRIDAY):
            slots = LUNCH_SLOTS + EVENING_UNTIL_22_30
        else:
            slots = LUNCH_SLOTS + EVENING_UNTIL_22

        if self.is_lunch_only_date(day):
            slots = [s for s in slots if not self.is_evening_time(s)]
        return slots

    def is_slot_blocked(self, day: date, slot: time) -> bool:
        return slot not in self.time_slots_for_date(day)

    @staticmethod
    def is_past_time(day: date, slot: time, now: Optional[datetime] = None) -> bool:
        """True when the date is today and the slot has already started."""
        local_now = timezone.localtime(now or timezone.now())
        if day != local_now.date():
            return False
        slot_minutes = slot.hour * 60 + slot.minute
        current_minutes = local_now.hour * 60 + local_now.minute
        return slot_minutes <= current_minutes

    def evaluate(self, day: date, slot: time, party_size: int,
                 now: Optional[datetime] = None) -> PolicyDecision:
        """
        Decide whether a submission is rejected, auto-confirmed or held as a
        request for the admin to approve.
        """
        if self.is_sunday(day):
            return PolicyDecision(False, reason='We are closed on Sundays', code='closed_sunday')

        if self.is_date_blocked(day):
            return PolicyDecision(False, reason=self.blocked_date_reason_for(day), code='date_blocked')

        if self.is_evening_blocked_on_lunch_only_date(day, slot):
            return PolicyDecision(
                False,
                reason='Only lunch reservations are available on this date',
                code='evening_unavailable'
            )

        if self.is_slot_blocked(day, slot):
            return PolicyDecision(False, reason='This time slot is not available', code='slot_unavailable')

        if self.is_past_time(day, slot, now):
            return PolicyDecision(False, reason='This time has already passed', code='time_passed')

        if party_size > self.max_party_size:
            return PolicyDecision(
                False,
                reason=f'Party size cannot exceed {self.max_party_size} guests',
                code='party_too_large'
            )

        if self.is_request_only_date(day):
            return PolicyDecision(True, Booking.Status.REQUEST, 'Date requires approval', 'request_only_date')

        if self.is_request_only_slot(day, slot):
            return PolicyDecision(True, Booking.Status.REQUEST, 'Evening requires approval', 'request_only_slot')

        if self.is_request_only_party_size(party_size):
            return PolicyDecision(True, Booking.Status.REQUEST, 'Large party requires approval', 'large_party')

        return PolicyDecision(True, Booking.Status.CONFIRMED)


def get_policy() -> BookingPolicy:
    return BookingPolicy.from_settings()
