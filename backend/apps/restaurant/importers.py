"""
Wix reservation export importer.

The export has Spanish headers (Horario, Nombre, Email, Número de teléfono,
Cantidad, Estado, ...) and French date-times such as "9 janv. 2025, 13:13:06".
"""
import csv
import io
import logging
import re
from datetime import date, time
from typing import Any, Dict, List, Optional, Tuple

from .models import Booking

logger = logging.getLogger(__name__)

FRENCH_MONTHS = {
    'janv': 1, 'févr': 2, 'mars': 3, 'avr': 4, 'mai': 5, 'juin': 6,
    'juil': 7, 'août': 8, 'sept': 9, 'oct': 10, 'nov': 11, 'déc': 12,
}

WIX_DATETIME_RE = re.compile(r'(\d{1,2})\s+([^\s.]+)\.?\s+(\d{4}),\s+(\d{2}):(\d{2})')

WIX_STATUSES = {
    'RESERVADA': Booking.Status.CONFIRMED,
    'CANCELADA': Booking.Status.CANCELLED,
}

SPECIAL_REQUEST_COLUMN = 'SPECIAL REQUEST/DEMANDE SPECIAL'


def parse_wix_datetime(value: str) -> Optional[Tuple[date, time]]:
    """"9 janv. 2025, 13:13:06" -> (date(2025, 1, 9), time(13, 13))"""
    match = WIX_DATETIME_RE.search(value or '')
    if not match:
        return None
    day, month_name, year, hour, minute = match.groups()
    month = FRENCH_MONTHS.get(month_name.lower())
    if not month:
        return None
    try:
        return date(int(year), month, int(day)), time(int(hour), int(minute))
    except ValueError:
        return None


def map_wix_status(value: str) -> str:
    return WIX_STATUSES.get((value or '').strip().upper(), Booking.Status.REQUEST)


def parse_wix_csv(text: str) -> List[Dict[str, Any]]:
    """
    Parse a Wix export into booking dicts.

    Rows with an unreadable date, without name or email, or falling on a
    Sunday are skipped.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip('\ufeff')))
    bookings = []
    for record in reader:
        record = {(k or '').strip(): (v or '').strip() for k, v in record.items()}

        parsed = parse_wix_datetime(record.get('Horario', ''))
        if not parsed:
            logger.warning(f"Skipping invalid date: {record.get('Horario')}")
            continue
        booking_date, booking_time = parsed

        name = record.get('Nombre', '')
        email = record.get('Email', '').lower()
        if not name or not email:
            logger.warning("Skipping record with missing name or email")
            continue

        if booking_date.weekday() == 6:
            logger.warning(f"Skipping Sunday booking: {name} on {booking_date}")
            continue

        try:
            party_size = int(record.get('Cantidad') or 1)
        except ValueError:
            party_size = 1

        bookings.append({
            'name': name,
            'email': email,
            'phone': record.get('Número de teléfono', ''),
            'booking_date': booking_date,
            'booking_time': booking_time,
            'party_size': max(1, party_size),
            'special_requests': record.get(SPECIAL_REQUEST_COLUMN) or None,
            'status': map_wix_status(record.get('Estado', '')),
        })
    return bookings
