"""
CSV contact importer (Google/Wix contact exports with French headers).
"""
import csv
import io
import re
from typing import Dict, List, Optional

from .services import clean_email, clean_phone


def _find_column(headers: List[str], *patterns: str) -> Optional[int]:
    for pattern in patterns:
        regex = re.compile(pattern, re.IGNORECASE)
        for idx, header in enumerate(headers):
            if regex.search(header):
                return idx
    return None


def _cell(row: List[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(row):
        return ''
    return (row[idx] or '').strip()


def parse_contacts_csv(text: str) -> List[Dict[str, Optional[str]]]:
    """
    Parse a contacts export into [{name, email, phone}].

    Columns are detected by header: "Prénom", "Nom de famille", "E-mail"
    ("E-mail 1" preferred) and "Téléphone" ("Téléphone 1" preferred). Rows
    without a valid email are dropped; duplicates keep the last occurrence.

    Raises:
        ValueError: when no email column can be found
    """
    reader = csv.reader(io.StringIO(text.lstrip('\ufeff')))
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        return []

    headers = [h.strip() for h in rows[0]]
    first_name_idx = _find_column(headers, r'prénom')
    last_name_idx = _find_column(headers, r'nom de famille')
    email_idx = _find_column(headers, r'e-mail 1', r'e-mail')
    phone_idx = _find_column(headers, r'téléphone 1', r'téléphone')

    if email_idx is None:
        raise ValueError("CSV must have an email column (e.g. 'E-mail 1')")

    by_email: Dict[str, Dict[str, Optional[str]]] = {}
    for row in rows[1:]:
        email = clean_email(_cell(row, email_idx))
        if not email:
            continue
        name = ' '.join(
            part for part in (_cell(row, first_name_idx), _cell(row, last_name_idx)) if part
        ) or email
        by_email[email] = {
            'name': name[:200],
            'email': email,
            'phone': clean_phone(_cell(row, phone_idx)),
        }
    return list(by_email.values())
