"""
End-to-end API workflow check against a running backend.
Walks through the public booking form, the admin login and the dashboard.

Usage: ADMIN_EMAIL=... ADMIN_PASSWORD=... python api_workflow_check.py
"""

import os
import sys
from datetime import datetime, timedelta

import requests

# Fix Windows console encoding
if sys.platform == 'win32':
    sys.stdout.reconfigure(encoding='utf-8')

# Configuration
BASE_URL = os.environ.get('API_BASE_URL', 'http://localhost:8000/api')
ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'info@spinella.ch')
ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', '')
GUEST_EMAIL = os.environ.get('GUEST_EMAIL', 'guest@example.com')


# Color codes for terminal output
class Colors:
    HEADER = '\033[95m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def print_success(msg):
    print(f"{Colors.OKGREEN}[OK] {msg}{Colors.ENDC}")


def print_error(msg):
    print(f"{Colors.FAIL}[ERROR] {msg}{Colors.ENDC}")


def print_info(msg):
    print(f"{Colors.OKCYAN}[INFO] {msg}{Colors.ENDC}")


def print_section(title):
    print(f"\n{Colors.BOLD}{Colors.HEADER}{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}{Colors.ENDC}\n")


# Shared state between steps
state = {
    'access_token': None,
    'booking_id': None,
    'booking_date': None,
}


def next_open_weekday():
    """First Tuesday-Saturday at least two days ahead."""
    day = datetime.now().date() + timedelta(days=2)
    while day.weekday() in (0, 6):
        day += timedelta(days=1)
    return day


def check_public_menu():
    print_section("1. PUBLIC MENU")
    try:
        response = requests.get(f"{BASE_URL}/restaurant/public/menu/")
    except requests.exceptions.ConnectionError:
        print_error(f"Cannot connect to backend at {BASE_URL}")
        return False
    if response.status_code != 200:
        print_error(f"Menu failed: {response.status_code} {response.text}")
        return False
    print_success(f"{len(response.json()['categories'])} menu categories")
    return True


def check_availability():
    print_section("2. AVAILABILITY")
    day = next_open_weekday()
    state['booking_date'] = day.isoformat()
    response = requests.get(f"{BASE_URL}/restaurant/availability/", params={'date': state['booking_date']})
    if response.status_code != 200:
        print_error(f"Availability failed: {response.status_code} {response.text}")
        return False
    slots = response.json()['slots']
    print_success(f"{len(slots)} slots on {state['booking_date']}")
    return bool(slots)


def check_booking_form():
    print_section("3. BOOKING FORM")
    booking_data = {
        "name": "Workflow Check",
        "email": GUEST_EMAIL,
        "phone": "+41 79 000 00 00",
        "date": state['booking_date'],
        "time": "19:00",
        "partySize": 2,
        "specialRequests": "Automated check, please ignore",
    }
    response = requests.post(f"{BASE_URL}/restaurant/booking/", json=booking_data)
    if response.status_code != 201:
        print_error(f"Booking failed: {response.status_code} {response.text}")
        return False
    data = response.json()
    state['booking_id'] = data['id']
    print_success(f"Booking {data['id']} created ({data['status']})")

    print_info("Submitting an invalid booking (Sunday)...")
    day = datetime.now().date() + timedelta(days=7)
    while day.weekday() != 6:
        day += timedelta(days=1)
    response = requests.post(f"{BASE_URL}/restaurant/booking/", json={**booking_data, 'date': day.isoformat()})
    if response.status_code != 400:
        print_error(f"Sunday booking was not rejected: {response.status_code}")
        return False
    print_success(f"Rejected: {response.json()['error']}")
    return True


def check_admin_login():
    print_section("4. ADMIN LOGIN")
    if not ADMIN_PASSWORD:
        print_error("Set ADMIN_PASSWORD to run the dashboard checks")
        return False
    response = requests.post(f"{BASE_URL}/auth/login/", json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    if response.status_code != 200:
        print_error(f"Login failed: {response.status_code} {response.text}")
        return False
    state['access_token'] = response.json()['access']
    print_success(f"Logged in as {ADMIN_EMAIL}")
    return True


def check_dashboard():
    print_section("5. DASHBOARD")
    headers = {"Authorization": f"Bearer {state['access_token']}"}

    response = requests.get(
        f"{BASE_URL}/restaurant/bookings/", params={'date': state['booking_date']}, headers=headers
    )
    if response.status_code != 200:
        print_error(f"List bookings failed: {response.status_code} {response.text}")
        return False
    bookings = response.json()
    if isinstance(bookings, dict) and 'results' in bookings:
        bookings = bookings['results']
    print_success(f"Found {len(bookings)} booking(s) on {state['booking_date']}")

    response = requests.get(f"{BASE_URL}/restaurant/bookings/{state['booking_id']}/", headers=headers)
    if response.status_code != 200:
        print_error(f"Booking detail failed: {response.status_code}")
        return False
    for entry in response.json().get('email_statuses', []):
        print_info(f"  - {entry['type']}: {entry['status']}")

    response = requests.patch(
        f"{BASE_URL}/restaurant/bookings/{state['booking_id']}/",
        json={'status': 'cancelled'}, headers=headers
    )
    if response.status_code != 200:
        print_error(f"Cancel failed: {response.status_code} {response.text}")
        return False
    print_success("Test booking cancelled")

    response = requests.get(f"{BASE_URL}/restaurant/bookings/stats/", headers=headers)
    if response.status_code != 200:
        print_error(f"Stats failed: {response.status_code}")
        return False
    stats = response.json()
    print_success(f"Total bookings: {stats['total']}, guests: {stats['total_guests']}")

    response = requests.get(f"{BASE_URL}/clients/", headers=headers)
    if response.status_code != 200:
        print_error(f"Clients failed: {response.status_code}")
        return False
    print_success(f"{len(response.json())} clients")
    return True


def main():
    print(f"{Colors.BOLD}{Colors.HEADER}")
    print("="*60)
    print("  SPINELLA - API WORKFLOW CHECK")
    print("="*60)
    print(f"{Colors.ENDC}")

    steps = [
        ("Public Menu", check_public_menu),
        ("Availability", check_availability),
        ("Booking Form", check_booking_form),
        ("Admin Login", check_admin_login),
        ("Dashboard", check_dashboard),
    ]

    passed = 0
    failed = 0
    for name, step in steps:
        try:
            if step():
                passed += 1
            else:
                failed += 1
                print_error(f"{name} failed - stopping here")
                break
        except requests.RequestException as e:
            failed += 1
            print_error(f"{name} crashed: {e}")
            break

    print_section("RESULTS")
    print(f"Passed: {Colors.OKGREEN}{passed}{Colors.ENDC}")
    print(f"Failed: {Colors.FAIL}{failed}{Colors.ENDC}")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
