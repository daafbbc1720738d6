"""
Tests for restaurant app: reservation policy, booking submission, admin
status changes, bulk operations and the Wix importer.
"""
import io
import os
import tempfile
from datetime import date, datetime, time
from unittest.mock import patch

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.clients.models import Client
from apps.restaurant.booking_service import BookingRejected, BookingService
from apps.restaurant.importers import map_wix_status, parse_wix_csv, parse_wix_datetime
from apps.restaurant.models import Booking, MenuCategory, MenuItem
from apps.restaurant.policy import BookingPolicy, slots_between

# 2026-03-10 is a Tuesday, 2026-03-12 a Thursday, 2026-03-14 a Saturday
TUESDAY = date(2026, 3, 10)
THURSDAY = date(2026, 3, 12)
SATURDAY = date(2026, 3, 14)
SUNDAY = date(2026, 3, 15)

EMAIL_SETTINGS = {
    'RESEND_API_KEY': 're_test',
    'EMAIL_BCC': 'info@spinella.ch',
    'RESTAURANT_EMAIL': '',
    'VAPID_PUBLIC_KEY': '',
    'VAPID_PRIVATE_KEY': '',
}


def booking_data(**overrides):
    data = {
        'name': 'Giulia Rossi',
        'email': 'giulia@example.com',
        'phone': '+41 79 123 45 67',
        'date': TUESDAY.isoformat(),
        'time': '19:00',
        'party_size': 2,
        'special_requests': '',
    }
    data.update(overrides)
    return data


def make_booking(**overrides):
    fields = {
        'name': 'Marco Bianchi',
        'email': 'marco@example.com',
        'phone': '+41 79 765 43 21',
        'booking_date': TUESDAY,
        'booking_time': time(19, 0),
        'party_size': 2,
        'status': Booking.Status.REQUEST,
    }
    fields.update(overrides)
    return Booking.objects.create(**fields)


class PolicyTest(TestCase):
    """Test the reservation policy"""

    def setUp(self):
        self.policy = BookingPolicy.from_settings()
        self.now = timezone.make_aware(datetime(2026, 1, 1, 10, 0))

    def evaluate(self, day, hhmm, party_size=2):
        hour, minute = map(int, hhmm.split(':'))
        return self.policy.evaluate(day, time(hour, minute), party_size, now=self.now)

    def test_slots_between_is_inclusive(self):
        slots = slots_between('12:00', '13:00')
        self.assertEqual(slots, [time(12, 0), time(12, 15), time(12, 30), time(12, 45), time(13, 0)])

    def test_time_slots_per_weekday(self):
        self.assertEqual(len(self.policy.time_slots_for_date(TUESDAY)), 9 + 19)
        self.assertEqual(len(self.policy.time_slots_for_date(THURSDAY)), 9 + 21)
        saturday = self.policy.time_slots_for_date(SATURDAY)
        self.assertEqual(len(saturday), 21)
        self.assertEqual(saturday[0], time(17, 30))
        self.assertEqual(self.policy.time_slots_for_date(SUNDAY), [])

    def test_blocked_and_lunch_only_dates(self):
        self.assertEqual(self.policy.time_slots_for_date(date(2026, 4, 6)), [])
        self.assertEqual(self.policy.blocked_date_reason_for(date(2026, 4, 6)), 'Easter holidays')
        self.assertIsNone(self.policy.blocked_date_reason_for(TUESDAY))

        lunch_only = self.policy.time_slots_for_date(date(2026, 4, 15))
        self.assertEqual(lunch_only, slots_between('12:00', '14:00'))

    def test_sunday_rejected(self):
        decision = self.evaluate(SUNDAY, '19:00')
        self.assertFalse(decision.accepted)
        self.assertEqual(decision.code, 'closed_sunday')
        self.assertEqual(decision.reason, 'We are closed on Sundays')

    def test_blocked_date_rejected(self):
        decision = self.evaluate(date(2026, 4, 7), '12:30')
        self.assertFalse(decision.accepted)
        self.assertEqual(decision.code, 'date_blocked')
        self.assertEqual(decision.reason, 'Easter holidays')

    def test_evening_on_lunch_only_date_rejected(self):
        decision = self.evaluate(date(2026, 4, 15), '19:00')
        self.assertFalse(decision.accepted)
        self.assertEqual(decision.code, 'evening_unavailable')

    def test_slot_outside_opening_hours_rejected(self):
        self.assertEqual(self.evaluate(TUESDAY, '22:30').code, 'slot_unavailable')
        self.assertEqual(self.evaluate(SATURDAY, '12:00').code, 'slot_unavailable')
        self.assertEqual(self.evaluate(TUESDAY, '12:07').code, 'slot_unavailable')
        self.assertEqual(self.evaluate(TUESDAY, '15:00').code, 'slot_unavailable')

    def test_late_slot_on_thursday_confirmed(self):
        decision = self.evaluate(THURSDAY, '22:30')
        self.assertTrue(decision.accepted)
        self.assertEqual(decision.status, Booking.Status.CONFIRMED)

    def test_past_time_today_rejected(self):
        now = timezone.make_aware(datetime(2026, 3, 10, 13, 0))
        self.assertEqual(self.policy.evaluate(TUESDAY, time(12, 30), 2, now=now).code, 'time_passed')
        self.assertEqual(self.policy.evaluate(TUESDAY, time(13, 0), 2, now=now).code, 'time_passed')
        self.assertTrue(self.policy.evaluate(TUESDAY, time(13, 15), 2, now=now).accepted)

    def test_request_only_date(self):
        decision = self.evaluate(date(2026, 4, 15), '12:30')
        self.assertTrue(decision.accepted)
        self.assertTrue(decision.needs_approval)
        self.assertEqual(decision.code, 'request_only_date')

    def test_valentines_evening_is_request(self):
        decision = self.evaluate(date(2026, 2, 14), '19:00')
        self.assertEqual(decision.status, Booking.Status.REQUEST)
        self.assertEqual(decision.code, 'request_only_slot')

    def test_large_party_is_request(self):
        self.assertEqual(self.evaluate(TUESDAY, '19:00', party_size=7).status, Booking.Status.CONFIRMED)
        decision = self.evaluate(TUESDAY, '19:00', party_size=8)
        self.assertEqual(decision.status, Booking.Status.REQUEST)
        self.assertEqual(decision.code, 'large_party')

    def test_party_above_max_rejected(self):
        self.assertTrue(self.evaluate(TUESDAY, '19:00', party_size=70).accepted)
        decision = self.evaluate(TUESDAY, '19:00', party_size=71)
        self.assertFalse(decision.accepted)
        self.assertEqual(decision.code, 'party_too_large')

    def test_max_party_size_is_configurable(self):
        policy = BookingPolicy(max_party_size=20)
        decision = policy.evaluate(TUESDAY, time(19, 0), 30, now=self.now)
        self.assertFalse(decision.accepted)
        self.assertEqual(decision.code, 'party_too_large')
        self.assertIn('20', decision.reason)

        policy = BookingPolicy(max_party_size=100)
        decision = policy.evaluate(TUESDAY, time(19, 0), 90, now=self.now)
        self.assertTrue(decision.accepted)
        self.assertEqual(decision.status, Booking.Status.REQUEST)

    @override_settings(BOOKING_POLICY={'BLOCKED_DATES': ['2026-03-10'], 'BLOCKED_DATE_REASON': 'Private event'})
    def test_policy_reads_settings(self):
        policy = BookingPolicy.from_settings()
        decision = policy.evaluate(TUESDAY, time(19, 0), 2, now=self.now)
        self.assertEqual(decision.reason, 'Private event')
        self.assertIsNone(policy.valentines_date)


@override_settings(**EMAIL_SETTINGS)
@patch('apps.notifications.email_service.resend')
class BookingSubmissionTest(TestCase):
    """Test website booking submission"""

    def setUp(self):
        self.now = timezone.make_aware(datetime(2026, 1, 1, 10, 0))

    def test_confirmed_booking(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_guest'}

        booking = BookingService().submit(booking_data(), now=self.now)

        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertIsNone(booking.special_requests)
        self.assertEqual(booking.source, Booking.Source.WEBSITE)

        params = mock_resend.Emails.send.call_args[0][0]
        self.assertEqual(params['to'], ['giulia@example.com'])
        self.assertEqual(params['bcc'], ['info@spinella.ch'])
        self.assertIn('confirmée', params['subject'])

        booking.refresh_from_db()
        self.assertEqual(len(booking.sent_emails), 1)
        self.assertEqual(booking.sent_emails[0]['id'], 'em_guest')
        self.assertEqual(booking.sent_emails[0]['type'], 'confirmed')
        self.assertIn('sentAt', booking.sent_emails[0])

    def test_large_party_is_held_as_request(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_req'}

        booking = BookingService().submit(booking_data(party_size=10), now=self.now)

        self.assertEqual(booking.status, Booking.Status.REQUEST)
        self.assertEqual(booking.review_reason, 'large_party')
        params = mock_resend.Emails.send.call_args[0][0]
        self.assertEqual(params['subject'], 'Booking Confirmation - Giulia Rossi')
        booking.refresh_from_db()
        self.assertEqual(booking.sent_emails[0]['type'], 'request')

    @override_settings(RESTAURANT_EMAIL='kitchen@spinella.ch')
    def test_restaurant_is_notified(self, mock_resend):
        mock_resend.Emails.send.side_effect = [{'id': 'em_guest'}, {'id': 'em_restaurant'}]

        booking = BookingService().submit(booking_data(), now=self.now)

        self.assertEqual(mock_resend.Emails.send.call_count, 2)
        restaurant_params = mock_resend.Emails.send.call_args_list[1][0][0]
        self.assertEqual(restaurant_params['to'], ['kitchen@spinella.ch'])
        booking.refresh_from_db()
        self.assertEqual([e['type'] for e in booking.sent_emails], ['confirmed', 'restaurant'])

    @override_settings(BOOKING_POLICY={'VALENTINES_DATE': '2026-02-14'})
    def test_valentines_template_when_confirmed_on_valentines_day(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_val'}

        booking = BookingService().submit(booking_data(date='2026-02-14', time='19:30'), now=self.now)

        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        params = mock_resend.Emails.send.call_args[0][0]
        self.assertIn('Saint-Valentin', params['subject'])
        booking.refresh_from_db()
        self.assertEqual(booking.sent_emails[0]['type'], 'valentines')

    def test_email_failure_keeps_booking(self, mock_resend):
        mock_resend.Emails.send.side_effect = Exception('provider down')

        booking = BookingService().submit(booking_data(), now=self.now)

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.sent_emails, [])

    def test_guest_added_to_clients_without_overwrite(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_1'}
        BookingService().submit(booking_data(), now=self.now)
        client = Client.objects.get(email='giulia@example.com')
        self.assertEqual(client.source, Client.Source.BOOKING)

        client.name = 'Giulia R.'
        client.source = Client.Source.MANUAL
        client.save()
        BookingService().submit(booking_data(name='Giulia Rossi-Bianchi'), now=self.now)

        client.refresh_from_db()
        self.assertEqual(client.name, 'Giulia R.')
        self.assertEqual(client.source, Client.Source.MANUAL)

    def test_camel_case_fields_accepted(self, mock_resend):
        data = booking_data(specialRequests='Window table')
        data.pop('party_size')
        data['partySize'] = 4

        booking = BookingService().submit(data, now=self.now)

        self.assertEqual(booking.party_size, 4)
        self.assertEqual(booking.special_requests, 'Window table')

    def test_invalid_data_rejected(self, mock_resend):
        for overrides in ({'name': 'A'}, {'email': 'not-an-email'}, {'phone': '12345'},
                          {'date': '10/03/2026'}, {'time': '7pm'}, {'party_size': 0},
                          {'party_size': 2.5}):
            with self.assertRaises(BookingRejected) as ctx:
                BookingService().submit(booking_data(**overrides), now=self.now)
            self.assertEqual(ctx.exception.reason, 'Invalid booking data')
            self.assertIsNotNone(ctx.exception.details)
        self.assertFalse(Booking.objects.exists())
        mock_resend.Emails.send.assert_not_called()

    def test_policy_rejection(self, mock_resend):
        with self.assertRaises(BookingRejected) as ctx:
            BookingService().submit(booking_data(date=SUNDAY.isoformat()), now=self.now)
        self.assertEqual(ctx.exception.code, 'closed_sunday')
        self.assertFalse(Booking.objects.exists())

    def test_party_above_configured_max_rejected(self, mock_resend):
        service = BookingService(policy=BookingPolicy(max_party_size=20))
        with self.assertRaises(BookingRejected) as ctx:
            service.submit(booking_data(party_size=30), now=self.now)
        self.assertEqual(ctx.exception.code, 'party_too_large')
        self.assertFalse(Booking.objects.exists())
        mock_resend.Emails.send.assert_not_called()


@override_settings(**{**EMAIL_SETTINGS, 'RESEND_API_KEY': ''})
class BookingSubmissionAPITest(TestCase):
    """Test the public booking endpoint"""

    def setUp(self):
        self.client = APIClient()

    def test_create_booking(self):
        response = self.client.post('/api/restaurant/booking/', booking_data(date=THURSDAY.isoformat()),
                                    format='json')
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['status'], 'confirmed')
        self.assertTrue(Booking.objects.filter(pk=response.data['id']).exists())

    def test_invalid_booking(self):
        response = self.client.post('/api/restaurant/booking/', booking_data(name=''), format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid booking data')
        self.assertIn('name', response.data['details'])

    def test_sunday_booking(self):
        response = self.client.post('/api/restaurant/booking/', booking_data(date=SUNDAY.isoformat()),
                                    format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'We are closed on Sundays', 'code': 'closed_sunday'})

    def test_availability(self):
        response = self.client.get('/api/restaurant/availability/', {'date': SATURDAY.isoformat()})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['slots'][0]['time'], '17:30')
        self.assertEqual(len(response.data['slots']), 21)

        response = self.client.get('/api/restaurant/availability/', {'date': '2026-04-06'})
        self.assertEqual(response.data['slots'], [])
        self.assertEqual(response.data['message'], 'Easter holidays')

        response = self.client.get('/api/restaurant/availability/', {'date': 'tomorrow'})
        self.assertEqual(response.status_code, 400)

    def test_public_menu(self):
        category = MenuCategory.objects.create(name='Pasta')
        MenuItem.objects.create(category=category, name='Carbonara', slug='carbonara', price='24.00')
        MenuItem.objects.create(category=category, name='Hidden', slug='hidden', price='10.00', is_active=False)

        response = self.client.get('/api/restaurant/public/menu/')

        self.assertEqual(response.status_code, 200)
        items = response.data['categories'][0]['items']
        self.assertEqual([i['name'] for i in items], ['Carbonara'])

    def test_public_menu_takeaway_only(self):
        pasta = MenuCategory.objects.create(name='Pasta', display_order=1)
        dolci = MenuCategory.objects.create(name='Dolci', display_order=2)
        MenuItem.objects.create(category=pasta, name='Carbonara', slug='carbonara', price='24.00',
                                is_takeaway=True, stripe_price_id='price_carbonara')
        MenuItem.objects.create(category=pasta, name='Risotto', slug='risotto', price='28.00')
        MenuItem.objects.create(category=dolci, name='Tiramisu', slug='tiramisu', price='12.00')

        response = self.client.get('/api/restaurant/public/menu/', {'takeaway': 'true'})

        self.assertEqual(response.status_code, 200)
        categories = response.data['categories']
        self.assertEqual([c['name'] for c in categories], ['Pasta'])
        self.assertEqual([i['name'] for i in categories[0]['items']], ['Carbonara'])


@override_settings(ADMIN_EMAIL='owner@spinella.ch')
class MenuAdminAPITest(TestCase):
    """Test menu management endpoints"""

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='owner@spinella.ch', username='owner', password='s3cret-Pass'
        )
        self.client.force_authenticate(self.admin)
        self.category = MenuCategory.objects.create(name='Pasta')

    def test_availability_is_changed_with_patch(self):
        item = MenuItem.objects.create(category=self.category, name='Carbonara', slug='carbonara',
                                       price='24.00')

        response = self.client.patch(f'/api/restaurant/items/{item.id}/', {'is_available': False},
                                     format='json')

        self.assertEqual(response.status_code, 200)
        item.refresh_from_db()
        self.assertFalse(item.is_available)

    def test_no_reorder_or_toggle_actions(self):
        item = MenuItem.objects.create(category=self.category, name='Carbonara', slug='carbonara',
                                       price='24.00')

        response = self.client.post('/api/restaurant/categories/reorder/', {'items': [{'order': 1}]},
                                    format='json')
        self.assertEqual(response.status_code, 405)

        response = self.client.post(f'/api/restaurant/items/{item.id}/toggle_availability/')
        self.assertEqual(response.status_code, 404)

    def test_takeaway_item_needs_stripe_price(self):
        response = self.client.post('/api/restaurant/items/', {
            'category': str(self.category.id), 'name': 'Lasagne', 'slug': 'lasagne',
            'price': '26.00', 'is_takeaway': True,
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('stripe_price_id', response.data)


@override_settings(**EMAIL_SETTINGS)
@patch('apps.notifications.email_service.resend')
class StatusChangeTest(TestCase):
    """Test admin status changes and their emails"""

    def test_confirming_request_sends_confirmation(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_conf'}
        booking = make_booking(status=Booking.Status.REQUEST)

        BookingService().change_status(booking, 'confirmed')

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertIsNotNone(booking.confirmed_at)
        self.assertEqual(booking.sent_emails[0]['type'], 'confirmed')
        params = mock_resend.Emails.send.call_args[0][0]
        self.assertEqual(params['to'], ['marco@example.com'])
        self.assertNotIn('bcc', params)

    def test_already_confirmed_sends_nothing(self, mock_resend):
        booking = make_booking(status=Booking.Status.CONFIRMED)
        BookingService().change_status(booking, 'confirmed')
        mock_resend.Emails.send.assert_not_called()

    def test_declining_request_sends_decline(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_decl'}
        booking = make_booking(status=Booking.Status.PENDING)

        BookingService().change_status(booking, 'cancelled')

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CANCELLED)
        self.assertIsNotNone(booking.cancelled_at)
        self.assertEqual(booking.sent_emails[0]['type'], 'decline')

    def test_cancelling_confirmed_booking_sends_nothing(self, mock_resend):
        booking = make_booking(status=Booking.Status.CONFIRMED)
        BookingService().change_status(booking, 'cancelled')
        mock_resend.Emails.send.assert_not_called()
        self.assertEqual(Booking.objects.get(pk=booking.pk).status, Booking.Status.CANCELLED)

    def test_email_failure_still_saves_status(self, mock_resend):
        mock_resend.Emails.send.side_effect = Exception('timeout')
        booking = make_booking(status=Booking.Status.REQUEST)

        BookingService().change_status(booking, 'confirmed')

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.sent_emails, [])

    def test_booking_without_email(self, mock_resend):
        booking = make_booking(email='', status=Booking.Status.REQUEST)
        BookingService().change_status(booking, 'confirmed')
        mock_resend.Emails.send.assert_not_called()

    def test_invalid_status(self, mock_resend):
        booking = make_booking()
        with self.assertRaises(ValueError):
            BookingService().change_status(booking, 'from_resend')


@override_settings(ADMIN_EMAIL='owner@spinella.ch', **EMAIL_SETTINGS)
class BookingAdminAPITest(TestCase):
    """Test the reservations dashboard endpoints"""

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='owner@spinella.ch', username='owner', password='s3cret-Pass'
        )
        self.client.force_authenticate(self.admin)

    def test_requires_admin(self):
        anonymous = APIClient()
        self.assertEqual(anonymous.get('/api/restaurant/bookings/').status_code, 401)

        waiter = User.objects.create_user(email='waiter@spinella.ch', username='waiter', password='x-Pass-123')
        other = APIClient()
        other.force_authenticate(waiter)
        self.assertEqual(other.get('/api/restaurant/bookings/').status_code, 403)

    def test_list_ordered_and_filtered(self):
        late = make_booking(booking_date=THURSDAY, booking_time=time(20, 0))
        early = make_booking(booking_date=TUESDAY, booking_time=time(21, 0), status=Booking.Status.CONFIRMED)
        earliest = make_booking(booking_date=TUESDAY, booking_time=time(12, 0))

        response = self.client.get('/api/restaurant/bookings/')
        self.assertEqual([b['id'] for b in response.data], [str(earliest.id), str(early.id), str(late.id)])

        response = self.client.get('/api/restaurant/bookings/', {'status': 'confirmed'})
        self.assertEqual([b['id'] for b in response.data], [str(early.id)])

        response = self.client.get('/api/restaurant/bookings/', {'date': THURSDAY.isoformat()})
        self.assertEqual([b['id'] for b in response.data], [str(late.id)])

        response = self.client.get('/api/restaurant/bookings/', {'start_date': '2026-03-11', 'end_date': '2026-03-31'})
        self.assertEqual([b['id'] for b in response.data], [str(late.id)])

    @patch('apps.notifications.email_service.resend')
    def test_retrieve_with_email_statuses(self, mock_resend):
        booking = make_booking(sent_emails=[
            {'id': 'em_1', 'type': 'request', 'sentAt': '2026-03-01T10:00:00+00:00'},
            {'id': 'em_2', 'type': 'confirmed', 'sentAt': '2026-03-01T11:00:00+00:00'},
        ])

        def get_email(message_id):
            if message_id == 'em_1':
                return {'id': 'em_1', 'last_event': 'opened'}
            raise Exception('not found')

        mock_resend.Emails.get.side_effect = get_email

        response = self.client.get(f'/api/restaurant/bookings/{booking.id}/')

        self.assertEqual(response.status_code, 200)
        statuses = response.data['email_statuses']
        self.assertEqual(statuses[0]['status'], 'opened')
        self.assertEqual(statuses[0]['type'], 'request')
        self.assertEqual(statuses[1]['status'], '—')

    @override_settings(RESEND_API_KEY='')
    @patch('apps.notifications.email_service.resend')
    def test_email_statuses_without_email_provider(self, mock_resend):
        ledger = [{'id': 'em_1', 'type': 'request', 'sentAt': '2026-03-01T10:00:00+00:00'}]
        booking = make_booking(sent_emails=ledger)

        response = self.client.get(f'/api/restaurant/bookings/{booking.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['email_statuses'], ledger)
        mock_resend.Emails.get.assert_not_called()

    @patch('apps.notifications.email_service.resend')
    def test_patch_status(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_conf'}
        booking = make_booking()

        response = self.client.patch(f'/api/restaurant/bookings/{booking.id}/', {'status': 'confirmed'},
                                     format='json')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['ok'])
        self.assertEqual(response.data['booking']['status'], 'confirmed')

    def test_patch_invalid_status(self):
        booking = make_booking()
        response = self.client.patch(f'/api/restaurant/bookings/{booking.id}/', {'status': 'done'},
                                     format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Invalid status'})

    def test_import_bookings(self):
        rows = [
            {'name': 'Anna', 'email': 'anna@example.com', 'date': '2026-03-10', 'time': '19:00', 'partySize': 4},
            {'name': 'Luca', 'date': '2026-03-12T00:00:00Z', 'time': '12:30', 'party_size': 3,
             'specialRequests': 'Birthday', 'status': 'request'},
            {'name': 'No time', 'date': '2026-03-12'},
        ]
        response = self.client.post('/api/restaurant/bookings/import/', {'bookings': rows}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {'ok': True, 'added': 2})
        anna = Booking.objects.get(name='Anna')
        self.assertEqual(anna.status, Booking.Status.CONFIRMED)
        self.assertEqual(anna.party_size, 4)
        luca = Booking.objects.get(name='Luca')
        self.assertEqual(luca.status, Booking.Status.REQUEST)
        self.assertEqual(luca.special_requests, 'Birthday')
        self.assertEqual(luca.booking_date, THURSDAY)

    def test_import_single_and_list_bodies(self):
        single = {'name': 'Sara', 'date': '2026-03-10', 'time': '20:00'}
        self.assertEqual(self.client.post('/api/restaurant/bookings/import/', single, format='json').data['added'], 1)
        self.assertEqual(self.client.post('/api/restaurant/bookings/import/', [single, single], format='json').data['added'], 2)

    def test_import_nothing_valid(self):
        response = self.client.post('/api/restaurant/bookings/import/', {'bookings': [{'name': 'x'}]}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'No valid bookings to add')

    @patch('apps.notifications.email_service.resend')
    def test_valentines_batches(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_val'}
        valentines = date(2026, 2, 14)
        for i in range(4):
            make_booking(email=f'guest{i}@example.com', booking_date=valentines)
        make_booking(email='gone@example.com', booking_date=valentines, status=Booking.Status.CANCELLED)
        make_booking(email='', booking_date=valentines)

        response = self.client.post('/api/restaurant/bookings/valentines/', {}, format='json')
        self.assertEqual(response.data, {'sent': 3, 'total': 4, 'remaining': 1, 'next_offset': 3})

        response = self.client.post('/api/restaurant/bookings/valentines/', {'offset': 3, 'batch_size': 50},
                                    format='json')
        self.assertEqual(response.data, {'sent': 1, 'total': 4, 'remaining': 0, 'next_offset': 4})

        self.assertEqual(mock_resend.Emails.send.call_count, 4)
        ledger_types = [
            e['type'] for b in Booking.objects.filter(email__startswith='guest') for e in b.sent_emails
        ]
        self.assertEqual(ledger_types, ['valentines'] * 4)

    @override_settings(RESEND_API_KEY='')
    def test_valentines_without_email_provider(self):
        response = self.client.post('/api/restaurant/bookings/valentines/', {}, format='json')
        self.assertEqual(response.status_code, 503)

    def test_stats(self):
        make_booking(party_size=4, status=Booking.Status.CONFIRMED)
        make_booking(party_size=2, status=Booking.Status.REQUEST)
        make_booking(party_size=6, status=Booking.Status.CANCELLED)

        response = self.client.get('/api/restaurant/bookings/stats/')

        self.assertEqual(response.data['total'], 3)
        self.assertEqual(response.data['by_status']['confirmed'], 1)
        self.assertEqual(response.data['by_status']['pending'], 0)
        self.assertEqual(response.data['total_guests'], 6)


WIX_CSV = (
    'Horario,Nombre,Email,Número de teléfono,Cantidad,Estado,SPECIAL REQUEST/DEMANDE SPECIAL\n'
    '"9 janv. 2025, 13:13:06",Anna Muster,Anna@Example.com,+41 79 000 00 01,4,RESERVADA,"Window, please"\n'
    '"12 janv. 2025, 19:00:00",Sunday Guest,sunday@example.com,+41 79 000 00 02,2,RESERVADA,\n'
    '"10 janv. 2025, 20:15:00",Bruno Test,bruno@example.com,,2,CANCELADA,\n'
    '"16 mai 2025, 19:30:00",Carla Neu,carla@example.com,,3,PENDIENTE,\n'
    '"soon",Bad Date,bad@example.com,,2,RESERVADA,\n'
    '"11 janv. 2025, 12:00:00",,noname@example.com,,2,RESERVADA,\n'
)


class WixImportTest(TestCase):
    """Test the Wix export importer"""

    def test_parse_wix_datetime(self):
        self.assertEqual(parse_wix_datetime('9 janv. 2025, 13:13:06'), (date(2025, 1, 9), time(13, 13)))
        self.assertEqual(parse_wix_datetime('3 déc. 2025, 20:00:00'), (date(2025, 12, 3), time(20, 0)))
        self.assertIsNone(parse_wix_datetime('2025-01-09 13:13'))
        self.assertIsNone(parse_wix_datetime('9 foo. 2025, 13:13:06'))

    def test_map_wix_status(self):
        self.assertEqual(map_wix_status('RESERVADA'), 'confirmed')
        self.assertEqual(map_wix_status('CANCELADA'), 'cancelled')
        self.assertEqual(map_wix_status('PENDIENTE'), 'request')

    def test_parse_wix_csv_skips_bad_rows(self):
        rows = parse_wix_csv(WIX_CSV)
        self.assertEqual([r['name'] for r in rows], ['Anna Muster', 'Bruno Test', 'Carla Neu'])
        anna = rows[0]
        self.assertEqual(anna['email'], 'anna@example.com')
        self.assertEqual(anna['party_size'], 4)
        self.assertEqual(anna['special_requests'], 'Window, please')
        self.assertEqual(rows[1]['status'], 'cancelled')
        self.assertEqual(rows[2]['status'], 'request')

    def test_import_command(self):
        with tempfile.NamedTemporaryFile('w', suffix='.csv', delete=False, encoding='utf-8') as f:
            f.write(WIX_CSV)
        self.addCleanup(os.remove, f.name)

        call_command('import_wix_bookings', f.name, stdout=io.StringIO())

        self.assertEqual(Booking.objects.filter(source=Booking.Source.WIX).count(), 3)
        self.assertEqual(Client.objects.filter(source=Client.Source.WIX_CSV).count(), 3)
