"""
Tests for clients app: contact list endpoints, sync jobs and CSV import.
"""
import io
import os
import tempfile
from datetime import date, time, timedelta
from unittest.mock import MagicMock, patch

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.clients import services
from apps.clients.importers import parse_contacts_csv
from apps.clients.models import Client
from apps.restaurant.models import Booking

CONTACTS_CSV = (
    'Prénom,Nom de famille,E-mail 1,Téléphone 1,Notes\n'
    'Anna,Muster,Anna@Example.com,"\'+41 79 000 00 01",VIP\n'
    'Bruno,,bruno@example.com,,\n'
    ',,not-an-email,+41 79 000 00 03,\n'
    'Anna,Muster-Neu,anna@example.com,+41 79 000 00 09,\n'
    ',,carla@example.com,,\n'
)


def make_booking(email, booking_date, **overrides):
    fields = {
        'name': email.split('@')[0].title(),
        'email': email,
        'phone': '+41 79 111 11 11',
        'booking_date': booking_date,
        'booking_time': time(19, 0),
        'party_size': 2,
        'status': Booking.Status.CONFIRMED,
    }
    fields.update(overrides)
    return Booking.objects.create(**fields)


class ClientServiceTest(TestCase):
    """Test client upserts and bulk import"""

    def test_email_is_normalised(self):
        client = services.upsert_client('Anna', '  ANNA@Example.com ', '+41 79 000 00 01')
        self.assertEqual(client.email, 'anna@example.com')

    def test_invalid_email_ignored(self):
        self.assertIsNone(services.upsert_client('Nobody', 'nobody'))
        self.assertIsNone(services.add_client_if_missing('Nobody', ''))
        self.assertFalse(Client.objects.exists())

    def test_upsert_overwrites(self):
        services.upsert_client('Anna', 'anna@example.com', None)
        services.upsert_client('Anna Muster', 'anna@example.com', '+41 79 000 00 01')
        client = Client.objects.get()
        self.assertEqual(client.name, 'Anna Muster')
        self.assertEqual(client.phone, '+41 79 000 00 01')

    def test_bulk_import_never_overwrites(self):
        Client.objects.create(name='Existing Anna', email='anna@example.com', source=Client.Source.MANUAL)

        result = services.import_clients([
            {'name': 'Anna', 'email': 'anna@example.com'},
            {'name': 'Bruno', 'email': 'Bruno@Example.com'},
            {'name': 'Bruno again', 'email': 'bruno@example.com'},
            {'name': 'Broken', 'email': 'broken'},
        ])

        self.assertEqual(result, {'imported': 1, 'skipped': 1, 'total': 2})
        self.assertEqual(Client.objects.get(email='anna@example.com').name, 'Existing Anna')
        bruno = Client.objects.get(email='bruno@example.com')
        self.assertEqual(bruno.name, 'Bruno')
        self.assertEqual(bruno.source, Client.Source.CSV_IMPORT)

    def test_sync_from_bookings_first_seen_wins(self):
        make_booking('anna@example.com', date(2026, 3, 10), name='Anna First')
        make_booking('ANNA@example.com', date(2026, 3, 12), name='Anna Second')
        Booking.objects.filter(name='Anna Second').update(created_at=timezone.now() + timedelta(minutes=5))
        make_booking('bruno@example.com', date(2026, 3, 12))
        make_booking('', date(2026, 3, 12))

        result = services.sync_from_bookings()

        self.assertEqual(result['synced'], 2)
        self.assertEqual(Client.objects.get(email='anna@example.com').name, 'Anna First')

    def test_last_booking_dates(self):
        make_booking('anna@example.com', date(2026, 3, 10))
        make_booking('Anna@Example.com', date(2026, 5, 1))
        dates = services.last_booking_dates()
        self.assertEqual(dates['anna@example.com'], date(2026, 5, 1))


class ResendSyncTest(TestCase):
    """Test reconciliation with the email provider's send history"""

    def setUp(self):
        self.email_service = MagicMock()
        self.email_service.list_sent.return_value = iter([
            {'id': 'em_1', 'to': ['Anna@Example.com'], 'created_at': '2026-03-01T09:15:00.000Z'},
            {'id': 'em_2', 'to': ['anna@example.com'], 'created_at': '2026-03-01T09:20:00.000Z'},
            {'id': 'em_3', 'to': ['new@example.com', 'bad-address'], 'created_at': '2026-03-02 18:45:10+00'},
        ])

    def test_sync_from_resend(self):
        Client.objects.create(name='Anna', email='anna@example.com', source=Client.Source.BOOKING)
        booking = make_booking('anna@example.com', date(2026, 3, 1), sent_emails=[
            {'id': 'em_1', 'type': 'confirmed', 'sentAt': '2026-03-01T09:15:00Z'},
        ])

        result = services.sync_from_resend(self.email_service)

        self.assertEqual(result['imported'], 1)
        self.assertEqual(result['skipped'], 1)
        self.assertEqual(result['total'], 2)
        self.assertEqual(result['bookings_updated'], 1)
        self.assertEqual(result['bookings_created'], 1)

        self.assertEqual(Client.objects.get(email='new@example.com').source, Client.Source.RESEND)
        self.assertEqual(Client.objects.get(email='anna@example.com').source, Client.Source.BOOKING)

        booking.refresh_from_db()
        self.assertEqual([e['id'] for e in booking.sent_emails], ['em_1', 'em_2'])
        self.assertEqual(booking.sent_emails[1]['type'], 'resend')

        placeholder = Booking.objects.get(email='new@example.com')
        self.assertEqual(placeholder.status, Booking.Status.FROM_RESEND)
        self.assertEqual(placeholder.booking_date, date(2026, 3, 2))
        self.assertEqual(placeholder.booking_time, time(18, 45))
        self.assertEqual(placeholder.party_size, 1)
        self.assertEqual(placeholder.sent_emails[0]['id'], 'em_3')


class ContactsCsvTest(TestCase):
    """Test the CSV contact importer"""

    def test_parse_contacts_csv(self):
        contacts = parse_contacts_csv(CONTACTS_CSV)
        by_email = {c['email']: c for c in contacts}

        self.assertEqual(set(by_email), {'anna@example.com', 'bruno@example.com', 'carla@example.com'})
        # Last occurrence wins
        self.assertEqual(by_email['anna@example.com']['name'], 'Anna Muster-Neu')
        self.assertEqual(by_email['anna@example.com']['phone'], '+41 79 000 00 09')
        self.assertEqual(by_email['bruno@example.com']['name'], 'Bruno')
        self.assertIsNone(by_email['bruno@example.com']['phone'])
        self.assertEqual(by_email['carla@example.com']['name'], 'carla@example.com')

    def test_phone_quotes_are_stripped(self):
        contacts = parse_contacts_csv('E-mail,Téléphone\nanna@example.com,"\'+41 79 000 00 01"\n')
        self.assertEqual(contacts[0]['phone'], '+41 79 000 00 01')

    def test_missing_email_column(self):
        with self.assertRaises(ValueError):
            parse_contacts_csv('Prénom,Nom de famille\nAnna,Muster\n')

    def test_import_contacts_command(self):
        with tempfile.NamedTemporaryFile('w', suffix='.csv', delete=False, encoding='utf-8') as f:
            f.write(CONTACTS_CSV)
        self.addCleanup(os.remove, f.name)

        out = io.StringIO()
        call_command('import_contacts', f.name, stdout=out)

        self.assertEqual(Client.objects.filter(source=Client.Source.CSV_IMPORT).count(), 3)
        self.assertIn('3', out.getvalue())


@override_settings(ADMIN_EMAIL='owner@spinella.ch', RESEND_API_KEY='')
class ClientAPITest(TestCase):
    """Test the contact list endpoints"""

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='owner@spinella.ch', username='owner', password='s3cret-Pass'
        )
        self.client.force_authenticate(self.admin)

    def test_requires_admin(self):
        self.assertEqual(APIClient().get('/api/clients/').status_code, 401)

    def test_list_with_last_booking_date(self):
        Client.objects.create(name='Anna', email='anna@example.com')
        Client.objects.create(name='Bruno', email='bruno@example.com')
        make_booking('Anna@Example.com', date(2026, 3, 12))

        response = self.client.get('/api/clients/')

        self.assertEqual(response.status_code, 200)
        by_email = {c['email']: c for c in response.data}
        self.assertEqual(by_email['anna@example.com']['last_booking_date'], '2026-03-12')
        self.assertIsNone(by_email['bruno@example.com']['last_booking_date'])

    def test_add_single_client(self):
        response = self.client.post('/api/clients/', {
            'name': 'Anna', 'email': 'Anna@Example.com', 'phone': '+41 79 000 00 01'
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['imported'], 1)
        client = Client.objects.get()
        self.assertEqual(client.email, 'anna@example.com')
        self.assertEqual(client.source, Client.Source.MANUAL)

    def test_add_single_invalid_email(self):
        response = self.client.post('/api/clients/', {'name': 'X', 'email': 'nope'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid email')

    def test_bulk_import(self):
        response = self.client.post('/api/clients/', {'clients': [
            {'name': 'Anna', 'email': 'anna@example.com'},
            {'name': 'Bruno', 'email': 'bruno@example.com', 'phone': '+41 79 000 00 02'},
        ]}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['imported'], 2)
        self.assertEqual(Client.objects.count(), 2)

    def test_bulk_import_all_invalid(self):
        response = self.client.post('/api/clients/', {'clients': [{'email': 'bad'}]}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_empty_body(self):
        response = self.client.post('/api/clients/', {}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'No clients to import')

    def test_sync_from_bookings(self):
        make_booking('anna@example.com', date(2026, 3, 10))
        response = self.client.post('/api/clients/', {'sync_from_bookings': True}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['synced'], 1)

    def test_sync_from_resend_not_configured(self):
        response = self.client.post('/api/clients/', {'sync_from_resend': True}, format='json')
        self.assertEqual(response.status_code, 503)

    @override_settings(RESEND_API_KEY='re_test')
    @patch('apps.notifications.email_service.resend')
    def test_sync_from_resend(self, mock_resend):
        mock_resend.Emails.list.return_value = {
            'data': [{'id': 'em_1', 'to': ['guest@example.com'], 'created_at': '2026-03-01T10:00:00Z'}],
            'has_more': False,
        }
        response = self.client.post('/api/clients/', {'sync_from_resend': True}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['imported'], 1)
        self.assertEqual(response.data['bookings_created'], 1)

    def test_delete(self):
        client = Client.objects.create(name='Anna', email='anna@example.com')
        response = self.client.delete(f'/api/clients/{client.id}/')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Client.objects.exists())
