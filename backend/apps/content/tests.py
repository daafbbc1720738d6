"""
Tests for content app: public listings and admin management.
"""
from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.content.models import Event, FAQ


class PublicContentTest(TestCase):
    """Test public events and FAQ listings"""

    def setUp(self):
        self.client = APIClient()

    def test_upcoming_events_only(self):
        today = timezone.localdate()
        Event.objects.create(title='Past tasting', event_date=today - timedelta(days=3))
        Event.objects.create(title='Opera night', event_date=today + timedelta(days=10))
        Event.objects.create(title='Hidden', event_date=today + timedelta(days=5), is_active=False)
        Event.objects.create(title='Wine tasting', event_date=today + timedelta(days=2))

        response = self.client.get('/api/content/events/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([e['title'] for e in response.data], ['Wine tasting', 'Opera night'])

    def test_faqs_by_language(self):
        FAQ.objects.create(question='Parking?', answer='Rue Liotard', language='en', order=1)
        FAQ.objects.create(question='Parking ?', answer='Rue Liotard', language='fr', order=1)
        FAQ.objects.create(question='Old', answer='...', language='fr', is_active=False)

        response = self.client.get('/api/content/faqs/', {'lang': 'fr'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([f['question'] for f in response.data], ['Parking ?'])
        self.assertEqual(len(self.client.get('/api/content/faqs/').data), 2)


@override_settings(ADMIN_EMAIL='owner@spinella.ch')
class ContentAdminTest(TestCase):
    """Test admin management of events and FAQs"""

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='owner@spinella.ch', username='owner', password='s3cret-Pass'
        )

    def test_requires_admin(self):
        response = self.client.post('/api/content/admin/faqs/', {'question': 'Q', 'answer': 'A'}, format='json')
        self.assertEqual(response.status_code, 401)

    def test_create_and_update_faq(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post('/api/content/admin/faqs/', {
            'question': 'Do you have vegan dishes?', 'answer': 'Yes.', 'language': 'en'
        }, format='json')
        self.assertEqual(response.status_code, 201)

        faq_id = response.data['id']
        response = self.client.patch(f'/api/content/admin/faqs/{faq_id}/', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(FAQ.objects.get(pk=faq_id).is_active)

    def test_create_event(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/content/admin/events/', {
            'title': 'Truffle dinner', 'event_date': '2026-11-20', 'start_time': '19:30'
        }, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(Event.objects.get().title, 'Truffle dinner')
