"""
Tests for notifications app: Resend wrapper, Web Push fan-out and push endpoints.
"""
import json
from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings
from pywebpush import WebPushException
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.notifications.email_service import EmailService
from apps.notifications.models import PushSubscription
from apps.notifications import push_service


def make_subscription(endpoint='https://push.example.com/sub/1'):
    return {'endpoint': endpoint, 'keys': {'p256dh': 'key', 'auth': 'secret'}}


class EmailServiceTest(TestCase):
    """Test the Resend wrapper"""

    def test_unconfigured_service_skips_send(self):
        service = EmailService(api_key='')
        with patch('apps.notifications.email_service.resend') as mock_resend:
            result = service.send('guest@example.com', 'Hello', '<p>Hi</p>')
        self.assertIsNone(result)
        mock_resend.Emails.send.assert_not_called()

    @patch('apps.notifications.email_service.resend')
    def test_send_returns_message_id(self, mock_resend):
        mock_resend.Emails.send.return_value = {'id': 'em_123'}
        service = EmailService(api_key='re_test', from_email='Spinella <info@spinella.ch>')

        result = service.send('guest@example.com', 'Hello', '<p>Hi</p>', bcc=['info@spinella.ch'])

        self.assertEqual(result, 'em_123')
        params = mock_resend.Emails.send.call_args[0][0]
        self.assertEqual(params['to'], ['guest@example.com'])
        self.assertEqual(params['bcc'], ['info@spinella.ch'])
        self.assertEqual(params['from'], 'Spinella <info@spinella.ch>')

    @patch('apps.notifications.email_service.resend')
    def test_send_failure_returns_none(self, mock_resend):
        mock_resend.Emails.send.side_effect = Exception('rate limited')
        service = EmailService(api_key='re_test')
        self.assertIsNone(service.send('guest@example.com', 'Hello', '<p>Hi</p>'))

    @patch('apps.notifications.email_service.resend')
    def test_last_event(self, mock_resend):
        service = EmailService(api_key='re_test')

        mock_resend.Emails.get.return_value = {'id': 'em_1', 'last_event': 'delivered'}
        self.assertEqual(service.get_last_event('em_1'), 'delivered')

        mock_resend.Emails.get.return_value = {'id': 'em_1'}
        self.assertEqual(service.get_last_event('em_1'), 'unknown')

        mock_resend.Emails.get.side_effect = Exception('not found')
        self.assertEqual(service.get_last_event('em_1'), '—')

    @patch('apps.notifications.email_service.resend')
    def test_list_sent_follows_pages(self, mock_resend):
        mock_resend.Emails.list.side_effect = [
            {'data': [{'id': 'a'}, {'id': 'b'}], 'has_more': True},
            {'data': [{'id': 'c'}], 'has_more': False},
        ]
        service = EmailService(api_key='re_test')

        ids = [item['id'] for item in service.list_sent()]

        self.assertEqual(ids, ['a', 'b', 'c'])
        second_call = mock_resend.Emails.list.call_args_list[1][0][0]
        self.assertEqual(second_call['after'], 'b')


@override_settings(VAPID_PUBLIC_KEY='pub', VAPID_PRIVATE_KEY='priv')
class PushServiceTest(TestCase):
    """Test Web Push fan-out"""

    def test_payload_defaults(self):
        payload = json.loads(push_service.build_payload({'body': 'New booking'}))
        self.assertEqual(payload['title'], 'Spinella Restaurant')
        self.assertEqual(payload['body'], 'New booking')
        self.assertEqual(payload['icon'], '/icon-192.png')
        self.assertEqual(payload['url'], '/admin')
        self.assertEqual(payload['tag'], 'spinella-notification')

    @override_settings(VAPID_PUBLIC_KEY='', VAPID_PRIVATE_KEY='')
    @patch('apps.notifications.push_service.webpush')
    def test_skips_without_vapid_keys(self, mock_webpush):
        PushSubscription.objects.create(endpoint='https://push.example.com/sub/1',
                                        subscription=make_subscription())
        self.assertEqual(push_service.send_push_to_all({}), {'sent': 0, 'failed': 0})
        mock_webpush.assert_not_called()

    @patch('apps.notifications.push_service.webpush')
    def test_sends_to_every_subscription(self, mock_webpush):
        for i in range(2):
            endpoint = f'https://push.example.com/sub/{i}'
            PushSubscription.objects.create(endpoint=endpoint, subscription=make_subscription(endpoint))

        result = push_service.send_push_to_all({'title': 'Hi'})

        self.assertEqual(result, {'sent': 2, 'failed': 0})
        self.assertEqual(mock_webpush.call_count, 2)
        kwargs = mock_webpush.call_args[1]
        self.assertEqual(kwargs['vapid_private_key'], 'priv')

    @patch('apps.notifications.push_service.webpush')
    def test_gone_subscription_is_deleted(self, mock_webpush):
        PushSubscription.objects.create(endpoint='https://push.example.com/sub/1',
                                        subscription=make_subscription())
        mock_webpush.side_effect = WebPushException('Gone', response=MagicMock(status_code=410))

        result = push_service.send_push_to_all({})

        self.assertEqual(result, {'sent': 0, 'failed': 1})
        self.assertFalse(PushSubscription.objects.exists())

    @patch('apps.notifications.push_service.webpush')
    def test_transient_failure_keeps_subscription(self, mock_webpush):
        PushSubscription.objects.create(endpoint='https://push.example.com/sub/1',
                                        subscription=make_subscription())
        mock_webpush.side_effect = WebPushException('Server error', response=MagicMock(status_code=500))

        push_service.send_push_to_all({})

        self.assertEqual(PushSubscription.objects.count(), 1)


@override_settings(ADMIN_EMAIL='owner@spinella.ch')
class PushEndpointsTest(TestCase):
    """Test push HTTP endpoints"""

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='owner@spinella.ch', username='owner', password='s3cret-Pass'
        )

    @override_settings(VAPID_PUBLIC_KEY='')
    def test_public_key_unconfigured(self):
        response = self.client.get('/api/push/vapid-public-key/')
        self.assertEqual(response.status_code, 503)

    @override_settings(VAPID_PUBLIC_KEY='pub-key')
    def test_public_key(self):
        response = self.client.get('/api/push/vapid-public-key/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['publicKey'], 'pub-key')

    def test_subscribe_requires_admin(self):
        response = self.client.post('/api/push/subscribe/', make_subscription(), format='json')
        self.assertEqual(response.status_code, 401)

        other = User.objects.create_user(email='waiter@spinella.ch', username='waiter', password='x-Pass-123')
        self.client.force_authenticate(other)
        response = self.client.post('/api/push/subscribe/', make_subscription(), format='json')
        self.assertEqual(response.status_code, 403)

    def test_subscribe_upserts_by_endpoint(self):
        self.client.force_authenticate(self.admin)
        sub = make_subscription()

        self.client.post('/api/push/subscribe/', {'subscription': sub}, format='json')
        sub['keys']['auth'] = 'rotated'
        response = self.client.post('/api/push/subscribe/', sub, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(PushSubscription.objects.count(), 1)
        self.assertEqual(PushSubscription.objects.get().subscription['keys']['auth'], 'rotated')

    def test_subscribe_without_endpoint(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/push/subscribe/', {'keys': {}}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_subscribe_with_list_body(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/push/subscribe/', [make_subscription()], format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid subscription')
        self.assertFalse(PushSubscription.objects.exists())

    @override_settings(VAPID_PUBLIC_KEY='', VAPID_PRIVATE_KEY='')
    def test_send_unconfigured(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/push/send/', {'title': 'Test'}, format='json')
        self.assertEqual(response.status_code, 503)

    @override_settings(VAPID_PUBLIC_KEY='pub', VAPID_PRIVATE_KEY='priv')
    @patch('apps.notifications.push_service.webpush')
    def test_send(self, mock_webpush):
        PushSubscription.objects.create(endpoint='https://push.example.com/sub/1',
                                        subscription=make_subscription())
        self.client.force_authenticate(self.admin)

        response = self.client.post('/api/push/send/', {'body': 'Test'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {'sent': 1, 'failed': 0})
