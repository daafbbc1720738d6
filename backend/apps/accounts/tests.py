"""
Tests for accounts app: login and admin allow-list.
"""
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.accounts.permissions import is_allowed_admin


class UserModelTest(TestCase):
    """Test User model"""

    def test_user_str(self):
        user = User.objects.create_user(
            email='chef@spinella.ch', username='chef', password='s3cret-Pass'
        )
        self.assertEqual(str(user), 'chef@spinella.ch')


class AdminAllowListTest(TestCase):
    """Test the ADMIN_EMAIL allow-list"""

    def setUp(self):
        self.user = User.objects.create_user(
            email='Owner@Spinella.ch', username='owner', password='s3cret-Pass'
        )

    @override_settings(ADMIN_EMAIL='')
    def test_any_user_allowed_without_admin_email(self):
        self.assertTrue(is_allowed_admin(self.user))

    @override_settings(ADMIN_EMAIL='owner@spinella.ch')
    def test_admin_email_matches_case_insensitively(self):
        self.assertTrue(is_allowed_admin(self.user))

    @override_settings(ADMIN_EMAIL='someone-else@spinella.ch')
    def test_other_email_rejected(self):
        self.assertFalse(is_allowed_admin(self.user))

    def test_anonymous_rejected(self):
        self.assertFalse(is_allowed_admin(None))


class LoginFlowTest(TestCase):
    """Test JWT login and current user endpoint"""

    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(
            email='owner@spinella.ch', username='owner', password='s3cret-Pass'
        )

    @override_settings(ADMIN_EMAIL='owner@spinella.ch')
    def test_login_and_me(self):
        response = self.client.post(
            '/api/auth/login/',
            {'email': 'owner@spinella.ch', 'password': 's3cret-Pass'},
            format='json'
        )
        self.assertEqual(response.status_code, 200)
        token = response.data['access']

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        me = self.client.get('/api/auth/me/')
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data['email'], 'owner@spinella.ch')
        self.assertTrue(me.data['is_admin'])

    def test_bad_password_rejected(self):
        response = self.client.post(
            '/api/auth/login/',
            {'email': 'owner@spinella.ch', 'password': 'wrong'},
            format='json'
        )
        self.assertEqual(response.status_code, 401)
