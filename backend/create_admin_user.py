"""
Script to create the dashboard admin user
Run with: docker exec spinella_backend python create_admin_user.py
"""

import os
import sys
import django

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
django.setup()

from django.conf import settings
from apps.accounts.models import User


def create_admin_user():
    email = settings.ADMIN_EMAIL or os.environ.get('ADMIN_USER_EMAIL', 'info@spinella.ch')
    password = os.environ.get('ADMIN_PASSWORD')
    if not password:
        print('❌ Set ADMIN_PASSWORD before running this script')
        sys.exit(1)

    user, created = User.objects.get_or_create(
        email=email,
        defaults={
            'username': email.split('@')[0],
            'is_active': True,
            'is_staff': True,
        }
    )
    user.set_password(password)
    user.save()

    if created:
        print(f'✅ Created admin user: {user.email}')
    else:
        print(f'✅ Updated password for: {user.email}')

    if not settings.ADMIN_EMAIL:
        print('⚠️  ADMIN_EMAIL is not set: any logged-in user can use the dashboard')


if __name__ == '__main__':
    create_admin_user()
