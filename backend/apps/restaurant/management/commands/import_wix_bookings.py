"""
Import reservations from a Wix CSV export.

Usage:
    python manage.py import_wix_bookings path/to/export.csv
"""
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.clients.models import Client
from apps.clients.services import upsert_client
from apps.restaurant.importers import parse_wix_csv
from apps.restaurant.models import Booking


class Command(BaseCommand):
    help = 'Import bookings (and their guests as clients) from a Wix CSV export'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the Wix export')

    def handle(self, *args, **options):
        path = options['csv_path']
        try:
            with open(path, encoding='utf-8') as f:
                rows = parse_wix_csv(f.read())
        except FileNotFoundError:
            raise CommandError(f"File not found: {path}")

        self.stdout.write(f"Valid bookings to import: {len(rows)}")

        # Last row per email wins for the client record
        clients = {row['email']: row for row in rows}

        with transaction.atomic():
            for row in clients.values():
                upsert_client(row['name'], row['email'], row['phone'], source=Client.Source.WIX_CSV)

            Booking.objects.bulk_create(
                [Booking(source=Booking.Source.WIX, **row) for row in rows],
                batch_size=200
            )

        self.stdout.write(self.style.SUCCESS(
            f"✅ Imported {len(rows)} bookings and {len(clients)} clients"
        ))
