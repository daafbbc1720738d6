"""
Import contacts from a CSV export into the client list.

Usage:
    python manage.py import_contacts path/to/contacts.csv
"""
from django.core.management.base import BaseCommand, CommandError

from apps.clients.importers import parse_contacts_csv
from apps.clients.models import Client
from apps.clients.services import upsert_client


class Command(BaseCommand):
    help = 'Import contacts (Prénom, Nom de famille, E-mail, Téléphone) from a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the contacts CSV')

    def handle(self, *args, **options):
        path = options['csv_path']
        try:
            with open(path, encoding='utf-8') as f:
                contacts = parse_contacts_csv(f.read())
        except FileNotFoundError:
            raise CommandError(f"File not found: {path}")
        except ValueError as e:
            raise CommandError(str(e))

        self.stdout.write(f"Parsed {len(contacts)} unique contacts")

        for contact in contacts:
            upsert_client(
                contact['name'], contact['email'], contact['phone'],
                source=Client.Source.CSV_IMPORT
            )

        self.stdout.write(self.style.SUCCESS(f"✅ Imported {len(contacts)} clients"))
