from django.core.management.base import BaseCommand, CommandError

from portal.exceptions import Conflict
from storage import get_store

from accounts.identities import IdentityService


class Command(BaseCommand):
    help = "Create an admin identity that can log in to the portal"

    def add_arguments(self, parser):
        parser.add_argument('--username', type=str, required=True, help='Login username of the admin')
        parser.add_argument('--email', type=str, required=True, help='Email address of the admin')
        parser.add_argument('--password', type=str, required=True, help='Initial password')
        parser.add_argument('--name', type=str, default='Admin', help='Display name')

    def handle(self, *args, **options):
        try:
            admin = IdentityService(get_store()).create(
                name=options['name'],
                email=options['email'],
                username=options['username'],
                password=options['password'],
                role='admin',
            )
        except Conflict as exc:
            raise CommandError(str(exc.detail)) from exc
        self.stdout.write(self.style.SUCCESS(f"Created admin '{admin['username']}' with id={admin['id']}"))
