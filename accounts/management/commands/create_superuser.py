"""
Management command to create a default superuser if one doesn't exist.
This is useful for automated deployments.
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError
from decouple import config

from core.models import IncludeDeleted
from accounts.models import User
from accounts.repositories import UserRepository


class Command(BaseCommand):
    help = 'Creates a default superuser if one does not exist'

    def handle(self, *args, **options):
        """Create default superuser from environment variables"""

        username = config('DJANGO_SUPERUSER_USERNAME', default='admin')
        email = config('DJANGO_SUPERUSER_EMAIL', default='admin@example.com')
        password = config('DJANGO_SUPERUSER_PASSWORD', default='changeme123')

        repository = UserRepository()
        if repository.count({'username': username}, include_deleted=IncludeDeleted.YES):
            self.stdout.write(
                self.style.WARNING(f'Superuser "{username}" already exists')
            )
            return

        try:
            User.objects.create_superuser(
                username=username,
                email=email,
                password=password
            )
        except IntegrityError as e:
            raise CommandError(f'Error creating superuser: {e}')

        self.stdout.write(
            self.style.SUCCESS(f'Created superuser: {username} ({email})')
        )
