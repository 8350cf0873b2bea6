"""
Management command to assign roles to users
Usage: python manage.py assign_role <username> <role> [--remove]
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from accounts.models import RoleType
from accounts.repositories import UserRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Assign a role to a user by username or email'

    def add_arguments(self, parser):
        parser.add_argument('identifier', type=str, help='Username or email of the user')
        parser.add_argument('role', type=str, help='Role to assign (user, admin)')
        parser.add_argument(
            '--remove',
            action='store_true',
            help='Remove the role instead of assigning it',
        )

    def handle(self, *args, **options):
        identifier = options['identifier']
        role = options['role'].strip().lower()

        valid_roles = [r.value for r in RoleType]
        if role not in valid_roles:
            raise CommandError(f'Invalid role. Must be one of: {", ".join(valid_roles)}')

        repository = UserRepository(logger=logger)
        user = repository.load_user_by_identifier(identifier)
        if user is None:
            raise CommandError(f'No user found for {identifier}')

        if options['remove']:
            if not user.has_role(role):
                self.stdout.write(self.style.WARNING(f'{user.username} does not have role {role}'))
                return
            repository.save(user.remove_role(role))
            self.stdout.write(self.style.SUCCESS(f'Removed role {role} from {user.username}'))
        else:
            if user.has_role(role):
                self.stdout.write(self.style.WARNING(f'{user.username} already has role {role}'))
                return
            repository.save(user.add_role(role))
            self.stdout.write(self.style.SUCCESS(f'Assigned role {role} to {user.username}'))

        self.stdout.write(f'Roles: {", ".join(user.get_roles())}')
