"""
Management command to create or update the administrator account.

Safe to run repeatedly: an existing account with the given email is promoted
to admin and has its password reset instead of being duplicated.
"""

import logging
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

logger = logging.getLogger(__name__)

User = get_user_model()


class Command(BaseCommand):
    help = 'Create or update the administrator account'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            type=str,
            default=os.environ.get('ADMIN_EMAIL', 'admin@example.com'),
            help='Admin login email (default: ADMIN_EMAIL or admin@example.com)',
        )
        parser.add_argument(
            '--password',
            type=str,
            default=os.environ.get('ADMIN_PASSWORD'),
            help='Admin password (default: ADMIN_PASSWORD)',
        )
        parser.add_argument(
            '--name',
            type=str,
            default='Admin User',
            help='Display name',
        )

    def handle(self, *args, **options):
        email = User.objects.normalize_email(options['email'])
        password = options['password']

        if not password:
            raise CommandError('A password is required (--password or ADMIN_PASSWORD)')
        if len(password) < 8:
            raise CommandError('Password must be at least 8 characters long')

        with transaction.atomic():
            admin = User.objects.filter(email__iexact=email).first()
            created = admin is None
            if created:
                admin = User(email=email)

            admin.name = options['name']
            admin.role = User.Role.ADMIN
            admin.department = 'Administration'
            admin.is_staff = True
            admin.is_superuser = True
            admin.is_active = True
            admin.set_password(password)
            admin.save()

        logger.info(f"Admin account {'created' if created else 'updated'}: {email}")
        self.stdout.write(
            self.style.SUCCESS(f"Admin user {'created' if created else 'updated'}: {email}")
        )
