"""
Management command to create or reset the admin panel account

Usage: python manage.py ensure_admin [--username admin] [--password secret]
"""
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

User = get_user_model()


class Command(BaseCommand):
    help = 'Create the admin account, or reset its password, from PESTCONTROL_ADMIN_* settings'

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            default=None,
            help='Admin username (default: PESTCONTROL_ADMIN_USERNAME)',
        )
        parser.add_argument(
            '--password',
            default=None,
            help='Admin password (default: PESTCONTROL_ADMIN_PASSWORD)',
        )

    def handle(self, *args, **options):
        username = options['username'] or settings.PESTCONTROL_ADMIN_USERNAME
        password = options['password'] or settings.PESTCONTROL_ADMIN_PASSWORD

        user, created = User.objects.get_or_create(username=username)
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.set_password(password)
        user.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created admin user "{username}"'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Reset admin user "{username}"'))
