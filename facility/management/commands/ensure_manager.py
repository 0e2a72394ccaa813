from django.core.management.base import BaseCommand, CommandError

from facility.models import User


class Command(BaseCommand):
    help = "Create or reset a manager account for the management screens (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('username')
        parser.add_argument('--password', required=True)
        parser.add_argument('--role', default='manager', choices=['manager', 'admin'])

    def handle(self, *args, **opts):
        password = opts['password']
        if len(password) < 8:
            raise CommandError('password must be at least 8 characters')
        user, created = User.objects.get_or_create(
            username=opts['username'],
            defaults={'role': opts['role'], 'is_active': True},
        )
        user.set_password(password)
        user.role = opts['role']
        user.is_active = True
        # admins may also use /admin/
        user.is_staff = user.role == 'admin'
        user.save()
        verb = 'created' if created else 'reset'
        self.stdout.write(self.style.SUCCESS(f"{verb}: {user.username} ({user.role})"))
