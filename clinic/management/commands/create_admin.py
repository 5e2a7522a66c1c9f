from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import APIException

from clinic.models import Account, Admin
from clinic.services.accounts import register_account, update_password


class Command(BaseCommand):
    help = "Create an admin account, or reset its password if it already exists (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--email', default='admin@wellness.com')
        parser.add_argument('--password', default='admin123')
        parser.add_argument('--name', default='System Administrator')

    def handle(self, *args, **opts):
        email = Account.normalize_email(opts['email'])
        try:
            existing = Admin.objects.filter(email=email).first()
            if existing is None:
                admin, _ = register_account('admin', email=email, password=opts['password'], name=opts['name'])
                self.stdout.write(self.style.SUCCESS(f"created: {admin.email} (id={admin.pk})"))
            elif update_password(existing, opts['password']):
                existing.save(update_fields=['password'])
                self.stdout.write(self.style.WARNING(f"password reset: {email}"))
            else:
                self.stdout.write(self.style.SUCCESS(f"exists: {email}"))
        except APIException as e:
            raise CommandError(str(e.detail))
