from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from backoffice.models import User

# one account per access level
DEMO_SET = [
    ("owner", "employee", "Owner"),
    ("coowner", "employee", "Co-owner"),
    ("admin", "employee", "Admin"),
    ("dokter", "doctor", "Dokter"),
]


class Command(BaseCommand):
    help = "Ensure demo accounts exist with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="123456")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role, level in DEMO_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "email": f"{username}@klinik.local",
                    "first_name": username.capitalize(),
                    "role": role,
                    "access_level": level,
                    "password": password,
                    "is_active": True,
                },
            )
            if not created:
                # reset password, level and active flag
                u.password = password
                u.role = role
                u.access_level = level
                u.is_active = True
                u.save(update_fields=["password", "role", "access_level", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({level})"))
        self.stdout.write(self.style.SUCCESS("All demo accounts ensured."))
