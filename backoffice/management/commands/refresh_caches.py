from django.core.management.base import BaseCommand
from django.utils import timezone

from backoffice.services.clinic import CLINIC_CACHE_KEY, clinic_payload
from backoffice.services.doctors import ACTIVE_DOCTORS_CACHE_KEY, active_doctors


class Command(BaseCommand):
    help = "Warm and refresh API caches (active doctors, clinic settings)."

    def handle(self, *args, **options):
        now = timezone.now()
        keys_refreshed = []

        doctors = active_doctors(refresh=True)
        keys_refreshed.append(ACTIVE_DOCTORS_CACHE_KEY)

        clinic_payload(refresh=True)
        keys_refreshed.append(CLINIC_CACHE_KEY)

        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {len(keys_refreshed)} keys at {now} ({len(doctors)} active doctors)"
        ))
