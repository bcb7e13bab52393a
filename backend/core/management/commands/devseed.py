from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from bookings.models import Booking
from properties.models import Property


SUPERUSER_EMAIL = "admin@averulo.test"
SUPERUSER_PASSWORD = "AdminAverulo123!"


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            host = self._ensure_user(email="host@averulo.test", display_name="Hana Host", role=User.HOST)
            guest = self._ensure_user(email="testuser@example.com", display_name="Test User", role=User.USER)

            self.stdout.write(self.style.MIGRATE_HEADING("Ensuring admin superuser"))
            self._ensure_superuser()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating properties"))
            loft = self._ensure_property(host, title="Lekki Waterfront Loft", city="Lagos", price="45000.00")
            self._ensure_property(host, title="Maitama Garden Suite", city="Abuja", price="38000.00")
            self._ensure_property(
                host,
                title="Old Town Studio",
                city="Ibadan",
                price="12000.00",
                status=Property.INACTIVE,
            )

            self.stdout.write(self.style.MIGRATE_HEADING("Creating bookings"))
            today = timezone.localdate()
            Booking.objects.get_or_create(
                property=loft,
                guest=guest,
                start_date=today + timedelta(days=14),
                defaults={"end_date": today + timedelta(days=17)},
            )

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(self.style.NOTICE("Sample accounts sign in with an emailed OTP."))
        self.stdout.write(self.style.NOTICE(f"Admin superuser {SUPERUSER_EMAIL} password: {SUPERUSER_PASSWORD}"))

    def _ensure_user(self, *, email: str, display_name: str, role: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "display_name": display_name, "role": role},
        )
        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
        elif user.role != role:
            user.role = role
            user.save(update_fields=["role"])
        return user

    def _ensure_superuser(self) -> User:
        user = User.objects.filter(email=SUPERUSER_EMAIL).first()
        if user is None:
            return User.objects.create_superuser(
                username=SUPERUSER_EMAIL,
                email=SUPERUSER_EMAIL,
                password=SUPERUSER_PASSWORD,
                role=User.ADMIN,
            )
        return user

    def _ensure_property(
        self,
        host: User,
        *,
        title: str,
        city: str,
        price: str,
        status: str = Property.ACTIVE,
    ) -> Property:
        prop, _ = Property.objects.get_or_create(
            host=host,
            title=title,
            defaults={"city": city, "nightly_price": Decimal(price), "status": status},
        )
        return prop
