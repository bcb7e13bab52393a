from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    USER = "USER"
    HOST = "HOST"
    ADMIN = "ADMIN"
    ROLES = [
        (USER, "Guest"),
        (HOST, "Host"),
        (ADMIN, "Admin"),
    ]

    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=120, blank=True)
    role = models.CharField(max_length=10, choices=ROLES, default=USER)

    def __str__(self):
        return self.email or self.username

    @property
    def is_admin(self) -> bool:
        return self.role == self.ADMIN or self.is_superuser

    @property
    def is_host(self) -> bool:
        return self.role == self.HOST
