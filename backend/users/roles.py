from django.db import models


class Role(models.TextChoices):
    OWNER = "owner", "Owner"
    ADMIN = "admin", "Admin"
    EMPLOYEE = "employee", "Employee"


MANAGER_ROLES = (Role.OWNER, Role.ADMIN)
