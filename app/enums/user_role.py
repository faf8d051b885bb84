from enum import Enum


class UserRole(str, Enum):
    """Enum for the roles a caller can act under"""

    ADMIN = "admin"
    STAFF = "staff"
    TENANT = "tenant"

    def __str__(self):
        return self.value
