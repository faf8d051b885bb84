from enum import Enum

class TenantStatus(str, Enum):
    """Enum for different statuses of tenants"""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"

    def __str__(self):
        return self.value
