from .user_model import User
from .room_model import Room
from .tenant_model import Tenant
from .payment_model import Payment

__all__ = ["User", "Room", "Tenant", "Payment"]
