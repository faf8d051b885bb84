from enum import Enum


class RoomStatus(str, Enum):
    """Enum for the lifecycle statuses of a room"""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    UNAVAILABLE = "unavailable"

    def __str__(self):
        return self.value


class RoomType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    QUAD = "quad"

    def __str__(self):
        return self.value
