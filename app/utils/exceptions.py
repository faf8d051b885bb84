class OccupancyInvariantError(Exception):
    """
    Raised when a room's tenant set, its occupancy counter and the tenants'
    room references disagree. The surrounding transaction is rolled back.
    """

    def __init__(self, room_id: int, detail: str):
        self.room_id = room_id
        self.detail = detail
        super().__init__(f"Room {room_id}: {detail}")
