from enum import Enum

class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    DUE = "due"


class DepositStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    NONE = "none"
