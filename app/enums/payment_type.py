from enum import Enum


class PaymentType(str, Enum):
    RENT = "rent"
    DEPOSIT = "deposit"
    UTILITY = "utility"
    MAINTENANCE = "maintenance"
    PENALTY = "penalty"
    OTHER = "other"
