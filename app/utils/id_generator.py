"""
Utility functions for generating consistent reference formats.
"""

import random
from datetime import date


def generate_receipt_number(issued_on: date) -> str:
    """
    Generate a receipt number in the format RCP-YYYYMMDD-NNNN.

    Args:
        issued_on (date): The day the payment was recorded as paid

    Returns:
        str: A receipt number (e.g., RCP-20251110-0427)
    """
    suffix = random.randint(0, 9999)
    return f"RCP-{issued_on:%Y%m%d}-{suffix:04d}"
