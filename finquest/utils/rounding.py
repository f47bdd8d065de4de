"""Rounding helpers shared by loan figures and profile percentages"""

import math


def round_half_up(amount: float) -> int:
    """Round to the nearest whole unit, halves rounded up"""
    return math.floor(amount + 0.5)
