"""Rounding shared by tracker, quiz and interview scoring."""
import math


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds up (2.5 -> 3). Python's round() would give 2."""
    return int(math.floor(value + 0.5))


def percent(part: int, total: int) -> int:
    """round_half_up(100 * part / total), 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(100 * part / total)
