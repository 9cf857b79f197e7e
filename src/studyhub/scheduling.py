"""Interval scheduling for flashcard reviews."""
from datetime import datetime, timedelta
from enum import IntEnum

from studyhub.models import round_half_up


class Rating(IntEnum):
    HARD = 1
    GOOD = 3
    EASY = 4


def schedule_update(rating: int, interval: int, now: datetime = None) -> dict:
    """Calculate the next interval and due date after a review.

    Args:
        rating: Recall quality, one of Rating (Hard=1, Good=3, Easy=4)
        interval: Current interval in days
        now: Review time, defaults to the current time

    Returns:
        Dict with updated interval (days) and next_due (ISO timestamp).
    """
    now = now or datetime.now()
    if rating >= Rating.GOOD:
        # Good grows the interval by 1.6x, Easy by 1.9x
        multiplier = 1.6 + (rating - Rating.GOOD) * 0.3
        new_interval = max(1, round_half_up(interval * multiplier))
    else:
        new_interval = 1
    return {
        "interval": new_interval,
        "next_due": (now + timedelta(days=new_interval)).isoformat(),
    }
