"""Helpers for mover ratings, which arrive either as a bare number or as {average, count}"""

import math
from typing import Any


def format_mover_rating(rating: Any, decimals: int = 1, show_count: bool = True) -> dict:
    """Return {'value': str, 'count': str, 'hasRating': bool} for display"""
    no_rating = {
        "value": "N/A",
        "count": "(no reviews)" if show_count else "",
        "hasRating": False,
    }

    if not rating:
        return no_rating

    # Legacy format: plain number
    if isinstance(rating, (int, float)) and not isinstance(rating, bool):
        return {
            "value": f"{rating:.{decimals}f}",
            "count": "(based on reviews)" if show_count else "",
            "hasRating": True,
        }

    if isinstance(rating, dict):
        average = rating.get("average") or 0
        count = rating.get("count") or 0
        return {
            "value": f"{average:.{decimals}f}" if average > 0 else "N/A",
            "count": f"({count} review{'' if count == 1 else 's'})" if show_count else "",
            "hasRating": average > 0,
        }

    return no_rating


def get_rating_value(rating: Any) -> float:
    if isinstance(rating, (int, float)) and not isinstance(rating, bool):
        return rating
    if isinstance(rating, dict):
        return rating.get("average") or 0
    return 0


def get_review_count(rating: Any) -> int:
    if isinstance(rating, dict):
        return rating.get("count") or 0
    return 0


def generate_star_rating(rating: Any) -> list[str]:
    """Five entries of 'full', 'half' or 'empty' for rendering stars"""
    value = max(0.0, min(5.0, float(get_rating_value(rating))))
    full = math.floor(value)
    half = 1 if value - full > 0 else 0
    return ["full"] * full + ["half"] * half + ["empty"] * (5 - full - half)
