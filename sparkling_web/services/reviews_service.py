"""Review endpoints and the rating/category tables shown on review forms"""

import logging
from typing import Any, Optional

from ..api_client import BackendClient

logger = logging.getLogger(__name__)

RATING_CATEGORIES = [
    {"key": "punctuality", "label": "Punctuality"},
    {"key": "professionalism", "label": "Professionalism"},
    {"key": "care", "label": "Care of Belongings"},
    {"key": "communication", "label": "Communication"},
    {"key": "value", "label": "Value for Money"},
]

REVIEW_CATEGORIES = [
    {"key": "excellent-service", "label": "Excellent Service", "positive": True},
    {"key": "on-time", "label": "On Time", "positive": True},
    {"key": "careful-handling", "label": "Careful Handling", "positive": True},
    {"key": "professional", "label": "Professional", "positive": True},
    {"key": "good-communication", "label": "Good Communication", "positive": True},
    {"key": "fair-pricing", "label": "Fair Pricing", "positive": True},
    {"key": "would-recommend", "label": "Would Recommend", "positive": True},
    {"key": "late-arrival", "label": "Late Arrival", "positive": False},
    {"key": "damaged-items", "label": "Damaged Items", "positive": False},
    {"key": "unprofessional", "label": "Unprofessional", "positive": False},
    {"key": "poor-communication", "label": "Poor Communication", "positive": False},
    {"key": "overpriced", "label": "Overpriced", "positive": False},
    {"key": "would-not-recommend", "label": "Would Not Recommend", "positive": False},
]

REPORT_REASONS = ["inappropriate", "spam", "fake", "offensive", "irrelevant"]

COMMENT_MIN_LENGTH = 10
COMMENT_MAX_LENGTH = 1000


def calculate_overall_rating(detailed_rating: dict[str, Optional[float]]) -> float:
    """Average of the non-empty category ratings, rounded to one decimal"""
    ratings = [r for r in detailed_rating.values() if r is not None]
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings), 1)


def validate_review_data(review_data: dict[str, Any]) -> dict[str, Any]:
    """Return {'isValid': bool, 'errors': {field: message}}"""
    errors: dict[str, str] = {}

    if not review_data.get("bookingId"):
        errors["bookingId"] = "Booking ID is required"

    rating = review_data.get("rating")
    if not rating or rating < 1 or rating > 5:
        errors["rating"] = "Rating must be between 1 and 5"

    comment = review_data.get("comment") or ""
    if len(comment.strip()) < COMMENT_MIN_LENGTH:
        errors["comment"] = f"Comment must be at least {COMMENT_MIN_LENGTH} characters"
    if len(comment) > COMMENT_MAX_LENGTH:
        errors["comment"] = f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters"

    return {"isValid": not errors, "errors": errors}


class ReviewsService:
    def __init__(self, api: BackendClient, token: Optional[str] = None):
        self.api = api
        self.token = token

    async def create_review(self, review_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post("/reviews", token=self.token, json=review_data)

    async def create_guest_review(self, review_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.post("/reviews/guest", json=review_data)

    async def get_reviews(self, filters: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.api.get("/reviews", token=self.token, params=filters or {})

    async def get_review(self, review_id: str) -> dict[str, Any]:
        return await self.api.get(f"/reviews/{review_id}", token=self.token)

    async def update_review(self, review_id: str, update_data: dict[str, Any]) -> dict[str, Any]:
        return await self.api.put(f"/reviews/{review_id}", token=self.token, json=update_data)

    async def delete_review(self, review_id: str) -> dict[str, Any]:
        return await self.api.delete(f"/reviews/{review_id}", token=self.token)

    async def mark_helpful(self, review_id: str) -> dict[str, Any]:
        return await self.api.post(f"/reviews/{review_id}/helpful", token=self.token)

    async def report_review(self, review_id: str, reason: str) -> dict[str, Any]:
        return await self.api.post(
            f"/reviews/{review_id}/report", token=self.token, json={"reason": reason}
        )

    async def respond_to_review(self, review_id: str, comment: str) -> dict[str, Any]:
        return await self.api.post(
            f"/reviews/{review_id}/respond", token=self.token, json={"comment": comment}
        )

    async def get_user_reviews(self) -> dict[str, Any]:
        return await self.api.get("/users/me/reviews", token=self.token)

    async def get_mover_reviews(
        self, mover_id: str, filters: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        params = {"reviewee": mover_id, "revieweeType": "Mover", **(filters or {})}
        return await self.api.get("/reviews", token=self.token, params=params)
