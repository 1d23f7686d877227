"""Purchase recommendation module."""
from .models import Priority, RecommendationRequest, Alternative, Recommendation
from .engine import RecommendationEngine, category_match, balance_score

__all__ = [
    "Priority",
    "RecommendationRequest",
    "Alternative",
    "Recommendation",
    "RecommendationEngine",
    "category_match",
    "balance_score"
]
