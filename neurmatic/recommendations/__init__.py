"""Personalized recommendations: pure ranking engine plus a cached service."""

from .engine import Recommendation
from .service import RecommendationService, recommendation_cache_key

__all__ = ["Recommendation", "RecommendationService", "recommendation_cache_key"]
