"""Job/candidate matching: pure scoring plus a cached service around it."""

from .scoring import CandidateSnapshot, JobSnapshot, MatchScore, calculate_match
from .service import MatchingService, match_cache_key

__all__ = [
    "CandidateSnapshot",
    "JobSnapshot",
    "MatchScore",
    "MatchingService",
    "calculate_match",
    "match_cache_key",
]
