# Candidate matching module
from snaptheplant.matching.candidate_matcher import (
    CandidateMatcher,
    ScoredCandidate,
    normalize_attributes,
    validate_answers,
)

__all__ = [
    "CandidateMatcher",
    "ScoredCandidate",
    "normalize_attributes",
    "validate_answers",
]
