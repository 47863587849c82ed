"""
Candidate Matcher

Ranks a category's species by agreement with observed attributes.

Algorithm:
1. Keep only species of the requested category
2. With no observations, every species is a candidate with score 0
3. Score each species by the number of shared keys whose values agree
   (case-insensitive); disagreeing keys lower the score but never exclude
4. Normalize to a 0-100 confidence against the category's key count
5. Stable sort by confidence, ties in catalog order

Matching is a pure function of (catalog snapshot, category, observations).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from snaptheplant.catalog.records import SpeciesRecord
from snaptheplant.core.config import category_vocabulary
from snaptheplant.core.errors import InputError
from snaptheplant.models.enums import ConfidenceLevel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredCandidate:
    """A species considered for one identification attempt."""
    species: SpeciesRecord
    score: int
    confidence: int  # 0 - 100

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return ConfidenceLevel.from_score(self.confidence)

    def to_dict(self) -> Dict:
        return {
            "species": self.species.to_dict(),
            "score": self.score,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level.value,
        }


def normalize_value(value) -> str:
    """Canonical form used for attribute comparison."""
    return str(value).strip().lower()


def normalize_attributes(observed: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Lower-case keys and values, dropping blank answers."""
    normalized = {}
    for key, value in (observed or {}).items():
        if value is None:
            continue
        value = normalize_value(value)
        if value:
            normalized[normalize_value(key)] = value
    return normalized


def validate_answers(category: str, answers: Mapping[str, str]) -> Dict[str, str]:
    """
    Check quiz answers against the category vocabulary.

    Raises:
        InputError: On an unknown category, key or option
    """
    vocabulary = category_vocabulary(category)
    if not vocabulary:
        raise InputError(f"Unknown category: {category}")

    normalized = normalize_attributes(answers)
    for key, value in normalized.items():
        if key not in vocabulary:
            raise InputError(f"'{key}' is not a {category} attribute")
        if value not in vocabulary[key]:
            raise InputError(f"'{value}' is not a valid answer for {key}")
    return normalized


class CandidateMatcher:
    """
    Attribute-agreement matcher over a catalog snapshot.

    Usage:
        matcher = CandidateMatcher(catalog.get_all())
        ranked = matcher.match("Insect", {"color": "yellow", "wings": "yes"})

    With strict=True a present-and-unequal attribute excludes the species
    (the older hard filter). The default is soft scoring.
    """

    def __init__(self, records: Sequence[SpeciesRecord], strict: bool = False):
        self.records = tuple(records)
        self.strict = strict

    def match(
        self,
        category: str,
        observed: Optional[Mapping[str, str]] = None,
    ) -> List[ScoredCandidate]:
        """
        Rank species of a category against observed attributes.

        Args:
            category: Category to restrict candidates to
            observed: Attribute key -> observed value (quiz or AI guess)

        Returns:
            Candidates sorted by confidence, highest first. An empty list
            means nothing in the category matched.
        """
        category = str(category)
        in_category = [r for r in self.records if r.category == category]
        attrs = normalize_attributes(observed)

        if not attrs:
            return [ScoredCandidate(species=r, score=0, confidence=0) for r in in_category]

        max_score = len(category_vocabulary(category)) or len(attrs)

        candidates = []
        for record in in_category:
            score, mismatches = self._score(record, attrs)
            if self.strict and mismatches:
                continue
            confidence = min(100, round(100 * score / max_score))
            candidates.append(ScoredCandidate(species=record, score=score, confidence=confidence))

        # sorted() is stable, so equal confidences keep catalog order
        ranked = sorted(candidates, key=lambda c: c.confidence, reverse=True)

        logger.debug(
            f"Matched {len(ranked)}/{len(in_category)} {category} species "
            f"against {sorted(attrs)}"
        )
        return ranked

    @staticmethod
    def _score(record: SpeciesRecord, attrs: Dict[str, str]) -> tuple:
        """Count agreeing and disagreeing keys defined on both sides."""
        score = 0
        mismatches = 0
        species_attrs = normalize_attributes(record.attributes)
        for key, value in attrs.items():
            if key not in species_attrs:
                continue
            if species_attrs[key] == value:
                score += 1
            else:
                mismatches += 1
        return score, mismatches
