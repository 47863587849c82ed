"""
Identification Session Controller

Drives one identification attempt from a raw photo to a ranked,
confirmable result:

    Idle ──analyze──▶ Analyzing ──ok──▶ MatchesReady ──select──▶ ResultConfirmed
      ▲                   │                                           │
      └──── failure / quota / reset ◀─────────────────────────────────┘

Rules:
- Input and quota checks run before any external call
- The daily counter is charged before the analyzer is called, so an
  abandoned or failed call still counts
- Every analysis carries a generation number; a response that arrives
  after a newer analysis or a reset is dropped
- Analyzer failures return the session to Idle with nothing retained
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

from snaptheplant.catalog.records import SpeciesRecord
from snaptheplant.catalog.species_catalog import SpeciesCatalog
from snaptheplant.core.config import PLANT_CATEGORIES, category_vocabulary
from snaptheplant.core.errors import AnalysisError, IdentificationError, InputError, SessionStateError
from snaptheplant.matching.candidate_matcher import CandidateMatcher, ScoredCandidate, validate_answers
from snaptheplant.models.enums import Category, SessionState
from snaptheplant.models.identity import UserIdentity
from snaptheplant.services.analysis import AnalysisResult, AttributeGuess, DirectIdentification, VisionAnalyzer
from snaptheplant.services.collection_store import CollectionItem, CollectionStore
from snaptheplant.services.image_input import decode_image_data_uri
from snaptheplant.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

TRANSIENT_SPECIES_ID = -1


@dataclass
class SessionContext:
    """
    Collaborators shared by all sessions.

    Passed explicitly to every controller instead of being looked up from
    module-level singletons, so tests can assemble their own.
    """
    catalog: SpeciesCatalog
    analyzer: VisionAnalyzer
    rate_limiter: RateLimiter
    collection: CollectionStore
    analysis_timeout: float = 30.0
    max_image_size_mb: float = 10.0
    strict_matching: bool = False

    def matcher(self) -> CandidateMatcher:
        return CandidateMatcher(self.catalog.get_all(), strict=self.strict_matching)


def parse_category(category: Optional[str]) -> Category:
    """Resolve a category name, case-insensitively."""
    if not category or not str(category).strip():
        raise InputError("Please select a category first")
    wanted = str(category).strip().lower()
    for member in Category:
        if member.value.lower() == wanted:
            return member
    raise InputError(f"Unknown category: {category}")


@dataclass
class IdentificationSession:
    """State of one user's identification attempt."""
    context: SessionContext
    user: UserIdentity = field(default_factory=UserIdentity)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    state: SessionState = SessionState.IDLE
    generation: int = 0
    category: Optional[Category] = None
    captured_image: Optional[str] = None
    candidates: List[ScoredCandidate] = field(default_factory=list)
    result: Optional[SpeciesRecord] = None
    last_error: Optional[Dict[str, str]] = None
    warnings: List[str] = field(default_factory=list)

    # === Transitions ===

    def reset(self) -> None:
        """Start over: back to Idle, in-flight responses become stale."""
        self.generation += 1
        self.state = SessionState.IDLE
        self.category = None
        self.captured_image = None
        self.candidates = []
        self.result = None
        self.warnings = []

    def _fail(self, error: IdentificationError) -> None:
        self.reset()
        self.last_error = {"error": error.error_type, "message": error.user_message}

    async def begin_analysis(self, category: Optional[str], image_data_uri: Optional[str]) -> Optional[List[ScoredCandidate]]:
        """
        Analyze a photo and produce ranked candidates.

        A new analysis supersedes whatever the session was doing.

        Returns:
            Ranked candidates, or None if the response went stale

        Raises:
            InputError: Missing/invalid category or image
            QuotaExceededError: Daily limit reached (analyzer not called)
            AnalysisError: Analyzer failed or timed out
        """
        self.reset()
        self.last_error = None

        try:
            parsed_category = parse_category(category)
            decoded = decode_image_data_uri(image_data_uri or "", self.context.max_image_size_mb)
            self.context.rate_limiter.acquire(self.user.user_id, self.user.tier)
        except IdentificationError as e:
            self._fail(e)
            raise

        self.generation += 1
        generation = self.generation
        self.state = SessionState.ANALYZING
        self.category = parsed_category
        self.captured_image = image_data_uri
        self.warnings = list(decoded.warnings)

        logger.info(
            f"Session {self.session_id} analyzing {parsed_category.value} photo "
            f"({decoded.width}x{decoded.height}, generation {generation})"
        )

        try:
            analysis = await asyncio.wait_for(
                self.context.analyzer.analyze(image_data_uri, parsed_category.value),
                timeout=self.context.analysis_timeout,
            )
        except asyncio.TimeoutError:
            error = AnalysisError(f"Analysis timed out after {self.context.analysis_timeout}s")
            return self._handle_analysis_failure(generation, error)
        except AnalysisError as e:
            return self._handle_analysis_failure(generation, e)
        except Exception as e:
            logger.exception(f"Unexpected analyzer failure: {e}")
            return self._handle_analysis_failure(generation, AnalysisError(str(e)))

        if self._is_stale(generation):
            logger.info(f"Dropping stale analysis response for session {self.session_id} (generation {generation})")
            return None

        try:
            candidates = self._candidates_from_analysis(analysis)
        except AnalysisError as e:
            return self._handle_analysis_failure(generation, e)

        self.candidates = candidates
        self.state = SessionState.MATCHES_READY
        logger.info(f"Session {self.session_id} has {len(self.candidates)} candidates")
        return self.candidates

    def _is_stale(self, generation: int) -> bool:
        return generation != self.generation or self.state is not SessionState.ANALYZING

    def _handle_analysis_failure(self, generation: int, error: AnalysisError) -> None:
        if self._is_stale(generation):
            logger.info(f"Ignoring failure of stale analysis for session {self.session_id}: {error}")
            return None
        logger.warning(f"Analysis failed for session {self.session_id}: {error}")
        self._fail(error)
        raise error

    def apply_answers(self, category: Optional[str], answers: Dict[str, str]) -> List[ScoredCandidate]:
        """
        Rank candidates from quiz answers; no external call, no quota.

        Keeps the captured photo if the session already has one.
        """
        parsed_category = parse_category(category)
        normalized = validate_answers(parsed_category.value, answers)

        image = self.captured_image
        self.reset()
        self.last_error = None
        self.category = parsed_category
        self.captured_image = image
        self.candidates = self.context.matcher().match(parsed_category.value, normalized)
        self.state = SessionState.MATCHES_READY
        return self.candidates

    def select(self, species_id: int) -> SpeciesRecord:
        """Confirm one of the offered candidates."""
        if self.state is not SessionState.MATCHES_READY:
            raise SessionStateError(f"Cannot select a match while {self.state.value}")

        for candidate in self.candidates:
            if candidate.species.id == species_id:
                self.result = candidate.species
                self.state = SessionState.RESULT_CONFIRMED
                logger.info(f"Session {self.session_id} confirmed {self.result.name}")
                return self.result

        raise InputError(f"Species {species_id} is not one of the offered candidates")

    def save_result(self, notes: str = "") -> CollectionItem:
        """Save the confirmed result with the user's photo to their collection."""
        if self.state is not SessionState.RESULT_CONFIRMED or self.result is None:
            raise SessionStateError("Only a confirmed result can be saved")

        image = self.captured_image or self.result.image
        item = self.context.collection.add_item(self.user.user_id, self.result, image)
        if notes:
            item = self.context.collection.update_notes(self.user.user_id, item.instance_id, notes)
        return item

    # === Analysis handling ===

    def _candidates_from_analysis(self, analysis: AnalysisResult) -> List[ScoredCandidate]:
        category = self.category.value

        if isinstance(analysis, DirectIdentification):
            record = self._resolve_identification(analysis)
            max_score = len(category_vocabulary(category))
            return [ScoredCandidate(species=record, score=max_score, confidence=100)]

        if isinstance(analysis, AttributeGuess):
            ranked = self.context.matcher().match(category, analysis.attributes)
            if not analysis.is_poisonous:
                return ranked
            # The photo's flag may add a warning but never clears the catalog's
            return [
                ScoredCandidate(
                    species=c.species.with_safety(True, c.species.toxicity_warning),
                    score=c.score,
                    confidence=c.confidence,
                )
                for c in ranked
            ]

        raise AnalysisError(f"Unsupported analysis result: {type(analysis).__name__}")

    def _resolve_identification(self, identification: DirectIdentification) -> SpeciesRecord:
        """
        Map a direct identification onto the catalog.

        Known species keep catalog data but take the analysis' poison and
        toxicity fields. Unknown species become a transient record whose
        image is the user's own photo.
        """
        match = self.context.catalog.find_by_name(identification.name)
        if match is None and identification.scientific_name:
            match = self.context.catalog.find_by_name(identification.scientific_name)

        if match is not None:
            return match.with_safety(identification.is_poisonous, identification.toxicity_warning)

        category = self.category.value
        logger.info(f"New species identified: {identification.name!r}")
        search_term = identification.scientific_name or identification.name
        return SpeciesRecord(
            id=TRANSIENT_SPECIES_ID,
            category=category,
            name=identification.name,
            scientific_name=identification.scientific_name,
            is_poisonous=identification.is_poisonous,
            toxicity_warning=identification.toxicity_warning,
            care_tips=identification.care_tips if category in PLANT_CATEGORIES else (),
            image=self.captured_image or "",
            further_reading=f"https://www.google.com/search?q={quote_plus(search_term)}",
            key_information=identification.key_information,
            is_new=True,
        )

    # === Views ===

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view for the UI."""
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "generation": self.generation,
            "category": self.category.value if self.category else None,
            "has_image": self.captured_image is not None,
            "candidates": [c.to_dict() for c in self.candidates],
            "result": self.result.to_dict() if self.result else None,
            "error": self.last_error,
            "warnings": list(self.warnings),
        }
