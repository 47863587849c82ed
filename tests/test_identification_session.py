"""
Tests for IdentificationSession - the identification state machine.

Tests cover:
- Input and quota checks before the analyzer is called
- Direct identifications (known and unknown species)
- Attribute guesses fed through the matcher
- Failures, timeouts and stale responses
- Selecting and saving results
"""

import asyncio
from dataclasses import fields

import pytest

from snaptheplant.catalog.records import CareTip
from snaptheplant.core.errors import AnalysisError, InputError, QuotaExceededError, SessionStateError
from snaptheplant.models.enums import SessionState, SubscriptionTier
from snaptheplant.models.identity import UserIdentity
from snaptheplant.services.analysis import AttributeGuess, DirectIdentification
from snaptheplant.services.identification_session import TRANSIENT_SPECIES_ID, SessionContext, parse_category

from helpers import FakeAnalyzer, SlowAnalyzer, make_data_uri

HONEY_BEE = DirectIdentification(
    name="Honey Bee",
    scientific_name="Apis mellifera",
    is_poisonous=True,
    toxicity_warning="Stings can cause allergic reactions.",
)

BIZARRO_BUG = DirectIdentification(
    name="Bizarro Bug",
    scientific_name="Bizarria bizarris",
    is_poisonous=False,
)


async def _wait_for_call(analyzer, count=1):
    while len(analyzer.calls) < count:
        await asyncio.sleep(0)


class TestBeginAnalysis:
    """Test the analyze transition."""

    @pytest.mark.asyncio
    async def test_known_species_single_candidate(self, make_session, photo, catalog):
        session = make_session(FakeAnalyzer(HONEY_BEE))

        candidates = await session.begin_analysis("Insect", photo)

        assert session.state == SessionState.MATCHES_READY
        assert len(candidates) == 1
        assert candidates[0].confidence == 100
        assert candidates[0].species.id == 9
        assert candidates[0].species.image == catalog.get(9).image
        assert candidates[0].species.toxicity_warning == "Stings can cause allergic reactions."

    @pytest.mark.asyncio
    async def test_known_species_by_scientific_name(self, make_session, photo):
        analysis = DirectIdentification(name="European honey bee", scientific_name="apis mellifera")
        session = make_session(FakeAnalyzer(analysis))

        candidates = await session.begin_analysis("Insect", photo)

        assert candidates[0].species.id == 9
        # The analysis' safety fields override the catalog's
        assert candidates[0].species.is_poisonous is False

    @pytest.mark.asyncio
    async def test_unknown_species_uses_captured_photo(self, make_session, photo, catalog):
        session = make_session(FakeAnalyzer(BIZARRO_BUG))

        candidates = await session.begin_analysis("Insect", photo)

        record = candidates[0].species
        assert record.id == TRANSIENT_SPECIES_ID
        assert record.is_new is True
        assert record.image == photo
        assert record.image not in {r.image for r in catalog.get_all()}
        assert record.name == "Bizarro Bug"
        assert "Bizarria+bizarris" in record.further_reading
        assert record.care_tips == ()

    @pytest.mark.asyncio
    async def test_unknown_plant_keeps_care_tips(self, make_session, photo):
        analysis = DirectIdentification(
            name="Mystery Fern",
            care_tips=(CareTip("Watering", "Keep moist."),),
        )
        session = make_session(FakeAnalyzer(analysis))

        candidates = await session.begin_analysis("Plant", photo)

        assert candidates[0].species.care_tips == (CareTip("Watering", "Keep moist."),)

    @pytest.mark.asyncio
    async def test_attribute_guess_is_matched(self, make_session, photo):
        guess = AttributeGuess(attributes={"color": "yellow", "wings": "yes", "legs": "6"})
        session = make_session(FakeAnalyzer(guess))

        candidates = await session.begin_analysis("insect", photo)

        assert session.category.value == "Insect"
        assert candidates[0].species.id == 9
        assert candidates[0].confidence == 100
        assert len(candidates) == 4

    @pytest.mark.asyncio
    async def test_harmless_guess_keeps_catalog_warnings(self, make_session, photo, catalog):
        guess = AttributeGuess(attributes={"color": "red", "wings": "yes", "legs": "6"}, is_poisonous=False)
        session = make_session(FakeAnalyzer(guess))

        candidates = await session.begin_analysis("Insect", photo)

        bee = next(c.species for c in candidates if c.species.id == 9)
        assert bee.is_poisonous is True
        assert bee.toxicity_warning == catalog.get(9).toxicity_warning
        assert bee.toxicity_warning

    @pytest.mark.asyncio
    async def test_poisonous_guess_flags_every_candidate(self, make_session, photo, catalog):
        guess = AttributeGuess(attributes={"color": "red"}, is_poisonous=True)
        session = make_session(FakeAnalyzer(guess))

        candidates = await session.begin_analysis("Insect", photo)

        assert all(c.species.is_poisonous for c in candidates)
        bee = next(c.species for c in candidates if c.species.id == 9)
        assert bee.toxicity_warning == catalog.get(9).toxicity_warning

    @pytest.mark.asyncio
    async def test_quality_warnings_reported(self, make_session):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        await session.begin_analysis("Insect", make_data_uri(size=(32, 32), color=(5, 5, 5)))

        assert len(session.warnings) == 2


class TestInputAndQuota:
    """Checks that run before any external call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category, image", [(None, "photo"), ("", "photo"), ("Insect", None), ("Insect", "")])
    async def test_missing_input(self, make_session, photo, rate_limiter, category, image):
        analyzer = FakeAnalyzer(HONEY_BEE)
        session = make_session(analyzer)

        with pytest.raises(InputError):
            await session.begin_analysis(category, photo if image == "photo" else image)

        assert session.state == SessionState.IDLE
        assert analyzer.calls == []
        assert rate_limiter.status("anonymous").count == 0
        assert session.last_error["error"] == "invalid_input"

    @pytest.mark.asyncio
    async def test_unknown_category(self, make_session, photo):
        with pytest.raises(InputError):
            await make_session(FakeAnalyzer(HONEY_BEE)).begin_analysis("Mushroom", photo)

    @pytest.mark.asyncio
    async def test_not_an_image(self, make_session):
        analyzer = FakeAnalyzer(HONEY_BEE)
        with pytest.raises(InputError):
            await make_session(analyzer).begin_analysis("Insect", "data:image/png;base64,aGVsbG8=")
        assert analyzer.calls == []

    @pytest.mark.asyncio
    async def test_quota_exhausted_skips_analyzer(self, make_session, photo, store):
        store.put("rate_limit:anonymous", {"count": 15, "date": "2024-01-02"})
        analyzer = FakeAnalyzer(HONEY_BEE)
        session = make_session(analyzer)

        with pytest.raises(QuotaExceededError):
            await session.begin_analysis("Insect", photo)

        assert analyzer.calls == []
        assert session.state == SessionState.IDLE
        assert session.last_error["error"] == "daily_limit_reached"

    @pytest.mark.asyncio
    async def test_paid_user_not_limited(self, make_session, photo, store):
        store.put("rate_limit:user-1", {"count": 15, "date": "2024-01-02"})
        session = make_session(FakeAnalyzer(HONEY_BEE))
        session.user = UserIdentity(user_id="user-1", tier=SubscriptionTier.PAID)

        await session.begin_analysis("Insect", photo)

        assert session.state == SessionState.MATCHES_READY

    @pytest.mark.asyncio
    async def test_call_charged_even_when_analysis_fails(self, make_session, photo, rate_limiter):
        session = make_session(FakeAnalyzer(AnalysisError("boom")))

        with pytest.raises(AnalysisError):
            await session.begin_analysis("Insect", photo)

        assert rate_limiter.status("anonymous").count == 1


class TestAnalysisFailures:
    """Failures return the session to idle with nothing retained."""

    @pytest.mark.asyncio
    async def test_analysis_error(self, make_session, photo):
        session = make_session(FakeAnalyzer(AnalysisError("upstream 500")))

        with pytest.raises(AnalysisError):
            await session.begin_analysis("Insect", photo)

        assert session.state == SessionState.IDLE
        assert session.candidates == []
        assert session.captured_image is None
        assert session.last_error == {
            "error": "analysis_failed",
            "message": AnalysisError.user_message,
        }

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_analysis_error(self, make_session, photo):
        session = make_session(FakeAnalyzer(RuntimeError("bad")))

        with pytest.raises(AnalysisError):
            await session.begin_analysis("Insect", photo)
        assert session.state == SessionState.IDLE

    @pytest.mark.asyncio
    async def test_timeout(self, make_session, photo):
        session = make_session(SlowAnalyzer(), analysis_timeout=0.05)

        with pytest.raises(AnalysisError):
            await session.begin_analysis("Insect", photo)

        assert session.state == SessionState.IDLE

    @pytest.mark.asyncio
    async def test_next_analysis_clears_error(self, make_session, photo):
        session = make_session(FakeAnalyzer(AnalysisError("boom"), HONEY_BEE))

        with pytest.raises(AnalysisError):
            await session.begin_analysis("Insect", photo)
        await session.begin_analysis("Insect", photo)

        assert session.last_error is None
        assert session.state == SessionState.MATCHES_READY


class TestStaleResponses:
    """Responses overtaken by a reset or newer analysis are dropped."""

    @pytest.mark.asyncio
    async def test_reset_while_analyzing(self, make_session, photo):
        analyzer = FakeAnalyzer(HONEY_BEE)
        analyzer.gate = asyncio.Event()
        session = make_session(analyzer)

        task = asyncio.create_task(session.begin_analysis("Insect", photo))
        await _wait_for_call(analyzer)
        assert session.state == SessionState.ANALYZING

        session.reset()
        analyzer.gate.set()

        assert await task is None
        assert session.state == SessionState.IDLE
        assert session.candidates == []

    @pytest.mark.asyncio
    async def test_failure_after_reset_is_silent(self, make_session, photo):
        analyzer = FakeAnalyzer(AnalysisError("late failure"))
        analyzer.gate = asyncio.Event()
        session = make_session(analyzer)

        task = asyncio.create_task(session.begin_analysis("Insect", photo))
        await _wait_for_call(analyzer)
        session.reset()
        analyzer.gate.set()

        assert await task is None
        assert session.last_error is None

    @pytest.mark.asyncio
    async def test_newer_analysis_wins(self, make_session, photo):
        analyzer = FakeAnalyzer(BIZARRO_BUG, HONEY_BEE)
        analyzer.gate = asyncio.Event()
        session = make_session(analyzer)

        first = asyncio.create_task(session.begin_analysis("Insect", photo))
        await _wait_for_call(analyzer)
        second = asyncio.create_task(session.begin_analysis("Insect", photo))
        await _wait_for_call(analyzer, 2)
        analyzer.gate.set()

        assert await first is None
        result = await second
        assert result[0].species.name == "Honey Bee"
        assert session.state == SessionState.MATCHES_READY


class TestSelectAndSave:
    """Test confirming and saving results."""

    @pytest.mark.asyncio
    async def test_select_confirms(self, make_session, photo):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        await session.begin_analysis("Insect", photo)

        record = session.select(9)

        assert record.id == 9
        assert session.state == SessionState.RESULT_CONFIRMED
        assert session.result == record

    def test_select_requires_matches(self, make_session):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        with pytest.raises(SessionStateError):
            session.select(9)

    @pytest.mark.asyncio
    async def test_select_unknown_candidate(self, make_session, photo):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        await session.begin_analysis("Insect", photo)

        with pytest.raises(InputError):
            session.select(10)
        assert session.state == SessionState.MATCHES_READY

    @pytest.mark.asyncio
    async def test_save_uses_captured_photo(self, make_session, photo, collection):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        await session.begin_analysis("Insect", photo)
        session.select(9)

        item = session.save_result(notes="On the lavender")
        again = session.save_result()

        assert item.saved_image == photo
        assert item.notes == "On the lavender"
        assert again.instance_id == item.instance_id
        assert len(collection.list_items("anonymous")) == 1

    def test_save_requires_confirmed_result(self, make_session):
        with pytest.raises(SessionStateError):
            make_session(FakeAnalyzer(HONEY_BEE)).save_result()

    @pytest.mark.asyncio
    async def test_reset_returns_to_idle(self, make_session, photo):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        await session.begin_analysis("Insect", photo)
        generation = session.generation

        session.reset()

        assert session.state == SessionState.IDLE
        assert session.generation > generation
        assert session.snapshot()["candidates"] == []


class TestQuizAnswers:
    """Quiz matching inside a session."""

    def test_answers_rank_candidates_without_quota(self, make_session, rate_limiter):
        session = make_session(FakeAnalyzer(HONEY_BEE))

        candidates = session.apply_answers("Insect", {"color": "yellow", "wings": "yes", "legs": "6"})

        assert candidates[0].species.id == 9
        assert session.state == SessionState.MATCHES_READY
        assert rate_limiter.status("anonymous").count == 0

    def test_invalid_answers(self, make_session):
        with pytest.raises(InputError):
            make_session(FakeAnalyzer(HONEY_BEE)).apply_answers("Insect", {"legs": "12"})

    def test_strict_context(self, make_session):
        session = make_session(FakeAnalyzer(HONEY_BEE), strict_matching=True)
        assert session.apply_answers("Insect", {"color": "yellow", "wings": "yes", "legs": "8"}) == []


class TestSnapshot:

    @pytest.mark.asyncio
    async def test_snapshot_shape(self, make_session, photo):
        session = make_session(FakeAnalyzer(HONEY_BEE))
        await session.begin_analysis("Insect", photo)

        snapshot = session.snapshot()

        assert snapshot["state"] == "matches_ready"
        assert snapshot["category"] == "Insect"
        assert snapshot["has_image"] is True
        assert snapshot["candidates"][0]["confidence"] == 100
        assert snapshot["result"] is None
        assert snapshot["error"] is None


def test_parse_category_case_insensitive():
    assert parse_category(" bird ").value == "Bird"


def test_session_context_holds_session_collaborators_only():
    names = {f.name for f in fields(SessionContext)}
    assert {"catalog", "analyzer", "rate_limiter", "collection"} <= names
    assert "enrichment" not in names
