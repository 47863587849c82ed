"""
Shared fixtures: in-memory store, seeded catalog, collaborators and a
session builder.
"""

from datetime import date

import pytest

from snaptheplant.catalog.species_catalog import SpeciesCatalog
from snaptheplant.services.collection_store import CollectionStore
from snaptheplant.services.identification_session import IdentificationSession, SessionContext
from snaptheplant.services.rate_limiter import RateLimiter
from snaptheplant.storage.store import InMemoryStore

from helpers import make_data_uri

TODAY = date(2024, 1, 2)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def catalog(store):
    """Catalog seeded from the built-in species."""
    return SpeciesCatalog.from_store(store)


@pytest.fixture
def rate_limiter(store):
    return RateLimiter(store, daily_limit=15, today=lambda: TODAY)


@pytest.fixture
def collection(store):
    return CollectionStore(store)


@pytest.fixture
def photo():
    return make_data_uri()


@pytest.fixture
def make_session(catalog, rate_limiter, collection):
    """Build a session around a given analyzer."""
    def _make(analyzer, **kwargs):
        context = SessionContext(
            catalog=catalog,
            analyzer=analyzer,
            rate_limiter=rate_limiter,
            collection=collection,
            **kwargs,
        )
        return IdentificationSession(context=context)
    return _make
