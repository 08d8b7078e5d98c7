from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from phrase_trainer.clock import FixedClock
from phrase_trainer.errors import UnknownCard
from phrase_trainer.fsrs.database import SqlRecordStore, get_engine, init_db
from phrase_trainer.schemas import PhraseEntry
from tests.factories import card


@pytest.fixture
def t0():
    return datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(t0):
    return FixedClock(t0)


@pytest.fixture
def engine():
    """In-memory SQLite shared across sessions via StaticPool"""
    eng = get_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return SqlRecordStore(engine)


@pytest.fixture
def catalog_cards():
    return [card(i) for i in range(1, 6)]


@pytest.fixture
def mock_catalog(catalog_cards):
    """Catalog collaborator resolving every listed card"""
    catalog = MagicMock()
    catalog.list_cards.return_value = list(catalog_cards)

    def get_card(card_id):
        if card_id not in catalog_cards:
            raise UnknownCard(card_id)
        return PhraseEntry(unit_id=card_id.unit_id, phrase_id=card_id.phrase_id, text="la la")

    catalog.get_card.side_effect = get_card
    return catalog
