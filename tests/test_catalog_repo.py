from unittest.mock import MagicMock

import pytest

from phrase_trainer.catalog_repo import MongoContentCatalog
from phrase_trainer.errors import UnknownCard
from phrase_trainer.schemas import PhraseEntry
from tests.factories import UNIT, card


@pytest.fixture
def mock_collection():
    """Mock of the pymongo phrases collection"""
    return MagicMock()


def test_list_cards_in_phrase_order(mock_collection):
    mock_collection.find.return_value.sort.return_value = [
        {"unit_id": UNIT, "phrase_id": 1, "position": 0},
        {"unit_id": UNIT, "phrase_id": "2", "position": 1},
    ]
    catalog = MongoContentCatalog(mock_collection)

    assert catalog.list_cards(UNIT) == [card(1), card(2)]
    query, projection = mock_collection.find.call_args[0]
    assert query == {"unit_id": UNIT}
    assert projection["_id"] == 0


def test_list_cards_skips_malformed_documents(mock_collection):
    mock_collection.find.return_value.sort.return_value = [
        {"unit_id": UNIT, "phrase_id": "1"},
        {"unit_id": UNIT},
        {"unit_id": UNIT, "phrase_id": "a-b"},
    ]
    catalog = MongoContentCatalog(mock_collection)

    assert catalog.list_cards(UNIT) == [card(1)]


def test_get_card_resolves_phrase(mock_collection):
    mock_collection.find_one.return_value = {
        "_id": "x", "unit_id": UNIT, "phrase_id": "3", "text": "zing mee", "text_translation": "sing along",
    }
    catalog = MongoContentCatalog(mock_collection)

    phrase = catalog.get_card(card(3))

    assert isinstance(phrase, PhraseEntry)
    assert phrase.card_id == card(3)
    assert phrase.text_translation == "sing along"


def test_get_card_falls_back_to_integer_phrase_ids(mock_collection):
    mock_collection.find_one.side_effect = [None, {"unit_id": UNIT, "phrase_id": 3}]
    catalog = MongoContentCatalog(mock_collection)

    assert catalog.get_card(card(3)).phrase_id == "3"
    assert mock_collection.find_one.call_args[0][0] == {"unit_id": UNIT, "phrase_id": 3}


def test_get_card_unknown(mock_collection):
    mock_collection.find_one.return_value = None
    catalog = MongoContentCatalog(mock_collection)

    with pytest.raises(UnknownCard):
        catalog.get_card(card(9))


def test_count_cards(mock_collection):
    mock_collection.count_documents.return_value = 12

    assert MongoContentCatalog(mock_collection).count_cards(UNIT) == 12
