import pytest

from phrase_trainer.card_ids import CardId, compose_card_id
from phrase_trainer.errors import UnknownCard


def test_parse_splits_on_last_dash():
    card_id = CardId.parse("3f2c9a1e-7b44-4d0e-9c1a-55aa01b2c3d4-12")

    assert card_id.unit_id == "3f2c9a1e-7b44-4d0e-9c1a-55aa01b2c3d4"
    assert card_id.phrase_id == "12"
    assert str(card_id) == "3f2c9a1e-7b44-4d0e-9c1a-55aa01b2c3d4-12"


def test_parse_passes_card_ids_through():
    card_id = compose_card_id("unit", 7)

    assert CardId.parse(card_id) is card_id
    assert card_id.phrase_id == "7"


@pytest.mark.parametrize("value", ["nodash", "-5", "unit-", ""])
def test_malformed_ids_raise_unknown_card(value):
    with pytest.raises(UnknownCard):
        CardId.parse(value)


def test_phrase_id_may_not_contain_separator():
    with pytest.raises(UnknownCard):
        CardId(unit_id="unit", phrase_id="a-b")


def test_card_ids_order_by_unit_then_phrase():
    ids = [CardId("b", "1"), CardId("a", "2"), CardId("a", "1")]

    assert sorted(ids) == [CardId("a", "1"), CardId("a", "2"), CardId("b", "1")]
