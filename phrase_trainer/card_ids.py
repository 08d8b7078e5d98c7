"""
Card identifiers.

A card is addressed as "<unit_id>-<phrase_id>". Unit ids are UUIDs and may
contain dashes themselves, so parsing splits on the last dash only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from phrase_trainer.errors import UnknownCard


SEPARATOR = "-"


@dataclass(frozen=True, order=True)
class CardId:
    """
    Stable identifier of one card: content unit + in-unit card id.
    """
    unit_id: str
    phrase_id: str

    def __post_init__(self):
        if not self.unit_id:
            raise UnknownCard(f"{self.unit_id}{SEPARATOR}{self.phrase_id}", "empty unit id")
        if not self.phrase_id or SEPARATOR in self.phrase_id:
            raise UnknownCard(
                f"{self.unit_id}{SEPARATOR}{self.phrase_id}", "invalid phrase id"
            )

    def __str__(self) -> str:
        return f"{self.unit_id}{SEPARATOR}{self.phrase_id}"

    @classmethod
    def parse(cls, value: Union[str, "CardId"]) -> "CardId":
        """
        Parse a composed card id string.

        Args:
            value: "<unit_id>-<phrase_id>" string or an existing CardId

        Returns:
            CardId

        Raises:
            UnknownCard: if the string has no unit or phrase part
        """
        if isinstance(value, CardId):
            return value
        unit_id, sep, phrase_id = str(value).rpartition(SEPARATOR)
        if not sep or not unit_id or not phrase_id:
            raise UnknownCard(value, "malformed card id")
        return cls(unit_id=unit_id, phrase_id=phrase_id)


def compose_card_id(unit_id: str, phrase_id) -> CardId:
    """Build a CardId from its parts (phrase ids may be ints in the catalog)."""
    return CardId(unit_id=str(unit_id), phrase_id=str(phrase_id))
