"""
Pydantic models for the phrase catalog.

These models define the structure of MongoDB documents the scheduler reads.
The scheduler never inspects card content; it only needs ids and ordering.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from phrase_trainer.card_ids import CardId, compose_card_id


class PhraseEntry(BaseModel):
    """
    One card in the catalog: a phrase (e.g. a lyric line) of a content unit.

    One document per (unit_id, phrase_id).
    """
    model_config = ConfigDict(extra="ignore")

    unit_id: str = Field(..., description="Content unit (song) identifier")
    phrase_id: str = Field(..., description="Card id within the unit")
    position: Optional[int] = Field(default=None, description="Order of the phrase in the unit")

    text: str = Field(default="", description="Phrase text")
    text_translation: Optional[str] = Field(default=None, description="Translated phrase text")

    @field_validator("phrase_id", mode="before")
    @classmethod
    def _phrase_id_as_str(cls, value: Union[str, int]) -> str:
        return str(value)

    @property
    def card_id(self) -> CardId:
        return compose_card_id(self.unit_id, self.phrase_id)
