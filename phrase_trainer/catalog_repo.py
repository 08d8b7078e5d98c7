"""
MongoDB repository for the phrase catalog.

Provides the content-catalog collaborator: listing a unit's cards and
resolving a card id to its phrase.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection

from phrase_trainer.card_ids import CardId
from phrase_trainer.errors import UnknownCard
from phrase_trainer.schemas import PhraseEntry

# Load environment
load_dotenv()

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_DB_NAME = "phrase_trainer"
COLLECTION_NAME = "phrases"

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None
_collection: Optional[Collection] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get a connection to the MongoDB phrase collection.

    Uses a persistent connection pool that's reused across requests.

    Returns:
        MongoDB collection object
    """
    global _client, _collection

    # Return cached collection if it exists
    if _collection is not None:
        return _collection

    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    _client = MongoClient(
        mongo_uri,
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    db = _client[os.getenv("CATALOG_DB_NAME", DEFAULT_DB_NAME)]
    _collection = db[COLLECTION_NAME]

    return _collection


# ---- Catalog ----

class MongoContentCatalog:
    """
    Content catalog backed by a MongoDB collection.

    Args:
        collection: Collection to query (defaults to get_collection())
    """

    def __init__(self, collection: Optional[Collection] = None):
        self._collection = collection

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = get_collection()
        return self._collection

    def list_cards(self, unit_id: str) -> list[CardId]:
        """
        List a unit's card ids in phrase order.

        Documents that fail validation are skipped and logged.

        Args:
            unit_id: Content unit identifier

        Returns:
            Card ids ordered by position, then phrase_id
        """
        cursor = self.collection.find(
            {"unit_id": unit_id},
            {"_id": 0, "unit_id": 1, "phrase_id": 1, "position": 1},
        ).sort([("position", ASCENDING), ("phrase_id", ASCENDING)])

        card_ids: list[CardId] = []
        for doc in cursor:
            try:
                card_ids.append(PhraseEntry.model_validate(doc).card_id)
            except (ValidationError, UnknownCard) as exc:
                logger.warning(f"Skipping malformed phrase in unit {unit_id}: {exc}")
        return card_ids

    def get_card(self, card_id: CardId) -> PhraseEntry:
        """
        Resolve a card id to its phrase.

        Raises:
            UnknownCard: if no phrase matches
        """
        doc = self.collection.find_one({
            "unit_id": card_id.unit_id,
            "phrase_id": card_id.phrase_id,
        })
        if doc is None and card_id.phrase_id.isdigit():
            # Older imports stored phrase ids as integers
            doc = self.collection.find_one({
                "unit_id": card_id.unit_id,
                "phrase_id": int(card_id.phrase_id),
            })
        if doc is None:
            raise UnknownCard(card_id)
        return PhraseEntry.model_validate(doc)

    def count_cards(self, unit_id: str) -> int:
        """Count the phrases of a unit."""
        return self.collection.count_documents({"unit_id": unit_id})
