"""
Saved Prompt Repository — storage for saved requirement prompts.

Two backends with the same interface:
  - InMemorySavedPromptRepository  (default; deep-copies on the way in and out)
  - MongoSavedPromptRepository     (PERSISTENCE_BACKEND=mongo)
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Optional

from oci_bom.models.schemas import SavedPrompt
from oci_bom.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)


class InMemorySavedPromptRepository:

    def __init__(self):
        self._memory_store: dict[str, dict[str, Any]] = {}

    def list_all(self) -> list[SavedPrompt]:
        return [SavedPrompt(**deepcopy(doc)) for doc in self._memory_store.values()]

    def get(self, prompt_id: str) -> Optional[SavedPrompt]:
        doc = self._memory_store.get(prompt_id)
        return SavedPrompt(**deepcopy(doc)) if doc else None

    def save(self, prompt: SavedPrompt) -> SavedPrompt:
        self._memory_store[prompt.id] = deepcopy(prompt.model_dump())
        logger.debug(f"Saved prompt {prompt.id} (memory)")
        return prompt

    def delete(self, prompt_id: str) -> bool:
        return self._memory_store.pop(prompt_id, None) is not None


class MongoSavedPromptRepository:

    collection_name = "saved_prompts"

    def __init__(self, client: Optional[MongoClient] = None):
        self._client = client or MongoClient()

    @property
    def _collection(self):
        return self._client.get_database()[self.collection_name]

    def list_all(self) -> list[SavedPrompt]:
        return [SavedPrompt(**_strip_id(doc)) for doc in self._collection.find({})]

    def get(self, prompt_id: str) -> Optional[SavedPrompt]:
        doc = self._collection.find_one({"id": prompt_id})
        return SavedPrompt(**_strip_id(doc)) if doc else None

    def save(self, prompt: SavedPrompt) -> SavedPrompt:
        self._collection.update_one(
            {"id": prompt.id},
            {"$set": prompt.model_dump()},
            upsert=True,
        )
        logger.debug(f"Saved prompt {prompt.id} (mongo)")
        return prompt

    def delete(self, prompt_id: str) -> bool:
        return self._collection.delete_one({"id": prompt_id}).deleted_count > 0


def _strip_id(doc: dict[str, Any]) -> dict[str, Any]:
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


_repository = None


def get_saved_prompt_repository():
    """Process-wide repository for the configured backend."""
    global _repository
    if _repository is None:
        client = MongoClient()
        _repository = MongoSavedPromptRepository(client) if client.enabled else InMemorySavedPromptRepository()
    return _repository
