"""Persistence — MongoClient, saved prompt repositories."""

from oci_bom.persistence.mongo_client import MongoClient
from oci_bom.persistence.saved_prompt_repository import (
    InMemorySavedPromptRepository,
    MongoSavedPromptRepository,
    get_saved_prompt_repository,
)

__all__ = [
    "MongoClient",
    "InMemorySavedPromptRepository",
    "MongoSavedPromptRepository",
    "get_saved_prompt_repository",
]
