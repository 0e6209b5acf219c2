"""
Rules Config Store — pattern tables and scoring weights for the
constraint extractor and the matcher.

Defaults live in the config models below. When the persistence backend is
MongoDB, a document in the `rules_config` collection overrides them; the
result is cached for the lifetime of the process.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from oci_bom.models.enums import ConstraintKind
from oci_bom.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)

# Clause runs until a sentence boundary: . ! ? ; newline or end of text
CLAUSE = r"(?P<clause>[^.!?;\n]+)"
IDENTIFIER = r"(?P<identifier>[a-z0-9][a-z0-9\-_]*)"
LEAD_VERB = r"(?:(?:consider|use|include|allow|add|want|need)\s+)?"


# ── Config models ────────────────────────────────────────

class PatternRule(BaseModel):
    """One regex in a rule family. `group` names the captured span."""
    name: str
    kind: ConstraintKind
    pattern: str
    group: str = "clause"


class ExtractionConfig(BaseModel):
    """Constraint extraction rule tables."""
    restrictive_rules: list[PatternRule] = [
        PatternRule(name="only_clause", kind=ConstraintKind.RESTRICTIVE,
                    pattern=rf"\bonly\s+{LEAD_VERB}{CLAUSE}"),
        PatternRule(name="exclusive_clause", kind=ConstraintKind.RESTRICTIVE,
                    pattern=rf"\b(?:exclusively|specifically|solely)\s+{LEAD_VERB}{CLAUSE}"),
        PatternRule(name="must_clause", kind=ConstraintKind.RESTRICTIVE,
                    pattern=rf"\bmust\s+(?:be\s+|have\s+)?{LEAD_VERB}{CLAUSE}"),
        PatternRule(name="labelled_requirement", kind=ConstraintKind.RESTRICTIVE,
                    pattern=rf"\b(?:required|constraint|limitation)\s*:\s*{CLAUSE}"),
    ]
    exclusion_rules: list[PatternRule] = [
        PatternRule(name="do_not_clause", kind=ConstraintKind.EXCLUSION,
                    pattern=rf"\b(?:do\s+not|don't|dont)\s+{LEAD_VERB}{CLAUSE}"),
        PatternRule(name="exclude_clause", kind=ConstraintKind.EXCLUSION,
                    pattern=rf"\b(?:exclude|excluding|avoid)\s+{CLAUSE}"),
        PatternRule(name="without_clause", kind=ConstraintKind.EXCLUSION,
                    pattern=rf"\bwithout\s+{CLAUSE}"),
        PatternRule(name="no_clause", kind=ConstraintKind.EXCLUSION,
                    pattern=rf"\bno\s+{CLAUSE}"),
    ]
    identifier_rules: list[PatternRule] = [
        PatternRule(name="labelled_identifier", kind=ConstraintKind.IDENTIFIER,
                    pattern=rf"\b(?:sku|part\s*(?:number|no)|service\s*code|product\s*code)\s*[:#]?\s*{IDENTIFIER}",
                    group="identifier"),
        PatternRule(name="model_identifier", kind=ConstraintKind.IDENTIFIER,
                    pattern=rf"\bmodel\s*:\s*{IDENTIFIER}", group="identifier"),
        PatternRule(name="bare_identifier", kind=ConstraintKind.IDENTIFIER,
                    pattern=r"\b(?P<identifier>[a-z]\d{5,})\b", group="identifier"),
    ]
    stop_words: list[str] = [
        "a", "an", "the", "and", "or", "nor", "for", "of", "to", "in", "on", "at", "by",
        "from", "with", "as", "is", "are", "be", "been", "it", "its", "this", "that",
        "these", "those", "we", "our", "i", "my", "you", "your", "us", "any", "all",
        "some", "no", "not", "just", "also", "please", "should", "must", "only",
        "will", "would", "can", "could", "may", "might", "use", "uses", "using",
        "include", "including", "includes", "consider", "considering", "allow",
        "allowed", "want", "need", "needs", "have", "has", "add", "provide",
        "support", "supports", "handle", "run", "running", "such", "like", "etc",
        "service", "services", "sku", "skus", "oracle", "oci", "requirement",
        "requirements", "option", "options", "solution", "solutions", "user",
        "users", "people", "employees", "concurrent", "per", "than", "more", "less",
    ]
    min_keyword_length: int = 2


class ScoringConfig(BaseModel):
    """Matcher scoring weights."""
    category_weight: float = 0.5
    product_weight: float = 0.8
    tier_weight: float = 0.3
    licensing_weight: float = 0.4

    @property
    def max_raw_score(self) -> float:
        return self.category_weight + self.product_weight + self.tier_weight + self.licensing_weight


# ── Store class ──────────────────────────────────────────

class RulesConfigStore:
    """
    Loads rule configs from MongoDB when that backend is configured.
    Falls back to defaults otherwise; cached after first load.
    """

    def __init__(self, client: MongoClient | None = None):
        self.client = client or MongoClient()
        self._cache: dict[str, Any] = {}

    def _get_db(self):
        if not self.client.enabled:
            return None
        try:
            return self.client.get_database()
        except Exception as e:
            logger.warning(f"MongoDB not available, using default rules: {e}")
            return None

    def _load_config(self, rule_type: str, model_cls: type[BaseModel]) -> BaseModel:
        """Load from MongoDB or return defaults."""
        if rule_type in self._cache:
            return self._cache[rule_type]

        db = self._get_db()
        if db is not None:
            try:
                doc = db.rules_config.find_one({"rule_type": rule_type})
                if doc and "config" in doc:
                    config = model_cls(**doc["config"])
                    self._cache[rule_type] = config
                    logger.info(f"Loaded {rule_type} rules from MongoDB")
                    return config
            except Exception as e:
                logger.warning(f"Failed loading {rule_type} rules from MongoDB: {e}")

        config = model_cls()
        self._cache[rule_type] = config
        return config

    def get_extraction_config(self) -> ExtractionConfig:
        return self._load_config("extraction", ExtractionConfig)  # type: ignore[return-value]

    def get_scoring_config(self) -> ScoringConfig:
        return self._load_config("scoring", ScoringConfig)  # type: ignore[return-value]

