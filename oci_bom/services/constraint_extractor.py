"""
Constraint Extractor — turns free-form requirement text into a
ConstraintSet using the pattern tables from RulesConfigStore.

Pure and deterministic: no I/O beyond the (cached) rules config, never
raises, and the same text always yields the same set.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from oci_bom.catalog.taxonomy import (
    DEFAULT_TAXONOMY,
    Taxonomy,
    extract_user_count,
    scan_preferences,
)
from oci_bom.models.enums import ConstraintKind
from oci_bom.models.schemas import Constraint, ConstraintSet, IdentifierPin
from oci_bom.rules.constraint_rules import tokenize, without_clauses
from oci_bom.rules.rules_config import ExtractionConfig, PatternRule, RulesConfigStore

logger = logging.getLogger(__name__)


class ConstraintExtractor:
    """Restrictive, exclusion and identifier extraction."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
        stop_words: Optional[Iterable[str]] = None,
    ):
        self.config = config or RulesConfigStore().get_extraction_config()
        self.taxonomy = taxonomy
        self.stop_words = frozenset(stop_words if stop_words is not None else self.config.stop_words)
        self._compiled = {
            rule.name: re.compile(rule.pattern, re.IGNORECASE)
            for rule in (
                self.config.restrictive_rules
                + self.config.exclusion_rules
                + self.config.identifier_rules
            )
        }

    # ── Public API ───────────────────────────────────────

    def extract(self, text: str) -> ConstraintSet:
        if not text or not text.strip():
            return ConstraintSet()

        lowered = text.lower()
        exclusions = self._clauses(lowered, self.config.exclusion_rules)
        constraint_set = ConstraintSet(
            restrictive=self._clauses(lowered, self.config.restrictive_rules),
            exclusions=exclusions,
            specific_identifiers=self._identifiers(lowered),
            business_preferences=scan_preferences(without_clauses(lowered, exclusions), self.taxonomy),
            user_count=extract_user_count(lowered),
        )

        logger.info(
            f"[EXTRACT] restrictive={len(constraint_set.restrictive)} | "
            f"exclusions={len(constraint_set.exclusions)} | "
            f"identifiers={sorted(constraint_set.identifiers)} | "
            f"preferences={list(constraint_set.business_preferences)} | "
            f"users={constraint_set.user_count}"
        )
        for constraint in constraint_set.restrictive + constraint_set.exclusions:
            logger.debug(
                f"[EXTRACT] {constraint.kind.value} ({constraint.rule}): "
                f"'{constraint.raw_phrase}' → {constraint.keywords}"
            )
        return constraint_set

    def keywords(self, clause: str) -> list[str]:
        """Tokens of *clause* minus stop words, numbers and very short words, in order."""
        seen: list[str] = []
        for token in tokenize(clause):
            if len(token) < self.config.min_keyword_length:
                continue
            if token.isdigit() or token in self.stop_words:
                continue
            if token not in seen:
                seen.append(token)
        return seen

    def summarize(self, constraint_set: ConstraintSet) -> str:
        """Customer-facing one-paragraph description of what was understood."""
        parts: list[str] = []
        if constraint_set.restrictive:
            parts.append(
                "Requirements: " + "; ".join(c.raw_phrase for c in constraint_set.restrictive)
            )
        if constraint_set.exclusions:
            parts.append(
                "Exclusions: " + "; ".join(c.raw_phrase for c in constraint_set.exclusions)
            )
        if constraint_set.specific_identifiers:
            parts.append(
                "Requested SKUs: " + ", ".join(sorted(constraint_set.identifiers))
            )
        if constraint_set.business_preferences:
            parts.append(
                "Preferences: " + ", ".join(constraint_set.business_preferences)
            )
        if constraint_set.user_count:
            parts.append(f"Expected users: {constraint_set.user_count}")
        if not parts:
            return "No explicit constraints detected; all catalog services are eligible."
        return ". ".join(parts) + "."

    # ── Internals ────────────────────────────────────────

    def _clauses(self, text: str, rules: list[PatternRule]) -> list[Constraint]:
        found: list[Constraint] = []
        for rule in rules:
            for match in self._compiled[rule.name].finditer(text):
                clause = (match.group(rule.group) or "").strip(" ,:-")
                keywords = self.keywords(clause)
                if not keywords:
                    continue
                found.append(
                    Constraint(
                        kind=ConstraintKind(rule.kind),
                        raw_phrase=clause,
                        keywords=keywords,
                        rule=rule.name,
                    )
                )
        return found

    def _identifiers(self, text: str) -> list[IdentifierPin]:
        pins: list[IdentifierPin] = []
        for rule in self.config.identifier_rules:
            for match in self._compiled[rule.name].finditer(text):
                token = (match.group(rule.group) or "").strip("-_")
                # Catalog identifiers always carry digits; "sku with byol" is not a pin
                if not token or not any(ch.isdigit() for ch in token):
                    continue
                pins.append(
                    IdentifierPin(
                        raw_phrase=match.group(0).strip(),
                        identifier=token.upper(),
                        rule=rule.name,
                    )
                )
        return pins
