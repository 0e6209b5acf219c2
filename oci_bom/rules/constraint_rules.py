"""
Constraint Rules — the hard checks applied to a catalog service before
matching and to a draft line item after generation.

Both callers go through `ConstraintRules.evaluate()` on a `ServiceView`,
so an item built from a service gets exactly the verdict the service got.
Returns violations in the usual {rule, detail, severity} shape.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field

from oci_bom.models.schemas import BOMLineItem, CatalogService, Constraint, ConstraintSet

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9]+")


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall((text or "").lower())


def _stem(word: str) -> str:
    if len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def without_clauses(text: str, constraints: list[Constraint]) -> str:
    """Blank every occurrence of the constraints' raw phrases out of *text*."""
    for constraint in constraints:
        if constraint.raw_phrase:
            text = re.sub(re.escape(constraint.raw_phrase), " ", text)
    return text


def keyword_matches(keyword: str, tokens: set[str]) -> bool:
    """Equality, plural-insensitive equality, or prefix ("app" → "application")."""
    stem = _stem(keyword.lower())
    for token in tokens:
        if token == stem or _stem(token) == stem:
            return True
        if len(stem) >= 3 and token.startswith(stem):
            return True
    return False


class ServiceView(BaseModel):
    """The fields of a service (or of a line item) the hard rules look at."""
    identifier: str
    name: str
    category: str = ""
    sku_type: str = ""

    @classmethod
    def from_service(cls, service: CatalogService) -> "ServiceView":
        return cls(
            identifier=service.identifier,
            name=service.display_name,
            category=service.catalog_category,
            sku_type=service.sku_type,
        )

    @classmethod
    def from_item(cls, item: BOMLineItem) -> "ServiceView":
        return cls(
            identifier=item.identifier,
            name=item.description,
            category=item.category,
            sku_type=item.sku_type,
        )

    @property
    def tokens(self) -> set[str]:
        return set(tokenize(" ".join([self.name, self.category, self.identifier, self.sku_type])))


class RuleEvaluation(BaseModel):
    satisfied: list[str] = Field(default_factory=list)
    violations: list[dict[str, str]] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def reasons(self) -> list[str]:
        return [v["detail"] for v in self.violations]


class ConstraintRules:
    """Restrictive, exclusion and identifier checks."""

    def evaluate(self, view: ServiceView, constraint_set: ConstraintSet) -> RuleEvaluation:
        result = RuleEvaluation()
        if constraint_set.is_empty:
            return result

        tokens = view.tokens

        # ── Identifier pins ──────────────────────────────
        pinned = constraint_set.identifiers
        if pinned:
            if view.identifier.upper() in pinned:
                result.satisfied.append(f"Identifier {view.identifier} was explicitly requested")
            else:
                result.violations.append({
                    "rule": "identifier_pin",
                    "detail": f"{view.identifier} is not among the requested identifiers: "
                              f"{', '.join(sorted(pinned))}",
                    "severity": "high",
                })

        # ── Restrictive (each clause fully covered) ──────
        for constraint in constraint_set.restrictive:
            if self._covers(constraint, tokens):
                result.satisfied.append(f"Satisfies requirement '{constraint.raw_phrase}'")
            else:
                result.violations.append({
                    "rule": "restrictive_constraint",
                    "detail": f"Does not satisfy requirement '{constraint.raw_phrase}'",
                    "severity": "high",
                })

        # ── Exclusions (any overlap eliminates) ──────────
        for constraint in constraint_set.exclusions:
            if self._overlaps(constraint, tokens):
                result.violations.append({
                    "rule": "exclusion_constraint",
                    "detail": f"Matches exclusion '{constraint.raw_phrase}'",
                    "severity": "high",
                })

        if result.violations:
            logger.debug(f"[RULES] {view.identifier} failed: {result.reasons}")
        return result

    @staticmethod
    def _covers(constraint: Constraint, tokens: set[str]) -> bool:
        return bool(constraint.keywords) and all(
            keyword_matches(keyword, tokens) for keyword in constraint.keywords
        )

    @staticmethod
    def _overlaps(constraint: Constraint, tokens: set[str]) -> bool:
        return any(keyword_matches(keyword, tokens) for keyword in constraint.keywords)

