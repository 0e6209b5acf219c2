"""
Constraint-Aware Matcher/Filter — applies the hard rules to the catalog,
scores what is left against the business intent and returns a ranked,
capped candidate list.

Scoring (raw weights from ScoringConfig, normalized into [0, 1]):
  +category  service category requested
  +product   product family requested, or identifier explicitly pinned
  +tier      tier matches the preference
  +licensing licensing model matches the preference
  ×penalty   enterprise tier while standard is preferred
"""

from __future__ import annotations

import logging
from typing import Optional

from oci_bom.config import get_settings
from oci_bom.models.enums import CategoryKey, Tier
from oci_bom.models.schemas import (
    BusinessIntent,
    CatalogService,
    ConstraintSet,
    ExcludedService,
    FilterResult,
    MatchedService,
)
from oci_bom.rules.constraint_rules import ConstraintRules, ServiceView
from oci_bom.rules.rules_config import RulesConfigStore, ScoringConfig

logger = logging.getLogger(__name__)


class ServiceMatcher:

    def __init__(
        self,
        scoring: Optional[ScoringConfig] = None,
        rules: Optional[ConstraintRules] = None,
        result_cap: Optional[int] = None,
        min_score: Optional[float] = None,
        budget_penalty: Optional[float] = None,
    ):
        settings = get_settings()
        self.scoring = scoring or RulesConfigStore().get_scoring_config()
        self.rules = rules or ConstraintRules()
        self.result_cap = result_cap if result_cap is not None else settings.match_result_cap
        self.min_score = min_score if min_score is not None else settings.match_min_score
        self.budget_penalty = budget_penalty if budget_penalty is not None else settings.budget_penalty

    # ── Hard filtering ───────────────────────────────────

    def filter(self, services: list[CatalogService], constraint_set: ConstraintSet) -> FilterResult:
        if constraint_set.is_empty:
            return FilterResult(included=list(services))

        result = FilterResult()
        for service in services:
            evaluation = self.rules.evaluate(ServiceView.from_service(service), constraint_set)
            if evaluation.passed:
                result.included.append(service)
            else:
                result.excluded.append(
                    ExcludedService(service=service, reason="; ".join(evaluation.reasons))
                )

        logger.info(
            f"[MATCH] Filter kept {len(result.included)}/{len(services)} services "
            f"({len(result.excluded)} excluded)"
        )
        return result

    # ── Matching ─────────────────────────────────────────

    def match(self, services: list[CatalogService], intent: BusinessIntent) -> list[MatchedService]:
        if not services:
            logger.warning("[MATCH] Empty catalog — nothing to match")
            return []

        filtered = self.filter(services, intent.constraints)
        protected = self._sole_hard_matches(filtered.included, intent.constraints)

        scored = [self._score(service, intent, service.identifier in protected) for service in filtered.included]
        ranked = sorted(
            (m for m in scored if m.match_score > 0),
            key=lambda m: (-m.match_score, m.service.pricing.unit_price, m.service.identifier),
        )

        selected = self._select(ranked, intent.categories, protected)

        if intent.categories and not any(m.service.category in intent.categories for m in selected):
            logger.warning(
                f"[MATCH] No catalog service covers any of {sorted(c.value for c in intent.categories)}"
            )
            return []

        logger.info(
            f"[MATCH] Selected {len(selected)} of {len(ranked)} scored candidates | "
            f"top={[(m.service.identifier, round(m.match_score, 3)) for m in selected[:5]]}"
        )
        return selected

    # ── Internals ────────────────────────────────────────

    def _score(self, service: CatalogService, intent: BusinessIntent, protected: bool) -> MatchedService:
        raw = 0.0
        reasons: list[str] = []
        w = self.scoring

        if service.category in intent.categories:
            raw += w.category_weight
            reasons.append(f"Category match: {service.category.value}")
        if service.identifier.upper() in intent.constraints.identifiers:
            raw += w.product_weight
            reasons.append(f"Explicitly requested identifier {service.identifier}")
        elif service.product_family and service.product_family in intent.products:
            raw += w.product_weight
            reasons.append(f"Product match: {service.product_family}")
        if intent.tier_preference and service.tier == intent.tier_preference:
            raw += w.tier_weight
            reasons.append(f"Tier match: {service.tier.value}")
        if intent.licensing_preference and service.licensing_model == intent.licensing_preference:
            raw += w.licensing_weight
            reasons.append(f"Licensing match: {service.licensing_model.value}")

        if (
            raw > 0
            and intent.tier_preference == Tier.STANDARD
            and service.tier == Tier.ENTERPRISE
        ):
            if protected:
                reasons.append("Only service satisfying the stated constraints in its category")
            else:
                raw *= self.budget_penalty
                reasons.append("Enterprise tier penalized for standard preference")

        score = min(raw / w.max_raw_score, 1.0) if w.max_raw_score else 0.0
        return MatchedService(service=service, match_score=round(score, 6), match_reasons=reasons)

    @staticmethod
    def _sole_hard_matches(included: list[CatalogService], constraint_set: ConstraintSet) -> set[str]:
        """Identifiers that are the single survivor of a hard constraint in their category."""
        if not (constraint_set.restrictive or constraint_set.specific_identifiers):
            return set()
        by_category: dict[CategoryKey, list[str]] = {}
        for service in included:
            by_category.setdefault(service.category, []).append(service.identifier)
        return {ids[0] for ids in by_category.values() if len(ids) == 1}

    def _select(
        self,
        ranked: list[MatchedService],
        categories: set[CategoryKey],
        protected: set[str],
    ) -> list[MatchedService]:
        order = {m.service.identifier: i for i, m in enumerate(ranked)}
        selected: list[MatchedService] = []
        chosen: set[str] = set()

        def take(candidate: MatchedService) -> None:
            selected.append(candidate)
            chosen.add(candidate.service.identifier)

        # Pass 1: forced survivors, then the best service per requested category
        for candidate in ranked:
            if candidate.service.identifier in protected:
                take(candidate)
        for category in sorted(categories, key=lambda c: c.value):
            best = next(
                (m for m in ranked
                 if m.service.category == category and m.match_score >= self.min_score),
                None,
            )
            if best is not None and best.service.identifier not in chosen:
                take(best)

        # Pass 2: fill by score above the threshold
        for candidate in ranked:
            if len(selected) >= self.result_cap:
                break
            if candidate.service.identifier not in chosen and candidate.match_score >= self.min_score:
                take(candidate)

        # Pass 3: coverage, accepting below-threshold candidates
        covered = {m.service.category for m in selected}
        for category in sorted(categories - covered, key=lambda c: c.value):
            fallback = next((m for m in ranked if m.service.category == category), None)
            if fallback is None:
                continue
            if len(selected) >= self.result_cap:
                self._evict_redundant(selected, chosen, protected)
            if len(selected) < self.result_cap:
                logger.debug(f"[MATCH] Coverage injection for {category.value}: {fallback.service.identifier}")
                take(fallback)

        selected.sort(key=lambda m: order[m.service.identifier])
        return selected[: self.result_cap]

    @staticmethod
    def _evict_redundant(selected: list[MatchedService], chosen: set[str], protected: set[str]) -> None:
        """Drop the lowest-ranked service whose category is represented more than once."""
        counts: dict[CategoryKey, int] = {}
        for m in selected:
            counts[m.service.category] = counts.get(m.service.category, 0) + 1
        for m in sorted(selected, key=lambda x: x.match_score):
            if counts[m.service.category] > 1 and m.service.identifier not in protected:
                selected.remove(m)
                chosen.discard(m.service.identifier)
                return
