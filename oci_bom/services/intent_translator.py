"""
Business Intent Translator — maps customer phrasing onto the taxonomy:
categories, product families, tier/licensing preferences and size.
"""

from __future__ import annotations

import logging

from oci_bom.catalog.taxonomy import (
    DEFAULT_TAXONOMY,
    Taxonomy,
    extract_user_count,
    phrase_in_text,
    scan_preferences,
)
from oci_bom.models.enums import CategoryKey
from oci_bom.models.schemas import BusinessIntent, ConstraintSet
from oci_bom.rules.constraint_rules import without_clauses

logger = logging.getLogger(__name__)


class BusinessIntentTranslator:

    def __init__(self, taxonomy: Taxonomy = DEFAULT_TAXONOMY):
        self.taxonomy = taxonomy

    def translate(self, text: str, constraint_set: ConstraintSet) -> BusinessIntent:
        # Excluded clauses ("no app servers") must not request anything
        lowered = without_clauses((text or "").lower(), constraint_set.exclusions)

        categories: set[CategoryKey] = set()
        products: set[str] = set()
        for category in self.taxonomy.categories:
            if any(phrase_in_text(term, lowered) for term in category.terms):
                categories.add(category.key)
            for product in category.products:
                if any(phrase_in_text(pattern, lowered) for pattern in product.patterns):
                    products.add(product.key)
                    categories.add(category.key)

        preferences = {**constraint_set.business_preferences, **scan_preferences(lowered, self.taxonomy)}
        resolved = self.taxonomy.resolve_preferences(preferences)
        tier, licensing, optimize = resolved.tier, resolved.licensing, resolved.optimize

        user_count = constraint_set.user_count or extract_user_count(lowered)
        band = self.taxonomy.sizing_for(user_count)

        intent = BusinessIntent(
            categories=categories,
            products=products,
            tier_preference=tier,
            licensing_preference=licensing,
            optimize=optimize,
            user_count=user_count,
            sizing=band.label if band else None,
            constraints=constraint_set,
        )
        logger.info(
            f"[INTENT] categories={sorted(c.value for c in categories)} | "
            f"products={sorted(products)} | tier={tier} | licensing={licensing} | "
            f"users={user_count} | sizing={intent.sizing}"
        )
        return intent

    def follow_up_questions(self, intent: BusinessIntent) -> list[str]:
        """Questions to ask when the text gave nothing to match on."""
        if intent.has_signal:
            return []
        questions = [
            "Which kinds of infrastructure do you need (database, compute, storage, networking)?",
            "What workload will run on it (e.g. web application, ERP, analytics)?",
        ]
        if not intent.user_count:
            questions.append("How many users or concurrent sessions should the system support?")
        if intent.licensing_preference is None:
            questions.append("Do you have existing Oracle licenses (BYOL) or need licenses included?")
        return questions

