"""
Tests: Constraint-aware filtering and ranking.

Run with:
    pytest oci_bom/tests/test_service_matcher.py -v
"""

from oci_bom.models.enums import CategoryKey, ConstraintKind, Tier
from oci_bom.models.schemas import BOMDraft, BOMLineItem, BusinessIntent, Constraint, ConstraintSet
from oci_bom.services.compliance_validator import ComplianceValidator
from oci_bom.services.constraint_extractor import ConstraintExtractor
from oci_bom.services.intent_translator import BusinessIntentTranslator
from oci_bom.services.service_matcher import ServiceMatcher


def _intent(text):
    cs = ConstraintExtractor().extract(text)
    return BusinessIntentTranslator().translate(text, cs)


def _ids(matches):
    return [m.service.identifier for m in matches]


class TestFilter:
    def test_scenario_a_keeps_only_base_database(self, catalog_services):
        intent = _intent("Only consider Base Database Service. No app servers.")
        result = ServiceMatcher().filter(catalog_services, intent.constraints)

        assert {s.identifier for s in result.included} == {"B89728", "B89730"}
        assert len(result.excluded) == len(catalog_services) - 2
        reasons = {e.service.identifier: e.reason for e in result.excluded}
        assert "base database service" in reasons["B88317"]

    def test_other_database_editions_are_excluded(self, catalog_services):
        intent = _intent("Only consider Base Database Service.")
        result = ServiceMatcher().filter(catalog_services, intent.constraints)
        reasons = {e.service.identifier: e.reason for e in result.excluded}

        for identifier in ("B91500", "B92000", "B89729"):
            assert "base database service" in reasons[identifier]

    def test_no_constraints_is_pass_through(self, catalog_services):
        result = ServiceMatcher().filter(catalog_services, ConstraintSet())
        assert len(result.included) == len(catalog_services)
        assert result.excluded == []

    def test_excluded_services_fail_validation_too(self, catalog_services):
        cs = ConstraintExtractor().extract("Only Base Database Service. Do not include storage.")
        result = ServiceMatcher().filter(catalog_services, cs)
        assert result.excluded

        items = [
            BOMLineItem(
                identifier=e.service.identifier,
                description=e.service.display_name,
                quantity=1,
                unit_price=e.service.pricing.unit_price,
                category=e.service.catalog_category,
                sku_type=e.service.sku_type,
            )
            for e in result.excluded
        ]
        validated = ComplianceValidator().validate(BOMDraft(items=items), cs)
        assert validated.items == []
        assert validated.compliance_summary.rejected == len(items)


class TestMatch:
    def test_scenario_a_returns_only_database(self, catalog_services):
        matches = ServiceMatcher().match(
            catalog_services, _intent("Only consider Base Database Service. No app servers.")
        )
        assert set(_ids(matches)) == {"B89728", "B89730"}
        assert all(m.service.category == CategoryKey.DATABASE for m in matches)

    def test_pinned_identifiers_dominate(self, catalog_services):
        matches = ServiceMatcher().match(catalog_services, _intent("Use SKU B89728 for the database"))
        assert _ids(matches) == ["B89728"]
        assert matches[0].match_score == 0.65

    def test_budget_preference_penalizes_enterprise(self, catalog_services):
        matches = ServiceMatcher().match(
            catalog_services, _intent("Need a database for 500 users, budget-conscious")
        )
        scores = {m.service.identifier: m.match_score for m in matches}

        # penalized, not eliminated
        assert "B89729" in scores
        assert "B92000" in scores
        assert scores["B89729"] < scores["B89728"]
        assert _ids(matches)[0] in {"B89728", "B89730", "B91500"}

    def test_sole_constraint_survivor_is_not_penalized(self, catalog_services):
        cs = ConstraintSet(restrictive=[
            Constraint(kind=ConstraintKind.RESTRICTIVE, raw_phrase="autonomous", keywords=["autonomous"]),
        ])
        intent = BusinessIntent(
            categories={CategoryKey.DATABASE}, tier_preference=Tier.STANDARD, constraints=cs,
        )
        matches = ServiceMatcher().match(catalog_services, intent)

        assert _ids(matches) == ["B89729"]
        assert matches[0].match_score == 0.25

    def test_every_requested_category_is_covered(self, catalog_services):
        categories = {CategoryKey.DATABASE, CategoryKey.COMPUTE, CategoryKey.STORAGE, CategoryKey.NETWORKING}
        matches = ServiceMatcher(result_cap=6).match(catalog_services, BusinessIntent(categories=categories))

        assert len(matches) <= 6
        assert {m.service.category for m in matches} == categories

    def test_coverage_injects_below_threshold(self, catalog_services):
        intent = BusinessIntent(
            categories={CategoryKey.DATABASE, CategoryKey.STORAGE}, products={"base_database"},
        )
        matches = ServiceMatcher(min_score=0.5).match(catalog_services, intent)

        assert {"B89728", "B89730"} <= set(_ids(matches))
        assert any(m.service.category == CategoryKey.STORAGE for m in matches)

    def test_results_are_ranked_and_capped(self, catalog_services):
        matches = ServiceMatcher(result_cap=3).match(catalog_services, _intent("Two servers and a database"))
        scores = [m.match_score for m in matches]

        assert len(matches) == 3
        assert scores == sorted(scores, reverse=True)
        assert {m.service.category for m in matches} >= {CategoryKey.COMPUTE, CategoryKey.DATABASE}

    def test_empty_catalog(self):
        assert ServiceMatcher().match([], _intent("Need a database")) == []

    def test_uncovered_request_returns_nothing(self, catalog_services):
        storage_only = [s for s in catalog_services if s.category == CategoryKey.STORAGE]
        assert ServiceMatcher().match(storage_only, _intent("Need a database")) == []
