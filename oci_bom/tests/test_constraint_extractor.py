"""
Tests: Constraint extraction and the shared constraint rules.

Run with:
    pytest oci_bom/tests/test_constraint_extractor.py -v
"""

from oci_bom.models.enums import ConstraintKind, LicensingModel, Tier
from oci_bom.rules.constraint_rules import ConstraintRules, ServiceView, keyword_matches
from oci_bom.services.constraint_extractor import ConstraintExtractor

SCENARIO_A = "Only consider Base Database Service. No app servers."


class TestRestrictiveAndExclusions:
    def test_only_and_no_clauses(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)

        assert len(cs.restrictive) == 1
        assert cs.restrictive[0].raw_phrase == "base database service"
        assert cs.restrictive[0].keywords == ["base", "database"]
        assert cs.restrictive[0].kind == ConstraintKind.RESTRICTIVE

        assert len(cs.exclusions) == 1
        assert cs.exclusions[0].raw_phrase == "app servers"
        assert cs.exclusions[0].keywords == ["app", "servers"]
        assert not cs.specific_identifiers

    def test_extraction_is_deterministic(self):
        extractor = ConstraintExtractor()
        assert extractor.extract(SCENARIO_A) == extractor.extract(SCENARIO_A)

    def test_labelled_requirement_needs_colon(self):
        extractor = ConstraintExtractor()
        with_colon = extractor.extract("Required: MySQL for the orders system")
        without_colon = extractor.extract("MySQL is required for the orders system")

        assert [c.keywords[0] for c in with_colon.restrictive] == ["mysql"]
        assert without_colon.restrictive == []

    def test_numbers_are_not_keywords(self):
        cs = ConstraintExtractor().extract("The database must have 4 ocpus.")
        assert cs.restrictive[0].keywords == ["ocpus"]

    def test_do_not_and_avoid(self):
        cs = ConstraintExtractor().extract("Do not use Exadata. Avoid GPU instances.")
        raw = sorted(c.raw_phrase for c in cs.exclusions)
        assert raw == ["exadata", "gpu instances"]


class TestIdentifiers:
    def test_labelled_and_bare_identifiers(self):
        cs = ConstraintExtractor().extract("Please quote SKU B89728 and part number B91969 only.")
        assert cs.identifiers == {"B89728", "B91969"}

    def test_identifier_requires_digit(self):
        cs = ConstraintExtractor().extract("We need a database SKU with BYOL licensing")
        assert cs.identifiers == set()
        assert "byol" in cs.business_preferences
        assert cs.business_preferences["byol"].licensing == LicensingModel.BYOL


class TestPreferencesAndSummary:
    def test_preferences_and_user_count(self):
        cs = ConstraintExtractor().extract("Need a database for 1,200 users, budget-conscious")
        assert cs.user_count == 1200
        assert cs.business_preferences["budget-conscious"].tier == Tier.STANDARD
        # preferences alone are not hard constraints
        assert cs.is_empty

    def test_empty_text(self):
        extractor = ConstraintExtractor()
        cs = extractor.extract("   ")
        assert cs.is_empty
        assert cs.business_preferences == {}
        assert extractor.summarize(cs) == (
            "No explicit constraints detected; all catalog services are eligible."
        )

    def test_summary_mentions_clauses(self):
        extractor = ConstraintExtractor()
        summary = extractor.summarize(extractor.extract(SCENARIO_A))
        assert "Requirements: base database service" in summary
        assert "Exclusions: app servers" in summary


class TestConstraintRules:
    def test_keyword_matching(self):
        assert keyword_matches("servers", {"server"})
        assert keyword_matches("app", {"application"})
        assert not keyword_matches("db", {"database"})
        assert not keyword_matches("base", {"database"})

    def test_restrictive_and_exclusion_verdicts(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)
        rules = ConstraintRules()

        db = ServiceView(identifier="B89728", name="Database - Base Database Service - BYOL",
                         category="Database", sku_type="DATABASE_BYOL")
        app = ServiceView(identifier="X1", name="App Server Base Database Edition", category="Compute")
        compute = ServiceView(identifier="B88317", name="Compute - Standard - E4 - OCPU Hour",
                              category="Compute", sku_type="OCPU")

        assert rules.evaluate(db, cs).passed
        assert rules.evaluate(app, cs).reasons == ["Matches exclusion 'app servers'"]
        assert rules.evaluate(compute, cs).reasons == [
            "Does not satisfy requirement 'base database service'"
        ]

    def test_restrictive_clause_needs_every_keyword(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)
        rules = ConstraintRules()

        mysql = ServiceView(identifier="B91500", name="Database - MySQL Database Service",
                            category="Database", sku_type="MYSQL")
        exadata = ServiceView(identifier="B92000", name="Database - Exadata Database Service",
                              category="Database", sku_type="EXADATA")

        for view in (mysql, exadata):
            assert rules.evaluate(view, cs).reasons == [
                "Does not satisfy requirement 'base database service'"
            ]

    def test_preferences_inside_exclusions_are_ignored(self):
        cs = ConstraintExtractor().extract("Need a database, budget-conscious. No enterprise editions.")
        assert list(cs.business_preferences) == ["budget-conscious"]
        assert cs.exclusions[0].raw_phrase == "enterprise editions"

    def test_empty_constraints_pass_everything(self):
        view = ServiceView(identifier="B1", name="Anything")
        assert ConstraintRules().evaluate(view, ConstraintExtractor().extract("")).passed
