"""
Tests: Post-generation compliance validation.

Run with:
    pytest oci_bom/tests/test_compliance_validator.py -v
"""

from decimal import Decimal

from oci_bom.models.schemas import BOMDraft, BOMLineItem
from oci_bom.services.compliance_validator import ComplianceValidator
from oci_bom.services.constraint_extractor import ConstraintExtractor

SCENARIO_A = "Only consider Base Database Service. No app servers."


def _item(identifier, description, category="", sku_type=""):
    return BOMLineItem(
        identifier=identifier,
        description=description,
        quantity=2,
        billing_unit="OCPU_HOUR",
        unit_price=Decimal("0.1"),
        category=category,
        sku_type=sku_type,
    )


DB_ITEM = _item("B89728", "Database - Base Database Service - BYOL", "Database", "DATABASE_BYOL")
COMPUTE_ITEM = _item("B88317", "Compute - Standard - E4 - OCPU Hour", "Compute")
APP_SERVER_ITEM = _item("B99999", "Base Database App Server Node", "Database")


class TestValidate:
    def test_hallucinated_compute_is_rejected(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)
        draft = BOMDraft(items=[DB_ITEM, COMPUTE_ITEM], provider="openai")

        validated = ComplianceValidator().validate(draft, cs)

        assert [i.identifier for i in validated.items] == ["B89728"]
        assert validated.items[0].compliance.approved
        summary = validated.compliance_summary
        assert (summary.considered, summary.approved, summary.rejected) == (2, 1, 1)
        assert summary.rejections[0].identifier == "B88317"
        assert "base database service" in summary.rejections[0].reasons[0]

    def test_exclusion_reason_names_the_phrase(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)
        validated = ComplianceValidator().validate(BOMDraft(items=[APP_SERVER_ITEM]), cs)

        assert validated.items == []
        assert validated.compliance_summary.rejected == 1
        assert any("app servers" in r for r in validated.compliance_summary.rejections[0].reasons)

    def test_input_draft_is_untouched(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)
        draft = BOMDraft(items=[DB_ITEM, COMPUTE_ITEM])
        ComplianceValidator().validate(draft, cs)

        assert len(draft.items) == 2
        assert not draft.validated
        assert draft.compliance_summary is None

    def test_validation_is_idempotent(self):
        cs = ConstraintExtractor().extract(SCENARIO_A)
        validator = ComplianceValidator()
        once = validator.validate(BOMDraft(items=[DB_ITEM, COMPUTE_ITEM]), cs)
        twice = validator.validate(once, cs)

        assert [i.identifier for i in twice.items] == [i.identifier for i in once.items]
        assert twice.compliance_summary == once.compliance_summary

    def test_no_constraints_approves_all(self):
        cs = ConstraintExtractor().extract("Need a database and some compute")
        validated = ComplianceValidator().validate(BOMDraft(items=[DB_ITEM, COMPUTE_ITEM]), cs)

        assert len(validated.items) == 2
        assert validated.compliance_summary.rejected == 0
        assert validated.validated

    def test_pinned_identifiers(self):
        cs = ConstraintExtractor().extract("Price SKU B89728 for us")
        validated = ComplianceValidator().validate(BOMDraft(items=[DB_ITEM, COMPUTE_ITEM]), cs)

        assert [i.identifier for i in validated.items] == ["B89728"]
        assert "B89728" in validated.compliance_summary.rejections[0].reasons[0]
