"""
Tests: Workbook rendering and monthly cost arithmetic.

Run with:
    pytest oci_bom/tests/test_workbook_renderer.py -v
"""

import io
from decimal import Decimal

from openpyxl import load_workbook

from oci_bom.models.schemas import BOMDraft, BOMLineItem, ComplianceSummary, RejectedItem
from oci_bom.services.workbook_renderer import WorkbookRenderer, monthly_cost, monthly_multiplier


class TestMonthlyCost:
    def test_multipliers(self):
        assert monthly_multiplier("OCPU_HOUR") == Decimal("744")
        assert monthly_multiplier("HOUR") == Decimal("744")
        assert monthly_multiplier("DAILY") == Decimal("31")
        assert monthly_multiplier("GB_MONTH") == Decimal("1")
        assert monthly_multiplier("") == Decimal("1")

    def test_hourly_quantity_is_multiplied_once(self):
        # 4 OCPUs at 0.0255/hour for a month
        assert monthly_cost(4, Decimal("0.0255"), "OCPU_HOUR") == Decimal("75.89")

    def test_monthly_quantity(self):
        assert monthly_cost(100, Decimal("0.0255"), "GB_MONTH") == Decimal("2.55")


class TestRender:
    def _draft(self):
        return BOMDraft(
            items=[
                BOMLineItem(identifier="B88317", description="Compute - Standard - E4 - OCPU Hour",
                            quantity=4, billing_unit="OCPU_HOUR", unit_price=Decimal("0.0255"),
                            category="Compute"),
                BOMLineItem(identifier="B91235", description="Object Storage - Standard",
                            quantity=100, billing_unit="GB_MONTH", unit_price=Decimal("0.0255"),
                            category="Storage"),
            ],
            provider="openai",
            validated=True,
            compliance_summary=ComplianceSummary(
                considered=3, approved=2, rejected=1,
                rejections=[RejectedItem(identifier="B90100", description="HPC", reasons=["Matches exclusion 'hpc'"])],
            ),
        )

    def test_workbook_contents(self):
        data = WorkbookRenderer().render(self._draft())
        wb = load_workbook(io.BytesIO(data))

        assert wb.sheetnames == ["Bill of Materials", "Compliance"]
        ws = wb["Bill of Materials"]
        assert ws.cell(row=1, column=1).value == "Identifier"
        assert ws.cell(row=2, column=1).value == "B88317"
        assert ws.cell(row=2, column=8).value == 75.89
        assert ws.cell(row=3, column=8).value == 2.55
        assert ws.cell(row=ws.max_row, column=8).value == 78.44
        assert "USD" in ws.cell(row=ws.max_row, column=2).value

        compliance = wb["Compliance"]
        values = [row for row in compliance.iter_rows(values_only=True)]
        assert ("Items rejected", 1) in [row[:2] for row in values]
        assert any(row[0] == "B90100" for row in values)

    def test_currency_label(self):
        data = WorkbookRenderer().render(self._draft(), currency="EUR")
        ws = load_workbook(io.BytesIO(data))["Bill of Materials"]
        assert "EUR" in ws.cell(row=ws.max_row, column=2).value

    def test_unvalidated_draft(self):
        data = WorkbookRenderer().render(BOMDraft(items=[]))
        compliance = load_workbook(io.BytesIO(data))["Compliance"]
        assert ("Status", "Not validated") in [row[:2] for row in compliance.iter_rows(values_only=True)]
