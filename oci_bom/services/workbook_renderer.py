"""
Workbook renderer — writes a validated BOM draft to an .xlsx workbook.

This is the only place quantities are multiplied by time: generated
quantities are raw resource counts, and the monthly multiplier here turns
them into a monthly cost.
"""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from decimal import Decimal

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from oci_bom.models.schemas import BOMDraft

logger = logging.getLogger(__name__)

HOURS_PER_MONTH = Decimal("744")

_HEADER_FILL = PatternFill(start_color="C74634", end_color="C74634", fill_type="solid")
_HEADER_FONT = Font(bold=True, color="FFFFFF")

BOM_COLUMNS = [
    ("Identifier", 14),
    ("Description", 52),
    ("Category", 14),
    ("Quantity", 10),
    ("Billing Unit", 14),
    ("Unit Price", 12),
    ("Monthly Multiplier", 18),
    ("Monthly Cost", 14),
    ("Notes", 48),
]


def monthly_multiplier(billing_unit: str) -> Decimal:
    """Units per month for a billing unit (hourly → 744, daily → 31, ...)."""
    unit = (billing_unit or "").upper()
    if "HOUR" in unit:
        return HOURS_PER_MONTH
    if "DAY" in unit or "DAILY" in unit:
        return Decimal("31")
    if "WEEK" in unit:
        return Decimal("4.33")
    if "YEAR" in unit or "ANNUAL" in unit:
        return Decimal(1) / Decimal(12)
    return Decimal(1)


def monthly_cost(quantity: float, unit_price: Decimal, billing_unit: str) -> Decimal:
    return (Decimal(str(quantity)) * unit_price * monthly_multiplier(billing_unit)).quantize(Decimal("0.01"))


class WorkbookRenderer:

    def render(self, draft: BOMDraft, currency: str = "USD") -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "Bill of Materials"

        ws.append([c[0] for c in BOM_COLUMNS])
        for col, (_, width) in enumerate(BOM_COLUMNS, start=1):
            cell = ws.cell(row=1, column=col)
            cell.font = _HEADER_FONT
            cell.fill = _HEADER_FILL
            cell.alignment = Alignment(horizontal="center")
            ws.column_dimensions[cell.column_letter].width = width

        total = Decimal(0)
        for item in draft.items:
            multiplier = monthly_multiplier(item.billing_unit)
            cost = monthly_cost(item.quantity, item.unit_price, item.billing_unit)
            total += cost
            ws.append([
                item.identifier,
                item.description,
                item.category,
                item.quantity,
                item.billing_unit,
                float(item.unit_price),
                float(multiplier),
                float(cost),
                item.notes,
            ])

        ws.append([])
        ws.append(["", f"Estimated monthly total ({currency})", "", "", "", "", "", float(total), ""])
        ws.cell(row=ws.max_row, column=2).font = Font(bold=True)
        ws.cell(row=ws.max_row, column=8).font = Font(bold=True)

        self._write_compliance_sheet(wb, draft)

        buffer = io.BytesIO()
        wb.save(buffer)
        data = buffer.getvalue()
        logger.info(
            f"[RENDER] Workbook with {len(draft.items)} items | total={total} {currency} | {len(data)} bytes"
        )
        return data

    @staticmethod
    def _write_compliance_sheet(wb: Workbook, draft: BOMDraft) -> None:
        ws = wb.create_sheet("Compliance")
        summary = draft.compliance_summary
        ws.append(["Generated", datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")])
        ws.append(["Provider", draft.provider])
        if summary is None:
            ws.append(["Status", "Not validated"])
            return
        ws.append(["Items considered", summary.considered])
        ws.append(["Items approved", summary.approved])
        ws.append(["Items rejected", summary.rejected])
        if summary.rejections:
            ws.append([])
            ws.append(["Rejected identifier", "Description", "Reasons"])
            for cell in ws[ws.max_row]:
                cell.font = Font(bold=True)
            for rejection in summary.rejections:
                ws.append([rejection.identifier, rejection.description, "; ".join(rejection.reasons)])
        ws.column_dimensions["A"].width = 22
        ws.column_dimensions["B"].width = 52
        ws.column_dimensions["C"].width = 80
