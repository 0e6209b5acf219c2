"""
Post-Generation Validator — re-checks every draft line item against the
original constraints with the same rules the matcher used, removes
violators and records why.
"""

from __future__ import annotations

import logging
from typing import Optional

from oci_bom.models.schemas import (
    BOMDraft,
    ComplianceRecord,
    ComplianceSummary,
    ConstraintSet,
    RejectedItem,
)
from oci_bom.rules.constraint_rules import ConstraintRules, ServiceView

logger = logging.getLogger(__name__)


class ComplianceValidator:

    def __init__(self, rules: Optional[ConstraintRules] = None):
        self.rules = rules or ConstraintRules()

    def validate(self, draft: BOMDraft, constraint_set: ConstraintSet) -> BOMDraft:
        """Return a new, validated draft. The input draft is left untouched."""
        kept = []
        rejections: list[RejectedItem] = []

        for item in draft.items:
            evaluation = self.rules.evaluate(ServiceView.from_item(item), constraint_set)
            if evaluation.passed:
                kept.append(
                    item.model_copy(update={
                        "compliance": ComplianceRecord(
                            approved=True,
                            satisfied=list(evaluation.satisfied),
                        )
                    })
                )
            else:
                rejections.append(
                    RejectedItem(
                        identifier=item.identifier,
                        description=item.description,
                        reasons=evaluation.reasons,
                    )
                )
                logger.warning(
                    f"[VALIDATE] Rejected {item.identifier} ({item.description}): "
                    f"{evaluation.reasons}"
                )

        previous = draft.compliance_summary if draft.validated else None
        if previous is not None:
            summary = ComplianceSummary(
                considered=previous.considered,
                approved=len(kept),
                rejected=previous.rejected + len(rejections),
                rejections=previous.rejections + rejections,
            )
        else:
            summary = ComplianceSummary(
                considered=len(draft.items),
                approved=len(kept),
                rejected=len(rejections),
                rejections=rejections,
            )

        logger.info(
            f"[VALIDATE] considered={summary.considered} | approved={summary.approved} | "
            f"rejected={summary.rejected}"
        )
        return draft.model_copy(update={
            "items": kept,
            "validated": True,
            "compliance_summary": summary,
        })
