"""
Compliance Validation Stage — last node; strips draft items that violate
the extracted constraints.
"""

from __future__ import annotations

import logging
from typing import Optional

from oci_bom.models.enums import PipelineStatus, StageName
from oci_bom.models.state import BOMPipelineState
from oci_bom.services.compliance_validator import ComplianceValidator
from oci_bom.stages.base_stage import BaseStage

logger = logging.getLogger(__name__)


class ComplianceValidationStage(BaseStage):
    name = StageName.COMPLIANCE_VALIDATION

    def __init__(self, validator: Optional[ComplianceValidator] = None):
        self.validator = validator or ComplianceValidator()

    async def _real_process(self, state: BOMPipelineState) -> BOMPipelineState:
        if state.draft is None:
            raise ValueError("No draft to validate")

        state.draft = self.validator.validate(state.draft, state.constraint_set)
        summary = state.draft.compliance_summary
        if summary and summary.rejected:
            logger.warning(
                f"[{self.name.value}] {summary.rejected} generated item(s) violated constraints and were removed"
            )
        state.status = PipelineStatus.COMPLETED
        return state
