"""
Constraint Extraction Stage — first node of the pipeline.
Extracts hard constraints and preferences from the requirement text
(follow-up answers included).
"""

from __future__ import annotations

import logging
from typing import Optional

from oci_bom.errors import ValidationError
from oci_bom.models.enums import PipelineStatus, StageName
from oci_bom.models.state import BOMPipelineState
from oci_bom.services.constraint_extractor import ConstraintExtractor
from oci_bom.stages.base_stage import BaseStage

logger = logging.getLogger(__name__)


class ConstraintExtractionStage(BaseStage):
    name = StageName.CONSTRAINT_EXTRACTION

    def __init__(self, extractor: Optional[ConstraintExtractor] = None):
        self.extractor = extractor or ConstraintExtractor()

    async def _real_process(self, state: BOMPipelineState) -> BOMPipelineState:
        text = state.effective_requirements
        if not text.strip():
            raise ValidationError("Requirements text is empty", field="requirements")

        state.status = PipelineStatus.EXTRACTING
        state.constraint_set = self.extractor.extract(text)
        state.constraint_summary = self.extractor.summarize(state.constraint_set)
        logger.info(f"[{self.name.value}] {state.constraint_summary}")

        state.status = PipelineStatus.TRANSLATING
        return state
