"""
Draft Generation Stage — asks the selected LLM provider for a BOM draft
built from the ranked candidates.
"""

from __future__ import annotations

from typing import Optional

from oci_bom.models.enums import PipelineStatus, StageName
from oci_bom.models.state import BOMPipelineState
from oci_bom.services.draft_generator import DraftGenerator
from oci_bom.stages.base_stage import BaseStage


class DraftGenerationStage(BaseStage):
    name = StageName.DRAFT_GENERATION

    def __init__(self, generator: Optional[DraftGenerator] = None):
        self.generator = generator or DraftGenerator()

    async def _real_process(self, state: BOMPipelineState) -> BOMPipelineState:
        state.draft = await self.generator.generate_draft(
            state.intent, state.matched_services, state.provider
        )
        state.status = PipelineStatus.VALIDATING
        return state
