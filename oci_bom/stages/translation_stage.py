"""
Intent Translation Stage — maps the requirement text onto the taxonomy and
decides whether the customer must be asked follow-up questions first.
"""

from __future__ import annotations

import logging
from typing import Optional

from oci_bom.models.enums import PipelineStatus, StageName
from oci_bom.models.state import BOMPipelineState
from oci_bom.services.intent_translator import BusinessIntentTranslator
from oci_bom.stages.base_stage import BaseStage

logger = logging.getLogger(__name__)


class IntentTranslationStage(BaseStage):
    name = StageName.INTENT_TRANSLATION

    def __init__(self, translator: Optional[BusinessIntentTranslator] = None):
        self.translator = translator or BusinessIntentTranslator()

    async def _real_process(self, state: BOMPipelineState) -> BOMPipelineState:
        state.intent = self.translator.translate(state.effective_requirements, state.constraint_set)

        # Answers already given: never ask twice
        questions = [] if state.follow_up_answers else self.translator.follow_up_questions(state.intent)
        if questions:
            state.follow_up_questions = questions
            state.status = PipelineStatus.NEEDS_FOLLOW_UP
            logger.info(f"[{self.name.value}] Nothing recognizable; asking {len(questions)} follow-up questions")
            return state

        state.status = PipelineStatus.MATCHING
        return state
