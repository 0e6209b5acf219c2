"""
LangGraph State Machine — five-stage BOM generation pipeline.

  constraint_extraction → intent_translation ─┬→ end_follow_up
                                              └→ service_matching ─┬→ end_insufficient_catalog
                                                                   └→ draft_generation → compliance_validation

All stage nodes delegate to stage.process(state), which returns the full
updated state dict.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from langgraph.graph import END, StateGraph

from oci_bom.catalog.provider import ServiceCatalogProvider
from oci_bom.models.enums import LLMProvider, PipelineStatus
from oci_bom.models.state import BOMPipelineState
from oci_bom.orchestration.transitions import route_after_matching, route_after_translation
from oci_bom.services.draft_generator import DraftGenerator
from oci_bom.services.llm_service import CompletionService
from oci_bom.stages import (
    ComplianceValidationStage,
    ConstraintExtractionStage,
    DraftGenerationStage,
    IntentTranslationStage,
    ServiceMatchingStage,
)

logger = logging.getLogger(__name__)


# ── Terminal nodes (set final status and stop) ───────────

def end_follow_up(state: dict[str, Any]) -> dict[str, Any]:
    """Pipeline paused — the customer must answer follow-up questions."""
    state["status"] = PipelineStatus.NEEDS_FOLLOW_UP
    logger.info(f"Pipeline paused: {len(state.get('follow_up_questions', []))} follow-up questions")
    return state


def end_insufficient_catalog(state: dict[str, Any]) -> dict[str, Any]:
    """Pipeline stopped — no catalog service fits the request."""
    state["status"] = PipelineStatus.INSUFFICIENT_CATALOG
    logger.info("Pipeline terminated: INSUFFICIENT_CATALOG")
    return state


# ── Pipeline ─────────────────────────────────────────────

class BOMPipeline:
    """
    Owns the stage instances and their collaborators. The catalog provider
    (and with it the catalog cache) is the only thing shared across requests.
    """

    def __init__(
        self,
        catalog: Optional[ServiceCatalogProvider] = None,
        completion: Optional[CompletionService] = None,
    ):
        self.catalog = catalog or ServiceCatalogProvider()
        self.completion = completion or CompletionService()

        self.extraction = ConstraintExtractionStage()
        self.translation = IntentTranslationStage()
        self.matching = ServiceMatchingStage(catalog=self.catalog)
        self.drafting = DraftGenerationStage(DraftGenerator(completion=self.completion))
        self.validation = ComplianceValidationStage()
        self._compiled = None

    def build_graph(self):
        """Construct and compile the LangGraph state machine."""
        graph = StateGraph(dict)

        # ── Add nodes ────────────────────────────────────
        graph.add_node("constraint_extraction", self.extraction.process)
        graph.add_node("intent_translation", self.translation.process)
        graph.add_node("service_matching", self.matching.process)
        graph.add_node("draft_generation", self.drafting.process)
        graph.add_node("compliance_validation", self.validation.process)

        # Terminal nodes
        graph.add_node("end_follow_up", end_follow_up)
        graph.add_node("end_insufficient_catalog", end_insufficient_catalog)

        # ── Edges ────────────────────────────────────────
        graph.set_entry_point("constraint_extraction")
        graph.add_edge("constraint_extraction", "intent_translation")
        graph.add_conditional_edges(
            "intent_translation",
            route_after_translation,
            {
                "end_follow_up": "end_follow_up",
                "service_matching": "service_matching",
            },
        )
        graph.add_conditional_edges(
            "service_matching",
            route_after_matching,
            {
                "end_insufficient_catalog": "end_insufficient_catalog",
                "draft_generation": "draft_generation",
            },
        )
        graph.add_edge("draft_generation", "compliance_validation")

        # Terminal edges → END
        graph.add_edge("compliance_validation", END)
        graph.add_edge("end_follow_up", END)
        graph.add_edge("end_insufficient_catalog", END)

        return graph.compile()

    @property
    def compiled(self):
        if self._compiled is None:
            self._compiled = self.build_graph()
        return self._compiled

    async def run(
        self,
        requirements: str,
        provider: LLMProvider = LLMProvider.OPENAI,
        follow_up_answers: Optional[dict[str, str]] = None,
    ) -> BOMPipelineState:
        """Run one request end-to-end and return the final state."""
        initial = BOMPipelineState(
            requirements=requirements,
            provider=provider,
            follow_up_answers=follow_up_answers or {},
            status=PipelineStatus.RECEIVED,
        )
        logger.info(
            f"Starting BOM pipeline | provider={provider.value} | "
            f"requirements={len(requirements)} chars | follow-up answers={len(initial.follow_up_answers)}"
        )
        result = await self.compiled.ainvoke(initial.model_dump())
        final = BOMPipelineState(**result)
        logger.info(f"BOM pipeline finished with status {final.status.value}")
        return final


# ── Convenience runner ───────────────────────────────────

_default_pipeline: Optional[BOMPipeline] = None


def get_pipeline() -> BOMPipeline:
    """Process-wide pipeline (shares one catalog cache)."""
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = BOMPipeline()
    return _default_pipeline


async def run_pipeline(
    requirements: str,
    provider: LLMProvider = LLMProvider.OPENAI,
    follow_up_answers: Optional[dict[str, str]] = None,
) -> BOMPipelineState:
    return await get_pipeline().run(requirements, provider, follow_up_answers)
