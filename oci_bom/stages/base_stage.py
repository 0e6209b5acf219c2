"""
Base stage class that every pipeline stage inherits.

A LangGraph node receives the graph state as a plain dict. `process()`
rebuilds the typed BOMPipelineState, runs `_real_process()`, stamps the
audit trail and hands a dict back to the graph. Failures are logged with
their timing, recorded on the state and re-raised to the caller.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from oci_bom.models.enums import StageName
from oci_bom.models.state import BOMPipelineState

logger = logging.getLogger(__name__)

_RULE = "─" * 60


class BaseStage(ABC):
    """Abstract base for all pipeline stages."""

    name: StageName  # set in each subclass

    async def process(self, state: dict[str, Any]) -> dict[str, Any]:
        """LangGraph node function."""
        tag = self.name.value
        started = time.perf_counter()

        pipeline_state = BOMPipelineState(**state)
        pipeline_state.current_stage = tag
        logger.info(f"{_RULE}\n▶ [{tag}] start | {_digest(pipeline_state)}")

        try:
            result = await self._real_process(pipeline_state)
        except Exception as exc:
            elapsed = time.perf_counter() - started
            pipeline_state.error_message = f"[{tag}] {exc}"
            pipeline_state.add_audit(stage=tag, action="error", details=str(exc))
            logger.exception(f"✘ [{tag}] failed after {elapsed:.3f}s: {exc}")
            raise

        result.add_audit(stage=tag, action="completed", details=result.status.value)
        elapsed = time.perf_counter() - started
        logger.info(f"✔ [{tag}] done in {elapsed:.3f}s | {_digest(result)}")
        return result.model_dump()

    @abstractmethod
    async def _real_process(self, state: BOMPipelineState) -> BOMPipelineState:
        """Stage implementation. Must be overridden by each stage."""
        ...


def _digest(state: BOMPipelineState) -> str:
    """One-line view of what the pipeline has produced so far."""
    constraints = state.constraint_set
    parts = [
        f"status={state.status.value}",
        f"v{state.state_version}",
        f"restrictive={len(constraints.restrictive)}",
        f"exclusions={len(constraints.exclusions)}",
        f"pins={len(constraints.specific_identifiers)}",
    ]
    if state.intent.categories:
        parts.append("categories=" + ",".join(sorted(c.value for c in state.intent.categories)))
    if state.catalog_size:
        parts.append(f"catalog={state.catalog_size}")
    if state.matched_services:
        parts.append(f"matches={len(state.matched_services)}")
    if state.draft is not None:
        parts.append(f"items={len(state.draft.items)}")
        if state.draft.validated:
            parts.append(f"rejected={state.draft.compliance_summary.rejected}")
    logger.debug(f"[STATE] requirements={len(state.requirements)} chars, answers={len(state.follow_up_answers)}")
    return " ".join(parts)
