"""
Routing functions for LangGraph conditional edges.

Each function inspects the current state dict and returns the name
of the next node to execute.
"""

from __future__ import annotations

from typing import Any

from oci_bom.models.enums import PipelineStatus


# ── After intent translation ─────────────────────────────

def route_after_translation(state: dict[str, Any]) -> str:
    """
    Nothing recognizable in the text → stop and ask follow-up questions.
    Otherwise → service matching.
    """
    if state.get("status") == PipelineStatus.NEEDS_FOLLOW_UP:
        return "end_follow_up"
    return "service_matching"


# ── After service matching ───────────────────────────────

def route_after_matching(state: dict[str, Any]) -> str:
    """
    Empty candidate list → stop (insufficient catalog data).
    Otherwise → draft generation.
    """
    if state.get("status") == PipelineStatus.INSUFFICIENT_CATALOG or not state.get("matched_services"):
        return "end_insufficient_catalog"
    return "draft_generation"
