"""
LangGraph shared state — the single object that flows through every node.

Design rules:
  1. Each field is "owned" by one stage (see comments).
  2. Stages may READ any field but should only WRITE to their owned fields.
  3. Every stage appends to the audit trail.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

from .enums import LLMProvider, PipelineStatus
from .schemas import (
    AuditEntry,
    BOMDraft,
    BusinessIntent,
    ConstraintSet,
    MatchedService,
)


class BOMPipelineState(BaseModel):
    """The graph state for one BOM generation request."""

    # ── Pipeline control ─────────────────────────────────
    status: PipelineStatus = PipelineStatus.RECEIVED
    current_stage: str = ""
    error_message: str = ""
    state_version: int = 0

    # ── Inputs (owner: caller) ───────────────────────────
    requirements: str = ""
    provider: LLMProvider = LLMProvider.OPENAI
    follow_up_answers: dict[str, str] = Field(default_factory=dict)

    # ── Constraint extraction ────────────────────────────
    constraint_set: ConstraintSet = Field(default_factory=ConstraintSet)
    constraint_summary: str = ""

    # ── Intent translation ───────────────────────────────
    intent: BusinessIntent = Field(default_factory=BusinessIntent)
    follow_up_questions: list[str] = Field(default_factory=list)

    # ── Service matching ─────────────────────────────────
    catalog_size: int = 0
    matched_services: list[MatchedService] = Field(default_factory=list)

    # ── Draft generation / validation ────────────────────
    draft: Optional[BOMDraft] = None

    # ── Audit trail (append-only) ────────────────────────
    audit_trail: list[AuditEntry] = Field(default_factory=list)

    # ── Helpers ──────────────────────────────────────────

    @property
    def effective_requirements(self) -> str:
        """Requirement text with any follow-up answers appended."""
        if not self.follow_up_answers:
            return self.requirements
        answers = "\n".join(
            f"{question}: {answer}"
            for question, answer in self.follow_up_answers.items()
            if str(answer).strip()
        )
        return f"{self.requirements}\n\nAdditional details:\n{answers}" if answers else self.requirements

    def add_audit(self, stage: str, action: str, details: str = "") -> None:
        self.state_version += 1
        self.audit_trail.append(
            AuditEntry(
                stage=stage,
                action=action,
                details=details,
                state_version=self.state_version,
            )
        )
