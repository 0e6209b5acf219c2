"""
Pydantic models shared across the pipeline stages, the catalog layer
and the API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import (
    CategoryKey,
    ConstraintKind,
    DraftStage,
    LicensingModel,
    OptimizationGoal,
    Tier,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Constraints ──────────────────────────────────────────

class Constraint(BaseModel):
    """A restrictive or exclusion clause lifted out of the requirement text."""
    kind: ConstraintKind
    raw_phrase: str
    keywords: list[str] = Field(default_factory=list)
    rule: str = ""


class IdentifierPin(BaseModel):
    """An explicit catalog identifier the customer pinned (SKU, part number)."""
    raw_phrase: str
    identifier: str
    rule: str = ""


class PreferenceEffect(BaseModel):
    tier: Optional[Tier] = None
    licensing: Optional[LicensingModel] = None
    optimize: Optional[OptimizationGoal] = None


class ConstraintSet(BaseModel):
    restrictive: list[Constraint] = Field(default_factory=list)
    exclusions: list[Constraint] = Field(default_factory=list)
    specific_identifiers: list[IdentifierPin] = Field(default_factory=list)
    business_preferences: dict[str, PreferenceEffect] = Field(default_factory=dict)
    user_count: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        """True when no hard constraint was found (filtering is a pass-through)."""
        return not (self.restrictive or self.exclusions or self.specific_identifiers)

    @property
    def identifiers(self) -> set[str]:
        return {pin.identifier for pin in self.specific_identifiers}


# ── Business intent ──────────────────────────────────────

class BusinessIntent(BaseModel):
    categories: set[CategoryKey] = Field(default_factory=set)
    products: set[str] = Field(default_factory=set)
    tier_preference: Optional[Tier] = None
    licensing_preference: Optional[LicensingModel] = None
    optimize: Optional[OptimizationGoal] = None
    user_count: Optional[int] = None
    sizing: Optional[str] = None
    constraints: ConstraintSet = Field(default_factory=ConstraintSet)

    @property
    def has_signal(self) -> bool:
        return bool(self.categories or self.products or self.constraints.identifiers)


# ── Catalog ──────────────────────────────────────────────

class Pricing(BaseModel):
    currency: str = "USD"
    unit_price: Decimal = Field(ge=0)
    billing_unit: str = "HOUR"
    model: str = "PAY_AS_YOU_GO"
    metric_name: str = ""


class CatalogService(BaseModel):
    identifier: str
    display_name: str
    category: CategoryKey = CategoryKey.OTHER
    catalog_category: str = ""
    sku_type: str = ""
    product_family: str = ""
    tier: Optional[Tier] = None
    licensing_model: Optional[LicensingModel] = None
    business_description: str = ""
    pricing: Pricing


class MatchedService(BaseModel):
    service: CatalogService
    match_score: float = Field(ge=0.0, le=1.0)
    match_reasons: list[str] = Field(default_factory=list)


class ExcludedService(BaseModel):
    service: CatalogService
    reason: str


class FilterResult(BaseModel):
    included: list[CatalogService] = Field(default_factory=list)
    excluded: list[ExcludedService] = Field(default_factory=list)


# ── Draft / compliance ───────────────────────────────────

class ComplianceRecord(BaseModel):
    approved: bool = True
    satisfied: list[str] = Field(default_factory=list)
    violations: list[str] = Field(default_factory=list)


class BOMLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    identifier: str
    description: str
    quantity: float = Field(ge=0)
    billing_unit: str = ""
    unit_price: Decimal = Field(ge=0)
    category: str = ""
    notes: str = ""
    sku_type: str = ""
    compliance: Optional[ComplianceRecord] = None


class RejectedItem(BaseModel):
    identifier: str
    description: str
    reasons: list[str] = Field(default_factory=list)


class ComplianceSummary(BaseModel):
    considered: int = 0
    approved: int = 0
    rejected: int = 0
    rejections: list[RejectedItem] = Field(default_factory=list)


class BOMDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[BOMLineItem] = Field(default_factory=list)
    provider: str = ""
    stages: list[DraftStage] = Field(default_factory=list)
    dropped_items: int = 0
    validated: bool = False
    compliance_summary: Optional[ComplianceSummary] = None


# ── Documents ────────────────────────────────────────────

class DocumentText(BaseModel):
    filename: str
    document_type: str
    content: str

    @property
    def char_count(self) -> int:
        return len(self.content)


# ── Saved prompts ────────────────────────────────────────

class SavedPrompt(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str = "General Applications"
    requirements: str
    follow_up_answers: dict[str, str] = Field(default_factory=dict)
    llm_provider: str = "openai"
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    last_used: datetime = Field(default_factory=_utcnow)
    usage_count: int = 0


# ── Audit ────────────────────────────────────────────────

class AuditEntry(BaseModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    stage: str
    action: str
    details: str = ""
    state_version: int = 0
