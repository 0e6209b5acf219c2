"""
API routes — thin HTTP layer that delegates to the orchestration.

Routes:
  GET  /api/health            → API health check
  POST /api/generate-bom      → Run the pipeline; workbook (base64) or follow-up questions
  POST /api/upload-document   → Extract text from a document (optionally generate from it)
  GET  /api/llm-providers     → Supported completion providers
  GET  /api/oci-categories    → Catalog category labels
"""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from oci_bom.api.saved_prompt_routes import get_saved_prompt_service
from oci_bom.errors import InsufficientCatalogError, ValidationError
from oci_bom.models.enums import Currency, LLMProvider, PipelineStatus
from oci_bom.models.schemas import ComplianceSummary
from oci_bom.models.state import BOMPipelineState
from oci_bom.orchestration.graph import BOMPipeline, get_pipeline
from oci_bom.services.document_service import DocumentTextService
from oci_bom.services.llm_service import PROVIDER_CATALOG
from oci_bom.services.saved_prompts_service import SavedPromptService
from oci_bom.services.workbook_renderer import WorkbookRenderer

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
bom_router = APIRouter()

MIN_REQUIREMENTS = 10
MAX_REQUIREMENTS = 10_000


# ── Request / response schemas ───────────────────────────

class GenerateBOMRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    requirements: str = Field(min_length=MIN_REQUIREMENTS, max_length=MAX_REQUIREMENTS)
    llm_provider: LLMProvider = Field(alias="llmProvider")
    follow_up_answers: dict[str, Any] = Field(default_factory=dict, alias="followUpAnswers")
    currency: Currency = Currency.USD
    region: Optional[str] = Field(default=None, max_length=50)


class FollowUpResponse(BaseModel):
    success: bool = True
    needsFollowUp: bool = True
    questions: list[str]
    constraintSummary: str = ""


class BOMResponse(BaseModel):
    success: bool = True
    needsFollowUp: bool = False
    excelBuffer: str
    filename: str
    itemCount: int
    complianceSummary: Optional[ComplianceSummary] = None
    constraintSummary: str = ""


def get_document_service() -> DocumentTextService:
    return DocumentTextService()


def get_renderer() -> WorkbookRenderer:
    return WorkbookRenderer()


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Generation ───────────────────────────────────────────

async def _generate(
    requirements: str,
    provider: LLMProvider,
    follow_up_answers: dict[str, Any],
    currency: Currency,
    pipeline: BOMPipeline,
    renderer: WorkbookRenderer,
    prompts: SavedPromptService,
) -> BOMResponse | FollowUpResponse:
    answers = {str(k): str(v) for k, v in (follow_up_answers or {}).items() if v is not None}
    state = await pipeline.run(requirements, provider, answers)

    if state.status == PipelineStatus.NEEDS_FOLLOW_UP:
        return FollowUpResponse(
            questions=state.follow_up_questions,
            constraintSummary=state.constraint_summary,
        )
    if state.status == PipelineStatus.INSUFFICIENT_CATALOG or state.draft is None:
        raise InsufficientCatalogError(state.error_message or "No catalog services match the request")

    workbook = renderer.render(state.draft, currency=currency.value)
    _auto_save(prompts, requirements, answers, provider, state)

    return BOMResponse(
        excelBuffer=base64.b64encode(workbook).decode("ascii"),
        filename=f"OCI-BOM-{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%S')}.xlsx",
        itemCount=len(state.draft.items),
        complianceSummary=state.draft.compliance_summary,
        constraintSummary=state.constraint_summary,
    )


def _auto_save(
    prompts: SavedPromptService,
    requirements: str,
    answers: dict[str, str],
    provider: LLMProvider,
    state: BOMPipelineState,
) -> None:
    """Remember a successful request; storage problems never fail the request."""
    try:
        prompts.save_prompt(requirements, answers, provider.value)
    except Exception as exc:
        logger.warning(f"Auto-save of prompt failed (status={state.status.value}): {exc}")


@bom_router.post("/generate-bom")
async def generate_bom(
    request: GenerateBOMRequest,
    pipeline: BOMPipeline = Depends(get_pipeline),
    renderer: WorkbookRenderer = Depends(get_renderer),
    prompts: SavedPromptService = Depends(get_saved_prompt_service),
):
    logger.info(
        f"POST /generate-bom | provider={request.llm_provider.value} | "
        f"{len(request.requirements)} chars | region={request.region or '-'}"
    )
    return await _generate(
        request.requirements,
        request.llm_provider,
        request.follow_up_answers,
        request.currency,
        pipeline,
        renderer,
        prompts,
    )


@bom_router.post("/upload-document")
async def upload_document(
    document: UploadFile = File(...),
    llmProvider: Optional[LLMProvider] = Form(None),
    requirements: str = Form(""),
    generate: bool = Form(False),
    documents: DocumentTextService = Depends(get_document_service),
    pipeline: BOMPipeline = Depends(get_pipeline),
    renderer: WorkbookRenderer = Depends(get_renderer),
    prompts: SavedPromptService = Depends(get_saved_prompt_service),
):
    data = await document.read()
    extracted = documents.extract_text(document.filename or "", data)

    if not generate:
        return {
            "success": True,
            "content": {
                "originalContent": extracted.content,
                "documentType": extracted.document_type,
                "filename": extracted.filename,
                "characterCount": extracted.char_count,
            },
        }

    if llmProvider is None:
        raise ValidationError("llmProvider is required when generate is set", field="llmProvider")
    combined = (
        f"{requirements.strip()}\n\n--- Requirements from {extracted.filename} ---\n{extracted.content}"
        if requirements.strip()
        else extracted.content
    )
    if len(combined) > MAX_REQUIREMENTS:
        raise ValidationError(
            f"Combined requirements are {len(combined)} characters; the limit is {MAX_REQUIREMENTS}",
            field="document",
        )
    return await _generate(combined, llmProvider, {}, Currency.USD, pipeline, renderer, prompts)


# ── Reference data ───────────────────────────────────────

@bom_router.get("/llm-providers")
async def list_llm_providers():
    return {"success": True, "providers": PROVIDER_CATALOG}


@bom_router.get("/oci-categories")
async def list_oci_categories(pipeline: BOMPipeline = Depends(get_pipeline)):
    categories = await pipeline.catalog.get_categories()
    return {"success": True, "categories": sorted(categories)}
