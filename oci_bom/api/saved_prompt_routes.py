"""
Saved prompt routes — list, inspect, edit and re-use previous requests.

Routes (prefix /api/saved-prompts):
  GET    /                → All prompts, most recently used first
  GET    /suggestions     → Frequent phrases matching ?q=
  GET    /{prompt_id}     → One prompt
  POST   /                → Save a prompt
  PUT    /{prompt_id}     → Update editable fields
  POST   /{prompt_id}/use → Record a re-use
  DELETE /{prompt_id}     → Remove
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from oci_bom.models.enums import LLMProvider
from oci_bom.persistence.saved_prompt_repository import get_saved_prompt_repository
from oci_bom.services.saved_prompts_service import SavedPromptService

saved_prompt_router = APIRouter()


def get_saved_prompt_service() -> SavedPromptService:
    return SavedPromptService(get_saved_prompt_repository())


class SavePromptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    requirements: str = Field(min_length=1, max_length=10_000)
    follow_up_answers: dict[str, Any] = Field(default_factory=dict, alias="followUpAnswers")
    llm_provider: LLMProvider = Field(default=LLMProvider.OPENAI, alias="llmProvider")
    name: Optional[str] = Field(default=None, max_length=200)


class UpdatePromptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    requirements: Optional[str] = Field(default=None, min_length=1, max_length=10_000)
    follow_up_answers: Optional[dict[str, Any]] = Field(default=None, alias="followUpAnswers")
    llm_provider: Optional[LLMProvider] = Field(default=None, alias="llmProvider")
    tags: Optional[list[str]] = None


def _answers(raw: Optional[dict[str, Any]]) -> Optional[dict[str, str]]:
    if raw is None:
        return None
    return {str(k): str(v) for k, v in raw.items() if v is not None}


@saved_prompt_router.get("")
async def list_prompts(service: SavedPromptService = Depends(get_saved_prompt_service)):
    prompts = service.list_prompts()
    return {"success": True, "count": len(prompts), "prompts": prompts}


@saved_prompt_router.get("/suggestions")
async def prompt_suggestions(
    q: str = Query(default="", max_length=200),
    limit: int = Query(default=10, ge=1, le=50),
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    return {"success": True, "suggestions": service.suggestions(q, limit=limit)}


@saved_prompt_router.get("/{prompt_id}")
async def get_prompt(prompt_id: str, service: SavedPromptService = Depends(get_saved_prompt_service)):
    return {"success": True, "prompt": service.get_prompt(prompt_id)}


@saved_prompt_router.post("", status_code=201)
async def save_prompt(
    request: SavePromptRequest,
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    prompt = service.save_prompt(
        request.requirements,
        _answers(request.follow_up_answers),
        request.llm_provider.value,
        name=request.name,
    )
    return {"success": True, "prompt": prompt}


@saved_prompt_router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: str,
    request: UpdatePromptRequest,
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    updates = request.model_dump(exclude_none=True)
    if request.follow_up_answers is not None:
        updates["follow_up_answers"] = _answers(request.follow_up_answers)
    if request.llm_provider is not None:
        updates["llm_provider"] = request.llm_provider.value
    return {"success": True, "prompt": service.update_prompt(prompt_id, updates)}


@saved_prompt_router.post("/{prompt_id}/use")
async def use_prompt(prompt_id: str, service: SavedPromptService = Depends(get_saved_prompt_service)):
    return {"success": True, "prompt": service.increment_usage(prompt_id)}


@saved_prompt_router.delete("/{prompt_id}")
async def delete_prompt(prompt_id: str, service: SavedPromptService = Depends(get_saved_prompt_service)):
    service.delete_prompt(prompt_id)
    return {"success": True, "message": f"Prompt {prompt_id} deleted"}
