"""
Draft Generation Orchestrator — builds the prompt from the business intent
and the ranked candidates, calls the completion service once, recovers the
JSON and shallow-validates the line items.

Stage trace:
  NOT_STARTED → PROMPT_BUILT → SERVICE_CALLED → RESPONSE_RECEIVED
  → PARSED → VALIDATED_SHALLOW      (or FAILED with the reason)
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from oci_bom.config import get_settings
from oci_bom.errors import BOMError, DraftParseError, PromptTooLargeError
from oci_bom.models.enums import DraftStage, LLMProvider
from oci_bom.models.schemas import BOMDraft, BOMLineItem, BusinessIntent, MatchedService
from oci_bom.services.json_repair import parse_llm_json
from oci_bom.services.llm_service import CompletionService

logger = logging.getLogger(__name__)

BOM_SYSTEM_PROMPT = """You are creating a detailed Bill of Materials (BOM) for Oracle Cloud Infrastructure services.
Use ONLY the candidate services listed in the request, identified by their catalog identifier.

CRITICAL QUANTITY RULES:
- For HOURLY services (OCPU_HOUR, GB_HOUR, HOUR): quantity = number of resources (e.g. 4 OCPUs, 8 GB RAM)
- For MONTHLY services (GB_MONTH): quantity = total amount per month (e.g. 100 GB storage)
- DO NOT multiply hourly quantities by hours; time calculations happen later
- Example: 2 servers with 2 OCPUs each running 24/7 → quantity = 4 (not 4 × 744)

Return ONLY valid JSON in this exact format, with no commentary:
{
  "items": [
    {
      "sku": "B88317",
      "description": "Compute - Standard - E4 - OCPU Hour",
      "quantity": 4,
      "metric": "OCPU_HOUR",
      "unitPrice": 0.0255,
      "category": "Compute",
      "notes": "2 application servers × 2 OCPUs each"
    }
  ]
}

JSON rules: double quotes around every key and string, no trailing commas,
no comments, numbers without units."""


class DraftGenerator:

    def __init__(
        self,
        completion: Optional[CompletionService] = None,
        token_ceiling: Optional[int] = None,
        candidate_cap: Optional[int] = None,
    ):
        settings = get_settings()
        self.completion = completion or CompletionService()
        self.token_ceiling = token_ceiling if token_ceiling is not None else settings.prompt_token_ceiling
        self.candidate_cap = candidate_cap if candidate_cap is not None else settings.prompt_candidate_cap

    async def generate_draft(
        self,
        intent: BusinessIntent,
        matched: list[MatchedService],
        provider: LLMProvider,
    ) -> BOMDraft:
        stages = [DraftStage.NOT_STARTED]
        try:
            candidates = matched[: self.candidate_cap]
            user_prompt = self.build_prompt(intent, candidates)
            estimated = self.estimate_tokens(BOM_SYSTEM_PROMPT, user_prompt)
            logger.info(
                f"[DRAFT] Prompt built | candidates={len(candidates)} | "
                f"estimated_tokens={estimated} | ceiling={self.token_ceiling}"
            )
            if estimated > self.token_ceiling:
                raise PromptTooLargeError(estimated, self.token_ceiling)
            stages.append(DraftStage.PROMPT_BUILT)

            stages.append(DraftStage.SERVICE_CALLED)
            raw = await self.completion.complete(provider, BOM_SYSTEM_PROMPT, user_prompt)
            stages.append(DraftStage.RESPONSE_RECEIVED)

            data = parse_llm_json(raw)
            stages.append(DraftStage.PARSED)

            items, dropped = self._shallow_validate(data, candidates, raw)
            stages.append(DraftStage.VALIDATED_SHALLOW)
        except BOMError as exc:
            stages.append(DraftStage.FAILED)
            logger.error(f"[DRAFT] Failed at {stages[-2].value}: {exc}")
            raise

        logger.info(f"[DRAFT] {len(items)} items accepted, {dropped} dropped")
        return BOMDraft(items=items, provider=provider.value, stages=stages, dropped_items=dropped)

    # ── Prompt ───────────────────────────────────────────

    @staticmethod
    def estimate_tokens(*texts: str) -> int:
        return sum(len(t) for t in texts) // 4

    @staticmethod
    def build_prompt(intent: BusinessIntent, candidates: list[MatchedService]) -> str:
        lines = ["BUSINESS REQUIREMENTS SUMMARY:"]
        if intent.categories:
            lines.append(f"- Categories: {', '.join(sorted(c.value for c in intent.categories))}")
        if intent.products:
            lines.append(f"- Products: {', '.join(sorted(intent.products))}")
        if intent.tier_preference:
            lines.append(f"- Tier preference: {intent.tier_preference.value}")
        if intent.licensing_preference:
            lines.append(f"- Licensing preference: {intent.licensing_preference.value}")
        if intent.optimize:
            lines.append(f"- Optimize for: {intent.optimize.value}")
        if intent.user_count:
            lines.append(f"- Expected users: {intent.user_count} (sizing: {intent.sizing or 'n/a'})")

        constraints = intent.constraints
        if constraints.restrictive:
            lines.append(
                "- MUST satisfy: " + "; ".join(c.raw_phrase for c in constraints.restrictive)
            )
        if constraints.exclusions:
            lines.append(
                "- MUST NOT include: " + "; ".join(c.raw_phrase for c in constraints.exclusions)
            )
        if constraints.identifiers:
            lines.append("- Only these identifiers: " + ", ".join(sorted(constraints.identifiers)))

        lines.append("")
        lines.append("CANDIDATE SERVICES (identifier | name | category | unit price | billing unit):")
        for m in candidates:
            s = m.service
            lines.append(
                f"- {s.identifier} | {s.display_name} | {s.catalog_category} | "
                f"{s.pricing.unit_price} {s.pricing.currency} | {s.pricing.billing_unit}"
            )
        lines.append("")
        lines.append("Create the BOM using only the candidate services above.")
        return "\n".join(lines)

    # ── Shallow validation ───────────────────────────────

    def _shallow_validate(
        self,
        data: Any,
        candidates: list[MatchedService],
        raw: str,
    ) -> tuple[list[BOMLineItem], int]:
        if isinstance(data, list):
            raw_items = data
        elif isinstance(data, dict) and isinstance(data.get("items"), list):
            raw_items = data["items"]
        else:
            raise DraftParseError("Response has no 'items' list", raw_response=raw)

        by_id = {m.service.identifier.upper(): m.service for m in candidates}
        items: list[BOMLineItem] = []
        dropped = 0
        for entry in raw_items:
            item = self._coerce_item(entry, by_id)
            if item is None:
                dropped += 1
                logger.warning(f"[DRAFT] Dropping malformed item: {str(entry)[:200]}")
                continue
            items.append(item)
        return items, dropped

    @staticmethod
    def _coerce_item(entry: Any, by_id: dict) -> Optional[BOMLineItem]:
        if not isinstance(entry, dict):
            return None

        identifier = str(entry.get("sku") or entry.get("partNumber") or entry.get("identifier") or "").strip()
        description = str(entry.get("description") or entry.get("displayName") or "").strip()
        if not identifier or not description:
            return None

        try:
            quantity = float(entry.get("quantity"))
        except (TypeError, ValueError):
            return None
        if not math.isfinite(quantity) or quantity < 0:
            return None

        service = by_id.get(identifier.upper())
        price_raw = entry.get("unitPrice", entry.get("price"))
        if price_raw is None:
            if service is None:
                return None
            unit_price = service.pricing.unit_price
        else:
            try:
                unit_price = Decimal(str(price_raw))
            except (InvalidOperation, ValueError):
                return None
            if not unit_price.is_finite() or unit_price < 0:
                return None

        return BOMLineItem(
            identifier=identifier,
            description=description,
            quantity=quantity,
            billing_unit=str(
                entry.get("metric")
                or (service.pricing.billing_unit if service else "")
                or entry.get("metricName")
                or ""
            ),
            unit_price=unit_price,
            # Known identifiers keep the catalog label the hard rules were checked against
            category=(
                service.catalog_category
                if service
                else str(entry.get("category") or entry.get("serviceCategory") or "")
            ),
            notes=str(entry.get("notes") or ""),
            sku_type=service.sku_type if service else "",
        )
