"""
Saved Prompts Service — keeps previously used requirement texts so they can
be re-run. Names, categories, descriptions and tags are derived from the
text when the caller does not provide them.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional

from oci_bom.catalog.taxonomy import phrase_in_text
from oci_bom.errors import PromptNotFoundError, ValidationError
from oci_bom.models.schemas import SavedPrompt

logger = logging.getLogger(__name__)

MAX_TAGS = 5
DEFAULT_CATEGORY = "General Applications"

NAME_KEYWORDS = [
    "web application", "database", "api", "microservices", "e-commerce",
    "analytics", "mobile app", "data warehouse", "ml", "ai", "erp", "crm",
    "ebs", "cms", "blog", "portal", "dashboard",
]

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Web Applications": ["web", "website", "portal", "frontend", "backend", "api", "rest"],
    "E-commerce": ["ecommerce", "e-commerce", "shop", "store", "payment", "cart"],
    "Enterprise Applications": ["erp", "crm", "ebs", "enterprise", "business", "workflow"],
    "Data & Analytics": ["analytics", "warehouse", "etl", "bi", "reporting", "dashboard"],
    "AI & Machine Learning": ["ai", "ml", "machine learning", "neural", "training"],
    "Mobile Applications": ["mobile", "ios", "android", "app store", "react native"],
    "Infrastructure": ["infrastructure", "server", "compute", "storage", "network", "load balancer"],
    "Database Systems": ["database", "mysql", "postgresql", "oracle", "mongodb", "redis"],
    "Content Management": ["cms", "blog", "content", "publishing", "media", "document"],
    "IoT & Edge": ["iot", "edge", "sensor", "device", "embedded", "real-time"],
}

TAG_KEYWORDS: dict[str, list[str]] = {
    "high-availability": ["high availability", "ha", "99.9", "uptime", "failover"],
    "scalable": ["scale", "scalable", "elastic", "auto-scaling", "growth"],
    "secure": ["security", "secure", "encryption", "ssl", "authentication"],
    "cloud-native": ["cloud", "kubernetes", "container", "microservices"],
    "real-time": ["real-time", "real time", "streaming", "instant", "live"],
    "global": ["global", "worldwide", "multi-region", "international"],
    "backup": ["backup", "disaster recovery", "dr", "snapshot"],
    "monitoring": ["monitoring", "logging", "observability", "metrics"],
}

EDITABLE_FIELDS = {"name", "description", "category", "requirements", "follow_up_answers", "llm_provider", "tags"}


class SavedPromptService:

    def __init__(self, repository):
        self.repository = repository

    # ── CRUD ─────────────────────────────────────────────

    def list_prompts(self) -> list[SavedPrompt]:
        return sorted(self.repository.list_all(), key=lambda p: p.last_used, reverse=True)

    def get_prompt(self, prompt_id: str) -> SavedPrompt:
        prompt = self.repository.get(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(f"Prompt '{prompt_id}' not found")
        return prompt

    def save_prompt(
        self,
        requirements: str,
        follow_up_answers: Optional[dict[str, str]] = None,
        llm_provider: str = "openai",
        name: Optional[str] = None,
    ) -> SavedPrompt:
        if not requirements or not requirements.strip():
            raise ValidationError("Requirements are required to save a prompt", field="requirements")
        answers = follow_up_answers or {}
        prompt = SavedPrompt(
            id=self._generate_id(),
            name=name or self.generate_name(requirements),
            description=self.generate_description(requirements, answers),
            category=self.categorize(requirements, answers),
            requirements=requirements,
            follow_up_answers=answers,
            llm_provider=llm_provider,
            tags=self.extract_tags(requirements, answers),
            usage_count=1,
        )
        self.repository.save(prompt)
        logger.info(f"[PROMPTS] Saved new prompt '{prompt.name}' ({prompt.id})")
        return prompt

    def update_prompt(self, prompt_id: str, updates: dict[str, Any]) -> SavedPrompt:
        prompt = self.get_prompt(prompt_id)
        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS and v is not None}
        changes["last_used"] = datetime.now(timezone.utc)
        changes["usage_count"] = prompt.usage_count + 1
        updated = SavedPrompt(**{**prompt.model_dump(), **changes})
        self.repository.save(updated)
        return updated

    def increment_usage(self, prompt_id: str) -> SavedPrompt:
        prompt = self.get_prompt(prompt_id)
        updated = prompt.model_copy(update={
            "last_used": datetime.now(timezone.utc),
            "usage_count": prompt.usage_count + 1,
        })
        self.repository.save(updated)
        return updated

    def delete_prompt(self, prompt_id: str) -> None:
        if not self.repository.delete(prompt_id):
            raise PromptNotFoundError(f"Prompt '{prompt_id}' not found")
        logger.info(f"[PROMPTS] Deleted prompt {prompt_id}")

    def suggestions(self, partial_text: str, limit: int = 10) -> list[str]:
        """Frequent three-word phrases from saved prompts that relate to *partial_text*."""
        counts: Counter[str] = Counter()
        for prompt in self.repository.list_all():
            words = prompt.requirements.lower().split()
            for i in range(len(words) - 2):
                counts[" ".join(words[i:i + 3])] += 1
        partial = partial_text.lower().strip()
        top = [phrase for phrase, _ in counts.most_common(limit)]
        if not partial:
            return top
        return [p for p in top if partial in p or p in partial]

    # ── Derivations ──────────────────────────────────────

    @staticmethod
    def _generate_id() -> str:
        return f"prompt_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

    @staticmethod
    def generate_name(requirements: str) -> str:
        for keyword in NAME_KEYWORDS:
            if phrase_in_text(keyword, requirements):
                return f"BOM for {keyword.title()} System"
        first_words = " ".join(requirements.split()[:4])
        return f"BOM for {first_words.title()}"

    @staticmethod
    def categorize(requirements: str, follow_up_answers: dict[str, str]) -> str:
        text = " ".join([requirements, *map(str, follow_up_answers.values())])
        for category, keywords in CATEGORY_KEYWORDS.items():
            if any(phrase_in_text(k, text) for k in keywords):
                return category
        return DEFAULT_CATEGORY

    @staticmethod
    def generate_description(requirements: str, follow_up_answers: dict[str, str]) -> str:
        description = requirements[:100] + ("..." if len(requirements) > 100 else "")
        details: list[str] = []
        for answer in follow_up_answers.values():
            lowered = str(answer).lower()
            if "user" in lowered or "concurrent" in lowered:
                details.append(f"Users: {str(answer)[:50]}")
            elif "gb" in lowered or "cpu" in lowered:
                details.append(f"Specs: {str(answer)[:50]}")
        if details:
            description += " | " + " | ".join(details)
        return description

    @staticmethod
    def extract_tags(requirements: str, follow_up_answers: dict[str, str]) -> list[str]:
        text = " ".join([requirements, *map(str, follow_up_answers.values())])
        tags = [tag for tag, keywords in TAG_KEYWORDS.items() if any(phrase_in_text(k, text) for k in keywords)]
        return tags[:MAX_TAGS]
