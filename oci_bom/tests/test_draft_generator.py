"""
Tests: Draft generation orchestrator (completion service faked).

Run with:
    pytest oci_bom/tests/test_draft_generator.py -v
"""

import asyncio
import json
from decimal import Decimal

import pytest

from conftest import FakeCompletion
from oci_bom.errors import CompletionServiceError, DraftParseError, PromptTooLargeError
from oci_bom.models.enums import CategoryKey, DraftStage, LLMProvider
from oci_bom.models.schemas import BusinessIntent, MatchedService
from oci_bom.services.draft_generator import DraftGenerator


def _matched(services, *identifiers):
    by_id = {s.identifier: s for s in services}
    return [MatchedService(service=by_id[i], match_score=0.5) for i in identifiers]


def _intent():
    return BusinessIntent(categories={CategoryKey.DATABASE, CategoryKey.COMPUTE}, user_count=50)


class _FailingCompletion:
    async def complete(self, provider, system_prompt, user_prompt):
        raise CompletionServiceError(provider.value, "Timed out after 120s")


class TestGenerateDraft:
    def test_items_from_candidates(self, catalog_services, fake_completion):
        generator = DraftGenerator(completion=fake_completion)
        draft = asyncio.run(generator.generate_draft(
            _intent(), _matched(catalog_services, "B89728", "B88317"), LLMProvider.OPENAI,
        ))

        assert [i.identifier for i in draft.items] == ["B89728", "B88317"]
        assert draft.items[0].unit_price == Decimal("0.255")
        assert draft.items[0].sku_type == "DATABASE_BYOL"
        assert draft.items[1].billing_unit == "OCPU_HOUR"
        assert draft.provider == "openai"
        assert draft.stages[-1] == DraftStage.VALIDATED_SHALLOW
        assert not draft.validated

    def test_prompt_lists_candidates_and_constraints(self, catalog_services, fake_completion):
        generator = DraftGenerator(completion=fake_completion)
        asyncio.run(generator.generate_draft(_intent(), _matched(catalog_services, "B91969"), LLMProvider.CLAUDE))

        prompt = fake_completion.prompts[0]
        assert "B91969 | Load Balancer - Flexible - 10 Mbps" in prompt
        assert "Categories: compute, database" in prompt
        assert "Expected users: 50" in prompt

    def test_candidate_cap(self, catalog_services, fake_completion):
        generator = DraftGenerator(completion=fake_completion, candidate_cap=2)
        matched = [MatchedService(service=s, match_score=0.5) for s in catalog_services]
        draft = asyncio.run(generator.generate_draft(_intent(), matched, LLMProvider.OPENAI))
        assert len(draft.items) == 2

    def test_malformed_items_are_dropped(self, catalog_services):
        response = json.dumps({"items": [
            {"sku": "B89728", "description": "Base DB", "quantity": 2},
            {"sku": "B88317", "description": "Compute", "quantity": -1},
            {"sku": "B88318", "description": "Memory", "quantity": "lots"},
            {"description": "No identifier", "quantity": 1},
            {"sku": "ZZZ999", "description": "Unknown, no price", "quantity": 1},
            "not an object",
        ]})
        generator = DraftGenerator(completion=FakeCompletion(response))
        draft = asyncio.run(generator.generate_draft(
            _intent(), _matched(catalog_services, "B89728", "B88317"), LLMProvider.OPENAI,
        ))

        assert [i.identifier for i in draft.items] == ["B89728"]
        assert draft.items[0].unit_price == Decimal("0.255")
        assert draft.dropped_items == 5

    def test_catalog_category_wins_for_known_identifiers(self, catalog_services):
        response = json.dumps({"items": [
            {"sku": "B89728", "description": "Base DB", "quantity": 2, "category": "Compute"},
            {"sku": "B77777", "description": "Extra", "quantity": 1, "unitPrice": 0.1, "category": "Storage"},
        ]})
        generator = DraftGenerator(completion=FakeCompletion(response))
        draft = asyncio.run(generator.generate_draft(
            _intent(), _matched(catalog_services, "B89728"), LLMProvider.OPENAI,
        ))

        assert [(i.identifier, i.category) for i in draft.items] == [
            ("B89728", "Database"), ("B77777", "Storage"),
        ]

    def test_prompt_too_large(self, catalog_services, fake_completion):
        generator = DraftGenerator(completion=fake_completion, token_ceiling=10)
        with pytest.raises(PromptTooLargeError) as exc_info:
            asyncio.run(generator.generate_draft(_intent(), _matched(catalog_services, "B89728"), LLMProvider.OPENAI))

        assert exc_info.value.status_code == 413
        assert exc_info.value.limit == 10
        assert fake_completion.prompts == []

    def test_unparseable_response(self, catalog_services):
        generator = DraftGenerator(completion=FakeCompletion("Sorry, I can't help with that."))
        with pytest.raises(DraftParseError):
            asyncio.run(generator.generate_draft(_intent(), _matched(catalog_services, "B89728"), LLMProvider.OPENAI))

    def test_response_without_items(self, catalog_services):
        generator = DraftGenerator(completion=FakeCompletion('{"bom": []}'))
        with pytest.raises(DraftParseError, match="items"):
            asyncio.run(generator.generate_draft(_intent(), _matched(catalog_services, "B89728"), LLMProvider.OPENAI))

    def test_completion_failure_propagates(self, catalog_services):
        generator = DraftGenerator(completion=_FailingCompletion())
        with pytest.raises(CompletionServiceError):
            asyncio.run(generator.generate_draft(_intent(), _matched(catalog_services, "B89728"), LLMProvider.GROK))

    def test_token_estimate(self):
        assert DraftGenerator.estimate_tokens("a" * 400, "b" * 400) == 200
