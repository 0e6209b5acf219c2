"""
Tests: Full pipeline flow — all conditional paths.

The catalog is offline (embedded fallback) and the completion service is
faked, so these run without network access or API keys.

Run with:
    pytest oci_bom/tests/test_pipeline.py -v
"""

import asyncio

import pytest

from oci_bom.errors import CompletionServiceError, ValidationError
from oci_bom.models.enums import LLMProvider, PipelineStatus, StageName
from oci_bom.orchestration.transitions import route_after_matching, route_after_translation


def _run(pipeline, text, answers=None, provider=LLMProvider.OPENAI):
    return asyncio.run(pipeline.run(text, provider, answers))


class TestHappyPath:
    def test_pipeline_completes_on_fallback_catalog(self, pipeline):
        state = _run(pipeline, "Two servers and a database behind a load balancer")

        assert state.status == PipelineStatus.COMPLETED
        assert state.catalog_size == 16
        assert state.draft is not None
        assert state.draft.items
        assert state.draft.validated
        assert state.draft.compliance_summary.rejected == 0

    def test_audit_trail_covers_every_stage(self, pipeline):
        state = _run(pipeline, "Two servers and a database behind a load balancer")

        stages = [entry.stage for entry in state.audit_trail]
        assert stages == [s.value for s in StageName]
        versions = [entry.state_version for entry in state.audit_trail]
        assert versions == sorted(versions)

    def test_hallucinated_compute_is_removed(self, pipeline, fake_completion):
        fake_completion.extra_items.append({
            "sku": "B88317",
            "description": "Compute - Standard - E4 - OCPU Hour",
            "quantity": 4,
            "unitPrice": 0.0255,
            "category": "Compute",
        })
        state = _run(pipeline, "Only consider Base Database Service. No app servers.")

        assert state.status == PipelineStatus.COMPLETED
        assert {i.identifier for i in state.draft.items} == {"B89728", "B89730"}
        summary = state.draft.compliance_summary
        assert summary.rejected == 1
        assert summary.rejections[0].identifier == "B88317"

    def test_excluded_item_reason_names_phrase(self, pipeline, fake_completion):
        fake_completion.extra_items.append({
            "sku": "B77777",
            "description": "Database App Server Tier",
            "quantity": 1,
            "unitPrice": 0.1,
            "category": "Database",
        })
        state = _run(pipeline, "Need a database. No app servers.")

        summary = state.draft.compliance_summary
        assert summary.rejected == 1
        assert any("app servers" in reason for reason in summary.rejections[0].reasons)
        assert all(i.identifier != "B77777" for i in state.draft.items)


class TestFollowUp:
    def test_unrecognizable_text_pauses(self, pipeline, fake_completion):
        state = _run(pipeline, "Hello there, can you help me with my project?")

        assert state.status == PipelineStatus.NEEDS_FOLLOW_UP
        assert state.follow_up_questions
        assert state.draft is None
        assert fake_completion.prompts == []

    def test_answers_are_folded_into_requirements(self, pipeline, fake_completion):
        state = _run(
            pipeline,
            "Hello there, can you help me with my project?",
            {"Which kinds of infrastructure do you need?": "A MySQL database and two compute instances"},
        )

        assert state.status == PipelineStatus.COMPLETED
        assert "Additional details:" in state.effective_requirements
        assert "B91500" in fake_completion.prompts[0]

    def test_answers_never_trigger_a_second_round(self, pipeline):
        state = _run(pipeline, "Hello there, can you help me with my project?", {"Anything?": "not sure"})

        assert state.status == PipelineStatus.INSUFFICIENT_CATALOG
        assert state.follow_up_questions == []


class TestTermination:
    def test_unsatisfiable_constraint(self, pipeline, fake_completion):
        state = _run(pipeline, "Only quantum annealers. Need a database.")

        assert state.status == PipelineStatus.INSUFFICIENT_CATALOG
        assert state.matched_services == []
        assert state.error_message
        assert fake_completion.prompts == []

    def test_empty_requirements(self, pipeline):
        with pytest.raises(ValidationError):
            _run(pipeline, "   ")

    def test_completion_failure_propagates(self, pipeline):
        class _Down:
            async def complete(self, provider, system_prompt, user_prompt):
                raise CompletionServiceError(provider.value, "Provider call failed: 503")

        pipeline.drafting.generator.completion = _Down()
        with pytest.raises(CompletionServiceError):
            _run(pipeline, "Two servers and a database")


class TestTransitions:
    def test_route_after_translation(self):
        assert route_after_translation({"status": PipelineStatus.NEEDS_FOLLOW_UP}) == "end_follow_up"
        assert route_after_translation({"status": PipelineStatus.MATCHING}) == "service_matching"

    def test_route_after_matching(self):
        assert route_after_matching({"status": PipelineStatus.GENERATING, "matched_services": [{}]}) == "draft_generation"
        assert route_after_matching({"status": PipelineStatus.GENERATING, "matched_services": []}) == "end_insufficient_catalog"
