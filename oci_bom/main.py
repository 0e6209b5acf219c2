"""
OCI BOM Generator — Main Entry Point

Run the pipeline directly (CLI):
    python -m oci_bom "Two web servers and a MySQL database for 500 users"
    python -m oci_bom --provider claude --output bom.xlsx "..."

Run as an API server (for the frontend):
    python -m oci_bom --serve
    # or: uvicorn oci_bom.api:app --reload --port 8000

Or import and run programmatically:
    from oci_bom.main import run
    state = run("Requirements text ...")
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from oci_bom.models.enums import LLMProvider, PipelineStatus
from oci_bom.models.state import BOMPipelineState
from oci_bom.orchestration.graph import run_pipeline
from oci_bom.services.workbook_renderer import WorkbookRenderer, monthly_cost
from oci_bom.utils.logger import setup_logging


def run(
    requirements: str,
    provider: LLMProvider = LLMProvider.OPENAI,
    output_path: Optional[str] = None,
) -> BOMPipelineState:
    """Run the full BOM pipeline and return the final state."""
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("  OCI BOM GENERATOR")
    logger.info(f"  Provider: {provider.value} | Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    final_state = asyncio.run(run_pipeline(requirements, provider))

    _print_summary(final_state)

    if output_path and final_state.status == PipelineStatus.COMPLETED and final_state.draft:
        Path(output_path).write_bytes(WorkbookRenderer().render(final_state.draft))
        logger.info(f"Workbook written to {output_path}")

    return final_state


def _print_summary(state: BOMPipelineState) -> None:
    """Print a human-readable summary of the pipeline result."""
    logger = logging.getLogger(__name__)

    logger.info("")
    logger.info("-" * 60)
    logger.info("  PIPELINE RESULT SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Final Status:   {state.status.value}")
    logger.info(f"  Constraints:    {state.constraint_summary or 'none'}")
    logger.info(f"  Categories:     {', '.join(sorted(c.value for c in state.intent.categories)) or 'none'}")
    logger.info(f"  Catalog size:   {state.catalog_size}")
    logger.info(f"  Candidates:     {len(state.matched_services)}")

    if state.status == PipelineStatus.NEEDS_FOLLOW_UP:
        for question in state.follow_up_questions:
            logger.info(f"  ? {question}")

    if state.draft is not None:
        total = sum(monthly_cost(i.quantity, i.unit_price, i.billing_unit) for i in state.draft.items)
        logger.info(f"  Line items:     {len(state.draft.items)}")
        for item in state.draft.items:
            logger.info(f"    {item.identifier:<10} x{item.quantity:<8g} {item.description}")
        summary = state.draft.compliance_summary
        if summary:
            logger.info(f"  Compliance:     {summary.approved} approved, {summary.rejected} rejected")
        logger.info(f"  Monthly total:  ${total:,.2f}")

    logger.info("-" * 60)

    logger.info(f"\n  Audit Trail: {len(state.audit_trail)} entries")
    for entry in state.audit_trail:
        logger.info(
            f"    v{entry.state_version} | "
            f"{entry.stage} | "
            f"{entry.action} | "
            f"{entry.details}"
        )
    logger.info("")


def serve(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Start the FastAPI server (for frontend communication)."""
    import uvicorn

    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("oci_bom.api:app", host=host, port=port, reload=True)
