"""
Service Matching Stage — loads the catalog (cache, remote or fallback)
and produces the ranked candidate list.
"""

from __future__ import annotations

import logging
from typing import Optional

from oci_bom.catalog.provider import ServiceCatalogProvider
from oci_bom.models.enums import PipelineStatus, StageName
from oci_bom.models.state import BOMPipelineState
from oci_bom.services.service_matcher import ServiceMatcher
from oci_bom.stages.base_stage import BaseStage

logger = logging.getLogger(__name__)


class ServiceMatchingStage(BaseStage):
    name = StageName.SERVICE_MATCHING

    def __init__(
        self,
        catalog: Optional[ServiceCatalogProvider] = None,
        matcher: Optional[ServiceMatcher] = None,
    ):
        self.catalog = catalog or ServiceCatalogProvider()
        self.matcher = matcher or ServiceMatcher()

    async def _real_process(self, state: BOMPipelineState) -> BOMPipelineState:
        services = await self.catalog.get_all_services()
        state.catalog_size = len(services)
        state.matched_services = self.matcher.match(services, state.intent)

        if not state.matched_services:
            state.status = PipelineStatus.INSUFFICIENT_CATALOG
            state.error_message = "No catalog services match the stated requirements and constraints"
            logger.warning(f"[{self.name.value}] {state.error_message}")
            return state

        state.status = PipelineStatus.GENERATING
        return state
