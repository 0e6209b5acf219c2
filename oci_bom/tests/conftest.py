"""
Shared fixtures: an offline catalog (remote always times out → embedded
fallback) and a fake completion service that answers with one line item
per candidate listed in the prompt.
"""

import json
import re

import httpx
import pytest

from oci_bom.catalog.cache import InMemoryTTLCache
from oci_bom.catalog.fallback_catalog import fallback_services
from oci_bom.catalog.provider import ServiceCatalogProvider
from oci_bom.orchestration.graph import BOMPipeline

_CANDIDATE_RE = re.compile(
    r"^- (?P<sku>\S+) \| (?P<name>.+?) \| (?P<category>.+?) \| (?P<price>[\d.]+) \w+ \| (?P<unit>\S+)$"
)


class FakeCompletion:
    """Stands in for CompletionService; records every prompt it receives."""

    def __init__(self, response=None):
        self.response = response
        self.extra_items: list[dict] = []
        self.prompts: list[str] = []

    async def complete(self, provider, system_prompt, user_prompt):
        self.prompts.append(user_prompt)
        if self.response is not None:
            return self.response
        items = []
        for line in user_prompt.splitlines():
            match = _CANDIDATE_RE.match(line)
            if match:
                items.append({
                    "sku": match["sku"],
                    "description": match["name"],
                    "quantity": 2,
                    "metric": match["unit"],
                    "unitPrice": float(match["price"]),
                    "category": match["category"],
                    "notes": "",
                })
        items.extend(self.extra_items)
        return "```json\n" + json.dumps({"items": items}, indent=2) + "\n```"


def _timeout_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectTimeout("catalog unreachable", request=request)


@pytest.fixture
def catalog_services():
    return fallback_services()


@pytest.fixture
def offline_catalog():
    client = httpx.AsyncClient(transport=httpx.MockTransport(_timeout_handler))
    return ServiceCatalogProvider(cache=InMemoryTTLCache(), http_client=client)


@pytest.fixture
def fake_completion():
    return FakeCompletion()


@pytest.fixture
def pipeline(offline_catalog, fake_completion):
    return BOMPipeline(catalog=offline_catalog, completion=fake_completion)
