"""
Service Catalog Provider — fetches the OCI price list, normalizes it into
CatalogService records and caches the result.

Any remote failure (timeout, transport error, bad status, malformed or empty
payload) is converted into the embedded fallback catalog, so callers always
receive a usable list.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from oci_bom.catalog.cache import CatalogCache, InMemoryTTLCache
from oci_bom.catalog.fallback_catalog import fallback_services
from oci_bom.catalog.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from oci_bom.config import get_settings
from oci_bom.errors import CatalogUnavailableError
from oci_bom.models.enums import CategoryKey, LicensingModel, Tier
from oci_bom.models.schemas import CatalogService, Pricing

logger = logging.getLogger(__name__)

CACHE_KEY = "oci_catalog:all_services"


class ServiceCatalogProvider:

    def __init__(
        self,
        cache: Optional[CatalogCache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    ):
        self.settings = get_settings()
        self.cache = cache if cache is not None else InMemoryTTLCache()
        self.taxonomy = taxonomy
        self._http_client = http_client

    # ── Public API ───────────────────────────────────────

    async def get_all_services(self) -> list[CatalogService]:
        cached = self.cache.get(CACHE_KEY)
        if cached is not None:
            logger.debug(f"[CATALOG] Cache hit ({len(cached)} services)")
            return list(cached)

        try:
            services = await self._fetch_remote()
            source = "remote"
        except CatalogUnavailableError as exc:
            logger.warning(f"[CATALOG] Remote catalog unavailable, using fallback: {exc}")
            services = fallback_services()
            source = "fallback"

        self.cache.put(CACHE_KEY, services, self.settings.catalog_cache_ttl_seconds)
        logger.info(f"[CATALOG] Loaded {len(services)} services from {source}")
        return list(services)

    async def get_categories(self) -> set[str]:
        services = await self.get_all_services()
        return {s.catalog_category for s in services if s.catalog_category}

    async def get_service(self, identifier: str) -> Optional[CatalogService]:
        wanted = identifier.upper()
        for service in await self.get_all_services():
            if service.identifier.upper() == wanted:
                return service
        return None

    async def get_services_by_category(self, category: CategoryKey) -> list[CatalogService]:
        return [s for s in await self.get_all_services() if s.category == category]

    # ── Remote fetch ─────────────────────────────────────

    async def _fetch_remote(self) -> list[CatalogService]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.settings.catalog_user_agent,
        }
        t0 = time.perf_counter()
        try:
            if self._http_client is not None:
                response = await self._http_client.get(
                    self.settings.catalog_base_url,
                    headers=headers,
                    timeout=self.settings.catalog_timeout_seconds,
                )
            else:
                async with httpx.AsyncClient(timeout=self.settings.catalog_timeout_seconds) as client:
                    response = await client.get(self.settings.catalog_base_url, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise CatalogUnavailableError(f"timed out after {self.settings.catalog_timeout_seconds}s") from exc
        except httpx.HTTPError as exc:
            raise CatalogUnavailableError(f"HTTP error: {exc}") from exc
        except ValueError as exc:
            raise CatalogUnavailableError(f"invalid JSON payload: {exc}") from exc

        elapsed = time.perf_counter() - t0
        records = _records_from_payload(payload)
        if records is None:
            raise CatalogUnavailableError("payload has no item list")

        services = [s for s in (self.normalize(r) for r in records) if s is not None]
        logger.info(
            f"[CATALOG] Remote fetch in {elapsed:.2f}s | "
            f"{len(records)} records → {len(services)} usable services"
        )
        if not services:
            raise CatalogUnavailableError("no usable services in payload")
        return services

    # ── Normalization ────────────────────────────────────

    def normalize(self, record: Any) -> Optional[CatalogService]:
        """Convert one raw catalog record; None when it cannot be used."""
        if not isinstance(record, dict):
            return None

        identifier = str(record.get("partNumber") or record.get("identifier") or "").strip()
        name = str(record.get("displayName") or record.get("name") or "").strip()
        if not identifier or not name:
            return None

        pricing = self._normalize_pricing(record)
        if pricing is None:
            logger.debug(f"[CATALOG] Dropping {identifier}: unusable pricing")
            return None

        label = str(record.get("serviceCategory") or record.get("category") or "").strip()
        sku_type = str(record.get("skuType") or "").strip()
        category = self.taxonomy.category_for_label(label) if label else CategoryKey.OTHER
        family = str(record.get("productFamily") or "")

        hit = self.taxonomy.product_for_sku_type(sku_type)
        if hit is not None:
            hit_category, product = hit
            family = family or product.key
            if category == CategoryKey.OTHER:
                category = hit_category

        product = self.taxonomy.product(family) if family else None
        return CatalogService(
            identifier=identifier,
            display_name=name,
            category=category,
            catalog_category=label or category.value.title(),
            sku_type=sku_type,
            product_family=family,
            tier=_normalize_tier(record.get("tier"), name),
            licensing_model=_normalize_licensing(record.get("licensingModel"), name),
            business_description=str(
                record.get("businessDescription") or (product.business_value if product else "")
            ),
            pricing=pricing,
        )

    def _normalize_pricing(self, record: dict[str, Any]) -> Optional[Pricing]:
        raw = record.get("pricing") if isinstance(record.get("pricing"), dict) else {}
        unit = str(raw.get("unit") or record.get("metricName") or "HOUR")
        metric_name = str(raw.get("metricName") or record.get("metricName") or "")
        model = str(raw.get("model") or "PAY_AS_YOU_GO")
        currency = str(raw.get("currency") or "USD")

        price: Any = None
        if raw.get("unitPrice") is not None:
            price = raw["unitPrice"]
        elif record.get("unitPrice") is not None:
            price = record["unitPrice"]
        elif record.get("price") is not None:
            price = record["price"]
        else:
            price = _usd_localized_price(record.get("currencyCodeLocalizations"))

        if price is None:
            # Pricing entirely absent: documented default
            return Pricing(
                currency="USD",
                unit_price=Decimal(str(self.settings.default_unit_price)),
                billing_unit="HOUR",
                model="PAY_AS_YOU_GO",
                metric_name=metric_name,
            )

        try:
            value = Decimal(str(price))
        except (InvalidOperation, ValueError):
            return None
        if not value.is_finite() or value < 0:
            return None
        return Pricing(
            currency=currency,
            unit_price=value,
            billing_unit=_billing_unit(unit),
            model=model,
            metric_name=metric_name,
        )


# ── Module helpers ───────────────────────────────────────

def _records_from_payload(payload: Any) -> Optional[list[Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("items", "data"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
            if isinstance(value, dict) and isinstance(value.get("items"), list):
                return value["items"]
    return None


def _usd_localized_price(localizations: Any) -> Any:
    if not isinstance(localizations, list):
        return None
    for entry in localizations:
        if not isinstance(entry, dict) or entry.get("currencyCode") != "USD":
            continue
        prices = entry.get("prices")
        if isinstance(prices, list) and prices and isinstance(prices[0], dict):
            return prices[0].get("value")
        return entry.get("price")
    return None


def _billing_unit(unit: str) -> str:
    """Normalize free-text metrics ("OCPU Per Hour") to unit codes (OCPU_HOUR)."""
    upper = unit.upper().replace("-", " ")
    if "_" in upper and " " not in upper:
        return upper
    if "MONTH" in upper:
        return "GB_MONTH" if "GB" in upper or "GIGABYTE" in upper else "MONTH"
    if "HOUR" in upper or "HR" in upper.split():
        if "OCPU" in upper:
            return "OCPU_HOUR"
        if "GB" in upper or "GIGABYTE" in upper:
            return "GB_HOUR"
        return "HOUR"
    return upper.replace(" ", "_") or "HOUR"


def _normalize_tier(raw: Any, name: str) -> Optional[Tier]:
    value = str(raw or "").lower()
    if value in ("enterprise", "premium", "high_performance"):
        return Tier.ENTERPRISE
    if value in ("standard", "basic"):
        return Tier.STANDARD
    lowered = name.lower()
    if any(word in lowered for word in ("exadata", "high performance", "autonomous")):
        return Tier.ENTERPRISE
    if "standard" in lowered:
        return Tier.STANDARD
    return None


def _normalize_licensing(raw: Any, name: str) -> Optional[LicensingModel]:
    value = str(raw or "").lower()
    if value == "byol":
        return LicensingModel.BYOL
    if value in ("license_included", "li"):
        return LicensingModel.LICENSE_INCLUDED
    lowered = name.lower()
    if "byol" in lowered or "bring your own" in lowered:
        return LicensingModel.BYOL
    if "license included" in lowered:
        return LicensingModel.LICENSE_INCLUDED
    return None
