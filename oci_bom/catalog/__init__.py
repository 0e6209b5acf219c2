"""Catalog — taxonomy, embedded fallback price list, cache and provider."""

from oci_bom.catalog.cache import CatalogCache, InMemoryTTLCache
from oci_bom.catalog.fallback_catalog import fallback_services
from oci_bom.catalog.provider import ServiceCatalogProvider
from oci_bom.catalog.taxonomy import DEFAULT_TAXONOMY, Taxonomy

__all__ = [
    "CatalogCache",
    "InMemoryTTLCache",
    "fallback_services",
    "ServiceCatalogProvider",
    "DEFAULT_TAXONOMY",
    "Taxonomy",
]
