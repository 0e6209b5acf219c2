"""
OCI service taxonomy — the immutable mapping between customer language
and catalog structure.

One `Taxonomy` instance (`DEFAULT_TAXONOMY`) is built at import time and
passed explicitly to the extractor, the translator, the matcher and the
catalog provider.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict

from oci_bom.models.enums import CategoryKey, LicensingModel, OptimizationGoal, Tier
from oci_bom.models.schemas import PreferenceEffect


# ── Taxonomy models ──────────────────────────────────────

class ProductDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    patterns: tuple[str, ...]
    sku_types: tuple[str, ...]
    business_value: str = ""


class CategoryDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: CategoryKey
    catalog_labels: tuple[str, ...]
    terms: tuple[str, ...]
    products: tuple[ProductDefinition, ...]


class PreferenceRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    phrase: str
    effect: PreferenceEffect


class SizingBand(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_users: int
    max_users: int
    label: str
    description: str


class Taxonomy(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[CategoryDefinition, ...]
    preferences: tuple[PreferenceRule, ...]
    sizing_bands: tuple[SizingBand, ...]
    # First tier present wins when matched phrases disagree
    tier_precedence: tuple[Tier, ...] = (Tier.STANDARD, Tier.ENTERPRISE)

    def category(self, key: CategoryKey) -> Optional[CategoryDefinition]:
        for definition in self.categories:
            if definition.key == key:
                return definition
        return None

    def product(self, product_key: str) -> Optional[ProductDefinition]:
        for definition in self.categories:
            for product in definition.products:
                if product.key == product_key:
                    return product
        return None

    def category_for_label(self, label: str) -> CategoryKey:
        """Map a raw catalog category label ("Block Storage") to a category key."""
        lowered = (label or "").lower()
        for definition in self.categories:
            if any(lbl.lower() in lowered for lbl in definition.catalog_labels):
                return definition.key
        return CategoryKey.OTHER

    def product_for_sku_type(self, sku_type: str) -> Optional[tuple[CategoryKey, ProductDefinition]]:
        upper = (sku_type or "").upper()
        if not upper:
            return None
        for definition in self.categories:
            for product in definition.products:
                if upper in product.sku_types:
                    return definition.key, product
        return None

    def resolve_preferences(self, found: dict[str, PreferenceEffect]) -> PreferenceEffect:
        """Fold matched preference effects into one. Licensing: later table entries win."""
        effects = list(found.values())
        tiers = {e.tier for e in effects if e.tier}
        tier = next((t for t in self.tier_precedence if t in tiers), None)
        optimize = next((e.optimize for e in effects if e.optimize and e.tier == tier), None)
        if optimize is None:
            optimize = next((e.optimize for e in effects if e.optimize), None)
        licensing = None
        for effect in effects:
            licensing = effect.licensing or licensing
        return PreferenceEffect(tier=tier, licensing=licensing, optimize=optimize)

    def sizing_for(self, user_count: Optional[int]) -> Optional[SizingBand]:
        if not user_count:
            return None
        for band in self.sizing_bands:
            if band.min_users <= user_count <= band.max_users:
                return band
        return self.sizing_bands[-1] if user_count > self.sizing_bands[-1].max_users else None


# ── Text helpers shared by extractor and translator ──────

_USER_COUNT_RE = re.compile(r"(\d[\d,]*)\s*(?:users?|people|employees?|concurrent)\b", re.IGNORECASE)


def phrase_in_text(phrase: str, text: str) -> bool:
    """Word-start bounded substring test ("server" hits "servers", "lb" misses "bulb")."""
    return re.search(r"(?<![a-z0-9])" + re.escape(phrase.lower()), text.lower()) is not None


def scan_preferences(text: str, taxonomy: "Taxonomy") -> dict[str, PreferenceEffect]:
    """Return every preference phrase present in *text*, in table order."""
    found: dict[str, PreferenceEffect] = {}
    for rule in taxonomy.preferences:
        if phrase_in_text(rule.phrase, text):
            found[rule.phrase] = rule.effect
    return found


def extract_user_count(text: str) -> Optional[int]:
    match = _USER_COUNT_RE.search(text or "")
    if not match:
        return None
    try:
        return int(match.group(1).replace(",", ""))
    except ValueError:
        return None


# ── Default taxonomy ─────────────────────────────────────

def _pref(phrase: str, **effect) -> PreferenceRule:
    return PreferenceRule(phrase=phrase, effect=PreferenceEffect(**effect))


_COST = {"tier": Tier.STANDARD, "optimize": OptimizationGoal.COST}
_PERFORMANCE = {"tier": Tier.ENTERPRISE, "optimize": OptimizationGoal.PERFORMANCE}

DEFAULT_TAXONOMY = Taxonomy(
    categories=(
        CategoryDefinition(
            key=CategoryKey.DATABASE,
            catalog_labels=("Database",),
            terms=("database", "db", "oracle database"),
            products=(
                ProductDefinition(
                    key="base_database",
                    name="Base Database Service",
                    patterns=("base database", "base db", "database service"),
                    sku_types=("DATABASE_BYOL", "DATABASE_LI"),
                    business_value="Standard Oracle Database for general workloads",
                ),
                ProductDefinition(
                    key="autonomous_database",
                    name="Autonomous Database",
                    patterns=("autonomous", "adb"),
                    sku_types=("DATABASE_AUTO", "ADB"),
                    business_value="Self-managing database with built-in optimization",
                ),
                ProductDefinition(
                    key="exadata",
                    name="Exadata Database Service",
                    patterns=("exadata",),
                    sku_types=("EXADATA", "EXADATA_CC"),
                    business_value="Engineered system for mission-critical workloads",
                ),
                ProductDefinition(
                    key="mysql",
                    name="MySQL Database Service",
                    patterns=("mysql",),
                    sku_types=("MYSQL", "MYSQL_SHAPE"),
                    business_value="Fully managed MySQL service",
                ),
            ),
        ),
        CategoryDefinition(
            key=CategoryKey.COMPUTE,
            catalog_labels=("Compute",),
            terms=("compute", "server", "instance", "vm", "virtual machine"),
            products=(
                ProductDefinition(
                    key="standard_compute",
                    name="Standard Compute",
                    patterns=("standard compute", "general purpose", "virtual machine", "vm"),
                    sku_types=("OCPU", "MEMORY", "COMPUTE"),
                    business_value="Flexible virtual machines for general workloads",
                ),
                ProductDefinition(
                    key="high_performance",
                    name="High Performance Compute",
                    patterns=("hpc", "high performance compute", "performance compute"),
                    sku_types=("HPC", "GPU_OCPU"),
                    business_value="Optimized for compute-intensive applications",
                ),
                ProductDefinition(
                    key="gpu_instances",
                    name="GPU Instances",
                    patterns=("gpu", "graphics", "ai compute", "machine learning"),
                    sku_types=("GPU", "GPU_MEMORY"),
                    business_value="GPU-accelerated compute for AI/ML workloads",
                ),
            ),
        ),
        CategoryDefinition(
            key=CategoryKey.STORAGE,
            catalog_labels=("Storage",),
            terms=("storage", "disk", "backup"),
            products=(
                ProductDefinition(
                    key="block_storage",
                    name="Block Volume Storage",
                    patterns=("block storage", "block volume", "disk storage"),
                    sku_types=("BLOCK_STORAGE", "STORAGE"),
                    business_value="Persistent storage for instances",
                ),
                ProductDefinition(
                    key="object_storage",
                    name="Object Storage",
                    patterns=("object storage", "bucket", "backup"),
                    sku_types=("OBJECT_STORAGE",),
                    business_value="Scalable storage for unstructured data and backups",
                ),
                ProductDefinition(
                    key="file_storage",
                    name="File Storage Service",
                    patterns=("file storage", "nfs", "shared storage"),
                    sku_types=("FILE_STORAGE",),
                    business_value="Shared file system storage",
                ),
            ),
        ),
        CategoryDefinition(
            key=CategoryKey.NETWORKING,
            catalog_labels=("Networking", "Network"),
            terms=("network", "load balancer", "load balancing"),
            products=(
                ProductDefinition(
                    key="load_balancer",
                    name="Load Balancer",
                    patterns=("load balancer", "load balancing", "lb"),
                    sku_types=("LOAD_BALANCER", "LB"),
                    business_value="Distribute traffic across multiple servers",
                ),
                ProductDefinition(
                    key="vcn",
                    name="Virtual Cloud Network",
                    patterns=("vcn", "virtual network", "cloud network", "nat gateway"),
                    sku_types=("VCN", "NAT_GATEWAY"),
                    business_value="Private network infrastructure in the cloud",
                ),
            ),
        ),
    ),
    preferences=(
        _pref("budget-conscious", **_COST),
        _pref("budget conscious", **_COST),
        _pref("cost-effective", **_COST),
        _pref("cost effective", **_COST),
        _pref("basic", **_COST),
        _pref("cheap", **_COST),
        _pref("high-performance", **_PERFORMANCE),
        _pref("enterprise", **_PERFORMANCE),
        _pref("premium", **_PERFORMANCE),
        _pref("fast", **_PERFORMANCE),
        _pref("existing oracle licenses", licensing=LicensingModel.BYOL),
        _pref("existing license", licensing=LicensingModel.BYOL),
        _pref("own license", licensing=LicensingModel.BYOL),
        _pref("bring your own", licensing=LicensingModel.BYOL),
        _pref("byol", licensing=LicensingModel.BYOL),
        _pref("license included", licensing=LicensingModel.LICENSE_INCLUDED),
        _pref("new license", licensing=LicensingModel.LICENSE_INCLUDED),
    ),
    sizing_bands=(
        SizingBand(min_users=1, max_users=25, label="standard_small", description="Small business"),
        SizingBand(min_users=26, max_users=100, label="standard_medium", description="Medium business"),
        SizingBand(min_users=101, max_users=500, label="standard_large", description="Large business"),
        SizingBand(min_users=501, max_users=1000, label="enterprise_small", description="Enterprise"),
        SizingBand(min_users=1001, max_users=5000, label="enterprise_large", description="Large enterprise"),
    ),
)
