"""
Embedded fallback catalog — served whenever the remote catalog is
unreachable, times out, or returns nothing usable.
"""

from __future__ import annotations

from decimal import Decimal

from oci_bom.models.enums import CategoryKey, LicensingModel, Tier
from oci_bom.models.schemas import CatalogService, Pricing

_STD = Tier.STANDARD
_ENT = Tier.ENTERPRISE
_BYOL = LicensingModel.BYOL
_LI = LicensingModel.LICENSE_INCLUDED

# identifier, display name, category, label, sku type, family, tier, licensing,
# description, billing unit, metric name, unit price
_FALLBACK_ROWS = [
    ("B89728", "Database - Base Database Service - BYOL", CategoryKey.DATABASE, "Database",
     "DATABASE_BYOL", "base_database", _STD, _BYOL,
     "Oracle Database with your existing licenses", "OCPU_HOUR", "OCPU Hour", "0.255"),
    ("B89730", "Database - Base Database Service - License Included", CategoryKey.DATABASE, "Database",
     "DATABASE_LI", "base_database", _STD, _LI,
     "Oracle Database with license included in pricing", "OCPU_HOUR", "OCPU Hour", "0.755"),
    ("B89729", "Database - Autonomous Database - OCPU Hour", CategoryKey.DATABASE, "Database",
     "DATABASE_AUTO", "autonomous_database", _ENT, _LI,
     "Self-managing Oracle Database with AI optimization", "OCPU_HOUR", "OCPU Hour", "0.72"),
    ("B91500", "Database - MySQL Database Service", CategoryKey.DATABASE, "Database",
     "MYSQL", "mysql", _STD, _LI,
     "Fully managed MySQL database service", "OCPU_HOUR", "OCPU Hour", "0.25"),
    ("B92000", "Database - Exadata Database Service", CategoryKey.DATABASE, "Database",
     "EXADATA", "exadata", _ENT, _BYOL,
     "High-performance engineered system for mission-critical databases", "OCPU_HOUR", "OCPU Hour", "1.85"),
    ("B88317", "Compute - Standard - E4 - OCPU Hour", CategoryKey.COMPUTE, "Compute",
     "OCPU", "standard_compute", _STD, None,
     "Standard virtual machine compute capacity", "OCPU_HOUR", "OCPU Hour", "0.0255"),
    ("B88318", "Compute - Standard - E4 - Memory GB Hour", CategoryKey.COMPUTE, "Compute",
     "MEMORY", "standard_compute", _STD, None,
     "Standard virtual machine memory", "GB_HOUR", "Memory GB Hour", "0.00255"),
    ("B88319", "Compute - Standard - E3 - OCPU Hour", CategoryKey.COMPUTE, "Compute",
     "OCPU", "standard_compute", _STD, None,
     "Previous generation standard compute", "OCPU_HOUR", "OCPU Hour", "0.0306"),
    ("B90100", "Compute - High Performance - HPC - OCPU Hour", CategoryKey.COMPUTE, "Compute",
     "HPC", "high_performance", _ENT, None,
     "High-performance compute for intensive workloads", "OCPU_HOUR", "OCPU Hour", "0.065"),
    ("B88514", "Block Storage - Performance", CategoryKey.STORAGE, "Storage",
     "BLOCK_STORAGE", "block_storage", _STD, None,
     "High-performance block storage for databases", "GB_MONTH", "Gigabyte Storage Capacity Per Month", "0.0255"),
    ("B88515", "Block Storage - Balanced", CategoryKey.STORAGE, "Storage",
     "BLOCK_STORAGE", "block_storage", _STD, None,
     "Balanced performance and cost block storage", "GB_MONTH", "Gigabyte Storage Capacity Per Month", "0.0425"),
    ("B91235", "Object Storage - Standard", CategoryKey.STORAGE, "Storage",
     "OBJECT_STORAGE", "object_storage", _STD, None,
     "Scalable object storage for backups and archives", "GB_MONTH", "Gigabyte Storage Capacity Per Month", "0.0255"),
    ("B91236", "File Storage - Standard", CategoryKey.STORAGE, "Storage",
     "FILE_STORAGE", "file_storage", _STD, None,
     "Shared file system storage", "GB_MONTH", "Gigabyte Storage Capacity Per Month", "0.085"),
    ("B91969", "Load Balancer - Flexible - 10 Mbps", CategoryKey.NETWORKING, "Networking",
     "LOAD_BALANCER", "load_balancer", _STD, None,
     "Basic load balancer for web applications", "HOUR", "Load Balancer Hour", "0.025"),
    ("B91968", "Load Balancer - Flexible - 100 Mbps", CategoryKey.NETWORKING, "Networking",
     "LOAD_BALANCER", "load_balancer", _STD, None,
     "Higher capacity load balancer", "HOUR", "Load Balancer Hour", "0.25"),
    ("B91234", "Virtual Cloud Network - NAT Gateway", CategoryKey.NETWORKING, "Networking",
     "NAT_GATEWAY", "vcn", _STD, None,
     "Secure outbound internet access for private resources", "HOUR", "Gateway Hour", "0.045"),
]


def fallback_services() -> list[CatalogService]:
    """Build a fresh list of the embedded catalog services."""
    services: list[CatalogService] = []
    for (identifier, name, category, label, sku_type, family, tier, licensing,
         description, unit, metric, price) in _FALLBACK_ROWS:
        services.append(
            CatalogService(
                identifier=identifier,
                display_name=name,
                category=category,
                catalog_category=label,
                sku_type=sku_type,
                product_family=family,
                tier=tier,
                licensing_model=licensing,
                business_description=description,
                pricing=Pricing(
                    currency="USD",
                    unit_price=Decimal(price),
                    billing_unit=unit,
                    model="PAY_AS_YOU_GO",
                    metric_name=metric,
                ),
            )
        )
    return services
