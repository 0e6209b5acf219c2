"""Rules — constraint pattern tables and the shared hard checks."""

from oci_bom.rules.constraint_rules import ConstraintRules, ServiceView
from oci_bom.rules.rules_config import RulesConfigStore

__all__ = ["ConstraintRules", "ServiceView", "RulesConfigStore"]
