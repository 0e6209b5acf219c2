"""Services — extraction, translation, matching, drafting, validation, rendering."""

from oci_bom.services.constraint_extractor import ConstraintExtractor
from oci_bom.services.intent_translator import BusinessIntentTranslator
from oci_bom.services.service_matcher import ServiceMatcher
from oci_bom.services.llm_service import CompletionService
from oci_bom.services.draft_generator import DraftGenerator
from oci_bom.services.compliance_validator import ComplianceValidator
from oci_bom.services.workbook_renderer import WorkbookRenderer
from oci_bom.services.document_service import DocumentTextService
from oci_bom.services.saved_prompts_service import SavedPromptService

__all__ = [
    "ConstraintExtractor",
    "BusinessIntentTranslator",
    "ServiceMatcher",
    "CompletionService",
    "DraftGenerator",
    "ComplianceValidator",
    "WorkbookRenderer",
    "DocumentTextService",
    "SavedPromptService",
]
