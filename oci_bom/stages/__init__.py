from .base_stage import BaseStage
from .extraction_stage import ConstraintExtractionStage
from .translation_stage import IntentTranslationStage
from .matching_stage import ServiceMatchingStage
from .drafting_stage import DraftGenerationStage
from .validation_stage import ComplianceValidationStage

__all__ = [
    "BaseStage",
    "ConstraintExtractionStage",
    "IntentTranslationStage",
    "ServiceMatchingStage",
    "DraftGenerationStage",
    "ComplianceValidationStage",
]
