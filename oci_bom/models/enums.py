from enum import Enum


class CategoryKey(str, Enum):
    DATABASE = "database"
    COMPUTE = "compute"
    STORAGE = "storage"
    NETWORKING = "networking"
    OTHER = "other"


class Tier(str, Enum):
    STANDARD = "standard"
    ENTERPRISE = "enterprise"


class LicensingModel(str, Enum):
    BYOL = "byol"
    LICENSE_INCLUDED = "license_included"


class OptimizationGoal(str, Enum):
    COST = "cost"
    PERFORMANCE = "performance"


class ConstraintKind(str, Enum):
    RESTRICTIVE = "restrictive"
    EXCLUSION = "exclusion"
    IDENTIFIER = "identifier"


class LLMProvider(str, Enum):
    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    GROK = "grok"
    DEEPSEEK = "deepseek"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"


class DraftStage(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    PROMPT_BUILT = "PROMPT_BUILT"
    SERVICE_CALLED = "SERVICE_CALLED"
    RESPONSE_RECEIVED = "RESPONSE_RECEIVED"
    PARSED = "PARSED"
    VALIDATED_SHALLOW = "VALIDATED_SHALLOW"
    FAILED = "FAILED"


class StageName(str, Enum):
    CONSTRAINT_EXTRACTION = "constraint_extraction"
    INTENT_TRANSLATION = "intent_translation"
    SERVICE_MATCHING = "service_matching"
    DRAFT_GENERATION = "draft_generation"
    COMPLIANCE_VALIDATION = "compliance_validation"


class PipelineStatus(str, Enum):
    RECEIVED = "RECEIVED"
    EXTRACTING = "EXTRACTING"
    TRANSLATING = "TRANSLATING"
    MATCHING = "MATCHING"
    GENERATING = "GENERATING"
    VALIDATING = "VALIDATING"
    NEEDS_FOLLOW_UP = "NEEDS_FOLLOW_UP"
    INSUFFICIENT_CATALOG = "INSUFFICIENT_CATALOG"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
