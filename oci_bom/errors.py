"""
Error taxonomy for the BOM pipeline.

Every error the API can surface carries the HTTP status it maps to;
`CatalogUnavailableError` never leaves the catalog provider.
"""

from __future__ import annotations

from typing import Optional

from oci_bom.models.enums import DraftStage


class BOMError(Exception):
    """Base class for all pipeline errors."""

    status_code: int = 500
    title: str = "BOM generation failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BOMError):
    """Malformed request input. Surfaced immediately."""

    status_code = 400
    title = "Validation failed"

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class UnsupportedDocumentError(ValidationError):
    """Uploaded document type cannot be turned into text."""


class CatalogUnavailableError(BOMError):
    """Remote catalog fetch failed. Callers fall back to the embedded catalog."""

    status_code = 503
    title = "Catalog unavailable"


class InsufficientCatalogError(BOMError):
    """No catalog service covers the request."""

    status_code = 422
    title = "Insufficient catalog data"


class PromptTooLargeError(BOMError):
    status_code = 413
    title = "Prompt too large"

    def __init__(self, estimated_tokens: int, limit: int):
        super().__init__(
            f"Estimated prompt size {estimated_tokens} tokens exceeds the limit of {limit}"
        )
        self.estimated_tokens = estimated_tokens
        self.limit = limit
        self.stage = DraftStage.FAILED


class CompletionServiceError(BOMError):
    """Provider unreachable, timed out, or returned an error."""

    title = "Completion service error"

    def __init__(self, provider: str, message: str, stage: DraftStage = DraftStage.SERVICE_CALLED):
        super().__init__(f"[{provider}] {message}")
        self.provider = provider
        self.stage = stage


class DraftParseError(BOMError):
    """All JSON repair strategies exhausted on the completion response."""

    title = "Could not parse generated BOM"

    def __init__(self, message: str, raw_response: str = "", last_error: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response
        self.last_error = last_error
        self.stage = DraftStage.FAILED


class PromptNotFoundError(BOMError):
    status_code = 404
    title = "Saved prompt not found"
