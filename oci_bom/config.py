"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "OCI BOM Generator"
    debug: bool = True

    # ── LLM providers ────────────────────────────────────
    default_llm_provider: str = "openai"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    gemini_api_key: str = ""
    grok_api_key: str = ""
    deepseek_api_key: str = ""
    openai_model: str = "gpt-4o"
    claude_model: str = "claude-3-5-sonnet-20241022"
    gemini_model: str = "gemini-2.5-pro"
    grok_model: str = "grok-beta"
    deepseek_model: str = "deepseek-chat"
    grok_base_url: str = "https://api.x.ai/v1"
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 4000
    llm_timeout_seconds: float = 120.0

    # ── Catalog ──────────────────────────────────────────
    catalog_base_url: str = "https://apexapps.oracle.com/pls/apex/cetools/api/v1/products/"
    catalog_timeout_seconds: float = 15.0
    catalog_cache_ttl_seconds: int = 3600
    catalog_user_agent: str = "OCI-BOM-Generator/2.0"
    default_unit_price: float = 0.05  # USD per hour, pay-as-you-go

    # ── Draft generation ─────────────────────────────────
    prompt_token_ceiling: int = 150_000
    prompt_candidate_cap: int = 15

    # ── Matching ─────────────────────────────────────────
    match_result_cap: int = 20
    match_min_score: float = 0.1
    budget_penalty: float = 0.7

    # ── Persistence ──────────────────────────────────────
    persistence_backend: str = "memory"  # "memory" | "mongo"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "oci_bom"

    # ── Uploads ──────────────────────────────────────────
    max_upload_bytes: int = 10 * 1024 * 1024

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
