"""
Configuration and environment handling for rentsearch.
"""
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""
    api_key: str = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    chat_model: str = Field(default_factory=lambda: os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini"))
    embedding_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")
    )
    max_tokens: int = Field(default=500)
    temperature: float = Field(default=0.1)
    timeout: float = Field(default_factory=lambda: float(os.getenv("OPENAI_TIMEOUT", "30")))


class SupabaseConfig(BaseModel):
    """Supabase (PostgREST) datastore configuration."""
    url: str = Field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    key: str = Field(default_factory=lambda: os.getenv("SUPABASE_KEY", ""))
    listings_table: str = Field(default="listings")
    settings_table: str = Field(default="ai_settings")
    match_function: str = Field(default="match_listings", description="Vector similarity RPC")
    timeout: float = Field(default_factory=lambda: float(os.getenv("SUPABASE_TIMEOUT", "15")))
    retry_attempts: int = Field(default=3)


class SearchConfig(BaseModel):
    """Search pipeline configuration."""
    candidate_limit: int = Field(default=50, description="Rows fetched for lexical scoring")
    default_limit: int = Field(default=10)
    default_min_similarity: float = Field(default=0.3)
    overfetch_factor: int = Field(default=2, description="Vector matches fetched per requested result")
    credential_cache_ttl: float = Field(
        default_factory=lambda: float(os.getenv("CREDENTIAL_CACHE_TTL", "0")),
        description="Seconds to cache the API key lookup (0 disables caching)",
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: Literal["text", "json"] = Field(
        default_factory=lambda: "json" if os.getenv("LOG_FORMAT", "text").lower() == "json" else "text"
    )


class Config(BaseModel):
    """Main configuration."""
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)


# Singleton config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the singleton config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None
