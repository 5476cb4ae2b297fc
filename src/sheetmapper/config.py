"""Configuration management for SheetMapper."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Matching thresholds
    semantic_threshold: float = float(os.getenv("SEMANTIC_THRESHOLD", "0.75"))  # Minimum cosine similarity for embedding matches
    fuzzy_threshold: float = float(os.getenv("FUZZY_THRESHOLD", "0.8"))  # Edit-distance ratio must be strictly above this
    fallback_threshold: float = float(os.getenv("FALLBACK_THRESHOLD", "0.4"))  # Minimum keyword-overlap score
    fallback_cap: float = float(os.getenv("FALLBACK_CAP", "0.85"))  # Keyword-overlap scores never exceed this
    fallback_name_bonus: float = float(os.getenv("FALLBACK_NAME_BONUS", "1.1"))
    word_similarity_threshold: float = float(os.getenv("WORD_SIMILARITY_THRESHOLD", "0.7"))

    # Similarity cache
    cache_capacity: int = int(os.getenv("CACHE_CAPACITY", "1000"))

    # Embedding provider ('huggingface' or 'none')
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "huggingface")
    embedding_init_timeout: float = float(os.getenv("EMBEDDING_INIT_TIMEOUT", "3.0"))  # Seconds
    embedding_call_timeout: float = float(os.getenv("EMBEDDING_CALL_TIMEOUT", "5.0"))  # Seconds

    # Hugging Face inference API
    huggingface_api_key: Optional[str] = os.getenv("HUGGING_FACE_API_KEY")
    huggingface_model: str = os.getenv("HUGGING_FACE_MODEL", "sentence-transformers/all-MiniLM-L6-v2")
    huggingface_base_url: str = os.getenv(
        "HUGGING_FACE_BASE_URL", "https://router.huggingface.co/hf-inference/models"
    )

    # Entity classification
    classifier_sample_size: int = int(os.getenv("CLASSIFIER_SAMPLE_SIZE", "5"))
    classifier_field_limit: int = int(os.getenv("CLASSIFIER_FIELD_LIMIT", "3"))
    classifier_min_keyword_hits: int = int(os.getenv("CLASSIFIER_MIN_KEYWORD_HITS", "2"))
    classifier_max_keyword_confidence: float = float(
        os.getenv("CLASSIFIER_MAX_KEYWORD_CONFIDENCE", "0.95")
    )

    # Headers matched concurrently per batch
    batch_size: int = int(os.getenv("BATCH_SIZE", "10"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()


settings = Settings()
