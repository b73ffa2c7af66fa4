import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file from the project root
# This file: src/studyrag/config/settings.py
SERVER_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = SERVER_ROOT / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    # Fallback to simple load_dotenv which looks in cwd
    load_dotenv()


class Settings(BaseModel):
    """Global Application Settings"""

    # Environment
    ENV: str = Field(default="development", description="Environment: development, production, testing")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    # Chunking
    CHUNK_SIZE: int = Field(default=1000, gt=0, description="Characters per chunk")
    CHUNK_OVERLAP: int = Field(default=200, ge=0, description="Characters shared by consecutive chunks")

    # Embeddings
    EMBEDDING_PROVIDER: str = Field(default="openai", description="Embedder type: openai or mock")
    EMBEDDING_MODEL: str = Field(default="text-embedding-3-small", description="Embedding model name")
    EMBEDDING_DIMENSION: int = Field(default=1536, gt=0, description="Vector length expected by the store")
    EMBEDDING_BATCH_SIZE: int = Field(default=10, gt=0, description="Chunks embedded and inserted per batch")
    EMBEDDING_BASE_URL: str = Field(default="https://api.openai.com/v1", description="Embedding API base URL")

    # Storage
    VECTOR_STORE: str = Field(default="memory", description="Vector store type: memory or chroma")
    CHROMA_DB_PATH: str = Field(default="storage/chroma_db", description="Path to ChromaDB storage")
    DATABASE_URL: str = Field(default="sqlite://", description="SQLAlchemy URL for the document repository")

    # Retrieval
    CONTEXT_MAX_CHARS: int = Field(default=12000, gt=0, description="Upper bound on assembled context length")
    COLLECTION_CHUNK_LIMIT: int = Field(default=50, gt=0, description="Max chunks assembled for a whole collection")

    # Generation
    DEFAULT_PROVIDER: str = Field(default="openai", description="Chat provider used when none is chosen")

    # Model API Keys
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API Key")
    ANTHROPIC_API_KEY: Optional[str] = Field(default=None, description="Anthropic API Key")
    OPENROUTER_API_KEY: Optional[str] = Field(default=None, description="OpenRouter API Key")
    GROK_API_KEY: Optional[str] = Field(default=None, description="xAI Grok API Key")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }

    def api_key_for(self, provider: str) -> Optional[str]:
        """Return the environment-configured key for a canonical provider name."""
        return {
            "openai": self.OPENAI_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
            "openrouter": self.OPENROUTER_API_KEY,
            "grok": self.GROK_API_KEY,
        }.get(provider)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def load_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings(
        ENV=os.getenv("ENV", "development"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        CHUNK_SIZE=_env_int("CHUNK_SIZE", 1000),
        CHUNK_OVERLAP=_env_int("CHUNK_OVERLAP", 200),
        EMBEDDING_PROVIDER=os.getenv("EMBEDDING_PROVIDER", "openai"),
        EMBEDDING_MODEL=os.getenv("EMBEDDING_MODEL", "text-embedding-3-small"),
        EMBEDDING_DIMENSION=_env_int("EMBEDDING_DIMENSION", 1536),
        EMBEDDING_BATCH_SIZE=_env_int("EMBEDDING_BATCH_SIZE", 10),
        EMBEDDING_BASE_URL=os.getenv("EMBEDDING_BASE_URL", "https://api.openai.com/v1"),
        VECTOR_STORE=os.getenv("VECTOR_STORE", "memory"),
        CHROMA_DB_PATH=os.getenv("CHROMA_DB_PATH", str(SERVER_ROOT / "storage/chroma_db")),
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite://"),
        CONTEXT_MAX_CHARS=_env_int("CONTEXT_MAX_CHARS", 12000),
        COLLECTION_CHUNK_LIMIT=_env_int("COLLECTION_CHUNK_LIMIT", 50),
        DEFAULT_PROVIDER=os.getenv("DEFAULT_PROVIDER", "openai"),
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY"),
        ANTHROPIC_API_KEY=os.getenv("ANTHROPIC_API_KEY"),
        OPENROUTER_API_KEY=os.getenv("OPENROUTER_API_KEY"),
        GROK_API_KEY=os.getenv("GROK_API_KEY") or os.getenv("XAI_API_KEY"),
    )


# Global settings instance
settings = load_settings()
