"""SearchResult entity representing a retrieval result."""

from pydantic import BaseModel, Field

from .chunk import Chunk


class SearchResult(BaseModel):
    """Represents a search result with relevance score.

    Attributes:
        chunk: The retrieved chunk
        score: Cosine similarity in range [-1, 1]; higher is more relevant
    """

    chunk: Chunk
    score: float = Field(..., ge=-1.0, le=1.0)

    model_config = {
        "frozen": True,  # Results are immutable
    }

    def __lt__(self, other: "SearchResult") -> bool:
        """Enable sorting by score (descending)."""
        return self.score > other.score
