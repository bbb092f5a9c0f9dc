"""Chapter entity - a named group of vocabulary and dialogues."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Chapter:
    """Represents a chapter as echoed back by the backend.

    Attributes:
        id: Identifier assigned by the backend.
        name: Display name, e.g. "HSK 1 - Chapter 1".
        description: Free-text description (may be empty).
        created_at: Creation timestamp string, if the backend sent one.
    """

    id: int
    name: str
    description: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Chapter":
        """Build a Chapter from a backend JSON object."""
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            description=data.get("description") or "",
            created_at=data.get("created_at"),
        )
