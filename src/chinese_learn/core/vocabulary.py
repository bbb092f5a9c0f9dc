"""Vocabulary entity - a single Chinese word with reading and meaning."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Vocabulary:
    """A word belonging to a chapter.

    Only ``chinese`` is mandatory; pinyin, meaning and image_url are empty
    strings when the backend has nothing for them.
    """

    id: int
    chinese: str
    pinyin: str = ""
    meaning: str = ""
    image_url: str = ""
    chapter_id: Optional[int] = None
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Vocabulary":
        chapter_id = data.get("chapter_id")
        return cls(
            id=int(data["id"]),
            chinese=data.get("chinese") or "",
            pinyin=data.get("pinyin") or "",
            meaning=data.get("meaning") or "",
            image_url=data.get("image_url") or "",
            chapter_id=int(chapter_id) if chapter_id is not None else None,
            created_at=data.get("created_at"),
        )

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)


def require_chinese(chinese: str) -> str:
    """Return trimmed Chinese text or fail fast when it is blank.

    Raises:
        ValueError: If ``chinese`` is empty or whitespace-only.
    """
    text = chinese.strip() if isinstance(chinese, str) else ""
    if not text:
        raise ValueError("Chinese text is required")
    return text
