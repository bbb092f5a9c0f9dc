"""Data access layer for chapters."""

from typing import List

from chinese_learn.core import Chapter
from chinese_learn.io.api_client import ApiClient


class ChapterRepository:
    """Typed access to the /chapters endpoints.

    Follows the failing-fast philosophy: backend failures surface as
    ApiError, invalid input as ValueError. A valid Chapter is always
    returned on success.
    """

    def __init__(self, api: ApiClient) -> None:
        if api is None:
            raise RuntimeError("ApiClient required")
        self.api = api

    def list_chapters(self) -> List[Chapter]:
        """Retrieve all chapters in backend order.

        Raises:
            ApiError: If the request fails.
        """
        data = self.api.get("/chapters") or []
        return [Chapter.from_api(item) for item in data]

    def get_chapter(self, chapter_id: int) -> Chapter:
        """Retrieve one chapter.

        The backend has no single-chapter endpoint, so the chapter is
        looked up in the full list.

        Raises:
            RuntimeError: If no chapter has this id.
        """
        for chapter in self.list_chapters():
            if chapter.id == chapter_id:
                return chapter
        raise RuntimeError(f"Chapter not found: {chapter_id}")

    def create_chapter(self, name: str, description: str = "") -> Chapter:
        """Create a chapter.

        Args:
            name: Chapter name (required, trimmed).
            description: Optional description.

        Returns:
            Chapter: The chapter echoed back with its new id.

        Raises:
            ValueError: If name is blank.
            ApiError: If the request fails.
        """
        payload = {"name": _require_name(name), "description": description or ""}
        return Chapter.from_api(self.api.post("/chapters", json=payload))

    def update_chapter(self, chapter_id: int, name: str, description: str = "") -> Chapter:
        payload = {"name": _require_name(name), "description": description or ""}
        return Chapter.from_api(self.api.put(f"/chapters/{chapter_id}", json=payload))

    def delete_chapter(self, chapter_id: int) -> None:
        """Delete a chapter; the backend cascades to its words and dialogues."""
        self.api.delete(f"/chapters/{chapter_id}")


def _require_name(name: str) -> str:
    text = (name or "").strip()
    if not text:
        raise ValueError("Chapter name is required")
    return text
