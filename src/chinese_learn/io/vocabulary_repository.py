"""Data access layer for chapter vocabulary."""

from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from chinese_learn.core import Vocabulary, require_chinese
from chinese_learn.io.api_client import ApiClient


class VocabularyRepository:
    """Typed access to vocabulary endpoints.

    Single-word create and update are sent as multipart forms so that an
    image file can travel with the text fields. Batch creation sends a
    JSON array in one request.
    """

    def __init__(self, api: ApiClient) -> None:
        if api is None:
            raise RuntimeError("ApiClient required")
        self.api = api

    def list_for_chapter(self, chapter_id: int) -> List[Vocabulary]:
        data = self.api.get(f"/chapters/{chapter_id}/vocabularies") or []
        return [Vocabulary.from_api(item) for item in data]

    def create_vocabulary(
        self,
        chapter_id: int,
        chinese: str,
        pinyin: str = "",
        meaning: str = "",
        image_path: Optional[Path] = None,
        image_url: str = "",
    ) -> Vocabulary:
        """Create one word in a chapter.

        Raises:
            ValueError: If chinese is blank.
            ApiError: If the request fails.
        """
        fields = _form_fields(chapter_id, chinese, pinyin, meaning)
        data = self._send_form("POST", f"/chapters/{chapter_id}/vocabularies", fields, image_path, image_url)
        return Vocabulary.from_api(data)

    def create_batch(self, chapter_id: int, records: Sequence[Dict[str, Any]]) -> List[Vocabulary]:
        """Create many words with one request.

        Args:
            chapter_id: Owning chapter.
            records: Objects shaped ``{chinese, pinyin, meaning, image_url}``.

        Returns:
            List[Vocabulary]: Created words as echoed by the backend (empty
            when the backend echoes nothing).

        Raises:
            ValueError: If records is empty.
            ApiError: If the request fails. Atomicity of the batch is
                owned by the backend.
        """
        if not records:
            raise ValueError("Cannot create an empty vocabulary batch")
        payload = [_batch_record(record) for record in records]
        data = self.api.post(f"/chapters/{chapter_id}/vocabularies/batch", json=payload)
        if not isinstance(data, list):
            return []
        return [Vocabulary.from_api(item) for item in data]

    def update_vocabulary(
        self,
        vocabulary_id: int,
        chapter_id: int,
        chinese: str,
        pinyin: str = "",
        meaning: str = "",
        image_path: Optional[Path] = None,
        image_url: str = "",
    ) -> Vocabulary:
        """Update a word in place.

        When both an image file and an image URL are given, the file wins.
        """
        fields = _form_fields(chapter_id, chinese, pinyin, meaning)
        data = self._send_form("PUT", f"/vocabularies/{vocabulary_id}", fields, image_path, image_url)
        return Vocabulary.from_api(data)

    def delete_vocabulary(self, vocabulary_id: int) -> None:
        self.api.delete(f"/vocabularies/{vocabulary_id}")

    def _send_form(
        self,
        method: str,
        path: str,
        fields: Dict[str, str],
        image_path: Optional[Path],
        image_url: str,
    ) -> Any:
        # (None, value) parts force multipart encoding even without a file
        parts: Dict[str, Any] = {name: (None, value) for name, value in fields.items()}
        with ExitStack() as stack:
            if image_path is not None:
                image_path = Path(image_path)
                handle = stack.enter_context(image_path.open("rb"))
                parts["image"] = (image_path.name, handle)
            elif image_url:
                parts["image_url"] = (None, image_url)
            if method == "POST":
                return self.api.post(path, files=parts)
            return self.api.put(path, files=parts)


def _form_fields(chapter_id: int, chinese: str, pinyin: str, meaning: str) -> Dict[str, str]:
    return {
        "chinese": require_chinese(chinese),
        "pinyin": pinyin or "",
        "meaning": meaning or "",
        "chapter_id": str(chapter_id),
    }


def _batch_record(record: Dict[str, Any]) -> Dict[str, str]:
    return {
        "chinese": require_chinese(record.get("chinese", "")),
        "pinyin": record.get("pinyin") or "",
        "meaning": record.get("meaning") or "",
        "image_url": record.get("image_url") or "",
    }
