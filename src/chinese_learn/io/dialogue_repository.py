"""Data access layer for dialogues and their sentences."""

from typing import Any, Dict, List, Optional, Sequence

from chinese_learn.core import DEFAULT_SPEAKER, Dialogue, Sentence, require_chinese
from chinese_learn.io.api_client import ApiClient


class DialogueRepository:
    """Typed access to dialogue and sentence endpoints.

    Dialogues returned by this repository always hold their sentences in
    ascending order, whatever order the backend used.
    """

    def __init__(self, api: ApiClient) -> None:
        if api is None:
            raise RuntimeError("ApiClient required")
        self.api = api

    def list_for_chapter(self, chapter_id: int) -> List[Dialogue]:
        data = self.api.get(f"/chapters/{chapter_id}/dialogues") or []
        return [Dialogue.from_api(item) for item in data]

    def create_dialogue(
        self,
        chapter_id: int,
        title: str,
        description: str = "",
        sentences: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> Dialogue:
        """Create a dialogue, optionally with its sentences, in one request.

        Args:
            chapter_id: Owning chapter.
            title: Dialogue title (required).
            description: Optional description.
            sentences: Objects shaped
                ``{speaker, chinese, pinyin, english, order}``.

        Raises:
            ValueError: If the title or a sentence's Chinese text is blank.
            ApiError: If the request fails.
        """
        payload: Dict[str, Any] = {
            "title": _require_title(title),
            "description": description or "",
        }
        if sentences:
            payload["sentences"] = [
                sentence_payload(**_sentence_kwargs(item), position=index)
                for index, item in enumerate(sentences, start=1)
            ]
        data = self.api.post(f"/chapters/{chapter_id}/dialogues", json=payload)
        return Dialogue.from_api(data)

    def update_dialogue(self, dialogue_id: int, title: str, description: str = "") -> Dialogue:
        payload = {"title": _require_title(title), "description": description or ""}
        return Dialogue.from_api(self.api.put(f"/dialogues/{dialogue_id}", json=payload))

    def delete_dialogue(self, dialogue_id: int) -> None:
        """Delete a dialogue together with its sentences."""
        self.api.delete(f"/dialogues/{dialogue_id}")

    def create_sentence(
        self,
        dialogue_id: int,
        chinese: str,
        speaker: str = DEFAULT_SPEAKER,
        pinyin: str = "",
        english: str = "",
        order: int = 1,
    ) -> Sentence:
        payload = sentence_payload(chinese, speaker, pinyin, english, order)
        return Sentence.from_api(self.api.post(f"/dialogues/{dialogue_id}/sentences", json=payload))

    def update_sentence(
        self,
        sentence_id: int,
        dialogue_id: int,
        chinese: str,
        speaker: str = DEFAULT_SPEAKER,
        pinyin: str = "",
        english: str = "",
        order: int = 1,
        audio_url: str = "",
    ) -> Sentence:
        payload = sentence_payload(chinese, speaker, pinyin, english, order)
        payload["dialogue_id"] = dialogue_id
        if audio_url:
            payload["audio_url"] = audio_url
        return Sentence.from_api(self.api.put(f"/sentences/{sentence_id}", json=payload))

    def delete_sentence(self, sentence_id: int) -> None:
        self.api.delete(f"/sentences/{sentence_id}")


def sentence_payload(
    chinese: str,
    speaker: str = DEFAULT_SPEAKER,
    pinyin: str = "",
    english: str = "",
    order: Optional[int] = None,
    position: int = 1,
) -> Dict[str, Any]:
    """Build the JSON body for a sentence.

    ``position`` is used as the order key when ``order`` is missing.
    """
    return {
        "speaker": (speaker or "").strip() or DEFAULT_SPEAKER,
        "chinese": require_chinese(chinese),
        "pinyin": pinyin or "",
        "english": english or "",
        "order": int(order) if order is not None else position,
    }


def _sentence_kwargs(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "chinese": item.get("chinese", ""),
        "speaker": item.get("speaker") or DEFAULT_SPEAKER,
        "pinyin": item.get("pinyin") or "",
        "english": item.get("english") or "",
        "order": item.get("order"),
    }


def _require_title(title: str) -> str:
    text = title.strip() if isinstance(title, str) else ""
    if not text:
        raise ValueError("Dialogue title is required")
    return text
