"""Dialogue and Sentence entities."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

DEFAULT_SPEAKER = "A"


@dataclass(frozen=True)
class Sentence:
    """One line of a dialogue, attributed to a speaker."""

    id: int
    dialogue_id: Optional[int]
    chinese: str
    speaker: str = DEFAULT_SPEAKER
    pinyin: str = ""
    english: str = ""
    audio_url: str = ""
    order: int = 0
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Sentence":
        dialogue_id = data.get("dialogue_id")
        return cls(
            id=int(data["id"]),
            dialogue_id=int(dialogue_id) if dialogue_id is not None else None,
            chinese=data.get("chinese") or "",
            speaker=(data.get("speaker") or "").strip() or DEFAULT_SPEAKER,
            pinyin=data.get("pinyin") or "",
            english=data.get("english") or "",
            audio_url=data.get("audio_url") or "",
            order=int(data.get("order") or 0),
            created_at=data.get("created_at"),
        )

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)


def sort_sentences(sentences: Iterable[Sentence]) -> List[Sentence]:
    """Sort ascending by order key.

    ``sorted`` is stable, so sentences sharing an order key keep the
    position they had in the input.
    """
    return sorted(sentences, key=lambda s: s.order)


@dataclass(frozen=True)
class Dialogue:
    """A titled conversation owning an ordered list of sentences."""

    id: int
    chapter_id: Optional[int]
    title: str
    description: str = ""
    sentences: List[Sentence] = field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Dialogue":
        chapter_id = data.get("chapter_id")
        sentences = [Sentence.from_api(item) for item in data.get("sentences") or []]
        return cls(
            id=int(data["id"]),
            chapter_id=int(chapter_id) if chapter_id is not None else None,
            title=data.get("title") or "",
            description=data.get("description") or "",
            sentences=sort_sentences(sentences),
            created_at=data.get("created_at"),
        )

    def ordered_sentences(self) -> List[Sentence]:
        """Sentences in presentation order."""
        return sort_sentences(self.sentences)

    def with_sentences(self, sentences: Iterable[Sentence]) -> "Dialogue":
        """Return a copy holding ``sentences`` in presentation order."""
        return replace(self, sentences=sort_sentences(sentences))

    def next_sentence_order(self) -> int:
        """Order key to suggest for a new sentence appended at the end."""
        if not self.sentences:
            return 1
        return max(s.order for s in self.sentences) + 1
