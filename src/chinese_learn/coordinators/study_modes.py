"""Study direction state objects for flashcard rendering."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from chinese_learn.core import Vocabulary

NO_MEANING = "No meaning available"


@dataclass(frozen=True)
class CardFace:
    """Content of one side of a flashcard.

    A Chinese face carries the characters, pinyin and image; a meaning
    face only carries ``meaning``.
    """

    chinese: str = ""
    pinyin: str = ""
    image_url: str = ""
    meaning: str = ""

    @property
    def is_chinese(self) -> bool:
        return bool(self.chinese)


def _chinese_face(vocab: Vocabulary) -> CardFace:
    return CardFace(chinese=vocab.chinese, pinyin=vocab.pinyin, image_url=vocab.image_url)


def _meaning_face(vocab: Vocabulary) -> CardFace:
    return CardFace(meaning=vocab.meaning or NO_MEANING)


class StudyDirection(ABC):
    """State interface for study directions (zh-en vs en-zh)."""

    name: str
    label: str

    @abstractmethod
    def front(self, vocab: Vocabulary) -> CardFace:
        """Face shown before the card is flipped."""

    @abstractmethod
    def back(self, vocab: Vocabulary) -> CardFace:
        """Face shown once the card is flipped."""

    def face(self, vocab: Vocabulary, flipped: bool) -> CardFace:
        return self.back(vocab) if flipped else self.front(vocab)

    @abstractmethod
    def toggle(self) -> StudyDirection:
        """Return the opposite direction."""


class ChineseToEnglish(StudyDirection):
    name = "zh-en"
    label = "Chinese → English"

    def front(self, vocab: Vocabulary) -> CardFace:
        return _chinese_face(vocab)

    def back(self, vocab: Vocabulary) -> CardFace:
        return _meaning_face(vocab)

    def toggle(self) -> StudyDirection:
        return ENGLISH_TO_CHINESE


class EnglishToChinese(StudyDirection):
    name = "en-zh"
    label = "English → Chinese"

    def front(self, vocab: Vocabulary) -> CardFace:
        return _meaning_face(vocab)

    def back(self, vocab: Vocabulary) -> CardFace:
        return _chinese_face(vocab)

    def toggle(self) -> StudyDirection:
        return CHINESE_TO_ENGLISH


CHINESE_TO_ENGLISH = ChineseToEnglish()
ENGLISH_TO_CHINESE = EnglishToChinese()


def create_study_direction(name: str) -> StudyDirection:
    """Factory returning the study direction for ``name``.

    Raises:
        ValueError: If an unknown direction name is provided.
    """
    if name == CHINESE_TO_ENGLISH.name:
        return CHINESE_TO_ENGLISH
    if name == ENGLISH_TO_CHINESE.name:
        return ENGLISH_TO_CHINESE
    raise ValueError(f"Unknown study direction: {name}")
