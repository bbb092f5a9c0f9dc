"""Domain layer - entities mirrored from the backend."""

from .chapter import Chapter
from .dialogue import DEFAULT_SPEAKER, Dialogue, Sentence, sort_sentences
from .vocabulary import Vocabulary, require_chinese

__all__ = [
    "Chapter",
    "Vocabulary",
    "Dialogue",
    "Sentence",
    "DEFAULT_SPEAKER",
    "sort_sentences",
    "require_chinese",
]
