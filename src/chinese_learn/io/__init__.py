"""I/O layer - REST access and file readers."""

from .api_client import ApiClient, ApiError
from .chapter_repository import ChapterRepository
from .csv_vocabulary_reader import CsvVocabularyFile, CsvVocabularyReader
from .dialogue_repository import DialogueRepository
from .vocabulary_repository import VocabularyRepository

__all__ = [
    "ApiClient",
    "ApiError",
    "ChapterRepository",
    "VocabularyRepository",
    "DialogueRepository",
    "CsvVocabularyReader",
    "CsvVocabularyFile",
]
