"""
Chinese Learn - A vocabulary and dialogue companion for Chinese learners.

This package provides a desktop client for a chapter-based REST backend:
- Flashcard study of a chapter's vocabulary (Chinese → English and back)
- Dialogues read sentence by sentence with audio
- An admin area with bulk JSON import and CSV import
"""

__version__ = "0.1.0"

from chinese_learn.core import Chapter, Dialogue, Sentence, Vocabulary

__all__ = [
    "Chapter",
    "Vocabulary",
    "Dialogue",
    "Sentence",
]
