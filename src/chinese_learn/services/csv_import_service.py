"""CSV Import Service - loads vocabulary CSV exports into a chapter."""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from chinese_learn.core import Chapter, Vocabulary
from chinese_learn.io import ApiError, ChapterRepository, CsvVocabularyReader, VocabularyRepository

logger = logging.getLogger(__name__)


@dataclass
class CsvFileResult:
    path: Path
    created: int = 0
    updated: int = 0
    skipped_rows: int = 0
    error: Optional[str] = None


@dataclass
class CsvImportSummary:
    chapter: Chapter
    files: List[CsvFileResult] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(f.created for f in self.files)

    @property
    def updated(self) -> int:
        return sum(f.updated for f in self.files)


class CsvImportService:
    """Imports CSV vocabulary files into one chapter.

    Words already in the chapter (matched on Chinese text) are updated in
    place; the rest of each file is created with one batch request.
    """

    def __init__(
        self,
        chapter_repository: ChapterRepository,
        vocabulary_repository: VocabularyRepository,
        reader: Optional[CsvVocabularyReader] = None,
    ):
        self.chapter_repository = chapter_repository
        self.vocabulary_repository = vocabulary_repository
        self.reader = reader or CsvVocabularyReader()

    def find_or_create_chapter(self, name: str, description: str = "") -> Chapter:
        for chapter in self.chapter_repository.list_chapters():
            if chapter.name == name:
                return chapter
        chapter = self.chapter_repository.create_chapter(name, description)
        logger.info("Created chapter %s (id %s)", chapter.name, chapter.id)
        return chapter

    def import_directory(
        self,
        directory: Path,
        chapter_name: str,
        description: str = "",
    ) -> CsvImportSummary:
        """Import every CSV file in ``directory``.

        Raises:
            ValueError: If ``directory`` is not a directory.
            ApiError: If the chapter cannot be found or created.
        """
        files = self.reader.list_files(directory)
        chapter = self.find_or_create_chapter(chapter_name, description)
        existing: Dict[str, Vocabulary] = {
            v.chinese: v for v in self.vocabulary_repository.list_for_chapter(chapter.id)
        }

        summary = CsvImportSummary(chapter=chapter)
        for path in files:
            result = self._import_file(path, chapter, existing)
            summary.files.append(result)
            if result.error:
                logger.warning("Skipped %s: %s", path.name, result.error)
            else:
                logger.info(
                    "Imported %d words from %s (%d new, %d updated)",
                    result.created + result.updated, path.name, result.created, result.updated,
                )
        return summary

    def _import_file(self, path: Path, chapter: Chapter, existing: Dict[str, Vocabulary]) -> CsvFileResult:
        result = CsvFileResult(path=path)
        try:
            parsed = self.reader.read_file(path)
        except (OSError, ValueError, csv.Error) as e:
            result.error = str(e)
            return result
        result.skipped_rows = parsed.skipped_rows

        new_records: Dict[str, Dict[str, str]] = {}
        try:
            for record in parsed.records:
                known = existing.get(record["chinese"])
                if known is None:
                    new_records[record["chinese"]] = record
                    continue
                existing[known.chinese] = self.vocabulary_repository.update_vocabulary(
                    known.id,
                    chapter.id,
                    chinese=known.chinese,
                    pinyin=record["pinyin"],
                    meaning=record["meaning"],
                    image_url=record["image_url"],
                )
                result.updated += 1

            if new_records:
                created = self.vocabulary_repository.create_batch(chapter.id, list(new_records.values()))
                for vocab in created:
                    existing[vocab.chinese] = vocab
                result.created = len(new_records)
        except ApiError as e:
            result.error = e.message
        return result
