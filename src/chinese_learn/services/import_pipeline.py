"""Bulk Import Pipeline - parse, normalize, validate and submit JSON batches.

Two submission strategies exist. Vocabulary goes to the backend in one
batch request, so atomicity belongs to the backend. Dialogues are created
one request per element, strictly in input order, stopping at the first
failure; elements created before the failure stay created. The returned
ImportReport makes that partial outcome explicit.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional

from chinese_learn.io import ApiError, DialogueRepository, VocabularyRepository

GENERIC_IMPORT_ERROR = "Invalid JSON or server error"
CANCELLED_MESSAGE = "Import cancelled"

logger = logging.getLogger(__name__)


class ImportRejected(ValueError):
    """Base class for problems detected before anything is submitted."""


class ImportParseError(ImportRejected):
    """The staging text is not valid JSON."""


class EmptyBatchError(ImportRejected):
    """The normalized batch holds no elements."""


class ImportValidationError(ImportRejected):
    """An element is missing a required field or has the wrong shape."""


class ImportKind(str, Enum):
    VOCABULARY = "vocabulary"
    DIALOGUE = "dialogue"

    @property
    def plural(self) -> str:
        return "vocabulary items" if self is ImportKind.VOCABULARY else "dialogues"


@dataclass
class ImportReport:
    """Outcome of one submitted batch.

    Attributes:
        kind: What was imported.
        total: Number of elements in the normalized batch.
        created: Entities the backend echoed back as created.
        attempted: Elements for which a request was issued.
        failed_index: 0-based index of the element whose request failed
            (per-element imports only).
        error: User-facing failure message, None on success.
    """

    kind: ImportKind
    total: int
    created: List[Any] = field(default_factory=list)
    attempted: int = 0
    failed_index: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def not_attempted(self) -> int:
        return self.total - self.attempted

    @property
    def is_partial(self) -> bool:
        """True when the batch failed after some elements were created."""
        return not self.succeeded and self.created_count > 0


def describe_error(exc: Optional[BaseException]) -> str:
    """Derive the single message shown to the user for a failure.

    Prefers the backend's structured message, then the exception text,
    then a generic fallback.
    """
    if isinstance(exc, ApiError) and exc.message:
        return exc.message
    if exc is not None and str(exc):
        return str(exc)
    return GENERIC_IMPORT_ERROR


def parse_import_text(raw_text: Optional[str]) -> Optional[List[Any]]:
    """Parse staging text and normalize it to a non-empty list.

    Returns:
        None when the text is blank (nothing to do), otherwise the list
        of elements. A bare JSON value becomes a one-element list.

    Raises:
        ImportParseError: If the text is not valid JSON.
        EmptyBatchError: If the normalized list is empty.
    """
    if raw_text is None or not raw_text.strip():
        return None

    try:
        parsed = json.loads(raw_text.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        raise ImportParseError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e

    batch = parsed if isinstance(parsed, list) else [parsed]
    if not batch:
        raise EmptyBatchError("The JSON array is empty. Please provide at least one item.")
    return batch


def validate_vocabulary_batch(batch: List[Any]) -> None:
    """Check every element has the ``{chinese, pinyin, meaning, image_url}`` shape.

    Raises:
        ImportValidationError: On the first malformed element.
    """
    for number, item in enumerate(batch, start=1):
        if not isinstance(item, dict):
            raise ImportValidationError(f"Item {number} must be a JSON object")
        if not _non_empty_text(item.get("chinese")):
            raise ImportValidationError(f"Item {number} is missing the 'chinese' field")
        for name in ("pinyin", "meaning", "image_url"):
            value = item.get(name)
            if value is not None and not isinstance(value, str):
                raise ImportValidationError(f"Item {number}: '{name}' must be a string")


def validate_dialogue_batch(batch: List[Any]) -> None:
    """Check every element has the ``{title, description, sentences}`` shape.

    Raises:
        ImportValidationError: On the first malformed element or sentence.
    """
    for number, item in enumerate(batch, start=1):
        if not isinstance(item, dict):
            raise ImportValidationError(f"Dialogue {number} must be a JSON object")
        if not _non_empty_text(item.get("title")):
            raise ImportValidationError(f"Dialogue {number} is missing the 'title' field")

        sentences = item.get("sentences") or []
        if not isinstance(sentences, list):
            raise ImportValidationError(f"Dialogue {number}: 'sentences' must be a list")
        for line, sentence in enumerate(sentences, start=1):
            if not isinstance(sentence, dict):
                raise ImportValidationError(f"Dialogue {number}, sentence {line} must be a JSON object")
            if not _non_empty_text(sentence.get("chinese")):
                raise ImportValidationError(
                    f"Dialogue {number}, sentence {line} is missing the 'chinese' field"
                )
            order = sentence.get("order")
            if order is not None and (isinstance(order, bool) or not isinstance(order, int)):
                raise ImportValidationError(f"Dialogue {number}, sentence {line}: 'order' must be an integer")


def read_import_file(path: Path) -> str:
    """Read a file's full text for the staging buffer.

    The content is not validated here; validation happens on import.
    """
    return Path(path).read_text(encoding="utf-8-sig")


class ImportPipeline:
    """Runs staging text through parse, normalize, validate and submit."""

    def __init__(
        self,
        vocabulary_repository: VocabularyRepository,
        dialogue_repository: DialogueRepository,
    ):
        if vocabulary_repository is None:
            raise ValueError("VocabularyRepository must not be None")
        if dialogue_repository is None:
            raise ValueError("DialogueRepository must not be None")
        self.vocabulary_repository = vocabulary_repository
        self.dialogue_repository = dialogue_repository

    def run(
        self,
        kind: ImportKind,
        chapter_id: int,
        raw_text: str,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Optional[ImportReport]:
        if kind is ImportKind.VOCABULARY:
            return self.import_vocabularies(chapter_id, raw_text)
        return self.import_dialogues(chapter_id, raw_text, should_cancel)

    def import_vocabularies(self, chapter_id: int, raw_text: str) -> Optional[ImportReport]:
        """Import a vocabulary batch with a single backend call.

        Returns:
            None for blank input, otherwise the ImportReport.

        Raises:
            ImportRejected: If the text is rejected before submission.
        """
        batch = parse_import_text(raw_text)
        if batch is None:
            return None
        validate_vocabulary_batch(batch)

        report = ImportReport(kind=ImportKind.VOCABULARY, total=len(batch), attempted=len(batch))
        try:
            report.created = self.vocabulary_repository.create_batch(chapter_id, batch)
        except (ApiError, ValueError) as e:
            report.error = describe_error(e)
            logger.error("Vocabulary import into chapter %s failed: %s", chapter_id, report.error)
            return report

        logger.info("Imported %d vocabulary items into chapter %s", report.total, chapter_id)
        return report

    def import_dialogues(
        self,
        chapter_id: int,
        raw_text: str,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Optional[ImportReport]:
        """Import dialogues one request at a time, in input order.

        Request N+1 starts only after request N has returned. The first
        failure stops the loop; the report's error describes only that
        element.

        Raises:
            ImportRejected: If the text is rejected before submission.
        """
        batch = parse_import_text(raw_text)
        if batch is None:
            return None
        validate_dialogue_batch(batch)

        report = ImportReport(kind=ImportKind.DIALOGUE, total=len(batch))
        for index, item in enumerate(batch):
            if should_cancel is not None and should_cancel():
                report.error = CANCELLED_MESSAGE
                logger.info("Dialogue import cancelled after %d of %d", report.created_count, report.total)
                return report

            report.attempted += 1
            try:
                dialogue = self.dialogue_repository.create_dialogue(
                    chapter_id,
                    title=item.get("title", ""),
                    description=item.get("description") or "",
                    sentences=item.get("sentences") or [],
                )
            except (ApiError, ValueError) as e:
                report.failed_index = index
                report.error = describe_error(e)
                logger.error(
                    "Dialogue %d of %d failed (%d created before it): %s",
                    index + 1, report.total, report.created_count, report.error,
                )
                return report
            report.created.append(dialogue)

        logger.info("Imported %d dialogues into chapter %s", report.total, chapter_id)
        return report


def _non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
