"""Chapter Editor Coordinator - chapter details and vocabulary management."""

import logging
from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from chinese_learn.core import Chapter, Vocabulary
from chinese_learn.io import ChapterRepository, VocabularyRepository
from chinese_learn.services import AdminSession, ImportKind
from chinese_learn.coordinators.admin_coordinator import require_session
from chinese_learn.coordinators.backend_calls import BackendCalls

logger = logging.getLogger(__name__)


class ChapterEditorCoordinator(QObject):
    """Manages one chapter for an admin.

    Responsibilities:
    - Edit or delete the chapter itself
    - Create, edit and delete its vocabulary (image by file or URL)
    - Open the JSON import for vocabulary
    - Hand the chapter to the dialogue manager

    Backend calls run on the thread pool; the control that started a
    call stays disabled until it finishes.
    """

    closed = Signal()
    chapter_deleted = Signal(int)

    def __init__(
        self,
        editor_screen,
        chapter_repository: ChapterRepository,
        vocabulary_repository: VocabularyRepository,
        main_window,
        import_coordinator=None,
        dialogue_manager=None,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if editor_screen is None:
            raise ValueError("ChapterEditorScreen must not be None")
        if main_window is None:
            raise ValueError("MainWindow must not be None")

        self.editor_screen = editor_screen
        self.chapter_repository = chapter_repository
        self.vocabulary_repository = vocabulary_repository
        self.main_window = main_window
        self.import_coordinator = import_coordinator
        self.dialogue_manager = dialogue_manager
        self.calls = BackendCalls(thread_pool)

        self.session: Optional[AdminSession] = None
        self.chapter: Optional[Chapter] = None
        self.vocabularies: List[Vocabulary] = []
        self.editing_id: Optional[int] = None

        self.editor_screen.back_requested.connect(self.closed.emit)
        self.editor_screen.chapter_update_requested.connect(self.handle_update_chapter)
        self.editor_screen.chapter_delete_requested.connect(self.handle_delete_chapter)
        self.editor_screen.vocabulary_submitted.connect(self.handle_vocabulary_submitted)
        self.editor_screen.vocabulary_edit_requested.connect(self.handle_edit_requested)
        self.editor_screen.vocabulary_delete_requested.connect(self.handle_delete_vocabulary)
        self.editor_screen.edit_cancelled.connect(self.handle_edit_cancelled)
        self.editor_screen.import_requested.connect(self.handle_import_requested)

    @property
    def chapter_id(self) -> Optional[int]:
        return self.chapter.id if self.chapter else None

    def open_chapter(self, chapter_id: int, session: AdminSession) -> None:
        """Load a chapter and its words into the editor.

        Raises:
            PermissionError: If ``session`` is missing or expired.
        """
        self.session = require_session(session)
        for channel in ("vocabularies", "save-vocabulary", "update-chapter"):
            self.calls.discard(channel)
        self.calls.start(
            "chapter",
            lambda: self.chapter_repository.get_chapter(chapter_id),
            on_result=lambda chapter: self._on_chapter_loaded(chapter, session),
            on_error=lambda message: self._on_chapter_failed(chapter_id, message),
        )

    def refresh_vocabularies(self) -> None:
        if self.chapter is None:
            return
        chapter_id = self.chapter.id
        self.calls.start(
            "vocabularies",
            lambda: self.vocabulary_repository.list_for_chapter(chapter_id),
            on_result=self._on_vocabularies_loaded,
            on_error=self._on_vocabularies_failed,
        )

    @Slot(str, str)
    def handle_update_chapter(self, name: str, description: str) -> None:
        if self.chapter is None or not name.strip():
            return
        if self.calls.is_busy("update-chapter"):
            return
        chapter_id = self.chapter.id
        self.editor_screen.set_chapter_busy(True)
        self.calls.start(
            "update-chapter",
            lambda: self.chapter_repository.update_chapter(chapter_id, name, description),
            on_result=self._on_chapter_updated,
            on_error=lambda message: self._on_update_failed(chapter_id, message),
            on_finished=lambda: self.editor_screen.set_chapter_busy(False),
        )

    @Slot()
    def handle_delete_chapter(self) -> None:
        if self.chapter is None or self.calls.is_busy("delete-chapter"):
            return
        confirmed = self.main_window.confirm(
            "Delete Chapter",
            "Are you sure you want to delete this chapter and all its words? "
            "This action cannot be undone.",
        )
        if not confirmed:
            return
        chapter_id = self.chapter.id
        self.editor_screen.set_chapter_busy(True)
        self.calls.start(
            "delete-chapter",
            lambda: self.chapter_repository.delete_chapter(chapter_id),
            on_result=lambda _: self._on_chapter_deleted(chapter_id),
            on_error=lambda message: self._on_delete_chapter_failed(chapter_id, message),
            on_finished=lambda: self.editor_screen.set_chapter_busy(False),
        )

    @Slot(dict)
    def handle_vocabulary_submitted(self, form: Dict[str, Any]) -> None:
        """Create a word, or update the one being edited.

        ``form`` holds chinese, pinyin, meaning, image_path and image_url.
        """
        if self.chapter is None or not (form.get("chinese") or "").strip():
            return
        if self.calls.is_busy("save-vocabulary"):
            return

        image_path = form.get("image_path")
        fields = dict(
            chinese=form["chinese"],
            pinyin=form.get("pinyin", ""),
            meaning=form.get("meaning", ""),
            image_path=Path(image_path) if image_path else None,
            image_url=form.get("image_url", ""),
        )
        chapter_id = self.chapter.id
        editing_id = self.editing_id
        if editing_id is not None:
            call = partial(self.vocabulary_repository.update_vocabulary, editing_id, chapter_id, **fields)
        else:
            call = partial(self.vocabulary_repository.create_vocabulary, chapter_id, **fields)

        self.editor_screen.set_submitting(True)
        self.calls.start(
            "save-vocabulary",
            call,
            on_result=lambda vocab: self._on_vocabulary_saved(vocab, editing_id),
            on_error=self._on_save_failed,
            on_finished=lambda: self.editor_screen.set_submitting(False),
        )

    @Slot(int)
    def handle_edit_requested(self, vocabulary_id: int) -> None:
        vocab = next((v for v in self.vocabularies if v.id == vocabulary_id), None)
        if vocab is None:
            return
        self.editing_id = vocab.id
        self.editor_screen.fill_form(vocab)

    @Slot()
    def handle_edit_cancelled(self) -> None:
        self.editing_id = None
        self.editor_screen.clear_form()

    @Slot(int)
    def handle_delete_vocabulary(self, vocabulary_id: int) -> None:
        channel = f"delete-vocabulary:{vocabulary_id}"
        if self.calls.is_busy(channel):
            return
        if not self.main_window.confirm("Delete Word", "Are you sure you want to delete this word?"):
            return
        self.calls.start(
            channel,
            lambda: self.vocabulary_repository.delete_vocabulary(vocabulary_id),
            on_result=lambda _: self._on_vocabulary_deleted(vocabulary_id),
            on_error=lambda message: self._on_delete_vocabulary_failed(vocabulary_id, message),
        )

    @Slot()
    def handle_import_requested(self) -> None:
        if self.chapter is None or self.import_coordinator is None:
            return
        self.import_coordinator.open(ImportKind.VOCABULARY, self.chapter.id, self.refresh_vocabularies)

    def _on_chapter_loaded(self, chapter: Chapter, session: AdminSession) -> None:
        self.chapter = chapter
        self.vocabularies = []
        self.editing_id = None
        self.editor_screen.set_chapter(chapter)
        self.editor_screen.clear_form()
        self.editor_screen.display_vocabularies(self.vocabularies)
        self.refresh_vocabularies()
        if self.dialogue_manager is not None:
            self.dialogue_manager.open_for_chapter(chapter.id, session)
        self.main_window.show_screen(self.editor_screen)

    def _on_chapter_failed(self, chapter_id: int, message: str) -> None:
        logger.error("Failed to load chapter %s: %s", chapter_id, message)
        self.main_window.show_error("Chapter", f"Failed to load chapter: {message}")

    def _on_vocabularies_loaded(self, vocabularies: List[Vocabulary]) -> None:
        self.vocabularies = list(vocabularies)
        self.editor_screen.display_vocabularies(self.vocabularies)

    def _on_vocabularies_failed(self, message: str) -> None:
        logger.error("Failed to fetch vocabularies: %s", message)
        self.main_window.show_error("Vocabulary", f"Failed to fetch vocabularies: {message}")

    def _on_chapter_updated(self, chapter: Chapter) -> None:
        self.chapter = chapter
        self.editor_screen.set_chapter(chapter)
        self.main_window.show_info("Chapter Updated", "Chapter updated successfully!")

    def _on_update_failed(self, chapter_id: int, message: str) -> None:
        logger.error("Failed to update chapter %s: %s", chapter_id, message)
        self.main_window.show_error("Update Chapter", "Failed to update chapter")

    def _on_chapter_deleted(self, chapter_id: int) -> None:
        if self.chapter_id == chapter_id:
            self.chapter = None
            self.vocabularies = []
        self.chapter_deleted.emit(chapter_id)

    def _on_delete_chapter_failed(self, chapter_id: int, message: str) -> None:
        logger.error("Failed to delete chapter %s: %s", chapter_id, message)
        self.main_window.show_error("Delete Chapter", "Failed to delete chapter")

    def _on_vocabulary_saved(self, vocab: Vocabulary, editing_id: Optional[int]) -> None:
        if editing_id is not None:
            self.vocabularies = [vocab if v.id == vocab.id else v for v in self.vocabularies]
        else:
            self.vocabularies = [*self.vocabularies, vocab]
        self.editing_id = None
        self.editor_screen.clear_form()
        self.editor_screen.display_vocabularies(self.vocabularies)

    def _on_save_failed(self, message: str) -> None:
        logger.error("Failed to save vocabulary: %s", message)
        self.main_window.show_error("Save Vocabulary", f"Failed to save vocabulary: {message}")

    def _on_vocabulary_deleted(self, vocabulary_id: int) -> None:
        self.vocabularies = [v for v in self.vocabularies if v.id != vocabulary_id]
        if self.editing_id == vocabulary_id:
            self.handle_edit_cancelled()
        self.editor_screen.display_vocabularies(self.vocabularies)

    def _on_delete_vocabulary_failed(self, vocabulary_id: int, message: str) -> None:
        logger.error("Failed to delete vocabulary %s: %s", vocabulary_id, message)
        self.main_window.show_error("Delete Word", f"Failed to delete vocabulary: {message}")
