"""Chapter Browser Coordinator - public chapter list and vocabulary study."""

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, QThreadPool, Slot
from PySide6.QtWidgets import QApplication, QWidget

from chinese_learn.core import Chapter, Vocabulary
from chinese_learn.io import ChapterRepository, VocabularyRepository
from chinese_learn.coordinators.backend_calls import BackendCalls
from chinese_learn.coordinators.study_modes import create_study_direction
from chinese_learn.coordinators.study_session_controller import StudyKeyBinding, StudySessionController

STUDY_VIEW = "study"
LIST_VIEW = "list"

logger = logging.getLogger(__name__)


class ChapterBrowserCoordinator(QObject):
    """Drives the public side of the application.

    Responsibilities:
    - Fetch and display the chapter list
    - Fetch a chapter's vocabulary once and load it into the study deck
    - Switch between study (flashcards) and list views
    - Keep the study key binding attached only while the study screen is
      the current screen and the study view is selected
    - Hand over to dialogue learning for the current chapter

    Fetches run on the thread pool. The deck is not refreshed while
    studying; ``reload`` re-fetches it explicitly and resets the cursor.
    """

    def __init__(
        self,
        chapter_list_screen,
        study_screen,
        chapter_repository: ChapterRepository,
        vocabulary_repository: VocabularyRepository,
        study_controller: StudySessionController,
        main_window,
        dialogue_coordinator=None,
        key_binding: Optional[StudyKeyBinding] = None,
        key_target: Optional[QObject] = None,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if chapter_list_screen is None:
            raise ValueError("ChapterListScreen must not be None")
        if study_screen is None:
            raise ValueError("StudyScreen must not be None")
        if study_controller is None:
            raise ValueError("StudySessionController must not be None")
        if main_window is None:
            raise ValueError("MainWindow must not be None")

        self.chapter_list_screen = chapter_list_screen
        self.study_screen = study_screen
        self.chapter_repository = chapter_repository
        self.vocabulary_repository = vocabulary_repository
        self.study_controller = study_controller
        self.main_window = main_window
        self.dialogue_coordinator = dialogue_coordinator
        self.key_binding = key_binding or StudyKeyBinding(study_controller)
        self._key_target = key_target
        self.calls = BackendCalls(thread_pool)

        self.chapters: List[Chapter] = []
        self.current_chapter: Optional[Chapter] = None
        self.view_mode = STUDY_VIEW
        self.study_visible = False

        self.chapter_list_screen.chapter_selected.connect(self.handle_chapter_selected)
        self.study_screen.back_requested.connect(self.leave_chapter)
        self.study_screen.view_mode_changed.connect(self.handle_view_mode_changed)
        self.study_screen.direction_changed.connect(self.handle_direction_changed)
        self.study_screen.next_requested.connect(self.study_controller.advance)
        self.study_screen.previous_requested.connect(self.study_controller.retreat)
        self.study_screen.flip_requested.connect(self.study_controller.toggle_flip)
        self.study_screen.dialogues_requested.connect(self.open_dialogues)
        self.main_window.screen_changed.connect(self.handle_screen_changed)

        self.study_controller.card_changed.connect(self._render_card)
        self.study_controller.flip_changed.connect(self._render_card)
        self.study_controller.direction_changed.connect(self._render_card)

        if self.dialogue_coordinator is not None:
            self.dialogue_coordinator.closed.connect(self.return_to_study)

    def show_chapters(self) -> None:
        """Show the chapter list and fetch its chapters."""
        self.suspend()
        self.calls.discard("deck")
        self.main_window.show_screen(self.chapter_list_screen)
        self.calls.start(
            "chapters",
            self.chapter_repository.list_chapters,
            on_result=self._on_chapters_loaded,
            on_error=self._on_chapters_failed,
        )

    @Slot(int)
    def handle_chapter_selected(self, chapter_id: int) -> None:
        """Open a chapter: fetch its words once and start studying."""
        self.current_chapter = next((c for c in self.chapters if c.id == chapter_id), None)
        title = self.current_chapter.name if self.current_chapter else "Chapter Vocabularies"
        self.study_screen.set_title(title)

        self._show_study()
        self._load_deck(chapter_id)

    def reload(self) -> None:
        """Re-fetch the current chapter's words; the cursor goes back to 0."""
        if self.current_chapter is None:
            return
        self._load_deck(self.current_chapter.id)

    @Slot(str)
    def handle_view_mode_changed(self, mode: str) -> None:
        """Switch between study and list views.

        Raises:
            ValueError: If an unknown mode name is provided.
        """
        if mode not in (STUDY_VIEW, LIST_VIEW):
            raise ValueError(f"Unknown view mode: {mode}")
        self.view_mode = mode
        self.study_screen.set_view_mode(mode)
        self._update_key_binding()

    @Slot(str)
    def handle_direction_changed(self, name: str) -> None:
        self.study_controller.set_direction(create_study_direction(name))

    @Slot(QWidget)
    def handle_screen_changed(self, screen) -> None:
        """Track whether the study screen is the one on display."""
        self.study_visible = screen is self.study_screen
        self._update_key_binding()

    @Slot()
    def suspend(self) -> None:
        """Release the study keys before another screen takes over."""
        self.study_visible = False
        self.key_binding.detach()

    @Slot()
    def resume(self) -> None:
        """Take the study keys back if the study screen is still on display."""
        self.handle_screen_changed(self.main_window.current_screen())

    @Slot()
    def leave_chapter(self) -> None:
        self.suspend()
        self.current_chapter = None
        self.show_chapters()

    @Slot()
    def open_dialogues(self) -> None:
        if self.dialogue_coordinator is None or self.current_chapter is None:
            return
        self.suspend()
        self.dialogue_coordinator.show_for_chapter(self.current_chapter.id)

    @Slot()
    def return_to_study(self) -> None:
        """Come back from dialogue learning to the chapter's vocabulary."""
        self._show_study()

    def shutdown(self) -> None:
        self.suspend()

    def _show_study(self) -> None:
        self.main_window.show_screen(self.study_screen)
        self.study_visible = True
        self.handle_view_mode_changed(self.view_mode)

    def _update_key_binding(self) -> None:
        if self.study_visible and self.view_mode == STUDY_VIEW:
            self.key_binding.attach(self._resolve_key_target())
        else:
            self.key_binding.detach()

    def _load_deck(self, chapter_id: int) -> None:
        self.calls.start(
            "deck",
            lambda: self.vocabulary_repository.list_for_chapter(chapter_id),
            on_result=self._on_deck_loaded,
            on_error=self._on_deck_failed,
        )

    def _on_chapters_loaded(self, chapters: List[Chapter]) -> None:
        self.chapters = list(chapters)
        self.chapter_list_screen.display_chapters(self.chapters)

    def _on_chapters_failed(self, message: str) -> None:
        self.chapters = []
        self.chapter_list_screen.display_chapters(self.chapters)
        self.main_window.show_error("Chapters", f"Failed to fetch chapters: {message}")

    def _on_deck_loaded(self, vocabularies: List[Vocabulary]) -> None:
        self.study_screen.display_list(vocabularies)
        self.study_controller.load(vocabularies)

    def _on_deck_failed(self, message: str) -> None:
        self._on_deck_loaded([])
        self.main_window.show_error("Vocabulary", f"Failed to fetch vocabularies: {message}")

    def _resolve_key_target(self) -> QObject:
        return self._key_target if self._key_target is not None else QApplication.instance()

    def _render_card(self, *_args) -> None:
        face = self.study_controller.visible_face()
        if face is None:
            self.study_screen.show_empty()
            return
        position, total = self.study_controller.progress
        self.study_screen.show_card(face, position, total, self.study_controller.flipped)
        self.study_screen.set_direction(self.study_controller.direction.name)
