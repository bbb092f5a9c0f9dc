"""Dialogue Learning Coordinator - read and listen to a chapter's dialogues."""

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal, Slot

from chinese_learn.core import Dialogue, Sentence
from chinese_learn.io import DialogueRepository
from chinese_learn.coordinators.backend_calls import BackendCalls

HIGHLIGHT_WITHOUT_AUDIO_MS = 2000

logger = logging.getLogger(__name__)


class DialogueLearningCoordinator(QObject):
    """Shows a chapter's dialogues and plays sentence audio.

    A sentence being played is marked as playing. With an audio URL the
    mark clears when playback ends; without one it clears after a short
    fixed highlight.
    """

    closed = Signal()

    def __init__(
        self,
        dialogue_screen,
        dialogue_repository: DialogueRepository,
        main_window,
        audio_player=None,
        schedule: Optional[Callable[[int, Callable[[], None]], None]] = None,
        highlight_ms: int = HIGHLIGHT_WITHOUT_AUDIO_MS,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if dialogue_screen is None:
            raise ValueError("DialogueScreen must not be None")
        if dialogue_repository is None:
            raise ValueError("DialogueRepository must not be None")

        self.dialogue_screen = dialogue_screen
        self.dialogue_repository = dialogue_repository
        self.main_window = main_window
        self.audio_player = audio_player
        self._schedule = schedule or QTimer.singleShot
        self.highlight_ms = highlight_ms
        self.calls = BackendCalls(thread_pool)

        self.chapter_id: Optional[int] = None
        self.dialogues: List[Dialogue] = []
        self.selected_dialogue: Optional[Dialogue] = None
        self.playing_sentence_id: Optional[int] = None
        self._audio_sentence_id: Optional[int] = None
        self._play_token = 0

        self.dialogue_screen.dialogue_selected.connect(self.select_dialogue)
        self.dialogue_screen.back_to_list_requested.connect(self.back_to_list)
        self.dialogue_screen.play_requested.connect(self.play_sentence)
        self.dialogue_screen.back_requested.connect(self.close)

        if self.audio_player is not None:
            self.audio_player.playback_finished.connect(self._on_playback_finished)
            self.audio_player.playback_failed.connect(self._on_playback_failed)

    def show_for_chapter(self, chapter_id: int) -> None:
        self.chapter_id = chapter_id
        self.selected_dialogue = None
        self._clear_playing()
        self.dialogues = []
        self.dialogue_screen.display_dialogues(self.dialogues)
        self.main_window.show_screen(self.dialogue_screen)
        self.calls.start(
            "dialogues",
            lambda: self.dialogue_repository.list_for_chapter(chapter_id),
            on_result=self._on_dialogues_loaded,
            on_error=lambda message: self._on_dialogues_failed(chapter_id, message),
        )

    @Slot(int)
    def select_dialogue(self, dialogue_id: int) -> None:
        dialogue = next((d for d in self.dialogues if d.id == dialogue_id), None)
        if dialogue is None:
            return
        self.selected_dialogue = dialogue
        self._clear_playing()
        self.dialogue_screen.display_dialogue(dialogue, dialogue.ordered_sentences())

    @Slot()
    def back_to_list(self) -> None:
        self.selected_dialogue = None
        self._clear_playing()
        self.dialogue_screen.display_dialogues(self.dialogues)

    @Slot(int)
    def play_sentence(self, sentence_id: int) -> None:
        sentence = self._find_sentence(sentence_id)
        if sentence is None:
            return

        self._play_token += 1
        if sentence.has_audio and self.audio_player is not None:
            self._mark_playing(sentence.id)
            self._audio_sentence_id = sentence.id
            self.audio_player.play(sentence.audio_url)
            return

        if self.audio_player is not None and self._audio_sentence_id is not None:
            self.audio_player.stop()
        self._audio_sentence_id = None
        self._mark_playing(sentence.id)

        token = self._play_token
        self._schedule(self.highlight_ms, lambda: self._end_highlight(token))

    @Slot()
    def close(self) -> None:
        self._clear_playing()
        self.closed.emit()

    def _find_sentence(self, sentence_id: int) -> Optional[Sentence]:
        if self.selected_dialogue is None:
            return None
        return next((s for s in self.selected_dialogue.sentences if s.id == sentence_id), None)

    def _end_highlight(self, token: int) -> None:
        if token == self._play_token:
            self._set_not_playing()

    @Slot()
    def _on_playback_finished(self) -> None:
        # Only the clip that is still marked may clear the mark
        if self._audio_sentence_id is not None and self._audio_sentence_id == self.playing_sentence_id:
            self._audio_sentence_id = None
            self._set_not_playing()

    @Slot(str)
    def _on_playback_failed(self, message: str) -> None:
        logger.warning("Audio playback failed: %s", message)
        if self._audio_sentence_id is not None and self._audio_sentence_id == self.playing_sentence_id:
            self._audio_sentence_id = None
            self._set_not_playing()

    def _on_dialogues_loaded(self, dialogues: List[Dialogue]) -> None:
        self.dialogues = list(dialogues)
        if self.selected_dialogue is None:
            self.dialogue_screen.display_dialogues(self.dialogues)

    def _on_dialogues_failed(self, chapter_id: int, message: str) -> None:
        logger.error("Failed to fetch dialogues for chapter %s: %s", chapter_id, message)
        self.main_window.show_error("Dialogues", f"Failed to fetch dialogues: {message}")

    def _clear_playing(self) -> None:
        self._play_token += 1
        if self.audio_player is not None and self._audio_sentence_id is not None:
            self.audio_player.stop()
        self._audio_sentence_id = None
        self._set_not_playing()

    def _mark_playing(self, sentence_id: int) -> None:
        self.playing_sentence_id = sentence_id
        self.dialogue_screen.set_playing(sentence_id)

    def _set_not_playing(self) -> None:
        self.playing_sentence_id = None
        self.dialogue_screen.set_playing(None)
