"""Dialogue Manager Coordinator - admin editing of dialogues and sentences."""

import logging
from dataclasses import replace
from functools import partial
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject, QThreadPool, Slot

from chinese_learn.core import DEFAULT_SPEAKER, Dialogue, Sentence
from chinese_learn.io import DialogueRepository
from chinese_learn.services import AdminSession, ImportKind
from chinese_learn.coordinators.admin_coordinator import require_session
from chinese_learn.coordinators.backend_calls import BackendCalls

logger = logging.getLogger(__name__)


class DialogueManagerCoordinator(QObject):
    """Creates, edits and deletes a chapter's dialogues and sentences.

    The local dialogue list is only replaced or copied, never mutated in
    place, and each dialogue's sentences stay sorted by order key.
    Results are applied to the list as it is when they arrive.
    """

    def __init__(
        self,
        manager_panel,
        dialogue_repository: DialogueRepository,
        main_window,
        import_coordinator=None,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if manager_panel is None:
            raise ValueError("DialogueManagerPanel must not be None")
        if dialogue_repository is None:
            raise ValueError("DialogueRepository must not be None")
        if main_window is None:
            raise ValueError("MainWindow must not be None")

        self.panel = manager_panel
        self.dialogue_repository = dialogue_repository
        self.main_window = main_window
        self.import_coordinator = import_coordinator
        self.calls = BackendCalls(thread_pool)

        self.session: Optional[AdminSession] = None
        self.chapter_id: Optional[int] = None
        self.dialogues: List[Dialogue] = []
        self.active_dialogue_id: Optional[int] = None
        self.editing_sentence_id: Optional[int] = None

        self.panel.dialogue_save_requested.connect(self.handle_save_dialogue)
        self.panel.dialogue_delete_requested.connect(self.handle_delete_dialogue)
        self.panel.dialogue_activated.connect(self.handle_dialogue_activated)
        self.panel.sentence_save_requested.connect(self.handle_save_sentence)
        self.panel.sentence_edit_requested.connect(self.handle_edit_sentence)
        self.panel.sentence_delete_requested.connect(self.handle_delete_sentence)
        self.panel.sentence_edit_cancelled.connect(self.reset_sentence_form)
        self.panel.import_requested.connect(self.handle_import_requested)

    @property
    def active_dialogue(self) -> Optional[Dialogue]:
        return self._find_dialogue(self.active_dialogue_id)

    def open_for_chapter(self, chapter_id: int, session: AdminSession) -> None:
        self.session = require_session(session)
        for channel in ("save-dialogue", "save-sentence"):
            self.calls.discard(channel)
        self.chapter_id = chapter_id
        self.dialogues = []
        self.active_dialogue_id = None
        self.editing_sentence_id = None
        self.refresh_dialogues()

    def refresh_dialogues(self) -> None:
        if self.chapter_id is None:
            return
        self.calls.start(
            "dialogues",
            partial(self.dialogue_repository.list_for_chapter, self.chapter_id),
            on_result=self._set_dialogues,
            on_error=self._on_dialogues_failed,
        )

    @Slot(dict)
    def handle_save_dialogue(self, form: Dict[str, Any]) -> None:
        """Create a dialogue, or update it when ``form["id"]`` is set."""
        if self.chapter_id is None or not (form.get("title") or "").strip():
            return
        if self.calls.is_busy("save-dialogue"):
            return
        dialogue_id = form.get("id")
        title = form["title"]
        description = form.get("description", "")
        if dialogue_id is not None:
            call = partial(self.dialogue_repository.update_dialogue, dialogue_id, title, description)
        else:
            call = partial(self.dialogue_repository.create_dialogue, self.chapter_id, title, description)

        self.panel.set_dialogue_saving(True)
        self.calls.start(
            "save-dialogue",
            call,
            on_result=lambda saved: self._on_dialogue_saved(saved, dialogue_id),
            on_error=self._on_save_dialogue_failed,
            on_finished=lambda: self.panel.set_dialogue_saving(False),
        )

    @Slot(int)
    def handle_delete_dialogue(self, dialogue_id: int) -> None:
        channel = f"delete-dialogue:{dialogue_id}"
        if self.calls.is_busy(channel):
            return
        if not self.main_window.confirm("Delete Dialogue", "Delete this dialogue and all its sentences?"):
            return
        self.calls.start(
            channel,
            partial(self.dialogue_repository.delete_dialogue, dialogue_id),
            on_result=lambda _: self._on_dialogue_deleted(dialogue_id),
            on_error=lambda message: self._on_delete_dialogue_failed(dialogue_id, message),
        )

    @Slot(int)
    def handle_dialogue_activated(self, dialogue_id: int) -> None:
        """Expand a dialogue's sentences, or collapse it when already open."""
        self.active_dialogue_id = None if self.active_dialogue_id == dialogue_id else dialogue_id
        self.panel.set_active_dialogue(self.active_dialogue_id)
        self.reset_sentence_form()

    def next_sentence_order(self) -> int:
        dialogue = self.active_dialogue
        return dialogue.next_sentence_order() if dialogue else 1

    @Slot(dict)
    def handle_save_sentence(self, form: Dict[str, Any]) -> None:
        """Create a sentence in the active dialogue, or update the one being edited.

        An edited sentence keeps its audio clip; the form has no audio field.
        """
        dialogue = self.active_dialogue
        if dialogue is None or not (form.get("chinese") or "").strip():
            return
        if self.calls.is_busy("save-sentence"):
            return
        order = form.get("order")
        fields = dict(
            chinese=form["chinese"],
            speaker=form.get("speaker") or DEFAULT_SPEAKER,
            pinyin=form.get("pinyin", ""),
            english=form.get("english", ""),
            order=int(order) if order is not None else self.next_sentence_order(),
        )
        editing_id = self.editing_sentence_id
        if editing_id is not None:
            existing = self._find_sentence(editing_id)
            audio_url = existing.audio_url if existing is not None else ""
            call = partial(
                self.dialogue_repository.update_sentence, editing_id, dialogue.id, audio_url=audio_url, **fields
            )
        else:
            call = partial(self.dialogue_repository.create_sentence, dialogue.id, **fields)

        self.panel.set_sentence_saving(True)
        self.calls.start(
            "save-sentence",
            call,
            on_result=lambda saved: self._on_sentence_saved(dialogue.id, saved),
            on_error=self._on_save_sentence_failed,
            on_finished=lambda: self.panel.set_sentence_saving(False),
        )

    @Slot(int)
    def handle_edit_sentence(self, sentence_id: int) -> None:
        sentence = self._find_sentence(sentence_id)
        if sentence is None:
            return
        self.editing_sentence_id = sentence.id
        self.panel.fill_sentence_form(sentence)

    @Slot(int, int)
    def handle_delete_sentence(self, sentence_id: int, dialogue_id: int) -> None:
        channel = f"delete-sentence:{sentence_id}"
        if self.calls.is_busy(channel):
            return
        if not self.main_window.confirm("Delete Sentence", "Delete this sentence?"):
            return
        self.calls.start(
            channel,
            partial(self.dialogue_repository.delete_sentence, sentence_id),
            on_result=lambda _: self._on_sentence_deleted(sentence_id, dialogue_id),
            on_error=lambda message: self._on_delete_sentence_failed(sentence_id, message),
        )

    @Slot()
    def reset_sentence_form(self) -> None:
        self.editing_sentence_id = None
        self.panel.reset_sentence_form(DEFAULT_SPEAKER, self.next_sentence_order())

    @Slot()
    def handle_import_requested(self) -> None:
        if self.chapter_id is None or self.import_coordinator is None:
            return
        self.import_coordinator.open(ImportKind.DIALOGUE, self.chapter_id, self.refresh_dialogues)

    def _on_dialogues_failed(self, message: str) -> None:
        logger.error("Failed to fetch dialogues: %s", message)
        self.main_window.show_error("Dialogues", f"Failed to fetch dialogues: {message}")

    def _on_dialogue_saved(self, saved: Dialogue, dialogue_id: Optional[int]) -> None:
        if dialogue_id is not None:
            self._set_dialogues([
                replace(d, title=saved.title, description=saved.description) if d.id == dialogue_id else d
                for d in self.dialogues
            ])
        else:
            self._set_dialogues([*self.dialogues, saved.with_sentences([])])
        self.panel.close_dialogue_form()

    def _on_save_dialogue_failed(self, message: str) -> None:
        logger.error("Failed to save dialogue: %s", message)
        self.main_window.show_error("Save Dialogue", f"Failed to save dialogue: {message}")

    def _on_dialogue_deleted(self, dialogue_id: int) -> None:
        if self.active_dialogue_id == dialogue_id:
            self.active_dialogue_id = None
        self._set_dialogues([d for d in self.dialogues if d.id != dialogue_id])

    def _on_delete_dialogue_failed(self, dialogue_id: int, message: str) -> None:
        logger.error("Failed to delete dialogue %s: %s", dialogue_id, message)
        self.main_window.show_error("Delete Dialogue", f"Failed to delete dialogue: {message}")

    def _on_sentence_saved(self, dialogue_id: int, saved: Sentence) -> None:
        dialogue = self._find_dialogue(dialogue_id)
        if dialogue is None:
            return
        if any(s.id == saved.id for s in dialogue.sentences):
            sentences = [saved if s.id == saved.id else s for s in dialogue.sentences]
        else:
            sentences = [*dialogue.sentences, saved]
        self._replace_dialogue(dialogue.with_sentences(sentences))
        self.reset_sentence_form()

    def _on_save_sentence_failed(self, message: str) -> None:
        logger.error("Failed to save sentence: %s", message)
        self.main_window.show_error("Save Sentence", f"Failed to save sentence: {message}")

    def _on_sentence_deleted(self, sentence_id: int, dialogue_id: int) -> None:
        dialogue = self._find_dialogue(dialogue_id)
        if dialogue is not None:
            self._replace_dialogue(dialogue.with_sentences(s for s in dialogue.sentences if s.id != sentence_id))
        if self.editing_sentence_id == sentence_id:
            self.reset_sentence_form()

    def _on_delete_sentence_failed(self, sentence_id: int, message: str) -> None:
        logger.error("Failed to delete sentence %s: %s", sentence_id, message)
        self.main_window.show_error("Delete Sentence", f"Failed to delete sentence: {message}")

    def _find_dialogue(self, dialogue_id: Optional[int]) -> Optional[Dialogue]:
        if dialogue_id is None:
            return None
        return next((d for d in self.dialogues if d.id == dialogue_id), None)

    def _find_sentence(self, sentence_id: int) -> Optional[Sentence]:
        dialogue = self.active_dialogue
        if dialogue is None:
            return None
        return next((s for s in dialogue.sentences if s.id == sentence_id), None)

    def _replace_dialogue(self, dialogue: Dialogue) -> None:
        self._set_dialogues([dialogue if d.id == dialogue.id else d for d in self.dialogues])

    def _set_dialogues(self, dialogues: List[Dialogue]) -> None:
        self.dialogues = list(dialogues)
        self.panel.display_dialogues(self.dialogues, self.active_dialogue_id)
