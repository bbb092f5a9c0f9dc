"""Dialogue manager panel - admin editing of a chapter's dialogues."""

from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from chinese_learn.core import DEFAULT_SPEAKER, Dialogue, Sentence

_SENTENCE_COLUMNS = ["Order", "Speaker", "Chinese", "Pinyin", "English"]


class DialogueManagerPanel(QWidget):
    """Dialogue list on the left, the active dialogue's sentences on the right.

    Signals:
        dialogue_save_requested: dict with id (None for new), title, description.
        dialogue_delete_requested: Dialogue id.
        dialogue_activated: Dialogue id clicked in the list.
        sentence_save_requested: dict with speaker, chinese, pinyin, english, order.
        sentence_edit_requested: Sentence id.
        sentence_delete_requested: Sentence id and its dialogue id.
        sentence_edit_cancelled: Sentence form reset.
        import_requested: Open the dialogue JSON import.
    """

    dialogue_save_requested = Signal(dict)
    dialogue_delete_requested = Signal(int)
    dialogue_activated = Signal(int)
    sentence_save_requested = Signal(dict)
    sentence_edit_requested = Signal(int)
    sentence_delete_requested = Signal(int, int)
    sentence_edit_cancelled = Signal()
    import_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._dialogues: List[Dialogue] = []
        self._active_id: Optional[int] = None
        self._editing_dialogue_id: Optional[int] = None
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QHBoxLayout(self)
        main_layout.addLayout(self._build_dialogue_column(), 1)
        main_layout.addLayout(self._build_sentence_column(), 2)

    def _build_dialogue_column(self):
        column = QVBoxLayout()

        buttons = QHBoxLayout()
        new_button = QPushButton("New Dialogue")
        new_button.clicked.connect(lambda: self.open_dialogue_form(None))
        import_button = QPushButton("Import JSON")
        import_button.clicked.connect(self.import_requested.emit)
        buttons.addWidget(new_button)
        buttons.addWidget(import_button)
        column.addLayout(buttons)

        self.dialogue_list = QListWidget()
        self.dialogue_list.itemClicked.connect(self._on_dialogue_clicked)
        column.addWidget(self.dialogue_list, 1)

        row_buttons = QHBoxLayout()
        self.edit_dialogue_button = QPushButton("Edit")
        self.edit_dialogue_button.clicked.connect(lambda: self.open_dialogue_form(self._active_id))
        self.delete_dialogue_button = QPushButton("Delete")
        self.delete_dialogue_button.clicked.connect(self._on_delete_dialogue_clicked)
        row_buttons.addWidget(self.edit_dialogue_button)
        row_buttons.addWidget(self.delete_dialogue_button)
        column.addLayout(row_buttons)

        self.dialogue_form = QGroupBox("Dialogue")
        form = QFormLayout(self.dialogue_form)
        self.title_edit = QLineEdit()
        self.description_edit = QTextEdit()
        self.description_edit.setFixedHeight(60)
        form_buttons = QHBoxLayout()
        self.save_dialogue_button = QPushButton("Save")
        self.save_dialogue_button.clicked.connect(self._on_save_dialogue_clicked)
        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(self.close_dialogue_form)
        form_buttons.addWidget(self.save_dialogue_button)
        form_buttons.addWidget(cancel_button)
        form.addRow("Title", self.title_edit)
        form.addRow("Description", self.description_edit)
        form.addRow(form_buttons)
        self.dialogue_form.hide()
        column.addWidget(self.dialogue_form)

        self._update_dialogue_buttons()
        return column

    def _build_sentence_column(self):
        column = QVBoxLayout()

        self.sentence_table = QTableWidget(0, len(_SENTENCE_COLUMNS))
        self.sentence_table.setHorizontalHeaderLabels(_SENTENCE_COLUMNS)
        self.sentence_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.sentence_table.setSelectionBehavior(QTableWidget.SelectRows)
        self.sentence_table.setSelectionMode(QTableWidget.SingleSelection)
        self.sentence_table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.sentence_table.verticalHeader().setVisible(False)
        column.addWidget(self.sentence_table, 1)

        row_buttons = QHBoxLayout()
        edit_button = QPushButton("Edit Sentence")
        edit_button.clicked.connect(self._on_edit_sentence_clicked)
        delete_button = QPushButton("Delete Sentence")
        delete_button.clicked.connect(self._on_delete_sentence_clicked)
        row_buttons.addWidget(edit_button)
        row_buttons.addWidget(delete_button)
        column.addLayout(row_buttons)

        self.sentence_form = QGroupBox("Add Sentence")
        form = QFormLayout(self.sentence_form)
        self.speaker_edit = QLineEdit(DEFAULT_SPEAKER)
        self.chinese_edit = QLineEdit()
        self.pinyin_edit = QLineEdit()
        self.english_edit = QLineEdit()
        self.order_spin = QSpinBox()
        self.order_spin.setRange(1, 9999)
        form_buttons = QHBoxLayout()
        self.save_sentence_button = QPushButton("Add Sentence")
        self.save_sentence_button.clicked.connect(self._on_save_sentence_clicked)
        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(self.sentence_edit_cancelled.emit)
        form_buttons.addWidget(self.save_sentence_button)
        form_buttons.addWidget(cancel_button)
        form.addRow("Speaker", self.speaker_edit)
        form.addRow("Chinese", self.chinese_edit)
        form.addRow("Pinyin", self.pinyin_edit)
        form.addRow("English", self.english_edit)
        form.addRow("Order", self.order_spin)
        form.addRow(form_buttons)
        column.addWidget(self.sentence_form)

        self.sentence_form.setEnabled(False)
        return column

    def display_dialogues(self, dialogues: List[Dialogue], active_id: Optional[int]):
        self._dialogues = list(dialogues)
        self.dialogue_list.clear()
        for dialogue in self._dialogues:
            item = QListWidgetItem(f"{dialogue.title} ({len(dialogue.sentences)})")
            item.setData(Qt.UserRole, dialogue.id)
            self.dialogue_list.addItem(item)
        self.set_active_dialogue(active_id)

    def set_active_dialogue(self, dialogue_id: Optional[int]):
        """Select a dialogue and show its sentences, or clear the selection."""
        self._active_id = dialogue_id
        self.dialogue_list.blockSignals(True)
        self.dialogue_list.clearSelection()
        for row in range(self.dialogue_list.count()):
            item = self.dialogue_list.item(row)
            if item.data(Qt.UserRole) == dialogue_id:
                item.setSelected(True)
        self.dialogue_list.blockSignals(False)

        dialogue = self._active_dialogue()
        sentences = dialogue.sentences if dialogue else []
        self.sentence_table.setRowCount(len(sentences))
        for row, sentence in enumerate(sentences):
            values = (str(sentence.order), sentence.speaker, sentence.chinese, sentence.pinyin, sentence.english)
            for column, text in enumerate(values):
                item = QTableWidgetItem(text)
                item.setData(Qt.UserRole, sentence.id)
                self.sentence_table.setItem(row, column, item)
        self.sentence_form.setEnabled(dialogue is not None)
        self._update_dialogue_buttons()

    def open_dialogue_form(self, dialogue_id: Optional[int]):
        dialogue = next((d for d in self._dialogues if d.id == dialogue_id), None)
        self._editing_dialogue_id = dialogue.id if dialogue else None
        self.dialogue_form.setTitle("Edit Dialogue" if dialogue else "New Dialogue")
        self.title_edit.setText(dialogue.title if dialogue else "")
        self.description_edit.setPlainText(dialogue.description if dialogue else "")
        self.dialogue_form.show()
        self.title_edit.setFocus()

    def close_dialogue_form(self):
        self._editing_dialogue_id = None
        self.title_edit.clear()
        self.description_edit.clear()
        self.dialogue_form.hide()

    def set_dialogue_saving(self, saving: bool):
        self.save_dialogue_button.setEnabled(not saving)

    def set_sentence_saving(self, saving: bool):
        self.save_sentence_button.setEnabled(not saving)

    def fill_sentence_form(self, sentence: Sentence):
        self.sentence_form.setTitle("Edit Sentence")
        self.save_sentence_button.setText("Update Sentence")
        self.speaker_edit.setText(sentence.speaker)
        self.chinese_edit.setText(sentence.chinese)
        self.pinyin_edit.setText(sentence.pinyin)
        self.english_edit.setText(sentence.english)
        self.order_spin.setValue(max(sentence.order, 1))

    def reset_sentence_form(self, speaker: str, order: int):
        self.sentence_form.setTitle("Add Sentence")
        self.save_sentence_button.setText("Add Sentence")
        self.speaker_edit.setText(speaker)
        self.chinese_edit.clear()
        self.pinyin_edit.clear()
        self.english_edit.clear()
        self.order_spin.setValue(order)

    def _active_dialogue(self) -> Optional[Dialogue]:
        return next((d for d in self._dialogues if d.id == self._active_id), None)

    def _selected_sentence_id(self) -> Optional[int]:
        row = self.sentence_table.currentRow()
        item = self.sentence_table.item(row, 0) if row >= 0 else None
        return item.data(Qt.UserRole) if item else None

    def _update_dialogue_buttons(self):
        has_active = self._active_id is not None
        self.edit_dialogue_button.setEnabled(has_active)
        self.delete_dialogue_button.setEnabled(has_active)

    def _on_dialogue_clicked(self, item: QListWidgetItem):
        self.dialogue_activated.emit(int(item.data(Qt.UserRole)))

    def _on_delete_dialogue_clicked(self):
        if self._active_id is not None:
            self.dialogue_delete_requested.emit(self._active_id)

    def _on_save_dialogue_clicked(self):
        title = self.title_edit.text().strip()
        if not title:
            return
        self.dialogue_save_requested.emit({
            "id": self._editing_dialogue_id,
            "title": title,
            "description": self.description_edit.toPlainText().strip(),
        })

    def _on_save_sentence_clicked(self):
        chinese = self.chinese_edit.text().strip()
        if not chinese:
            return
        self.sentence_save_requested.emit({
            "speaker": self.speaker_edit.text().strip() or DEFAULT_SPEAKER,
            "chinese": chinese,
            "pinyin": self.pinyin_edit.text().strip(),
            "english": self.english_edit.text().strip(),
            "order": self.order_spin.value(),
        })

    def _on_edit_sentence_clicked(self):
        sentence_id = self._selected_sentence_id()
        if sentence_id is not None:
            self.sentence_edit_requested.emit(int(sentence_id))

    def _on_delete_sentence_clicked(self):
        sentence_id = self._selected_sentence_id()
        if sentence_id is not None and self._active_id is not None:
            self.sentence_delete_requested.emit(int(sentence_id), self._active_id)
