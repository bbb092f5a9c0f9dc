"""Chapter editor screen - chapter details, vocabulary and dialogues."""

from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from chinese_learn.core import Chapter, Vocabulary
from chinese_learn.ui.dialogue_manager_panel import DialogueManagerPanel

_VOCABULARY_COLUMNS = ["Chinese", "Pinyin", "Meaning", "Image"]


class ChapterEditorScreen(QWidget):
    """Admin screen for one chapter.

    Signals:
        back_requested: Return to the dashboard.
        chapter_update_requested: New name and description.
        chapter_delete_requested: Delete the chapter.
        vocabulary_submitted: dict with chinese, pinyin, meaning, image_path, image_url.
        vocabulary_edit_requested / vocabulary_delete_requested: Vocabulary id.
        edit_cancelled: Leave edit mode for the word form.
        import_requested: Open the vocabulary JSON import.
    """

    back_requested = Signal()
    chapter_update_requested = Signal(str, str)
    chapter_delete_requested = Signal()
    vocabulary_submitted = Signal(dict)
    vocabulary_edit_requested = Signal(int)
    vocabulary_delete_requested = Signal(int)
    edit_cancelled = Signal()
    import_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._image_path: Optional[Path] = None
        self.dialogue_panel = DialogueManagerPanel()
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        back_button = QPushButton("← Back to Dashboard")
        back_button.clicked.connect(self.back_requested.emit)
        header.addWidget(back_button)
        self.title_label = QLabel()
        self.title_label.setStyleSheet("QLabel { color: #fff; font-size: 22px; font-weight: bold; }")
        header.addWidget(self.title_label, 1)
        main_layout.addLayout(header)

        chapter_box = QGroupBox("Chapter")
        chapter_form = QFormLayout(chapter_box)
        self.chapter_name_edit = QLineEdit()
        self.chapter_description_edit = QTextEdit()
        self.chapter_description_edit.setFixedHeight(60)
        chapter_buttons = QHBoxLayout()
        self.update_chapter_button = QPushButton("Update Chapter")
        self.update_chapter_button.clicked.connect(self._on_update_chapter_clicked)
        self.delete_chapter_button = QPushButton("Delete Chapter")
        self.delete_chapter_button.setStyleSheet("QPushButton { color: #e74c3c; }")
        self.delete_chapter_button.clicked.connect(self.chapter_delete_requested.emit)
        chapter_buttons.addWidget(self.update_chapter_button)
        chapter_buttons.addWidget(self.delete_chapter_button)
        chapter_form.addRow("Name", self.chapter_name_edit)
        chapter_form.addRow("Description", self.chapter_description_edit)
        chapter_form.addRow(chapter_buttons)
        main_layout.addWidget(chapter_box)

        tabs = QTabWidget()
        tabs.addTab(self._build_vocabulary_tab(), "Vocabulary")
        tabs.addTab(self.dialogue_panel, "Dialogues")
        main_layout.addWidget(tabs, 1)

    def _build_vocabulary_tab(self) -> QWidget:
        tab = QWidget()
        layout = QHBoxLayout(tab)

        self.word_form = QGroupBox("Add Word")
        form = QFormLayout(self.word_form)
        self.chinese_edit = QLineEdit()
        self.pinyin_edit = QLineEdit()
        self.meaning_edit = QLineEdit()
        self.image_url_edit = QLineEdit()
        self.image_url_edit.setPlaceholderText("https://...")
        image_row = QHBoxLayout()
        self.image_file_label = QLabel("No file chosen")
        choose_button = QPushButton("Choose Image...")
        choose_button.clicked.connect(self._on_choose_image)
        image_row.addWidget(self.image_file_label, 1)
        image_row.addWidget(choose_button)

        buttons = QHBoxLayout()
        self.submit_button = QPushButton("Add Word")
        self.submit_button.clicked.connect(self._on_submit_clicked)
        self.cancel_edit_button = QPushButton("Cancel Edit")
        self.cancel_edit_button.clicked.connect(self.edit_cancelled.emit)
        self.cancel_edit_button.hide()
        buttons.addWidget(self.submit_button)
        buttons.addWidget(self.cancel_edit_button)

        form.addRow("Chinese *", self.chinese_edit)
        form.addRow("Pinyin", self.pinyin_edit)
        form.addRow("Meaning", self.meaning_edit)
        form.addRow("Image file", image_row)
        form.addRow("Image URL", self.image_url_edit)
        form.addRow(buttons)
        layout.addWidget(self.word_form, 1)

        list_column = QVBoxLayout()
        import_button = QPushButton("Import JSON")
        import_button.clicked.connect(self.import_requested.emit)
        list_column.addWidget(import_button, alignment=Qt.AlignRight)

        self.vocabulary_table = QTableWidget(0, len(_VOCABULARY_COLUMNS))
        self.vocabulary_table.setHorizontalHeaderLabels(_VOCABULARY_COLUMNS)
        self.vocabulary_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.vocabulary_table.setSelectionBehavior(QTableWidget.SelectRows)
        self.vocabulary_table.setSelectionMode(QTableWidget.SingleSelection)
        self.vocabulary_table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.vocabulary_table.verticalHeader().setVisible(False)
        list_column.addWidget(self.vocabulary_table, 1)

        row_buttons = QHBoxLayout()
        edit_button = QPushButton("Edit")
        edit_button.clicked.connect(self._on_edit_clicked)
        delete_button = QPushButton("Delete")
        delete_button.clicked.connect(self._on_delete_clicked)
        row_buttons.addWidget(edit_button)
        row_buttons.addWidget(delete_button)
        list_column.addLayout(row_buttons)
        layout.addLayout(list_column, 2)
        return tab

    def set_chapter(self, chapter: Chapter):
        self.title_label.setText(chapter.name)
        self.chapter_name_edit.setText(chapter.name)
        self.chapter_description_edit.setPlainText(chapter.description)

    def display_vocabularies(self, vocabularies: List[Vocabulary]):
        self.vocabulary_table.setRowCount(len(vocabularies))
        for row, vocab in enumerate(vocabularies):
            values = (vocab.chinese, vocab.pinyin, vocab.meaning, "yes" if vocab.has_image else "")
            for column, text in enumerate(values):
                item = QTableWidgetItem(text)
                item.setData(Qt.UserRole, vocab.id)
                self.vocabulary_table.setItem(row, column, item)

    def fill_form(self, vocab: Vocabulary):
        """Put the form into edit mode for ``vocab``."""
        self.word_form.setTitle("Edit Word")
        self.submit_button.setText("Update Word")
        self.cancel_edit_button.show()
        self.chinese_edit.setText(vocab.chinese)
        self.pinyin_edit.setText(vocab.pinyin)
        self.meaning_edit.setText(vocab.meaning)
        self.image_url_edit.setText(vocab.image_url)
        self._set_image_path(None)

    def clear_form(self):
        self.word_form.setTitle("Add Word")
        self.submit_button.setText("Add Word")
        self.cancel_edit_button.hide()
        for edit in (self.chinese_edit, self.pinyin_edit, self.meaning_edit, self.image_url_edit):
            edit.clear()
        self._set_image_path(None)

    def set_submitting(self, submitting: bool):
        self.submit_button.setEnabled(not submitting)

    def set_chapter_busy(self, busy: bool):
        self.update_chapter_button.setEnabled(not busy)
        self.delete_chapter_button.setEnabled(not busy)

    def _set_image_path(self, path: Optional[Path]):
        self._image_path = path
        self.image_file_label.setText(path.name if path else "No file chosen")

    def _selected_vocabulary_id(self) -> Optional[int]:
        row = self.vocabulary_table.currentRow()
        item = self.vocabulary_table.item(row, 0) if row >= 0 else None
        return item.data(Qt.UserRole) if item else None

    def _on_update_chapter_clicked(self):
        name = self.chapter_name_edit.text().strip()
        if name:
            self.chapter_update_requested.emit(name, self.chapter_description_edit.toPlainText().strip())

    def _on_choose_image(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select Image",
            str(Path.home()),
            "Images (*.png *.jpg *.jpeg *.gif *.webp)",
        )
        if file_path:
            self._set_image_path(Path(file_path))

    def _on_submit_clicked(self):
        chinese = self.chinese_edit.text().strip()
        if not chinese:
            return
        self.vocabulary_submitted.emit({
            "chinese": chinese,
            "pinyin": self.pinyin_edit.text().strip(),
            "meaning": self.meaning_edit.text().strip(),
            "image_path": str(self._image_path) if self._image_path else "",
            "image_url": self.image_url_edit.text().strip(),
        })

    def _on_edit_clicked(self):
        vocabulary_id = self._selected_vocabulary_id()
        if vocabulary_id is not None:
            self.vocabulary_edit_requested.emit(int(vocabulary_id))

    def _on_delete_clicked(self):
        vocabulary_id = self._selected_vocabulary_id()
        if vocabulary_id is not None:
            self.vocabulary_delete_requested.emit(int(vocabulary_id))
