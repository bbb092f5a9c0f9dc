"""Study screen - flashcards and the vocabulary list of one chapter."""

from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QComboBox,
    QFrame,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QStackedWidget,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from chinese_learn.core import Vocabulary
from chinese_learn.coordinators.study_modes import CHINESE_TO_ENGLISH, ENGLISH_TO_CHINESE, CardFace
from chinese_learn.ui.remote_image import RemoteImageLabel

STUDY_PAGE = "study"
LIST_PAGE = "list"


class FlashCard(QFrame):
    """The card surface. Clicking it asks for a flip."""

    clicked = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setCursor(Qt.PointingHandCursor)
        self.setMinimumSize(420, 320)
        self.setStyleSheet("""
            QFrame {
                background-color: #2a2a2a;
                border: 2px solid #444;
                border-radius: 12px;
            }
        """)

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignCenter)

        self.chinese_label = QLabel()
        self.chinese_label.setAlignment(Qt.AlignCenter)
        self.chinese_label.setStyleSheet("QLabel { color: #fff; font-size: 64px; border: none; }")

        self.pinyin_label = QLabel()
        self.pinyin_label.setAlignment(Qt.AlignCenter)
        self.pinyin_label.setStyleSheet("QLabel { color: #aaa; font-size: 22px; border: none; }")

        self.image_label = RemoteImageLabel()

        self.meaning_label = QLabel()
        self.meaning_label.setAlignment(Qt.AlignCenter)
        self.meaning_label.setWordWrap(True)
        self.meaning_label.setStyleSheet("QLabel { color: #eee; font-size: 30px; border: none; }")

        for widget in (self.chinese_label, self.pinyin_label, self.image_label, self.meaning_label):
            layout.addWidget(widget)

    def show_face(self, face: CardFace):
        """Render one side: either the Chinese side or the meaning side."""
        self.chinese_label.setVisible(face.is_chinese)
        self.pinyin_label.setVisible(face.is_chinese and bool(face.pinyin))
        self.meaning_label.setVisible(not face.is_chinese)

        self.chinese_label.setText(face.chinese)
        self.pinyin_label.setText(face.pinyin)
        self.meaning_label.setText(face.meaning)
        self.image_label.set_url(face.image_url if face.is_chinese else "")

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)


class StudyScreen(QWidget):
    """Flashcard study and list views for a chapter's vocabulary.

    Signals:
        back_requested: Return to the chapter list.
        view_mode_changed: "study" or "list".
        direction_changed: "zh-en" or "en-zh".
        next_requested / previous_requested / flip_requested: Card navigation.
        dialogues_requested: Open the chapter's dialogues.
    """

    back_requested = Signal()
    view_mode_changed = Signal(str)
    direction_changed = Signal(str)
    next_requested = Signal()
    previous_requested = Signal()
    flip_requested = Signal()
    dialogues_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        """Build the header, the card page and the list page."""
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        back_button = QPushButton("← Back to Chapters")
        back_button.clicked.connect(self.back_requested.emit)
        header.addWidget(back_button)

        self.title_label = QLabel()
        self.title_label.setStyleSheet("QLabel { color: #fff; font-size: 22px; font-weight: bold; }")
        header.addWidget(self.title_label, 1)

        dialogues_button = QPushButton("Dialogues")
        dialogues_button.clicked.connect(self.dialogues_requested.emit)
        header.addWidget(dialogues_button)
        main_layout.addLayout(header)

        toolbar = QHBoxLayout()
        self.study_button = QPushButton("Study")
        self.list_button = QPushButton("List")
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        for button, mode in ((self.study_button, STUDY_PAGE), (self.list_button, LIST_PAGE)):
            button.setCheckable(True)
            self._mode_group.addButton(button)
            button.clicked.connect(lambda _checked=False, m=mode: self.view_mode_changed.emit(m))
            toolbar.addWidget(button)
        self.study_button.setChecked(True)

        toolbar.addStretch()
        self.direction_combo = QComboBox()
        for direction in (CHINESE_TO_ENGLISH, ENGLISH_TO_CHINESE):
            self.direction_combo.addItem(direction.label, direction.name)
        self.direction_combo.currentIndexChanged.connect(self._on_direction_selected)
        toolbar.addWidget(self.direction_combo)
        main_layout.addLayout(toolbar)

        self.pages = QStackedWidget()
        self.pages.addWidget(self._build_study_page())
        self.pages.addWidget(self._build_list_page())
        main_layout.addWidget(self.pages, 1)

    def _build_study_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        self.card = FlashCard()
        self.card.clicked.connect(self.flip_requested.emit)
        layout.addWidget(self.card, 1)

        self.empty_label = QLabel("No vocabulary in this chapter yet")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("QLabel { color: #888; font-size: 18px; padding: 80px; }")
        self.empty_label.hide()
        layout.addWidget(self.empty_label, 1)

        controls = QHBoxLayout()
        self.previous_button = QPushButton("← Previous")
        self.previous_button.clicked.connect(self.previous_requested.emit)
        self.flip_button = QPushButton("Flip")
        self.flip_button.clicked.connect(self.flip_requested.emit)
        self.next_button = QPushButton("Next →")
        self.next_button.clicked.connect(self.next_requested.emit)
        self.progress_label = QLabel()
        self.progress_label.setAlignment(Qt.AlignCenter)

        controls.addWidget(self.previous_button)
        controls.addWidget(self.progress_label, 1)
        controls.addWidget(self.flip_button)
        controls.addWidget(self.next_button)
        layout.addLayout(controls)

        hint = QLabel("← / → to move, Space for next, ↑ / ↓ to flip")
        hint.setAlignment(Qt.AlignCenter)
        hint.setStyleSheet("QLabel { color: #777; font-size: 12px; }")
        layout.addWidget(hint)
        return page

    def _build_list_page(self) -> QWidget:
        self.vocabulary_table = QTableWidget(0, 3)
        self.vocabulary_table.setHorizontalHeaderLabels(["Chinese", "Pinyin", "Meaning"])
        self.vocabulary_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.vocabulary_table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.vocabulary_table.verticalHeader().setVisible(False)
        return self.vocabulary_table

    def set_title(self, title: str):
        self.title_label.setText(title)

    def set_view_mode(self, mode: str):
        is_study = mode == STUDY_PAGE
        self.pages.setCurrentIndex(0 if is_study else 1)
        self.study_button.setChecked(is_study)
        self.list_button.setChecked(not is_study)

    def set_direction(self, name: str):
        """Reflect the active direction without re-emitting it."""
        index = self.direction_combo.findData(name)
        if index < 0 or index == self.direction_combo.currentIndex():
            return
        self.direction_combo.blockSignals(True)
        self.direction_combo.setCurrentIndex(index)
        self.direction_combo.blockSignals(False)

    def show_card(self, face: CardFace, position: int, total: int, flipped: bool):
        self.empty_label.hide()
        self.card.show()
        self.card.show_face(face)
        self.card.setProperty("flipped", flipped)
        self.progress_label.setText(f"{position} / {total}")
        self._set_navigation_enabled(True)

    def show_empty(self):
        self.card.hide()
        self.empty_label.show()
        self.progress_label.setText("0 / 0")
        self._set_navigation_enabled(False)

    def display_list(self, vocabularies: List[Vocabulary]):
        """Fill the list view table."""
        self.vocabulary_table.setRowCount(len(vocabularies))
        for row, vocab in enumerate(vocabularies):
            for column, text in enumerate((vocab.chinese, vocab.pinyin, vocab.meaning)):
                self.vocabulary_table.setItem(row, column, QTableWidgetItem(text))

    def _set_navigation_enabled(self, enabled: bool):
        for button in (self.previous_button, self.flip_button, self.next_button):
            button.setEnabled(enabled)

    def _on_direction_selected(self, index: int):
        name = self.direction_combo.itemData(index)
        if name:
            self.direction_changed.emit(name)
