"""Dialogue screen - pick a dialogue, then read and listen to it."""

from typing import Dict, List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from chinese_learn.core import Dialogue, Sentence

_ROW_STYLE = """
    QFrame {{
        background-color: {background};
        border: 1px solid #444;
        border-radius: 8px;
    }}
"""


class SentenceRow(QFrame):
    """One sentence with speaker, text and a play button."""

    play_clicked = Signal(int)

    def __init__(self, sentence: Sentence, parent=None):
        super().__init__(parent)
        self.sentence = sentence

        layout = QHBoxLayout(self)
        speaker = QLabel(sentence.speaker)
        speaker.setFixedWidth(36)
        speaker.setAlignment(Qt.AlignCenter)
        speaker.setStyleSheet("QLabel { color: #fff; font-weight: bold; font-size: 16px; border: none; }")
        layout.addWidget(speaker)

        text_layout = QVBoxLayout()
        for text, style in (
            (sentence.chinese, "color: #fff; font-size: 22px;"),
            (sentence.pinyin, "color: #aaa; font-size: 14px;"),
            (sentence.english, "color: #ccc; font-size: 14px;"),
        ):
            if text:
                label = QLabel(text)
                label.setWordWrap(True)
                label.setStyleSheet(f"QLabel {{ {style} border: none; }}")
                text_layout.addWidget(label)
        layout.addLayout(text_layout, 1)

        self.play_button = QPushButton("▶")
        self.play_button.setFixedSize(36, 36)
        self.play_button.setToolTip("Play audio" if sentence.has_audio else "Highlight sentence")
        self.play_button.clicked.connect(lambda: self.play_clicked.emit(self.sentence.id))
        layout.addWidget(self.play_button)

        self.set_playing(False)

    def set_playing(self, playing: bool):
        self.setStyleSheet(_ROW_STYLE.format(background="#5a2a2a" if playing else "#2a2a2a"))
        self.play_button.setText("■" if playing else "▶")


class DialogueScreen(QWidget):
    """Dialogue list and dialogue detail for one chapter.

    Signals:
        dialogue_selected: Dialogue id picked from the list.
        back_to_list_requested: Leave the detail view.
        play_requested: Sentence id to play or highlight.
        back_requested: Return to the chapter's vocabulary.
    """

    dialogue_selected = Signal(int)
    back_to_list_requested = Signal()
    play_requested = Signal(int)
    back_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows: Dict[int, SentenceRow] = {}
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(20, 20, 20, 20)

        self.pages = QStackedWidget()
        self.pages.addWidget(self._build_list_page())
        self.pages.addWidget(self._build_detail_page())
        main_layout.addWidget(self.pages)

    def _build_list_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        header = QHBoxLayout()
        back_button = QPushButton("← Back to Vocabulary")
        back_button.clicked.connect(self.back_requested.emit)
        header.addWidget(back_button)
        title = QLabel("Dialogues")
        title.setStyleSheet("QLabel { color: #fff; font-size: 22px; font-weight: bold; }")
        header.addWidget(title, 1)
        layout.addLayout(header)

        self.empty_label = QLabel("No dialogues in this chapter yet")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("QLabel { color: #888; font-size: 18px; padding: 80px; }")
        layout.addWidget(self.empty_label)

        self.list_container = QWidget()
        self.list_layout = QVBoxLayout(self.list_container)
        self.list_layout.setAlignment(Qt.AlignTop)
        layout.addWidget(_scrolling(self.list_container), 1)
        return page

    def _build_detail_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        back_button = QPushButton("← All Dialogues")
        back_button.clicked.connect(self.back_to_list_requested.emit)
        layout.addWidget(back_button, alignment=Qt.AlignLeft)

        self.dialogue_title = QLabel()
        self.dialogue_title.setStyleSheet("QLabel { color: #fff; font-size: 22px; font-weight: bold; }")
        layout.addWidget(self.dialogue_title)
        self.dialogue_description = QLabel()
        self.dialogue_description.setWordWrap(True)
        self.dialogue_description.setStyleSheet("QLabel { color: #aaa; }")
        layout.addWidget(self.dialogue_description)

        self.sentence_container = QWidget()
        self.sentence_layout = QVBoxLayout(self.sentence_container)
        self.sentence_layout.setAlignment(Qt.AlignTop)
        layout.addWidget(_scrolling(self.sentence_container), 1)
        return page

    def display_dialogues(self, dialogues: List[Dialogue]):
        """Show the list page with one button per dialogue."""
        _clear_layout(self.list_layout)
        self.empty_label.setVisible(not dialogues)
        for dialogue in dialogues:
            count = len(dialogue.sentences)
            button = QPushButton(f"{dialogue.title}  ({count} sentence{'s' if count != 1 else ''})")
            button.setStyleSheet("QPushButton { text-align: left; padding: 12px; font-size: 15px; }")
            button.clicked.connect(lambda _checked=False, d=dialogue.id: self.dialogue_selected.emit(d))
            self.list_layout.addWidget(button)
        self.pages.setCurrentIndex(0)

    def display_dialogue(self, dialogue: Dialogue, sentences: List[Sentence]):
        """Show the detail page with ``sentences`` in the given order."""
        self.dialogue_title.setText(dialogue.title)
        self.dialogue_description.setText(dialogue.description)
        self.dialogue_description.setVisible(bool(dialogue.description))

        _clear_layout(self.sentence_layout)
        self._rows = {}
        for sentence in sentences:
            row = SentenceRow(sentence)
            row.play_clicked.connect(self.play_requested.emit)
            self.sentence_layout.addWidget(row)
            self._rows[sentence.id] = row
        self.pages.setCurrentIndex(1)

    def set_playing(self, sentence_id: Optional[int]):
        """Highlight the sentence being played, or none."""
        for row_id, row in self._rows.items():
            row.set_playing(row_id == sentence_id)

    def sentence_ids(self) -> List[int]:
        return list(self._rows)


def _scrolling(widget: QWidget) -> QScrollArea:
    area = QScrollArea()
    area.setWidgetResizable(True)
    area.setStyleSheet("QScrollArea { border: none; }")
    area.setWidget(widget)
    return area


def _clear_layout(layout):
    while layout.count():
        widget = layout.takeAt(0).widget()
        if widget is not None:
            widget.deleteLater()
