"""Chapter list screen - public entry point listing all chapters."""

from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QGridLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from chinese_learn.core import Chapter


class ChapterTile(QPushButton):
    """A clickable tile showing a chapter's name and description."""

    chapter_clicked = Signal(int)

    def __init__(self, chapter: Chapter, parent=None):
        text = chapter.name if not chapter.description else f"{chapter.name}\n\n{chapter.description}"
        super().__init__(text, parent)
        self.chapter = chapter
        self.setMinimumSize(240, 120)
        self.setCursor(Qt.PointingHandCursor)
        self.setStyleSheet("""
            QPushButton {
                color: #ddd;
                background-color: #2a2a2a;
                border: 2px solid #444;
                border-radius: 8px;
                font-size: 15px;
                padding: 12px;
                text-align: left;
            }
            QPushButton:hover {
                border: 2px solid #c0392b;
            }
        """)
        self.clicked.connect(lambda: self.chapter_clicked.emit(self.chapter.id))


class ChapterListScreen(QWidget):
    """Displays chapters in a 3-column grid.

    Signals:
        chapter_selected: Emitted with the chapter id when a tile is clicked.
        admin_requested: Emitted when the admin link is clicked.
    """

    chapter_selected = Signal(int)
    admin_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._chapters: List[Chapter] = []
        self._setup_ui()

    def _setup_ui(self):
        """Build the chapter list layout."""
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(20, 20, 20, 20)

        title_label = QLabel("Chinese Vocabulary Chapters")
        title_label.setStyleSheet("""
            QLabel {
                color: #fff;
                font-size: 24px;
                font-weight: bold;
                padding-bottom: 10px;
            }
        """)
        main_layout.addWidget(title_label)

        scroll_area = QScrollArea()
        scroll_area.setWidgetResizable(True)
        scroll_area.setStyleSheet("QScrollArea { border: none; }")

        self.grid_container = QWidget()
        self.grid_layout = QGridLayout(self.grid_container)
        self.grid_layout.setSpacing(20)
        self.grid_layout.setContentsMargins(0, 0, 0, 0)
        scroll_area.setWidget(self.grid_container)
        main_layout.addWidget(scroll_area)

        self.empty_label = QLabel("No chapters yet")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("QLabel { color: #888; font-size: 18px; padding: 100px; }")
        self.empty_label.hide()
        self.grid_layout.addWidget(self.empty_label, 0, 0, 1, 3)

        admin_button = QPushButton("Admin")
        admin_button.setFlat(True)
        admin_button.clicked.connect(self.admin_requested.emit)
        main_layout.addWidget(admin_button, alignment=Qt.AlignRight)

    def display_chapters(self, chapters: List[Chapter]):
        """Display the given chapters in the grid."""
        self._chapters = list(chapters)
        self._clear_grid()

        if not self._chapters:
            self.empty_label.show()
            return
        self.empty_label.hide()

        for idx, chapter in enumerate(self._chapters):
            tile = ChapterTile(chapter)
            tile.chapter_clicked.connect(self.chapter_selected.emit)
            self.grid_layout.addWidget(tile, idx // 3, idx % 3)

    def tile_count(self) -> int:
        return sum(
            1 for i in range(self.grid_layout.count())
            if isinstance(self.grid_layout.itemAt(i).widget(), ChapterTile)
        )

    def _clear_grid(self):
        """Remove all tiles from the grid."""
        items_to_remove = []
        for i in range(self.grid_layout.count()):
            widget = self.grid_layout.itemAt(i).widget()
            if widget and widget != self.empty_label:
                items_to_remove.append(widget)

        for widget in items_to_remove:
            self.grid_layout.removeWidget(widget)
            widget.deleteLater()
