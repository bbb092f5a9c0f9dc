"""Admin dashboard - chapter creation and the list of chapters to manage."""

from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from chinese_learn.core import Chapter


class AdminDashboardScreen(QWidget):
    """Signals:
        create_chapter_requested: Name and description of a new chapter.
        chapter_opened: Chapter id to manage.
        logout_requested: End the admin session.
        public_site_requested: Go back to the public chapter list.
    """

    create_chapter_requested = Signal(str, str)
    chapter_opened = Signal(int)
    logout_requested = Signal()
    public_site_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        title = QLabel("Admin Dashboard")
        title.setStyleSheet("QLabel { color: #fff; font-size: 24px; font-weight: bold; }")
        header.addWidget(title, 1)
        public_button = QPushButton("View Public Site")
        public_button.clicked.connect(self.public_site_requested.emit)
        header.addWidget(public_button)
        logout_button = QPushButton("Logout")
        logout_button.clicked.connect(self.logout_requested.emit)
        header.addWidget(logout_button)
        main_layout.addLayout(header)

        create_box = QGroupBox("Create New Chapter")
        form = QFormLayout(create_box)
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("e.g. HSK 1")
        self.description_edit = QTextEdit()
        self.description_edit.setFixedHeight(70)
        self.create_button = QPushButton("Create Chapter")
        self.create_button.clicked.connect(self._on_create_clicked)
        form.addRow("Name", self.name_edit)
        form.addRow("Description", self.description_edit)
        form.addRow(self.create_button)
        main_layout.addWidget(create_box)

        main_layout.addWidget(QLabel("Chapters"))
        self.chapter_list = QListWidget()
        self.chapter_list.itemActivated.connect(self._on_item_activated)
        main_layout.addWidget(self.chapter_list, 1)

        self.empty_label = QLabel("No chapters yet. Create one above.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet("QLabel { color: #888; }")
        main_layout.addWidget(self.empty_label)

    def display_chapters(self, chapters: List[Chapter]):
        self.chapter_list.clear()
        for chapter in chapters:
            text = chapter.name if not chapter.description else f"{chapter.name} - {chapter.description}"
            item = QListWidgetItem(text)
            item.setData(Qt.UserRole, chapter.id)
            self.chapter_list.addItem(item)
        self.empty_label.setVisible(not chapters)

    def set_creating(self, creating: bool):
        self.create_button.setEnabled(not creating)
        self.create_button.setText("Creating..." if creating else "Create Chapter")

    def clear_form(self):
        self.name_edit.clear()
        self.description_edit.clear()

    def _on_create_clicked(self):
        name = self.name_edit.text().strip()
        if not name:
            return
        self.create_chapter_requested.emit(name, self.description_edit.toPlainText().strip())

    def _on_item_activated(self, item: QListWidgetItem):
        self.chapter_opened.emit(int(item.data(Qt.UserRole)))
