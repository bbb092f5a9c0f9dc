"""Import dialog - paste or load a JSON array for bulk import."""

from pathlib import Path

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
)

from chinese_learn.services import ImportKind

_EXAMPLES = {
    ImportKind.VOCABULARY: (
        '[\n'
        '  {"chinese": "你好", "pinyin": "nǐ hǎo", "meaning": "hello"},\n'
        '  {"chinese": "谢谢", "pinyin": "xiè xie", "meaning": "thank you"}\n'
        ']'
    ),
    ImportKind.DIALOGUE: (
        '[\n'
        '  {\n'
        '    "title": "Greeting",\n'
        '    "sentences": [\n'
        '      {"speaker": "A", "chinese": "你好！", "pinyin": "nǐ hǎo!", "english": "Hello!"},\n'
        '      {"speaker": "B", "chinese": "你好！", "pinyin": "nǐ hǎo!", "english": "Hello!"}\n'
        '    ]\n'
        '  }\n'
        ']'
    ),
}


class ImportDialog(QDialog):
    """Staging area for a JSON import.

    Signals:
        import_requested: The Import button was pressed.
        file_chosen: A JSON file to load into the text area.
        text_edited: The staged text changed by typing or pasting.
        cancel_requested: Cancel was pressed (stops a running import).
    """

    import_requested = Signal()
    file_chosen = Signal(Path)
    text_edited = Signal(str)
    cancel_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Import JSON")
        self.resize(640, 520)

        layout = QVBoxLayout(self)
        self.heading_label = QLabel()
        self.heading_label.setStyleSheet("QLabel { font-size: 16px; font-weight: bold; }")
        layout.addWidget(self.heading_label)
        layout.addWidget(QLabel("Paste a JSON array, or load it from a .json file."))

        self.text_edit = QPlainTextEdit()
        self.text_edit.textChanged.connect(self._on_text_changed)
        layout.addWidget(self.text_edit, 1)

        buttons = QHBoxLayout()
        self.load_button = QPushButton("Load File...")
        self.load_button.clicked.connect(self._on_load_clicked)
        buttons.addWidget(self.load_button)
        buttons.addStretch()
        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.cancel_requested.emit)
        buttons.addWidget(self.cancel_button)
        self.import_button = QPushButton("Import")
        self.import_button.setDefault(True)
        self.import_button.clicked.connect(self.import_requested.emit)
        buttons.addWidget(self.import_button)
        layout.addLayout(buttons)

    def set_kind(self, kind: ImportKind):
        noun = "Vocabulary" if kind is ImportKind.VOCABULARY else "Dialogues"
        self.heading_label.setText(f"Import {noun} (JSON)")
        self.text_edit.setPlaceholderText(_EXAMPLES[kind])

    def set_text(self, text: str):
        """Replace the staged text without echoing it back as an edit."""
        self.text_edit.blockSignals(True)
        self.text_edit.setPlainText(text)
        self.text_edit.blockSignals(False)

    def text(self) -> str:
        return self.text_edit.toPlainText()

    def set_importing(self, importing: bool):
        self.import_button.setEnabled(not importing)
        self.import_button.setText("Importing..." if importing else "Import")
        self.load_button.setEnabled(not importing)
        self.text_edit.setReadOnly(importing)
        self.cancel_button.setText("Cancel Import" if importing else "Cancel")

    def _on_text_changed(self):
        self.text_edited.emit(self.text_edit.toPlainText())

    def _on_load_clicked(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select JSON File",
            str(Path.home()),
            "JSON Files (*.json);;All Files (*)",
        )
        if file_path:
            self.file_chosen.emit(Path(file_path))
