"""Login dialog for the admin area."""

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)


class LoginDialog(QDialog):
    """Collects admin credentials.

    The dialog never checks them itself; it emits ``login_submitted`` and
    waits for ``accept`` or ``show_error_text``.
    """

    login_submitted = Signal(str, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Admin Login")
        self.setModal(True)

        layout = QVBoxLayout(self)
        form = QFormLayout()
        self.username_edit = QLineEdit()
        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.Password)
        form.addRow("Username", self.username_edit)
        form.addRow("Password", self.password_edit)
        layout.addLayout(form)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("QLabel { color: #e74c3c; }")
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.button(QDialogButtonBox.Ok).setText("Login")
        buttons.accepted.connect(self._on_submit)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def reset(self):
        self.username_edit.clear()
        self.password_edit.clear()
        self.error_label.clear()
        self.error_label.hide()
        self.username_edit.setFocus()

    def show_error_text(self, message: str):
        self.error_label.setText(message)
        self.error_label.show()
        self.password_edit.clear()

    def _on_submit(self):
        self.login_submitted.emit(self.username_edit.text(), self.password_edit.text())
