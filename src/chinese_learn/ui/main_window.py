"""Main Window - Application shell with menus and a screen stack."""

from PySide6.QtCore import Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMessageBox, QStackedWidget, QWidget


class MainWindow(QMainWindow):
    """Hosts one screen at a time and offers message boxes to coordinators."""

    # Menu navigation
    chapters_requested = Signal()
    admin_requested = Signal()
    screen_changed = Signal(QWidget)

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Chinese Learning")
        self.setGeometry(100, 100, 1100, 780)

        self._setup_ui()
        self._create_menu_bar()

    def _setup_ui(self):
        """Initialize the central screen stack."""
        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)
        self.stack.currentChanged.connect(self._on_current_changed)

    def _create_menu_bar(self):
        """Create the application menu bar."""
        menu_bar = self.menuBar()

        learn_menu = menu_bar.addMenu("&Learn")

        chapters_action = QAction("&Chapters", self)
        chapters_action.setShortcut("Ctrl+L")
        chapters_action.triggered.connect(self.chapters_requested.emit)
        learn_menu.addAction(chapters_action)

        learn_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        learn_menu.addAction(exit_action)

        admin_menu = menu_bar.addMenu("&Admin")

        admin_action = QAction("&Dashboard...", self)
        admin_action.triggered.connect(self.admin_requested.emit)
        admin_menu.addAction(admin_action)

    def show_screen(self, screen: QWidget):
        """Bring ``screen`` to the front, adding it to the stack on first use."""
        if self.stack.indexOf(screen) == -1:
            self.stack.addWidget(screen)
        self.stack.setCurrentWidget(screen)

    def current_screen(self) -> QWidget:
        return self.stack.currentWidget()

    def _on_current_changed(self, index: int):
        screen = self.stack.widget(index)
        if screen is not None:
            self.screen_changed.emit(screen)

    def show_error(self, title: str, message: str):
        """Display an error message to the user."""
        QMessageBox.critical(self, title, message)

    def show_info(self, title: str, message: str):
        """Display an information message to the user."""
        QMessageBox.information(self, title, message)

    def confirm(self, title: str, message: str) -> bool:
        """Ask a yes/no question; No is the default."""
        reply = QMessageBox.question(
            self,
            title,
            message,
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        return reply == QMessageBox.Yes
