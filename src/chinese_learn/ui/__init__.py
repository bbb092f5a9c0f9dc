"""UI layer - PySide6 presentation components."""

from .admin_dashboard_screen import AdminDashboardScreen
from .chapter_editor_screen import ChapterEditorScreen
from .chapter_list_screen import ChapterListScreen
from .dialogue_manager_panel import DialogueManagerPanel
from .dialogue_screen import DialogueScreen
from .import_dialog import ImportDialog
from .login_dialog import LoginDialog
from .main_window import MainWindow
from .study_screen import StudyScreen

__all__ = [
    "MainWindow",
    "ChapterListScreen",
    "StudyScreen",
    "DialogueScreen",
    "LoginDialog",
    "AdminDashboardScreen",
    "ChapterEditorScreen",
    "DialogueManagerPanel",
    "ImportDialog",
]
