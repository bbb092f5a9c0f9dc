"""Admin Coordinator - login gate and chapter dashboard."""

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from chinese_learn.core import Chapter
from chinese_learn.io import ChapterRepository
from chinese_learn.coordinators.backend_calls import BackendCalls
from chinese_learn.services import AdminSession, AuthenticationError, AuthService

logger = logging.getLogger(__name__)


def require_session(session: Optional[AdminSession]) -> AdminSession:
    """Fail fast when an admin operation runs without a live session."""
    if session is None or not session.is_valid():
        raise PermissionError("An admin session is required")
    return session


class AdminCoordinator(QObject):
    """Root of the admin screens.

    The only place that checks for an admin session: every admin screen
    below it receives the session object explicitly. When the session has
    expired, the login dialog is shown again instead of running the action.
    """

    exited = Signal()

    def __init__(
        self,
        auth_service: AuthService,
        login_dialog,
        dashboard_screen,
        chapter_repository: ChapterRepository,
        chapter_editor,
        main_window,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if auth_service is None:
            raise ValueError("AuthService must not be None")
        if login_dialog is None:
            raise ValueError("LoginDialog must not be None")
        if dashboard_screen is None:
            raise ValueError("DashboardScreen must not be None")
        if chapter_editor is None:
            raise ValueError("ChapterEditorCoordinator must not be None")
        if main_window is None:
            raise ValueError("MainWindow must not be None")

        self.auth_service = auth_service
        self.login_dialog = login_dialog
        self.dashboard_screen = dashboard_screen
        self.chapter_repository = chapter_repository
        self.chapter_editor = chapter_editor
        self.main_window = main_window
        self.calls = BackendCalls(thread_pool)

        self.session: Optional[AdminSession] = None
        self.chapters: List[Chapter] = []

        self.login_dialog.login_submitted.connect(self.handle_login)
        self.dashboard_screen.create_chapter_requested.connect(self.handle_create_chapter)
        self.dashboard_screen.chapter_opened.connect(self.handle_chapter_opened)
        self.dashboard_screen.logout_requested.connect(self.handle_logout)
        self.dashboard_screen.public_site_requested.connect(self.exited.emit)
        self.chapter_editor.closed.connect(self.show_dashboard)
        self.chapter_editor.chapter_deleted.connect(self._on_chapter_deleted)

    def open_admin(self) -> None:
        """Enter the admin area, asking for credentials when needed."""
        self.session = self.auth_service.current_session()
        if self._live_session() is None:
            return
        self.show_dashboard()

    @Slot(str, str)
    def handle_login(self, username: str, password: str) -> None:
        try:
            self.session = self.auth_service.login(username, password)
        except AuthenticationError as e:
            self.login_dialog.show_error_text(str(e))
            return
        self.login_dialog.accept()
        self.show_dashboard()

    @Slot()
    def show_dashboard(self) -> None:
        if self._live_session() is None:
            return
        self.main_window.show_screen(self.dashboard_screen)
        self.refresh_chapters()

    def refresh_chapters(self) -> None:
        self.calls.start(
            "chapters",
            self.chapter_repository.list_chapters,
            on_result=self._on_chapters_loaded,
            on_error=self._on_chapters_failed,
        )

    @Slot(str, str)
    def handle_create_chapter(self, name: str, description: str) -> None:
        if not name.strip():
            return
        if self._live_session() is None:
            return
        if self.calls.is_busy("create"):
            return

        self.dashboard_screen.set_creating(True)
        self.calls.start(
            "create",
            lambda: self.chapter_repository.create_chapter(name, description),
            on_result=self._on_chapter_created,
            on_error=lambda message: self._on_create_failed(name, message),
            on_finished=lambda: self.dashboard_screen.set_creating(False),
        )

    @Slot(int)
    def handle_chapter_opened(self, chapter_id: int) -> None:
        session = self._live_session()
        if session is None:
            return
        self.chapter_editor.open_chapter(chapter_id, session)

    @Slot()
    def handle_logout(self) -> None:
        self.auth_service.logout()
        self.session = None
        self.exited.emit()

    def _live_session(self) -> Optional[AdminSession]:
        """Return the current session, or ask for credentials again."""
        if self.session is not None and self.session.is_valid():
            return self.session
        if self.session is not None:
            logger.info("Admin session for %s expired", self.session.username)
        self.session = None
        self.login_dialog.reset()
        self.login_dialog.show()
        return None

    def _on_chapters_loaded(self, chapters: List[Chapter]) -> None:
        self.chapters = list(chapters)
        self.dashboard_screen.display_chapters(self.chapters)

    def _on_chapters_failed(self, message: str) -> None:
        self.main_window.show_error("Chapters", f"Failed to fetch chapters: {message}")

    def _on_chapter_created(self, _chapter) -> None:
        self.dashboard_screen.clear_form()
        self.refresh_chapters()

    def _on_create_failed(self, name: str, message: str) -> None:
        logger.error("Failed to create chapter %r: %s", name, message)
        self.main_window.show_error("Create Chapter", f"Failed to create chapter: {message}")

    @Slot(int)
    def _on_chapter_deleted(self, chapter_id: int) -> None:
        logger.info("Chapter %s deleted", chapter_id)
        self.show_dashboard()
