"""Main entry point for the Chinese learning application."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from chinese_learn.coordinators import (
    AdminCoordinator,
    ChapterBrowserCoordinator,
    ChapterEditorCoordinator,
    DialogueLearningCoordinator,
    DialogueManagerCoordinator,
    ImportCoordinator,
    StudySessionController,
)
from chinese_learn.io import ApiClient, ChapterRepository, DialogueRepository, VocabularyRepository
from chinese_learn.services import AuthService, ImportPipeline, SettingsManager
from chinese_learn.services.audio_player import AudioPlayer
from chinese_learn.ui import (
    AdminDashboardScreen,
    ChapterEditorScreen,
    ChapterListScreen,
    DialogueScreen,
    ImportDialog,
    LoginDialog,
    MainWindow,
    StudyScreen,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """
    Bootstrap the application following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    # 1. Configuration and logging
    settings = SettingsManager()
    configure_logging(settings.get_log_level())

    app = QApplication(sys.argv)
    app.setApplicationName("Chinese Learn")
    app.setOrganizationName("ChineseLearn")

    # 2. Infrastructure
    api = ApiClient(settings.get_api_base_url(), timeout=settings.get_request_timeout())
    chapter_repository = ChapterRepository(api)
    vocabulary_repository = VocabularyRepository(api)
    dialogue_repository = DialogueRepository(api)
    logger.info("Using backend at %s", api.base_url)

    # 3. UI
    main_window = MainWindow()
    chapter_list_screen = ChapterListScreen()
    study_screen = StudyScreen()
    dialogue_screen = DialogueScreen()
    dashboard_screen = AdminDashboardScreen()
    editor_screen = ChapterEditorScreen()
    login_dialog = LoginDialog(main_window)
    import_dialog = ImportDialog(main_window)

    # 4. Coordinators (Dependency Injection)
    dialogue_learning = DialogueLearningCoordinator(
        dialogue_screen=dialogue_screen,
        dialogue_repository=dialogue_repository,
        main_window=main_window,
        audio_player=AudioPlayer(),
    )
    browser = ChapterBrowserCoordinator(
        chapter_list_screen=chapter_list_screen,
        study_screen=study_screen,
        chapter_repository=chapter_repository,
        vocabulary_repository=vocabulary_repository,
        study_controller=StudySessionController(),
        main_window=main_window,
        dialogue_coordinator=dialogue_learning,
    )
    import_coordinator = ImportCoordinator(
        import_dialog=import_dialog,
        pipeline=ImportPipeline(vocabulary_repository, dialogue_repository),
        main_window=main_window,
    )
    dialogue_manager = DialogueManagerCoordinator(
        manager_panel=editor_screen.dialogue_panel,
        dialogue_repository=dialogue_repository,
        main_window=main_window,
        import_coordinator=import_coordinator,
    )
    chapter_editor = ChapterEditorCoordinator(
        editor_screen=editor_screen,
        chapter_repository=chapter_repository,
        vocabulary_repository=vocabulary_repository,
        main_window=main_window,
        import_coordinator=import_coordinator,
        dialogue_manager=dialogue_manager,
    )
    admin = AdminCoordinator(
        auth_service=AuthService(settings),
        login_dialog=login_dialog,
        dashboard_screen=dashboard_screen,
        chapter_repository=chapter_repository,
        chapter_editor=chapter_editor,
        main_window=main_window,
    )

    # 5. Signal Wiring
    main_window.chapters_requested.connect(browser.show_chapters)
    main_window.admin_requested.connect(browser.suspend)
    main_window.admin_requested.connect(admin.open_admin)
    chapter_list_screen.admin_requested.connect(admin.open_admin)
    login_dialog.rejected.connect(browser.resume)
    admin.exited.connect(browser.show_chapters)
    app.aboutToQuit.connect(browser.shutdown)
    app.aboutToQuit.connect(api.close)

    # 6. Show UI and start event loop
    browser.show_chapters()
    main_window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
