"""Tests for AdminCoordinator - login gate and dashboard."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from PySide6.QtWidgets import QApplication

from chinese_learn.coordinators import AdminCoordinator, require_session
from chinese_learn.core import Chapter
from chinese_learn.io import ApiError
from chinese_learn.services import AdminSession, AuthService


def ensure_qt_app():
    if QApplication.instance() is None:
        QApplication([])


@pytest.fixture
def settings():
    settings = MagicMock()
    settings.get_admin_credentials.return_value = ("admin", "secret")
    return settings


@pytest.fixture
def auth(settings):
    return AuthService(settings)


@pytest.fixture
def chapter_repository():
    repo = MagicMock()
    repo.list_chapters.return_value = [Chapter(id=1, name="HSK 1")]
    return repo


@pytest.fixture
def login_dialog():
    return MagicMock()


@pytest.fixture
def dashboard():
    return MagicMock()


@pytest.fixture
def chapter_editor():
    return MagicMock()


@pytest.fixture
def main_window():
    return MagicMock()


@pytest.fixture
def coordinator(auth, login_dialog, dashboard, chapter_repository, chapter_editor, main_window, immediate_pool):
    ensure_qt_app()
    return AdminCoordinator(
        auth_service=auth,
        login_dialog=login_dialog,
        dashboard_screen=dashboard,
        chapter_repository=chapter_repository,
        chapter_editor=chapter_editor,
        main_window=main_window,
        thread_pool=immediate_pool,
    )


def test_require_session_rejects_missing_and_expired():
    with pytest.raises(PermissionError):
        require_session(None)
    past = datetime.now() - timedelta(days=2)
    with pytest.raises(PermissionError):
        require_session(AdminSession("admin", past, past + timedelta(days=1)))


def test_open_admin_without_session_shows_login(coordinator, login_dialog, main_window):
    coordinator.open_admin()

    login_dialog.reset.assert_called_once()
    login_dialog.show.assert_called_once()
    main_window.show_screen.assert_not_called()


def test_wrong_password_keeps_dialog_open(coordinator, login_dialog, main_window):
    coordinator.handle_login("admin", "nope")

    login_dialog.show_error_text.assert_called_once_with("Invalid username or password")
    login_dialog.accept.assert_not_called()
    assert coordinator.session is None


def test_login_opens_dashboard(coordinator, login_dialog, dashboard, main_window):
    coordinator.handle_login("admin", "secret")

    login_dialog.accept.assert_called_once()
    dashboard.display_chapters.assert_called_once()
    main_window.show_screen.assert_called_with(dashboard)


def test_existing_session_skips_login(coordinator, auth, login_dialog, dashboard, main_window):
    auth.login("admin", "secret")

    coordinator.open_admin()

    login_dialog.show.assert_not_called()
    main_window.show_screen.assert_called_with(dashboard)


def test_create_chapter_refetches_list(coordinator, chapter_repository, dashboard):
    coordinator.handle_login("admin", "secret")

    coordinator.handle_create_chapter("HSK 2", "Second level")

    chapter_repository.create_chapter.assert_called_once_with("HSK 2", "Second level")
    assert chapter_repository.list_chapters.call_count == 2
    dashboard.set_creating.assert_called_with(False)
    dashboard.clear_form.assert_called_once()


def test_create_chapter_failure_keeps_form(coordinator, chapter_repository, dashboard, main_window):
    coordinator.handle_login("admin", "secret")
    chapter_repository.create_chapter.side_effect = ApiError("name taken", 409)

    coordinator.handle_create_chapter("HSK 1", "")

    main_window.show_error.assert_called_once_with("Create Chapter", "Failed to create chapter: name taken")
    dashboard.clear_form.assert_not_called()
    dashboard.set_creating.assert_called_with(False)


def test_opening_chapter_passes_session(coordinator, chapter_editor):
    coordinator.handle_login("admin", "secret")

    coordinator.handle_chapter_opened(1)

    chapter_id, session = chapter_editor.open_chapter.call_args.args
    assert chapter_id == 1
    assert session is coordinator.session


def test_dashboard_without_session_asks_for_login(coordinator, login_dialog, main_window, chapter_repository):
    coordinator.show_dashboard()

    login_dialog.show.assert_called_once()
    main_window.show_screen.assert_not_called()
    chapter_repository.list_chapters.assert_not_called()


def test_logout_clears_session_and_exits(coordinator, auth):
    exited = []
    coordinator.exited.connect(lambda: exited.append(True))
    coordinator.handle_login("admin", "secret")

    coordinator.handle_logout()

    assert auth.current_session() is None
    assert coordinator.session is None
    assert exited == [True]


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 9, 0, 0))


@pytest.fixture
def clocked_coordinator(settings, clock, login_dialog, dashboard, chapter_repository, chapter_editor, main_window,
                        immediate_pool):
    ensure_qt_app()
    return AdminCoordinator(
        auth_service=AuthService(settings, clock=clock),
        login_dialog=login_dialog,
        dashboard_screen=dashboard,
        chapter_repository=chapter_repository,
        chapter_editor=chapter_editor,
        main_window=main_window,
        thread_pool=immediate_pool,
    )


def test_expired_session_returns_to_login_on_create(clocked_coordinator, clock, login_dialog, chapter_repository):
    clocked_coordinator.handle_login("admin", "secret")
    clock.now += timedelta(days=1, minutes=1)

    clocked_coordinator.handle_create_chapter("New", "")

    chapter_repository.create_chapter.assert_not_called()
    assert clocked_coordinator.session is None
    login_dialog.reset.assert_called_once()
    login_dialog.show.assert_called_once()


def test_expired_session_returns_to_login_on_open(clocked_coordinator, clock, login_dialog, chapter_editor):
    clocked_coordinator.handle_login("admin", "secret")
    clock.now += timedelta(days=2)

    clocked_coordinator.handle_chapter_opened(1)

    chapter_editor.open_chapter.assert_not_called()
    login_dialog.show.assert_called_once()


def test_expired_session_returns_to_login_when_editor_closes(clocked_coordinator, clock, login_dialog,
                                                            main_window):
    clocked_coordinator.handle_login("admin", "secret")
    main_window.show_screen.reset_mock()
    clock.now += timedelta(days=2)

    clocked_coordinator.show_dashboard()

    main_window.show_screen.assert_not_called()
    login_dialog.show.assert_called_once()


def test_relogin_after_expiry_reaches_dashboard(clocked_coordinator, clock, dashboard, main_window):
    clocked_coordinator.handle_login("admin", "secret")
    clock.now += timedelta(days=2)
    clocked_coordinator.handle_create_chapter("New", "")

    clocked_coordinator.handle_login("admin", "secret")

    assert clocked_coordinator.session.is_valid()
    main_window.show_screen.assert_called_with(dashboard)


def test_create_button_disabled_while_request_runs(auth, login_dialog, dashboard, chapter_repository,
                                                   chapter_editor, main_window, deferred_pool):
    ensure_qt_app()
    coordinator = AdminCoordinator(
        auth_service=auth,
        login_dialog=login_dialog,
        dashboard_screen=dashboard,
        chapter_repository=chapter_repository,
        chapter_editor=chapter_editor,
        main_window=main_window,
        thread_pool=deferred_pool,
    )
    coordinator.handle_login("admin", "secret")
    deferred_pool.run_all()
    dashboard.set_creating.reset_mock()

    coordinator.handle_create_chapter("HSK 2", "")
    coordinator.handle_create_chapter("HSK 2", "")

    dashboard.set_creating.assert_called_once_with(True)
    chapter_repository.create_chapter.assert_not_called()

    deferred_pool.run_all()
    chapter_repository.create_chapter.assert_called_once_with("HSK 2", "")
    dashboard.set_creating.assert_called_with(False)
    dashboard.clear_form.assert_called_once()
