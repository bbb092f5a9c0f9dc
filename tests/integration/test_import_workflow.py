"""
Integration tests for bulk import - full workflow validation.

Runs the real ApiClient, repositories, ImportPipeline and coordinators
against an in-memory backend behind a mocked requests session:
1. Open a chapter -> empty deck
2. Import vocabulary JSON -> deck re-fetched and studyable
3. Import dialogues with one bad element -> partial report, list refreshed
"""

import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QObject
from PySide6.QtWidgets import QApplication

from chinese_learn.coordinators import (
    ChapterBrowserCoordinator,
    DialogueManagerCoordinator,
    ImportCoordinator,
    StudySessionController,
)
from chinese_learn.coordinators.import_coordinator import IMPORT_SUCCESS_MESSAGE
from chinese_learn.io import ApiClient, ChapterRepository, DialogueRepository, VocabularyRepository
from chinese_learn.services import AdminSession, ImportKind, ImportPipeline
from chinese_learn.ui import ChapterListScreen, DialogueManagerPanel, StudyScreen


def ensure_qt_app():
    if QApplication.instance() is None:
        QApplication([])


class FakeBackend:
    """Answers ``session.request`` calls from in-memory collections."""

    def __init__(self):
        self.chapters = [{"id": 1, "name": "HSK 1", "description": ""}]
        self.vocabularies = []
        self.dialogues = []
        self.requests = []
        self._next_id = 100

    def request(self, method, url, timeout=None, **kwargs):
        path = url.split("/api", 1)[1]
        self.requests.append((method, path))

        if method == "GET" and path == "/chapters":
            return _response(200, self.chapters)
        if method == "GET" and path == "/chapters/1/vocabularies":
            return _response(200, self.vocabularies)
        if method == "POST" and path == "/chapters/1/vocabularies/batch":
            created = [self._store(self.vocabularies, dict(item, chapter_id=1)) for item in kwargs["json"]]
            return _response(201, created)
        if method == "GET" and path == "/chapters/1/dialogues":
            return _response(200, self.dialogues)
        if method == "POST" and path == "/chapters/1/dialogues":
            payload = kwargs["json"]
            if payload["title"] == "Broken":
                return _response(400, {"error": "Dialogue title is reserved"})
            dialogue = self._store(self.dialogues, dict(payload, chapter_id=1))
            dialogue["sentences"] = [
                dict(sentence, id=dialogue["id"] * 10 + number, dialogue_id=dialogue["id"])
                for number, sentence in enumerate(payload.get("sentences", []), start=1)
            ]
            return _response(201, dialogue)
        return _response(404, {"error": f"No route for {method} {path}"})

    def _store(self, collection, item):
        self._next_id += 1
        stored = dict(item, id=self._next_id)
        collection.append(stored)
        return stored


def _response(status, payload):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.content = json.dumps(payload).encode()
    response.json.return_value = payload
    return response


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    session = MagicMock()
    session.request.side_effect = backend.request
    return ApiClient("http://backend.test/api", session=session)


@pytest.fixture
def import_dialog():
    return MagicMock()


def test_vocabulary_import_refreshes_study_deck(api, backend, import_dialog, immediate_pool, scheduler):
    """Integration test: open chapter -> import words -> study them."""
    ensure_qt_app()

    vocabulary_repo = VocabularyRepository(api)
    main_window = MagicMock()
    controller = StudySessionController(schedule=scheduler)
    study_screen = StudyScreen()
    browser = ChapterBrowserCoordinator(
        chapter_list_screen=ChapterListScreen(),
        study_screen=study_screen,
        chapter_repository=ChapterRepository(api),
        vocabulary_repository=vocabulary_repo,
        study_controller=controller,
        main_window=main_window,
        key_target=QObject(),
        thread_pool=immediate_pool,
    )
    importer = ImportCoordinator(
        import_dialog=import_dialog,
        pipeline=ImportPipeline(vocabulary_repo, DialogueRepository(api)),
        main_window=main_window,
        thread_pool=immediate_pool,
    )

    # Step 1: Open the chapter, nothing to study yet
    browser.show_chapters()
    browser.handle_chapter_selected(1)
    assert controller.is_empty
    assert not study_screen.empty_label.isHidden()

    # Step 2: Import two words through the staging buffer
    importer.open(ImportKind.VOCABULARY, 1, browser.reload)
    importer.set_staging_text(json.dumps([
        {"chinese": "你好", "pinyin": "nǐ hǎo", "meaning": "hello"},
        {"chinese": "谢谢", "pinyin": "xiè xie", "meaning": "thank you"},
    ]))
    importer.submit()

    assert ("POST", "/chapters/1/vocabularies/batch") in backend.requests
    main_window.show_info.assert_called_once_with("Import Complete", IMPORT_SUCCESS_MESSAGE)
    import_dialog.close.assert_called_once()
    assert importer.staging_text == ""
    assert not importer.is_importing

    # Step 3: The deck was re-fetched and can be studied
    assert controller.length == 2
    assert study_screen.card.chinese_label.text() == "你好"

    controller.advance()
    scheduler.run_pending()
    assert study_screen.card.chinese_label.text() == "谢谢"
    assert study_screen.progress_label.text() == "2 / 2"


def test_vocabulary_import_rejection_keeps_buffer(api, backend, import_dialog, immediate_pool):
    """Integration test: invalid items never reach the backend."""
    ensure_qt_app()

    main_window = MagicMock()
    importer = ImportCoordinator(
        import_dialog=import_dialog,
        pipeline=ImportPipeline(VocabularyRepository(api), DialogueRepository(api)),
        main_window=main_window,
        thread_pool=immediate_pool,
    )
    refresh = MagicMock()
    bad_text = json.dumps([{"chinese": "好"}, {"pinyin": "hǎo"}])

    importer.open(ImportKind.VOCABULARY, 1, refresh)
    importer.set_staging_text(bad_text)
    importer.submit()

    assert not any(method == "POST" for method, _ in backend.requests)
    refresh.assert_not_called()
    main_window.show_error.assert_called_once()
    assert importer.staging_text == bad_text


def test_partial_dialogue_import_refreshes_manager(api, backend, import_dialog, immediate_pool):
    """Integration test: dialogue import stops at the first failing element."""
    ensure_qt_app()

    dialogue_repo = DialogueRepository(api)
    main_window = MagicMock()
    importer = ImportCoordinator(
        import_dialog=import_dialog,
        pipeline=ImportPipeline(VocabularyRepository(api), dialogue_repo),
        main_window=main_window,
        thread_pool=immediate_pool,
    )
    manager = DialogueManagerCoordinator(
        manager_panel=DialogueManagerPanel(),
        dialogue_repository=dialogue_repo,
        main_window=main_window,
        import_coordinator=importer,
        thread_pool=immediate_pool,
    )
    now = datetime.now()
    session = AdminSession(username="admin", issued_at=now, expires_at=now + timedelta(days=1))
    manager.open_for_chapter(1, session)
    assert manager.dialogues == []

    manager.handle_import_requested()
    importer.set_staging_text(json.dumps([
        {"title": "Greeting", "sentences": [{"chinese": "你好"}, {"speaker": "B", "chinese": "你好吗"}]},
        {"title": "Broken", "sentences": []},
        {"title": "Never sent"},
    ]))
    importer.submit()

    posts = [path for method, path in backend.requests if method == "POST"]
    assert posts == ["/chapters/1/dialogues", "/chapters/1/dialogues"]

    title, message = main_window.show_error.call_args[0]
    assert title == "Import Failed"
    assert "Dialogue title is reserved" in message
    assert "1 of 3 dialogues were created before the failure." in message
    import_dialog.close.assert_not_called()

    assert [d.title for d in manager.dialogues] == ["Greeting"]
    greeting = manager.dialogues[0]
    assert [(s.speaker, s.chinese, s.order) for s in greeting.sentences] == [
        ("A", "你好", 1),
        ("B", "你好吗", 2),
    ]
