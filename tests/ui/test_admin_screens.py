"""
Tests for the admin widgets - login, editor, dialogue manager and import dialog.
"""

from PySide6.QtWidgets import QApplication

from chinese_learn.core import Chapter, Dialogue, Sentence, Vocabulary
from chinese_learn.services import ImportKind
from chinese_learn.ui import (
    AdminDashboardScreen,
    ChapterEditorScreen,
    DialogueManagerPanel,
    ImportDialog,
    LoginDialog,
)


def ensure_qt_app():
    if QApplication.instance() is None:
        QApplication([])


def test_login_dialog_emits_credentials():
    ensure_qt_app()
    dialog = LoginDialog()
    submitted = []
    dialog.login_submitted.connect(lambda user, password: submitted.append((user, password)))

    dialog.username_edit.setText("admin")
    dialog.password_edit.setText("secret")
    dialog._on_submit()

    assert submitted == [("admin", "secret")]


def test_login_dialog_error_clears_password():
    ensure_qt_app()
    dialog = LoginDialog()
    dialog.password_edit.setText("wrong")

    dialog.show_error_text("Invalid username or password")

    assert dialog.error_label.text() == "Invalid username or password"
    assert dialog.password_edit.text() == ""


def test_dashboard_ignores_blank_chapter_name():
    ensure_qt_app()
    screen = AdminDashboardScreen()
    requested = []
    screen.create_chapter_requested.connect(lambda name, desc: requested.append((name, desc)))

    screen.create_button.click()
    screen.name_edit.setText(" HSK 4 ")
    screen.create_button.click()

    assert requested == [("HSK 4", "")]


def test_dashboard_lists_chapters():
    ensure_qt_app()
    screen = AdminDashboardScreen()
    screen.display_chapters([Chapter(id=1, name="HSK 1", description="Basics")])

    assert screen.chapter_list.count() == 1
    assert screen.empty_label.isHidden()


def test_chapter_editor_submits_form():
    ensure_qt_app()
    screen = ChapterEditorScreen()
    submitted = []
    screen.vocabulary_submitted.connect(submitted.append)

    screen.chinese_edit.setText("谢谢")
    screen.meaning_edit.setText("thanks")
    screen.submit_button.click()

    assert submitted == [{
        "chinese": "谢谢",
        "pinyin": "",
        "meaning": "thanks",
        "image_path": "",
        "image_url": "",
    }]


def test_chapter_editor_edit_mode():
    ensure_qt_app()
    screen = ChapterEditorScreen()

    screen.fill_form(Vocabulary(id=1, chinese="猫", meaning="cat", image_url="http://img/cat.png"))
    assert screen.submit_button.text() == "Update Word"
    assert screen.image_url_edit.text() == "http://img/cat.png"

    screen.clear_form()
    assert screen.submit_button.text() == "Add Word"
    assert screen.chinese_edit.text() == ""


def test_chapter_editor_busy_disables_chapter_buttons():
    ensure_qt_app()
    screen = ChapterEditorScreen()

    screen.set_chapter_busy(True)
    assert not screen.update_chapter_button.isEnabled()
    assert not screen.delete_chapter_button.isEnabled()

    screen.set_chapter_busy(False)
    assert screen.update_chapter_button.isEnabled()


def test_dialogue_panel_shows_active_sentences():
    ensure_qt_app()
    panel = DialogueManagerPanel()
    dialogue = Dialogue(id=5, chapter_id=1, title="Greeting", sentences=[
        Sentence(id=1, dialogue_id=5, chinese="你好", order=1),
        Sentence(id=2, dialogue_id=5, chinese="再见", order=2),
    ])

    panel.display_dialogues([dialogue], None)
    assert panel.sentence_table.rowCount() == 0
    assert not panel.sentence_form.isEnabled()

    panel.set_active_dialogue(5)
    assert panel.sentence_table.rowCount() == 2
    assert panel.sentence_form.isEnabled()


def test_dialogue_panel_sentence_form():
    ensure_qt_app()
    panel = DialogueManagerPanel()
    panel.display_dialogues([Dialogue(id=5, chapter_id=1, title="Greeting")], 5)
    submitted = []
    panel.sentence_save_requested.connect(submitted.append)

    panel.reset_sentence_form("A", 3)
    panel.chinese_edit.setText("你好")
    panel.save_sentence_button.click()

    assert submitted == [{"speaker": "A", "chinese": "你好", "pinyin": "", "english": "", "order": 3}]


def test_dialogue_panel_new_dialogue_form():
    ensure_qt_app()
    panel = DialogueManagerPanel()
    saved = []
    panel.dialogue_save_requested.connect(saved.append)

    panel.open_dialogue_form(None)
    panel.title_edit.setText("Weather")
    panel._on_save_dialogue_clicked()

    assert saved == [{"id": None, "title": "Weather", "description": ""}]


def test_import_dialog_set_text_does_not_echo():
    ensure_qt_app()
    dialog = ImportDialog()
    edits = []
    dialog.text_edited.connect(edits.append)

    dialog.set_text("[1]")
    assert edits == []
    assert dialog.text() == "[1]"

    dialog.text_edit.setPlainText("[2]")
    assert edits == ["[2]"]


def test_import_dialog_importing_state():
    ensure_qt_app()
    dialog = ImportDialog()
    dialog.set_kind(ImportKind.DIALOGUE)

    dialog.set_importing(True)
    assert not dialog.import_button.isEnabled()
    assert dialog.cancel_button.text() == "Cancel Import"
    assert "Dialogues" in dialog.heading_label.text()

    dialog.set_importing(False)
    assert dialog.import_button.isEnabled()
