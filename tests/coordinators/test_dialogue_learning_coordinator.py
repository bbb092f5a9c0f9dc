"""Tests for DialogueLearningCoordinator - dialogue reading and playback highlight."""

from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QApplication

from chinese_learn.coordinators import DialogueLearningCoordinator
from chinese_learn.core import Dialogue, Sentence
from chinese_learn.io import ApiError


def ensure_qt_app():
    if QApplication.instance() is None:
        QApplication([])


class FakeAudioPlayer(QObject):
    playback_finished = Signal()
    playback_failed = Signal(str)

    def __init__(self):
        super().__init__()
        self.played = []
        self.stopped = 0

    def play(self, url):
        self.played.append(url)

    def stop(self):
        self.stopped += 1


def make_dialogue():
    return Dialogue(id=5, chapter_id=1, title="Greeting", sentences=[
        Sentence(id=2, dialogue_id=5, chinese="你好吗", order=2, audio_url="http://audio/2.mp3"),
        Sentence(id=1, dialogue_id=5, chinese="你好", order=1),
    ])


@pytest.fixture
def dialogue_repository():
    repo = MagicMock()
    repo.list_for_chapter.return_value = [make_dialogue()]
    return repo


@pytest.fixture
def screen():
    return MagicMock()


@pytest.fixture
def audio_player():
    ensure_qt_app()
    return FakeAudioPlayer()


@pytest.fixture
def coordinator(screen, dialogue_repository, audio_player, scheduler, immediate_pool):
    return DialogueLearningCoordinator(
        dialogue_screen=screen,
        dialogue_repository=dialogue_repository,
        main_window=MagicMock(),
        audio_player=audio_player,
        schedule=scheduler,
        thread_pool=immediate_pool,
    )


def open_dialogue(coordinator):
    coordinator.show_for_chapter(1)
    coordinator.select_dialogue(5)


def test_sentences_are_presented_in_order(coordinator, screen):
    open_dialogue(coordinator)

    dialogue, sentences = screen.display_dialogue.call_args.args
    assert dialogue.id == 5
    assert [s.order for s in sentences] == [1, 2]


def test_sentence_without_audio_is_highlighted_for_two_seconds(coordinator, screen, scheduler, audio_player):
    open_dialogue(coordinator)

    coordinator.play_sentence(1)

    screen.set_playing.assert_called_with(1)
    assert audio_player.played == []
    assert scheduler.pending[0][0] == 2000

    scheduler.run_pending()
    screen.set_playing.assert_called_with(None)
    assert coordinator.playing_sentence_id is None


def test_sentence_with_audio_plays_until_finished(coordinator, screen, audio_player):
    open_dialogue(coordinator)

    coordinator.play_sentence(2)
    assert audio_player.played == ["http://audio/2.mp3"]
    assert coordinator.playing_sentence_id == 2

    audio_player.playback_finished.emit()
    screen.set_playing.assert_called_with(None)


def test_playback_failure_clears_highlight(coordinator, audio_player):
    open_dialogue(coordinator)
    coordinator.play_sentence(2)

    audio_player.playback_failed.emit("unsupported format")

    assert coordinator.playing_sentence_id is None


def test_stale_highlight_timer_does_not_clear_newer_playback(coordinator, scheduler):
    open_dialogue(coordinator)
    coordinator.play_sentence(1)
    coordinator.play_sentence(2)

    scheduler.run_pending()

    assert coordinator.playing_sentence_id == 2


def test_back_to_list_stops_audio(coordinator, screen, audio_player):
    open_dialogue(coordinator)
    coordinator.play_sentence(2)

    coordinator.back_to_list()

    assert audio_player.stopped == 1
    screen.display_dialogues.assert_called_with(coordinator.dialogues)


def test_close_emits_closed(coordinator):
    closed = []
    coordinator.closed.connect(lambda: closed.append(True))
    coordinator.close()
    assert closed == [True]


def test_silent_sentence_stops_running_clip(coordinator, screen, audio_player):
    open_dialogue(coordinator)
    coordinator.play_sentence(2)

    coordinator.play_sentence(1)

    assert audio_player.stopped == 1
    assert coordinator.playing_sentence_id == 1
    screen.set_playing.assert_called_with(1)


def test_previous_clip_finishing_keeps_new_highlight(coordinator, screen, audio_player, scheduler):
    open_dialogue(coordinator)
    coordinator.play_sentence(2)
    coordinator.play_sentence(1)

    audio_player.playback_finished.emit()

    assert coordinator.playing_sentence_id == 1
    scheduler.run_pending()
    assert coordinator.playing_sentence_id is None


def test_dialogue_list_loads_in_background(screen, dialogue_repository, audio_player, scheduler, deferred_pool):
    main_window = MagicMock()
    coordinator = DialogueLearningCoordinator(
        dialogue_screen=screen,
        dialogue_repository=dialogue_repository,
        main_window=main_window,
        audio_player=audio_player,
        schedule=scheduler,
        thread_pool=deferred_pool,
    )

    coordinator.show_for_chapter(1)
    main_window.show_screen.assert_called_once_with(screen)
    dialogue_repository.list_for_chapter.assert_not_called()

    deferred_pool.run_all()
    assert [d.id for d in coordinator.dialogues] == [5]
    screen.display_dialogues.assert_called_with(coordinator.dialogues)


def test_dialogue_fetch_failure_is_reported(screen, dialogue_repository, audio_player, scheduler, immediate_pool):
    main_window = MagicMock()
    dialogue_repository.list_for_chapter.side_effect = ApiError("backend down", 503)
    coordinator = DialogueLearningCoordinator(screen, dialogue_repository, main_window, audio_player,
                                              schedule=scheduler, thread_pool=immediate_pool)

    coordinator.show_for_chapter(1)

    main_window.show_error.assert_called_once_with("Dialogues", "Failed to fetch dialogues: backend down")
    assert coordinator.dialogues == []
