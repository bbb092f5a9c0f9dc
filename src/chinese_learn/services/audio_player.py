"""Audio playback for dialogue sentences."""

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer


class AudioPlayer(QObject):
    """Plays one audio URL at a time and reports when playback stops."""

    playback_finished = Signal()
    playback_failed = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._output = QAudioOutput(self)
        self._player = QMediaPlayer(self)
        self._player.setAudioOutput(self._output)
        self._player.mediaStatusChanged.connect(self._on_status_changed)
        self._player.errorOccurred.connect(self._on_error)

    def play(self, url: str) -> None:
        """Start playing ``url``, interrupting anything already playing."""
        self._player.stop()
        self._player.setSource(QUrl(url))
        self._player.play()

    def stop(self) -> None:
        self._player.stop()

    def _on_status_changed(self, status) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self.playback_finished.emit()

    def _on_error(self, error, message: str = "") -> None:
        self.playback_failed.emit(message or self._player.errorString())
