"""Label that shows an image fetched from a URL."""

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QPixmap
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest
from PySide6.QtWidgets import QLabel


class RemoteImageLabel(QLabel):
    """Downloads and displays an image, scaled to fit ``max_size``.

    Replies for a URL that is no longer current are discarded, so fast
    card changes never show a stale picture.
    """

    def __init__(self, max_size: int = 240, parent=None):
        super().__init__(parent)
        self._max_size = max_size
        self._url = ""
        self._network = QNetworkAccessManager(self)
        self._network.finished.connect(self._on_reply)
        self.setAlignment(Qt.AlignCenter)
        self.hide()

    @property
    def url(self) -> str:
        return self._url

    def set_url(self, url: str):
        self._url = url or ""
        self.clear()
        if not self._url:
            self.hide()
            return
        self.setText("Loading image...")
        self.show()
        self._network.get(QNetworkRequest(QUrl(self._url)))

    def _on_reply(self, reply: QNetworkReply):
        requested = reply.request().url().toString()
        data = reply.readAll()
        failed = reply.error() != QNetworkReply.NetworkError.NoError
        reply.deleteLater()
        if requested != QUrl(self._url).toString():
            return

        pixmap = QPixmap()
        if failed or not pixmap.loadFromData(data):
            self.setText("Image unavailable")
            return
        self.setPixmap(pixmap.scaled(
            self._max_size, self._max_size, Qt.KeepAspectRatio, Qt.SmoothTransformation
        ))
