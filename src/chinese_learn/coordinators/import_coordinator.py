"""Import Coordinator - staging buffer and the idle/importing state machine."""

import logging
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from chinese_learn.services import ImportKind, ImportPipeline, ImportReport
from chinese_learn.services.api_workers import FileReadWorker, ImportWorker

IMPORT_SUCCESS_MESSAGE = "Import successful!"

logger = logging.getLogger(__name__)


class ImportCoordinator(QObject):
    """
    Owns the Import Staging Buffer and runs bulk imports off the UI thread.

    State machine: idle -> importing -> idle. Only one import may be in
    flight; the dialog's import button is disabled meanwhile.

    - Success: the affected collection is re-fetched, the buffer cleared
      and the dialog closed.
    - Failure: the buffer is kept for editing and retrying, and a single
      message is shown.
    """

    import_started = Signal()
    import_finished = Signal(bool)

    def __init__(
        self,
        import_dialog,
        pipeline: ImportPipeline,
        main_window,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if import_dialog is None:
            raise ValueError("ImportDialog must not be None")
        if pipeline is None:
            raise ValueError("ImportPipeline must not be None")
        if main_window is None:
            raise ValueError("MainWindow must not be None")

        self.import_dialog = import_dialog
        self.pipeline = pipeline
        self.main_window = main_window
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        self.kind: Optional[ImportKind] = None
        self.chapter_id: Optional[int] = None
        self.staging_text = ""
        self.is_importing = False
        self._refresh: Optional[Callable[[], None]] = None
        self._active_worker: Optional[ImportWorker] = None
        # Keep file workers referenced until they report back
        self._file_worker: Optional[FileReadWorker] = None

        self.import_dialog.import_requested.connect(self.submit)
        self.import_dialog.file_chosen.connect(self.load_file)
        self.import_dialog.text_edited.connect(self.set_staging_text)
        self.import_dialog.cancel_requested.connect(self.cancel)

    def open(self, kind: ImportKind, chapter_id: int, refresh: Callable[[], None]) -> None:
        """Show the import dialog for one collection of one chapter.

        The staging buffer survives closing and reopening the dialog for
        the same target; a different target starts with an empty buffer.
        """
        if self.is_importing:
            self.import_dialog.show()
            return
        if (kind, chapter_id) != (self.kind, self.chapter_id):
            self.staging_text = ""
        self.kind = kind
        self.chapter_id = chapter_id
        self._refresh = refresh
        self.import_dialog.set_kind(kind)
        self.import_dialog.set_text(self.staging_text)
        self.import_dialog.set_importing(False)
        self.import_dialog.show()

    @Slot(str)
    def set_staging_text(self, text: str) -> None:
        self.staging_text = text or ""

    @Slot(Path)
    def load_file(self, path: Path) -> None:
        """Read a file into the staging buffer without validating it."""
        worker = FileReadWorker(Path(path))
        worker.signals.file_loaded.connect(self._on_file_loaded)
        worker.signals.error.connect(self._on_file_error)
        self._file_worker = worker
        self.thread_pool.start(worker)

    @Slot()
    def submit(self) -> None:
        """Start importing the staging buffer (ignored while busy or blank)."""
        if self.is_importing:
            return
        if self.kind is None or self.chapter_id is None:
            return
        if not self.staging_text.strip():
            return

        self.is_importing = True
        self.import_dialog.set_importing(True)
        self.import_started.emit()

        worker = ImportWorker(self.pipeline, self.kind, self.chapter_id, self.staging_text)
        worker.signals.import_result.connect(self._on_import_result)
        worker.signals.error.connect(self._on_import_error)
        worker.signals.finished.connect(self._on_import_finished)
        self._active_worker = worker
        self.thread_pool.start(worker)

    @Slot()
    def cancel(self) -> None:
        """Stop a running import between elements, or just close when idle."""
        if self._active_worker is not None:
            self._active_worker.cancel()
            return
        self.import_dialog.close()

    @Slot(object)
    def _on_import_result(self, report: Optional[ImportReport]) -> None:
        if report is None:
            return
        if report.succeeded:
            self._refresh_collection()
            self.staging_text = ""
            self.import_dialog.set_text("")
            self.import_dialog.close()
            self.main_window.show_info("Import Complete", IMPORT_SUCCESS_MESSAGE)
            self.import_finished.emit(True)
            return

        if report.is_partial:
            # Show what was created before the failing element
            self._refresh_collection()
        self.main_window.show_error("Import Failed", failure_message(report))
        self.import_finished.emit(False)

    @Slot(str)
    def _on_import_error(self, message: str) -> None:
        logger.error("Import rejected: %s", message)
        self.main_window.show_error("Import Failed", f"Failed to import: {message}")
        self.import_finished.emit(False)

    @Slot()
    def _on_import_finished(self) -> None:
        self.is_importing = False
        self._active_worker = None
        self.import_dialog.set_importing(False)

    @Slot(str)
    def _on_file_loaded(self, text: str) -> None:
        self._file_worker = None
        self.staging_text = text
        self.import_dialog.set_text(text)

    @Slot(str)
    def _on_file_error(self, message: str) -> None:
        self._file_worker = None
        self.main_window.show_error("File Load Error", message)

    def _refresh_collection(self) -> None:
        if self._refresh is not None:
            self._refresh()


def failure_message(report: ImportReport) -> str:
    """Single user-facing message for a failed report."""
    message = f"Failed to import: {report.error}"
    if report.is_partial:
        message += (
            f"\n\n{report.created_count} of {report.total} {report.kind.plural} "
            "were created before the failure."
        )
    return message
