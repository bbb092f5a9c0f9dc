"""Async workers for non-blocking backend calls, imports and file reads using Qt threading."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from chinese_learn.io import ApiError
from chinese_learn.services.import_pipeline import (
    ImportKind,
    ImportPipeline,
    ImportRejected,
    describe_error,
    read_import_file,
)

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    call_result = Signal(object)  # whatever the backend call returned
    import_result = Signal(object)  # ImportReport or None
    file_loaded = Signal(str)


class ImportWorker(QRunnable):
    """
    Worker that runs one bulk import in a background thread.

    Rejections (bad JSON, empty batch, invalid items) and unexpected
    exceptions are reported through ``error``; backend failures arrive
    inside the ImportReport.
    """

    def __init__(
        self,
        pipeline: ImportPipeline,
        kind: ImportKind,
        chapter_id: int,
        raw_text: str,
    ):
        super().__init__()
        self.pipeline = pipeline
        self.kind = kind
        self.chapter_id = chapter_id
        self.raw_text = raw_text
        self.signals = WorkerSignals()
        self._cancel_event = threading.Event()
        self.setAutoDelete(True)

    def cancel(self) -> None:
        """Ask the worker to stop before its next per-element request."""
        self._cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @Slot()
    def run(self):
        """Execute the import in background thread."""
        try:
            report = self.pipeline.run(
                self.kind,
                self.chapter_id,
                self.raw_text,
                should_cancel=self._cancel_event.is_set,
            )
            self.signals.import_result.emit(report)
        except ImportRejected as e:
            logger.warning("Import of %s rejected: %s", self.kind.plural, e)
            self.signals.error.emit(describe_error(e))
        except Exception as e:
            logger.exception("Import of %s failed before completion", self.kind.plural)
            self.signals.error.emit(describe_error(e))
        finally:
            self.signals.finished.emit()


class FileReadWorker(QRunnable):
    """Worker that reads a file's text without blocking the UI."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        try:
            self.signals.file_loaded.emit(read_import_file(self.path))
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not read %s: %s", self.path, e)
            self.signals.error.emit(f"Could not read {self.path.name}: {e}")
        finally:
            self.signals.finished.emit()


class ApiCallWorker(QRunnable):
    """
    Worker that runs one repository call in a background thread.

    Backend failures and locally rejected input arrive through ``error``
    as a single user-facing message; the call's return value arrives
    through ``call_result``.
    """

    def __init__(self, call: Callable[[], Any], description: str = "Backend call"):
        super().__init__()
        self.call = call
        self.description = description
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the call in background thread."""
        try:
            result = self.call()
        except ApiError as e:
            logger.error("%s failed: %s", self.description, e.message)
            self.signals.error.emit(e.message)
        except (ValueError, RuntimeError, OSError) as e:
            logger.error("%s failed: %s", self.description, e)
            self.signals.error.emit(str(e))
        except Exception as e:
            logger.exception("%s failed unexpectedly", self.description)
            self.signals.error.emit(describe_error(e))
        else:
            self.signals.call_result.emit(result)
        finally:
            self.signals.finished.emit()
