"""Services layer - import pipeline, configuration and integrations."""

from chinese_learn.services.admin_session import AdminSession, AuthenticationError, AuthService
from chinese_learn.services.csv_import_service import CsvFileResult, CsvImportService, CsvImportSummary
from chinese_learn.services.import_pipeline import (
    EmptyBatchError,
    ImportKind,
    ImportParseError,
    ImportPipeline,
    ImportRejected,
    ImportReport,
    ImportValidationError,
    describe_error,
    parse_import_text,
    read_import_file,
)
from chinese_learn.services.settings_manager import SettingsManager
from chinese_learn.services.api_workers import ApiCallWorker, FileReadWorker, ImportWorker, WorkerSignals

__all__ = [
    "AdminSession",
    "AuthService",
    "AuthenticationError",
    "CsvImportService",
    "CsvImportSummary",
    "CsvFileResult",
    "ImportPipeline",
    "ImportKind",
    "ImportReport",
    "ImportRejected",
    "ImportParseError",
    "EmptyBatchError",
    "ImportValidationError",
    "describe_error",
    "parse_import_text",
    "read_import_file",
    "SettingsManager",
    "ApiCallWorker",
    "ImportWorker",
    "FileReadWorker",
    "WorkerSignals",
]
