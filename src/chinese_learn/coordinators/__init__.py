"""Coordinators layer - controllers that connect screens to repositories."""

from chinese_learn.coordinators.admin_coordinator import AdminCoordinator, require_session
from chinese_learn.coordinators.backend_calls import BackendCalls
from chinese_learn.coordinators.chapter_browser_coordinator import ChapterBrowserCoordinator
from chinese_learn.coordinators.chapter_editor_coordinator import ChapterEditorCoordinator
from chinese_learn.coordinators.dialogue_learning_coordinator import DialogueLearningCoordinator
from chinese_learn.coordinators.dialogue_manager_coordinator import DialogueManagerCoordinator
from chinese_learn.coordinators.import_coordinator import ImportCoordinator
from chinese_learn.coordinators.study_modes import (
    CHINESE_TO_ENGLISH,
    ENGLISH_TO_CHINESE,
    CardFace,
    StudyDirection,
    create_study_direction,
)
from chinese_learn.coordinators.study_session_controller import StudyKeyBinding, StudySessionController

__all__ = [
    "AdminCoordinator",
    "require_session",
    "BackendCalls",
    "ChapterBrowserCoordinator",
    "ChapterEditorCoordinator",
    "DialogueLearningCoordinator",
    "DialogueManagerCoordinator",
    "ImportCoordinator",
    "StudySessionController",
    "StudyKeyBinding",
    "StudyDirection",
    "CardFace",
    "CHINESE_TO_ENGLISH",
    "ENGLISH_TO_CHINESE",
    "create_study_direction",
]
