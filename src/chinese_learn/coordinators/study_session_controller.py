"""Study Session Controller - flashcard cursor, flip state and key bindings."""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from PySide6.QtCore import QEvent, QObject, Qt, QTimer, Signal

from chinese_learn.core import Vocabulary
from chinese_learn.coordinators.study_modes import CHINESE_TO_ENGLISH, CardFace, StudyDirection

TRANSITION_DELAY_MS = 150

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], None]


class StudySessionController(QObject):
    """
    Steps through a fixed, pre-fetched list of vocabulary as flashcards.

    State:
    - index: position in the deck, always 0 <= index < len(deck), wraps
    - flipped: whether the back face is showing
    - direction: which face is the front (zh-en or en-zh)

    Stepping unflips the card first and only changes the card after a
    short transition delay, so the card visually resets before its
    content changes. No network calls happen while stepping.
    """

    card_changed = Signal(int)
    flip_changed = Signal(bool)
    direction_changed = Signal(str)
    deck_loaded = Signal(int)

    def __init__(
        self,
        transition_delay_ms: int = TRANSITION_DELAY_MS,
        schedule: Optional[Scheduler] = None,
    ):
        super().__init__()
        self.transition_delay_ms = transition_delay_ms
        self._schedule: Scheduler = schedule or QTimer.singleShot

        self._deck: List[Vocabulary] = []
        self.index = 0
        self.flipped = False
        self.direction: StudyDirection = CHINESE_TO_ENGLISH

        # Bumped on every load so transitions scheduled for an old deck are dropped
        self._generation = 0

    @property
    def deck(self) -> Tuple[Vocabulary, ...]:
        return tuple(self._deck)

    @property
    def length(self) -> int:
        return len(self._deck)

    @property
    def is_empty(self) -> bool:
        return not self._deck

    @property
    def current_card(self) -> Optional[Vocabulary]:
        if not self._deck:
            return None
        return self._deck[self.index]

    @property
    def progress(self) -> Tuple[int, int]:
        """(1-based position, total); (0, 0) for an empty deck."""
        if not self._deck:
            return 0, 0
        return self.index + 1, len(self._deck)

    def visible_face(self) -> Optional[CardFace]:
        card = self.current_card
        if card is None:
            return None
        return self.direction.face(card, self.flipped)

    def load(self, vocabularies: Sequence[Vocabulary]) -> None:
        """Replace the deck and reset the cursor to the first card."""
        self._deck = list(vocabularies)
        self._generation += 1
        self.index = 0
        self.flipped = False
        self.deck_loaded.emit(len(self._deck))
        self.flip_changed.emit(False)
        self.card_changed.emit(0)

    def advance(self) -> None:
        """Move to the next card, wrapping from last to first."""
        self._step(1)

    def retreat(self) -> None:
        """Move to the previous card, wrapping from first to last."""
        self._step(-1)

    def toggle_flip(self) -> None:
        self._set_flipped(not self.flipped)

    def set_direction(self, direction: StudyDirection) -> None:
        """Change the study direction; index and flip state are kept."""
        if direction is self.direction:
            return
        self.direction = direction
        self.direction_changed.emit(direction.name)

    def handle_key(self, key: int) -> bool:
        """Apply the study keyboard contract.

        Right/Space advance, Left retreats, Up/Down flip.

        Returns:
            True if the key was consumed.
        """
        if key == Qt.Key.Key_Right or key == Qt.Key.Key_Space:
            self.advance()
        elif key == Qt.Key.Key_Left:
            self.retreat()
        elif key == Qt.Key.Key_Up or key == Qt.Key.Key_Down:
            self.toggle_flip()
        else:
            return False
        return True

    def _step(self, delta: int) -> None:
        if not self._deck:
            return
        self._set_flipped(False)
        generation = self._generation
        self._schedule(self.transition_delay_ms, lambda: self._apply_step(delta, generation))

    def _apply_step(self, delta: int, generation: int) -> None:
        if generation != self._generation or not self._deck:
            logger.debug("Dropping stale card transition")
            return
        self.index = (self.index + delta) % len(self._deck)
        self.card_changed.emit(self.index)

    def _set_flipped(self, flipped: bool) -> None:
        if flipped == self.flipped:
            return
        self.flipped = flipped
        self.flip_changed.emit(flipped)


class StudyKeyBinding(QObject):
    """Event filter routing key presses to a StudySessionController.

    Installed on a target (usually the QApplication) only while the study
    view is active. ``detach`` removes it completely so no listener leaks
    into other views.
    """

    def __init__(self, controller: StudySessionController):
        super().__init__()
        if controller is None:
            raise ValueError("StudySessionController must not be None")
        self.controller = controller
        self._target: Optional[QObject] = None

    @property
    def is_attached(self) -> bool:
        return self._target is not None

    def attach(self, target: QObject) -> None:
        if self._target is target:
            return
        self.detach()
        target.installEventFilter(self)
        self._target = target

    def detach(self) -> None:
        if self._target is None:
            return
        self._target.removeEventFilter(self)
        self._target = None

    def eventFilter(self, watched, event) -> bool:
        if event.type() == QEvent.Type.KeyPress:
            return self.controller.handle_key(event.key())
        return False
