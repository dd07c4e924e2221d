"""Mood board: the consumer side of a shared namespace.

Participants pick (or are offered) a nickname and share a mood; dependent
views observe the board and re-derive their data on every change. This
module owns the participant-level rules (blank and duplicate nicknames)
that the store deliberately does not enforce.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from pydantic import BaseModel, ConfigDict

from pyhowdy.aggregate import aggregate
from pyhowdy.exceptions import DuplicateKeyError, ExhaustedPoolError, InvalidNicknameError
from pyhowdy.nickname import NicknameGenerator, default_generator
from pyhowdy.state.events import ChangeEvent
from pyhowdy.state.namespace import NamespaceStore
from pyhowdy.state.notifier import Subscription

_logger = logging.getLogger(__name__)

AVAILABLE_MOODS: tuple[str, ...] = (
    "😊 Happy",
    "👍 Enthusiastic",
    "🙏 Grateful",
    "💡 Inspired",
    "💪 Confident",
    "😌 Relaxed",
    "😄 Joyful",
    "🏆 Proud",
    "🌈 Optimistic",
    "😜 Playful",
    "❤️ Loved",
    "🎉 Excited",
)


class UserMood(BaseModel):
    """One row of the participant list."""

    model_config = ConfigDict(frozen=True)

    user: str
    mood: str


class MoodBoard:
    """Participant operations against one board namespace."""

    def __init__(self, store: NamespaceStore, *, generator: NicknameGenerator | None = None) -> None:
        self._store = store
        self._generator = generator

    @property
    def store(self) -> NamespaceStore:
        return self._store

    def propose_nickname(self) -> str:
        """A fresh nickname suggestion, or ``""`` to fall back to manual entry."""
        generator = self._generator or default_generator()
        try:
            return generator.generate_unique()
        except ExhaustedPoolError:
            _logger.debug("No nickname proposal available", exc_info=True)
            return ""

    def validate_nickname(self, nickname: str) -> str:
        """Check a newcomer's nickname and return it.

        Raises
        ------
        InvalidNicknameError
            The nickname is blank.
        DuplicateKeyError
            Somebody on the board already uses it.
        """
        if not nickname or not nickname.strip():
            raise InvalidNicknameError("Nickname cannot be empty")
        if self._store.contains(nickname):
            raise DuplicateKeyError("Nickname already exists", key=nickname)
        return nickname

    def share(self, nickname: str, mood: str, *, returning: bool = False) -> None:
        """Record *mood* for *nickname*.

        Newcomers are validated first. A returning participant already owns
        the key and simply overwrites their previous mood.
        :class:`~pyhowdy.exceptions.NamespaceLockedError` propagates.
        """
        if returning:
            if not nickname or not nickname.strip():
                raise InvalidNicknameError("Nickname cannot be empty")
        else:
            self.validate_nickname(nickname)
        self._store.put(nickname, mood)

    def mood_of(self, nickname: str) -> str | None:
        return self._store.get(nickname)

    def user_moods(self) -> list[UserMood]:
        snapshot = self._store.snapshot()
        return [UserMood(user=user, mood=mood) for user, mood in sorted(snapshot.items())]

    def mood_counts(self) -> list[tuple[str, int]]:
        snapshot = self._store.snapshot()
        return aggregate(snapshot.keys(), snapshot.get)


class BoardObserver:
    """Base for views that stay in sync with a board.

    ``activate`` subscribes and renders the current state once;
    ``deactivate`` unsubscribes. Use as a context manager to guarantee the
    subscription is released on every exit path.
    """

    def __init__(
        self,
        store: NamespaceStore,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._store = store
        self._loop = loop
        self._subscription: Subscription | None = None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def activate(self) -> None:
        if self._subscription is not None:
            return
        self._subscription = self._store.subscribe(self.update_view, loop=self._loop)
        try:
            self.update_view(None)
        except BaseException:
            self.deactivate()
            raise

    def deactivate(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            self._store.unsubscribe(subscription)

    def update_view(self, event: ChangeEvent | None) -> None:
        raise NotImplementedError

    def __enter__(self) -> BoardObserver:
        self.activate()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.deactivate()


class MoodCountsObserver(BoardObserver):
    """Dashboard data: how many participants share each mood."""

    def __init__(self, store: NamespaceStore, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        super().__init__(store, loop=loop)
        self.counts: list[tuple[str, int]] = []
        self.updates = 0

    @property
    def is_empty(self) -> bool:
        return not self.counts

    def update_view(self, event: ChangeEvent | None) -> None:
        snapshot = self._store.snapshot()
        self.counts = aggregate(snapshot.keys(), snapshot.get)
        self.updates += 1


class UserListObserver(BoardObserver):
    """Participant list: one row per nickname."""

    def __init__(self, store: NamespaceStore, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        super().__init__(store, loop=loop)
        self.rows: list[UserMood] = []

    def update_view(self, event: ChangeEvent | None) -> None:
        self.rows = MoodBoard(self._store).user_moods()
