"""Unique nickname generation for new participants.

Nicknames look like ``BraveOtter427``: an adjective, a noun and a three
digit suffix. Every nickname handed out is remembered in an
:class:`IssuedNicknames` registry so no two callers ever get the same
one. The default registry is process-wide and only grows.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Sequence
from typing import Protocol

from pyhowdy.config import HowdyConfig
from pyhowdy.exceptions import ExhaustedPoolError

_logger = logging.getLogger(__name__)

ADJECTIVES: tuple[str, ...] = (
    "Brave", "Happy", "Clever", "Mighty", "Witty", "Sunny", "Zesty", "Lucky", "Chill", "Swift",
    "Fuzzy", "Silly", "Snappy", "Jolly", "Peppy", "Bouncy", "Cheery", "Sassy", "Zany", "Giddy",
    "Perky", "Spunky", "Nifty", "Feisty", "Groovy", "Peachy", "Dandy", "Jazzy", "Nimble", "Bubbly",
)  # fmt: skip

NOUNS: tuple[str, ...] = (
    "Panda", "Falcon", "Wizard", "Ninja", "Koala", "Otter", "Dragon", "Unicorn", "Sailor", "Guitar",
    "Rocket", "Turtle", "Cactus", "Cloud", "Comet", "Yeti", "Phoenix", "Sloth", "Pineapple", "Octopus",
    "Marble", "Dolphin", "Chameleon", "Robot", "Llama", "Walrus", "Parrot", "Zebra", "Squirrel", "Tiger",
)  # fmt: skip

# Suffix range is half-open: 100..998.
SUFFIX_MIN = 100
SUFFIX_MAX = 999

DEFAULT_MAX_ATTEMPTS = 1000


class RandomSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...

    def randrange(self, start: int, stop: int) -> int: ...


class IssuedNicknames:
    """Thread-safe record of every nickname handed out."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued: set[str] = set()

    def claim(self, nickname: str) -> bool:
        """Record *nickname*; ``False`` if it was already issued."""
        with self._lock:
            if nickname in self._issued:
                return False
            self._issued.add(nickname)
            return True

    def __contains__(self, nickname: object) -> bool:
        with self._lock:
            return nickname in self._issued

    def __len__(self) -> int:
        with self._lock:
            return len(self._issued)

    def clear(self) -> None:
        """Forget everything. Only meant for test isolation."""
        with self._lock:
            self._issued.clear()


_process_issued = IssuedNicknames()


def process_issued() -> IssuedNicknames:
    """The process-wide issued-nickname registry."""
    return _process_issued


class NicknameGenerator:
    """Draws nicknames until it finds one nobody has been given yet.

    Parameters
    ----------
    rng : RandomSource, optional
        Source of randomness. Defaults to :class:`random.SystemRandom`;
        pass a seeded :class:`random.Random` for reproducible tests.
    issued : IssuedNicknames, optional
        Registry to check and record against. Defaults to the
        process-wide registry.
    max_attempts : int
        Consecutive collisions tolerated before giving up.
    """

    def __init__(
        self,
        *,
        rng: RandomSource | None = None,
        issued: IssuedNicknames | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        adjectives: Sequence[str] = ADJECTIVES,
        nouns: Sequence[str] = NOUNS,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        if not adjectives or not nouns:
            raise ValueError("vocabularies must be non-empty")
        self._rng: RandomSource = rng if rng is not None else random.SystemRandom()
        self._issued = issued if issued is not None else _process_issued
        self._max_attempts = max_attempts
        self._adjectives = tuple(adjectives)
        self._nouns = tuple(nouns)

    @property
    def issued(self) -> IssuedNicknames:
        return self._issued

    @property
    def pool_size(self) -> int:
        """Number of distinct nicknames this generator can produce.

        The suffix range [100, 999) holds 899 values, so the default
        vocabularies give 30 * 30 * 899 = 809,100 nicknames.
        """
        return len(set(self._adjectives)) * len(set(self._nouns)) * (SUFFIX_MAX - SUFFIX_MIN)

    def generate(self) -> str:
        """One random nickname; uniqueness is not checked."""
        adjective = self._rng.choice(self._adjectives)
        noun = self._rng.choice(self._nouns)
        number = self._rng.randrange(SUFFIX_MIN, SUFFIX_MAX)
        return f"{adjective}{noun}{number}"

    def generate_unique(self) -> str:
        """A nickname never issued before by this generator's registry.

        Raises
        ------
        ExhaustedPoolError
            After ``max_attempts`` consecutive collisions.
        """
        for _ in range(self._max_attempts):
            nickname = self.generate()
            if self._issued.claim(nickname):
                _logger.debug("Nickname issued %s", nickname)
                return nickname

        _logger.debug("Nickname pool exhausted after %d attempts", self._max_attempts)
        raise ExhaustedPoolError(
            "Nickname pool exhausted or too many collisions.",
            attempts=self._max_attempts,
        )


_default_generator: NicknameGenerator | None = None
_default_lock = threading.Lock()


def default_generator() -> NicknameGenerator:
    """The process-wide generator, configured from the environment on first use."""
    global _default_generator
    with _default_lock:
        if _default_generator is None:
            config = HowdyConfig.from_env()
            _default_generator = NicknameGenerator(max_attempts=config.nickname_max_attempts)
        return _default_generator


def generate_unique_nickname() -> str:
    """Generate a unique nickname with the process-wide generator."""
    return default_generator().generate_unique()
