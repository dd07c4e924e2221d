"""pyhowdy - Shared namespaced state with change notification for multi-session apps."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhowdy")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhowdy.aggregate import aggregate, aggregate_snapshot
from pyhowdy.board import (
    AVAILABLE_MOODS,
    BoardObserver,
    MoodBoard,
    MoodCountsObserver,
    UserListObserver,
    UserMood,
)
from pyhowdy.config import HowdyConfig
from pyhowdy.exceptions import (
    BoardValidationError,
    DuplicateKeyError,
    ExhaustedPoolError,
    HowdyConfigError,
    HowdyError,
    InvalidNicknameError,
    NamespaceLockedError,
)
from pyhowdy.nickname import IssuedNicknames, NicknameGenerator, generate_unique_nickname
from pyhowdy.state.events import ChangeEvent, NamespaceKey
from pyhowdy.state.namespace import NamespaceStore
from pyhowdy.state.notifier import ChangeNotifier, Subscription
from pyhowdy.state.registry import NamespaceRegistry, default_registry, open_namespace

__all__ = [
    "__version__",
    "AVAILABLE_MOODS",
    "BoardObserver",
    "BoardValidationError",
    "ChangeEvent",
    "ChangeNotifier",
    "DuplicateKeyError",
    "ExhaustedPoolError",
    "HowdyConfig",
    "HowdyConfigError",
    "HowdyError",
    "InvalidNicknameError",
    "IssuedNicknames",
    "MoodBoard",
    "MoodCountsObserver",
    "NamespaceKey",
    "NamespaceLockedError",
    "NamespaceRegistry",
    "NamespaceStore",
    "NicknameGenerator",
    "Subscription",
    "UserListObserver",
    "UserMood",
    "aggregate",
    "aggregate_snapshot",
    "default_registry",
    "generate_unique_nickname",
    "open_namespace",
]
