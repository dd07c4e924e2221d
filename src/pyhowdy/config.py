"""Runtime configuration for pyhowdy."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyhowdy.exceptions import HowdyConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value.strip())
    except ValueError as err:
        raise HowdyConfigError(f"{env_key} must be a number, got {value!r}") from err


@dataclasses.dataclass(frozen=True)
class HowdyConfig:
    """Shared-state configuration.

    Parameters
    ----------
    application : str
        Application name of the default board namespace.
    board : str
        Board name of the default board namespace.
    isolated : bool
        Whether the default board namespace is isolated from other scopes.
    lock_timeout : float
        Seconds a writer waits for a namespace write lock before
        :class:`~pyhowdy.exceptions.NamespaceLockedError` is raised.
        ``0`` tries once without waiting.
    nickname_max_attempts : int
        Consecutive nickname collisions tolerated before
        :class:`~pyhowdy.exceptions.ExhaustedPoolError` is raised.
    """

    application: str = "HowdyApp"
    board: str = "Board"
    isolated: bool = True
    lock_timeout: float = 0.5
    nickname_max_attempts: int = 1000

    def __post_init__(self) -> None:
        if self.lock_timeout < 0:
            raise HowdyConfigError("lock_timeout must be >= 0")
        if self.nickname_max_attempts <= 0:
            raise HowdyConfigError("nickname_max_attempts must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> HowdyConfig:
        """Create configuration from ``HOWDY_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "HOWDY_APPLICATION": "application",
            "HOWDY_BOARD": "board",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        if "isolated" not in overrides:
            config_kwargs["isolated"] = _env_bool(env.get("HOWDY_ISOLATED"), True)

        timeout_env = env.get("HOWDY_LOCK_TIMEOUT")
        if timeout_env is not None and "lock_timeout" not in overrides:
            config_kwargs["lock_timeout"] = _env_number("HOWDY_LOCK_TIMEOUT", timeout_env, float)

        attempts_env = env.get("HOWDY_NICKNAME_MAX_ATTEMPTS")
        if attempts_env is not None and "nickname_max_attempts" not in overrides:
            config_kwargs["nickname_max_attempts"] = _env_number(
                "HOWDY_NICKNAME_MAX_ATTEMPTS",
                attempts_env,
                int,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
