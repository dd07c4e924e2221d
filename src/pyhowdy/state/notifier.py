"""Change notification fan-out for a single namespace.

Delivery is snapshot-then-iterate: each round works on the subscriptions
registered when the round started, so callbacks may subscribe or
unsubscribe (themselves or others) without skipping or double-invoking
anyone else. A subscription cancelled mid-round is skipped if its turn
has not come yet.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from pyhowdy.state.events import ChangeEvent

_logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent | None], None]

_ids = itertools.count(1)


@dataclass(slots=True, eq=False)
class Subscription:
    """A registered callback and its cancellation token.

    When ``loop`` is set, events are handed to that asyncio loop with
    ``call_soon_threadsafe`` instead of being invoked on the writer's
    thread. The loop runs its ready callbacks FIFO, so each subscriber
    still sees events in commit order.
    """

    callback: ChangeCallback
    notifier: ChangeNotifier
    loop: asyncio.AbstractEventLoop | None = None
    id: int = field(default_factory=lambda: next(_ids))
    active: bool = True

    def cancel(self) -> None:
        """Cancel this subscription. Safe to call more than once."""
        self.notifier.unsubscribe(self)


class ChangeNotifier:
    """Subscriber registry plus synchronous fan-out."""

    def __init__(self, *, name: str = "") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._subscriptions: dict[int, Subscription] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(
        self,
        callback: ChangeCallback,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> Subscription:
        """Register *callback* for every subsequent change event."""
        if not callable(callback):
            raise TypeError("callback must be callable")
        subscription = Subscription(callback=callback, notifier=self, loop=loop)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        _logger.debug("Subscribed id=%d namespace=%s async=%s", subscription.id, self._name, loop is not None)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Cancel *subscription*; unknown or already-cancelled ones are ignored."""
        with self._lock:
            removed = self._subscriptions.pop(subscription.id, None)
            if removed is None:
                return
            removed.active = False
        _logger.debug("Unsubscribed id=%d namespace=%s", subscription.id, self._name)

    def notify(self, event: ChangeEvent) -> int:
        """Deliver *event* to the current subscribers.

        Returns the number of callbacks invoked or scheduled. A failing
        callback is logged and does not affect the others.
        """
        with self._lock:
            current = list(self._subscriptions.values())

        delivered = 0
        for subscription in current:
            if not subscription.active:
                continue
            if subscription.loop is None:
                self._invoke(subscription, event)
            elif not self._schedule(subscription.loop, subscription, event):
                continue
            delivered += 1
        return delivered

    def _schedule(
        self,
        loop: asyncio.AbstractEventLoop,
        subscription: Subscription,
        event: ChangeEvent,
    ) -> bool:
        try:
            loop.call_soon_threadsafe(self._invoke_if_active, subscription, event)
        except RuntimeError:
            # Loop is closed; nobody will ever drain it.
            _logger.warning(
                "Dropping subscription id=%d namespace=%s: event loop is closed",
                subscription.id,
                self._name,
            )
            self.unsubscribe(subscription)
            return False
        return True

    def _invoke_if_active(self, subscription: Subscription, event: ChangeEvent) -> None:
        if subscription.active:
            self._invoke(subscription, event)

    def _invoke(self, subscription: Subscription, event: ChangeEvent) -> None:
        try:
            subscription.callback(event)
        except Exception:
            _logger.warning(
                "Change callback failed id=%d namespace=%s sequence=%d",
                subscription.id,
                self._name,
                event.sequence,
                exc_info=True,
            )
