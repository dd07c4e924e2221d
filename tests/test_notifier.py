from __future__ import annotations

import threading

import pytest

from pyhowdy.state.events import ChangeEvent, NamespaceKey
from pyhowdy.state.notifier import ChangeNotifier, Subscription

_KEY = NamespaceKey(application="App", board="Board")


def _event(sequence: int) -> ChangeEvent:
    return ChangeEvent(namespace=_KEY, sequence=sequence)


def test_notify_reaches_subscribers_in_registration_order() -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []
    notifier.subscribe(lambda _e: calls.append("a"))
    notifier.subscribe(lambda _e: calls.append("b"))
    notifier.subscribe(lambda _e: calls.append("c"))

    assert notifier.notify(_event(1)) == 3
    assert calls == ["a", "b", "c"]


def test_self_unsubscribe_during_round_does_not_disturb_others() -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []
    holder: dict[str, Subscription] = {}

    notifier.subscribe(lambda _e: calls.append("before"))

    def once(_e: ChangeEvent | None) -> None:
        calls.append("once")
        holder["once"].cancel()

    holder["once"] = notifier.subscribe(once)
    notifier.subscribe(lambda _e: calls.append("after"))

    notifier.notify(_event(1))
    notifier.notify(_event(2))

    assert calls == ["before", "once", "after", "before", "after"]
    assert len(notifier) == 2


def test_subscription_cancelled_mid_round_is_skipped() -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []
    holder: dict[str, Subscription] = {}

    def killer(_e: ChangeEvent | None) -> None:
        calls.append("killer")
        notifier.unsubscribe(holder["victim"])

    notifier.subscribe(killer)
    holder["victim"] = notifier.subscribe(lambda _e: calls.append("victim"))

    notifier.notify(_event(1))

    assert calls == ["killer"]
    assert not holder["victim"].active


def test_subscription_added_mid_round_starts_next_round() -> None:
    notifier = ChangeNotifier()
    calls: list[str] = []
    added: list[Subscription] = []

    def recruiter(_e: ChangeEvent | None) -> None:
        calls.append("recruiter")
        if not added:
            added.append(notifier.subscribe(lambda _e: calls.append("recruit")))

    notifier.subscribe(recruiter)

    notifier.notify(_event(1))
    assert calls == ["recruiter"]

    notifier.notify(_event(2))
    assert calls == ["recruiter", "recruiter", "recruit"]


def test_double_unsubscribe_is_a_noop() -> None:
    notifier = ChangeNotifier()
    subscription = notifier.subscribe(lambda _e: None)

    notifier.unsubscribe(subscription)
    notifier.unsubscribe(subscription)
    subscription.cancel()

    assert len(notifier) == 0
    assert notifier.notify(_event(1)) == 0


def test_unsubscribe_from_foreign_notifier_is_ignored() -> None:
    first = ChangeNotifier()
    second = ChangeNotifier()
    subscription = first.subscribe(lambda _e: None)

    second.unsubscribe(subscription)

    assert len(first) == 1


def test_non_callable_rejected() -> None:
    with pytest.raises(TypeError):
        ChangeNotifier().subscribe("nope")  # type: ignore[arg-type]


def test_registration_is_safe_during_concurrent_delivery() -> None:
    notifier = ChangeNotifier()
    stop = threading.Event()
    counts: list[int] = []

    def churn() -> None:
        while not stop.is_set():
            notifier.subscribe(lambda _e: None).cancel()

    notifier.subscribe(lambda e: counts.append(e.sequence))
    worker = threading.Thread(target=churn)
    worker.start()
    try:
        for sequence in range(1, 201):
            notifier.notify(_event(sequence))
    finally:
        stop.set()
        worker.join()

    assert counts == list(range(1, 201))
    assert len(notifier) == 1
