"""Count-by-value summaries of a namespace snapshot."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping


def aggregate(keys: Iterable[str], get: Callable[[str], str | None]) -> list[tuple[str, int]]:
    """Group entries by value and count them.

    Values appear in the order they are first met while iterating *keys*.
    Keys that *get* no longer resolves are skipped.

    >>> entries = {"a": "happy", "b": "sad", "c": "happy"}
    >>> aggregate(["a", "b", "c"], entries.get)
    [('happy', 2), ('sad', 1)]
    """
    counts: dict[str, int] = {}
    for key in keys:
        value = get(key)
        if value is None:
            continue
        counts[value] = counts.get(value, 0) + 1
    return list(counts.items())


def aggregate_snapshot(snapshot: Mapping[str, str]) -> list[tuple[str, int]]:
    """:func:`aggregate` over a mapping snapshot."""
    return aggregate(snapshot.keys(), snapshot.get)
