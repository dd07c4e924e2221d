from __future__ import annotations

from collections.abc import Sequence

import pytest

from pyhowdy.board import AVAILABLE_MOODS, BoardObserver, MoodBoard, MoodCountsObserver, UserListObserver, UserMood
from pyhowdy.exceptions import DuplicateKeyError, InvalidNicknameError, NamespaceLockedError
from pyhowdy.nickname import IssuedNicknames, NicknameGenerator
from pyhowdy.state.events import ChangeEvent
from pyhowdy.state.registry import NamespaceRegistry

HAPPY, ENTHUSIASTIC = AVAILABLE_MOODS[0], AVAILABLE_MOODS[1]


class _FixedRandom:
    def choice(self, seq: Sequence[str]) -> str:
        return seq[0]

    def randrange(self, start: int, stop: int) -> int:
        return start


def _board() -> MoodBoard:
    store = NamespaceRegistry().open("HowdyApp", "Board", True)
    generator = NicknameGenerator(rng=_FixedRandom(), issued=IssuedNicknames(), max_attempts=5)
    return MoodBoard(store, generator=generator)


def test_mood_list_matches_form() -> None:
    assert len(AVAILABLE_MOODS) == 12
    assert HAPPY == "😊 Happy"


def test_propose_nickname_falls_back_to_manual_entry() -> None:
    board = _board()

    assert board.propose_nickname() == "BravePanda100"
    assert board.propose_nickname() == ""


def test_newcomer_shares_mood() -> None:
    board = _board()

    board.share("alice", HAPPY)

    assert board.mood_of("alice") == HAPPY
    assert board.user_moods() == [UserMood(user="alice", mood=HAPPY)]


@pytest.mark.parametrize("nickname", ["", "   "])
def test_blank_nickname_rejected(nickname: str) -> None:
    board = _board()

    with pytest.raises(InvalidNicknameError):
        board.share(nickname, HAPPY)
    with pytest.raises(InvalidNicknameError):
        board.share(nickname, HAPPY, returning=True)
    assert len(board.store) == 0


def test_taken_nickname_rejected_for_newcomers_only() -> None:
    board = _board()
    board.share("alice", HAPPY)

    with pytest.raises(DuplicateKeyError) as excinfo:
        board.share("alice", ENTHUSIASTIC)
    assert excinfo.value.key == "alice"
    assert board.mood_of("alice") == HAPPY

    board.share("alice", ENTHUSIASTIC, returning=True)
    assert board.mood_of("alice") == ENTHUSIASTIC


def test_locked_store_error_reaches_caller() -> None:
    board = _board()
    lock = board.store._write_lock  # noqa: SLF001

    lock.acquire()
    try:
        with pytest.raises(NamespaceLockedError):
            board.share("alice", HAPPY)
    finally:
        lock.release()


def test_user_moods_sorted_and_counts() -> None:
    board = _board()
    board.share("carol", ENTHUSIASTIC)
    board.share("alice", HAPPY)
    board.share("bob", HAPPY)

    assert [row.user for row in board.user_moods()] == ["alice", "bob", "carol"]
    assert board.mood_counts() == [(ENTHUSIASTIC, 1), (HAPPY, 2)]


def test_dashboard_renders_initial_state_then_follows_changes() -> None:
    board = _board()
    view = MoodCountsObserver(board.store)

    view.activate()
    assert view.is_empty
    assert view.updates == 1

    board.share("alice", HAPPY)
    assert view.counts == [(HAPPY, 1)]
    assert view.updates == 2

    view.deactivate()
    view.deactivate()
    board.share("bob", HAPPY)

    assert view.counts == [(HAPPY, 1)]
    assert not view.active
    assert board.store.subscriber_count == 0


def test_activate_twice_subscribes_once() -> None:
    board = _board()
    view = MoodCountsObserver(board.store)

    view.activate()
    view.activate()

    assert board.store.subscriber_count == 1
    view.deactivate()


def test_user_list_observer_context_manager() -> None:
    board = _board()
    board.share("bob", HAPPY)

    with UserListObserver(board.store) as view:
        assert view.rows == [UserMood(user="bob", mood=HAPPY)]
        board.share("alice", ENTHUSIASTIC)
        assert [row.user for row in view.rows] == ["alice", "bob"]

    assert board.store.subscriber_count == 0


def test_failed_initial_render_releases_subscription() -> None:
    board = _board()

    class _Broken(BoardObserver):
        def update_view(self, event: ChangeEvent | None) -> None:
            raise RuntimeError("cannot render")

    view = _Broken(board.store)
    with pytest.raises(RuntimeError):
        view.activate()

    assert not view.active
    assert board.store.subscriber_count == 0
