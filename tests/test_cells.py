from __future__ import annotations

import threading

import pytest

from board_game_io.cells import ReadableCell, WritableCell


def test_subscribe_calls_back_immediately_with_current_value() -> None:
    cell = ReadableCell(3)
    seen = []

    cell.subscribe(seen.append)

    assert seen == [3]
    assert cell.read() == 3


def test_replace_notifies_in_subscription_order() -> None:
    cell = ReadableCell("a")
    calls = []
    cell.subscribe(lambda v: calls.append(("first", v)))
    cell.subscribe(lambda v: calls.append(("second", v)))
    calls.clear()

    cell.replace("b")
    cell.replace("c")

    assert calls == [("first", "b"), ("second", "b"), ("first", "c"), ("second", "c")]


def test_unsubscribe_stops_only_that_callback() -> None:
    cell = ReadableCell(0)
    a, b = [], []
    unsub_a = cell.subscribe(a.append)
    cell.subscribe(b.append)

    unsub_a()
    cell.replace(1)

    assert a == [0]
    assert b == [0, 1]


def test_unsubscribe_matches_identity_and_removes_one_registration() -> None:
    cell = ReadableCell(0)
    seen = []
    unsub_first = cell.subscribe(seen.append)
    cell.subscribe(seen.append)
    assert cell.subscriber_count == 2

    unsub_first()
    unsub_first()  # second call is a no-op
    cell.replace(1)

    assert cell.subscriber_count == 1
    assert seen == [0, 0, 1]


def test_unsubscribe_does_not_remove_equal_but_distinct_callbacks() -> None:
    class Recorder:
        def __init__(self) -> None:
            self.values = []

        def __call__(self, value) -> None:
            self.values.append(value)

        def __eq__(self, other) -> bool:
            return isinstance(other, Recorder)

        __hash__ = object.__hash__

    first, second = Recorder(), Recorder()
    cell = ReadableCell("x")
    cell.subscribe(first)
    unsub_second = cell.subscribe(second)

    unsub_second()
    cell.replace("y")

    assert first.values == ["x", "y"]
    assert second.values == ["x"]


def test_subscriber_added_during_notification_waits_for_next_round() -> None:
    cell = ReadableCell(0)
    late = []

    def subscribe_late(value) -> None:
        if value == 1 and not late:
            cell.subscribe(late.append)

    cell.subscribe(subscribe_late)
    cell.replace(1)

    # Only the immediate subscribe-time call, not the round in progress.
    assert late == [1]

    cell.replace(2)
    assert late == [1, 2]


def test_subscriber_removed_during_notification_still_sees_that_round() -> None:
    cell = ReadableCell(0)
    seen = []
    handles = {}

    def remover(value) -> None:
        if value == 1:
            handles["other"]()

    cell.subscribe(remover)
    handles["other"] = cell.subscribe(seen.append)

    cell.replace(1)
    cell.replace(2)

    assert seen == [0, 1]


def test_write_without_guard_behaves_like_replace() -> None:
    cell = WritableCell(None)
    seen = []
    cell.subscribe(seen.append)

    cell.write({"max_players": 4})

    assert seen == [None, {"max_players": 4}]


def test_guard_receives_candidate_and_current_value() -> None:
    calls = []

    def guard(candidate, current) -> bool:
        calls.append((candidate, current))
        return True

    cell = WritableCell("old", guard=guard)
    cell.write("new")

    assert calls == [("new", "old")]
    assert cell.read() == "new"


def test_rejected_write_is_silent() -> None:
    cell = WritableCell(1, guard=lambda candidate, current: False)
    seen = []
    cell.subscribe(seen.append)

    assert cell.write(2) is None
    assert cell.read() == 1
    assert seen == [1]


def test_replace_bypasses_guard() -> None:
    cell = WritableCell(1, guard=lambda candidate, current: False)

    cell.replace(5)

    assert cell.read() == 5


@pytest.mark.parametrize("accept", [True, False])
def test_each_accepted_mutation_notifies_once(accept: bool) -> None:
    cell = WritableCell(0, guard=lambda candidate, current: accept)
    seen = []
    cell.subscribe(seen.append)

    for value in (1, 2, 3):
        cell.write(value)
    cell.replace(4)

    expected = [0, 1, 2, 3, 4] if accept else [0, 4]
    assert seen == expected


def test_subscriber_may_write_back_into_the_cell() -> None:
    cell = WritableCell(0)
    seen = []

    def clamp(value) -> None:
        if value > 10:
            cell.write(10)

    cell.subscribe(clamp)
    cell.subscribe(seen.append)
    cell.write(50)

    assert cell.read() == 10
    # nested round for 10 runs inside the outer round for 50
    assert seen == [0, 10, 50]


def test_write_from_another_thread_waits_for_the_running_round() -> None:
    cell = ReadableCell(0)
    seen = []
    blocked = []
    writer = threading.Thread(target=cell.replace, args=(2,))

    def start_writer(value) -> None:
        seen.append(value)
        if value == 1:
            writer.start()
            writer.join(timeout=0.1)
            blocked.append(writer.is_alive())

    cell.subscribe(start_writer)
    cell.replace(1)
    writer.join(timeout=5)

    assert blocked == [True]
    assert seen == [0, 1, 2]
    assert cell.read() == 2
