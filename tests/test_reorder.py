from concurrent.futures import ThreadPoolExecutor

import pytest

from tasklist.errors import IndexOutOfRange
from tasklist.reorder import IDLE, Bounds, Dragging, ReorderController
from tasklist.store import TaskStore

ROW = 50


class SpyStore(TaskStore):
    """TaskStore that records every move_item call it receives."""

    def __init__(self):
        super().__init__()
        self.moves = []

    def move_item(self, from_index, to_index):
        self.moves.append((from_index, to_index))
        super().move_item(from_index, to_index)


def row(index):
    return Bounds(top=index * ROW, bottom=(index + 1) * ROW)


def below_middle(index):
    """Pointer in the lower half of the row."""
    return index * ROW + ROW * 0.75


def above_middle(index):
    """Pointer in the upper half of the row."""
    return index * ROW + ROW * 0.25


def make(*texts):
    store = SpyStore()
    for text in texts:
        store.add_todo(text)
    notified = []
    store.subscribe(lambda: notified.append(1))
    return store, ReorderController(store), notified


def order(tasks):
    return [t.text for t in tasks]


def positions(ctl):
    state = ctl.state
    assert isinstance(state, Dragging)
    return state.origin_index, state.current_index


class TestDragCommit:
    def test_drag_down_commits_one_move(self):
        store, ctl, notified = make("A", "B", "C", "D", "E")
        ctl.start(1)
        assert ctl.hover(2, below_middle(2), row(2)) is True
        assert ctl.hover(3, below_middle(3), row(3)) is True
        assert positions(ctl) == (1, 3)
        assert store.moves == []
        assert notified == []

        assert ctl.end() == (1, 3)
        assert store.moves == [(1, 3)]
        assert len(notified) == 1
        assert order(store.snapshot()) == ["A", "C", "D", "B", "E"]
        assert ctl.state == IDLE

    def test_drag_up_commits_one_move(self):
        store, ctl, _ = make("A", "B", "C", "D")
        ctl.start(3)
        assert ctl.hover(2, above_middle(2), row(2)) is True
        assert ctl.hover(1, above_middle(1), row(1)) is True
        assert ctl.hover(0, above_middle(0), row(0)) is True
        assert ctl.end() == (3, 0)
        assert store.moves == [(3, 0)]
        assert order(store.snapshot()) == ["D", "A", "B", "C"]

    def test_drop_at_origin_issues_no_move(self):
        store, ctl, notified = make("A", "B", "C")
        ctl.start(0)
        ctl.hover(1, below_middle(1), row(1))
        ctl.hover(0, above_middle(0), row(0))
        assert ctl.end() is None
        assert store.moves == []
        assert notified == []

    def test_cancel_issues_no_move(self):
        store, ctl, notified = make("A", "B", "C", "D")
        ctl.start(1)
        ctl.hover(2, below_middle(2), row(2))
        ctl.hover(3, below_middle(3), row(3))
        ctl.cancel()
        assert ctl.end() is None
        assert store.moves == []
        assert notified == []
        assert order(store.snapshot()) == ["A", "B", "C", "D"]
        assert ctl.state == IDLE


class TestHover:
    def test_preview_shows_provisional_order(self):
        store, ctl, _ = make("A", "B", "C")
        ctl.start(0)
        ctl.hover(1, below_middle(1), row(1))
        assert order(ctl.preview()) == ["B", "A", "C"]
        assert order(store.snapshot()) == ["A", "B", "C"]

    def test_preview_when_idle_is_store_order(self):
        store, ctl, _ = make("A", "B")
        assert ctl.preview() == store.snapshot()

    def test_downward_needs_pointer_past_middle(self):
        _, ctl, _ = make("A", "B", "C")
        ctl.start(0)
        assert ctl.hover(1, above_middle(1), row(1)) is False
        assert positions(ctl) == (0, 0)
        assert ctl.hover(1, below_middle(1), row(1)) is True

    def test_upward_needs_pointer_past_middle(self):
        _, ctl, _ = make("A", "B", "C")
        ctl.start(2)
        assert ctl.hover(1, below_middle(1), row(1)) is False
        assert ctl.hover(1, above_middle(1), row(1)) is True
        assert positions(ctl) == (2, 1)

    def test_exact_middle_moves(self):
        _, ctl, _ = make("A", "B")
        ctl.start(0)
        assert ctl.hover(1, ROW + ROW / 2, row(1)) is True

    def test_hover_over_itself_is_ignored(self):
        _, ctl, _ = make("A", "B")
        ctl.start(1)
        assert ctl.hover(1, below_middle(1), row(1)) is False

    def test_hover_while_idle_is_ignored(self):
        store, ctl, _ = make("A", "B")
        assert ctl.hover(1, below_middle(1), row(1)) is False
        assert ctl.state == IDLE
        assert store.moves == []

    def test_hover_out_of_range(self):
        _, ctl, _ = make("A", "B")
        ctl.start(0)
        with pytest.raises(IndexOutOfRange):
            ctl.hover(5, below_middle(5), row(5))


class TestStart:
    @pytest.mark.parametrize("index", [-1, 3])
    def test_start_out_of_range(self, index):
        _, ctl, _ = make("A", "B", "C")
        with pytest.raises(IndexOutOfRange):
            ctl.start(index)
        assert ctl.dragging is False

    def test_restart_drops_previous_gesture(self):
        store, ctl, _ = make("A", "B", "C")
        ctl.start(0)
        ctl.hover(1, below_middle(1), row(1))
        ctl.start(2)
        assert positions(ctl) == (2, 2)
        assert order(ctl.preview()) == ["A", "B", "C"]
        assert store.moves == []



class TestStoreChangedDuringDrag:
    def test_drop_follows_dragged_task_after_delete(self):
        store, ctl, _ = make("A", "B", "C", "D")
        ctl.start(1)
        ctl.hover(2, below_middle(2), row(2))
        store.delete(store.snapshot()[0])
        assert ctl.end() == (0, 1)
        assert order(store.snapshot()) == ["C", "B", "D"]

    def test_drop_follows_dragged_task_after_add(self):
        store, ctl, _ = make("A", "B", "C")
        ctl.start(2)
        ctl.hover(1, above_middle(1), row(1))
        ctl.hover(0, above_middle(0), row(0))
        store.add_todo("D")
        store.move_item(3, 0)
        assert ctl.end() == (3, 0)
        assert order(store.snapshot()) == ["C", "D", "A", "B"]

    def test_drop_of_deleted_task_commits_nothing(self):
        store, ctl, notified = make("A", "B", "C")
        ctl.start(0)
        ctl.hover(2, below_middle(2), row(2))
        store.delete(store.snapshot()[0])
        assert ctl.end() is None
        assert store.moves == []
        assert order(store.snapshot()) == ["B", "C"]
        assert ctl.state == IDLE

    def test_drop_already_in_place_commits_nothing(self):
        store, ctl, _ = make("A", "B", "C")
        ctl.start(0)
        ctl.hover(2, below_middle(2), row(2))
        store.delete(store.snapshot()[2])
        store.delete(store.snapshot()[1])
        assert ctl.end() is None
        assert store.moves == []
        assert ctl.state == IDLE


class TestConcurrentHover:
    def test_preview_stays_consistent_under_parallel_hovers(self):
        texts = [str(i) for i in range(12)]
        _, ctl, _ = make(*texts)
        ctl.start(0)
        dragged = ctl.preview()[0].id
        targets = [i % 12 for i in range(1, 400)]

        def hover(index):
            ctl.hover(index, below_middle(index) if index > 0 else above_middle(index), row(index))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(hover, targets))

        preview = ctl.preview()
        assert sorted(order(preview), key=int) == texts
        assert preview[positions(ctl)[1]].id == dragged
