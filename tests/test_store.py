"""
Tests for the counter collection state machine.
"""

import random

import pytest

from models.counter import Counter
from models.gesture import Intent
from state.store import CounterStore, clamp


def _ids():
    n = 0

    def factory():
        nonlocal n
        n += 1
        return f"c{n}"

    return factory


def _store(*counters, **kwargs):
    kwargs.setdefault("id_factory", _ids())
    return CounterStore(counters=list(counters) or None, **kwargs)


def _assert_invariants(store):
    assert len(store) >= 1
    assert 0 <= store.active_index < len(store)
    ids = [c.id for c in store.counters]
    assert len(ids) == len(set(ids))


class TestClamp:
    def test_clamp(self):
        assert clamp(105, 0, 100) == 100
        assert clamp(-3, 0, 100) == 0
        assert clamp(42, 0, 100) == 42


class TestConstruction:
    def test_default_single_counter(self):
        store = _store()
        assert len(store) == 1
        counter = store.active_counter
        assert counter.count == 0
        assert counter.target_value == 100
        assert store.active_index == 0

    def test_default_target_configurable(self):
        store = _store(default_target=33)
        assert store.active_counter.target_value == 33

    def test_seeded_counters_keep_order(self):
        store = _store(Counter("a", 1, 10), Counter("b", 2, 20))
        assert [c.id for c in store.counters] == ["a", "b"]
        assert store.active_index == 0

    def test_duplicate_seed_ids_dropped(self):
        store = _store(Counter("a", 1, 10), Counter("a", 5, 10))
        assert len(store) == 1
        assert store.active_counter.count == 1

    def test_counters_are_copies(self):
        store = _store(Counter("a", 1, 10))
        store.counters[0].count = 9
        assert store.get_counter("a").count == 1


class TestAddCounter:
    def test_add_appends_and_activates(self):
        store = _store()
        added = store.add_counter()

        assert len(store) == 2
        assert store.active_index == 1
        assert store.active_counter.id == added.id
        assert added.count == 0
        assert added.target_value == 100

    def test_add_activates_last_even_from_middle(self):
        store = _store()
        store.add_counter()
        store.add_counter()
        store.set_active_counter_index(0)
        store.add_counter()
        assert store.active_index == 3

    def test_ids_unique_with_colliding_factory(self):
        values = iter(["x", "x", "x", "y"])
        store = CounterStore(counters=[Counter("x")], id_factory=lambda: next(values))
        added = store.add_counter()
        assert added.id == "y"


class TestRemoveCounter:
    def test_remove_last_remaining_is_noop(self):
        store = _store(Counter("only", 5, 10))
        assert store.remove_counter("only") is False
        assert [c.id for c in store.counters] == ["only"]

    def test_remove_unknown_is_noop(self):
        store = _store(Counter("a"), Counter("b"))
        assert store.remove_counter("zzz") is False
        assert len(store) == 2

    def test_remove_clamps_active_index(self):
        store = _store(Counter("a"), Counter("b"), Counter("c"))
        store.set_active_counter_index(2)
        assert store.remove_counter("c") is True
        assert store.active_index == 1

    def test_remove_before_active_keeps_index_in_range(self):
        store = _store(Counter("a"), Counter("b"))
        store.set_active_counter_index(1)
        store.remove_counter("a")
        assert store.active_index == 0
        assert store.active_counter.id == "b"

    def test_can_remove_hint(self):
        store = _store()
        assert store.can_remove is False
        store.add_counter()
        assert store.can_remove is True


class TestUpdateCounter:
    def test_partial_merge(self):
        store = _store(Counter("a", 3, 10, name="Laps"))
        assert store.update_counter("a", {"color": "#ff0000"}) is True

        counter = store.get_counter("a")
        assert counter.color == "#ff0000"
        assert counter.name == "Laps"
        assert counter.count == 3

    def test_camel_and_snake_target(self):
        store = _store(Counter("a", 3, 10))
        store.update_counter("a", {"targetValue": 20})
        assert store.get_counter("a").target_value == 20
        store.update_counter("a", {"target_value": 30})
        assert store.get_counter("a").target_value == 30

    def test_does_not_clamp(self):
        store = _store(Counter("a", 3, 10))
        store.update_counter("a", {"count": 50})
        assert store.get_counter("a").count == 50

    def test_unknown_id_noop(self):
        store = _store(Counter("a", 3, 10))
        assert store.update_counter("nope", {"count": 5}) is False

    def test_unknown_fields_ignored(self):
        store = _store(Counter("a", 3, 10))
        assert store.update_counter("a", {"id": "hijack", "size": 3}) is False
        assert store.get_counter("a") is not None

    def test_same_value_is_not_a_change(self):
        store = _store(Counter("a", 3, 10))
        assert store.update_counter("a", {"count": 3}) is False


class TestSetActiveIndex:
    def test_in_range(self):
        store = _store(Counter("a"), Counter("b"))
        assert store.set_active_counter_index(1) is True
        assert store.active_index == 1

    @pytest.mark.parametrize("index", [-1, 2, 99, True, "1", None])
    def test_out_of_range_or_bad_type_noop(self, index):
        store = _store(Counter("a"), Counter("b"))
        assert store.set_active_counter_index(index) is False
        assert store.active_index == 0

    def test_navigation_hints(self):
        store = _store(Counter("a"), Counter("b"), Counter("c"))
        assert (store.has_previous, store.has_next) == (False, True)
        store.set_active_counter_index(1)
        assert (store.has_previous, store.has_next) == (True, True)
        store.set_active_counter_index(2)
        assert (store.has_previous, store.has_next) == (True, False)


class TestApplyIntent:
    def test_swipe_up_scenario(self):
        """count 10, swipe up 120 units -> Increment(1) -> 11."""
        store = _store(Counter("a", 10, 100))
        assert store.apply_intent(Intent.increment(1)) is True
        assert store.active_counter.count == 11

    def test_increment_clamped_at_target(self):
        """count 95 + 10 steps -> 100, not 105."""
        store = _store(Counter("a", 95, 100))
        store.apply_intent(Intent.increment(10))
        assert store.active_counter.count == 100

    def test_decrement_clamped_at_zero(self):
        store = _store(Counter("a", 2, 100))
        store.apply_intent(Intent.decrement(4))
        assert store.active_counter.count == 0

    def test_no_change_at_bound(self):
        store = _store(Counter("a", 100, 100))
        assert store.apply_intent(Intent.increment(1)) is False

    def test_no_write_at_bound(self):
        store = _store(Counter("a", 0, 100))
        calls = []
        store.add_listener(calls.append)
        store.apply_intent(Intent.decrement(1))
        assert calls == []

    def test_applies_to_active_counter(self):
        store = _store(Counter("a", 0, 10), Counter("b", 0, 10))
        store.set_active_counter_index(1)
        store.apply_intent(Intent.increment(1))
        assert store.get_counter("a").count == 0
        assert store.get_counter("b").count == 1

    def test_switch_scenario(self):
        """Two counters, SwitchNext -> 1; again -> still 1."""
        store = _store(Counter("a"), Counter("b"))
        assert store.apply_intent(Intent.switch_next()) is True
        assert store.active_index == 1
        assert store.apply_intent(Intent.switch_next()) is False
        assert store.active_index == 1

    def test_switch_prev_at_first_is_noop(self):
        store = _store(Counter("a"), Counter("b"))
        assert store.apply_intent(Intent.switch_prev()) is False
        assert store.active_index == 0

    def test_none_and_hint_do_nothing(self):
        store = _store(Counter("a", 5, 10))
        assert store.apply_intent(Intent.none()) is False
        assert store.apply_intent(Intent.feedback_hint("increment", 3)) is False
        assert store.active_counter.count == 5


class TestListeners:
    def test_notified_on_persisted_changes(self):
        store = _store()
        calls = []
        store.add_listener(lambda s: calls.append(len(s)))

        added = store.add_counter()
        store.update_counter(added.id, {"name": "Reps"})
        store.remove_counter(added.id)

        assert calls == [2, 2, 1]

    def test_not_notified_on_active_index_only(self):
        store = _store(Counter("a"), Counter("b"))
        calls = []
        store.add_listener(calls.append)
        store.set_active_counter_index(1)
        assert calls == []

    def test_remove_listener(self):
        store = _store()
        calls = []
        listener = calls.append
        store.add_listener(listener)
        store.remove_listener(listener)
        store.add_counter()
        assert calls == []


class TestInvariantsUnderRandomOperations:
    @pytest.mark.parametrize("seed", range(5))
    def test_random_sequences_keep_invariants(self, seed):
        rng = random.Random(seed)
        store = _store()
        for _ in range(300):
            op = rng.choice(["add", "remove", "update", "active", "intent"])
            ids = [c.id for c in store.counters]
            if op == "add":
                store.add_counter()
                assert store.active_index == len(store) - 1
            elif op == "remove":
                target = rng.choice(ids + ["missing"])
                before = len(store)
                store.remove_counter(target)
                if before == 1:
                    assert len(store) == 1
            elif op == "update":
                store.update_counter(rng.choice(ids), {"name": f"n{rng.randint(0, 9)}"})
            elif op == "active":
                store.set_active_counter_index(rng.randint(-2, len(store) + 2))
            else:
                store.apply_intent(rng.choice([
                    Intent.increment(rng.randint(1, 20)),
                    Intent.decrement(rng.randint(1, 20)),
                    Intent.switch_prev(),
                    Intent.switch_next(),
                ]))
            _assert_invariants(store)
            active = store.active_counter
            assert 0 <= active.count <= active.target_value
