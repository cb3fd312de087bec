import pytest

from crdtkit import PNCounter


def make_counter(node_id, increments=0, decrements=0):
    counter = PNCounter(node_id)
    for _ in range(increments):
        counter.increment()
    for _ in range(decrements):
        counter.decrement()
    return counter


class TestLocalOperations:
    def test_increment_and_decrement(self):
        counter = PNCounter("node-1")
        counter.increment().increment().decrement()

        assert counter.get_count() == 1
        assert counter.value() == 1
        assert counter.increments == {"node-1": 2}
        assert counter.decrements == {"node-1": 1}

    def test_empty_counter_is_zero(self):
        assert PNCounter("node-1").get_count() == 0

    def test_count_can_go_negative(self):
        counter = make_counter("node-1", decrements=3)

        assert counter.get_count() == -3

    def test_constructor_copies_maps(self):
        increments = {"a": 1}
        counter = PNCounter("a", increments=increments)

        counter.increment()

        assert increments == {"a": 1}
        assert counter.increments == {"a": 2}


class TestMerge:
    def test_alice_and_bob(self):
        alice = make_counter("alice", increments=2)
        bob = make_counter("bob", increments=1, decrements=1)

        assert alice.get_count() == 2
        assert bob.get_count() == 0

        alice.merge(bob)

        assert alice.get_count() == 2
        assert alice.increments == {"alice": 2, "bob": 1}
        assert alice.decrements == {"bob": 1}

    def test_merge_is_commutative(self):
        a = make_counter("a", increments=3, decrements=1)
        b = make_counter("b", increments=1, decrements=4)

        ab = a.copy().merge(b)
        ba = b.copy().merge(a)

        assert ab.get_count() == ba.get_count() == -1
        assert ab.increments == ba.increments
        assert ab.decrements == ba.decrements

    def test_merge_is_idempotent(self):
        a = make_counter("a", increments=2)
        b = make_counter("b", increments=5, decrements=2)

        a.merge(b)
        snapshot = a.to_json()
        a.merge(b).merge(b)

        assert a.to_json() == snapshot

    def test_merge_takes_max_per_node(self):
        a = PNCounter("a", increments={"a": 5, "b": 1})
        b = PNCounter("b", increments={"a": 3, "b": 4})

        a.merge(b)

        assert a.increments == {"a": 5, "b": 4}

    def test_merge_does_not_zero_fill(self):
        a = make_counter("a", increments=1)
        b = make_counter("b", increments=1)

        a.merge(b)

        assert a.decrements == {}

    def test_merge_is_associative(self):
        x = make_counter("x", increments=4)
        y = make_counter("y", decrements=2)
        z = make_counter("z", increments=1, decrements=1)

        left = x.copy().merge(y).merge(z)
        right = x.copy().merge(y.copy().merge(z))

        assert left.increments == right.increments
        assert left.decrements == right.decrements

    def test_merge_does_not_mutate_other(self):
        a = make_counter("a", increments=2)
        b = make_counter("b", decrements=1)
        before = b.to_json()

        a.merge(b)

        assert b.to_json() == before

    def test_merge_rejects_other_types(self):
        from crdtkit import TextRGA

        with pytest.raises(TypeError):
            PNCounter("a").merge(TextRGA("a"))


class TestSerialization:
    def test_round_trip(self):
        counter = make_counter("node-1", increments=3, decrements=1)
        counter.merge(make_counter("node-2", increments=1))

        restored = PNCounter.from_json(counter.to_json())

        assert restored.local_node_id == "node-1"
        assert restored.get_count() == 3
        assert restored == counter

    def test_from_json_defaults_missing_maps(self):
        counter = PNCounter.from_json({"localNodeId": "node-1"})

        assert counter.increments == {}
        assert counter.decrements == {}
        assert counter.get_count() == 0

    def test_to_json_does_not_alias_state(self):
        counter = make_counter("node-1", increments=1)

        data = counter.to_json()
        data["increments"]["node-1"] = 99

        assert counter.get_count() == 1

    def test_from_json_rejects_negative_tallies(self):
        with pytest.raises(ValueError):
            PNCounter.from_json({"localNodeId": "a", "increments": {"a": -1}})
