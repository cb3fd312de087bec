import pytest
from pydantic import ValidationError

from crdtkit import (
    CounterSnapshot,
    LWWRegister,
    PNCounter,
    SnapshotKind,
    TextRGA,
    TextSnapshot,
    parse_snapshot,
)
from crdtkit.protocol import MAX_NODE_ID_LENGTH


class TestParseSnapshot:
    def test_parses_each_kind(self):
        register = parse_snapshot(
            "register", {"value": 1, "timestamp": 10, "counter": 0, "nodeId": "a"}
        )
        counter = parse_snapshot(SnapshotKind.COUNTER, {"localNodeId": "a", "increments": {"a": 2}})
        text = parse_snapshot(
            "text",
            {
                "localNodeId": "a",
                "localCounter": 1,
                "entries": {"a:1": {"char": "x", "deleted": False}},
                "order": ["a:1"],
            },
        )

        assert isinstance(register, LWWRegister)
        assert register.value() == 1
        assert isinstance(counter, PNCounter)
        assert counter.get_count() == 2
        assert isinstance(text, TextRGA)
        assert text.get_text() == "x"

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown snapshot kind"):
            parse_snapshot("set", {})

    def test_round_trips_through_parse(self):
        doc = TextRGA("a")
        doc.insert_text(0, "hey")

        assert parse_snapshot("text", doc.to_json()) == doc


class TestSnapshotModels:
    def test_accepts_python_field_names(self):
        snapshot = CounterSnapshot.model_validate({"local_node_id": "a"})

        assert snapshot.local_node_id == "a"
        assert snapshot.increments == {}

    def test_missing_node_id_is_rejected(self):
        with pytest.raises(ValidationError):
            TextSnapshot.model_validate({"order": []})

    def test_node_id_length_is_bounded(self):
        with pytest.raises(ValidationError):
            CounterSnapshot.model_validate({"localNodeId": "x" * (MAX_NODE_ID_LENGTH + 1)})

    def test_negative_local_counter_is_rejected(self):
        with pytest.raises(ValidationError):
            TextSnapshot.model_validate({"localNodeId": "a", "localCounter": -1})

    def test_unknown_fields_are_ignored(self):
        snapshot = TextSnapshot.model_validate({"localNodeId": "a", "onInsert": "ignored"})

        assert snapshot.order == []

    def test_order_id_length_is_bounded(self):
        from crdtkit.protocol import MAX_ID_LENGTH

        with pytest.raises(ValidationError):
            TextSnapshot.model_validate({"localNodeId": "a", "order": ["x" * (MAX_ID_LENGTH + 1)]})
