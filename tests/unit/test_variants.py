"""Tests for ImmutableCollection and FrozenCollection."""
from __future__ import annotations

from typing import Any

import pytest

WRITE_CALLS: list[tuple[str, tuple[Any, ...]]] = [
    ("values", ()),
    ("set", ("k", "v")),
    ("add", ("v",)),
    ("merge", ({"z": 1},)),
    ("replace", ({"a": 9},)),
    ("remove", ("a",)),
    ("clear", ()),
]


class TestImmutableCollection:
    """Tests for copy-on-write behaviour."""

    def test_set_returns_new_instance(self) -> None:
        """set leaves the receiver untouched."""
        from kvcollection import ImmutableCollection

        c = ImmutableCollection({"a": 1})
        c2 = c.set("b", 2)

        assert c2 is not c
        assert type(c2) is ImmutableCollection
        assert c.all() == {"a": 1}
        assert c2.get("b") == 2

    @pytest.mark.parametrize(
        ("operation", "args", "expected"),
        [
            ("values", (), {0: 1, 1: 2}),
            ("set", (None, 3), {"a": 1, "b": 2, 0: 3}),
            ("add", (3,), {"a": 1, "b": 2, 0: 3}),
            ("merge", ({"b": 3, "c": 4},), {"a": 1, "b": 3, "c": 4}),
            ("replace", ({"b": 3},), {"a": 1, "b": 3}),
            ("remove", ("a",), {"b": 2}),
        ],
    )
    def test_writes_return_copies(
        self, operation: str, args: tuple[Any, ...], expected: dict[Any, Any]
    ) -> None:
        """Every supported write returns a modified copy."""
        from kvcollection import ImmutableCollection

        c = ImmutableCollection({"a": 1, "b": 2})
        result = getattr(c, operation)(*args)

        assert result.all() == expected
        assert c.all() == {"a": 1, "b": 2}

    def test_clear_is_rejected(self) -> None:
        """clear raises and names the concrete type."""
        from kvcollection import IllegalMutationError, ImmutableCollection

        c = ImmutableCollection({"a": 1})
        with pytest.raises(
            IllegalMutationError,
            match=r"Impossible to clear an immutable collection \(ImmutableCollection\)",
        ) as exc_info:
            c.clear()

        assert exc_info.value.operation == "clear"
        assert exc_info.value.collection_type == "ImmutableCollection"
        assert c.all() == {"a": 1}

    def test_removing_every_key_is_allowed(self) -> None:
        """Emptying through remove() still works."""
        from kvcollection import ImmutableCollection

        c = ImmutableCollection({"a": 1, "b": 2})
        emptied = c.remove("a").remove("b")

        assert emptied.count() == 0
        assert c.count() == 2

    def test_item_assignment_is_rejected(self) -> None:
        """c[k] = v and del c[k] cannot return a copy and raise."""
        from kvcollection import IllegalMutationError, ImmutableCollection

        c = ImmutableCollection({"a": 1})
        with pytest.raises(IllegalMutationError, match="in place"):
            c["b"] = 2
        with pytest.raises(IllegalMutationError, match="in place"):
            del c["a"]
        assert c.all() == {"a": 1}

    def test_subclass_is_preserved(self) -> None:
        """Copies keep the concrete subclass."""
        from kvcollection import IllegalMutationError, ImmutableCollection

        class Settings(ImmutableCollection):
            pass

        s = Settings({"a": 1}).set("b", 2)
        assert type(s) is Settings
        with pytest.raises(IllegalMutationError, match=r"\(Settings\)"):
            s.clear()


class TestFrozenCollection:
    """Tests for read-only behaviour."""

    @pytest.mark.parametrize(("operation", "args"), WRITE_CALLS)
    def test_every_write_is_rejected(self, operation: str, args: tuple[Any, ...]) -> None:
        """Every write raises and leaves the items untouched."""
        from kvcollection import FrozenCollection, IllegalMutationError

        c = FrozenCollection({"a": 1, "b": 2})
        before = c.all()

        with pytest.raises(IllegalMutationError, match=r"frozen collection \(FrozenCollection\)") as exc_info:
            getattr(c, operation)(*args)

        assert exc_info.value.operation == operation
        assert exc_info.value.collection_type == "FrozenCollection"
        assert c.all() == before

    def test_messages_name_the_operation(self) -> None:
        """Messages describe the attempted operation."""
        from kvcollection import FrozenCollection, IllegalMutationError

        c = FrozenCollection()
        with pytest.raises(IllegalMutationError, match="Impossible to set items on a frozen"):
            c.set("a", 1)
        with pytest.raises(IllegalMutationError, match="Impossible to reset keys on a frozen"):
            c.values()
        with pytest.raises(IllegalMutationError, match="Impossible to clear a frozen"):
            c.clear()

    def test_item_assignment_is_rejected(self) -> None:
        """Indexed writes go through the rejected operations."""
        from kvcollection import FrozenCollection, IllegalMutationError

        c = FrozenCollection({"a": 1})
        with pytest.raises(IllegalMutationError) as set_info:
            c["a"] = 2
        with pytest.raises(IllegalMutationError) as append_info:
            c[None] = 2
        with pytest.raises(IllegalMutationError) as del_info:
            del c["a"]

        assert set_info.value.operation == "set"
        assert append_info.value.operation == "add"
        assert del_info.value.operation == "remove"
        assert c.all() == {"a": 1}

    def test_reads_behave_like_base(self) -> None:
        """Read operations are unaffected."""
        from kvcollection import FrozenCollection

        c = FrozenCollection({"a": 1, "b": None})
        assert c.get("a") == 1
        assert c.has("b")
        assert c.get("missing", lambda: "lazy") == "lazy"
        assert c.keys() == ["a", "b"]
        assert c.to_json(0) == '{"a":1,"b":null}'
        assert list(c) == [("a", 1), ("b", None)]

    def test_construction_copies_source(self) -> None:
        """Changing the source mapping does not reach the frozen collection."""
        from kvcollection import FrozenCollection

        source = {"a": 1}
        c = FrozenCollection(source)
        source["b"] = 2
        assert c.all() == {"a": 1}


class TestMutationPolicy:
    """Tests for policy declarations."""

    def test_policies(self) -> None:
        """Each variant declares its policy."""
        from kvcollection import (
            Collection,
            FrozenCollection,
            ImmutableCollection,
            MutationPolicy,
        )

        assert Collection.policy is MutationPolicy.MUTABLE
        assert ImmutableCollection.policy is MutationPolicy.COPY_ON_WRITE
        assert FrozenCollection.policy is MutationPolicy.FROZEN
