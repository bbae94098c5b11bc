"""Tests for id generation and canonical pair ordering."""

import uuid

from socialgraph.domain.ids import canonical_pair, new_id


class TestNewId:
    def test_is_uuid4_text(self) -> None:
        value = new_id()
        assert str(uuid.UUID(value)) == value
        assert uuid.UUID(value).version == 4

    def test_unique(self) -> None:
        assert len({new_id() for _ in range(200)}) == 200


class TestCanonicalPair:
    def test_orders_smaller_first(self) -> None:
        assert canonical_pair("b", "a") == ("a", "b")
        assert canonical_pair("a", "b") == ("a", "b")

    def test_symmetric(self) -> None:
        a, b = new_id(), new_id()
        assert canonical_pair(a, b) == canonical_pair(b, a)

    def test_plain_string_comparison(self) -> None:
        # Uppercase sorts before lowercase in code-point order
        assert canonical_pair("a", "B") == ("B", "a")

    def test_equal_ids(self) -> None:
        assert canonical_pair("x", "x") == ("x", "x")
