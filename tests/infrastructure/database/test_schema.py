"""Tests for the table definitions and their constraints."""

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import delete, insert, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from socialgraph.infrastructure.database.engine import init_database
from socialgraph.infrastructure.database.schema import friendships, hobbies, user_hobbies, users


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine]:
    eng = init_database(tmp_path / "graph.db")
    try:
        yield eng
    finally:
        eng.dispose()


def _add_user(engine: Engine, user_id: str, name: str, age: int = 30) -> None:
    with engine.begin() as conn:
        conn.execute(
            insert(users).values(id=user_id, name=name, age=age, created_at="2026-01-01")
        )


class TestUsersTable:
    def test_name_unique(self, engine: Engine) -> None:
        _add_user(engine, "u1", "alice")
        with pytest.raises(IntegrityError, match="UNIQUE"):
            _add_user(engine, "u2", "alice")

    @pytest.mark.parametrize("age", [0, 150])
    def test_age_check(self, engine: Engine, age: int) -> None:
        with pytest.raises(IntegrityError, match="CHECK"):
            _add_user(engine, "u1", "alice", age=age)


class TestFriendshipsTable:
    def test_canonical_orientation_enforced(self, engine: Engine) -> None:
        _add_user(engine, "a", "alice")
        _add_user(engine, "b", "bobby")
        with pytest.raises(IntegrityError, match="CHECK"), engine.begin() as conn:
            conn.execute(
                insert(friendships).values(id="f1", user_lo="b", user_hi="a", created_at="t")
            )

    def test_pair_unique(self, engine: Engine) -> None:
        _add_user(engine, "a", "alice")
        _add_user(engine, "b", "bobby")
        row = {"user_lo": "a", "user_hi": "b", "created_at": "t"}
        with engine.begin() as conn:
            conn.execute(insert(friendships).values(id="f1", **row))
        with pytest.raises(IntegrityError, match="UNIQUE"), engine.begin() as conn:
            conn.execute(insert(friendships).values(id="f2", **row))

    def test_endpoint_must_exist(self, engine: Engine) -> None:
        _add_user(engine, "a", "alice")
        with pytest.raises(IntegrityError, match="FOREIGN KEY"), engine.begin() as conn:
            conn.execute(
                insert(friendships).values(id="f1", user_lo="a", user_hi="zz", created_at="t")
            )

    def test_user_with_edge_cannot_be_deleted(self, engine: Engine) -> None:
        _add_user(engine, "a", "alice")
        _add_user(engine, "b", "bobby")
        with engine.begin() as conn:
            conn.execute(
                insert(friendships).values(id="f1", user_lo="a", user_hi="b", created_at="t")
            )
        with pytest.raises(IntegrityError, match="FOREIGN KEY"), engine.begin() as conn:
            conn.execute(delete(users).where(users.c.id == "a"))


class TestUserHobbiesTable:
    def test_cascades_on_user_delete(self, engine: Engine) -> None:
        _add_user(engine, "a", "alice")
        with engine.begin() as conn:
            conn.execute(insert(hobbies).values(id="h1", name="chess"))
            conn.execute(insert(user_hobbies).values(user_id="a", hobby_id="h1"))
            conn.execute(delete(users).where(users.c.id == "a"))
        with engine.connect() as conn:
            assert conn.execute(select(user_hobbies)).all() == []
            assert len(conn.execute(select(hobbies)).all()) == 1


class TestIndexes:
    def test_friendship_endpoint_indexes(self, engine: Engine) -> None:
        names = {ix["name"] for ix in inspect(engine).get_indexes("friendships")}
        assert {"ix_friendships_lo", "ix_friendships_hi"} <= names

    def test_hobby_lookup_index(self, engine: Engine) -> None:
        names = {ix["name"] for ix in inspect(engine).get_indexes("user_hobbies")}
        assert "ix_user_hobbies_hobby" in names
