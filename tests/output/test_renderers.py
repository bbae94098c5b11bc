"""Tests for the op-specific Rich renderers."""

from __future__ import annotations

from typing import Any

from socialgraph.output.renderers import render_quiet, render_result
from socialgraph.services.result import ServiceError, ServiceResult


def _user(uid: str = "u1", **overrides: Any) -> dict[str, Any]:
    view = {
        "id": uid,
        "name": "alice",
        "age": 30,
        "created_at": "2026-01-01T00:00:00+00:00",
        "friends": ["u2"],
        "hobbies": ["chess", "golf"],
        "popularity_score": 1.5,
    }
    view.update(overrides)
    return view


class TestUserRenderers:
    def test_get_user_panel(self) -> None:
        output = render_result(ServiceResult(ok=True, op="get_user", data=_user()))
        assert "OK" in output
        assert "alice" in output
        assert "popularity_score: 1.50" in output
        assert "hobbies: chess, golf" in output
        assert "created_at" not in output

    def test_verbose_shows_created_at(self) -> None:
        output = render_result(ServiceResult(ok=True, op="get_user", data=_user()), verbose=True)
        assert "created_at: 2026-01-01" in output

    def test_update_shows_fields_changed(self) -> None:
        data = {**_user(), "fields_changed": ["age", "name"]}
        output = render_result(ServiceResult(ok=True, op="update_user", data=data))
        assert "fields_changed: age, name" in output

    def test_no_friends_dash(self) -> None:
        data = _user(friends=[], hobbies=[], popularity_score=0.0)
        output = render_result(ServiceResult(ok=True, op="create_user", data=data))
        assert "friends: -" in output
        assert "popularity_score: 0.00" in output

    def test_list_users_table(self) -> None:
        items = [_user("u1"), _user("u2", name="bobby", friends=[], popularity_score=0.0)]
        result = ServiceResult(ok=True, op="list_users", data={"count": 2, "items": items})
        output = render_result(result)
        assert "alice" in output
        assert "bobby" in output
        assert "2 users" in output


class TestMutationRenderer:
    def test_link(self) -> None:
        data = {"id": "f1", "user_lo": "a", "user_hi": "b", "created_at": "t"}
        output = render_result(ServiceResult(ok=True, op="link", data=data))
        assert output.splitlines()[0].startswith("OK")
        assert "user_lo: a" in output
        assert "user_hi: b" in output

    def test_fields_separated_by_one_space(self) -> None:
        data = {"id": "f1", "user_lo": "a", "user_hi": "b"}
        lines = render_result(ServiceResult(ok=True, op="unlink", data=data)).splitlines()
        assert lines[0] == "OK  unlink"
        assert "  id: f1" in lines
        assert "  user_lo: a" in lines

    def test_attach_shows_user_summary(self) -> None:
        data = {
            "user_id": "u1",
            "hobby_id": "h1",
            "hobby": "chess",
            "created_hobby": True,
            "attached": True,
            "user": _user(),
        }
        output = render_result(ServiceResult(ok=True, op="attach_hobby", data=data))
        assert "hobby: chess" in output
        assert "attached: True" in output
        assert "hobbies: chess, golf" in output

    def test_delete(self) -> None:
        data = {"id": "u1", "name": "alice", "removed_hobby_links": 2}
        output = render_result(ServiceResult(ok=True, op="delete_user", data=data))
        assert "removed_hobby_links: 2" in output


class TestHobbyAndGraphRenderers:
    def test_hobby_list(self) -> None:
        items = [{"id": "h1", "name": "chess", "user_count": 3}]
        result = ServiceResult(ok=True, op="list_hobbies", data={"count": 1, "items": items})
        output = render_result(result)
        assert "chess" in output
        assert "1 hobbies" in output
        assert "h1" not in output
        assert "h1" in render_result(result, verbose=True)

    def test_graph_view(self) -> None:
        nodes = [
            {"id": "a", "name": "alice", "age": 30, "popularity_score": 1.0, "hobbies": []},
            {"id": "b", "name": "bobby", "age": 31, "popularity_score": 1.0, "hobbies": []},
        ]
        edges = [{"id": "f1", "source": "a", "target": "b"}]
        result = ServiceResult(ok=True, op="graph_view", data={"nodes": nodes, "edges": edges})
        output = render_result(result)
        assert "Friendships" in output
        assert "2 users, 1 friendships" in output

    def test_empty_graph(self) -> None:
        result = ServiceResult(ok=True, op="graph_view", data={"nodes": [], "edges": []})
        output = render_result(result)
        assert "Friendships" not in output
        assert "0 users, 0 friendships" in output


class TestErrorAndFallback:
    def test_error_line(self) -> None:
        result = ServiceResult(
            ok=False,
            op="link",
            error=ServiceError(code="SELF_LINK", message="Cannot link", detail={"id": "a"}),
        )
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "[SELF_LINK]" in output
        assert "Cannot link" in output
        assert "detail" not in output
        assert "id: a" in render_result(result, verbose=True)

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="db_status", data={"current": None, "head": "001"})
        output = render_result(result)
        assert "current: None" in output
        assert "head: 001" in output

    def test_verbose_telemetry_tree(self) -> None:
        meta = {"telemetry": {"name": "UserService.get", "duration_ms": 1.25, "children": []}}
        result = ServiceResult(ok=True, op="db_status", data={}, meta=meta)
        output = render_result(result, verbose=True)
        assert "UserService.get" in output
        assert "1.25ms" in output


class TestRenderQuiet:
    def test_graph_nodes(self) -> None:
        result = ServiceResult(ok=True, op="graph_view", data={"nodes": [{"id": "a"}], "edges": []})
        assert render_quiet(result) == "a"
