"""Tests for HobbyService: attach, detach, list, and the popularity score."""

from __future__ import annotations

from socialgraph.services.facade import SocialGraph
from tests.conftest import make_user


class TestAttachHobby:
    def test_attach_creates_hobby(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        result = graph.attach_hobby(a, "chess")
        assert result.ok
        assert result.op == "attach_hobby"
        assert result.data["created_hobby"] is True
        assert result.data["attached"] is True
        assert result.data["user"]["hobbies"] == ["chess"]

    def test_attach_twice_is_idempotent(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        graph.attach_hobby(a, "chess")
        result = graph.attach_hobby(a, "chess")
        assert result.ok
        assert result.data["attached"] is False
        assert result.data["created_hobby"] is False
        assert graph.get_user(a).data["hobbies"] == ["chess"]

    def test_one_hobby_record_across_users(self, graph: SocialGraph) -> None:
        ids = [make_user(graph, f"user_{i}") for i in range(4)]
        hobby_ids = {graph.attach_hobby(uid, "chess").data["hobby_id"] for uid in ids}
        assert len(hobby_ids) == 1
        items = graph.list_hobbies().data["items"]
        assert [(h["name"], h["user_count"]) for h in items] == [("chess", 4)]

    def test_name_is_stripped(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        b = make_user(graph, "bobby")
        first = graph.attach_hobby(a, "  chess ")
        second = graph.attach_hobby(b, "chess")
        assert first.data["hobby"] == "chess"
        assert second.data["created_hobby"] is False

    def test_invalid_name(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        result = graph.attach_hobby(a, " x ")
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"

    def test_unknown_user_reported_before_invalid_name(self, graph: SocialGraph) -> None:
        result = graph.attach_hobby("missing", "x")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["field"] == "hobby_name"

    def test_missing_user(self, graph: SocialGraph) -> None:
        result = graph.attach_hobby("ghost", "chess")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert graph.list_hobbies().data["count"] == 0


class TestDetachHobby:
    def test_detach(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        graph.attach_hobby(a, "chess")
        result = graph.detach_hobby(a, "chess")
        assert result.ok
        assert result.data["user"]["hobbies"] == []
        # the hobby itself survives
        assert graph.list_hobbies().data["items"][0]["user_count"] == 0

    def test_unknown_hobby(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        result = graph.detach_hobby(a, "chess")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_hobby_not_attached(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        b = make_user(graph, "bobby")
        graph.attach_hobby(b, "chess")
        result = graph.detach_hobby(a, "chess")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestListHobbies:
    def test_sorted_by_name(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        for name in ("golf", "archery", "chess"):
            graph.attach_hobby(a, name)
        names = [h["name"] for h in graph.list_hobbies().data["items"]]
        assert names == ["archery", "chess", "golf"]


class TestPopularityScore:
    def test_score_sequence(self, graph: SocialGraph) -> None:
        """1.0 with one friend, +0.5 for each distinct shared hobby."""
        a = make_user(graph, "alice")
        b = make_user(graph, "bobby")
        graph.link(a, b)
        assert graph.get_user(a).data["popularity_score"] == 1.0

        graph.attach_hobby(a, "chess")
        graph.attach_hobby(b, "chess")
        assert graph.get_user(a).data["popularity_score"] == 1.5

        graph.attach_hobby(a, "golf")
        graph.attach_hobby(b, "golf")
        assert graph.get_user(a).data["popularity_score"] == 2.0
        assert graph.get_user(b).data["popularity_score"] == 2.0

    def test_hobby_shared_with_two_friends_counts_once(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        b = make_user(graph, "bobby")
        c = make_user(graph, "carol")
        graph.link(a, b)
        graph.link(a, c)
        for uid in (a, b, c):
            graph.attach_hobby(uid, "chess")
        assert graph.get_user(a).data["popularity_score"] == 2.5

    def test_unshared_hobbies_do_not_count(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        b = make_user(graph, "bobby")
        graph.link(a, b)
        graph.attach_hobby(a, "chess")
        graph.attach_hobby(b, "golf")
        assert graph.get_user(a).data["popularity_score"] == 1.0

    def test_hobbies_without_friends_score_zero(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        graph.attach_hobby(a, "chess")
        assert graph.get_user(a).data["popularity_score"] == 0.0

    def test_attach_result_carries_fresh_score(self, graph: SocialGraph) -> None:
        a = make_user(graph, "alice")
        b = make_user(graph, "bobby")
        graph.link(a, b)
        graph.attach_hobby(b, "chess")
        result = graph.attach_hobby(a, "chess")
        assert result.data["user"]["popularity_score"] == 1.5
