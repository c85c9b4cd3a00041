# tests/v1/test_community.py
"""Tests for community board endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from phayao_hub.models import CommunityPost, Favorite


def _post_counts(db: Session, post_id: int) -> tuple[int, int]:
    row = db.execute(
        select(CommunityPost.view_count, CommunityPost.comment_count).where(
            CommunityPost.id == post_id
        )
    ).one()
    return row.view_count, row.comment_count


class TestPosts:
    def test_list_marks_favorites_for_signed_in_user(
        self,
        client: TestClient,
        db_session: Session,
        community_post: CommunityPost,
        other_user,
        other_auth_token,
    ):
        db_session.add(Favorite(user_id=other_user.id, item_type="post", item_id=community_post.id))
        db_session.flush()

        anonymous = client.get("/api/community-posts/").json()
        assert anonymous["data"][0]["is_favorited"] is False

        signed_in = client.get("/api/community-posts/", headers=other_auth_token).json()
        assert signed_in["data"][0]["is_favorited"] is True
        assert signed_in["data"][0]["full_name"] == "Somchai"

    def test_invalid_token_is_treated_as_anonymous(
        self, client: TestClient, community_post: CommunityPost
    ):
        response = client.get(
            "/api/community-posts/", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_hidden_posts_are_not_listed(
        self, client: TestClient, db_session: Session, community_post: CommunityPost
    ):
        community_post.status = "hidden"
        db_session.flush()
        assert client.get("/api/community-posts/").json()["total"] == 0

    def test_create_post(self, client: TestClient, db_session: Session, auth_token):
        response = client.post(
            "/api/community-posts/",
            json={"title": "Lost cat", "content": "Orange tabby near the market"},
            headers=auth_token,
        )
        assert response.status_code == 201
        assert db_session.get(CommunityPost, response.json()["id"]).status == "active"

    def test_detail_counts_view_once(
        self, client: TestClient, db_session: Session, community_post: CommunityPost
    ):
        client.get(f"/api/community-posts/{community_post.id}")
        response = client.get(f"/api/community-posts/{community_post.id}")
        assert response.status_code == 200
        assert _post_counts(db_session, community_post.id)[0] == 1

    def test_detail_404(self, client: TestClient):
        assert client.get("/api/community-posts/777").status_code == 404


class TestComments:
    def test_comment_bumps_counter(
        self, client: TestClient, db_session: Session, community_post: CommunityPost, auth_token
    ):
        for text in ("First!", "Try the place by the lake"):
            response = client.post(
                f"/api/community-posts/{community_post.id}/comments",
                json={"content": text},
                headers=auth_token,
            )
            assert response.status_code == 201

        assert _post_counts(db_session, community_post.id)[1] == 2
        comments = client.get(f"/api/community-posts/{community_post.id}/comments").json()
        assert [comment["content"] for comment in comments] == [
            "First!",
            "Try the place by the lake",
        ]
        assert comments[0]["full_name"] == "Somchai"

    def test_comment_on_missing_post(self, client: TestClient, auth_token):
        response = client.post(
            "/api/community-posts/404/comments", json={"content": "hello"}, headers=auth_token
        )
        assert response.status_code == 404

    def test_comment_requires_auth(self, client: TestClient, community_post: CommunityPost):
        response = client.post(
            f"/api/community-posts/{community_post.id}/comments", json={"content": "hi"}
        )
        assert response.status_code == 401
