# tests/v1/test_market.py
"""Tests for marketplace endpoints and view deduplication."""

from __future__ import annotations

import time
from http.cookiejar import CookieJar

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from phayao_hub.models import MarketImage, MarketItem


def _views(db: Session, item_id: int) -> int:
    return db.execute(select(MarketItem.view_count).where(MarketItem.id == item_id)).scalar_one()


def _age_out(jar: CookieJar, name: str) -> None:
    """Move a stored cookie past its expiry, as if its lifetime had elapsed."""
    for cookie in jar:
        if cookie.name == name:
            cookie.expires = int(time.time()) - 1


class TestMarketList:
    def test_lists_available_items_only(
        self, client: TestClient, db_session: Session, market_item: MarketItem, test_user
    ):
        db_session.add(MarketItem(user_id=test_user.id, title="Sold phone", price=10, status="sold"))
        db_session.flush()

        body = client.get("/api/market-items/").json()

        assert body["total"] == 1
        assert [item["title"] for item in body["data"]] == ["Used bicycle"]
        assert body["data"][0]["category_slug"] == "electronics"
        assert body["data"][0]["seller_full_name"] == "Somchai"

    def test_status_and_search_filters(
        self, client: TestClient, db_session: Session, market_item: MarketItem, test_user
    ):
        db_session.add(MarketItem(user_id=test_user.id, title="Sold phone", price=10, status="sold"))
        db_session.flush()

        sold = client.get("/api/market-items/", params={"status": "sold"}).json()
        assert [item["title"] for item in sold["data"]] == ["Sold phone"]

        found = client.get("/api/market-items/", params={"search": "bike"}).json()
        assert found["total"] == 1
        missing = client.get("/api/market-items/", params={"search": "tractor"}).json()
        assert missing["total"] == 0

    def test_pagination_is_clamped(self, client: TestClient, market_item: MarketItem):
        body = client.get("/api/market-items/", params={"limit": 1000, "offset": -5}).json()
        assert body["total"] == 1
        assert len(body["data"]) == 1


class TestMarketDetail:
    def test_detail_counts_one_view_per_client(
        self, client: TestClient, db_session: Session, market_item: MarketItem
    ):
        url = f"/api/market-items/{market_item.id}"

        first = client.get(url)
        assert first.status_code == 200
        set_cookie = first.headers["set-cookie"]
        assert set_cookie.startswith(f"viewed_market_{market_item.id}=true")
        assert "Max-Age=1800" in set_cookie
        assert "HttpOnly" in set_cookie
        assert _views(db_session, market_item.id) == 1

        second = client.get(url)
        assert second.status_code == 200
        assert "set-cookie" not in second.headers
        assert _views(db_session, market_item.id) == 1

    def test_expired_marker_counts_again(
        self, client: TestClient, db_session: Session, market_item: MarketItem
    ):
        url = f"/api/market-items/{market_item.id}"
        client.get(url)
        client.get(url)
        assert _views(db_session, market_item.id) == 1

        _age_out(client.cookies.jar, f"viewed_market_{market_item.id}")
        third = client.get(url)

        assert third.headers["set-cookie"].startswith(f"viewed_market_{market_item.id}=true")
        assert _views(db_session, market_item.id) == 2

    def test_markers_do_not_leak_between_items(
        self, client: TestClient, db_session: Session, market_item: MarketItem, test_user
    ):
        other = MarketItem(user_id=test_user.id, title="Rice cooker", price=300)
        db_session.add(other)
        db_session.flush()

        client.get(f"/api/market-items/{market_item.id}")
        client.get(f"/api/market-items/{other.id}")

        assert _views(db_session, market_item.id) == 1
        assert _views(db_session, other.id) == 1

    def test_missing_item_is_404_without_marker(self, client: TestClient):
        response = client.get("/api/market-items/999")
        assert response.status_code == 404
        assert "set-cookie" not in response.headers

    def test_failed_increment_is_retried_next_request(
        self, app: FastAPI, db_session: Session, market_item: MarketItem, mocker
    ):
        def failing_incrementer(*args, **kwargs):
            def _boom() -> None:
                raise RuntimeError("counter unavailable")

            return _boom

        patched = mocker.patch(
            "phayao_hub.api.v1.dependencies.view_incrementer",
            side_effect=failing_incrementer,
        )
        url = f"/api/market-items/{market_item.id}"
        with TestClient(app, base_url="http://test", raise_server_exceptions=False) as client:
            failed = client.get(url)
            assert failed.status_code == 500
            assert "set-cookie" not in failed.headers
            assert _views(db_session, market_item.id) == 0

            mocker.stop(patched)
            retried = client.get(url)
            assert retried.status_code == 200
            assert "set-cookie" in retried.headers

        assert _views(db_session, market_item.id) == 1

    def test_images_primary_first(
        self, client: TestClient, db_session: Session, market_item: MarketItem
    ):
        db_session.add_all(
            [
                MarketImage(item_id=market_item.id, image_url="/b.jpg", display_order=0),
                MarketImage(
                    item_id=market_item.id, image_url="/a.jpg", is_primary=True, display_order=1
                ),
            ]
        )
        db_session.flush()

        images = client.get(f"/api/market-items/{market_item.id}/images").json()
        assert [image["image_url"] for image in images] == ["/a.jpg", "/b.jpg"]


class TestMarketCreate:
    def test_create_requires_auth(self, client: TestClient):
        response = client.post("/api/market-items/", json={"title": "Fan", "price": 200})
        assert response.status_code == 401

    def test_create_item(self, client: TestClient, db_session: Session, test_user, auth_token):
        response = client.post(
            "/api/market-items/",
            json={"title": "Fan", "price": 200, "location": "Chiang Kham"},
            headers=auth_token,
        )
        assert response.status_code == 201
        item = db_session.get(MarketItem, response.json()["id"])
        assert item is not None
        assert item.user_id == test_user.id
        assert item.status == "available"
        assert item.view_count == 0

    def test_negative_price_rejected(self, client: TestClient, auth_token):
        response = client.post(
            "/api/market-items/", json={"title": "Fan", "price": -1}, headers=auth_token
        )
        assert response.status_code == 422
