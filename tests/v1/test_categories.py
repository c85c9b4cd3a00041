# tests/v1/test_categories.py
"""Tests for category endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from phayao_hub.models import Category


def test_list_categories_by_type(client: TestClient, db_session: Session):
    db_session.add_all(
        [
            Category(name="Vehicles", slug="vehicles", type="market"),
            Category(name="Clothing", slug="clothing", type="market"),
            Category(name="Hospitality", slug="hospitality", type="job"),
        ]
    )
    db_session.flush()

    everything = client.get("/api/categories/").json()
    assert len(everything) == 3

    market = client.get("/api/categories/", params={"type": "market"}).json()
    assert [row["name"] for row in market] == ["Clothing", "Vehicles"]


def test_admin_creates_category(client: TestClient, admin_auth_token, auth_token):
    payload = {"name": "Farming", "slug": "farming", "type": "job"}

    assert client.post("/api/categories/", json=payload, headers=auth_token).status_code == 403
    assert client.post("/api/categories/", json=payload, headers=admin_auth_token).status_code == 201
    duplicate = client.post("/api/categories/", json=payload, headers=admin_auth_token)
    assert duplicate.status_code == 400
