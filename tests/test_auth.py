"""Bearer token checks on protected routes."""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from shop_service.auth_utils import create_access_token, verify_token
from shop_service.db.functions import create_user, get_user_by_email
from shop_service.db.models import RoleEnum


def test_token_roundtrip():
    assert verify_token(create_access_token({"id": 7})) == 7


def test_missing_token(client, seed):
    response = client.get("/api/v1/payments")
    assert response.status_code == 401


def test_expired_token(client, seed):
    token = create_access_token({"id": seed["user"].id}, expires_delta=timedelta(minutes=-1))

    response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Token has expired"}


def test_token_without_user_id(client, seed):
    token = create_access_token({"sub": "buyer@example.com"})

    response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_unknown_user(client, seed):
    token = create_access_token({"id": 9999})

    response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_seeded_user_is_found_by_email(db_call, seed):
    user = db_call(get_user_by_email, "admin@example.com")

    assert user.id == seed["admin"].id
    assert user.role == RoleEnum.admin
    assert db_call(get_user_by_email, "nobody@example.com") is None


def test_create_user_rejects_duplicate_email(db_call, seed):
    with pytest.raises(HTTPException) as excinfo:
        db_call(create_user, "buyer@example.com", "Someone else")

    assert excinfo.value.status_code == 409
