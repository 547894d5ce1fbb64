"""Test session handling."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from trek.utils.auth import create_access_token, decode_access_token


def test_access_token_round_trip() -> None:
    token = create_access_token({"sub": "42"})
    assert decode_access_token(token) == 42


def test_expired_access_token_is_rejected() -> None:
    token = create_access_token({"sub": "42"}, expires_delta=timedelta(seconds=-1))
    assert decode_access_token(token) is None


def test_garbage_token_is_rejected() -> None:
    assert decode_access_token("not-a-jwt") is None
    assert decode_access_token(create_access_token({"sub": "abc"})) is None


@pytest.mark.asyncio
async def test_sign_in_sets_session_cookie(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.post(
        "/auth/sign-in", json={"username": "tester"}
    )

    assert response.status_code == 200
    assert response.json()["email"] == "tester@example.com"
    assert "session_token" in response.cookies

    me = await anonymous_client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["name"] == "tester"


@pytest.mark.asyncio
async def test_sign_in_with_form(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.post(
        "/auth/sign-in", data={"username": "  tester  "}
    )
    assert response.status_code == 200
    assert response.json()["name"] == "tester"


@pytest.mark.asyncio
async def test_sign_in_unknown_user(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.post(
        "/auth/sign-in", json={"username": "nobody"}
    )
    assert response.status_code == 401
    assert "session_token" not in response.cookies


@pytest.mark.asyncio
async def test_sign_in_requires_username(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.post("/auth/sign-in", json={"username": " "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_me_requires_session(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.get("/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sign_out_clears_session(anonymous_client: AsyncClient) -> None:
    await anonymous_client.post("/auth/sign-in", json={"username": "tester"})

    response = await anonymous_client.post("/auth/sign-out")
    assert response.status_code == 200

    me = await anonymous_client.get("/auth/me")
    assert me.status_code == 401
